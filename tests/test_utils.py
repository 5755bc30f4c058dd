from datetime import datetime
import unittest

from check_backupexec.models import ZERO_TIME
from check_backupexec.utils import collapse_whitespace, format_last_run, parse_report_time, ps_quote


class UtilsTest(unittest.TestCase):
    def test_parse_report_time(self) -> None:
        self.assertEqual(parse_report_time("11/30/2019 11:00:02 PM"), datetime(2019, 11, 30, 23, 0, 2))
        self.assertEqual(parse_report_time("12/1/2019 7:32:37 AM"), datetime(2019, 12, 1, 7, 32, 37))
        self.assertEqual(parse_report_time("11/2/2019 12:21:12 AM"), datetime(2019, 11, 2, 0, 21, 12))
        self.assertEqual(parse_report_time("12/1/2019\n 7:32:37 PM"), datetime(2019, 12, 1, 19, 32, 37))

    def test_unparseable_time_is_zero(self) -> None:
        for value in ["", "2019-11-30T23:00:02", "11/30/2019 23:00:02", "never"]:
            self.assertEqual(parse_report_time(value), ZERO_TIME)

    def test_format_last_run(self) -> None:
        self.assertEqual(format_last_run(datetime(2019, 12, 2, 4, 18, 45)), "02/12/2019 04:18:45")
        self.assertEqual(format_last_run(ZERO_TIME), "01/01/0001 00:00:00")

    def test_ps_quote(self) -> None:
        self.assertEqual(ps_quote("Full Weekend"), "'Full Weekend'")
        self.assertEqual(ps_quote("it's $env:X"), "'it''s $env:X'")

    def test_collapse_whitespace(self) -> None:
        self.assertEqual(collapse_whitespace("  a \r\n   b\tc "), "a b c")


if __name__ == "__main__":
    unittest.main()
