import unittest

from check_backupexec.models import Severity
from check_backupexec.severity import CRITICAL_STATUSES, OK_STATUSES, WARNING_STATUSES, classify


class ClassifyTest(unittest.TestCase):
    def test_membership_sets(self) -> None:
        for token in OK_STATUSES:
            self.assertIs(classify(token), Severity.OK, token)
        for token in WARNING_STATUSES:
            self.assertIs(classify(token), Severity.WARNING, token)
        for token in CRITICAL_STATUSES:
            self.assertIs(classify(token), Severity.CRITICAL, token)

    def test_sets_are_disjoint(self) -> None:
        self.assertFalse(OK_STATUSES & WARNING_STATUSES)
        self.assertFalse(OK_STATUSES & CRITICAL_STATUSES)
        self.assertFalse(WARNING_STATUSES & CRITICAL_STATUSES)

    def test_common_tokens(self) -> None:
        self.assertIs(classify("Succeeded"), Severity.OK)
        self.assertIs(classify("SucceededWithExceptions"), Severity.OK)
        self.assertIs(classify("Queued"), Severity.WARNING)
        self.assertIs(classify("Canceled"), Severity.CRITICAL)
        self.assertIs(classify("Error"), Severity.CRITICAL)

    def test_everything_else_is_unknown(self) -> None:
        for token in ["", "Cancel", "Cancelled", "error", "succeeded", "Running", "  "]:
            self.assertIs(classify(token), Severity.UNKNOWN, repr(token))
            self.assertIs(classify(token), classify(token))

    def test_surrounding_whitespace(self) -> None:
        self.assertIs(classify(" Error "), Severity.CRITICAL)


if __name__ == "__main__":
    unittest.main()
