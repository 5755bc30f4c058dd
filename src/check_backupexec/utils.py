from __future__ import annotations

from datetime import datetime
import re

from .models import ZERO_TIME

REPORT_TIME_FORMAT = "%m/%d/%Y %I:%M:%S %p"
WHITESPACE_REGEX = re.compile(r"\s+")


def collapse_whitespace(value: str) -> str:
    return WHITESPACE_REGEX.sub(" ", value).strip()


def parse_report_time(value: str) -> datetime:
    """Parse a BEMCLI timestamp such as ``11/30/2019 11:00:02 PM``.

    Anything that does not match the format yields ``ZERO_TIME``.
    """
    try:
        return datetime.strptime(collapse_whitespace(value), REPORT_TIME_FORMAT)
    except ValueError:
        return ZERO_TIME


def format_last_run(value: datetime) -> str:
    # strftime does not zero-pad years below 1000 on every platform
    return (
        f"{value.day:02d}/{value.month:02d}/{value.year:04d} "
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )


def ps_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"
