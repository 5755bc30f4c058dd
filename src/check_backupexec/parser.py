"""Extract job records from the text printed by ``Get-BEJob | Select-Object``.

Two shapes of the same report are accepted: the line-anchored
``Format-List`` output (``Label : value`` one per line, long values wrapped)
and a flattened variant where every line break has been collapsed into a
single space. Both are handled by locating the known labels in their fixed
order rather than by relying on line breaks.
"""

from __future__ import annotations

from datetime import datetime
import logging
import math
import re
from typing import Callable

from .models import ZERO_TIME, JobRecord
from .utils import collapse_whitespace, parse_report_time

logger = logging.getLogger("check_backupexec")

FIELD_LABELS: tuple[tuple[str, str], ...] = (
    ("Name", "name"),
    ("JobType", "job_type"),
    ("TaskType", "task_type"),
    ("TaskName", "task_name"),
    ("IsActive", "is_active"),
    ("Status", "status"),
    ("SubStatus", "sub_status"),
    ("SelectionSummary", "selection_summary"),
    ("Storage", "storage"),
    ("Schedule", "schedule"),
    ("IsBackupDefinitionJob", "is_backup_definition_job"),
    ("JobHistory", "job_history"),
)

BOOLEAN_FIELDS = {"is_active", "is_backup_definition_job"}


def _label_regex(label: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![\w]){label}[ \t]*:")


LABEL_REGEXES = [(_label_regex(label), attr) for label, attr in FIELD_LABELS]
NAME_LABEL_REGEX = LABEL_REGEXES[0][0]

# `;` only separates pairs when a new `key=` follows, so free text keeps its semicolons.
HISTORY_PAIR_SEPARATOR = re.compile(r";\s*(?=[A-Za-z_]\w*\s*=)")
ERROR_MESSAGE_KEY = re.compile(r"(?:^|;)\s*ErrorMessage\s*=", re.IGNORECASE)


def parse_bool(value: str) -> bool:
    return value == "True"


def parse_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def parse_float(value: str) -> float | None:
    try:
        output = float(value)
    except ValueError:
        return None
    if not math.isfinite(output):
        return None
    return output


def _percent(value: str) -> int | None:
    output = parse_int(value)
    if output is None or not -1 <= output <= 100:
        return None
    return output


def _non_negative_int(value: str) -> int | None:
    output = parse_int(value)
    if output is None or output < 0:
        return None
    return output


def _non_negative_float(value: str) -> float | None:
    output = parse_float(value)
    if output is None or output < 0:
        return None
    return output


def _timestamp(value: str) -> datetime | None:
    output = parse_report_time(value)
    if output == ZERO_TIME:
        return None
    return output


HISTORY_FIELDS: dict[str, tuple[str, Callable[[str], object]]] = {
    "jobstatus": ("job_status", str),
    "starttime": ("start_time", _timestamp),
    "endtime": ("end_time", _timestamp),
    "percentcomplete": ("percent_complete", _percent),
    "totaldatasizebytes": ("total_data_size_bytes", _non_negative_int),
    "jobratembperminute": ("job_rate_mb_per_minute", _non_negative_float),
    "errorcategory": ("error_category", parse_int),
    "errorcode": ("error_code", parse_int),
    "errormessage": ("error_message", str),
}


def split_records(text: str) -> list[str]:
    starts = [match.start() for match in NAME_LABEL_REGEX.finditer(text)]
    chunks: list[str] = []
    for index, start in enumerate(starts):
        end = starts[index + 1] if index + 1 < len(starts) else len(text)
        chunks.append(text[start:end])
    return chunks


def extract_fields(chunk: str) -> dict[str, str]:
    """Return ``{attr: raw value}`` for every label found, in label order."""
    found: list[tuple[str, int, int]] = []
    position = 0
    for regex, attr in LABEL_REGEXES:
        match = regex.search(chunk, position)
        if match is None:
            continue
        found.append((attr, match.start(), match.end()))
        position = match.end()

    values: dict[str, str] = {}
    for index, (attr, _, value_start) in enumerate(found):
        value_end = found[index + 1][1] if index + 1 < len(found) else len(chunk)
        values[attr] = collapse_whitespace(chunk[value_start:value_end])
    return values


def parse_history(value: str) -> dict[str, object]:
    """Parse ``@{JobStatus=Succeeded; StartTime=...}`` into JobRecord attributes."""
    body = value.strip()
    if body.startswith("@{"):
        body = body[2:]
    if body.endswith("}"):
        body = body[:-1]
    if not body.strip():
        return {}

    output: dict[str, object] = {}
    # ErrorMessage is the last history column and runs to the closing brace
    error_match = ERROR_MESSAGE_KEY.search(body)
    if error_match is not None:
        message = body[error_match.end() :].strip()
        if message:
            output["error_message"] = message
        body = body[: error_match.start()]

    for pair in HISTORY_PAIR_SEPARATOR.split(body):
        key, sep, raw = pair.partition("=")
        if not sep:
            continue
        target = HISTORY_FIELDS.get(key.strip().lower())
        if target is None:
            continue
        attr, convert = target
        raw = raw.strip()
        if raw == "":
            continue
        converted = convert(raw)
        if converted is None:
            logger.debug("ignoring malformed history value %s=%r", attr, raw)
            continue
        output[attr] = converted
    return output


def parse_record(chunk: str) -> JobRecord:
    record = JobRecord()
    for attr, value in extract_fields(chunk).items():
        if attr == "job_history":
            for history_attr, history_value in parse_history(value).items():
                setattr(record, history_attr, history_value)
        elif attr in BOOLEAN_FIELDS:
            if value not in {"True", "False"}:
                logger.debug("non boolean value for %s: %r", attr, value)
            setattr(record, attr, parse_bool(value))
        else:
            setattr(record, attr, value)
    return record


def parse_report(text: str) -> list[JobRecord]:
    """Split a BEMCLI report into job records, in order of appearance.

    Malformed fields fall back to their zero value; a report without any
    ``Name :`` label is an empty list.
    """
    return [parse_record(chunk) for chunk in split_records(text)]
