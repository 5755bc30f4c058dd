from __future__ import annotations

from datetime import datetime
from typing import Iterable

from .models import ZERO_TIME, JobRecord, Severity, Verdict
from .severity import classify


def fold_order(record: JobRecord) -> tuple[datetime, str, str, str, str, bool, str]:
    return (
        record.end_time,
        record.name,
        record.job_status,
        record.status,
        record.sub_status,
        record.is_active,
        record.error_message,
    )


def aggregate(records: Iterable[JobRecord]) -> Verdict:
    """Fold job records into a single verdict.

    Records are folded oldest ``end_time`` first, so the result does not
    depend on the order the report listed them in. The most recent
    finished job decides the code, except that a CRITICAL leader is only
    replaced by a newer CRITICAL job. Critical fragments are placed at the
    front of the message, everything else at the back.
    """
    code = Severity.UNKNOWN
    newest = ZERO_TIME
    head: list[str] = []
    tail: list[str] = []

    for record in sorted(records, key=fold_order):
        severity = classify(record.job_status)
        recent = record.end_time >= newest

        if severity is Severity.CRITICAL:
            if recent:
                code = Severity.CRITICAL
                newest = record.end_time
            head.insert(0, f"{record.name} {record.job_status} [{record.error_message}]")
        elif severity in (Severity.OK, Severity.WARNING):
            if recent and code is not Severity.CRITICAL:
                code = severity
                newest = record.end_time
            tail.append(f"{record.name} {record.job_status}")
        else:
            if record.is_active:
                if code is Severity.UNKNOWN:
                    code = Severity.OK
            elif code is not Severity.CRITICAL:
                code = Severity.WARNING
            tail.append(f"{record.name} {record.status}-{record.sub_status}")

    return Verdict(code=code, message="/".join(head + tail), newest_timestamp=newest)
