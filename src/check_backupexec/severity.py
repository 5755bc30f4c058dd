from __future__ import annotations

from .models import Severity

OK_STATUSES = frozenset(
    {
        "Completed",
        "Succeeded",
        "SucceededWithExceptions",
        "Active",
        "Ready",
        "Scheduled",
        "Linked",
    }
)

WARNING_STATUSES = frozenset(
    {
        "OnHold",
        "Recovered",
        "Resumed",
        "Disabled",
        "Superseded",
        "RuleBlocked",
        "Unknown",
        "Dispatched",
        "Queued",
        "ToBeScheduled",
    }
)

CRITICAL_STATUSES = frozenset(
    {
        "Canceled",
        "Error",
        "Missed",
        "ThresholdAbort",
        "DispatchFailed",
        "InvalidSchedule",
        "InvalidTimeWindow",
        "NotInTimeWindow",
    }
)


def classify(job_status: str) -> Severity:
    """Map a BEMCLI job status token to a severity; unlisted tokens are UNKNOWN."""
    token = job_status.strip()
    if token in OK_STATUSES:
        return Severity.OK
    if token in WARNING_STATUSES:
        return Severity.WARNING
    if token in CRITICAL_STATUSES:
        return Severity.CRITICAL
    return Severity.UNKNOWN
