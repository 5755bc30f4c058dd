from __future__ import annotations

from typing import Iterable

from .models import JobRecord, Verdict
from .utils import format_last_run


def format_verdict(verdict: Verdict) -> str:
    line = f"{verdict.label}: Last Run '{format_last_run(verdict.newest_timestamp)}' {verdict.message}"
    if verdict.perfdata:
        line = f"{line} | {verdict.perfdata}"
    return line + "\n"


def format_summary(verdict: Verdict) -> str:
    """Render a verdict built outside the aggregator, such as a lost connection."""
    return f"{verdict.label}: {verdict.message}\n"


def _size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} B"
    value = num_bytes / 1024
    for unit in ["KB", "MB", "GB"]:
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"


def format_job_details(records: Iterable[JobRecord]) -> str:
    lines: list[str] = []
    for record in records:
        if not record.has_run:
            lines.append(f"{record.name}: never run ({record.status}-{record.sub_status})")
            continue
        detail = (
            f"{record.name}: {record.job_status} "
            f"start={format_last_run(record.start_time)} "
            f"end={format_last_run(record.end_time)} "
            f"complete={record.percent_complete}% "
            f"size={_size(record.total_data_size_bytes)} "
            f"rate={record.job_rate_mb_per_minute:g} MB/min"
        )
        if record.error_code or record.error_message:
            detail += f" error={record.error_category}/{record.error_code} {record.error_message}".rstrip()
        lines.append(detail)
    return "".join(line + "\n" for line in lines)
