from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

ZERO_TIME = datetime.min


class Severity(IntEnum):
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


@dataclass(slots=True)
class JobRecord:
    name: str = ""
    job_type: str = ""
    task_type: str = ""
    task_name: str = ""
    is_active: bool = False
    status: str = ""
    sub_status: str = ""
    selection_summary: str = ""
    storage: str = ""
    schedule: str = ""
    is_backup_definition_job: bool = False
    job_status: str = ""
    start_time: datetime = ZERO_TIME
    end_time: datetime = ZERO_TIME
    percent_complete: int = 0
    total_data_size_bytes: int = 0
    job_rate_mb_per_minute: float = 0.0
    error_category: int = 0
    error_code: int = 0
    error_message: str = ""

    @property
    def has_run(self) -> bool:
        return self.job_status != ""


@dataclass(frozen=True, slots=True)
class Verdict:
    code: Severity = Severity.UNKNOWN
    message: str = ""
    newest_timestamp: datetime = ZERO_TIME
    perfdata: str = ""

    @property
    def label(self) -> str:
        return self.code.name

    @property
    def exit_code(self) -> int:
        return int(self.code)
