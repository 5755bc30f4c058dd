from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path

from .app_logging import log_with_fields
from .config import SshConfig
from .utils import ps_quote

JOB_FIELDS = (
    "Name, JobType, TaskType, TaskName, IsActive, Status, SubStatus, "
    "SelectionSummary, Storage, Schedule, IsBackupDefinitionJob"
)
HISTORY_FIELDS = (
    "JobStatus, StartTime, EndTime, PercentComplete, TotalDataSizeBytes, "
    "JobRateMBPerMinute, ErrorCategory, ErrorCode, ErrorMessage"
)
JOB_HISTORY_COLUMN = (
    '@{name="JobHistory"; expression={Get-BEJobHistory -FromLastJobRun -Job $_.Name | '
    f"Select-Object {HISTORY_FIELDS}}}}}"
)


class RemoteError(RuntimeError):
    pass


def _select_jobs(selector: str) -> str:
    return (
        f"Import-Module BEMCLI; Get-BEJob {selector} | "
        f"Select-Object {JOB_FIELDS}, {JOB_HISTORY_COLUMN} | Format-List"
    )


def job_query(job_name: str) -> str:
    return _select_jobs(f"-Name {ps_quote(job_name)}")


def backup_definition_query(backup_definition: str) -> str:
    return _select_jobs(f"-BackupDefinition {ps_quote(backup_definition)}")


def settings_query() -> str:
    return "Import-Module BEMCLI; Get-BEBackupExecSetting"


class BackupExecSession:
    """Runs BEMCLI commands on a Backup Exec server through the system ssh client."""

    def __init__(self, ssh_config: SshConfig, logger: logging.Logger | None = None) -> None:
        self.ssh_config = ssh_config
        self.logger = logger or logging.getLogger("check_backupexec")
        self.ssh_options = shlex.split(ssh_config.ssh_options)
        if ssh_config.password:
            # BatchMode=yes disables the password prompt sshpass answers
            self.ssh_options = _without_batch_mode(self.ssh_options)

    def _run(self, cmd: list[str], env: dict[str, str] | None) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            env=env,
            timeout=self.ssh_config.timeout_seconds,
        )

    def build_command(self, command: str) -> tuple[list[str], dict[str, str] | None]:
        cmd = ["ssh", *self.ssh_options, "-p", str(self.ssh_config.port)]
        identity = Path(self.ssh_config.identity).expanduser() if self.ssh_config.identity else None
        if identity is not None and identity.is_file():
            cmd += ["-i", str(identity)]
        cmd += [self.ssh_config.address, command]

        env = None
        if self.ssh_config.password:
            cmd = ["sshpass", "-e", *cmd]
            env = {**os.environ, "SSHPASS": self.ssh_config.password}
        return cmd, env

    def _require_ok(self, process: subprocess.CompletedProcess[str], context: str) -> None:
        if process.returncode != 0:
            stderr = process.stderr.strip()
            stdout = process.stdout.strip()
            output = stderr if stderr else stdout
            raise RemoteError(f"{context} failed: {output or 'exit code ' + str(process.returncode)}")

    def run(self, command: str, context: str) -> str:
        cmd, env = self.build_command(command)
        log_with_fields(
            self.logger,
            logging.DEBUG,
            "remote_command",
            host=self.ssh_config.host,
            port=self.ssh_config.port,
            command=command,
        )
        try:
            process = self._run(cmd, env)
        except subprocess.TimeoutExpired:
            raise RemoteError(
                f"{context} timed out after {self.ssh_config.timeout_seconds}s"
            ) from None
        except FileNotFoundError as exc:
            raise RemoteError(f"{context} failed: {exc.filename or cmd[0]} not found") from None
        self._require_ok(process, context)
        log_with_fields(
            self.logger,
            logging.DEBUG,
            "remote_output",
            host=self.ssh_config.host,
            chars=len(process.stdout),
        )
        return process.stdout

    def get_job_report(self, job_name: str) -> str:
        return self.run(job_query(job_name), f"Get-BEJob {job_name} on {self.ssh_config.host}")

    def get_backup_definition_report(self, backup_definition: str) -> str:
        return self.run(
            backup_definition_query(backup_definition),
            f"Get-BEJob -BackupDefinition {backup_definition} on {self.ssh_config.host}",
        )

    def get_settings(self) -> str:
        return self.run(settings_query(), f"Get-BEBackupExecSetting on {self.ssh_config.host}")


def _without_batch_mode(options: list[str]) -> list[str]:
    output: list[str] = []
    index = 0
    while index < len(options):
        item = options[index]
        if item == "-o" and options[index + 1 : index + 2] == ["BatchMode=yes"]:
            index += 2
            continue
        if item != "-oBatchMode=yes":
            output.append(item)
        index += 1
    return output
