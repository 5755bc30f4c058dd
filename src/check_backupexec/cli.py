from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable

from .aggregator import aggregate
from .app_logging import log_with_fields, setup_logger
from .config import AppConfig, SshConfig, apply_overrides, load_config
from .formatter import format_summary, format_job_details, format_verdict
from .models import Severity, Verdict
from .parser import parse_report
from .remote import BackupExecSession, RemoteError

VERSION = "1.0.2"

SessionFactory = Callable[[SshConfig, logging.Logger], BackupExecSession]


def _connection_parser() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("-H", "--host", help="Backup Exec server hostname or IP address")
    parent.add_argument("-u", "--username", help="SSH username")
    auth = parent.add_mutually_exclusive_group()
    auth.add_argument("-p", "--password", help="SSH password (requires sshpass)")
    auth.add_argument("-i", "--identity", help="Private key file [default: ~/.ssh/id_rsa]")
    parent.add_argument("-P", "--port", type=int, help="SSH port [default: 22]")
    parent.add_argument("-t", "--timeout", type=int, dest="timeout_seconds", help="Remote call timeout in seconds")
    parent.add_argument("-v", "--verbose", action="store_true", help="Display verbose output")
    return parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="check_backupexec", description="Check Backup Exec jobs")
    parser.add_argument("--config", help="Path to optional check_backupexec YAML config")
    parser.add_argument("--version", action="store_true", help="Show check_backupexec version")
    subparsers = parser.add_subparsers(dest="command")

    connection = _connection_parser()
    get_job = subparsers.add_parser("get-job", parents=[connection], help="Check the state of a job")
    get_job.add_argument(
        "-D",
        "--backup-definition",
        action="store_true",
        help="Job name is a backup definition",
    )
    get_job.add_argument("job_name", metavar="JOB_NAME", help="Name of the Backup Exec job")
    subparsers.add_parser(
        "get-setting",
        parents=[connection],
        help="Check that the Backup Exec server answers",
    )
    return parser


def _emit(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def cmd_get_job(
    session: BackupExecSession,
    job_name: str,
    *,
    backup_definition: bool = False,
    verbose: bool = False,
) -> int:
    if backup_definition:
        report = session.get_backup_definition_report(job_name)
    else:
        report = session.get_job_report(job_name)

    records = parse_report(report)
    verdict = aggregate(records)
    log_with_fields(
        session.logger,
        logging.INFO,
        "verdict",
        job=job_name,
        backup_definition=backup_definition,
        jobs=len(records),
        code=verdict.label,
        last_run=verdict.newest_timestamp.isoformat(),
    )
    _emit(format_verdict(verdict))
    if verbose:
        _emit(format_job_details(records))
    return verdict.exit_code


def cmd_get_setting(session: BackupExecSession, *, verbose: bool = False) -> int:
    output = session.get_settings()
    verdict = Verdict(
        code=Severity.OK,
        message=f"Backup Exec settings retrieved from {session.ssh_config.host}",
    )
    _emit(format_summary(verdict))
    if verbose:
        _emit(output if output.endswith("\n") else output + "\n")
    return verdict.exit_code


def main(argv: list[str] | None = None, session_factory: SessionFactory = BackupExecSession) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        _emit(f"check_backupexec version {VERSION}\n")
        return Severity.OK.value
    if args.command is None:
        parser.print_usage(sys.stderr)
        _emit(format_summary(Verdict(code=Severity.CRITICAL, message="Unknown command")))
        return Severity.CRITICAL.value

    try:
        config: AppConfig = load_config(args.config)
        config = apply_overrides(
            config,
            host=args.host,
            username=args.username,
            password=args.password,
            identity=args.identity,
            port=args.port,
            timeout_seconds=args.timeout_seconds,
        )
        logger = setup_logger(config.logging.file, verbose=args.verbose)
    except (OSError, ValueError) as exc:
        _emit(format_summary(Verdict(code=Severity.UNKNOWN, message=f"Configuration error: {exc}")))
        return Severity.UNKNOWN.value

    session = session_factory(config.ssh, logger)
    try:
        if args.command == "get-job":
            return cmd_get_job(
                session,
                args.job_name,
                backup_definition=args.backup_definition,
                verbose=args.verbose,
            )
        return cmd_get_setting(session, verbose=args.verbose)
    except RemoteError as exc:
        log_with_fields(logger, logging.ERROR, "remote_failed", host=config.ssh.host, error=str(exc))
        _emit(format_summary(Verdict(code=Severity.CRITICAL, message=str(exc))))
        return Severity.CRITICAL.value


if __name__ == "__main__":
    raise SystemExit(main())
