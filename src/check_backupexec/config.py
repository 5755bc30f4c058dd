from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

DEFAULT_SSH_OPTIONS = "-o BatchMode=yes -o ConnectTimeout=10 -o StrictHostKeyChecking=no"


@dataclass(slots=True)
class SshConfig:
    host: str = ""
    username: str = ""
    password: str = ""
    identity: str = "~/.ssh/id_rsa"
    port: int = 22
    timeout_seconds: int = 60
    ssh_options: str = DEFAULT_SSH_OPTIONS

    @property
    def address(self) -> str:
        return f"{self.username}@{self.host}"


@dataclass(slots=True)
class LoggingConfig:
    file: Path | None = None


@dataclass(slots=True)
class AppConfig:
    ssh: SshConfig = field(default_factory=SshConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _section(raw: dict, key: str) -> dict:
    value = raw.get(key, {}) or {}
    if not isinstance(value, dict):
        raise ValueError(f"`{key}` must be a mapping")
    return value


def _int(mapping: dict, key: str, section: str, default: int) -> int:
    value = mapping.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"`{section}.{key}` must be an integer") from None


def load_config(path: str | Path | None) -> AppConfig:
    if path is None:
        return AppConfig()

    config_path = Path(path).expanduser().resolve()
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {config_path}: {exc}") from None
    if not isinstance(raw, dict):
        raise ValueError("Config root must be a mapping")

    ssh_raw = _section(raw, "ssh")
    logging_raw = _section(raw, "logging")

    ssh = SshConfig(
        host=str(ssh_raw.get("host", "")),
        username=str(ssh_raw.get("username", "")),
        password=str(ssh_raw.get("password", "") or ""),
        identity=str(ssh_raw.get("identity", "~/.ssh/id_rsa")),
        port=_int(ssh_raw, "port", "ssh", 22),
        timeout_seconds=_int(ssh_raw, "timeout_seconds", "ssh", 60),
        ssh_options=str(ssh_raw.get("ssh_options", DEFAULT_SSH_OPTIONS)),
    )

    log_file = None
    if logging_raw.get("file"):
        log_file = Path(str(logging_raw["file"])).expanduser()
        if not log_file.is_absolute():
            log_file = config_path.parent / log_file

    return AppConfig(ssh=ssh, logging=LoggingConfig(file=log_file))


def apply_overrides(config: AppConfig, **overrides: object) -> AppConfig:
    """Return a copy of ``config`` with every non-None ssh override applied, validated."""
    values = {key: value for key, value in overrides.items() if value is not None}
    if "identity" in values and "password" not in values:
        # a key given on the command line replaces a configured password
        values["password"] = ""
    ssh = replace(config.ssh, **values)
    validate_ssh(ssh)
    return AppConfig(ssh=ssh, logging=config.logging)


def validate_ssh(ssh: SshConfig) -> None:
    if not ssh.host:
        raise ValueError("Missing `ssh.host` (use --host or the config file)")
    if not ssh.username:
        raise ValueError("Missing `ssh.username` (use --username or the config file)")
    if not 1 <= ssh.port <= 65535:
        raise ValueError("`ssh.port` must be between 1 and 65535")
    if ssh.timeout_seconds < 1:
        raise ValueError("`ssh.timeout_seconds` must be >= 1")
