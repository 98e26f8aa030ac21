"""Configuration assembly from environment variables."""

from __future__ import annotations

import os

from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from gerrit_ci.infrastructure.ssh.transport import SshSettings
from gerrit_ci.interfaces.env_utils import parse_bool, parse_float, parse_int
from gerrit_ci.interfaces.toml_config import FileSettings, load_file_settings
from gerrit_ci.shared.constants import (
    DEFAULT_COMMAND_TIMEOUT_SECONDS,
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_QUERY,
    DEFAULT_SSH_PORT,
    DEFAULT_UNVERIFIED_FLAG,
    DEFAULT_VERIFIED_FLAG,
)
from gerrit_ci.shared.exceptions import ConfigurationError


def _require(name: str, fallback: str | None) -> str:
    """Read a required environment variable, falling back to the file value."""
    value = os.environ.get(name) or fallback
    if not value:
        msg = f"Missing required environment variable: {name}"
        raise ConfigurationError(msg)
    return value


T = TypeVar("T")


def _or(value: T | None, default: T) -> T:
    """File value when set, even if falsy; *default* only when unset."""
    return default if value is None else value


@dataclass(frozen=True)
class GerritConfig:
    """Typed configuration for talking to one Gerrit server."""

    hostname: str
    username: str
    port: int = DEFAULT_SSH_PORT
    private_key_file: Path | None = None
    passphrase: str | None = field(default=None, repr=False)
    verified_flag: str = DEFAULT_VERIFIED_FLAG
    unverified_flag: str = DEFAULT_UNVERIFIED_FLAG
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT_SECONDS
    strict_host_key_checking: bool = False
    project: str | None = None
    query: str = DEFAULT_QUERY
    query_files: bool = True

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            msg = f"SSH port out of range: {self.port}"
            raise ConfigurationError(msg)
        if not self.verified_flag or not self.unverified_flag:
            msg = "Verified and unverified flags must not be empty"
            raise ConfigurationError(msg)

    @classmethod
    def from_env(cls, defaults: FileSettings | None = None) -> GerritConfig:
        """Build config from environment variables over file defaults.

        Required:
            GERRIT_HOSTNAME, GERRIT_USERNAME

        Optional (with defaults):
            GERRIT_PORT, GERRIT_PRIVATE_KEY, GERRIT_KEY_PASSPHRASE,
            GERRIT_VERIFIED_FLAG, GERRIT_UNVERIFIED_FLAG,
            GERRIT_CONNECT_TIMEOUT, GERRIT_COMMAND_TIMEOUT,
            GERRIT_STRICT_HOST_KEY_CHECKING, GERRIT_PROJECT, GERRIT_QUERY,
            GERRIT_QUERY_FILES
        """
        file = defaults or FileSettings()

        key_file = os.environ.get("GERRIT_PRIVATE_KEY") or file.private_key_file
        strict_raw = os.environ.get("GERRIT_STRICT_HOST_KEY_CHECKING")
        files_raw = os.environ.get("GERRIT_QUERY_FILES")

        return cls(
            hostname=_require("GERRIT_HOSTNAME", file.hostname),
            username=_require("GERRIT_USERNAME", file.username),
            port=parse_int(
                "GERRIT_PORT",
                os.environ.get("GERRIT_PORT", str(_or(file.port, DEFAULT_SSH_PORT))),
            ),
            private_key_file=Path(key_file).expanduser() if key_file else None,
            passphrase=os.environ.get("GERRIT_KEY_PASSPHRASE") or None,
            verified_flag=os.environ.get(
                "GERRIT_VERIFIED_FLAG", _or(file.verified_flag, DEFAULT_VERIFIED_FLAG)
            ),
            unverified_flag=os.environ.get(
                "GERRIT_UNVERIFIED_FLAG",
                _or(file.unverified_flag, DEFAULT_UNVERIFIED_FLAG),
            ),
            connect_timeout=parse_float(
                "GERRIT_CONNECT_TIMEOUT",
                os.environ.get(
                    "GERRIT_CONNECT_TIMEOUT",
                    str(_or(file.connect_timeout, DEFAULT_CONNECT_TIMEOUT_SECONDS)),
                ),
            ),
            command_timeout=parse_float(
                "GERRIT_COMMAND_TIMEOUT",
                os.environ.get(
                    "GERRIT_COMMAND_TIMEOUT",
                    str(_or(file.command_timeout, DEFAULT_COMMAND_TIMEOUT_SECONDS)),
                ),
            ),
            strict_host_key_checking=(
                parse_bool(strict_raw)
                if strict_raw is not None
                else bool(file.strict_host_key_checking)
            ),
            project=os.environ.get("GERRIT_PROJECT") or file.project,
            query=os.environ.get("GERRIT_QUERY") or file.query or DEFAULT_QUERY,
            query_files=(
                parse_bool(files_raw)
                if files_raw is not None
                else _or(file.query_files, True)
            ),
        )

    @classmethod
    def load(cls, project_root: Path | None = None) -> GerritConfig:
        """Environment variables over ``[tool.gerrit-ci]`` over defaults."""
        return cls.from_env(load_file_settings(project_root))

    def ssh_settings(self) -> SshSettings:
        """The connection settings shared by every session of one service."""
        return SshSettings(
            hostname=self.hostname,
            username=self.username,
            port=self.port,
            private_key_file=self.private_key_file,
            passphrase=self.passphrase,
            connect_timeout=self.connect_timeout,
            command_timeout=self.command_timeout,
            strict_host_key_checking=self.strict_host_key_checking,
        )
