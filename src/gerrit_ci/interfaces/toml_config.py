"""TOML-based configuration loader.

Reads ``[tool.gerrit-ci]`` from ``pyproject.toml`` and produces a typed
``FileSettings`` dataclass. With no file or no section every field
is None and environment variables or built-in defaults apply.
Secrets (the key passphrase) are never read from the file.
"""

from __future__ import annotations

import logging
import tomllib

from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar, cast

from gerrit_ci.shared.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_SECTION = "gerrit-ci"

_ALL_KNOWN_KEYS = {
    "hostname",
    "port",
    "username",
    "private_key_file",
    "verified_flag",
    "unverified_flag",
    "connect_timeout",
    "command_timeout",
    "strict_host_key_checking",
    "project",
    "query",
    "query_files",
}


@dataclass(frozen=True)
class FileSettings:
    """Non-secret settings from ``pyproject.toml``; None means unset."""

    hostname: str | None = None
    port: int | None = None
    username: str | None = None
    private_key_file: str | None = None
    verified_flag: str | None = None
    unverified_flag: str | None = None
    connect_timeout: float | None = None
    command_timeout: float | None = None
    strict_host_key_checking: bool | None = None
    project: str | None = None
    query: str | None = None
    query_files: bool | None = None


def load_file_settings(project_root: Path | None = None) -> FileSettings:
    """Load ``[tool.gerrit-ci]`` from ``pyproject.toml``.

    Args:
        project_root: Directory containing ``pyproject.toml``.
            Defaults to ``Path.cwd()``.

    Returns:
        A frozen ``FileSettings`` dataclass.

    Raises:
        ConfigurationError: On TOML parse errors or values of the wrong type.
    """
    if project_root is None:
        project_root = Path.cwd()

    section = _read_tool_section(project_root / "pyproject.toml")
    if section is None:
        return FileSettings()

    _warn_unknown_keys(section)

    return FileSettings(
        hostname=_optional(section, "hostname", str),
        port=_optional(section, "port", int),
        username=_optional(section, "username", str),
        private_key_file=_optional(section, "private_key_file", str),
        verified_flag=_optional(section, "verified_flag", str),
        unverified_flag=_optional(section, "unverified_flag", str),
        connect_timeout=_optional_float(section, "connect_timeout"),
        command_timeout=_optional_float(section, "command_timeout"),
        strict_host_key_checking=_optional(section, "strict_host_key_checking", bool),
        project=_optional(section, "project", str),
        query=_optional(section, "query", str),
        query_files=_optional(section, "query_files", bool),
    )


# ── helpers ─────────────────────────────────────────────────────────────


def _read_tool_section(toml_path: Path) -> dict[str, Any] | None:
    """Return ``[tool.gerrit-ci]`` as a dict, or None when absent."""
    if not toml_path.is_file():
        return None

    try:
        with toml_path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {toml_path}: {e}"
        raise ConfigurationError(msg) from e

    tool: Any = data.get("tool")
    if not isinstance(tool, dict):
        return None
    section: Any = cast(dict[str, Any], tool).get(_SECTION)
    if not isinstance(section, dict):
        return None
    return cast(dict[str, Any], section)


def _warn_unknown_keys(section: dict[str, Any]) -> None:
    unknown = set(section) - _ALL_KNOWN_KEYS
    for key in sorted(unknown):
        logger.warning("Unknown key in [tool.%s]: %r", _SECTION, key)


T = TypeVar("T")


def _optional(section: dict[str, Any], key: str, kind: type[T]) -> T | None:
    value = section.get(key)
    if value is None:
        return None
    # bool is an int subclass; reject it where an int is expected.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        msg = f"[tool.{_SECTION}] {key} must be {kind.__name__}, got {value!r}"
        raise ConfigurationError(msg)
    return value


def _optional_float(section: dict[str, Any], key: str) -> float | None:
    value = section.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"[tool.{_SECTION}] {key} must be a number, got {value!r}"
        raise ConfigurationError(msg)
    return float(value)
