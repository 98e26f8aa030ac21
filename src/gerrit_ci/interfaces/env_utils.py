"""Shared environment variable parsing helpers for interfaces."""

from __future__ import annotations

import os

from gerrit_ci.shared.exceptions import ConfigurationError


def parse_int(name: str, raw: str) -> int:
    """Parse an integer env var or raise with a clear message."""
    try:
        return int(raw)
    except ValueError:
        msg = f"Invalid integer for {name}: {raw!r}"
        raise ConfigurationError(msg) from None


def parse_float(name: str, raw: str) -> float:
    """Parse a float env var or raise with a clear message."""
    try:
        return float(raw)
    except ValueError:
        msg = f"Invalid float for {name}: {raw!r}"
        raise ConfigurationError(msg) from None


def parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes")


def int_env(name: str, default: str | None = None) -> int:
    """Read an integer env var; required when *default* is None.

    Raises:
        ConfigurationError: If the variable is missing, blank or not an integer.
    """
    raw = os.environ.get(name, default)
    if raw is None or not raw.strip():
        msg = f"Missing required environment variable: {name}"
        raise ConfigurationError(msg)
    return parse_int(name, raw)
