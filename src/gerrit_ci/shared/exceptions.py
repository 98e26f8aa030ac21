"""Typed exception hierarchy for gerrit-ci."""

from __future__ import annotations

# =============================================================================
# BASE
# =============================================================================


class GerritCIError(Exception):
    """Base exception for all gerrit-ci errors."""


# =============================================================================
# REPOSITORY
# =============================================================================


class RepositoryError(GerritCIError):
    """A query or command against the review server failed.

    The single reportable error kind for callers; ``cause`` carries the
    lower-level exception when there is one.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class GerritConnectionError(RepositoryError):
    """The SSH transport could not be established or dropped."""


class ProtocolError(RepositoryError):
    """The server rejected the query or replied in an unexpected shape."""


class TransportIOError(RepositoryError):
    """Any other I/O fault on the transport."""


class MappingError(RepositoryError):
    """A raw record could not be mapped into a Change."""


# =============================================================================
# CONFIGURATION
# =============================================================================


class ConfigurationError(GerritCIError):
    """Invalid or missing configuration."""
