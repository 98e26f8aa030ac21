"""Repository protocols for the Change bounded context."""

from __future__ import annotations

from typing import Protocol

from gerrit_ci.domain.change.value_objects import CommandResult

# =============================================================================
# PROTOCOLS
# =============================================================================


class GerritTransport(Protocol):
    """Interface for the remote-command channel to the review server.

    Implementations raise ``GerritConnectionError`` when the session cannot
    be established or drops, and ``TransportIOError`` for any other I/O
    fault. A command the server rejects is not an error: it comes back as
    a ``CommandResult`` with a non-zero exit status.
    """

    def connect(self) -> None:
        """Open the session if it is not already open."""
        ...

    def execute(self, command: str) -> CommandResult:
        """Run one command and wait for it to finish."""
        ...

    def disconnect(self) -> None:
        """Close the session. Safe to call when not connected."""
        ...

    @property
    def is_connected(self) -> bool:
        """Whether the session is currently usable."""
        ...
