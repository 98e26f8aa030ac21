"""Value objects for the Change bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# =============================================================================
# VALUE OBJECTS
# =============================================================================


@dataclass(frozen=True)
class Account:
    """A Gerrit user as embedded in query results."""

    name: str
    email: str | None = None


@dataclass(frozen=True)
class Approval:
    """A reviewer's score on a patch set for one label category."""

    type: str
    value: int
    granted_on: datetime
    granted_by: Account
    description: str | None = None


@dataclass(frozen=True)
class FileSet:
    """A file touched by a patch set and how it was changed."""

    file: str
    type: str


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single remote command execution."""

    exit_status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def accepted(self) -> bool:
        """Whether the server reported success."""
        return self.exit_status == 0

    def lines(self) -> list[str]:
        """Non-blank stdout lines, in order."""
        return [line for line in self.stdout.splitlines() if line.strip()]
