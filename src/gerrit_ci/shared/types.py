"""Domain-specific types that prevent primitive obsession."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

# =============================================================================
# NEWTYPES
# =============================================================================


class CommitSHA(str):
    """A git commit SHA."""


class ChangeId(str):
    """A Gerrit Change-Id (``I`` followed by a hex digest)."""


RawRecord = dict[str, Any]
"""One decoded JSON object of a query reply."""


# =============================================================================
# ENUMS
# =============================================================================


class ChangeStatus(StrEnum):
    """Lifecycle state of a change as reported by the server."""

    NEW = "NEW"
    MERGED = "MERGED"
    ABANDONED = "ABANDONED"
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"


class ApprovalType(StrEnum):
    """Short codes of the approval categories that feed change scores."""

    VERIFIED = "VRIF"
    CODE_REVIEW = "CRVW"
