"""Entities for the Change bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from gerrit_ci.domain.change.value_objects import Account, Approval, FileSet
from gerrit_ci.shared.types import ChangeId, ChangeStatus, CommitSHA

# =============================================================================
# ENTITIES
# =============================================================================


@dataclass(frozen=True)
class PatchSet:
    """One concrete revision submitted under a change."""

    number: int
    revision: CommitSHA
    ref: str
    uploader: Account
    created_on: datetime
    approvals: tuple[Approval, ...] = field(default_factory=tuple)
    files: tuple[FileSet, ...] = field(default_factory=tuple)

    def approvals_of(self, approval_type: str) -> list[Approval]:
        """Filter approvals by category code."""
        return [a for a in self.approvals if a.type == approval_type]

    def score(self, approval_type: str) -> int:
        """Sum of approval values for one category."""
        return sum(a.value for a in self.approvals_of(approval_type))


@dataclass(frozen=True)
class Change:
    """Aggregate root: a proposed revision under review.

    ``verification_score`` and ``review_score`` are derived from the
    current patch set's approvals when the change is built and are not
    recomputed afterwards.

    ``status`` is a ``ChangeStatus`` when the server value is known and
    the raw string otherwise.
    """

    project: str
    branch: str
    change_id: ChangeId
    number: int
    subject: str
    owner: Account
    url: str
    created_on: datetime
    last_updated: datetime
    is_open: bool
    status: ChangeStatus | str
    current_patch_set: PatchSet
    patch_sets: tuple[PatchSet, ...] = field(default_factory=tuple)
    verification_score: int = 0
    review_score: int = 0

    def patch_set(self, number: int) -> PatchSet | None:
        """Look up a patch set by number, current one included."""
        if self.current_patch_set.number == number:
            return self.current_patch_set
        for patch in self.patch_sets:
            if patch.number == number:
                return patch
        return None

    @property
    def is_verified(self) -> bool:
        """Whether the current patch set carries a positive Verified total."""
        return self.verification_score > 0

    @property
    def fetch_ref(self) -> str:
        """Ref to fetch the current patch set from."""
        return self.current_patch_set.ref
