"""Application-layer result DTOs."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from gerrit_ci.domain.change.entities import Change

# =============================================================================
# CHANGE SUMMARY
# =============================================================================


@dataclass(frozen=True)
class ChangeSummary:
    """Flat, JSON-friendly view of a change for build tooling."""

    project: str
    branch: str
    change_id: str
    number: int
    subject: str
    owner: str
    url: str
    status: str
    patch_set: int
    revision: str
    ref: str
    last_updated: str
    verification_score: int
    review_score: int

    @classmethod
    def from_change(cls, change: Change) -> ChangeSummary:
        current = change.current_patch_set
        return cls(
            project=change.project,
            branch=change.branch,
            change_id=str(change.change_id),
            number=change.number,
            subject=change.subject,
            owner=change.owner.name,
            url=change.url,
            status=str(change.status),
            patch_set=current.number,
            revision=str(current.revision),
            ref=current.ref,
            last_updated=change.last_updated.isoformat(),
            verification_score=change.verification_score,
            review_score=change.review_score,
        )

    def to_dict(self) -> dict[str, object]:
        return asdict(self)
