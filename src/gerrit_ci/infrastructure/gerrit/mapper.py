"""Maps raw query records into Change aggregates."""

from __future__ import annotations

import logging

from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import ValidationError

from gerrit_ci.domain.change.entities import Change, PatchSet
from gerrit_ci.domain.change.value_objects import Account, Approval, FileSet
from gerrit_ci.infrastructure.gerrit.schema import (
    ApprovalRecord,
    ChangeRecord,
    PatchSetRecord,
)
from gerrit_ci.shared.exceptions import MappingError
from gerrit_ci.shared.types import (
    ApprovalType,
    ChangeId,
    ChangeStatus,
    CommitSHA,
    RawRecord,
)

logger = logging.getLogger(__name__)


def epoch_to_datetime(seconds: int) -> datetime:
    """Convert epoch seconds to an aware UTC datetime.

    Raises:
        MappingError: If the value is out of range for a datetime.
    """
    try:
        return datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError) as e:
        msg = f"Invalid timestamp: {seconds!r}"
        raise MappingError(msg, cause=e) from e


# =============================================================================
# SCORES
# =============================================================================


@dataclass
class _Scores:
    """Running approval totals for the current patch set."""

    verification: int = 0
    review: int = 0

    def add(self, approval: Approval) -> None:
        if approval.type == ApprovalType.VERIFIED:
            self.verification += approval.value
        elif approval.type == ApprovalType.CODE_REVIEW:
            self.review += approval.value


# =============================================================================
# MAPPER
# =============================================================================


def map_record(raw: RawRecord | None) -> Change:
    """Build a Change from one decoded query record.

    The current patch set's "VRIF" and "CRVW" approvals are summed into
    the verification and review scores; historical patch sets never
    contribute.

    Raises:
        MappingError: If the record is empty or a required field is
            missing or malformed.
    """
    if not raw:
        msg = "No data to parse!"
        raise MappingError(msg)

    logger.debug("Mapping record: %s", raw)

    try:
        record = ChangeRecord.model_validate(raw)
    except ValidationError as e:
        msg = f"Malformed change record: {e}"
        raise MappingError(msg, cause=e) from e

    scores = _Scores()
    current = _map_patch_set(record.current_patch_set, scores)
    history = [_map_patch_set(p, scores=None) for p in record.patch_sets]

    change = Change(
        project=record.project,
        branch=record.branch,
        change_id=ChangeId(record.id),
        number=record.number,
        subject=record.subject,
        owner=Account(name=record.owner.name, email=record.owner.email),
        url=record.url,
        created_on=epoch_to_datetime(record.created_on),
        last_updated=epoch_to_datetime(record.last_updated),
        is_open=record.open,
        status=_status(record.status),
        current_patch_set=current,
        patch_sets=tuple(history),
        verification_score=scores.verification,
        review_score=scores.review,
    )
    logger.debug("Mapped change %s (%d)", change.change_id, change.number)
    return change


def _status(raw: str) -> ChangeStatus | str:
    """Known statuses become ``ChangeStatus``; others are kept as given."""
    try:
        return ChangeStatus(raw)
    except ValueError:
        logger.debug("Unrecognized change status: %s", raw)
        return raw


def _map_patch_set(record: PatchSetRecord, scores: _Scores | None) -> PatchSet:
    """Map one patch set; approvals are added to *scores* when given."""
    approvals: list[Approval] = []
    for approval_record in record.approvals or []:
        approval = _map_approval(approval_record)
        if scores is not None:
            scores.add(approval)
        approvals.append(approval)

    files = [FileSet(file=f.file, type=f.type) for f in record.files or []]

    patch_set = PatchSet(
        number=record.number,
        revision=CommitSHA(record.revision),
        ref=record.ref,
        uploader=Account(name=record.uploader.name, email=record.uploader.email),
        created_on=epoch_to_datetime(record.created_on),
        approvals=tuple(approvals),
        files=tuple(files),
    )

    logger.debug("Mapped patch set %d (%d approvals)", patch_set.number, len(approvals))
    return patch_set


def _map_approval(record: ApprovalRecord) -> Approval:
    # Description is read only when the approval object has its own "email" key.
    description: str | None = None
    if record.has_email_key:
        if record.description is None:
            msg = f"Approval {record.type!r} has an email key but no description"
            raise MappingError(msg)
        description = record.description

    return Approval(
        type=record.type,
        value=record.value,
        granted_on=epoch_to_datetime(record.granted_on),
        granted_by=Account(name=record.by.name, email=record.by.email),
        description=description,
    )
