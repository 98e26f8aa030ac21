"""Fixtures for Change domain tests."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from gerrit_ci.domain.change.entities import Change, PatchSet
from gerrit_ci.domain.change.value_objects import Account, Approval, FileSet
from gerrit_ci.shared.types import ChangeId, ChangeStatus, CommitSHA

GRANTED = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def uploader() -> Account:
    return Account(name="Alice Author", email="alice@example.com")


@pytest.fixture
def first_patch_set(uploader: Account) -> PatchSet:
    return PatchSet(
        number=1,
        revision=CommitSHA("a" * 40),
        ref="refs/changes/45/12345/1",
        uploader=uploader,
        created_on=GRANTED,
        approvals=(Approval("VRIF", -1, GRANTED, Account("Jenkins")),),
    )


@pytest.fixture
def current_patch_set(uploader: Account) -> PatchSet:
    return PatchSet(
        number=2,
        revision=CommitSHA("b" * 40),
        ref="refs/changes/45/12345/2",
        uploader=uploader,
        created_on=GRANTED,
        approvals=(
            Approval("VRIF", 1, GRANTED, Account("Jenkins")),
            Approval("CRVW", 2, GRANTED, Account("Bob", "bob@example.com")),
            Approval("CRVW", -1, GRANTED, Account("Carol")),
        ),
        files=(FileSet("src/app.py", "MODIFIED"),),
    )


@pytest.fixture
def change(
    uploader: Account,
    first_patch_set: PatchSet,
    current_patch_set: PatchSet,
) -> Change:
    return Change(
        project="platform/core",
        branch="main",
        change_id=ChangeId("I" + "c" * 40),
        number=12345,
        subject="Fix flaky test",
        owner=uploader,
        url="https://review.example.com/12345",
        created_on=GRANTED,
        last_updated=GRANTED,
        is_open=True,
        status=ChangeStatus.NEW,
        current_patch_set=current_patch_set,
        patch_sets=(first_patch_set,),
        verification_score=1,
        review_score=1,
    )
