"""Shared fixtures: a scripted transport and raw query records."""

from __future__ import annotations

import json

from collections.abc import Callable
from typing import Any

import pytest

from gerrit_ci.domain.change.value_objects import CommandResult
from gerrit_ci.shared.types import RawRecord

# =============================================================================
# Fake transport
# =============================================================================


class FakeTransport:
    """GerritTransport that records commands and replays scripted replies."""

    def __init__(self) -> None:
        self.commands: list[str] = []
        self.replies: list[CommandResult | Exception] = []
        self.connect_error: Exception | None = None
        self.connect_calls = 0
        self.disconnect_calls = 0
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        self.connect_calls += 1
        if self.connect_error is not None:
            raise self.connect_error
        self._connected = True

    def execute(self, command: str) -> CommandResult:
        self.commands.append(command)
        reply = self.replies.pop(0) if self.replies else CommandResult(exit_status=0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def disconnect(self) -> None:
        self.disconnect_calls += 1
        self._connected = False


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_transport() -> Callable[[], FakeTransport]:
    return FakeTransport


# =============================================================================
# Raw records
# =============================================================================

DAY = 86_400
BASE_EPOCH = 1_700_000_000


def _approval(
    type_: str,
    value: int | str,
    by: str = "Jenkins",
    by_email: str | None = "ci@example.com",
) -> RawRecord:
    grantor: RawRecord = {"name": by}
    if by_email is not None:
        grantor["email"] = by_email
    return {
        "type": type_,
        "description": "Verified" if type_ == "VRIF" else "Code Review",
        "value": str(value),
        "grantedOn": BASE_EPOCH + 60,
        "by": grantor,
    }


def _patch_set(number: int, approvals: list[RawRecord] | None = None) -> RawRecord:
    patch: RawRecord = {
        "number": str(number),
        "revision": f"{number:040x}",
        "ref": f"refs/changes/45/12345/{number}",
        "uploader": {"name": "Alice Author", "email": "alice@example.com"},
        "createdOn": BASE_EPOCH + number,
    }
    if approvals is not None:
        patch["approvals"] = approvals
    return patch


def _change(
    number: int = 12345,
    created_on: int = BASE_EPOCH,
    current_approvals: list[RawRecord] | None = None,
    old_approvals: list[RawRecord] | None = None,
    **overrides: Any,
) -> RawRecord:
    current = _patch_set(2, current_approvals)
    record: RawRecord = {
        "project": "platform/core",
        "branch": "main",
        "id": f"I{number:040x}",
        "number": str(number),
        "subject": f"Fix flaky test #{number}",
        "owner": {"name": "Alice Author", "email": "alice@example.com"},
        "url": f"https://review.example.com/{number}",
        "createdOn": created_on,
        "lastUpdated": created_on + 3600,
        "sortKey": "0023ab4500003039",
        "open": True,
        "status": "NEW",
        "currentPatchSet": current,
        "patchSets": [_patch_set(1, old_approvals), current],
    }
    record.update(overrides)
    return record


@pytest.fixture
def make_approval() -> Callable[..., RawRecord]:
    return _approval


@pytest.fixture
def make_change() -> Callable[..., RawRecord]:
    """Factory for a raw change record as printed by ``gerrit query``."""
    return _change


@pytest.fixture
def raw_change() -> RawRecord:
    return _change(
        current_approvals=[
            _approval("VRIF", 1),
            _approval("CRVW", 2, by="Bob Reviewer", by_email="bob@example.com"),
            _approval("CRVW", -1, by="Carol", by_email=None),
        ],
        old_approvals=[_approval("VRIF", -1), _approval("CRVW", -2)],
    )


def _stats(row_count: int) -> RawRecord:
    return {"type": "stats", "rowCount": row_count, "runTimeMilliseconds": 12}


@pytest.fixture
def query_reply() -> Callable[..., CommandResult]:
    """Build a successful query reply: one JSON line per record, then stats."""

    def build(*records: RawRecord, row_count: int | None = None) -> CommandResult:
        count = len(records) if row_count is None else row_count
        lines = [json.dumps(r) for r in (*records, _stats(count))]
        return CommandResult(exit_status=0, stdout="\n".join(lines) + "\n")

    return build
