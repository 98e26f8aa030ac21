"""Tests for the Gerrit review command client."""

from __future__ import annotations

from typing import Any

import pytest

from gerrit_ci.domain.change.value_objects import CommandResult
from gerrit_ci.infrastructure.gerrit.command_client import (
    CommandClient,
    format_comment,
    format_verification,
)
from gerrit_ci.shared.exceptions import GerritConnectionError, TransportIOError

# =============================================================================
# Formatting
# =============================================================================


def test_format_comment() -> None:
    assert format_comment(123, 4, "Build started") == (
        "gerrit review --message 'Build started' 123,4"
    )


def test_format_verification() -> None:
    assert format_verification("+1", 123, 1, "ok") == (
        "gerrit review --message 'ok' --verified +1 123,1"
    )


def test_message_is_not_escaped() -> None:
    command = format_comment(1, 1, "it's done")

    assert "'it's done'" in command


# =============================================================================
# Sending
# =============================================================================


def test_post_verification_passed_uses_verified_flag(fake_transport: Any) -> None:
    client = CommandClient(transport=fake_transport)

    accepted = client.post_verification(True, 123, 1, "ok")

    assert accepted is True
    assert fake_transport.commands == [
        "gerrit review --message 'ok' --verified +1 123,1"
    ]


def test_post_verification_failed_uses_unverified_flag(fake_transport: Any) -> None:
    client = CommandClient(transport=fake_transport)

    client.post_verification(False, 123, 1, "Build failed")

    assert fake_transport.commands == [
        "gerrit review --message 'Build failed' --verified -1 123,1"
    ]


def test_configured_flags_replace_defaults(fake_transport: Any) -> None:
    client = CommandClient(
        transport=fake_transport, verified_flag="+2", unverified_flag="-2"
    )

    client.post_verification(True, 5, 3, "ok")
    client.post_verification(False, 5, 3, "nope")

    assert fake_transport.commands[0].endswith("--verified +2 5,3")
    assert fake_transport.commands[1].endswith("--verified -2 5,3")


def test_post_comment_sends_comment(fake_transport: Any) -> None:
    client = CommandClient(transport=fake_transport)

    assert client.post_comment(77, 2, "Build queued") is True
    assert fake_transport.commands == ["gerrit review --message 'Build queued' 77,2"]


def test_rejected_command_returns_false(fake_transport: Any) -> None:
    fake_transport.replies.append(
        CommandResult(exit_status=1, stderr="fatal: change not found")
    )
    client = CommandClient(transport=fake_transport)

    assert client.post_verification(True, 999, 1, "ok") is False


def test_rejected_command_is_logged(
    fake_transport: Any,
    caplog: pytest.LogCaptureFixture,
) -> None:
    fake_transport.replies.append(
        CommandResult(exit_status=1, stderr="fatal: change not found")
    )

    CommandClient(transport=fake_transport).post_comment(999, 1, "hi")

    assert "change not found" in caplog.text


def test_connect_failure_raises_connection_error(fake_transport: Any) -> None:
    fake_transport.connect_error = GerritConnectionError("refused")

    with pytest.raises(GerritConnectionError):
        CommandClient(transport=fake_transport).post_comment(1, 1, "hi")


def test_io_failure_is_reported_as_connection_error(fake_transport: Any) -> None:
    fake_transport.replies.append(TransportIOError("SSH I/O error"))

    with pytest.raises(GerritConnectionError) as exc_info:
        CommandClient(transport=fake_transport).post_verification(True, 1, 1, "ok")

    assert isinstance(exc_info.value.cause, TransportIOError)
