"""Gerrit ``review`` command client."""

from __future__ import annotations

import logging

from dataclasses import dataclass

from gerrit_ci.domain.change.repositories import GerritTransport
from gerrit_ci.infrastructure.constants import GerritCommand
from gerrit_ci.shared.constants import DEFAULT_UNVERIFIED_FLAG, DEFAULT_VERIFIED_FLAG
from gerrit_ci.shared.exceptions import GerritConnectionError, RepositoryError

logger = logging.getLogger(__name__)


def format_comment(change_number: int, patch_number: int, message: str) -> str:
    """Format a plain review comment command.

    The message is interpolated verbatim; callers must sanitize it.
    """
    return (
        f"{GerritCommand.REVIEW} {GerritCommand.MESSAGE} '{message}' "
        f"{change_number},{patch_number}"
    )


def format_verification(
    flag: str,
    change_number: int,
    patch_number: int,
    message: str,
) -> str:
    """Format a review command that also sets the Verified label to *flag*."""
    return (
        f"{GerritCommand.REVIEW} {GerritCommand.MESSAGE} '{message}' "
        f"{GerritCommand.VERIFIED} {flag} {change_number},{patch_number}"
    )


# =============================================================================
# CLIENT
# =============================================================================


@dataclass
class CommandClient:
    """Posts review comments and verification votes over a transport."""

    transport: GerritTransport
    verified_flag: str = DEFAULT_VERIFIED_FLAG
    unverified_flag: str = DEFAULT_UNVERIFIED_FLAG

    def post_comment(self, change_number: int, patch_number: int, message: str) -> bool:
        """Add a comment to a patch set.

        Returns:
            True if the server accepted the command, False otherwise.

        Raises:
            GerritConnectionError: On a transport-level failure.
        """
        return self._send(format_comment(change_number, patch_number, message))

    def post_verification(
        self,
        passed: bool,
        change_number: int,
        patch_number: int,
        message: str,
    ) -> bool:
        """Mark a patch set verified or not, depending on the build result.

        Args:
            passed: Whether the build succeeded.
            change_number: Number of the change that was built.
            patch_number: Patch set that triggered the build.
            message: Comment to add alongside the vote.

        Returns:
            True if the server accepted the command, False otherwise.

        Raises:
            GerritConnectionError: On a transport-level failure.
        """
        flag = self.verified_flag if passed else self.unverified_flag
        command = format_verification(flag, change_number, patch_number, message)
        return self._send(command)

    def close(self) -> None:
        self.transport.disconnect()

    def _send(self, command: str) -> bool:
        logger.debug("Sending command: %s", command)
        try:
            self.transport.connect()
            result = self.transport.execute(command)
        except GerritConnectionError:
            raise
        except RepositoryError as e:
            raise GerritConnectionError(str(e), cause=e) from e

        if not result.accepted:
            logger.warning(
                "Gerrit rejected command (exit status %d): %s",
                result.exit_status,
                result.stderr.strip(),
            )
        return result.accepted
