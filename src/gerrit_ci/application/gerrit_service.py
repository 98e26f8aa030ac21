"""Gerrit service facade for change discovery and verification reporting."""

from __future__ import annotations

import logging

from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType
from typing import Protocol

from gerrit_ci.domain.change.entities import Change
from gerrit_ci.domain.change.repositories import GerritTransport
from gerrit_ci.shared.constants import DEFAULT_QUERY
from gerrit_ci.shared.exceptions import GerritConnectionError, RepositoryError
from gerrit_ci.shared.types import RawRecord

logger = logging.getLogger(__name__)

_CONNECTION_FAILED = "Failed to establish connection to Gerrit!"
_PROJECT_KEY = "project"

# =============================================================================
# PROTOCOLS
# =============================================================================


class QueryPort(Protocol):
    """Port for running queries against the review server."""

    def run_query(self, query: str) -> list[RawRecord]: ...
    def close(self) -> None: ...


class CommandPort(Protocol):
    """Port for posting review commands."""

    def post_comment(
        self, change_number: int, patch_number: int, message: str
    ) -> bool: ...

    def post_verification(
        self,
        passed: bool,
        change_number: int,
        patch_number: int,
        message: str,
    ) -> bool: ...

    def close(self) -> None: ...


ChangeMapper = Callable[[RawRecord], Change]
TransportFactory = Callable[[], GerritTransport]


# =============================================================================
# QUERY BUILDERS
# =============================================================================


def build_open_changes_query(
    project: str | None = None,
    limit: int = 0,
    *options: str,
) -> str:
    """Build ``project:<p> is:open <options...> limit:<n>``.

    The project clause is omitted when *project* is None and the limit
    clause when *limit* is not positive.
    """
    parts: list[str] = []
    if project is not None:
        parts.append(f"project:{project}")
    parts.append("is:open")
    parts.extend(options)
    if limit > 0:
        parts.append(f"limit:{limit}")
    return " ".join(parts)


def _is_change_record(record: RawRecord) -> bool:
    return _PROJECT_KEY in record


# =============================================================================
# SERVICE
# =============================================================================


@dataclass
class GerritService:
    """Facade over the query and command clients.

    Owns one query session and one command session; each connects on
    first use and is released by ``close()``. Not safe for concurrent use:
    give each caller its own instance.
    """

    queries: QueryPort
    commands: CommandPort
    mapper: ChangeMapper
    transport_factory: TransportFactory

    def test_connection(self) -> None:
        """Open a fresh session, check it is alive, and disconnect.

        Raises:
            GerritConnectionError: If the session cannot be established.
        """
        transport = self.transport_factory()
        try:
            transport.connect()
        except RepositoryError as e:
            raise GerritConnectionError(_CONNECTION_FAILED, cause=e) from e

        if not transport.is_connected:
            raise GerritConnectionError(_CONNECTION_FAILED)
        transport.disconnect()

    def run_query(self, query: str) -> list[RawRecord]:
        """Run a raw query; see ``QueryClient.run_query``."""
        return self.queries.run_query(query)

    def find_oldest_unverified_change(
        self,
        project: str,
        extra_filters: str = DEFAULT_QUERY,
    ) -> Change | None:
        """Return the oldest change in *project* matching *extra_filters*.

        The server lists changes newest first, so the records are scanned
        backwards from the one before the trailing stats record.
        """
        records = self.run_query(f"project:{project} {extra_filters}")
        for record in reversed(records[:-1]):
            if _is_change_record(record):
                return self.mapper(record)
        return None

    def find_change_by_id(self, change_id: str) -> Change | None:
        """Return the change for a Change-Id or change number."""
        logger.debug("find_change_by_id(change_id=%s)", change_id)
        return self._first_change(f"change:{change_id}")

    def find_change_by_revision(self, revision: str) -> Change | None:
        """Return the change that owns commit *revision*."""
        logger.debug("find_change_by_revision(revision=%s)", revision)
        return self._first_change(f"commit:{revision}")

    def list_open_changes(
        self,
        project: str | None = None,
        limit: int = 0,
        *options: str,
    ) -> list[Change]:
        """List open changes in server order, optionally scoped and limited."""
        query = build_open_changes_query(project, limit, *options)
        logger.debug("list_open_changes(query=%s)", query)

        records = self.run_query(query)
        logger.debug("Query result count: %d", len(records))
        return [self.mapper(r) for r in records if _is_change_record(r)]

    def post_comment(self, change_number: int, patch_number: int, message: str) -> bool:
        """Add a comment to a patch set; False if the server rejected it."""
        return self.commands.post_comment(change_number, patch_number, message)

    def post_verification(
        self,
        passed: bool,
        change_number: int,
        patch_number: int,
        message: str,
    ) -> bool:
        """Vote Verified on a patch set; False if the server rejected it."""
        return self.commands.post_verification(
            passed, change_number, patch_number, message
        )

    def close(self) -> None:
        """Disconnect both cached sessions."""
        try:
            self.queries.close()
        finally:
            self.commands.close()

    def __enter__(self) -> GerritService:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _first_change(self, query: str) -> Change | None:
        records = self.run_query(query)
        if not records:
            return None
        return self.mapper(records[0])
