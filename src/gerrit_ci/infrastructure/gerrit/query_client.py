"""Gerrit ``query`` command client."""

from __future__ import annotations

import json
import logging

from dataclasses import dataclass, field

from gerrit_ci.domain.change.repositories import GerritTransport
from gerrit_ci.infrastructure.constants import GerritCommand, RecordType
from gerrit_ci.infrastructure.constants import GerritJSONKey as K
from gerrit_ci.shared.exceptions import ProtocolError
from gerrit_ci.shared.types import RawRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryOptions:
    """Which details the server should include for each matching change."""

    current_patch_set: bool = True
    patch_sets: bool = True
    all_approvals: bool = True
    files: bool = False

    def flags(self) -> list[str]:
        flags: list[str] = []
        if self.current_patch_set:
            flags.append(GerritCommand.CURRENT_PATCH_SET)
        if self.patch_sets:
            flags.append(GerritCommand.PATCH_SETS)
        if self.all_approvals:
            flags.append(GerritCommand.ALL_APPROVALS)
        if self.files:
            flags.append(GerritCommand.FILES)
        return flags


def build_query_command(query: str, options: QueryOptions) -> str:
    """Format the full ``gerrit query`` command line for *query*."""
    parts = [GerritCommand.QUERY, GerritCommand.FORMAT_JSON, *options.flags(), query]
    return " ".join(str(p) for p in parts)


# =============================================================================
# CLIENT
# =============================================================================


@dataclass
class QueryClient:
    """Runs queries over a transport and decodes the JSON-lines reply."""

    transport: GerritTransport
    options: QueryOptions = field(default_factory=QueryOptions)

    def run_query(self, query: str) -> list[RawRecord]:
        """Run *query* and return every reply record, stats record last.

        Returns an empty list when the server reports zero rows, even if
        other records preceded the stats record.

        Raises:
            GerritConnectionError: If the transport cannot connect or drops.
            ProtocolError: If the server rejects the query or the reply
                has an unexpected shape.
            TransportIOError: On any other transport I/O fault.
        """
        logger.debug("Gerrit query: %s", query)

        self.transport.connect()
        result = self.transport.execute(build_query_command(query, self.options))

        if not result.accepted:
            msg = (
                f"Gerrit query failed with exit status {result.exit_status}: "
                f"{result.stderr.strip()}"
            )
            raise ProtocolError(msg)

        records = [_decode_line(line) for line in result.lines()]
        if not records:
            return []

        for record in records:
            if record.get(K.TYPE) == RecordType.ERROR:
                msg = f"Gerrit rejected query: {record.get(K.MESSAGE, '')}"
                raise ProtocolError(msg)

        row_count = _row_count(records[-1])
        logger.debug("Gerrit row count: %d", row_count)
        if row_count == 0:
            logger.debug("No JSON content to report.")
            return []

        logger.debug("JSON content returned: %s", records)
        return records

    def close(self) -> None:
        self.transport.disconnect()


def _decode_line(line: str) -> RawRecord:
    try:
        decoded = json.loads(line)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in query reply: {line[:200]!r}"
        raise ProtocolError(msg, cause=e) from e
    if not isinstance(decoded, dict):
        msg = f"Expected a JSON object in query reply, got {type(decoded).__name__}"
        raise ProtocolError(msg)
    return decoded


def _row_count(stats: RawRecord) -> int:
    raw = stats.get(K.ROW_COUNT)
    if isinstance(raw, bool) or not isinstance(raw, int):
        msg = f"Query reply does not end with a stats record: {stats!r}"
        raise ProtocolError(msg)
    return raw
