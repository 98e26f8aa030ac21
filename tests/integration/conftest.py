"""Shared fixtures for integration tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from gerrit_ci.application.gerrit_service import GerritService
from gerrit_ci.infrastructure.gerrit.command_client import CommandClient
from gerrit_ci.infrastructure.gerrit.mapper import map_record
from gerrit_ci.infrastructure.gerrit.query_client import QueryClient, QueryOptions


@pytest.fixture
def query_transport(make_transport: Callable[[], Any]) -> Any:
    return make_transport()


@pytest.fixture
def command_transport(make_transport: Callable[[], Any]) -> Any:
    return make_transport()


@pytest.fixture
def gerrit(
    query_transport: Any,
    command_transport: Any,
    make_transport: Callable[[], Any],
) -> GerritService:
    """A fully wired service whose sessions are scripted fakes."""
    return GerritService(
        queries=QueryClient(
            transport=query_transport,
            options=QueryOptions(files=True),
        ),
        commands=CommandClient(transport=command_transport),
        mapper=map_record,
        transport_factory=make_transport,
    )
