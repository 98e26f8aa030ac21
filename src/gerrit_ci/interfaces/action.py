"""Build-system entry point: composition root and mode runners."""

from __future__ import annotations

import json
import logging
import os
import sys

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial

from gerrit_ci.application.dto import ChangeSummary
from gerrit_ci.application.gerrit_service import GerritService
from gerrit_ci.infrastructure.gerrit.command_client import CommandClient
from gerrit_ci.infrastructure.gerrit.mapper import map_record
from gerrit_ci.infrastructure.gerrit.query_client import QueryClient, QueryOptions
from gerrit_ci.infrastructure.ssh.transport import ParamikoTransport
from gerrit_ci.interfaces.config import GerritConfig
from gerrit_ci.interfaces.env_utils import int_env
from gerrit_ci.shared.exceptions import ConfigurationError, GerritCIError

logger = logging.getLogger(__name__)


def build_service(config: GerritConfig) -> GerritService:
    """Wire transports and clients for one Gerrit server."""
    settings = config.ssh_settings()
    return GerritService(
        queries=QueryClient(
            transport=ParamikoTransport(settings),
            options=QueryOptions(files=config.query_files),
        ),
        commands=CommandClient(
            transport=ParamikoTransport(settings),
            verified_flag=config.verified_flag,
            unverified_flag=config.unverified_flag,
        ),
        mapper=map_record,
        transport_factory=partial(ParamikoTransport, settings),
    )


# =============================================================================
# INPUTS
# =============================================================================


@dataclass(frozen=True)
class ReviewInput:
    """Target patch set and message for the comment / verify modes."""

    change_number: int
    patch_number: int
    message: str
    passed: bool

    @classmethod
    def from_env(cls) -> ReviewInput:
        return cls(
            change_number=int_env("INPUT_CHANGE"),
            patch_number=int_env("INPUT_PATCH_SET"),
            message=os.environ.get("INPUT_MESSAGE", ""),
            passed=os.environ.get("INPUT_PASSED", "false").strip().lower() == "true",
        )


def _require_project(config: GerritConfig) -> str:
    if not config.project:
        msg = "Missing required environment variable: GERRIT_PROJECT"
        raise ConfigurationError(msg)
    return config.project


# =============================================================================
# MODES
# =============================================================================


def _check(service: GerritService, config: GerritConfig) -> bool:
    service.test_connection()
    logger.info("Connected to %s:%d", config.hostname, config.port)
    return True


def _pending(service: GerritService, config: GerritConfig) -> bool:
    change = service.find_oldest_unverified_change(
        _require_project(config), config.query
    )
    if change is None:
        logger.info("No changes waiting for verification")
        return True
    print(json.dumps(ChangeSummary.from_change(change).to_dict()))
    return True


def _list(service: GerritService, config: GerritConfig) -> bool:
    changes = service.list_open_changes(config.project, int_env("INPUT_LIMIT", "0"))
    print(json.dumps([ChangeSummary.from_change(c).to_dict() for c in changes]))
    return True


def _verify(service: GerritService, config: GerritConfig) -> bool:
    review = ReviewInput.from_env()
    return service.post_verification(
        review.passed, review.change_number, review.patch_number, review.message
    )


def _comment(service: GerritService, config: GerritConfig) -> bool:
    review = ReviewInput.from_env()
    return service.post_comment(
        review.change_number, review.patch_number, review.message
    )


MODES: dict[str, Callable[[GerritService, GerritConfig], bool]] = {
    "check": _check,
    "pending": _pending,
    "list": _list,
    "verify": _verify,
    "comment": _comment,
}


def run(mode: str) -> None:
    """Execute one mode against the configured server; exit 1 on failure."""
    try:
        config = GerritConfig.load()
        with build_service(config) as service:
            ok = MODES[mode](service, config)
    except GerritCIError as e:
        logger.error("gerrit-ci failed: %s", e)
        sys.exit(1)
    except Exception:
        logger.exception("Unexpected error")
        sys.exit(1)

    if not ok:
        logger.error("Gerrit rejected the %s command", mode)
        sys.exit(1)
