"""Centralized defaults for gerrit-ci. Overridable via configuration."""

from __future__ import annotations

# =============================================================================
# CONNECTION
# =============================================================================

DEFAULT_SSH_PORT = 29418
DEFAULT_CONNECT_TIMEOUT_SECONDS = 30
DEFAULT_COMMAND_TIMEOUT_SECONDS = 120

# =============================================================================
# REVIEW LABELS
# =============================================================================

DEFAULT_VERIFIED_FLAG = "+1"
DEFAULT_UNVERIFIED_FLAG = "-1"

# =============================================================================
# QUERIES
# =============================================================================

DEFAULT_QUERY = "is:open (-is:reviewed OR (-label:Verified=-1 -label:Verified=1))"
"""Changes that are open and either unreviewed or carry no decisive Verified vote."""
