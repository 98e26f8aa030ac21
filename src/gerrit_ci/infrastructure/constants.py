"""Infrastructure-layer constants and enums.

Eliminates magic strings across all infrastructure modules.
"""

from __future__ import annotations

from enum import StrEnum

# =============================================================================
# QUERY RESULT FIELD NAMES
# =============================================================================


class GerritJSONKey(StrEnum):
    """JSON keys of the ``gerrit query --format=JSON`` output.

    A fixed, versioned vocabulary owned by the server; never rename these.
    """

    # change
    PROJECT = "project"
    BRANCH = "branch"
    ID = "id"
    NUMBER = "number"
    SUBJECT = "subject"
    OWNER = "owner"
    URL = "url"
    CREATED_ON = "createdOn"
    LAST_UPDATED = "lastUpdated"
    OPEN = "open"
    STATUS = "status"
    CURRENT_PATCH_SET = "currentPatchSet"
    PATCH_SETS = "patchSets"

    # accounts
    NAME = "name"
    EMAIL = "email"

    # patch set
    REVISION = "revision"
    REF = "ref"
    UPLOADER = "uploader"
    APPROVALS = "approvals"
    FILES = "files"

    # approval
    TYPE = "type"
    DESCRIPTION = "description"
    VALUE = "value"
    GRANTED_ON = "grantedOn"
    BY = "by"

    # file
    FILE = "file"

    # trailing stats / error records
    ROW_COUNT = "rowCount"
    MESSAGE = "message"


class RecordType(StrEnum):
    """Values of ``type`` on the non-change records of a query reply."""

    STATS = "stats"
    ERROR = "error"


# =============================================================================
# COMMANDS
# =============================================================================


class GerritCommand(StrEnum):
    """Server-side SSH commands and their flags."""

    QUERY = "gerrit query"
    REVIEW = "gerrit review"
    FORMAT_JSON = "--format=JSON"
    CURRENT_PATCH_SET = "--current-patch-set"
    PATCH_SETS = "--patch-sets"
    ALL_APPROVALS = "--all-approvals"
    FILES = "--files"
    MESSAGE = "--message"
    VERIFIED = "--verified"
