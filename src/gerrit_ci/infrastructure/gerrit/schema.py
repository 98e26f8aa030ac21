"""Pydantic models for the JSON records of a Gerrit query reply.

These describe the wire shape only; ``mapper`` turns a validated record
into domain entities.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from gerrit_ci.infrastructure.constants import GerritJSONKey as K


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PersonRecord(_Record):
    """Owner or uploader; both keys are required."""

    name: str
    email: str


class GrantorRecord(_Record):
    """The ``by`` object of an approval; email is optional."""

    name: str
    email: str | None = None


class ApprovalRecord(_Record):
    type: str
    value: int
    granted_on: int = Field(alias=K.GRANTED_ON)
    by: GrantorRecord
    description: str | None = None
    email: str | None = None

    @property
    def has_email_key(self) -> bool:
        """Whether the approval object itself carried an ``email`` key."""
        return "email" in self.model_fields_set


class FileRecord(_Record):
    file: str
    type: str


class PatchSetRecord(_Record):
    number: int
    revision: str
    ref: str
    uploader: PersonRecord
    created_on: int = Field(alias=K.CREATED_ON)
    approvals: list[ApprovalRecord] | None = None
    files: list[FileRecord] | None = None


class ChangeRecord(_Record):
    project: str
    branch: str
    id: str
    number: int
    subject: str
    owner: PersonRecord
    url: str
    created_on: int = Field(alias=K.CREATED_ON)
    last_updated: int = Field(alias=K.LAST_UPDATED)
    open: bool
    status: str
    current_patch_set: PatchSetRecord = Field(alias=K.CURRENT_PATCH_SET)
    patch_sets: list[PatchSetRecord] = Field(alias=K.PATCH_SETS)
