"""Pydantic schemas for JSON-encoded BOM and VEX submissions."""

from __future__ import annotations

import base64
import binascii
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator


def _require_base64(value: str) -> str:
    try:
        base64.b64decode(value, validate=True)
    except binascii.Error as exc:
        raise ValueError("Value must be Base64 encoded") from exc
    return value


class _ProjectSubmission(BaseModel):
    """Project identification shared by artifact submissions."""

    model_config = ConfigDict(populate_by_name=True)

    project: UUID | None = None
    project_name: str | None = Field(default=None, alias="projectName")
    project_version: str | None = Field(default=None, alias="projectVersion")

    @model_validator(mode="after")
    def _require_project_identity(self):
        if self.project is None and not (self.project_name and self.project_version):
            raise ValueError("Either project or projectName and projectVersion must be provided")
        return self


class BomSubmitRequest(_ProjectSubmission):
    """Payload to upload a Base64 encoded BOM."""

    project_tags: list[str] | None = Field(default=None, alias="projectTags")
    auto_create: bool = Field(default=False, alias="autoCreate")
    parent_uuid: UUID | None = Field(default=None, alias="parentUUID")
    parent_name: str | None = Field(default=None, alias="parentName")
    parent_version: str | None = Field(default=None, alias="parentVersion")
    is_latest_project_version: bool = Field(default=False, alias="isLatestProjectVersion")
    bom: str

    @field_validator("bom")
    @classmethod
    def _validate_bom(cls, value: str) -> str:
        return _require_base64(value)


class VexSubmitRequest(_ProjectSubmission):
    """Payload to upload a Base64 encoded VEX document."""

    vex: str

    @field_validator("vex")
    @classmethod
    def _validate_vex(cls, value: str) -> str:
        return _require_base64(value)


class SubmissionToken(BaseModel):
    """Token returned for an accepted submission."""

    token: UUID
