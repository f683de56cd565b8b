"""
Peptide API schemas (request/response models).

`PeptideForm` is the editor payload used for both create and update; the
read side returns the same shape so the editor can round-trip it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

LinkType = Literal["vendor", "learn_more", "reference", "other"]

NAME_MAX_CHARS = 2000
SHORT_DESCRIPTION_MAX_CHARS = 500
DESCRIPTION_MAX_CHARS = 5000


class PeptideLinkInput(BaseModel):
    id: UUID | None = None
    link_type: LinkType = "vendor"
    # Blank URLs are allowed here; the service drops those rows.
    url: str = Field(default="", max_length=2048)
    label: str | None = Field(default=None, max_length=300)
    position: int | None = None


class PeptideForm(BaseModel):
    name: str
    short_description: str = Field(default="", max_length=SHORT_DESCRIPTION_MAX_CHARS)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_CHARS)
    selected_category_ids: list[UUID] = Field(default_factory=list)
    selected_effect_ids: list[UUID] = Field(default_factory=list)
    selected_benefit_ids: list[UUID] = Field(default_factory=list)
    links: list[PeptideLinkInput] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Peptide name is required.")
        if len(value) > NAME_MAX_CHARS:
            raise ValueError(f"Peptide name must be at most {NAME_MAX_CHARS} characters.")
        return value


class PeptideLinkResponse(BaseModel):
    id: UUID
    link_type: str
    url: str
    label: str | None = None
    position: int | None = None


class PeptideDetail(BaseModel):
    id: UUID
    name: str
    short_description: str = ""
    description: str = ""
    selected_category_ids: list[UUID] = Field(default_factory=list)
    selected_effect_ids: list[UUID] = Field(default_factory=list)
    selected_benefit_ids: list[UUID] = Field(default_factory=list)
    links: list[PeptideLinkResponse] = Field(default_factory=list)


class PeptideSummary(BaseModel):
    id: UUID
    name: str
    short_description: str | None = None
    created_at: datetime


class SavePeptideResponse(BaseModel):
    ok: bool = True
    peptide_id: UUID
