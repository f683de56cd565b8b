"""
Pydantic schemas for taxonomy endpoints.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field


class CreateTermRequest(BaseModel):
    # Blank names are rejected in the service so the message names the term kind.
    name: str = Field(..., max_length=200)
    description: str | None = Field(default=None, max_length=2000)


class CategoryResponse(BaseModel):
    id: UUID
    name: str


class TermResponse(BaseModel):
    id: UUID
    name: str
    description: str | None = None
