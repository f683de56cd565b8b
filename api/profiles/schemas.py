"""
Pydantic schemas for admin user management.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

Role = Literal["admin", "public"]


class UpdateRoleRequest(BaseModel):
    role: Role


class ProfileResponse(BaseModel):
    id: UUID
    clerk_user_id: str
    email: str | None = None
    role: str
    created_at: datetime | None = None
