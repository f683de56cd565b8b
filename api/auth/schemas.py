"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel


class MeResponse(BaseModel):
    user_id: str
    role: str | None = None
    is_admin: bool = False
