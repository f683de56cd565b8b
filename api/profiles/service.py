"""
Admin user management: list profiles, change roles.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import repository, schemas

logger = logging.getLogger(__name__)


def _to_profile_response(row: dict) -> schemas.ProfileResponse:
    return schemas.ProfileResponse(
        id=row["id"],
        clerk_user_id=str(row["clerk_user_id"]),
        email=row.get("email"),
        role=str(row["role"]),
        created_at=row.get("created_at"),
    )


async def list_users() -> list[schemas.ProfileResponse]:
    rows = await repository.list_profiles()
    return [_to_profile_response(row) for row in rows]


async def update_role(clerk_user_id: str, new_role: str, *, changed_by: str | None = None) -> schemas.ProfileResponse:
    row = await repository.update_role(clerk_user_id, role=new_role)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User profile not found.",
        )
    logger.info("role_updated user_id=%s role=%s changed_by=%s", clerk_user_id, new_role, changed_by)
    return _to_profile_response(row)


def toggled_role(current_role: str | None) -> str:
    return "public" if current_role == "admin" else "admin"


async def toggle_role(clerk_user_id: str, *, changed_by: str | None = None) -> schemas.ProfileResponse:
    current = await repository.get_profile_by_user_id(clerk_user_id)
    if current is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User profile not found.",
        )
    return await update_role(
        clerk_user_id,
        toggled_role(current.get("role")),
        changed_by=changed_by,
    )
