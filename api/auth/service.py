"""
Auth business logic.

Identity lives with the external provider; this service only turns a
verified session into a user id and looks up the local role.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from profiles import repository as profiles_repository

from . import schemas, security

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


async def get_user_from_session_token(session_token: str) -> dict:
    try:
        payload = await security.decode_session_token(session_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    return {
        "id": str(payload["sub"]).strip(),
        "session_id": payload.get("sid"),
    }


async def get_user_role(user_id: str | None) -> str | None:
    if not user_id:
        return None
    profile = await profiles_repository.get_profile_by_user_id(user_id)
    if profile is None:
        return None
    return profile.get("role")


async def require_admin_profile(user_id: str) -> dict:
    profile = await profiles_repository.get_profile_by_user_id(user_id)
    if profile is None:
        logger.warning("admin_denied user_id=%s reason=no_profile", user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No admin profile for this user.",
        )

    role = profile.get("role")
    if role != ADMIN_ROLE:
        logger.warning("admin_denied user_id=%s reason=role role=%s", user_id, role)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required.",
        )
    return profile


async def me(user_id: str) -> schemas.MeResponse:
    role = await get_user_role(user_id)
    return schemas.MeResponse(user_id=user_id, role=role, is_admin=role == ADMIN_ROLE)
