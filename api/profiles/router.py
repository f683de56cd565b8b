"""
Admin user-management endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.get("/users")
async def list_users(
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    users = await service.list_users()
    return {"users": users, "count": len(users)}


@router.patch("/users/{clerk_user_id}/role", response_model=schemas.ProfileResponse)
async def update_role(
    clerk_user_id: str,
    request: schemas.UpdateRoleRequest,
    admin: dict = Depends(auth_dependencies.require_admin),
) -> schemas.ProfileResponse:
    return await service.update_role(
        clerk_user_id,
        request.role,
        changed_by=str(admin["clerk_user_id"]),
    )


@router.post("/users/{clerk_user_id}/role/toggle", response_model=schemas.ProfileResponse)
async def toggle_role(
    clerk_user_id: str,
    admin: dict = Depends(auth_dependencies.require_admin),
) -> schemas.ProfileResponse:
    return await service.toggle_role(clerk_user_id, changed_by=str(admin["clerk_user_id"]))
