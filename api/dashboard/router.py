"""
Dashboard API endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies

from . import service

router = APIRouter()


@router.get("/dashboard")
async def dashboard(
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.overview()
