"""
Taxonomy API endpoints (categories, effects, benefits).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.get("/categories")
async def list_categories(
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    rows = await service.list_categories()
    return {"categories": rows, "count": len(rows)}


@router.get("/effects")
async def list_effects(
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    rows = await service.list_effects()
    return {"effects": rows, "count": len(rows)}


@router.post("/effects", status_code=status.HTTP_201_CREATED, response_model=schemas.TermResponse)
async def create_effect(
    request: schemas.CreateTermRequest,
    _: dict = Depends(auth_dependencies.require_admin),
) -> schemas.TermResponse:
    return await service.create_effect(request)


@router.get("/benefits")
async def list_benefits(
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    rows = await service.list_benefits()
    return {"benefits": rows, "count": len(rows)}


@router.post("/benefits", status_code=status.HTTP_201_CREATED, response_model=schemas.TermResponse)
async def create_benefit(
    request: schemas.CreateTermRequest,
    _: dict = Depends(auth_dependencies.require_admin),
) -> schemas.TermResponse:
    return await service.create_benefit(request)
