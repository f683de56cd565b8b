"""
Taxonomy business logic.

Categories are a fixed list managed in the database; effects and benefits
can be created from the peptide editor.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import repository, schemas

logger = logging.getLogger(__name__)


def _clean_term(payload: schemas.CreateTermRequest, *, kind: str) -> tuple[str, str | None]:
    name = (payload.name or "").strip()
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{kind} name cannot be empty.",
        )
    description = (payload.description or "").strip() or None
    return name, description


async def list_categories() -> list[schemas.CategoryResponse]:
    rows = await repository.list_categories()
    return [schemas.CategoryResponse(id=row["id"], name=str(row["name"])) for row in rows]


async def list_effects() -> list[schemas.TermResponse]:
    rows = await repository.list_effects()
    return [schemas.TermResponse(**row) for row in rows]


async def list_benefits() -> list[schemas.TermResponse]:
    rows = await repository.list_benefits()
    return [schemas.TermResponse(**row) for row in rows]


async def create_effect(payload: schemas.CreateTermRequest) -> schemas.TermResponse:
    name, description = _clean_term(payload, kind="Effect")
    row = await repository.insert_effect(name=name, description=description)
    logger.info("effect_created effect_id=%s", row["id"])
    return schemas.TermResponse(**row)


async def create_benefit(payload: schemas.CreateTermRequest) -> schemas.TermResponse:
    name, description = _clean_term(payload, kind="Benefit")
    row = await repository.insert_benefit(name=name, description=description)
    logger.info("benefit_created benefit_id=%s", row["id"])
    return schemas.TermResponse(**row)
