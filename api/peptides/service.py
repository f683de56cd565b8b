"""
Peptide business logic.

Saving a peptide rewrites its relations wholesale: the peptide row is
inserted or updated, then every taxonomy join row and link row is deleted
and re-inserted from the form. All of it runs in one transaction.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, TypeVar
from uuid import UUID

import asyncpg
from fastapi import HTTPException, status

from core import db

from . import repository, schemas

logger = logging.getLogger(__name__)

T = TypeVar("T")

SHORT_DESCRIPTION_PREVIEW_CHARS = 100


def unique_in_order(values: Iterable[T]) -> list[T]:
    return list(dict.fromkeys(values))


def normalize_links(links: Iterable[schemas.PeptideLinkInput]) -> list[dict]:
    """
    Turn editor link rows into insertable rows.

    Rows with a blank URL are dropped. URL and label are trimmed; an empty
    label and a zero/missing position are stored as NULL.
    """
    rows: list[dict] = []
    for link in links:
        url = (link.url or "").strip()
        if not url:
            continue
        rows.append(
            {
                "link_type": link.link_type,
                "url": url,
                "label": (link.label or "").strip() or None,
                "position": link.position or None,
            }
        )
    return rows


def _constraint_error(exc: asyncpg.PostgresError) -> HTTPException:
    table = getattr(exc, "table_name", None) or "peptide"
    if isinstance(exc, asyncpg.ForeignKeyViolationError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown reference in {table}: {getattr(exc, 'detail', None) or exc}",
        )
    if isinstance(exc, asyncpg.UniqueViolationError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Duplicate entry in {table}.",
        )
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Invalid value for {table}.",
    )


async def save_peptide(
    form: schemas.PeptideForm,
    *,
    peptide_id: UUID | None = None,
) -> schemas.SavePeptideResponse:
    """
    Create (peptide_id=None) or update a peptide together with its relations.
    """
    links = normalize_links(form.links)
    taxonomy_ids = {
        "categories": unique_in_order(form.selected_category_ids),
        "effects": unique_in_order(form.selected_effect_ids),
        "benefits": unique_in_order(form.selected_benefit_ids),
    }

    try:
        async with db.transaction() as conn:
            if peptide_id is None:
                row = await repository.insert_peptide(
                    name=form.name,
                    short_description=form.short_description,
                    description=form.description,
                    conn=conn,
                )
            else:
                row = await repository.update_peptide(
                    peptide_id,
                    name=form.name,
                    short_description=form.short_description,
                    description=form.description,
                    conn=conn,
                )
                if row is None:
                    raise HTTPException(
                        status_code=status.HTTP_404_NOT_FOUND,
                        detail="Peptide not found.",
                    )

            current_id = row["id"]
            await repository.clear_relations(current_id, conn=conn)
            for kind, ids in taxonomy_ids.items():
                await repository.insert_taxonomy_ids(current_id, kind, ids, conn=conn)
            await repository.insert_links(current_id, links, conn=conn)
    except (
        asyncpg.ForeignKeyViolationError,
        asyncpg.UniqueViolationError,
        asyncpg.CheckViolationError,
    ) as exc:
        logger.warning("peptide_save_rejected peptide_id=%s error=%s", peptide_id, exc)
        raise _constraint_error(exc) from exc

    logger.info(
        "peptide_saved peptide_id=%s created=%s links=%s",
        current_id,
        peptide_id is None,
        len(links),
    )
    return schemas.SavePeptideResponse(peptide_id=current_id)


async def delete_peptide(peptide_id: UUID) -> dict:
    deleted = await repository.delete_peptide(peptide_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Peptide not found.",
        )
    logger.info("peptide_deleted peptide_id=%s", peptide_id)
    return {"ok": True, "peptide_id": peptide_id}


async def get_peptide_for_edit(peptide_id: UUID) -> schemas.PeptideDetail:
    peptide = await repository.get_peptide(peptide_id)
    if peptide is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Peptide not found.",
        )

    category_ids, effect_ids, benefit_ids, links = await asyncio.gather(
        repository.list_taxonomy_ids(peptide_id, "categories"),
        repository.list_taxonomy_ids(peptide_id, "effects"),
        repository.list_taxonomy_ids(peptide_id, "benefits"),
        repository.list_links(peptide_id),
    )

    return schemas.PeptideDetail(
        id=peptide["id"],
        name=str(peptide["name"]),
        short_description=peptide.get("short_description") or "",
        description=peptide.get("description") or "",
        selected_category_ids=category_ids,
        selected_effect_ids=effect_ids,
        selected_benefit_ids=benefit_ids,
        links=[schemas.PeptideLinkResponse(**link) for link in links],
    )


async def list_peptides() -> list[schemas.PeptideSummary]:
    rows = await repository.list_peptides()
    return [schemas.PeptideSummary(**row) for row in rows]


def short_description_preview(text: str | None) -> str:
    if not text:
        return "N/A"
    if len(text) > SHORT_DESCRIPTION_PREVIEW_CHARS:
        return text[:SHORT_DESCRIPTION_PREVIEW_CHARS] + "..."
    return text
