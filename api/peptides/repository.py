"""
Peptide persistence (raw SQL).

A peptide owns three taxonomy join tables and an ordered links table. The
write helpers take `conn=` so the service can run a full save inside one
transaction.
"""

from __future__ import annotations

from typing import Iterable
from uuid import UUID

import asyncpg

from core import db

# taxonomy kind -> (join table, foreign-key column)
TAXONOMY_JOINS: dict[str, tuple[str, str]] = {
    "categories": ("peptide_category_map", "category_id"),
    "effects": ("peptide_effects", "effect_id"),
    "benefits": ("peptide_benefits", "benefit_id"),
}


def _join_for(kind: str) -> tuple[str, str]:
    try:
        return TAXONOMY_JOINS[kind]
    except KeyError:
        raise ValueError(f"Unknown taxonomy kind: {kind}") from None


async def list_peptides() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, name, short_description, created_at
        FROM peptides
        ORDER BY created_at DESC, id DESC
        """
    )


async def get_peptide(peptide_id: UUID) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, name, short_description, description, created_at, updated_at
        FROM peptides
        WHERE id = $1
        """,
        peptide_id,
    )


async def insert_peptide(
    *,
    name: str,
    short_description: str,
    description: str,
    conn: asyncpg.Connection | None = None,
) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO peptides (name, short_description, description)
        VALUES ($1, $2, $3)
        RETURNING id
        """,
        name,
        short_description,
        description,
        conn=conn,
    )
    if row is None:
        raise RuntimeError("Failed to insert peptide.")
    return row


async def update_peptide(
    peptide_id: UUID,
    *,
    name: str,
    short_description: str,
    description: str,
    conn: asyncpg.Connection | None = None,
) -> dict | None:
    return await db.fetch_one(
        """
        UPDATE peptides
        SET name = $2,
            short_description = $3,
            description = $4,
            updated_at = now()
        WHERE id = $1
        RETURNING id
        """,
        peptide_id,
        name,
        short_description,
        description,
        conn=conn,
    )


async def delete_peptide(peptide_id: UUID) -> bool:
    # Join and link rows are removed by ON DELETE CASCADE.
    status_tag = await db.execute("DELETE FROM peptides WHERE id = $1", peptide_id)
    return db.affected_rows(status_tag) > 0


async def clear_relations(peptide_id: UUID, *, conn: asyncpg.Connection | None = None) -> None:
    for table, _ in TAXONOMY_JOINS.values():
        await db.execute(f"DELETE FROM {table} WHERE peptide_id = $1", peptide_id, conn=conn)
    await db.execute("DELETE FROM peptide_links WHERE peptide_id = $1", peptide_id, conn=conn)


async def insert_taxonomy_ids(
    peptide_id: UUID,
    kind: str,
    ids: list[UUID],
    *,
    conn: asyncpg.Connection | None = None,
) -> None:
    if not ids:
        return None
    table, column = _join_for(kind)
    await db.execute(
        f"""
        INSERT INTO {table} (peptide_id, {column})
        SELECT $1, x
        FROM unnest($2::uuid[]) AS x
        """,
        peptide_id,
        ids,
        conn=conn,
    )


async def list_taxonomy_ids(peptide_id: UUID, kind: str) -> list[UUID]:
    table, column = _join_for(kind)
    rows = await db.fetch_all(
        f"""
        SELECT {column} AS term_id
        FROM {table}
        WHERE peptide_id = $1
        """,
        peptide_id,
    )
    return [row["term_id"] for row in rows]


async def insert_links(
    peptide_id: UUID,
    links: Iterable[dict],
    *,
    conn: asyncpg.Connection | None = None,
) -> None:
    await db.execute_many(
        """
        INSERT INTO peptide_links (peptide_id, link_type, url, label, position)
        VALUES ($1, $2, $3, $4, $5)
        """,
        (
            (peptide_id, link["link_type"], link["url"], link["label"], link["position"])
            for link in links
        ),
        conn=conn,
    )


async def list_links(peptide_id: UUID) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, link_type, url, label, position
        FROM peptide_links
        WHERE peptide_id = $1
        ORDER BY position ASC NULLS LAST, created_at ASC, id ASC
        """,
        peptide_id,
    )
