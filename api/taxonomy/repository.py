"""
Taxonomy persistence: categories, effects, benefits.
"""

from __future__ import annotations

from core import db


async def list_categories() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, name
        FROM categories
        ORDER BY name ASC
        """
    )


async def list_effects() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, name, description
        FROM effects
        ORDER BY name ASC
        """
    )


async def list_benefits() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, name, description
        FROM benefits
        ORDER BY name ASC
        """
    )


async def insert_effect(*, name: str, description: str | None) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO effects (name, description)
        VALUES ($1, $2)
        RETURNING id, name, description
        """,
        name,
        description,
    )
    if row is None:
        raise RuntimeError("Failed to insert effect.")
    return row


async def insert_benefit(*, name: str, description: str | None) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO benefits (name, description)
        VALUES ($1, $2)
        RETURNING id, name, description
        """,
        name,
        description,
    )
    if row is None:
        raise RuntimeError("Failed to insert benefit.")
    return row
