"""
Admin profile persistence (the `adm_profile` role table).

Rows are keyed by the identity provider's user id (`clerk_user_id`).
"""

from __future__ import annotations

from core import db

_PROFILE_COLUMNS = "id, clerk_user_id, email, role, created_at"


async def get_profile_by_user_id(clerk_user_id: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_PROFILE_COLUMNS}
        FROM adm_profile
        WHERE clerk_user_id = $1
        """,
        clerk_user_id,
    )


async def list_profiles() -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_PROFILE_COLUMNS}
        FROM adm_profile
        ORDER BY email ASC NULLS LAST, created_at ASC
        """
    )


async def insert_profile(
    *,
    clerk_user_id: str,
    email: str | None,
    role: str = "public",
) -> dict | None:
    """
    Insert a profile. Returns None if one already exists for this user.
    """
    return await db.fetch_one(
        f"""
        INSERT INTO adm_profile (clerk_user_id, email, role)
        VALUES ($1, $2, $3)
        ON CONFLICT (clerk_user_id) DO NOTHING
        RETURNING {_PROFILE_COLUMNS}
        """,
        clerk_user_id,
        email,
        role,
    )


async def update_role(clerk_user_id: str, *, role: str) -> dict | None:
    return await db.fetch_one(
        f"""
        UPDATE adm_profile
        SET role = $2
        WHERE clerk_user_id = $1
        RETURNING {_PROFILE_COLUMNS}
        """,
        clerk_user_id,
        role,
    )


async def update_email(clerk_user_id: str, *, email: str | None) -> dict | None:
    return await db.fetch_one(
        f"""
        UPDATE adm_profile
        SET email = $2
        WHERE clerk_user_id = $1
        RETURNING {_PROFILE_COLUMNS}
        """,
        clerk_user_id,
        email,
    )


async def delete_profile(clerk_user_id: str) -> bool:
    status_tag = await db.execute(
        """
        DELETE FROM adm_profile
        WHERE clerk_user_id = $1
        """,
        clerk_user_id,
    )
    return db.affected_rows(status_tag) > 0
