"""
Dashboard overview: everything the admin landing page shows in one call.
"""

from __future__ import annotations

import asyncio

from peptides import service as peptides_service
from profiles import service as profiles_service


async def overview() -> dict:
    users, peptides = await asyncio.gather(
        profiles_service.list_users(),
        peptides_service.list_peptides(),
    )
    return {
        "users": users,
        "peptides": [
            {
                **peptide.model_dump(),
                "short_description_preview": peptides_service.short_description_preview(
                    peptide.short_description
                ),
            }
            for peptide in peptides
        ],
    }
