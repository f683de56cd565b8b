"""
Peptide API endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.get("/peptides")
async def list_peptides(
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    peptides = await service.list_peptides()
    return {"peptides": peptides, "count": len(peptides)}


@router.get("/peptides/{peptide_id}", response_model=schemas.PeptideDetail)
async def get_peptide(
    peptide_id: UUID,
    _: dict = Depends(auth_dependencies.require_admin),
) -> schemas.PeptideDetail:
    return await service.get_peptide_for_edit(peptide_id)


@router.post(
    "/peptides",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.SavePeptideResponse,
)
async def create_peptide(
    form: schemas.PeptideForm,
    _: dict = Depends(auth_dependencies.require_admin),
) -> schemas.SavePeptideResponse:
    return await service.save_peptide(form)


@router.put("/peptides/{peptide_id}", response_model=schemas.SavePeptideResponse)
async def update_peptide(
    peptide_id: UUID,
    form: schemas.PeptideForm,
    _: dict = Depends(auth_dependencies.require_admin),
) -> schemas.SavePeptideResponse:
    return await service.save_peptide(form, peptide_id=peptide_id)


@router.delete("/peptides/{peptide_id}")
async def delete_peptide(
    peptide_id: UUID,
    _: dict = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.delete_peptide(peptide_id)
