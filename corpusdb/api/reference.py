"""Enumeration and derived view routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.auth.policy import Principal, get_principal
from corpusdb.db.session import get_db
from corpusdb.schemas.schemas import (
    DocSpeakerView,
    DocView,
    EnumEntry,
    EnumEntryCreate,
    EnumEntryRenumber,
    EnumKind,
    GeoEntry,
    SpeakerView,
)
from corpusdb.services.enum_service import enum_service
from corpusdb.services.view_service import view_service

router = APIRouter(prefix="/api", tags=["Reference data & Views"])


@router.get(
    "/enums/{kind}",
    response_model=list[EnumEntry],
    summary="List an enumeration",
)
async def list_enum(
    kind: EnumKind,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await enum_service.list_entries(db, kind)


@router.post(
    "/enums/{kind}",
    response_model=EnumEntry,
    status_code=status.HTTP_201_CREATED,
    summary="Append to an enumeration",
    description="Append a new label. Places need a region_id. Admin only.",
)
async def add_enum_entry(
    kind: EnumKind,
    request: EnumEntryCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    principal.require_admin()
    entry = await enum_service.add_entry(db, kind, request.label, request.region_id)
    await db.commit()
    return entry


@router.put(
    "/enums/{kind}/{entry_id}/id",
    response_model=EnumEntry,
    summary="Renumber an enumeration entry",
    description="Change an entry's id; all referencing rows follow. Admin only.",
)
async def renumber_enum_entry(
    kind: EnumKind,
    entry_id: int,
    request: EnumEntryRenumber,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    principal.require_admin()
    entry = await enum_service.renumber_entry(db, kind, entry_id, request.new_id)
    await db.commit()
    return entry


@router.delete(
    "/enums/{kind}/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an enumeration entry",
    description="Delete an entry nothing refers to. Admin only.",
)
async def delete_enum_entry(
    kind: EnumKind,
    entry_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    principal.require_admin()
    await enum_service.delete_entry(db, kind, entry_id)
    await db.commit()


@router.get("/views/geo", response_model=list[GeoEntry], summary="Places with regions")
async def get_view_geo(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await enum_service.list_geo(db)


@router.get("/views/speakers", response_model=list[SpeakerView], summary="Speakers, readable")
async def get_view_speakers(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await view_service.list_view_speakers(db, principal)


@router.get("/views/docs", response_model=list[DocView], summary="Documents, readable")
async def get_view_docs(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await view_service.list_view_docs(db, principal)


@router.get(
    "/views/doc2speaker",
    response_model=list[DocSpeakerView],
    summary="Speaker participations with age and education brackets",
)
async def get_view_doc2speaker(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await view_service.list_view_doc2speaker(db, principal)
