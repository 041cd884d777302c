"""Speaker routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.auth.policy import Principal, get_principal
from corpusdb.db.session import get_db
from corpusdb.schemas.schemas import SpeakerCreate, SpeakerResponse, SpeakerUpdate
from corpusdb.services.speaker_service import speaker_service

router = APIRouter(prefix="/api/speakers", tags=["Speakers"])


@router.post(
    "",
    response_model=SpeakerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a speaker",
    description="Register a speaker owned by you or by a user in your supervision scope.",
)
async def create_speaker(
    request: SpeakerCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    speaker = await speaker_service.create_speaker(db, request, principal)
    await db.commit()
    return speaker


@router.get("", response_model=list[SpeakerResponse], summary="List speakers")
async def list_speakers(
    project_id: Optional[int] = Query(None, description="Filter by project"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await speaker_service.list_speakers(db, principal, project_id)


@router.get("/{speaker_id}", response_model=SpeakerResponse, summary="Get a speaker")
async def get_speaker(
    speaker_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await speaker_service.get_speaker(db, speaker_id, principal)


@router.patch("/{speaker_id}", response_model=SpeakerResponse, summary="Update a speaker")
async def update_speaker(
    speaker_id: int,
    request: SpeakerUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    speaker = await speaker_service.update_speaker(db, speaker_id, request, principal)
    await db.commit()
    return speaker
