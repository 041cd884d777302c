"""Speaker management service."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.auth.policy import Principal
from corpusdb.db.errors import NotFound, translate_integrity_error
from corpusdb.db.models import Speaker
from corpusdb.schemas.schemas import SpeakerCreate, SpeakerUpdate

logger = logging.getLogger(__name__)


class SpeakerService:
    """Service for speakers, scoped by the caller's visibility."""

    async def create_speaker(
        self,
        db: AsyncSession,
        request: SpeakerCreate,
        principal: Principal,
    ) -> Speaker:
        """
        Register a speaker on behalf of a user.

        Args:
            db: Database session
            request: Speaker creation request
            principal: Acting user; the owning user must be within their scope

        Returns:
            Created Speaker
        """
        user_id = request.user_id if request.user_id is not None else principal.user_id
        principal.require_user(user_id)

        speaker = Speaker(
            user_id=user_id,
            project_id=request.project_id,
            nickname=request.nickname,
            gender_id=request.gender_id,
            education_id=request.education_id,
            place_id=request.place_id,
            year=request.year,
        )
        db.add(speaker)
        try:
            await db.flush()
        except IntegrityError as e:
            raise translate_integrity_error(e) from e
        await db.refresh(speaker)

        logger.info(f"Created speaker {speaker.id} for user {user_id}")
        return speaker

    async def get_speaker(
        self,
        db: AsyncSession,
        speaker_id: int,
        principal: Optional[Principal] = None,
    ) -> Speaker:
        """Get a speaker; invisible speakers are reported as missing."""
        query = select(Speaker).where(Speaker.id == speaker_id)
        if principal is not None:
            query = query.where(principal.speaker_clause())

        speaker = (await db.execute(query)).scalar_one_or_none()
        if speaker is None:
            raise NotFound(f"Speaker {speaker_id} not found")
        return speaker

    async def list_speakers(
        self,
        db: AsyncSession,
        principal: Principal,
        project_id: Optional[int] = None,
    ) -> list[Speaker]:
        query = select(Speaker).where(principal.speaker_clause())
        if project_id is not None:
            query = query.where(Speaker.project_id == project_id)

        result = await db.execute(query.order_by(Speaker.id))
        return list(result.scalars().all())

    async def update_speaker(
        self,
        db: AsyncSession,
        speaker_id: int,
        request: SpeakerUpdate,
        principal: Principal,
    ) -> Speaker:
        speaker = await self.get_speaker(db, speaker_id, principal)
        for field, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(speaker, field, value)

        try:
            await db.flush()
        except IntegrityError as e:
            raise translate_integrity_error(e) from e
        await db.refresh(speaker)
        return speaker


# Singleton instance
speaker_service = SpeakerService()
