"""Document management service."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from corpusdb.auth.policy import Principal
from corpusdb.db.errors import (
    AccessDenied,
    InvalidTransition,
    NotFound,
    translate_integrity_error,
)
from corpusdb.db.models import Doc, DocState, DocToSpeaker, Project, User
from corpusdb.schemas.schemas import DocCreate, DocUpdate, ParticipantCreate
from corpusdb.services.speaker_service import speaker_service
from corpusdb.services.user_service import user_service

logger = logging.getLogger(__name__)


def make_doc_label(
    doc_id: int,
    date: datetime,
    project_badge: str,
    assigner_badge: Optional[str] = None,
) -> str:
    """
    Build a document label such as ``19A029F``.

    Two-digit year of the recording, badge of the assigning supervisor (left
    out when there is none), zero-padded document id, project badge.
    """
    return f"{date:%y}{assigner_badge or ''}{doc_id:03d}{project_badge}"


class DocService:
    """Service for documents, their speakers and the assignment workflow."""

    async def _flush(self, db: AsyncSession, obj) -> None:
        try:
            await db.flush()
        except IntegrityError as e:
            raise translate_integrity_error(e) from e
        await db.refresh(obj)

    async def create_doc(self, db: AsyncSession, request: DocCreate) -> Doc:
        doc = Doc(
            project_id=request.project_id,
            corpus_id=request.corpus_id,
            date=request.date,
            place_id=request.place_id,
        )
        db.add(doc)
        await self._flush(db, doc)

        logger.info(f"Created doc {doc.id} in project {doc.project_id}")
        return doc

    async def get_doc(
        self,
        db: AsyncSession,
        doc_id: int,
        principal: Optional[Principal] = None,
    ) -> Doc:
        """Get a doc; docs outside the caller's scope are reported as missing."""
        query = select(Doc).where(Doc.id == doc_id)
        if principal is not None:
            query = query.where(principal.doc_clause())

        doc = (await db.execute(query)).scalar_one_or_none()
        if doc is None:
            raise NotFound(f"Doc {doc_id} not found")
        return doc

    async def list_docs(
        self,
        db: AsyncSession,
        principal: Principal,
        project_id: Optional[int] = None,
        state: Optional[DocState] = None,
    ) -> list[Doc]:
        query = select(Doc).where(principal.doc_clause())
        if project_id is not None:
            query = query.where(Doc.project_id == project_id)
        if state == DocState.UNASSIGNED:
            query = query.where(Doc.done.is_(None))
        elif state is not None:
            query = query.where(Doc.done == (state == DocState.DONE))

        result = await db.execute(query.order_by(Doc.id))
        return list(result.scalars().all())

    async def update_doc(
        self,
        db: AsyncSession,
        doc_id: int,
        request: DocUpdate,
        principal: Principal,
    ) -> Doc:
        doc = await self.get_doc(db, doc_id, principal)
        for field, value in request.model_dump(exclude_unset=True).items():
            if field != "corpus_id" and value is None:
                continue
            setattr(doc, field, value)
        await self._flush(db, doc)
        return doc

    async def list_labels(self, db: AsyncSession, principal: Principal) -> list[str]:
        """Labels of all docs visible to the caller, ordered by doc id."""
        assigner = aliased(User)
        query = (
            select(Doc.id, Doc.date, Project.badge, assigner.badge)
            .join(Project, Project.id == Doc.project_id)
            .outerjoin(assigner, assigner.id == Doc.assigned_by_id)
            .where(principal.doc_clause())
            .order_by(Doc.id)
        )
        result = await db.execute(query)
        return [
            make_doc_label(doc_id, date, project_badge, assigner_badge)
            for doc_id, date, project_badge, assigner_badge in result.all()
        ]

    # ============== Workflow ==============

    async def assign_doc(
        self,
        db: AsyncSession,
        doc_id: int,
        assigned_to_id: int,
        principal: Principal,
    ) -> Doc:
        """Hand a doc to a user in the caller's scope; resets done to false."""
        principal.require_supervisor()
        principal.require_user(assigned_to_id)
        await user_service.get_user(db, assigned_to_id)

        doc = await self.get_doc(db, doc_id)
        if doc.assigned_to_id is not None and not principal.can_see_user(doc.assigned_to_id):
            raise AccessDenied(f"Doc {doc_id} is assigned outside your supervision scope")

        doc.assigned_to_id = assigned_to_id
        doc.assigned_by_id = principal.user_id
        doc.done = False
        await self._flush(db, doc)

        logger.info(f"Doc {doc_id} assigned to {assigned_to_id} by {principal.user_id}")
        return doc

    async def complete_doc(
        self, db: AsyncSession, doc_id: int, principal: Principal
    ) -> Doc:
        """Mark assigned work as done, ready for the supervisor's check."""
        doc = await self.get_doc(db, doc_id, principal)
        if doc.state != DocState.IN_PROGRESS.value:
            raise InvalidTransition(f"Doc {doc_id} is {doc.state}, not in progress")
        principal.require_user(doc.assigned_to_id)

        doc.done = True
        await self._flush(db, doc)
        logger.info(f"Doc {doc_id} marked done by {principal.user_id}")
        return doc

    async def reopen_doc(
        self, db: AsyncSession, doc_id: int, principal: Principal
    ) -> Doc:
        """Send finished work back to the assignee."""
        principal.require_supervisor()
        doc = await self.get_doc(db, doc_id, principal)
        if doc.state != DocState.DONE.value:
            raise InvalidTransition(f"Doc {doc_id} is {doc.state}, not done")

        doc.done = False
        await self._flush(db, doc)
        logger.info(f"Doc {doc_id} reopened by {principal.user_id}")
        return doc

    # ============== Participants ==============

    async def add_participant(
        self,
        db: AsyncSession,
        doc_id: int,
        request: ParticipantCreate,
        principal: Principal,
    ) -> DocToSpeaker:
        """Record that a visible speaker takes part in a visible doc."""
        await self.get_doc(db, doc_id, principal)
        await speaker_service.get_speaker(db, request.speaker_id, principal)

        link = DocToSpeaker(doc_id=doc_id, speaker_id=request.speaker_id, words=request.words)
        db.add(link)
        await self._flush(db, link)

        logger.info(f"Speaker {request.speaker_id} added to doc {doc_id}")
        return link

    async def list_participants(
        self, db: AsyncSession, doc_id: int, principal: Principal
    ) -> list[DocToSpeaker]:
        await self.get_doc(db, doc_id, principal)
        result = await db.execute(
            select(DocToSpeaker)
            .where(DocToSpeaker.doc_id == doc_id)
            .where(principal.participant_clause())
            .order_by(DocToSpeaker.id)
        )
        return list(result.scalars().all())

    async def update_words(
        self,
        db: AsyncSession,
        link_id: int,
        words: Optional[int],
        principal: Principal,
    ) -> DocToSpeaker:
        result = await db.execute(
            select(DocToSpeaker)
            .where(DocToSpeaker.id == link_id)
            .where(principal.participant_clause())
        )
        link = result.scalar_one_or_none()
        if link is None:
            raise NotFound(f"Participation {link_id} not found")

        link.words = words
        await self._flush(db, link)
        return link


# Singleton instance
doc_service = DocService()
