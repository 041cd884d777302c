"""Read access to the derived views, filtered by the authorization policy."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.auth.policy import Principal
from corpusdb.db.models import Doc, DocToSpeaker, Speaker
from corpusdb.db.views import view_doc2speaker, view_docs, view_speakers


class ViewService:
    """Queries against view_speakers, view_docs and view_doc2speaker."""

    async def _rows(self, db: AsyncSession, query) -> list[dict]:
        result = await db.execute(query)
        return [dict(row._mapping) for row in result]

    async def list_view_speakers(
        self, db: AsyncSession, principal: Optional[Principal] = None
    ) -> list[dict]:
        query = select(view_speakers).order_by(view_speakers.c.id)
        if principal is not None:
            query = query.where(
                view_speakers.c.id.in_(select(Speaker.id).where(principal.speaker_clause()))
            )
        return await self._rows(db, query)

    async def list_view_docs(
        self, db: AsyncSession, principal: Optional[Principal] = None
    ) -> list[dict]:
        query = select(view_docs).order_by(view_docs.c.id)
        if principal is not None:
            query = query.where(
                view_docs.c.id.in_(select(Doc.id).where(principal.doc_clause()))
            )
        return await self._rows(db, query)

    async def list_view_doc2speaker(
        self, db: AsyncSession, principal: Optional[Principal] = None
    ) -> list[dict]:
        query = select(view_doc2speaker).order_by(view_doc2speaker.c.id)
        if principal is not None:
            query = query.where(
                view_doc2speaker.c.id.in_(
                    select(DocToSpeaker.id).where(principal.participant_clause())
                )
            )
        return await self._rows(db, query)


# Singleton instance
view_service = ViewService()
