"""Project and corpus management service."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.db.errors import NotFound, translate_integrity_error
from corpusdb.db.models import Corpus, Project
from corpusdb.schemas.schemas import CorpusCreate, ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for projects and corpora."""

    async def _flush(self, db: AsyncSession, obj) -> None:
        try:
            await db.flush()
        except IntegrityError as e:
            raise translate_integrity_error(e) from e
        await db.refresh(obj)

    async def create_project(self, db: AsyncSession, request: ProjectCreate) -> Project:
        project = Project(label=request.label, badge=request.badge)
        db.add(project)
        await self._flush(db, project)
        logger.info(f"Created project {project.id} ({project.label}/{project.badge})")
        return project

    async def get_project(self, db: AsyncSession, project_id: int) -> Project:
        project = await db.get(Project, project_id)
        if project is None:
            raise NotFound(f"Project {project_id} not found")
        return project

    async def list_projects(self, db: AsyncSession) -> list[Project]:
        result = await db.execute(select(Project).order_by(Project.id))
        return list(result.scalars().all())

    async def update_project(
        self, db: AsyncSession, project_id: int, request: ProjectUpdate
    ) -> Project:
        project = await self.get_project(db, project_id)
        for field, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(project, field, value)
        await self._flush(db, project)
        return project

    async def create_corpus(self, db: AsyncSession, request: CorpusCreate) -> Corpus:
        corpus = Corpus(label=request.label)
        db.add(corpus)
        await self._flush(db, corpus)
        logger.info(f"Created corpus {corpus.id} ({corpus.label})")
        return corpus

    async def get_corpus(self, db: AsyncSession, corpus_id: int) -> Corpus:
        corpus = await db.get(Corpus, corpus_id)
        if corpus is None:
            raise NotFound(f"Corpus {corpus_id} not found")
        return corpus

    async def list_corpora(self, db: AsyncSession) -> list[Corpus]:
        result = await db.execute(select(Corpus).order_by(Corpus.id))
        return list(result.scalars().all())

    async def update_corpus(
        self, db: AsyncSession, corpus_id: int, request: CorpusCreate
    ) -> Corpus:
        corpus = await self.get_corpus(db, corpus_id)
        corpus.label = request.label
        await self._flush(db, corpus)
        return corpus


# Singleton instance
project_service = ProjectService()
