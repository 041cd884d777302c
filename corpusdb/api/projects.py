"""Project and corpus routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.auth.policy import Principal, get_principal
from corpusdb.db.session import get_db
from corpusdb.schemas.schemas import (
    CorpusCreate,
    CorpusResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)
from corpusdb.services.project_service import project_service

router = APIRouter(prefix="/api", tags=["Projects & Corpora"])


@router.post(
    "/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
    description="Create a project. Admin only.",
)
async def create_project(
    request: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    principal.require_admin()
    project = await project_service.create_project(db, request)
    await db.commit()
    return project


@router.get("/projects", response_model=list[ProjectResponse], summary="List projects")
async def list_projects(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await project_service.list_projects(db)


@router.get("/projects/{project_id}", response_model=ProjectResponse, summary="Get a project")
async def get_project(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await project_service.get_project(db, project_id)


@router.patch(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    summary="Update a project",
    description="Rename a project or change its badge. Admin only.",
)
async def update_project(
    project_id: int,
    request: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    principal.require_admin()
    project = await project_service.update_project(db, project_id, request)
    await db.commit()
    return project


@router.post(
    "/corpora",
    response_model=CorpusResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a corpus",
    description="Create a corpus. Admin only.",
)
async def create_corpus(
    request: CorpusCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    principal.require_admin()
    corpus = await project_service.create_corpus(db, request)
    await db.commit()
    return corpus


@router.get("/corpora", response_model=list[CorpusResponse], summary="List corpora")
async def list_corpora(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await project_service.list_corpora(db)


@router.get("/corpora/{corpus_id}", response_model=CorpusResponse, summary="Get a corpus")
async def get_corpus(
    corpus_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await project_service.get_corpus(db, corpus_id)


@router.patch(
    "/corpora/{corpus_id}",
    response_model=CorpusResponse,
    summary="Rename a corpus",
    description="Rename a corpus. Admin only.",
)
async def update_corpus(
    corpus_id: int,
    request: CorpusCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    principal.require_admin()
    corpus = await project_service.update_corpus(db, corpus_id, request)
    await db.commit()
    return corpus
