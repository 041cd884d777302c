"""Document routes, including the label list consumed by the front end."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.auth.policy import Principal, get_principal
from corpusdb.db.models import DocState
from corpusdb.db.session import get_db
from corpusdb.schemas.schemas import (
    DocAssign,
    DocCreate,
    DocResponse,
    DocumentListResponse,
    DocUpdate,
    ParticipantCreate,
    ParticipantResponse,
    ParticipantUpdate,
)
from corpusdb.services.doc_service import doc_service

router = APIRouter(prefix="/api", tags=["Documents"])


@router.get(
    "/documents",
    response_model=DocumentListResponse,
    summary="List document labels",
    description="Labels of all documents visible to the caller, as used by the front end.",
)
async def list_document_labels(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    labels = await doc_service.list_labels(db, principal)
    return DocumentListResponse(data=labels)


@router.post(
    "/docs",
    response_model=DocResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a document",
    description="Register a new recording. Supervisors and admins only.",
)
async def create_doc(
    request: DocCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    principal.require_supervisor()
    doc = await doc_service.create_doc(db, request)
    await db.commit()
    return doc


@router.get(
    "/docs",
    response_model=list[DocResponse],
    summary="List documents",
)
async def list_docs(
    project_id: Optional[int] = Query(None, description="Filter by project"),
    state_filter: Optional[str] = Query(
        None,
        alias="state",
        description="Filter by workflow state (unassigned, in_progress, done)",
    ),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    state = None
    if state_filter:
        try:
            state = DocState(state_filter)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid state: {state_filter}",
            )
    return await doc_service.list_docs(db, principal, project_id, state)


@router.get("/docs/{doc_id}", response_model=DocResponse, summary="Get a document")
async def get_doc(
    doc_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await doc_service.get_doc(db, doc_id, principal)


@router.patch("/docs/{doc_id}", response_model=DocResponse, summary="Update a document")
async def update_doc(
    doc_id: int,
    request: DocUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    doc = await doc_service.update_doc(db, doc_id, request, principal)
    await db.commit()
    return doc


@router.post(
    "/docs/{doc_id}/assign",
    response_model=DocResponse,
    summary="Assign a document",
    description="Assign a document to a user in your supervision scope. Supervisors and admins only.",
)
async def assign_doc(
    doc_id: int,
    request: DocAssign,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    doc = await doc_service.assign_doc(db, doc_id, request.assigned_to_id, principal)
    await db.commit()
    return doc


@router.post("/docs/{doc_id}/complete", response_model=DocResponse, summary="Mark work done")
async def complete_doc(
    doc_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    doc = await doc_service.complete_doc(db, doc_id, principal)
    await db.commit()
    return doc


@router.post("/docs/{doc_id}/reopen", response_model=DocResponse, summary="Reopen finished work")
async def reopen_doc(
    doc_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    doc = await doc_service.reopen_doc(db, doc_id, principal)
    await db.commit()
    return doc


@router.post(
    "/docs/{doc_id}/speakers",
    response_model=ParticipantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a speaker to a document",
)
async def add_participant(
    doc_id: int,
    request: ParticipantCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    link = await doc_service.add_participant(db, doc_id, request, principal)
    await db.commit()
    return link


@router.get(
    "/docs/{doc_id}/speakers",
    response_model=list[ParticipantResponse],
    summary="List the speakers of a document",
)
async def list_participants(
    doc_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await doc_service.list_participants(db, doc_id, principal)


@router.patch(
    "/doc2speaker/{link_id}",
    response_model=ParticipantResponse,
    summary="Update a speaker's word count",
)
async def update_words(
    link_id: int,
    request: ParticipantUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    link = await doc_service.update_words(db, link_id, request.words, principal)
    await db.commit()
    return link
