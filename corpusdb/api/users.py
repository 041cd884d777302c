"""User management routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.auth.policy import Principal, get_principal
from corpusdb.db.errors import NotFound
from corpusdb.db.session import get_db
from corpusdb.schemas.schemas import (
    SupervisorAssign,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from corpusdb.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
    description="Create a user account. Admin only.",
)
async def create_user(
    request: UserCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    principal.require_admin()
    user = await user_service.create_user(db, request)
    await db.commit()
    return user


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List users",
    description="List yourself and, for supervisors, your supervisees; admins see everyone.",
)
async def list_users(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await user_service.list_users(db, principal.visible_user_ids)


@router.get("/me", response_model=UserResponse, summary="Get the acting user")
async def get_me(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return await user_service.get_user(db, principal.user_id)


@router.get("/{user_id}", response_model=UserResponse, summary="Get a user")
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    if not principal.can_see_user(user_id):
        raise NotFound(f"User {user_id} not found")
    return await user_service.get_user(db, user_id)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user",
    description="Change a user's role or badge. Admin only.",
)
async def update_user(
    user_id: int,
    request: UserUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    principal.require_admin()
    user = await user_service.update_user(db, user_id, request)
    await db.commit()
    return user


@router.put(
    "/{user_id}/supervisor",
    response_model=UserResponse,
    summary="Set a user's supervisor",
    description="Attach a user to a supervisor; cycles are rejected. Admin only.",
)
async def set_supervisor(
    user_id: int,
    request: SupervisorAssign,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    principal.require_admin()
    user = await user_service.set_supervisor(db, user_id, request.supervisor_id)
    await db.commit()
    return user
