"""User management service."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.db.errors import (
    InvalidReference,
    InvalidSupervisor,
    MissingRequiredField,
    NotFound,
    SupervisionCycle,
    translate_integrity_error,
)
from corpusdb.db.models import EnumRole, RoleName, User
from corpusdb.schemas.schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service for users and the supervision tree."""

    async def get_user(self, db: AsyncSession, user_id: int) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    async def get_role(self, db: AsyncSession, role_id: int) -> RoleName:
        """Resolve a role id to its RoleName; unknown labels count as regular."""
        role = await db.get(EnumRole, role_id)
        if role is None:
            raise InvalidReference(f"Role {role_id} does not exist")
        try:
            return RoleName(role.label)
        except ValueError:
            return RoleName.REGULAR

    async def list_users(
        self,
        db: AsyncSession,
        user_ids: Optional[frozenset[int]] = None,
    ) -> list[User]:
        """List users, optionally restricted to the given ids."""
        query = select(User).order_by(User.id)
        if user_ids is not None:
            query = query.where(User.id.in_(user_ids))
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_supervisees(self, db: AsyncSession, user_id: int) -> set[int]:
        """
        Collect all direct and indirect supervisees of a user.

        The walk tracks visited ids, so a corrupted (cyclic) tree still
        terminates; the user itself is never part of the result.
        """
        found: set[int] = set()
        frontier = {user_id}
        while frontier:
            result = await db.execute(
                select(User.id).where(User.supervisor_id.in_(frontier))
            )
            children = set(result.scalars().all()) - found - {user_id}
            found |= children
            frontier = children
        return found

    def _check_badge(self, role: RoleName, badge: Optional[str]) -> None:
        if role == RoleName.SUPERVISOR and not badge:
            raise MissingRequiredField("Supervisors need a badge for document labels")

    async def _check_supervisor(
        self,
        db: AsyncSession,
        user_id: Optional[int],
        supervisor_id: Optional[int],
    ) -> None:
        """Validate that supervisor_id may supervise user_id without a cycle."""
        if supervisor_id is None:
            return

        supervisor = await db.get(User, supervisor_id)
        if supervisor is None:
            raise InvalidReference(f"Supervisor {supervisor_id} does not exist")

        role = await self.get_role(db, supervisor.role_id)
        if not role.can_supervise:
            raise InvalidSupervisor(
                f"User {supervisor_id} has role '{role.value}' and cannot supervise"
            )

        if user_id is None:
            return
        # Walk up from the new supervisor; meeting user_id means a cycle
        seen: set[int] = set()
        current: Optional[int] = supervisor_id
        while current is not None and current not in seen:
            if current == user_id:
                raise SupervisionCycle(
                    f"User {supervisor_id} is supervised (directly or not) by user {user_id}"
                )
            seen.add(current)
            current = (
                await db.execute(select(User.supervisor_id).where(User.id == current))
            ).scalar_one_or_none()

    async def create_user(self, db: AsyncSession, request: UserCreate) -> User:
        role = await self.get_role(db, request.role_id)
        self._check_badge(role, request.badge)
        await self._check_supervisor(db, None, request.supervisor_id)

        user = User(
            username=request.username,
            role_id=request.role_id,
            badge=request.badge,
            supervisor_id=request.supervisor_id,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            raise translate_integrity_error(e) from e
        await db.refresh(user)

        logger.info(f"Created user {user.id} ({user.username}) with role {role.value}")
        return user

    async def update_user(
        self, db: AsyncSession, user_id: int, request: UserUpdate
    ) -> User:
        user = await self.get_user(db, user_id)
        data = request.model_dump(exclude_unset=True)

        role_id = data.get("role_id") or user.role_id
        badge = data["badge"] if "badge" in data else user.badge
        role = await self.get_role(db, role_id)
        self._check_badge(role, badge)

        if not role.can_supervise:
            supervisees = (
                await db.execute(select(User.id).where(User.supervisor_id == user_id).limit(1))
            ).first()
            if supervisees is not None:
                raise InvalidSupervisor(
                    f"User {user_id} still supervises other users and must keep a supervising role"
                )

        user.role_id = role_id
        user.badge = badge
        try:
            await db.flush()
        except IntegrityError as e:
            raise translate_integrity_error(e) from e
        await db.refresh(user)
        return user

    async def set_supervisor(
        self, db: AsyncSession, user_id: int, supervisor_id: Optional[int]
    ) -> User:
        """Attach a user to a supervisor, rejecting cycles."""
        user = await self.get_user(db, user_id)
        await self._check_supervisor(db, user_id, supervisor_id)

        user.supervisor_id = supervisor_id
        try:
            await db.flush()
        except IntegrityError as e:
            raise translate_integrity_error(e) from e
        await db.refresh(user)

        logger.info(f"User {user_id} now supervised by {supervisor_id}")
        return user


# Singleton instance
user_service = UserService()
