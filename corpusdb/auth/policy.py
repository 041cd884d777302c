"""Authorization policy: who may see and change which rows.

regular users see their own data, supervisors see their own data plus the
data of all users below them in the supervision tree, admins see everything.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy import or_, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.db.errors import AccessDenied, NotAuthenticated, NotFound
from corpusdb.db.models import Doc, DocToSpeaker, RoleName, Speaker
from corpusdb.db.session import get_db
from corpusdb.services.user_service import user_service


@dataclass(frozen=True)
class Principal:
    """The acting user of a request together with their visibility scope."""

    user_id: int
    role: RoleName
    # None means unrestricted
    visible_user_ids: Optional[frozenset[int]]

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN

    def can_see_user(self, user_id: Optional[int]) -> bool:
        if self.visible_user_ids is None:
            return True
        return user_id in self.visible_user_ids

    def require_admin(self) -> None:
        if not self.is_admin:
            raise AccessDenied("Only admins may change reference data and accounts")

    def require_supervisor(self) -> None:
        if not self.role.can_supervise:
            raise AccessDenied("Only supervisors and admins may manage documents")

    def require_user(self, user_id: int) -> None:
        if not self.can_see_user(user_id):
            raise AccessDenied(f"User {user_id} is outside your supervision scope")

    def speaker_clause(self):
        """WHERE clause restricting speakers to the visible users."""
        if self.visible_user_ids is None:
            return true()
        return Speaker.user_id.in_(self.visible_user_ids)

    def doc_clause(self):
        """
        WHERE clause restricting docs to the visible ones.

        A doc is visible when it is assigned to or by a visible user, or when
        one of its speakers belongs to a visible user.
        """
        if self.visible_user_ids is None:
            return true()
        ids = self.visible_user_ids
        participating = (
            select(DocToSpeaker.doc_id)
            .join(Speaker, Speaker.id == DocToSpeaker.speaker_id)
            .where(Speaker.user_id.in_(ids))
        )
        return or_(
            Doc.assigned_to_id.in_(ids),
            Doc.assigned_by_id.in_(ids),
            Doc.id.in_(participating),
        )

    def participant_clause(self):
        """WHERE clause restricting doc2speaker rows to visible speakers."""
        if self.visible_user_ids is None:
            return true()
        return DocToSpeaker.speaker_id.in_(
            select(Speaker.id).where(self.speaker_clause())
        )


async def load_principal(db: AsyncSession, user_id: int) -> Principal:
    """Build the Principal for a user id."""
    try:
        user = await user_service.get_user(db, user_id)
    except NotFound:
        raise NotAuthenticated(f"Unknown user {user_id}") from None

    role = await user_service.get_role(db, user.role_id)
    if role == RoleName.ADMIN:
        visible = None
    elif role == RoleName.SUPERVISOR:
        visible = frozenset({user.id} | await user_service.get_supervisees(db, user.id))
    else:
        visible = frozenset({user.id})

    return Principal(user_id=user.id, role=role, visible_user_ids=visible)


async def get_principal(
    x_user_id: Optional[int] = Header(None, alias="X-User-Id"),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """Resolve the acting user from the X-User-Id header."""
    if x_user_id is None:
        raise NotAuthenticated("Missing 'X-User-Id' header")

    return await load_principal(db, x_user_id)
