"""Enumeration (reference data) service."""

import logging
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.db.errors import (
    MissingRequiredField,
    NotFound,
    translate_integrity_error,
)
from corpusdb.db.models import (
    EnumEducation,
    EnumGender,
    EnumPlace,
    EnumRegion,
    EnumRole,
)
from corpusdb.db.views import view_geo

logger = logging.getLogger(__name__)

ENUM_MODELS = {
    "roles": EnumRole,
    "genders": EnumGender,
    "educations": EnumEducation,
    "regions": EnumRegion,
    "places": EnumPlace,
}


class EnumService:
    """Service for the enum_* lookup tables and the geo view."""

    def model_for(self, kind: str):
        try:
            return ENUM_MODELS[kind]
        except KeyError:
            raise NotFound(f"Unknown enumeration '{kind}'") from None

    async def list_entries(self, db: AsyncSession, kind: str) -> list:
        model = self.model_for(kind)
        result = await db.execute(select(model).order_by(model.id))
        return list(result.scalars().all())

    async def add_entry(
        self,
        db: AsyncSession,
        kind: str,
        label: str,
        region_id: Optional[int] = None,
    ):
        """Append a row; enumerations are append-only in normal operation."""
        model = self.model_for(kind)
        if model is EnumPlace:
            if region_id is None:
                raise MissingRequiredField("Places must belong to a region")
            entry = EnumPlace(label=label, region_id=region_id)
        else:
            entry = model(label=label)

        db.add(entry)
        try:
            await db.flush()
        except IntegrityError as e:
            raise translate_integrity_error(e) from e
        await db.refresh(entry)

        logger.info(f"Added {model.__tablename__} entry {entry.id}: {label}")
        return entry

    async def renumber_entry(
        self, db: AsyncSession, kind: str, old_id: int, new_id: int
    ):
        """Change a row's id; referencing rows follow via ON UPDATE CASCADE."""
        model = self.model_for(kind)
        try:
            result = await db.execute(
                update(model)
                .where(model.id == old_id)
                .values(id=new_id)
                .execution_options(synchronize_session=False)
            )
        except IntegrityError as e:
            raise translate_integrity_error(e) from e
        if result.rowcount == 0:
            raise NotFound(f"{model.__tablename__} entry {old_id} not found")

        # Loaded referents still hold the old id
        db.expire_all()
        logger.info(f"Renumbered {model.__tablename__} entry {old_id} -> {new_id}")
        return await db.get(model, new_id)

    async def delete_entry(self, db: AsyncSession, kind: str, entry_id: int) -> None:
        """Delete an unreferenced row; referenced rows raise ReferencedRowInUse."""
        model = self.model_for(kind)
        try:
            result = await db.execute(
                delete(model)
                .where(model.id == entry_id)
                .execution_options(synchronize_session=False)
            )
        except IntegrityError as e:
            logger.warning(f"Refused to delete {model.__tablename__} entry {entry_id}")
            raise translate_integrity_error(e, deleting=True) from e
        if result.rowcount == 0:
            raise NotFound(f"{model.__tablename__} entry {entry_id} not found")

    async def list_geo(self, db: AsyncSession) -> list[dict]:
        """Every place with its region label, read from view_geo."""
        result = await db.execute(select(view_geo).order_by(view_geo.c.place_id))
        return [dict(row._mapping) for row in result]


# Singleton instance
enum_service = EnumService()
