"""Tests for tables, seed data and the referential policy."""

from datetime import datetime

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.db.errors import (
    DuplicateLabel,
    InvalidReference,
    MissingRequiredField,
    NotFound,
    ReferencedRowInUse,
    translate_integrity_error,
)
from corpusdb.db.models import Doc, EnumPlace, EnumRegion, Speaker, User
from corpusdb.db.seed import seed_enumerations
from corpusdb.services.enum_service import enum_service


@pytest.mark.asyncio
async def test_seed_enumerations(db_session: AsyncSession):
    """Enumerations are seeded in order with ids starting at 1."""
    roles = await enum_service.list_entries(db_session, "roles")
    assert [(r.id, r.label) for r in roles] == [
        (1, "regular"),
        (2, "supervisor"),
        (3, "admin"),
    ]

    educations = await enum_service.list_entries(db_session, "educations")
    assert [e.label for e in educations] == ["ZŠ", "SŠ", "SOŠ", "VŠ"]

    regions = await enum_service.list_entries(db_session, "regions")
    assert len(regions) == 11
    assert regions[-1].label == "zahraničí"


@pytest.mark.asyncio
async def test_seed_enumerations_is_idempotent(db_session: AsyncSession):
    """Seeding twice leaves the tables untouched."""
    await seed_enumerations(db_session)
    roles = await enum_service.list_entries(db_session, "roles")
    assert len(roles) == 3


@pytest.mark.asyncio
async def test_every_place_has_a_region(db_session: AsyncSession):
    """Every enum_places.region_id resolves to an enum_regions row."""
    result = await db_session.execute(
        select(EnumPlace.id, EnumRegion.id).outerjoin(
            EnumRegion, EnumRegion.id == EnumPlace.region_id
        )
    )
    rows = result.all()
    assert len(rows) == 3
    assert all(region_id is not None for _, region_id in rows)


@pytest.mark.asyncio
async def test_geo_lookup(db_session: AsyncSession):
    """view_geo pairs every place with its region label."""
    geo = await enum_service.list_geo(db_session)
    assert geo == [
        {"place_id": 1, "place": "Praha", "region": "středočeská"},
        {"place_id": 2, "place": "Brno", "region": "středomoravská"},
        {"place_id": 3, "place": "Ostrava", "region": "slezská"},
    ]


@pytest.mark.asyncio
async def test_place_with_unknown_region_rejected(db_session: AsyncSession):
    """Places cannot point at a region that does not exist."""
    with pytest.raises(InvalidReference):
        await enum_service.add_entry(db_session, "places", "Plzeň", region_id=999)
    await db_session.rollback()


@pytest.mark.asyncio
async def test_place_requires_region(db_session: AsyncSession):
    with pytest.raises(MissingRequiredField):
        await enum_service.add_entry(db_session, "places", "Plzeň")


@pytest.mark.asyncio
async def test_duplicate_enum_label_rejected(db_session: AsyncSession):
    with pytest.raises(DuplicateLabel):
        await enum_service.add_entry(db_session, "genders", "muž")
    await db_session.rollback()


@pytest.mark.asyncio
async def test_append_enum_entry(db_session: AsyncSession):
    entry = await enum_service.add_entry(db_session, "places", "Plzeň", region_id=3)
    await db_session.commit()

    assert entry.id == 4
    geo = await enum_service.list_geo(db_session)
    assert geo[-1] == {"place_id": 4, "place": "Plzeň", "region": "západočeská"}


@pytest.mark.asyncio
async def test_delete_referenced_region_fails(db_session: AsyncSession):
    """Deleting a region that a place still references is restricted."""
    with pytest.raises(ReferencedRowInUse):
        await enum_service.delete_entry(db_session, "regions", 2)
    await db_session.rollback()

    region = await db_session.get(EnumRegion, 2)
    assert region is not None


@pytest.mark.asyncio
async def test_delete_unreferenced_region(db_session: AsyncSession):
    await enum_service.delete_entry(db_session, "regions", 11)
    await db_session.commit()

    regions = await enum_service.list_entries(db_session, "regions")
    assert [r.id for r in regions] == list(range(1, 11))


@pytest.mark.asyncio
async def test_delete_missing_entry(db_session: AsyncSession):
    with pytest.raises(NotFound):
        await enum_service.delete_entry(db_session, "genders", 42)


@pytest.mark.asyncio
async def test_region_renumbering_cascades(db_session: AsyncSession):
    """Updating a region id propagates to every place that references it."""
    entry = await enum_service.renumber_entry(db_session, "regions", 2, 99)
    await db_session.commit()
    assert entry.id == 99
    assert entry.label == "středočeská"

    result = await db_session.execute(
        select(EnumPlace.region_id).where(EnumPlace.label == "Praha")
    )
    assert result.scalar_one() == 99

    geo = await enum_service.list_geo(db_session)
    assert geo[0]["region"] == "středočeská"


@pytest.mark.asyncio
async def test_role_renumbering_cascades_to_users(db_session: AsyncSession):
    await enum_service.renumber_entry(db_session, "roles", 3, 30)
    await db_session.commit()

    role_id = (
        await db_session.execute(select(User.role_id).where(User.username == "admin"))
    ).scalar_one()
    assert role_id == 30


@pytest.mark.asyncio
async def test_speaker_enumeration_references_enforced(db_session: AsyncSession):
    """speakers.gender_id/education_id/place_id are real foreign keys."""
    for field in ("gender_id", "education_id", "place_id"):
        values = dict(
            user_id=3, project_id=1, nickname="Nobody",
            gender_id=1, education_id=1, place_id=1, year=1990,
        )
        values[field] = 999
        db_session.add(Speaker(**values))
        with pytest.raises(IntegrityError) as exc_info:
            await db_session.flush()
        assert isinstance(translate_integrity_error(exc_info.value), InvalidReference)
        await db_session.rollback()


@pytest.mark.asyncio
async def test_doc_place_reference_enforced(db_session: AsyncSession):
    db_session.add(Doc(project_id=1, date=datetime(2020, 1, 1), place_id=999))
    with pytest.raises(IntegrityError):
        await db_session.flush()
    await db_session.rollback()


@pytest.mark.asyncio
async def test_doc_requires_date(db_session: AsyncSession):
    db_session.add(Doc(project_id=1, place_id=1))
    with pytest.raises(IntegrityError) as exc_info:
        await db_session.flush()
    assert isinstance(translate_integrity_error(exc_info.value), MissingRequiredField)
    await db_session.rollback()


@pytest.mark.asyncio
async def test_unknown_enumeration_kind(db_session: AsyncSession):
    with pytest.raises(NotFound):
        await enum_service.list_entries(db_session, "colours")
