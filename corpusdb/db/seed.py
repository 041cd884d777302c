"""Bootstrap data: enumeration contents and the toy corpus."""

import logging
from datetime import datetime

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from corpusdb.db.models import (
    Corpus,
    Doc,
    DocToSpeaker,
    EnumEducation,
    EnumGender,
    EnumPlace,
    EnumRegion,
    EnumRole,
    Project,
    RoleName,
    Speaker,
    User,
)

logger = logging.getLogger(__name__)

ROLES = [role.value for role in RoleName]
GENDERS = ["muž", "žena"]
EDUCATIONS = ["ZŠ", "SŠ", "SOŠ", "VŠ"]
REGIONS = [
    "severovýchodočeská",
    "středočeská",
    "západočeská",
    "jihočeská",
    "českomoravská",
    "středomoravská",
    "východomoravská",
    "slezská",
    "pohraničí české",
    "pohraničí moravské a slezské",
    "zahraničí",
]
# TODO: replace with the exhaustive list of recording places once it is compiled
PLACES = [
    ("Praha", 2),
    ("Brno", 6),
    ("Ostrava", 8),
]


async def _is_empty(db: AsyncSession, model) -> bool:
    count = (await db.execute(select(func.count()).select_from(model))).scalar()
    return not count


async def _sync_sequences(db: AsyncSession, *models) -> None:
    """Rows are seeded with explicit ids; move serial sequences past them."""
    if db.get_bind().dialect.name != "postgresql":
        return
    for model in models:
        table = model.__tablename__
        await db.execute(
            text(
                f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                f"(SELECT COALESCE(MAX(id), 1) FROM {table}))"
            )
        )


async def seed_enumerations(db: AsyncSession) -> None:
    """Fill empty enumeration tables; tables with rows are left alone."""
    simple = [
        (EnumRole, ROLES),
        (EnumGender, GENDERS),
        (EnumEducation, EDUCATIONS),
        (EnumRegion, REGIONS),
    ]
    for model, labels in simple:
        if await _is_empty(db, model):
            db.add_all(model(id=i, label=label) for i, label in enumerate(labels, 1))
            logger.info(f"Seeded {model.__tablename__} with {len(labels)} rows")
    await db.flush()

    if await _is_empty(db, EnumPlace):
        db.add_all(
            EnumPlace(id=i, label=label, region_id=region_id)
            for i, (label, region_id) in enumerate(PLACES, 1)
        )
        logger.info(f"Seeded enum_places with {len(PLACES)} rows")
    await db.flush()
    await _sync_sequences(db, EnumRole, EnumGender, EnumEducation, EnumRegion, EnumPlace)


async def seed_toy_data(db: AsyncSession) -> None:
    """Load a tiny corpus for development and tests; skipped if users exist."""
    if not await _is_empty(db, User):
        return

    db.add_all(
        [
            User(id=1, username="admin", role_id=3, badge="A", supervisor_id=None),
            User(id=2, username="supervisor", role_id=2, badge="S", supervisor_id=1),
            User(id=3, username="regular", role_id=1, badge=None, supervisor_id=2),
        ]
    )
    db.add_all(
        [
            Project(id=1, label="neformální", badge="N"),
            Project(id=2, label="formální", badge="F"),
        ]
    )
    db.add(Corpus(id=1, label="ortofon"))
    await db.flush()

    db.add_all(
        [
            Speaker(
                id=1, user_id=3, project_id=1, nickname="John Doe",
                gender_id=1, education_id=1, place_id=1, year=1988,
            ),
            Speaker(
                id=2, user_id=3, project_id=1, nickname="Jane Doe",
                gender_id=2, education_id=4, place_id=2, year=1984,
            ),
        ]
    )
    db.add(Doc(id=1, project_id=1, corpus_id=1, date=datetime(2019, 3, 1), place_id=3))
    await db.flush()

    db.add_all(
        [
            DocToSpeaker(id=1, doc_id=1, speaker_id=1, words=1000),
            DocToSpeaker(id=2, doc_id=1, speaker_id=2, words=2000),
        ]
    )
    await db.flush()
    await _sync_sequences(db, User, Project, Corpus, Speaker, Doc, DocToSpeaker)
    logger.info("Loaded toy corpus data")
