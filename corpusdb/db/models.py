"""Database models for the corpus database.

Immutable reference data lives in the ``enum_*`` tables; the mutable core is
users, projects, corpora, speakers, docs and the doc2speaker join table.
Every foreign key cascades on update and restricts on delete.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from corpusdb.db.session import Base

__all__ = [
    "Base",
    "Corpus",
    "Doc",
    "DocState",
    "DocToSpeaker",
    "EnumEducation",
    "EnumGender",
    "EnumPlace",
    "EnumRegion",
    "EnumRole",
    "Project",
    "RoleName",
    "Speaker",
    "User",
]


def ref(target: str) -> ForeignKey:
    """Foreign key with the corpus-wide referential policy."""
    return ForeignKey(target, onupdate="CASCADE", ondelete="RESTRICT")


class RoleName(str, enum.Enum):
    """Labels seeded into enum_roles."""

    REGULAR = "regular"  # own data only
    SUPERVISOR = "supervisor"  # own data + supervisees' data
    ADMIN = "admin"  # all data

    @property
    def can_supervise(self) -> bool:
        return self in (RoleName.SUPERVISOR, RoleName.ADMIN)


class DocState(str, enum.Enum):
    """Reporting view of the tri-state docs.done column."""

    UNASSIGNED = "unassigned"  # done IS NULL
    IN_PROGRESS = "in_progress"  # done = false
    DONE = "done"  # done = true

    @classmethod
    def from_done(cls, done: Optional[bool]) -> "DocState":
        if done is None:
            return cls.UNASSIGNED
        return cls.DONE if done else cls.IN_PROGRESS


# ============== Enumerations ==============


class EnumRole(Base):
    __tablename__ = "enum_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(Text, unique=True, nullable=False)


class EnumGender(Base):
    __tablename__ = "enum_genders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(Text, unique=True, nullable=False)


class EnumEducation(Base):
    __tablename__ = "enum_educations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(Text, unique=True, nullable=False)


class EnumRegion(Base):
    __tablename__ = "enum_regions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(Text, unique=True, nullable=False)

    places: Mapped[list["EnumPlace"]] = relationship(
        "EnumPlace", back_populates="region", passive_deletes="all"
    )


class EnumPlace(Base):
    __tablename__ = "enum_places"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    region_id: Mapped[int] = mapped_column(
        Integer, ref("enum_regions.id"), nullable=False
    )

    region: Mapped["EnumRegion"] = relationship("EnumRegion", back_populates="places")


# ============== Project management ==============


class User(Base):
    """Application user; supervisors form a tree via supervisor_id."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    role_id: Mapped[int] = mapped_column(Integer, ref("enum_roles.id"), nullable=False)

    # For generating document labels; only supervisors need this
    badge: Mapped[Optional[str]] = mapped_column(Text, unique=True, nullable=True)
    supervisor_id: Mapped[Optional[int]] = mapped_column(
        Integer, ref("users.id"), nullable=True
    )

    role: Mapped["EnumRole"] = relationship("EnumRole")
    # Lookup-only back reference; supervisees are never owned by the supervisor
    supervisor: Mapped[Optional["User"]] = relationship(
        "User", remote_side=[id], back_populates="supervisees"
    )
    supervisees: Mapped[list["User"]] = relationship(
        "User", back_populates="supervisor", passive_deletes="all"
    )


class Project(Base):
    """Project to which speakers and documents belong."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    # For generating document labels
    badge: Mapped[str] = mapped_column(Text, unique=True, nullable=False)


class Corpus(Base):
    """Corpus to which documents can be assigned."""

    __tablename__ = "corpora"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(Text, unique=True, nullable=False)


# ============== Data ==============


class Speaker(Base):
    """A research subject recorded in documents of one project."""

    __tablename__ = "speakers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ref("users.id"), nullable=False)
    project_id: Mapped[int] = mapped_column(Integer, ref("projects.id"), nullable=False)

    nickname: Mapped[str] = mapped_column(Text, nullable=False)
    gender_id: Mapped[int] = mapped_column(Integer, ref("enum_genders.id"), nullable=False)
    education_id: Mapped[int] = mapped_column(
        Integer, ref("enum_educations.id"), nullable=False
    )
    place_id: Mapped[int] = mapped_column(Integer, ref("enum_places.id"), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)  # Year of birth


class Doc(Base):
    """A unit of recorded and transcribed speech."""

    __tablename__ = "docs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(Integer, ref("projects.id"), nullable=False)
    corpus_id: Mapped[Optional[int]] = mapped_column(
        Integer, ref("corpora.id"), nullable=True
    )

    # Who works on the document, who assigned them, and whether the work is
    # done and waiting for the supervisor to check it
    assigned_to_id: Mapped[Optional[int]] = mapped_column(
        Integer, ref("users.id"), nullable=True
    )
    assigned_by_id: Mapped[Optional[int]] = mapped_column(
        Integer, ref("users.id"), nullable=True
    )
    done: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    place_id: Mapped[int] = mapped_column(Integer, ref("enum_places.id"), nullable=False)

    @property
    def state(self) -> str:
        return DocState.from_done(self.done).value


class DocToSpeaker(Base):
    """One speaker's participation in one document."""

    __tablename__ = "doc2speaker"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    doc_id: Mapped[int] = mapped_column(Integer, ref("docs.id"), nullable=False)
    speaker_id: Mapped[int] = mapped_column(Integer, ref("speakers.id"), nullable=False)
    words: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
