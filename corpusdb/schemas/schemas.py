"""Pydantic schemas for request/response validation."""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

EnumKind = Literal["roles", "genders", "educations", "regions", "places"]


def strip_label(value: str | None) -> str | None:
    """Normalize user-entered labels and badges."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def to_naive_utc(value: datetime | None) -> datetime | None:
    """docs.date is a naive timestamp; aware input is stored as UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# ============== Enumeration Schemas ==============


class EnumEntry(BaseModel):
    """One row of an enumeration table."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    label: str
    region_id: Optional[int] = None


class EnumEntryCreate(BaseModel):
    """Request to append a row to an enumeration table."""

    label: str = Field(..., min_length=1)
    region_id: Optional[int] = Field(None, description="Owning region (places only)")

    @field_validator("label", mode="before")
    @classmethod
    def normalize_label(cls, v: str | None) -> str | None:
        return strip_label(v)


class EnumEntryRenumber(BaseModel):
    """Request to change the id of an enumeration row."""

    new_id: int = Field(..., ge=1)


class GeoEntry(BaseModel):
    """A place together with its region label."""

    place_id: int
    place: str
    region: str


# ============== User Schemas ==============


class UserCreate(BaseModel):
    """Request to create a user."""

    username: str = Field(..., min_length=1, max_length=100)
    role_id: int
    badge: Optional[str] = Field(None, description="Required for supervisors")
    supervisor_id: Optional[int] = None

    @field_validator("username", "badge", mode="before")
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        return strip_label(v)


class UserUpdate(BaseModel):
    """Partial update of a user."""

    role_id: Optional[int] = None
    badge: Optional[str] = None

    @field_validator("badge", mode="before")
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        return strip_label(v)


class SupervisorAssign(BaseModel):
    """Request to (re)attach a user to a supervisor."""

    supervisor_id: Optional[int] = Field(None, description="None detaches the user")


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role_id: int
    badge: Optional[str] = None
    supervisor_id: Optional[int] = None


# ============== Project & Corpus Schemas ==============


class ProjectCreate(BaseModel):
    label: str = Field(..., min_length=1)
    badge: str = Field(..., min_length=1, description="Used in document labels")

    @field_validator("label", "badge", mode="before")
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        return strip_label(v)


class ProjectUpdate(BaseModel):
    label: Optional[str] = None
    badge: Optional[str] = None

    @field_validator("label", "badge", mode="before")
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        return strip_label(v)


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    label: str
    badge: str


class CorpusCreate(BaseModel):
    label: str = Field(..., min_length=1)

    @field_validator("label", mode="before")
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        return strip_label(v)


class CorpusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    label: str


# ============== Speaker Schemas ==============


class SpeakerCreate(BaseModel):
    """Request to register a speaker."""

    user_id: Optional[int] = Field(None, description="Owning user; defaults to the caller")
    project_id: int
    nickname: str = Field(..., min_length=1)
    gender_id: int
    education_id: int
    place_id: int
    year: int = Field(..., ge=1850, le=2100, description="Year of birth")


class SpeakerUpdate(BaseModel):
    nickname: Optional[str] = Field(None, min_length=1)
    gender_id: Optional[int] = None
    education_id: Optional[int] = None
    place_id: Optional[int] = None
    year: Optional[int] = Field(None, ge=1850, le=2100)


class SpeakerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    project_id: int
    nickname: str
    gender_id: int
    education_id: int
    place_id: int
    year: int


# ============== Document Schemas ==============


class DocCreate(BaseModel):
    """Request to register a document."""

    project_id: int
    corpus_id: Optional[int] = None
    date: datetime
    place_id: int

    @field_validator("date")
    @classmethod
    def naive_date(cls, v: datetime | None) -> datetime | None:
        return to_naive_utc(v)


class DocUpdate(BaseModel):
    corpus_id: Optional[int] = None
    date: Optional[datetime] = None
    place_id: Optional[int] = None

    @field_validator("date")
    @classmethod
    def naive_date(cls, v: datetime | None) -> datetime | None:
        return to_naive_utc(v)


class DocAssign(BaseModel):
    assigned_to_id: int


class DocResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    corpus_id: Optional[int] = None
    assigned_to_id: Optional[int] = None
    assigned_by_id: Optional[int] = None
    done: Optional[bool] = None
    state: Literal["unassigned", "in_progress", "done"]
    date: datetime
    place_id: int


class DocumentListResponse(BaseModel):
    """Document labels as consumed by the front end."""

    data: list[str]
    errors: list[str] = []


class ParticipantCreate(BaseModel):
    speaker_id: int
    words: Optional[int] = Field(None, ge=0, description="Word count, if known")


class ParticipantUpdate(BaseModel):
    words: Optional[int] = Field(None, ge=0)


class ParticipantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    doc_id: int
    speaker_id: int
    words: Optional[int] = None


# ============== View Schemas ==============


class SpeakerView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project: str
    nickname: str
    gender: str
    education: str
    place: str
    region: str
    year: int


class DocView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project: str
    corpus: str
    place: str
    region: str
    date: datetime


class DocSpeakerView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project: str
    corpus: str
    doc_place: str
    doc_region: str
    gender: str
    age: str
    education: str
    spk_place: str
    spk_region: str
    words: Optional[int] = None


# ============== Transcript Schemas ==============


class TokenizeRequest(BaseModel):
    text: str


class TokenResponse(BaseModel):
    kind: Literal["non_delim", "open", "close"]
    delim: Optional[Literal["round", "square", "angle"]] = None
    start: int
    end: int
    text: str


class TokenizeResponse(BaseModel):
    source: str
    tokens: list[TokenResponse]


# ============== Health & Misc Schemas ==============


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: Optional[str] = None
