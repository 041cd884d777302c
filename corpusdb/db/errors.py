"""Typed domain errors raised by the access layer."""

from typing import Optional

from fastapi import status
from sqlalchemy.exc import IntegrityError

# PostgreSQL SQLSTATE codes for integrity violations
PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"
PG_NOT_NULL_VIOLATION = "23502"


class CorpusError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "Corpus error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.error
        super().__init__(self.detail)


class NotFound(CorpusError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"


class DuplicateLabel(CorpusError):
    status_code = status.HTTP_409_CONFLICT
    error = "Duplicate value"


class ReferencedRowInUse(CorpusError):
    status_code = status.HTTP_409_CONFLICT
    error = "Row is still referenced"


class InvalidReference(CorpusError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error = "Referenced row does not exist"


class MissingRequiredField(CorpusError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error = "Missing required field"


class InvalidSupervisor(CorpusError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error = "Invalid supervisor"


class SupervisionCycle(CorpusError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error = "Supervision cycle"


class InvalidTransition(CorpusError):
    status_code = status.HTTP_409_CONFLICT
    error = "Invalid workflow transition"


class NotAuthenticated(CorpusError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Not authenticated"


class AccessDenied(CorpusError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Access denied"


def _sqlstate(exc: IntegrityError) -> Optional[str]:
    orig = exc.orig
    # asyncpg exposes sqlstate, psycopg exposes pgcode
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is None:
        cause = getattr(orig, "__cause__", None)
        code = getattr(cause, "sqlstate", None)
    return code


def translate_integrity_error(exc: IntegrityError, *, deleting: bool = False) -> CorpusError:
    """
    Map a raw engine constraint violation to a typed domain error.

    Args:
        exc: The IntegrityError raised on flush/execute
        deleting: Whether the failing statement removed or renumbered rows;
            an FK violation then means the row is still referenced rather
            than that a reference points nowhere

    Returns:
        The matching CorpusError subclass instance
    """
    code = _sqlstate(exc)
    message = str(exc.orig)
    lowered = message.lower()

    if code == PG_UNIQUE_VIOLATION or "unique constraint" in lowered:
        return DuplicateLabel(message)
    if code == PG_FOREIGN_KEY_VIOLATION or "foreign key constraint" in lowered:
        if deleting:
            return ReferencedRowInUse(message)
        return InvalidReference(message)
    if code == PG_NOT_NULL_VIOLATION or "not null constraint" in lowered:
        return MissingRequiredField(message)
    return CorpusError(message)
