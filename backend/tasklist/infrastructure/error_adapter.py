"""Error Adapter — classifies persistence-layer failures into domain errors.

Invariants:
    - Input that is already a TaskListError is returned unchanged (idempotent)
    - Unique-constraint violations -> DuplicateKeyError, distinct from ValidationError
    - Malformed identifiers -> InvalidIdError, distinct from NotFoundError
    - Native driver/ORM messages are logged, never copied into the domain error
    - Every input yields a TaskListError (DatabaseError as the fallback)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import pydantic
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import (
    IntegrityError, NoResultFound, SQLAlchemyError, StatementError,
)

from tasklist.core.errors import (
    DatabaseError, DuplicateKeyError, InvalidIdError, NotFoundError,
    TaskListError, ValidationError,
)

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation
_UNIQUE_VIOLATION = "23505"


def adapt_database_error(exc: BaseException) -> TaskListError:
    """Map any exception raised around a persistence call to a domain error."""
    if isinstance(exc, TaskListError):
        return exc
    if isinstance(exc, IntegrityError):
        if _is_unique_violation(exc):
            logger.info(f"Unique constraint violated: {exc.orig}")
            return DuplicateKeyError("Duplicate key error")
        logger.warning(f"Integrity constraint violated: {exc.orig}")
        return ValidationError("Data violates a schema constraint")
    if isinstance(exc, pydantic.ValidationError):
        return ValidationError(
            "Invalid data",
            details=[
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        )
    if isinstance(exc, NoResultFound):
        return NotFoundError("Document not found")
    if _is_malformed_id(exc) or (
        isinstance(exc, StatementError) and _is_malformed_id(exc.orig)
    ):
        return InvalidIdError("Invalid identifier")
    if isinstance(exc, SQLAlchemyError):
        logger.error(f"Unclassified database error: {exc}")
        return DatabaseError("Database error", operation=type(exc).__name__)
    logger.error(f"Unexpected error at persistence boundary: {exc!r}")
    return DatabaseError("Database error")


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == _UNIQUE_VIOLATION:
        return True
    if getattr(orig, "pgcode", None) == _UNIQUE_VIOLATION:
        return True
    text = str(orig).lower()
    return "unique" in text or "duplicate key" in text


def _is_malformed_id(exc: BaseException | None) -> bool:
    """UUID parsing failures surface as ValueError from uuid.UUID()."""
    if not isinstance(exc, ValueError):
        return False
    return "uuid" in str(exc).lower() or "hexadecimal" in str(exc).lower()


@asynccontextmanager
async def persistence_boundary(db: AsyncSession) -> AsyncIterator[None]:
    """Roll back and re-raise SQLAlchemy failures as adapted domain errors.

    Domain errors raised inside the block pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError as e:
        await db.rollback()
        raise adapt_database_error(e) from e
