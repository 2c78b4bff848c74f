"""Access Enforcement — ownership, role and credential-window checks.

Invariants:
    - All functions are PURE: no IO, no async, no DB; the clock is an argument
    - Violations raise domain errors directly (never routed through the error adapter)
    - Ownership is a single rule: only the owning user may act on an entity
    - Only the admin role bypasses ownership, and only for the unscoped to-do listing

Design Decisions:
    - Naive datetimes are read as UTC: SQLite drops tzinfo on round-trip
"""

from datetime import datetime, timezone
from uuid import UUID

from tasklist.core.domain_types import UserRole
from tasklist.core.errors import (
    BadRequestError, ForbiddenError, InvalidIdError, UnauthorizedError,
)


def parse_id(raw: str | UUID, resource: str = "resource") -> UUID:
    """Turn a path/body identifier into a UUID or raise InvalidIdError."""
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw))
    except (TypeError, ValueError):
        raise InvalidIdError(f"Invalid {resource} id: {raw}")


def check_owner(owner_id: UUID, requester_id: UUID, message: str) -> None:
    """Raise UnauthorizedError unless requester_id owns the entity."""
    if owner_id != requester_id:
        raise UnauthorizedError(message)


def check_admin(role: str) -> None:
    if role != UserRole.ADMIN.value:
        raise ForbiddenError(
            "You're not authorized to access this route, "
            "because you don't have the necessary permissions",
        )


def check_passwords_match(password: str, confirm_password: str) -> None:
    if password != confirm_password:
        raise BadRequestError("Passwords do not match")


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def is_expired(expires_at: datetime | None, now: datetime) -> bool:
    """A credential with no expiry recorded is treated as expired."""
    if expires_at is None:
        return True
    return as_utc(expires_at) <= as_utc(now)
