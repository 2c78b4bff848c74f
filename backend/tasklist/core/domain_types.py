"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ListId, ToDoId wrap UUIDs; service signatures and session claims use them
    - All valid roles and sort options encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ListId = NewType("ListId", UUID)
ToDoId = NewType("ToDoId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Roles — only admin unlocks the unscoped to-do listing."""
    USER = "user"
    ADMIN = "admin"


class UserSortField(str, Enum):
    """Columns the user listing may be sorted by."""
    CREATED_AT = "created_at"
    USERNAME = "username"
    EMAIL = "email"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
