"""User ORM — account identity, activation state and password-reset state.

Invariants:
    - username and email are globally unique
    - activation_token/activation_expires_at are set at registration
    - reset_token/reset_expires_at are both set or both NULL
    - role is "user" unless promoted to "admin"
    - owned lists are the TaskLists whose owner_id points here (cascade delete)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tasklist.db.base import Base


class User(Base):
    """Registered account — pending until the activation token is consumed."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    username: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_activated: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    activation_token: Mapped[str | None] = mapped_column(
        String(128), nullable=True, index=True,
    )
    activation_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    reset_token: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True,
    )
    reset_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    role: Mapped[str] = mapped_column(
        String(10), nullable=False, default="user",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    lists: Mapped[list["TaskList"]] = relationship(
        "TaskList", cascade="all, delete-orphan", lazy="selectin",
    )
