"""TaskList ORM — a named set of to-dos owned by exactly one user.

Invariants:
    - name is unique across all lists and stored trimmed
    - owner_id is required and never reassigned after creation
    - list_items.todo_id is unique: a to-do sits in at most one list
    - deleting a list deletes its to-dos and its list_items rows

Design Decisions:
    - Association table instead of a todos.list_id column: a to-do has no owner
      field and can exist unreferenced (orphan)
    - single_parent delete-orphan on items: removing a to-do from the set deletes it
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tasklist.db.base import Base


list_items = Table(
    "list_items",
    Base.metadata,
    Column(
        "list_id", UUID(as_uuid=True),
        ForeignKey("lists.id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "todo_id", UUID(as_uuid=True),
        ForeignKey("todos.id", ondelete="CASCADE"), primary_key=True,
        unique=True,
    ),
)


class TaskList(Base):
    """List aggregate root — owns its to-do items."""
    __tablename__ = "lists"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(
        String(200), nullable=False, unique=True,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    items: Mapped[list["ToDo"]] = relationship(
        "ToDo", secondary=list_items,
        cascade="all, delete-orphan", single_parent=True,
        lazy="selectin",
    )
