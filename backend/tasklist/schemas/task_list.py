"""List Schemas — creation, rename and read views.

Invariants:
    - name is trimmed and non-empty
    - ListUpdate enumerates the only mutable field (name); owner is immutable
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tasklist.schemas.todo import ToDoResponse


class ListCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class ListUpdate(ListCreate):
    """Rename — same constraints as creation."""


class ListResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    owner_id: UUID
    items: list[UUID] = []

    @field_validator("items", mode="before")
    @classmethod
    def item_ids(cls, v):
        return [getattr(item, "id", item) for item in v or []]


class ListWithItemsResponse(BaseModel):
    """List with its to-dos resolved."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    owner_id: UUID
    items: list[ToDoResponse] = []
