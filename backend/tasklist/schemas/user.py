"""User Schemas — registration, login, password recovery and public user view.

Invariants:
    - username and email are stripped; email is syntactically valid
    - Emails are stored in EmailStr normal form; lookups go through normalize_email
    - confirm_password accepted as confirmPassword too (legacy clients)
    - UserResponse.lists carries owned list ids only
"""

from datetime import datetime
from uuid import UUID

from pydantic import (
    BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, ValidationError,
    field_validator,
)


class UserRegister(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    username: str = Field(min_length=3, max_length=64)
    email: EmailStr
    password: str = Field(min_length=5, max_length=128)
    confirm_password: str = Field(alias="confirmPassword", max_length=128)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("username must have at least 3 characters")
        return v


class UserLogin(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class PasswordRecover(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    token: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=5, max_length=128)
    confirm_password: str = Field(alias="confirmPassword", max_length=128)


class UserResponse(BaseModel):
    """Public-facing user data."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    is_activated: bool
    role: str
    lists: list[UUID] = []
    created_at: datetime

    @field_validator("lists", mode="before")
    @classmethod
    def list_ids(cls, v):
        return [getattr(item, "id", item) for item in v or []]


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


class RecoveryTokenResponse(BaseModel):
    token: str


_email_adapter = TypeAdapter(EmailStr)


def normalize_email(raw: str) -> str:
    """Bring a raw address into the form EmailStr fields store (domain lowercased).

    Malformed input is returned unchanged; it cannot match a stored address.
    """
    try:
        return _email_adapter.validate_python(raw.strip())
    except ValidationError:
        return raw
