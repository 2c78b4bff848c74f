"""Response Envelope — {status, message, data, error} wrapper for every response."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    status: int
    message: str
    data: T | None = None
    error: dict[str, Any] | None = None
