"""Shared response envelopes and the camelCase base model used on the wire."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase in JSON (both accepted on input)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Default envelope: {message, statusCode}."""

    message: str
    status_code: int = Field(default=200, description="HTTP status mirrored in the body")


class DataResponse(MessageResponse, Generic[T]):
    """Default envelope carrying a payload: {message, statusCode, data}."""

    data: T | None = None


class PaginatedResponse(CamelModel, Generic[T]):
    """Paginated list envelope."""

    total: int
    total_pages: int
    limit_per_page: int
    current_page: int
    data: list[T] = Field(default_factory=list)


class ErrorResponse(CamelModel):
    """Error body returned for every failure kind."""

    message: str | list[str]
    error: str
    status_code: int
