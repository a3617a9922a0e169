"""Common Pydantic schemas used across the API."""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class HealthResponse(BaseSchema):
    """Health check response schema."""

    status: str
    version: str
    environment: str
    checks: dict[str, str]


class MessageResponse(BaseSchema):
    """Plain acknowledgement returned by delete and state-change endpoints."""

    message: str


class PaginatedResponse[T](BaseSchema):
    """Paginated response wrapper."""

    items: list[T]
    total: int
    page: int
    page_size: int
    pages: int


def page_count(total: int, page_size: int) -> int:
    """Number of pages for ``total`` items; an empty result still has one page."""
    return (total + page_size - 1) // page_size if total > 0 else 1
