"""Pydantic schemas for request/response validation."""

from community.schemas.common import HealthResponse, MessageResponse, PaginatedResponse

__all__ = [
    "HealthResponse",
    "MessageResponse",
    "PaginatedResponse",
]
