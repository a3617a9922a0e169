"""Pydantic schemas for per-shop community customization."""

from typing import Any

from pydantic import Field, field_validator

from community.schemas.common import BaseSchema

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"

DEFAULT_CUSTOMIZATION: dict[str, Any] = {
    "color_posts": "#3B82F6",
    "color_borders": "#E5E7EB",
    "color_bg": "#F9FAFB",
    "color_text": "#111827",
    "selected_font": "Helvetica",
    "cover_image_url": None,
    "banner_image_url": "/banner.svg",
    "custom_badges": None,
}


class CustomizationResponse(BaseSchema):
    """Effective customization: stored values merged over the defaults."""

    color_posts: str
    color_borders: str
    color_bg: str
    color_text: str
    selected_font: str
    cover_image_url: str | None
    banner_image_url: str | None
    custom_badges: dict[str, Any] | None


class CustomizationUpdate(BaseSchema):
    """Partial customization update. Unset fields keep their current value."""

    color_posts: str | None = Field(default=None, pattern=HEX_COLOR)
    color_borders: str | None = Field(default=None, pattern=HEX_COLOR)
    color_bg: str | None = Field(default=None, pattern=HEX_COLOR)
    color_text: str | None = Field(default=None, pattern=HEX_COLOR)
    selected_font: str | None = Field(default=None, min_length=1, max_length=100)
    cover_image_url: str | None = Field(default=None, max_length=1024)
    banner_image_url: str | None = Field(default=None, max_length=1024)
    custom_badges: dict[str, Any] | None = None

    @field_validator("color_posts", "color_borders", "color_bg", "color_text", "selected_font")
    @classmethod
    def reject_null(cls, value: str | None) -> str | None:
        if value is None:
            raise ValueError("Field cannot be null")
        return value
