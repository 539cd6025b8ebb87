"""Property image request and response models."""

from __future__ import annotations

import posixpath
import uuid
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from property_registry.config import get_settings
from property_registry.schemas.common import CamelModel


def file_extension(file: str) -> str:
    """Lowercase extension of a path or URL without the leading dot."""

    return posixpath.splitext(file.split("?", 1)[0])[1].lstrip(".").lower()


def _check_image_file(value: str) -> str:
    allowed = get_settings().allowed_image_extensions
    if file_extension(value) not in allowed:
        raise ValueError(
            "File must be a valid image format (" + ", ".join(allowed) + ")"
        )
    return value


class AddImageRequest(CamelModel):
    """Image to attach to an existing property.

    A ``display_order`` of 0 (or omitted) places the image after the last
    existing one.
    """

    file: str = Field(min_length=1, max_length=500)
    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    display_order: int | None = Field(default=None, ge=0)
    is_primary: bool = False
    file_size_bytes: int | None = Field(default=None, ge=0)

    @field_validator("file")
    @classmethod
    def _validate_file(cls, value: str) -> str:
        return _check_image_file(value.strip())


class UpdateImageRequest(CamelModel):
    """Partial image update; omitted and ``null`` fields are left untouched."""

    file: str | None = Field(default=None, min_length=1, max_length=500)
    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    display_order: int | None = Field(default=None, ge=0)
    is_primary: bool | None = None
    enabled: bool | None = None

    @field_validator("file")
    @classmethod
    def _validate_file(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _check_image_file(value.strip())

    def changes(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class PropertyImageResponse(CamelModel):
    id: uuid.UUID
    property_id: uuid.UUID
    file: str
    title: str | None = None
    description: str | None = None
    display_order: int
    is_primary: bool
    enabled: bool
    file_type: str | None = None
    file_size_bytes: int | None = None
    thumbnail_path: str | None = None
    created_at: datetime
