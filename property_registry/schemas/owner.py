"""Owner request and response models."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import EmailStr, Field, field_validator

from property_registry.schemas.common import CamelModel
from property_registry.schemas.property import ZIP_CODE_PATTERN


class CreateOwnerRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    address: str = Field(min_length=1, max_length=200)
    photo: str | None = Field(default=None, max_length=500)
    birthday: date | None = None
    phone: str | None = Field(default=None, max_length=20)
    email: EmailStr | None = None
    document_type: str | None = Field(default=None, max_length=50)
    document_number: str | None = Field(default=None, max_length=50)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=50)
    zip_code: str | None = Field(default=None, max_length=10)
    country: str = Field(default="USA", max_length=50)

    @field_validator("name", "address")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("zip_code")
    @classmethod
    def _validate_zip_code(cls, value: str | None) -> str | None:
        if value and not ZIP_CODE_PATTERN.match(value):
            raise ValueError("Invalid ZIP code format")
        return value


class OwnerResponse(CamelModel):
    id: uuid.UUID
    name: str
    address: str
    photo: str | None = None
    birthday: date | None = None
    phone: str | None = None
    email: str | None = None
    document_type: str | None = None
    document_number: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    created_at: datetime
