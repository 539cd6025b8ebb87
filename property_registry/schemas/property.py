"""Property request and response models."""

from __future__ import annotations

import re
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import Field, field_validator, model_validator

from property_registry.config import get_settings
from property_registry.models import (
    ListingType,
    PropertyCondition,
    PropertyStatus,
    PropertyType,
)
from property_registry.schemas.common import CamelModel
from property_registry.schemas.image import PropertyImageResponse

ZIP_CODE_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")

MIN_YEAR = 1800
MAX_YEAR = 2030


def _check_zip_code(value: str | None) -> str | None:
    if value and not ZIP_CODE_PATTERN.match(value):
        raise ValueError("Invalid ZIP code format")
    return value


class CreatePropertyRequest(CamelModel):
    name: str = Field(min_length=1, max_length=150)
    address: str = Field(min_length=1, max_length=300)
    price: Decimal = Field(gt=0)
    code_internal: str = Field(min_length=1, max_length=20)
    year: int = Field(ge=MIN_YEAR, le=MAX_YEAR)
    description: str | None = Field(default=None, max_length=1000)
    property_type: PropertyType
    listing_type: ListingType = ListingType.SALE
    condition: PropertyCondition = PropertyCondition.GOOD

    bedrooms: int | None = Field(default=None, ge=0, le=50)
    bathrooms: int | None = Field(default=None, ge=0, le=50)
    half_bathrooms: int | None = Field(default=None, ge=0, le=20)
    parking_spaces: int | None = Field(default=None, ge=0, le=20)
    square_feet: Decimal | None = Field(default=None, gt=0, le=1_000_000)
    lot_size: Decimal | None = Field(default=None, gt=0, le=10_000_000)

    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=50)
    zip_code: str | None = Field(default=None, max_length=10)
    neighborhood: str | None = Field(default=None, max_length=100)
    latitude: Decimal | None = Field(default=None, ge=-90, le=90)
    longitude: Decimal | None = Field(default=None, ge=-180, le=180)

    has_pool: bool = False
    has_garden: bool = False
    has_garage: bool = False
    has_fireplace: bool = False
    has_air_conditioning: bool = False
    has_heating: bool = False
    is_furnished: bool = False
    pets_allowed: bool = False

    monthly_rent: Decimal | None = Field(default=None, ge=0)
    property_tax: Decimal | None = Field(default=None, ge=0)
    hoa_fees: Decimal | None = Field(default=None, ge=0)
    available_from: datetime | None = None

    owner_id: uuid.UUID

    @field_validator("name", "address", "code_internal")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("zip_code")
    @classmethod
    def _validate_zip_code(cls, value: str | None) -> str | None:
        return _check_zip_code(value)


class UpdatePropertyRequest(CamelModel):
    """Partial update; only fields present in the payload are applied.

    An explicit ``null`` or a blank string leaves the stored value as is,
    while ``false`` and ``0`` are real updates.
    """

    name: str | None = Field(default=None, max_length=150)
    address: str | None = Field(default=None, max_length=300)
    price: Decimal | None = Field(default=None, gt=0)
    description: str | None = Field(default=None, max_length=1000)
    property_type: PropertyType | None = None
    status: PropertyStatus | None = None
    listing_type: ListingType | None = None
    condition: PropertyCondition | None = None

    bedrooms: int | None = Field(default=None, ge=0, le=50)
    bathrooms: int | None = Field(default=None, ge=0, le=50)
    half_bathrooms: int | None = Field(default=None, ge=0, le=20)
    parking_spaces: int | None = Field(default=None, ge=0, le=20)
    square_feet: Decimal | None = Field(default=None, gt=0, le=1_000_000)
    lot_size: Decimal | None = Field(default=None, gt=0, le=10_000_000)

    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=50)
    zip_code: str | None = Field(default=None, max_length=10)
    neighborhood: str | None = Field(default=None, max_length=100)
    latitude: Decimal | None = Field(default=None, ge=-90, le=90)
    longitude: Decimal | None = Field(default=None, ge=-180, le=180)

    has_pool: bool | None = None
    has_garden: bool | None = None
    has_garage: bool | None = None
    has_fireplace: bool | None = None
    has_air_conditioning: bool | None = None
    has_heating: bool | None = None
    is_furnished: bool | None = None
    pets_allowed: bool | None = None

    monthly_rent: Decimal | None = Field(default=None, ge=0)
    property_tax: Decimal | None = Field(default=None, ge=0)
    hoa_fees: Decimal | None = Field(default=None, ge=0)
    available_from: datetime | None = None

    @field_validator(
        "name",
        "address",
        "description",
        "city",
        "state",
        "zip_code",
        "neighborhood",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("zip_code")
    @classmethod
    def _validate_zip_code(cls, value: str | None) -> str | None:
        return _check_zip_code(value)

    def changes(self) -> dict[str, Any]:
        """Fields supplied with a usable value."""

        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class ChangePriceRequest(CamelModel):
    new_price: Decimal = Field(gt=0)
    reason: str | None = Field(default=None, max_length=500)


class PropertyFilters(CamelModel):
    """Query parameters for the paged property search."""

    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(
        default_factory=lambda: get_settings().default_page_size, ge=1
    )
    search_term: str | None = Field(default=None, max_length=200)

    min_price: Decimal | None = Field(default=None, ge=0)
    max_price: Decimal | None = Field(default=None, ge=0)
    min_bedrooms: int | None = Field(default=None, ge=0)
    max_bedrooms: int | None = Field(default=None, ge=0)
    min_bathrooms: int | None = Field(default=None, ge=0)
    max_bathrooms: int | None = Field(default=None, ge=0)
    min_square_feet: Decimal | None = Field(default=None, ge=0)
    max_square_feet: Decimal | None = Field(default=None, ge=0)
    min_year: int | None = None
    max_year: int | None = None

    property_type: PropertyType | None = None
    status: PropertyStatus | None = None
    listing_type: ListingType | None = None
    condition: PropertyCondition | None = None

    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    neighborhood: str | None = None

    has_pool: bool | None = None
    has_garden: bool | None = None
    has_garage: bool | None = None
    has_fireplace: bool | None = None
    has_air_conditioning: bool | None = None
    has_heating: bool | None = None
    is_furnished: bool | None = None
    pets_allowed: bool | None = None

    sort_by: str = "createdAt"
    sort_descending: bool = True

    @field_validator("page_size")
    @classmethod
    def _cap_page_size(cls, value: int) -> int:
        max_page_size = get_settings().max_page_size
        if value > max_page_size:
            raise ValueError(f"Page size cannot exceed {max_page_size}")
        return value

    @model_validator(mode="after")
    def _check_ranges(self) -> PropertyFilters:
        bounds = (
            ("price", self.min_price, self.max_price),
            ("bedrooms", self.min_bedrooms, self.max_bedrooms),
            ("bathrooms", self.min_bathrooms, self.max_bathrooms),
            ("square feet", self.min_square_feet, self.max_square_feet),
            ("year", self.min_year, self.max_year),
        )
        for label, lower, upper in bounds:
            if lower is not None and upper is not None and lower > upper:
                raise ValueError(f"Minimum {label} cannot exceed maximum {label}")
        return self


class PropertyResponse(CamelModel):
    id: uuid.UUID
    name: str
    address: str
    price: Decimal
    code_internal: str
    year: int
    description: str | None = None
    property_type: PropertyType
    status: PropertyStatus
    listing_type: ListingType
    condition: PropertyCondition

    bedrooms: int | None = None
    bathrooms: int | None = None
    half_bathrooms: int | None = None
    parking_spaces: int | None = None
    square_feet: Decimal | None = None
    lot_size: Decimal | None = None

    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    neighborhood: str | None = None
    latitude: Decimal | None = None
    longitude: Decimal | None = None

    has_pool: bool = False
    has_garden: bool = False
    has_garage: bool = False
    has_fireplace: bool = False
    has_air_conditioning: bool = False
    has_heating: bool = False
    is_furnished: bool = False
    pets_allowed: bool = False

    monthly_rent: Decimal | None = None
    property_tax: Decimal | None = None
    hoa_fees: Decimal | None = None

    available_from: datetime | None = None
    listed_date: datetime | None = None
    sold_date: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None

    owner_id: uuid.UUID
    owner_name: str | None = None
    images: list[PropertyImageResponse] = Field(default_factory=list)
    primary_image_url: str | None = None


class PropertyTraceResponse(CamelModel):
    id: uuid.UUID
    property_id: uuid.UUID
    date_sale: datetime
    name: str
    value: Decimal
    tax: Decimal
    description: str | None = None
    transaction_type: str | None = None
    agent_name: str | None = None
    buyer_name: str | None = None
    seller_name: str | None = None
    commission_rate: Decimal | None = None
    commission_amount: Decimal | None = None
    created_at: datetime


class PropertyDetailResponse(PropertyResponse):
    """Property with its full trace history, newest first."""

    traces: list[PropertyTraceResponse] = Field(default_factory=list)
