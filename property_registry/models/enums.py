"""Closed enumerations for property categorical fields."""

from enum import StrEnum

from sqlalchemy import Enum


class PropertyType(StrEnum):
    HOUSE = "house"
    APARTMENT = "apartment"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    VILLA = "villa"
    COMMERCIAL = "commercial"
    LAND = "land"
    INDUSTRIAL = "industrial"


class PropertyStatus(StrEnum):
    AVAILABLE = "available"
    SOLD = "sold"
    UNDER_CONTRACT = "under_contract"
    RENTED = "rented"
    OFF_MARKET = "off_market"


class ListingType(StrEnum):
    SALE = "sale"
    RENT = "rent"
    BOTH = "both"


class PropertyCondition(StrEnum):
    NEW = "new"
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    NEEDS_RENOVATION = "needs_renovation"


def enum_column_type(enum_cls: type[StrEnum]) -> Enum:
    """VARCHAR-backed enum storing member values."""

    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )
