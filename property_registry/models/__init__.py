"""SQLAlchemy ORM models."""

from property_registry.models.base import Base
from property_registry.models.enums import (
    ListingType,
    PropertyCondition,
    PropertyStatus,
    PropertyType,
)
from property_registry.models.owner import Owner
from property_registry.models.property import Property
from property_registry.models.property_image import PropertyImage
from property_registry.models.property_trace import PropertyTrace

__all__ = [
    "Base",
    "ListingType",
    "Owner",
    "Property",
    "PropertyCondition",
    "PropertyImage",
    "PropertyStatus",
    "PropertyTrace",
    "PropertyType",
]
