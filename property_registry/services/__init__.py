"""Service layer."""

from property_registry.services.image_service import PropertyImageService
from property_registry.services.owner_service import OwnerService
from property_registry.services.property_service import PropertyService

__all__ = ["OwnerService", "PropertyImageService", "PropertyService"]
