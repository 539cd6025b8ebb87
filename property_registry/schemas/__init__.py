"""Pydantic request/response models and entity mappers."""

from property_registry.schemas.common import ApiResponse, CamelModel, PagedResult
from property_registry.schemas.image import (
    AddImageRequest,
    PropertyImageResponse,
    UpdateImageRequest,
)
from property_registry.schemas.owner import CreateOwnerRequest, OwnerResponse
from property_registry.schemas.property import (
    ChangePriceRequest,
    CreatePropertyRequest,
    PropertyDetailResponse,
    PropertyFilters,
    PropertyResponse,
    PropertyTraceResponse,
    UpdatePropertyRequest,
)

__all__ = [
    "AddImageRequest",
    "ApiResponse",
    "CamelModel",
    "ChangePriceRequest",
    "CreateOwnerRequest",
    "CreatePropertyRequest",
    "OwnerResponse",
    "PagedResult",
    "PropertyDetailResponse",
    "PropertyFilters",
    "PropertyImageResponse",
    "PropertyResponse",
    "PropertyTraceResponse",
    "UpdateImageRequest",
    "UpdatePropertyRequest",
]
