"""Entity to response model mapping.

Mappers only read attributes that the caller's fetch shape loaded; a
relationship that was not eager-loaded is treated as empty.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect

from property_registry.models import Owner, Property, PropertyImage, PropertyTrace
from property_registry.schemas.image import PropertyImageResponse
from property_registry.schemas.owner import OwnerResponse
from property_registry.schemas.property import (
    PropertyDetailResponse,
    PropertyResponse,
    PropertyTraceResponse,
)


def _loaded(entity: object, attribute: str) -> bool:
    return attribute not in inspect(entity).unloaded


def _column_values(entity: object) -> dict[str, Any]:
    return {
        attr.key: getattr(entity, attr.key)
        for attr in inspect(type(entity)).column_attrs
    }


def to_image_response(image: PropertyImage) -> PropertyImageResponse:
    return PropertyImageResponse.model_validate(image)


def to_trace_response(trace: PropertyTrace) -> PropertyTraceResponse:
    return PropertyTraceResponse.model_validate(trace)


def to_owner_response(owner: Owner) -> OwnerResponse:
    return OwnerResponse.model_validate(owner)


def _visible_images(property_: Property) -> list[PropertyImage]:
    if not _loaded(property_, "images"):
        return []
    images = [image for image in property_.images if image.is_active and image.enabled]
    # Stable sort; the collection is already loaded in (display_order, created_at).
    return sorted(images, key=lambda image: image.display_order)


def primary_image_url(images: list[PropertyImage]) -> str | None:
    """File of the primary image, else of the first image in display order."""

    for image in images:
        if image.is_primary:
            return image.file
    return images[0].file if images else None


def _property_payload(property_: Property) -> dict[str, Any]:
    payload = _column_values(property_)
    images = _visible_images(property_)

    owner_name = None
    if _loaded(property_, "owner") and property_.owner is not None:
        owner_name = property_.owner.name

    payload["owner_name"] = owner_name
    payload["images"] = [to_image_response(image) for image in images]
    payload["primary_image_url"] = primary_image_url(images)
    return payload


def to_property_response(property_: Property) -> PropertyResponse:
    return PropertyResponse.model_validate(_property_payload(property_))


def to_property_detail_response(property_: Property) -> PropertyDetailResponse:
    payload = _property_payload(property_)
    traces = property_.traces if _loaded(property_, "traces") else []
    payload["traces"] = [
        to_trace_response(trace) for trace in traces if trace.is_active
    ]
    return PropertyDetailResponse.model_validate(payload)
