"""Business logic for property images and primary-image selection."""

from __future__ import annotations

import logging
import posixpath
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from property_registry.db.repositories import (
    add_entity,
    clear_primary_images,
    fetch_first_enabled_image,
    fetch_image,
    fetch_images_by_property,
    fetch_max_display_order,
    fetch_primary_image,
    fetch_property,
    remove_image,
    update_entity,
)
from property_registry.db.unit_of_work import UnitOfWork
from property_registry.models import PropertyImage
from property_registry.schemas.common import ApiResponse
from property_registry.schemas.image import (
    AddImageRequest,
    PropertyImageResponse,
    UpdateImageRequest,
    file_extension,
)
from property_registry.schemas.mapping import to_image_response

logger = logging.getLogger(__name__)

IMAGE_NOT_FOUND = "Image not found"
PROPERTY_NOT_FOUND = "Property not found"


def extract_file_type(file: str) -> str | None:
    """Lowercase extension without the dot, or ``None`` when there is none."""

    try:
        return file_extension(file) or None
    except (TypeError, ValueError, AttributeError):
        return None


def build_thumbnail_path(file: str) -> str | None:
    """``photos/a.jpg`` -> ``photos/a_thumb.jpg``; ``None`` when not derivable."""

    try:
        root, extension = posixpath.splitext(file)
    except (TypeError, ValueError):
        return None
    if not root or root.endswith("/"):
        return None
    return f"{root}_thumb{extension}"


class PropertyImageService:
    """Service layer for property images.

    Per property at most one image is both enabled and primary after every
    call; other images are cleared before an image becomes primary.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._uow = UnitOfWork(session)

    async def add_image(
        self, property_id: uuid.UUID, request: AddImageRequest
    ) -> ApiResponse[PropertyImageResponse]:
        logger.info("Adding image to property %s", property_id)

        async with self._uow.transaction():
            property_ = await fetch_property(self._session, property_id)
            if property_ is None:
                logger.warning("Property not found: %s", property_id)
                return ApiResponse[PropertyImageResponse].error_response(
                    PROPERTY_NOT_FOUND, 404
                )

            if request.is_primary:
                cleared = await clear_primary_images(self._session, property_id)
                logger.debug("Cleared %d primary images on %s", cleared, property_id)

            display_order = request.display_order
            if not display_order:
                display_order = (
                    await fetch_max_display_order(self._session, property_id) + 1
                )

            image = PropertyImage(
                id=uuid.uuid4(),
                property_id=property_id,
                file=request.file,
                title=request.title,
                description=request.description,
                display_order=display_order,
                is_primary=request.is_primary,
                enabled=True,
                file_type=extract_file_type(request.file),
                file_size_bytes=request.file_size_bytes,
                thumbnail_path=build_thumbnail_path(request.file),
            )
            await add_entity(self._session, image)
            response = to_image_response(image)

        logger.info("Image added: %s", response.id)
        return ApiResponse[PropertyImageResponse].success_response(
            response, "Image added successfully"
        )

    async def set_primary(
        self, image_id: uuid.UUID
    ) -> ApiResponse[PropertyImageResponse]:
        logger.info("Setting primary image %s", image_id)

        async with self._uow.transaction():
            image = await fetch_image(self._session, image_id)
            if image is None:
                logger.warning("Image not found: %s", image_id)
                return ApiResponse[PropertyImageResponse].error_response(
                    IMAGE_NOT_FOUND, 404
                )
            if not image.enabled:
                return ApiResponse[PropertyImageResponse].error_response(
                    "Cannot set a disabled image as primary", 400
                )

            await clear_primary_images(
                self._session, image.property_id, exclude_image_id=image.id
            )
            image.is_primary = True
            await update_entity(self._session, image)
            response = to_image_response(image)

        logger.info("Primary image set: %s", image_id)
        return ApiResponse[PropertyImageResponse].success_response(
            response, "Primary image set successfully"
        )

    async def delete_image(self, image_id: uuid.UUID) -> ApiResponse[bool]:
        """Physically delete an image, promoting a replacement primary."""

        logger.info("Deleting image %s", image_id)

        async with self._uow.transaction():
            image = await fetch_image(self._session, image_id)
            if image is None:
                logger.warning("Image not found: %s", image_id)
                return ApiResponse[bool].error_response(IMAGE_NOT_FOUND, 404)

            property_id = image.property_id
            was_primary = image.is_primary and image.enabled
            await remove_image(self._session, image)

            if was_primary:
                replacement = await fetch_first_enabled_image(
                    self._session, property_id
                )
                if replacement is not None:
                    replacement.is_primary = True
                    await update_entity(self._session, replacement)
                    logger.info(
                        "Promoted image %s to primary on %s",
                        replacement.id,
                        property_id,
                    )

        logger.info("Image deleted: %s", image_id)
        return ApiResponse[bool].success_response(True, "Image deleted successfully")

    async def update_image(
        self, image_id: uuid.UUID, request: UpdateImageRequest
    ) -> ApiResponse[PropertyImageResponse]:
        logger.info("Updating image %s", image_id)
        changes = request.changes()

        async with self._uow.transaction():
            image = await fetch_image(self._session, image_id)
            if image is None:
                logger.warning("Image not found: %s", image_id)
                return ApiResponse[PropertyImageResponse].error_response(
                    IMAGE_NOT_FOUND, 404
                )

            was_primary = image.is_primary and image.enabled

            if "display_order" in changes and changes["display_order"] == 0:
                changes["display_order"] = (
                    await fetch_max_display_order(self._session, image.property_id)
                    + 1
                )

            if "file" in changes:
                image.file_type = extract_file_type(changes["file"])
                image.thumbnail_path = build_thumbnail_path(changes["file"])

            is_primary = changes.get("is_primary", image.is_primary)
            enabled = changes.get("enabled", image.enabled)
            if is_primary and enabled and not was_primary:
                await clear_primary_images(
                    self._session, image.property_id, exclude_image_id=image.id
                )

            for field_name, value in changes.items():
                setattr(image, field_name, value)

            await update_entity(self._session, image)
            response = to_image_response(image)

        logger.info("Image updated: %s", image_id)
        return ApiResponse[PropertyImageResponse].success_response(
            response, "Image updated successfully"
        )

    async def get_images_by_property(
        self, property_id: uuid.UUID
    ) -> ApiResponse[list[PropertyImageResponse]]:
        async with self._uow.reading():
            if await fetch_property(self._session, property_id) is None:
                return ApiResponse[list[PropertyImageResponse]].error_response(
                    PROPERTY_NOT_FOUND, 404
                )

            images = await fetch_images_by_property(self._session, property_id)
        return ApiResponse[list[PropertyImageResponse]].success_response(
            [to_image_response(image) for image in images]
        )

    async def get_image(self, image_id: uuid.UUID) -> ApiResponse[PropertyImageResponse]:
        async with self._uow.reading():
            image = await fetch_image(self._session, image_id)
        if image is None:
            return ApiResponse[PropertyImageResponse].error_response(
                IMAGE_NOT_FOUND, 404
            )
        return ApiResponse[PropertyImageResponse].success_response(
            to_image_response(image)
        )

    async def get_primary_image(
        self, property_id: uuid.UUID
    ) -> ApiResponse[PropertyImageResponse]:
        async with self._uow.reading():
            image = await fetch_primary_image(self._session, property_id)
        if image is None:
            return ApiResponse[PropertyImageResponse].error_response(
                "Primary image not found", 404
            )
        return ApiResponse[PropertyImageResponse].success_response(
            to_image_response(image)
        )
