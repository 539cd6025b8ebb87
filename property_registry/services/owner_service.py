"""Business logic for property owners."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from property_registry.db.repositories import (
    add_entity,
    count_active_properties_for_owner,
    fetch_owner,
    owner_document_exists,
    owner_email_exists,
    search_owners_by_name,
    soft_delete_entity,
)
from property_registry.db.unit_of_work import UnitOfWork
from property_registry.models import Owner
from property_registry.schemas.common import ApiResponse
from property_registry.schemas.mapping import to_owner_response
from property_registry.schemas.owner import CreateOwnerRequest, OwnerResponse

logger = logging.getLogger(__name__)

OWNER_NOT_FOUND = "Owner not found"


class OwnerService:
    """Service layer for owners."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._uow = UnitOfWork(session)

    async def create_owner(
        self, request: CreateOwnerRequest
    ) -> ApiResponse[OwnerResponse]:
        logger.info("Creating owner %s", request.name)

        async with self._uow.transaction():
            if request.email and await owner_email_exists(
                self._session, request.email
            ):
                logger.warning("Owner email already exists: %s", request.email)
                return ApiResponse[OwnerResponse].error_response(
                    "Owner email already exists", 409
                )

            if request.document_number and await owner_document_exists(
                self._session, request.document_type, request.document_number
            ):
                logger.warning(
                    "Owner document already exists: %s %s",
                    request.document_type,
                    request.document_number,
                )
                return ApiResponse[OwnerResponse].error_response(
                    "Owner document already exists", 409
                )

            owner = Owner(id=uuid.uuid4(), **request.model_dump())
            if owner.email:
                owner.email = owner.email.lower()
            await add_entity(self._session, owner)
            response = to_owner_response(owner)

        logger.info("Owner created: %s", response.id)
        return ApiResponse[OwnerResponse].success_response(
            response, "Owner created successfully"
        )

    async def get_owner(self, owner_id: uuid.UUID) -> ApiResponse[OwnerResponse]:
        async with self._uow.reading():
            owner = await fetch_owner(self._session, owner_id)
        if owner is None:
            logger.warning("Owner not found: %s", owner_id)
            return ApiResponse[OwnerResponse].error_response(OWNER_NOT_FOUND, 404)
        return ApiResponse[OwnerResponse].success_response(to_owner_response(owner))

    async def search_owners(self, name: str) -> ApiResponse[list[OwnerResponse]]:
        if not name or not name.strip():
            return ApiResponse[list[OwnerResponse]].error_response(
                "Search name is required", 400
            )

        async with self._uow.reading():
            owners = await search_owners_by_name(self._session, name)
        return ApiResponse[list[OwnerResponse]].success_response(
            [to_owner_response(owner) for owner in owners]
        )

    async def delete_owner(self, owner_id: uuid.UUID) -> ApiResponse[bool]:
        """Soft delete an owner that has no active properties."""

        logger.info("Deleting owner %s", owner_id)

        async with self._uow.transaction():
            owner = await fetch_owner(self._session, owner_id)
            if owner is None:
                logger.warning("Owner not found: %s", owner_id)
                return ApiResponse[bool].error_response(OWNER_NOT_FOUND, 404)

            active = await count_active_properties_for_owner(self._session, owner_id)
            if active:
                logger.warning(
                    "Owner %s still has %d active properties", owner_id, active
                )
                return ApiResponse[bool].error_response(
                    "Owner has active properties", 400
                )

            await soft_delete_entity(self._session, owner)

        logger.info("Owner deleted: %s", owner_id)
        return ApiResponse[bool].success_response(True, "Owner deleted successfully")
