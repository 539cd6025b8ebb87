"""Business logic for property listings and their trace history."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from property_registry.db.repositories import (
    add_entity,
    add_trace,
    fetch_last_trace,
    fetch_owner,
    fetch_properties_by_owner,
    fetch_properties_page,
    fetch_property,
    fetch_property_by_code,
    fetch_property_full,
    fetch_property_with_owner_and_images,
    fetch_traces_by_property,
    fetch_traces_in_range,
    property_code_exists,
    soft_delete_entity,
    update_entity,
)
from property_registry.db.unit_of_work import UnitOfWork
from property_registry.models import Property, PropertyStatus, PropertyTrace
from property_registry.models.base import utcnow
from property_registry.schemas.common import ApiResponse, PagedResult
from property_registry.schemas.mapping import (
    to_property_detail_response,
    to_property_response,
    to_trace_response,
)
from property_registry.schemas.property import (
    ChangePriceRequest,
    CreatePropertyRequest,
    PropertyDetailResponse,
    PropertyFilters,
    PropertyResponse,
    PropertyTraceResponse,
    UpdatePropertyRequest,
)

logger = logging.getLogger(__name__)

PROPERTY_NOT_FOUND = "Property not found"

LISTING_TRANSACTION = "Listing"
UPDATE_TRANSACTION = "Update"
PRICE_CHANGE_TRANSACTION = "Price Change"

# Only these fields produce an "Update" trace when they change.
TRACED_TEXT_FIELDS = (("name", "Name"), ("address", "Address"))


def format_currency(value: Decimal) -> str:
    return f"${value:,.2f}"


class PropertyService:
    """Service layer for property mutations, queries and trace history.

    Each mutation runs inside one ``UnitOfWork.transaction()``: the entity
    write and its trace commit together or not at all.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._uow = UnitOfWork(session)

    async def create_property(
        self, request: CreatePropertyRequest
    ) -> ApiResponse[PropertyResponse]:
        logger.info("Creating property with code %s", request.code_internal)

        async with self._uow.transaction():
            owner = await fetch_owner(self._session, request.owner_id)
            if owner is None:
                logger.warning("Owner not found: %s", request.owner_id)
                return ApiResponse[PropertyResponse].error_response(
                    "Owner not found", 404
                )

            if await property_code_exists(self._session, request.code_internal):
                logger.warning(
                    "Property code already exists: %s", request.code_internal
                )
                return ApiResponse[PropertyResponse].error_response(
                    "Property code already exists", 400
                )

            property_ = Property(
                **request.model_dump(),
                id=uuid.uuid4(),
                status=PropertyStatus.AVAILABLE,
                listed_date=utcnow(),
            )
            await add_entity(self._session, property_)

            await self._record_trace(
                property_,
                name="Property Listed",
                transaction_type=LISTING_TRANSACTION,
                value=property_.price,
                description="Initial property listing",
            )

            created = await fetch_property_with_owner_and_images(
                self._session, property_.id
            )
            response = to_property_response(created)

        logger.info("Property created: %s", response.id)
        return ApiResponse[PropertyResponse].success_response(
            response, "Property created successfully"
        )

    async def update_property(
        self, property_id: uuid.UUID, request: UpdatePropertyRequest
    ) -> ApiResponse[PropertyResponse]:
        logger.info("Updating property %s", property_id)
        changes = request.changes()

        async with self._uow.transaction():
            property_ = await fetch_property_with_owner_and_images(
                self._session, property_id
            )
            if property_ is None:
                logger.warning("Property not found: %s", property_id)
                return ApiResponse[PropertyResponse].error_response(
                    PROPERTY_NOT_FOUND, 404
                )

            diff: list[str] = []
            for field_name, label in TRACED_TEXT_FIELDS:
                new_value = changes.pop(field_name, None)
                old_value = getattr(property_, field_name)
                if new_value is not None and new_value != old_value:
                    diff.append(f"{label}: {old_value} → {new_value}")
                    setattr(property_, field_name, new_value)

            new_price = changes.pop("price", None)
            if new_price is not None and new_price != property_.price:
                diff.append(
                    f"Price: {format_currency(property_.price)} → "
                    f"{format_currency(new_price)}"
                )
                property_.price = new_price

            for field_name, value in changes.items():
                setattr(property_, field_name, value)

            await update_entity(self._session, property_)

            if diff:
                await self._record_trace(
                    property_,
                    name="Property Updated",
                    transaction_type=UPDATE_TRANSACTION,
                    value=property_.price,
                    description="Property updated. Changes: " + ", ".join(diff),
                )

            response = to_property_response(property_)

        logger.info("Property updated: %s (%d traced changes)", property_id, len(diff))
        return ApiResponse[PropertyResponse].success_response(
            response, "Property updated successfully"
        )

    async def change_price(
        self, property_id: uuid.UUID, request: ChangePriceRequest
    ) -> ApiResponse[PropertyResponse]:
        """Set a new price and always append a "Price Change" trace."""

        logger.info(
            "Changing price for property %s to %s", property_id, request.new_price
        )

        async with self._uow.transaction():
            property_ = await fetch_property_with_owner_and_images(
                self._session, property_id
            )
            if property_ is None:
                logger.warning("Property not found: %s", property_id)
                return ApiResponse[PropertyResponse].error_response(
                    PROPERTY_NOT_FOUND, 404
                )

            old_price = property_.price
            property_.price = request.new_price
            await update_entity(self._session, property_)

            description = (
                f"Price changed from {format_currency(old_price)} "
                f"to {format_currency(request.new_price)}."
            )
            if request.reason and request.reason.strip():
                description += f" Reason: {request.reason.strip()}"

            await self._record_trace(
                property_,
                name="Price Change",
                transaction_type=PRICE_CHANGE_TRANSACTION,
                value=request.new_price,
                description=description,
            )

            response = to_property_response(property_)

        logger.info("Price changed for property %s", property_id)
        return ApiResponse[PropertyResponse].success_response(
            response, "Price updated successfully"
        )

    async def delete_property(self, property_id: uuid.UUID) -> ApiResponse[bool]:
        """Soft delete; no trace is written."""

        logger.info("Deleting property %s", property_id)

        async with self._uow.transaction():
            property_ = await fetch_property(self._session, property_id)
            if property_ is None:
                logger.warning("Property not found: %s", property_id)
                return ApiResponse[bool].error_response(PROPERTY_NOT_FOUND, 404)

            await soft_delete_entity(self._session, property_)

        logger.info("Property deleted: %s", property_id)
        return ApiResponse[bool].success_response(True, "Property deleted successfully")

    async def get_property(
        self, property_id: uuid.UUID
    ) -> ApiResponse[PropertyDetailResponse]:
        async with self._uow.reading():
            property_ = await fetch_property_full(self._session, property_id)
        if property_ is None:
            logger.warning("Property not found: %s", property_id)
            return ApiResponse[PropertyDetailResponse].error_response(
                PROPERTY_NOT_FOUND, 404
            )

        return ApiResponse[PropertyDetailResponse].success_response(
            to_property_detail_response(property_)
        )

    async def get_property_by_code(
        self, code_internal: str
    ) -> ApiResponse[PropertyResponse]:
        async with self._uow.reading():
            property_ = await fetch_property_by_code(
                self._session, code_internal.strip()
            )
        if property_ is None:
            logger.warning("Property not found for code: %s", code_internal)
            return ApiResponse[PropertyResponse].error_response(
                PROPERTY_NOT_FOUND, 404
            )

        return ApiResponse[PropertyResponse].success_response(
            to_property_response(property_)
        )

    async def get_properties(
        self, filters: PropertyFilters
    ) -> ApiResponse[PagedResult[PropertyResponse]]:
        logger.info(
            "Getting properties page=%s size=%s sort=%s",
            filters.page_number,
            filters.page_size,
            filters.sort_by,
        )

        async with self._uow.reading():
            rows, total = await fetch_properties_page(
                self._session, **filters.model_dump()
            )
        page = PagedResult[PropertyResponse](
            items=[to_property_response(row) for row in rows],
            total_count=total,
            page_number=filters.page_number,
            page_size=filters.page_size,
        )

        logger.info("Retrieved %d properties out of %d", len(rows), total)
        return ApiResponse[PagedResult[PropertyResponse]].success_response(page)

    async def get_properties_by_owner(
        self, owner_id: uuid.UUID
    ) -> ApiResponse[list[PropertyResponse]]:
        async with self._uow.reading():
            rows = await fetch_properties_by_owner(self._session, owner_id)
        return ApiResponse[list[PropertyResponse]].success_response(
            [to_property_response(row) for row in rows]
        )

    async def search_by_location(
        self,
        city: str,
        state: str | None = None,
        *,
        page_number: int = 1,
        page_size: int | None = None,
    ) -> ApiResponse[PagedResult[PropertyResponse]]:
        """Paged search on city and optional state, newest first."""

        params: dict[str, object] = {
            "city": city,
            "state": state,
            "page_number": page_number,
        }
        if page_size is not None:
            params["page_size"] = page_size

        result = await self.get_properties(PropertyFilters(**params))
        if result.data is not None:
            location = f"{city}, {state}" if state else city
            result.message = (
                f"Found {result.data.total_count} properties in {location}"
            )
        return result

    async def get_property_traces(
        self, property_id: uuid.UUID
    ) -> ApiResponse[list[PropertyTraceResponse]]:
        """Trace history of a property, newest first."""

        async with self._uow.reading():
            if await fetch_property(self._session, property_id) is None:
                return ApiResponse[list[PropertyTraceResponse]].error_response(
                    PROPERTY_NOT_FOUND, 404
                )

            traces = await fetch_traces_by_property(self._session, property_id)
        return ApiResponse[list[PropertyTraceResponse]].success_response(
            [to_trace_response(trace) for trace in traces]
        )

    async def get_last_trace(
        self, property_id: uuid.UUID
    ) -> ApiResponse[PropertyTraceResponse]:
        async with self._uow.reading():
            if await fetch_property(self._session, property_id) is None:
                return ApiResponse[PropertyTraceResponse].error_response(
                    PROPERTY_NOT_FOUND, 404
                )

            trace = await fetch_last_trace(self._session, property_id)
        if trace is None:
            return ApiResponse[PropertyTraceResponse].error_response(
                "No traces recorded for property", 404
            )
        return ApiResponse[PropertyTraceResponse].success_response(
            to_trace_response(trace)
        )

    async def get_traces_in_range(
        self, property_id: uuid.UUID, start: datetime, end: datetime
    ) -> ApiResponse[list[PropertyTraceResponse]]:
        if start > end:
            return ApiResponse[list[PropertyTraceResponse]].error_response(
                "Start date must not be after end date", 400
            )

        async with self._uow.reading():
            if await fetch_property(self._session, property_id) is None:
                return ApiResponse[list[PropertyTraceResponse]].error_response(
                    PROPERTY_NOT_FOUND, 404
                )

            traces = await fetch_traces_in_range(
                self._session, property_id, start, end
            )
        return ApiResponse[list[PropertyTraceResponse]].success_response(
            [to_trace_response(trace) for trace in traces]
        )

    async def _record_trace(
        self,
        property_: Property,
        *,
        name: str,
        transaction_type: str,
        value: Decimal,
        description: str,
    ) -> PropertyTrace:
        trace = PropertyTrace(
            property_id=property_.id,
            date_sale=utcnow(),
            name=name,
            value=value,
            tax=property_.property_tax or Decimal("0"),
            description=description,
            transaction_type=transaction_type,
        )
        return await add_trace(self._session, trace)
