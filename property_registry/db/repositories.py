"""Repository helpers for owner, property, image and trace persistence.

Every read carries its own ``is_active`` predicate; there is no global
soft-delete filter on the session.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TypeVar

from sqlalchemy import ColumnElement, Select, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from property_registry.models import (
    ListingType,
    Owner,
    Property,
    PropertyCondition,
    PropertyImage,
    PropertyStatus,
    PropertyTrace,
    PropertyType,
)
from property_registry.models.base import AuditMixin, utcnow

EntityT = TypeVar("EntityT", bound=AuditMixin)

# Normalized sort key (lowercase, no underscores) -> column.
SORTABLE_COLUMNS: dict[str, ColumnElement] = {
    "name": Property.name,
    "price": Property.price,
    "year": Property.year,
    "createdat": Property.created_at,
    "updatedat": Property.updated_at,
    "city": Property.city,
    "bedrooms": Property.bedrooms,
    "bathrooms": Property.bathrooms,
    "squarefeet": Property.square_feet,
}

AMENITY_FLAGS = (
    "has_pool",
    "has_garden",
    "has_garage",
    "has_fireplace",
    "has_air_conditioning",
    "has_heating",
    "is_furnished",
    "pets_allowed",
)

SEARCHABLE_COLUMNS = (
    Property.name,
    Property.address,
    Property.description,
    Property.city,
    Property.neighborhood,
    Property.code_internal,
)


def _clean_term(value: str | None) -> str | None:
    """Stripped search text, or ``None`` when nothing is left to match."""

    if value is None:
        return None
    return value.strip() or None


# --------------------------------------------------------------------------
# Generic writes
# --------------------------------------------------------------------------


async def add_entity(session: AsyncSession, entity: EntityT) -> EntityT:
    """Stage a new row and flush so defaults and the id are populated."""

    session.add(entity)
    await session.flush()
    return entity


async def update_entity(session: AsyncSession, entity: EntityT) -> EntityT:
    entity.touch()
    await session.flush()
    return entity


async def soft_delete_entity(session: AsyncSession, entity: EntityT) -> EntityT:
    entity.is_active = False
    entity.touch()
    await session.flush()
    return entity


# --------------------------------------------------------------------------
# Owners
# --------------------------------------------------------------------------


async def fetch_owner(session: AsyncSession, owner_id: uuid.UUID) -> Owner | None:
    stmt = select(Owner).where(Owner.id == owner_id).where(Owner.is_active == True)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def fetch_owner_by_email(session: AsyncSession, email: str) -> Owner | None:
    stmt = (
        select(Owner)
        .where(func.lower(Owner.email) == email.strip().lower())
        .where(Owner.is_active == True)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def owner_email_exists(
    session: AsyncSession, email: str, *, exclude_owner_id: uuid.UUID | None = None
) -> bool:
    stmt = (
        select(Owner.id)
        .where(func.lower(Owner.email) == email.strip().lower())
        .where(Owner.is_active == True)
    )
    if exclude_owner_id is not None:
        stmt = stmt.where(Owner.id != exclude_owner_id)

    result = await session.execute(stmt.limit(1))
    return result.scalar_one_or_none() is not None


async def owner_document_exists(
    session: AsyncSession,
    document_type: str | None,
    document_number: str,
    *,
    exclude_owner_id: uuid.UUID | None = None,
) -> bool:
    stmt = (
        select(Owner.id)
        .where(Owner.document_number == document_number)
        .where(Owner.is_active == True)
    )
    if document_type is None:
        stmt = stmt.where(Owner.document_type.is_(None))
    else:
        stmt = stmt.where(Owner.document_type == document_type)
    if exclude_owner_id is not None:
        stmt = stmt.where(Owner.id != exclude_owner_id)

    result = await session.execute(stmt.limit(1))
    return result.scalar_one_or_none() is not None


async def search_owners_by_name(
    session: AsyncSession, name: str, *, limit: int = 50
) -> list[Owner]:
    stmt = (
        select(Owner)
        .where(Owner.name.icontains(name.strip(), autoescape=True))
        .where(Owner.is_active == True)
        .order_by(Owner.name, Owner.id)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def count_active_properties_for_owner(
    session: AsyncSession, owner_id: uuid.UUID
) -> int:
    stmt = (
        select(func.count(Property.id))
        .where(Property.owner_id == owner_id)
        .where(Property.is_active == True)
    )
    result = await session.execute(stmt)
    return int(result.scalar_one())


# --------------------------------------------------------------------------
# Properties
# --------------------------------------------------------------------------


async def fetch_property(
    session: AsyncSession, property_id: uuid.UUID
) -> Property | None:
    """Fetch an active property without relationships."""

    stmt = (
        select(Property)
        .where(Property.id == property_id)
        .where(Property.is_active == True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def fetch_property_with_owner_and_images(
    session: AsyncSession, property_id: uuid.UUID
) -> Property | None:
    """Fetch an active property with its owner and images loaded."""

    stmt = (
        select(Property)
        .options(selectinload(Property.owner), selectinload(Property.images))
        .where(Property.id == property_id)
        .where(Property.is_active == True)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def fetch_property_full(
    session: AsyncSession, property_id: uuid.UUID
) -> Property | None:
    """Fetch an active property with owner, images and traces loaded."""

    stmt = (
        select(Property)
        .options(
            selectinload(Property.owner),
            selectinload(Property.images),
            selectinload(Property.traces),
        )
        .where(Property.id == property_id)
        .where(Property.is_active == True)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def fetch_property_by_code(
    session: AsyncSession, code_internal: str
) -> Property | None:
    stmt = (
        select(Property)
        .options(selectinload(Property.owner), selectinload(Property.images))
        .where(Property.code_internal == code_internal)
        .where(Property.is_active == True)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def property_code_exists(
    session: AsyncSession,
    code_internal: str,
    *,
    exclude_property_id: uuid.UUID | None = None,
) -> bool:
    stmt = (
        select(Property.id)
        .where(Property.code_internal == code_internal)
        .where(Property.is_active == True)
    )
    if exclude_property_id is not None:
        stmt = stmt.where(Property.id != exclude_property_id)

    result = await session.execute(stmt.limit(1))
    return result.scalar_one_or_none() is not None


async def fetch_properties_by_owner(
    session: AsyncSession, owner_id: uuid.UUID
) -> list[Property]:
    stmt = (
        select(Property)
        .options(selectinload(Property.owner), selectinload(Property.images))
        .where(Property.owner_id == owner_id)
        .where(Property.is_active == True)
        .order_by(Property.created_at.desc(), Property.id)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


def build_property_query(
    *,
    search_term: str | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    min_bedrooms: int | None = None,
    max_bedrooms: int | None = None,
    min_bathrooms: int | None = None,
    max_bathrooms: int | None = None,
    min_square_feet: Decimal | None = None,
    max_square_feet: Decimal | None = None,
    min_year: int | None = None,
    max_year: int | None = None,
    property_type: PropertyType | None = None,
    status: PropertyStatus | None = None,
    listing_type: ListingType | None = None,
    condition: PropertyCondition | None = None,
    city: str | None = None,
    state: str | None = None,
    zip_code: str | None = None,
    neighborhood: str | None = None,
    has_pool: bool | None = None,
    has_garden: bool | None = None,
    has_garage: bool | None = None,
    has_fireplace: bool | None = None,
    has_air_conditioning: bool | None = None,
    has_heating: bool | None = None,
    is_furnished: bool | None = None,
    pets_allowed: bool | None = None,
) -> Select[tuple[Property]]:
    """Build the filtered, unsorted and unpaged property statement.

    All supplied predicates are ANDed; ``None`` means "no constraint".
    """

    stmt = select(Property).where(Property.is_active == True)

    term = _clean_term(search_term)
    if term is not None:
        stmt = stmt.where(
            or_(
                *(
                    column.icontains(term, autoescape=True)
                    for column in SEARCHABLE_COLUMNS
                )
            )
        )

    ranges = (
        (Property.price, min_price, max_price),
        (Property.bedrooms, min_bedrooms, max_bedrooms),
        (Property.bathrooms, min_bathrooms, max_bathrooms),
        (Property.square_feet, min_square_feet, max_square_feet),
        (Property.year, min_year, max_year),
    )
    for column, lower, upper in ranges:
        if lower is not None:
            stmt = stmt.where(column >= lower)
        if upper is not None:
            stmt = stmt.where(column <= upper)

    if property_type is not None:
        stmt = stmt.where(Property.property_type == property_type)

    if status is not None:
        stmt = stmt.where(Property.status == status)

    if listing_type is not None:
        stmt = stmt.where(Property.listing_type == listing_type)

    if condition is not None:
        stmt = stmt.where(Property.condition == condition)

    locations = (
        (Property.city, city),
        (Property.state, state),
        (Property.zip_code, zip_code),
        (Property.neighborhood, neighborhood),
    )
    for column, value in locations:
        term = _clean_term(value)
        if term is not None:
            stmt = stmt.where(column.icontains(term, autoescape=True))

    flags = {
        "has_pool": has_pool,
        "has_garden": has_garden,
        "has_garage": has_garage,
        "has_fireplace": has_fireplace,
        "has_air_conditioning": has_air_conditioning,
        "has_heating": has_heating,
        "is_furnished": is_furnished,
        "pets_allowed": pets_allowed,
    }
    for flag_name in AMENITY_FLAGS:
        value = flags[flag_name]
        if value is not None:
            stmt = stmt.where(getattr(Property, flag_name) == value)

    return stmt


def normalize_sort_key(sort_by: str | None) -> str:
    return (sort_by or "").replace("_", "").strip().lower()


def apply_property_sorting(
    stmt: Select[tuple[Property]], sort_by: str | None, sort_descending: bool
) -> Select[tuple[Property]]:
    """Order by a known key, falling back to newest first for unknown keys.

    ``Property.id`` is always the last ordering term so the order is total.
    """

    column = SORTABLE_COLUMNS.get(normalize_sort_key(sort_by))
    if column is None:
        return stmt.order_by(Property.created_at.desc(), Property.id)

    primary = column.desc() if sort_descending else column.asc()
    return stmt.order_by(primary, Property.id)


async def fetch_properties_page(
    session: AsyncSession,
    *,
    page_number: int = 1,
    page_size: int = 10,
    sort_by: str | None = "createdAt",
    sort_descending: bool = True,
    **filters,
) -> tuple[list[Property], int]:
    """Return one page of filtered properties and the filtered total.

    The total is counted on the filtered set before sorting and paging; a
    page past the end yields an empty list.
    """

    stmt = build_property_query(**filters)

    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = int((await session.execute(count_stmt)).scalar_one())

    offset = max(0, (page_number - 1) * page_size)
    page_stmt = (
        apply_property_sorting(stmt, sort_by, sort_descending)
        .options(selectinload(Property.owner), selectinload(Property.images))
        .offset(offset)
        .limit(page_size)
    )
    result = await session.execute(page_stmt)
    return list(result.scalars().all()), total


# --------------------------------------------------------------------------
# Images
# --------------------------------------------------------------------------


async def fetch_image(
    session: AsyncSession, image_id: uuid.UUID
) -> PropertyImage | None:
    stmt = (
        select(PropertyImage)
        .where(PropertyImage.id == image_id)
        .where(PropertyImage.is_active == True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def fetch_images_by_property(
    session: AsyncSession, property_id: uuid.UUID
) -> list[PropertyImage]:
    """Enabled images of a property in display order."""

    stmt = (
        select(PropertyImage)
        .where(PropertyImage.property_id == property_id)
        .where(PropertyImage.enabled == True)
        .where(PropertyImage.is_active == True)
        .order_by(
            PropertyImage.display_order,
            PropertyImage.created_at,
            PropertyImage.id,
        )
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def fetch_primary_image(
    session: AsyncSession, property_id: uuid.UUID
) -> PropertyImage | None:
    stmt = (
        select(PropertyImage)
        .where(PropertyImage.property_id == property_id)
        .where(PropertyImage.is_primary == True)
        .where(PropertyImage.enabled == True)
        .where(PropertyImage.is_active == True)
        .order_by(PropertyImage.display_order, PropertyImage.id)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def fetch_first_enabled_image(
    session: AsyncSession,
    property_id: uuid.UUID,
    *,
    exclude_image_id: uuid.UUID | None = None,
) -> PropertyImage | None:
    stmt = (
        select(PropertyImage)
        .where(PropertyImage.property_id == property_id)
        .where(PropertyImage.enabled == True)
        .where(PropertyImage.is_active == True)
    )
    if exclude_image_id is not None:
        stmt = stmt.where(PropertyImage.id != exclude_image_id)

    stmt = stmt.order_by(
        PropertyImage.display_order, PropertyImage.created_at, PropertyImage.id
    ).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def fetch_max_display_order(
    session: AsyncSession, property_id: uuid.UUID
) -> int:
    """Highest display order among the property's images, 0 when none."""

    stmt = (
        select(func.max(PropertyImage.display_order))
        .where(PropertyImage.property_id == property_id)
        .where(PropertyImage.is_active == True)
    )
    result = await session.execute(stmt)
    return int(result.scalar_one_or_none() or 0)


async def clear_primary_images(
    session: AsyncSession,
    property_id: uuid.UUID,
    *,
    exclude_image_id: uuid.UUID | None = None,
) -> int:
    """Unset ``is_primary`` on the property's images; returns rows changed."""

    stmt = (
        update(PropertyImage)
        .where(PropertyImage.property_id == property_id)
        .where(PropertyImage.is_primary == True)
    )
    if exclude_image_id is not None:
        stmt = stmt.where(PropertyImage.id != exclude_image_id)

    stmt = stmt.values(is_primary=False, updated_at=utcnow()).execution_options(
        synchronize_session="fetch"
    )
    result = await session.execute(stmt)
    return result.rowcount or 0


async def remove_image(session: AsyncSession, image: PropertyImage) -> None:
    """Physically delete an image row."""

    await session.delete(image)
    await session.flush()


# --------------------------------------------------------------------------
# Traces
# --------------------------------------------------------------------------


async def add_trace(session: AsyncSession, trace: PropertyTrace) -> PropertyTrace:
    """Append a trace row. Traces are never updated after this."""

    session.add(trace)
    await session.flush()
    return trace


async def fetch_traces_by_property(
    session: AsyncSession, property_id: uuid.UUID
) -> list[PropertyTrace]:
    """Traces of a property, newest first."""

    stmt = (
        select(PropertyTrace)
        .where(PropertyTrace.property_id == property_id)
        .where(PropertyTrace.is_active == True)
        .order_by(
            PropertyTrace.date_sale.desc(),
            PropertyTrace.created_at.desc(),
            PropertyTrace.id,
        )
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def fetch_last_trace(
    session: AsyncSession, property_id: uuid.UUID
) -> PropertyTrace | None:
    stmt = (
        select(PropertyTrace)
        .where(PropertyTrace.property_id == property_id)
        .where(PropertyTrace.is_active == True)
        .order_by(PropertyTrace.date_sale.desc(), PropertyTrace.created_at.desc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def fetch_traces_in_range(
    session: AsyncSession,
    property_id: uuid.UUID,
    start: datetime,
    end: datetime,
) -> list[PropertyTrace]:
    """Traces whose ``date_sale`` falls within ``[start, end]``, oldest first."""

    stmt = (
        select(PropertyTrace)
        .where(PropertyTrace.property_id == property_id)
        .where(PropertyTrace.is_active == True)
        .where(PropertyTrace.date_sale >= start)
        .where(PropertyTrace.date_sale <= end)
        .order_by(PropertyTrace.date_sale, PropertyTrace.created_at)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
