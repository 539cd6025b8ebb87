"""Property listing table model."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from property_registry.models.base import AuditMixin, Base
from property_registry.models.enums import (
    ListingType,
    PropertyCondition,
    PropertyStatus,
    PropertyType,
    enum_column_type,
)

if TYPE_CHECKING:
    from property_registry.models.owner import Owner
    from property_registry.models.property_image import PropertyImage
    from property_registry.models.property_trace import PropertyTrace


class Property(AuditMixin, Base):
    """Real-estate listing with its images and trace history."""

    __tablename__ = "properties"
    __table_args__ = (
        Index(
            "uq_properties_code_internal_active",
            "code_internal",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
        Index("idx_properties_owner", "owner_id"),
        Index("idx_properties_type", "property_type"),
        Index("idx_properties_status", "status"),
        Index("idx_properties_listing_type", "listing_type"),
        Index("idx_properties_price", "price"),
        Index("idx_properties_location", "city", "state"),
        Index("idx_properties_zip", "zip_code"),
        Index("idx_properties_created", "created_at"),
        Index("idx_properties_active", "is_active"),
        CheckConstraint("price > 0", name="price_positive"),
        CheckConstraint(
            "latitude IS NULL OR (latitude >= -90 AND latitude <= 90)",
            name="latitude_range",
        ),
        CheckConstraint(
            "longitude IS NULL OR (longitude >= -180 AND longitude <= 180)",
            name="longitude_range",
        ),
    )

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    address: Mapped[str] = mapped_column(String(300), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    code_internal: Mapped[str] = mapped_column(String(20), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    property_type: Mapped[PropertyType] = mapped_column(
        enum_column_type(PropertyType), nullable=False
    )
    status: Mapped[PropertyStatus] = mapped_column(
        enum_column_type(PropertyStatus),
        nullable=False,
        default=PropertyStatus.AVAILABLE,
    )
    listing_type: Mapped[ListingType] = mapped_column(
        enum_column_type(ListingType), nullable=False, default=ListingType.SALE
    )
    condition: Mapped[PropertyCondition] = mapped_column(
        enum_column_type(PropertyCondition),
        nullable=False,
        default=PropertyCondition.GOOD,
    )

    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    half_bathrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    parking_spaces: Mapped[int | None] = mapped_column(Integer, nullable=True)
    square_feet: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    lot_size: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    neighborhood: Mapped[str | None] = mapped_column(String(100), nullable=True)
    latitude: Mapped[Decimal | None] = mapped_column(Numeric(10, 8), nullable=True)
    longitude: Mapped[Decimal | None] = mapped_column(Numeric(11, 8), nullable=True)

    has_pool: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_garden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_garage: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_fireplace: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    has_air_conditioning: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    has_heating: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_furnished: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    pets_allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    monthly_rent: Mapped[Decimal | None] = mapped_column(
        Numeric(18, 2), nullable=True
    )
    property_tax: Mapped[Decimal | None] = mapped_column(
        Numeric(18, 2), nullable=True
    )
    hoa_fees: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)

    available_from: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    listed_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    sold_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("owners.id", ondelete="RESTRICT"), nullable=False
    )

    owner: Mapped[Owner] = relationship(back_populates="properties")
    images: Mapped[list[PropertyImage]] = relationship(
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="(PropertyImage.display_order, PropertyImage.created_at)",
    )
    traces: Mapped[list[PropertyTrace]] = relationship(
        back_populates="property",
        cascade="save-update, merge",
        passive_deletes="all",
        order_by="(PropertyTrace.date_sale.desc(), PropertyTrace.created_at.desc())",
    )
