"""Property image table model."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from property_registry.models.base import AuditMixin, Base

if TYPE_CHECKING:
    from property_registry.models.property import Property


class PropertyImage(AuditMixin, Base):
    """Image attached to a property; at most one enabled primary per property."""

    __tablename__ = "property_images"
    __table_args__ = (
        Index("idx_property_images_property", "property_id"),
        Index("idx_property_images_order", "property_id", "display_order"),
        Index("idx_property_images_primary", "property_id", "is_primary"),
    )

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    file: Mapped[str] = mapped_column(String(500), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    file_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    file_size_bytes: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    thumbnail_path: Mapped[str | None] = mapped_column(String(500), nullable=True)

    property: Mapped[Property] = relationship(back_populates="images")
