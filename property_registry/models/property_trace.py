"""Property trace (history) table model."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, Text, Uuid, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from property_registry.exceptions import ImmutableTraceError
from property_registry.models.base import AuditMixin, Base, utcnow

if TYPE_CHECKING:
    from property_registry.models.property import Property


class PropertyTrace(AuditMixin, Base):
    """Append-only event record: listing, update or price change."""

    __tablename__ = "property_traces"
    __table_args__ = (
        Index("idx_property_traces_property", "property_id"),
        Index("idx_property_traces_date", "date_sale"),
        Index("idx_property_traces_type", "transaction_type"),
    )

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("properties.id", ondelete="RESTRICT"), nullable=False
    )
    date_sale: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    tax: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    transaction_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    agent_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    buyer_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    seller_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    commission_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(5, 2), nullable=True
    )
    commission_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(18, 2), nullable=True
    )

    property: Mapped[Property] = relationship(back_populates="traces")


@event.listens_for(PropertyTrace, "before_update")
def _refuse_trace_update(mapper, connection, target: PropertyTrace) -> None:  # noqa: ARG001
    raise ImmutableTraceError(f"Property trace {target.id} is append-only")


@event.listens_for(PropertyTrace, "before_delete")
def _refuse_trace_delete(mapper, connection, target: PropertyTrace) -> None:  # noqa: ARG001
    raise ImmutableTraceError(f"Property trace {target.id} cannot be deleted")
