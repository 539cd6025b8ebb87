"""Property owner table model."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from property_registry.models.base import AuditMixin, Base

if TYPE_CHECKING:
    from property_registry.models.property import Property


class Owner(AuditMixin, Base):
    """Owner of one or more listed properties."""

    __tablename__ = "owners"
    __table_args__ = (
        Index(
            "uq_owners_email_active",
            "email",
            unique=True,
            postgresql_where=text("is_active AND email IS NOT NULL"),
            sqlite_where=text("is_active AND email IS NOT NULL"),
        ),
        Index(
            "uq_owners_document_active",
            "document_type",
            "document_number",
            unique=True,
            postgresql_where=text("is_active AND document_number IS NOT NULL"),
            sqlite_where=text("is_active AND document_number IS NOT NULL"),
        ),
        Index("idx_owners_name", "name"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str] = mapped_column(String(200), nullable=False)
    photo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    birthday: Mapped[date | None] = mapped_column(Date, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(100), nullable=True)
    document_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    document_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    country: Mapped[str | None] = mapped_column(
        String(50), nullable=True, default="USA"
    )

    properties: Mapped[list[Property]] = relationship(
        back_populates="owner", passive_deletes="all"
    )
