"""Initial tables for owners, properties, images and traces.

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(length=100), nullable=True),
        sa.Column("updated_by", sa.String(length=100), nullable=True),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "owners",
        *_audit_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("address", sa.String(length=200), nullable=False),
        sa.Column("photo", sa.String(length=500), nullable=True),
        sa.Column("birthday", sa.Date(), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("email", sa.String(length=100), nullable=True),
        sa.Column("document_type", sa.String(length=50), nullable=True),
        sa.Column("document_number", sa.String(length=50), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=50), nullable=True),
        sa.Column("zip_code", sa.String(length=10), nullable=True),
        sa.Column("country", sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_owners"),
    )
    op.create_index(
        "uq_owners_email_active",
        "owners",
        ["email"],
        unique=True,
        postgresql_where=sa.text("is_active AND email IS NOT NULL"),
    )
    op.create_index(
        "uq_owners_document_active",
        "owners",
        ["document_type", "document_number"],
        unique=True,
        postgresql_where=sa.text("is_active AND document_number IS NOT NULL"),
    )
    op.create_index("idx_owners_name", "owners", ["name"])

    op.create_table(
        "properties",
        *_audit_columns(),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("address", sa.String(length=300), nullable=False),
        sa.Column("price", sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column("code_internal", sa.String(length=20), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("property_type", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("listing_type", sa.String(length=20), nullable=False),
        sa.Column("condition", sa.String(length=20), nullable=False),
        sa.Column("bedrooms", sa.Integer(), nullable=True),
        sa.Column("bathrooms", sa.Integer(), nullable=True),
        sa.Column("half_bathrooms", sa.Integer(), nullable=True),
        sa.Column("parking_spaces", sa.Integer(), nullable=True),
        sa.Column("square_feet", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("lot_size", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=50), nullable=True),
        sa.Column("zip_code", sa.String(length=10), nullable=True),
        sa.Column("neighborhood", sa.String(length=100), nullable=True),
        sa.Column("latitude", sa.Numeric(precision=10, scale=8), nullable=True),
        sa.Column("longitude", sa.Numeric(precision=11, scale=8), nullable=True),
        sa.Column("has_pool", sa.Boolean(), nullable=False),
        sa.Column("has_garden", sa.Boolean(), nullable=False),
        sa.Column("has_garage", sa.Boolean(), nullable=False),
        sa.Column("has_fireplace", sa.Boolean(), nullable=False),
        sa.Column("has_air_conditioning", sa.Boolean(), nullable=False),
        sa.Column("has_heating", sa.Boolean(), nullable=False),
        sa.Column("is_furnished", sa.Boolean(), nullable=False),
        sa.Column("pets_allowed", sa.Boolean(), nullable=False),
        sa.Column("monthly_rent", sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column("property_tax", sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column("hoa_fees", sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column("available_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("listed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sold_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.CheckConstraint("price > 0", name="ck_properties_price_positive"),
        sa.CheckConstraint(
            "latitude IS NULL OR (latitude >= -90 AND latitude <= 90)",
            name="ck_properties_latitude_range",
        ),
        sa.CheckConstraint(
            "longitude IS NULL OR (longitude >= -180 AND longitude <= 180)",
            name="ck_properties_longitude_range",
        ),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["owners.id"],
            name="fk_properties_owner_id_owners",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_properties"),
    )
    op.create_index(
        "uq_properties_code_internal_active",
        "properties",
        ["code_internal"],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )
    op.create_index("idx_properties_owner", "properties", ["owner_id"])
    op.create_index("idx_properties_type", "properties", ["property_type"])
    op.create_index("idx_properties_status", "properties", ["status"])
    op.create_index("idx_properties_listing_type", "properties", ["listing_type"])
    op.create_index("idx_properties_price", "properties", ["price"])
    op.create_index("idx_properties_location", "properties", ["city", "state"])
    op.create_index("idx_properties_zip", "properties", ["zip_code"])
    op.create_index("idx_properties_created", "properties", ["created_at"])
    op.create_index("idx_properties_active", "properties", ["is_active"])

    op.create_table(
        "property_images",
        *_audit_columns(),
        sa.Column("property_id", sa.Uuid(), nullable=False),
        sa.Column("file", sa.String(length=500), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False),
        sa.Column("file_type", sa.String(length=50), nullable=True),
        sa.Column("file_size_bytes", sa.BigInteger(), nullable=True),
        sa.Column("thumbnail_path", sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(
            ["property_id"],
            ["properties.id"],
            name="fk_property_images_property_id_properties",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_property_images"),
    )
    op.create_index(
        "idx_property_images_property", "property_images", ["property_id"]
    )
    op.create_index(
        "idx_property_images_order",
        "property_images",
        ["property_id", "display_order"],
    )
    op.create_index(
        "idx_property_images_primary",
        "property_images",
        ["property_id", "is_primary"],
    )

    op.create_table(
        "property_traces",
        *_audit_columns(),
        sa.Column("property_id", sa.Uuid(), nullable=False),
        sa.Column("date_sale", sa.DateTime(timezone=True), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("value", sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column("tax", sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("transaction_type", sa.String(length=100), nullable=True),
        sa.Column("agent_name", sa.String(length=100), nullable=True),
        sa.Column("buyer_name", sa.String(length=100), nullable=True),
        sa.Column("seller_name", sa.String(length=100), nullable=True),
        sa.Column("commission_rate", sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column(
            "commission_amount", sa.Numeric(precision=18, scale=2), nullable=True
        ),
        sa.ForeignKeyConstraint(
            ["property_id"],
            ["properties.id"],
            name="fk_property_traces_property_id_properties",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_property_traces"),
    )
    op.create_index(
        "idx_property_traces_property", "property_traces", ["property_id"]
    )
    op.create_index("idx_property_traces_date", "property_traces", ["date_sale"])
    op.create_index(
        "idx_property_traces_type", "property_traces", ["transaction_type"]
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("property_traces")
    op.drop_table("property_images")
    op.drop_table("properties")
    op.drop_table("owners")
