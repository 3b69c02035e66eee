"""Initial marketplace schema

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-19 10:12:31.402118

"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3f1c9a2b7d10"
down_revision = None
branch_labels = None
depends_on = None

SCHEMA = "golocal"


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        )
    ]
    if updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
                nullable=False,
            )
        )
    return columns


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False, unique=True),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("user_type", sa.String(), nullable=False),
        sa.Column("profile_image_url", sa.String(), nullable=True),
        sa.Column("verified", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("stripe_account_id", sa.String(), nullable=True, unique=True),
        sa.Column(
            "stripe_onboarding_complete",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        *_timestamps(),
        schema=SCHEMA,
    )

    op.create_table(
        "spaces",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "owner_id",
            sa.Uuid(),
            sa.ForeignKey(f"{SCHEMA}.users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("address", sa.String(), nullable=False),
        sa.Column("city", sa.String(), nullable=False),
        sa.Column("state", sa.String(), nullable=False),
        sa.Column("zip_code", sa.String(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("space_type", sa.String(), nullable=False),
        sa.Column("size_sqft", sa.Integer(), nullable=True),
        sa.Column("price_per_day", sa.Numeric(10, 2), nullable=True),
        sa.Column("price_per_week", sa.Numeric(10, 2), nullable=True),
        sa.Column("price_per_month", sa.Numeric(10, 2), nullable=True),
        sa.Column("instant_book", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("status", sa.String(), server_default=sa.text("'active'"), nullable=False),
        sa.Column("allowed_usage_types", postgresql.JSONB(), nullable=True),
        sa.Column("allowed_business_types", postgresql.JSONB(), nullable=True),
        sa.Column("operating_hours", sa.String(), nullable=True),
        sa.Column("insurance_requirements", sa.Text(), nullable=True),
        sa.Column("rental_period_length", sa.Integer(), nullable=True),
        sa.Column("rental_period_unit", sa.String(), nullable=True),
        sa.Column("payment_collection_day", sa.Integer(), nullable=True),
        sa.Column("vendor_experience_required", sa.Integer(), nullable=True),
        sa.Column("additional_terms", sa.Text(), nullable=True),
        *_timestamps(),
        schema=SCHEMA,
    )
    op.create_index("ix_spaces_owner_id", "spaces", ["owner_id"], schema=SCHEMA)
    op.create_index("ix_spaces_city", "spaces", ["city"], schema=SCHEMA)

    op.create_table(
        "space_amenities",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "space_id",
            sa.Uuid(),
            sa.ForeignKey(f"{SCHEMA}.spaces.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        *[
            sa.Column(name, sa.Boolean(), server_default=sa.text("false"), nullable=False)
            for name in (
                "electricity",
                "water_access",
                "restrooms",
                "parking",
                "wifi",
                "storage",
                "security_camera",
                "covered",
                "high_traffic",
                "garbage_access",
                "water_dump",
            )
        ],
        *_timestamps(updated=False),
        schema=SCHEMA,
    )

    op.create_table(
        "space_images",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "space_id",
            sa.Uuid(),
            sa.ForeignKey(f"{SCHEMA}.spaces.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("image_url", sa.String(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("display_order", sa.Integer(), server_default=sa.text("0"), nullable=False),
        *_timestamps(updated=False),
        schema=SCHEMA,
    )
    op.create_index("ix_space_images_space_id", "space_images", ["space_id"], schema=SCHEMA)

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "space_id",
            sa.Uuid(),
            sa.ForeignKey(f"{SCHEMA}.spaces.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("vendor_id", sa.Uuid(), sa.ForeignKey(f"{SCHEMA}.users.id"), nullable=False),
        sa.Column("landlord_id", sa.Uuid(), sa.ForeignKey(f"{SCHEMA}.users.id"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("platform_fee", sa.Numeric(10, 2), nullable=False),
        sa.Column("booking_status", sa.String(), server_default="pending", nullable=False),
        sa.Column("payment_status", sa.String(), server_default="pending", nullable=False),
        sa.Column("payment_intent_id", sa.String(), nullable=True, unique=True),
        sa.Column("special_requests", sa.Text(), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        schema=SCHEMA,
    )
    for column in ("space_id", "vendor_id", "landlord_id"):
        op.create_index(f"ix_bookings_{column}", "bookings", [column], schema=SCHEMA)

    op.create_table(
        "transactions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "booking_id",
            sa.Uuid(),
            sa.ForeignKey(f"{SCHEMA}.bookings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("payer_id", sa.Uuid(), sa.ForeignKey(f"{SCHEMA}.users.id"), nullable=False),
        sa.Column("payee_id", sa.Uuid(), sa.ForeignKey(f"{SCHEMA}.users.id"), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("platform_fee", sa.Numeric(10, 2), server_default="0", nullable=False),
        sa.Column("charge_ref", sa.String(), nullable=True),
        sa.Column("transaction_type", sa.String(), nullable=False),
        sa.Column("transaction_status", sa.String(), server_default="pending", nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "booking_id",
            "charge_ref",
            "transaction_type",
            name="uq_transactions_booking_charge_type",
        ),
        schema=SCHEMA,
    )
    op.create_index("ix_transactions_booking_id", "transactions", ["booking_id"], schema=SCHEMA)
    op.create_index("ix_transactions_charge_ref", "transactions", ["charge_ref"], schema=SCHEMA)

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey(f"{SCHEMA}.users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("notification_type", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("related_id", sa.Uuid(), nullable=True),
        sa.Column("is_read", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("dedup_key", sa.String(), nullable=True, unique=True),
        *_timestamps(updated=False),
        schema=SCHEMA,
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"], schema=SCHEMA)

    op.create_table(
        "webhook_events",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("booking_id", sa.Uuid(), nullable=False),
        sa.Column("charge_ref", sa.String(), nullable=False),
        sa.Column("event_type", sa.String(), nullable=False),
        sa.Column("provider_event_id", sa.String(), nullable=True),
        sa.Column("status", sa.String(), server_default="applied", nullable=False),
        sa.Column(
            "transition_applied", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        *_timestamps(updated=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            "booking_id", "charge_ref", "event_type", name="uq_webhook_events_idempotency_key"
        ),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_webhook_events_booking_id", "webhook_events", ["booking_id"], schema=SCHEMA
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        "webhook_events",
        "notifications",
        "transactions",
        "bookings",
        "space_images",
        "space_amenities",
        "spaces",
        "users",
    ):
        op.drop_table(table, schema=SCHEMA)
