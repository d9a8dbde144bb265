"""create transitdesk core tables

Revision ID: 3f7a9c2e1b04
Revises:
Create Date: 2026-10-19 10:12:41.208315

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f7a9c2e1b04'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column(
            "created_by", sa.String(length=255), nullable=False,
            server_default=sa.text("'system@local'"),
        ),
        sa.Column(
            "last_changed_by", sa.String(length=255), nullable=False,
            server_default=sa.text("'system@local'"),
        ),
    ]


def _history_columns(parent_fk: str, parent_table: str) -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            parent_fk, sa.Integer(),
            sa.ForeignKey(f"{parent_table}.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("event_type", sa.String(length=30), nullable=False),
        sa.Column("old_status", sa.String(length=30), nullable=True),
        sa.Column("new_status", sa.String(length=30), nullable=False),
        sa.Column("performed_by", sa.String(length=255), nullable=False),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "shipment",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("tracking_number", sa.String(length=30), nullable=False),

        sa.Column("origin_address", sa.String(length=255), nullable=False),
        sa.Column("origin_country_code", sa.String(length=2), nullable=False),
        sa.Column("destination_address", sa.String(length=255), nullable=False),
        sa.Column("destination_country_code", sa.String(length=2), nullable=False),

        sa.Column("weight_kg", sa.Numeric(12, 3), nullable=False),
        sa.Column("volume_m3", sa.Numeric(12, 6), nullable=True),
        sa.Column("length_cm", sa.Numeric(10, 2), nullable=True),
        sa.Column("width_cm", sa.Numeric(10, 2), nullable=True),
        sa.Column("height_cm", sa.Numeric(10, 2), nullable=True),
        sa.Column("cargo_type", sa.String(length=20), nullable=False, server_default="GENERAL"),
        sa.Column("is_dangerous", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_fragile", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("description", sa.Text(), nullable=True),

        sa.Column("transport_modes", sa.JSON(), nullable=False),
        sa.Column("priority", sa.String(length=20), nullable=False, server_default="STANDARD"),

        sa.Column("status", sa.String(length=30), nullable=False, server_default="DRAFT"),
        sa.Column("actual_pickup_date", sa.DateTime(), nullable=True),
        sa.Column("actual_delivery_date", sa.DateTime(), nullable=True),
        sa.Column("hold_reason", sa.String(length=1000), nullable=True),
        sa.Column("cancellation_reason", sa.String(length=1000), nullable=True),

        sa.Column("estimated_cost", sa.Numeric(15, 2), nullable=True),
        sa.Column("actual_cost", sa.Numeric(15, 2), nullable=True),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="EUR"),

        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_audit_columns(),
    )
    op.create_index("ix_shipment_tracking_number", "shipment", ["tracking_number"], unique=True)
    op.create_index("ix_shipment_status", "shipment", ["status"])

    op.create_table(
        "tracking_event",
        *_history_columns("shipment_id", "shipment"),
        sa.Column("location", sa.String(length=255), nullable=True),
    )
    op.create_index("ix_tracking_event_shipment_id", "tracking_event", ["shipment_id"])

    op.create_table(
        "pickup_request",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("request_number", sa.String(length=30), nullable=False),
        sa.Column(
            "shipment_id", sa.Integer(),
            sa.ForeignKey("shipment.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("pickup_address", sa.String(length=255), nullable=False),
        sa.Column("pickup_country_code", sa.String(length=2), nullable=False),
        sa.Column("contact_name", sa.String(length=120), nullable=False),
        sa.Column("contact_phone", sa.String(length=40), nullable=False),
        sa.Column("special_instructions", sa.String(length=500), nullable=True),

        sa.Column("status", sa.String(length=30), nullable=False, server_default="REQUESTED"),
        sa.Column("scheduled_date", sa.DateTime(), nullable=True),
        sa.Column("actual_pickup_date", sa.DateTime(), nullable=True),
        sa.Column("cancellation_reason", sa.String(length=1000), nullable=True),

        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_audit_columns(),
    )
    op.create_index("ix_pickup_request_request_number", "pickup_request", ["request_number"], unique=True)
    op.create_index("ix_pickup_request_shipment_id", "pickup_request", ["shipment_id"])
    op.create_index("ix_pickup_request_status", "pickup_request", ["status"])

    op.create_table("pickup_status_log", *_history_columns("pickup_id", "pickup_request"))
    op.create_index("ix_pickup_status_log_pickup_id", "pickup_status_log", ["pickup_id"])

    op.create_table(
        "purchase_request",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("request_number", sa.String(length=30), nullable=False),
        sa.Column("product_name", sa.String(length=255), nullable=False),
        sa.Column("product_url", sa.String(length=1000), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("delivery_address", sa.String(length=255), nullable=False),
        sa.Column("delivery_country_code", sa.String(length=2), nullable=False),

        sa.Column("product_cost", sa.Numeric(15, 2), nullable=True),
        sa.Column("delivery_cost", sa.Numeric(15, 2), nullable=True),
        sa.Column("service_fee", sa.Numeric(15, 2), nullable=True),
        sa.Column("total_cost", sa.Numeric(15, 2), nullable=True),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="EUR"),

        sa.Column("status", sa.String(length=30), nullable=False, server_default="NOUVEAU"),
        sa.Column("actual_delivery_date", sa.DateTime(), nullable=True),
        sa.Column("cancellation_reason", sa.String(length=1000), nullable=True),

        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_audit_columns(),
    )
    op.create_index(
        "ix_purchase_request_request_number", "purchase_request", ["request_number"], unique=True
    )
    op.create_index("ix_purchase_request_status", "purchase_request", ["status"])

    op.create_table("purchase_status_log", *_history_columns("purchase_id", "purchase_request"))
    op.create_index("ix_purchase_status_log_purchase_id", "purchase_status_log", ["purchase_id"])

    op.create_table(
        "transport_rate",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("origin_country_code", sa.String(length=2), nullable=False),
        sa.Column("destination_country_code", sa.String(length=2), nullable=False),
        sa.Column("transport_mode", sa.String(length=10), nullable=False),
        sa.Column("rate_per_kg", sa.Numeric(12, 4), nullable=False),
        sa.Column("rate_per_m3", sa.Numeric(14, 4), nullable=False),
        sa.Column("cargo_type_surcharges", sa.JSON(), nullable=True),
        sa.Column("priority_surcharges", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.String(length=500), nullable=True),
        *_audit_columns(),
        sa.UniqueConstraint(
            "origin_country_code",
            "destination_country_code",
            "transport_mode",
            name="uq_transport_rate_route_mode",
        ),
    )
    op.create_index(
        "ix_transport_rate_origin_country_code", "transport_rate", ["origin_country_code"]
    )
    op.create_index(
        "ix_transport_rate_destination_country_code", "transport_rate", ["destination_country_code"]
    )


def downgrade() -> None:
    op.drop_table("transport_rate")
    op.drop_table("purchase_status_log")
    op.drop_table("purchase_request")
    op.drop_table("pickup_status_log")
    op.drop_table("pickup_request")
    op.drop_table("tracking_event")
    op.drop_table("shipment")
