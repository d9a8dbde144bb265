from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from transitdesk.db.base import Base
from transitdesk.models.mixins import AuditMixin, VersionedMixin


class Shipment(AuditMixin, VersionedMixin, Base):
    """
    A physical consignment moving from origin to destination.
    `status` is only written by the workflow service.
    """
    __tablename__ = "shipment"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tracking_number: Mapped[str] = mapped_column(String(30), unique=True, index=True)

    # Route
    origin_address: Mapped[str] = mapped_column(String(255), nullable=False)
    origin_country_code: Mapped[str] = mapped_column(String(2), nullable=False)
    destination_address: Mapped[str] = mapped_column(String(255), nullable=False)
    destination_country_code: Mapped[str] = mapped_column(String(2), nullable=False)

    # Cargo
    weight_kg: Mapped[float] = mapped_column(Numeric(12, 3), nullable=False)
    volume_m3: Mapped[float | None] = mapped_column(Numeric(12, 6), nullable=True)
    length_cm: Mapped[float | None] = mapped_column(Numeric(10, 2), nullable=True)
    width_cm: Mapped[float | None] = mapped_column(Numeric(10, 2), nullable=True)
    height_cm: Mapped[float | None] = mapped_column(Numeric(10, 2), nullable=True)
    cargo_type: Mapped[str] = mapped_column(String(20), nullable=False, default="GENERAL")
    is_dangerous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_fragile: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Transport
    transport_modes: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="STANDARD")

    # Workflow
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="DRAFT", index=True)
    actual_pickup_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    actual_delivery_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    hold_reason: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # Costs
    estimated_cost: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    actual_cost: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")

    tracking_events: Mapped[list["TrackingEvent"]] = relationship(
        "TrackingEvent",
        back_populates="shipment",
        order_by="TrackingEvent.id",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Shipment(id={self.id}, tracking={self.tracking_number}, status={self.status})>"


class TrackingEvent(Base):
    """Append-only status history of a shipment."""
    __tablename__ = "tracking_event"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    shipment_id: Mapped[int] = mapped_column(
        ForeignKey("shipment.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_type: Mapped[str] = mapped_column(String(30), nullable=False)
    old_status: Mapped[str | None] = mapped_column(String(30), nullable=True)
    new_status: Mapped[str] = mapped_column(String(30), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    performed_by: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())

    shipment: Mapped["Shipment"] = relationship("Shipment", back_populates="tracking_events")
