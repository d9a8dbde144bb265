from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from transitdesk.db.base import Base
from transitdesk.models.mixins import AuditMixin, VersionedMixin


class PickupRequest(AuditMixin, VersionedMixin, Base):
    """Collection of goods at a customer address, optionally tied to a shipment."""
    __tablename__ = "pickup_request"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    request_number: Mapped[str] = mapped_column(String(30), unique=True, index=True)
    shipment_id: Mapped[int | None] = mapped_column(
        ForeignKey("shipment.id", ondelete="SET NULL"), nullable=True, index=True
    )

    pickup_address: Mapped[str] = mapped_column(String(255), nullable=False)
    pickup_country_code: Mapped[str] = mapped_column(String(2), nullable=False)
    contact_name: Mapped[str] = mapped_column(String(120), nullable=False)
    contact_phone: Mapped[str] = mapped_column(String(40), nullable=False)
    special_instructions: Mapped[str | None] = mapped_column(String(500), nullable=True)

    status: Mapped[str] = mapped_column(String(30), nullable=False, default="REQUESTED", index=True)
    # Populated only by the SCHEDULED / COMPLETED transitions.
    scheduled_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    actual_pickup_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    status_logs: Mapped[list["PickupStatusLog"]] = relationship(
        "PickupStatusLog",
        back_populates="pickup",
        order_by="PickupStatusLog.id",
        cascade="all, delete-orphan",
    )


class PickupStatusLog(Base):
    __tablename__ = "pickup_status_log"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    pickup_id: Mapped[int] = mapped_column(
        ForeignKey("pickup_request.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_type: Mapped[str] = mapped_column(String(30), nullable=False)
    old_status: Mapped[str | None] = mapped_column(String(30), nullable=True)
    new_status: Mapped[str] = mapped_column(String(30), nullable=False)
    performed_by: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())

    pickup: Mapped["PickupRequest"] = relationship("PickupRequest", back_populates="status_logs")
