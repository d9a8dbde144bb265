from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from transitdesk.db.base import Base
from transitdesk.models.mixins import AuditMixin, VersionedMixin


class PurchaseRequest(AuditMixin, VersionedMixin, Base):
    """
    Delegated purchase: the agency buys a product on behalf of a client
    and delivers it. Costs are settled when the request reaches LIVRE.
    """
    __tablename__ = "purchase_request"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    request_number: Mapped[str] = mapped_column(String(30), unique=True, index=True)

    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    delivery_address: Mapped[str] = mapped_column(String(255), nullable=False)
    delivery_country_code: Mapped[str] = mapped_column(String(2), nullable=False)

    # Financials
    product_cost: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    delivery_cost: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    service_fee: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    total_cost: Mapped[float | None] = mapped_column(Numeric(15, 2), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")

    status: Mapped[str] = mapped_column(String(30), nullable=False, default="NOUVEAU", index=True)
    actual_delivery_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    status_logs: Mapped[list["PurchaseStatusLog"]] = relationship(
        "PurchaseStatusLog",
        back_populates="purchase",
        order_by="PurchaseStatusLog.id",
        cascade="all, delete-orphan",
    )


class PurchaseStatusLog(Base):
    __tablename__ = "purchase_status_log"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    purchase_id: Mapped[int] = mapped_column(
        ForeignKey("purchase_request.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_type: Mapped[str] = mapped_column(String(30), nullable=False)
    old_status: Mapped[str | None] = mapped_column(String(30), nullable=True)
    new_status: Mapped[str] = mapped_column(String(30), nullable=False)
    performed_by: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())

    purchase: Mapped["PurchaseRequest"] = relationship("PurchaseRequest", back_populates="status_logs")
