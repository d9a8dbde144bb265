from sqlalchemy import JSON, Boolean, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from transitdesk.db.base import Base
from transitdesk.models.mixins import AuditMixin


class TransportRate(AuditMixin, Base):
    """
    Tariff for one (origin, destination, mode) route.
    Surcharge maps hold fractions keyed by cargo type / priority code,
    e.g. {"DANGEROUS": 0.5} adds 50%.
    """
    __tablename__ = "transport_rate"

    __table_args__ = (
        UniqueConstraint(
            "origin_country_code",
            "destination_country_code",
            "transport_mode",
            name="uq_transport_rate_route_mode",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    origin_country_code: Mapped[str] = mapped_column(String(2), nullable=False, index=True)
    destination_country_code: Mapped[str] = mapped_column(String(2), nullable=False, index=True)
    transport_mode: Mapped[str] = mapped_column(String(10), nullable=False)

    rate_per_kg: Mapped[float] = mapped_column(Numeric(12, 4), nullable=False)
    rate_per_m3: Mapped[float] = mapped_column(Numeric(14, 4), nullable=False)
    cargo_type_surcharges: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    priority_surcharges: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
