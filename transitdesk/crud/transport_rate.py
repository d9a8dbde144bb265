from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from transitdesk.models.transport_rate import TransportRate
from transitdesk.schemas.transport_rate import TransportRateCreate, TransportRateUpdate


class DuplicateError(Exception):
    """Raised when uq_transport_rate_route_mode is violated."""


def create_transport_rate(
    db: Session,
    data: TransportRateCreate,
    user_email: str = "system@local",
) -> TransportRate:
    obj = TransportRate(
        origin_country_code=data.origin_country_code,
        destination_country_code=data.destination_country_code,
        transport_mode=data.transport_mode.value,
        rate_per_kg=data.rate_per_kg,
        rate_per_m3=data.rate_per_m3,
        cargo_type_surcharges=data.cargo_type_surcharges,
        priority_surcharges=data.priority_surcharges,
        is_active=data.is_active,
        notes=data.notes,
        created_by=user_email,
        last_changed_by=user_email,
    )
    db.add(obj)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError(
            "A tariff already exists for this origin/destination/mode."
        ) from e
    db.refresh(obj)
    return obj


def get_transport_rate(db: Session, row_id: int) -> TransportRate | None:
    return db.get(TransportRate, row_id)


def get_rate_for_route(
    db: Session,
    origin_country_code: str,
    destination_country_code: str,
    transport_mode: str,
    active_only: bool = True,
) -> TransportRate | None:
    """Exact (origin, destination, mode) lookup. None means "not configured"."""
    stmt = select(TransportRate).where(
        TransportRate.origin_country_code == origin_country_code.upper(),
        TransportRate.destination_country_code == destination_country_code.upper(),
        TransportRate.transport_mode == transport_mode.upper(),
    )
    if active_only:
        stmt = stmt.where(TransportRate.is_active.is_(True))
    return db.execute(stmt).scalar_one_or_none()


def list_transport_rates(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    origin_country_code: str | None = None,
    destination_country_code: str | None = None,
    transport_mode: str | None = None,
    is_active: bool | None = None,
) -> list[TransportRate]:
    stmt = select(TransportRate).order_by(
        TransportRate.origin_country_code.asc(),
        TransportRate.destination_country_code.asc(),
        TransportRate.transport_mode.asc(),
    )

    if origin_country_code is not None:
        stmt = stmt.where(TransportRate.origin_country_code == origin_country_code.upper())

    if destination_country_code is not None:
        stmt = stmt.where(
            TransportRate.destination_country_code == destination_country_code.upper()
        )

    if transport_mode is not None:
        stmt = stmt.where(TransportRate.transport_mode == transport_mode.upper())

    if is_active is not None:
        stmt = stmt.where(TransportRate.is_active.is_(is_active))

    stmt = stmt.offset(skip).limit(limit)
    return list(db.execute(stmt).scalars().all())


def update_transport_rate(
    db: Session,
    row_id: int,
    data: TransportRateUpdate,
    user_email: str = "system@local",
) -> TransportRate | None:
    obj = db.get(TransportRate, row_id)
    if not obj:
        return None

    patch = data.model_dump(exclude_unset=True)
    for k, v in patch.items():
        setattr(obj, k, v)
    obj.last_changed_by = user_email

    db.commit()
    db.refresh(obj)
    return obj


def deactivate_transport_rate(
    db: Session,
    row_id: int,
    user_email: str = "system@local",
) -> bool:
    obj = db.get(TransportRate, row_id)
    if not obj:
        return False
    obj.is_active = False
    obj.last_changed_by = user_email
    db.commit()
    return True
