"""
Seed the transport_rate table with a starter tariff grid.

Rows are matched on (origin, destination, mode): existing tariffs are
updated in place, missing ones are inserted. Run from the project root:

    python -m scripts.seed_transport_rates
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from transitdesk.crud.transport_rate import get_rate_for_route
from transitdesk.db.session import SessionLocal
from transitdesk.models.transport_rate import TransportRate

SEED_ACTOR = "seed@local"

DEFAULT_CARGO_SURCHARGES = {
    "DANGEROUS": 0.5,
    "PERISHABLE": 0.25,
    "FRAGILE": 0.15,
}
DEFAULT_PRIORITY_SURCHARGES = {
    "NORMAL": 0.1,
    "EXPRESS": 0.3,
    "URGENT": 0.6,
}


def _upsert_rate(
    db: Session,
    key: tuple[str, str, str],
    data: dict[str, Any],
    new_objects: list[TransportRate],
) -> None:
    origin, destination, mode = key
    obj = get_rate_for_route(db, origin, destination, mode, active_only=False)
    if obj:
        for field, value in data.items():
            setattr(obj, field, value)
        obj.last_changed_by = SEED_ACTOR
        return
    new_objects.append(
        TransportRate(
            origin_country_code=origin,
            destination_country_code=destination,
            transport_mode=mode,
            created_by=SEED_ACTOR,
            last_changed_by=SEED_ACTOR,
            **data,
        )
    )


def seed() -> None:
    db = SessionLocal()
    try:
        new_objects: list[TransportRate] = []

        grid = [
            ("FR", "TN", "SEA", "0.85", "180"),
            ("FR", "TN", "AIR", "4.20", "750"),
            ("TN", "FR", "SEA", "0.90", "190"),
            ("TN", "FR", "AIR", "4.40", "780"),
            ("FR", "DE", "ROAD", "0.45", "95"),
            ("FR", "DE", "RAIL", "0.35", "80"),
            ("FR", "MA", "ROAD", "0.70", "140"),
            ("FR", "MA", "SEA", "0.60", "120"),
        ]
        for origin, destination, mode, per_kg, per_m3 in grid:
            _upsert_rate(
                db,
                (origin, destination, mode),
                {
                    "rate_per_kg": Decimal(per_kg),
                    "rate_per_m3": Decimal(per_m3),
                    "cargo_type_surcharges": dict(DEFAULT_CARGO_SURCHARGES),
                    "priority_surcharges": dict(DEFAULT_PRIORITY_SURCHARGES),
                    "is_active": True,
                    "notes": "Starter grid",
                },
                new_objects,
            )

        if new_objects:
            db.add_all(new_objects)
        db.commit()
        print(f"Seed completed. {len(new_objects)} tariff(s) inserted, {len(grid) - len(new_objects)} updated.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
