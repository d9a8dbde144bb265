from __future__ import annotations

from decimal import Decimal

from transitdesk.models.transport_rate import TransportRate
from transitdesk.schemas.pickup import PickupRequestCreate
from transitdesk.schemas.purchase import PurchaseRequestCreate
from transitdesk.schemas.shipment import ShipmentCreate
from transitdesk.services.pickup_service import create_pickup_request
from transitdesk.services.purchase_service import create_purchase_request
from transitdesk.services.shipment_service import create_shipment

ACTOR = "ops@example.com"


def make_shipment(db, **overrides):
    payload = {
        "origin_address": "12 Rue de Lyon, Paris",
        "origin_country_code": "fr",
        "destination_address": "Hafenstrasse 4, Hamburg",
        "destination_country_code": "DE",
        "weight_kg": Decimal("10"),
        "length_cm": Decimal("50"),
        "width_cm": Decimal("40"),
        "height_cm": Decimal("25"),
        "transport_modes": ["ROAD"],
    }
    payload.update(overrides)
    return create_shipment(db, ShipmentCreate(**payload), ACTOR).data


def make_pickup(db, **overrides):
    payload = {
        "pickup_address": "3 Quai Saint-Michel, Marseille",
        "pickup_country_code": "FR",
        "contact_name": "Nadia Benali",
        "contact_phone": "+33 6 12 34 56 78",
    }
    payload.update(overrides)
    return create_pickup_request(db, PickupRequestCreate(**payload), ACTOR).data


def make_purchase(db, **overrides):
    payload = {
        "product_name": "Espresso machine",
        "delivery_address": "Avenue Bourguiba 10, Tunis",
        "delivery_country_code": "TN",
        "product_cost": Decimal("200.00"),
    }
    payload.update(overrides)
    return create_purchase_request(db, PurchaseRequestCreate(**payload), ACTOR).data


def make_rate(db, **overrides):
    values = {
        "origin_country_code": "FR",
        "destination_country_code": "DE",
        "transport_mode": "ROAD",
        "rate_per_kg": Decimal("2"),
        "rate_per_m3": Decimal("500"),
        "cargo_type_surcharges": {"DANGEROUS": 0.1},
        "priority_surcharges": {"EXPRESS": 0.2},
        "is_active": True,
    }
    values.update(overrides)
    rate = TransportRate(**values)
    db.add(rate)
    db.commit()
    db.refresh(rate)
    return rate
