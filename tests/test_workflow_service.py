from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import text

from transitdesk.core.config import settings
from transitdesk.core.workflow import EntityKind
from transitdesk.models.pickup_request import PickupStatusLog
from transitdesk.models.shipment import TrackingEvent
from transitdesk.schemas.workflow import StatusTransitionRequest
from transitdesk.services.workflow_service import StatusTransitionService

from tests.factories import ACTOR, make_pickup, make_purchase, make_shipment

NOW = datetime(2026, 10, 19, 9, 30)


def _move(service, kind, entity_id, to_status, **payload):
    return service.apply_transition(
        kind, entity_id, StatusTransitionRequest(to_status=to_status, **payload), ACTOR
    )


def _history_count(db, model, fk, entity_id):
    return db.query(model).filter(getattr(model, fk) == entity_id).count()


def test_create_writes_initial_status_and_created_entry(db_session):
    shipment = make_shipment(db_session)

    assert shipment.status == "DRAFT"
    assert shipment.version == 1
    assert shipment.tracking_number.startswith("SHP-")
    assert shipment.volume_m3 == Decimal("0.05")

    history = StatusTransitionService(db_session).history(EntityKind.SHIPMENT, shipment.id).data
    assert [(h.event_type, h.old_status, h.new_status) for h in history] == [
        ("CREATED", None, "DRAFT")
    ]


def test_invalid_transition_does_not_mutate(db_session):
    service = StatusTransitionService(db_session)
    shipment = make_shipment(db_session)

    result = _move(service, EntityKind.SHIPMENT, shipment.id, "IN_TRANSIT")

    assert result.success is False
    assert result.code == "INVALID_TRANSITION"
    assert result.status_code == 409
    db_session.refresh(shipment)
    assert shipment.status == "DRAFT"
    assert shipment.version == 1
    assert _history_count(db_session, TrackingEvent, "shipment_id", shipment.id) == 1


def test_unknown_target_status_is_a_validation_error(db_session):
    service = StatusTransitionService(db_session)
    pickup = make_pickup(db_session)

    result = _move(service, EntityKind.PICKUP, pickup.id, "TELEPORTED")

    assert result.success is False
    assert result.code == "VALIDATION_ERROR"
    assert result.field == "to_status"


def test_scheduled_requires_scheduled_date(db_session):
    service = StatusTransitionService(db_session)
    pickup = make_pickup(db_session)

    result = _move(service, EntityKind.PICKUP, pickup.id, "SCHEDULED")

    assert result.success is False
    assert result.code == "MISSING_FIELD"
    assert result.field == "scheduled_date"
    db_session.refresh(pickup)
    assert pickup.status == "REQUESTED"
    assert pickup.scheduled_date is None


def test_reason_boundary_nine_fails_ten_succeeds(db_session):
    service = StatusTransitionService(db_session)
    pickup = make_pickup(db_session)

    short = _move(service, EntityKind.PICKUP, pickup.id, "CANCELED", reason="123456789")
    assert short.success is False
    assert short.code == "REASON_TOO_SHORT"
    assert short.field == "reason"

    exact = _move(service, EntityKind.PICKUP, pickup.id, "CANCELED", reason="1234567890")
    assert exact.success is True
    assert exact.data.entity.status == "CANCELED"
    assert exact.data.entity.cancellation_reason == "1234567890"


def test_reason_is_trimmed_before_length_check(db_session):
    service = StatusTransitionService(db_session)
    shipment = make_shipment(db_session)

    result = _move(service, EntityKind.SHIPMENT, shipment.id, "ON_HOLD", reason="   short    ")

    assert result.success is False
    assert result.code == "REASON_TOO_SHORT"


def test_missing_reason_names_the_field(db_session):
    service = StatusTransitionService(db_session)
    purchase = make_purchase(db_session)

    result = _move(service, EntityKind.PURCHASE, purchase.id, "ANNULE")

    assert result.success is False
    assert result.code == "MISSING_FIELD"
    assert result.field == "reason"


def test_reason_min_length_is_configurable(db_session, monkeypatch):
    monkeypatch.setattr(settings, "WORKFLOW_REASON_MIN_LENGTH", 3)
    service = StatusTransitionService(db_session)
    purchase = make_purchase(db_session)

    result = _move(service, EntityKind.PURCHASE, purchase.id, "ANNULE", reason="dup")

    assert result.success is True


def test_pickup_round_trip_history_is_ordered(db_session):
    service = StatusTransitionService(db_session)
    pickup = make_pickup(db_session)

    assert _move(
        service, EntityKind.PICKUP, pickup.id, "SCHEDULED", scheduled_date=NOW + timedelta(days=1)
    ).success
    assert _move(service, EntityKind.PICKUP, pickup.id, "IN_PROGRESS").success
    done = _move(
        service,
        EntityKind.PICKUP,
        pickup.id,
        "COMPLETED",
        actual_pickup_date=NOW + timedelta(days=1, hours=2),
    )
    assert done.success

    history = service.history(EntityKind.PICKUP, pickup.id).data
    assert [h.new_status for h in history] == ["REQUESTED", "SCHEDULED", "IN_PROGRESS", "COMPLETED"]
    stamps = [h.created_at for h in history]
    assert stamps == sorted(stamps)
    assert history[-1].new_status == done.data.entity.status
    assert done.data.entity.scheduled_date == NOW + timedelta(days=1)
    assert done.data.entity.actual_pickup_date == NOW + timedelta(days=1, hours=2)
    assert done.data.entity.version == 4


def test_terminal_state_rejects_everything_including_itself(db_session):
    service = StatusTransitionService(db_session)
    shipment = make_shipment(db_session)
    assert _move(
        service, EntityKind.SHIPMENT, shipment.id, "CANCELLED", reason="Customer withdrew order"
    ).success

    for target in ("CANCELLED", "PENDING_APPROVAL", "ON_HOLD", "DELIVERED"):
        result = _move(
            service,
            EntityKind.SHIPMENT,
            shipment.id,
            target,
            reason="Trying to reopen it",
            actual_delivery_date=NOW,
        )
        assert result.success is False
        assert result.code == "INVALID_TRANSITION"

    assert _history_count(db_session, TrackingEvent, "shipment_id", shipment.id) == 2


def test_shipment_delivered_end_to_end(db_session):
    service = StatusTransitionService(db_session)
    shipment = make_shipment(db_session)

    for target in ("PENDING_APPROVAL", "PICKED_UP", "IN_TRANSIT", "AT_CUSTOMS", "READY_FOR_PICKUP"):
        assert _move(service, EntityKind.SHIPMENT, shipment.id, target).success

    missing = _move(service, EntityKind.SHIPMENT, shipment.id, "DELIVERED")
    assert missing.code == "MISSING_FIELD"
    assert missing.field == "actual_delivery_date"

    delivered = _move(
        service, EntityKind.SHIPMENT, shipment.id, "DELIVERED", actual_delivery_date=NOW
    )
    assert delivered.success
    entity = delivered.data.entity
    assert entity.status == "DELIVERED"
    assert entity.actual_delivery_date == NOW
    assert entity.actual_pickup_date is not None
    assert entity.version == 7


def test_hold_then_release_clears_hold_reason(db_session):
    service = StatusTransitionService(db_session)
    shipment = make_shipment(db_session)

    held = _move(
        service, EntityKind.SHIPMENT, shipment.id, "ON_HOLD", reason="Awaiting export licence"
    )
    assert held.data.entity.hold_reason == "Awaiting export licence"

    released = _move(service, EntityKind.SHIPMENT, shipment.id, "PENDING_APPROVAL")
    assert released.success
    assert released.data.entity.hold_reason is None


def test_history_entry_uses_notes_then_reason(db_session):
    service = StatusTransitionService(db_session)
    pickup = make_pickup(db_session)

    result = _move(
        service,
        EntityKind.PICKUP,
        pickup.id,
        "SCHEDULED",
        scheduled_date=NOW,
        notes="Driver booked for the morning slot",
    )

    assert result.data.history_entry.notes == "Driver booked for the morning slot"
    assert result.data.history_entry.performed_by == ACTOR
    assert result.data.history_entry.old_status == "REQUESTED"


def test_stale_expected_version_is_rejected(db_session):
    service = StatusTransitionService(db_session)
    pickup = make_pickup(db_session)

    assert _move(
        service, EntityKind.PICKUP, pickup.id, "SCHEDULED", scheduled_date=NOW, expected_version=1
    ).success

    stale = _move(service, EntityKind.PICKUP, pickup.id, "IN_PROGRESS", expected_version=1)
    assert stale.success is False
    assert stale.code == "VERSION_CONFLICT"
    assert stale.status_code == 409
    db_session.refresh(pickup)
    assert pickup.status == "SCHEDULED"
    assert pickup.version == 2
    assert _history_count(db_session, PickupStatusLog, "pickup_id", pickup.id) == 2


def test_concurrent_write_loses_the_race(db_session):
    service = StatusTransitionService(db_session)
    pickup = make_pickup(db_session)
    assert pickup.version == 1

    # Another writer bumps the row behind this session's back.
    db_session.execute(
        text("UPDATE pickup_request SET version = version + 1 WHERE id = :id"),
        {"id": pickup.id},
    )

    result = _move(service, EntityKind.PICKUP, pickup.id, "SCHEDULED", scheduled_date=NOW)

    assert result.success is False
    assert result.code == "VERSION_CONFLICT"
    assert _history_count(db_session, PickupStatusLog, "pickup_id", pickup.id) == 1


def test_not_found(db_session):
    service = StatusTransitionService(db_session)

    result = _move(service, EntityKind.SHIPMENT, 999, "PENDING_APPROVAL")

    assert result.success is False
    assert result.code == "NOT_FOUND"
    assert result.status_code == 404
    assert service.history(EntityKind.SHIPMENT, 999).code == "NOT_FOUND"


def test_allowed_targets_reports_next_actions(db_session):
    service = StatusTransitionService(db_session)
    pickup = make_pickup(db_session)

    data = service.allowed_targets(EntityKind.PICKUP, pickup.id).data

    assert data == {
        "current_status": "REQUESTED",
        "is_terminal": False,
        "allowed_targets": ["SCHEDULED", "CANCELED"],
    }


def test_purchase_delivery_settles_costs(db_session):
    service = StatusTransitionService(db_session)
    purchase = make_purchase(db_session)
    assert _move(service, EntityKind.PURCHASE, purchase.id, "EN_COURS").success

    result = _move(
        service,
        EntityKind.PURCHASE,
        purchase.id,
        "LIVRE",
        actual_delivery_date=NOW,
        actual_product_cost=Decimal("240.00"),
        delivery_cost=Decimal("25.00"),
    )

    assert result.success
    entity = result.data.entity
    assert entity.product_cost == Decimal("240.00")
    assert entity.service_fee == Decimal("36.00")
    assert entity.total_cost == Decimal("301.00")
    assert entity.actual_delivery_date == NOW
