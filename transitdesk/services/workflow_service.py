from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging
from typing import Any

from sqlalchemy.orm import Session

from transitdesk.core.config import settings
from transitdesk.core.errors import (
    INVALID_TRANSITION,
    MISSING_FIELD,
    NOT_FOUND,
    REASON_TOO_SHORT,
    VALIDATION_ERROR,
    VERSION_CONFLICT,
    WorkflowFailure,
)
from transitdesk.core.flow_logging import flow_info
from transitdesk.core.results import ActionResult, ActionSuccess
from transitdesk.core.workflow import (
    ACTUAL_DELIVERY_DATE,
    ACTUAL_PICKUP_DATE,
    REASON,
    SCHEDULED_DATE,
    EntityKind,
    PurchaseStatus,
    ShipmentStatus,
    StateMachine,
    machine_for,
)
from transitdesk.models.pickup_request import PickupRequest, PickupStatusLog
from transitdesk.models.purchase_request import PurchaseRequest, PurchaseStatusLog
from transitdesk.models.shipment import Shipment, TrackingEvent
from transitdesk.schemas.workflow import StatusTransitionRequest
from transitdesk.services.purchase_costs import settle_costs

logger = logging.getLogger(__name__)

EVENT_CREATED = "CREATED"
EVENT_STATUS_CHANGED = "STATUS_CHANGED"


@dataclass(frozen=True)
class _Binding:
    kind: EntityKind
    label: str
    model: Any
    log_model: Any
    log_fk: str
    # target status -> entity column receiving the transition reason
    reason_columns: dict[str, str] = field(default_factory=dict)

    @property
    def machine(self) -> StateMachine:
        return machine_for(self.kind)


_BINDINGS: dict[EntityKind, _Binding] = {
    EntityKind.SHIPMENT: _Binding(
        kind=EntityKind.SHIPMENT,
        label="Shipment",
        model=Shipment,
        log_model=TrackingEvent,
        log_fk="shipment_id",
        reason_columns={"ON_HOLD": "hold_reason", "CANCELLED": "cancellation_reason"},
    ),
    EntityKind.PICKUP: _Binding(
        kind=EntityKind.PICKUP,
        label="Pickup request",
        model=PickupRequest,
        log_model=PickupStatusLog,
        log_fk="pickup_id",
        reason_columns={"CANCELED": "cancellation_reason"},
    ),
    EntityKind.PURCHASE: _Binding(
        kind=EntityKind.PURCHASE,
        label="Purchase request",
        model=PurchaseRequest,
        log_model=PurchaseStatusLog,
        log_fk="purchase_id",
        reason_columns={"ANNULE": "cancellation_reason"},
    ),
}

# Payload key -> entity column for the date fields a transition may set.
_DATE_COLUMNS = {
    SCHEDULED_DATE: "scheduled_date",
    ACTUAL_PICKUP_DATE: "actual_pickup_date",
    ACTUAL_DELIVERY_DATE: "actual_delivery_date",
}


@dataclass
class TransitionOutcome:
    entity: Any
    history_entry: Any
    from_status: str
    to_status: str


class StatusTransitionService:
    """
    Applies status changes to shipments, pickup requests and purchase
    requests.

    Every public method returns an ActionResult. A rejected transition
    leaves the row and its history untouched; an accepted one updates the
    status, bumps `version` and appends one history row in the same
    transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _now() -> datetime:
        return datetime.utcnow()

    @staticmethod
    def _binding(kind: EntityKind | str) -> _Binding:
        try:
            normalized = kind if isinstance(kind, EntityKind) else EntityKind(str(kind).upper())
        except ValueError as exc:
            raise WorkflowFailure(
                code=VALIDATION_ERROR,
                message=f"Unknown document kind '{kind}'.",
                status_code=422,
            ) from exc
        return _BINDINGS[normalized]

    def _load(self, binding: _Binding, entity_id: int):
        entity = self.db.get(binding.model, entity_id)
        if entity is None:
            raise WorkflowFailure(
                code=NOT_FOUND,
                message=f"{binding.label} {entity_id} not found.",
                status_code=404,
            )
        return entity

    # ------------------------------------------------------------------ reads

    def get(self, kind: EntityKind | str, entity_id: int) -> ActionResult[Any]:
        try:
            binding = self._binding(kind)
            return ActionSuccess(self._load(binding, entity_id))
        except WorkflowFailure as exc:
            return exc.to_result()

    def history(self, kind: EntityKind | str, entity_id: int) -> ActionResult[list]:
        try:
            binding = self._binding(kind)
            self._load(binding, entity_id)
        except WorkflowFailure as exc:
            return exc.to_result()
        fk_column = getattr(binding.log_model, binding.log_fk)
        rows = (
            self.db.query(binding.log_model)
            .filter(fk_column == entity_id)
            .order_by(binding.log_model.created_at.asc(), binding.log_model.id.asc())
            .all()
        )
        return ActionSuccess(rows)

    def allowed_targets(self, kind: EntityKind | str, entity_id: int) -> ActionResult[dict]:
        try:
            binding = self._binding(kind)
            entity = self._load(binding, entity_id)
        except WorkflowFailure as exc:
            return exc.to_result()
        machine = binding.machine
        return ActionSuccess(
            {
                "current_status": entity.status,
                "is_terminal": machine.is_terminal(entity.status),
                "allowed_targets": [s.value for s in machine.allowed_targets(entity.status)],
            }
        )

    # ----------------------------------------------------------------- writes

    def record_created(self, kind: EntityKind | str, entity, actor: str):
        """Append the CREATED history row for a freshly flushed entity."""
        binding = self._binding(kind)
        entry = binding.log_model(
            **{binding.log_fk: entity.id},
            event_type=EVENT_CREATED,
            old_status=None,
            new_status=entity.status,
            performed_by=actor,
            notes=f"{binding.label} created",
            created_at=self._now(),
        )
        self.db.add(entry)
        return entry

    def apply_transition(
        self,
        kind: EntityKind | str,
        entity_id: int,
        request: StatusTransitionRequest,
        actor: str,
    ) -> ActionResult[TransitionOutcome]:
        try:
            outcome = self._apply(kind, entity_id, request, actor)
            self.db.commit()
        except WorkflowFailure as exc:
            self.db.rollback()
            flow_info(
                logger,
                "workflow_transition_rejected kind=%s id=%s to=%s code=%s field=%s actor=%s",
                getattr(kind, "value", kind),
                entity_id,
                request.to_status,
                exc.code,
                exc.field or "-",
                actor,
                category="workflow",
            )
            return exc.to_result()

        self.db.refresh(outcome.entity)
        flow_info(
            logger,
            "workflow_transition_applied kind=%s id=%s from=%s to=%s version=%s actor=%s",
            getattr(kind, "value", kind),
            entity_id,
            outcome.from_status,
            outcome.to_status,
            outcome.entity.version,
            actor,
            category="workflow",
        )
        return ActionSuccess(outcome)

    def _apply(
        self,
        kind: EntityKind | str,
        entity_id: int,
        request: StatusTransitionRequest,
        actor: str,
    ) -> TransitionOutcome:
        binding = self._binding(kind)
        machine = binding.machine
        try:
            target = machine.coerce(request.to_status)
        except ValueError as exc:
            raise WorkflowFailure(
                code=VALIDATION_ERROR,
                message=f"Unknown {binding.label.lower()} status '{request.to_status}'.",
                field="to_status",
                status_code=422,
            ) from exc

        entity = self._load(binding, entity_id)
        current = machine.coerce(entity.status)
        read_version = entity.version

        if request.expected_version is not None and request.expected_version != read_version:
            raise WorkflowFailure(
                code=VERSION_CONFLICT,
                message=(
                    f"{binding.label} {entity_id} changed since it was read "
                    f"(expected version {request.expected_version}, found {read_version})."
                ),
                field="expected_version",
                status_code=409,
            )

        if machine.is_terminal(current):
            raise WorkflowFailure(
                code=INVALID_TRANSITION,
                message=f"{binding.label} is in terminal status {current.value}; no further transitions.",
                field="to_status",
                status_code=409,
            )
        if not machine.is_allowed(current, target):
            raise WorkflowFailure(
                code=INVALID_TRANSITION,
                message=f"Transition {current.value} -> {target.value} is not allowed.",
                field="to_status",
                status_code=409,
            )

        changes = self._field_changes(binding, machine, current, target, request, entity)
        changes["status"] = target.value
        changes["version"] = read_version + 1
        changes["last_changed_by"] = actor

        # Conditional write: loses if another transaction bumped the version.
        updated = (
            self.db.query(binding.model)
            .filter(binding.model.id == entity.id, binding.model.version == read_version)
            .update(changes, synchronize_session=False)
        )
        if updated != 1:
            raise WorkflowFailure(
                code=VERSION_CONFLICT,
                message=f"{binding.label} {entity_id} was modified concurrently; reload and retry.",
                status_code=409,
            )

        notes = (request.notes or "").strip() or (request.reason or "").strip()
        entry = binding.log_model(
            **{binding.log_fk: entity.id},
            event_type=EVENT_STATUS_CHANGED,
            old_status=current.value,
            new_status=target.value,
            performed_by=actor,
            notes=notes or f"Status changed to {target.value}",
            created_at=self._now(),
        )
        self.db.add(entry)
        self.db.flush()

        return TransitionOutcome(
            entity=entity,
            history_entry=entry,
            from_status=current.value,
            to_status=target.value,
        )

    def _field_changes(
        self,
        binding: _Binding,
        machine: StateMachine,
        current,
        target,
        request: StatusTransitionRequest,
        entity,
    ) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        required = machine.required_field(target)

        if machine.requires_reason(target):
            reason = (request.reason or "").strip()
            if not reason:
                raise WorkflowFailure(
                    code=MISSING_FIELD,
                    message=f"A reason is required to move to {target.value}.",
                    field=REASON,
                    status_code=422,
                )
            min_length = settings.WORKFLOW_REASON_MIN_LENGTH
            if len(reason) < min_length:
                raise WorkflowFailure(
                    code=REASON_TOO_SHORT,
                    message=f"Reason must be at least {min_length} characters.",
                    field=REASON,
                    status_code=422,
                )
            changes[binding.reason_columns[target.value]] = reason
        elif required is not None:
            value = getattr(request, required, None)
            if value is None:
                raise WorkflowFailure(
                    code=MISSING_FIELD,
                    message=f"{required} is required to move to {target.value}.",
                    field=required,
                    status_code=422,
                )
            changes[_DATE_COLUMNS[required]] = value

        if binding.kind is EntityKind.SHIPMENT:
            if target is ShipmentStatus.PICKED_UP:
                changes["actual_pickup_date"] = request.actual_pickup_date or self._now()
            if current is ShipmentStatus.ON_HOLD:
                changes["hold_reason"] = None

        if binding.kind is EntityKind.PURCHASE and target is PurchaseStatus.LIVRE:
            changes.update(
                settle_costs(
                    product_cost=request.actual_product_cost or entity.product_cost,
                    delivery_cost=(
                        request.delivery_cost
                        if request.delivery_cost is not None
                        else entity.delivery_cost
                    ),
                    service_fee=request.service_fee,
                )
            )

        return changes
