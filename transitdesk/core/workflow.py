"""
Status state machines for workflow-governed documents.

Each document kind (shipment, pickup request, purchase request) has a closed
status enum and a static edge table `{from_status: frozenset(targets)}`. The
table is the only place that decides whether a transition is legal; services,
schemas and routers ask `StateMachine.is_allowed()` instead of comparing
status strings.

Target-state requirements (dates, reasons) are declared next to the table so
that validation does not depend on any persistence or HTTP concern.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Generic, Iterable, Mapping, TypeVar


class ShipmentStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    PICKED_UP = "PICKED_UP"
    IN_TRANSIT = "IN_TRANSIT"
    AT_CUSTOMS = "AT_CUSTOMS"
    READY_FOR_PICKUP = "READY_FOR_PICKUP"
    DELIVERED = "DELIVERED"
    ON_HOLD = "ON_HOLD"
    CANCELLED = "CANCELLED"
    EXCEPTION = "EXCEPTION"


class PickupStatus(str, enum.Enum):
    REQUESTED = "REQUESTED"
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


class PurchaseStatus(str, enum.Enum):
    NOUVEAU = "NOUVEAU"
    EN_COURS = "EN_COURS"
    LIVRE = "LIVRE"
    ANNULE = "ANNULE"


class EntityKind(str, enum.Enum):
    SHIPMENT = "SHIPMENT"
    PICKUP = "PICKUP"
    PURCHASE = "PURCHASE"


# Payload keys a transition may carry.
SCHEDULED_DATE = "scheduled_date"
ACTUAL_PICKUP_DATE = "actual_pickup_date"
ACTUAL_DELIVERY_DATE = "actual_delivery_date"
REASON = "reason"


S = TypeVar("S", bound=enum.Enum)


@dataclass(frozen=True)
class StateMachine(Generic[S]):
    kind: EntityKind
    status_type: type[S]
    initial: S
    edges: Mapping[S, frozenset[S]]
    # target status -> payload key that must be present
    required_fields: Mapping[S, str] = field(default_factory=dict)
    # target statuses whose `reason` must meet the minimum length
    reason_required: frozenset[S] = frozenset()

    def coerce(self, value: S | str) -> S:
        if isinstance(value, self.status_type):
            return value
        return self.status_type(str(value).strip().upper())

    @property
    def terminal(self) -> frozenset[S]:
        return frozenset(s for s in self.status_type if not self.edges.get(s))

    def is_terminal(self, status: S | str) -> bool:
        return not self.edges.get(self.coerce(status))

    def is_allowed(self, from_status: S | str, to_status: S | str) -> bool:
        source = self.coerce(from_status)
        target = self.coerce(to_status)
        if source == target:
            return False
        return target in self.edges.get(source, frozenset())

    def allowed_targets(self, from_status: S | str) -> list[S]:
        source = self.coerce(from_status)
        targets = self.edges.get(source, frozenset())
        # Stable, declaration-ordered output for API consumers.
        return [s for s in self.status_type if s in targets]

    def required_field(self, to_status: S | str) -> str | None:
        return self.required_fields.get(self.coerce(to_status))

    def requires_reason(self, to_status: S | str) -> bool:
        return self.coerce(to_status) in self.reason_required


def _linear_with_escapes(
    chain: Iterable[S],
    escapes: Iterable[S],
    extra: Mapping[S, Iterable[S]] | None = None,
) -> dict[S, frozenset[S]]:
    """Build `{state: targets}` for a linear chain where every non-final link
    may also take each escape edge."""
    chain = list(chain)
    escapes = list(escapes)
    edges: dict[S, set[S]] = {}
    for current, following in zip(chain, chain[1:]):
        edges.setdefault(current, set()).add(following)
    for state, targets in (extra or {}).items():
        edges.setdefault(state, set()).update(targets)
    for state in list(edges):
        for escape in escapes:
            if escape != state:
                edges[state].add(escape)
    return {state: frozenset(targets) for state, targets in edges.items()}


SHIPMENT_MACHINE: StateMachine[ShipmentStatus] = StateMachine(
    kind=EntityKind.SHIPMENT,
    status_type=ShipmentStatus,
    initial=ShipmentStatus.DRAFT,
    edges=_linear_with_escapes(
        [
            ShipmentStatus.DRAFT,
            ShipmentStatus.PENDING_APPROVAL,
            ShipmentStatus.PICKED_UP,
            ShipmentStatus.IN_TRANSIT,
            ShipmentStatus.AT_CUSTOMS,
            ShipmentStatus.READY_FOR_PICKUP,
            ShipmentStatus.DELIVERED,
        ],
        escapes=[ShipmentStatus.ON_HOLD, ShipmentStatus.CANCELLED],
        extra={
            ShipmentStatus.ON_HOLD: [ShipmentStatus.PENDING_APPROVAL],
            ShipmentStatus.PICKED_UP: [ShipmentStatus.EXCEPTION],
            ShipmentStatus.IN_TRANSIT: [ShipmentStatus.EXCEPTION],
            ShipmentStatus.AT_CUSTOMS: [ShipmentStatus.EXCEPTION],
            ShipmentStatus.EXCEPTION: [],
        },
    ),
    required_fields={
        ShipmentStatus.DELIVERED: ACTUAL_DELIVERY_DATE,
        ShipmentStatus.CANCELLED: REASON,
        ShipmentStatus.ON_HOLD: REASON,
    },
    reason_required=frozenset({ShipmentStatus.CANCELLED, ShipmentStatus.ON_HOLD}),
)

PICKUP_MACHINE: StateMachine[PickupStatus] = StateMachine(
    kind=EntityKind.PICKUP,
    status_type=PickupStatus,
    initial=PickupStatus.REQUESTED,
    edges=_linear_with_escapes(
        [
            PickupStatus.REQUESTED,
            PickupStatus.SCHEDULED,
            PickupStatus.IN_PROGRESS,
            PickupStatus.COMPLETED,
        ],
        escapes=[PickupStatus.CANCELED],
    ),
    required_fields={
        PickupStatus.SCHEDULED: SCHEDULED_DATE,
        PickupStatus.COMPLETED: ACTUAL_PICKUP_DATE,
        PickupStatus.CANCELED: REASON,
    },
    reason_required=frozenset({PickupStatus.CANCELED}),
)

PURCHASE_MACHINE: StateMachine[PurchaseStatus] = StateMachine(
    kind=EntityKind.PURCHASE,
    status_type=PurchaseStatus,
    initial=PurchaseStatus.NOUVEAU,
    edges=_linear_with_escapes(
        [PurchaseStatus.NOUVEAU, PurchaseStatus.EN_COURS, PurchaseStatus.LIVRE],
        escapes=[PurchaseStatus.ANNULE],
    ),
    required_fields={
        PurchaseStatus.LIVRE: ACTUAL_DELIVERY_DATE,
        PurchaseStatus.ANNULE: REASON,
    },
    reason_required=frozenset({PurchaseStatus.ANNULE}),
)

MACHINES: dict[EntityKind, StateMachine] = {
    EntityKind.SHIPMENT: SHIPMENT_MACHINE,
    EntityKind.PICKUP: PICKUP_MACHINE,
    EntityKind.PURCHASE: PURCHASE_MACHINE,
}


def machine_for(kind: EntityKind | str) -> StateMachine:
    if not isinstance(kind, EntityKind):
        kind = EntityKind(str(kind).strip().upper())
    return MACHINES[kind]


def is_allowed(kind: EntityKind | str, from_status: str, to_status: str) -> bool:
    return machine_for(kind).is_allowed(from_status, to_status)
