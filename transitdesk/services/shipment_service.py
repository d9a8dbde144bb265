from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from transitdesk.core.flow_logging import flow_info
from transitdesk.core.results import ActionResult, ActionSuccess
from transitdesk.core.workflow import SHIPMENT_MACHINE, EntityKind
from transitdesk.models.shipment import Shipment
from transitdesk.schemas.shipment import ShipmentCreate
from transitdesk.services.document_numbers import SHIPMENT_PREFIX, next_document_number
from transitdesk.services.quote_service import volume_from_dimensions
from transitdesk.services.workflow_service import StatusTransitionService

logger = logging.getLogger(__name__)


def create_shipment(db: Session, payload: ShipmentCreate, actor: str) -> ActionResult[Shipment]:
    volume = payload.volume_m3
    if volume is None:
        volume = volume_from_dimensions(payload.length_cm, payload.width_cm, payload.height_cm)

    shipment = Shipment(
        tracking_number=next_document_number(SHIPMENT_PREFIX),
        origin_address=payload.origin_address,
        origin_country_code=payload.origin_country_code,
        destination_address=payload.destination_address,
        destination_country_code=payload.destination_country_code,
        weight_kg=payload.weight_kg,
        volume_m3=volume,
        length_cm=payload.length_cm,
        width_cm=payload.width_cm,
        height_cm=payload.height_cm,
        cargo_type=payload.cargo_type.value,
        is_dangerous=payload.is_dangerous,
        is_fragile=payload.is_fragile,
        description=payload.description,
        transport_modes=[mode.value for mode in payload.transport_modes],
        priority=payload.priority.value,
        status=SHIPMENT_MACHINE.initial.value,
        estimated_cost=payload.estimated_cost,
        currency=payload.currency,
        created_by=actor,
        last_changed_by=actor,
    )
    db.add(shipment)
    db.flush()
    StatusTransitionService(db).record_created(EntityKind.SHIPMENT, shipment, actor)
    db.commit()
    db.refresh(shipment)

    flow_info(
        logger,
        "shipment_created id=%s tracking=%s route=%s-%s actor=%s",
        shipment.id,
        shipment.tracking_number,
        shipment.origin_country_code,
        shipment.destination_country_code,
        actor,
        category="workflow",
    )
    return ActionSuccess(shipment)
