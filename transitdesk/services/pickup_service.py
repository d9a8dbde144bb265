from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from transitdesk.core.errors import NOT_FOUND
from transitdesk.core.flow_logging import flow_info
from transitdesk.core.results import ActionFailure, ActionResult, ActionSuccess
from transitdesk.core.workflow import PICKUP_MACHINE, EntityKind
from transitdesk.models.pickup_request import PickupRequest
from transitdesk.models.shipment import Shipment
from transitdesk.schemas.pickup import PickupRequestCreate
from transitdesk.services.document_numbers import PICKUP_PREFIX, next_document_number
from transitdesk.services.workflow_service import StatusTransitionService

logger = logging.getLogger(__name__)


def create_pickup_request(
    db: Session, payload: PickupRequestCreate, actor: str
) -> ActionResult[PickupRequest]:
    if payload.shipment_id is not None and db.get(Shipment, payload.shipment_id) is None:
        return ActionFailure(
            error=f"Shipment {payload.shipment_id} not found.",
            code=NOT_FOUND,
            field="shipment_id",
            status_code=404,
        )

    pickup = PickupRequest(
        request_number=next_document_number(PICKUP_PREFIX),
        shipment_id=payload.shipment_id,
        pickup_address=payload.pickup_address,
        pickup_country_code=payload.pickup_country_code,
        contact_name=payload.contact_name,
        contact_phone=payload.contact_phone,
        special_instructions=payload.special_instructions,
        status=PICKUP_MACHINE.initial.value,
        created_by=actor,
        last_changed_by=actor,
    )
    db.add(pickup)
    db.flush()
    StatusTransitionService(db).record_created(EntityKind.PICKUP, pickup, actor)
    db.commit()
    db.refresh(pickup)

    flow_info(
        logger,
        "pickup_created id=%s number=%s shipment_id=%s actor=%s",
        pickup.id,
        pickup.request_number,
        pickup.shipment_id or "-",
        actor,
        category="workflow",
    )
    return ActionSuccess(pickup)
