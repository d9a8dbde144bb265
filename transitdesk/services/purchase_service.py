from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from transitdesk.core.flow_logging import flow_info
from transitdesk.core.results import ActionResult, ActionSuccess
from transitdesk.core.workflow import PURCHASE_MACHINE, EntityKind
from transitdesk.models.purchase_request import PurchaseRequest
from transitdesk.schemas.purchase import PurchaseCostBreakdown, PurchaseRequestCreate
from transitdesk.services.document_numbers import PURCHASE_PREFIX, next_document_number
from transitdesk.services.purchase_costs import compute_service_fee, compute_total_cost, to_money
from transitdesk.services.workflow_service import StatusTransitionService

logger = logging.getLogger(__name__)


def cost_breakdown(purchase: PurchaseRequest) -> PurchaseCostBreakdown | None:
    """Breakdown of a purchase's costs, or None until both costs are known."""
    if purchase.product_cost is None or purchase.delivery_cost is None:
        return None
    fee = (
        to_money(purchase.service_fee)
        if purchase.service_fee is not None
        else compute_service_fee(purchase.product_cost)
    )
    return PurchaseCostBreakdown(
        product_cost=to_money(purchase.product_cost),
        delivery_cost=to_money(purchase.delivery_cost),
        service_fee=fee,
        total_cost=compute_total_cost(purchase.product_cost, purchase.delivery_cost, fee),
    )


def create_purchase_request(
    db: Session, payload: PurchaseRequestCreate, actor: str
) -> ActionResult[PurchaseRequest]:
    purchase = PurchaseRequest(
        request_number=next_document_number(PURCHASE_PREFIX),
        product_name=payload.product_name,
        product_url=payload.product_url,
        quantity=payload.quantity,
        delivery_address=payload.delivery_address,
        delivery_country_code=payload.delivery_country_code,
        product_cost=payload.product_cost,
        delivery_cost=payload.delivery_cost,
        currency=payload.currency,
        status=PURCHASE_MACHINE.initial.value,
        created_by=actor,
        last_changed_by=actor,
    )
    # Provisional fee/total from the client's estimate; settled again on LIVRE.
    if payload.product_cost is not None:
        purchase.service_fee = compute_service_fee(payload.product_cost)
        if payload.delivery_cost is not None:
            purchase.total_cost = compute_total_cost(
                payload.product_cost, payload.delivery_cost, purchase.service_fee
            )

    db.add(purchase)
    db.flush()
    StatusTransitionService(db).record_created(EntityKind.PURCHASE, purchase, actor)
    db.commit()
    db.refresh(purchase)

    flow_info(
        logger,
        "purchase_created id=%s number=%s product=%s actor=%s",
        purchase.id,
        purchase.request_number,
        purchase.product_name,
        actor,
        category="workflow",
    )
    return ActionSuccess(purchase)
