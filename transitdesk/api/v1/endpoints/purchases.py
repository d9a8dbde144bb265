from fastapi import Depends
from sqlalchemy.orm import Session

from transitdesk.api.responses import render
from transitdesk.api.v1.endpoints.workflow_factory import create_workflow_router
from transitdesk.core.errors import NOT_FOUND
from transitdesk.core.results import ActionFailure, ActionSuccess
from transitdesk.core.workflow import EntityKind
from transitdesk.db.session import get_db
from transitdesk.schemas.purchase import (
    PurchaseCostBreakdown,
    PurchaseRequestCreate,
    PurchaseRequestRead,
)
from transitdesk.services.purchase_service import cost_breakdown, create_purchase_request
from transitdesk.services.workflow_service import StatusTransitionService

router = create_workflow_router(
    kind=EntityKind.PURCHASE,
    create_schema=PurchaseRequestCreate,
    read_schema=PurchaseRequestRead,
    create_fn=create_purchase_request,
    tags=["Purchases"],
)


@router.get("/{entity_id}/costs")
def read_cost_breakdown(entity_id: int, db: Session = Depends(get_db)):
    result = StatusTransitionService(db).get(EntityKind.PURCHASE, entity_id)
    if not result.success:
        return render(result)
    breakdown = cost_breakdown(result.data)
    if breakdown is None:
        return render(
            ActionFailure(
                error="Product and delivery cost are both needed for a breakdown.",
                code=NOT_FOUND,
                field="delivery_cost",
                status_code=404,
            )
        )
    return render(ActionSuccess(breakdown), PurchaseCostBreakdown)
