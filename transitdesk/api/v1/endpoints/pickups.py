from transitdesk.api.v1.endpoints.workflow_factory import create_workflow_router
from transitdesk.core.workflow import EntityKind
from transitdesk.schemas.pickup import PickupRequestCreate, PickupRequestRead
from transitdesk.services.pickup_service import create_pickup_request

router = create_workflow_router(
    kind=EntityKind.PICKUP,
    create_schema=PickupRequestCreate,
    read_schema=PickupRequestRead,
    create_fn=create_pickup_request,
    tags=["Pickups"],
)
