from transitdesk.api.v1.endpoints.workflow_factory import create_workflow_router
from transitdesk.core.workflow import EntityKind
from transitdesk.schemas.shipment import ShipmentCreate, ShipmentRead
from transitdesk.services.shipment_service import create_shipment

router = create_workflow_router(
    kind=EntityKind.SHIPMENT,
    create_schema=ShipmentCreate,
    read_schema=ShipmentRead,
    create_fn=create_shipment,
    tags=["Shipments"],
)
