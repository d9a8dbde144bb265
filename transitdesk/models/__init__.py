# Import the declarative base
from transitdesk.db.base import Base  # noqa: F401

# Import all models so they register themselves on Base.metadata
# (Alembic env.py and the test engine rely on this).
from transitdesk.models.shipment import Shipment, TrackingEvent  # noqa: F401
from transitdesk.models.pickup_request import PickupRequest, PickupStatusLog  # noqa: F401
from transitdesk.models.purchase_request import PurchaseRequest, PurchaseStatusLog  # noqa: F401
from transitdesk.models.transport_rate import TransportRate  # noqa: F401
