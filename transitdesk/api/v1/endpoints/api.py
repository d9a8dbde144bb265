from fastapi import APIRouter

from transitdesk.api.v1.endpoints import pickups, purchases, quotes, shipments, transport_rates

api_router = APIRouter()

api_router.include_router(shipments.router, prefix="/shipments")
api_router.include_router(pickups.router, prefix="/pickups")
api_router.include_router(purchases.router, prefix="/purchases")
api_router.include_router(quotes.router, prefix="/quotes", tags=["Quotes"])
api_router.include_router(
    transport_rates.router, prefix="/transport-rates", tags=["Transport Rates"]
)
