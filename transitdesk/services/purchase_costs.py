"""
Cost arithmetic for delegated purchases.

    service_fee = max(product_cost * PURCHASE_SERVICE_FEE_RATE, PURCHASE_SERVICE_FEE_MINIMUM)
    total_cost  = product_cost + delivery_cost + service_fee

All amounts are Decimal, rounded half-up to cents.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from transitdesk.core.config import settings

CENTS = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_service_fee(product_cost: Any) -> Decimal:
    rate = Decimal(str(settings.PURCHASE_SERVICE_FEE_RATE))
    minimum = Decimal(str(settings.PURCHASE_SERVICE_FEE_MINIMUM))
    return to_money(max(Decimal(str(product_cost)) * rate, minimum))


def compute_total_cost(product_cost: Any, delivery_cost: Any, service_fee: Any = None) -> Decimal:
    fee = compute_service_fee(product_cost) if service_fee is None else to_money(service_fee)
    return to_money(Decimal(str(product_cost)) + Decimal(str(delivery_cost)) + fee)


def settle_costs(
    product_cost: Any = None,
    delivery_cost: Any = None,
    service_fee: Any = None,
) -> dict[str, Decimal]:
    """Column values to store when a purchase is delivered.

    Only the amounts that can be derived are returned; total_cost needs both
    product and delivery cost.
    """
    settled: dict[str, Decimal] = {}
    if product_cost is not None:
        settled["product_cost"] = to_money(product_cost)
    if delivery_cost is not None:
        settled["delivery_cost"] = to_money(delivery_cost)

    if service_fee is not None:
        settled["service_fee"] = to_money(service_fee)
    elif product_cost is not None:
        settled["service_fee"] = compute_service_fee(product_cost)

    if product_cost is not None and delivery_cost is not None:
        settled["total_cost"] = compute_total_cost(
            product_cost, delivery_cost, settled["service_fee"]
        )
    return settled
