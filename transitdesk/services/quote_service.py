"""
Shipment pricing from the transport tariff table.

    base = max(weight_kg * rate_per_kg, volume_m3 * rate_per_m3)
    cost = base * (1 + cargo_type_surcharge) * (1 + priority_surcharge)

A quote is only produced when an active tariff exists for the exact
(origin, destination, mode) route; an unconfigured route is a
TARIFF_NOT_FOUND failure, never a zero-cost quote. Amounts are Decimal,
rounded half-up to cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
import logging
import math
import re
from typing import Any

from sqlalchemy.orm import Session

from transitdesk.core.config import settings
from transitdesk.core.errors import TARIFF_NOT_FOUND, VALIDATION_ERROR, PricingFailure
from transitdesk.core.flow_logging import flow_info
from transitdesk.core.reference_codes import PRIORITY_DELIVERY_FACTORS, Priority, TransportMode
from transitdesk.core.results import ActionFailure, ActionResult, ActionSuccess
from transitdesk.crud.transport_rate import get_rate_for_route
from transitdesk.models.transport_rate import TransportRate
from transitdesk.schemas.quote import (
    ModeQuoteRead,
    QuoteBreakdownRead,
    QuoteEstimateRead,
    QuoteEstimateRequest,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
CM3_PER_M3 = Decimal("1000000")
BASIS_WEIGHT = "WEIGHT"
BASIS_VOLUME = "VOLUME"

_ISO2 = re.compile(r"^[A-Z]{2}$")
_SPEED = re.compile(r"^(?P<mode>[A-Z]+):(?P<low>\d+)-(?P<high>\d+)$")


@dataclass(frozen=True)
class CostBreakdown:
    base_cost: Decimal
    cargo_type_surcharge: Decimal
    priority_surcharge: Decimal
    total: Decimal
    chargeable_basis: str


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _dec(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def volume_from_dimensions(length_cm: Any, width_cm: Any, height_cm: Any) -> Decimal | None:
    """L x W x H in centimetres converted to cubic metres; None if any side is missing."""
    if length_cm is None or width_cm is None or height_cm is None:
        return None
    return _dec(length_cm) * _dec(width_cm) * _dec(height_cm) / CM3_PER_M3


def chargeable_volume(
    volume_m3: Any = None,
    length_cm: Any = None,
    width_cm: Any = None,
    height_cm: Any = None,
) -> Decimal:
    if volume_m3 is not None:
        return _dec(volume_m3)
    from_dimensions = volume_from_dimensions(length_cm, width_cm, height_cm)
    return from_dimensions if from_dimensions is not None else Decimal("0")


def calculate_cost(
    weight_kg: Any,
    volume_m3: Any,
    rate_per_kg: Any,
    rate_per_m3: Any,
    cargo_type_surcharge: Any = 0,
    priority_surcharge: Any = 0,
) -> CostBreakdown:
    weight_cost = _dec(weight_kg) * _dec(rate_per_kg)
    volume_cost = _dec(volume_m3) * _dec(rate_per_m3)
    if volume_cost > weight_cost:
        base, basis = volume_cost, BASIS_VOLUME
    else:
        base, basis = weight_cost, BASIS_WEIGHT

    after_cargo = base * (Decimal("1") + _dec(cargo_type_surcharge))
    total = after_cargo * (Decimal("1") + _dec(priority_surcharge))
    return CostBreakdown(
        base_cost=_money(base),
        cargo_type_surcharge=_money(after_cargo - base),
        priority_surcharge=_money(total - after_cargo),
        total=_money(total),
        chargeable_basis=basis,
    )


def parse_delivery_speeds(raw: str | None) -> dict[str, tuple[int, int]]:
    """Parse "ROAD:3-7,SEA:20-35" into {"ROAD": (3, 7), ...}; malformed entries are skipped."""
    speeds: dict[str, tuple[int, int]] = {}
    for token in (raw or "").split(","):
        match = _SPEED.match(token.strip().upper())
        if not match:
            continue
        low, high = int(match.group("low")), int(match.group("high"))
        speeds[match.group("mode")] = (min(low, high), max(low, high))
    return speeds


def estimate_delivery_days(transport_mode: TransportMode | str, priority: Priority | str) -> int:
    mode = getattr(transport_mode, "value", transport_mode)
    speed = parse_delivery_speeds(settings.QUOTE_DELIVERY_SPEEDS).get(str(mode).upper())
    if speed is None:
        median = float(settings.QUOTE_DEFAULT_DELIVERY_DAYS)
    else:
        median = (speed[0] + speed[1]) / 2
    try:
        factor = PRIORITY_DELIVERY_FACTORS[Priority(getattr(priority, "value", priority))]
    except ValueError:
        factor = 1.0
    return max(1, math.ceil(median * factor))


def _surcharge(table: dict | None, key: Any) -> Decimal:
    if not table:
        return Decimal("0")
    return _dec(table.get(getattr(key, "value", key), 0))


class RateCalculator:
    """Prices a quote request against the tariff table, one mode at a time."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _require_country(value: str | None, field: str) -> str:
        if not value:
            raise PricingFailure(
                code=VALIDATION_ERROR,
                message=f"{field} is required.",
                field=field,
                status_code=422,
            )
        if not _ISO2.match(value):
            raise PricingFailure(
                code=VALIDATION_ERROR,
                message=f"{field} must be an ISO 3166-1 alpha-2 code.",
                field=field,
                status_code=422,
            )
        return value

    @staticmethod
    def _require_mode(mode: str) -> TransportMode:
        try:
            return TransportMode(mode)
        except ValueError as exc:
            raise PricingFailure(
                code=VALIDATION_ERROR,
                message=f"Unknown transport mode '{mode}'.",
                field="transport_mode",
                status_code=422,
            ) from exc

    def _validate(self, request: QuoteEstimateRequest) -> None:
        if request.weight_kg is None:
            raise PricingFailure(
                code=VALIDATION_ERROR,
                message="weight_kg is required.",
                field="weight_kg",
                status_code=422,
            )
        if request.weight_kg <= 0:
            raise PricingFailure(
                code=VALIDATION_ERROR,
                message="weight_kg must be greater than zero.",
                field="weight_kg",
                status_code=422,
            )
        self._require_country(request.origin_country_code, "origin_country_code")
        self._require_country(request.destination_country_code, "destination_country_code")

    def _tariff(self, request: QuoteEstimateRequest, mode: str) -> TransportRate:
        tariff = get_rate_for_route(
            self.db,
            request.origin_country_code,
            request.destination_country_code,
            mode,
        )
        if tariff is None:
            raise PricingFailure(
                code=TARIFF_NOT_FOUND,
                message=(
                    f"No active tariff for {request.origin_country_code} -> "
                    f"{request.destination_country_code} by {mode}."
                ),
                status_code=404,
            )
        return tariff

    def _quote(self, request: QuoteEstimateRequest, mode: str) -> QuoteEstimateRead:
        tariff = self._tariff(request, mode)
        volume = chargeable_volume(
            request.volume_m3, request.length_cm, request.width_cm, request.height_cm
        )
        cost = calculate_cost(
            request.weight_kg,
            volume,
            tariff.rate_per_kg,
            tariff.rate_per_m3,
            _surcharge(tariff.cargo_type_surcharges, request.cargo_type),
            _surcharge(tariff.priority_surcharges, request.priority),
        )
        flow_info(
            logger,
            "quote_estimated route=%s-%s mode=%s tariff_id=%s basis=%s cost=%s",
            request.origin_country_code,
            request.destination_country_code,
            mode,
            tariff.id,
            cost.chargeable_basis,
            cost.total,
            category="pricing",
        )
        return QuoteEstimateRead(
            transport_mode=mode,
            estimated_cost=cost.total,
            currency=settings.QUOTE_CURRENCY,
            breakdown=QuoteBreakdownRead(
                base_cost=cost.base_cost,
                cargo_type_surcharge=cost.cargo_type_surcharge,
                priority_surcharge=cost.priority_surcharge,
                chargeable_basis=cost.chargeable_basis,
            ),
            estimated_delivery_days=estimate_delivery_days(mode, request.priority),
            tariff_id=tariff.id,
        )

    def estimate(
        self, request: QuoteEstimateRequest, transport_mode: TransportMode | str
    ) -> ActionResult[QuoteEstimateRead]:
        mode = str(getattr(transport_mode, "value", transport_mode)).strip().upper()
        try:
            self._validate(request)
            self._require_mode(mode)
            return ActionSuccess(self._quote(request, mode))
        except PricingFailure as exc:
            flow_info(
                logger,
                "quote_rejected mode=%s detail=%s",
                mode,
                exc.to_detail(),
                category="pricing",
            )
            return exc.to_result()

    def estimate_all_modes(self, request: QuoteEstimateRequest) -> ActionResult[list[ModeQuoteRead]]:
        """One result per requested mode; picking among them is left to the caller."""
        try:
            self._validate(request)
        except PricingFailure as exc:
            return exc.to_result()
        if not request.transport_modes:
            return ActionFailure(
                error="At least one transport mode is required.",
                code=VALIDATION_ERROR,
                field="transport_modes",
                status_code=422,
            )

        results: list[ModeQuoteRead] = []
        for transport_mode in request.transport_modes:
            result = self.estimate(request, transport_mode)
            if result.success:
                results.append(
                    ModeQuoteRead(transport_mode=transport_mode.value, success=True, data=result.data)
                )
            else:
                results.append(
                    ModeQuoteRead(
                        transport_mode=transport_mode.value,
                        success=False,
                        error=result.error,
                        code=result.code,
                    )
                )
        return ActionSuccess(results)
