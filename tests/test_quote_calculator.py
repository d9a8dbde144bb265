from __future__ import annotations

from decimal import Decimal

from transitdesk.core.config import settings
from transitdesk.schemas.quote import QuoteEstimateRequest
from transitdesk.services.quote_service import (
    RateCalculator,
    calculate_cost,
    chargeable_volume,
    estimate_delivery_days,
    parse_delivery_speeds,
)

from tests.factories import make_rate


def _request(**overrides):
    values = {
        "origin_country_code": "FR",
        "destination_country_code": "DE",
        "transport_modes": ["ROAD"],
        "weight_kg": Decimal("10"),
        "volume_m3": Decimal("0.05"),
        "cargo_type": "DANGEROUS",
        "priority": "EXPRESS",
    }
    values.update(overrides)
    return QuoteEstimateRequest(**values)


def test_volume_beats_weight_and_surcharges_compound():
    cost = calculate_cost(
        weight_kg=Decimal("10"),
        volume_m3=Decimal("0.05"),
        rate_per_kg=Decimal("2"),
        rate_per_m3=Decimal("500"),
        cargo_type_surcharge=0.1,
        priority_surcharge=0.2,
    )

    assert cost.base_cost == Decimal("25.00")
    assert cost.chargeable_basis == "VOLUME"
    assert cost.cargo_type_surcharge == Decimal("2.50")
    assert cost.priority_surcharge == Decimal("5.50")
    assert cost.total == Decimal("33.00")


def test_weight_basis_without_surcharges():
    cost = calculate_cost(Decimal("40"), Decimal("0.01"), Decimal("1.25"), Decimal("300"))

    assert cost.chargeable_basis == "WEIGHT"
    assert cost.total == Decimal("50.00")


def test_negative_surcharge_is_a_discount():
    cost = calculate_cost(Decimal("10"), 0, Decimal("3"), Decimal("1"), cargo_type_surcharge=-0.5)

    assert cost.total == Decimal("15.00")


def test_rounding_is_half_up():
    cost = calculate_cost(Decimal("1"), 0, Decimal("0.125"), Decimal("1"))

    assert cost.total == Decimal("0.13")


def test_chargeable_volume_from_dimensions():
    assert chargeable_volume(None, 100, 50, 20) == Decimal("0.1")
    assert chargeable_volume(Decimal("0.3"), 100, 50, 20) == Decimal("0.3")
    assert chargeable_volume(None, 100, None, 20) == Decimal("0")


def test_delivery_days_follow_mode_and_priority():
    assert parse_delivery_speeds("ROAD:3-7, sea:20-35, junk") == {"ROAD": (3, 7), "SEA": (20, 35)}
    assert estimate_delivery_days("ROAD", "STANDARD") == 5
    assert estimate_delivery_days("ROAD", "NORMAL") == 4
    assert estimate_delivery_days("SEA", "EXPRESS") == 17
    assert estimate_delivery_days("AIR", "URGENT") == 2


def test_delivery_days_fallback_and_floor(monkeypatch):
    monkeypatch.setattr(settings, "QUOTE_DELIVERY_SPEEDS", "AIR:1-1")
    monkeypatch.setattr(settings, "QUOTE_DEFAULT_DELIVERY_DAYS", 9)

    assert estimate_delivery_days("AIR", "URGENT") == 1
    assert estimate_delivery_days("RAIL", "STANDARD") == 9


def test_estimate_uses_route_tariff(db_session):
    rate = make_rate(db_session)

    result = RateCalculator(db_session).estimate(_request(), "ROAD")

    assert result.success
    quote = result.data
    assert quote.estimated_cost == Decimal("33.00")
    assert quote.tariff_id == rate.id
    assert quote.currency == settings.QUOTE_CURRENCY
    assert quote.breakdown.chargeable_basis == "VOLUME"


def test_missing_surcharge_keys_count_as_zero(db_session):
    make_rate(db_session)

    result = RateCalculator(db_session).estimate(
        _request(cargo_type="GENERAL", priority="STANDARD"), "ROAD"
    )

    assert result.data.estimated_cost == Decimal("25.00")


def test_unconfigured_route_is_tariff_not_found(db_session):
    make_rate(db_session)

    result = RateCalculator(db_session).estimate(_request(destination_country_code="IT"), "ROAD")

    assert result.success is False
    assert result.code == "TARIFF_NOT_FOUND"
    assert result.status_code == 404
    assert result.field is None


def test_inactive_tariff_is_not_configured(db_session):
    make_rate(db_session, is_active=False)

    result = RateCalculator(db_session).estimate(_request(), "ROAD")

    assert result.code == "TARIFF_NOT_FOUND"


def test_validation_runs_before_lookup(db_session):
    calculator = RateCalculator(db_session)

    no_weight = calculator.estimate(_request(weight_kg=None), "ROAD")
    assert no_weight.code == "VALIDATION_ERROR"
    assert no_weight.field == "weight_kg"

    no_origin = calculator.estimate(_request(origin_country_code=""), "ROAD")
    assert no_origin.code == "VALIDATION_ERROR"
    assert no_origin.field == "origin_country_code"

    no_modes = calculator.estimate_all_modes(_request(transport_modes=[]))
    assert no_modes.code == "VALIDATION_ERROR"
    assert no_modes.field == "transport_modes"


def test_estimate_all_modes_returns_one_result_per_mode(db_session):
    make_rate(db_session)
    make_rate(db_session, transport_mode="RAIL", rate_per_kg=Decimal("1"), rate_per_m3=Decimal("200"))

    result = RateCalculator(db_session).estimate_all_modes(
        _request(transport_modes=["ROAD", "RAIL", "AIR"], cargo_type="GENERAL", priority="STANDARD")
    )

    assert result.success
    by_mode = {item.transport_mode: item for item in result.data}
    assert list(by_mode) == ["ROAD", "RAIL", "AIR"]
    assert by_mode["ROAD"].data.estimated_cost == Decimal("25.00")
    assert by_mode["RAIL"].data.estimated_cost == Decimal("10.00")
    assert by_mode["AIR"].success is False
    assert by_mode["AIR"].code == "TARIFF_NOT_FOUND"


def test_unknown_or_blank_mode_is_a_validation_error(db_session):
    make_rate(db_session)
    calculator = RateCalculator(db_session)

    for mode in ("BOAT", "", "  "):
        result = calculator.estimate(_request(), mode)
        assert result.success is False
        assert result.code == "VALIDATION_ERROR"
        assert result.field == "transport_mode"

    assert calculator.estimate(_request(), " road ").data.estimated_cost == Decimal("33.00")
