from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from transitdesk.core.reference_codes import (
    SURCHARGE_MAX,
    SURCHARGE_MIN,
    CargoType,
    Priority,
    TransportMode,
)

from .base import BaseSchema, normalize_country_code


def _validate_surcharges(value: dict[str, float] | None, allowed: type) -> dict[str, float] | None:
    if value is None:
        return None
    cleaned: dict[str, float] = {}
    for raw_key, raw_fraction in value.items():
        key = str(raw_key).strip().upper()
        try:
            allowed(key)
        except ValueError as exc:
            raise ValueError(f"Unknown surcharge key '{raw_key}'.") from exc
        fraction = float(raw_fraction)
        if not SURCHARGE_MIN <= fraction <= SURCHARGE_MAX:
            raise ValueError(
                f"Surcharge for {key} must be between {SURCHARGE_MIN} and {SURCHARGE_MAX}."
            )
        cleaned[key] = fraction
    return cleaned


class TransportRateCreate(BaseModel):
    origin_country_code: str
    destination_country_code: str
    transport_mode: TransportMode
    rate_per_kg: Decimal = Field(ge=Decimal("0.01"), le=Decimal("1000"))
    rate_per_m3: Decimal = Field(ge=Decimal("0.01"), le=Decimal("100000"))
    cargo_type_surcharges: Optional[dict[str, float]] = None
    priority_surcharges: Optional[dict[str, float]] = None
    is_active: bool = True
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("origin_country_code", "destination_country_code")
    @classmethod
    def iso_country(cls, v: str) -> str:
        return normalize_country_code(v)

    @field_validator("cargo_type_surcharges")
    @classmethod
    def cargo_surcharges(cls, v):
        return _validate_surcharges(v, CargoType)

    @field_validator("priority_surcharges")
    @classmethod
    def priority_surcharges_range(cls, v):
        return _validate_surcharges(v, Priority)

    @model_validator(mode="after")
    def distinct_route(self):
        if self.origin_country_code == self.destination_country_code:
            raise ValueError("Origin and destination countries must differ.")
        return self


class TransportRateUpdate(BaseModel):
    rate_per_kg: Optional[Decimal] = Field(default=None, ge=Decimal("0.01"), le=Decimal("1000"))
    rate_per_m3: Optional[Decimal] = Field(default=None, ge=Decimal("0.01"), le=Decimal("100000"))
    cargo_type_surcharges: Optional[dict[str, float]] = None
    priority_surcharges: Optional[dict[str, float]] = None
    is_active: Optional[bool] = None
    notes: Optional[str] = Field(default=None, max_length=500)

    # Omitted means "leave as is"; an explicit null would blank a NOT NULL column.
    @field_validator("rate_per_kg", "rate_per_m3", "is_active")
    @classmethod
    def not_null_when_given(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null.")
        return v

    @field_validator("cargo_type_surcharges")
    @classmethod
    def cargo_surcharges(cls, v):
        return _validate_surcharges(v, CargoType)

    @field_validator("priority_surcharges")
    @classmethod
    def priority_surcharges_range(cls, v):
        return _validate_surcharges(v, Priority)


class TransportRateRead(BaseSchema):
    id: int
    origin_country_code: str
    destination_country_code: str
    transport_mode: str
    rate_per_kg: Decimal
    rate_per_m3: Decimal
    cargo_type_surcharges: Optional[dict[str, float]] = None
    priority_surcharges: Optional[dict[str, float]] = None
    is_active: bool
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
