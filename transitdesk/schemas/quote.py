from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from transitdesk.core.reference_codes import CargoType, Priority, TransportMode


class QuoteEstimateRequest(BaseModel):
    """
    Presence of weight, country codes and modes is checked by the quote
    service so the caller gets a field-level validation failure instead of a
    schema error.
    """
    origin_country_code: Optional[str] = None
    destination_country_code: Optional[str] = None
    transport_modes: list[TransportMode] = Field(default_factory=list, max_length=4)
    weight_kg: Optional[Decimal] = None
    volume_m3: Optional[Decimal] = Field(default=None, ge=0)
    # Dimensions in centimetres; used when volume_m3 is not given.
    length_cm: Optional[Decimal] = Field(default=None, ge=0)
    width_cm: Optional[Decimal] = Field(default=None, ge=0)
    height_cm: Optional[Decimal] = Field(default=None, ge=0)
    cargo_type: CargoType = CargoType.GENERAL
    priority: Priority = Priority.STANDARD

    @field_validator("origin_country_code", "destination_country_code")
    @classmethod
    def strip_upper(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip().upper() or None


class QuoteBreakdownRead(BaseModel):
    base_cost: Decimal
    cargo_type_surcharge: Decimal
    priority_surcharge: Decimal
    chargeable_basis: str


class QuoteEstimateRead(BaseModel):
    transport_mode: str
    estimated_cost: Decimal
    currency: str
    breakdown: QuoteBreakdownRead
    estimated_delivery_days: int
    tariff_id: int


class ModeQuoteRead(BaseModel):
    transport_mode: str
    success: bool
    data: Optional[QuoteEstimateRead] = None
    error: Optional[str] = None
    code: Optional[str] = None
