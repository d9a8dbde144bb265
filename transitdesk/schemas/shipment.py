from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from transitdesk.core.reference_codes import CargoType, Priority, TransportMode

from .base import BaseSchema, normalize_country_code


class ShipmentCreate(BaseModel):
    origin_address: str = Field(min_length=3, max_length=255)
    origin_country_code: str
    destination_address: str = Field(min_length=3, max_length=255)
    destination_country_code: str

    weight_kg: Decimal = Field(gt=0, max_digits=12, decimal_places=3)
    volume_m3: Optional[Decimal] = Field(default=None, ge=0)
    length_cm: Optional[Decimal] = Field(default=None, gt=0)
    width_cm: Optional[Decimal] = Field(default=None, gt=0)
    height_cm: Optional[Decimal] = Field(default=None, gt=0)
    cargo_type: CargoType = CargoType.GENERAL
    is_dangerous: bool = False
    is_fragile: bool = False
    description: Optional[str] = Field(default=None, max_length=1000)

    transport_modes: list[TransportMode] = Field(min_length=1, max_length=4)
    priority: Priority = Priority.STANDARD

    estimated_cost: Optional[Decimal] = Field(default=None, ge=0)
    currency: str = Field(default="EUR", min_length=3, max_length=3)

    @field_validator("origin_country_code", "destination_country_code")
    @classmethod
    def iso_country(cls, v: str) -> str:
        return normalize_country_code(v)

    @field_validator("currency")
    @classmethod
    def uppercase_currency(cls, v: str) -> str:
        return v.upper()


class ShipmentRead(BaseSchema):
    id: int
    tracking_number: str
    origin_address: str
    origin_country_code: str
    destination_address: str
    destination_country_code: str
    weight_kg: Decimal
    volume_m3: Optional[Decimal] = None
    length_cm: Optional[Decimal] = None
    width_cm: Optional[Decimal] = None
    height_cm: Optional[Decimal] = None
    cargo_type: str
    is_dangerous: bool
    is_fragile: bool
    transport_modes: list[str]
    priority: str
    status: str
    actual_pickup_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    hold_reason: Optional[str] = None
    cancellation_reason: Optional[str] = None
    estimated_cost: Optional[Decimal] = None
    actual_cost: Optional[Decimal] = None
    currency: str
    version: int
    created_at: datetime
    updated_at: datetime
