"""Coupon schemas."""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CouponIn(BaseModel):
    code: str = Field(..., min_length=1)
    discount_type: Literal["Fixed", "Percentage"]
    discount_value: int = Field(..., ge=0, description="Cents for Fixed coupons, percent for Percentage coupons.")
    minimum_spend_cents: int = Field(default=0, ge=0)
    expiry_date: date
    status: Literal["Active", "Inactive"] = "Active"
    auto_apply: bool = False

    @field_validator("code")
    @classmethod
    def _normalise_code(cls, value: str) -> str:
        return value.strip().upper()


class CouponOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    discount_type: str
    discount_value: int
    minimum_spend_cents: int
    expiry_date: date
    status: str
    auto_apply: bool
