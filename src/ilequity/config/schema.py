"""Pydantic v2 input models for ilequity."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

VestingFrequency = Literal["monthly", "quarterly", "annually"]
TaxRoute = Literal["capital_gain", "ordinary_income"]
GrantKind = Literal["option", "rsu"]

STORAGE_VERSION = 1


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PersonalInfo(BaseModel):
    """Personal financial inputs for a calculation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    monthly_salary: float = Field(ge=0, description="Gross monthly salary in NIS")
    credit_points: float = Field(default=2.25, ge=0, le=20, description="Nekudot zikuy")
    exchange_rate: float = Field(default=3.20, ge=1, le=10, description="NIS per USD")
    stock_price: float = Field(gt=0, description="Current stock price in USD")

    @property
    def annual_salary(self) -> float:
        return self.monthly_salary * 12


class _GrantFields(BaseModel):
    """Vesting and quantity fields shared by every grant kind."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1, max_length=50)
    total_quantity: int = Field(ge=0)
    vested_quantity: int | None = Field(
        default=None,
        ge=0,
        description="Vested shares; None defers to the vesting schedule",
    )
    used_quantity: int = Field(default=0, ge=0, description="Exercised or sold shares")
    first_vesting_date: date | None = Field(default=None, validate_default=True)
    vesting_duration_years: int = Field(default=4, ge=1, le=10)
    vesting_frequency: VestingFrequency = "quarterly"
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("vested_quantity")
    @classmethod
    def _vested_within_total(cls, value: int | None, info: ValidationInfo) -> int | None:
        total = info.data.get("total_quantity")
        if value is not None and total is not None and value > total:
            raise PydanticCustomError(
                "quantity_order", "Vested quantity cannot exceed total quantity"
            )
        return value

    @field_validator("used_quantity")
    @classmethod
    def _used_within_vested(cls, value: int, info: ValidationInfo) -> int:
        total = info.data.get("total_quantity")
        vested = info.data.get("vested_quantity")
        if total is not None and value > total:
            raise PydanticCustomError(
                "quantity_order", "Used quantity cannot exceed total quantity"
            )
        if vested is not None and value > vested:
            raise PydanticCustomError(
                "quantity_order", "Used quantity cannot exceed vested quantity"
            )
        return value

    @field_validator("first_vesting_date")
    @classmethod
    def _schedule_or_vested(cls, value: date | None, info: ValidationInfo) -> date | None:
        if value is None and info.data.get("vested_quantity") is None:
            raise PydanticCustomError("missing_schedule", "First vesting date is required")
        return value


class StockOptionGrant(_GrantFields):
    """An employee stock option grant."""

    kind: Literal["option"] = "option"
    exercise_price: float = Field(ge=0, description="Strike price in USD")
    average_price: float = Field(
        ge=0, description="30-day average share price at grant date, in USD"
    )


class RSUGrant(_GrantFields):
    """A restricted stock unit grant."""

    kind: Literal["rsu"] = "rsu"
    average_vesting_price: float = Field(
        ge=0, description="Average share price at vesting, in USD (cost basis)"
    )


Grant = Annotated[StockOptionGrant | RSUGrant, Field(discriminator="kind")]


class SimulationParams(BaseModel):
    """Overrides for projecting a portfolio to a future valuation date."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    as_of_date: date
    stock_price: float = Field(gt=0)
    exchange_rate: float | None = Field(default=None, ge=1, le=10)


class Portfolio(BaseModel):
    """The persisted personal info and grant lists."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: int = STORAGE_VERSION
    last_updated: datetime = Field(default_factory=utcnow)
    personal_info: PersonalInfo
    stock_options: list[StockOptionGrant] = Field(default_factory=list)
    rsus: list[RSUGrant] = Field(default_factory=list)
