# fastapi-backend/src/kiosk/models.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from dateutil import parser as date_parser
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class IndicatorRecord(BaseModel):
    """
    One day's snapshot of the application's performance indicators.

    The backend serializes these rows with snake_case keys and a
    ``created_at`` timestamp in either ISO or ``YYYY-MM-DD HH:MM:SS`` form.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    created_at: datetime = Field(validation_alias=AliasChoices("created_at", "createdAt"))
    monthly_recurring_revenue: float = Field(
        default=0.0,
        ge=0,
        validation_alias=AliasChoices("monthly_recurring_revenue", "monthlyRecurringRevenue"),
    )
    yearly_recurring_revenue: float = Field(
        default=0.0,
        ge=0,
        validation_alias=AliasChoices("yearly_recurring_revenue", "yearlyRecurringRevenue"),
    )
    daily_volume: float = Field(
        default=0.0,
        ge=0,
        validation_alias=AliasChoices("daily_volume", "dailyVolume"),
    )
    new_users: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("new_users", "newUsers"),
    )

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: object) -> object:
        if isinstance(v, str):
            return date_parser.parse(v)
        return v


class PerformanceIndicators(BaseModel):
    model_config = ConfigDict(extra="ignore")

    indicators: List[IndicatorRecord] = Field(default_factory=list)
    last_month: Optional[IndicatorRecord] = None
    last_year: Optional[IndicatorRecord] = None

    @field_validator("indicators", mode="before")
    @classmethod
    def _null_is_empty(cls, v: object) -> object:
        return [] if v is None else v


class Plan(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    name: Optional[str] = None
    subscribers: int = Field(default=0, ge=0)
    trialing: int = Field(default=0, ge=0, validation_alias=AliasChoices("trialing", "trialingCount"))

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: object) -> object:
        return None if v is None else str(v)


class RevenueSummary(BaseModel):
    """Point-in-time revenue totals, independent of the indicator series."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    monthly_recurring_revenue: float = Field(default=0.0, ge=0, alias="monthlyRecurringRevenue")
    yearly_recurring_revenue: float = Field(default=0.0, ge=0, alias="yearlyRecurringRevenue")
    total_volume: float = Field(default=0.0, ge=0, alias="totalVolume")
