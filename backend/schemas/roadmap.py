"""Data contracts for the roadmap, simulation and solver endpoints."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from backend.core.simulation import (
    MAX_HORIZON_MONTHS,
    AccountState,
    SimulationResult,
    add_months,
)


def _ends_before_year_10000(start: dt.date, months: int) -> bool:
    try:
        add_months(start, months)
    except (ValueError, OverflowError):
        return False
    return True


class RoadmapInputs(BaseModel):
    """
    Everything the dashboard lets the user edit. Defaults are the dashboard's
    prefilled values; the engine itself never falls back to any of them.
    """

    model_config = ConfigDict(extra="forbid")

    # Balances
    brokerage: float = Field(116550.0, ge=0)
    ira: float = Field(20000.0, ge=0)
    roth: float = Field(3500.0, ge=0)
    cash_like: float = Field(76566.0, ge=0, description="Checking, savings and other cash-like buckets.")
    cash_buffer: float = Field(10000.0, ge=0, description="Cash kept liquid; everything above is invested.")
    debt_car: float = Field(39200.0, ge=0)
    debt_cc: float = Field(1500.0, ge=0)

    # Income
    grant_monthly: float = Field(7000.0, ge=0)
    grant_months: int = Field(7, ge=0)
    work_monthly: float = Field(10000.0, ge=0)
    work_start_month: int = Field(4, ge=0, description="Zero-based month index work income starts.")
    semester_total: float = Field(10000.0, ge=0, description="Split equally across lump_sum_months.")
    lump_sum_months: List[int] = Field(
        default_factory=lambda: [3, 8],
        description="Zero-based loop indices (pre-increment) the lump sums land on.",
    )

    # Globals
    annual_return_rate: float = Field(0.07, gt=-1, le=1)
    expenses_yearly: float = 61320.0
    start_date: dt.date = dt.date(2025, 9, 1)
    near_target: float = 500000.0
    near_horizon_months: int = Field(600, ge=0, le=MAX_HORIZON_MONTHS)
    far_target: float = 4000000.0
    far_horizon_months: int = Field(2000, ge=0, le=MAX_HORIZON_MONTHS)
    required_horizon_months: int = Field(36, ge=1, le=MAX_HORIZON_MONTHS)

    @field_validator("lump_sum_months")
    @classmethod
    def non_negative_months(cls, months: List[int]) -> List[int]:
        if any(month < 0 for month in months):
            raise ValueError("lump_sum_months must be zero or greater")
        return months

    @model_validator(mode="after")
    def ensure_validity(self) -> "RoadmapInputs":
        if self.semester_total and not self.lump_sum_months:
            raise ValueError("lump_sum_months is required when semester_total is set")
        if not _ends_before_year_10000(self.start_date, max(self.near_horizon_months, self.far_horizon_months)):
            raise ValueError("start_date plus the horizon runs past year 9999")
        return self


class IncomeScheduleIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    grant_monthly: float = Field(0.0, ge=0)
    grant_months: int = Field(0, ge=0)
    work_monthly: float = Field(0.0, ge=0)
    work_start_month: int = Field(0, ge=0)


class SimulationRequest(BaseModel):
    """Inputs for a single engine run."""

    model_config = ConfigDict(extra="forbid")

    start: dt.date
    month_count: int = Field(..., ge=0, le=MAX_HORIZON_MONTHS)
    annual_return_rate: float = Field(..., gt=-1, le=1)
    monthly_expenses: float
    start_balances: AccountState
    income: IncomeScheduleIn
    lump_sums: Dict[int, float] = Field(default_factory=dict)
    invest_buffer: float = Field(..., ge=0)
    target: float

    @field_validator("lump_sums")
    @classmethod
    def non_negative_keys(cls, lump_sums: Dict[int, float]) -> Dict[int, float]:
        if any(month < 0 for month in lump_sums):
            raise ValueError("lump_sums keys must be zero or greater")
        return lump_sums

    @model_validator(mode="after")
    def ensure_dates_in_range(self) -> "SimulationRequest":
        if not _ends_before_year_10000(self.start, self.month_count):
            raise ValueError("start plus month_count runs past year 9999")
        return self


class StartingSummary(BaseModel):
    invested: float
    cash_buffer: float
    debt_total: float
    net_worth: float


class BreakdownItem(BaseModel):
    name: str
    value: float


class ScenarioRunOut(BaseModel):
    key: str
    label: str
    annual_return_rate: float
    near: SimulationResult
    far: SimulationResult


class RequiredContribution(BaseModel):
    target: float
    horizon_months: int
    annual_return_rate: float
    # Signed solver output; negative means the target is already on track.
    required_monthly: float
    required_monthly_display: float = Field(..., ge=0)
    required_yearly_display: float = Field(..., ge=0)


class RoadmapReport(BaseModel):
    inputs: RoadmapInputs
    monthly_expenses: float
    starting: StartingSummary
    breakdown: List[BreakdownItem]
    lump_sums: Dict[int, float]
    scenarios: List[ScenarioRunOut]
    required: RequiredContribution


class RequiredContributionResponse(BaseModel):
    required_monthly: float
    required_monthly_display: float = Field(..., ge=0)
