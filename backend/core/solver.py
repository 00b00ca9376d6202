"""Closed-form solve for the monthly contribution needed to reach a target."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field

from backend.core.simulation import MAX_HORIZON_MONTHS


class RequiredContributionParams(BaseModel):
    """Inputs for the required-contribution solve."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: float = Field(..., description="Net worth to reach at the end of the horizon.")
    horizon_months: int = Field(
        ...,
        ge=1,
        le=MAX_HORIZON_MONTHS,
        description="Months until the target must be reached.",
    )
    annual_return_rate: float = Field(
        ...,
        gt=-1,
        le=1,
        description="Annual return as a decimal, compounded monthly at rate / 12.",
    )
    start_earning_balance: float = Field(..., description="Invested balance at month 0.")
    buffer_amount: float = Field(0.0, description="Cash held outside the investments.")
    debt_amount: float = Field(0.0, description="Static debt subtracted from net worth.")


def required_monthly_to_hit(params: RequiredContributionParams) -> float:
    """
    Constant monthly amount, invested at the same rate, that lands net worth on
    params.target after params.horizon_months months (ordinary annuity).

    The result is signed: a negative value means the current invested balance
    already outgrows the target and the caller decides how to display it.
    """
    r = params.annual_return_rate / 12
    n = params.horizon_months
    # log1p/expm1 keep small rates from rounding 1 + r down to 1
    log_growth = n * math.log1p(r)
    growth = math.exp(log_growth)

    future_value = params.start_earning_balance * growth
    # (growth - 1) / r tends to n as r -> 0
    annuity_factor = math.expm1(log_growth) / r if r != 0 else 0.0
    if annuity_factor == 0:
        annuity_factor = float(n)

    shortfall = params.target + params.debt_amount - params.buffer_amount - future_value
    return shortfall / annuity_factor
