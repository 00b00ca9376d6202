from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from loguru import logger

from backend.core.scenarios import ScenarioInputs, ScenarioRun, run_scenarios
from backend.core.simulation import AccountState
from backend.core.solver import RequiredContributionParams, required_monthly_to_hit
from backend.schemas.roadmap import (
    BreakdownItem,
    RequiredContribution,
    RoadmapInputs,
    RoadmapReport,
    ScenarioRunOut,
    StartingSummary,
)


@dataclass
class PreparedRoadmap:
    start_balances: AccountState
    monthly_expenses: float
    lump_sums: Dict[int, float]


def default_inputs() -> RoadmapInputs:
    return RoadmapInputs()


def split_lump_sums(total: float, months: List[int]) -> Dict[int, float]:
    """Spread total evenly over months; repeated months accumulate."""
    if not months:
        return {}
    share = total / len(months)
    schedule: Dict[int, float] = {}
    for month in months:
        schedule[month] = schedule.get(month, 0.0) + share
    return schedule


def prepare_roadmap(inputs: RoadmapInputs) -> PreparedRoadmap:
    # cash above the buffer is treated as already invested; never negative
    start_earning = inputs.brokerage + inputs.ira + inputs.roth + max(0.0, inputs.cash_like - inputs.cash_buffer)
    start_cash = min(inputs.cash_buffer, inputs.cash_like)
    debt = inputs.debt_car + inputs.debt_cc

    return PreparedRoadmap(
        start_balances=AccountState(earning=start_earning, cash=start_cash, debt=debt),
        monthly_expenses=inputs.expenses_yearly / 12,
        lump_sums=split_lump_sums(inputs.semester_total, inputs.lump_sum_months),
    )


def scenario_inputs(inputs: RoadmapInputs, prepared: PreparedRoadmap) -> ScenarioInputs:
    return ScenarioInputs(
        start=inputs.start_date,
        start_balances=prepared.start_balances,
        monthly_expenses=prepared.monthly_expenses,
        annual_return_rate=inputs.annual_return_rate,
        grant_monthly=inputs.grant_monthly,
        grant_months=inputs.grant_months,
        work_monthly=inputs.work_monthly,
        work_start_month=inputs.work_start_month,
        invest_buffer=inputs.cash_buffer,
        near_target=inputs.near_target,
        near_horizon_months=inputs.near_horizon_months,
        far_target=inputs.far_target,
        far_horizon_months=inputs.far_horizon_months,
        lump_sums=prepared.lump_sums,
    )


def starting_summary(prepared: PreparedRoadmap) -> StartingSummary:
    balances = prepared.start_balances
    return StartingSummary(
        invested=balances.earning,
        cash_buffer=balances.cash,
        debt_total=balances.debt,
        net_worth=balances.earning + balances.cash - balances.debt,
    )


def balance_breakdown(inputs: RoadmapInputs) -> List[BreakdownItem]:
    return [
        BreakdownItem(name="Brokerage", value=inputs.brokerage),
        BreakdownItem(name="IRAs", value=inputs.ira + inputs.roth),
        BreakdownItem(name="Cash-like", value=inputs.cash_like),
        BreakdownItem(name="Debt", value=-(inputs.debt_car + inputs.debt_cc)),
    ]


def required_contribution(inputs: RoadmapInputs, prepared: PreparedRoadmap) -> RequiredContribution:
    """Solve against the near target at the base rate, clamping only the display values."""
    params = RequiredContributionParams(
        target=inputs.near_target,
        horizon_months=inputs.required_horizon_months,
        annual_return_rate=inputs.annual_return_rate,
        start_earning_balance=prepared.start_balances.earning,
        buffer_amount=inputs.cash_buffer,
        debt_amount=prepared.start_balances.debt,
    )
    monthly = required_monthly_to_hit(params)
    display = max(0.0, monthly)
    return RequiredContribution(
        target=params.target,
        horizon_months=params.horizon_months,
        annual_return_rate=params.annual_return_rate,
        required_monthly=monthly,
        required_monthly_display=display,
        required_yearly_display=display * 12,
    )


def _run_out(run: ScenarioRun) -> ScenarioRunOut:
    return ScenarioRunOut(
        key=run.scenario.kind.value,
        label=run.scenario.label,
        annual_return_rate=run.scenario.annual_return_rate,
        near=run.near,
        far=run.far,
    )


def build_roadmap(inputs: RoadmapInputs) -> RoadmapReport:
    prepared = prepare_roadmap(inputs)
    logger.info(
        f"Building roadmap: invested ${prepared.start_balances.earning:,.0f}, "
        f"cash ${prepared.start_balances.cash:,.0f}, debt ${prepared.start_balances.debt:,.0f}, "
        f"return {inputs.annual_return_rate * 100:.1f}%"
    )

    runs = run_scenarios(scenario_inputs(inputs, prepared))
    for run in runs:
        for name, target, result in (
            ("near", inputs.near_target, run.near),
            ("far", inputs.far_target, run.far),
        ):
            if result.hit is None:
                logger.info(f"{run.scenario.label}: {name} target ${target:,.0f} not reached in {len(result.rows)} months")
            else:
                logger.info(
                    f"{run.scenario.label}: {name} target ${target:,.0f} reached in month "
                    f"{result.hit.month_index} ({result.hit.date.isoformat()})"
                )

    return RoadmapReport(
        inputs=inputs,
        monthly_expenses=prepared.monthly_expenses,
        starting=starting_summary(prepared),
        breakdown=balance_breakdown(inputs),
        lump_sums=prepared.lump_sums,
        scenarios=[_run_out(run) for run in runs],
        required=required_contribution(inputs, prepared),
    )
