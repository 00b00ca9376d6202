from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping

from backend.core.simulation import (
    AccountState,
    IncomeFunction,
    SimulationResult,
    simulate,
)

AGGRESSIVE_RATE_FLOOR = 0.09
AGGRESSIVE_WORK_FLOOR = 15000.0
CONSERVATIVE_RATE_CAP = 0.05
CONSERVATIVE_WORK_FLOOR = 10000.0


class ScenarioKind(str, Enum):
    AGGRESSIVE = "aggressive"
    BASE = "base"
    CONSERVATIVE = "conservative"


@dataclass(frozen=True)
class IncomeSchedule:
    """
    Grant income for the first grant_months months, plus work income from
    work_start_month onwards. Months are zero-based loop indices.
    """

    grant_monthly: float
    grant_months: int
    work_monthly: float
    work_start_month: int

    def __call__(self, month: int) -> float:
        grant = self.grant_monthly if month < self.grant_months else 0.0
        work = self.work_monthly if month >= self.work_start_month else 0.0
        return grant + work


@dataclass(frozen=True)
class Scenario:
    kind: ScenarioKind
    label: str
    annual_return_rate: float
    income: IncomeFunction


@dataclass(frozen=True)
class ScenarioInputs:
    """Base parameters shared by every scenario. Nothing here is defaulted."""

    start: dt.date
    start_balances: AccountState
    monthly_expenses: float
    annual_return_rate: float
    grant_monthly: float
    grant_months: int
    work_monthly: float
    work_start_month: int
    invest_buffer: float
    near_target: float
    near_horizon_months: int
    far_target: float
    far_horizon_months: int
    lump_sums: Mapping[int, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ScenarioRun:
    scenario: Scenario
    near: SimulationResult
    far: SimulationResult


def aggressive_scenario(inputs: ScenarioInputs) -> Scenario:
    """Higher return floor, work starts right away at a higher floor."""
    return Scenario(
        kind=ScenarioKind.AGGRESSIVE,
        label="Aggressive",
        annual_return_rate=max(inputs.annual_return_rate, AGGRESSIVE_RATE_FLOOR),
        income=IncomeSchedule(
            grant_monthly=inputs.grant_monthly,
            grant_months=inputs.grant_months,
            work_monthly=max(inputs.work_monthly, AGGRESSIVE_WORK_FLOOR),
            work_start_month=0,
        ),
    )


def base_scenario(inputs: ScenarioInputs) -> Scenario:
    """The user's own assumptions, untouched."""
    return Scenario(
        kind=ScenarioKind.BASE,
        label="Base",
        annual_return_rate=inputs.annual_return_rate,
        income=IncomeSchedule(
            grant_monthly=inputs.grant_monthly,
            grant_months=inputs.grant_months,
            work_monthly=inputs.work_monthly,
            work_start_month=inputs.work_start_month,
        ),
    )


def conservative_scenario(inputs: ScenarioInputs) -> Scenario:
    """Capped return, work only begins once the grant runs out."""
    return Scenario(
        kind=ScenarioKind.CONSERVATIVE,
        label="Conservative",
        annual_return_rate=min(inputs.annual_return_rate, CONSERVATIVE_RATE_CAP),
        income=IncomeSchedule(
            grant_monthly=inputs.grant_monthly,
            grant_months=inputs.grant_months,
            work_monthly=max(inputs.work_monthly, CONSERVATIVE_WORK_FLOOR),
            work_start_month=inputs.grant_months,
        ),
    )


SCENARIO_BUILDERS: Dict[ScenarioKind, Callable[[ScenarioInputs], Scenario]] = {
    ScenarioKind.AGGRESSIVE: aggressive_scenario,
    ScenarioKind.BASE: base_scenario,
    ScenarioKind.CONSERVATIVE: conservative_scenario,
}


def build_scenarios(inputs: ScenarioInputs) -> List[Scenario]:
    return [build(inputs) for build in SCENARIO_BUILDERS.values()]


def run_scenario(inputs: ScenarioInputs, scenario: Scenario) -> ScenarioRun:
    def run(target: float, months: int) -> SimulationResult:
        return simulate(
            start=inputs.start,
            month_count=months,
            annual_return_rate=scenario.annual_return_rate,
            monthly_expenses=inputs.monthly_expenses,
            start_balances=inputs.start_balances,
            income_fn=scenario.income,
            lump_sums=inputs.lump_sums,
            invest_buffer=inputs.invest_buffer,
            target=target,
        )

    return ScenarioRun(
        scenario=scenario,
        near=run(inputs.near_target, inputs.near_horizon_months),
        far=run(inputs.far_target, inputs.far_horizon_months),
    )


def run_scenarios(inputs: ScenarioInputs) -> List[ScenarioRun]:
    """Run every scenario toward both the near and the far target."""
    return [run_scenario(inputs, scenario) for scenario in build_scenarios(inputs)]


__all__ = [
    "AGGRESSIVE_RATE_FLOOR",
    "AGGRESSIVE_WORK_FLOOR",
    "CONSERVATIVE_RATE_CAP",
    "CONSERVATIVE_WORK_FLOOR",
    "IncomeSchedule",
    "Scenario",
    "ScenarioInputs",
    "ScenarioKind",
    "ScenarioRun",
    "aggressive_scenario",
    "base_scenario",
    "build_scenarios",
    "conservative_scenario",
    "run_scenario",
    "run_scenarios",
]
