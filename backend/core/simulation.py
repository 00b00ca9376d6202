"""Monthly net-worth simulation engine.

Each month runs the same fixed sequence:

  1) Add income minus expenses to cash.
  2) Grow the earning (invested) balance at annual_return_rate / 12.
  3) Sweep any cash above the invest buffer into earning.
  4) Add that month's lump sum (if any) to cash. It is swept next month.
  5) Record net worth = earning + cash - debt.
  6) Latch the first month where net worth reaches the target.

Debt is a static liability and is never touched inside a run.
"""

from __future__ import annotations

import datetime as dt
from typing import Callable, List, Mapping, Optional

from dateutil.relativedelta import relativedelta
from loguru import logger
from pydantic import BaseModel, ConfigDict

# 500 years; also keeps (1 + r) ** n finite for any accepted rate
MAX_HORIZON_MONTHS = 6000

IncomeFunction = Callable[[int], float]
LumpSumSchedule = Mapping[int, float]


class AccountState(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    earning: float
    cash: float
    debt: float = 0.0


class MonthlyRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int  # 1-based
    date: dt.date
    net_worth: float
    earning: float
    cash: float


class GoalHit(BaseModel):
    model_config = ConfigDict(frozen=True)

    month_index: int  # 1-based, same numbering as MonthlyRecord.month
    date: dt.date
    net_worth: float


class SimulationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    rows: List[MonthlyRecord]
    hit: Optional[GoalHit] = None


def add_months(start: dt.date, months: int) -> dt.date:
    return start + relativedelta(months=months)


def simulate(
    start: dt.date,
    month_count: int,
    annual_return_rate: float,
    monthly_expenses: float,
    start_balances: AccountState,
    income_fn: IncomeFunction,
    lump_sums: Optional[LumpSumSchedule] = None,
    *,
    invest_buffer: float,
    target: float,
) -> SimulationResult:
    """
    Step the account forward month_count months and return every month's row.

    lump_sums is keyed by the zero-based loop index m (the same index passed
    to income_fn), while rows are numbered m + 1.

    Row dates come from add_months, so a start date plus month_count that runs
    past year 9999 raises ValueError. The request models reject such inputs.
    """
    r = annual_return_rate / 12
    earning = float(start_balances.earning)
    cash = float(start_balances.cash)
    debt = float(start_balances.debt)

    rows: List[MonthlyRecord] = []
    hit: Optional[GoalHit] = None

    for m in range(month_count):
        cash += income_fn(m) - monthly_expenses

        earning *= 1 + r

        if cash > invest_buffer:
            earning += cash - invest_buffer
            cash = invest_buffer

        if lump_sums and lump_sums.get(m):
            cash += lump_sums[m]

        net = earning + cash - debt
        when = add_months(start, m + 1)
        rows.append(MonthlyRecord(month=m + 1, date=when, net_worth=net, earning=earning, cash=cash))

        if hit is None and net >= target:
            hit = GoalHit(month_index=m + 1, date=when, net_worth=net)
            logger.debug(f"target {target:,.0f} reached in month {m + 1} ({when.isoformat()})")

    return SimulationResult(rows=rows, hit=hit)
