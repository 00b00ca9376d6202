from __future__ import annotations

import datetime as dt
from math import isclose

import pytest
from pydantic import ValidationError

from backend.core.simulation import MAX_HORIZON_MONTHS, AccountState, simulate
from backend.core.solver import RequiredContributionParams, required_monthly_to_hit


def params(**overrides) -> RequiredContributionParams:
    values = dict(
        target=500000.0,
        horizon_months=36,
        annual_return_rate=0.07,
        start_earning_balance=206616.0,
        buffer_amount=10000.0,
        debt_amount=40700.0,
    )
    values.update(overrides)
    return RequiredContributionParams(**values)


def test_zero_rate_uses_straight_line_limit():
    """
    At r = 0 the annuity factor is just the number of months.
    """
    p = params(target=1200.0, horizon_months=12, annual_return_rate=0.0, start_earning_balance=0.0, buffer_amount=0.0, debt_amount=0.0)
    assert isclose(required_monthly_to_hit(p), 100.0, abs_tol=1e-12)


def test_zero_rate_accounts_for_balance_buffer_and_debt():
    p = params(target=10000.0, horizon_months=10, annual_return_rate=0.0, start_earning_balance=4000.0, buffer_amount=1000.0, debt_amount=2000.0)
    # (10000 + 2000 - 1000 - 4000) / 10
    assert isclose(required_monthly_to_hit(p), 700.0, abs_tol=1e-12)


def test_tiny_rate_approaches_zero_rate_answer():
    zero = required_monthly_to_hit(params(annual_return_rate=0.0))
    tiny = required_monthly_to_hit(params(annual_return_rate=1e-9))
    assert isclose(zero, tiny, rel_tol=1e-6)


def test_result_is_negative_when_already_on_track():
    p = params(target=100000.0, start_earning_balance=500000.0)
    assert required_monthly_to_hit(p) < 0


def test_default_dashboard_numbers_need_positive_contribution():
    monthly = required_monthly_to_hit(params())

    r = 0.07 / 12
    growth = (1 + r) ** 36
    expected = (500000.0 + 40700.0 - 10000.0 - 206616.0 * growth) / ((growth - 1) / r)
    assert monthly > 0
    assert isclose(monthly, expected, rel_tol=1e-12)


@pytest.mark.parametrize("rate", [0.0, 0.05, 0.07])
def test_engine_lands_on_target_with_solved_contribution(rate):
    """
    Investing the solved amount every month (zero buffer, so each month is swept) ends exactly on the target.
    """
    p = params(annual_return_rate=rate, buffer_amount=0.0)
    monthly = required_monthly_to_hit(p)

    result = simulate(
        start=dt.date(2025, 9, 1),
        month_count=p.horizon_months,
        annual_return_rate=rate,
        monthly_expenses=0.0,
        start_balances=AccountState(earning=p.start_earning_balance, cash=0.0, debt=p.debt_amount),
        income_fn=lambda m: monthly,
        invest_buffer=0.0,
        target=p.target,
    )

    assert isclose(result.rows[-1].net_worth, p.target, rel_tol=1e-9)


def test_engine_lands_on_target_when_buffer_is_held_in_cash():
    p = params()
    monthly = required_monthly_to_hit(p)

    result = simulate(
        start=dt.date(2025, 9, 1),
        month_count=p.horizon_months,
        annual_return_rate=p.annual_return_rate,
        monthly_expenses=0.0,
        start_balances=AccountState(earning=p.start_earning_balance, cash=p.buffer_amount, debt=p.debt_amount),
        income_fn=lambda m: monthly,
        invest_buffer=p.buffer_amount,
        target=p.target,
    )

    assert isclose(result.rows[-1].net_worth, p.target, rel_tol=1e-9)


def test_horizon_must_be_positive():
    with pytest.raises(ValidationError):
        params(horizon_months=0)


def test_rate_too_small_to_move_one_plus_r_matches_zero_rate():
    zero = required_monthly_to_hit(params(annual_return_rate=0.0))
    tiny = required_monthly_to_hit(params(annual_return_rate=1e-17))
    assert isclose(zero, tiny, rel_tol=1e-12)


def test_horizon_is_bounded():
    with pytest.raises(ValidationError):
        params(horizon_months=MAX_HORIZON_MONTHS + 1)
