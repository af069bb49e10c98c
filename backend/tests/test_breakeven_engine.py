from datetime import date
from decimal import Decimal

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from farmledger.engine.breakeven import (
    Assumptions,
    break_even_date,
    compute_metrics,
    find_break_even_month,
)
from farmledger.errors import ComputationError, ValidationError

TODAY = date(2026, 10, 18)


def _assumptions(price="10", uvc="6", fixed="4000", growth="0") -> Assumptions:
    return Assumptions(
        price=Decimal(price),
        unit_variable_cost=Decimal(uvc),
        fixed_costs_per_month=Decimal(fixed),
        growth_rate=Decimal(growth),
    )


# ── Example scenarios ───────────────────────────────────────────────


def test_constant_loss_never_breaks_even() -> None:
    metrics = compute_metrics(_assumptions(), Decimal(800), today=TODAY)

    assert metrics.contribution_margin == Decimal(4)
    assert metrics.contribution_margin_ratio == Decimal(40)
    assert metrics.break_even_units == Decimal(1000)
    assert metrics.break_even_revenue == Decimal(10000)
    assert metrics.monthly_projections[0].profit == Decimal(-800)
    assert all(p.profit == Decimal(-800) for p in metrics.monthly_projections)
    assert metrics.break_even_month is None
    assert metrics.break_even_date is None
    assert metrics.payback_period is None
    assert len(metrics.monthly_projections) == 12
    assert metrics.cumulative_profits[-1] == Decimal(-9600)


def test_profitable_from_first_month() -> None:
    metrics = compute_metrics(_assumptions(), Decimal(1200), today=TODAY)

    assert metrics.monthly_projections[0].profit == Decimal(800)
    assert metrics.break_even_month == 1
    assert metrics.payback_period == 1
    assert metrics.break_even_date == TODAY


def test_growth_crosses_break_even_later() -> None:
    metrics = compute_metrics(_assumptions(growth="0.10"), Decimal(900), today=TODAY)

    # replay the compounding formula independently
    cumulative = Decimal(0)
    expected_month = None
    for m in range(1, 13):
        units = Decimal(900) * Decimal("1.10") ** (m - 1)
        cumulative += units * Decimal(10) - (units * Decimal(6) + Decimal(4000))
        if expected_month is None and cumulative >= 0:
            expected_month = m

    assert metrics.monthly_projections[0].units == Decimal(900)
    assert metrics.monthly_projections[0].profit == Decimal(-400)
    assert expected_month == 4
    assert metrics.break_even_month == expected_month
    assert metrics.break_even_date == date(2027, 1, 18)


def test_zero_price_rejected_before_simulation() -> None:
    with pytest.raises(ValidationError) as exc:
        compute_metrics(_assumptions(price="0"), Decimal(800), today=TODAY)
    assert exc.value.field == "price"


def test_negative_margin_loses_money_every_month() -> None:
    metrics = compute_metrics(_assumptions(price="10", uvc="12", fixed="1000"), Decimal(500), today=TODAY)

    assert metrics.contribution_margin == Decimal(-2)
    cumulative = metrics.cumulative_profits
    assert all(later < earlier for earlier, later in zip(cumulative, cumulative[1:]))
    assert metrics.break_even_month is None


# ── Validation and edge cases ───────────────────────────────────────


@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"price": "-1"}, "price"),
        ({"price": "NaN"}, "price"),
        ({"uvc": "-0.01"}, "unit_variable_cost"),
        ({"fixed": "-5"}, "fixed_costs_per_month"),
        ({"growth": "10.5"}, "growth_rate"),
        ({"growth": "-1.01"}, "growth_rate"),
        ({"growth": "Infinity"}, "growth_rate"),
    ],
)
def test_invalid_assumptions_name_the_field(kwargs, field) -> None:
    with pytest.raises(ValidationError) as exc:
        compute_metrics(_assumptions(**kwargs), Decimal(100), today=TODAY)
    assert exc.value.field == field


def test_non_numeric_values_rejected() -> None:
    bad = Assumptions(price="ten", unit_variable_cost=Decimal(1), fixed_costs_per_month=Decimal(0))
    with pytest.raises(ValidationError) as exc:
        compute_metrics(bad, Decimal(100), today=TODAY)
    assert exc.value.field == "price"


def test_negative_baseline_rejected() -> None:
    with pytest.raises(ValidationError) as exc:
        compute_metrics(_assumptions(), Decimal(-1), today=TODAY)
    assert exc.value.field == "baseline_units_per_month"


def test_numeric_strings_and_ints_are_accepted() -> None:
    loose = Assumptions(price="10", unit_variable_cost=6, fixed_costs_per_month="4000", growth_rate=0)
    assert compute_metrics(loose, 1200, today=TODAY) == compute_metrics(_assumptions(), Decimal(1200), today=TODAY)


def test_zero_margin_has_no_break_even_volume() -> None:
    metrics = compute_metrics(_assumptions(uvc="10"), Decimal(100), today=TODAY)
    assert metrics.contribution_margin == 0
    assert metrics.break_even_units is None
    assert metrics.break_even_revenue is None
    assert metrics.break_even_month is None


def test_full_decline_keeps_raw_baseline_in_first_month() -> None:
    metrics = compute_metrics(_assumptions(growth="-1"), Decimal(500), today=TODAY)
    units = [p.units for p in metrics.monthly_projections]
    assert units[0] == Decimal(500)
    assert all(u == 0 for u in units[1:])


def test_zero_fixed_costs_and_zero_volume_break_even_immediately() -> None:
    metrics = compute_metrics(_assumptions(fixed="0"), Decimal(0), today=TODAY)
    assert metrics.break_even_units == 0
    assert metrics.break_even_month == 1


def test_horizon_is_configurable() -> None:
    metrics = compute_metrics(_assumptions(growth="0.10"), Decimal(900), horizon_months=24, today=TODAY)
    assert len(metrics.monthly_projections) == 24
    assert len(metrics.cumulative_profits) == 24
    assert [p.month for p in metrics.monthly_projections] == list(range(1, 25))


@pytest.mark.parametrize("horizon", [0, -3, True, 1.5])
def test_invalid_horizon_rejected(horizon) -> None:
    with pytest.raises(ValidationError) as exc:
        compute_metrics(_assumptions(), Decimal(100), horizon_months=horizon, today=TODAY)
    assert exc.value.field == "horizon_months"


def test_overflow_is_reported_as_computation_error() -> None:
    with pytest.raises(ComputationError):
        compute_metrics(_assumptions(growth="10"), Decimal("1e999990"), today=TODAY)


def test_break_even_date_clamps_to_month_end() -> None:
    assert break_even_date(2, date(2026, 1, 31)) == date(2026, 2, 28)
    assert break_even_date(1, date(2026, 1, 31)) == date(2026, 1, 31)
    assert break_even_date(None, date(2026, 1, 31)) is None


def test_find_break_even_month() -> None:
    assert find_break_even_month([Decimal(-5), Decimal(-1), Decimal(0), Decimal(3)]) == 3
    assert find_break_even_month([Decimal(-5), Decimal(-1)]) is None
    assert find_break_even_month([]) is None


# ── Properties ──────────────────────────────────────────────────────

money = st.decimals(min_value=Decimal("0"), max_value=Decimal("100000"), places=2)
prices = st.decimals(min_value=Decimal("0.01"), max_value=Decimal("100000"), places=2)
growth = st.decimals(min_value=Decimal("-1"), max_value=Decimal("10"), places=4)
volumes = st.decimals(min_value=Decimal("0"), max_value=Decimal("100000"), places=2)


@given(price=prices, uvc=money, fixed=money, g=growth, baseline=volumes)
def test_margin_identity(price, uvc, fixed, g, baseline) -> None:
    metrics = compute_metrics(_assumptions(price, uvc, fixed, g), baseline, today=TODAY)
    assert metrics.contribution_margin + uvc == price


@given(price=prices, uvc=money, fixed=money)
def test_break_even_units_cover_fixed_costs(price, uvc, fixed) -> None:
    assume(price > uvc)
    metrics = compute_metrics(_assumptions(price, uvc, fixed), Decimal(0), today=TODAY)
    tolerance = Decimal("1e-18") * (fixed + 1)
    assert abs(metrics.break_even_units * metrics.contribution_margin - fixed) <= tolerance
    assert metrics.break_even_revenue == metrics.break_even_units * price


@given(price=prices, uvc=money, fixed=money, g=growth, baseline=volumes)
def test_cumulative_profit_is_running_total(price, uvc, fixed, g, baseline) -> None:
    metrics = compute_metrics(_assumptions(price, uvc, fixed, g), baseline, today=TODAY)
    projections = metrics.monthly_projections

    assert len(projections) == 12
    running = Decimal(0)
    for p, cumulative in zip(projections, metrics.cumulative_profits):
        running += p.profit
        assert p.cumulative_profit == running == cumulative
        assert p.total_costs == p.variable_costs + p.fixed_costs
        assert p.profit == p.revenue - p.total_costs


@given(price=prices, uvc=money, fixed=money, g=growth, baseline=volumes)
def test_non_negative_profits_never_lower_cumulative(price, uvc, fixed, g, baseline) -> None:
    metrics = compute_metrics(_assumptions(price, uvc, fixed, g), baseline, today=TODAY)
    projections = metrics.monthly_projections
    for k in range(1, len(projections)):
        if all(p.profit >= 0 for p in projections[: k + 1]):
            assert projections[k].cumulative_profit >= projections[k - 1].cumulative_profit


@given(price=prices, uvc=money, fixed=money, g=growth, baseline=volumes)
def test_break_even_month_is_first_non_negative_cumulative(price, uvc, fixed, g, baseline) -> None:
    metrics = compute_metrics(_assumptions(price, uvc, fixed, g), baseline, today=TODAY)
    cumulative = metrics.cumulative_profits
    if metrics.break_even_month is None:
        assert all(c < 0 for c in cumulative)
    else:
        m = metrics.break_even_month
        assert cumulative[m - 1] >= 0
        assert all(c < 0 for c in cumulative[: m - 1])
    assert metrics.payback_period == metrics.break_even_month


@given(price=prices, uvc=money, fixed=money, g=st.decimals(min_value=Decimal("0"), max_value=Decimal("10"), places=4), baseline=volumes)
def test_with_growth_and_positive_margin_final_month_decides_reachability(price, uvc, fixed, g, baseline) -> None:
    assume(price >= uvc)
    metrics = compute_metrics(_assumptions(price, uvc, fixed, g), baseline, today=TODAY)
    assert (metrics.break_even_month is None) == (metrics.cumulative_profits[-1] < 0)


@given(price=prices, uvc=money, fixed=money, baseline=volumes)
def test_zero_growth_keeps_units_constant(price, uvc, fixed, baseline) -> None:
    metrics = compute_metrics(_assumptions(price, uvc, fixed, "0"), baseline, today=TODAY)
    assert all(p.units == baseline for p in metrics.monthly_projections)


@given(price=prices, uvc=money, fixed=money, g=growth, baseline=volumes)
def test_same_inputs_same_metrics(price, uvc, fixed, g, baseline) -> None:
    first = compute_metrics(_assumptions(price, uvc, fixed, g), baseline, today=TODAY)
    second = compute_metrics(_assumptions(price, uvc, fixed, g), baseline, today=TODAY)
    assert first == second
