from datetime import date
from decimal import Decimal

import pytest

from farmledger.engine.baseline import (
    CostType,
    ExpenseRecord,
    SaleRecord,
    aggregate_by_month,
    baseline_units_per_month,
    cost_type,
    months_between,
    split_expenses_by_type,
    suggest_assumptions,
    window_start,
)

TODAY = date(2026, 10, 18)


def _sale(day: date, crates: int, price: str = "10") -> SaleRecord:
    return SaleRecord(
        sale_date=day,
        crates_sold=crates,
        price_per_crate=Decimal(price),
        total_amount=Decimal(price) * crates,
    )


def _expense(day: date, category: str, amount: str) -> ExpenseRecord:
    return ExpenseRecord(expense_date=day, category=category, amount=Decimal(amount))


@pytest.mark.parametrize(
    "category, expected",
    [
        ("feed", CostType.VARIABLE),
        ("medication", CostType.VARIABLE),
        (" Feed ", CostType.VARIABLE),
        ("labor", CostType.FIXED),
        ("utilities", CostType.FIXED),
        ("equipment", CostType.FIXED),
        ("other", CostType.FIXED),
        ("fuel", CostType.FIXED),
        (None, CostType.FIXED),
    ],
)
def test_cost_type(category, expected) -> None:
    assert cost_type(category) == expected


def test_split_expenses_by_type() -> None:
    expenses = [
        _expense(TODAY, "feed", "100.50"),
        _expense(TODAY, "labor", "300"),
        _expense(TODAY, "medication", "20"),
        ExpenseRecord(expense_date=TODAY, category="other", amount="not-a-number"),
    ]
    assert split_expenses_by_type(expenses) == (Decimal("120.50"), Decimal("300"), Decimal("420.50"))


def test_aggregate_by_month_sorted_with_profit() -> None:
    sales = [_sale(date(2026, 9, 3), 50), _sale(date(2026, 8, 20), 30), _sale(date(2026, 9, 28), 10)]
    expenses = [_expense(date(2026, 9, 1), "feed", "100"), _expense(date(2026, 7, 15), "labor", "250")]

    monthly = aggregate_by_month(sales, expenses)

    assert [m.month for m in monthly] == ["2026-07", "2026-08", "2026-09"]
    july, august, september = monthly
    assert july.units_sold == 0
    assert july.fixed_costs == Decimal(250)
    assert july.profit == Decimal(-250)
    assert august.revenue == Decimal(300)
    assert september.units_sold == 60
    assert september.variable_costs == Decimal(100)
    assert september.total_costs == Decimal(100)
    assert september.profit == Decimal(500)


def test_window_start() -> None:
    assert window_start(TODAY, 6) == date(2026, 5, 1)
    assert window_start(TODAY, 1) == date(2026, 10, 1)
    assert window_start(date(2026, 3, 5), 6) == date(2025, 10, 1)


def test_months_between() -> None:
    assert months_between("2025-11", "2026-02") == 3
    assert months_between("2026-02", "2026-02") == 0


def test_baseline_units_is_trailing_average_over_active_months() -> None:
    assert baseline_units_per_month([]) == 0
    monthly = aggregate_by_month(
        [_sale(date(2026, 8, 1), 100), _sale(date(2026, 9, 1), 200)],
        [_expense(date(2026, 10, 1), "labor", "50")],
    )
    assert baseline_units_per_month(monthly) == Decimal(100)


def test_suggest_assumptions_from_history() -> None:
    sales = [
        _sale(date(2026, 1, 10), 999),  # outside the 6-month window
        _sale(date(2026, 8, 10), 100),
        _sale(date(2026, 10, 5), 121),
    ]
    expenses = [
        _expense(date(2026, 8, 2), "feed", "442"),
        _expense(date(2026, 9, 2), "labor", "600"),
        _expense(date(2026, 10, 2), "labor", "600"),
    ]

    suggested = suggest_assumptions(sales, expenses, today=TODAY, window_months=6)

    assert suggested.price == Decimal("10.00")
    assert suggested.unit_variable_cost == Decimal("2.00")
    assert suggested.fixed_costs_per_month == Decimal("400.00")
    assert suggested.initial_units == 100
    assert suggested.average_monthly_units == Decimal("73.67")
    assert suggested.growth_rate == Decimal("0.1000")

    quality = suggested.data_quality
    assert quality.months_with_sales == 2
    assert quality.months_with_expenses == 3
    assert quality.total_units == 221
    assert quality.total_expenses == Decimal("1642.00")
    assert quality.has_sufficient_data is False
    assert "Less than 3 months of sales data" in quality.warnings


def test_growth_rate_is_capped() -> None:
    sales = [_sale(date(2026, 9, 1), 100), _sale(date(2026, 10, 1), 400)]
    suggested = suggest_assumptions(sales, [], today=TODAY, window_months=3)
    assert suggested.growth_rate == Decimal("0.2000")
    assert "Growth rate capped at 20%/month" in suggested.data_quality.warnings

    declining = [_sale(date(2026, 9, 1), 400), _sale(date(2026, 10, 1), 100)]
    suggested = suggest_assumptions(declining, [], today=TODAY, window_months=3)
    assert suggested.growth_rate == Decimal("-0.2000")
    assert "Decline rate capped at 20%/month" in suggested.data_quality.warnings


def test_no_history_falls_back_to_defaults() -> None:
    suggested = suggest_assumptions([], [], today=TODAY)

    assert suggested.price == Decimal("400.00")
    assert suggested.unit_variable_cost == Decimal("160.00")
    assert suggested.fixed_costs_per_month == Decimal("0.00")
    assert suggested.initial_units == 100
    assert suggested.average_monthly_units == Decimal("0.00")
    assert suggested.growth_rate == Decimal("0.0000")
    warnings = suggested.data_quality.warnings
    assert "No sales data - using default price" in warnings
    assert "No fixed expenses recorded" in warnings
    assert "Insufficient data for growth rate - using 0%" in warnings
    assert suggested.data_quality.has_sufficient_data is False


def test_zero_unit_sales_use_average_listed_price() -> None:
    sales = [_sale(date(2026, 10, 1), 0, "12"), _sale(date(2026, 10, 2), 0, "14")]
    suggested = suggest_assumptions(sales, [], today=TODAY, window_months=1)
    assert suggested.price == Decimal("13.00")
    assert suggested.unit_variable_cost == Decimal("5.20")
    assert "Using average price (no units sold)" in suggested.data_quality.warnings


def test_sufficient_data() -> None:
    sales = [_sale(date(2026, m, 5), 100) for m in (7, 8, 9, 10)]
    expenses = [_expense(date(2026, m, 5), "labor", "200") for m in (8, 9)]
    suggested = suggest_assumptions(sales, expenses, today=TODAY, window_months=6)
    assert suggested.data_quality.has_sufficient_data is True
    assert suggested.growth_rate == Decimal("0.0000")
    assert suggested.fixed_costs_per_month == Decimal("100.00")
