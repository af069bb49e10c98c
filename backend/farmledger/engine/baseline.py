"""Historical baseline derivation from recorded sales and expenses.

Sales and expenses are bucketed by calendar month; expense categories are
classified as variable or fixed costs. From those monthly actuals we derive
the starting unit volume fed into the projection engine and a suggested set
of assumptions (price, unit variable cost, fixed costs per month, growth rate)
together with data-quality warnings.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Iterable

from dateutil.relativedelta import relativedelta

from farmledger.config import get_settings

ZERO = Decimal(0)


class CostType(str, Enum):
    VARIABLE = "variable"
    FIXED = "fixed"


# feed and medication scale with flock size and output; the rest are periodic.
EXPENSE_CATEGORY_TO_COST_TYPE: dict[str, CostType] = {
    "feed": CostType.VARIABLE,
    "medication": CostType.VARIABLE,
    "labor": CostType.FIXED,
    "utilities": CostType.FIXED,
    "equipment": CostType.FIXED,
    "other": CostType.FIXED,
}


@dataclass(frozen=True)
class SaleRecord:
    sale_date: date
    crates_sold: int
    price_per_crate: Decimal
    total_amount: Decimal


@dataclass(frozen=True)
class ExpenseRecord:
    expense_date: date
    category: str
    amount: Decimal


@dataclass
class MonthlyActuals:
    month: str  # YYYY-MM
    revenue: Decimal = ZERO
    variable_costs: Decimal = ZERO
    fixed_costs: Decimal = ZERO
    total_costs: Decimal = ZERO
    profit: Decimal = ZERO
    units_sold: int = 0


@dataclass
class DataQuality:
    has_sufficient_data: bool
    months_with_sales: int
    months_with_expenses: int
    total_units: int
    total_expenses: Decimal
    warnings: list[str] = field(default_factory=list)


@dataclass
class SuggestedAssumptions:
    price: Decimal
    unit_variable_cost: Decimal
    fixed_costs_per_month: Decimal
    initial_units: int
    average_monthly_units: Decimal
    growth_rate: Decimal
    data_quality: DataQuality


def _round(value: Decimal, places: int = 2) -> Decimal:
    quantize = Decimal(10) ** -places
    return value.quantize(quantize, rounding=ROUND_HALF_UP)


def _amount(value: Any) -> Decimal:
    """Recorded amounts may arrive as Decimal, number or string; unparseable counts as zero."""
    if value is None:
        return ZERO
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except ArithmeticError:
        return ZERO
    return result if result.is_finite() else ZERO


def cost_type(category: str | None) -> CostType:
    """Variable or fixed; unknown categories count as fixed."""
    if not category:
        return CostType.FIXED
    return EXPENSE_CATEGORY_TO_COST_TYPE.get(category.strip().lower(), CostType.FIXED)


def split_expenses_by_type(expenses: Iterable[Any]) -> tuple[Decimal, Decimal, Decimal]:
    """(variable, fixed, total) expense amounts."""
    variable = ZERO
    fixed = ZERO
    for expense in expenses:
        if cost_type(expense.category) == CostType.VARIABLE:
            variable += _amount(expense.amount)
        else:
            fixed += _amount(expense.amount)
    return (variable, fixed, variable + fixed)


def month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def months_between(first: str, last: str) -> int:
    """Calendar months from one YYYY-MM key to another."""
    y1, m1 = (int(p) for p in first.split("-"))
    y2, m2 = (int(p) for p in last.split("-"))
    return (y2 - y1) * 12 + (m2 - m1)


def window_start(today: date, months: int) -> date:
    """First day of the oldest month in a rolling window that ends with today's month."""
    return today.replace(day=1) - relativedelta(months=months - 1)


def aggregate_by_month(sales: Iterable[Any], expenses: Iterable[Any]) -> list[MonthlyActuals]:
    """Monthly revenue, costs and units, sorted by month."""
    monthly: dict[str, MonthlyActuals] = {}

    for sale in sales:
        key = month_key(sale.sale_date)
        data = monthly.setdefault(key, MonthlyActuals(month=key))
        data.revenue += _amount(sale.total_amount)
        data.units_sold += int(sale.crates_sold or 0)

    for expense in expenses:
        key = month_key(expense.expense_date)
        data = monthly.setdefault(key, MonthlyActuals(month=key))
        if cost_type(expense.category) == CostType.VARIABLE:
            data.variable_costs += _amount(expense.amount)
        else:
            data.fixed_costs += _amount(expense.amount)

    for data in monthly.values():
        data.total_costs = data.variable_costs + data.fixed_costs
        data.profit = data.revenue - data.total_costs

    return [monthly[k] for k in sorted(monthly)]


def filter_window(sales: Iterable[Any], expenses: Iterable[Any], start: date) -> tuple[list[Any], list[Any]]:
    """Records dated on or after the window start."""
    return (
        [s for s in sales if s.sale_date >= start],
        [e for e in expenses if e.expense_date >= start],
    )


def baseline_units_per_month(monthly: list[MonthlyActuals]) -> Decimal:
    """Trailing average of units sold over the months that have any recorded activity."""
    if not monthly:
        return ZERO
    total_units = sum(m.units_sold for m in monthly)
    return Decimal(total_units) / Decimal(len(monthly))


def suggest_assumptions(
    sales: Iterable[Any],
    expenses: Iterable[Any],
    *,
    today: date | None = None,
    window_months: int | None = None,
) -> SuggestedAssumptions:
    """Derive assumptions from the sales and expenses inside the rolling window."""
    settings = get_settings()
    today = today or date.today()
    window_months = window_months or settings.default_analysis_window_months
    warnings: list[str] = []

    window_sales, window_expenses = filter_window(sales, expenses, window_start(today, window_months))
    monthly = aggregate_by_month(window_sales, window_expenses)

    months_with_sales = sum(1 for m in monthly if m.units_sold > 0)
    months_with_expenses = sum(1 for m in monthly if m.total_costs > 0)
    total_units = sum(m.units_sold for m in monthly)
    total_revenue = sum((m.revenue for m in monthly), ZERO)
    total_expenses = sum((m.total_costs for m in monthly), ZERO)

    has_sufficient_data = (
        months_with_sales >= settings.min_months_with_sales
        and months_with_expenses >= settings.min_months_with_expenses
        and total_units > 0
    )
    if months_with_sales < settings.min_months_with_sales:
        warnings.append(f"Less than {settings.min_months_with_sales} months of sales data")
    if months_with_expenses < settings.min_months_with_expenses:
        warnings.append(f"Less than {settings.min_months_with_expenses} months of expense data")
    if total_units == 0:
        warnings.append("No units sold in selected timeframe")

    # Price: revenue-weighted average per unit
    if total_units > 0:
        price = total_revenue / Decimal(total_units)
    elif window_sales:
        price = sum((_amount(s.price_per_crate) for s in window_sales), ZERO) / Decimal(len(window_sales))
        warnings.append("Using average price (no units sold)")
    else:
        price = Decimal(str(settings.default_price))
        warnings.append("No sales data - using default price")

    total_variable = sum((m.variable_costs for m in monthly), ZERO)
    if total_units > 0:
        unit_variable_cost = total_variable / Decimal(total_units)
    else:
        unit_variable_cost = price * Decimal(str(settings.default_variable_cost_ratio))
        warnings.append("No units sold - estimating variable cost")

    total_fixed = sum((m.fixed_costs for m in monthly), ZERO)
    fixed_costs_per_month = total_fixed / Decimal(len(monthly)) if monthly else ZERO
    if total_fixed == 0:
        warnings.append("No fixed expenses recorded")

    average_units = baseline_units_per_month(monthly)
    first_with_sales = next((m for m in monthly if m.units_sold > 0), None)
    if first_with_sales is not None:
        initial_units = Decimal(first_with_sales.units_sold)
    else:
        initial_units = Decimal(total_units) / Decimal(months_with_sales) if months_with_sales else Decimal(100)
        warnings.append("No sales in first month - using average")

    growth_rate = ZERO
    selling_months = [m for m in monthly if m.units_sold > 0]
    if len(selling_months) >= 2:
        first, last = selling_months[0], selling_months[-1]
        gap = months_between(first.month, last.month)
        if gap > 0:
            ratio = Decimal(last.units_sold) / Decimal(first.units_sold)
            growth_rate = ratio ** (Decimal(1) / Decimal(gap)) - 1
            cap = Decimal(str(settings.growth_rate_cap))
            if growth_rate > cap:
                growth_rate = cap
                warnings.append(f"Growth rate capped at {cap * 100:.0f}%/month")
            elif growth_rate < -cap:
                growth_rate = -cap
                warnings.append(f"Decline rate capped at {cap * 100:.0f}%/month")
    else:
        warnings.append("Insufficient data for growth rate - using 0%")

    return SuggestedAssumptions(
        price=_round(price),
        unit_variable_cost=_round(unit_variable_cost),
        fixed_costs_per_month=_round(fixed_costs_per_month),
        initial_units=int(_round(initial_units, 0)),
        average_monthly_units=_round(average_units),
        growth_rate=_round(growth_rate, 4),
        data_quality=DataQuality(
            has_sufficient_data=has_sufficient_data,
            months_with_sales=months_with_sales,
            months_with_expenses=months_with_expenses,
            total_units=total_units,
            total_expenses=_round(total_expenses),
            warnings=warnings,
        ),
    )
