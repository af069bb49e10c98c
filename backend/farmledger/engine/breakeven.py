"""Break-even projection engine - pure and deterministic, Decimal only.

``compute_metrics`` turns one set of pricing/cost assumptions plus a starting
monthly unit volume into contribution-margin figures, a month-by-month
projection with compounding growth, and the month in which cumulative profit
first turns non-negative. No I/O, no shared state: the same inputs always give
equal results. Values are returned at full precision; rounding for display is
left to the caller.
"""
from dataclasses import dataclass
from datetime import date
from decimal import (
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)
from typing import Any

from dateutil.relativedelta import relativedelta
from loguru import logger

from farmledger.config import get_settings
from farmledger.errors import ComputationError, ValidationError

ZERO = Decimal(0)
ONE = Decimal(1)
HUNDRED = Decimal(100)


@dataclass(frozen=True)
class Assumptions:
    """Pricing and cost inputs for one farm."""

    price: Decimal
    unit_variable_cost: Decimal
    fixed_costs_per_month: Decimal
    growth_rate: Decimal = ZERO
    notes: str | None = None


@dataclass(frozen=True)
class MonthlyProjection:
    month: int
    units: Decimal
    revenue: Decimal
    variable_costs: Decimal
    fixed_costs: Decimal
    total_costs: Decimal
    profit: Decimal
    cumulative_profit: Decimal


@dataclass(frozen=True)
class BreakEvenMetrics:
    contribution_margin: Decimal
    contribution_margin_ratio: Decimal
    break_even_units: Decimal | None
    break_even_revenue: Decimal | None
    break_even_month: int | None
    break_even_date: date | None
    # Same value as break_even_month until an initial investment is modelled.
    payback_period: int | None
    cumulative_profits: tuple[Decimal, ...]
    monthly_projections: tuple[MonthlyProjection, ...]


def _to_decimal(value: Any, field: str) -> Decimal:
    """Coerce a numeric input to a finite Decimal or raise ValidationError naming the field."""
    if value is None:
        raise ValidationError(f"{field} is required", field=field)
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(f"Invalid numeric value for {field}: {value!r}", field=field) from None
    else:
        raise ValidationError(f"{field} must be a number", field=field)
    if not result.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    return result


def validate_assumptions(assumptions: Assumptions) -> Assumptions:
    """Return a copy with every numeric field as a finite Decimal within its allowed range."""
    settings = get_settings()
    price = _to_decimal(assumptions.price, "price")
    unit_variable_cost = _to_decimal(assumptions.unit_variable_cost, "unit_variable_cost")
    fixed_costs = _to_decimal(assumptions.fixed_costs_per_month, "fixed_costs_per_month")
    growth_rate = _to_decimal(assumptions.growth_rate, "growth_rate")

    if price <= 0:
        raise ValidationError("price must be greater than 0", field="price")
    if unit_variable_cost < 0:
        raise ValidationError("unit_variable_cost cannot be negative", field="unit_variable_cost")
    if fixed_costs < 0:
        raise ValidationError("fixed_costs_per_month cannot be negative", field="fixed_costs_per_month")
    low = Decimal(str(settings.growth_rate_min))
    high = Decimal(str(settings.growth_rate_max))
    if not low <= growth_rate <= high:
        raise ValidationError(f"growth_rate must be between {low} and {high}", field="growth_rate")

    return Assumptions(
        price=price,
        unit_variable_cost=unit_variable_cost,
        fixed_costs_per_month=fixed_costs,
        growth_rate=growth_rate,
        notes=assumptions.notes,
    )


def _validate_horizon(horizon_months: Any) -> int:
    if isinstance(horizon_months, bool) or not isinstance(horizon_months, int):
        raise ValidationError("horizon_months must be an integer", field="horizon_months")
    if horizon_months < 1:
        raise ValidationError("horizon_months must be at least 1", field="horizon_months")
    return horizon_months


def _ensure_finite(value: Decimal, label: str) -> Decimal:
    if not value.is_finite():
        raise ComputationError(f"Projection produced a non-finite {label}", field=label)
    return value


def contribution_margin(price: Decimal, unit_variable_cost: Decimal) -> Decimal:
    """Contribution margin per unit = price - unit variable cost."""
    return price - unit_variable_cost


def break_even_units(fixed_costs_per_month: Decimal, margin: Decimal) -> Decimal | None:
    """Units per month covering fixed costs at steady state; None when the margin is zero."""
    if margin == 0:
        return None
    return fixed_costs_per_month / margin


def find_break_even_month(cumulative_profits: list[Decimal] | tuple[Decimal, ...]) -> int | None:
    """First 1-indexed month whose cumulative profit is non-negative."""
    for index, cumulative in enumerate(cumulative_profits, start=1):
        if cumulative >= 0:
            return index
    return None


def break_even_date(month: int | None, today: date) -> date | None:
    """Calendar date of the break-even month: today + (month - 1) calendar months."""
    if month is None:
        return None
    return today + relativedelta(months=month - 1)


def project_months(
    assumptions: Assumptions,
    baseline_units_per_month: Decimal,
    horizon_months: int,
) -> list[MonthlyProjection]:
    """Monthly simulation over already-validated inputs."""
    growth_factor = ONE + assumptions.growth_rate
    fixed_costs = assumptions.fixed_costs_per_month
    projections: list[MonthlyProjection] = []
    cumulative = ZERO
    units = baseline_units_per_month
    for month in range(1, horizon_months + 1):
        # Repeated multiplication: Decimal(0) ** 0 is undefined when growth_rate is -1.
        if month > 1:
            units = units * growth_factor
        revenue = units * assumptions.price
        variable_costs = units * assumptions.unit_variable_cost
        total_costs = variable_costs + fixed_costs
        profit = revenue - total_costs
        cumulative = cumulative + profit
        projections.append(
            MonthlyProjection(
                month=month,
                units=_ensure_finite(units, "units"),
                revenue=_ensure_finite(revenue, "revenue"),
                variable_costs=_ensure_finite(variable_costs, "variable_costs"),
                fixed_costs=fixed_costs,
                total_costs=_ensure_finite(total_costs, "total_costs"),
                profit=_ensure_finite(profit, "profit"),
                cumulative_profit=_ensure_finite(cumulative, "cumulative_profit"),
            )
        )
    return projections


def compute_metrics(
    assumptions: Assumptions,
    baseline_units_per_month: Any,
    *,
    horizon_months: int | None = None,
    today: date | None = None,
) -> BreakEvenMetrics:
    """
    Break-even metrics and a monthly projection.

    Month 1 uses the raw baseline; month m uses baseline * (1 + growth_rate)^(m-1).
    Raises ValidationError for bad inputs before any simulation runs and
    ComputationError if the arithmetic overflows or goes non-finite.
    """
    settings = get_settings()
    checked = validate_assumptions(assumptions)
    baseline = _to_decimal(baseline_units_per_month, "baseline_units_per_month")
    if baseline < 0:
        raise ValidationError(
            "baseline_units_per_month cannot be negative",
            field="baseline_units_per_month",
        )
    horizon = _validate_horizon(
        settings.projection_horizon_months if horizon_months is None else horizon_months
    )
    today = today or date.today()

    with localcontext() as ctx:
        ctx.prec = settings.decimal_precision
        ctx.traps[Overflow] = True
        ctx.traps[InvalidOperation] = True
        ctx.traps[DivisionByZero] = True
        try:
            margin = contribution_margin(checked.price, checked.unit_variable_cost)
            margin_ratio = margin / checked.price * HUNDRED
            units_needed = break_even_units(checked.fixed_costs_per_month, margin)
            revenue_needed = units_needed * checked.price if units_needed is not None else None
            projections = project_months(checked, baseline, horizon)
        except (Overflow, InvalidOperation, DivisionByZero) as exc:
            raise ComputationError(f"Projection arithmetic failed: {exc.__class__.__name__}") from exc

    cumulative_profits = tuple(p.cumulative_profit for p in projections)
    month = find_break_even_month(cumulative_profits)
    logger.debug(
        "Break-even projection: margin={} horizon={} break_even_month={}",
        margin,
        horizon,
        month,
    )
    return BreakEvenMetrics(
        contribution_margin=margin,
        contribution_margin_ratio=margin_ratio,
        break_even_units=units_needed,
        break_even_revenue=revenue_needed,
        break_even_month=month,
        break_even_date=break_even_date(month, today),
        payback_period=month,
        cumulative_profits=cumulative_profits,
        monthly_projections=tuple(projections),
    )
