"""Break-even assumptions and metrics schemas. Decimals serialise as strings."""
from datetime import date
from decimal import Decimal

from pydantic import Field

from farmledger.schemas.base import CamelModel


class AssumptionsUpdate(CamelModel):
    price: Decimal = Field(..., ge=Decimal("0.01"), max_digits=12, decimal_places=2)
    unit_variable_cost: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    fixed_costs_per_month: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    growth_rate: Decimal = Field(Decimal(0), ge=-1, le=10, max_digits=7, decimal_places=4)
    notes: str | None = None


class AssumptionsResponse(CamelModel):
    """Current assumptions; every value is null when none are configured yet."""

    is_configured: bool = True
    price: Decimal | None = None
    unit_variable_cost: Decimal | None = None
    fixed_costs_per_month: Decimal | None = None
    growth_rate: Decimal | None = None
    notes: str | None = None


class MonthlyProjectionResponse(CamelModel):
    month: int
    units: Decimal
    revenue: Decimal
    variable_costs: Decimal
    fixed_costs: Decimal
    total_costs: Decimal
    profit: Decimal
    cumulative_profit: Decimal


class BreakEvenMetricsResponse(CamelModel):
    contribution_margin: Decimal
    contribution_margin_ratio: Decimal
    break_even_units: Decimal | None
    break_even_revenue: Decimal | None
    break_even_month: int | None
    break_even_date: date | None
    payback_period: int | None
    cumulative_profits: list[Decimal]
    monthly_projections: list[MonthlyProjectionResponse]


class DataSource(CamelModel):
    months_analyzed: int
    sales_records: int
    expense_records: int
    start_date: date
    end_date: date


class MetricsResponse(BreakEvenMetricsResponse):
    horizon_months: int
    baseline_units_per_month: Decimal
    baseline_overridden: bool = False
    data_source: DataSource
    assumptions: AssumptionsResponse


class DataQualityResponse(CamelModel):
    has_sufficient_data: bool
    months_with_sales: int
    months_with_expenses: int
    total_units: int
    total_expenses: Decimal
    warnings: list[str]


class SuggestedAssumptionsResponse(CamelModel):
    price: Decimal
    unit_variable_cost: Decimal
    fixed_costs_per_month: Decimal
    initial_units: int
    average_monthly_units: Decimal
    growth_rate: Decimal
    data_quality: DataQualityResponse
    data_source: DataSource
