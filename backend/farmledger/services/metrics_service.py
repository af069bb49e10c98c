"""Assemble break-even metrics for a farm from stored assumptions and recorded history."""
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.config import get_settings
from farmledger.engine import baseline
from farmledger.engine.breakeven import BreakEvenMetrics, compute_metrics
from farmledger.models.expense import Expense
from farmledger.models.sale import Sale
from farmledger.schemas.breakeven import (
    BreakEvenMetricsResponse,
    DataQualityResponse,
    DataSource,
    MetricsResponse,
    SuggestedAssumptionsResponse,
)
from farmledger.services.assumptions_service import get_assumptions, to_engine_assumptions, to_response


async def load_history(
    db: AsyncSession,
    farm_id: int,
    start: date,
    end: date,
) -> tuple[list[Sale], list[Expense]]:
    """Sales and expenses dated within [start, end]."""
    sales = await db.execute(
        select(Sale)
        .where(Sale.farm_id == farm_id, Sale.sale_date >= start, Sale.sale_date <= end)
        .order_by(Sale.sale_date)
    )
    expenses = await db.execute(
        select(Expense)
        .where(Expense.farm_id == farm_id, Expense.expense_date >= start, Expense.expense_date <= end)
        .order_by(Expense.expense_date)
    )
    return list(sales.scalars().all()), list(expenses.scalars().all())


def _data_source(
    monthly: list[baseline.MonthlyActuals],
    sales: list[Sale],
    expenses: list[Expense],
    start: date,
    end: date,
) -> DataSource:
    return DataSource(
        months_analyzed=len(monthly),
        sales_records=len(sales),
        expense_records=len(expenses),
        start_date=start,
        end_date=end,
    )


async def build_metrics(
    db: AsyncSession,
    farm_id: int,
    *,
    months: int | None = None,
    baseline_units: Decimal | None = None,
    today: date | None = None,
) -> tuple[MetricsResponse, BreakEvenMetrics]:
    """
    Run the projection for a farm.

    The starting unit volume is the trailing monthly average of crates sold in the
    rolling window unless the caller passes ``baseline_units``. NotFoundError when
    the farm has no assumptions yet.
    """
    settings = get_settings()
    today = today or date.today()
    months = months or settings.default_analysis_window_months
    row = await get_assumptions(db, farm_id)

    start = baseline.window_start(today, months)
    sales, expenses = await load_history(db, farm_id, start, today)
    monthly = baseline.aggregate_by_month(sales, expenses)
    units = baseline_units if baseline_units is not None else baseline.baseline_units_per_month(monthly)

    metrics = compute_metrics(to_engine_assumptions(row), units, today=today)
    summary = BreakEvenMetricsResponse.model_validate(metrics)
    response = MetricsResponse(
        **summary.model_dump(),
        horizon_months=len(metrics.monthly_projections),
        baseline_units_per_month=units,
        baseline_overridden=baseline_units is not None,
        data_source=_data_source(monthly, sales, expenses, start, today),
        assumptions=to_response(row),
    )
    return response, metrics


async def build_suggestions(
    db: AsyncSession,
    farm_id: int,
    *,
    months: int | None = None,
    today: date | None = None,
) -> SuggestedAssumptionsResponse:
    """Assumptions derived from the farm's recorded sales and expenses."""
    settings = get_settings()
    today = today or date.today()
    months = months or settings.default_analysis_window_months
    start = baseline.window_start(today, months)
    sales, expenses = await load_history(db, farm_id, start, today)
    suggested = baseline.suggest_assumptions(sales, expenses, today=today, window_months=months)
    return SuggestedAssumptionsResponse(
        price=suggested.price,
        unit_variable_cost=suggested.unit_variable_cost,
        fixed_costs_per_month=suggested.fixed_costs_per_month,
        initial_units=suggested.initial_units,
        average_monthly_units=suggested.average_monthly_units,
        growth_rate=suggested.growth_rate,
        data_quality=DataQualityResponse.model_validate(suggested.data_quality),
        data_source=_data_source(baseline.aggregate_by_month(sales, expenses), sales, expenses, start, today),
    )
