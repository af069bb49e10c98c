"""Break-even analysis API routes."""
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.auth.deps import get_current_farm_id, get_current_user, get_user_roles
from farmledger.auth.rbac import can_edit_assumptions, can_view_financials
from farmledger.database import get_db
from farmledger.models.user import User
from farmledger.schemas.breakeven import (
    AssumptionsResponse,
    AssumptionsUpdate,
    MetricsResponse,
    SuggestedAssumptionsResponse,
)
from farmledger.services import assumptions_service, metrics_service
from farmledger.services.export import projections_to_csv

router = APIRouter(prefix="/breakeven", tags=["breakeven"])

WindowMonths = Annotated[int | None, Query(ge=1, le=36, description="Rolling window of history, in months")]


def _require_view(roles: list[str]) -> None:
    if not can_view_financials(roles):
        raise HTTPException(status_code=403, detail="Cannot view financials")


@router.get("/assumptions", response_model=AssumptionsResponse)
async def read_assumptions(
    db: Annotated[AsyncSession, Depends(get_db)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    """Current assumptions, or an empty object with isConfigured=false."""
    _require_view(roles)
    row = await assumptions_service.find_assumptions(db, farm_id)
    return assumptions_service.to_response(row)


@router.put("/assumptions", response_model=AssumptionsResponse)
async def write_assumptions(
    data: AssumptionsUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_edit_assumptions(roles):
        raise HTTPException(status_code=403, detail="Cannot edit break-even assumptions")
    row = await assumptions_service.put_assumptions(db, farm_id, user.id, data)
    return assumptions_service.to_response(row)


@router.get("/metrics", response_model=MetricsResponse)
async def read_metrics(
    db: Annotated[AsyncSession, Depends(get_db)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
    months: WindowMonths = None,
    baseline_units: Annotated[Decimal | None, Query(alias="baselineUnits", ge=0)] = None,
):
    """Projection from the farm's assumptions; computed on every read, never cached."""
    _require_view(roles)
    response, _ = await metrics_service.build_metrics(
        db, farm_id, months=months, baseline_units=baseline_units
    )
    return response


@router.get("/metrics/export")
async def export_metrics(
    db: Annotated[AsyncSession, Depends(get_db)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
    months: WindowMonths = None,
    baseline_units: Annotated[Decimal | None, Query(alias="baselineUnits", ge=0)] = None,
):
    _require_view(roles)
    response, metrics = await metrics_service.build_metrics(
        db, farm_id, months=months, baseline_units=baseline_units
    )
    content = projections_to_csv(metrics.monthly_projections)
    filename = f"break-even-analysis-{response.data_source.end_date.isoformat()}.csv"
    return StreamingResponse(
        iter([content.encode("utf-8")]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/suggested-assumptions", response_model=SuggestedAssumptionsResponse)
async def suggested_assumptions(
    db: Annotated[AsyncSession, Depends(get_db)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
    months: WindowMonths = None,
):
    """Assumptions derived from recorded sales and expenses, with data-quality warnings."""
    _require_view(roles)
    return await metrics_service.build_suggestions(db, farm_id, months=months)
