"""Assumptions store: one active set of break-even assumptions per farm."""
import json

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.engine.breakeven import Assumptions
from farmledger.errors import NotFoundError
from farmledger.models.assumptions import BreakEvenAssumptions
from farmledger.models.audit import AuditLog
from farmledger.schemas.breakeven import AssumptionsResponse, AssumptionsUpdate

_FIELDS = ("price", "unit_variable_cost", "fixed_costs_per_month", "growth_rate", "notes")


def _snapshot(row: BreakEvenAssumptions) -> str:
    return json.dumps({f: str(getattr(row, f)) if getattr(row, f) is not None else None for f in _FIELDS})


async def find_assumptions(db: AsyncSession, farm_id: int) -> BreakEvenAssumptions | None:
    result = await db.execute(
        select(BreakEvenAssumptions).where(BreakEvenAssumptions.farm_id == farm_id)
    )
    return result.scalar_one_or_none()


async def get_assumptions(db: AsyncSession, farm_id: int) -> BreakEvenAssumptions:
    row = await find_assumptions(db, farm_id)
    if row is None:
        raise NotFoundError("Set up your break-even assumptions first")
    return row


async def put_assumptions(
    db: AsyncSession,
    farm_id: int,
    user_id: int,
    data: AssumptionsUpdate,
) -> BreakEvenAssumptions:
    """Create or replace the farm's assumptions and record the change in the audit log."""
    row = await find_assumptions(db, farm_id)
    old_value = None
    if row is None:
        row = BreakEvenAssumptions(farm_id=farm_id)
        db.add(row)
        action = "create_assumptions"
    else:
        old_value = _snapshot(row)
        action = "update_assumptions"
    for k, v in data.model_dump().items():
        setattr(row, k, v)
    await db.flush()
    await db.refresh(row)
    db.add(AuditLog(
        farm_id=farm_id,
        user_id=user_id,
        action=action,
        entity_type="break_even_assumptions",
        entity_id=row.id,
        old_value=old_value,
        new_value=_snapshot(row),
    ))
    await db.flush()
    if old_value is None:
        logger.info("Break-even assumptions created for farm {} by user {}", farm_id, user_id)
    else:
        logger.info("Break-even assumptions updated for farm {} by user {}", farm_id, user_id)
    return row


def to_engine_assumptions(row: BreakEvenAssumptions) -> Assumptions:
    return Assumptions(
        price=row.price,
        unit_variable_cost=row.unit_variable_cost,
        fixed_costs_per_month=row.fixed_costs_per_month,
        growth_rate=row.growth_rate,
        notes=row.notes,
    )


def to_response(row: BreakEvenAssumptions | None) -> AssumptionsResponse:
    if row is None:
        return AssumptionsResponse(is_configured=False)
    return AssumptionsResponse(
        is_configured=True,
        price=row.price,
        unit_variable_cost=row.unit_variable_cost,
        fixed_costs_per_month=row.fixed_costs_per_month,
        growth_rate=row.growth_rate,
        notes=row.notes,
    )
