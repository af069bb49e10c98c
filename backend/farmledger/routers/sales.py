"""Sales record API routes."""
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.auth.deps import get_current_farm_id, get_current_user, get_user_roles
from farmledger.auth.rbac import can_delete_transactions, can_record_transactions, can_view_financials
from farmledger.database import get_db
from farmledger.models.sale import Sale
from farmledger.models.user import User
from farmledger.schemas.records import SaleCreate, SaleResponse

router = APIRouter(prefix="/sales", tags=["sales"])


@router.get("", response_model=list[SaleResponse])
async def list_sales(
    db: Annotated[AsyncSession, Depends(get_db)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
    start_date: Annotated[date | None, Query(alias="startDate")] = None,
    end_date: Annotated[date | None, Query(alias="endDate")] = None,
):
    if not can_view_financials(roles):
        raise HTTPException(status_code=403, detail="Cannot view sales")
    stmt = select(Sale).where(Sale.farm_id == farm_id)
    if start_date:
        stmt = stmt.where(Sale.sale_date >= start_date)
    if end_date:
        stmt = stmt.where(Sale.sale_date <= end_date)
    result = await db.execute(stmt.order_by(Sale.sale_date.desc(), Sale.id.desc()))
    return [SaleResponse.model_validate(s) for s in result.scalars().all()]


@router.post("", response_model=SaleResponse, status_code=201)
async def create_sale(
    data: SaleCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_record_transactions(roles):
        raise HTTPException(status_code=403, detail="Cannot record sales")
    sale = Sale(farm_id=farm_id, user_id=user.id, **data.model_dump())
    db.add(sale)
    await db.flush()
    await db.refresh(sale)
    return SaleResponse.model_validate(sale)


@router.delete("/{sale_id}", status_code=204)
async def delete_sale(
    sale_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_delete_transactions(roles):
        raise HTTPException(status_code=403, detail="Cannot delete sales")
    sale = await db.get(Sale, sale_id)
    if not sale or sale.farm_id != farm_id:
        raise HTTPException(status_code=404, detail="Sale not found")
    await db.delete(sale)
    return None
