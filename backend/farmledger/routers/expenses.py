"""Expense record API routes."""
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmledger.auth.deps import get_current_farm_id, get_current_user, get_user_roles
from farmledger.auth.rbac import can_delete_transactions, can_record_transactions, can_view_financials
from farmledger.database import get_db
from farmledger.engine.baseline import cost_type
from farmledger.models.expense import Expense
from farmledger.models.user import User
from farmledger.schemas.records import ExpenseCreate, ExpenseResponse

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _to_response(expense: Expense) -> ExpenseResponse:
    return ExpenseResponse(
        id=expense.id,
        expense_date=expense.expense_date,
        category=expense.category,
        description=expense.description,
        amount=expense.amount,
        supplier=expense.supplier,
        notes=expense.notes,
        cost_type=cost_type(expense.category).value,
    )


@router.get("", response_model=list[ExpenseResponse])
async def list_expenses(
    db: Annotated[AsyncSession, Depends(get_db)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
    category: str | None = None,
    start_date: Annotated[date | None, Query(alias="startDate")] = None,
    end_date: Annotated[date | None, Query(alias="endDate")] = None,
):
    if not can_view_financials(roles):
        raise HTTPException(status_code=403, detail="Cannot view expenses")
    stmt = select(Expense).where(Expense.farm_id == farm_id)
    if category:
        stmt = stmt.where(Expense.category == category.lower())
    if start_date:
        stmt = stmt.where(Expense.expense_date >= start_date)
    if end_date:
        stmt = stmt.where(Expense.expense_date <= end_date)
    result = await db.execute(stmt.order_by(Expense.expense_date.desc(), Expense.id.desc()))
    return [_to_response(e) for e in result.scalars().all()]


@router.post("", response_model=ExpenseResponse, status_code=201)
async def create_expense(
    data: ExpenseCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_record_transactions(roles):
        raise HTTPException(status_code=403, detail="Cannot record expenses")
    expense = Expense(farm_id=farm_id, user_id=user.id, **data.model_dump())
    db.add(expense)
    await db.flush()
    await db.refresh(expense)
    return _to_response(expense)


@router.delete("/{expense_id}", status_code=204)
async def delete_expense(
    expense_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    farm_id: Annotated[int, Depends(get_current_farm_id)],
    roles: Annotated[list[str], Depends(get_user_roles)],
):
    if not can_delete_transactions(roles):
        raise HTTPException(status_code=403, detail="Cannot delete expenses")
    expense = await db.get(Expense, expense_id)
    if not expense or expense.farm_id != farm_id:
        raise HTTPException(status_code=404, detail="Expense not found")
    await db.delete(expense)
    return None
