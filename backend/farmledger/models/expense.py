"""Farm expense records."""
from datetime import date
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from farmledger.database import Base


class ExpenseCategory(str, PyEnum):
    FEED = "feed"
    MEDICATION = "medication"
    LABOR = "labor"
    UTILITIES = "utilities"
    EQUIPMENT = "equipment"
    OTHER = "other"


class Expense(Base):
    """Expense entry; its category decides whether it counts as a variable or fixed cost."""

    __tablename__ = "expenses"
    __table_args__ = (CheckConstraint("amount >= 0", name="chk_expenses_amount"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(ForeignKey("farms.id", ondelete="RESTRICT"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    supplier: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
