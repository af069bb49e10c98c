"""Sales and expense record schemas."""
from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import Field, model_validator

from farmledger.schemas.base import CamelModel


class SaleCreate(CamelModel):
    sale_date: date
    crates_sold: int = Field(..., ge=0)
    price_per_crate: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    total_amount: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    customer_name: str | None = Field(None, max_length=255)
    payment_status: Literal["pending", "paid", "overdue"] = "pending"
    notes: str | None = None

    @model_validator(mode="after")
    def default_total(self) -> "SaleCreate":
        if self.total_amount is None:
            self.total_amount = self.price_per_crate * self.crates_sold
        # Numeric(12, 2): at most 10 integer digits
        if self.total_amount >= Decimal("1e10"):
            raise ValueError("totalAmount exceeds 9999999999.99")
        return self


class SaleResponse(CamelModel):
    id: int
    sale_date: date
    crates_sold: int
    price_per_crate: Decimal
    total_amount: Decimal
    customer_name: str | None
    payment_status: str
    notes: str | None


class ExpenseCreate(CamelModel):
    expense_date: date
    category: Literal["feed", "medication", "labor", "utilities", "equipment", "other"]
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    supplier: str | None = Field(None, max_length=255)
    notes: str | None = None


class ExpenseResponse(CamelModel):
    id: int
    expense_date: date
    category: str
    description: str
    amount: Decimal
    supplier: str | None
    notes: str | None
    cost_type: str
