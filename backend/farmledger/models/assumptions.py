"""Break-even assumptions - one active set per farm."""
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Numeric, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmledger.database import Base


class BreakEvenAssumptions(Base):
    """Pricing and cost assumptions feeding the projection engine. Replaced on PUT, never deleted."""

    __tablename__ = "break_even_assumptions"
    __table_args__ = (
        CheckConstraint(
            "price > 0 and unit_variable_cost >= 0 and fixed_costs_per_month >= 0 "
            "and growth_rate >= -1 and growth_rate <= 10",
            name="chk_break_even_ranges",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        ForeignKey("farms.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    unit_variable_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    fixed_costs_per_month: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    growth_rate: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False, default=Decimal(0))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    farm: Mapped["Farm"] = relationship("Farm", back_populates="assumptions")
