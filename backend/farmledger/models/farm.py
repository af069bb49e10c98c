"""Farm (tenant) model."""
from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmledger.database import Base


class Farm(Base):
    """A farm is the tenant boundary: assumptions, sales and expenses all hang off it."""

    __tablename__ = "farms"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    users: Mapped[list["User"]] = relationship("User", back_populates="farm")
    assumptions: Mapped["BreakEvenAssumptions"] = relationship(
        "BreakEvenAssumptions",
        back_populates="farm",
        uselist=False,
        cascade="all, delete-orphan",
    )
