"""Seed roles, an admin user and a demo farm with a year of sales and expenses."""
import asyncio
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dateutil.relativedelta import relativedelta
from sqlalchemy import select

from farmledger.auth.jwt import hash_password
from farmledger.database import async_session_maker, init_db
from farmledger.models import BreakEvenAssumptions, Expense, Farm, Sale, User, UserRole
from farmledger.services.auth_service import ensure_roles

ADMIN_EMAIL = "admin@farmledger.local"
OWNER_EMAIL = "owner@farmledger.local"

# (category, description, amount) booked every month
MONTHLY_EXPENSES = [
    ("feed", "Layer mash", Decimal("1800.00")),
    ("medication", "Vitamins and vaccines", Decimal("150.00")),
    ("labor", "Farm hands", Decimal("1200.00")),
    ("utilities", "Electricity and water", Decimal("300.00")),
    ("equipment", "Feeder maintenance", Decimal("100.00")),
]


async def seed():
    await init_db()
    async with async_session_maker() as db:
        roles = await ensure_roles(db)
        await db.commit()

        r = await db.execute(select(User).where(User.email == ADMIN_EMAIL))
        if not r.scalar_one_or_none():
            admin = User(
                email=ADMIN_EMAIL,
                hashed_password=hash_password("admin123"),
                full_name="Admin User",
            )
            db.add(admin)
            await db.flush()
            db.add(UserRole(user_id=admin.id, role_id=roles["admin"].id))
            await db.commit()

        r = await db.execute(select(User).where(User.email == OWNER_EMAIL))
        if r.scalar_one_or_none():
            print("Demo farm already seeded")
            return

        farm = Farm(name="Sunrise Layers", location="Nakuru", description="Demo layer farm")
        db.add(farm)
        await db.flush()
        owner = User(
            email=OWNER_EMAIL,
            hashed_password=hash_password("owner123"),
            full_name="Demo Owner",
            farm_id=farm.id,
        )
        db.add(owner)
        await db.flush()
        db.add(UserRole(user_id=owner.id, role_id=roles["farm_owner"].id))

        first_month = date.today().replace(day=1) - relativedelta(months=11)
        for i in range(12):
            month_start = first_month + relativedelta(months=i)
            crates = 300 + i * 15
            price = Decimal("12.50")
            db.add(Sale(
                farm_id=farm.id,
                user_id=owner.id,
                sale_date=month_start + relativedelta(days=14),
                customer_name="Town market",
                crates_sold=crates,
                price_per_crate=price,
                total_amount=price * crates,
                payment_status="paid",
            ))
            for category, description, amount in MONTHLY_EXPENSES:
                db.add(Expense(
                    farm_id=farm.id,
                    user_id=owner.id,
                    expense_date=month_start + relativedelta(days=4),
                    category=category,
                    description=description,
                    amount=amount,
                ))

        db.add(BreakEvenAssumptions(
            farm_id=farm.id,
            price=Decimal("12.50"),
            unit_variable_cost=Decimal("6.00"),
            fixed_costs_per_month=Decimal("1600.00"),
            growth_rate=Decimal("0.0300"),
            notes="Seeded demo assumptions",
        ))
        await db.commit()
    print(f"Seeded roles, {ADMIN_EMAIL} / admin123 and demo farm owner {OWNER_EMAIL} / owner123")


if __name__ == "__main__":
    asyncio.run(seed())
