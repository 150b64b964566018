"""
Database initialization and seeding utilities
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import date, timedelta
from typing import List, Tuple
from app.database import AsyncSessionLocal
from app.models import LeaveType, PayPeriod
import logging

logger = logging.getLogger(__name__)

DEFAULT_LEAVE_TYPES = [
    {"name": "Vacation", "color": "#10b981", "is_single_day": False},
    {"name": "Single Day Off", "color": "#f59e0b", "is_single_day": True},
]


def semi_monthly_pay_periods(t4_year: int) -> List[Tuple[int, date, date]]:
    """
    Pay periods for a T4 year, which runs Dec 16 of the prior year to Dec 15.

    Returns:
        24 (period_number, start_date, end_date) tuples
    """
    periods = [(1, date(t4_year - 1, 12, 16), date(t4_year - 1, 12, 31))]
    for month in range(1, 13):
        first = date(t4_year, month, 1)
        periods.append((len(periods) + 1, first, date(t4_year, month, 15)))
        if month == 12:
            break
        next_month = date(t4_year, month + 1, 1)
        periods.append((len(periods) + 1, date(t4_year, month, 16), next_month - timedelta(days=1)))
    return periods


async def create_default_leave_types(db: AsyncSession) -> int:
    """Create the default leave types if missing"""
    created = 0
    for leave_type_data in DEFAULT_LEAVE_TYPES:
        stmt = select(LeaveType).where(LeaveType.name == leave_type_data["name"])
        result = await db.execute(stmt)
        if result.scalar_one_or_none():
            continue
        db.add(LeaveType(**leave_type_data))
        created += 1
    await db.flush()
    return created


async def create_pay_periods(db: AsyncSession, t4_year: int) -> int:
    """Create the pay periods of a T4 year if missing"""
    stmt = select(PayPeriod.period_number).where(PayPeriod.t4_year == t4_year)
    result = await db.execute(stmt)
    existing = set(result.scalars().all())

    created = 0
    for number, start, end in semi_monthly_pay_periods(t4_year):
        if number in existing:
            continue
        db.add(PayPeriod(period_number=number, start_date=start, end_date=end, t4_year=t4_year))
        created += 1
    await db.flush()
    return created


async def initialize_database(t4_year: int | None = None):
    """Initialize database with reference data"""
    logger.info("Initializing database...")
    t4_year = t4_year or date.today().year

    try:
        async with AsyncSessionLocal() as db:
            leave_types = await create_default_leave_types(db)
            pay_periods = await create_pay_periods(db, t4_year)
            await db.commit()

        logger.info(
            f"Database initialization completed: {leave_types} leave types, "
            f"{pay_periods} pay periods for T4 year {t4_year}"
        )

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


if __name__ == "__main__":
    import asyncio
    asyncio.run(initialize_database())
