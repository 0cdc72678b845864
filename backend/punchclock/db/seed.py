"""
Seed script: creates a demo employee with one active badge.

Usage (inside container):
    python -m punchclock.db.seed
"""

import asyncio

from sqlalchemy import select

from punchclock.db.models import Employee, EmployeeCard
from punchclock.db.session import AsyncSessionLocal

DEMO_CARD_ID = "CARD-0001"


async def create_demo_card(session) -> EmployeeCard:
    result = await session.execute(
        select(EmployeeCard).where(EmployeeCard.card_id == DEMO_CARD_ID)
    )
    card = result.scalar_one_or_none()
    if card:
        print(f"Demo card {DEMO_CARD_ID} already exists, skipping.")
        return card

    employee = Employee(full_name="Demo Employee", email="demo@example.com", is_active=True)
    session.add(employee)
    await session.flush()

    card = EmployeeCard(card_id=DEMO_CARD_ID, employee_id=employee.id, is_active=True)
    session.add(card)
    await session.flush()
    print(f"Created demo employee id={employee.id} with card {DEMO_CARD_ID}")
    return card


async def main():
    async with AsyncSessionLocal() as session:
        async with session.begin():
            await create_demo_card(session)
            print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(main())
