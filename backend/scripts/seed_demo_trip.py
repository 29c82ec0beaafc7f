"""Fill a trip with a few members and expenses, then print who pays whom.

Usage: python -m scripts.seed_demo_trip [trip_id]
Run from the backend/ directory.
"""

import asyncio
import sys

from app.core.config import settings
from app.core.database import async_session_factory
from app.schemas.trip import ExpenseCategory
from app.services.mutations import add_expense, register_member, reset_trip_data
from app.services.settlement_service import calculate_settlement
from app.services.trip_service import apply_mutation

MEMBERS = ["Alice", "Bob", "Charlie"]

EXPENSES = [
    {"description": "Airport taxi", "category": ExpenseCategory.transport, "amount": "45.00", "paid_by": "Alice"},
    {"description": "Hostel, 3 nights", "category": ExpenseCategory.lodging, "amount": "210.00", "paid_by": "Bob"},
    {"description": "Street food", "category": ExpenseCategory.food, "amount": "27.60", "paid_by": "Charlie",
     "split_with": ["Alice", "Charlie"]},
]


def build_demo(data):
    data = reset_trip_data(data)
    for name in MEMBERS:
        data = register_member(data, name)
    for expense in EXPENSES:
        data = add_expense(data, **expense)
    return data


async def main(trip_id: str):
    async with async_session_factory() as db:
        snapshot = await apply_mutation(db, trip_id, build_demo)
        print(f"Seeded trip '{trip_id}' at version {snapshot.version}")

        result = calculate_settlement(snapshot.data.members, snapshot.data.expenses)
        for member, balance in result["balances"].items():
            print(f"  {member:<10} {balance:>10.2f}")
        for transfer in result["transfers"]:
            print(f"  {transfer['from_member']} -> {transfer['to_member']}: {transfer['amount']:.2f}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else settings.default_trip_id))
