from collections import defaultdict
from collections.abc import Sequence
from decimal import Decimal

from app.schemas.trip import Expense
from app.services.calculation_service import ZERO, parse_amount


def expense_share(expense: Expense, members: Sequence[str]) -> tuple[Decimal, int]:
    """Per-head share shown next to an expense, and how many heads it's split over."""
    split_count = len(expense.split_with) or len(members)
    return parse_amount(expense.amount) / (split_count or 1), split_count


def get_trip_stats(members: Sequence[str], expenses: Sequence[Expense]) -> dict:
    total = ZERO
    by_category: dict[str, Decimal] = defaultdict(Decimal)
    paid_by_member = {member: ZERO for member in members}
    shares = []

    for expense in expenses:
        amount = parse_amount(expense.amount)
        total += amount
        by_category[expense.category.value] += amount
        if expense.paid_by in paid_by_member:
            paid_by_member[expense.paid_by] += amount

        share, split_count = expense_share(expense, members)
        shares.append({"expense_id": expense.id, "share": share, "split_count": split_count})

    return {
        "total": total,
        "per_person": total / (len(members) or 1),
        "expense_count": len(expenses),
        "by_category": dict(by_category),
        "paid_by_member": paid_by_member,
        "shares": shares,
    }
