import logging
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from typing import Any

from app.schemas.trip import Expense

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
# Anything this large is a typo, and it would overflow cent rounding.
MAX_AMOUNT = Decimal("1e15")


def parse_amount(value: Any) -> Decimal:
    """Read a user-entered amount. Anything that isn't a finite number below MAX_AMOUNT is zero."""
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    if not amount.is_finite() or abs(amount) >= MAX_AMOUNT:
        return ZERO
    return amount


def beneficiaries_of(expense: Expense, members: Sequence[str]) -> list[str]:
    """Explicit split list, or everybody when it's empty."""
    return list(expense.split_with) or list(members)


def calculate_balances(members: Sequence[str], expenses: Sequence[Expense]) -> dict[str, Decimal]:
    """
    Net balance per member from the full expense list.
    Positive = the group owes this member; negative = this member owes the group.
    The payer is credited the whole amount and every beneficiary is debited an
    equal share. Payers or beneficiaries outside `members` are ignored.
    """
    balances = {member: ZERO for member in members}

    for expense in expenses:
        amount = parse_amount(expense.amount)
        beneficiaries = beneficiaries_of(expense, members)
        if not beneficiaries:
            logger.debug(f"Expense {expense.id} has nobody to split with, skipping")
            continue

        share = amount / len(beneficiaries)

        if expense.paid_by in balances:
            balances[expense.paid_by] += amount
        for member in beneficiaries:
            if member in balances:
                balances[member] -= share

    return balances
