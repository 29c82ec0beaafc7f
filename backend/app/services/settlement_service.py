from collections.abc import Sequence
from decimal import Decimal

from app.schemas.trip import Expense
from app.services.calculation_service import calculate_balances

# Balances within a cent of zero count as settled.
SETTLED_TOLERANCE = Decimal("0.01")


def settle_balances(balances: dict[str, Decimal]) -> list[dict]:
    """
    Turn net balances into transfers that zero everybody out.
    Greedy: the largest debtor pays the largest creditor, then move on to the
    next one as soon as either side is settled. Equal amounts keep the order
    of `balances`.
    """
    creditors = [[member, amount] for member, amount in balances.items() if amount > SETTLED_TOLERANCE]
    debtors = [[member, -amount] for member, amount in balances.items() if amount < -SETTLED_TOLERANCE]

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    transfers = []
    i, j = 0, 0
    while i < len(creditors) and j < len(debtors):
        creditor, credit_amount = creditors[i]
        debtor, debt_amount = debtors[j]
        amount = min(credit_amount, debt_amount)
        if amount > SETTLED_TOLERANCE:
            transfers.append({
                "from_member": debtor,
                "to_member": creditor,
                "amount": amount,
            })
        creditors[i][1] -= amount
        debtors[j][1] -= amount
        if creditors[i][1] < SETTLED_TOLERANCE:
            i += 1
        if debtors[j][1] < SETTLED_TOLERANCE:
            j += 1

    return transfers


def calculate_settlement(members: Sequence[str], expenses: Sequence[Expense]) -> dict:
    balances = calculate_balances(members, expenses)
    return {
        "balances": balances,
        "transfers": settle_balances(balances),
    }
