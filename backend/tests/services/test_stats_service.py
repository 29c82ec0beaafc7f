from decimal import Decimal

from app.schemas.trip import Expense, ExpenseCategory
from app.services.stats_service import expense_share, get_trip_stats

MEMBERS = ["Ana", "Bo", "Cleo"]


def test_totals_and_per_person():
    expenses = [
        Expense(id=1, amount="60", paid_by="Ana", category="food"),
        Expense(id=2, amount="30", paid_by="Bo", category="transport", split_with=["Bo", "Cleo"]),
        Expense(id=3, amount="oops", paid_by="Cleo", category="food"),
    ]
    stats = get_trip_stats(MEMBERS, expenses)
    assert stats["total"] == Decimal("90")
    assert stats["per_person"] == Decimal("30")
    assert stats["expense_count"] == 3
    assert stats["by_category"] == {"food": Decimal("60"), "transport": Decimal("30")}
    assert stats["paid_by_member"] == {"Ana": Decimal("60"), "Bo": Decimal("30"), "Cleo": Decimal("0")}


def test_per_expense_shares():
    expenses = [
        Expense(id=1, amount="60", paid_by="Ana"),
        Expense(id=2, amount="30", paid_by="Bo", split_with=["Bo", "Cleo"]),
    ]
    stats = get_trip_stats(MEMBERS, expenses)
    assert stats["shares"] == [
        {"expense_id": 1, "share": Decimal("20"), "split_count": 3},
        {"expense_id": 2, "share": Decimal("15"), "split_count": 2},
    ]


def test_empty_trip_returns_zero_stats():
    stats = get_trip_stats([], [])
    assert stats["total"] == Decimal("0")
    assert stats["per_person"] == Decimal("0")
    assert stats["expense_count"] == 0
    assert stats["by_category"] == {}
    assert stats["paid_by_member"] == {}


def test_share_without_members_divides_by_one():
    share, split_count = expense_share(Expense(id=1, amount=12, paid_by="Ana"), [])
    assert share == Decimal("12")
    assert split_count == 0


def test_unknown_category_counts_as_other():
    expense = Expense(id=1, amount=5, paid_by="Ana", category="comida")
    assert expense.category == ExpenseCategory.other
    assert get_trip_stats(MEMBERS, [expense])["by_category"] == {"other": Decimal("5")}
