"""
Pure reducers over the trip document.

Every function takes the current TripData and returns a new one; the input is
never modified, so a snapshot that was handed to a client or a subscriber stays
valid. Unknown ids raise ItemNotFoundError.
"""
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from app.schemas.trip import (
    Activity,
    ChecklistItem,
    ChecklistName,
    Day,
    Expense,
    ExpenseCategory,
    Idea,
    IdeaKind,
    TripData,
)
from app.services.calculation_service import parse_amount


class ItemNotFoundError(ValueError):
    pass


def default_trip_data() -> TripData:
    return TripData(
        members=[],
        days=[
            Day(id=1, title="Arrival", activities=[
                Activity(id=1, time="10:00", text="Land at the airport"),
                Activity(id=2, time="15:00", text="Check in"),
                Activity(id=3, time="20:00", text="Welcome dinner"),
            ]),
        ],
        packing=[
            ChecklistItem(id=1, text="Passport / ID"),
            ChecklistItem(id=2, text="Credit card"),
            ChecklistItem(id=3, text="Phone charger"),
            ChecklistItem(id=4, text="Plug adapter"),
            ChecklistItem(id=5, text="Sunscreen"),
        ],
        pre_trip=[
            ChecklistItem(id=1, text="Book accommodation"),
            ChecklistItem(id=2, text="Buy travel insurance"),
            ChecklistItem(id=3, text="Exchange currency"),
            ChecklistItem(id=4, text="Check visa requirements"),
        ],
    )


def reset_trip_data(data: TripData) -> TripData:
    fresh = default_trip_data()
    fresh.members = list(data.members)
    return fresh


def _next_id(items: Sequence) -> int:
    return max((item.id for item in items), default=0) + 1


def _find(items: Sequence, item_id: int, label: str):
    for item in items:
        if item.id == item_id:
            return item
    raise ItemNotFoundError(f"{label} {item_id} not found")


def _remove(items: list, item_id: int, label: str) -> None:
    items.remove(_find(items, item_id, label))


def _copy(data: TripData) -> TripData:
    return data.model_copy(deep=True)


# -- members ---------------------------------------------------------------

def register_member(data: TripData, name: str) -> TripData:
    name = name.strip()
    if not name:
        raise ValueError("Member name must not be empty")
    if name in data.members:
        return data
    data = _copy(data)
    data.members.append(name)
    return data


# -- itinerary -------------------------------------------------------------

def add_day(data: TripData, title: str = "New day") -> TripData:
    data = _copy(data)
    data.days.append(Day(
        id=_next_id(data.days),
        title=title,
        activities=[Activity(id=1, time="10:00", text="")],
    ))
    return data


def rename_day(data: TripData, day_id: int, title: str) -> TripData:
    data = _copy(data)
    _find(data.days, day_id, "Day").title = title
    return data


def remove_day(data: TripData, day_id: int) -> TripData:
    data = _copy(data)
    _remove(data.days, day_id, "Day")
    return data


def add_activity(data: TripData, day_id: int, time: str = "12:00", text: str = "") -> TripData:
    data = _copy(data)
    day = _find(data.days, day_id, "Day")
    day.activities.append(Activity(id=_next_id(day.activities), time=time, text=text))
    return data


def update_activity(
    data: TripData,
    day_id: int,
    activity_id: int,
    time: str | None = None,
    text: str | None = None,
) -> TripData:
    data = _copy(data)
    activity = _find(_find(data.days, day_id, "Day").activities, activity_id, "Activity")
    if time is not None:
        activity.time = time
    if text is not None:
        activity.text = text
    return data


def remove_activity(data: TripData, day_id: int, activity_id: int) -> TripData:
    data = _copy(data)
    _remove(_find(data.days, day_id, "Day").activities, activity_id, "Activity")
    return data


# -- ideas -----------------------------------------------------------------

def add_idea(data: TripData, kind: IdeaKind, author: str, text: str = "") -> TripData:
    data = _copy(data)
    data.ideas.append(Idea(id=_next_id(data.ideas), kind=kind, text=text, author=author))
    return data


def update_idea_text(data: TripData, idea_id: int, text: str) -> TripData:
    data = _copy(data)
    _find(data.ideas, idea_id, "Idea").text = text
    return data


def vote_idea(data: TripData, idea_id: int, member: str) -> TripData:
    """One vote per member; voting again changes nothing."""
    idea = _find(data.ideas, idea_id, "Idea")
    if member in idea.voters:
        return data
    data = _copy(data)
    _find(data.ideas, idea_id, "Idea").voters.append(member)
    return data


def remove_idea(data: TripData, idea_id: int) -> TripData:
    data = _copy(data)
    _remove(data.ideas, idea_id, "Idea")
    return data


# -- expenses --------------------------------------------------------------

def add_expense(
    data: TripData,
    paid_by: str | None,
    description: str = "",
    category: ExpenseCategory = ExpenseCategory.other,
    amount: Any = Decimal("0"),
    split_with: list[str] | None = None,
) -> TripData:
    data = _copy(data)
    data.expenses.append(Expense(
        id=_next_id(data.expenses),
        description=description,
        category=category,
        amount=parse_amount(amount),
        paid_by=paid_by,
        split_with=list(data.members) if split_with is None else list(split_with),
    ))
    return data


def update_expense(data: TripData, expense_id: int, **changes) -> TripData:
    """
    Apply the given field changes; an edited amount is stored already coerced.
    A null description or category leaves the field as it was.
    """
    data = _copy(data)
    expense = _find(data.expenses, expense_id, "Expense")
    for field, value in changes.items():
        if field not in Expense.model_fields or field == "id":
            raise ValueError(f"Unknown expense field: {field}")
        if value is None and field in ("description", "category"):
            continue
        if field == "amount":
            value = parse_amount(value)
        elif field == "split_with":
            value = list(value or [])
        setattr(expense, field, value)
    return data


def toggle_beneficiary(data: TripData, expense_id: int, member: str) -> TripData:
    data = _copy(data)
    expense = _find(data.expenses, expense_id, "Expense")
    if member in expense.split_with:
        expense.split_with.remove(member)
    else:
        expense.split_with.append(member)
    return data


def remove_expense(data: TripData, expense_id: int) -> TripData:
    data = _copy(data)
    _remove(data.expenses, expense_id, "Expense")
    return data


# -- checklists ------------------------------------------------------------

def add_checklist_item(data: TripData, name: ChecklistName, text: str = "") -> TripData:
    data = _copy(data)
    items = data.checklist(name)
    items.append(ChecklistItem(id=_next_id(items), text=text))
    return data


def update_checklist_item(data: TripData, name: ChecklistName, item_id: int, text: str) -> TripData:
    data = _copy(data)
    _find(data.checklist(name), item_id, "Checklist item").text = text
    return data


def toggle_checklist_item(data: TripData, name: ChecklistName, item_id: int) -> TripData:
    data = _copy(data)
    item = _find(data.checklist(name), item_id, "Checklist item")
    item.done = not item.done
    return data


def remove_checklist_item(data: TripData, name: ChecklistName, item_id: int) -> TripData:
    data = _copy(data)
    _remove(data.checklist(name), item_id, "Checklist item")
    return data
