import enum
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator


class ExpenseCategory(str, enum.Enum):
    food = "food"
    transport = "transport"
    lodging = "lodging"
    leisure = "leisure"
    other = "other"


class IdeaKind(str, enum.Enum):
    idea = "idea"
    restaurant = "restaurant"
    place = "place"
    plan = "plan"
    lodging = "lodging"


class ChecklistName(str, enum.Enum):
    packing = "packing"
    pre_trip = "pre_trip"


class Activity(BaseModel):
    id: int
    time: str = "12:00"
    text: str = ""


class Day(BaseModel):
    id: int
    title: str = ""
    activities: list[Activity] = []


class Idea(BaseModel):
    id: int
    kind: IdeaKind = IdeaKind.idea
    text: str = ""
    author: str | None = None
    voters: list[str] = []

    @computed_field
    @property
    def votes(self) -> int:
        return len(self.voters)

    @field_validator("kind", mode="before")
    @classmethod
    def _unknown_kind_is_idea(cls, value: Any) -> Any:
        try:
            return IdeaKind(value)
        except ValueError:
            return IdeaKind.idea


class Expense(BaseModel):
    id: int
    description: str = ""
    category: ExpenseCategory = ExpenseCategory.other
    # Whatever the traveler typed; coerced to a number only when used.
    amount: Decimal | str | None = Field(default=Decimal("0"), union_mode="left_to_right")
    paid_by: str | None = None
    split_with: list[str] = []

    @field_validator("category", mode="before")
    @classmethod
    def _unknown_category_is_other(cls, value: Any) -> Any:
        try:
            return ExpenseCategory(value)
        except ValueError:
            return ExpenseCategory.other


class ChecklistItem(BaseModel):
    id: int
    text: str = ""
    done: bool = False


class TripData(BaseModel):
    """The whole shared trip document.

    Any collection may be missing or null in storage; it reads as empty.
    """

    members: list[str] = []
    days: list[Day] = []
    ideas: list[Idea] = []
    expenses: list[Expense] = []
    packing: list[ChecklistItem] = []
    pre_trip: list[ChecklistItem] = []

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: v for k, v in value.items() if v is not None}
        return value

    def checklist(self, name: ChecklistName) -> list[ChecklistItem]:
        return self.packing if name == ChecklistName.packing else self.pre_trip


class TripSnapshot(BaseModel):
    trip_id: str
    version: int
    updated_at: datetime | None = None
    data: TripData


class TripReplace(BaseModel):
    version: int | None = None
    data: TripData


class TripInfo(BaseModel):
    trip_id: str
    trip_name: str
    destination: str
    dates: str
    group_name: str
