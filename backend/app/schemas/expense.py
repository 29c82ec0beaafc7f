from decimal import Decimal

from pydantic import BaseModel, Field

from app.schemas.trip import ExpenseCategory


class ExpenseCreate(BaseModel):
    description: str = ""
    category: ExpenseCategory = ExpenseCategory.other
    amount: Decimal | str | None = Field(default=Decimal("0"), union_mode="left_to_right")
    paid_by: str | None = None
    split_with: list[str] | None = None


class ExpenseUpdate(BaseModel):
    description: str | None = None
    category: ExpenseCategory | None = None
    amount: Decimal | str | None = Field(default=None, union_mode="left_to_right")
    paid_by: str | None = None
    split_with: list[str] | None = None


class MemberBalance(BaseModel):
    member: str
    balance: Decimal


class TransferEntry(BaseModel):
    from_member: str
    to_member: str
    amount: Decimal


class SettlementResponse(BaseModel):
    balances: list[MemberBalance]
    transfers: list[TransferEntry]


class ExpenseShare(BaseModel):
    expense_id: int
    share: Decimal
    split_count: int


class StatsResponse(BaseModel):
    total: Decimal
    per_person: Decimal
    expense_count: int
    by_category: dict[str, Decimal]
    paid_by_member: dict[str, Decimal]
    shares: list[ExpenseShare] = []
