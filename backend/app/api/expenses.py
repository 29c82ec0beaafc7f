from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.common import mutate_trip
from app.core.auth import get_current_member
from app.core.database import get_db
from app.schemas.expense import ExpenseCreate, ExpenseUpdate, SettlementResponse, StatsResponse
from app.schemas.trip import TripSnapshot
from app.services.mutations import add_expense, remove_expense, toggle_beneficiary, update_expense
from app.services.settlement_service import calculate_settlement
from app.services.stats_service import get_trip_stats
from app.services.trip_service import get_trip

router = APIRouter(prefix="/api/trips/{trip_id}", tags=["expenses"])

CENT = Decimal("0.01")


def _cents(value: Decimal) -> Decimal:
    value = value.quantize(CENT)
    # Residue like -1E-26 would otherwise render as "-0.00".
    return value.copy_abs() if value.is_zero() else value


@router.post("/expenses", response_model=TripSnapshot, status_code=201)
async def create_expense(
    trip_id: str,
    body: ExpenseCreate,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(
        db,
        trip_id,
        lambda data: add_expense(
            data,
            paid_by=body.paid_by or member,
            description=body.description,
            category=body.category,
            amount=body.amount,
            split_with=body.split_with,
        ),
        version,
    )


@router.patch("/expenses/{expense_id}", response_model=TripSnapshot)
async def edit_expense(
    trip_id: str,
    expense_id: int,
    body: ExpenseUpdate,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    changes = body.model_dump(exclude_unset=True)
    return await mutate_trip(db, trip_id, lambda data: update_expense(data, expense_id, **changes), version)


@router.post("/expenses/{expense_id}/beneficiaries/{beneficiary}", response_model=TripSnapshot)
async def toggle_expense_beneficiary(
    trip_id: str,
    expense_id: int,
    beneficiary: str,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(
        db, trip_id, lambda data: toggle_beneficiary(data, expense_id, beneficiary), version
    )


@router.delete("/expenses/{expense_id}", response_model=TripSnapshot)
async def delete_expense(
    trip_id: str,
    expense_id: int,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: remove_expense(data, expense_id), version)


@router.get("/settlement", response_model=SettlementResponse)
async def get_settlement(
    trip_id: str,
    db: AsyncSession = Depends(get_db),
):
    snapshot = await get_trip(db, trip_id)
    result = calculate_settlement(snapshot.data.members, snapshot.data.expenses)
    return SettlementResponse(
        balances=[
            {"member": member, "balance": _cents(balance)}
            for member, balance in result["balances"].items()
        ],
        transfers=[
            {**transfer, "amount": _cents(transfer["amount"])}
            for transfer in result["transfers"]
        ],
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    trip_id: str,
    db: AsyncSession = Depends(get_db),
):
    snapshot = await get_trip(db, trip_id)
    stats = get_trip_stats(snapshot.data.members, snapshot.data.expenses)
    return StatsResponse(
        total=_cents(stats["total"]),
        per_person=_cents(stats["per_person"]),
        expense_count=stats["expense_count"],
        by_category={k: _cents(v) for k, v in stats["by_category"].items()},
        paid_by_member={k: _cents(v) for k, v in stats["paid_by_member"].items()},
        shares=[{**s, "share": _cents(s["share"])} for s in stats["shares"]],
    )
