from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.common import mutate_trip
from app.core.auth import get_current_member
from app.core.database import get_db
from app.schemas.itinerary import ActivityCreate, ActivityUpdate, DayCreate, DayUpdate
from app.schemas.trip import TripSnapshot
from app.services.mutations import (
    add_activity,
    add_day,
    remove_activity,
    remove_day,
    rename_day,
    update_activity,
)

router = APIRouter(prefix="/api/trips/{trip_id}/days", tags=["itinerary"])


@router.post("", response_model=TripSnapshot, status_code=201)
async def create_day(
    trip_id: str,
    body: DayCreate,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: add_day(data, body.title), version)


@router.patch("/{day_id}", response_model=TripSnapshot)
async def edit_day(
    trip_id: str,
    day_id: int,
    body: DayUpdate,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: rename_day(data, day_id, body.title), version)


@router.delete("/{day_id}", response_model=TripSnapshot)
async def delete_day(
    trip_id: str,
    day_id: int,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: remove_day(data, day_id), version)


@router.post("/{day_id}/activities", response_model=TripSnapshot, status_code=201)
async def create_activity(
    trip_id: str,
    day_id: int,
    body: ActivityCreate,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(
        db, trip_id, lambda data: add_activity(data, day_id, time=body.time, text=body.text), version
    )


@router.patch("/{day_id}/activities/{activity_id}", response_model=TripSnapshot)
async def edit_activity(
    trip_id: str,
    day_id: int,
    activity_id: int,
    body: ActivityUpdate,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(
        db,
        trip_id,
        lambda data: update_activity(data, day_id, activity_id, time=body.time, text=body.text),
        version,
    )


@router.delete("/{day_id}/activities/{activity_id}", response_model=TripSnapshot)
async def delete_activity(
    trip_id: str,
    day_id: int,
    activity_id: int,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: remove_activity(data, day_id, activity_id), version)
