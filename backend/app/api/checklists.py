from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.common import mutate_trip
from app.core.auth import get_current_member
from app.core.database import get_db
from app.schemas.checklist import ChecklistItemCreate, ChecklistItemUpdate
from app.schemas.trip import ChecklistName, TripSnapshot
from app.services.mutations import (
    add_checklist_item,
    remove_checklist_item,
    toggle_checklist_item,
    update_checklist_item,
)

router = APIRouter(prefix="/api/trips/{trip_id}/checklists/{name}/items", tags=["checklists"])


@router.post("", response_model=TripSnapshot, status_code=201)
async def create_item(
    trip_id: str,
    name: ChecklistName,
    body: ChecklistItemCreate,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: add_checklist_item(data, name, body.text), version)


@router.patch("/{item_id}", response_model=TripSnapshot)
async def edit_item(
    trip_id: str,
    name: ChecklistName,
    item_id: int,
    body: ChecklistItemUpdate,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(
        db, trip_id, lambda data: update_checklist_item(data, name, item_id, body.text), version
    )


@router.post("/{item_id}/toggle", response_model=TripSnapshot)
async def toggle_item(
    trip_id: str,
    name: ChecklistName,
    item_id: int,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: toggle_checklist_item(data, name, item_id), version)


@router.delete("/{item_id}", response_model=TripSnapshot)
async def delete_item(
    trip_id: str,
    name: ChecklistName,
    item_id: int,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: remove_checklist_item(data, name, item_id), version)
