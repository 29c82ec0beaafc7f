from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.common import mutate_trip
from app.core.auth import get_current_member
from app.core.database import get_db
from app.schemas.idea import IdeaCreate, IdeaUpdate
from app.schemas.trip import TripSnapshot
from app.services.mutations import add_idea, remove_idea, update_idea_text, vote_idea

router = APIRouter(prefix="/api/trips/{trip_id}/ideas", tags=["ideas"])


@router.post("", response_model=TripSnapshot, status_code=201)
async def create_idea(
    trip_id: str,
    body: IdeaCreate,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(
        db, trip_id, lambda data: add_idea(data, body.kind, author=member, text=body.text), version
    )


@router.patch("/{idea_id}", response_model=TripSnapshot)
async def edit_idea(
    trip_id: str,
    idea_id: int,
    body: IdeaUpdate,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: update_idea_text(data, idea_id, body.text), version)


@router.post("/{idea_id}/vote", response_model=TripSnapshot)
async def vote(
    trip_id: str,
    idea_id: int,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: vote_idea(data, idea_id, member), version)


@router.delete("/{idea_id}", response_model=TripSnapshot)
async def delete_idea(
    trip_id: str,
    idea_id: int,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: remove_idea(data, idea_id), version)
