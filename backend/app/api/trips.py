import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.common import mutate_trip
from app.core.auth import get_current_member
from app.core.database import get_db
from app.schemas.trip import TripReplace, TripSnapshot
from app.services.mutations import register_member, reset_trip_data
from app.services.realtime import broadcaster
from app.services.trip_service import StaleVersionError, get_trip, replace_trip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trips", tags=["trips"])


@router.get("/{trip_id}", response_model=TripSnapshot)
async def get(
    trip_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await get_trip(db, trip_id)


@router.put("/{trip_id}", response_model=TripSnapshot)
async def replace(
    trip_id: str,
    body: TripReplace,
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await replace_trip(db, trip_id, body.data, expected_version=body.version)
    except StaleVersionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/{trip_id}/members", response_model=TripSnapshot)
async def join(
    trip_id: str,
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    return await mutate_trip(db, trip_id, lambda data: register_member(data, member))


@router.delete("/{trip_id}/reset", response_model=TripSnapshot)
async def reset(
    trip_id: str,
    version: int | None = Query(None),
    member: str = Depends(get_current_member),
    db: AsyncSession = Depends(get_db),
):
    logger.info(f"{member} reset trip {trip_id}")
    return await mutate_trip(db, trip_id, reset_trip_data, version)


async def _forward_snapshots(websocket: WebSocket, queue: asyncio.Queue) -> None:
    while True:
        snapshot = await queue.get()
        await websocket.send_json(snapshot.model_dump(mode="json"))


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    # Clients don't send anything meaningful; just notice when they leave.
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/{trip_id}/ws")
async def stream(
    websocket: WebSocket,
    trip_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Push the current snapshot, then every snapshot written after it."""
    await websocket.accept()
    queue = broadcaster.subscribe(trip_id)
    tasks = set()
    try:
        snapshot = await get_trip(db, trip_id)
        await websocket.send_json(snapshot.model_dump(mode="json"))
        tasks = {
            asyncio.create_task(_forward_snapshots(websocket, queue)),
            asyncio.create_task(_wait_for_disconnect(websocket)),
        }
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.warning(f"Realtime stream for trip {trip_id} ended: {task.exception()!r}")
    finally:
        for task in tasks:
            task.cancel()
        broadcaster.unsubscribe(trip_id, queue)
