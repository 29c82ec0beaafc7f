from collections.abc import Callable

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.trip import TripData, TripSnapshot
from app.services.mutations import ItemNotFoundError
from app.services.trip_service import StaleVersionError, apply_mutation


async def mutate_trip(
    db: AsyncSession,
    trip_id: str,
    mutate: Callable[[TripData], TripData],
    version: int | None = None,
) -> TripSnapshot:
    """Run a reducer against the stored trip and map service errors to HTTP."""
    try:
        return await apply_mutation(db, trip_id, mutate, expected_version=version)
    except StaleVersionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
