import logging
from collections.abc import Callable
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.trip import TripDocument
from app.schemas.trip import TripData, TripSnapshot
from app.services.mutations import default_trip_data
from app.services.realtime import broadcaster

logger = logging.getLogger(__name__)

MAX_MUTATION_ATTEMPTS = 3


class StaleVersionError(ValueError):
    def __init__(self, trip_id: str, expected_version: int, message: str | None = None):
        self.trip_id = trip_id
        self.expected_version = expected_version
        super().__init__(
            message or f"Trip {trip_id} has changed since version {expected_version}"
        )


def _to_snapshot(doc: TripDocument) -> TripSnapshot:
    return TripSnapshot(
        trip_id=doc.id,
        version=doc.version,
        updated_at=doc.updated_at,
        data=TripData.model_validate(doc.data or {}),
    )


async def get_trip(db: AsyncSession, trip_id: str) -> TripSnapshot:
    """Current snapshot of a trip; the first read writes the default document."""
    doc = await db.get(TripDocument, trip_id, populate_existing=True)
    if doc is not None:
        return _to_snapshot(doc)

    doc = TripDocument(
        id=trip_id,
        data=default_trip_data().model_dump(mode="json"),
        version=1,
        updated_at=datetime.now(timezone.utc),
    )
    db.add(doc)
    try:
        await db.commit()
    except IntegrityError:
        # Another client seeded it first.
        await db.rollback()
        doc = await db.get(TripDocument, trip_id, populate_existing=True)
        if doc is None:
            raise
        return _to_snapshot(doc)

    logger.info(f"Seeded default document for trip {trip_id}")
    return _to_snapshot(doc)


async def save_trip(
    db: AsyncSession,
    trip_id: str,
    data: TripData,
    expected_version: int | None = None,
) -> TripSnapshot:
    """
    Overwrite the whole trip document and bump its version.
    With expected_version the write only lands if nobody else wrote in between.
    """
    now = datetime.now(timezone.utc)
    stmt = update(TripDocument).where(TripDocument.id == trip_id)
    if expected_version is not None:
        stmt = stmt.where(TripDocument.version == expected_version)
    stmt = (
        stmt.values(
            data=data.model_dump(mode="json"),
            version=TripDocument.version + 1,
            updated_at=now,
        )
        .returning(TripDocument.version)
        .execution_options(synchronize_session=False)
    )

    result = await db.execute(stmt)
    new_version = result.scalar_one_or_none()
    if new_version is None:
        await db.rollback()
        logger.warning(f"Rejected write to trip {trip_id}: expected version {expected_version}")
        raise StaleVersionError(trip_id, expected_version)
    await db.commit()

    snapshot = TripSnapshot(trip_id=trip_id, version=new_version, updated_at=now, data=data)
    delivered = broadcaster.publish(trip_id, snapshot)
    logger.info(f"Saved trip {trip_id} at version {new_version}, pushed to {delivered} subscribers")
    return snapshot


async def replace_trip(
    db: AsyncSession,
    trip_id: str,
    data: TripData,
    expected_version: int | None = None,
) -> TripSnapshot:
    await get_trip(db, trip_id)
    return await save_trip(db, trip_id, data, expected_version=expected_version)


async def apply_mutation(
    db: AsyncSession,
    trip_id: str,
    mutate: Callable[[TripData], TripData],
    expected_version: int | None = None,
) -> TripSnapshot:
    """
    Read-modify-write a trip through a pure reducer.

    The write is conditioned on the version that was read. A client that sent
    expected_version gets StaleVersionError if it is out of date; otherwise a
    lost race is retried against the fresh document.
    """
    for attempt in range(1, MAX_MUTATION_ATTEMPTS + 1):
        current = await get_trip(db, trip_id)
        if expected_version is not None and expected_version != current.version:
            raise StaleVersionError(trip_id, expected_version)

        data = mutate(current.data)
        if data is current.data:
            return current

        try:
            return await save_trip(db, trip_id, data, expected_version=current.version)
        except StaleVersionError:
            if expected_version is not None or attempt == MAX_MUTATION_ATTEMPTS:
                raise
            logger.info(f"Retrying write to trip {trip_id} (attempt {attempt + 1})")

    raise StaleVersionError(trip_id, expected_version or 0)
