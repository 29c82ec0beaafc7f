import asyncio
import logging
from collections import defaultdict

from app.schemas.trip import TripSnapshot

logger = logging.getLogger(__name__)


class TripBroadcaster:
    """Fan out trip snapshots to websocket subscribers in this process.

    Each subscriber gets a small bounded queue. Only the newest snapshot
    matters to a client, so a slow subscriber loses its oldest pending
    snapshots instead of holding up the writer.
    """

    def __init__(self, max_pending: int = 8):
        self.max_pending = max_pending
        self._subscribers: dict[str, set[asyncio.Queue]] = defaultdict(set)

    def subscribe(self, trip_id: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_pending)
        self._subscribers[trip_id].add(queue)
        logger.info(f"Subscriber joined trip {trip_id} ({len(self._subscribers[trip_id])} connected)")
        return queue

    def unsubscribe(self, trip_id: str, queue: asyncio.Queue) -> None:
        subscribers = self._subscribers.get(trip_id)
        if not subscribers:
            return
        subscribers.discard(queue)
        if not subscribers:
            del self._subscribers[trip_id]
        logger.info(f"Subscriber left trip {trip_id}")

    def subscriber_count(self, trip_id: str) -> int:
        return len(self._subscribers.get(trip_id, ()))

    def publish(self, trip_id: str, snapshot: TripSnapshot) -> int:
        delivered = 0
        for queue in list(self._subscribers.get(trip_id, ())):
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(snapshot)
            delivered += 1
        return delivered


broadcaster = TripBroadcaster()
