import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from app.core.config import settings
from app.api.trips import router as trips_router
from app.api.itinerary import router as itinerary_router
from app.api.ideas import router as ideas_router
from app.api.expenses import router as expenses_router
from app.api.checklists import router as checklists_router
from app.schemas.trip import TripInfo

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Tripboard API", version="0.1.0")

cors_origins = settings.cors_origins.split(",")


class TimingMiddleware:
    """Lightweight ASGI middleware — no BaseHTTPMiddleware overhead."""
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        t0 = time.perf_counter()
        status_code = 0

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        await self.app(scope, receive, send_wrapper)
        ms = int((time.perf_counter() - t0) * 1000)
        method = scope.get("method", "?")
        path = scope.get("path", "?")
        qs = scope.get("query_string", b"").decode()
        qs_str = f"?{qs}" if qs else ""
        logger.info(f"{method} {path}{qs_str} -> {status_code} in {ms}ms")


app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(trips_router)
app.include_router(itinerary_router)
app.include_router(ideas_router)
app.include_router(expenses_router)
app.include_router(checklists_router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.get("/api/trip", response_model=TripInfo)
async def trip_info():
    return TripInfo(
        trip_id=settings.default_trip_id,
        trip_name=settings.trip_name,
        destination=settings.destination,
        dates=settings.dates,
        group_name=settings.group_name,
    )
