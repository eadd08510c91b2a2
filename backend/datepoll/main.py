"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from datepoll.config import settings
from datepoll.database import Base, SessionLocal, engine
from datepoll.errors import ConflictError, ForbiddenError, NotFoundError, StorageError
from datepoll.services.deadline_sweeper import DeadlineSweeper

# Import routers
from datepoll.routers import events, feeds

# Import all models so Base.metadata knows about them
from datepoll.models.event import Event, CandidateDate           # noqa: F401
from datepoll.models.participant import Participant, Response    # noqa: F401
from datepoll.models.decision_record import DecisionRecord       # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Datepoll",
    description="Scheduling polls: candidate dates, availability votes, automatic decisions",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(feeds.router, prefix="/api/rss", tags=["Feeds"])

sweeper = DeadlineSweeper(
    session_factory=SessionLocal,
    interval_seconds=settings.DEADLINE_SWEEP_INTERVAL_SECONDS,
)


# Domain errors → HTTP
@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ConflictError)
async def _conflict(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(ForbiddenError)
async def _forbidden(request: Request, exc: ForbiddenError):
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def _storage(request: Request, exc: StorageError):
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.on_event("startup")
async def on_startup():
    """Create tables (SQLite dev mode) and start the deadline sweeper."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    if settings.SCHEDULER_ENABLED:
        await sweeper.start()


@app.on_event("shutdown")
async def on_shutdown():
    await sweeper.stop()


@app.get("/api/health")
def health_check():
    return {"status": "ok", "scheduler_running": sweeper.running}
