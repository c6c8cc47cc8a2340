"""
FastAPI app entrypoint.

Appointments, provider schedule and notifications. The cancellation-mail worker
normally runs as its own process (python -m booking.worker); set
WORKER_EMBEDDED=true to run it inside this process instead.
"""
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

# Load .env from the project root before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from booking.api.routes import appointments, notifications, providers, schedule
from booking.config import settings
from booking.core.errors import BookingError, booking_error_handler, request_validation_handler
from booking.scheduler.job_worker import add_worker_jobs

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler = None
    if settings.worker_embedded:
        scheduler = BackgroundScheduler()
        add_worker_jobs(scheduler)
        scheduler.start()
        app.state.scheduler = scheduler
        logger.info("Embedded job worker polling every %ss", settings.worker_poll_interval_seconds)
    logger.info("Booking API ready")
    yield
    if scheduler is not None:
        scheduler.shutdown(wait=False)


app = FastAPI(title="Booking", version="0.1.0", lifespan=lifespan)

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for production frontend
_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
_cors_extra = os.getenv("CORS_ORIGINS", "")
if _cors_extra:
    _cors_origins.extend(o.strip() for o in _cors_extra.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(BookingError, booking_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.include_router(appointments.router, tags=["appointments"])
app.include_router(schedule.router, tags=["schedule"])
app.include_router(notifications.router, tags=["notifications"])
app.include_router(providers.router, tags=["providers"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Booking API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
