# disaster_response/main.py
# ------------------------------------------------------------
# FastAPI entrypoint for the disaster response backend.
#
# Responsibilities:
# - App initialization & middleware
# - Domain error -> HTTP status mapping
# - Route registration
# - Startup bootstrapping and the sensor simulation loop
# ------------------------------------------------------------

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import asyncio

from .config import settings
from .exceptions import (
    InvalidReadingError,
    InvalidThresholdsError,
    NotFoundError,
    StateConflictError,
)
from .logger import get_logger
from .redis_client import get_redis
from .routes import sensors, alerts, reports, teams, stream, health
from .simulator import bootstrap_sensors, run_simulation

logger = get_logger(__name__)


# ------------------------------------------------------------
# FastAPI application instance
# ------------------------------------------------------------
app = FastAPI(
    title="Disaster Response API",
    version="0.1.0",
    description="Sensor alerting, response teams and citizen report triage backend",
)


# ------------------------------------------------------------
# CORS configuration
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------
# Error handling
# ------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # the rejected input is left out: NaN / Infinity cannot be rendered as JSON
    errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"ok": False, "error": str(exc)})


@app.exception_handler(StateConflictError)
async def state_conflict_handler(request: Request, exc: StateConflictError):
    return JSONResponse(status_code=400, content={"ok": False, "error": str(exc)})


@app.exception_handler(InvalidThresholdsError)
@app.exception_handler(InvalidReadingError)
async def contract_violation_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=422, content={"ok": False, "error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_exception", method=request.method, path=str(request.url))
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": str(exc), "path": str(request.url)},
    )


# ------------------------------------------------------------
# API routes
# ------------------------------------------------------------
app.include_router(sensors.router)
app.include_router(alerts.router)
app.include_router(reports.router)
app.include_router(teams.router)
app.include_router(stream.router)
app.include_router(health.router)


# ------------------------------------------------------------
# Application startup hook
# ------------------------------------------------------------
@app.on_event("startup")
async def startup():
    """
    On startup, if simulation is enabled:
    1. Provision the default sensors (only once).
    2. Start the background simulation loop.
    """
    if not settings.generators_enabled:
        # devices push readings through POST /api/sensors/{id}/readings
        return

    r = get_redis()
    bootstrap_sensors(r)

    # Fire-and-forget background task
    app.state.simulation_task = asyncio.create_task(
        run_simulation(r, max(1, settings.sensor_rate_sec))
    )
