"""
FastAPI Main Application for the Tea Farm Operations reference backend.

This module initializes the FastAPI application with all routes, middleware
and exception handlers. Every error response carries ``{"message": ...}``.
"""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from teafarm import __version__
from teafarm.api.endpoints.auth import router as auth_router
from teafarm.api.endpoints.dashboard import router as dashboard_router
from teafarm.api.endpoints.fields import router as fields_router
from teafarm.api.endpoints.harvest_records import router as harvest_records_router
from teafarm.api.endpoints.tasks import router as tasks_router
from teafarm.api.endpoints.weather_observations import router as weather_observations_router
from teafarm.core.config import get_settings
from teafarm.services.repository import IntegrityError, RecordNotFoundError

load_dotenv()

logger = logging.getLogger(__name__)

# Initialize settings
settings = get_settings()

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Tea farm field, task, harvest and weather records",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
for router in (
    auth_router,
    dashboard_router,
    fields_router,
    tasks_router,
    harvest_records_router,
    weather_observations_router,
):
    app.include_router(router, prefix=settings.api_prefix)


@app.get(f"{settings.api_prefix}/health")
async def health_check():
    """Health check endpoint used by scripts/doctor.py."""
    return {"status": "healthy", "service": "teafarm-backend", "version": __version__}


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


def _describe(errors) -> str:
    parts = []
    for err in errors:
        location = ".".join(str(part) for part in err["loc"] if part != "body")
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(parts)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _error(422, _describe(exc.errors()))


@app.exception_handler(ValidationError)
async def record_validation_handler(request: Request, exc: ValidationError):
    """A partial update produced an invalid record."""
    return _error(422, _describe(exc.errors()))


@app.exception_handler(RecordNotFoundError)
async def not_found_handler(request: Request, exc: RecordNotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(IntegrityError)
async def integrity_handler(request: Request, exc: IntegrityError):
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
