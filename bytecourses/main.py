"""
FastAPI main application.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .api import courses_router, proposals_router
from .core.config import settings
from .core.exceptions import ServiceError
from .core.logging import log_error, setup_logging
from .core.monitoring import (
    METRICS_CONTENT_TYPE,
    get_metrics,
    increment_request_count,
    record_request_latency,
)
from .database.connection import create_tables

setup_logging()

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting ByteCourses API...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    # In production the schema is managed by migrations
    if settings.ENVIRONMENT == "development":
        logger.info("Creating database tables...")
        create_tables()

    logger.info("API startup complete")
    yield
    logger.info("Shutting down ByteCourses API...")


app = FastAPI(
    title="ByteCourses API",
    description="Course proposal review and course publishing",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.ENVIRONMENT == "development" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def monitor_requests(request: Request, call_next):
    """Record request count and latency per route template."""
    start_time = time.time()
    method = request.method

    try:
        response = await call_next(request)
    except Exception:
        duration = time.time() - start_time
        increment_request_count(method, request.url.path, "500")
        record_request_latency(method, request.url.path, duration)
        logger.error(f"Request failed: {method} {request.url.path}", exc_info=True)
        raise

    duration = time.time() - start_time
    route = request.scope.get("route")
    path = getattr(route, "path", request.url.path)

    increment_request_count(method, path, str(response.status_code))
    record_request_latency(method, path, duration)

    if duration > 5.0:
        logger.warning(
            f"Slow request: {method} {path}",
            extra={"method": method, "path": path, "duration": duration, "status_code": response.status_code},
        )

    return response


# Exception handlers
@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    """Map service-layer errors onto their HTTP status."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": exc.error_code,
            **exc.payload,
            "timestamp": _timestamp(),
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "error_code": "VALIDATION_ERROR",
            "errors": [
                {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
                for error in exc.errors()
            ],
            "timestamp": _timestamp(),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle database errors."""
    log_error(exc, context={"path": request.url.path}, error_code="DATABASE_ERROR")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Database error occurred",
            "error_code": "DATABASE_ERROR",
            "timestamp": _timestamp(),
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    log_error(exc, context={"path": request.url.path}, error_code="INTERNAL_ERROR")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "error_code": "INTERNAL_ERROR",
            "timestamp": _timestamp(),
        },
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "timestamp": _timestamp(),
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=get_metrics(), media_type=METRICS_CONTENT_TYPE)


app.include_router(proposals_router, prefix=settings.API_PREFIX)
app.include_router(courses_router, prefix=settings.API_PREFIX)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bytecourses.main:app",
        host="0.0.0.0",
        port=settings.BACKEND_PORT,
        reload=settings.DEBUG,
    )
