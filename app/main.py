"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis import Redis, RedisError

from app.api.middleware import RateLimitMiddleware
from app.api.v1.router import api_router
from app.core.clock import utc_now
from app.core.config import Settings, settings as default_settings
from app.core.errors import AppError, InfrastructureError
from app.core.logging_setup import setup_logging
from app.db.redis import create_redis_client
from app.db.repositories import TaskRepository
from app.services.cleanup_scheduler import TaskCleanupScheduler
from app.services.task_service import TaskService

logger = logging.getLogger(__name__)


def create_app(redis_client: Optional[Redis] = None, settings: Settings = default_settings) -> FastAPI:
    """
    Build the application.

    Args:
        redis_client: Store client to use. When omitted, one is created from
            settings at startup and closed at shutdown.
        settings: Application settings
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_client = app.state.redis is None
        if owns_client:
            app.state.redis = create_redis_client(settings)

        scheduler = None
        if settings.CLEANUP_INTERVAL_SECONDS > 0:
            scheduler = TaskCleanupScheduler(lambda: TaskService(TaskRepository(app.state.redis)),
                                             interval_seconds=settings.CLEANUP_INTERVAL_SECONDS)
            scheduler.start()

        yield

        if scheduler is not None:
            await scheduler.stop()
        if owns_client:
            app.state.redis.close()
            app.state.redis = None

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Task tracking with categories and soft-delete recovery.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan)
    app.state.redis = redis_client
    app.state.settings = settings

    if settings.ENABLE_CORS:
        app.add_middleware(CORSMiddleware, allow_origins=settings.allowed_origins, allow_credentials=True,
                           allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"], allow_headers=["*"], )
    if settings.RATE_LIMIT > 0:
        app.add_middleware(RateLimitMiddleware, limit=settings.RATE_LIMIT)

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "message": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT
        }

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint for monitoring."""
        try:
            request.app.state.redis.ping()
        except RedisError:
            logger.warning("Health check failed: store unreachable")
            return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                                content={ "status": "unhealthy", "error": "store connection failed", "code": "1004" })
        return {
            "status": "healthy",
            "timestamp": utc_now().isoformat(),
            "version": settings.VERSION
        }

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as ``{"error", "code", "details"?}``."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [{ "loc": list(err.get("loc", ())), "msg": err.get("msg", "") } for err in exc.errors()]
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST,
                            content={ "error": "invalid request body", "code": "4006", "details": { "errors": errors } })

    @app.exception_handler(RedisError)
    async def store_error_handler(request: Request, exc: RedisError):
        logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
        error = InfrastructureError("2006", "storage unavailable")
        return JSONResponse(status_code=error.status_code, content=error.to_body())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            content={ "error": "internal server error", "code": "1000" })


setup_logging(default_settings.LOG_LEVEL)

app = create_app()
