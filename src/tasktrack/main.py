"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from tasktrack.config import settings
from tasktrack.container import build_container
from tasktrack.features.auth import router as auth_router
from tasktrack.features.tasks import router as tasks_router
from tasktrack.services import PostHogService
from tasktrack.services.rate_limiter import limiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    # Startup
    if getattr(app.state, "container", None) is None:
        try:
            app.state.container = build_container(settings)
        except Exception as e:
            logger.error(
                f"Failed to initialize app container: {e}",
                exc_info=True,
                extra={"error_type": "container_init_failed"},
            )
            raise

    container = app.state.container
    container.start()
    logger.info(
        "Session synchronizer attached",
        extra={
            "is_authenticated": container.auth_state.is_authenticated,
            "tasks": len(container.task_state.tasks),
        },
    )

    yield

    # Shutdown
    try:
        container.stop()
        PostHogService().shutdown()
        logger.info("Session synchronizer detached")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}", exc_info=True)


app = FastAPI(
    title="Task Tracker API",
    description="Personal task manager backed by Supabase auth and storage",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

origins = settings.cors_origins.split(",")
logger.info(f"Origins : {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(tasks_router, prefix=settings.api_v1_prefix)


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str


@app.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint."""
    return HealthCheckResponse(status="healthy")
