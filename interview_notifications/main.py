"""
FastAPI application: notification triggers, interview data access, health.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from interview_notifications.config import settings
from interview_notifications.errors import ConfigurationError
from interview_notifications.infrastructure.observability.logging import get_logger, setup_logging
from interview_notifications.routes import health, interviews, notifications
from interview_notifications.services.infrastructure.store_client import close_store_client
from interview_notifications.services.notifications.reminder_service import close_reminder_engine

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration gaps on startup and release HTTP clients on shutdown."""

    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    missing_email = settings.missing_email_settings()
    if missing_email:
        logger.warning("Email transport not fully configured", missing=missing_email)
    if not settings.INTERVIEW_STORE_URL:
        logger.warning("INTERVIEW_STORE_URL not set, reminder scans will fail")

    yield

    logger.info("Application shutting down")

    shutdown_errors = []

    try:
        await close_reminder_engine()
    except Exception as e:
        logger.error("Error closing email transport", error=str(e))
        shutdown_errors.append(f"Transport: {e}")

    try:
        await close_store_client()
    except Exception as e:
        logger.error("Error closing store client", error=str(e))
        shutdown_errors.append(f"Store: {e}")

    if shutdown_errors:
        logger.warning("Some services had shutdown errors", errors=shutdown_errors)
    else:
        logger.info("All services closed successfully")


app = FastAPI(
    title="Interview Notifications",
    description="Interview records plus scheduling and reminder emails",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(notifications.router)
app.include_router(interviews.router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Missing configuration", path=request.url.path, missing=exc.missing)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "missing_env", "details": exc.missing},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    logger.info(
        "HTTP request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(process_time, 2),
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
