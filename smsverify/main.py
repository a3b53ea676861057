"""
smsverify/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Registers API routes (contacts) and exception handlers
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

from smsverify.core.config import settings, validate_settings
from smsverify.core.errors import add_exception_handlers
from smsverify.core.logging import setup_logging, get_logger
from smsverify.db.mongo import connect_to_mongo, close_mongo_connection, check_database_health
from smsverify.db.indexes import create_indexes
from smsverify.services.gateway import get_gateway_client, close_gateway_client
from smsverify.api import contacts

# Initialize logging first
setup_logging()
logger = get_logger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("🚀 Starting smsverify application...")

    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("✅ Configuration validated")

        logger.info("Connecting to MongoDB...")
        connect_to_mongo()
        create_indexes()

        get_gateway_client()

        logger.info("🎉 smsverify application started successfully!")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"SMS gateway mode: {settings.SMS_GATEWAY_MODE}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info("🛑 Shutting down smsverify application...")
    close_gateway_client()
    close_mongo_connection()
    logger.info("👋 smsverify application shut down successfully")


app = FastAPI(
    title="smsverify - Contact SMS Service",
    description="Phone number confirmation and text delivery for contacts",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Gateway calls are blocking; flag anything slow
    if process_time > 5.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


app.include_router(contacts.router, prefix=settings.API_PREFIX, tags=["Contacts"])


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "smsverify API",
        "version": APP_VERSION,
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.
    Checks database connectivity and reports gateway mode.
    """
    db_healthy = check_database_health()
    health_status = {
        "status": "healthy" if db_healthy else "degraded",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": APP_VERSION,
        "checks": {
            "database": "healthy" if db_healthy else "unhealthy",
            "sms_gateway": settings.SMS_GATEWAY_MODE,
        }
    }

    status_code = 200 if db_healthy else 503
    return JSONResponse(content=health_status, status_code=status_code)


@app.get("/ready", tags=["Health"])
def readiness_check():
    """
    Readiness probe - indicates if app is ready to receive traffic.
    """
    if check_database_health():
        return {"status": "ready"}
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "reason": "database_unavailable"}
    )


@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "smsverify.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
