"""
StorageHub Analytics API - Main Application
FastAPI application with CORS, error handling, middleware, and logging
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
import logging
from datetime import datetime, timezone
import traceback


from storagehub.api.routes import (
    units_router,
    customers_router,
    metrics_router,
    forecast_router,
    alerts_router,
    reports_router,
)
from storagehub.core.config import settings, get_cors_origins, is_development, is_testing
from storagehub.database import SessionLocal, test_connection, init_db, close_db_connection
from storagehub.services.mock_data import seed_database


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


# ==================== STARTUP & SHUTDOWN ====================


def seed_mock_data() -> None:
    """Fill an empty database with the reproducible demo facility."""
    db = SessionLocal()
    try:
        if seed_database(db, seed=settings.MOCK_DATA_SEED):
            logger.info("[OK] Mock data seeded")
    except Exception as seed_error:
        logger.warning(f"[WARN] Mock data seeding failed: {seed_error}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run on application startup and shutdown"""
    logger.info("="*70)
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
    logger.info("="*70)
    logger.info(f"Environment: {'Development' if is_development() else 'Production'}")

    # Database problems leave the API running in degraded mode
    logger.info("Testing database connection...")
    if test_connection():
        logger.info("[OK] Database connection successful!")
    else:
        logger.warning("[WARN] Database connection failed - continuing in degraded mode")

    logger.info("Initializing database tables...")
    if init_db():
        logger.info("[OK] Database initialization complete!")
        if settings.SEED_MOCK_DATA and not is_testing():
            seed_mock_data()
    else:
        logger.warning("[WARN] Database init returned False - tables may not exist")

    logger.info("[OK] Application startup complete!")
    yield

    logger.info("Shutting down application...")
    close_db_connection()
    logger.info("Application shutdown complete")


# Initialize FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.PROJECT_DESCRIPTION,
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)


# ==================== MIDDLEWARE ====================


# Compression: GZip responses
app.add_middleware(GZipMiddleware, minimum_size=1000)


# CORS: Cross-Origin Resource Sharing
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD"],
    allow_headers=["*"],
    expose_headers=["Content-Length", "Content-Disposition"],
    max_age=3600,
)


# ==================== ROUTERS ====================


prefix = settings.API_PREFIX
app.include_router(units_router, prefix=f"{prefix}/units", tags=["Units"])
app.include_router(customers_router, prefix=f"{prefix}/customers", tags=["Customers"])
app.include_router(metrics_router, prefix=f"{prefix}/metrics", tags=["Metrics"])
app.include_router(forecast_router, prefix=f"{prefix}/forecast", tags=["Forecast"])
app.include_router(alerts_router, prefix=f"{prefix}/alerts", tags=["Alerts"])
app.include_router(reports_router, prefix=f"{prefix}/reports", tags=["Reports"])


# ==================== ERROR HANDLERS ====================


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed response"""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "detail": "Validation error",
            "errors": jsonable_encoder(exc.errors()),
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.error(f"Unhandled exception: {exc}\n{traceback.format_exc()}")

    # Don't expose internal errors in production
    error_message = str(exc) if settings.DEBUG else "Internal server error"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "detail": error_message,
            "timestamp": _utcnow(),
        }
    )


# ==================== HEALTH & STATUS ENDPOINTS ====================


@app.get("/", tags=["System"])
async def root():
    """Root endpoint - API information"""
    return {
        "success": True,
        "message": "Welcome to the StorageHub Analytics API",
        "app_name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": f"{settings.API_PREFIX}/docs",
        "status": "operational",
        "environment": "development" if is_development() else "production"
    }


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint for monitoring"""
    connection_ok = test_connection()
    return {
        "success": True,
        "status": "healthy" if connection_ok else "degraded",
        "database": "connected" if connection_ok else "disconnected",
        "timestamp": _utcnow(),
    }


# ==================== REQUEST LOGGING ====================


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests"""
    # Skip logging for health checks
    if request.url.path == "/health":
        return await call_next(request)

    start_time = datetime.now(timezone.utc)
    client = request.client.host if request.client else "-"
    logger.info(f">> {request.method} {request.url.path} - {client}")

    try:
        response = await call_next(request)
        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(f"<< {request.method} {request.url.path} - {response.status_code} ({duration:.2f}s)")
        return response
    except Exception as e:
        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.error(f"[ERROR] {request.method} {request.url.path} - Error: {str(e)} ({duration:.2f}s)")
        raise
