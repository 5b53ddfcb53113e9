from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded

from skirent.core.limits import limiter, rate_limit_handler
from skirent.core.init_db import init_database
from skirent.core.error_handlers import setup_exception_handlers
from skirent.core.database import db_manager
from skirent.core.middleware import setup_middleware
from skirent.core.logging_utils import (
    setup_logging,
    get_logger,
    log_business_event,
    error_tracker,
)
from skirent.core.config import (
    validate_config,
    APP_NAME,
    APP_VERSION,
    CORS_ORIGINS,
    DEBUG,
    ENVIRONMENT,
    LOG_LEVEL,
    LOG_FORMAT,
    SLOW_REQUEST_THRESHOLD,
)

from skirent.auth.routers import auth
from skirent.public.routers import products, catalog, bookings, info
from skirent.admin.routers import bookings as admin_bookings
from skirent.admin.routers import lessons as admin_lessons
from skirent.admin.routers import equipment as admin_equipment
from skirent.admin.routers import teachers as admin_teachers
from skirent.admin.routers import pricing as admin_pricing
from skirent.admin.routers import dashboard as admin_dashboard

# Настройка системы логирования
setup_logging(LOG_LEVEL, LOG_FORMAT)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения"""

    # Startup
    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")

    try:
        validate_config()
        logger.info("✅ Configuration validated")

        await db_manager.check_connection()
        logger.info("✅ Database connection established")

        await init_database()
        logger.info("✅ Database initialized")

        log_business_event(
            "application_started",
            "system",
            0,
            {"version": APP_VERSION, "environment": ENVIRONMENT},
        )

        logger.info("🚀 Application startup completed")

    except Exception as e:
        logger.error(f"❌ Application startup failed: {str(e)}")
        error_tracker.track_error(
            "STARTUP_ERROR",
            str(e),
            {"component": "application_startup", "version": APP_VERSION},
        )
        raise

    yield

    # Shutdown
    logger.info("🛑 Shutting down application...")

    try:
        await db_manager.close_connections()
        logger.info("✅ Database connections closed")

    except Exception as e:
        logger.error(f"❌ Error during shutdown: {str(e)}")

    logger.info("👋 Application shutdown completed")


app = FastAPI(
    title=APP_NAME,
    description="Ski & snowboard rental in Gudauri",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

setup_middleware(
    app,
    {
        "slow_request_threshold": SLOW_REQUEST_THRESHOLD,
        "exclude_paths": [
            "/health",
            "/docs",
            "/openapi.json",
            "/redoc",
            "/favicon.ico",
        ],
    },
)

# Add rate limiter to app state
app.state.limiter = limiter

# Add rate limit exception handler
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

# Include routers with API version prefix
app.include_router(auth.router, prefix="/api/v1")
app.include_router(products.router, prefix="/api/v1")
app.include_router(catalog.router, prefix="/api/v1")
app.include_router(bookings.router, prefix="/api/v1")
app.include_router(info.router, prefix="/api/v1")
app.include_router(admin_dashboard.router, prefix="/api/v1")
app.include_router(admin_bookings.router, prefix="/api/v1")
app.include_router(admin_lessons.router, prefix="/api/v1")
app.include_router(admin_equipment.router, prefix="/api/v1")
app.include_router(admin_teachers.router, prefix="/api/v1")
app.include_router(admin_pricing.router, prefix="/api/v1")


@app.get("/health", tags=["System"])
async def health():
    """Liveness, database reachability and error counters"""
    try:
        database_ok = await db_manager.check_connection()
    except Exception as e:
        logger.warning(f"Health check: database unavailable: {str(e)}")
        database_ok = False

    return {
        "status": "ok" if database_ok else "degraded",
        "version": APP_VERSION,
        "database": "ok" if database_ok else "unavailable",
        "errors": error_tracker.get_stats(),
    }
