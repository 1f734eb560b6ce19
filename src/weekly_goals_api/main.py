import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from weekly_goals_api.common.error_handlers import ServiceError
from weekly_goals_api.config import settings
from weekly_goals_api.database import db
from weekly_goals_api.exceptions import (
    general_exception_handler,
    http_exception_handler,
    service_exception_handler,
    validation_exception_handler,
)
from weekly_goals_api.rate_limiter import (
    HEALTH_RATE_LIMIT,
    configure_rate_limiting,
    limiter,
)
from weekly_goals_api.routers import (
    backlog,
    categories,
    follow_ups,
    health,
    notes,
    recurring_tasks,
    tags,
    tasks,
    week_generation,
    weeks,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)
    logger.info("🚀 Weekly Goals API starting up...")

    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Host: {settings.host}, Port: {settings.port}")
    logger.info(f"Debug mode: {settings.debug}")

    if db.health_check():
        logger.info("✅ Database connection successful")
        db.create_tables()
    else:
        logger.warning("⚠️ Database connection failed, continuing in degraded mode")

    logger.info("✅ Weekly Goals API startup complete")
    yield
    # Shutdown
    logger.info("🔄 Weekly Goals API shutting down...")


# Initialize FastAPI app
app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Configure rate limiting
configure_rate_limiting(app)

# Add exception handlers
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ServiceError, service_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include API routers
app.include_router(weeks.router, prefix="/api")
app.include_router(week_generation.router, prefix="/api")
app.include_router(tasks.router, prefix="/api")
app.include_router(recurring_tasks.router, prefix="/api")
app.include_router(follow_ups.router, prefix="/api")
app.include_router(backlog.router, prefix="/api")
app.include_router(categories.router, prefix="/api")
app.include_router(tags.router, prefix="/api")
app.include_router(notes.router, prefix="/api")
app.include_router(health.router, prefix="/api")


# Health check endpoint
@app.get("/health")
@limiter.limit(HEALTH_RATE_LIMIT)
async def health_check(request: Request):
    """Health check endpoint"""
    if db.health_check():
        return JSONResponse({"status": "healthy", "message": "OK"})
    return JSONResponse(
        {"status": "unhealthy", "message": "Service temporarily unavailable"},
        status_code=503,
    )


# Root endpoint
@app.get("/")
@limiter.limit(HEALTH_RATE_LIMIT)
async def root(request: Request):
    """Root endpoint with API information"""
    return JSONResponse(
        {
            "message": settings.api_title,
            "version": settings.api_version,
            "status": "active",
        }
    )
