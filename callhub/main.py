"""
FastAPI Application Entry Point.
Initializes the FastAPI app with middleware, CORS, error handling, and routes.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from callhub import __version__
from callhub.config import settings
from callhub.core.database import create_tables, engine
from callhub.core.exceptions import CallHubError
from callhub.core.logging import configure_logging
from callhub.core.rate_limit import limiter

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    if settings.auto_create_tables:
        await create_tables()
    logger.info(f"CallHub server started ({settings.environment})")
    yield
    # Shutdown
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title="CallHub Server",
    description="Backend API for user accounts and call lifecycle management",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Add rate limiter state and error handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# CORS Middleware
cors_origins = settings.get_allowed_origins_list()
logger.info(f"CORS allowed origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error handlers
@app.exception_handler(CallHubError)
async def callhub_error_handler(request: Request, exc: CallHubError):
    """Map application errors to {"message": ...} responses."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.response_message()},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as 400 with the first problem found."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"

    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Last-resort handler: log everything, return nothing internal."""
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# Health Check Endpoints
@app.get("/health", tags=["Health"])
async def health_check():
    """Basic health check endpoint."""
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "environment": settings.environment,
        }
    )


@app.get("/health/ready", tags=["Health"])
async def readiness_check():
    """
    Readiness check endpoint.
    Verifies database connectivity and reports signaling configuration.
    """
    from sqlalchemy import text
    from callhub.core.database import AsyncSessionLocal
    from callhub.core.signaling import signaling_provider

    checks = {
        "database": False,
        "signaling": "configured" if signaling_provider.enabled else "not_configured",
    }

    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        logger.warning(f"Readiness database check failed: {type(e).__name__}: {e}")

    status_code = 200 if checks["database"] else 503

    return JSONResponse(
        status_code=status_code,
        content={
            "status": "ready" if checks["database"] else "not ready",
            "checks": checks,
        }
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "message": "CallHub Server API",
        "version": __version__,
        "docs": "/docs" if settings.debug else "Documentation disabled in production",
    }


# Include API routers
from callhub.api.v1 import auth, calls, signaling

app.include_router(
    auth.router,
    prefix="/api/v1/auth",
    tags=["Authentication"]
)

app.include_router(
    calls.router,
    prefix="/api/v1/calls",
    tags=["Calls"]
)

app.include_router(
    signaling.router,
    prefix="/api/v1/signaling",
    tags=["Signaling"]
)
