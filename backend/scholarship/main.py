from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager

from scholarship.core.config import settings
from scholarship.core.database import init_db, close_db, get_session_local
from scholarship.core.exceptions import ScholarshipError, error_response
from scholarship.core.logging_config import logger
from scholarship.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    RequestSizeLimitMiddleware,
)
from scholarship.core.rate_limiter import limiter, rate_limit_exceeded_handler
from scholarship.api.router import api_router
from scholarship.services.admin_service import ensure_admin_account
from scholarship.utils.forms import pydantic_errors
from slowapi.errors import RateLimitExceeded
import scholarship.models  # Import models so metadata knows about them


async def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == "CHANGE_ME":
        errors.append("JWT_SECRET_KEY is not set or using default value")

    if settings.STORAGE_MODE not in ("local", "s3"):
        errors.append(f"STORAGE_MODE must be 'local' or 's3', got '{settings.STORAGE_MODE}'")

    if settings.STORAGE_MODE == "s3" and not settings.S3_BUCKET_NAME:
        errors.append("S3_BUCKET_NAME is not set")

    if settings.ENVIRONMENT == "production" and len(settings.JWT_SECRET_KEY) < 32:
        warnings.append("JWT_SECRET_KEY is shorter than 32 characters")

    if not settings.RATE_LIMIT_ENABLED:
        warnings.append("Rate limiting disabled - login is not brute-force protected")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] Critical configuration validated")
    return True


async def seed_admin():
    """Create the bootstrap admin account if one is configured"""
    if not (settings.SEED_ADMIN_USERNAME and settings.SEED_ADMIN_PASSWORD):
        return
    async with get_session_local()() as session:
        await ensure_admin_account(session, settings.SEED_ADMIN_USERNAME, settings.SEED_ADMIN_PASSWORD)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Storage: {settings.STORAGE_MODE}")
    logger.info("=" * 60)

    await validate_critical_config()

    await init_db()
    logger.info("[Startup] Database tables ready")

    await seed_admin()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Beneficiary registration and scholarship applications",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False  # Prevent 307 redirects that break CORS
)

# Add rate limiter state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add middleware (order matters - last added runs first)
# 1. Request logging (runs first for all requests)
app.add_middleware(RequestLoggingMiddleware)

# 2. Security headers
app.add_middleware(SecurityHeadersMiddleware)

# 3. Request size limit (eleven documents per registration)
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_REQUEST_SIZE)

# 4. CORS - Origins from CORS_ORIGINS_STR in .env
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(ScholarshipError)
async def scholarship_exception_handler(request: Request, exc: ScholarshipError):
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, f"{request.method} {request.url.path}")
        content = {"msg": exc.message if settings.DEBUG else "Server error", "code": exc.code}
    else:
        content = error_response(exc)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = pydantic_errors(exc)
    first = errors[0] if errors else {"field": "body", "msg": "Invalid request"}
    return JSONResponse(
        status_code=400,
        content={"msg": f"{first['field']}: {first['msg']}", "errors": errors},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "msg": "Server error",
            "detail": str(exc) if settings.DEBUG else None
        }
    )


@app.get("/", tags=["Health"])
async def root():
    return {"msg": f"{settings.APP_NAME} API is running"}


# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)

# Locally stored documents are served by the app itself
if settings.STORAGE_MODE == "local":
    settings.upload_path.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(settings.upload_path)), name="uploads")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "scholarship.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.is_dev_mode(),
    )
