from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from content_gate import __version__
from content_gate.config import settings
from content_gate.constants import ERROR_CODE_INTERNAL, ERROR_CODE_VALIDATION
from content_gate.db.session import engine, Base
from content_gate.errors import (
    GenerationError,
    PersistenceError,
    SafetyConfigLoadError,
    SchemaUnavailableError,
)
from content_gate.schemas import ErrorResponse, FieldError
from content_gate.api.agents import router as agents_router
from content_gate.api.brands import router as brands_router
import content_gate.models  # noqa: F401  (registers tables on Base.metadata)
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown"""
    # Startup
    logger.info("Starting Content Gate API...")

    if settings.environment == "production" and settings.llm_provider == "ollama":
        logger.warning("Running in production with the Ollama provider; check LLM_PROVIDER")

    # Create database tables (in production, use Alembic migrations)
    if settings.environment == "development":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created/verified")

    yield

    # Shutdown
    logger.info("Shutting down Content Gate API...")
    await engine.dispose()


# Create FastAPI app
app = FastAPI(
    title="Content Gate API",
    description="Brand-safe content generation behind a quality and compliance gate",
    version=__version__,
    lifespan=lifespan,
)


def _error_response(status_code: int, error: str, error_code: str, **fields) -> JSONResponse:
    body = ErrorResponse(error=error, error_code=error_code, **fields)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _field_name(loc) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI puts on every location
    parts = [str(part) for part in loc]
    if parts and parts[0] in ("body", "query", "path"):
        parts = parts[1:]
    return ".".join(parts) or "request"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [FieldError(field=_field_name(err.get("loc", ())), message=err.get("msg", "Invalid value"))
               for err in exc.errors()]
    logger.info(f"Rejected {request.method} {request.url.path}: {len(details)} validation error(s)")
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        ERROR_CODE_VALIDATION,
        details=details,
    )


@app.exception_handler(GenerationError)
async def generation_exception_handler(request: Request, exc: GenerationError):
    logger.error(f"Generation failed for {request.url.path}: {exc}")
    return _error_response(
        status.HTTP_502_BAD_GATEWAY,
        f"Content generation failed: {exc}",
        ERROR_CODE_INTERNAL,
        log_id=exc.log_id or "",
    )


@app.exception_handler(SafetyConfigLoadError)
async def safety_config_exception_handler(request: Request, exc: SafetyConfigLoadError):
    logger.error(f"Safety config load failed for {request.url.path}: {exc}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc), ERROR_CODE_INTERNAL)


@app.exception_handler(PersistenceError)
async def persistence_exception_handler(request: Request, exc: PersistenceError):
    logger.error(f"Storage error for {request.url.path}: {exc}")
    status_code = (
        status.HTTP_503_SERVICE_UNAVAILABLE
        if isinstance(exc, SchemaUnavailableError)
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return _error_response(status_code, "Storage unavailable", ERROR_CODE_INTERNAL)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error for {request.url.path}: {exc}", exc_info=exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        ERROR_CODE_INTERNAL,
        log_id=getattr(exc, "log_id", None) or "",
    )


# Request body size limit middleware (before FastAPI parses JSON)
@app.middleware("http")
async def check_request_size(request: Request, call_next):
    """Reject request bodies that exceed the configured size limit."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        max_size_bytes = settings.max_request_size_mb * 1024 * 1024
        if int(content_length) > max_size_bytes:
            return _error_response(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                f"Request body too large. Maximum size is {settings.max_request_size_mb}MB",
                ERROR_CODE_VALIDATION,
            )
    response = await call_next(request)
    return response

# CORS middleware - configure based on environment
if settings.cors_origins:
    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    _allow_all = cors_origins == ["*"]
else:
    # Empty string means no CORS allowed (require explicit configuration)
    cors_origins = []
    _allow_all = False

if _allow_all and settings.environment == "production":
    logger.warning("CORS is set to allow all origins in production. This is a security risk!")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    # allow_credentials=True is incompatible with allow_origins=["*"] per CORS spec
    allow_credentials=not _allow_all,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["Content-Type", "Authorization"],
)

# Include routers
app.include_router(agents_router, prefix="/api/v1")
app.include_router(brands_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Content Gate API",
        "version": __version__,
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}
