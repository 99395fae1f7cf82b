# backend/app/main.py

import logging
import os
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.middleware.gzip import GZipMiddleware

from . import models  # noqa: F401  registers tables on Base.metadata

# Routers under app/api/
from .api import api_admin, api_provider, api_service, api_user
from .core.config import settings
from .core.observability import setup_logging
from .database import Base, engine
from .utils.redis_cache import close_redis_client

# Configure logging before creating any loggers
setup_logging()
logger = logging.getLogger(__name__)

_BOOT_TS = time.time()

_skip_db_bootstrap = os.getenv("SKIP_DB_BOOTSTRAP", "0").strip().lower() in {"1", "true", "yes"}
logger.info(
    "startup.bootstrap.begin skip_db_bootstrap=%s dialect=%s pid=%s",
    _skip_db_bootstrap,
    getattr(engine.dialect, "name", "unknown"),
    os.getpid(),
)
if not _skip_db_bootstrap:
    # Local sqlite convenience; managed databases are migrated with alembic.
    Base.metadata.create_all(bind=engine)

# Always use ORJSONResponse for JSON payloads to ensure consistent, fast
# serialization across all endpoints.
app = FastAPI(title="3 Passos Marketplace API", default_response_class=ORJSONResponse)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1024)
logger.info("CORS origins set to: %s", settings.CORS_ORIGINS)


@app.get("/healthz", tags=["health"])
async def healthz():
    return {"status": "ok", "uptime_s": int(time.time() - _BOOT_TS)}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return validation errors with details and log them for debugging."""
    errors = exc.errors()
    logger.warning("Validation error at %s: %s", request.url.path, errors)
    field_errors = {}
    for err in errors:
        key = ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body"
        field_errors[key] = err.get("msg", "invalid")
    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": {"message": "Validation failed", "field_errors": field_errors}},
    )


api_prefix = settings.API_V1_STR  # usually something like "/api/v1"

app.include_router(api_service.router, prefix=f"{api_prefix}/services", tags=["services"])
app.include_router(api_provider.router, prefix=f"{api_prefix}/providers", tags=["providers"])
app.include_router(api_user.router, prefix=f"{api_prefix}", tags=["users"])
app.include_router(api_admin.router, prefix=f"{api_prefix}/admin", tags=["admin"])


@app.on_event("shutdown")
def shutdown_redis_client() -> None:
    """Close Redis connections when the application shuts down."""
    logger.info("Closing Redis client")
    close_redis_client()
