"""
Patrimoine - Backend API
Suivi du patrimoine familial: actifs, historique et projections
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from sqlalchemy import text
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.database import AsyncSessionLocal, engine
from app.core.logging import setup_logging, get_logger
from app.core.rate_limit import limiter
from app.services.bootstrap_service import create_tables, seed_defaults
from app.services.price_service import price_service

setup_logging()
logger = get_logger(__name__)

# Cron callers and the health probe poll often; keep them out of the access log
QUIET_PATHS = ("/health", f"{settings.API_V1_PREFIX}/cron/")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Times each request, logs it by outcome and reports the time in a header."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers["X-Response-Time"] = f"{elapsed_ms}ms"

        path = request.url.path
        if path.startswith(QUIET_PATHS) and response.status_code < 400:
            return response

        fields = {
            "method": request.method,
            "path": path,
            "status": response.status_code,
            "elapsed_ms": elapsed_ms,
        }
        if response.status_code >= 500:
            logger.error("Request failed", extra=fields)
        elif response.status_code in (401, 429):
            logger.warning("Request refused", extra=fields)
        elif elapsed_ms > settings.SLOW_REQUEST_MS:
            logger.info("Slow request", extra=fields)
        else:
            logger.debug("Request served", extra=fields)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} (env={settings.APP_ENV})")
    await create_tables(engine)
    async with AsyncSessionLocal() as session:
        added = await seed_defaults(session)
    if any(added.values()):
        logger.info(f"Seeded defaults: {added}")
    yield
    await price_service.close()
    await engine.dispose()
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(
    title=settings.APP_NAME,
    description="API de suivi de patrimoine",
    version="1.0.0",
    # API docs only when debugging
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json" if settings.DEBUG else None,
    docs_url=f"{settings.API_V1_PREFIX}/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.CORS_ALLOWED_METHODS,
    allow_headers=settings.CORS_ALLOWED_HEADERS,
    expose_headers=["X-Response-Time"],
    max_age=600,
)
app.add_middleware(AccessLogMiddleware)

app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/health")
async def health_check():
    """Liveness plus a database round trip."""
    database = "ok"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Health check database error: {e}")
        database = "error"

    return {
        "app": settings.APP_NAME,
        "status": "healthy" if database == "ok" else "degraded",
        "database": database,
    }
