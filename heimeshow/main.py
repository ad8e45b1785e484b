"""
Main FastAPI application
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import time
from prometheus_client import make_asgi_app, Counter, Histogram
import uuid

from heimeshow.config import settings
from heimeshow.core.exception_handlers import register_exception_handlers
from heimeshow.core.logging import RequestLoggerAdapter, get_logger, setup_logging
from heimeshow.api.v1.api import api_router

# Setup logging
setup_logging()
logger = get_logger(__name__)

# Prometheus metrics - tolerate re-import (tests, reload)
try:
    REQUEST_COUNT = Counter(
        "heimeshow_requests_total",
        "Total requests",
        ["method", "endpoint", "status"]
    )
    REQUEST_DURATION = Histogram(
        "heimeshow_request_duration_seconds",
        "Request duration",
        ["method", "endpoint"]
    )
except ValueError:
    from prometheus_client import REGISTRY
    REQUEST_COUNT = REGISTRY._names_to_collectors["heimeshow_requests_total"]
    REQUEST_DURATION = REGISTRY._names_to_collectors["heimeshow_request_duration_seconds"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.APP_ENV})")
    if not settings.TMDB_API_KEY:
        logger.warning("TMDB_API_KEY is not set; booking screens will show placeholder titles")
    if not settings.ENQUIRY_URL:
        logger.warning("ENQUIRY_URL is not set; payment enquiries will only be logged")

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title=settings.APP_NAME,
    description="Cinema booking flow: showtimes, seats and payment review",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def track_requests(request: Request, call_next):
    """
    Track request metrics and add request ID
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    request_logger = RequestLoggerAdapter(logger, {"request_id": request_id})

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    # Route template keeps label cardinality bounded
    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)

    REQUEST_COUNT.labels(
        method=request.method,
        endpoint=endpoint,
        status=response.status_code
    ).inc()

    REQUEST_DURATION.labels(
        method=request.method,
        endpoint=endpoint
    ).observe(duration)

    request_logger.debug(f"{request.method} {request.url.path} -> {response.status_code} in {duration:.4f}s")

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = str(duration)

    return response


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.APP_ENV,
        "api_docs": "/docs" if settings.DEBUG else None
    }


app.include_router(api_router, prefix=settings.API_PREFIX)

# Mount Prometheus metrics endpoint
if settings.PROMETHEUS_ENABLED:
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "heimeshow.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
