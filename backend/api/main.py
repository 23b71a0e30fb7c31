"""
Smart Inventory Predictor API: FastAPI Application Entry Point

Thin gateway in front of the hosted forecasting workflow. Run from the
backend directory with `python -m api.main` or `uvicorn api.main:app`.
"""

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import psutil
import structlog
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from api.deps import get_prediction_cache
from api.v1.routers import predictions as predictions_router
from core.config import get_settings
from predictions.cache import PredictionCache

settings = get_settings()
logger = structlog.get_logger()

AVAILABLE_ENDPOINTS = [
    "GET /health",
    "POST /predict",
    "GET /predictions/cache",
    "GET /analytics",
    "DELETE /cache",
]


def init_app_state(app: FastAPI) -> None:
    """Attach a fresh prediction cache and the process start time to the app."""
    app.state.prediction_cache = PredictionCache()
    app.state.started_at = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info(
        "Smart Inventory Predictor starting up",
        version=settings.app_version,
        port=settings.port,
        workflow_url=settings.workflow_trigger_url,
    )
    yield
    logger.info("Smart Inventory Predictor shutting down")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Demand forecasting gateway with in-memory result caching",
    lifespan=lifespan,
)
init_app_state(app)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    logger.info(
        "request",
        received_at=datetime.now(timezone.utc).isoformat(),
        method=request.method,
        path=request.url.path,
    )
    return await call_next(request)


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "error": "Route not found",
                "path": request.url.path,
                "availableEndpoints": AVAILABLE_ENDPOINTS,
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("request.unhandled_error", method=request.method, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


app.include_router(predictions_router.router)


@app.get("/health")
async def health_check(request: Request, cache: PredictionCache = Depends(get_prediction_cache)):
    """Liveness check with uptime, memory usage and cache summary."""
    memory = psutil.Process().memory_info()
    cache_status = cache.status()
    return {
        "status": "OK",
        "service": settings.app_name,
        "version": settings.app_version,
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        "memory": {"rss": memory.rss, "vms": memory.vms},
        "cache": {
            "hasPredictions": cache_status.has_predictions,
            "lastUpdate": cache_status.last_update.isoformat() if cache_status.last_update else None,
            "totalRequests": cache_status.total_requests,
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
