"""
Predictions Router: trigger the forecasting workflow and serve cached results.
"""

import time
from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from api.deps import get_prediction_cache, get_workflow_client
from integrations.workflow import WorkflowClient, WorkflowError, WorkflowShapeError
from predictions.analytics import AnalyticsSummary, summarize_predictions
from predictions.cache import PredictionBundle, PredictionCache, PredictionMetadata
from predictions.normalizer import match_predictions

logger = structlog.get_logger()

router = APIRouter(tags=["predictions"])

NO_CACHED_PREDICTIONS = "No cached predictions available"


# ─── Schemas ────────────────────────────────────────────────────────────────


class _Envelope(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True


class PredictResponse(_Envelope):
    count: int
    predictions: list[Any]
    analytics: AnalyticsSummary
    metadata: PredictionMetadata


class CachedPredictionsResponse(PredictResponse):
    cache_age: int


class AnalyticsResponse(_Envelope):
    analytics: AnalyticsSummary
    timestamp: datetime


class MessageResponse(_Envelope):
    message: str


class ErrorResponse(_Envelope):
    success: bool = False
    error: str
    message: str | None = None
    details: dict[str, Any] | None = None
    raw_response: Any = None
    http_status: int | None = None
    http_data: Any = None


def _error_response(status_code: int, error: ErrorResponse) -> JSONResponse:
    # mode="json" renders NaN and Infinity from upstream bodies as null
    return JSONResponse(
        status_code=status_code,
        content=error.model_dump(mode="json", by_alias=True, exclude_unset=True),
    )


def _cache_miss() -> JSONResponse:
    return _error_response(404, ErrorResponse(success=False, error=NO_CACHED_PREDICTIONS))


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.post(
    "/predict",
    response_model=PredictResponse,
    responses={500: {"model": ErrorResponse}},
)
async def predict(
    cache: PredictionCache = Depends(get_prediction_cache),
    client: WorkflowClient = Depends(get_workflow_client),
):
    """Run the forecasting workflow once and cache the result."""
    request_number = cache.record_request()
    log = logger.bind(request_number=request_number)
    started = time.perf_counter()

    log.info("workflow.request_sent", url=client.trigger_url)
    try:
        payload = await client.trigger()
        strategy, predictions = match_predictions(payload)
        if not predictions:
            raise WorkflowShapeError(
                "No non-empty predictions list found in workflow output",
                raw_response=payload,
            )
    except WorkflowError as exc:
        log.error(
            "workflow.failed",
            error_type=exc.__class__.__name__,
            message=exc.message,
            timeout=exc.timeout,
        )
        return _error_response(500, ErrorResponse.model_validate(exc.to_envelope()))

    processing_time_ms = int((time.perf_counter() - started) * 1000)
    timestamp = datetime.now(timezone.utc)
    bundle = PredictionBundle(
        predictions=predictions,
        analytics=summarize_predictions(predictions),
        metadata=PredictionMetadata(
            timestamp=timestamp,
            processing_time_ms=processing_time_ms,
            request_number=request_number,
        ),
    )
    cache.store(bundle, stored_at=timestamp)

    log.info(
        "workflow.response_received",
        strategy=strategy,
        count=len(predictions),
        processing_time_ms=processing_time_ms,
    )
    return PredictResponse(
        count=len(predictions),
        predictions=bundle.predictions,
        analytics=bundle.analytics,
        metadata=bundle.metadata,
    )


@router.get(
    "/predictions/cache",
    response_model=CachedPredictionsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_cached_predictions(cache: PredictionCache = Depends(get_prediction_cache)):
    """Return the last successful prediction bundle without calling the workflow."""
    entry = cache.read()
    if entry is None:
        return _cache_miss()

    bundle = entry.bundle
    return CachedPredictionsResponse(
        count=len(bundle.predictions),
        predictions=bundle.predictions,
        analytics=bundle.analytics,
        metadata=bundle.metadata,
        cache_age=entry.age_ms(),
    )


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_analytics(cache: PredictionCache = Depends(get_prediction_cache)):
    entry = cache.read()
    if entry is None:
        return _cache_miss()
    return AnalyticsResponse(analytics=entry.bundle.analytics, timestamp=entry.stored_at)


@router.delete("/cache", response_model=MessageResponse)
async def clear_cache(cache: PredictionCache = Depends(get_prediction_cache)):
    """Drop the cached bundle. The request counter is kept."""
    cache.clear()
    logger.info("cache.cleared")
    return MessageResponse(message="Cache cleared successfully")
