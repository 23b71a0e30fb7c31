"""
Prediction Cache: the last successful prediction bundle, kept in memory.

Lifecycle:
    1. PredictionCache()      created empty when the app is initialized
    2. record_request()       once per /predict call, before the workflow runs
    3. store(bundle)          after a successful call, replaces the entry
    4. read() / status()      read-only endpoints and /health
    5. clear()                drops the entry, keeps the request counter

Nothing is persisted; a restart starts from an empty cache. Concurrent
writers are not serialized against each other: the last store wins.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from predictions.analytics import AnalyticsSummary


class PredictionMetadata(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    timestamp: datetime
    processing_time_ms: int
    request_number: int


@dataclass(frozen=True)
class PredictionBundle:
    predictions: list[Any]
    analytics: AnalyticsSummary
    metadata: PredictionMetadata


@dataclass(frozen=True)
class CacheEntry:
    """A bundle and the moment it was cached. Always set as one unit."""

    bundle: PredictionBundle
    stored_at: datetime

    def age_ms(self, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        return max(0, int((now - self.stored_at).total_seconds() * 1000))


@dataclass(frozen=True)
class CacheStatus:
    has_predictions: bool
    last_update: datetime | None
    total_requests: int


class PredictionCache:
    """Single-slot cache guarded by one lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._entry: CacheEntry | None = None
        self._total_requests = 0

    def record_request(self) -> int:
        """Count a prediction attempt and return its sequence number."""
        with self._lock:
            self._total_requests += 1
            return self._total_requests

    def store(self, bundle: PredictionBundle, stored_at: datetime | None = None) -> CacheEntry:
        entry = CacheEntry(bundle=bundle, stored_at=stored_at or datetime.now(timezone.utc))
        with self._lock:
            self._entry = entry
        return entry

    def read(self) -> CacheEntry | None:
        with self._lock:
            return self._entry

    def clear(self) -> None:
        with self._lock:
            self._entry = None

    def status(self) -> CacheStatus:
        with self._lock:
            return CacheStatus(
                has_predictions=self._entry is not None,
                last_update=self._entry.stored_at if self._entry else None,
                total_requests=self._total_requests,
            )
