"""
Test Configuration: fixtures for the test client, cache and a fake workflow.

The upstream workflow is never contacted. Each test gets a fresh
PredictionCache and a WorkflowClient wired to an httpx.MockTransport whose
reply the test controls through the `workflow` fixture.
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from api.deps import get_prediction_cache, get_workflow_client
from api.main import app
from integrations.workflow import WorkflowClient
from predictions.cache import PredictionCache

WORKFLOW_URL = "https://workflow.test/trigger"

SAMPLE_PREDICTIONS = [
    {
        "product_name": "Whole Milk 1L",
        "current_stock": 12,
        "predicted_demand": 80,
        "total_sales": 1200,
        "recommended_restock": 70,
    },
    {
        "product_name": "Sourdough Loaf",
        "current_stock": 35,
        "predicted_demand": 40,
        "total_sales": 640,
        "recommended_restock": 10,
    },
    {
        "product_name": "Basmati Rice 5kg",
        "current_stock": 90,
        "predicted_demand": 25,
        "total_sales": 300,
        "recommended_restock": 0,
    },
]


class FakeWorkflow:
    """Scripted upstream: replays one reply (or raises) for every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload = {"result": {"predictions": SAMPLE_PREDICTIONS}}
        self.content: bytes | None = None
        self.exception: Exception | None = None

    def reply(self, payload=None, status_code: int = 200, content: bytes | None = None):
        self.payload = payload
        self.status_code = status_code
        self.content = content
        self.exception = None

    def fail(self, exception: Exception):
        self.exception = exception

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exception is not None:
            raise self.exception
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)


@pytest.fixture
def sample_predictions():
    return [dict(record) for record in SAMPLE_PREDICTIONS]


@pytest.fixture
def workflow():
    return FakeWorkflow()


@pytest.fixture
def workflow_client(workflow):
    return WorkflowClient(
        trigger_url=WORKFLOW_URL,
        timeout_seconds=30,
        transport=httpx.MockTransport(workflow.handler),
    )


@pytest.fixture
def prediction_cache():
    return PredictionCache()


@pytest.fixture
async def client(prediction_cache, workflow_client):
    """Create an async test client with dependency overrides."""
    app.dependency_overrides[get_prediction_cache] = lambda: prediction_cache
    app.dependency_overrides[get_workflow_client] = lambda: workflow_client

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
