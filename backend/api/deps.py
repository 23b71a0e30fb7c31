"""
Smart Inventory Predictor API Dependencies

Dependency injection for the prediction cache and the workflow client.
Tests replace both through app.dependency_overrides.
"""

from fastapi import Request

from core.config import get_settings
from integrations.workflow import WorkflowClient
from predictions.cache import PredictionCache


def get_prediction_cache(request: Request) -> PredictionCache:
    """Return the cache created by init_app_state()."""
    return request.app.state.prediction_cache


def get_workflow_client() -> WorkflowClient:
    """Build a workflow client from the current settings."""
    return WorkflowClient.from_settings(get_settings())
