"""
Integration adapters package.

Outbound connectors to systems this service depends on. Today that is the
hosted forecasting workflow:

Usage:
    from integrations import WorkflowClient, WorkflowError

    client = WorkflowClient(trigger_url="https://...", timeout_seconds=30)
    try:
        payload = await client.trigger()
    except WorkflowError as exc:
        body = exc.to_envelope()
"""

from integrations.workflow import (
    WorkflowClient,
    WorkflowConnectionError,
    WorkflowError,
    WorkflowHTTPError,
    WorkflowShapeError,
    WorkflowTimeoutError,
)

__all__ = [
    "WorkflowClient",
    "WorkflowError",
    "WorkflowTimeoutError",
    "WorkflowConnectionError",
    "WorkflowHTTPError",
    "WorkflowShapeError",
]
