"""
Forecasting Workflow Client

Triggers the externally hosted demand-forecasting workflow over HTTP.
The workflow is opaque to this service: it is POSTed an empty JSON body
and answers with a JSON document that carries the per-product predictions
somewhere inside it (see predictions/normalizer.py).

Failures are raised as WorkflowError subclasses; each one renders the
error envelope returned to API clients, so the gateway never has to
inspect httpx exceptions itself.
"""

from typing import Any

import httpx
import structlog

logger = structlog.get_logger()

WORKFLOW_FAILED = "Failed to execute prediction workflow"
PREDICTIONS_NOT_FOUND = "Predictions not found in workflow output"


# ── Error taxonomy ────────────────────────────────────────────────────────


class WorkflowError(Exception):
    """Base class for every failure of a workflow call."""

    error = WORKFLOW_FAILED
    timeout = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_envelope(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": self.error,
            "message": self.message,
            "details": {"timeout": self.timeout},
        }


class WorkflowTimeoutError(WorkflowError):
    """The workflow did not answer within the configured timeout."""

    timeout = True


class WorkflowConnectionError(WorkflowError):
    """The workflow could not be reached at all (DNS, refused connection, ...)."""


class WorkflowHTTPError(WorkflowError):
    """The workflow answered with a non-success status code."""

    def __init__(self, message: str, status_code: int, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def to_envelope(self) -> dict[str, Any]:
        envelope = super().to_envelope()
        envelope["httpStatus"] = self.status_code
        envelope["httpData"] = self.body
        return envelope


class WorkflowShapeError(WorkflowError):
    """The workflow answered, but no predictions could be extracted."""

    error = PREDICTIONS_NOT_FOUND

    def __init__(self, message: str, raw_response: Any = None):
        super().__init__(message)
        self.raw_response = raw_response

    def to_envelope(self) -> dict[str, Any]:
        envelope = super().to_envelope()
        envelope["rawResponse"] = self.raw_response
        return envelope


# ── Client ────────────────────────────────────────────────────────────────


def _response_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to plain text."""
    try:
        return response.json()
    except ValueError:
        return response.text or None


class WorkflowClient:
    """Client for the upstream forecasting workflow trigger."""

    def __init__(
        self,
        trigger_url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.trigger_url = trigger_url
        self.timeout = httpx.Timeout(timeout_seconds)
        self.transport = transport
        self.headers = {"Content-Type": "application/json"}

    @classmethod
    def from_settings(cls, settings) -> "WorkflowClient":
        return cls(
            trigger_url=settings.workflow_trigger_url,
            timeout_seconds=settings.workflow_timeout_seconds,
        )

    async def trigger(self) -> Any:
        """
        POST an empty JSON object to the workflow and return the decoded reply.

        No retries: a failed call is surfaced immediately and the caller
        decides whether to try again.
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(self.trigger_url, headers=self.headers, json={})
                response.raise_for_status()
            except httpx.TimeoutException as exc:
                raise WorkflowTimeoutError(
                    f"Workflow did not respond within {self.timeout.read} seconds"
                ) from exc
            except httpx.HTTPStatusError as exc:
                raise WorkflowHTTPError(
                    f"Workflow responded with status {exc.response.status_code}",
                    status_code=exc.response.status_code,
                    body=_response_body(exc.response),
                ) from exc
            except httpx.RequestError as exc:
                raise WorkflowConnectionError(str(exc) or exc.__class__.__name__) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise WorkflowShapeError(
                "Workflow response is not valid JSON",
                raw_response=response.text,
            ) from exc

        logger.debug("workflow.raw_response", status_code=response.status_code, payload=payload)
        return payload
