"""Locate the per-product prediction list inside a workflow response."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ExtractionStrategy:
    """A named key path into the workflow payload."""

    name: str
    path: tuple[str, ...]

    def extract(self, payload: Any) -> list[Any] | None:
        node = payload
        for key in self.path:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        if isinstance(node, list) and node:
            return node
        return None


# Order matters: each entry is a payload shape the workflow has produced.
EXTRACTION_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    ExtractionStrategy("result.predictions", ("result", "predictions")),
    ExtractionStrategy(
        "result.response_body.result.predictions",
        ("result", "response_body", "result", "predictions"),
    ),
    ExtractionStrategy("predictions", ("predictions",)),
)


def match_predictions(payload: Any) -> tuple[str | None, list[Any]]:
    """Return (strategy name, predictions) for the first strategy that matches."""
    for strategy in EXTRACTION_STRATEGIES:
        predictions = strategy.extract(payload)
        if predictions is not None:
            return strategy.name, predictions
    return None, []


def extract_predictions(payload: Any) -> list[Any]:
    """First non-empty prediction list found in the payload, or []."""
    return match_predictions(payload)[1]
