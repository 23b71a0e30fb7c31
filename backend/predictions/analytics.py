"""
Prediction Analytics: summary statistics over a workflow prediction list.

Each prediction record is the raw JSON object returned by the workflow.
Only these fields are read:
  - product identifier (product_name / product_id / product / sku / name)
  - current_stock
  - predicted_demand
  - total_sales
  - recommended_restock

Missing or non-numeric values count as 0. Records are never modified or
reordered, because the same list is returned to the caller alongside the
summary.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

CRITICAL_STOCK_THRESHOLD = 30
LOW_STOCK_THRESHOLD = 50
TOP_DEMAND_LIMIT = 5

PRODUCT_ID_FIELDS = ("product_name", "product_id", "product", "sku", "name")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TopDemandEntry(_CamelModel):
    product: Any = None
    predicted_demand: int | float


class AnalyticsSummary(_CamelModel):
    total_products: int = 0
    critical_stock: int = 0
    low_stock: int = 0
    adequate_stock: int = 0
    total_predicted_demand: int | float = 0
    average_predicted_demand: int = 0
    total_sales: int | float = 0
    needs_restock: int = 0
    average_stock: int = 0
    top_demand: list[TopDemandEntry] = []


def _number(value: Any) -> int | float:
    """Coerce a JSON value to a finite number; anything else is 0."""
    if isinstance(value, bool) or value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def product_identifier(record: dict[str, Any]) -> Any:
    for field in PRODUCT_ID_FIELDS:
        if record.get(field) is not None:
            return record[field]
    return None


def stock_tier(stock: float) -> str:
    """Classify a stock level as critical, low or adequate."""
    if stock < CRITICAL_STOCK_THRESHOLD:
        return "critical"
    if stock < LOW_STOCK_THRESHOLD:
        return "low"
    return "adequate"


def summarize_predictions(records: list[Any]) -> AnalyticsSummary:
    """
    Compute the analytics summary for one workflow response.

    Averages use the record count as denominator and round half-up, so
    stocks [10, 11] average to 11. An empty list produces an all-zero
    summary.
    """
    rows = [record if isinstance(record, dict) else {} for record in records]
    total = len(rows)
    if total == 0:
        return AnalyticsSummary()

    stocks = [_number(row.get("current_stock")) for row in rows]
    demands = [_number(row.get("predicted_demand")) for row in rows]

    tiers = {"critical": 0, "low": 0, "adequate": 0}
    for stock in stocks:
        tiers[stock_tier(stock)] += 1

    total_demand = sum(demands)

    # sorted() is stable, so equal demands keep their original order
    ranked = sorted(range(total), key=lambda i: demands[i], reverse=True)
    top_demand = [
        TopDemandEntry(product=product_identifier(rows[i]), predicted_demand=demands[i])
        for i in ranked[:TOP_DEMAND_LIMIT]
    ]

    return AnalyticsSummary(
        total_products=total,
        critical_stock=tiers["critical"],
        low_stock=tiers["low"],
        adequate_stock=tiers["adequate"],
        total_predicted_demand=total_demand,
        average_predicted_demand=_round_half_up(total_demand / total),
        total_sales=sum(_number(row.get("total_sales")) for row in rows),
        needs_restock=sum(1 for row in rows if _number(row.get("recommended_restock")) > 0),
        average_stock=_round_half_up(sum(stocks) / total),
        top_demand=top_demand,
    )
