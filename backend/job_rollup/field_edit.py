"""
Job Rollup - Field Edit Recalculator

Approximate job metrics for a single edited scalar field (hours or progress
typed into a form) when no per-operation detail is available.

Formulas
========

Projected hours:
---------------
    H = actual / (progress / 100)    if 0 < progress < 100 and actual > 0
    H = planned                      otherwise

    progress is taken as given, never derived from hours.

Cost:
----
    Burden rate applied to the scalar planned, actual and projected hours.

Order value / profit:
--------------------
    V = net_price × quantity         when both are present
    V = order_value                  otherwise
    profit = V - projected cost
    margin = profit / V × 100        when V > 0

These figures are an approximation. They use a different projection than the
operation-level rollup and will generally not agree with it for the same job.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .labor_cost import calculate_labor_cost
from .models import coerce_float, coerce_optional_float, coerce_str
from .settings import RollupConfig, resolve_config

logger = logging.getLogger(__name__)


# Fields whose edit triggers a recalculation
RECALCULATION_FIELDS = frozenset({"planned_hours", "actual_hours", "progress", "order_value"})


class FieldEditInput(BaseModel):
    """Scalar job fields read by the recalculator; other keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    planned_hours: float = 0.0
    actual_hours: float = 0.0
    progress: float = 0.0
    work_center: str = ""
    task_description: str = ""
    part_name: str = ""
    net_price: Optional[float] = None
    quantity: Optional[float] = None
    order_value: Optional[float] = None

    @field_validator("planned_hours", "actual_hours", "progress", mode="before")
    @classmethod
    def parse_numbers(cls, v):
        return coerce_float(v)

    @field_validator("net_price", "quantity", "order_value", mode="before")
    @classmethod
    def parse_optional_numbers(cls, v):
        return coerce_optional_float(v)

    @field_validator("work_center", "task_description", "part_name", mode="before")
    @classmethod
    def parse_text(cls, v):
        return coerce_str(v)


@dataclass
class FieldEditMetrics:
    projected_hours: float
    planned_cost: float
    actual_cost: float
    projected_cost: float
    order_value: Optional[float] = None
    profit_value: Optional[float] = None
    margin: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def estimate_projected_hours(planned_hours: float, actual_hours: float, progress: float) -> float:
    if 0 < progress < 100 and actual_hours > 0:
        return actual_hours / (progress / 100.0)
    return planned_hours


def resolve_order_value(
    net_price: Optional[float],
    quantity: Optional[float],
    order_value: Optional[float],
) -> Optional[float]:
    if net_price is not None and quantity is not None:
        return net_price * quantity
    return order_value


def compute_field_edit_metrics(
    fields: FieldEditInput,
    config: Optional[RollupConfig] = None,
) -> FieldEditMetrics:
    config = resolve_config(config)
    pricing = (fields.work_center, fields.task_description, fields.part_name)

    projected_hours = estimate_projected_hours(fields.planned_hours, fields.actual_hours, fields.progress)
    projected_cost = calculate_labor_cost(projected_hours, *pricing, config=config)

    metrics = FieldEditMetrics(
        projected_hours=projected_hours,
        planned_cost=calculate_labor_cost(fields.planned_hours, *pricing, config=config),
        actual_cost=calculate_labor_cost(fields.actual_hours, *pricing, config=config),
        projected_cost=projected_cost,
        order_value=resolve_order_value(fields.net_price, fields.quantity, fields.order_value),
    )
    if metrics.order_value is not None:
        metrics.profit_value = metrics.order_value - projected_cost
        if metrics.order_value > 0:
            metrics.margin = metrics.profit_value / metrics.order_value * 100.0
    return metrics


def recalculate_field_edit(
    fields: Dict[str, Any],
    config: Optional[RollupConfig] = None,
) -> Dict[str, Any]:
    """
    Return `fields` with the approximate derived metrics merged in.

    Keys not used by the calculation are passed through untouched.
    """
    metrics = compute_field_edit_metrics(FieldEditInput.model_validate(fields or {}), config)
    return {**(fields or {}), **metrics.to_dict()}


def apply_field_edit(
    job_fields: Dict[str, Any],
    field: str,
    value: Any,
    config: Optional[RollupConfig] = None,
) -> Dict[str, Any]:
    """
    Set one job field; recalculate derived metrics only for hour, progress
    and order value edits.
    """
    updated = {**(job_fields or {}), field: value}
    if field not in RECALCULATION_FIELDS:
        return updated
    logger.debug(f"Field {field} edited, recalculating job metrics")
    return recalculate_field_edit(updated, config)
