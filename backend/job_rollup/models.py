"""
════════════════════════════════════════════════════════════════════════════════
JOB ROLLUP MODELS - Pydantic records for operations, work orders and jobs
════════════════════════════════════════════════════════════════════════════════

Input records arrive already normalized by the ingestion layer, but every field
is still coerced on the way in: missing or non-numeric hours become 0, missing
strings become "", unparseable or non-text due dates become None. Nothing here raises on
malformed values.

Records:
- OperationRecord / ProcessedOperation
- WorkOrder
- JobRecord / ProcessedJob
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

import pandas as pd
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# COERCION
# ═══════════════════════════════════════════════════════════════════════════════

def coerce_float(value: Any, default: float = 0.0) -> float:
    """Convert value to float; None, bools, NaN, inf and non-numeric values give default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Non-numeric value {value!r} coerced to {default}")
        return default
    if not math.isfinite(result):
        return default
    return result


def coerce_optional_float(value: Any) -> Optional[float]:
    """Like coerce_float, but a missing value stays None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    # present but non-numeric counts as 0, not as missing
    return coerce_float(value)


def coerce_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def coerce_date(value: Any) -> Optional[date]:
    """
    Parse a due date; anything unparseable is treated as absent.

    Only text is parsed. Bare numbers (spreadsheet serials, epoch offsets) are
    ambiguous and would land in 1970, so they count as missing.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        logger.debug(f"Non-text due date {value!r} treated as missing")
        return None
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        logger.debug(f"Unparseable due date {value!r} treated as missing")
        return None
    return parsed.date()


# ═══════════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════════

class OperationStatus(str, Enum):
    """Inferred completion status of an operation."""
    COMPLETE = "Complete"
    IN_PROGRESS = "In Progress"
    NOT_STARTED = "Not Started"
    IGNORED = "Ignored"


# ═══════════════════════════════════════════════════════════════════════════════
# OPERATIONS
# ═══════════════════════════════════════════════════════════════════════════════

class OperationRecord(BaseModel):
    """
    One manufacturing step within a work order.

    operation_number orders the steps inside its work order only; the same
    number can appear in other work orders of the job.
    """

    operation_number: int = Field(0, description="Sequence within the work order")
    planned_hours: float = Field(0.0, description="Planned labor hours")
    actual_hours: float = Field(0.0, description="Booked labor hours")
    remaining_work: float = Field(0.0, description="Caller-supplied remaining work (informational)")
    work_center: str = Field("", description="Work center code")
    task_description: str = Field("", description="Operation short text")
    part_name: str = Field("", description="Part / component name")

    @field_validator("operation_number", mode="before")
    @classmethod
    def parse_operation_number(cls, v):
        return int(coerce_float(v))

    @field_validator("planned_hours", "actual_hours", "remaining_work", mode="before")
    @classmethod
    def parse_hours(cls, v):
        return coerce_float(v)

    @field_validator("work_center", "task_description", "part_name", mode="before")
    @classmethod
    def parse_text(cls, v):
        return coerce_str(v)


class ProcessedOperation(OperationRecord):
    """OperationRecord annotated with its inferred status and burden costs."""

    job_number: str = ""
    work_order_number: str = ""
    status: OperationStatus = OperationStatus.NOT_STARTED
    cost_planned: float = 0.0
    cost_actual: float = 0.0
    cost_remaining: float = 0.0

    @field_validator("job_number", "work_order_number", mode="before")
    @classmethod
    def parse_identifiers(cls, v):
        return coerce_str(v)


class WorkOrder(BaseModel):
    """A group of operations belonging to one job, in any order."""

    work_order_number: str = ""
    operations: List[OperationRecord] = Field(default_factory=list)

    @field_validator("work_order_number", mode="before")
    @classmethod
    def parse_work_order_number(cls, v):
        return coerce_str(v)

    @field_validator("operations", mode="before")
    @classmethod
    def parse_operations(cls, v):
        return v if v is not None else []


# ═══════════════════════════════════════════════════════════════════════════════
# JOBS
# ═══════════════════════════════════════════════════════════════════════════════

class JobRecord(BaseModel):
    job_number: str = ""
    due_date: Optional[date] = None
    order_value: Optional[float] = None
    work_orders: List[WorkOrder] = Field(default_factory=list)

    @field_validator("job_number", mode="before")
    @classmethod
    def parse_job_number(cls, v):
        return coerce_str(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v):
        return coerce_date(v)

    @field_validator("order_value", mode="before")
    @classmethod
    def parse_order_value(cls, v):
        return coerce_optional_float(v)

    @field_validator("work_orders", mode="before")
    @classmethod
    def parse_work_orders(cls, v):
        return v if v is not None else []


class ProcessedJob(JobRecord):
    """
    Job-level rollup of classified, costed operations.

    days_until_due is None when the job has no due date; profit_value and
    profit_margin are None unless an order value was supplied (margin also
    None for a non-positive order value).
    """

    operations: List[ProcessedOperation] = Field(default_factory=list)

    total_planned_hours: float = 0.0
    total_actual_hours: float = 0.0
    total_remaining_hours: float = 0.0
    completion_percentage: float = 0.0
    projected_hours: float = 0.0

    total_planned_cost: float = 0.0
    total_actual_cost: float = 0.0
    projected_cost: float = 0.0

    days_until_due: Optional[int] = None
    is_overdue: bool = False
    is_at_risk: bool = False
    is_di_job: bool = False

    profit_value: Optional[float] = None
    profit_margin: Optional[float] = None
