"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    JOB ROLLUP ENGINE
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Aggregates classified, costed operations into job-level metrics.

METRIC DEFINITIONS
══════════════════

Let ops be every operation of the job (all work orders), pᵢ planned, aᵢ actual.

1. HOURS
   ──────
       P = Σ pᵢ          A = Σ aᵢ          R = Σ max(pᵢ - aᵢ, 0)

2. COMPLETION
   ───────────
       C = clamp(A / P × 100, 0, 100)      (C = 0 when P = 0)

3. PROJECTED HOURS
   ────────────────
       H = A + R   if 0 < C < 100
       H = P       otherwise

4. COST
   ─────
       planned cost   = Σ cost(pᵢ)
       actual cost    = Σ cost(aᵢ)
       projected cost = Σ cost(max(pᵢ - aᵢ, 0)) + actual cost

   Projected cost is NOT cost(H): rates differ per operation.

5. DUE DATE
   ─────────
       days   = due_date - today              (calendar days, None without due date)
       overdue = days < 0
       at risk = days ≤ 5  and  R > 0.5 × P

6. D&I JOB
   ────────
       every work order has exactly one operation whose part name mentions
       dismantling & inspection (and the job has at least one work order)

7. PROFIT (only when order value V is known)
   ──────
       profit = V - projected cost
       margin = profit / V × 100              (None when V ≤ 0)

This is the full-fidelity path. The scalar field-edit recalculator uses
different formulas and its numbers are not expected to match these.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Union

from .models import JobRecord, ProcessedJob, ProcessedOperation
from .settings import RollupConfig, resolve_config
from .status_classifier import classify_and_cost

logger = logging.getLogger(__name__)


DI_KEYWORDS = (
    "dismantling & inspection",
    "dni",
    "dismantling and inspect",
    "dismantling & inspect",
)


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# METRIC HELPERS
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def compute_completion_percentage(total_planned: float, total_actual: float) -> float:
    if total_planned <= 0:
        return 0.0
    return min(max(total_actual / total_planned * 100.0, 0.0), 100.0)


def compute_projected_hours(
    completion_percentage: float,
    total_planned: float,
    total_actual: float,
    total_remaining: float,
) -> float:
    if 0 < completion_percentage < 100:
        return total_actual + total_remaining
    return total_planned


def compute_days_until_due(due_date: Optional[date], today: date) -> Optional[int]:
    if due_date is None:
        return None
    return (due_date - today).days


def is_di_job(job: JobRecord) -> bool:
    """Dismantle & inspect job: one operation per work order, D&I part name."""
    if not job.work_orders:
        return False
    for work_order in job.work_orders:
        if len(work_order.operations) != 1:
            return False
        part = work_order.operations[0].part_name.lower()
        if not any(keyword in part for keyword in DI_KEYWORDS):
            return False
    return True


def compute_profit(order_value: Optional[float], projected_cost: float):
    """Return (profit_value, profit_margin); both None without an order value."""
    if order_value is None:
        return None, None
    profit_value = order_value - projected_cost
    profit_margin = profit_value / order_value * 100.0 if order_value > 0 else None
    return profit_value, profit_margin


# ════════════════════════════════════════════════════════════════════════════════════════════════════
# ROLLUP
# ════════════════════════════════════════════════════════════════════════════════════════════════════

def rollup(
    job: Union[JobRecord, dict],
    operations: Iterable[ProcessedOperation],
    today: date,
    config: Optional[RollupConfig] = None,
) -> ProcessedJob:
    """
    Aggregate already classified and costed operations of `job`.

    Args:
        job: Job header and work orders (used for due date, order value, D&I check)
        operations: Processed operations of every work order, flattened
        today: Reference date for due-date metrics
        config: Risk thresholds; active settings when None

    Returns:
        ProcessedJob
    """
    if not isinstance(job, JobRecord):
        job = JobRecord.model_validate(job)
    config = resolve_config(config)
    ops: List[ProcessedOperation] = list(operations)

    total_planned = sum(op.planned_hours for op in ops)
    total_actual = sum(op.actual_hours for op in ops)
    total_remaining = sum(max(op.planned_hours - op.actual_hours, 0.0) for op in ops)

    completion = compute_completion_percentage(total_planned, total_actual)
    projected_hours = compute_projected_hours(completion, total_planned, total_actual, total_remaining)

    total_planned_cost = sum(op.cost_planned for op in ops)
    total_actual_cost = sum(op.cost_actual for op in ops)
    projected_cost = sum(op.cost_remaining for op in ops) + total_actual_cost

    days_until_due = compute_days_until_due(job.due_date, today)
    is_overdue = days_until_due is not None and days_until_due < 0
    is_at_risk = (
        days_until_due is not None
        and days_until_due <= config.at_risk_days
        and total_remaining > config.at_risk_remaining_fraction * total_planned
    )

    profit_value, profit_margin = compute_profit(job.order_value, projected_cost)

    result = ProcessedJob(
        **job.model_dump(include=set(JobRecord.model_fields)),
        operations=ops,
        total_planned_hours=total_planned,
        total_actual_hours=total_actual,
        total_remaining_hours=total_remaining,
        completion_percentage=completion,
        projected_hours=projected_hours,
        total_planned_cost=total_planned_cost,
        total_actual_cost=total_actual_cost,
        projected_cost=projected_cost,
        days_until_due=days_until_due,
        is_overdue=is_overdue,
        is_at_risk=is_at_risk,
        is_di_job=is_di_job(job),
        profit_value=profit_value,
        profit_margin=profit_margin,
    )

    logger.info(
        f"Job {job.job_number}: {len(ops)} ops, {completion:.1f}% complete, "
        f"overdue={is_overdue}, at_risk={is_at_risk}"
    )
    return result


def process_job(
    job: Union[JobRecord, dict],
    today: Optional[date] = None,
    config: Optional[RollupConfig] = None,
) -> ProcessedJob:
    """
    Classify and cost every work order of `job`, then roll up.

    Work orders are classified independently and concatenated in input order.
    `today` defaults to the local date.
    """
    if not isinstance(job, JobRecord):
        job = JobRecord.model_validate(job)
    config = resolve_config(config)
    if today is None:
        today = date.today()

    operations: List[ProcessedOperation] = []
    for work_order in job.work_orders:
        operations.extend(classify_and_cost(work_order, config, job_number=job.job_number))

    return rollup(job, operations, today, config)
