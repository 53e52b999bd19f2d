"""
════════════════════════════════════════════════════════════════════════════════
OPERATION STATUS CLASSIFIER
════════════════════════════════════════════════════════════════════════════════

Infers a status for every operation of one work order from planned vs. actual
hours and the position of the operation in the routing.

PASS 1 (ascending operation_number, one operation at a time)
────────────────────────────────────────────────────────────
    A. work_center == "SR" and planned < 1                    → Ignored
    B. "complete" in task (any case) and actual > 0.8·planned  → Complete
    1. actual ≥ planned                                        → Complete
    2. actual > 0                                              → In Progress
    3. actual ≥ 0.7·planned and all later ops Complete/InProg  → Complete
    4. actual ≥ 0.3·planned and any later op In Progress       → Complete
    5. otherwise                                               → Not Started

PASS 2 (smoothing)
──────────────────
    Three consecutive In Progress → the first two become Complete.

LOOK-AHEAD NOTE
───────────────
Rules 3 and 4 read the status array while it is being filled in, so every
later operation still holds the Not Started default when they are evaluated.
They are also only reached with actual = 0, so in practice an operation with
planned > 0 and no booked hours always ends up Not Started. Kept as is until
product decides whether the rules were meant to see final statuses.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .labor_cost import calculate_labor_cost
from .models import OperationRecord, OperationStatus, ProcessedOperation, WorkOrder
from .settings import RollupConfig, resolve_config

logger = logging.getLogger(__name__)


IGNORED_WORK_CENTER = "SR"
IGNORED_MAX_PLANNED_HOURS = 1.0
COMPLETE_KEYWORD = "complete"
COMPLETE_KEYWORD_RATIO = 0.8
LOOKAHEAD_ALL_RATIO = 0.7
LOOKAHEAD_ANY_RATIO = 0.3
SMOOTHING_RUN = 3

_ACTIVE = (OperationStatus.COMPLETE, OperationStatus.IN_PROGRESS)

OperationInput = Union[OperationRecord, dict]


def sort_operations(operations: Iterable[OperationInput]) -> List[OperationRecord]:
    """Validate and sort ascending by operation_number (stable)."""
    records = [
        op if isinstance(op, OperationRecord) else OperationRecord.model_validate(op)
        for op in operations
    ]
    return sorted(records, key=lambda op: op.operation_number)


def _initial_status(
    op: OperationRecord,
    subsequent: Sequence[OperationStatus],
) -> OperationStatus:
    planned = op.planned_hours
    actual = op.actual_hours

    if op.work_center == IGNORED_WORK_CENTER and planned < IGNORED_MAX_PLANNED_HOURS:
        return OperationStatus.IGNORED
    if COMPLETE_KEYWORD in op.task_description.lower() and actual > COMPLETE_KEYWORD_RATIO * planned:
        return OperationStatus.COMPLETE
    if actual >= planned:
        return OperationStatus.COMPLETE
    if actual > 0:
        return OperationStatus.IN_PROGRESS

    all_subsequent_active = all(s in _ACTIVE for s in subsequent)
    any_subsequent_in_progress = any(s == OperationStatus.IN_PROGRESS for s in subsequent)

    if actual >= LOOKAHEAD_ALL_RATIO * planned and all_subsequent_active:
        return OperationStatus.COMPLETE
    if actual >= LOOKAHEAD_ANY_RATIO * planned and any_subsequent_in_progress:
        return OperationStatus.COMPLETE
    return OperationStatus.NOT_STARTED


def smooth_in_progress_runs(statuses: List[OperationStatus]) -> List[OperationStatus]:
    """
    Pass 2: for every window of three consecutive In Progress operations,
    mark the first two Complete. Windows are checked left to right against
    the array as already updated. Mutates and returns `statuses`.
    """
    for i in range(len(statuses) - (SMOOTHING_RUN - 1)):
        window = statuses[i:i + SMOOTHING_RUN]
        if all(s == OperationStatus.IN_PROGRESS for s in window):
            statuses[i] = OperationStatus.COMPLETE
            statuses[i + 1] = OperationStatus.COMPLETE
    return statuses


def classify_operations(
    operations: Iterable[OperationInput],
) -> List[Tuple[OperationRecord, OperationStatus]]:
    """
    Sort one work order's operations and assign each a status.

    Returns (operation, status) pairs in ascending operation_number order.
    """
    ordered = sort_operations(operations)
    statuses = [OperationStatus.NOT_STARTED] * len(ordered)

    # Look-ahead deliberately reads the in-progress array (see module docstring).
    for idx, op in enumerate(ordered):
        statuses[idx] = _initial_status(op, statuses[idx + 1:])

    smooth_in_progress_runs(statuses)
    return list(zip(ordered, statuses))


def cost_operation(
    op: OperationRecord,
    status: OperationStatus,
    work_order_number: str = "",
    config: Optional[RollupConfig] = None,
    job_number: str = "",
) -> ProcessedOperation:
    """Attach status and planned/actual/remaining burden costs to an operation."""
    remaining_hours = max(op.planned_hours - op.actual_hours, 0.0)
    pricing = (op.work_center, op.task_description, op.part_name)
    return ProcessedOperation(
        **op.model_dump(include=set(OperationRecord.model_fields)),
        job_number=job_number,
        work_order_number=work_order_number,
        status=status,
        cost_planned=calculate_labor_cost(op.planned_hours, *pricing, config=config),
        cost_actual=calculate_labor_cost(op.actual_hours, *pricing, config=config),
        cost_remaining=calculate_labor_cost(remaining_hours, *pricing, config=config),
    )


def classify_and_cost(
    work_order: Union[WorkOrder, dict],
    config: Optional[RollupConfig] = None,
    job_number: str = "",
) -> List[ProcessedOperation]:
    """
    Classify one work order and price every operation in it.

    job_number tags the results so work orders of different jobs stay apart
    once their operations are pooled.
    """
    if not isinstance(work_order, WorkOrder):
        work_order = WorkOrder.model_validate(work_order)
    config = resolve_config(config)

    processed = [
        cost_operation(op, status, work_order.work_order_number, config, job_number)
        for op, status in classify_operations(work_order.operations)
    ]
    logger.debug(
        f"Work order {work_order.work_order_number}: "
        f"{[(p.operation_number, p.status.value) for p in processed]}"
    )
    return processed
