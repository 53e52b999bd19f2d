"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    JOB ROLLUP MODULE
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Operation status inference and cost/progress rollup for shop-floor jobs.

    ┌──────────────────┐   ┌──────────────────┐   ┌──────────────────┐
    │ status_classifier│──▶│ labor_cost       │──▶│ rollup_engine    │──▶ ProcessedJob
    │ (per work order) │   │ (per operation)  │   │ (per job)        │
    └──────────────────┘   └──────────────────┘   └──────────────────┘

    field_edit        Approximate metrics from scalar job fields (separate path)
    workcenter_load   Hour buckets per work center
    progress_labels   Job status / priority labels from progress %

All engines are pure functions over caller-supplied records.
"""

from .field_edit import (
    FieldEditInput,
    FieldEditMetrics,
    apply_field_edit,
    recalculate_field_edit,
)
from .labor_cost import LaborRateTier, calculate_labor_cost, is_reduced_rate
from .models import (
    JobRecord,
    OperationRecord,
    OperationStatus,
    ProcessedJob,
    ProcessedOperation,
    WorkOrder,
)
from .progress_labels import (
    JobPriority,
    JobStatus,
    job_priority_from_progress,
    job_status_from_progress,
)
from .rollup_engine import process_job, rollup
from .settings import RollupConfig, RollupSettings
from .status_classifier import classify_and_cost, classify_operations
from .workcenter_load import WorkCenterLoad, summarize_work_center_load

__all__ = [
    # Models
    "OperationRecord",
    "OperationStatus",
    "ProcessedOperation",
    "WorkOrder",
    "JobRecord",
    "ProcessedJob",
    # Settings
    "RollupConfig",
    "RollupSettings",
    # Cost
    "LaborRateTier",
    "calculate_labor_cost",
    "is_reduced_rate",
    # Classification
    "classify_operations",
    "classify_and_cost",
    # Rollup
    "rollup",
    "process_job",
    # Field edit
    "FieldEditInput",
    "FieldEditMetrics",
    "recalculate_field_edit",
    "apply_field_edit",
    # Work centers
    "WorkCenterLoad",
    "summarize_work_center_load",
    # Labels
    "JobStatus",
    "JobPriority",
    "job_status_from_progress",
    "job_priority_from_progress",
]
