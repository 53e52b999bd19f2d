"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
                    WORK CENTER LOAD SUMMARY
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Per work-center hour buckets computed from operation hours (not from the
inferred statuses).

BUCKETS
═══════

    in progress  = Σ (planned - actual)   over ops with 0 < actual < planned
    backlog      = Σ planned              over ops with actual = 0
    available    = max(0, planned - in progress - backlog)
    remaining    = in progress + backlog
    efficiency   = round(actual / planned × 100)      (0 when planned = 0)
    jobs         = distinct (job_number, work_order_number) pairs

A work center is at peak load when backlog exceeds 100 h or its utilization
is above 80 % (both thresholds configurable).
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from .models import ProcessedOperation
from .settings import RollupConfig, resolve_config

logger = logging.getLogger(__name__)


@dataclass
class WorkCenterLoad:
    work_center: str
    total_planned_hours: float = 0.0
    total_actual_hours: float = 0.0
    in_progress_hours: float = 0.0
    backlog_hours: float = 0.0
    available_hours: float = 0.0
    remaining_hours: float = 0.0
    efficiency: int = 0
    utilization_rate: float = 0.0
    total_jobs: int = 0
    total_operations: int = 0
    avg_hours_per_job: float = 0.0
    peak_load: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def operations_to_frame(operations: Iterable[ProcessedOperation]) -> pd.DataFrame:
    """Flatten processed operations into a DataFrame (one row per operation)."""
    rows = [op.model_dump(mode="json") for op in operations]
    columns = list(ProcessedOperation.model_fields)
    return pd.DataFrame(rows, columns=columns)


def summarize_work_center_load(
    operations: Iterable[ProcessedOperation],
    utilization: Optional[Dict[str, float]] = None,
    config: Optional[RollupConfig] = None,
) -> Dict[str, WorkCenterLoad]:
    """
    Group operations by work center and compute hour buckets.

    Args:
        operations: Processed operations, from any number of jobs
        utilization: Optional utilization % per work center
        config: Peak-load thresholds; active settings when None

    Returns:
        Dict work_center -> WorkCenterLoad, sorted by work center
    """
    config = resolve_config(config)
    utilization = utilization or {}
    df = operations_to_frame(operations)
    if df.empty:
        return {}

    planned = df["planned_hours"].astype(float)
    actual = df["actual_hours"].astype(float)
    df["in_progress_hours"] = np.where((actual > 0) & (actual < planned), planned - actual, 0.0)
    df["backlog_hours"] = np.where(actual == 0, planned, 0.0)

    loads: Dict[str, WorkCenterLoad] = {}
    for work_center, group in df.groupby("work_center", sort=True):
        total_planned = float(group["planned_hours"].sum())
        total_actual = float(group["actual_hours"].sum())
        in_progress = float(group["in_progress_hours"].sum())
        backlog = float(group["backlog_hours"].sum())
        n_jobs = int(len(group[["job_number", "work_order_number"]].drop_duplicates()))
        util = float(utilization.get(work_center, 0.0))

        loads[work_center] = WorkCenterLoad(
            work_center=work_center,
            total_planned_hours=total_planned,
            total_actual_hours=total_actual,
            in_progress_hours=in_progress,
            backlog_hours=backlog,
            available_hours=max(0.0, total_planned - in_progress - backlog),
            remaining_hours=in_progress + backlog,
            efficiency=int(round(total_actual / total_planned * 100)) if total_planned > 0 else 0,
            utilization_rate=util,
            total_jobs=n_jobs,
            total_operations=int(len(group)),
            avg_hours_per_job=total_planned / n_jobs if n_jobs > 0 else 0.0,
            peak_load=backlog > config.peak_backlog_hours or util > config.peak_utilization_pct,
        )

    logger.info(f"Work center load computed for {len(loads)} work centers")
    return loads


def peak_load_work_centers(loads: Dict[str, WorkCenterLoad]) -> List[str]:
    return [name for name, load in loads.items() if load.peak_load]
