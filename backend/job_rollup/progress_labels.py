"""
Job Rollup - Progress Labels

Coarse job status and priority labels derived from a 0-100 progress figure,
as shown on the job list after an import.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from .models import coerce_float


class JobStatus(str, Enum):
    NEW = "New"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class JobPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


HIGH_PRIORITY_BELOW = 30
MEDIUM_PRIORITY_BELOW = 70


def _rounded_progress(progress: Any) -> int:
    return int(round(coerce_float(progress)))


def job_status_from_progress(progress: Any) -> JobStatus:
    p = _rounded_progress(progress)
    if p == 0:
        return JobStatus.NEW
    if p == 100:
        return JobStatus.COMPLETED
    return JobStatus.IN_PROGRESS


def job_priority_from_progress(progress: Any) -> JobPriority:
    """Less progress means higher priority."""
    p = _rounded_progress(progress)
    if p < HIGH_PRIORITY_BELOW:
        return JobPriority.HIGH
    if p < MEDIUM_PRIORITY_BELOW:
        return JobPriority.MEDIUM
    return JobPriority.LOW
