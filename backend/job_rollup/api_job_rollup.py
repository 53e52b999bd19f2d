"""
════════════════════════════════════════════════════════════════════════════════════════════════════
JOB ROLLUP API - REST Endpoints for operation status, job rollup and field edits
════════════════════════════════════════════════════════════════════════════════════════════════════

Endpoints:
- POST /job-rollup/work-orders/classify - Classify and cost one work order
- POST /job-rollup/jobs/process - Full operation-level rollup of a job
- POST /job-rollup/jobs/field-edit - Approximate recalculation after a field edit
- POST /job-rollup/work-centers/load - Work-center hour buckets across jobs
- GET /job-rollup/config - Active rates and thresholds
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from .field_edit import apply_field_edit, recalculate_field_edit
from .models import JobRecord, WorkOrder
from .progress_labels import job_priority_from_progress, job_status_from_progress
from .rollup_engine import process_job
from .settings import RollupSettings
from .status_classifier import classify_and_cost
from .workcenter_load import peak_load_work_centers, summarize_work_center_load

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job-rollup", tags=["Job Rollup"])


# ═══════════════════════════════════════════════════════════════════════════════
# REQUEST MODELS
# ═══════════════════════════════════════════════════════════════════════════════

class ProcessJobRequest(BaseModel):
    job: JobRecord
    today: Optional[date] = Field(None, description="Reference date; server date when omitted")


class FieldEditRequest(BaseModel):
    job_fields: Dict[str, Any] = Field(default_factory=dict)
    field_name: Optional[str] = Field(None, description="Edited field; recalculates unconditionally when omitted")
    value: Any = None


class WorkCenterLoadRequest(BaseModel):
    jobs: List[JobRecord] = Field(default_factory=list)
    utilization: Dict[str, float] = Field(default_factory=dict)
    today: Optional[date] = None


# ═══════════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════

@router.get("/config")
async def get_config():
    """Active rates and thresholds."""
    return RollupSettings.get_config().to_dict()


@router.post("/work-orders/classify")
async def classify_work_order(work_order: WorkOrder):
    """Classify and cost the operations of one work order."""
    try:
        operations = classify_and_cost(work_order)
    except Exception as e:
        logger.error(f"Classification failed for work order {work_order.work_order_number}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return {
        "work_order_number": work_order.work_order_number,
        "operations": [op.model_dump(mode="json") for op in operations],
    }


@router.post("/jobs/process")
async def process_job_endpoint(request: ProcessJobRequest):
    """Operation-level rollup of a job, with its progress labels."""
    try:
        processed = process_job(request.job, today=request.today)
    except Exception as e:
        logger.error(f"Rollup failed for job {request.job.job_number}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return {
        "job": processed.model_dump(mode="json"),
        "status": job_status_from_progress(processed.completion_percentage).value,
        "priority": job_priority_from_progress(processed.completion_percentage).value,
    }


@router.post("/jobs/field-edit")
async def field_edit(request: FieldEditRequest):
    """Approximate metrics for a single-field edit (not the operation-level rollup)."""
    try:
        if request.field_name:
            return apply_field_edit(request.job_fields, request.field_name, request.value)
        return recalculate_field_edit(request.job_fields)
    except Exception as e:
        logger.error(f"Field edit recalculation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/work-centers/load")
async def work_center_load(request: WorkCenterLoadRequest):
    """Hour buckets per work center across the given jobs."""
    try:
        operations = []
        for job in request.jobs:
            operations.extend(process_job(job, today=request.today).operations)
        loads = summarize_work_center_load(operations, utilization=request.utilization)
    except Exception as e:
        logger.error(f"Work center load failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return {
        "work_centers": {name: load.to_dict() for name, load in loads.items()},
        "peak_load": peak_load_work_centers(loads),
    }
