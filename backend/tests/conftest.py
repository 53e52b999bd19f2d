"""
Shared fixtures for the backend test suite.
"""
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from backend.api import app
from backend.job_rollup.settings import RollupSettings


ROLLUP_ENV_VARS = (
    "JOB_ROLLUP_DEFAULT_RATE",
    "JOB_ROLLUP_REDUCED_RATE",
    "JOB_ROLLUP_AT_RISK_DAYS",
    "JOB_ROLLUP_AT_RISK_REMAINING_FRACTION",
    "JOB_ROLLUP_PEAK_BACKLOG_HOURS",
    "JOB_ROLLUP_PEAK_UTILIZATION_PCT",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from default rates and thresholds."""
    for var in ROLLUP_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    RollupSettings.reset()
    yield
    RollupSettings.reset()


@pytest.fixture
def today():
    return date(2026, 10, 19)


@pytest.fixture
def test_client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def sample_work_order():
    """Two-step work order, first step finished, second untouched."""
    return {
        "work_order_number": "WO-1001",
        "operations": [
            {"operation_number": 20, "planned_hours": 5, "actual_hours": 0, "work_center": "MILL"},
            {"operation_number": 10, "planned_hours": 10, "actual_hours": 10, "work_center": "MILL"},
        ],
    }


@pytest.fixture
def sample_job(today):
    """Single-operation job: 100 h planned, 40 h booked, due in 3 days."""
    return {
        "job_number": "J-5001",
        "due_date": (today + timedelta(days=3)).isoformat(),
        "order_value": None,
        "work_orders": [
            {
                "work_order_number": "WO-1",
                "operations": [
                    {
                        "operation_number": 10,
                        "planned_hours": 100,
                        "actual_hours": 40,
                        "work_center": "MILL",
                        "task_description": "Machine housing",
                        "part_name": "Housing",
                    }
                ],
            }
        ],
    }


@pytest.fixture
def di_job():
    """Dismantle & inspect job: one operation per work order."""
    return {
        "job_number": "J-DI-1",
        "work_orders": [
            {
                "work_order_number": "WO-A",
                "operations": [{"operation_number": 10, "planned_hours": 4, "part_name": "Dismantling & Inspection - Gearbox"}],
            },
            {
                "work_order_number": "WO-B",
                "operations": [{"operation_number": 10, "planned_hours": 2, "part_name": "DNI Pump"}],
            },
        ],
    }
