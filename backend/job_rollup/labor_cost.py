"""
Job Rollup - Labor Burden Cost
==============================

Prices labor hours with a two-tier burden rate.

    cost = max(hours, 0) × rate(tier)

    tier = REDUCED  if  work_center == "REP ENG"
                    or  task_description.lower() == "engineering time"
                    or  part_name.lower() contains "rc" | "engineering" | "admin"
           DEFAULT  otherwise

Rates come from RollupConfig (199/h and 10/h by default).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

from .models import coerce_float, coerce_str
from .settings import RollupConfig, resolve_config

logger = logging.getLogger(__name__)


REDUCED_RATE_WORK_CENTER = "REP ENG"
REDUCED_RATE_TASK = "engineering time"
REDUCED_RATE_PART_KEYWORDS = ("rc", "engineering", "admin")


class LaborRateTier(str, Enum):
    DEFAULT = "default"
    REDUCED = "reduced"


def is_reduced_rate(work_center: Any = "", task_description: Any = "", part_name: Any = "") -> bool:
    """True when the operation is billed at the engineering/admin rate."""
    if coerce_str(work_center) == REDUCED_RATE_WORK_CENTER:
        return True
    if coerce_str(task_description).lower() == REDUCED_RATE_TASK:
        return True
    part = coerce_str(part_name).lower()
    return any(keyword in part for keyword in REDUCED_RATE_PART_KEYWORDS)


def rate_tier(work_center: Any = "", task_description: Any = "", part_name: Any = "") -> LaborRateTier:
    if is_reduced_rate(work_center, task_description, part_name):
        return LaborRateTier.REDUCED
    return LaborRateTier.DEFAULT


def rate_table(config: Optional[RollupConfig] = None) -> Dict[LaborRateTier, float]:
    config = resolve_config(config)
    return {
        LaborRateTier.DEFAULT: config.default_rate,
        LaborRateTier.REDUCED: config.reduced_rate,
    }


def calculate_labor_cost(
    hours: Any = 0.0,
    work_center: Any = "",
    task_description: Any = "",
    part_name: Any = "",
    config: Optional[RollupConfig] = None,
) -> float:
    """
    Burden cost of `hours` for an operation.

    Negative or non-numeric hours are priced as 0. Never raises.
    """
    tier = rate_tier(work_center, task_description, part_name)
    rate = rate_table(config)[tier]
    return max(coerce_float(hours), 0.0) * rate
