"""
Job Rollup - Settings
=====================

Rates and thresholds used by the rollup engines.

Defaults are the shop-floor values in use today (199/h burden rate, 10/h
engineering/admin rate, 5-day risk window). Each one may be overridden with
an environment variable:

    JOB_ROLLUP_DEFAULT_RATE=199
    JOB_ROLLUP_REDUCED_RATE=10
    JOB_ROLLUP_AT_RISK_DAYS=5
    JOB_ROLLUP_AT_RISK_REMAINING_FRACTION=0.5
    JOB_ROLLUP_PEAK_BACKLOG_HOURS=100
    JOB_ROLLUP_PEAK_UTILIZATION_PCT=80

Usage:
    from backend.job_rollup.settings import RollupSettings

    config = RollupSettings.get_config()
    rate = config.default_rate
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()


@dataclass
class RollupConfig:
    """Rates and thresholds for costing, risk flags and work-center load."""
    default_rate: float = 199.0
    reduced_rate: float = 10.0

    at_risk_days: int = 5
    at_risk_remaining_fraction: float = 0.5

    peak_backlog_hours: float = 100.0
    peak_utilization_pct: float = 80.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RollupSettings:
    """
    Singleton holding the active RollupConfig.

    Loaded lazily from the environment on first access; reset() forces a reload.
    """

    _instance: Optional[RollupConfig] = None

    @classmethod
    def _load_from_env(cls) -> RollupConfig:
        config = RollupConfig()

        env_mapping = {
            "JOB_ROLLUP_DEFAULT_RATE": ("default_rate", float),
            "JOB_ROLLUP_REDUCED_RATE": ("reduced_rate", float),
            "JOB_ROLLUP_AT_RISK_DAYS": ("at_risk_days", int),
            "JOB_ROLLUP_AT_RISK_REMAINING_FRACTION": ("at_risk_remaining_fraction", float),
            "JOB_ROLLUP_PEAK_BACKLOG_HOURS": ("peak_backlog_hours", float),
            "JOB_ROLLUP_PEAK_UTILIZATION_PCT": ("peak_utilization_pct", float),
        }

        for env_var, (attr_name, cast) in env_mapping.items():
            value = os.environ.get(env_var)
            if value:
                try:
                    setattr(config, attr_name, cast(value))
                    logger.info(f"Rollup setting {attr_name} = {value}")
                except ValueError:
                    logger.warning(f"Invalid value for {env_var}: {value}")

        return config

    @classmethod
    def get_config(cls) -> RollupConfig:
        if cls._instance is None:
            cls._instance = cls._load_from_env()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached config so the next access reloads the environment."""
        cls._instance = None


def resolve_config(config: Optional[RollupConfig] = None) -> RollupConfig:
    """Return the given config, or the active settings when None."""
    return config if config is not None else RollupSettings.get_config()
