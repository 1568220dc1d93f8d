"""Wafer yield, die count and cost-per-good-die model."""
from yieldmaster.models import ProcessParameters, WaferStats, YieldModel
from yieldmaster.yield_math import (
    compute_stats, compute_yield, economics, effective_yield, efficiency,
    good_dies, gross_dies
)

__all__ = [
    "ProcessParameters",
    "WaferStats",
    "YieldModel",
    "compute_stats",
    "compute_yield",
    "economics",
    "effective_yield",
    "efficiency",
    "good_dies",
    "gross_dies",
]
