"""
KPI formatting for the dashboard.

The model returns full-precision floats; rounding, percentages and thousands
grouping happen only here.
"""
from dataclasses import dataclass
from typing import List

import numpy as np

from yieldmaster.models import WaferStats

NOT_AVAILABLE = "n/a"


@dataclass
class KPICard:
    title: str
    value: str
    subtext: str


def format_yield(rate: float) -> str:
    """0.60653 -> '60.65%'"""
    if not np.isfinite(rate):
        return NOT_AVAILABLE
    return f"{rate * 100:.2f}%"


def format_count(count: int) -> str:
    """1234 -> '1,234'"""
    return f"{round(count):,}"


def format_efficiency(ratio: float) -> str:
    """Area utilisation to one decimal; a missing ratio shows as 0.0%."""
    if not ratio or not np.isfinite(ratio):
        ratio = 0.0
    return f"{ratio * 100:.1f}%"


def format_cost(cost: float) -> str:
    if not np.isfinite(cost):
        return NOT_AVAILABLE
    return f"${cost:,.2f}"


def kpi_cards(stats: WaferStats, show_effective_yield: bool = False) -> List[KPICard]:
    """Build the KPI cards shown above the wafer map."""
    cards = [
        KPICard("Projected Yield", format_yield(stats.yield_rate), "Theoretical stochastic limit"),
        KPICard("Good Dies", format_count(stats.good_dies), f"{stats.total_dies} Gross Dies"),
        KPICard("Efficiency", format_efficiency(stats.efficiency), "Area Utilization"),
    ]
    if show_effective_yield:
        cards.append(KPICard("Effective Yield", format_yield(stats.effective_yield), "With repair/redundancy"))
    if stats.economics is not None:
        cards.append(KPICard("Cost per Good Die", format_cost(stats.economics), "CPGD"))
    return cards
