"""
Overview tab data and charts.

The yield trend is an illustrative random walk that ends at the current
simulated yield; the Pareto tables are fixed per model family. Neither is
derived from measured lot data.
"""
from dataclasses import dataclass
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np

from yieldmaster.config import (
    BACKGROUND_COLOR, CLUSTERED_DEFECT_PARETO, GRID_COLOR, RANDOM_DEFECT_PARETO,
    TEXT_COLOR, TREND_FIRST_LOT, TREND_LINE_COLOR, TREND_LOTS, TREND_STEP_PCT
)
from yieldmaster.models import YieldModel


@dataclass
class TrendPoint:
    lot: str
    yield_pct: float


@dataclass
class ParetoItem:
    name: str
    value: float
    color: str


def yield_trend(current_yield: float, lots: int = TREND_LOTS,
                rng: Optional[np.random.Generator] = None) -> List[TrendPoint]:
    """
    Random walk around the current yield, one point per lot.

    Each step moves at most TREND_STEP_PCT / 2 percentage points and is
    clamped to [0, 100]. The last lot is pinned to the current yield.
    """
    if lots <= 0:
        return []
    if rng is None:
        rng = np.random.default_rng()

    points = []
    y = current_yield * 100
    for i in range(lots):
        y = y + (rng.random() - 0.5) * TREND_STEP_PCT
        y = min(max(y, 0.0), 100.0)
        points.append(TrendPoint(lot=f"L-{TREND_FIRST_LOT + i}", yield_pct=round(y, 1)))

    points[-1].yield_pct = round(current_yield * 100, 1)
    return points


def defect_pareto(model) -> List[ParetoItem]:
    """Defect Pareto for the model family: random particles for Poisson, clustering otherwise."""
    table = RANDOM_DEFECT_PARETO if model == YieldModel.POISSON else CLUSTERED_DEFECT_PARETO
    return [ParetoItem(name=name, value=value, color=color) for name, value, color in table]


def _style_axes(fig, ax):
    fig.patch.set_facecolor(BACKGROUND_COLOR)
    ax.set_facecolor(BACKGROUND_COLOR)
    ax.tick_params(colors=TEXT_COLOR, labelsize=9)
    for spine in ax.spines.values():
        spine.set_color(GRID_COLOR)


def plot_yield_trend(points: List[TrendPoint]):
    """Line chart of the yield trend, 0-100 % on the y axis."""
    fig, ax = plt.subplots(figsize=(8, 4))
    _style_axes(fig, ax)

    lots = [p.lot for p in points]
    values = [p.yield_pct for p in points]
    ax.plot(lots, values, color=TREND_LINE_COLOR, linewidth=3, marker='o',
            markerfacecolor=BACKGROUND_COLOR, markeredgewidth=2)
    ax.set_ylim(0, 100)
    ax.set_ylabel("Yield (%)", color=TEXT_COLOR)
    ax.grid(axis='y', color=GRID_COLOR, linestyle='--')
    # Label every 5th lot
    ax.set_xticks(range(0, len(lots), 5))
    ax.set_xticklabels(lots[::5])
    ax.set_title(f"Yield Trend (Last {len(points)} Lots)", color=TEXT_COLOR)
    return fig


def plot_defect_pareto(items: List[ParetoItem]):
    """Horizontal bar chart, largest contributor on top."""
    fig, ax = plt.subplots(figsize=(8, 4))
    _style_axes(fig, ax)

    ordered = list(reversed(items))
    ax.barh([i.name for i in ordered], [i.value for i in ordered],
            color=[i.color for i in ordered], height=0.6)
    ax.set_xlabel("Share of Defects (%)", color=TEXT_COLOR)
    ax.grid(axis='x', color=GRID_COLOR, linestyle='--')
    ax.set_title("Defect Pareto Analysis", color=TEXT_COLOR)
    return fig
