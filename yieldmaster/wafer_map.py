"""
Wafer map simulation.

Lays a square die grid over the wafer independently of the gross-die
estimate, then marks each die good or defective with an independent
Bernoulli draw at the model yield. The count shown on the map can therefore
differ from gross_dies().
"""
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import ListedColormap

from yieldmaster.config import (
    BACKGROUND_COLOR, BAD_DIE_COLOR, GOOD_DIE_COLOR, MAP_FIGSIZE, MAP_GAP_PIXELS_PER_DIE,
    MAP_GAP_THRESHOLD, MAP_MARGIN_MM, TEXT_COLOR, WAFER_COLOR, WAFER_EDGE_COLOR
)
from yieldmaster.logger import get_logger

logger = get_logger(__name__)


@dataclass
class WaferMap:
    """Container for one sampled wafer map."""
    cells: np.ndarray     # (n, 2) lower-left corners of each die, mm from the wafer centre
    good: np.ndarray      # (n,) bool, True where the die passed
    die_size: float       # side of a square die (mm)
    radius: float         # wafer radius (mm)

    @property
    def total(self) -> int:
        return int(len(self.cells))

    @property
    def good_count(self) -> int:
        return int(np.count_nonzero(self.good))

    @property
    def bad_count(self) -> int:
        return self.total - self.good_count


def is_inside_wafer(x, y, radius):
    """Return True where (x, y) lies within a circle of the given radius."""
    return (x**2 + y**2) <= radius**2


def _lattice(radius: float, die_size: float) -> np.ndarray:
    """Lower-left coordinates of the grid columns (and rows) across the wafer."""
    if radius <= 0 or die_size <= 0:
        return np.empty(0)
    return np.arange(-radius, radius, die_size)


def die_grid(diameter_mm: float, die_area_mm2: float) -> np.ndarray:
    """
    Return the lower-left corners of all grid cells whose centre lies on the wafer.

    Cells are squares of side sqrt(die_area_mm2), tiled across the wafer's
    bounding box starting from its top-left corner.
    """
    if diameter_mm <= 0 or die_area_mm2 <= 0:
        return np.empty((0, 2))

    radius = diameter_mm / 2
    die_size = np.sqrt(die_area_mm2)
    positions = _lattice(radius, die_size)

    xs, ys = np.meshgrid(positions, positions, indexing="ij")
    xs = xs.ravel()
    ys = ys.ravel()
    inside = is_inside_wafer(xs + die_size / 2, ys + die_size / 2, radius)
    return np.column_stack([xs[inside], ys[inside]])


def sample_die_status(n: int, yield_rate: float, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    Mark n dies good or defective, each with probability yield_rate of passing.

    Pass a seeded Generator for a reproducible map.
    """
    if n < 0:
        raise ValueError(f"Die count must be non-negative, got {n}")
    if rng is None:
        rng = np.random.default_rng()
    return rng.random(n) < yield_rate


def build_wafer_map(
    diameter_mm: float,
    die_area_mm2: float,
    yield_rate: float,
    rng: Optional[np.random.Generator] = None
) -> WaferMap:
    """Lay out the die grid and sample pass/fail for every die."""
    cells = die_grid(diameter_mm, die_area_mm2)
    good = sample_die_status(len(cells), yield_rate, rng)
    die_size = float(np.sqrt(die_area_mm2)) if die_area_mm2 > 0 else 0.0

    wafer_map = WaferMap(cells=cells, good=good, die_size=die_size, radius=max(diameter_mm / 2, 0.0))
    logger.debug(f"Sampled wafer map: {wafer_map.good_count}/{wafer_map.total} good dies")
    return wafer_map


def status_raster(wafer_map: WaferMap, pixels_per_die: int = 1):
    """
    Rasterise the map onto its die lattice.

    Returns (raster, extent): raster holds 1.0 for good dies, 0.0 for
    defective dies and NaN off the wafer, with row 0 at the bottom. With
    pixels_per_die > 1 each die is a square block whose last row and column
    are left NaN, which draws as a gap between dies.
    """
    lattice = _lattice(wafer_map.radius, wafer_map.die_size)
    n = len(lattice)
    dies = np.full((n, n), np.nan, dtype=np.float32)
    if wafer_map.total:
        # Cells sit exactly on the lattice, so rounding recovers their indices
        cols, rows = np.rint((wafer_map.cells - lattice[0]) / wafer_map.die_size).astype(int).T
        dies[rows, cols] = wafer_map.good

    raster = np.repeat(np.repeat(dies, pixels_per_die, axis=0), pixels_per_die, axis=1)
    if pixels_per_die > 1:
        edge = np.arange(n * pixels_per_die) % pixels_per_die == pixels_per_die - 1
        raster[edge, :] = np.nan
        raster[:, edge] = np.nan

    start = lattice[0] if n else 0.0
    stop = start + n * wafer_map.die_size
    return raster, (start, stop, start, stop)


def render_wafer_map(wafer_map: WaferMap, title: str = "Die Map on Wafer"):
    """
    Draw the wafer map and return the matplotlib Figure.

    Dies are drawn as a single raster image; large dies get a small gap so
    the grid stays readable.
    """
    fig, ax = plt.subplots(figsize=MAP_FIGSIZE)
    fig.patch.set_facecolor(BACKGROUND_COLOR)
    ax.set_facecolor(BACKGROUND_COLOR)

    # Draw wafer outline
    wafer = plt.Circle((0, 0), wafer_map.radius, facecolor=WAFER_COLOR,
                       edgecolor=WAFER_EDGE_COLOR, linewidth=2, zorder=0)
    ax.add_patch(wafer)

    if wafer_map.total:
        pixels_per_die = MAP_GAP_PIXELS_PER_DIE if wafer_map.die_size > MAP_GAP_THRESHOLD else 1
        raster, extent = status_raster(wafer_map, pixels_per_die)
        # NaN cells fall through to the colormap's transparent "bad" colour
        cmap = ListedColormap([BAD_DIE_COLOR, GOOD_DIE_COLOR])
        ax.imshow(raster, cmap=cmap, vmin=0.0, vmax=1.0, origin='lower',
                  extent=extent, interpolation='nearest', zorder=1)

    limit = wafer_map.radius + MAP_MARGIN_MM
    ax.set_xlim(-limit, limit)
    ax.set_ylim(-limit, limit)
    ax.set_aspect('equal')
    ax.axis('off')
    ax.set_title(title, color=TEXT_COLOR)
    ax.text(0.98, 0.02, "Map Simulation", transform=ax.transAxes, ha='right', va='bottom',
            color=TEXT_COLOR, fontsize=8, family='monospace')
    return fig


def figure_to_png(fig) -> bytes:
    """Serialise a figure to PNG bytes for download."""
    buf = BytesIO()
    fig.savefig(buf, format="png", facecolor=fig.get_facecolor())
    buf.seek(0)
    return buf.getvalue()
