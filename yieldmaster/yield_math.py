"""
Yield and die-count model.

Pure functions of explicit numeric parameters. None of them raise for numeric
input: degenerate geometry, unknown models and non-positive die counts map to
a 0 sentinel, and every other out-of-domain value flows through the formulas
with IEEE float semantics (inf / nan) instead of a Python exception.
"""
from functools import lru_cache
from typing import Optional

import numpy as np

from yieldmaster.config import DEFAULT_FAB_UTILIZATION, MM2_PER_CM2
from yieldmaster.logger import get_logger
from yieldmaster.models import ProcessParameters, WaferStats, YieldModel

logger = get_logger(__name__)


def compute_yield(model, d0, area_mm2, alpha, pattern_density=1.0, process_maturity=1.0) -> float:
    """
    Compute the probability that a die is free of fatal defects.

    The defect parameter is computed on the critical area only:

        product = d0 * (area_mm2 * pattern_density) / 100

    where d0 is in defects/cm² and the area is converted from mm² to cm².
    The random-defect yield of the selected model is then scaled by
    process_maturity, the systematic-yield ceiling.

    Murphy uses the closed form (1 / (1 + D0*A))**2, not the Murphy integral.
    An unknown model gives 0.
    """
    with np.errstate(all="ignore"):
        critical_area = np.float64(area_mm2) * np.float64(pattern_density)
        product = np.float64(d0) * (critical_area / MM2_PER_CM2)

        if model == YieldModel.POISSON:
            random_yield = np.exp(-product)
        elif model == YieldModel.MURPHY:
            if product == 0:
                random_yield = 1.0
            else:
                random_yield = np.power(1.0 / (1.0 + product), 2)
        elif model == YieldModel.NB:
            alpha = np.float64(alpha)
            random_yield = np.power(1.0 + product / alpha, -alpha)
        else:
            random_yield = 0.0

        return float(random_yield * np.float64(process_maturity))


def _usable_wafer_area(diameter_mm, edge_exclusion_mm) -> float:
    """Area inside the edge exclusion ring, or 0 for a degenerate wafer."""
    effective_diameter = diameter_mm - 2 * edge_exclusion_mm
    if effective_diameter <= 0:
        return 0.0
    with np.errstate(all="ignore"):
        radius = np.float64(effective_diameter) / 2
        return float(np.pi * radius * radius)


def gross_dies(diameter_mm, die_area_mm2, edge_exclusion_mm=0.0) -> int:
    """
    Estimate the gross dies on a wafer as usable wafer area / die area.

    A coarse area ratio: no grid-packing loss at the rim is modelled.
    """
    wafer_area = _usable_wafer_area(diameter_mm, edge_exclusion_mm)
    if wafer_area == 0 or die_area_mm2 <= 0:
        return 0

    with np.errstate(all="ignore"):
        count = np.floor(wafer_area / np.float64(die_area_mm2))
    if not np.isfinite(count):
        return 0
    return int(count)


def good_dies(gross_dies, yield_rate) -> int:
    """Expected defect-free dies. Floors so the result never exceeds gross_dies."""
    with np.errstate(all="ignore"):
        count = np.floor(np.float64(gross_dies) * np.float64(yield_rate))
    if not np.isfinite(count):
        return 0
    return int(count)


def efficiency(gross_dies, die_area_mm2, diameter_mm, edge_exclusion_mm=0.0) -> float:
    """
    Ratio of total die area to usable wafer area.

    gross_dies is taken as given; pass the count computed for the same
    geometry or the ratio is meaningless.
    """
    wafer_area = _usable_wafer_area(diameter_mm, edge_exclusion_mm)
    if wafer_area == 0:
        return 0.0
    with np.errstate(all="ignore"):
        return float(np.float64(gross_dies) * np.float64(die_area_mm2) / wafer_area)


def effective_yield(params: ProcessParameters, repair_pct) -> float:
    """
    Yield after redundancy/repair removes part of the fatal area.

    A defect landing in the repairable share of the die is assumed to be
    fixed, so the die behaves as if its area were die_area * (1 - repair_pct/100).
    Pattern density and process maturity are not applied here.
    """
    if repair_pct is None or not repair_pct > 0:
        return compute_yield(params.model, params.d0, params.die_area_mm2, params.alpha)

    effective_area = params.die_area_mm2 * (1 - repair_pct / 100)
    return compute_yield(params.model, params.d0, effective_area, params.alpha)


def economics(wafer_cost, good_dies, fab_utilization=DEFAULT_FAB_UTILIZATION) -> float:
    """
    Cost per good die (CPGD).

    Low fab utilization spreads fixed cost over fewer wafers, so the wafer
    cost is divided by the utilization. A non-positive utilization falls back
    to the raw wafer cost; no good dies gives 0.
    """
    if good_dies <= 0:
        return 0.0
    with np.errstate(all="ignore"):
        effective_wafer_cost = np.float64(wafer_cost)
        if fab_utilization > 0:
            effective_wafer_cost = effective_wafer_cost / np.float64(fab_utilization)
        return float(effective_wafer_cost / np.float64(good_dies))


@lru_cache(maxsize=256)
def compute_stats(
    params: ProcessParameters,
    repair_pct: float = 0.0,
    wafer_cost: Optional[float] = None,
    fab_utilization: float = DEFAULT_FAB_UTILIZATION
) -> WaferStats:
    """
    Compute every wafer metric for one parameter snapshot.

    Cached on the value of its arguments: re-running the dashboard with an
    unchanged parameter record returns the same WaferStats instance.
    """
    logger.debug(f"Computing wafer stats for {params} (repair={repair_pct}%, cost={wafer_cost})")

    yield_rate = compute_yield(
        params.model, params.d0, params.die_area_mm2, params.alpha,
        params.pattern_density, params.process_maturity
    )
    total = gross_dies(params.diameter_mm, params.die_area_mm2, params.edge_exclusion_mm)
    good = good_dies(total, yield_rate)
    area_efficiency = efficiency(total, params.die_area_mm2, params.diameter_mm, params.edge_exclusion_mm)
    repaired_yield = effective_yield(params, repair_pct)
    cost = economics(wafer_cost, good, fab_utilization) if wafer_cost is not None else None

    return WaferStats(
        yield_rate=yield_rate,
        total_dies=total,
        good_dies=good,
        efficiency=area_efficiency,
        effective_yield=repaired_yield,
        economics=cost,
    )
