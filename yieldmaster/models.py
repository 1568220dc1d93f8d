"""
Value records for the yield model.

Every record is frozen so that equal parameter sets hash equal and can be
used directly as memoisation keys.
"""
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Dict, Optional, Union

from yieldmaster.config import (
    DEFAULT_ALPHA, DEFAULT_D0, DEFAULT_DIAMETER_MM, DEFAULT_DIE_AREA_MM2,
    DEFAULT_EDGE_EXCLUSION_MM, DEFAULT_MODEL, DEFAULT_PATTERN_DENSITY,
    DEFAULT_PROCESS_MATURITY
)


class YieldModel(str, Enum):
    """Defect-density yield models. Members compare equal to their string value."""
    POISSON = "poisson"
    MURPHY = "murphy"
    NB = "nb"

    @property
    def label(self) -> str:
        return _MODEL_LABELS[self]

    @classmethod
    def values(cls) -> list[str]:
        """Returns the string values of all enum members."""
        return [item.value for item in cls]

    @classmethod
    def labels(cls) -> list[str]:
        """Returns the display labels of all enum members."""
        return [item.label for item in cls]

    @classmethod
    def from_label(cls, label: str) -> "YieldModel":
        """Look up a model by its display label. Raises ValueError for an unknown label."""
        for item in cls:
            if item.label == label:
                return item
        raise ValueError(f"Unknown yield model label: {label!r}")


_MODEL_LABELS = {
    YieldModel.POISSON: "Poisson",
    YieldModel.MURPHY: "Murphy",
    YieldModel.NB: "Negative Binomial",
}


@dataclass(frozen=True)
class ProcessParameters:
    """
    A single-wafer process snapshot.

    Nothing is validated here: degenerate geometry and out-of-range numbers
    are handled downstream by the model functions, which degrade to sentinel
    values instead of raising.
    """
    diameter_mm: float
    die_area_mm2: float
    d0: float
    alpha: float
    model: Union[YieldModel, str]
    pattern_density: float = DEFAULT_PATTERN_DENSITY
    process_maturity: float = DEFAULT_PROCESS_MATURITY
    edge_exclusion_mm: float = DEFAULT_EDGE_EXCLUSION_MM

    def __post_init__(self):
        # Known model names are stored as YieldModel so equal records hash equal.
        # Unknown names are kept as given and evaluate to a yield of 0.
        if isinstance(self.model, str) and self.model in YieldModel.values():
            object.__setattr__(self, "model", YieldModel(self.model))

    @classmethod
    def defaults(cls) -> "ProcessParameters":
        return cls(
            diameter_mm=DEFAULT_DIAMETER_MM,
            die_area_mm2=DEFAULT_DIE_AREA_MM2,
            d0=DEFAULT_D0,
            alpha=DEFAULT_ALPHA,
            model=YieldModel(DEFAULT_MODEL),
        )

    def replace(self, **changes) -> "ProcessParameters":
        return replace(self, **changes)


@dataclass(frozen=True)
class WaferStats:
    """Derived metrics for one wafer snapshot, at full float precision."""
    yield_rate: float
    total_dies: int
    good_dies: int
    efficiency: float
    effective_yield: float
    economics: Optional[float] = None

    def as_dict(self) -> Dict[str, Optional[float]]:
        """Plain-number mapping keyed the way the dashboard widgets expect."""
        data = asdict(self)
        return {
            "yieldRate": data["yield_rate"],
            "totalDies": data["total_dies"],
            "goodDies": data["good_dies"],
            "efficiency": data["efficiency"],
            "effectiveYield": data["effective_yield"],
            "economics": data["economics"],
        }
