import math

import pytest

from yieldmaster.display import (
    NOT_AVAILABLE, KPICard, format_cost, format_count, format_efficiency, format_yield, kpi_cards
)
from yieldmaster.models import WaferStats


@pytest.fixture
def reference_stats() -> WaferStats:
    return WaferStats(
        yield_rate=math.exp(-0.5),
        total_dies=706,
        good_dies=428,
        efficiency=0.9988,
        effective_yield=0.7788,
    )


def test_format_yield():
    assert format_yield(math.exp(-0.5)) == "60.65%"
    assert format_yield(1.0) == "100.00%"
    assert format_yield(float("nan")) == NOT_AVAILABLE


def test_format_count_groups_thousands():
    assert format_count(428) == "428"
    assert format_count(70685) == "70,685"


@pytest.mark.parametrize("ratio, expected", [(0.9532, "95.3%"), (0.0, "0.0%"), (None, "0.0%"), (float("nan"), "0.0%")])
def test_format_efficiency(ratio, expected):
    assert format_efficiency(ratio) == expected


def test_format_cost():
    assert format_cost(23.3641) == "$23.36"
    assert format_cost(12500.0) == "$12,500.00"
    assert format_cost(float("inf")) == NOT_AVAILABLE


def test_kpi_cards_default(reference_stats):
    cards = kpi_cards(reference_stats)
    assert [c.title for c in cards] == ["Projected Yield", "Good Dies", "Efficiency"]
    assert all(isinstance(c, KPICard) for c in cards)
    assert cards[0].value == "60.65%"
    assert cards[1].value == "428"
    assert cards[1].subtext == "706 Gross Dies"
    assert cards[2].value == "99.9%"


def test_kpi_cards_with_repair_and_cost(reference_stats):
    stats = WaferStats(**{**reference_stats.__dict__, "economics": 23.3641})
    cards = kpi_cards(stats, show_effective_yield=True)
    titles = [c.title for c in cards]
    assert titles[-2:] == ["Effective Yield", "Cost per Good Die"]
    assert cards[-2].value == "77.88%"
    assert cards[-1].value == "$23.36"
