import time

import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib.figure import Figure

from yieldmaster.wafer_map import (
    WaferMap, build_wafer_map, die_grid, figure_to_png, is_inside_wafer,
    render_wafer_map, sample_die_status, status_raster
)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


def test_is_inside_wafer():
    assert is_inside_wafer(0.0, 0.0, 10.0)
    assert is_inside_wafer(6.0, 8.0, 10.0)
    assert not is_inside_wafer(8.0, 8.0, 10.0)


def test_die_grid_centres_inside_wafer():
    cells = die_grid(300.0, 100.0)
    assert cells.shape[1] == 2
    centres = cells + 5.0
    assert np.all(np.hypot(centres[:, 0], centres[:, 1]) <= 150.0)


def test_die_grid_count_close_to_gross_estimate():
    # Independent layout: same order of magnitude as the area ratio, not identical.
    cells = die_grid(300.0, 100.0)
    assert 650 < len(cells) < 760


def test_die_grid_cells_on_square_lattice():
    cells = die_grid(100.0, 25.0)
    offsets = (cells + 50.0) / 5.0
    assert np.allclose(offsets, np.round(offsets))


@pytest.mark.parametrize("diameter, area", [(0.0, 100.0), (-50.0, 100.0), (300.0, 0.0), (300.0, -1.0)])
def test_die_grid_degenerate(diameter, area):
    assert die_grid(diameter, area).shape == (0, 2)


def test_sample_die_status_is_reproducible():
    a = sample_die_status(500, 0.6, np.random.default_rng(7))
    b = sample_die_status(500, 0.6, np.random.default_rng(7))
    assert a.dtype == bool
    assert np.array_equal(a, b)


def test_sample_die_status_extremes():
    rng = np.random.default_rng(0)
    assert sample_die_status(100, 1.0, rng).all()
    assert not sample_die_status(100, 0.0, rng).any()
    assert sample_die_status(0, 0.5, rng).shape == (0,)


def test_sample_die_status_rate():
    good = sample_die_status(20000, 0.6065, np.random.default_rng(1))
    assert good.mean() == pytest.approx(0.6065, abs=0.02)


def test_sample_die_status_rejects_negative_count():
    with pytest.raises(ValueError):
        sample_die_status(-1, 0.5)


def test_build_wafer_map_counts():
    wafer_map = build_wafer_map(300.0, 100.0, 0.5, np.random.default_rng(3))
    assert isinstance(wafer_map, WaferMap)
    assert wafer_map.die_size == pytest.approx(10.0)
    assert wafer_map.radius == 150.0
    assert wafer_map.total == len(wafer_map.cells)
    assert wafer_map.good_count + wafer_map.bad_count == wafer_map.total


def test_build_wafer_map_degenerate():
    wafer_map = build_wafer_map(0.0, 100.0, 0.5)
    assert wafer_map.total == 0
    assert wafer_map.radius == 0.0


def test_render_wafer_map_smoke():
    wafer_map = build_wafer_map(200.0, 50.0, 0.7, np.random.default_rng(5))
    fig = render_wafer_map(wafer_map)
    assert isinstance(fig, Figure)
    ax = fig.axes[0]
    assert len(ax.images) == 1
    assert ax.get_title() == "Die Map on Wafer"


def test_render_empty_wafer_map():
    fig = render_wafer_map(build_wafer_map(300.0, 0.0, 0.5))
    assert len(fig.axes[0].images) == 0


def test_figure_to_png():
    fig = render_wafer_map(build_wafer_map(100.0, 100.0, 0.5, np.random.default_rng(2)))
    data = figure_to_png(fig)
    assert data.startswith(b"\x89PNG")


def test_status_raster_matches_die_status():
    wafer_map = build_wafer_map(300.0, 100.0, 0.5, np.random.default_rng(4))
    raster, extent = status_raster(wafer_map)
    assert raster.shape == (30, 30)
    assert extent == pytest.approx((-150.0, 150.0, -150.0, 150.0))
    assert np.count_nonzero(raster == 1.0) == wafer_map.good_count
    assert np.count_nonzero(raster == 0.0) == wafer_map.bad_count
    assert np.count_nonzero(np.isnan(raster)) == raster.size - wafer_map.total


def test_status_raster_places_each_die():
    wafer_map = build_wafer_map(100.0, 25.0, 0.5, np.random.default_rng(6))
    raster, (left, _, bottom, _) = status_raster(wafer_map)
    cols = np.rint((wafer_map.cells[:, 0] - left) / wafer_map.die_size).astype(int)
    rows = np.rint((wafer_map.cells[:, 1] - bottom) / wafer_map.die_size).astype(int)
    assert np.array_equal(raster[rows, cols], wafer_map.good.astype(raster.dtype))


def test_status_raster_gap_pixels():
    wafer_map = build_wafer_map(300.0, 100.0, 1.0, np.random.default_rng(0))
    raster, _ = status_raster(wafer_map, pixels_per_die=4)
    assert raster.shape == (120, 120)
    assert np.isnan(raster[3::4, :]).all()
    assert np.isnan(raster[:, 3::4]).all()
    # Three by three interior pixels per die
    assert np.count_nonzero(raster == 1.0) == 9 * wafer_map.total


def test_status_raster_empty_wafer():
    raster, _ = status_raster(build_wafer_map(0.0, 100.0, 0.5))
    assert raster.size == 0


def test_render_large_wafer_map_is_fast():
    # 300 mm wafer with 0.25 mm² dies: about 280k cells
    wafer_map = build_wafer_map(300.0, 0.25, 0.6, np.random.default_rng(0))
    assert wafer_map.total > 100_000

    start = time.perf_counter()
    fig = render_wafer_map(wafer_map)
    data = figure_to_png(fig)
    elapsed = time.perf_counter() - start

    assert data.startswith(b"\x89PNG")
    assert len(fig.axes[0].images) == 1
    assert elapsed < 10.0
