import time

import matplotlib.pyplot as plt
import numpy as np
import streamlit as st

from yieldmaster.config import (
    ALPHA_STEP, D0_STEP, DEFAULT_ALPHA, DEFAULT_D0, DEFAULT_DIAMETER_MM, DEFAULT_DIE_AREA_MM2,
    DEFAULT_EDGE_EXCLUSION_MM, DEFAULT_FAB_UTILIZATION, DEFAULT_PATTERN_DENSITY,
    DEFAULT_PROCESS_MATURITY, DEFAULT_RANDOM_SEED, DEFAULT_REPAIR_PCT, DEFAULT_WAFER_COST,
    DIE_AREA_STEP, EDGE_EXCLUSION_STEP, MIN_DIE_AREA_MM2, WAFER_DIAMETERS_MM
)
from yieldmaster.display import kpi_cards
from yieldmaster.logger import configure_logging, get_logger
from yieldmaster.models import ProcessParameters, YieldModel
from yieldmaster.overview import defect_pareto, plot_defect_pareto, plot_yield_trend, yield_trend
from yieldmaster.wafer_map import build_wafer_map, figure_to_png, render_wafer_map
from yieldmaster.yield_math import compute_stats

logger = get_logger("yieldmaster.app")

# ============================
# Sidebar
# ============================

def read_sidebar():
    """
    Collect the process snapshot and the repair/economics inputs from the sidebar.

    Returns (params, repair_pct, wafer_cost, fab_utilization, random_seed).
    """
    st.sidebar.header("1. Wafer & Die Settings")
    diameter = st.sidebar.selectbox(
        "Wafer Diameter (mm)", WAFER_DIAMETERS_MM,
        index=WAFER_DIAMETERS_MM.index(DEFAULT_DIAMETER_MM), key="diameter"
    )
    die_area = st.sidebar.number_input(
        "Die Area (mm²)", min_value=MIN_DIE_AREA_MM2, value=DEFAULT_DIE_AREA_MM2, step=DIE_AREA_STEP,
        key="die_area"
    )
    edge_exclusion = st.sidebar.number_input(
        "Edge Exclusion (mm)", value=DEFAULT_EDGE_EXCLUSION_MM, step=EDGE_EXCLUSION_STEP, key="edge_exclusion"
    )

    st.sidebar.markdown("---")
    st.sidebar.header("2. Yield Model Settings")
    model_label = st.sidebar.selectbox("Yield Model", YieldModel.labels(), key="model")
    model = YieldModel.from_label(model_label)
    d0 = st.sidebar.number_input("Defect Density D0 (defects/cm²)", value=DEFAULT_D0, step=D0_STEP, key="d0")
    alpha = st.sidebar.number_input(
        "Cluster Factor α", value=DEFAULT_ALPHA, step=ALPHA_STEP,
        help="Negative binomial only. Lower values mean stronger defect clustering.",
        disabled=model != YieldModel.NB, key="alpha"
    )
    pattern_density = st.sidebar.slider(
        "Pattern Density (critical area ratio)", 0.0, 1.0, DEFAULT_PATTERN_DENSITY, 0.01, key="pattern_density"
    )
    process_maturity = st.sidebar.slider(
        "Process Maturity (systematic yield)", 0.0, 1.0, DEFAULT_PROCESS_MATURITY, 0.01, key="process_maturity"
    )

    st.sidebar.markdown("---")
    st.sidebar.header("3. Repair & Economics")
    repair_pct = st.sidebar.slider("Repairable Area (%)", 0.0, 100.0, DEFAULT_REPAIR_PCT, 1.0, key="repair_pct")
    wafer_cost = st.sidebar.number_input("Wafer Cost ($)", value=DEFAULT_WAFER_COST, step=500.0, key="wafer_cost")
    fab_utilization = st.sidebar.slider("Fab Utilization", 0.0, 1.0, DEFAULT_FAB_UTILIZATION, 0.01, key="fab_utilization")

    st.sidebar.markdown("---")
    st.sidebar.header("4. Map Options")
    random_seed = st.sidebar.number_input(
        "Random Seed (for reproducibility)", min_value=0, value=DEFAULT_RANDOM_SEED, step=1, key="random_seed"
    )

    params = ProcessParameters(
        diameter_mm=float(diameter),
        die_area_mm2=float(die_area),
        d0=float(d0),
        alpha=float(alpha),
        model=model,
        pattern_density=float(pattern_density),
        process_maturity=float(process_maturity),
        edge_exclusion_mm=float(edge_exclusion),
    )
    return params, float(repair_pct), float(wafer_cost), float(fab_utilization), int(random_seed)

# ============================
# Tabs
# ============================

def show_kpis(stats, repair_pct):
    cards = kpi_cards(stats, show_effective_yield=repair_pct > 0)
    for col, card in zip(st.columns(len(cards)), cards):
        col.metric(card.title, card.value)
        col.caption(card.subtext)


def show_simulator(params, stats, repair_pct, random_seed):
    show_kpis(stats, repair_pct)

    st.markdown("#### Die Map Visualization")
    if not np.isfinite(stats.yield_rate):
        st.warning("The yield model returned a non-finite value for these inputs; the die map is not drawn.")
        return

    start_time = time.time()
    rng = np.random.default_rng(random_seed)
    wafer_map = build_wafer_map(params.diameter_mm, params.die_area_mm2, stats.yield_rate, rng)
    fig = render_wafer_map(wafer_map)
    st.pyplot(fig)

    st.caption(
        f"Map grid: {wafer_map.good_count:,} good / {wafer_map.bad_count:,} defective of "
        f"{wafer_map.total:,} cells. The map lays out its own grid, so its count can differ "
        f"from the gross-die estimate."
    )
    st.download_button(
        "Download Map as PNG",
        data=figure_to_png(fig),
        file_name="wafer_map.png",
        mime="image/png"
    )
    plt.close(fig)
    logger.info(f"Rendered wafer map with {wafer_map.total} dies in {time.time() - start_time:.2f}s")


def show_overview(params, stats, random_seed):
    show_kpis(stats, 0.0)

    left, right = st.columns(2)
    with left:
        trend = []
        if np.isfinite(stats.yield_rate):
            trend = yield_trend(stats.yield_rate, rng=np.random.default_rng(random_seed))
        fig = plot_yield_trend(trend)
        st.pyplot(fig)
        plt.close(fig)
    with right:
        fig = plot_defect_pareto(defect_pareto(params.model))
        st.pyplot(fig)
        plt.close(fig)

# ============================
# Main App
# ============================

def main():
    configure_logging()
    st.set_page_config(page_title="YieldMaster PRO", layout="wide")
    st.title("YieldMaster PRO: Wafer Yield Simulator")

    params, repair_pct, wafer_cost, fab_utilization, random_seed = read_sidebar()
    stats = compute_stats(params, repair_pct, wafer_cost, fab_utilization)
    st.sidebar.info(f"Calculated yield fraction: {stats.yield_rate:.3f}")

    simulator_tab, overview_tab = st.tabs(["Simulator", "Overview"])
    with simulator_tab:
        show_simulator(params, stats, repair_pct, random_seed)
    with overview_tab:
        show_overview(params, stats, random_seed)

    with st.expander("About This App"):
        st.markdown(
            """
            **Overview:**

            This app estimates die yield on a single wafer and visualises die placement.

            - **Yield Models:** Poisson `exp(-D0·A)`, Murphy `(1/(1+D0·A))²` and
              Negative Binomial `(1+D0·A/α)^-α`, evaluated on the critical area
              (die area × pattern density) and capped by process maturity.
            - **Die Count:** Gross dies are usable wafer area (after edge exclusion)
              divided by die area; good dies are gross dies × yield, rounded down.
            - **Repair:** A repairable share of the die removes that area from the
              fatal area before the yield model is applied.
            - **Economics:** Cost per good die is wafer cost / fab utilization / good dies.
            - **Die Map:** Each grid cell on the wafer passes or fails with an independent
              draw at the model yield. Change the random seed to draw a new map.
            """
        )


if __name__ == "__main__":
    main()
