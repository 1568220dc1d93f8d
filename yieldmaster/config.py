"""
Configuration and styling constants for the yield calculator.

Default process parameters, sidebar ranges and the colour theme shared by the
wafer map and the overview charts.
"""
import os

# --- Units ---
MM2_PER_CM2 = 100.0

# --- Default Process Parameters ---
DEFAULT_DIAMETER_MM = 300.0
DEFAULT_DIE_AREA_MM2 = 100.0
DEFAULT_D0 = 0.5             # defects / cm²
DEFAULT_ALPHA = 2.0          # negative binomial cluster factor
DEFAULT_MODEL = "poisson"
DEFAULT_PATTERN_DENSITY = 1.0
DEFAULT_PROCESS_MATURITY = 1.0
DEFAULT_EDGE_EXCLUSION_MM = 0.0

# --- Repair & Economics ---
DEFAULT_REPAIR_PCT = 0.0
DEFAULT_WAFER_COST = 10000.0
DEFAULT_FAB_UTILIZATION = 1.0

# --- Sidebar Inputs ---
WAFER_DIAMETERS_MM = [100.0, 150.0, 200.0, 300.0, 450.0]
DIE_AREA_STEP = 5.0
D0_STEP = 0.05
ALPHA_STEP = 0.1
EDGE_EXCLUSION_STEP = 0.5
DEFAULT_RANDOM_SEED = 42

# --- Wafer Map ---
MAP_FIGSIZE = (8, 8)
MAP_MARGIN_MM = 5.0
MAP_GAP_THRESHOLD = 4.0      # dies smaller than this (mm) are drawn without a gap
MAP_GAP_PIXELS_PER_DIE = 20  # raster pixels per die when a gap is drawn; the gap is one pixel
MIN_DIE_AREA_MM2 = 0.1       # smallest die the dashboard will map

# --- Overview ---
TREND_LOTS = 20
TREND_FIRST_LOT = 1001
TREND_STEP_PCT = 5.0

# --- Style Theme: Fab Dashboard ---
BACKGROUND_COLOR = '#020617'  # Near-black slate behind the wafer
WAFER_COLOR = '#1E293B'       # Dark slate wafer disc
WAFER_EDGE_COLOR = '#334155'
GOOD_DIE_COLOR = '#22C55E'    # Green
BAD_DIE_COLOR = '#EF4444'     # Red
TEXT_COLOR = '#94A3B8'
TREND_LINE_COLOR = '#3B82F6'
GRID_COLOR = '#334155'

# --- Defect Pareto Tables ---
# Random defects dominate when the model assumes no clustering.
RANDOM_DEFECT_PARETO = [
    ("Random Particles", 65, '#F59E0B'),
    ("Scratch", 20, '#EF4444'),
    ("Parametric", 10, '#3B82F6'),
    ("Other", 5, '#94A3B8'),
]
CLUSTERED_DEFECT_PARETO = [
    ("Edge Effect", 40, '#8B5CF6'),
    ("Random Particles", 30, '#F59E0B'),
    ("Mask Defect", 20, '#EC4899'),
    ("Parametric", 10, '#3B82F6'),
]

# --- Logging ---
LOG_LEVEL = os.environ.get("YIELDMASTER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
