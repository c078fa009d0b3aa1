from __future__ import annotations

from pathlib import Path

# Paths and filenames
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "green_calculator" / "data"

# Integration grid
STEP = 0.01
RESULT_DECIMALS = 4

# Display sampling of the boundary curves (independent of STEP)
DISPLAY_STEP = 0.05
DISPLAY_X_PADDING = 1.0

# Form defaults
DEFAULT_MODE = "direct"
INITIAL_X_RANGE = {"min": -2.0, "max": 2.0}
RESET_X_RANGE = {"min": 0.0, "max": 1.0}

# Expression language
INTEGRAND_VARIABLES = ("x", "y")
CURVE_VARIABLES = ("x",)

# User-facing messages
MSG_MISSING_INPUT = "Please enter all functions and limits."
MSG_INVALID_BOUND = "Invalid limits at x = {x}."
MSG_INVALID_INTEGRAND = "Error evaluating the integrand at (x={x}, y={y})."
MSG_UNEXPECTED = "An error occurred during the calculation. Check your functions."
MSG_CANCELLED = "Calculation cancelled at x = {x}."
MSG_NO_RESULT = "No result yet."

# Labels
VECTOR_FIELD_LABEL = "∬(∂Q/∂x − ∂P/∂y) dy dx, x ∈ [{x_min}, {x_max}], y ∈ [{lower}, {upper}]"
DIRECT_INTEGRAND_LABEL = "∬({integrand}) dy dx, x ∈ [{x_min}, {x_max}], y ∈ [{lower}, {upper}]"
MODE_OPTIONS = {
    "vector": "Case 1: vector field P(x, y), Q(x, y)",
    "direct": "Case 2: single integrand with curve limits",
}
PLACEHOLDERS = {
    "field_p": "e.g. y^2 + x^2",
    "field_q": "e.g. x * y",
    "integrand": "e.g. 2",
    "curve_lower": "e.g. x^2",
    "curve_upper": "e.g. x",
}

# Event logging
SCHEMA_VERSION = 1
APP_MODE = "dash"
SCHEMA_COLUMNS = [
    "schema_version",
    "session_id",
    "t_server_iso",
    "seq",
    "event",
    "mode",
    "field_p",
    "field_q",
    "curve_lower",
    "curve_upper",
    "x_min",
    "x_max",
    "step",
    "status",
    "result",
    "error_kind",
    "elapsed_time_ms",
    "app_mode",
]

# Plot palette and styles
FIGURE_COLORS = {
    "lower": "#9998ff",
    "upper": "#18eaf9",
    "text": "#C9D1D9",
    "grid": "#30363D",
    "title": "#9998ff",
}
LOWER_LINE_STYLE = {"color": FIGURE_COLORS["lower"], "width": 2}
UPPER_LINE_STYLE = {"color": FIGURE_COLORS["upper"], "width": 2}
AXIS_STYLE = {
    "showgrid": True,
    "gridcolor": FIGURE_COLORS["grid"],
    "tickfont": {"color": FIGURE_COLORS["text"], "size": 12},
    "zeroline": True,
    "zerolinecolor": "#777777",
}
CHART_TITLE = "Integration limits"
LOWER_SERIES_NAME = "Lower curve (yMin)"
UPPER_SERIES_NAME = "Upper curve (yMax)"
