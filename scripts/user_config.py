"""fieldimage User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the pipeline behavior. Expert defaults live in fieldimage.schemas.param.

Usage:
    python scripts/run_fieldimage_pipeline.py scripts/user_config.py
    python scripts/run_fieldimage_pipeline.py scripts/user_config.py --image rgb_ex2.tif
"""

CONFIG = {
    # ========================================================================
    # INPUTS & OUTPUT
    # ========================================================================
    "IMAGE_PATH": "data/rgb_ex1.tif",    # Orthomosaic GeoTIFF
    "TABLE_PATH": "data/data_ex1.csv",   # One row per plot, in grid order
    "BASE_DIR": "output",                # All outputs go here

    # ========================================================================
    # BANDS & COLOR
    # ========================================================================
    "BANDS": {1: "R", 2: "G", 3: "B"},   # band position -> name
    "LOW_PERCENTILE": 0.02,
    "HIGH_PERCENTILE": 0.98,

    # ========================================================================
    # CLASSIFICATION
    # ========================================================================
    "HUE_QUANTILE": 0.7,      # pixels with hue above this quantile are vegetation
    "MODE_WINDOW": 3,         # odd window size of the mode filter

    # ========================================================================
    # PLOT GRID
    # ========================================================================
    # Corners of the trial area (map units): bottom-left, bottom-right,
    # top-right, top-left
    "PLOT_CORNERS": (
        (296607.6, 4888188.0),
        (296620.4, 4888188.0),
        (296622.8, 4888244.0),
        (296609.8, 4888244.0),
    ),
    "PLOT_GRID": (14, 9),     # plots along p1->p2, plots along p1->p4

    "LOG_LEVEL": "INFO",
}
