"""Plot stage contracts.

Enforces the guarantees of plot-grid georeferencing and per-plot analysis.
"""

import geopandas as gpd
from fieldimage.contracts.base import require


def assert_plot_grid(gdf: gpd.GeoDataFrame, n_cells: int) -> None:
    """Enforce plot-grid contract.

    Parameters
    ----------
    gdf : gpd.GeoDataFrame
        Output of georeference()

    n_cells : int
        Expected number of cells (nx * ny)

    Raises
    ------
    ContractViolation
        If structural requirements are violated
    """
    require(
        isinstance(gdf, gpd.GeoDataFrame),
        f"Plot grid contract violated: output is {type(gdf)}, expected GeoDataFrame"
    )
    require(
        len(gdf) == n_cells,
        f"Plot grid contract violated: got {len(gdf)} plots, expected {n_cells}"
    )
    require(
        bool(gdf.geometry.is_valid.all()),
        "Plot grid contract violated: invalid plot geometry"
    )


def assert_plot_statistics(gdf: gpd.GeoDataFrame, n_plots: int) -> None:
    """Enforce per-plot analysis contract.

    We do NOT validate the agronomic meaning of statistics. We only check
    structural requirements.
    """
    required_cols = [
        "plot_id",
        "n_pixels",
        "n_vegetation",
        "vegetation_fraction",
    ]

    for col in required_cols:
        require(
            col in gdf.columns,
            f"Plot analysis contract violated: missing required column '{col}'"
        )

    require(
        len(gdf) == n_plots,
        f"Plot analysis contract violated: got {len(gdf)} rows, expected {n_plots}"
    )

    if len(gdf) > 0:
        fractions = gdf["vegetation_fraction"].dropna()
        require(
            bool(((fractions >= 0) & (fractions <= 1)).all()),
            "Plot analysis contract violated: vegetation_fraction must be in [0, 1]"
        )
