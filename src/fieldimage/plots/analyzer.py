"""Per-plot statistics from a classified pixel table.

Each pixel (its centre location) is assigned to the plot containing it;
pixels on an edge shared by two plots go to the first plot in grid order.
Output is the georeferenced plot table with one row per plot, extended by:

- ``n_pixels``: pixels inside the plot
- ``n_vegetation``: of those, pixels flagged by the vegetation mask
- ``vegetation_fraction``: ``n_vegetation / n_pixels`` (NaN for empty plots)
- ``<var>_mean``: mean of each band and of the hue over vegetation pixels

Author: fieldimage contributors
"""

import logging
from typing import TYPE_CHECKING, List

import geopandas as gpd
import numpy as np
import pandas as pd

from fieldimage.contracts import assert_plot_statistics

if TYPE_CHECKING:
    from fieldimage.schemas import InternalConfig

__all__ = ['PlotAnalyzer']

logger = logging.getLogger(__name__)


class PlotAnalyzer:
    """Aggregate pixel-level vegetation results per field plot.

    Examples
    --------
    >>> analyzer = PlotAnalyzer(config)
    >>> stats = analyzer.extract(pixels, gridtable)
    >>> stats[["plot_id", "vegetation_fraction"]].head()
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.mask_name = config.denoiser.output_name
        self.stat_vars: List[str] = [*config.bands.rgb, config.hue.output_name]

    def assign_plots(self, pixels: pd.DataFrame, gridtable: gpd.GeoDataFrame) -> pd.Series:
        """``plot_id`` of the plot containing each pixel (pixels outside are dropped)."""
        points = gpd.GeoDataFrame(
            pixels[["x", "y"]],
            geometry=gpd.points_from_xy(pixels["x"], pixels["y"]),
            crs=gridtable.crs,
        )
        joined = gpd.sjoin(
            points,
            gridtable[["plot_id", "geometry"]],
            how="inner",
            predicate="intersects",
        )
        joined = joined.sort_values("index_right", kind="stable")
        joined = joined[~joined.index.duplicated(keep="first")]
        return joined["plot_id"]

    def extract(self, pixels: pd.DataFrame, gridtable: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        """Compute per-plot statistics.

        Parameters
        ----------
        pixels : pd.DataFrame
            Pixel table with ``x``, ``y``, the mask column and band/hue columns.
        gridtable : gpd.GeoDataFrame
            Output of georeference() with a ``plot_id`` column.

        Returns
        -------
        gpd.GeoDataFrame
            ``gridtable`` with statistics columns appended, same row order.
        """
        plot_ids = self.assign_plots(pixels, gridtable)
        assigned = pixels.loc[plot_ids.index].assign(plot_id=plot_ids.to_numpy())

        counts = assigned.groupby("plot_id").size().rename("n_pixels")

        veg = assigned[assigned[self.mask_name].astype(bool)]
        n_veg = veg.groupby("plot_id").size().rename("n_vegetation")

        stat_vars = [v for v in self.stat_vars if v in veg.columns]
        means = veg.groupby("plot_id")[stat_vars].mean()
        means.columns = [f"{v}_mean" for v in stat_vars]

        stats = pd.concat([counts, n_veg, means], axis=1)
        result = gridtable.merge(stats, left_on="plot_id", right_index=True, how="left")
        result["n_pixels"] = result["n_pixels"].fillna(0).astype(np.int64)
        result["n_vegetation"] = result["n_vegetation"].fillna(0).astype(np.int64)
        result["vegetation_fraction"] = (
            result["n_vegetation"] / result["n_pixels"].where(result["n_pixels"] > 0)
        )

        assert_plot_statistics(result, len(gridtable))
        logger.info("Plot statistics: %d plots, %d pixels assigned, mean vegetation fraction=%.3f",
                    len(result), len(assigned), float(result["vegetation_fraction"].mean()))
        return result
