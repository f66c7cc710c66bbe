"""Static figures of a processed orthomosaic.

Renders the contrast-stretched composite, the hue index, the vegetation
mask, the extracted vegetation pixels and the plot grid to image files.
Uses the Agg backend: figures are written to disk, never shown.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional, Tuple

import geopandas as gpd
import numpy as np
import pandas as pd
import xarray as xr
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from fieldimage.plots.grid import expand_extent
from fieldimage.setup_directories import get_plot_path

if TYPE_CHECKING:
    from fieldimage.schemas import InternalConfig

__all__ = ['FieldPlotter']

logger = logging.getLogger(__name__)


class FieldPlotter:
    """Generates static figures from pipeline results.

    **Figures:**

    - ``rgb``: stretched composite color, with the plot grid outlined when given
    - ``hue``: hue index with colorbar
    - ``mask``: denoised vegetation mask
    - ``vegetation``: composite color restricted to the vegetation pixels
    - ``plots``: plot grid filled by per-plot vegetation fraction

    When ``visualization.expand_extent`` is set, axes are zoomed out to a
    window centred on the raster and twice its size in each direction.

    Example usage::

        plotter = FieldPlotter(config)
        paths = plotter.plot_all(result, vegetation, plots, "rgb_ex1.tif", output_dirs)
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        viz = config.visualization

        self.dpi = viz.dpi
        self.figsize = tuple(viz.figsize)
        self.output_format = viz.output_format
        self.expand = viz.expand_extent
        self.grid_color = viz.grid_color
        self.grid_linewidth = viz.grid_linewidth
        self.hue_cmap = viz.hue_cmap
        self.mask_cmap = viz.mask_cmap

        self.color_name = config.stretch.color_name
        self.hue_name = config.hue.output_name
        self.mask_name = config.denoiser.output_name

        logger.info(f"FieldPlotter initialized (format={self.output_format}, dpi={self.dpi})")

    def _bounds(self, ds: xr.Dataset) -> Tuple[float, float, float, float]:
        """Outer pixel-edge bounds ``(xmin, ymin, xmax, ymax)`` of the raster."""
        x = ds["x"].values
        y = ds["y"].values
        dx = abs(x[1] - x[0]) if x.size > 1 else 1.0
        dy = abs(y[1] - y[0]) if y.size > 1 else 1.0
        return (x.min() - dx / 2, y.min() - dy / 2, x.max() + dx / 2, y.max() + dy / 2)

    def _imshow(self, ax: plt.Axes, ds: xr.Dataset, image: np.ndarray, **kwargs):
        """Draw a (y, x[, channel]) array in map coordinates."""
        xmin, ymin, xmax, ymax = self._bounds(ds)
        y = ds["y"].values
        # north-up rasters store y descending
        origin = "upper" if y.size > 1 and y[0] > y[-1] else "lower"
        return ax.imshow(image, extent=(xmin, xmax, ymin, ymax), origin=origin, **kwargs)

    def _set_extent(self, ax: plt.Axes, ds: xr.Dataset) -> None:
        if not self.expand:
            return
        x0, y0, width, height = expand_extent(*self._bounds(ds))
        ax.set_xlim(x0, x0 + width)
        ax.set_ylim(y0, y0 + height)

    def _composite(self, ds: xr.Dataset) -> np.ndarray:
        """Composite color as an imshow-ready float array (nodata drawn black)."""
        return np.ascontiguousarray(np.nan_to_num(ds[self.color_name].values, nan=0.0))

    def _format_axis(self, ax: plt.Axes, title: str) -> None:
        ax.set_xlabel('Easting', fontsize=10)
        ax.set_ylabel('Northing', fontsize=10)
        ax.set_title(title, fontsize=12, fontweight='bold', pad=10)
        ax.ticklabel_format(useOffset=False, style='plain')

    def _draw_grid(self, ax: plt.Axes, gridtable: gpd.GeoDataFrame) -> None:
        gridtable.boundary.plot(ax=ax, color=self.grid_color, linewidth=self.grid_linewidth, zorder=10)

    def _save_figure(self, fig: plt.Figure, output_path: Path) -> str:
        """Save figure in configured format."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_file = output_path.with_suffix(f'.{self.output_format}')

        fig.savefig(output_file, dpi=self.dpi, bbox_inches='tight', format=self.output_format)
        plt.close(fig)
        logger.info(f"Plot saved: {output_file}")
        return str(output_file)

    def plot_rgb(self, ds: xr.Dataset, output_path: Path,
                 gridtable: Optional[gpd.GeoDataFrame] = None) -> str:
        """Stretched composite, optionally with the plot grid outlined."""
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        self._imshow(ax, ds, self._composite(ds))
        if gridtable is not None:
            self._draw_grid(ax, gridtable)
        self._set_extent(ax, ds)
        self._format_axis(ax, 'Contrast-stretched RGB')
        return self._save_figure(fig, output_path)

    def plot_hue(self, ds: xr.Dataset, output_path: Path) -> str:
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        im = self._imshow(ax, ds, ds[self.hue_name].values, cmap=self.hue_cmap, vmin=0.0, vmax=1.0)
        plt.colorbar(im, ax=ax, label='Hue', fraction=0.046, pad=0.04)
        self._set_extent(ax, ds)
        self._format_axis(ax, 'Hue index')
        return self._save_figure(fig, output_path)

    def plot_mask(self, ds: xr.Dataset, output_path: Path) -> str:
        mask = ds[self.mask_name].values
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        self._imshow(ax, ds, mask.astype(float), cmap=self.mask_cmap, vmin=0.0, vmax=1.0,
                     interpolation='nearest')
        self._set_extent(ax, ds)
        self._format_axis(ax, f'Vegetation mask ({100.0 * mask.mean():.1f}% of pixels)')
        return self._save_figure(fig, output_path)

    def plot_vegetation(self, ds: xr.Dataset, vegetation: pd.DataFrame, output_path: Path) -> str:
        """Composite color of the selected pixels only; other pixels are white.

        ``vegetation`` is a pixel table whose index is the row-major pixel
        position in ``ds``.
        """
        composite = self._composite(ds)
        ny, nx = composite.shape[:2]
        keep = np.zeros(ny * nx, dtype=bool)
        keep[vegetation.index.to_numpy()] = True

        image = np.ones(composite.shape, dtype=np.float64)
        image.reshape(-1, 3)[keep] = composite.reshape(-1, 3)[keep]

        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        self._imshow(ax, ds, image, interpolation='nearest')
        self._set_extent(ax, ds)
        self._format_axis(ax, f'Vegetation pixels (n={len(vegetation)})')
        return self._save_figure(fig, output_path)

    def plot_plots(self, ds: xr.Dataset, plots: gpd.GeoDataFrame, output_path: Path,
                   column: str = "vegetation_fraction") -> str:
        """Per-plot choropleth of ``column`` over the stretched composite."""
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        self._imshow(ax, ds, self._composite(ds))
        plots.plot(
            ax=ax,
            column=column,
            cmap=self.mask_cmap,
            alpha=0.7,
            edgecolor=self.grid_color,
            linewidth=self.grid_linewidth,
            legend=True,
            legend_kwds={'label': column.replace('_', ' '), 'fraction': 0.046, 'pad': 0.04},
            missing_kwds={'color': 'lightgrey'},
            zorder=10,
        )
        self._set_extent(ax, ds)
        self._format_axis(ax, f'{len(plots)} plots')
        return self._save_figure(fig, output_path)

    def plot_all(self, result: xr.Dataset, vegetation: pd.DataFrame,
                 plots: Optional[gpd.GeoDataFrame], image_name: str,
                 output_dirs: Dict[str, Path]) -> Dict[str, str]:
        """Write every figure for one processed orthomosaic.

        Returns
        -------
        dict
            Figure kind -> saved file path.
        """
        fmt = self.output_format

        def path(kind):
            return get_plot_path(output_dirs, image_name, kind, fmt)

        saved = {
            "rgb": self.plot_rgb(result, path("rgb"), gridtable=plots),
            "hue": self.plot_hue(result, path("hue")),
            "mask": self.plot_mask(result, path("mask")),
            "vegetation": self.plot_vegetation(result, vegetation, path("vegetation")),
        }
        if plots is not None:
            saved["plots"] = self.plot_plots(result, plots, path("plots"))
        return saved
