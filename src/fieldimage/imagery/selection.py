"""Pixel tables and masked pixel selection.

A raster is flattened to a pixel table (one row per pixel, row-major over
``(y, x)``) so that selections keep the original pixel order and the row
index identifies the pixel position in the raster.
"""

import logging
from typing import TYPE_CHECKING, Union

import numpy as np
import pandas as pd
import shapely
import xarray as xr
from shapely.geometry.base import BaseGeometry

from fieldimage.contracts import ShapeMismatchError, require

if TYPE_CHECKING:
    from fieldimage.schemas import InternalConfig

__all__ = ['MaskedSelector', 'to_pixel_table', 'select_masked', 'select_within']

logger = logging.getLogger(__name__)


def to_pixel_table(ds: xr.Dataset) -> pd.DataFrame:
    """Flatten every 2D (y, x) variable of ``ds`` into a pixel table.

    Columns are ``x``, ``y`` followed by the variables. Variables with other
    dimensions (e.g. the composite color) are skipped; their channels are
    already present as individual bands.
    """
    yy, xx = np.meshgrid(ds["y"].values, ds["x"].values, indexing="ij")
    columns = {"x": xx.ravel(), "y": yy.ravel()}
    for name, da in ds.data_vars.items():
        if da.dims == ("y", "x"):
            columns[str(name)] = da.values.ravel()

    table = pd.DataFrame(columns)
    table.index.name = "pixel"
    return table


def select_masked(ds: xr.Dataset, mask: Union[xr.DataArray, np.ndarray],
                  invert: bool = False) -> pd.DataFrame:
    """Rows of the pixel table where ``mask`` is True (False if ``invert``).

    Parameters
    ----------
    ds : xr.Dataset
        Source raster.
    mask : xr.DataArray or np.ndarray
        Boolean labels in the same pixel order as ``ds``.
    invert : bool
        Select the complement. A selection and its inverse partition the raster.

    Raises
    ------
    ShapeMismatchError
        If the mask and the raster have different pixel counts.
    """
    labels = np.asarray(mask, dtype=bool).ravel()
    n_pixels = ds.sizes["y"] * ds.sizes["x"]
    require(
        labels.size == n_pixels,
        f"Mask has {labels.size} pixels but raster has {n_pixels}",
        ShapeMismatchError,
    )

    keep = ~labels if invert else labels
    return to_pixel_table(ds)[keep]


def select_within(pixels: pd.DataFrame, region: BaseGeometry) -> pd.DataFrame:
    """Rows of a pixel table whose (x, y) location lies in ``region``.

    Pixels on the region boundary are kept.
    """
    inside = shapely.intersects_xy(region, pixels["x"].to_numpy(), pixels["y"].to_numpy())
    return pixels[inside]


class MaskedSelector:
    """Extract the pixels flagged by the denoised vegetation mask."""

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.mask_name = config.denoiser.output_name

    def select(self, ds: xr.Dataset, mask_ds: xr.Dataset = None, invert: bool = False) -> pd.DataFrame:
        """Select pixels of ``ds`` using the mask variable of ``mask_ds`` (default ``ds``)."""
        mask_ds = ds if mask_ds is None else mask_ds
        selected = select_masked(ds, mask_ds[self.mask_name], invert=invert)
        logger.info("Selected %d of %d pixels (%s%s)",
                    len(selected), ds.sizes["y"] * ds.sizes["x"],
                    "not " if invert else "", self.mask_name)
        return selected
