"""Raster stage contract.

Enforces the guarantee that after band selection, the dataset is a 2D
raster exposing the configured bands on a shared (y, x) grid.
"""

from typing import Iterable

import xarray as xr
from fieldimage.contracts.base import require


def assert_raster(ds: xr.Dataset, bands: Iterable[str]) -> None:
    """Enforce raster stage contract.

    Called immediately after band selection.

    Parameters
    ----------
    ds : xr.Dataset
        Dataset from RasterBandSelector.select()

    bands : iterable of str
        Band names that must be present (from config)

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        "x" in ds.coords,
        "Raster contract violated: missing 'x' coordinate"
    )
    require(
        "y" in ds.coords,
        "Raster contract violated: missing 'y' coordinate"
    )

    for band in bands:
        require(
            band in ds.data_vars,
            f"Raster contract violated: missing '{band}' band"
        )
        da = ds[band]
        require(
            da.dims == ("y", "x"),
            f"Raster contract violated: '{band}' has dims {da.dims}, expected ('y', 'x')"
        )
