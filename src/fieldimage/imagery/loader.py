"""Read orthomosaics and per-plot tables.

This module is the boundary to the file system. Format parsing is delegated
to rioxarray (GeoTIFF and anything else GDAL reads) and pandas (CSV). The
output raster is an xarray.Dataset with one data variable per band, named
``band_1`` .. ``band_n`` in file order, with the CRS preserved for
downstream georeferencing.

Author: fieldimage contributors
"""

from pathlib import Path
from typing import TYPE_CHECKING, Union
import logging

import pandas as pd
import rioxarray
import xarray as xr

if TYPE_CHECKING:
    from fieldimage.schemas import InternalConfig

__all__ = ['OrthomosaicLoader']

logger = logging.getLogger(__name__)

# per-file band descriptions and packing attributes do not survive band selection
_DROPPED_ATTRS = ("long_name", "scale_factor", "add_offset")


class OrthomosaicLoader:
    """Load an orthomosaic GeoTIFF into a band-per-variable xarray.Dataset.

    Notes
    -----
    - Nodata pixels become NaN when ``reader.masked`` is set
    - Errors from the underlying readers propagate to the caller

    Examples
    --------
    >>> loader = OrthomosaicLoader(config)
    >>> ds = loader.load("rgb_ex1.tif")
    >>> list(ds.data_vars)
    ['band_1', 'band_2', 'band_3']
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.masked = config.reader.masked
        self.band_prefix = config.reader.band_prefix

    def load(self, path: Union[str, Path]) -> xr.Dataset:
        """Read a raster file into a 2D multi-band dataset."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Orthomosaic not found: {path}")

        logger.info("Loading orthomosaic: %s", path)
        da = rioxarray.open_rasterio(path, masked=self.masked)
        ds = self.to_band_dataset(da)
        logger.info("Loaded %d bands, shape=(%d, %d), crs=%s",
                    len(ds.data_vars), ds.sizes["y"], ds.sizes["x"], ds.rio.crs)
        return ds

    def to_band_dataset(self, da: xr.DataArray) -> xr.Dataset:
        """Split a (band, y, x) DataArray into one variable per band."""
        if "band" not in da.dims:
            da = da.expand_dims(band=[1])

        crs = da.rio.crs
        data_vars = {}
        for position in range(da.sizes["band"]):
            band = da.isel(band=position, drop=True)
            band.attrs = {k: v for k, v in band.attrs.items() if k not in _DROPPED_ATTRS}
            data_vars[f"{self.band_prefix}{position + 1}"] = band

        ds = xr.Dataset(data_vars)
        if crs is not None:
            ds = ds.rio.write_crs(crs)
        return ds

    def load_table(self, path: Union[str, Path]) -> pd.DataFrame:
        """Read the per-plot table, preserving row order."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Plot table not found: {path}")

        table = pd.read_csv(path)
        logger.info("Loaded plot table: %s (%d rows, %d columns)",
                    path, len(table), len(table.columns))
        return table
