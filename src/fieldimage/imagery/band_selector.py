"""Select and rename raster bands."""

import logging
from typing import TYPE_CHECKING, Mapping, Union

import xarray as xr

from fieldimage.contracts import FieldImageError, MissingBandError, require

if TYPE_CHECKING:
    from fieldimage.schemas import InternalConfig

__all__ = ['RasterBandSelector', 'select_bands']

logger = logging.getLogger(__name__)


def _resolve_band(ds: xr.Dataset, source: Union[int, str]) -> str:
    """Map a 1-based band position or a variable name to a variable name."""
    names = list(ds.data_vars)
    if isinstance(source, bool):
        raise MissingBandError(f"Invalid band key: {source!r}")
    if isinstance(source, int):
        require(
            1 <= source <= len(names),
            f"Band {source} requested but raster has {len(names)} bands",
            MissingBandError,
        )
        return names[source - 1]
    require(
        source in ds.data_vars,
        f"Band '{source}' not found (available: {names})",
        MissingBandError,
    )
    return source


def select_bands(ds: xr.Dataset, mapping: Mapping[Union[int, str], str]) -> xr.Dataset:
    """Return a new dataset exposing exactly the renamed bands.

    Parameters
    ----------
    ds : xr.Dataset
        Raster with one data variable per band.
    mapping : mapping
        ``{source: target}``. Integer sources are 1-based positions among the
        data variables; string sources are variable names.

    Raises
    ------
    MissingBandError
        If a requested position or name does not exist.
    FieldImageError
        If two sources are mapped to the same target name.

    Examples
    --------
    >>> rgb = select_bands(img, {1: "R", 2: "G", 3: "B"})
    """
    targets = list(mapping.values())
    require(
        len(set(targets)) == len(targets),
        f"Band mapping has duplicate targets: {targets}",
        FieldImageError,
    )
    sources = {target: _resolve_band(ds, source) for source, target in mapping.items()}
    selected = xr.Dataset(
        {target: ds[name].copy() for target, name in sources.items()},
        attrs=dict(ds.attrs),
    )
    logger.debug("Selected bands: %s", sources)
    return selected


class RasterBandSelector:
    """Config-driven band selection (first stage of the pipeline)."""

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.mapping = dict(config.bands.mapping)

    def select(self, ds: xr.Dataset) -> xr.Dataset:
        return select_bands(ds, self.mapping)
