import logging
from typing import TYPE_CHECKING

import numpy as np
import xarray as xr
from skimage.filters.rank import majority

from fieldimage.contracts import require

if TYPE_CHECKING:
    from fieldimage.schemas import InternalConfig

__all__ = ['MaskDenoiser', 'mode_filter']

logger = logging.getLogger(__name__)


def mode_filter(mask: np.ndarray, size: int = 3) -> np.ndarray:
    """Majority (mode) filter of a boolean raster.

    Each pixel takes the most frequent value among the ``size x size``
    window centred on it (itself included). Border pixels use the truncated
    window that lies inside the raster, so no padding value is invented.
    Ties go to False (background).

    Parameters
    ----------
    mask : np.ndarray
        2D boolean array.
    size : int
        Odd window size (default 3).

    Returns
    -------
    np.ndarray
        New 2D boolean array; the input is not modified.
    """
    require(size >= 1 and size % 2 == 1,
            f"Mode filter window must be a positive odd size, got {size}", ValueError)
    mask = np.asarray(mask, dtype=bool)
    require(mask.ndim == 2, f"Mode filter expects a 2D mask, got {mask.ndim} dims", ValueError)

    footprint = np.ones((size, size), dtype=bool)
    # rank filters only count pixels inside the image; a tie keeps the lower value (background)
    return majority(mask.astype(np.uint8), footprint) > 0


class MaskDenoiser:
    """Remove salt-and-pepper noise from the vegetation label."""

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.window_size = config.denoiser.window_size
        self.label_name = config.classifier.label_name
        self.output_name = config.denoiser.output_name

        logger.info("MaskDenoiser initialized: window=%dx%d", self.window_size, self.window_size)

    def denoise(self, ds: xr.Dataset) -> xr.Dataset:
        """Attach the mode-filtered label as a new variable."""
        labels = ds[self.label_name]
        filtered = mode_filter(labels.values, self.window_size)

        mask_da = xr.DataArray(
            filtered,
            dims=labels.dims,
            coords=labels.coords,
            attrs={
                "long_name": "Denoised vegetation mask",
                "source": self.label_name,
                "window_size": self.window_size,
            },
        )

        ds_out = ds.copy()
        ds_out[self.output_name] = mask_da

        n_flipped = int(np.count_nonzero(filtered != labels.values))
        logger.debug("Mode filter flipped %d pixels", n_flipped)
        return ds_out
