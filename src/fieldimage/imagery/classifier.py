"""Quantile threshold classification of a per-pixel index."""

import logging
from typing import TYPE_CHECKING, Optional

import numpy as np
import xarray as xr

from fieldimage.contracts import EmptyInputError, InvalidPercentileError, require

if TYPE_CHECKING:
    from fieldimage.schemas import InternalConfig

__all__ = ['ThresholdClassifier', 'quantile_cutoff', 'threshold_labels']

logger = logging.getLogger(__name__)


def quantile_cutoff(values: np.ndarray, q: float) -> float:
    """Value at quantile ``q`` over all finite pixels.

    Uses linear interpolation between order statistics (numpy's default,
    the same definition as R type 7 and Julia's ``quantile``).

    Raises
    ------
    InvalidPercentileError
        If q is outside [0, 1].
    EmptyInputError
        If there are no finite pixels.
    """
    require(
        0.0 <= q <= 1.0,
        f"Quantile must lie in [0, 1], got {q}",
        InvalidPercentileError,
    )
    values = np.asarray(values, dtype=np.float64)
    finite = values[np.isfinite(values)]
    require(
        finite.size > 0,
        "Cannot compute a threshold over zero pixels",
        EmptyInputError,
    )
    return float(np.quantile(finite, q))


def threshold_labels(values: np.ndarray, q: float, cutoff: Optional[float] = None) -> np.ndarray:
    """Boolean labels: True where a value strictly exceeds the q-quantile.

    Ties at the cutoff and NaN pixels are False. A precomputed ``cutoff``
    (from quantile_cutoff) skips the quantile reduction.

    Examples
    --------
    >>> threshold_labels(np.arange(1, 11), 0.7)
    array([False, False, False, False, False, False, False,  True,  True,  True])
    """
    if cutoff is None:
        cutoff = quantile_cutoff(values, q)
    with np.errstate(invalid="ignore"):
        return np.asarray(values, dtype=np.float64) > cutoff


class ThresholdClassifier:
    """Config-driven binary classification of the hue index.

    Pixels whose hue is above the configured quantile are labelled True
    (vegetation), everything else False (background).
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.quantile = config.classifier.quantile
        self.label_name = config.classifier.label_name
        self.source_name = config.hue.output_name

        logger.info("ThresholdClassifier initialized: source=%s, quantile=%s",
                    self.source_name, self.quantile)

    def classify(self, ds: xr.Dataset, var_name: str = None) -> xr.Dataset:
        """Threshold ``var_name`` (default: the hue variable) and attach labels."""
        var_name = var_name or self.source_name
        source = ds[var_name]

        cutoff = quantile_cutoff(source.values, self.quantile)
        labels = threshold_labels(source.values, self.quantile, cutoff)

        labels_da = xr.DataArray(
            labels,
            dims=source.dims,
            coords=source.coords,
            attrs={
                "long_name": "Vegetation label",
                "source": var_name,
                "quantile": self.quantile,
                "cutoff": cutoff,
            },
        )

        ds_out = ds.copy()
        ds_out[self.label_name] = labels_da
        logger.debug("Labels attached: var=%s, cutoff=%.4f, n_true=%d/%d",
                     self.label_name, cutoff, int(labels.sum()), labels.size)
        return ds_out
