"""Color rendering and hue index for RGB orthomosaics.

Two stages live here:

- **Contrast stretch**: per band, find the values at the ``low`` and ``high``
  percentiles (one reduction over all pixels), then rescale every pixel into
  [0, 1] with clamping. The three stretched channels are stacked into a
  composite color variable ready for ``imshow``.
- **Hue**: the angular HSV component of each (R, G, B) pixel, normalized to
  [0, 1). Hue is independent of brightness, which makes it a robust
  vegetation index for RGB-only drone imagery.

Both stages return new datasets; source variables are never modified.

Author: fieldimage contributors
"""

import logging
from typing import TYPE_CHECKING, Tuple

import numpy as np
import xarray as xr

from fieldimage.contracts import InvalidPercentileError, require

if TYPE_CHECKING:
    from fieldimage.schemas import InternalConfig

__all__ = [
    'ContrastStretcher',
    'HueExtractor',
    'stretch_limits',
    'rescale',
    'percentile_stretch',
    'rgb_to_hue',
]

logger = logging.getLogger(__name__)


# ============================================================================
# CONTRAST STRETCH
# ============================================================================

def validate_percentiles(low: float, high: float) -> None:
    """Raise InvalidPercentileError unless 0 <= low < high <= 1."""
    require(
        0.0 <= low <= 1.0 and 0.0 <= high <= 1.0,
        f"Percentiles must lie in [0, 1], got low={low}, high={high}",
        InvalidPercentileError,
    )
    require(
        low < high,
        f"Low percentile ({low}) must be below high percentile ({high})",
        InvalidPercentileError,
    )


def stretch_limits(values: np.ndarray, low: float, high: float) -> Tuple[float, float]:
    """Reduce phase of the stretch: values at the low/high percentiles.

    NaN pixels (nodata) are ignored. Returns ``(nan, nan)`` when the band
    has no finite pixel.
    """
    validate_percentiles(low, high)
    values = np.asarray(values, dtype=np.float64)
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return float("nan"), float("nan")
    p_low, p_high = np.quantile(finite, [low, high])
    return float(p_low), float(p_high)


def rescale(values: np.ndarray, p_low: float, p_high: float) -> np.ndarray:
    """Map phase of the stretch: ``(v - p_low) / (p_high - p_low)`` clamped to [0, 1].

    A zero-variance band (``p_high == p_low``) maps every finite pixel to 0.
    """
    values = np.asarray(values, dtype=np.float64)
    if p_high == p_low:
        return np.where(np.isfinite(values), 0.0, np.nan)
    return np.clip((values - p_low) / (p_high - p_low), 0.0, 1.0)


def percentile_stretch(values: np.ndarray, low: float = 0.02, high: float = 0.98) -> np.ndarray:
    """Percentile contrast stretch of one band.

    Parameters
    ----------
    values : np.ndarray
        Band values, any shape.
    low, high : float
        Percentiles in [0, 1] with ``low < high``.

    Returns
    -------
    np.ndarray
        Float64 array of the same shape with values in [0, 1] (NaN preserved).

    Raises
    ------
    InvalidPercentileError
        If ``low >= high`` or either is outside [0, 1].

    Examples
    --------
    >>> percentile_stretch(np.arange(11.0), low=0.1, high=0.9)
    array([0.   , 0.   , 0.125, 0.25 , 0.375, 0.5  , 0.625, 0.75 , 0.875, 1.   , 1.   ])
    """
    p_low, p_high = stretch_limits(values, low, high)
    return rescale(values, p_low, p_high)


class ContrastStretcher:
    """Percentile stretch of the R, G, B bands plus a composite color variable.

    Examples
    --------
    >>> stretcher = ContrastStretcher(config)
    >>> rgb = stretcher.stretch(selected)
    >>> rgb["RGB"].dims
    ('y', 'x', 'channel')
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.low = config.stretch.low
        self.high = config.stretch.high
        self.color_name = config.stretch.color_name
        self.rgb = config.bands.rgb

        logger.info("ContrastStretcher initialized: low=%s, high=%s", self.low, self.high)

    def stretch(self, ds: xr.Dataset) -> xr.Dataset:
        """Attach the composite color of the independently stretched bands.

        Source bands are left as they are; only the composite holds
        stretched values. Per-channel limits are stored in its attrs.
        """
        validate_percentiles(self.low, self.high)

        channels = []
        limits_low, limits_high = [], []
        for name in self.rgb:
            band = ds[name]
            p_low, p_high = stretch_limits(band.values, self.low, self.high)
            channels.append(band.copy(data=rescale(band.values, p_low, p_high)))
            limits_low.append(p_low)
            limits_high.append(p_high)
            logger.debug("Stretched %s: p%.0f=%s, p%.0f=%s",
                         name, self.low * 100, p_low, self.high * 100, p_high)

        color = xr.concat(channels, dim="channel")
        color = color.assign_coords(channel=list(self.rgb)).transpose("y", "x", "channel")
        color.attrs = {
            "long_name": "Contrast-stretched composite color",
            "stretch_percentiles": [self.low, self.high],
            "stretch_low": limits_low,
            "stretch_high": limits_high,
        }

        ds_out = ds.copy()
        ds_out[self.color_name] = color
        return ds_out


# ============================================================================
# HUE
# ============================================================================

def rgb_to_hue(r, g, b) -> np.ndarray:
    """Hue of (r, g, b) pixels, normalized to [0, 1).

    Standard RGB -> HSV hue: with ``delta = max - min``,

    - max is R: ``60 * ((g - b) / delta mod 6)``
    - max is G: ``60 * ((b - r) / delta + 2)``
    - max is B: ``60 * ((r - g) / delta + 4)``

    divided by 360. Achromatic pixels (``delta == 0``) have hue 0. Hue is
    scale invariant, so raw integer bands and stretched bands both work.

    Examples
    --------
    >>> rgb_to_hue(1.0, 0.0, 0.0), rgb_to_hue(0.0, 1.0, 0.0), rgb_to_hue(0.0, 0.0, 1.0)
    (array(0.), array(0.33333333), array(0.66666667))
    """
    r = np.asarray(r, dtype=np.float64)
    g = np.asarray(g, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    maxc = np.maximum(np.maximum(r, g), b)
    minc = np.minimum(np.minimum(r, g), b)
    delta = maxc - minc

    with np.errstate(divide="ignore", invalid="ignore"):
        sector = np.where(
            maxc == r,
            np.mod((g - b) / delta, 6.0),
            np.where(maxc == g, (b - r) / delta + 2.0, (r - g) / delta + 4.0),
        )

    hue = np.mod(sector / 6.0, 1.0)
    return np.where(delta == 0, 0.0, hue)


class HueExtractor:
    """Attach a hue variable computed from the R, G, B bands.

    With ``from_color`` the channels of the stretched composite are used
    instead of the source bands.
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.output_name = config.hue.output_name
        self.color_name = config.stretch.color_name
        self.rgb = config.bands.rgb

    def extract(self, ds: xr.Dataset, from_color: bool = False) -> xr.Dataset:
        if from_color:
            color = ds[self.color_name]
            r, g, b = (color.sel(channel=name, drop=True) for name in self.rgb)
        else:
            r, g, b = (ds[name] for name in self.rgb)
        hue = xr.apply_ufunc(rgb_to_hue, r, g, b)
        hue.attrs = {
            "long_name": "HSV hue",
            "units": "1",
            "valid_range": [0.0, 1.0],
            "source": self.color_name if from_color else "bands",
        }

        ds_out = ds.copy()
        ds_out[self.output_name] = hue
        logger.debug("Hue attached: var=%s, shape=%s", self.output_name, hue.shape)
        return ds_out
