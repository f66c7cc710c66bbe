"""Color stage contracts.

Enforces the guarantees of the contrast stretch (composite color in [0, 1])
and of the hue extraction (hue in [0, 1)).
"""

import numpy as np
import xarray as xr
from fieldimage.contracts.base import require


def assert_stretched(ds: xr.Dataset, color_name: str) -> None:
    """Enforce contrast-stretch stage contract.

    Parameters
    ----------
    ds : xr.Dataset
        Dataset from ContrastStretcher.stretch()

    color_name : str
        Name of the composite color variable (from config)

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        color_name in ds.data_vars,
        f"Color contract violated: '{color_name}' not found"
    )

    color = ds[color_name]
    require(
        color.dims == ("y", "x", "channel"),
        f"Color contract violated: '{color_name}' has dims {color.dims}, expected ('y', 'x', 'channel')"
    )
    require(
        color.sizes["channel"] == 3,
        f"Color contract violated: '{color_name}' has {color.sizes['channel']} channels, expected 3"
    )

    values = color.values
    finite = values[np.isfinite(values)]
    if finite.size > 0:
        require(
            finite.min() >= 0.0 and finite.max() <= 1.0,
            f"Color contract violated: '{color_name}' outside [0, 1] "
            f"(min={finite.min()}, max={finite.max()})"
        )


def assert_hue(ds: xr.Dataset, hue_name: str) -> None:
    """Enforce hue stage contract.

    Raises
    ------
    ContractViolation
        If the hue variable is missing, not 2D, or outside [0, 1)
    """
    require(
        hue_name in ds.data_vars,
        f"Hue contract violated: '{hue_name}' not found"
    )

    hue = ds[hue_name]
    require(
        hue.ndim == 2,
        f"Hue contract violated: '{hue_name}' has {hue.ndim} dims, expected 2"
    )

    values = hue.values
    finite = values[np.isfinite(values)]
    if finite.size > 0:
        require(
            finite.min() >= 0.0 and finite.max() < 1.0,
            f"Hue contract violated: '{hue_name}' outside [0, 1)"
        )
