"""Mask stage contract.

Enforces the guarantee that after thresholding or denoising, the label
variable is a boolean raster aligned with the source bands.
"""

import xarray as xr
from fieldimage.contracts.base import require


def assert_labelled(ds: xr.Dataset, label_name: str) -> None:
    """Enforce mask stage contract.

    Called after ThresholdClassifier.classify() and MaskDenoiser.denoise().

    Parameters
    ----------
    ds : xr.Dataset
        Dataset carrying the label variable

    label_name : str
        Name of the boolean label variable (from config)

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        label_name in ds.data_vars,
        f"Mask contract violated: '{label_name}' not found"
    )

    labels = ds[label_name]
    require(
        labels.dtype.kind == "b",
        f"Mask contract violated: '{label_name}' dtype is {labels.dtype}, expected bool"
    )
    require(
        labels.dims == ("y", "x"),
        f"Mask contract violated: '{label_name}' has dims {labels.dims}, expected ('y', 'x')"
    )
