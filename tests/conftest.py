"""Root-level pytest fixtures for the fieldimage test suite.

Provides shared configuration fixtures following Pydantic-based architecture
and small synthetic orthomosaics. All tests must use these fixtures instead
of creating raw dict configs.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

import numpy as np
import xarray as xr

from fieldimage.schemas import ParamConfig, UserConfig, resolve_config
from fieldimage.setup_directories import setup_output_directories


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Examples
    --------
    >>> def test_classifier_init(internal_config):
    ...     clf = ThresholdClassifier(internal_config)
    ...     assert clf.quantile == 0.7
    """
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_custom_quantile(make_config):
    ...     config = make_config(hue_quantile=0.9)
    ...     clf = ThresholdClassifier(config)
    ...     assert clf.quantile == 0.9
    """
    def _make(**user_overrides):
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def output_dirs(temp_dir):
    """Standard fieldimage output directory structure."""
    return setup_output_directories(temp_dir / "output")


# =============================================================================
# Raster Fixtures
# =============================================================================

# 10 x 12 pixel field of bare soil with a 4 x 5 block of canopy and one
# isolated canopy pixel. 1 m pixels, north-up (y descending).
SOIL = (150, 110, 80)
CANOPY = (50, 200, 40)
BLOCK_ROWS = slice(3, 7)
BLOCK_COLS = slice(4, 9)
LONE_PIXEL = (8, 1)
X0, Y0 = 296600.0, 4888200.0


def _field_bands():
    ny, nx = 10, 12
    bands = np.empty((3, ny, nx), dtype=np.float64)
    for k in range(3):
        bands[k] = SOIL[k]
        bands[k][BLOCK_ROWS, BLOCK_COLS] = CANOPY[k]
        bands[k][LONE_PIXEL] = CANOPY[k]
    x = X0 + 0.5 + np.arange(nx)
    y = Y0 - 0.5 - np.arange(ny)
    return bands, x, y


@pytest.fixture
def field_bands():
    """(band, y, x) array plus x and y pixel-centre coordinates."""
    return _field_bands()


@pytest.fixture
def field_ds():
    """Loader-style dataset: band_1, band_2, band_3 on (y, x)."""
    bands, x, y = _field_bands()
    return xr.Dataset(
        {f"band_{k + 1}": (("y", "x"), bands[k]) for k in range(3)},
        coords={"x": x, "y": y},
    )


@pytest.fixture
def rgb_ds(field_ds):
    """Field dataset with bands already named R, G, B."""
    return field_ds.rename({"band_1": "R", "band_2": "G", "band_3": "B"})


@pytest.fixture
def field_corners():
    """Trial area covering the whole field raster."""
    return (
        (X0, Y0 - 10.0),
        (X0 + 12.0, Y0 - 10.0),
        (X0 + 12.0, Y0),
        (X0, Y0),
    )


@pytest.fixture
def field_tif(temp_dir):
    """The field raster written as a 3-band uint8 GeoTIFF (UTM 18N)."""
    import rioxarray  # noqa: F401  registers the .rio accessor

    bands, x, y = _field_bands()
    da = xr.DataArray(
        bands.astype(np.uint8),
        dims=("band", "y", "x"),
        coords={"band": [1, 2, 3], "y": y, "x": x},
    ).rio.write_crs("EPSG:32618")

    path = temp_dir / "field.tif"
    da.rio.to_raster(path)
    return path
