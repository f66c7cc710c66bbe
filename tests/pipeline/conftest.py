import pytest
import pandas as pd



@pytest.fixture
def plot_config(make_config, field_corners):
    """Config with a 3 x 2 plot grid over the whole field raster."""
    return make_config(plot_corners=field_corners, plot_grid=(3, 2))


@pytest.fixture
def plot_table():
    """Per-plot attribute table in grid order."""
    return pd.DataFrame({
        "entry": [f"G{k:02d}" for k in range(1, 7)],
        "block": [1, 1, 1, 2, 2, 2],
    })
