"""Test band selection and renaming."""

import pytest
import numpy as np

from fieldimage.contracts import FieldImageError, MissingBandError
from fieldimage.imagery.band_selector import RasterBandSelector, select_bands

pytestmark = pytest.mark.unit


def test_select_by_position_renames(field_ds):
    out = select_bands(field_ds, {1: "R", 2: "G", 3: "B"})

    assert list(out.data_vars) == ["R", "G", "B"]
    np.testing.assert_array_equal(out["G"].values, field_ds["band_2"].values)


def test_select_by_name(field_ds):
    out = select_bands(field_ds, {"band_3": "B"})

    assert list(out.data_vars) == ["B"]


def test_select_reorders_bands(field_ds):
    """BGR files are handled by the mapping alone."""
    out = select_bands(field_ds, {3: "R", 2: "G", 1: "B"})

    np.testing.assert_array_equal(out["R"].values, field_ds["band_3"].values)
    np.testing.assert_array_equal(out["B"].values, field_ds["band_1"].values)


def test_missing_position_raises(field_ds):
    with pytest.raises(MissingBandError, match="Band 4"):
        select_bands(field_ds, {4: "NIR"})


def test_missing_name_raises(field_ds):
    with pytest.raises(MissingBandError, match="not found"):
        select_bands(field_ds, {"nir": "NIR"})


def test_missing_band_is_a_value_error(field_ds):
    with pytest.raises(ValueError):
        select_bands(field_ds, {0: "R"})


def test_duplicate_target_rejected(field_ds):
    with pytest.raises(FieldImageError, match="duplicate targets"):
        select_bands(field_ds, {1: "R", 2: "R"})


def test_source_dataset_untouched(field_ds):
    before = field_ds.copy(deep=True)
    out = select_bands(field_ds, {1: "R", 2: "G", 3: "B"})
    out["R"].values[:] = 0

    assert field_ds.identical(before)


def test_selector_uses_config_mapping(field_ds, make_config):
    config = make_config(bands={"1": "R", "2": "G", "3": "B"})
    selector = RasterBandSelector(config)
    out = selector.select(field_ds)

    assert selector.mapping == {1: "R", 2: "G", 3: "B"}
    assert set(out.data_vars) == {"R", "G", "B"}


def test_pixel_count_and_order_preserved(field_ds):
    out = select_bands(field_ds, {1: "R", 2: "G", 3: "B"})

    assert out["R"].shape == field_ds["band_1"].shape
    np.testing.assert_array_equal(out["x"].values, field_ds["x"].values)
    np.testing.assert_array_equal(out["y"].values, field_ds["y"].values)
