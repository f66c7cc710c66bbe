"""Test the hue index."""

import pytest
import numpy as np

from fieldimage.contracts import assert_hue
from fieldimage.imagery.color import ContrastStretcher, HueExtractor, rgb_to_hue

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("rgb, expected", [
    ((1.0, 0.0, 0.0), 0.0),
    ((1.0, 1.0, 0.0), 1 / 6),
    ((0.0, 1.0, 0.0), 1 / 3),
    ((0.0, 1.0, 1.0), 1 / 2),
    ((0.0, 0.0, 1.0), 2 / 3),
    ((1.0, 0.0, 1.0), 5 / 6),
])
def test_primary_and_secondary_hues(rgb, expected):
    assert float(rgb_to_hue(*rgb)) == pytest.approx(expected)


def test_achromatic_pixels_have_zero_hue():
    grey = np.array([0.0, 0.3, 1.0])

    np.testing.assert_array_equal(rgb_to_hue(grey, grey, grey), np.zeros(3))


def test_hue_stays_below_one():
    """Reds leaning towards blue wrap to just under 1."""
    hue = float(rgb_to_hue(1.0, 0.0, 0.01))

    assert 0.99 < hue < 1.0


def test_hue_is_scale_invariant():
    rng = np.random.default_rng(1)
    r, g, b = rng.uniform(1, 255, size=(3, 100))

    np.testing.assert_allclose(rgb_to_hue(r, g, b), rgb_to_hue(r / 255, g / 255, b / 255))


def test_hue_range_random_pixels():
    rng = np.random.default_rng(2)
    r, g, b = rng.uniform(0, 1, size=(3, 1000))
    hue = rgb_to_hue(r, g, b)

    assert hue.min() >= 0.0
    assert hue.max() < 1.0


def test_nan_pixels_give_nan_hue():
    assert np.isnan(rgb_to_hue(np.nan, 0.5, 0.2))


def test_extractor_attaches_hue(rgb_ds, internal_config):
    out = HueExtractor(internal_config).extract(rgb_ds)

    assert_hue(out, "HUE")
    assert out["HUE"].dims == ("y", "x")
    # canopy is green: hue near 1/3; soil is orange: hue near 0.07
    assert out["HUE"].values[4, 5] == pytest.approx((2 - 10 / 160) / 6)
    assert out["HUE"].values[0, 0] == pytest.approx((30 / 70) / 6)


def test_extractor_from_composite(rgb_ds, internal_config):
    colored = ContrastStretcher(internal_config).stretch(rgb_ds)

    out = HueExtractor(internal_config).extract(colored, from_color=True)

    # stretched soil is (1, 0, 1) and stretched canopy is (0, 1, 0)
    assert out["HUE"].values[0, 0] == pytest.approx(5 / 6)
    assert out["HUE"].values[4, 5] == pytest.approx(1 / 3)
    assert out["HUE"].attrs["source"] == "RGB"
    np.testing.assert_array_equal(out["G"].values, rgb_ds["G"].values)
