"""Test quantile threshold classification."""

import pytest
import numpy as np
import xarray as xr

from fieldimage.contracts import EmptyInputError, InvalidPercentileError, assert_labelled
from fieldimage.imagery.classifier import ThresholdClassifier, quantile_cutoff, threshold_labels
from fieldimage.imagery.color import HueExtractor

pytestmark = pytest.mark.unit


def test_quantile_cutoff_interpolates():
    assert quantile_cutoff(np.arange(1, 11), 0.7) == pytest.approx(7.3)


def test_threshold_seventy_percent():
    labels = threshold_labels(np.arange(1, 11), 0.7)

    assert labels.sum() == 3
    np.testing.assert_array_equal(labels[-3:], [True, True, True])


def test_value_equal_to_cutoff_is_false():
    labels = threshold_labels(np.array([1.0, 2.0, 3.0]), 0.5)

    np.testing.assert_array_equal(labels, [False, False, True])


def test_constant_input_has_no_positive():
    labels = threshold_labels(np.full(20, 0.4), 0.7)

    assert not labels.any()


def test_nan_pixels_ignored_and_false():
    values = np.array([np.nan, 1.0, 2.0, 3.0, 4.0])

    assert quantile_cutoff(values, 0.5) == pytest.approx(2.5)
    np.testing.assert_array_equal(threshold_labels(values, 0.5), [False, False, False, True, True])


def test_empty_input_raises():
    with pytest.raises(EmptyInputError):
        quantile_cutoff(np.array([]), 0.7)

    with pytest.raises(EmptyInputError):
        quantile_cutoff(np.array([np.nan, np.nan]), 0.7)


@pytest.mark.parametrize("q", [-0.1, 1.5])
def test_quantile_out_of_range_raises(q):
    with pytest.raises(InvalidPercentileError):
        quantile_cutoff(np.arange(10), q)


def test_classifier_labels_canopy(rgb_ds, internal_config):
    hued = HueExtractor(internal_config).extract(rgb_ds)
    out = ThresholdClassifier(internal_config).classify(hued)

    assert_labelled(out, "label")
    # 20 block pixels plus the isolated canopy pixel
    assert int(out["label"].sum()) == 21
    assert bool(out["label"].values[8, 1])
    assert out["label"].attrs["quantile"] == 0.7


def test_classifier_quantile_from_config(make_config):
    config = make_config(hue_quantile=0.9)

    assert ThresholdClassifier(config).quantile == 0.9


def test_precomputed_cutoff_matches_quantile():
    values = np.array([0.1, 0.4, np.nan, 0.4, 0.9])

    np.testing.assert_array_equal(
        threshold_labels(values, 0.5, cutoff=quantile_cutoff(values, 0.5)),
        threshold_labels(values, 0.5),
    )


def test_classifier_ties_and_nan_are_false(internal_config):
    values = np.array([[0.2, 0.5, np.nan], [0.5, 0.8, 0.9]])
    ds = xr.Dataset({"HUE": (("y", "x"), values)})

    out = ThresholdClassifier(internal_config).classify(ds)

    # q=0.7 over [0.2, 0.5, 0.5, 0.8, 0.9] is 0.74
    assert out["label"].attrs["cutoff"] == pytest.approx(0.74)
    np.testing.assert_array_equal(out["label"].values, threshold_labels(values, 0.7))
    np.testing.assert_array_equal(out["label"].values, [[False, False, False], [False, True, True]])
