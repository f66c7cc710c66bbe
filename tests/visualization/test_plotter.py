"""Test static figure generation."""

from pathlib import Path

import pytest

from fieldimage.pipeline.processor import VegetationProcessor
from fieldimage.schemas.user import UserVisualizationConfig
from fieldimage.visualization.plotter import FieldPlotter

pytestmark = pytest.mark.unit


@pytest.fixture
def processed(field_ds, make_config, field_corners):
    config = make_config(
        plot_corners=field_corners,
        plot_grid=(3, 2),
        visualization=UserVisualizationConfig(dpi=50, figsize=(4, 3)),
    )
    processor = VegetationProcessor(config)
    result = processor.process(field_ds)
    return config, result, processor.extract_vegetation(result), processor.analyze_plots(result)


def test_plot_all_writes_every_figure(processed, output_dirs):
    config, result, vegetation, plots = processed

    saved = FieldPlotter(config).plot_all(result, vegetation, plots, "field.tif", output_dirs)

    assert set(saved) == {"rgb", "hue", "mask", "vegetation", "plots"}
    for path in saved.values():
        assert path.endswith(".png")
        assert Path(path).parent == output_dirs["plots"]
        assert Path(path).stat().st_size > 0


def test_plot_all_without_plot_grid(processed, output_dirs):
    config, result, vegetation, _ = processed

    saved = FieldPlotter(config).plot_all(result, vegetation, None, "field.tif", output_dirs)

    assert "plots" not in saved


def test_expanded_extent(processed, temp_dir, make_config):
    _, result, _, _ = processed
    config = make_config(
        visualization=UserVisualizationConfig(dpi=50, figsize=(4, 3), expand_extent=True),
    )

    path = FieldPlotter(config).plot_rgb(result, temp_dir / "rgb_expanded")

    assert path.endswith("rgb_expanded.png")


def test_bounds_cover_pixel_edges(processed, internal_config):
    _, result, _, _ = processed

    xmin, ymin, xmax, ymax = FieldPlotter(internal_config)._bounds(result)

    assert (xmax - xmin, ymax - ymin) == (12.0, 10.0)
