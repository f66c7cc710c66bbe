from pathlib import Path
from fieldimage.setup_directories import (
    setup_output_directories,
    get_raster_path,
    get_table_path,
    get_plot_path,
    get_log_path,
)


def test_setup_output_directories_creates_all(tmp_path):
    dirs = setup_output_directories(tmp_path)

    assert set(dirs.keys()) == {"base", "rasters", "tables", "plots", "logs"}

    for path in dirs.values():
        assert isinstance(path, Path)
        assert path.is_dir()


def test_setup_output_directories_is_idempotent(tmp_path):
    assert setup_output_directories(tmp_path) == setup_output_directories(tmp_path)


def test_paths_named_after_image_stem(tmp_path):
    dirs = setup_output_directories(tmp_path)

    assert get_raster_path(dirs, "data/rgb_ex1.tif") == dirs["rasters"] / "rgb_ex1_vegetation.nc"
    assert get_table_path(dirs, "rgb_ex1.tif", "plots", ".gpkg") == dirs["tables"] / "rgb_ex1_plots.gpkg"
    assert get_plot_path(dirs, "rgb_ex1.tif", "mask") == dirs["plots"] / "rgb_ex1_mask.png"
    assert get_log_path(dirs, "rgb_ex1.tif") == dirs["logs"] / "pipeline_rgb_ex1.log"


def test_log_path_without_image_is_timestamped(tmp_path):
    dirs = setup_output_directories(tmp_path)

    path = get_log_path(dirs)

    assert path.parent == dirs["logs"]
    assert path.name.startswith("pipeline_")
    assert path.suffix == ".log"
