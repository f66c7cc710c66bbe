"""
Directory setup for the field imagery pipeline.

Flat directory structure, one file set per orthomosaic:
- rasters/<image>_vegetation.nc   classified raster (bands, RGB, HUE, label, mask)
- tables/<image>_<kind>.<ext>      pixel and per-plot tables
- plots/<image>_<kind>.<fmt>       static figures
- logs/pipeline_<image>.log

Author: fieldimage contributors
"""

from pathlib import Path
from datetime import datetime, timezone


def setup_output_directories(base_output_dir=None):
    """
    Set up organized output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path, optional
        Base output directory. If None, ``./output`` is used.

    Returns
    -------
    dict
        Dictionary with paths: 'base', 'rasters', 'tables', 'plots', 'logs'
    """
    if base_output_dir is None:
        base_output_dir = Path.cwd() / "output"

    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "rasters": base_output_dir / "rasters",
        "tables": base_output_dir / "tables",
        "plots": base_output_dir / "plots",
        "logs": base_output_dir / "logs",
    }

    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)

    return directories


def get_raster_path(output_dirs, image_name, kind="vegetation"):
    """
    Get NetCDF path for a processed raster.

    Example
    -------
    >>> get_raster_path(dirs, 'rgb_ex1')
    Path('output/rasters/rgb_ex1_vegetation.nc')
    """
    raster_dir = output_dirs["rasters"]
    raster_dir.mkdir(parents=True, exist_ok=True)
    return raster_dir / f"{Path(image_name).stem}_{kind}.nc"


def get_table_path(output_dirs, image_name, kind="plots", ext="gpkg"):
    """
    Get path for a pixel or per-plot table.

    Example
    -------
    >>> get_table_path(dirs, 'rgb_ex1', 'plots', 'gpkg')
    Path('output/tables/rgb_ex1_plots.gpkg')
    """
    table_dir = output_dirs["tables"]
    table_dir.mkdir(parents=True, exist_ok=True)
    ext = ext[1:] if ext.startswith('.') else ext
    return table_dir / f"{Path(image_name).stem}_{kind}.{ext}"


def get_plot_path(output_dirs, image_name, plot_type="rgb", fmt="png"):
    """
    Get path for a figure.

    Example
    -------
    >>> get_plot_path(dirs, 'rgb_ex1', 'mask')
    Path('output/plots/rgb_ex1_mask.png')
    """
    plot_dir = output_dirs["plots"]
    plot_dir.mkdir(parents=True, exist_ok=True)
    return plot_dir / f"{Path(image_name).stem}_{plot_type}.{fmt}"


def get_log_path(output_dirs, image_name=None):
    """
    Get log file path.

    Parameters
    ----------
    output_dirs : dict
        Output directories from setup_output_directories()
    image_name : str, optional
        Orthomosaic file name; its stem names the log.
    """
    log_dir = output_dirs["logs"]
    log_dir.mkdir(parents=True, exist_ok=True)

    if image_name:
        filename = f"pipeline_{Path(image_name).stem}.log"
    else:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        filename = f"pipeline_{timestamp}.log"

    return log_dir / filename
