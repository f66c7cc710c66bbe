"""Vegetation processing pipeline.

Runs an orthomosaic through band selection, contrast stretch, hue index,
threshold classification and mode-filter denoising, then extracts the
vegetation pixels and, when a plot grid is configured, per-plot statistics.
Optionally persists results to NetCDF, CSV and GeoPackage.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING

import geopandas as gpd
import pandas as pd
import xarray as xr

from fieldimage.imagery.loader import OrthomosaicLoader
from fieldimage.imagery.band_selector import RasterBandSelector
from fieldimage.imagery.color import ContrastStretcher, HueExtractor
from fieldimage.imagery.classifier import ThresholdClassifier
from fieldimage.imagery.denoiser import MaskDenoiser
from fieldimage.imagery.selection import MaskedSelector, select_within, to_pixel_table
from fieldimage.plots.grid import PlotGridBuilder
from fieldimage.plots.analyzer import PlotAnalyzer
from fieldimage.setup_directories import get_raster_path, get_table_path
from fieldimage.contracts import (
    ContractViolation,
    FieldImageError,
    assert_raster,
    assert_stretched,
    assert_hue,
    assert_labelled,
    assert_plot_grid,
)

if TYPE_CHECKING:
    from fieldimage.schemas import InternalConfig

__all__ = ['VegetationProcessor']

logger = logging.getLogger(__name__)


class VegetationProcessor:
    """Processes one orthomosaic through the complete vegetation pipeline.

    **Processing Pipeline:**

    1. **Select**: first three bands renamed to R, G, B.
    2. **Stretch**: composite RGB color of the percentile-stretched bands;
       the source bands keep their values.
    3. **Hue**: per-pixel hue from the source bands (or the composite).
    4. **Classify**: hue above the configured quantile is vegetation.
    5. **Denoise**: mode filter removes isolated pixels from the label.
    6. **Select vegetation**: pixel table of the masked pixels.
    7. **Plots** (optional): delineate the trial area, georeference the plot
       table, crop pixels to the area and compute per-plot statistics.

    Every stage returns a new dataset; contracts are checked at each stage
    boundary. A failing stage raises and no partial result is returned.

    Example usage::

        processor = VegetationProcessor(config, output_dirs)
        result = processor.process_file("rgb_ex1.tif", "data_ex1.csv")
        result["plots"][["plot_id", "vegetation_fraction"]]
    """

    def __init__(self, config: "InternalConfig", output_dirs: Optional[Dict[str, Path]] = None):
        """Initialize processor with validated configuration.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.

        output_dirs : dict, optional
            Output directory paths (from setup_output_directories). If None,
            nothing is written to disk.
        """
        self.config = config
        self.output_dirs = output_dirs

        self.loader = OrthomosaicLoader(config)
        self.selector = RasterBandSelector(config)
        self.stretcher = ContrastStretcher(config)
        self.hue_extractor = HueExtractor(config)
        self.classifier = ThresholdClassifier(config)
        self.denoiser = MaskDenoiser(config)
        self.masked_selector = MaskedSelector(config)
        self.grid_builder = PlotGridBuilder(config)
        self.analyzer = PlotAnalyzer(config)

    def process(self, ds: xr.Dataset) -> xr.Dataset:
        """Raster stages: select -> stretch -> hue -> classify -> denoise.

        Returns the source R, G, B bands with the stretched composite color,
        hue, raw label and denoised mask variables.
        """
        rgb_names = self.config.bands.rgb

        selected = self.selector.select(ds)
        assert_raster(selected, rgb_names)

        colored = self.stretcher.stretch(selected)
        assert_stretched(colored, self.config.stretch.color_name)

        hued = self.hue_extractor.extract(colored, from_color=self.config.hue.use_stretched)
        assert_hue(hued, self.config.hue.output_name)

        classified = self.classifier.classify(hued)
        assert_labelled(classified, self.config.classifier.label_name)

        result = self.denoiser.denoise(classified)
        assert_labelled(result, self.config.denoiser.output_name)

        mask = result[self.config.denoiser.output_name]
        logger.info("Vegetation mask: %d of %d pixels (%.1f%%)",
                    int(mask.sum()), mask.size, 100.0 * float(mask.mean()))
        return result

    def extract_vegetation(self, result: xr.Dataset) -> pd.DataFrame:
        """Pixel table of the vegetation pixels (denoised mask True)."""
        return self.masked_selector.select(result)

    def analyze_plots(self, result: xr.Dataset, table: Optional[pd.DataFrame] = None) -> Optional[gpd.GeoDataFrame]:
        """Per-plot statistics, or None when no plot corners are configured."""
        if not self.grid_builder.enabled:
            logger.info("No plot corners configured, skipping plot analysis")
            return None

        gridtable = self.grid_builder.georeference(table, crs=result.rio.crs)
        assert_plot_grid(gridtable, self.grid_builder.n_plots)

        pixels = select_within(to_pixel_table(result), self.grid_builder.region())
        logger.info("Trial area holds %d pixels", len(pixels))
        return self.analyzer.extract(pixels, gridtable)

    def process_file(self, image_path: str, table_path: Optional[str] = None) -> dict:
        """Load, process, analyse and persist one orthomosaic.

        Returns
        -------
        dict
            ``raster`` (xr.Dataset), ``vegetation`` (pd.DataFrame),
            ``plots`` (gpd.GeoDataFrame or None) and ``outputs`` (dict of
            written file paths).

        Raises
        ------
        ContractViolation
            If a stage breaks its contract (pipeline bug).
        FieldImageError
            If the inputs violate a stage precondition.
        """
        logger.info("Processing: %s", Path(image_path).name)
        try:
            ds = self.loader.load(image_path)
            table = self.loader.load_table(table_path) if table_path else None

            result = self.process(ds)
            vegetation = self.extract_vegetation(result)
            plots = self.analyze_plots(result, table)

        except ContractViolation as e:
            logger.critical("CRITICAL: Pipeline contract violated: %s", e)
            logger.critical("This indicates a bug in pipeline logic.")
            raise
        except FieldImageError as e:
            logger.error("Invalid input for %s: %s", Path(image_path).name, e)
            raise

        outputs = self._save(image_path, result, vegetation, plots)
        return {
            "raster": result,
            "vegetation": vegetation,
            "plots": plots,
            "outputs": outputs,
        }

    @staticmethod
    def _for_netcdf(result: xr.Dataset) -> xr.Dataset:
        """Copy of ``result`` without the source GeoTIFF encodings.

        The stretched composite inherits the integer dtype and fill value of
        the raw bands through its encoding; writing it as-is would truncate.
        """
        crs = result.rio.crs
        out = result.copy()
        for variable in out.variables.values():
            variable.encoding = {}
        if crs is not None:
            out = out.rio.write_crs(crs)
        return out

    def _save(self, image_path: str, result: xr.Dataset, vegetation: pd.DataFrame,
              plots: Optional[gpd.GeoDataFrame]) -> Dict[str, Path]:
        """Persist results according to the output config."""
        outputs: Dict[str, Path] = {}
        if self.output_dirs is None:
            return outputs

        out_cfg = self.config.output

        if out_cfg.save_netcdf:
            nc_path = get_raster_path(self.output_dirs, image_path)
            self._for_netcdf(result).to_netcdf(nc_path)
            outputs["raster"] = nc_path
            logger.info("Saved raster: %s", nc_path)

        if out_cfg.save_pixels:
            csv_path = get_table_path(self.output_dirs, image_path, "vegetation_pixels", "csv")
            vegetation.to_csv(csv_path)
            outputs["vegetation"] = csv_path
            logger.info("Saved %d vegetation pixels: %s", len(vegetation), csv_path)

        if plots is not None:
            fmt = out_cfg.plots_format
            plots_path = get_table_path(self.output_dirs, image_path, "plots", fmt)
            if fmt == "csv":
                pd.DataFrame(plots).assign(geometry=plots.geometry.to_wkt()).to_csv(plots_path, index=False)
            elif fmt == "geojson":
                plots.to_file(plots_path, driver="GeoJSON")
            else:
                plots.to_file(plots_path, driver="GPKG", layer="plots")
            outputs["plots"] = plots_path
            logger.info("Saved plot statistics: %s", plots_path)

        return outputs
