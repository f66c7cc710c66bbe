"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases
for common naming patterns (e.g., IMAGE_PATH -> image_path).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults.
"""

from typing import Optional, Any, Union
from pydantic import Field, field_validator
from fieldimage.schemas.base import FieldImageBaseModel
from fieldimage.schemas.param import coerce_band_keys


Corner = tuple[float, float]


class UserStretchConfig(FieldImageBaseModel):
    """User-facing stretch config."""
    low: Optional[float] = None
    high: Optional[float] = None
    color_name: Optional[str] = None


class UserHueConfig(FieldImageBaseModel):
    """User-facing hue config."""
    output_name: Optional[str] = None
    use_stretched: Optional[bool] = None


class UserClassifierConfig(FieldImageBaseModel):
    """User-facing classifier config."""
    quantile: Optional[float] = None
    label_name: Optional[str] = None

    @field_validator("quantile", mode="before")
    @classmethod
    def coerce_quantile(cls, v):
        """Accept int or float for quantile."""
        if v is not None:
            return float(v)
        return v


class UserDenoiserConfig(FieldImageBaseModel):
    """User-facing mode filter config."""
    window_size: Optional[int] = None
    output_name: Optional[str] = None


class UserPlotGridConfig(FieldImageBaseModel):
    """User-facing plot grid config."""
    corners: Optional[tuple[Corner, Corner, Corner, Corner]] = None
    nx: Optional[int] = None
    ny: Optional[int] = None
    crs: Optional[str] = None


class UserVisualizationConfig(FieldImageBaseModel):
    """User-facing visualization config."""
    enabled: Optional[bool] = None
    dpi: Optional[int] = None
    figsize: Optional[tuple[float, float]] = None
    output_format: Optional[str] = None
    expand_extent: Optional[bool] = None


class UserConfig(FieldImageBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    Usage
    -----
        user_cfg = UserConfig(
            image_path="rgb_ex1.tif",
            table_path="data_ex1.csv",
            hue_quantile=0.7,
            plot_corners=((296607.6, 4888188), (296620.4, 4888188),
                          (296622.8, 4888244), (296609.8, 4888244)),
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Inputs and outputs
    image_path: Optional[str] = Field(None, alias="IMAGE_PATH")
    table_path: Optional[str] = Field(None, alias="TABLE_PATH")
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")

    # Band selection (flat aliases)
    bands: Optional[dict[Union[int, str], str]] = Field(None, alias="BANDS")

    # Stretch settings (flat aliases)
    low_percentile: Optional[float] = Field(None, alias="LOW_PERCENTILE")
    high_percentile: Optional[float] = Field(None, alias="HIGH_PERCENTILE")

    # Vegetation mask settings (flat aliases)
    hue_quantile: Optional[float] = Field(None, alias="HUE_QUANTILE")
    mode_window: Optional[int] = Field(None, alias="MODE_WINDOW")

    # Plot grid settings (flat aliases)
    plot_corners: Optional[tuple[Corner, Corner, Corner, Corner]] = Field(None, alias="PLOT_CORNERS")
    plot_grid: Optional[tuple[int, int]] = Field(None, alias="PLOT_GRID")

    log_level: Optional[str] = Field(None, alias="LOG_LEVEL")

    # Nested overrides (advanced users)
    stretch: Optional[UserStretchConfig] = None
    hue: Optional[UserHueConfig] = None
    classifier: Optional[UserClassifierConfig] = None
    denoiser: Optional[UserDenoiserConfig] = None
    plots: Optional[UserPlotGridConfig] = None
    visualization: Optional[UserVisualizationConfig] = None

    model_config = FieldImageBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("bands", mode="before")
    @classmethod
    def coerce_band_mapping(cls, v):
        return coerce_band_keys(v)

    @field_validator("low_percentile", "high_percentile", "hue_quantile", mode="before")
    @classmethod
    def coerce_numeric_fields(cls, v):
        """Accept int or float for numeric fields."""
        if v is not None:
            return float(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides: dict[str, Any] = {}

        inputs = {}
        if self.image_path is not None:
            inputs["image_path"] = self.image_path
        if self.table_path is not None:
            inputs["table_path"] = self.table_path
        if self.base_dir is not None:
            inputs["base_dir"] = str(self.base_dir)
        if inputs:
            overrides["inputs"] = inputs

        if self.bands is not None:
            overrides["bands"] = {"mapping": dict(self.bands)}

        # Stretch section
        stretch = {}
        if self.low_percentile is not None:
            stretch["low"] = self.low_percentile
        if self.high_percentile is not None:
            stretch["high"] = self.high_percentile
        if self.stretch is not None:
            stretch.update(self.stretch.model_dump(exclude_none=True))
        if stretch:
            overrides["stretch"] = stretch

        if self.hue is not None:
            hue = self.hue.model_dump(exclude_none=True)
            if hue:
                overrides["hue"] = hue

        # Classifier section
        classifier = {}
        if self.hue_quantile is not None:
            classifier["quantile"] = self.hue_quantile
        if self.classifier is not None:
            classifier.update(self.classifier.model_dump(exclude_none=True))
        if classifier:
            overrides["classifier"] = classifier

        # Denoiser section
        denoiser = {}
        if self.mode_window is not None:
            denoiser["window_size"] = self.mode_window
        if self.denoiser is not None:
            denoiser.update(self.denoiser.model_dump(exclude_none=True))
        if denoiser:
            overrides["denoiser"] = denoiser

        # Plot grid section
        plots = {}
        if self.plot_corners is not None:
            plots["corners"] = self.plot_corners
        if self.plot_grid is not None:
            plots["nx"], plots["ny"] = self.plot_grid
        if self.plots is not None:
            plots.update(self.plots.model_dump(exclude_none=True))
        if plots:
            overrides["plots"] = plots

        if self.visualization is not None:
            visualization = self.visualization.model_dump(exclude_none=True)
            if visualization:
                overrides["visualization"] = visualization

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
