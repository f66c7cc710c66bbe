"""ParamConfig: Expert defaults for the fieldimage pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional, Union
from pydantic import Field, field_validator, model_validator
from fieldimage.schemas.base import FieldImageBaseModel


Corner = tuple[float, float]
BandKey = Union[int, str]


def coerce_band_keys(v):
    """Turn digit-string band keys ("1") into 1-based integer positions."""
    if isinstance(v, dict):
        return {
            int(k) if isinstance(k, str) and k.strip().isdigit() else k: val
            for k, val in v.items()
        }
    return v


# =============================================================================
# Nested Configuration Models
# =============================================================================

class InputConfig(FieldImageBaseModel):
    """Input file locations."""
    image_path: Optional[str] = None
    table_path: Optional[str] = None
    base_dir: Optional[str] = None


class ReaderConfig(FieldImageBaseModel):
    """Orthomosaic reader configuration."""
    masked: bool = Field(True, description="Mask nodata pixels as NaN")
    band_prefix: str = "band_"


class BandConfig(FieldImageBaseModel):
    """Band selection: source index/name -> target name."""
    mapping: dict[BandKey, str] = Field(
        default_factory=lambda: {1: "R", 2: "G", 3: "B"}
    )
    rgb: tuple[str, str, str] = ("R", "G", "B")

    @field_validator("mapping", mode="before")
    @classmethod
    def coerce_mapping_keys(cls, v):
        """Allow "1" as well as 1 for band positions."""
        return coerce_band_keys(v)

    @model_validator(mode="after")
    def rgb_names_are_selected(self):
        """Each target appears once and red, green and blue are among them."""
        targets = list(self.mapping.values())
        duplicates = sorted({name for name in targets if targets.count(name) > 1})
        if duplicates:
            raise ValueError(f"band mapping sends several bands to {duplicates}")
        missing = [name for name in self.rgb if name not in targets]
        if missing:
            raise ValueError(f"rgb bands {missing} are not targets of the band mapping")
        return self


class StretchConfig(FieldImageBaseModel):
    """Percentile contrast stretch configuration."""
    low: float = Field(0.02, ge=0.0, le=1.0)
    high: float = Field(0.98, ge=0.0, le=1.0)
    color_name: str = "RGB"

    @model_validator(mode="after")
    def low_below_high(self):
        if self.low >= self.high:
            raise ValueError(f"stretch low ({self.low}) must be below high ({self.high})")
        return self


class HueConfig(FieldImageBaseModel):
    """Hue index configuration."""
    output_name: str = "HUE"
    use_stretched: bool = Field(
        False, description="Compute hue from stretched bands instead of raw bands"
    )


class ClassifierConfig(FieldImageBaseModel):
    """Quantile threshold classification configuration."""
    quantile: float = Field(0.7, ge=0.0, le=1.0)
    label_name: str = "label"

    @field_validator("quantile", mode="before")
    @classmethod
    def coerce_quantile_to_float(cls, v):
        """Allow int or float for quantile."""
        return float(v)


class DenoiserConfig(FieldImageBaseModel):
    """Mode filter configuration."""
    window_size: int = Field(3, ge=1)
    output_name: str = "mask"

    @field_validator("window_size")
    @classmethod
    def window_is_odd(cls, v):
        if v % 2 == 0:
            raise ValueError(f"window_size must be odd, got {v}")
        return v


class PlotGridConfig(FieldImageBaseModel):
    """Plot delineation configuration."""
    corners: Optional[tuple[Corner, Corner, Corner, Corner]] = None
    nx: int = Field(14, ge=1)
    ny: int = Field(9, ge=1)
    crs: Optional[str] = None


class VisualizationConfig(FieldImageBaseModel):
    """Visualization settings."""
    enabled: bool = True
    dpi: int = Field(150, ge=50)
    figsize: tuple[float, float] = (12.0, 8.0)
    output_format: Literal["png", "pdf", "jpeg"] = "png"
    expand_extent: bool = False
    grid_color: str = "yellow"
    grid_linewidth: float = Field(0.8, gt=0)
    hue_cmap: str = "viridis"
    mask_cmap: str = "Greens"


class OutputConfig(FieldImageBaseModel):
    """Output file configuration."""
    save_netcdf: bool = True
    save_pixels: bool = False
    plots_format: Literal["gpkg", "geojson", "csv"] = "gpkg"


class LoggingConfig(FieldImageBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(FieldImageBaseModel):
    """Complete expert configuration with all defaults.

    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    inputs: InputConfig = Field(default_factory=InputConfig)
    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    bands: BandConfig = Field(default_factory=BandConfig)
    stretch: StretchConfig = Field(default_factory=StretchConfig)
    hue: HueConfig = Field(default_factory=HueConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    denoiser: DenoiserConfig = Field(default_factory=DenoiserConfig)
    plots: PlotGridConfig = Field(default_factory=PlotGridConfig)
    visualization: VisualizationConfig = Field(default_factory=VisualizationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
