"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional, Union
from pydantic import Field, ConfigDict, field_validator, model_validator
from fieldimage.schemas.base import FieldImageBaseModel
from fieldimage.schemas.param import coerce_band_keys


Corner = tuple[float, float]


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalInputConfig(FieldImageBaseModel):
    """Runtime input locations.

    Note: image_path is validated as non-None by the CLI runner before the
    pipeline starts. It may be None when stages are used as a library.
    """
    image_path: Optional[str]
    table_path: Optional[str]
    base_dir: Optional[str]


class InternalReaderConfig(FieldImageBaseModel):
    """Runtime reader configuration."""
    masked: bool
    band_prefix: str


class InternalBandConfig(FieldImageBaseModel):
    """Runtime band selection."""
    mapping: dict[Union[int, str], str]
    rgb: tuple[str, str, str]

    @field_validator("mapping", mode="before")
    @classmethod
    def coerce_mapping_keys(cls, v):
        return coerce_band_keys(v)

    @model_validator(mode="after")
    def rgb_names_are_selected(self):
        targets = list(self.mapping.values())
        duplicates = sorted({name for name in targets if targets.count(name) > 1})
        if duplicates:
            raise ValueError(f"band mapping sends several bands to {duplicates}")
        missing = [name for name in self.rgb if name not in targets]
        if missing:
            raise ValueError(f"rgb bands {missing} are not targets of the band mapping")
        return self


class InternalStretchConfig(FieldImageBaseModel):
    """Runtime contrast stretch configuration."""
    low: float = Field(ge=0.0, le=1.0)
    high: float = Field(ge=0.0, le=1.0)
    color_name: str

    @model_validator(mode="after")
    def low_below_high(self):
        if self.low >= self.high:
            raise ValueError(f"stretch low ({self.low}) must be below high ({self.high})")
        return self


class InternalHueConfig(FieldImageBaseModel):
    """Runtime hue configuration."""
    output_name: str
    use_stretched: bool


class InternalClassifierConfig(FieldImageBaseModel):
    """Runtime classification configuration."""
    quantile: float = Field(ge=0.0, le=1.0)
    label_name: str


class InternalDenoiserConfig(FieldImageBaseModel):
    """Runtime mode filter configuration."""
    window_size: int = Field(ge=1)
    output_name: str

    @field_validator("window_size")
    @classmethod
    def window_is_odd(cls, v):
        if v % 2 == 0:
            raise ValueError(f"window_size must be odd, got {v}")
        return v


class InternalPlotGridConfig(FieldImageBaseModel):
    """Runtime plot delineation configuration."""
    corners: Optional[tuple[Corner, Corner, Corner, Corner]]
    nx: int = Field(ge=1)
    ny: int = Field(ge=1)
    crs: Optional[str]


class InternalVisualizationConfig(FieldImageBaseModel):
    """Runtime visualization settings."""
    enabled: bool
    dpi: int
    figsize: tuple[float, float]
    output_format: Literal["png", "pdf", "jpeg"]
    expand_extent: bool
    grid_color: str
    grid_linewidth: float
    hue_cmap: str
    mask_cmap: str


class InternalOutputConfig(FieldImageBaseModel):
    """Runtime output configuration."""
    save_netcdf: bool
    save_pixels: bool
    plots_format: Literal["gpkg", "geojson", "csv"]


class InternalLoggingConfig(FieldImageBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(FieldImageBaseModel):
    """Authoritative runtime configuration.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.quantile = config.classifier.quantile  # NOT .get()
            self.window_size = config.denoiser.window_size

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation in runtime code
    """

    inputs: InternalInputConfig
    reader: InternalReaderConfig
    bands: InternalBandConfig
    stretch: InternalStretchConfig
    hue: InternalHueConfig
    classifier: InternalClassifierConfig
    denoiser: InternalDenoiserConfig
    plots: InternalPlotGridConfig
    visualization: InternalVisualizationConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
