"""Raster processing modules.

- loader: Read orthomosaics and plot tables
- band_selector: Pick and rename the color bands
- color: Contrast stretch and hue index
- classifier: Quantile threshold labels
- denoiser: Mode filter of the labels
- selection: Pixel tables and masked selection
"""

from fieldimage.imagery.loader import OrthomosaicLoader
from fieldimage.imagery.band_selector import RasterBandSelector
from fieldimage.imagery.color import ContrastStretcher, HueExtractor
from fieldimage.imagery.classifier import ThresholdClassifier
from fieldimage.imagery.denoiser import MaskDenoiser
from fieldimage.imagery.selection import MaskedSelector

__all__ = [
    "OrthomosaicLoader",
    "RasterBandSelector",
    "ContrastStretcher",
    "HueExtractor",
    "ThresholdClassifier",
    "MaskDenoiser",
    "MaskedSelector",
]
