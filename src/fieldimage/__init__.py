"""`fieldimage` - vegetation extraction from drone orthomosaics of field trials.

Subpackages:
- imagery: Loading, band selection, color, classification, denoising
- plots: Plot grid delineation and per-plot statistics
- pipeline: Stage runner
- visualization: Plotting
"""

__version__ = "0.1.0"
