"""Field plot modules.

- grid: Delineate the trial area into plots
- analyzer: Per-plot vegetation statistics
"""

from fieldimage.plots.grid import PlotGridBuilder
from fieldimage.plots.analyzer import PlotAnalyzer

__all__ = [
    "PlotGridBuilder",
    "PlotAnalyzer",
]
