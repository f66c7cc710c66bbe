"""Delineate field-trial plots on a quadrilateral area.

The trial area is given by four ordered corners ``p1, p2, p3, p4`` (e.g.
bottom-left, bottom-right, top-right, top-left). It is subdivided into
``nx x ny`` plots by bilinear interpolation

    P(u, v) = (1-u)(1-v) p1 + u(1-v) p2 + u v p3 + (1-u) v p4

where ``u`` runs along ``p1 -> p2`` and ``v`` along ``p1 -> p4``. Lines of
constant ``u`` or ``v`` are straight, so neighbouring plots share edges
exactly and the plots tile the area without gaps or overlaps.

Only convex quadrilaterals are accepted: for non-convex input the grid
lines can cross and the plots would overlap.

Author: fieldimage contributors
"""

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

import geopandas as gpd
import numpy as np
import pandas as pd
from shapely.geometry import Polygon

from fieldimage.contracts import NonConvexRegionError, RowCountMismatchError, require

if TYPE_CHECKING:
    from fieldimage.schemas import InternalConfig

__all__ = [
    'PlotGridBuilder',
    'quadrangle',
    'discretize',
    'georeference',
    'expand_extent',
]

logger = logging.getLogger(__name__)

Corner = Tuple[float, float]


def _validate_corners(corners: Sequence[Corner]) -> np.ndarray:
    """Return corners as a (4, 2) array, rejecting non-convex quadrilaterals."""
    pts = np.asarray(corners, dtype=np.float64)
    require(
        pts.shape == (4, 2),
        f"A plot region needs 4 (x, y) corners, got array of shape {pts.shape}",
        NonConvexRegionError,
    )
    require(
        bool(np.all(np.isfinite(pts))),
        "Plot region corners must be finite",
        NonConvexRegionError,
    )

    # z-component of the turn at every vertex; convex iff all share one sign
    edges = np.roll(pts, -1, axis=0) - pts
    turns = edges[:, 0] * np.roll(edges, -1, axis=0)[:, 1] - edges[:, 1] * np.roll(edges, -1, axis=0)[:, 0]
    require(
        bool(np.all(turns > 0) or np.all(turns < 0)),
        f"Plot region corners {pts.tolist()} do not form a convex quadrilateral",
        NonConvexRegionError,
    )
    return pts


def quadrangle(corners: Sequence[Corner]) -> Polygon:
    """Polygon of the trial area.

    Raises
    ------
    NonConvexRegionError
        If the corners are degenerate, self-intersecting or non-convex.
    """
    return Polygon(_validate_corners(corners))


def _bilinear(pts: np.ndarray, u: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Evaluate the bilinear map on a (len(v), len(u)) parameter grid."""
    uu, vv = np.meshgrid(u, v)
    uu = uu[..., None]
    vv = vv[..., None]
    p1, p2, p3, p4 = pts
    return (
        (1 - uu) * (1 - vv) * p1
        + uu * (1 - vv) * p2
        + uu * vv * p3
        + (1 - uu) * vv * p4
    )


def discretize(corners: Sequence[Corner], nx: int, ny: int) -> List[Polygon]:
    """Split a convex quadrilateral into ``nx * ny`` plots.

    Plot ``(i, j)`` spans ``u in [i/nx, (i+1)/nx]`` and ``v in [j/ny, (j+1)/ny]``.
    Plots are returned row-major: ``i`` varies fastest, so plot ``k`` is
    ``(i, j) = (k % nx, k // nx)``.

    Raises
    ------
    NonConvexRegionError
        If the corners do not form a convex quadrilateral.
    ValueError
        If nx or ny is not a positive integer.
    """
    require(int(nx) == nx and nx >= 1, f"nx must be a positive integer, got {nx}", ValueError)
    require(int(ny) == ny and ny >= 1, f"ny must be a positive integer, got {ny}", ValueError)
    pts = _validate_corners(corners)
    nx, ny = int(nx), int(ny)

    nodes = _bilinear(pts, np.linspace(0.0, 1.0, nx + 1), np.linspace(0.0, 1.0, ny + 1))

    cells = []
    for j in range(ny):
        for i in range(nx):
            cells.append(Polygon([
                nodes[j, i],
                nodes[j, i + 1],
                nodes[j + 1, i + 1],
                nodes[j + 1, i],
            ]))
    return cells


def georeference(table: pd.DataFrame, grid: Sequence[Polygon], crs=None,
                 nx: Optional[int] = None) -> gpd.GeoDataFrame:
    """Pair table rows 1:1, in order, with plot geometries.

    ``plot_id`` (1-based cell index) is added when the table has no such
    column; ``plot_row``/``plot_col`` are added when ``nx`` is given.

    Raises
    ------
    RowCountMismatchError
        If the table row count differs from the number of plots.
    """
    require(
        len(table) == len(grid),
        f"Table has {len(table)} rows but the plot grid has {len(grid)} cells",
        RowCountMismatchError,
    )

    data = table.reset_index(drop=True).copy()
    if "plot_id" not in data.columns:
        data.insert(0, "plot_id", np.arange(1, len(data) + 1))
    if nx is not None:
        cell = np.arange(len(data))
        data["plot_row"] = cell // nx
        data["plot_col"] = cell % nx

    return gpd.GeoDataFrame(data, geometry=list(grid), crs=crs)


def expand_extent(xmin: float, ymin: float, xmax: float, ymax: float) -> Tuple[float, float, float, float]:
    """Display extent centred on a box and doubled in each dimension.

    Returns ``(x0, y0, width, height)`` with
    ``x0 = xmin - w/2``, ``y0 = ymin - h/2``, ``width = 2w``, ``height = 2h``
    where ``w``/``h`` are the spans of the original box.

    Examples
    --------
    >>> expand_extent(0.0, 0.0, 2.0, 4.0)
    (-1.0, -2.0, 4.0, 8.0)
    """
    width = abs(xmax - xmin)
    height = abs(ymax - ymin)
    return (xmin - width / 2, ymin - height / 2, 2 * width, 2 * height)


class PlotGridBuilder:
    """Config-driven plot delineation.

    Examples
    --------
    >>> builder = PlotGridBuilder(config)
    >>> cells = builder.build()
    >>> gridtable = builder.georeference(data)
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.corners = config.plots.corners
        self.nx = config.plots.nx
        self.ny = config.plots.ny
        self.crs = config.plots.crs

    @property
    def enabled(self) -> bool:
        return self.corners is not None

    @property
    def n_plots(self) -> int:
        return self.nx * self.ny

    def _require_corners(self):
        require(self.enabled, "Plot corners are not configured", ValueError)

    def region(self) -> Polygon:
        self._require_corners()
        return quadrangle(self.corners)

    def build(self) -> List[Polygon]:
        self._require_corners()
        cells = discretize(self.corners, self.nx, self.ny)
        logger.info("Plot grid: %d x %d = %d plots", self.nx, self.ny, len(cells))
        return cells

    def georeference(self, table: pd.DataFrame = None, crs=None) -> gpd.GeoDataFrame:
        """Georeference ``table`` on the plot grid.

        Without a table, an attribute-free grid (``plot_id`` only) is returned.
        """
        cells = self.build()
        if table is None:
            table = pd.DataFrame(index=range(len(cells)))
        return georeference(table, cells, crs=crs or self.crs, nx=self.nx)
