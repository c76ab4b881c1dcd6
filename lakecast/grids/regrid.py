"""
Sparse sample → regular grid projection.

GLOFS frames deliver wind/current/temperature as scattered point lists
with only a nominal spacing hint (dxDeg/dyDeg). Renderers want a dense
lattice, so the samples are projected with nearest-cell binned averaging:

1. Each sample inside the bbox is assigned to its nearest lattice node.
2. A node's value is the mean of the samples assigned to it
   (u and v averaged component-wise for vectors).
3. Empty nodes are filled once from the mean of their valid 8-neighbours.
   Nodes still empty after that pass stay NaN (land / no coverage).

Binning is O(n) in the number of samples and never invents values further
than one cell away from real data.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from lakecast.glofs.frames import ScalarSample, VectorSample

from .types import ScalarFieldGrid, ValueRange, VectorFieldGrid

logger = logging.getLogger(__name__)

# Longest grid axis handed to a renderer
MAX_GRID_DIM = 500

# Fallback spacing bounds (deg) when the spacing hint is unusable
_MIN_FALLBACK_SPACING = 0.05
_MAX_FALLBACK_SPACING = 0.2


@dataclass(frozen=True)
class GridSpec:
    """Lattice geometry for a bbox."""
    nx: int
    ny: int
    lon0: float
    lat0: float
    d_lon: float
    d_lat: float

    @property
    def size(self) -> int:
        return self.nx * self.ny


def usable_spacing(spacing: Optional[float]) -> bool:
    """True for a finite, positive spacing hint."""
    return spacing is not None and math.isfinite(spacing) and spacing > 0


def grid_dims(
    bbox: Sequence[float],
    d_lon: Optional[float] = None,
    d_lat: Optional[float] = None,
    max_dim: int = MAX_GRID_DIM,
) -> GridSpec:
    """
    Lattice covering bbox with the requested spacing.

    Nodes start at (min_lon, min_lat); nx = floor(width / d_lon) + 1.
    Missing or non-positive spacing falls back to width/100 clamped to
    [0.05, 0.2] deg. Spacing is coarsened by an integer factor when either
    axis would exceed max_dim nodes.
    """
    if len(bbox) != 4:
        raise ValueError(f"bbox must have 4 values, got {len(bbox)}")
    min_lon, min_lat, max_lon, max_lat = (float(v) for v in bbox)
    width = max_lon - min_lon
    height = max_lat - min_lat
    if width <= 0 or height <= 0:
        raise ValueError(f"Degenerate bbox {tuple(bbox)}: max must exceed min on both axes")

    if not (usable_spacing(d_lon) and usable_spacing(d_lat)):
        d = max(_MIN_FALLBACK_SPACING, min(_MAX_FALLBACK_SPACING, max(width, height) / 100))
        d_lon = d_lat = d

    def _count(extent, spacing):
        # Tolerance keeps 1.0 / 0.1 from landing on 9.999...
        return int(math.floor(extent / spacing + 1e-9)) + 1

    nx, ny = _count(width, d_lon), _count(height, d_lat)
    longest = max(nx, ny)
    if longest > max_dim:
        factor = math.ceil((longest - 1) / (max_dim - 1))
        d_lon *= factor
        d_lat *= factor
        nx, ny = _count(width, d_lon), _count(height, d_lat)
        logger.debug(f"Grid coarsened x{factor} to {nx}x{ny}")

    return GridSpec(nx=nx, ny=ny, lon0=min_lon, lat0=min_lat, d_lon=float(d_lon), d_lat=float(d_lat))


def _node_index(
    lons: np.ndarray, lats: np.ndarray, bbox: Sequence[float], spec: GridSpec,
) -> Tuple[np.ndarray, np.ndarray]:
    """Flat node index per sample plus the mask of samples that were kept."""
    min_lon, min_lat, max_lon, max_lat = bbox
    inside = (lons >= min_lon) & (lons <= max_lon) & (lats >= min_lat) & (lats <= max_lat)
    i = np.clip(np.rint((lons - spec.lon0) / spec.d_lon), 0, spec.nx - 1).astype(np.int64)
    j = np.clip(np.rint((lats - spec.lat0) / spec.d_lat), 0, spec.ny - 1).astype(np.int64)
    return j * spec.nx + i, inside


def _bin_mean(flat: np.ndarray, values: np.ndarray, counts: np.ndarray, size: int) -> np.ndarray:
    sums = np.bincount(flat, weights=values, minlength=size)
    out = np.full(size, np.nan, dtype=np.float64)
    hit = counts > 0
    out[hit] = sums[hit] / counts[hit]
    return out


def neighbour_fill(grid2d: np.ndarray) -> np.ndarray:
    """
    Fill NaN nodes with the mean of their finite 8-neighbours.

    Single pass: only values present before the call are used as donors.
    """
    ny, nx = grid2d.shape
    valid = np.isfinite(grid2d)
    padded_vals = np.pad(np.where(valid, grid2d, 0.0), 1)
    padded_mask = np.pad(valid.astype(np.float64), 1)

    total = np.zeros((ny, nx), dtype=np.float64)
    count = np.zeros((ny, nx), dtype=np.float64)
    for dj in (-1, 0, 1):
        for di in (-1, 0, 1):
            if dj == 0 and di == 0:
                continue
            total += padded_vals[1 + dj:1 + dj + ny, 1 + di:1 + di + nx]
            count += padded_mask[1 + dj:1 + dj + ny, 1 + di:1 + di + nx]

    out = np.array(grid2d, dtype=np.float64, copy=True)
    fill = ~valid & (count > 0)
    out[fill] = total[fill] / count[fill]
    return out


def _value_range(values: np.ndarray) -> Optional[ValueRange]:
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return None
    return ValueRange(min=float(finite.min()), max=float(finite.max()))


def regrid_vector(
    samples: Sequence[VectorSample],
    bbox: Sequence[float],
    d_lon: Optional[float] = None,
    d_lat: Optional[float] = None,
    fill_gaps: bool = True,
    max_dim: int = MAX_GRID_DIM,
    units: Optional[Dict[str, str]] = None,
) -> VectorFieldGrid:
    """
    Project vector samples onto a regular grid.

    Args:
        samples: Wind or current samples (any order, any density)
        bbox: (min_lon, min_lat, max_lon, max_lat); samples outside are ignored
        d_lon, d_lat: Spacing hint, typically the frame's dxDeg/dyDeg
        fill_gaps: Run one neighbour-fill pass over empty nodes
        units: Channel units, e.g. {"u": "m/s", "v": "m/s"}

    Returns:
        VectorFieldGrid whose range spans the finite vector magnitudes
    """
    spec = grid_dims(bbox, d_lon, d_lat, max_dim)
    data = np.array([(s.lon, s.lat, s.u, s.v) for s in samples], dtype=np.float64).reshape(-1, 4)
    lons, lats, u, v = data.T

    flat, keep = _node_index(lons, lats, bbox, spec)
    keep &= np.isfinite(u) & np.isfinite(v)
    flat, u, v = flat[keep], u[keep], v[keep]
    counts = np.bincount(flat, minlength=spec.size).astype(np.float64)

    grid_u = _bin_mean(flat, u, counts, spec.size)
    grid_v = _bin_mean(flat, v, counts, spec.size)
    if fill_gaps:
        grid_u = neighbour_fill(grid_u.reshape(spec.ny, spec.nx)).ravel()
        grid_v = neighbour_fill(grid_v.reshape(spec.ny, spec.nx)).ravel()

    return VectorFieldGrid(
        nx=spec.nx, ny=spec.ny,
        lon0=spec.lon0, lat0=spec.lat0, d_lon=spec.d_lon, d_lat=spec.d_lat,
        u=grid_u, v=grid_v,
        units=units,
        range=_value_range(np.hypot(grid_u, grid_v)),
    )


def regrid_scalar(
    samples: Sequence[ScalarSample],
    bbox: Sequence[float],
    d_lon: Optional[float] = None,
    d_lat: Optional[float] = None,
    fill_gaps: bool = True,
    max_dim: int = MAX_GRID_DIM,
    units: Optional[str] = None,
) -> ScalarFieldGrid:
    """Project scalar samples onto a regular grid (see regrid_vector)."""
    spec = grid_dims(bbox, d_lon, d_lat, max_dim)
    data = np.array([(s.lon, s.lat, s.value) for s in samples], dtype=np.float64).reshape(-1, 3)
    lons, lats, values = data.T

    flat, keep = _node_index(lons, lats, bbox, spec)
    keep &= np.isfinite(values)
    flat, values = flat[keep], values[keep]
    counts = np.bincount(flat, minlength=spec.size).astype(np.float64)

    grid_t = _bin_mean(flat, values, counts, spec.size)
    if fill_gaps:
        grid_t = neighbour_fill(grid_t.reshape(spec.ny, spec.nx)).ravel()

    return ScalarFieldGrid(
        nx=spec.nx, ny=spec.ny,
        lon0=spec.lon0, lat0=spec.lat0, d_lon=spec.d_lon, d_lat=spec.d_lat,
        t=grid_t,
        units=units,
        range=_value_range(grid_t),
    )
