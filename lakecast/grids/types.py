"""
Regular-grid field types and provider protocols.

A grid is a dense lattice of nx * ny nodes starting at (lon0, lat0) with
spacing (d_lon, d_lat). Each channel is a flat float32 array of length
nx * ny in row-major order: node (i, j) lives at index j * nx + i, with i
along longitude and j along latitude.

Grids are immutable snapshots. Channel arrays are copied on construction
and flagged read-only, so a provider cannot change a grid it has already
handed out.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Protocol, Sequence, Tuple

import numpy as np

BBox = Tuple[float, float, float, float]  # (min_lon, min_lat, max_lon, max_lat)


@dataclass(frozen=True)
class ValueRange:
    """Declared value range used for colour-scale normalisation."""
    min: Optional[float] = None
    max: Optional[float] = None


def _frozen_channel(name: str, values, size: int) -> np.ndarray:
    arr = np.array(values, dtype=np.float32).ravel()
    if arr.size != size:
        raise ValueError(f"channel '{name}' has {arr.size} values, expected nx*ny={size}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class _GridGeometry:
    nx: int
    ny: int
    lon0: float
    lat0: float
    d_lon: float
    d_lat: float

    @property
    def size(self) -> int:
        return self.nx * self.ny

    def lons(self) -> np.ndarray:
        """Node longitudes along i."""
        return self.lon0 + np.arange(self.nx) * self.d_lon

    def lats(self) -> np.ndarray:
        """Node latitudes along j."""
        return self.lat0 + np.arange(self.ny) * self.d_lat

    def _check_geometry(self):
        if self.nx < 1 or self.ny < 1:
            raise ValueError(f"grid extents must be positive, got nx={self.nx}, ny={self.ny}")


@dataclass(frozen=True, eq=False)
class VectorFieldGrid(_GridGeometry):
    """Dense (u, v) field with optional auxiliary channels (e.g. Hs)."""
    u: np.ndarray = None
    v: np.ndarray = None
    meta: Mapping[str, np.ndarray] = field(default_factory=dict)
    units: Optional[Dict[str, str]] = None  # {"u": "m/s", "v": "m/s"}
    range: Optional[ValueRange] = None

    def __post_init__(self):
        self._check_geometry()
        object.__setattr__(self, "u", _frozen_channel("u", self.u, self.size))
        object.__setattr__(self, "v", _frozen_channel("v", self.v, self.size))
        object.__setattr__(self, "meta", MappingProxyType({
            name: _frozen_channel(name, values, self.size)
            for name, values in (self.meta or {}).items()
        }))

    def speed(self) -> np.ndarray:
        """Vector magnitude per node."""
        return np.hypot(self.u, self.v)

    def as_2d(self, channel: str) -> np.ndarray:
        """Channel reshaped to (ny, nx)."""
        arr = getattr(self, channel) if channel in ("u", "v") else self.meta[channel]
        return arr.reshape(self.ny, self.nx)


@dataclass(frozen=True, eq=False)
class ScalarFieldGrid(_GridGeometry):
    """Dense scalar field (e.g. water temperature)."""
    t: np.ndarray = None
    units: Optional[str] = None  # 'K' | '°C'
    range: Optional[ValueRange] = None

    def __post_init__(self):
        self._check_geometry()
        object.__setattr__(self, "t", _frozen_channel("t", self.t, self.size))

    def as_2d(self) -> np.ndarray:
        return self.t.reshape(self.ny, self.nx)


class VectorFieldProvider(Protocol):
    """Produces a vector grid covering bbox at an exact time."""

    async def get_grid(self, bbox: Sequence[float], time_iso: str) -> VectorFieldGrid:
        ...


class ScalarFieldProvider(Protocol):
    """Produces a scalar grid covering bbox at an exact time."""

    async def get_grid(self, bbox: Sequence[float], time_iso: str) -> ScalarFieldGrid:
        ...
