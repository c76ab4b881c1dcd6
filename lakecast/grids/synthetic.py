"""
Synthetic field providers for development/demo.

Use these when no GLOFS frame server is configured. Fields are smooth,
deterministic functions of (bbox, hour): the same request always yields
the same grid, and neighbouring hours evolve gradually.
"""

import math
from typing import Sequence, Tuple

import numpy as np

from lakecast.glofs.frames import parse_timestamp

from .regrid import GridSpec
from .types import ScalarFieldGrid, ValueRange, VectorFieldGrid

_HOUR_S = 3600


class _Lcg:
    """32-bit linear congruential generator returning values in [0, 1]."""

    def __init__(self, seed: int):
        self.state = seed & 0xFFFFFFFF

    def __call__(self) -> float:
        self.state = (self.state * 1664525 + 1013904223) & 0xFFFFFFFF
        return (self.state & 0xFFFF) / 0xFFFF


def smooth_noise(nx: int, ny: int, seed: int = 1) -> np.ndarray:
    """
    Smooth noise in [0, 1] of length nx*ny (row-major).

    A coarse random lattice (at least 8x8) bilinearly upsampled to nx x ny.
    """
    rnd = _Lcg(seed)
    coarse_x = max(8, nx // 8)
    coarse_y = max(8, ny // 8)
    coarse = np.array(
        [rnd() for _ in range(coarse_x * coarse_y)], dtype=np.float64,
    ).reshape(coarse_y, coarse_x)

    fy = np.arange(ny) / max(ny - 1, 1) * (coarse_y - 1)
    fx = np.arange(nx) / max(nx - 1, 1) * (coarse_x - 1)
    j0 = np.floor(fy).astype(int)
    i0 = np.floor(fx).astype(int)
    j1 = np.minimum(coarse_y - 1, j0 + 1)
    i1 = np.minimum(coarse_x - 1, i0 + 1)
    tv = (fy - j0)[:, None]
    tu = (fx - i0)[None, :]

    a = coarse[np.ix_(j0, i0)]
    b = coarse[np.ix_(j0, i1)]
    d = coarse[np.ix_(j1, i0)]
    e = coarse[np.ix_(j1, i1)]
    out = (1 - tv) * ((1 - tu) * a + tu * b) + tv * ((1 - tu) * d + tu * e)
    return out.ravel()


def synthetic_dims(bbox: Sequence[float]) -> GridSpec:
    """
    Lattice for synthetic fields: ~0.05-0.2 deg spacing scaled to the bbox,
    never smaller than 32 x 28 nodes.
    """
    min_lon, min_lat, max_lon, max_lat = bbox
    w = max(1.0, abs(max_lon - min_lon))
    h = max(1.0, abs(max_lat - min_lat))
    d = max(0.05, min(0.2, max(w, h) / 100))
    nx = max(32, int(math.floor(w / d)))
    ny = max(28, int(math.floor(h / d)))
    return GridSpec(nx=nx, ny=ny, lon0=float(min_lon), lat0=float(min_lat), d_lon=w / nx, d_lat=h / ny)


def _time_block(time_iso: str, hours: int = 1) -> int:
    """Whole blocks of `hours` since the epoch."""
    ts = parse_timestamp(time_iso).timestamp()
    return int(math.floor(ts / (hours * _HOUR_S)))


def _geometry(spec: GridSpec) -> Tuple[int, int, float, float, float, float]:
    return spec.nx, spec.ny, spec.lon0, spec.lat0, spec.d_lon, spec.d_lat


class SyntheticWindProvider:
    """Wind 3-14 m/s with gentle curl."""

    async def get_grid(self, bbox: Sequence[float], time_iso: str) -> VectorFieldGrid:
        spec = synthetic_dims(bbox)
        t_seed = _time_block(time_iso)
        n1 = smooth_noise(spec.nx, spec.ny, 1234 + t_seed)
        n2 = smooth_noise(spec.nx, spec.ny, 5678 + t_seed)

        angle = n1 * math.pi * 2
        mag = 3 + 11 * n2
        nx, ny, lon0, lat0, d_lon, d_lat = _geometry(spec)
        return VectorFieldGrid(
            nx=nx, ny=ny, lon0=lon0, lat0=lat0, d_lon=d_lon, d_lat=d_lat,
            u=mag * np.cos(angle),
            v=mag * np.sin(angle),
            units={"u": "m/s", "v": "m/s"},
            range=ValueRange(min=0, max=14),
        )


class SyntheticWaveProvider:
    """
    Wave propagation field with significant wave height.

    u/v is the deep-water group velocity (0.78 * Tm) pointing in the
    going-to direction; Hs (0.2-2.4 m) rides along as an aux channel.
    """

    async def get_grid(self, bbox: Sequence[float], time_iso: str) -> VectorFieldGrid:
        spec = synthetic_dims(bbox)
        t_seed = _time_block(time_iso)
        dir_noise = smooth_noise(spec.nx, spec.ny, 2468 + t_seed)
        tm_noise = smooth_noise(spec.nx, spec.ny, 9753 + t_seed)
        hs_noise = smooth_noise(spec.nx, spec.ny, 8642 + t_seed)

        mwd = dir_noise * 360                    # coming-from (deg)
        theta = np.radians((mwd + 180) % 360)    # going-to
        tm = 3 + 7 * tm_noise                    # mean period 3-10 s
        c_g = 0.78 * tm
        hs = 0.2 + 2.2 * hs_noise

        nx, ny, lon0, lat0, d_lon, d_lat = _geometry(spec)
        return VectorFieldGrid(
            nx=nx, ny=ny, lon0=lon0, lat0=lat0, d_lon=d_lon, d_lat=d_lat,
            u=c_g * np.sin(theta),
            v=c_g * np.cos(theta),
            meta={"Hs": hs},
            units={"u": "m/s", "v": "m/s"},
            range=ValueRange(min=0, max=8),
        )


class SyntheticTempProvider:
    """Lake surface temperature 6-24 °C, reported in Kelvin."""

    async def get_grid(self, bbox: Sequence[float], time_iso: str) -> ScalarFieldGrid:
        spec = synthetic_dims(bbox)
        # 3-hour blocks: temperature changes slower than wind
        t_seed = _time_block(time_iso, hours=3)
        base = smooth_noise(spec.nx, spec.ny, 1357 + t_seed)

        nx, ny, lon0, lat0, d_lon, d_lat = _geometry(spec)
        return ScalarFieldGrid(
            nx=nx, ny=ny, lon0=lon0, lat0=lat0, d_lon=d_lon, d_lat=d_lat,
            # 6-24 °C on a 273.15 K base, inside the declared 279.15-297.15 K range
            t=273.15 + (6 + 18 * base),
            units="K",
            range=ValueRange(min=279.15, max=297.15),
        )
