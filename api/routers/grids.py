"""
Grid router for LAKECAST API.

Serves dense regular grids for the map renderer. GLOFS-backed fields are
regridded from frames; synthetic fields need no upstream.

Endpoints:
    GET /api/grids/{field}?bbox=...&time=...[&lake=...][&run=...]

Fields:
    wind, curr       GLOFS vector fields
    temp             GLOFS water temperature
    synthetic-wind   demo wind (no upstream)
    synthetic-wave   demo wave propagation + Hs
    synthetic-temp   demo temperature (K)

``lake`` may list several lakes ("leofs,lmhofs"); they are fetched in one
frame_multi request and lakes that fail upstream are reported under
``skipped`` instead of failing the grid.
"""

import logging
from typing import Dict, List, Optional, Union

import numpy as np
import requests
from fastapi import APIRouter, HTTPException, Query

from api.routers.glofs import parse_bbox_param
from api.schemas import ScalarGridResponse, VectorGridResponse
from api.state import get_app_state
from lakecast.glofs.frames import Lake
from lakecast.grids import (
    GlofsMultiLakeProvider,
    GlofsScalarProvider,
    GlofsVectorProvider,
    ScalarFieldGrid,
    SyntheticTempProvider,
    SyntheticWaveProvider,
    SyntheticWindProvider,
    VectorFieldGrid,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/grids", tags=["Grids"])

GLOFS_FIELDS = ("wind", "curr", "temp")
SYNTHETIC_PROVIDERS = {
    "synthetic-wind": SyntheticWindProvider,
    "synthetic-wave": SyntheticWaveProvider,
    "synthetic-temp": SyntheticTempProvider,
}
FIELD_NAMES = GLOFS_FIELDS + tuple(SYNTHETIC_PROVIDERS)

_DECIMALS = 4


def _channel(arr: np.ndarray) -> List[Optional[float]]:
    """Round and replace NaN/Inf by None for JSON."""
    rounded = np.round(arr.astype(np.float64), _DECIMALS)
    return [float(x) if np.isfinite(x) else None for x in rounded]


def _range(grid) -> Optional[Dict[str, Optional[float]]]:
    if grid.range is None:
        return None
    return {"min": grid.range.min, "max": grid.range.max}


def _geometry(grid) -> Dict:
    return {
        "nx": grid.nx, "ny": grid.ny,
        "lon0": grid.lon0, "lat0": grid.lat0,
        "dLon": grid.d_lon, "dLat": grid.d_lat,
    }


def serialize_grid(field: str, time_iso: str, grid, skipped: Optional[Dict[str, str]] = None) -> Dict:
    """JSON body for a vector or scalar grid."""
    body = {"field": field, "time": time_iso, **_geometry(grid), "range": _range(grid),
            "units": grid.units, "skipped": skipped or {}}
    if isinstance(grid, VectorFieldGrid):
        body["u"] = _channel(grid.u)
        body["v"] = _channel(grid.v)
        body["meta"] = {name: _channel(values) for name, values in grid.meta.items()}
    elif isinstance(grid, ScalarFieldGrid):
        body["t"] = _channel(grid.t)
    return body


def _lakes(lake: Optional[str]) -> List[Lake]:
    if not lake:
        raise HTTPException(status_code=422, detail="lake is required for GLOFS fields")
    try:
        lakes = [Lake.parse(code) for code in lake.split(",") if code.strip()]
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if not lakes:
        raise HTTPException(status_code=422, detail="lake is required for GLOFS fields")
    return lakes


@router.get("/{field}", response_model=Union[VectorGridResponse, ScalarGridResponse])
async def get_field_grid(
    field: str,
    bbox: str = Query(..., description="minLon,minLat,maxLon,maxLat"),
    time: str = Query(..., description="ISO-8601 valid time"),
    lake: Optional[str] = Query(None, description="Lake code(s), comma-separated"),
    run: Optional[str] = Query(None, description="Pin a model run (default: latest)"),
):
    """Dense grid for one field at one time."""
    if field not in FIELD_NAMES:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown field '{field}'. Valid: {', '.join(FIELD_NAMES)}",
        )
    box = parse_bbox_param(bbox)

    skipped: Dict[str, str] = {}
    try:
        if field in SYNTHETIC_PROVIDERS:
            grid = await SYNTHETIC_PROVIDERS[field]().get_grid(box, time)
        else:
            lakes = _lakes(lake)
            client = get_app_state().client
            if len(lakes) > 1:
                provider = GlofsMultiLakeProvider(client, lakes, field=field, run=run)
                grid = await provider.get_grid(box, time)
                skipped = provider.last_errors
            elif field == "temp":
                grid = await GlofsScalarProvider(client, lakes[0], run=run).get_grid(box, time)
            else:
                grid = await GlofsVectorProvider(client, lakes[0], field=field, run=run).get_grid(box, time)
    except requests.exceptions.JSONDecodeError:
        raise
    except ValueError as e:
        # Bad time, bbox or hour window
        raise HTTPException(status_code=422, detail=str(e))

    logger.info(f"Grid {field} {grid.nx}x{grid.ny} at {time}")
    return serialize_grid(field, time, grid, skipped)
