"""
GLOFS router for LAKECAST API.

Thin pass-through to the upstream frame server so browser clients can
reach it same-origin. Responses keep the upstream wire shape; multi-lake
entries gain an explicit ``kind`` tag. Frames are forwarded as delivered:
the frame schemas document the shape in OpenAPI but are not enforced.

Endpoints:
    GET /api/glofs/latest_run   → lake code → run id (null when none)
    GET /api/glofs/frame        → one lake / one hour
    GET /api/glofs/frame_multi  → many lakes, one upstream request
"""

import asyncio
import logging
from typing import Dict, Optional, Tuple

from fastapi import APIRouter, HTTPException, Query

from api.schemas import FrameModel, FrameResultModel
from api.state import get_app_state
from lakecast.glofs.client import DEFAULT_STRIDE_RG, DEFAULT_STRIDE_WIND
from lakecast.glofs.frames import Lake

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/glofs", tags=["GLOFS"])


def parse_bbox_param(bbox: str) -> Tuple[float, float, float, float]:
    """Parse "minLon,minLat,maxLon,maxLat" or raise 422."""
    try:
        values = tuple(float(v) for v in bbox.split(","))
    except ValueError:
        raise HTTPException(status_code=422, detail=f"bbox must be numeric: {bbox!r}")
    if len(values) != 4:
        raise HTTPException(status_code=422, detail="bbox must be minLon,minLat,maxLon,maxLat")
    return values


@router.get("/latest_run")
async def latest_run(lake: str = Query("all", description="Lake code or 'all'")) -> Dict[str, Optional[str]]:
    """Latest available run per lake."""
    client = get_app_state().client
    return await asyncio.to_thread(client.latest_run, lake)


@router.get("/frame", responses={200: {"model": FrameModel}})
async def frame(
    lake: str = Query(..., description="leofs | lmhofs | loofs | lsofs"),
    hour: int = Query(..., ge=-6, le=120),
    bbox: str = Query(..., description="minLon,minLat,maxLon,maxLat"),
    run: Optional[str] = Query(None),
    stride_rg: int = Query(DEFAULT_STRIDE_RG, ge=1),
    stride_wind: int = Query(DEFAULT_STRIDE_WIND, ge=1),
):
    """One lake's frame for one forecast hour."""
    box = parse_bbox_param(bbox)
    try:
        lake_code = Lake.parse(lake)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    client = get_app_state().client
    result = await asyncio.to_thread(
        client.fetch_frame, lake_code, hour, box, run, stride_rg, stride_wind,
    )
    return result.to_dict()


@router.get("/frame_multi", responses={200: {"model": Dict[str, FrameResultModel]}})
async def frame_multi(
    lakes: str = Query(..., description="Comma-separated lake codes"),
    hour: int = Query(..., ge=-6, le=120),
    bbox: str = Query(..., description="minLon,minLat,maxLon,maxLat"),
    run: Optional[str] = Query(None),
    stride_rg: int = Query(DEFAULT_STRIDE_RG, ge=1),
    stride_wind: int = Query(DEFAULT_STRIDE_WIND, ge=1),
):
    """Several lakes in one upstream request; per-lake errors are returned, not raised."""
    box = parse_bbox_param(bbox)
    client = get_app_state().client
    results = await asyncio.to_thread(
        client.fetch_frame_multi, lakes, hour, box, run, stride_rg, stride_wind,
    )
    return {code: r.to_dict() for code, r in results.items()}
