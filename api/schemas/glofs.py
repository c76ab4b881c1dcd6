"""GLOFS frame API schemas (wire shape of the upstream frame server)."""

from typing import List, Literal, Optional

from pydantic import BaseModel


class VectorSampleModel(BaseModel):
    lon: float
    lat: float
    u: float
    v: float


class ScalarSampleModel(BaseModel):
    lon: float
    lat: float
    value: float


class FrameUnitsModel(BaseModel):
    wind: str
    curr: str
    temp: str


class FrameMetaModel(BaseModel):
    lake: str
    run: str
    tag: str
    units: FrameUnitsModel


class FrameModel(BaseModel):
    """One lake / one forecast hour."""
    meta: FrameMetaModel
    time: str
    dxDeg: Optional[float] = None  # spacing hint only
    dyDeg: Optional[float] = None
    wind: List[VectorSampleModel]
    curr: List[VectorSampleModel]
    temp: List[ScalarSampleModel]


class FrameResultModel(BaseModel):
    """Per-lake entry of a multi-lake fetch, tagged by kind."""
    kind: Literal["ok", "error"]
    frame: Optional[FrameModel] = None
    error: Optional[str] = None
