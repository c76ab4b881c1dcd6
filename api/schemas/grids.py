"""Grid-related API schemas."""

from typing import Dict, List, Optional

from pydantic import BaseModel


class ValueRangeModel(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class VectorGridResponse(BaseModel):
    """Dense vector field; channels are row-major, null where no data."""
    field: str
    time: str
    nx: int
    ny: int
    lon0: float
    lat0: float
    dLon: float
    dLat: float
    u: List[Optional[float]]
    v: List[Optional[float]]
    meta: Dict[str, List[Optional[float]]] = {}
    units: Optional[Dict[str, str]] = None
    range: Optional[ValueRangeModel] = None
    skipped: Dict[str, str] = {}  # lake -> error, multi-lake grids only


class ScalarGridResponse(BaseModel):
    """Dense scalar field; row-major, null where no data."""
    field: str
    time: str
    nx: int
    ny: int
    lon0: float
    lat0: float
    dLon: float
    dLat: float
    t: List[Optional[float]]
    units: Optional[str] = None
    range: Optional[ValueRangeModel] = None
    skipped: Dict[str, str] = {}
