"""
LAKECAST API Pydantic schemas.

Re-exports all schema classes:
    from api.schemas import FrameModel, VectorGridResponse, ...
"""

# GLOFS frames
from .glofs import (  # noqa: F401
    VectorSampleModel,
    ScalarSampleModel,
    FrameUnitsModel,
    FrameMetaModel,
    FrameModel,
    FrameResultModel,
)

# Grids
from .grids import ValueRangeModel, VectorGridResponse, ScalarGridResponse  # noqa: F401
