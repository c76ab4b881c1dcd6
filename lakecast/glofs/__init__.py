"""GLOFS frame server client and frame model."""

from .errors import (
    GlofsError,
    GlofsHTTPError,
    FrameUnavailableError,
    NoRunAvailableError,
)
from .frames import (
    Lake,
    LAKE_ALL,
    ALL_LAKES,
    VectorSample,
    ScalarSample,
    FrameUnits,
    FrameMeta,
    Frame,
    FrameError,
    FrameResult,
    MultiFrames,
)
from .client import (
    GlofsClient,
    get_client,
    latest_run,
    fetch_frame,
    fetch_frame_multi,
)

__all__ = [
    'GlofsError',
    'GlofsHTTPError',
    'FrameUnavailableError',
    'NoRunAvailableError',
    'Lake',
    'LAKE_ALL',
    'ALL_LAKES',
    'VectorSample',
    'ScalarSample',
    'FrameUnits',
    'FrameMeta',
    'Frame',
    'FrameError',
    'FrameResult',
    'MultiFrames',
    'GlofsClient',
    'get_client',
    'latest_run',
    'fetch_frame',
    'fetch_frame_multi',
]
