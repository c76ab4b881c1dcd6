"""
GLOFS-backed grid providers.

Adapters that satisfy the VectorFieldProvider / ScalarFieldProvider
protocols by fetching frames from the GLOFS frame server and regridding
their sparse samples (see lakecast.grids.regrid).

The blocking HTTP client runs in a worker thread so get_grid can be
awaited from an event loop.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from lakecast.glofs.client import (
    DEFAULT_STRIDE_RG,
    DEFAULT_STRIDE_WIND,
    MAX_HOUR,
    MIN_HOUR,
    GlofsClient,
)
from lakecast.glofs.errors import FrameUnavailableError, NoRunAvailableError
from lakecast.glofs.frames import (
    LAKE_ALL,
    Frame,
    Lake,
    MultiFrames,
    ScalarSample,
    VectorSample,
    parse_timestamp,
)

from .regrid import regrid_scalar, regrid_vector, usable_spacing
from .types import ScalarFieldGrid, VectorFieldGrid

logger = logging.getLogger(__name__)

VECTOR_FIELDS = ("wind", "curr")


def hour_offset(run: str, time_iso: str) -> int:
    """
    Whole hours from the run's reference time to time_iso.

    Raises:
        ValueError: Offset is fractional or outside the -6..120 window
    """
    delta_s = (parse_timestamp(time_iso) - parse_timestamp(run)).total_seconds()
    hours, rem = divmod(delta_s, 3600)
    if rem:
        raise ValueError(f"{time_iso} is not on an hourly step of run {run}")
    hours = int(hours)
    if not MIN_HOUR <= hours <= MAX_HOUR:
        raise ValueError(
            f"{time_iso} is {hours} h from run {run}, outside [{MIN_HOUR}, {MAX_HOUR}]"
        )
    return hours


def frame_vector_grid(frame: Frame, field: str, bbox: Sequence[float]) -> VectorFieldGrid:
    """Regrid a frame's wind or current samples."""
    samples = _vector_samples(frame, field)
    unit = getattr(frame.meta.units, field)
    return regrid_vector(samples, bbox, frame.dx_deg, frame.dy_deg, units={"u": unit, "v": unit})


def frame_scalar_grid(frame: Frame, bbox: Sequence[float]) -> ScalarFieldGrid:
    """Regrid a frame's temperature samples."""
    return regrid_scalar(frame.temp, bbox, frame.dx_deg, frame.dy_deg, units=frame.meta.units.temp)


def _vector_samples(frame: Frame, field: str) -> Tuple[VectorSample, ...]:
    if field not in VECTOR_FIELDS:
        raise ValueError(f"Unknown vector field '{field}' (expected one of {VECTOR_FIELDS})")
    return getattr(frame, field)


class _GlofsProviderBase:
    """Shared run resolution and frame fetch for a single lake."""

    def __init__(
        self,
        client: GlofsClient,
        lake: Union[str, Lake],
        run: Optional[str] = None,
        stride_rg: int = DEFAULT_STRIDE_RG,
        stride_wind: int = DEFAULT_STRIDE_WIND,
    ):
        """
        Args:
            client: Frame server client
            lake: Lake to serve
            run: Pin a run id; otherwise the latest run is discovered once and reused
            stride_rg, stride_wind: Server-side subsampling passed through to fetch_frame
        """
        self.client = client
        self.lake = Lake.parse(lake)
        self.stride_rg = stride_rg
        self.stride_wind = stride_wind
        self._run = run

    def resolve_run(self) -> str:
        if self._run is None:
            runs = self.client.latest_run(self.lake)
            run = runs.get(self.lake.value)
            if run is None:
                raise NoRunAvailableError(f"No run available for {self.lake.value}")
            logger.info(f"Resolved {self.lake.value} run {run}")
            self._run = run
        return self._run

    def _fetch(self, bbox: Sequence[float], time_iso: str) -> Frame:
        run = self.resolve_run()
        hour = hour_offset(run, time_iso)
        return self.client.fetch_frame(
            self.lake, hour, bbox, run=run,
            stride_rg=self.stride_rg, stride_wind=self.stride_wind,
        )


class GlofsVectorProvider(_GlofsProviderBase):
    """Wind or current grids for one lake."""

    def __init__(self, client: GlofsClient, lake: Union[str, Lake], field: str = "wind", **kwargs):
        super().__init__(client, lake, **kwargs)
        if field not in VECTOR_FIELDS:
            raise ValueError(f"Unknown vector field '{field}' (expected one of {VECTOR_FIELDS})")
        self.field = field

    def grid_sync(self, bbox: Sequence[float], time_iso: str) -> VectorFieldGrid:
        return frame_vector_grid(self._fetch(bbox, time_iso), self.field, bbox)

    async def get_grid(self, bbox: Sequence[float], time_iso: str) -> VectorFieldGrid:
        return await asyncio.to_thread(self.grid_sync, bbox, time_iso)


class GlofsScalarProvider(_GlofsProviderBase):
    """Water temperature grids for one lake."""

    def grid_sync(self, bbox: Sequence[float], time_iso: str) -> ScalarFieldGrid:
        return frame_scalar_grid(self._fetch(bbox, time_iso), bbox)

    async def get_grid(self, bbox: Sequence[float], time_iso: str) -> ScalarFieldGrid:
        return await asyncio.to_thread(self.grid_sync, bbox, time_iso)


class GlofsMultiLakeProvider:
    """
    One grid covering several lakes, fetched with a single frame_multi call.

    Lakes whose entry is an error marker are logged and left out; the grid
    fails only when no lake produced a frame. All lakes share one run: the
    first non-null run among the requested lakes, unless pinned.
    """

    def __init__(
        self,
        client: GlofsClient,
        lakes: Iterable[Union[str, Lake]],
        field: str = "wind",
        run: Optional[str] = None,
        stride_rg: int = DEFAULT_STRIDE_RG,
        stride_wind: int = DEFAULT_STRIDE_WIND,
    ):
        if field not in VECTOR_FIELDS + ("temp",):
            raise ValueError(f"Unknown field '{field}'")
        self.client = client
        self.lakes = [Lake.parse(lake) for lake in lakes]
        if not self.lakes:
            raise ValueError("At least one lake is required")
        self.field = field
        self.stride_rg = stride_rg
        self.stride_wind = stride_wind
        self._run = run
        self.last_errors: Dict[str, str] = {}

    def resolve_run(self) -> str:
        """First non-null run among the requested lakes, in request order."""
        if self._run is None:
            runs = self.client.latest_run(LAKE_ALL)
            for lake in self.lakes:
                run = runs.get(lake.value)
                if run is not None:
                    logger.info(f"Resolved shared run {run} from {lake.value}")
                    self._run = run
                    break
            else:
                codes = ", ".join(lake.value for lake in self.lakes)
                raise NoRunAvailableError(f"No run available for any of: {codes}")
        return self._run

    def _usable_frames(self, results: MultiFrames) -> List[Frame]:
        frames = []
        errors = {}
        for code, result in results.items():
            if result.is_ok:
                frames.append(result.frame)
            else:
                errors[code] = result.error
                logger.warning(f"Skipping {code}: {result.error}")
        self.last_errors = errors
        if not frames:
            raise FrameUnavailableError(f"No usable frames: {errors}")
        return frames

    def grid_sync(self, bbox: Sequence[float], time_iso: str):
        run = self.resolve_run()
        hour = hour_offset(run, time_iso)
        results = self.client.fetch_frame_multi(
            self.lakes, hour, bbox, run=run,
            stride_rg=self.stride_rg, stride_wind=self.stride_wind,
        )
        frames = self._usable_frames(results)

        # Finest usable spacing hint across lakes; None lets grid_dims fall back
        dx = min((f.dx_deg for f in frames if usable_spacing(f.dx_deg)), default=None)
        dy = min((f.dy_deg for f in frames if usable_spacing(f.dy_deg)), default=None)
        units = frames[0].meta.units

        if self.field == "temp":
            samples: List[ScalarSample] = [s for f in frames for s in f.temp]
            return regrid_scalar(samples, bbox, dx, dy, units=units.temp)

        vectors: List[VectorSample] = [s for f in frames for s in getattr(f, self.field)]
        unit = getattr(units, self.field)
        return regrid_vector(vectors, bbox, dx, dy, units={"u": unit, "v": unit})

    async def get_grid(self, bbox: Sequence[float], time_iso: str):
        return await asyncio.to_thread(self.grid_sync, bbox, time_iso)
