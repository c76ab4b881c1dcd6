"""
GLOFS frame server client.

Fetches forecast frames from the GLOFS frame server:
- latest_run        GET /api/glofs/latest_run
- fetch_frame       GET /api/glofs/frame        (one lake)
- fetch_frame_multi GET /api/glofs/frame_multi  (many lakes, one request)

Every call is one independent round trip. Nothing is cached,
deduplicated or retried; a non-2xx status raises GlofsHTTPError and the
caller decides what to do. Response bodies are trusted as delivered.

Request logging is emitted at DEBUG level on the ``lakecast.glofs``
logger (enabled by FLOW_DEBUG=true).
"""

import logging
import numbers
import time
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode

import requests

from lakecast.config import get_settings

from .errors import GlofsHTTPError
from .frames import Frame, FrameResult, Lake, MultiFrames

logger = logging.getLogger(__name__)

BBox = Tuple[float, float, float, float]  # (min_lon, min_lat, max_lon, max_lat)

# Forecast/hindcast window relative to the run's reference time
MIN_HOUR = -6
MAX_HOUR = 120

DEFAULT_STRIDE_RG = 4
DEFAULT_STRIDE_WIND = 5


def format_number(value) -> str:
    """
    Render a number the way the dashboard put it on the wire.

    Integral floats drop their fractional part (-88.0 -> "-88"); other
    floats use the shortest round-trip representation.
    """
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        f = float(value)
        if f.is_integer() and abs(f) < 1e21:
            return str(int(f))
        return repr(f)
    return str(value)


def format_bbox(bbox: Sequence[float]) -> str:
    """Comma-join (min_lon, min_lat, max_lon, max_lat)."""
    if len(bbox) != 4:
        raise ValueError(f"bbox must have 4 values (min_lon, min_lat, max_lon, max_lat), got {len(bbox)}")
    return ",".join(format_number(v) for v in bbox)


def build_query(params: Sequence[Tuple[str, Any]]) -> str:
    """
    Encode ordered query parameters.

    A parameter whose value is None is left out entirely; an empty string
    is still sent (``run=``).
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in params:
        if value is None:
            continue
        pairs.append((key, value if isinstance(value, str) else format_number(value)))
    return urlencode(pairs)


def validate_hour(hour) -> int:
    if isinstance(hour, bool) or not isinstance(hour, numbers.Integral):
        raise ValueError(f"hour must be an integer, got {hour!r}")
    if not MIN_HOUR <= hour <= MAX_HOUR:
        raise ValueError(f"hour {hour} outside forecast window [{MIN_HOUR}, {MAX_HOUR}]")
    return int(hour)


def lakes_csv(lakes: Union[str, Iterable[Union[str, Lake]]]) -> str:
    """Comma-join lake codes; a string is passed through as-is."""
    if isinstance(lakes, str):
        return lakes
    return ",".join(lake.value if isinstance(lake, Lake) else str(lake) for lake in lakes)


def _frame_params(
    hour: int,
    bbox: Sequence[float],
    run: Optional[str],
    stride_rg: int,
    stride_wind: int,
) -> List[Tuple[str, Any]]:
    return [
        ("run", run),
        ("hour", validate_hour(hour)),
        ("bbox", format_bbox(bbox)),
        ("stride_rg", stride_rg),
        ("stride_wind", stride_wind),
    ]


def frame_query(
    lake: Union[str, Lake],
    hour: int,
    bbox: Sequence[float],
    run: Optional[str] = None,
    stride_rg: int = DEFAULT_STRIDE_RG,
    stride_wind: int = DEFAULT_STRIDE_WIND,
) -> str:
    """Query string for /api/glofs/frame."""
    lake = Lake.parse(lake)
    return build_query([("lake", lake.value)] + _frame_params(hour, bbox, run, stride_rg, stride_wind))


def frame_multi_query(
    lakes: Union[str, Iterable[Union[str, Lake]]],
    hour: int,
    bbox: Sequence[float],
    run: Optional[str] = None,
    stride_rg: int = DEFAULT_STRIDE_RG,
    stride_wind: int = DEFAULT_STRIDE_WIND,
) -> str:
    """Query string for /api/glofs/frame_multi."""
    return build_query([("lakes", lakes_csv(lakes))] + _frame_params(hour, bbox, run, stride_rg, stride_wind))


class GlofsClient:
    """
    Client for the GLOFS frame server.

    Holds only connection settings; no per-request state survives a call.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            base_url: Server origin (defaults to GLOFS_API); trailing slash stripped
            session: requests session to reuse (a new one is created otherwise)
            timeout: Request timeout in seconds (defaults to GLOFS_TIMEOUT, None = no timeout)
        """
        settings = get_settings()
        if base_url is None:
            base_url = settings.glofs_api
        if base_url.endswith("/"):
            base_url = base_url[:-1]
        self.base_url = base_url
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.glofs_timeout

    def _url(self, path: str, query: str) -> str:
        return f"{self.base_url}/api/glofs/{path}?{query}"

    def _get(self, url: str, failure_label: str) -> Any:
        """One GET round trip; raise GlofsHTTPError on non-2xx."""
        response = self.session.get(url, timeout=self.timeout)
        if not 200 <= response.status_code < 300:
            raise GlofsHTTPError(failure_label, response.status_code, response.text)
        return response.json()

    def latest_run(self, lake: Union[str, Lake]) -> Dict[str, Optional[str]]:
        """
        Latest available run per lake.

        Args:
            lake: A lake code or "all"

        Returns:
            Mapping lake code -> run id, or None where no run is available
        """
        code = lake.value if isinstance(lake, Lake) else lake
        url = self._url("latest_run", build_query([("lake", code)]))
        t0 = time.perf_counter()
        logger.debug(f"[glofs] latest_run → {url}")
        runs = self._get(url, "latest_run")
        logger.debug(f"[glofs] latest_run ✓ {runs} ({_elapsed_ms(t0)} ms)")
        return runs

    def fetch_frame(
        self,
        lake: Union[str, Lake],
        hour: int,
        bbox: Sequence[float],
        run: Optional[str] = None,
        stride_rg: int = DEFAULT_STRIDE_RG,
        stride_wind: int = DEFAULT_STRIDE_WIND,
    ) -> Frame:
        """
        Fetch one lake's frame for one forecast hour.

        Args:
            lake: Lake code
            hour: Hour offset from the run, -6..120
            bbox: (min_lon, min_lat, max_lon, max_lat)
            run: Explicit run id; omitted from the query when None (server picks latest)
            stride_rg: Server-side subsampling for current/temperature fields
            stride_wind: Server-side subsampling for wind vectors

        Raises:
            ValueError: Unknown lake, hour outside -6..120 or malformed bbox
            GlofsHTTPError: Non-2xx response
        """
        lake = Lake.parse(lake)
        url = self._url("frame", frame_query(lake, hour, bbox, run, stride_rg, stride_wind))
        t0 = time.perf_counter()
        logger.debug(f"[glofs] frame → {url}")
        frame = Frame.from_dict(self._get(url, f"frame {lake.value}"))
        logger.debug(f"[glofs] frame {lake.value} ✓ {frame.summary()} ({_elapsed_ms(t0)} ms)")
        return frame

    def fetch_frame_multi(
        self,
        lakes: Union[str, Iterable[Union[str, Lake]]],
        hour: int,
        bbox: Sequence[float],
        run: Optional[str] = None,
        stride_rg: int = DEFAULT_STRIDE_RG,
        stride_wind: int = DEFAULT_STRIDE_WIND,
    ) -> MultiFrames:
        """
        Fetch several lakes in a single request.

        Only the outer request can fail the call. Each entry of the result
        is independently a frame or an error marker; an entry that cannot
        be read as a frame becomes an error marker too.

        Args:
            lakes: "leofs,lmhofs" or an iterable of lake codes
            hour, bbox, run, stride_rg, stride_wind: As fetch_frame, applied to every lake

        Returns:
            Mapping lake code -> FrameResult (kind "ok" or "error")
        """
        url = self._url("frame_multi", frame_multi_query(lakes, hour, bbox, run, stride_rg, stride_wind))
        t0 = time.perf_counter()
        logger.debug(f"[glofs] frame_multi → {url}")
        payload = self._get(url, "frame_multi")

        results: MultiFrames = {}
        for code, entry in payload.items():
            try:
                if not isinstance(entry, dict):
                    raise TypeError(f"expected object, got {type(entry).__name__}")
                results[code] = FrameResult.from_wire(code, entry)
            except (KeyError, TypeError) as e:
                logger.warning(f"[glofs] frame_multi: unreadable entry for {code}: {e!r}")
                results[code] = FrameResult.err(code, f"malformed frame: {e!r}")

        if logger.isEnabledFor(logging.DEBUG):
            report = {
                code: (r.frame.summary() if r.is_ok else r.error)
                for code, r in results.items()
            }
            logger.debug(f"[glofs] frame_multi ✓ {report} ({_elapsed_ms(t0)} ms)")
        return results


def _elapsed_ms(t0: float) -> int:
    return round((time.perf_counter() - t0) * 1000)


@lru_cache()
def get_client() -> GlofsClient:
    """Shared client built from environment settings."""
    return GlofsClient()


def latest_run(lake: Union[str, Lake]) -> Dict[str, Optional[str]]:
    return get_client().latest_run(lake)


def fetch_frame(
    lake: Union[str, Lake],
    hour: int,
    bbox: Sequence[float],
    run: Optional[str] = None,
    stride_rg: int = DEFAULT_STRIDE_RG,
    stride_wind: int = DEFAULT_STRIDE_WIND,
) -> Frame:
    return get_client().fetch_frame(lake, hour, bbox, run, stride_rg, stride_wind)


def fetch_frame_multi(
    lakes: Union[str, Iterable[Union[str, Lake]]],
    hour: int,
    bbox: Sequence[float],
    run: Optional[str] = None,
    stride_rg: int = DEFAULT_STRIDE_RG,
    stride_wind: int = DEFAULT_STRIDE_WIND,
) -> MultiFrames:
    return get_client().fetch_frame_multi(lakes, hour, bbox, run, stride_rg, stride_wind)
