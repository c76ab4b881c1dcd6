"""
GLOFS frame model.

A Frame is one lake's forecast snapshot at one hour offset. Its wind,
current and temperature samples are sparse point lists, independently
subsampled by the server (different strides per field), so the three
sequences may differ in length and point set and must never be treated
as co-located.

Frames are trusted as delivered: no validation, reshaping or clipping
against the requested bounding box happens here.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .errors import FrameUnavailableError


class Lake(str, Enum):
    """Great Lakes operational forecast systems served by GLOFS."""
    LEOFS = "leofs"    # Lake Erie
    LMHOFS = "lmhofs"  # Lakes Michigan & Huron
    LOOFS = "loofs"    # Lake Ontario
    LSOFS = "lsofs"    # Lake Superior

    @classmethod
    def parse(cls, value) -> "Lake":
        """Accept a Lake or its code string; raise ValueError otherwise."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            codes = ", ".join(lake.value for lake in cls)
            raise ValueError(f"Unknown lake {value!r} (expected one of: {codes})") from None


# Run discovery accepts this in place of a lake code
LAKE_ALL = "all"

ALL_LAKES: Tuple[Lake, ...] = tuple(Lake)


@dataclass(frozen=True)
class VectorSample:
    """Point observation of a 2-D vector (wind or current)."""
    lon: float
    lat: float
    u: float  # eastward, frame units
    v: float  # northward, frame units

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "VectorSample":
        return cls(lon=d["lon"], lat=d["lat"], u=d["u"], v=d["v"])

    def to_dict(self) -> Dict[str, float]:
        return {"lon": self.lon, "lat": self.lat, "u": self.u, "v": self.v}


@dataclass(frozen=True)
class ScalarSample:
    """Point observation of a scalar (water temperature)."""
    lon: float
    lat: float
    value: float

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ScalarSample":
        return cls(lon=d["lon"], lat=d["lat"], value=d["value"])

    def to_dict(self) -> Dict[str, float]:
        return {"lon": self.lon, "lat": self.lat, "value": self.value}


@dataclass(frozen=True)
class FrameUnits:
    """Free-form unit strings as declared by the server."""
    wind: str
    curr: str
    temp: str


@dataclass(frozen=True)
class FrameMeta:
    lake: str
    run: str
    tag: str
    units: FrameUnits


@dataclass(frozen=True)
class Frame:
    """One lake / one forecast hour."""
    meta: FrameMeta
    time: str       # ISO-8601, server-determined
    dx_deg: Optional[float]  # spacing hint only, may be null
    dy_deg: Optional[float]
    wind: Tuple[VectorSample, ...] = field(default_factory=tuple)
    curr: Tuple[VectorSample, ...] = field(default_factory=tuple)
    temp: Tuple[ScalarSample, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Frame":
        """Build a Frame from the server's JSON shape."""
        meta = d["meta"]
        units = meta["units"]
        return cls(
            meta=FrameMeta(
                lake=meta["lake"],
                run=meta["run"],
                tag=meta["tag"],
                units=FrameUnits(wind=units["wind"], curr=units["curr"], temp=units["temp"]),
            ),
            time=d["time"],
            dx_deg=d["dxDeg"],
            dy_deg=d["dyDeg"],
            wind=tuple(VectorSample.from_dict(s) for s in d["wind"]),
            curr=tuple(VectorSample.from_dict(s) for s in d["curr"]),
            temp=tuple(ScalarSample.from_dict(s) for s in d["temp"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the server's JSON shape."""
        return {
            "meta": {
                "lake": self.meta.lake,
                "run": self.meta.run,
                "tag": self.meta.tag,
                "units": {
                    "wind": self.meta.units.wind,
                    "curr": self.meta.units.curr,
                    "temp": self.meta.units.temp,
                },
            },
            "time": self.time,
            "dxDeg": self.dx_deg,
            "dyDeg": self.dy_deg,
            "wind": [s.to_dict() for s in self.wind],
            "curr": [s.to_dict() for s in self.curr],
            "temp": [s.to_dict() for s in self.temp],
        }

    def summary(self) -> Dict[str, Any]:
        """Compact description used in debug logs."""
        return {
            "time": self.time,
            "wind": len(self.wind),
            "curr": len(self.curr),
            "temp": len(self.temp),
        }


@dataclass(frozen=True)
class FrameError:
    """Per-lake error marker inside a multi-lake response."""
    error: str


@dataclass(frozen=True)
class FrameResult:
    """
    Tagged per-lake entry of a multi-lake fetch.

    kind is "ok" (frame set) or "error" (error set). Callers branch on
    kind instead of probing the payload for an ``error`` field.
    """
    kind: str
    lake: str
    value: Optional[Frame] = None
    failure: Optional[FrameError] = None

    @classmethod
    def ok(cls, lake: str, frame: Frame) -> "FrameResult":
        return cls(kind="ok", lake=lake, value=frame)

    @classmethod
    def err(cls, lake: str, message: str) -> "FrameResult":
        return cls(kind="error", lake=lake, failure=FrameError(error=message))

    @classmethod
    def from_wire(cls, lake: str, obj: Dict[str, Any]) -> "FrameResult":
        """Classify one entry of the server's multi-lake mapping."""
        if "error" in obj:
            return cls.err(lake, str(obj["error"]))
        return cls.ok(lake, Frame.from_dict(obj))

    @property
    def is_ok(self) -> bool:
        return self.kind == "ok"

    @property
    def frame(self) -> Frame:
        if self.value is None:
            raise FrameUnavailableError(f"No frame for {self.lake}: {self.error}")
        return self.value

    @property
    def error(self) -> Optional[str]:
        return self.failure.error if self.failure is not None else None

    def to_dict(self) -> Dict[str, Any]:
        if self.is_ok:
            return {"kind": "ok", "frame": self.frame.to_dict()}
        return {"kind": "error", "error": self.error}


# Lake code -> per-lake result, keyed exactly as the server returned them
MultiFrames = Dict[str, FrameResult]


_COMPACT_RUN_FORMATS = ("%Y%m%d%H", "%Y%m%dT%H%MZ", "%Y%m%dT%HZ", "%Y%m%d%H%M")


def parse_timestamp(value: str) -> datetime:
    """
    Parse a frame time or run id into an aware UTC datetime.

    Accepts ISO-8601 (with or without 'Z'/offset; naive values are taken
    as UTC) and the compact run forms YYYYMMDDHH / YYYYMMDDTHHZ.
    """
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in _COMPACT_RUN_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
        else:
            raise ValueError(f"Unrecognised timestamp {value!r}") from None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
