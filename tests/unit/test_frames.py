"""
Tests for the GLOFS frame model.
"""

from datetime import datetime, timezone

import pytest

from lakecast.glofs.errors import FrameUnavailableError
from lakecast.glofs.frames import (
    ALL_LAKES,
    Frame,
    FrameResult,
    Lake,
    ScalarSample,
    VectorSample,
    parse_timestamp,
)


class TestLake:

    def test_four_lakes(self):
        assert [lake.value for lake in ALL_LAKES] == ["leofs", "lmhofs", "loofs", "lsofs"]

    def test_parse_is_case_insensitive(self):
        assert Lake.parse(" LEOFS ") is Lake.LEOFS

    def test_parse_passes_enum_through(self):
        assert Lake.parse(Lake.LSOFS) is Lake.LSOFS

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="leofs, lmhofs, loofs, lsofs"):
            Lake.parse("lmofs")


class TestFrame:

    def test_from_dict_maps_wire_names(self, frame_payload):
        frame = Frame.from_dict(frame_payload)
        assert frame.dx_deg == 0.1
        assert frame.dy_deg == 0.1
        assert frame.meta.run == "2025-08-14T12:00:00Z"
        assert frame.meta.units.temp == "°C"
        assert frame.wind[0] == VectorSample(lon=-83.0, lat=41.5, u=3.0, v=4.0)
        assert frame.temp[-1] == ScalarSample(lon=-79.0, lat=42.8, value=18.5)

    def test_unequal_field_lengths_kept(self, frame_payload):
        """Fields are subsampled independently and never aligned."""
        frame = Frame.from_dict(frame_payload)
        assert (len(frame.wind), len(frame.curr), len(frame.temp)) == (3, 2, 4)

    def test_empty_fields_allowed(self, make_frame):
        frame = Frame.from_dict(make_frame(wind=[], curr=[], temp=[]))
        assert frame.wind == ()
        assert frame.summary()["wind"] == 0

    def test_to_dict_restores_wire_shape(self, frame_payload):
        assert Frame.from_dict(frame_payload).to_dict() == frame_payload

    def test_missing_key_raises(self, frame_payload):
        del frame_payload["dxDeg"]
        with pytest.raises(KeyError):
            Frame.from_dict(frame_payload)

    def test_frozen(self, frame_payload):
        frame = Frame.from_dict(frame_payload)
        with pytest.raises(AttributeError):
            frame.time = "later"


class TestFrameResult:

    def test_from_wire_error_marker(self):
        result = FrameResult.from_wire("lmhofs", {"error": "no data"})
        assert result.kind == "error"
        assert not result.is_ok
        assert result.error == "no data"
        assert result.to_dict() == {"kind": "error", "error": "no data"}

    def test_from_wire_frame(self, frame_payload):
        result = FrameResult.from_wire("leofs", frame_payload)
        assert result.is_ok
        assert result.error is None
        assert result.to_dict() == {"kind": "ok", "frame": frame_payload}

    def test_frame_of_error_raises(self):
        result = FrameResult.err("loofs", "run missing")
        with pytest.raises(FrameUnavailableError, match="loofs"):
            result.frame


class TestParseTimestamp:

    def test_iso_z(self):
        assert parse_timestamp("2025-08-14T12:00:00Z") == datetime(2025, 8, 14, 12, tzinfo=timezone.utc)

    def test_iso_offset_normalised(self):
        ts = parse_timestamp("2025-08-14T08:00:00-04:00")
        assert ts == datetime(2025, 8, 14, 12, tzinfo=timezone.utc)
        assert ts.tzinfo == timezone.utc

    def test_naive_is_utc(self):
        assert parse_timestamp("2025-08-14T12:00:00").tzinfo == timezone.utc

    def test_compact_run_id(self):
        assert parse_timestamp("2025081412") == datetime(2025, 8, 14, 12, tzinfo=timezone.utc)

    def test_garbage_rejected(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")
