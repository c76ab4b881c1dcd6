"""
Tests for display unit conversion and geodesy helpers.
"""

import numpy as np
import pytest

from lakecast.geo import bearing_to, dest_point, speed_dir
from lakecast.units import UnitError, UnitPreferences, convert, quantity_of


class TestConvert:

    def test_speed(self):
        assert convert(10.0, "m/s", "knots") == pytest.approx(19.4384, rel=1e-4)
        assert convert(100.0, "cm/s", "m/s") == pytest.approx(1.0)

    def test_temperature_affine(self):
        assert convert(0.0, "°C", "°F") == pytest.approx(32.0)
        assert convert(300.0, "K", "°C") == pytest.approx(26.85)
        assert convert(212.0, "°F", "K") == pytest.approx(373.15)

    def test_array(self):
        out = convert(np.array([0.0, 1.0]), "m", "ft")
        np.testing.assert_allclose(out, [0.0, 3.28084], rtol=1e-5)

    def test_identity_returns_input(self):
        assert convert(5, "kPa", "kPa") == 5

    def test_quantity_mismatch(self):
        with pytest.raises(UnitError, match="Cannot convert"):
            convert(1.0, "m/s", "°C")

    def test_unknown_unit(self):
        with pytest.raises(UnitError):
            quantity_of("furlongs")

    def test_unit_error_is_value_error(self):
        assert issubclass(UnitError, ValueError)


class TestUnitPreferences:

    def test_defaults(self):
        prefs = UnitPreferences()
        assert (prefs.temperature, prefs.speed, prefs.pressure) == ("°C", "knots", "kPa")

    def test_display_uses_preference(self):
        prefs = UnitPreferences()
        assert prefs.display(293.15, "K") == pytest.approx(20.0)
        assert prefs.display(1.0, "m/s") == pytest.approx(1.94384, rel=1e-4)

    def test_update_returns_copy(self):
        prefs = UnitPreferences()
        metric = prefs.update("speed", "m/s")
        assert metric.speed == "m/s"
        assert prefs.speed == "knots"

    def test_invalid_choice_rejected(self):
        with pytest.raises(UnitError, match="Invalid speed unit"):
            UnitPreferences(speed="kt")
        with pytest.raises(UnitError):
            UnitPreferences().update("salinity", "psu")


class TestBearing:

    def test_cardinal_bearings(self):
        assert bearing_to(0.0, 0.0, 0.0, 1.0) == pytest.approx(0.0)
        assert bearing_to(0.0, 0.0, 1.0, 0.0) == pytest.approx(90.0)
        assert bearing_to(0.0, 0.0, -1.0, 0.0) == pytest.approx(270.0)


class TestDestPoint:

    def test_one_degree_east_on_equator(self):
        lon, lat = dest_point(0.0, 0.0, 90.0, 111194.93)
        assert lon == pytest.approx(1.0, abs=1e-4)
        assert lat == pytest.approx(0.0, abs=1e-9)

    def test_dateline_wraps(self):
        lon, _ = dest_point(179.5, 0.0, 90.0, 111194.93)
        assert lon == pytest.approx(-179.5, abs=1e-4)

    def test_round_trip_bearing(self):
        lon, lat = dest_point(-83.0, 41.5, 45.0, 10000.0)
        assert bearing_to(-83.0, 41.5, lon, lat) == pytest.approx(45.0, abs=0.01)


class TestSpeedDir:

    def test_eastward(self):
        sd = speed_dir(3.0, 4.0)
        assert sd.speed == pytest.approx(5.0)

    @pytest.mark.parametrize("u, v, deg, cardinal", [
        (1.0, 0.0, 90.0, "N"),
        (0.0, 1.0, 180.0, "W"),
        (-1.0, 0.0, 270.0, "S"),
        (0.0, -1.0, 0.0, "E"),
    ])
    def test_arrow_angle(self, u, v, deg, cardinal):
        sd = speed_dir(u, v)
        assert sd.deg == pytest.approx(deg)
        assert sd.cardinal == cardinal

    def test_sector_boundary(self):
        # 22.5 deg sits on the E/NE boundary
        sd = speed_dir(np.cos(np.radians(-67.5)), np.sin(np.radians(-67.5)))
        assert sd.deg == pytest.approx(22.5)
        assert sd.cardinal in ("E", "NE")
