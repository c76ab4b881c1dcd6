"""
Geodesy and vector helpers used by the map and buoy views.
"""

import math
from dataclasses import dataclass

EARTH_RADIUS_M = 6371000.0

# 8-point compass with 0 deg = E, counter-clockwise
_CARDINALS = ("E", "NE", "N", "NW", "W", "SW", "S", "SE")


def bearing_to(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """
    Initial great-circle bearing from point 1 to point 2.

    Returns:
        Bearing in degrees (0-360, clockwise from north)
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlon = math.radians(lon2 - lon1)

    y = math.sin(dlon) * math.cos(phi2)
    x = (math.cos(phi1) * math.sin(phi2) -
         math.sin(phi1) * math.cos(phi2) * math.cos(dlon))

    return (math.degrees(math.atan2(y, x)) + 360) % 360


def dest_point(lon: float, lat: float, bearing_deg: float, distance_m: float):
    """
    Point reached travelling distance_m along a great circle.

    Returns:
        (lon, lat) with longitude normalised to [-180, 180)
    """
    delta = distance_m / EARTH_RADIUS_M
    theta = math.radians(bearing_deg)
    phi1 = math.radians(lat)
    lam1 = math.radians(lon)

    phi2 = math.asin(
        math.sin(phi1) * math.cos(delta) +
        math.cos(phi1) * math.sin(delta) * math.cos(theta)
    )
    lam2 = lam1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )
    return ((math.degrees(lam2) + 540) % 360) - 180, math.degrees(phi2)


@dataclass(frozen=True)
class SpeedDir:
    speed: float
    deg: float
    cardinal: str


def speed_dir(u: float, v: float) -> SpeedDir:
    """
    Magnitude and arrow angle of a (u, v) vector.

    deg is atan2(v, u) shifted by +90 into 0-360; the cardinal label snaps
    to the nearest of 8 sectors.
    """
    speed = math.hypot(u, v)
    deg = math.degrees(math.atan2(v, u)) + 90
    if deg < 0:
        deg += 360
    idx = int(math.floor(deg / 45 + 0.5)) % 8
    return SpeedDir(speed=speed, deg=deg, cardinal=_CARDINALS[idx])
