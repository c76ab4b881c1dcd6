"""
Display unit preferences and conversions.

Frames and grids carry whatever units the server declares; the dashboard
converts for display according to the user's preferences. Conversions
work on plain floats and numpy arrays alike.
"""

from dataclasses import dataclass, fields, replace
from typing import Callable, Dict, Tuple

import numpy as np


class UnitError(ValueError):
    """Unknown unit, or a conversion between different quantities."""


# Quantity -> allowed display units
UNIT_CHOICES: Dict[str, Tuple[str, ...]] = {
    "temperature": ("°C", "K", "°F"),
    "pressure": ("Pa", "Psi", "kPa"),
    "speed": ("m/s", "cm/s", "knots", "mph"),
    "distance": ("m", "ft"),
    "concentration": ("g/L", "μg/L"),
}

# Linear units: factor to the quantity's base unit
_TO_BASE: Dict[str, Tuple[str, float]] = {
    # speed, base m/s
    "m/s": ("speed", 1.0),
    "cm/s": ("speed", 0.01),
    "knots": ("speed", 0.514444),
    "kt": ("speed", 0.514444),
    "kts": ("speed", 0.514444),
    "mph": ("speed", 0.44704),
    # pressure, base Pa
    "Pa": ("pressure", 1.0),
    "kPa": ("pressure", 1000.0),
    "Psi": ("pressure", 6894.757),
    "psi": ("pressure", 6894.757),
    # distance, base m
    "m": ("distance", 1.0),
    "ft": ("distance", 0.3048),
    # concentration, base g/L
    "g/L": ("concentration", 1.0),
    "μg/L": ("concentration", 1e-6),
    "ug/L": ("concentration", 1e-6),
}

# Temperature is affine; base is Kelvin
_TEMP_TO_K: Dict[str, Callable] = {
    "K": lambda x: x,
    "°C": lambda x: x + 273.15,
    "degC": lambda x: x + 273.15,
    "C": lambda x: x + 273.15,
    "°F": lambda x: (x - 32.0) * 5.0 / 9.0 + 273.15,
    "degF": lambda x: (x - 32.0) * 5.0 / 9.0 + 273.15,
    "F": lambda x: (x - 32.0) * 5.0 / 9.0 + 273.15,
}
_TEMP_FROM_K: Dict[str, Callable] = {
    "K": lambda k: k,
    "°C": lambda k: k - 273.15,
    "degC": lambda k: k - 273.15,
    "C": lambda k: k - 273.15,
    "°F": lambda k: (k - 273.15) * 9.0 / 5.0 + 32.0,
    "degF": lambda k: (k - 273.15) * 9.0 / 5.0 + 32.0,
    "F": lambda k: (k - 273.15) * 9.0 / 5.0 + 32.0,
}


def quantity_of(unit: str) -> str:
    """Quantity a unit measures ("speed", "temperature", ...)."""
    if unit in _TEMP_TO_K:
        return "temperature"
    if unit in _TO_BASE:
        return _TO_BASE[unit][0]
    raise UnitError(f"Unknown unit '{unit}'")


def convert(value, from_unit: str, to_unit: str):
    """
    Convert a value (float or numpy array) between units of one quantity.

    Raises:
        UnitError: Unknown unit or mismatched quantities
    """
    src_q, dst_q = quantity_of(from_unit), quantity_of(to_unit)
    if src_q != dst_q:
        raise UnitError(f"Cannot convert {src_q} '{from_unit}' to {dst_q} '{to_unit}'")
    if from_unit == to_unit:
        return value

    x = np.asarray(value, dtype=np.float64) if not np.isscalar(value) else float(value)
    if src_q == "temperature":
        return _TEMP_FROM_K[to_unit](_TEMP_TO_K[from_unit](x))
    return x * _TO_BASE[from_unit][1] / _TO_BASE[to_unit][1]


@dataclass(frozen=True)
class UnitPreferences:
    """Units the dashboard displays each quantity in."""
    temperature: str = "°C"
    pressure: str = "kPa"
    speed: str = "knots"
    distance: str = "m"
    concentration: str = "μg/L"

    def __post_init__(self):
        for f in fields(self):
            _check_choice(f.name, getattr(self, f.name))

    def update(self, key: str, value: str) -> "UnitPreferences":
        """Copy with one preference changed."""
        if key not in UNIT_CHOICES:
            raise UnitError(f"Unknown preference '{key}'")
        return replace(self, **{key: value})

    def display(self, value, unit: str):
        """Convert a value in `unit` to the preferred unit for its quantity."""
        return convert(value, unit, getattr(self, quantity_of(unit)))


def _check_choice(key: str, value: str):
    if value not in UNIT_CHOICES[key]:
        raise UnitError(f"Invalid {key} unit '{value}' (choose from {', '.join(UNIT_CHOICES[key])})")
