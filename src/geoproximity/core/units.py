"""
Unit systems for distance/speed display.

Distances are always computed in meters; this module converts them for display.
Conversions are total: NaN/Inf inputs propagate unchanged, sanitizing them is the
caller's job.
"""

from __future__ import annotations

from enum import Enum

FEET_PER_METER = 3.28084
FEET_PER_MILE = 5280.0
KMH_PER_MPS = 3.6
MPH_PER_MPS = 2.23694


class UnitSystem(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"

    @classmethod
    def parse(cls, value: "str | UnitSystem") -> "UnitSystem":
        """Parse a config/CLI value (case-insensitive); raises ValueError if unknown."""
        if isinstance(value, UnitSystem):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown unit system '{value}', expected one of: metric, imperial")

    @property
    def distance_unit(self) -> str:
        return "km" if self is UnitSystem.METRIC else "mi"

    @property
    def speed_unit(self) -> str:
        return "km/h" if self is UnitSystem.METRIC else "mph"

    @property
    def temperature_unit(self) -> str:
        return "°C" if self is UnitSystem.METRIC else "°F"

    def convert_distance(self, meters: float) -> float:
        """Meters -> kilometers (metric) or miles (imperial, via feet)."""
        if self is UnitSystem.METRIC:
            return meters / 1000
        return meters * FEET_PER_METER / FEET_PER_MILE

    def convert_speed(self, meters_per_second: float) -> float:
        if self is UnitSystem.METRIC:
            return meters_per_second * KMH_PER_MPS
        return meters_per_second * MPH_PER_MPS

    def to_meters(self, value: float) -> float:
        """Inverse of `convert_distance`."""
        if self is UnitSystem.METRIC:
            return value * 1000
        return value * FEET_PER_MILE / FEET_PER_METER


def format_distance(meters: float, unit: UnitSystem = UnitSystem.METRIC) -> str:
    """Badge-style label: `850 m`, `2.3 km`, `12 km` / `500 ft`, `1.2 mi`, `15 mi`."""
    if unit is UnitSystem.METRIC:
        if meters < 1000:
            return f"{meters:.0f} m"
        km = unit.convert_distance(meters)
        return f"{km:.0f} km" if km >= 10 else f"{km:.1f} km"

    feet = meters * FEET_PER_METER
    if feet < 1000:
        return f"{feet:.0f} ft"
    miles = unit.convert_distance(meters)
    return f"{miles:.0f} mi" if miles >= 10 else f"{miles:.1f} mi"
