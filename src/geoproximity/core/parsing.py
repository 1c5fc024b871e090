"""
Coordinate string parsing and formatting.

Parsers here sit on the hot path of rendering partially-trusted payloads, so they
fail softly: every `parse_*` function returns `None` instead of raising.

Supported inputs:
- decimal pairs: `"48.8566,2.3522"`, `"48.8566, 2.3522"`, `"48.8566 2.3522"`
- degrees/minutes/seconds pairs: `12°34'56"N, 77°12'34"E`, `12 34 56 N, 77 12 34 E`, `12.5 N, 77.5 E`
"""

from __future__ import annotations

import math
import re

from geoproximity.core.geo import Coordinate

_COMMA_SPLIT = re.compile(r"\s*,\s*")
_WS_SPLIT = re.compile(r"\s+")
_DMS_SYMBOLS = re.compile(r"[°'\"′″]")


def _parse_float(token: str) -> float | None:
    try:
        value = float(token.strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _in_range(value: float, *, is_latitude: bool) -> bool:
    limit = 90.0 if is_latitude else 180.0
    return -limit <= value <= limit


def parse_lat_lng(text: str | None, *, validate: bool = True) -> Coordinate | None:
    """Parse `"lat,lng"` or `"lat lon"` into a Coordinate.

    Returns None on wrong token count or unparsable numbers. With `validate=True`
    out-of-range values are rejected too, so the result always satisfies the bounds.
    """
    if text is None:
        return None
    s = text.strip()
    if not s:
        return None
    parts = _COMMA_SPLIT.split(s) if "," in s else _WS_SPLIT.split(s)
    if len(parts) != 2:
        return None

    lat = _parse_float(parts[0])
    lon = _parse_float(parts[1])
    if lat is None or lon is None:
        return None
    if validate and not (_in_range(lat, is_latitude=True) and _in_range(lon, is_latitude=False)):
        return None
    return Coordinate(latitude=lat, longitude=lon)


def _hemisphere(value: float, *, is_latitude: bool) -> str:
    if is_latitude:
        return "N" if value >= 0 else "S"
    return "E" if value >= 0 else "W"


def to_dms_components(
    value: float, *, is_latitude: bool, seconds_fraction_digits: int | None = None
) -> tuple[int, int, float, str]:
    """Split signed decimal degrees into (degrees, minutes, seconds, hemisphere).

    With `seconds_fraction_digits`, seconds are rounded here and a rounded-up 60
    carries into minutes (and 60 minutes into degrees), so formatted output never
    shows `60.0"`.
    """
    hemi = _hemisphere(value, is_latitude=is_latitude)
    abs_value = abs(value)
    deg = int(math.floor(abs_value))
    rem_min = (abs_value - deg) * 60.0
    minutes = int(math.floor(rem_min))
    seconds = (rem_min - minutes) * 60.0
    if seconds_fraction_digits is not None:
        seconds = round(seconds, seconds_fraction_digits)
        if seconds >= 60.0:
            seconds = 0.0
            minutes += 1
        if minutes >= 60:
            minutes = 0
            deg += 1
    return deg, minutes, seconds, hemi


def format_dms_single(value: float, *, is_latitude: bool, seconds_fraction_digits: int = 1) -> str:
    deg, minutes, seconds, hemi = to_dms_components(
        value, is_latitude=is_latitude, seconds_fraction_digits=seconds_fraction_digits
    )
    return f"{deg}° {minutes}' {seconds:.{seconds_fraction_digits}f}\" {hemi}"


def format_dms(c: Coordinate, *, seconds_fraction_digits: int = 1) -> str:
    lat = format_dms_single(c.latitude, is_latitude=True, seconds_fraction_digits=seconds_fraction_digits)
    lon = format_dms_single(c.longitude, is_latitude=False, seconds_fraction_digits=seconds_fraction_digits)
    return f"{lat}, {lon}"


def parse_dms_single(token: str, *, is_latitude: bool) -> float | None:
    """Parse one DMS (or decimal-with-hemisphere) token into signed decimal degrees."""
    t = token.strip().upper()
    if not t:
        return None

    sign = 1.0
    hemi = ""
    if t[-1] in "NSEW":
        hemi = t[-1]
        if is_latitude and hemi in "EW":
            return None
        if not is_latitude and hemi in "NS":
            return None
        if hemi in "SW":
            sign = -1.0
        t = t[:-1]

    parts = [p for p in _WS_SPLIT.split(_DMS_SYMBOLS.sub(" ", t).strip()) if p]
    if not parts or len(parts) > 3:
        return None

    # A lone signed decimal without a hemisphere letter is taken as-is.
    if len(parts) == 1 and not hemi:
        value = _parse_float(parts[0])
        if value is None or not _in_range(value, is_latitude=is_latitude):
            return None
        return value

    numbers: list[float] = []
    for p in parts:
        n = _parse_float(p)
        if n is None or n < 0:
            return None
        numbers.append(n)

    deg = numbers[0]
    minutes = numbers[1] if len(numbers) > 1 else 0.0
    seconds = numbers[2] if len(numbers) > 2 else 0.0
    if minutes >= 60 or seconds >= 60:
        return None

    value = sign * (deg + minutes / 60.0 + seconds / 3600.0)
    if not _in_range(value, is_latitude=is_latitude):
        return None
    return value


def parse_dms_pair(text: str | None) -> Coordinate | None:
    if text is None:
        return None
    parts = _COMMA_SPLIT.split(text.strip())
    if len(parts) != 2:
        return None
    lat = parse_dms_single(parts[0], is_latitude=True)
    lon = parse_dms_single(parts[1], is_latitude=False)
    if lat is None or lon is None:
        return None
    return Coordinate(latitude=lat, longitude=lon)


def parse_lat_lng_flexible(text: str | None) -> Coordinate | None:
    """Try decimal `lat,lng` first, then a DMS pair."""
    return parse_lat_lng(text) or parse_dms_pair(text)
