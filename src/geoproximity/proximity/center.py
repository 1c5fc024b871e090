"""
Map-centering helpers.

`center_of_mass` is the established behavior: a plain arithmetic mean of latitudes
and longitudes. It drifts near the poles and is wrong for sets that straddle the
antimeridian; `spherical_centroid` is the opt-in alternative for callers that can
tolerate the different result.
"""

from __future__ import annotations

import math
from typing import Callable, Iterable, TypeVar

from geoproximity.core.extract import default_coordinate_of
from geoproximity.core.geo import BoundingBox, Coordinate

T = TypeVar("T")


def center_of_mass(
    items: Iterable[T],
    fallback: Coordinate | None = None,
    *,
    coordinate_of: Callable[[T], Coordinate | None] = default_coordinate_of,
) -> Coordinate | None:
    """Arithmetic-mean coordinate of the located items.

    With no located items, returns `fallback` when it is given and valid, else None.
    """
    lat_sum = 0.0
    lon_sum = 0.0
    n = 0
    for it in items:
        c = coordinate_of(it)
        if c is None:
            continue
        lat_sum += c.latitude
        lon_sum += c.longitude
        n += 1

    if n:
        return Coordinate(latitude=lat_sum / n, longitude=lon_sum / n)
    if fallback is not None and fallback.is_valid:
        return fallback
    return None


def spherical_centroid(coordinates: Iterable[Coordinate]) -> Coordinate | None:
    """Centroid from averaged unit vectors (correct across the antimeridian)."""
    pts = list(coordinates)
    if not pts:
        return None
    if len(pts) == 1:
        return pts[0]

    x = y = z = 0.0
    for c in pts:
        lat = math.radians(c.latitude)
        lon = math.radians(c.longitude)
        x += math.cos(lat) * math.cos(lon)
        y += math.cos(lat) * math.sin(lon)
        z += math.sin(lat)

    n = float(len(pts))
    x, y, z = x / n, y / n, z / n
    # Antipodal inputs cancel out; there is no meaningful center.
    if math.sqrt(x * x + y * y + z * z) < 1e-12:
        return None

    lon = math.atan2(y, x)
    lat = math.atan2(z, math.sqrt(x * x + y * y))
    return Coordinate(latitude=math.degrees(lat), longitude=math.degrees(lon))


def bounds(coordinates: Iterable[Coordinate], *, padding_m: float = 1000.0) -> BoundingBox | None:
    """Bounding box of the coordinates grown by `padding_m`; None when empty."""
    box = BoundingBox.enclosing(coordinates)
    if box is None:
        return None
    return box.padded(padding_m) if padding_m else box
