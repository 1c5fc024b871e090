from __future__ import annotations

import logging
from typing import Callable, Iterable, TypeVar

from geoproximity.core.extract import default_coordinate_of
from geoproximity.core.geo import EARTH_RADIUS_M, Coordinate, haversine_m
from geoproximity.core.units import UnitSystem

logger = logging.getLogger(__name__)

T = TypeVar("T")


def filter_within_radius(
    origin: Coordinate | None,
    radius: float,
    items: Iterable[T],
    *,
    unit: UnitSystem | None = None,
    coordinate_of: Callable[[T], Coordinate | None] = default_coordinate_of,
    radius_m: float = EARTH_RADIUS_M,
) -> list[T]:
    """Return the items within `radius` of `origin`, in input order.

    `radius` is in meters when `unit` is None, otherwise in `unit.distance_unit`
    (each distance goes through `unit.convert_distance` before comparing).

    Without an origin there is nothing to measure from, so the input comes back
    unfiltered. Items without a coordinate are always excluded otherwise.
    """
    src = list(items)
    if origin is None:
        return src

    limit = float(radius)
    out: list[T] = []
    unlocated = 0
    for it in src:
        c = coordinate_of(it)
        if c is None:
            unlocated += 1
            continue
        d = haversine_m(origin, c, radius_m=radius_m)
        if unit is not None:
            d = unit.convert_distance(d)
        if d <= limit:
            out.append(it)

    logger.debug(
        "Radius filter kept %d of %d items (radius=%s %s, %d without coordinates)",
        len(out),
        len(src),
        limit,
        unit.distance_unit if unit is not None else "m",
        unlocated,
    )
    return out
