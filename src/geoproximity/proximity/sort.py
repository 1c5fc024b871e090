"""
Distance-ordered views over located items.

All functions take an origin and any iterable of items; item coordinates are read
through `coordinate_of` so the same code serves `LocatedItem`s, raw dict records,
or caller-specific models.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

from geoproximity.core.extract import default_coordinate_of
from geoproximity.core.geo import EARTH_RADIUS_M, Coordinate, haversine_m
from geoproximity.core.units import UnitSystem, format_distance

T = TypeVar("T")

CoordinateOf = Callable[[T], "Coordinate | None"]


@dataclass(frozen=True)
class ProximityResult(Generic[T]):
    """An item paired with its distance from an origin."""

    item: T
    distance_m: float

    def distance_in(self, unit: UnitSystem) -> float:
        return unit.convert_distance(self.distance_m)

    def label(self, unit: UnitSystem = UnitSystem.METRIC) -> str:
        return format_distance(self.distance_m, unit)


def distance_or_inf(
    origin: Coordinate | None,
    item: T,
    *,
    coordinate_of: CoordinateOf = default_coordinate_of,
    radius_m: float = EARTH_RADIUS_M,
) -> float:
    """Distance in meters, or +inf when either side has no coordinate."""
    c = coordinate_of(item)
    if origin is None or c is None:
        return math.inf
    return haversine_m(origin, c, radius_m=radius_m)


def sort_by_distance(
    origin: Coordinate | None,
    items: Iterable[T],
    *,
    coordinate_of: CoordinateOf = default_coordinate_of,
    radius_m: float = EARTH_RADIUS_M,
) -> list[T]:
    """Stable ascending sort by distance from `origin`.

    Items without a coordinate sort last, keeping their relative input order.
    """
    src = list(items)
    if origin is None:
        return src
    keyed = [(distance_or_inf(origin, it, coordinate_of=coordinate_of, radius_m=radius_m), it) for it in src]
    keyed.sort(key=lambda pair: pair[0])
    return [it for _, it in keyed]


def with_distances(
    origin: Coordinate,
    items: Iterable[T],
    *,
    coordinate_of: CoordinateOf = default_coordinate_of,
    radius_m: float = EARTH_RADIUS_M,
) -> list[ProximityResult[T]]:
    """Pair each located item with its distance; unlocated items are dropped."""
    out: list[ProximityResult[T]] = []
    for it in items:
        c = coordinate_of(it)
        if c is None:
            continue
        out.append(ProximityResult(item=it, distance_m=haversine_m(origin, c, radius_m=radius_m)))
    return out


def nearest(
    origin: Coordinate,
    items: Iterable[T],
    *,
    coordinate_of: CoordinateOf = default_coordinate_of,
    radius_m: float = EARTH_RADIUS_M,
) -> ProximityResult[T] | None:
    """Closest located item (first one wins on ties), or None."""
    best: ProximityResult[T] | None = None
    for r in with_distances(origin, items, coordinate_of=coordinate_of, radius_m=radius_m):
        if best is None or r.distance_m < best.distance_m:
            best = r
    return best


def group_by_distance_ranges(
    origin: Coordinate,
    items: Iterable[T],
    *,
    nearby_m: float = 1000.0,
    moderate_m: float = 10_000.0,
    coordinate_of: CoordinateOf = default_coordinate_of,
    radius_m: float = EARTH_RADIUS_M,
) -> dict[str, list[ProximityResult[T]]]:
    """Bucket located items into `nearby` (<= nearby_m), `moderate` (<= moderate_m) and `far`."""
    groups: dict[str, list[ProximityResult[T]]] = {"nearby": [], "moderate": [], "far": []}
    for r in with_distances(origin, items, coordinate_of=coordinate_of, radius_m=radius_m):
        if r.distance_m <= nearby_m:
            groups["nearby"].append(r)
        elif r.distance_m <= moderate_m:
            groups["moderate"].append(r)
        else:
            groups["far"].append(r)
    return groups
