"""
Tolerant coordinate extraction from loosely-typed records.

Backend payloads spell coordinates many ways (`lat`/`latitude`/`y`, `lng`/`lon`/
`longitude`/`x`, nested `location` objects, GeoJSON points). The alias lists
below are plain data so new spellings are additive.

Two layers, on purpose:
- `field_or_zero` is the low-level field helper and defaults to `0.0`.
- `coordinate_from_record` is what located-item adapters use; it returns `None`
  when a component is missing, because `(0, 0)` is a real point in the ocean.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Sequence

from geoproximity.core.geo import Coordinate

LATITUDE_KEYS: tuple[str, ...] = ("lat", "latitude", "y")
LONGITUDE_KEYS: tuple[str, ...] = ("lng", "lon", "longitude", "x")

# Nested containers checked (in order) when the record itself has no coordinate keys.
NESTED_COORDINATE_KEYS: tuple[str, ...] = ("coordinates", "coordinate", "location", "geo", "position")


def to_float(value: Any) -> float | None:
    """Coerce a number or numeric string to float; anything else is None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        out = float(value)
    elif isinstance(value, str):
        try:
            out = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return out if math.isfinite(out) else None


def lookup_float(record: Mapping[str, Any], keys: Sequence[str]) -> float | None:
    """Return the first alias in `keys` whose value parses as a float."""
    for key in keys:
        if key not in record:
            continue
        value = to_float(record[key])
        if value is not None:
            return value
    return None


def field_or_zero(record: Mapping[str, Any], keys: Sequence[str]) -> float:
    """Field-level helper: first parsable alias, or 0.0 when none is present."""
    value = lookup_float(record, keys)
    return 0.0 if value is None else value


def _coordinate_from_mapping(record: Mapping[str, Any]) -> Coordinate | None:
    if record.get("type") == "Point":
        return Coordinate.from_geojson(record)
    lat = lookup_float(record, LATITUDE_KEYS)
    lon = lookup_float(record, LONGITUDE_KEYS)
    if lat is None or lon is None:
        return None
    return Coordinate(latitude=lat, longitude=lon)


def coordinate_from_record(record: Any) -> Coordinate | None:
    """Extract a Coordinate from a raw record, or None when it has no usable location."""
    if isinstance(record, Coordinate):
        return record
    if not isinstance(record, Mapping):
        return None

    found = _coordinate_from_mapping(record)
    if found is not None:
        return found

    for key in NESTED_COORDINATE_KEYS:
        nested = record.get(key)
        if isinstance(nested, Coordinate):
            return nested
        if isinstance(nested, Mapping):
            found = _coordinate_from_mapping(nested)
            if found is not None:
                return found
    return None


def default_coordinate_of(item: Any) -> Coordinate | None:
    """Coordinate accessor used by proximity operations.

    Reads a `.coordinate` attribute (e.g. `LocatedItem`), else treats mappings as raw records.
    """
    if isinstance(item, Coordinate):
        return item
    coordinate = getattr(item, "coordinate", None)
    if isinstance(coordinate, Coordinate):
        return coordinate
    if isinstance(item, Mapping):
        return coordinate_from_record(item)
    return None
