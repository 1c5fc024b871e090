from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Sequence, TypeVar

from geoproximity.core.extract import default_coordinate_of
from geoproximity.core.geo import EARTH_RADIUS_M, Coordinate
from geoproximity.proximity.sort import sort_by_distance

T = TypeVar("T")

UNKNOWN_LOCALITY = "Unknown"
DEFAULT_LOCALITY_FIELDS: tuple[str, ...] = ("city", "region", "country")


def _field(item: Any, name: str) -> str:
    value = item.get(name) if isinstance(item, Mapping) else getattr(item, name, None)
    if value is None:
        return ""
    return str(value).strip()


def locality_key(
    item: Any,
    *,
    fields: Sequence[str] = DEFAULT_LOCALITY_FIELDS,
    separator: str = ", ",
) -> str:
    """Join the non-empty locality parts, e.g. `"Pune, Maharashtra, India"`; may be empty."""
    parts = [p for p in (_field(item, name) for name in fields) if p]
    return separator.join(parts)


def group_by_locality(
    items: Iterable[T],
    key_of: Callable[[T], str] = locality_key,
    *,
    unknown_label: str = UNKNOWN_LOCALITY,
) -> dict[str, list[T]]:
    """Partition items by locality label, keys in first-seen order.

    Items with an empty key land in the `unknown_label` bucket. Buckets keep input order.
    """
    groups: dict[str, list[T]] = {}
    for it in items:
        key = (key_of(it) or "").strip() or unknown_label
        groups.setdefault(key, []).append(it)
    return groups


def grouped_nearby(
    origin: Coordinate | None,
    items: Iterable[T],
    *,
    key_of: Callable[[T], str] = locality_key,
    unknown_label: str = UNKNOWN_LOCALITY,
    coordinate_of: Callable[[T], Coordinate | None] = default_coordinate_of,
    radius_m: float = EARTH_RADIUS_M,
) -> list[tuple[str, list[T]]]:
    """Locality sections sorted by label, each bucket nearest-first."""
    groups = group_by_locality(items, key_of, unknown_label=unknown_label)
    return [
        (label, sort_by_distance(origin, groups[label], coordinate_of=coordinate_of, radius_m=radius_m))
        for label in sorted(groups)
    ]
