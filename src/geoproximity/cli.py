"""
geoproximity CLI entrypoint.

Intended for quick local checks of the geodesy and proximity operations against a
JSON catalog. Coordinates are given as `lat,lng` (or a DMS pair); use the
`--origin=-33.9,18.4` form for negative latitudes so argparse does not read them as flags.
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any

from geoproximity.catalog.loader import load_located_items
from geoproximity.config.settings import Settings, get_settings
from geoproximity.core.geo import Coordinate, format_lat_lng
from geoproximity.core.logging import configure_logging
from geoproximity.core.parsing import format_dms, parse_lat_lng, parse_lat_lng_flexible
from geoproximity.core.units import UnitSystem, format_distance
from geoproximity.domain.models import LocatedItem
from geoproximity.proximity.center import center_of_mass, spherical_centroid
from geoproximity.proximity.filter import filter_within_radius
from geoproximity.proximity.grouping import grouped_nearby, locality_key
from geoproximity.proximity.sort import distance_or_inf, sort_by_distance

logger = logging.getLogger(__name__)


def _coordinate_arg(value: str) -> Coordinate:
    c = parse_lat_lng_flexible(value)
    if c is None:
        raise argparse.ArgumentTypeError(f"Invalid coordinate '{value}', expected 'lat,lng'")
    return c


def _raw_coordinate_arg(value: str) -> Coordinate:
    c = parse_lat_lng(value, validate=False)
    if c is None:
        raise argparse.ArgumentTypeError(f"Invalid coordinate '{value}', expected 'lat,lng'")
    return c


def _unit(args: argparse.Namespace, settings: Settings) -> UnitSystem:
    return UnitSystem.parse(args.unit) if args.unit else settings.units.system


def _emit(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _load_items(args: argparse.Namespace, settings: Settings) -> list[LocatedItem]:
    return load_located_items(args.catalog or settings.catalog.path)


def _item_key(item: LocatedItem, settings: Settings) -> str:
    return locality_key(item, fields=settings.locality.fields, separator=settings.locality.separator)


def _item_json(item: LocatedItem, *, origin: Coordinate | None, unit: UnitSystem, settings: Settings) -> dict:
    out = item.model_dump(mode="json")
    d = distance_or_inf(origin, item, radius_m=settings.geodesy.earth_radius_m)
    if d != float("inf"):
        out["distance_m"] = d
        out["distance"] = unit.convert_distance(d)
        out["distance_label"] = format_distance(d, unit)
    return out


def _cmd_distance(args: argparse.Namespace) -> int:
    settings = get_settings()
    unit = _unit(args, settings)
    meters = args.a.distance_to(args.b, radius_m=settings.geodesy.earth_radius_m)
    if args.json:
        _emit({"meters": meters, "value": unit.convert_distance(meters), "unit": unit.distance_unit})
        return 0
    print(f"{unit.convert_distance(meters):.3f} {unit.distance_unit} ({format_distance(meters, unit)})")
    return 0


def _cmd_bearing(args: argparse.Namespace) -> int:
    print(f"{args.a.bearing_to(args.b):.2f}")
    return 0


def _print_coordinate(c: Coordinate, *, as_json: bool, settings: Settings) -> None:
    c = c.rounded(settings.geodesy.round_fraction_digits)
    if as_json:
        _emit({**c.to_json(), "geojson": c.to_geojson()})
        return
    print(f"{format_lat_lng(c, settings.geodesy.round_fraction_digits)}  ({format_dms(c)})")


def _cmd_midpoint(args: argparse.Namespace) -> int:
    settings = get_settings()
    _print_coordinate(args.a.midpoint_to(args.b), as_json=args.json, settings=settings)
    return 0


def _cmd_offset(args: argparse.Namespace) -> int:
    settings = get_settings()
    dest = args.origin.offset_by(
        float(args.distance_m), float(args.bearing), radius_m=settings.geodesy.earth_radius_m
    )
    _print_coordinate(dest, as_json=args.json, settings=settings)
    return 0


def _cmd_clamp(args: argparse.Namespace) -> int:
    settings = get_settings()
    _print_coordinate(args.coordinate.clamped(), as_json=args.json, settings=settings)
    return 0


def _cmd_convert(args: argparse.Namespace) -> int:
    settings = get_settings()
    unit = _unit(args, settings)
    if args.mps is not None:
        print(f"{unit.convert_speed(float(args.mps)):.3f} {unit.speed_unit}")
    else:
        print(f"{unit.convert_distance(float(args.meters)):.3f} {unit.distance_unit}")
    return 0


def _cmd_nearby(args: argparse.Namespace) -> int:
    settings = get_settings()
    unit = _unit(args, settings)
    radius = settings.proximity.default_radius if args.radius is None else float(args.radius)
    clamped_radius = settings.proximity.clamp_radius(radius)
    if clamped_radius != radius:
        logger.warning(
            "Radius %g %s is outside [%g, %g]; using %g",
            radius,
            unit.distance_unit,
            settings.proximity.min_radius,
            settings.proximity.max_radius,
            clamped_radius,
        )
        radius = clamped_radius
    items = _load_items(args, settings)

    earth_radius_m = settings.geodesy.earth_radius_m
    within = filter_within_radius(args.origin, radius, items, unit=unit, radius_m=earth_radius_m)
    ordered = sort_by_distance(args.origin, within, radius_m=earth_radius_m)
    if args.limit is not None:
        ordered = ordered[: int(args.limit)]

    if args.json:
        _emit(
            {
                "origin": args.origin.to_json() if args.origin else None,
                "radius": radius,
                "unit": unit.distance_unit,
                "items": [_item_json(it, origin=args.origin, unit=unit, settings=settings) for it in ordered],
            }
        )
        return 0

    print(f"{len(ordered)} of {len(items)} items within {radius:g} {unit.distance_unit}")
    for i, it in enumerate(ordered, start=1):
        d = distance_or_inf(args.origin, it, radius_m=earth_radius_m)
        label = format_distance(d, unit) if d != float("inf") else "?"
        print(f"{i:>2}. {it.name or it.id}  {label}  [{_item_key(it, settings) or settings.locality.unknown_label}]")
    return 0


def _cmd_group(args: argparse.Namespace) -> int:
    settings = get_settings()
    unit = _unit(args, settings)
    items = _load_items(args, settings)
    sections = grouped_nearby(
        args.origin,
        items,
        key_of=lambda it: _item_key(it, settings),
        unknown_label=settings.locality.unknown_label,
        radius_m=settings.geodesy.earth_radius_m,
    )

    if args.json:
        _emit(
            {
                label: [_item_json(it, origin=args.origin, unit=unit, settings=settings) for it in bucket]
                for label, bucket in sections
            }
        )
        return 0

    for label, bucket in sections:
        print(f"{label} ({len(bucket)})")
        for it in bucket:
            d = distance_or_inf(args.origin, it, radius_m=settings.geodesy.earth_radius_m)
            suffix = f"  {format_distance(d, unit)}" if d != float("inf") else ""
            print(f"    - {it.name or it.id}{suffix}")
    return 0


def _cmd_center(args: argparse.Namespace) -> int:
    settings = get_settings()
    items = _load_items(args, settings)
    if args.spherical:
        center = spherical_centroid(it.coordinate for it in items if it.coordinate is not None)
        center = center or (args.fallback if args.fallback and args.fallback.is_valid else None)
    else:
        center = center_of_mass(items, args.fallback)

    if center is None:
        if args.json:
            _emit(None)
        else:
            print("No located items and no fallback; center is undefined.")
        return 1
    _print_coordinate(center, as_json=args.json, settings=settings)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the geoproximity CLI."""
    parser = argparse.ArgumentParser(prog="geoproximity")
    sub = parser.add_subparsers(dest="command", required=True)

    dist = sub.add_parser("distance", help="Great-circle distance between two points.")
    dist.add_argument("a", type=_coordinate_arg)
    dist.add_argument("b", type=_coordinate_arg)
    dist.add_argument("--unit", choices=[u.value for u in UnitSystem], default=None)
    dist.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    dist.set_defaults(func=_cmd_distance)

    brg = sub.add_parser("bearing", help="Initial bearing (degrees, 0..360) from A to B.")
    brg.add_argument("a", type=_coordinate_arg)
    brg.add_argument("b", type=_coordinate_arg)
    brg.set_defaults(func=_cmd_bearing)

    mid = sub.add_parser("midpoint", help="Great-circle midpoint between two points.")
    mid.add_argument("a", type=_coordinate_arg)
    mid.add_argument("b", type=_coordinate_arg)
    mid.add_argument("--json", action="store_true")
    mid.set_defaults(func=_cmd_midpoint)

    off = sub.add_parser("offset", help="Destination point from an origin, distance and bearing.")
    off.add_argument("origin", type=_coordinate_arg)
    off.add_argument("--distance-m", required=True, type=float)
    off.add_argument("--bearing", required=True, type=float, help="Degrees clockwise from north")
    off.add_argument("--json", action="store_true")
    off.set_defaults(func=_cmd_offset)

    clamp = sub.add_parser("clamp", help="Clamp latitude and wrap longitude of a raw coordinate.")
    clamp.add_argument("coordinate", type=_raw_coordinate_arg)
    clamp.add_argument("--json", action="store_true")
    clamp.set_defaults(func=_cmd_clamp)

    conv = sub.add_parser("convert", help="Convert meters (or m/s) into the display unit.")
    group = conv.add_mutually_exclusive_group(required=True)
    group.add_argument("--meters", type=float)
    group.add_argument("--mps", type=float, help="Speed in meters per second")
    conv.add_argument("--unit", choices=[u.value for u in UnitSystem], default=None)
    conv.set_defaults(func=_cmd_convert)

    near = sub.add_parser("nearby", help="Catalog items within a radius, nearest first.")
    near.add_argument("--origin", type=_coordinate_arg, default=None, help="Omit to skip radius filtering")
    near.add_argument("--radius", type=float, default=None, help="In km (metric) or mi (imperial)")
    near.add_argument("--unit", choices=[u.value for u in UnitSystem], default=None)
    near.add_argument("--catalog", type=str, default=None)
    near.add_argument("--limit", type=int, default=None)
    near.add_argument("--json", action="store_true")
    near.set_defaults(func=_cmd_nearby)

    grp = sub.add_parser("group", help="Catalog items grouped by locality, nearest first per group.")
    grp.add_argument("--origin", type=_coordinate_arg, default=None)
    grp.add_argument("--unit", choices=[u.value for u in UnitSystem], default=None)
    grp.add_argument("--catalog", type=str, default=None)
    grp.add_argument("--json", action="store_true")
    grp.set_defaults(func=_cmd_group)

    ctr = sub.add_parser("center", help="Map center for the catalog items.")
    ctr.add_argument("--fallback", type=_coordinate_arg, default=None)
    ctr.add_argument("--catalog", type=str, default=None)
    ctr.add_argument("--spherical", action="store_true", help="Use the spherical centroid instead of the mean")
    ctr.add_argument("--json", action="store_true")
    ctr.set_defaults(func=_cmd_center)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m geoproximity.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
