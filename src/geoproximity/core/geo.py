from __future__ import annotations
from dataclasses import dataclass, replace as _dc_replace
from math import asin, atan2, cos, degrees, isfinite, isnan, pi, radians, sin, sqrt
from typing import Any, Iterable, Mapping, Sequence

"""
Geospatial helpers.

We keep a tiny spherical-earth geometry layer here so proximity modules can do
distance, bearing and destination math without pulling in heavier GIS dependencies.

Conventions:
- Coordinates are decimal degrees (WGS84-like bounds).
- Distances are meters.
- Bearings are degrees clockwise from north in [0, 360).
- Derived longitudes are normalized to (-180, 180].
"""

EARTH_RADIUS_M = 6_371_000.0


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude into (-180, 180]."""
    x = ((float(lon) + 180.0) % 360.0) - 180.0
    if x <= -180.0:
        x += 360.0
    return x


def normalize_bearing(deg: float) -> float:
    """Wrap an angle into [0, 360)."""
    x = (float(deg) + 360.0) % 360.0
    # Float modulo can round a tiny negative up to exactly 360.0.
    if x >= 360.0:
        x = 0.0
    return x


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees.

    Construction does not validate: raw values may be out of range until
    `clamped()` is called.
    """

    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0

    def replace(self, *, latitude: float | None = None, longitude: float | None = None) -> "Coordinate":
        updates: dict[str, float] = {}
        if latitude is not None:
            updates["latitude"] = float(latitude)
        if longitude is not None:
            updates["longitude"] = float(longitude)
        return _dc_replace(self, **updates) if updates else self

    def clamped(self) -> "Coordinate":
        """Clamp latitude to [-90, 90] and wrap longitude into [-180, 180].

        Longitude is cyclic, so 190 becomes -170 rather than 180. NaN passes through.
        """
        lat = float(self.latitude)
        if not isnan(lat):
            lat = max(-90.0, min(90.0, lat))
        lon = float(self.longitude)
        if not -180.0 <= lon <= 180.0:
            lon = normalize_longitude(lon)
        return Coordinate(latitude=lat, longitude=lon)

    def rounded(self, fraction_digits: int = 6) -> "Coordinate":
        """Round both components (6 digits is roughly 0.11 m)."""
        return Coordinate(
            latitude=round(float(self.latitude), fraction_digits),
            longitude=round(float(self.longitude), fraction_digits),
        )

    def distance_to(self, other: "Coordinate", *, radius_m: float = EARTH_RADIUS_M) -> float:
        return haversine_m(self, other, radius_m=radius_m)

    def bearing_to(self, other: "Coordinate") -> float:
        return initial_bearing_deg(self, other)

    def midpoint_to(self, other: "Coordinate") -> "Coordinate":
        return midpoint(self, other)

    def offset_by(
        self, distance_m: float, bearing_deg: float, *, radius_m: float = EARTH_RADIUS_M
    ) -> "Coordinate":
        return destination_point(self, distance_m, bearing_deg, radius_m=radius_m)

    def to_json(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    def to_lat_lng_json(self) -> dict[str, float]:
        """Alternate shape used by mapping-library payloads."""
        return {"lat": self.latitude, "lng": self.longitude}

    def to_geojson(self) -> dict[str, Any]:
        """GeoJSON Point; note the [longitude, latitude] order."""
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}

    @classmethod
    def from_geojson(cls, obj: Any) -> "Coordinate | None":
        """Decode a GeoJSON Point; returns None for anything else."""
        if not isinstance(obj, Mapping) or obj.get("type") != "Point":
            return None
        coords = obj.get("coordinates")
        if not isinstance(coords, Sequence) or isinstance(coords, (str, bytes)) or len(coords) < 2:
            return None
        lon, lat = coords[0], coords[1]
        if isinstance(lon, bool) or isinstance(lat, bool):
            return None
        if not isinstance(lon, (int, float)) or not isinstance(lat, (int, float)):
            return None
        if not (isfinite(lon) and isfinite(lat)):
            return None
        return cls(latitude=float(lat), longitude=float(lon))


def format_lat_lng(c: Coordinate, fraction_digits: int = 6) -> str:
    """Render as `lat,lng` (the inverse of `parse_lat_lng`)."""
    return f"{c.latitude:.{fraction_digits}f},{c.longitude:.{fraction_digits}f}"


def haversine_m(a: Coordinate, b: Coordinate, *, radius_m: float = EARTH_RADIUS_M) -> float:
    """Compute great-circle distance in meters between two points."""
    lat1 = radians(a.latitude)
    lat2 = radians(b.latitude)

    dlat = lat2 - lat1
    dlon = radians(b.longitude - a.longitude)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h just outside [0, 1] for antipodal points.
    if h > 1.0:
        h = 1.0
    elif h < 0.0:
        h = 0.0
    return 2 * radius_m * atan2(sqrt(h), sqrt(1 - h))


def initial_bearing_deg(a: Coordinate, b: Coordinate) -> float:
    """Initial forward azimuth from `a` to `b` in [0, 360); 0 for identical points."""
    if a == b:
        return 0.0
    lat1 = radians(a.latitude)
    lat2 = radians(b.latitude)
    dlon = radians(normalize_longitude(b.longitude - a.longitude))

    y = sin(dlon) * cos(lat2)
    x = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)
    return normalize_bearing(degrees(atan2(y, x)))


def midpoint(a: Coordinate, b: Coordinate) -> Coordinate:
    """Midpoint along the great-circle path between `a` and `b`."""
    lat1 = radians(a.latitude)
    lon1 = radians(a.longitude)
    lat2 = radians(b.latitude)
    dlon = radians(normalize_longitude(b.longitude - a.longitude))

    bx = cos(lat2) * cos(dlon)
    by = cos(lat2) * sin(dlon)
    lat3 = atan2(sin(lat1) + sin(lat2), sqrt((cos(lat1) + bx) ** 2 + by**2))
    lon3 = lon1 + atan2(by, cos(lat1) + bx)
    return Coordinate(latitude=degrees(lat3), longitude=normalize_longitude(degrees(lon3)))


def destination_point(
    origin: Coordinate,
    distance_m: float,
    bearing_deg: float,
    *,
    radius_m: float = EARTH_RADIUS_M,
) -> Coordinate:
    """Point reached by travelling `distance_m` from `origin` on initial bearing `bearing_deg`."""
    delta = float(distance_m) / radius_m
    theta = radians(bearing_deg)
    lat1 = radians(origin.latitude)
    lon1 = radians(origin.longitude)

    s = sin(lat1) * cos(delta) + cos(lat1) * sin(delta) * cos(theta)
    if s > 1.0:
        s = 1.0
    elif s < -1.0:
        s = -1.0
    lat2 = asin(s)
    lon2 = lon1 + atan2(
        sin(theta) * sin(delta) * cos(lat1),
        cos(delta) - sin(lat1) * sin(lat2),
    )
    return Coordinate(latitude=degrees(lat2), longitude=normalize_longitude(degrees(lon2)))


def path_length_m(points: Sequence[Coordinate], *, radius_m: float = EARTH_RADIUS_M) -> float:
    """Total length of a polyline in meters (0 for fewer than two points)."""
    if len(points) < 2:
        return 0.0
    return sum(haversine_m(points[i - 1], points[i], radius_m=radius_m) for i in range(1, len(points)))


@dataclass(frozen=True)
class BoundingBox:
    """An axis-aligned lat/lon box in decimal degrees."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @classmethod
    def around(cls, center: Coordinate, radius_m: float, *, earth_radius_m: float = EARTH_RADIUS_M) -> "BoundingBox":
        """Approximate box enclosing a radius around `center` (not wrapped at the antimeridian)."""
        deg_lat = (float(radius_m) / earth_radius_m) * (180.0 / pi)
        cos_lat = cos(radians(center.latitude))
        # At the poles every longitude is within reach.
        deg_lon = 180.0 if cos_lat <= 1e-12 else (float(radius_m) / (earth_radius_m * cos_lat)) * (180.0 / pi)
        return cls(
            min_lat=center.latitude - deg_lat,
            max_lat=center.latitude + deg_lat,
            min_lon=center.longitude - deg_lon,
            max_lon=center.longitude + deg_lon,
        )

    @classmethod
    def enclosing(cls, coordinates: Iterable[Coordinate]) -> "BoundingBox | None":
        pts = list(coordinates)
        if not pts:
            return None
        return cls(
            min_lat=min(p.latitude for p in pts),
            max_lat=max(p.latitude for p in pts),
            min_lon=min(p.longitude for p in pts),
            max_lon=max(p.longitude for p in pts),
        )

    def contains(self, c: Coordinate) -> bool:
        return self.min_lat <= c.latitude <= self.max_lat and self.min_lon <= c.longitude <= self.max_lon

    def padded(self, padding_m: float) -> "BoundingBox":
        """Grow the box by roughly `padding_m` on each side (1 degree ~ 111 km)."""
        lat_pad = float(padding_m) / 111_000.0
        mid_lat = radians((self.min_lat + self.max_lat) / 2)
        cos_mid = cos(mid_lat)
        lon_pad = 180.0 if cos_mid <= 1e-12 else float(padding_m) / (111_000.0 * cos_mid)
        return BoundingBox(
            min_lat=self.min_lat - lat_pad,
            max_lat=self.max_lat + lat_pad,
            min_lon=self.min_lon - lon_pad,
            max_lon=self.max_lon + lon_pad,
        )
