import math

from geoproximity.core.extract import (
    LATITUDE_KEYS,
    LONGITUDE_KEYS,
    coordinate_from_record,
    default_coordinate_of,
    field_or_zero,
    lookup_float,
    to_float,
)
from geoproximity.core.geo import Coordinate
from geoproximity.domain.models import LocatedItem


def test_to_float_accepts_numbers_and_numeric_strings():
    assert to_float(1) == 1.0
    assert to_float(2.5) == 2.5
    assert to_float(" 3 ") == 3.0
    assert to_float("-0.1278") == -0.1278


def test_to_float_rejects_everything_else():
    for value in (None, True, False, "", "abc", "nan", "inf", [], {}, float("nan")):
        assert to_float(value) is None


def test_alias_priority_order():
    assert lookup_float({"lat": 1, "latitude": 2, "y": 3}, LATITUDE_KEYS) == 1.0
    assert lookup_float({"latitude": 2, "y": 3}, LATITUDE_KEYS) == 2.0
    assert lookup_float({"lon": 3, "lng": 4}, LONGITUDE_KEYS) == 4.0
    assert lookup_float({"x": "7", "longitude": 6}, LONGITUDE_KEYS) == 6.0


def test_alias_lookup_skips_unparsable_values():
    assert lookup_float({"lat": "bad", "latitude": 5}, LATITUDE_KEYS) == 5.0
    assert lookup_float({"lat": "bad"}, LATITUDE_KEYS) is None


def test_field_helper_defaults_to_zero():
    assert field_or_zero({}, LATITUDE_KEYS) == 0.0
    assert field_or_zero({"y": "12.5"}, LATITUDE_KEYS) == 12.5


def test_coordinate_from_record_top_level_aliases():
    assert coordinate_from_record({"y": "10", "x": "20"}) == Coordinate(10, 20)
    assert coordinate_from_record({"latitude": 1.5, "lon": -2.5}) == Coordinate(1.5, -2.5)


def test_coordinate_from_record_keeps_missing_distinct_from_origin():
    assert coordinate_from_record({"name": "no location"}) is None
    assert coordinate_from_record({"lat": 5}) is None
    assert coordinate_from_record({"lat": None, "lng": None}) is None
    assert coordinate_from_record({"lat": 0, "lng": 0}) == Coordinate(0, 0)
    assert coordinate_from_record("48.8,2.3") is None


def test_coordinate_from_record_nested_shapes():
    assert coordinate_from_record({"location": {"latitude": 1, "longitude": 2}}) == Coordinate(1, 2)
    assert coordinate_from_record({"geo": {"lat": "3", "lng": "4"}}) == Coordinate(3, 4)
    assert coordinate_from_record({"coordinates": {"type": "Point", "coordinates": [2.35, 48.85]}}) == Coordinate(
        48.85, 2.35
    )
    assert coordinate_from_record({"type": "Point", "coordinates": [2.35, 48.85]}) == Coordinate(48.85, 2.35)
    assert coordinate_from_record({"position": Coordinate(7, 8)}) == Coordinate(7, 8)


def test_default_coordinate_of_handles_items_records_and_values():
    item = LocatedItem(id="a", coordinate=Coordinate(1, 2))
    assert default_coordinate_of(item) == Coordinate(1, 2)
    assert default_coordinate_of(LocatedItem(id="b")) is None
    assert default_coordinate_of({"lat": 3, "lng": 4}) == Coordinate(3, 4)
    assert default_coordinate_of(Coordinate(5, 6)) == Coordinate(5, 6)
    assert default_coordinate_of(object()) is None


def test_located_item_from_raw_record():
    item = LocatedItem.model_validate({"_id": 42, "name": "Cafe", "lat": "1.5", "lng": 2, "city": " "})
    assert item.id == "42"
    assert item.coordinate == Coordinate(1.5, 2.0)
    assert item.city is None
    assert item.has_coordinate


def test_located_item_without_location_has_no_coordinate():
    item = LocatedItem.model_validate({"id": "x", "name": "Somewhere"})
    assert item.coordinate is None
    assert not item.has_coordinate


def test_located_item_accepts_coordinate_mapping_and_dumps_primary_shape():
    item = LocatedItem.model_validate({"id": "x", "coordinate": {"lat": 1, "lng": 2}})
    assert item.coordinate == Coordinate(1, 2)
    dumped = item.model_dump(mode="json")
    assert dumped["coordinate"] == {"latitude": 1.0, "longitude": 2.0}
    assert not math.isnan(dumped["coordinate"]["latitude"])
