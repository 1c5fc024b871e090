import pytest

from geoproximity.core.geo import Coordinate
from geoproximity.core.units import UnitSystem
from geoproximity.domain.models import LocatedItem
from geoproximity.proximity.filter import filter_within_radius

PARIS = Coordinate(48.8566, 2.3522)


@pytest.fixture
def places():
    # Approximate distances from central Paris: louvre ~1.2 km, eiffel ~4.2 km,
    # versailles ~18 km, big-ben ~340 km.
    return [
        LocatedItem(id="eiffel", coordinate=Coordinate(48.8584, 2.2945)),
        LocatedItem(id="unmapped", name="No location"),
        LocatedItem(id="louvre", coordinate=Coordinate(48.8606, 2.3376)),
        LocatedItem(id="versailles", coordinate=Coordinate(48.8049, 2.1204)),
        LocatedItem(id="big-ben", coordinate=Coordinate(51.5007, -0.1246)),
    ]


def _ids(items):
    return [it.id for it in items]


def test_filter_in_kilometers_preserves_input_order(places):
    out = filter_within_radius(PARIS, 5, places, unit=UnitSystem.METRIC)
    assert _ids(out) == ["eiffel", "louvre"]


def test_filter_in_meters_when_no_unit_given(places):
    assert _ids(filter_within_radius(PARIS, 2_000, places)) == ["louvre"]


def test_filter_in_miles(places):
    assert _ids(filter_within_radius(PARIS, 3, places, unit=UnitSystem.IMPERIAL)) == ["eiffel", "louvre"]
    assert _ids(filter_within_radius(PARIS, 15, places, unit=UnitSystem.IMPERIAL)) == [
        "eiffel",
        "louvre",
        "versailles",
    ]


def test_filter_without_origin_is_a_no_op(places):
    out = filter_within_radius(None, 1, places)
    assert out == places
    assert out is not places


def test_filter_always_excludes_items_without_coordinates(places):
    out = filter_within_radius(PARIS, 1e9, places)
    assert "unmapped" not in _ids(out)
    assert len(out) == 4


def test_filter_radius_is_inclusive():
    item = LocatedItem(id="x", coordinate=Coordinate(48.8566, 2.3522))
    assert filter_within_radius(PARIS, 0, [item]) == [item]


def test_filter_does_not_mutate_input(places):
    before = list(places)
    filter_within_radius(PARIS, 5, places, unit=UnitSystem.METRIC)
    assert places == before


def test_filter_accepts_raw_records_and_custom_accessors():
    records = [{"id": "a", "lat": 48.857, "lng": 2.352}, {"id": "b"}, {"id": "c", "lat": 0, "lng": 0}]
    assert [r["id"] for r in filter_within_radius(PARIS, 1_000, records)] == ["a"]

    pairs = [("near", (48.857, 2.352)), ("far", (0.0, 0.0))]
    out = filter_within_radius(PARIS, 1_000, pairs, coordinate_of=lambda p: Coordinate(*p[1]))
    assert [name for name, _ in out] == ["near"]


def test_filter_accepts_generators(places):
    out = filter_within_radius(PARIS, 5, (p for p in places), unit=UnitSystem.METRIC)
    assert _ids(out) == ["eiffel", "louvre"]
