from geoproximity.core.geo import Coordinate
from geoproximity.domain.models import LocatedItem
from geoproximity.proximity.grouping import (
    UNKNOWN_LOCALITY,
    group_by_locality,
    grouped_nearby,
    locality_key,
)

PARIS = Coordinate(48.8566, 2.3522)


def _ids(items):
    return [it.id for it in items]


def _places():
    return [
        LocatedItem(id="eiffel", coordinate=Coordinate(48.8584, 2.2945), city="Paris", country="France"),
        LocatedItem(id="unmapped", city=" ", country=None),
        LocatedItem(id="big-ben", coordinate=Coordinate(51.5007, -0.1246), city="London", country="United Kingdom"),
        LocatedItem(id="louvre", coordinate=Coordinate(48.8606, 2.3376), city="Paris", country="France"),
        LocatedItem(id="versailles", coordinate=Coordinate(48.8049, 2.1204), city="Versailles", country="France"),
    ]


def test_locality_key_skips_empty_parts():
    assert locality_key(LocatedItem(id="a", city="Paris", country="France")) == "Paris, France"
    assert locality_key({"city": " Pune ", "region": "MH", "country": ""}) == "Pune, MH"
    assert locality_key({"region": "Bavaria"}, separator=" / ", fields=("region", "country")) == "Bavaria"
    assert locality_key(LocatedItem(id="b")) == ""


def test_group_by_locality_uses_unknown_bucket_and_first_seen_order():
    groups = group_by_locality(_places())
    assert list(groups) == ["Paris, France", UNKNOWN_LOCALITY, "London, United Kingdom", "Versailles, France"]
    assert _ids(groups["Paris, France"]) == ["eiffel", "louvre"]
    assert _ids(groups[UNKNOWN_LOCALITY]) == ["unmapped"]


def test_group_by_locality_custom_key_and_label():
    groups = group_by_locality(_places(), lambda it: it.country or "", unknown_label="Elsewhere")
    assert _ids(groups["France"]) == ["eiffel", "louvre", "versailles"]
    assert _ids(groups["Elsewhere"]) == ["unmapped"]


def test_group_by_locality_empty_input():
    assert group_by_locality([]) == {}


def test_grouped_nearby_sorts_labels_and_buckets_by_distance():
    sections = grouped_nearby(PARIS, _places())
    assert [label for label, _ in sections] == [
        "London, United Kingdom",
        "Paris, France",
        UNKNOWN_LOCALITY,
        "Versailles, France",
    ]
    assert _ids(dict(sections)["Paris, France"]) == ["louvre", "eiffel"]


def test_grouped_nearby_without_origin_keeps_bucket_order():
    sections = dict(grouped_nearby(None, _places()))
    assert _ids(sections["Paris, France"]) == ["eiffel", "louvre"]
