from __future__ import annotations

import json
import logging

import pytest

from geoproximity.catalog.loader import load_located_items, parse_located_items
from geoproximity.core.geo import Coordinate


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_list_catalog(tmp_path):
    path = _write(
        tmp_path / "places.json",
        [
            {"id": "a", "lat": "48.8584", "lng": 2.2945, "city": "Paris"},
            {"_id": 7, "name": "No location"},
        ],
    )
    items = load_located_items(path)
    assert [it.id for it in items] == ["a", "7"]
    assert items[0].coordinate == Coordinate(48.8584, 2.2945)
    assert items[1].coordinate is None


def test_load_items_wrapper(tmp_path):
    path = _write(tmp_path / "wrapped.json", {"items": [{"id": "a", "latitude": 0, "longitude": 0}]})
    items = load_located_items(path)
    # (0, 0) is a real location, not a missing one.
    assert items[0].coordinate == Coordinate(0, 0)


def test_invalid_records_are_skipped_with_warning(caplog):
    caplog.set_level(logging.WARNING, logger="geoproximity.catalog.loader")
    items = parse_located_items([{"id": "ok"}, {"name": "missing id"}, {"id": "ok-2"}])
    assert [it.id for it in items] == ["ok", "ok-2"]
    assert "Skipping catalog record #1" in caplog.text


def test_invalid_root_raises(tmp_path):
    path = _write(tmp_path / "bad.json", {"places": []})
    with pytest.raises(ValueError, match="Invalid catalog root"):
        load_located_items(path)


def test_relative_path_resolves_against_project_root(tmp_path, monkeypatch):
    _write(tmp_path / "places.json", [{"id": "a", "lat": 1, "lon": 2}])
    monkeypatch.setenv("GEOPROXIMITY_PROJECT_ROOT", str(tmp_path))
    items = load_located_items("places.json")
    assert items[0].coordinate == Coordinate(1, 2)
