"""
Located-item catalog loader.

The catalog is a local JSON file (default: `data/places.json`) holding raw place
records in whatever shape the backend produced: a list of records, or an object
with an `items` list. Records are validated into `LocatedItem`s; a malformed record
is skipped with a warning instead of failing the whole file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from geoproximity.core.env import resolve_project_path
from geoproximity.domain.models import LocatedItem

logger = logging.getLogger(__name__)


def _records_from_payload(payload: Any, *, source: Path) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("items"), list):
        return payload["items"]
    raise ValueError(f"Invalid catalog root in {source}; expected a list or an object with an 'items' list.")


def parse_located_items(records: list[Any]) -> list[LocatedItem]:
    """Validate raw records, skipping (and logging) the ones that do not parse."""
    items: list[LocatedItem] = []
    for index, record in enumerate(records):
        try:
            items.append(LocatedItem.model_validate(record))
        except ValidationError as exc:
            logger.warning("Skipping catalog record #%d: %s", index, exc.errors()[0].get("msg", exc))
    unlocated = sum(1 for it in items if it.coordinate is None)
    if unlocated:
        logger.info("%d of %d catalog items have no coordinate", unlocated, len(items))
    return items


def load_located_items(path: str | Path) -> list[LocatedItem]:
    """Load and validate a located-item catalog JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    records = _records_from_payload(payload, source=resolved)
    return parse_located_items(records)
