"""
Domain models (Pydantic).

`LocatedItem` is the minimal view of a place/favorite/hotel that proximity
operations need: an id, an optional coordinate and optional locality labels.

Raw backend records are loosely typed, so validation goes through
`coordinate_from_record` and keeps "no coordinate" (`None`) distinct from `(0, 0)`.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from geoproximity.core.extract import coordinate_from_record
from geoproximity.core.geo import Coordinate


class LocatedItem(BaseModel):
    """A place-like record with an optional location."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str | None = None
    coordinate: Coordinate | None = None

    city: str | None = None
    region: str | None = None
    country: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_raw_record(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        out = dict(data)
        if "id" not in out and "_id" in out:
            out["id"] = out["_id"]
        if out.get("coordinate") is None:
            out["coordinate"] = coordinate_from_record(data)
        elif not isinstance(out["coordinate"], Coordinate):
            out["coordinate"] = coordinate_from_record(out["coordinate"])
        return out

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("city", "region", "country", "name", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def has_coordinate(self) -> bool:
        return self.coordinate is not None
