# src/geoproximity/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/geoproximity/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `GEOPROXIMITY_CONFIG_PATH`
- a small whitelist of environment variables (`GEOPROXIMITY_LOG_LEVEL`, ...)

Design rule:
- Tuning knobs (earth radius, default radius, locality labels) live in YAML, not in the math modules.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from geoproximity.core.env import load_dotenv_if_present
from geoproximity.core.geo import EARTH_RADIUS_M
from geoproximity.core.units import UnitSystem


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `geoproximity.config`."""
    text = resources.files("geoproximity.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "geoproximity"
    log_level: str = "INFO"


class GeodesySettings(BaseModel):
    earth_radius_m: float = Field(EARTH_RADIUS_M, gt=0)
    round_fraction_digits: int = Field(6, ge=0, le=12)


class UnitSettings(BaseModel):
    system: UnitSystem = UnitSystem.METRIC

    @field_validator("system", mode="before")
    @classmethod
    def _parse_system(cls, value: Any) -> UnitSystem:
        return UnitSystem.parse(value)


class ProximitySettings(BaseModel):
    # Radii are expressed in the configured unit system's distance unit (km or mi).
    default_radius: float = Field(10.0, gt=0)
    min_radius: float = Field(0.5, gt=0)
    max_radius: float = Field(50.0, gt=0)
    nearby_m: float = Field(1000.0, gt=0)
    moderate_m: float = Field(10_000.0, gt=0)

    @model_validator(mode="after")
    def _validate_ranges(self) -> "ProximitySettings":
        if not self.min_radius <= self.default_radius <= self.max_radius:
            raise ValueError("proximity.default_radius must lie within [min_radius, max_radius]")
        if self.moderate_m < self.nearby_m:
            raise ValueError("proximity.moderate_m must be >= proximity.nearby_m")
        return self

    def clamp_radius(self, radius: float) -> float:
        return max(self.min_radius, min(self.max_radius, float(radius)))


class LocalitySettings(BaseModel):
    fields: list[str] = Field(default_factory=lambda: ["city", "region", "country"])
    separator: str = ", "
    unknown_label: str = "Unknown"


class CatalogSettings(BaseModel):
    path: str = "data/places.json"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    geodesy: GeodesySettings = Field(default_factory=GeodesySettings)
    units: UnitSettings = Field(default_factory=UnitSettings)
    proximity: ProximitySettings = Field(default_factory=ProximitySettings)
    locality: LocalitySettings = Field(default_factory=LocalitySettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    data = dict(data)

    log_level = os.getenv("GEOPROXIMITY_LOG_LEVEL")
    if log_level:
        data["app"] = {**data.get("app", {}), "log_level": log_level}

    unit_system = os.getenv("GEOPROXIMITY_UNIT_SYSTEM")
    if unit_system:
        data["units"] = {**data.get("units", {}), "system": unit_system}

    catalog_path = os.getenv("GEOPROXIMITY_CATALOG_PATH")
    if catalog_path:
        data["catalog"] = {**data.get("catalog", {}), "path": catalog_path}

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GEOPROXIMITY_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
