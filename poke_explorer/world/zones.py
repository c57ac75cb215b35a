"""Curated zone tables layered over the procedural biome noise."""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .geo import haversine_m, point_in_polygon

logger = logging.getLogger(__name__)

LEGENDARY_TAG = "LEGENDARY"
ZONES_FILENAME = "zones.json"


class BiomeType(str, Enum):
    """Terrain labels used to flavour which species can spawn."""

    URBAN = "URBAN"
    RURAL = "RURAL"
    FOREST = "FOREST"
    WATER = "WATER"
    GRASS = "GRASS"


class Zone(BaseModel):
    """A named circular override region."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    lat: float
    lng: float
    radius: float = Field(gt=0.0, description="Radius in metres.")
    forced_biome: BiomeType | None = None
    legendary_id: int | None = Field(default=None, ge=1)

    @property
    def slug(self) -> str:
        return re.sub(r"[^a-z0-9]+", "-", self.name.lower()).strip("-")

    def distance_to(self, lat: float, lng: float) -> float:
        return haversine_m(lat, lng, self.lat, self.lng)

    def contains(self, lat: float, lng: float) -> bool:
        return self.distance_to(lat, lng) <= self.radius


class PolygonRegion(BaseModel):
    """A biome override described by an outline of ``(lat, lng)`` vertices."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    vertices: Tuple[Tuple[float, float], ...]
    forced_biome: BiomeType

    @field_validator("vertices")
    @classmethod
    def _require_area(cls, value: Tuple[Tuple[float, float], ...]) -> Tuple[Tuple[float, float], ...]:
        if len(value) < 3:
            raise ValueError("a polygon region needs at least three vertices")
        return value

    def contains(self, lat: float, lng: float) -> bool:
        return point_in_polygon(lat, lng, self.vertices)


class ZoneTables(BaseModel):
    """Read-only configuration of every curated zone."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    legendary_zones: Tuple[Zone, ...] = ()
    biome_regions: Tuple[Zone, ...] = ()
    polygon_regions: Tuple[PolygonRegion, ...] = ()

    @field_validator("biome_regions")
    @classmethod
    def _regions_force_biome(cls, value: Tuple[Zone, ...]) -> Tuple[Zone, ...]:
        for zone in value:
            if zone.forced_biome is None:
                raise ValueError(f"biome region {zone.name!r} must declare forced_biome")
        return value

    @property
    def spawning_zones(self) -> Tuple[Zone, ...]:
        """Legendary zones that own a species."""

        return tuple(zone for zone in self.legendary_zones if zone.legendary_id is not None)


DEFAULT_LEGENDARY_ZONES: Tuple[Zone, ...] = (
    Zone(
        name="Lapu-Lapu Shrine",
        lat=10.3105,
        lng=124.0153,
        radius=600,
        forced_biome=BiomeType.WATER,
        legendary_id=149,
    ),
    Zone(
        name="Magellan's Cross",
        lat=10.2936,
        lng=123.9018,
        radius=400,
        forced_biome=BiomeType.URBAN,
        legendary_id=146,
    ),
    Zone(
        name="Tops Lookout",
        lat=10.3705,
        lng=123.8708,
        radius=800,
        forced_biome=BiomeType.FOREST,
        legendary_id=144,
    ),
    Zone(
        name="SM Seaside",
        lat=10.2820,
        lng=123.8814,
        radius=600,
        forced_biome=BiomeType.URBAN,
        legendary_id=145,
    ),
)

DEFAULT_BIOME_REGIONS: Tuple[Zone, ...] = (
    Zone(name="Cebu City Core", lat=10.3157, lng=123.8854, radius=5000, forced_biome=BiomeType.URBAN),
    Zone(name="Mactan Island Center", lat=10.2933, lng=123.9632, radius=4000, forced_biome=BiomeType.URBAN),
    Zone(name="Olango Island", lat=10.2544, lng=124.0543, radius=3000, forced_biome=BiomeType.WATER),
)

DEFAULT_ZONE_TABLES = ZoneTables(
    legendary_zones=DEFAULT_LEGENDARY_ZONES,
    biome_regions=DEFAULT_BIOME_REGIONS,
)


def default_zone_path() -> Path:
    """Per-user location of the optional zone table override."""

    return Path(user_config_dir("poke_explorer", appauthor=False)) / ZONES_FILENAME


def load_zone_tables(path: str | Path | None = None) -> ZoneTables:
    """Load zone tables from JSON.

    With no ``path`` the per-user ``zones.json`` is used when it exists and
    the built-in tables are returned otherwise.  An explicit ``path`` must
    exist.
    """

    explicit = path is not None
    target = Path(path) if path is not None else default_zone_path()
    if not target.exists():
        if explicit:
            raise FileNotFoundError(f"zone table file not found: {target}")
        return DEFAULT_ZONE_TABLES
    try:
        payload = json.loads(target.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"malformed zone table file {target}: {exc}") from exc
    try:
        tables = ZoneTables.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"invalid zone table file {target}: {exc}") from exc
    logger.info(
        "Loaded %d legendary zones and %d biome regions from %s",
        len(tables.legendary_zones),
        len(tables.biome_regions),
        target,
    )
    return tables


__all__ = [
    "BiomeType",
    "DEFAULT_BIOME_REGIONS",
    "DEFAULT_LEGENDARY_ZONES",
    "DEFAULT_ZONE_TABLES",
    "LEGENDARY_TAG",
    "PolygonRegion",
    "Zone",
    "ZoneTables",
    "default_zone_path",
    "load_zone_tables",
]
