"""Validated configuration models for the spawning engine.

Every tuning constant used by the hash consumers lives here so the
algorithms can be exercised against alternative settings in tests.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .geo import METRES_PER_DEGREE
from .rng import WorldHash
from .zones import DEFAULT_ZONE_TABLES, BiomeType, ZoneTables

# Attempt counters are packed into hash seeds with this stride, so attempt
# budgets must stay below it.
ATTEMPT_STRIDE = 64

# Species ids are packed into position seeds with this stride.
SPECIES_STRIDE = 2048

_DEFAULT_BIOME_SPECIES: Dict[BiomeType, Tuple[int, ...]] = {
    BiomeType.WATER: (7, 54, 60, 72, 79, 86, 90, 98, 116, 118, 120, 129, 131),
    BiomeType.FOREST: (1, 10, 11, 13, 14, 43, 46, 48, 69, 123, 127),
    BiomeType.GRASS: (16, 19, 21, 29, 32, 25, 39, 43, 69),
    BiomeType.URBAN: (19, 52, 58, 74, 81, 88, 100, 109, 133, 137, 143),
    BiomeType.RURAL: (21, 23, 37, 58, 77, 128, 114),
}

_DEFAULT_RARE_IDS: FrozenSet[int] = frozenset({1, 4, 7, 25, 133, 143, 147, 148, 149, 150, 151})
_DEFAULT_LEGENDARY_IDS: FrozenSet[int] = frozenset({144, 145, 146, 150, 151})


class GridSettings(BaseModel):
    """Cell and sector geometry."""

    model_config = ConfigDict(extra="forbid")

    grid_size: float = Field(default=0.0001, gt=0.0)
    sector_size: int = Field(default=20, ge=1)
    sector_range: int = Field(default=2, ge=0)
    max_sector_range: int = Field(default=8, ge=0)
    metres_per_degree: float = Field(default=METRES_PER_DEGREE, gt=0.0)

    @model_validator(mode="after")
    def _check_ranges(self) -> "GridSettings":
        if self.max_sector_range < self.sector_range:
            raise ValueError("max_sector_range must be at least sector_range")
        return self

    @property
    def cells_per_degree(self) -> float:
        return 1.0 / self.grid_size

    @property
    def cells_per_sector(self) -> int:
        return self.sector_size * self.sector_size

    @property
    def sector_span_degrees(self) -> float:
        return self.grid_size * self.sector_size

    @property
    def sector_edge_m(self) -> float:
        """North-south edge length of a sector in metres."""

        return self.sector_span_degrees * self.metres_per_degree


class SpawnSettings(BaseModel):
    """Per-sector roll parameters."""

    model_config = ConfigDict(extra="forbid")

    min_spawns: int = Field(default=8, ge=0)
    max_spawns: int = Field(default=12, ge=0)
    species_attempts: int = Field(default=20, ge=1, lt=ATTEMPT_STRIDE)
    position_attempts: int = Field(default=15, ge=1, lt=ATTEMPT_STRIDE)
    count_salt: int = Field(default=1 << 21)
    species_salt: int = Field(default=2 << 21)
    position_salt: int = Field(default=3 << 21)
    bucket_seconds: int = Field(default=3600, ge=1)

    @model_validator(mode="after")
    def _check_range(self) -> "SpawnSettings":
        if self.max_spawns < self.min_spawns:
            raise ValueError("max_spawns must be at least min_spawns")
        return self


class BiomeNoiseSettings(BaseModel):
    """Two-layer noise thresholds for the procedural biome fallback."""

    model_config = ConfigDict(extra="forbid")

    macro_scale: float = Field(default=0.01, gt=0.0)
    micro_scale: float = Field(default=0.1, gt=0.0)
    macro_tag: int = 8888
    micro_tag: int = 9999
    nature_share: float = Field(default=0.4, ge=0.0, le=1.0)
    nature_water: float = Field(default=0.2, ge=0.0, le=1.0)
    nature_forest: float = Field(default=0.6, ge=0.0, le=1.0)
    developed_water: float = Field(default=0.15, ge=0.0, le=1.0)
    developed_grass: float = Field(default=0.35, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_ordering(self) -> "BiomeNoiseSettings":
        if self.nature_forest < self.nature_water:
            raise ValueError("nature_forest threshold must not be below nature_water")
        if self.developed_grass < self.developed_water:
            raise ValueError("developed_grass threshold must not be below developed_water")
        return self


class SpeciesSettings(BaseModel):
    """Game-balance data for species selection."""

    model_config = ConfigDict(extra="forbid")

    catalog_size: int = Field(default=1025, ge=1, lt=SPECIES_STRIDE)
    wildcard_share: float = Field(default=0.3, ge=0.0, lt=1.0)
    default_species: int = Field(default=19, ge=1, lt=SPECIES_STRIDE)
    biome_species: Dict[BiomeType, Tuple[int, ...]] = Field(
        default_factory=lambda: dict(_DEFAULT_BIOME_SPECIES)
    )
    rare_ids: FrozenSet[int] = _DEFAULT_RARE_IDS
    legendary_ids: FrozenSet[int] = _DEFAULT_LEGENDARY_IDS

    @model_validator(mode="after")
    def _check_ids(self) -> "SpeciesSettings":
        for biome, species in self.biome_species.items():
            for species_id in species:
                if not 1 <= species_id < SPECIES_STRIDE:
                    raise ValueError(f"species id {species_id} in {biome.value} list is out of range")
        return self


class QuerySettings(BaseModel):
    """Caller-facing defaults for visibility queries."""

    model_config = ConfigDict(extra="forbid")

    visible_radius_m: float = Field(default=100.0, gt=0.0)
    calc_radius_m: float = Field(default=250.0, gt=0.0)
    movement_threshold_m: float = Field(default=5.0, ge=0.0)
    radar_size: int = Field(default=3, ge=1)


class WorldConfig(BaseModel):
    """Top-level configuration payload describing a spawning world."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="Poke Explorer World")
    world_salt: int = Field(default=0, ge=0)
    grid: GridSettings = Field(default_factory=GridSettings)
    spawns: SpawnSettings = Field(default_factory=SpawnSettings)
    biomes: BiomeNoiseSettings = Field(default_factory=BiomeNoiseSettings)
    species: SpeciesSettings = Field(default_factory=SpeciesSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    zones: ZoneTables = Field(default=DEFAULT_ZONE_TABLES)

    def hasher(self) -> WorldHash:
        """Return the hash function bound to this world's salt."""

        return WorldHash(salt=self.world_salt)


DEFAULT_CONFIG = WorldConfig()


__all__ = [
    "ATTEMPT_STRIDE",
    "BiomeNoiseSettings",
    "DEFAULT_CONFIG",
    "GridSettings",
    "QuerySettings",
    "SPECIES_STRIDE",
    "SpawnSettings",
    "SpeciesSettings",
    "WorldConfig",
]
