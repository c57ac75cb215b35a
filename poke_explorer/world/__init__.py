"""Deterministic world spawning: hashing, biomes, species and sectors."""

from .biomes import BiomeResolver, resolve_biome
from .config import (
    BiomeNoiseSettings,
    GridSettings,
    QuerySettings,
    SpawnSettings,
    SpeciesSettings,
    WorldConfig,
)
from .query import SpawnQuery, SpawnTracker, nearest_spawns, query_visible_spawns
from .rng import WorldHash, cell_hash, current_hour, hash3
from .sectors import CellCoord, SectorCoord, SectorSpawnGenerator, SpawnRecord, generate_sector
from .species import SpeciesSelector, is_legendary_species, is_rare_species, select_species
from .zones import (
    LEGENDARY_TAG,
    BiomeType,
    PolygonRegion,
    Zone,
    ZoneTables,
    load_zone_tables,
)

__all__ = [
    "BiomeNoiseSettings",
    "BiomeResolver",
    "BiomeType",
    "CellCoord",
    "cell_hash",
    "current_hour",
    "generate_sector",
    "GridSettings",
    "hash3",
    "is_legendary_species",
    "is_rare_species",
    "LEGENDARY_TAG",
    "load_zone_tables",
    "nearest_spawns",
    "PolygonRegion",
    "query_visible_spawns",
    "QuerySettings",
    "resolve_biome",
    "SectorCoord",
    "SectorSpawnGenerator",
    "select_species",
    "SpawnQuery",
    "SpawnRecord",
    "SpawnSettings",
    "SpawnTracker",
    "SpeciesSelector",
    "SpeciesSettings",
    "WorldConfig",
    "WorldHash",
    "Zone",
    "ZoneTables",
]
