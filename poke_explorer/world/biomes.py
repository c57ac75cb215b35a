"""Biome resolution: curated zone overrides first, coordinate noise second."""

from __future__ import annotations

import math

from .config import DEFAULT_CONFIG, WorldConfig
from .zones import BiomeType


class BiomeResolver:
    """Map a latitude/longitude to a :class:`BiomeType`.

    Priority order is legendary zones carrying a forced biome, then circular
    biome regions, then polygon regions, each in declaration order.  Points
    outside every zone fall back to two layers of hash noise: a coarse macro
    layer choosing between nature and developed land and a finer micro layer
    choosing the concrete label inside that branch.
    """

    def __init__(self, config: WorldConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self._hash = self.config.hasher()

    def zone_override(self, lat: float, lng: float) -> BiomeType | None:
        """Return the biome forced by a curated zone, if any."""

        zones = self.config.zones
        for zone in zones.legendary_zones:
            if zone.forced_biome is not None and zone.contains(lat, lng):
                return zone.forced_biome
        for region in zones.biome_regions:
            if region.contains(lat, lng):
                return region.forced_biome
        for polygon in zones.polygon_regions:
            if polygon.contains(lat, lng):
                return polygon.forced_biome
        return None

    def noise_layers(self, lat: float, lng: float) -> tuple[float, float]:
        """Return the ``(macro, micro)`` noise samples for a point."""

        noise = self.config.biomes
        cells_per_degree = self.config.grid.cells_per_degree
        macro = self._hash(
            math.floor(lat * noise.macro_scale * cells_per_degree),
            math.floor(lng * noise.macro_scale * cells_per_degree),
            noise.macro_tag,
        )
        micro = self._hash(
            math.floor(lat * noise.micro_scale * cells_per_degree),
            math.floor(lng * noise.micro_scale * cells_per_degree),
            noise.micro_tag,
        )
        return macro, micro

    def noise_biome(self, lat: float, lng: float) -> BiomeType:
        noise = self.config.biomes
        macro, micro = self.noise_layers(lat, lng)
        if macro < noise.nature_share:
            if micro < noise.nature_water:
                return BiomeType.WATER
            if micro < noise.nature_forest:
                return BiomeType.FOREST
            return BiomeType.RURAL
        if micro < noise.developed_water:
            return BiomeType.WATER
        if micro < noise.developed_grass:
            return BiomeType.GRASS
        return BiomeType.URBAN

    def resolve(self, lat: float, lng: float) -> BiomeType:
        override = self.zone_override(lat, lng)
        if override is not None:
            return override
        return self.noise_biome(lat, lng)


def resolve_biome(lat: float, lng: float, config: WorldConfig | None = None) -> BiomeType:
    """Resolve the biome at a point using ``config`` (defaults to the built-in world)."""

    return BiomeResolver(config).resolve(lat, lng)


__all__ = ["BiomeResolver", "BiomeType", "resolve_biome"]
