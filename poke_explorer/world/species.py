"""Species selection blending a full-catalog wildcard band with biome lists."""

from __future__ import annotations

import math

from .config import DEFAULT_CONFIG, SpeciesSettings
from .zones import BiomeType


class SpeciesSelector:
    """Map a biome and a uniform draw to a species id.

    Draws below ``wildcard_share`` are rescaled onto the whole catalog
    ``1..catalog_size``.  The remaining draws are rescaled to ``[0, 1)`` and
    index the curated list for the biome.
    """

    def __init__(self, settings: SpeciesSettings | None = None) -> None:
        self.settings = settings or DEFAULT_CONFIG.species

    def is_wildcard(self, draw: float) -> bool:
        return draw < self.settings.wildcard_share

    def curated(self, biome: BiomeType) -> tuple[int, ...]:
        species = self.settings.biome_species.get(biome, ())
        return species or (self.settings.default_species,)

    def select(self, biome: BiomeType, draw: float) -> int:
        settings = self.settings
        if self.is_wildcard(draw):
            scaled = draw / settings.wildcard_share
            return min(math.floor(scaled * settings.catalog_size), settings.catalog_size - 1) + 1
        listed = self.curated(biome)
        scaled = (draw - settings.wildcard_share) / (1.0 - settings.wildcard_share)
        index = min(math.floor(scaled * len(listed)), len(listed) - 1)
        return listed[index]

    def is_rare(self, species_id: int) -> bool:
        return species_id in self.settings.rare_ids

    def is_legendary(self, species_id: int) -> bool:
        return species_id in self.settings.legendary_ids


_DEFAULT_SELECTOR = SpeciesSelector()


def select_species(biome: BiomeType, draw: float) -> int:
    """Select a species with the built-in balance data."""

    return _DEFAULT_SELECTOR.select(biome, draw)


def is_rare_species(species_id: int) -> bool:
    return _DEFAULT_SELECTOR.is_rare(species_id)


def is_legendary_species(species_id: int) -> bool:
    return _DEFAULT_SELECTOR.is_legendary(species_id)


__all__ = ["SpeciesSelector", "is_legendary_species", "is_rare_species", "select_species"]
