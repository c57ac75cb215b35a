"""Sector-based spawn generation keyed only by sector indices and hour."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .biomes import BiomeResolver
from .config import ATTEMPT_STRIDE, DEFAULT_CONFIG, SPECIES_STRIDE, GridSettings, WorldConfig
from .species import SpeciesSelector
from .zones import LEGENDARY_TAG, BiomeType, Zone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CellCoord:
    """Fine grid cell obtained by flooring degrees by the grid size."""

    lat_index: int
    lng_index: int

    @classmethod
    def from_degrees(cls, lat: float, lng: float, grid: GridSettings) -> "CellCoord":
        cells_per_degree = grid.cells_per_degree
        return cls(math.floor(lat * cells_per_degree), math.floor(lng * cells_per_degree))

    def to_sector(self, sector_size: int) -> "SectorCoord":
        if sector_size <= 0:
            raise ValueError("sector_size must be positive")
        return SectorCoord(self.lat_index // sector_size, self.lng_index // sector_size)

    def center(self, grid: GridSettings) -> Tuple[float, float]:
        return (
            (self.lat_index + 0.5) * grid.grid_size,
            (self.lng_index + 0.5) * grid.grid_size,
        )


@dataclass(frozen=True)
class SectorCoord:
    """Coordinate of a sector in the sector grid."""

    x: int
    y: int

    @classmethod
    def from_degrees(cls, lat: float, lng: float, grid: GridSettings) -> "SectorCoord":
        return CellCoord.from_degrees(lat, lng, grid).to_sector(grid.sector_size)

    def origin_cell(self, sector_size: int) -> CellCoord:
        return CellCoord(self.x * sector_size, self.y * sector_size)

    def cell_at(self, index: int, sector_size: int) -> CellCoord:
        """Return the cell for a sub-cell ``index`` in ``[0, sector_size**2)``."""

        row, col = divmod(index, sector_size)
        return CellCoord(self.x * sector_size + row, self.y * sector_size + col)

    def center(self, grid: GridSettings) -> Tuple[float, float]:
        span = grid.sector_span_degrees
        return ((self.x + 0.5) * span, (self.y + 0.5) * span)

    def neighborhood(self, range_x: int, range_y: int | None = None) -> Iterator["SectorCoord"]:
        if range_y is None:
            range_y = range_x
        if range_x < 0 or range_y < 0:
            raise ValueError("range must be non-negative")
        for dx in range(-range_x, range_x + 1):
            for dy in range(-range_y, range_y + 1):
                yield SectorCoord(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class SpawnRecord:
    """One ephemeral creature placement."""

    identifier: str
    latitude: float
    longitude: float
    species_id: int
    expires_at: int
    biome: str
    sector: SectorCoord
    cell_index: int | None = None

    @property
    def is_legendary(self) -> bool:
        return self.biome == LEGENDARY_TAG


class SectorSpawnGenerator:
    """Deterministically populates one sector for one hour bucket.

    The generator owns no mutable state; the resolver, selector and zone
    tables it consults are injected through ``config``.
    """

    def __init__(
        self,
        config: WorldConfig | None = None,
        *,
        resolver: BiomeResolver | None = None,
        selector: SpeciesSelector | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.resolver = resolver or BiomeResolver(self.config)
        self.selector = selector or SpeciesSelector(self.config.species)
        self._hash = self.config.hasher()

    def spawn_count(self, sector: SectorCoord, hour: int) -> int:
        spawns = self.config.spawns
        span = spawns.max_spawns - spawns.min_spawns + 1
        roll = self._hash(sector.x, sector.y, hour + spawns.count_salt)
        return spawns.min_spawns + min(math.floor(roll * span), span - 1)

    def sector_biome(self, sector: SectorCoord) -> BiomeType:
        lat, lng = sector.center(self.config.grid)
        return self.resolver.resolve(lat, lng)

    def species_draw(self, sector: SectorCoord, hour: int, attempt: int) -> float:
        """Raw uniform draw fed to the species selector on ``attempt``."""

        return self._hash(
            sector.x * ATTEMPT_STRIDE + attempt,
            sector.y,
            hour + self.config.spawns.species_salt,
        )

    def pick_species(self, sector: SectorCoord, hour: int, biome: BiomeType, count: int) -> List[int]:
        chosen: List[int] = []
        seen: set[int] = set()
        for attempt in range(self.config.spawns.species_attempts):
            if len(chosen) >= count:
                break
            species_id = self.selector.select(biome, self.species_draw(sector, hour, attempt))
            if species_id in seen:
                continue
            seen.add(species_id)
            chosen.append(species_id)
        return chosen

    def place(self, sector: SectorCoord, hour: int, species_id: int, occupied: set[int]) -> int | None:
        """Return a free sub-cell index for ``species_id`` or ``None``."""

        cells = self.config.grid.cells_per_sector
        for attempt in range(self.config.spawns.position_attempts):
            roll = self._hash(
                sector.x * ATTEMPT_STRIDE + attempt,
                sector.y * SPECIES_STRIDE + species_id,
                hour + self.config.spawns.position_salt,
            )
            index = min(math.floor(roll * cells), cells - 1)
            if index not in occupied:
                return index
        return None

    def owned_zones(self, sector: SectorCoord) -> Iterator[Zone]:
        grid = self.config.grid
        for zone in self.config.zones.spawning_zones:
            if SectorCoord.from_degrees(zone.lat, zone.lng, grid) == sector:
                yield zone

    def expiry(self, hour: int) -> int:
        return (hour + 1) * self.config.spawns.bucket_seconds

    def generate(self, sector_x: int, sector_y: int, hour: int) -> List[SpawnRecord]:
        sector = SectorCoord(sector_x, sector_y)
        grid = self.config.grid
        expires_at = self.expiry(hour)
        biome = self.sector_biome(sector)
        count = self.spawn_count(sector, hour)
        species = self.pick_species(sector, hour, biome, count)
        if len(species) < count:
            logger.debug(
                "Sector %s hour %d: %d of %d unique species found", sector, hour, len(species), count
            )

        records: List[SpawnRecord] = []
        occupied: set[int] = set()
        for species_id in species:
            index = self.place(sector, hour, species_id, occupied)
            if index is None:
                logger.debug("Sector %s hour %d: no free cell for species %d", sector, hour, species_id)
                continue
            occupied.add(index)
            lat, lng = sector.cell_at(index, grid.sector_size).center(grid)
            records.append(
                SpawnRecord(
                    identifier=f"{sector.x}:{sector.y}:{index}:{hour}",
                    latitude=lat,
                    longitude=lng,
                    species_id=species_id,
                    expires_at=expires_at,
                    biome=biome.value,
                    sector=sector,
                    cell_index=index,
                )
            )

        for zone in self.owned_zones(sector):
            assert zone.legendary_id is not None
            records.append(
                SpawnRecord(
                    identifier=f"legendary:{zone.slug}:{hour}",
                    latitude=zone.lat,
                    longitude=zone.lng,
                    species_id=zone.legendary_id,
                    expires_at=expires_at,
                    biome=LEGENDARY_TAG,
                    sector=sector,
                )
            )
        return records


def generate_sector(
    sector_x: int, sector_y: int, hour: int, config: WorldConfig | None = None
) -> List[SpawnRecord]:
    """Generate one sector's spawns with ``config`` (defaults to the built-in world)."""

    return SectorSpawnGenerator(config).generate(sector_x, sector_y, hour)


__all__ = [
    "CellCoord",
    "SectorCoord",
    "SectorSpawnGenerator",
    "SpawnRecord",
    "generate_sector",
]
