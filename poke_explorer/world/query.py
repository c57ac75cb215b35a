"""Grid queries: enumerate nearby sectors and filter spawns by distance."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .config import DEFAULT_CONFIG, WorldConfig
from .geo import planar_distance_m
from .rng import current_hour
from .sectors import SectorCoord, SectorSpawnGenerator, SpawnRecord

logger = logging.getLogger(__name__)


class SpawnQuery:
    """Aggregates sector results around a player and filters by visibility."""

    def __init__(
        self,
        config: WorldConfig | None = None,
        *,
        generator: SectorSpawnGenerator | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.generator = generator or SectorSpawnGenerator(self.config)

    def sector_ranges(self, center_lat: float, calc_radius_m: float) -> Tuple[int, int]:
        """Return the ``(lat, lng)`` sector ranges covering ``calc_radius_m``.

        The configured ``sector_range`` is a floor; east-west sectors shrink
        with latitude, so the longitude range may need to grow.  Both ranges
        are capped at ``max_sector_range``; near the poles and for very large
        radii coverage is best-effort.
        """

        grid = self.config.grid
        edge_m = grid.sector_edge_m
        edge_lng_m = edge_m * max(math.cos(math.radians(center_lat)), 1e-6)
        range_lat = max(grid.sector_range, math.ceil(calc_radius_m / edge_m))
        range_lng = max(grid.sector_range, math.ceil(calc_radius_m / edge_lng_m))
        range_lat = min(range_lat, grid.max_sector_range)
        range_lng = min(range_lng, grid.max_sector_range)
        if (range_lat, range_lng) != (grid.sector_range, grid.sector_range):
            logger.debug(
                "Widened sector neighbourhood to %d x %d for %.0f m", range_lat, range_lng, calc_radius_m
            )
        return range_lat, range_lng

    def candidates(
        self, center_lat: float, center_lng: float, calc_radius_m: float, hour: int
    ) -> List[SpawnRecord]:
        """All spawns generated by the sectors around the player."""

        home = SectorCoord.from_degrees(center_lat, center_lng, self.config.grid)
        range_lat, range_lng = self.sector_ranges(center_lat, calc_radius_m)
        records: List[SpawnRecord] = []
        for sector in home.neighborhood(range_lat, range_lng):
            records.extend(self.generator.generate(sector.x, sector.y, hour))
        return records

    def distance_m(self, lat: float, lng: float, record: SpawnRecord) -> float:
        return planar_distance_m(
            lat,
            lng,
            record.latitude,
            record.longitude,
            metres_per_degree=self.config.grid.metres_per_degree,
        )

    def visible(
        self,
        center_lat: float,
        center_lng: float,
        calc_radius_m: float,
        visible_radius_m: float,
        *,
        hour: int | None = None,
        legendary_radius_m: float | None = None,
    ) -> List[SpawnRecord]:
        if calc_radius_m <= 0:
            raise ValueError("calc_radius_m must be positive")
        if visible_radius_m <= 0:
            raise ValueError("visible_radius_m must be positive")
        if legendary_radius_m is None:
            legendary_radius_m = visible_radius_m
        if hour is None:
            hour = current_hour(time.time(), bucket_seconds=self.config.spawns.bucket_seconds)

        reach_m = max(calc_radius_m, visible_radius_m, legendary_radius_m)
        visible: List[SpawnRecord] = []
        for record in self.candidates(center_lat, center_lng, reach_m, hour):
            limit = legendary_radius_m if record.is_legendary else visible_radius_m
            if self.distance_m(center_lat, center_lng, record) <= limit:
                visible.append(record)
        return visible


def query_visible_spawns(
    center_lat: float,
    center_lng: float,
    calc_radius_m: float,
    visible_radius_m: float,
    *,
    hour: int | None = None,
    legendary_radius_m: float | None = None,
    config: WorldConfig | None = None,
) -> List[SpawnRecord]:
    """Return the spawns within ``visible_radius_m`` of the player."""

    return SpawnQuery(config).visible(
        center_lat,
        center_lng,
        calc_radius_m,
        visible_radius_m,
        hour=hour,
        legendary_radius_m=legendary_radius_m,
    )


def nearest_spawns(
    records: Iterable[SpawnRecord],
    lat: float,
    lng: float,
    *,
    limit: int = 3,
    metres_per_degree: float | None = None,
) -> List[Tuple[SpawnRecord, float]]:
    """Radar view: the ``limit`` closest spawns with their distances."""

    if limit < 0:
        raise ValueError("limit must be non-negative")
    scale = metres_per_degree or DEFAULT_CONFIG.grid.metres_per_degree
    ranked = [
        (record, planar_distance_m(lat, lng, record.latitude, record.longitude, metres_per_degree=scale))
        for record in records
    ]
    ranked.sort(key=lambda item: (item[1], item[0].identifier))
    return ranked[:limit]


@dataclass
class SpawnTracker:
    """Caller-side cache that re-queries only after meaningful movement.

    The tracker remembers the position and hour of the last query and reuses
    its result until the player moves further than ``movement_threshold_m``
    or the hour bucket changes.
    """

    query: SpawnQuery = field(default_factory=SpawnQuery)
    calc_radius_m: float | None = None
    visible_radius_m: float | None = None
    legendary_radius_m: float | None = None
    movement_threshold_m: float | None = None
    last_position: Tuple[float, float] | None = field(default=None, init=False)
    last_hour: int | None = field(default=None, init=False)
    spawns: List[SpawnRecord] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        settings = self.query.config.query
        if self.calc_radius_m is None:
            self.calc_radius_m = settings.calc_radius_m
        if self.visible_radius_m is None:
            self.visible_radius_m = settings.visible_radius_m
        if self.movement_threshold_m is None:
            self.movement_threshold_m = settings.movement_threshold_m
        if self.movement_threshold_m < 0:
            raise ValueError("movement_threshold_m cannot be negative")

    def needs_refresh(self, lat: float, lng: float, hour: int) -> bool:
        if self.last_position is None or self.last_hour != hour:
            return True
        moved = planar_distance_m(
            self.last_position[0],
            self.last_position[1],
            lat,
            lng,
            metres_per_degree=self.query.config.grid.metres_per_degree,
        )
        assert self.movement_threshold_m is not None
        return moved > self.movement_threshold_m

    def update(self, lat: float, lng: float, hour: int | None = None) -> List[SpawnRecord]:
        if hour is None:
            hour = current_hour(time.time(), bucket_seconds=self.query.config.spawns.bucket_seconds)
        if not self.needs_refresh(lat, lng, hour):
            logger.debug("Reusing %d cached spawns at (%.6f, %.6f)", len(self.spawns), lat, lng)
            return self.spawns
        assert self.calc_radius_m is not None and self.visible_radius_m is not None
        self.spawns = self.query.visible(
            lat,
            lng,
            self.calc_radius_m,
            self.visible_radius_m,
            hour=hour,
            legendary_radius_m=self.legendary_radius_m,
        )
        self.last_position = (lat, lng)
        self.last_hour = hour
        return self.spawns

    def radar(self, lat: float, lng: float, limit: int | None = None) -> List[Tuple[SpawnRecord, float]]:
        """Nearest cached spawns relative to ``(lat, lng)``."""

        return nearest_spawns(
            self.spawns,
            lat,
            lng,
            limit=limit or self.query.config.query.radar_size,
            metres_per_degree=self.query.config.grid.metres_per_degree,
        )


__all__ = ["SpawnQuery", "SpawnTracker", "nearest_spawns", "query_visible_spawns"]
