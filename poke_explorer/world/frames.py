"""Columnar views over spawn lists for inspection and tooling."""

from __future__ import annotations

from typing import Dict, Iterable

import polars as pl

from .sectors import SpawnRecord
from .species import SpeciesSelector

_SPAWN_FRAME_SCHEMA: Dict[str, pl.datatypes.DataType] = {
    "identifier": pl.String,
    "species_id": pl.Int64,
    "latitude": pl.Float64,
    "longitude": pl.Float64,
    "biome": pl.String,
    "sector_x": pl.Int64,
    "sector_y": pl.Int64,
    "cell_index": pl.Int64,
    "expires_at": pl.Int64,
    "is_legendary": pl.Boolean,
    "is_rare": pl.Boolean,
}


def spawn_frame(
    records: Iterable[SpawnRecord], *, selector: SpeciesSelector | None = None
) -> pl.DataFrame:
    """Convert spawn records into a polars frame with a fixed schema."""

    selector = selector or SpeciesSelector()
    rows = [
        {
            "identifier": record.identifier,
            "species_id": int(record.species_id),
            "latitude": float(record.latitude),
            "longitude": float(record.longitude),
            "biome": record.biome,
            "sector_x": record.sector.x,
            "sector_y": record.sector.y,
            "cell_index": record.cell_index,
            "expires_at": int(record.expires_at),
            "is_legendary": record.is_legendary or selector.is_legendary(record.species_id),
            "is_rare": selector.is_rare(record.species_id),
        }
        for record in records
    ]
    return pl.DataFrame(rows, schema=_SPAWN_FRAME_SCHEMA)


def biome_summary(frame: pl.DataFrame) -> pl.DataFrame:
    """Spawn and distinct-species counts per biome, largest first."""

    return (
        frame.group_by("biome")
        .agg(
            pl.len().alias("spawns"),
            pl.col("species_id").n_unique().alias("species"),
        )
        .sort(["spawns", "biome"], descending=[True, False])
    )


__all__ = ["biome_summary", "spawn_frame"]
