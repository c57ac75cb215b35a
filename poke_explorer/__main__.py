"""Command line entry point printing the spawns visible from a position."""

from __future__ import annotations

import argparse
import logging
import time
from typing import Sequence

from rich.console import Console, Group, RenderableType
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .world.biomes import BiomeResolver
from .world.config import WorldConfig
from .world.query import SpawnQuery, nearest_spawns
from .world.rng import current_hour
from .world.sectors import SpawnRecord
from .world.species import SpeciesSelector
from .world.zones import load_zone_tables


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="poke-explorer",
        description="Show the creatures spawned around a latitude/longitude.",
    )
    parser.add_argument("lat", type=float)
    parser.add_argument("lng", type=float)
    parser.add_argument("--radius", type=float, default=None, help="visible radius in metres")
    parser.add_argument("--calc-radius", type=float, default=None, help="generation radius in metres")
    parser.add_argument("--legendary-radius", type=float, default=None)
    parser.add_argument("--hour", type=int, default=None, help="time bucket (defaults to now)")
    parser.add_argument("--zones", default=None, help="JSON zone table file")
    parser.add_argument("--nearest", type=int, default=None, help="radar size")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def _spawn_table(
    records: Sequence[tuple[SpawnRecord, float]], selector: SpeciesSelector, *, title: str
) -> Table:
    table = Table(title=title, expand=True)
    table.add_column("Species", justify="right")
    table.add_column("Distance (m)", justify="right")
    table.add_column("Biome")
    table.add_column("Position")
    table.add_column("Id", style="dim")
    for record, distance in records:
        species = str(record.species_id)
        if record.is_legendary or selector.is_legendary(record.species_id):
            species = f"[bold magenta]{species}[/bold magenta]"
        elif selector.is_rare(record.species_id):
            species = f"[bold yellow]{species}[/bold yellow]"
        table.add_row(
            species,
            f"{distance:.0f}",
            record.biome,
            f"{record.latitude:.5f}, {record.longitude:.5f}",
            record.identifier,
        )
    return table


def render_report(
    lat: float,
    lng: float,
    spawns: Sequence[SpawnRecord],
    *,
    config: WorldConfig,
    hour: int,
    nearest: int,
) -> RenderableType:
    """Compose the biome panel, the radar and the full spawn table."""

    selector = SpeciesSelector(config.species)
    biome = BiomeResolver(config).resolve(lat, lng)
    ranked = nearest_spawns(
        spawns, lat, lng, limit=len(spawns), metres_per_degree=config.grid.metres_per_degree
    )
    summary = Table.grid(padding=(0, 1))
    summary.add_row("[bold]Position[/bold]", f"{lat:.6f}, {lng:.6f}")
    summary.add_row("[bold]Biome[/bold]", biome.value)
    summary.add_row("[bold]Hour[/bold]", str(hour))
    summary.add_row("[bold]Spawns[/bold]", str(len(spawns)))
    return Group(
        Panel(summary, title=config.name, border_style="blue"),
        _spawn_table(ranked[:nearest], selector, title="Radar"),
        _spawn_table(ranked, selector, title="Visible spawns"),
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Print the spawns around the given coordinates."""

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.nearest is not None and args.nearest < 0:
        parser.error("--nearest must be non-negative")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )
    config = WorldConfig(zones=load_zone_tables(args.zones))
    settings = config.query
    hour = args.hour if args.hour is not None else current_hour(
        time.time(), bucket_seconds=config.spawns.bucket_seconds
    )
    spawns = SpawnQuery(config).visible(
        args.lat,
        args.lng,
        args.calc_radius if args.calc_radius is not None else settings.calc_radius_m,
        args.radius if args.radius is not None else settings.visible_radius_m,
        hour=hour,
        legendary_radius_m=args.legendary_radius,
    )
    Console().print(
        render_report(
            args.lat,
            args.lng,
            spawns,
            config=config,
            hour=hour,
            nearest=args.nearest if args.nearest is not None else settings.radar_size,
        )
    )


if __name__ == "__main__":  # pragma: no cover - module entry point
    main()
