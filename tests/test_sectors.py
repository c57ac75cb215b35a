from collections import Counter

from poke_explorer.world.config import GridSettings, SpawnSettings, WorldConfig
from poke_explorer.world.sectors import (
    CellCoord,
    SectorCoord,
    SectorSpawnGenerator,
    generate_sector,
)
from poke_explorer.world.zones import LEGENDARY_TAG, BiomeType, Zone, ZoneTables

HOUR = 481234
PLAIN = WorldConfig(zones=ZoneTables())


def _signature(records):
    return sorted((record.species_id, record.latitude, record.longitude) for record in records)


def test_cell_and_sector_coordinates_floor_degrees() -> None:
    grid = GridSettings()

    assert CellCoord.from_degrees(10.31571, 123.88541, grid) == CellCoord(103157, 1238854)
    assert SectorCoord.from_degrees(10.31571, 123.88541, grid) == SectorCoord(5157, 61942)
    assert SectorCoord.from_degrees(-0.00005, -0.00005, grid) == SectorCoord(-1, -1)
    assert CellCoord.from_degrees(0.0013, 0.0021, grid) == CellCoord(13, 21)


def test_sector_neighborhood_enumerates_a_square() -> None:
    around = list(SectorCoord(0, 0).neighborhood(2))

    assert len(around) == 25
    assert SectorCoord(-2, 2) in around
    assert len(list(SectorCoord(5, 5).neighborhood(1, 3))) == 21


def test_generation_is_deterministic() -> None:
    first = generate_sector(5157, 61942, HOUR)
    second = generate_sector(5157, 61942, HOUR)

    assert first == second
    assert _signature(first) == _signature(second)


def test_spawn_count_stays_within_range_and_uses_it() -> None:
    generator = SectorSpawnGenerator(PLAIN)
    counts = Counter(generator.spawn_count(SectorCoord(x, y), HOUR) for x in range(20) for y in range(20))

    assert set(counts) == set(range(8, 13))


def test_species_and_cells_are_unique_within_a_sector() -> None:
    generator = SectorSpawnGenerator(PLAIN)
    total = 0
    for x in range(-5, 5):
        for y in range(-5, 5):
            records = generator.generate(x, y, HOUR)
            regular = [record for record in records if not record.is_legendary]
            species = [record.species_id for record in regular]
            cells = [record.cell_index for record in regular]
            assert len(species) == len(set(species))
            assert len(cells) == len(set(cells))
            assert len(regular) <= 12
            total += len(regular)
    assert total / 100 >= 5


def test_records_sit_on_cell_centres_inside_their_sector() -> None:
    generator = SectorSpawnGenerator(PLAIN)
    grid = PLAIN.grid
    sector = SectorCoord(-321, 654)
    records = generator.generate(sector.x, sector.y, HOUR)
    biome = generator.sector_biome(sector)

    assert records
    for record in records:
        assert record.sector == sector
        assert record.biome == biome.value
        assert record.expires_at == (HOUR + 1) * 3600
        assert record.identifier.endswith(f":{HOUR}")
        cell = CellCoord.from_degrees(record.latitude, record.longitude, grid)
        assert cell.to_sector(grid.sector_size) == sector
        assert record.cell_index is not None
        assert sector.cell_at(record.cell_index, grid.sector_size) == cell


def test_hour_rotation_changes_the_layout() -> None:
    generator = SectorSpawnGenerator(PLAIN)
    shared = 0
    total = 0
    for x in range(10):
        for y in range(10):
            now = {(r.species_id, r.cell_index) for r in generator.generate(x, y, HOUR)}
            later = {(r.species_id, r.cell_index) for r in generator.generate(x, y, HOUR + 1)}
            shared += len(now & later)
            total += len(now)

    assert total > 0
    assert shared / total < 0.05


def test_crowded_sector_drops_spawns_instead_of_failing() -> None:
    config = WorldConfig(
        zones=ZoneTables(),
        grid=GridSettings(sector_size=2),
        spawns=SpawnSettings(min_spawns=8, max_spawns=8),
    )
    records = SectorSpawnGenerator(config).generate(3, 4, HOUR)

    assert len(records) <= 4
    assert len({record.cell_index for record in records}) == len(records)


def test_zero_spawn_range_yields_only_legendaries() -> None:
    config = WorldConfig(zones=ZoneTables(), spawns=SpawnSettings(min_spawns=0, max_spawns=0))

    assert SectorSpawnGenerator(config).generate(1, 1, HOUR) == []


def _legendary_config() -> tuple[WorldConfig, SectorCoord, Zone]:
    sector = SectorCoord(100, 200)
    lat, lng = sector.center(GridSettings())
    zone = Zone(name="Sky Pillar", lat=lat, lng=lng, radius=250, forced_biome=BiomeType.GRASS, legendary_id=145)
    return WorldConfig(zones=ZoneTables(legendary_zones=(zone,))), sector, zone


def test_legendary_zone_spawns_every_hour_at_its_centre() -> None:
    config, sector, zone = _legendary_config()
    generator = SectorSpawnGenerator(config)

    early = [r for r in generator.generate(sector.x, sector.y, 123) if r.is_legendary]
    late = [r for r in generator.generate(sector.x, sector.y, 124) if r.is_legendary]

    assert len(early) == 1 and len(late) == 1
    assert early[0].species_id == late[0].species_id == 145
    assert (early[0].latitude, early[0].longitude) == (zone.lat, zone.lng)
    assert (late[0].latitude, late[0].longitude) == (zone.lat, zone.lng)
    assert early[0].identifier != late[0].identifier
    assert early[0].biome == LEGENDARY_TAG
    assert early[0].cell_index is None


def test_legendary_zone_only_joins_its_owning_sector() -> None:
    config, sector, _ = _legendary_config()
    generator = SectorSpawnGenerator(config)

    for neighbour in sector.neighborhood(1):
        records = generator.generate(neighbour.x, neighbour.y, HOUR)
        legendaries = [record for record in records if record.biome == LEGENDARY_TAG]
        assert len(legendaries) == (1 if neighbour == sector else 0)


def test_zone_biome_flavours_the_owning_sector() -> None:
    config, sector, _ = _legendary_config()
    records = SectorSpawnGenerator(config).generate(sector.x, sector.y, HOUR)

    assert {record.biome for record in records if not record.is_legendary} <= {BiomeType.GRASS.value}
