import json
import math

import pytest
from pydantic import ValidationError

from poke_explorer.world import zones as zone_module
from poke_explorer.world.biomes import BiomeResolver
from poke_explorer.world.config import WorldConfig
from poke_explorer.world.geo import EARTH_RADIUS_M, haversine_m, planar_distance_m, point_in_polygon
from poke_explorer.world.rng import hash3
from poke_explorer.world.zones import (
    DEFAULT_ZONE_TABLES,
    BiomeType,
    PolygonRegion,
    Zone,
    ZoneTables,
    load_zone_tables,
)


def test_default_tables_mirror_the_curated_world() -> None:
    names = [zone.name for zone in DEFAULT_ZONE_TABLES.legendary_zones]

    assert names == ["Lapu-Lapu Shrine", "Magellan's Cross", "Tops Lookout", "SM Seaside"]
    assert {zone.legendary_id for zone in DEFAULT_ZONE_TABLES.spawning_zones} == {144, 145, 146, 149}
    assert all(region.forced_biome is not None for region in DEFAULT_ZONE_TABLES.biome_regions)


def test_zone_contains_uses_great_circle_distance() -> None:
    zone = Zone(name="Test", lat=0.0, lng=0.0, radius=1000)

    assert zone.contains(0.0089, 0.0)
    assert not zone.contains(0.0091, 0.0)
    assert zone.slug == "test"
    assert Zone(name="Magellan's Cross", lat=0, lng=0, radius=1).slug == "magellan-s-cross"


def test_distance_helpers_agree_at_short_range() -> None:
    lat, lng = 10.3157, 123.8854
    great_circle = haversine_m(lat, lng, lat + 0.001, lng + 0.001)
    flat = planar_distance_m(lat, lng, lat + 0.001, lng + 0.001)

    assert flat == pytest.approx(great_circle, rel=0.01)


def test_point_in_polygon_ray_casting() -> None:
    square = ((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))

    assert point_in_polygon(0.5, 0.5, square)
    assert not point_in_polygon(1.5, 0.5, square)
    assert not point_in_polygon(0.5, -0.1, square)


def test_region_validation() -> None:
    with pytest.raises(ValidationError):
        ZoneTables(biome_regions=(Zone(name="Nowhere", lat=0, lng=0, radius=10),))
    with pytest.raises(ValidationError):
        PolygonRegion(name="Line", vertices=((0.0, 0.0), (1.0, 1.0)), forced_biome=BiomeType.URBAN)
    with pytest.raises(ValidationError):
        Zone(name="Flat", lat=0, lng=0, radius=0)


def test_load_zone_tables_from_json(tmp_path) -> None:
    path = tmp_path / "zones.json"
    path.write_text(
        json.dumps(
            {
                "legendary_zones": [
                    {"name": "Peak", "lat": 1.5, "lng": 2.5, "radius": 300, "legendary_id": 146}
                ],
                "biome_regions": [
                    {"name": "Bay", "lat": 1.0, "lng": 2.0, "radius": 4000, "forced_biome": "WATER"}
                ],
            }
        ),
        encoding="utf-8",
    )

    tables = load_zone_tables(path)

    assert tables.legendary_zones[0].legendary_id == 146
    assert tables.biome_regions[0].forced_biome == BiomeType.WATER
    assert tables.polygon_regions == ()


def test_load_zone_tables_errors(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_zone_tables(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_zone_tables(broken)

    invalid = tmp_path / "invalid.json"
    invalid.write_text(json.dumps({"biome_regions": [{"name": "X", "lat": 0, "lng": 0, "radius": 5}]}))
    with pytest.raises(ValueError):
        load_zone_tables(invalid)


def test_load_zone_tables_defaults_without_user_file(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(zone_module, "default_zone_path", lambda: tmp_path / "zones.json")

    assert load_zone_tables() is DEFAULT_ZONE_TABLES

    (tmp_path / "zones.json").write_text(DEFAULT_ZONE_TABLES.model_dump_json(), encoding="utf-8")
    assert load_zone_tables() == DEFAULT_ZONE_TABLES


def _antipodal_pairs(count: int):
    for step in range(count):
        lat = -89.0 + 178.0 * hash3(step, 1, 0)
        lng = -180.0 + 360.0 * hash3(step, 2, 0)
        yield (lat, lng), (-lat, lng + 180.0 if lng < 0 else lng - 180.0)


def test_haversine_handles_antipodal_points() -> None:
    half_circumference = math.pi * EARTH_RADIUS_M
    for (lat, lng), (anti_lat, anti_lng) in _antipodal_pairs(2000):
        assert haversine_m(lat, lng, anti_lat, anti_lng) == pytest.approx(half_circumference, rel=1e-6)


def test_zone_lookup_at_the_far_side_of_the_globe() -> None:
    for (lat, lng), (anti_lat, anti_lng) in _antipodal_pairs(200):
        region = Zone(name="Far", lat=lat, lng=lng, radius=1000, forced_biome=BiomeType.WATER)
        resolver = BiomeResolver(WorldConfig(zones=ZoneTables(biome_regions=(region,))))

        assert not region.contains(anti_lat, anti_lng)
        assert resolver.zone_override(anti_lat, anti_lng) is None
        assert isinstance(resolver.resolve(anti_lat, anti_lng), BiomeType)
