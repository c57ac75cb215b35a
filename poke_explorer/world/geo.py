"""Small geodesic helpers shared by zone tests and the visibility filter."""

from __future__ import annotations

import math
from typing import Sequence, Tuple

EARTH_RADIUS_M = 6371e3
METRES_PER_DEGREE = 111_320.0

__all__ = [
    "EARTH_RADIUS_M",
    "METRES_PER_DEGREE",
    "haversine_m",
    "planar_distance_m",
    "point_in_polygon",
]


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in metres between two points."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Rounding can push ``a`` just outside [0, 1] near antipodal points.
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def planar_distance_m(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    *,
    metres_per_degree: float = METRES_PER_DEGREE,
) -> float:
    """Flat-earth distance in metres, valid over a few kilometres."""

    dy = (lat2 - lat1) * metres_per_degree
    dx = (lng2 - lng1) * metres_per_degree * math.cos(math.radians(lat1))
    return math.hypot(dx, dy)


def point_in_polygon(lat: float, lng: float, vertices: Sequence[Tuple[float, float]]) -> bool:
    """Ray-casting containment test over ``(lat, lng)`` vertices."""

    inside = False
    count = len(vertices)
    j = count - 1
    for i in range(count):
        lat_i, lng_i = vertices[i]
        lat_j, lng_j = vertices[j]
        if (lng_i > lng) != (lng_j > lng):
            crossing = (lat_j - lat_i) * (lng - lng_i) / (lng_j - lng_i) + lat_i
            if lat < crossing:
                inside = not inside
        j = i
    return inside
