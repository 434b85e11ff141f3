"""Area measurement for quiz regions.

Areas are geodesic, computed on the WGS84 ellipsoid and reported in square
kilometres. The pipeline uses them both for diagnostics and to decide
whether a final intersection still has any usable area left.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

import numpy as np
from pyproj import Geod
from shapely.geometry import Polygon
from shapely.geometry.polygon import orient
from shapely.geometry.base import BaseGeometry

from .core.geometry_utils import extract_polygons, ring_to_polygon
from .core.types import Geometry, Multi, Ring, Single

SQUARE_METRES_PER_KM2 = 1_000_000.0

_GEOD = Geod(ellps="WGS84")


def _polygon_area_m2(polygon: Polygon) -> float:
    if polygon.is_empty or polygon.area == 0:
        return 0.0
    # Counter-clockwise exterior gives a positive signed area
    signed_area, _ = _GEOD.geometry_area_perimeter(orient(polygon, sign=1.0))
    return max(float(signed_area), 0.0)


def geodesic_area_km2(geometry: BaseGeometry) -> float:
    """Geodesic area of the polygonal parts of a shapely geometry, in km²."""
    total = sum(_polygon_area_m2(polygon) for polygon in extract_polygons(geometry))
    return total / SQUARE_METRES_PER_KM2


def ring_area(ring: Ring) -> float:
    """Area in km² enclosed by a closed ring; 0 for a degenerate ring."""
    if len(ring) < 4:
        return 0.0
    return _polygon_area_m2(ring_to_polygon(ring)) / SQUARE_METRES_PER_KM2


def _part_area(ring: Ring, holes: Tuple[Ring, ...]) -> float:
    if not holes:
        return ring_area(ring)
    return _polygon_area_m2(ring_to_polygon(ring, holes)) / SQUARE_METRES_PER_KM2


def area(geometry: Geometry) -> float:
    """Area of a ``Single`` or ``Multi`` geometry in km², holes excluded.

    Examples:
        >>> square = Single(((0, 0), (10, 0), (10, 10), (0, 10), (0, 0)))
        >>> 1.0e6 < area(square) < 1.3e6
        True
        >>> area(Multi())
        0.0
    """
    if isinstance(geometry, Single):
        return _part_area(geometry.ring, geometry.holes)
    elif isinstance(geometry, Multi):
        return sum(
            (_part_area(part, geometry.part_holes(index)) for index, part in enumerate(geometry.parts)),
            0.0,
        )
    raise TypeError(f"Expected Single or Multi geometry, got {type(geometry).__name__}")


def total_area(parts: Iterable[Single]) -> float:
    """Sum of the areas of ``parts`` in km²."""
    return sum((area(part) for part in parts), 0.0)


def ring_bounds(ring: Ring) -> Tuple[float, float, float, float]:
    """Bounding box ``(min_lon, min_lat, max_lon, max_lat)`` of a ring."""
    coords = np.asarray(ring, dtype=float).reshape(-1, 2)
    min_lon, min_lat = coords.min(axis=0)
    max_lon, max_lat = coords.max(axis=0)
    return float(min_lon), float(min_lat), float(max_lon), float(max_lat)


def reduction_percent(union_area: float, intersection_area: float) -> Optional[float]:
    """How much of the union the intersection has narrowed away, in percent.

    Returns None when either area is zero, since no narrowing happened
    (nothing selected) or no region is left to narrow to.
    """
    if union_area <= 0 or intersection_area <= 0:
        return None
    return (union_area - intersection_area) / union_area * 100.0


def measure_parts(parts: Iterable[Single]) -> Dict[str, object]:
    """Return the summary metrics logged for a tuple of result parts."""
    parts = tuple(parts)
    areas = [area(part) for part in parts]
    return {
        "part_count": len(parts),
        "area_km2": sum(areas, 0.0),
        "part_areas_km2": areas,
        "bounds": [ring_bounds(part.ring) for part in parts],
    }


__all__ = [
    "SQUARE_METRES_PER_KM2",
    "geodesic_area_km2",
    "ring_area",
    "area",
    "total_area",
    "ring_bounds",
    "reduction_percent",
    "measure_parts",
]
