"""GeoJSON Polygon interop.

Regions arrive as GeoJSON ``Polygon`` geometries and results leave as lists
of one-ring ``Polygon`` geometries, the shape mapping collaborators render
directly.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable, List

from .combine import CombinationResult
from .core.errors import InvalidGeometryError
from .core.types import Region, Ring, Single
from .metrics import ring_bounds
from .normalize import validate_region

POLYGON_TYPE = "Polygon"


def region_from_geojson(geometry: Mapping) -> Region:
    """Parse a GeoJSON Polygon mapping into a :class:`Region`.

    Raises:
        InvalidGeometryError: If ``geometry`` is not a Polygon mapping with
            coordinates, or its coordinates are structurally malformed
    """
    if not isinstance(geometry, Mapping):
        raise InvalidGeometryError(f"expected a GeoJSON mapping, got {type(geometry).__name__}")

    geom_type = geometry.get("type")
    if geom_type != POLYGON_TYPE:
        raise InvalidGeometryError(f"unsupported geometry type {geom_type!r}, expected 'Polygon'")

    coordinates = geometry.get("coordinates")
    if coordinates is None:
        raise InvalidGeometryError("Polygon has no coordinates")

    return Region.from_coordinates(coordinates)


def _ring_to_coordinates(ring: Ring) -> List[List[float]]:
    return [[lon, lat] for lon, lat in ring]


def region_to_geojson(region: Region) -> Dict[str, Any]:
    """Serialize a region back into a GeoJSON Polygon with all its rings."""
    return {
        "type": POLYGON_TYPE,
        "coordinates": [_ring_to_coordinates(ring) for ring in region.rings],
    }


def single_to_geojson(single: Single) -> Dict[str, Any]:
    """Serialize one result part as a one-ring GeoJSON Polygon."""
    return {
        "type": POLYGON_TYPE,
        "coordinates": [_ring_to_coordinates(single.ring)],
    }


def parts_to_geojson(parts: Iterable[Single]) -> List[Dict[str, Any]]:
    return [single_to_geojson(part) for part in parts]


def result_to_geojson(result: CombinationResult) -> Dict[str, List[Dict[str, Any]]]:
    """Serialize a combination result for the presentation layer.

    Examples:
        >>> result_to_geojson(CombinationResult())
        {'unionGeometry': [], 'intersectionGeometry': []}
    """
    return {
        "unionGeometry": parts_to_geojson(result.union),
        "intersectionGeometry": parts_to_geojson(result.intersection),
    }


def is_valid_polygon(geometry: Any) -> bool:
    """Return True if ``geometry`` is a well-formed GeoJSON Polygon.

    Never raises; anything that is not a mapping, not a Polygon, or has a
    malformed ring is simply not valid.

    Examples:
        >>> is_valid_polygon({"type": "Polygon", "coordinates": [[[0, 0], [10, 0], [10, 10], [0, 0]]]})
        True
        >>> is_valid_polygon({"type": "Point"})
        False
    """
    try:
        validate_region(region_from_geojson(geometry))
    except InvalidGeometryError:
        return False
    return True


def polygon_center(geometry: Mapping) -> List[float]:
    """Centre ``[lon, lat]`` of the bounding box of a Polygon's first ring.

    Raises:
        InvalidGeometryError: If ``geometry`` is not a valid Polygon
    """
    region = region_from_geojson(geometry)
    validate_region(region)
    min_lon, min_lat, max_lon, max_lat = ring_bounds(region.rings[0])
    return [(min_lon + max_lon) / 2.0, (min_lat + max_lat) / 2.0]


__all__ = [
    "region_from_geojson",
    "region_to_geojson",
    "single_to_geojson",
    "parts_to_geojson",
    "result_to_geojson",
    "is_valid_polygon",
    "polygon_center",
]
