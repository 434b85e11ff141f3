"""Conversion between kartquiz geometries and shapely shapes.

The set operations run on shapely geometries; everything outside the
operation boundary works with the immutable ``Single``/``Multi`` variant.
"""

import logging
from typing import List, Sequence, Tuple

from shapely.geometry import Polygon, MultiPolygon, GeometryCollection
from shapely.geometry.base import BaseGeometry

from .types import Geometry, Multi, Ring, Single, from_parts

logger = logging.getLogger(__name__)


def ring_to_polygon(ring: Ring, holes: Sequence[Ring] = ()) -> Polygon:
    """Build a shapely polygon from a closed outer ring and optional holes."""
    return Polygon(ring, holes or None)


def to_shapely(geometry: Geometry) -> BaseGeometry:
    """Convert a ``Single`` or ``Multi`` geometry into a shapely shape.

    Examples:
        >>> to_shapely(Single(((0, 0), (1, 0), (1, 1), (0, 0)))).geom_type
        'Polygon'
        >>> to_shapely(Multi()).is_empty
        True
    """
    if isinstance(geometry, Single):
        return ring_to_polygon(geometry.ring, geometry.holes)
    elif isinstance(geometry, Multi):
        return MultiPolygon([
            ring_to_polygon(part, geometry.part_holes(index))
            for index, part in enumerate(geometry.parts)
        ])
    raise TypeError(f"Expected Single or Multi geometry, got {type(geometry).__name__}")


def extract_polygons(geometry: BaseGeometry) -> List[Polygon]:
    """Collect the polygonal pieces of a shapely result.

    Points and lines produced by boundary-only contact are dropped.
    """
    if geometry is None or geometry.is_empty:
        return []
    if isinstance(geometry, Polygon):
        return [geometry]
    elif isinstance(geometry, MultiPolygon):
        return list(geometry.geoms)
    elif isinstance(geometry, GeometryCollection):
        polygons: List[Polygon] = []
        for part in geometry.geoms:
            polygons.extend(extract_polygons(part))
        return polygons
    return []


def polygon_ring(polygon: Polygon) -> Ring:
    """Return the exterior of ``polygon`` as a 2D :data:`Ring`."""
    return _coords_to_ring(polygon.exterior.coords)


def _coords_to_ring(coords) -> Ring:
    return tuple((float(x), float(y)) for x, y, *_ in coords)


def polygon_holes(polygon: Polygon) -> Tuple[Ring, ...]:
    """Return the interior rings of ``polygon`` as 2D rings."""
    return tuple(_coords_to_ring(interior.coords) for interior in polygon.interiors)


def _surviving_polygons(geometry: BaseGeometry, min_area: float) -> List[Polygon]:
    return [polygon for polygon in extract_polygons(geometry) if polygon.area > min_area]


def polygon_parts(
    geometry: BaseGeometry,
    min_area: float = 0.0
) -> Tuple[Ring, ...]:
    """Return the outer rings of every polygon in ``geometry`` with area > ``min_area``.

    Interior rings are not part of the output format and are discarded with
    a warning.

    Args:
        geometry: Shapely result of a set operation
        min_area: Planar area (square degrees) a part must exceed to be kept

    Returns:
        Tuple of closed rings, one per surviving polygon part
    """
    rings = []
    for polygon in _surviving_polygons(geometry, min_area):
        if polygon.interiors:
            logger.warning(
                "Discarding %d interior ring(s) from polygon part",
                len(polygon.interiors),
                extra={"interior_count": len(polygon.interiors)},
            )
        rings.append(polygon_ring(polygon))
    return tuple(rings)


def to_geometry(
    geometry: BaseGeometry,
    min_area: float = 0.0,
    keep_holes: bool = False
) -> Geometry:
    """Convert a shapely shape back into the ``Single``/``Multi`` variant.

    With ``keep_holes`` the interior rings of each part are carried along so
    that the geometry can take part in further set operations unchanged.
    """
    if not keep_holes:
        return from_parts(polygon_parts(geometry, min_area=min_area))
    polygons = _surviving_polygons(geometry, min_area)
    return from_parts(
        [polygon_ring(polygon) for polygon in polygons],
        [polygon_holes(polygon) for polygon in polygons],
    )


__all__ = [
    'ring_to_polygon',
    'to_shapely',
    'extract_polygons',
    'polygon_ring',
    'polygon_holes',
    'polygon_parts',
    'to_geometry',
]
