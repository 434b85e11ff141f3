"""Normalization of raw quiz regions into canonical geometries.

A region with several rings stands for the "OR" of disjoint areas (for
example "Northern Scandinavia or Barcelona"). Those rings are unioned into a
single ``Single`` or ``Multi`` geometry before the region takes part in any
combination.
"""

import logging
from typing import Optional

from .core.errors import GeometryOperationError, InvalidGeometryError
from .core.geometry_utils import ring_to_polygon, to_geometry
from .core.types import Geometry, Region, SetOperation, Single, flatten
from .core.validation_utils import validate_ring
from .ops.set_operations import PlanarSetOperation, ShapelySetOperation

logger = logging.getLogger(__name__)


def validate_region(region: Region) -> None:
    """Check every ring of ``region``, raising on the first invalid one.

    Raises:
        InvalidGeometryError: If the region has no rings, or a ring has fewer
            than four points, is not closed, or leaves lon/lat bounds
    """
    if not region.rings:
        raise InvalidGeometryError("region has no rings")
    for index, ring in enumerate(region.rings):
        validate_ring(ring, ring_index=index)


def normalize(
    region: Region,
    set_operation: Optional[PlanarSetOperation] = None,
    min_part_area: float = 0.0,
) -> Geometry:
    """Convert a raw region into its canonical geometry.

    A single-ring region becomes ``Single`` with exactly the same point
    sequence. A multi-ring region is unioned ring by ring, left to right, and
    becomes ``Single`` if the union is one connected polygon or ``Multi``
    otherwise. Holes enclosed by the union (rings arranged as a frame) are
    kept so that later intersections do not count the uncovered interior.

    Args:
        region: Region to normalize (never mutated)
        set_operation: Union backend; defaults to :class:`ShapelySetOperation`
        min_part_area: Planar area a union part must exceed to be kept

    Returns:
        Canonical ``Single`` or ``Multi`` geometry

    Raises:
        InvalidGeometryError: If any ring is malformed
        GeometryOperationError: If unioning the rings fails

    Examples:
        >>> region = Region.from_coordinates([
        ...     [[10, 71], [31, 71], [31, 65], [10, 65], [10, 71]],
        ...     [[1.5, 42], [3, 42], [3, 40.5], [1.5, 40.5], [1.5, 42]],
        ... ])
        >>> geometry = normalize(region)
        >>> type(geometry).__name__, len(geometry.parts)
        ('Multi', 2)
    """
    validate_region(region)

    if len(region.rings) == 1:
        geometry: Geometry = Single(region.rings[0])
    else:
        geometry = _union_rings(
            region, set_operation or ShapelySetOperation(), min_part_area
        )

    logger.debug(
        "Normalized region with %d ring(s) into %s with %d part(s)",
        len(region.rings),
        type(geometry).__name__,
        len(flatten(geometry)),
        extra={
            "ring_count": len(region.rings),
            "geometry_kind": type(geometry).__name__,
            "part_count": len(flatten(geometry)),
        },
    )
    return geometry


def _union_rings(
    region: Region,
    set_operation: PlanarSetOperation,
    min_part_area: float = 0.0,
) -> Geometry:
    result = ring_to_polygon(region.rings[0])
    for index in range(1, len(region.rings)):
        try:
            result = set_operation.union(result, ring_to_polygon(region.rings[index]))
        except GeometryOperationError as e:
            e.operation = SetOperation.UNION
            e.step = index
            raise
    return to_geometry(result, min_area=min_part_area, keep_holes=True)


__all__ = [
    'validate_region',
    'normalize',
]
