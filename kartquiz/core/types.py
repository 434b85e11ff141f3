"""Type definitions for kartquiz.

This module defines the value types flowing through the reduction pipeline
(rings, regions and the ``Single``/``Multi`` geometry variant) together with
the enum naming the two planar set operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Sequence, Tuple, Type, TypeVar, Union

from .errors import InvalidGeometryError

Point = Tuple[float, float]
Ring = Tuple[Point, ...]

E = TypeVar('E', bound=Enum)


class SetOperation(Enum):
    """Binary planar set operation applied while folding geometries.

    Attributes:
        UNION: Merge areas (overlapping or touching parts coalesce)
        INTERSECTION: Keep only the area common to both operands

    Examples:
        >>> from kartquiz.core.types import SetOperation, coerce_enum
        >>> coerce_enum('union', SetOperation)
        <SetOperation.UNION: 'union'>
    """
    UNION = 'union'
    INTERSECTION = 'intersection'


def coerce_enum(value: Union[E, str], enum_cls: Type[E]) -> E:
    """Accept either an enum member or its string value."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        options = ", ".join(repr(member.value) for member in enum_cls)
        raise ValueError(
            f"Unknown {enum_cls.__name__}: {value!r} (expected one of {options})"
        ) from None


def _coerce_point(point, ring_index: int) -> Point:
    if isinstance(point, (str, bytes)) or not isinstance(point, Sequence):
        raise InvalidGeometryError(f"point {point!r} is not a coordinate pair", ring_index)
    if len(point) not in (2, 3):
        raise InvalidGeometryError(
            f"point {list(point)!r} must have 2 or 3 values", ring_index
        )
    # Altitude is dropped
    lon, lat = point[0], point[1]
    for value in (lon, lat):
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidGeometryError(f"coordinate {value!r} is not a number", ring_index)
    return (float(lon), float(lat))


def coerce_ring(coords, ring_index: int = 0) -> Ring:
    """Convert a nested ``[[lon, lat], ...]`` sequence into a :data:`Ring`.

    Only the structure is checked here; closure, vertex count and coordinate
    ranges are validated by :func:`kartquiz.core.validation_utils.validate_ring`.
    """
    if isinstance(coords, (str, bytes)) or not isinstance(coords, Sequence):
        raise InvalidGeometryError("ring is not a sequence of points", ring_index)
    return tuple(_coerce_point(point, ring_index) for point in coords)


@dataclass(frozen=True)
class Region:
    """Raw polygon record carried by a quiz answer.

    A region holds one or more outer rings. Several rings mean a logical
    "OR" of disjoint areas and are unioned by :func:`kartquiz.normalize`.
    """

    rings: Tuple[Ring, ...]

    @classmethod
    def from_coordinates(cls, coordinates) -> "Region":
        """Build a region from GeoJSON Polygon ``coordinates``.

        Examples:
            >>> region = Region.from_coordinates([[[0, 0], [1, 0], [1, 1], [0, 0]]])
            >>> region.rings[0][1]
            (1.0, 0.0)
        """
        if isinstance(coordinates, (str, bytes)) or not isinstance(coordinates, Sequence):
            raise InvalidGeometryError("coordinates must be a sequence of rings")
        if len(coordinates) == 0:
            raise InvalidGeometryError("region has no rings")
        return cls(tuple(coerce_ring(ring, index) for index, ring in enumerate(coordinates)))


@dataclass(frozen=True)
class Single:
    """One simple polygon described by its closed outer ring.

    ``holes`` is only filled in for shapes produced by unioning several rings
    (a frame of strips, for instance) so that later set operations see the
    uncovered interior. Output parts never carry holes.
    """

    ring: Ring
    holes: Tuple[Ring, ...] = ()


@dataclass(frozen=True)
class Multi:
    """Disjoint (or touching) polygon parts. No parts means empty.

    ``holes`` is either empty or holds one tuple of hole rings per part.
    """

    parts: Tuple[Ring, ...] = ()
    holes: Tuple[Tuple[Ring, ...], ...] = ()

    def __post_init__(self):
        if self.holes and len(self.holes) != len(self.parts):
            raise ValueError(
                f"Multi has {len(self.parts)} part(s) but {len(self.holes)} hole tuple(s)"
            )

    @property
    def is_empty(self) -> bool:
        return not self.parts

    def part_holes(self, index: int) -> Tuple[Ring, ...]:
        return self.holes[index] if self.holes else ()


Geometry = Union[Single, Multi]


def flatten(geometry: Geometry) -> Tuple[Single, ...]:
    """Explode a geometry into a tuple of outer-ring-only :class:`Single` parts.

    Examples:
        >>> square = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0))
        >>> flatten(Single(square)) == (Single(square),)
        True
        >>> far = ((5.0, 5.0), (6.0, 5.0), (6.0, 6.0), (5.0, 5.0))
        >>> len(flatten(Multi((square, far))))
        2
    """
    if isinstance(geometry, Single):
        return (Single(geometry.ring),)
    elif isinstance(geometry, Multi):
        return tuple(Single(part) for part in geometry.parts)
    raise TypeError(f"Expected Single or Multi geometry, got {type(geometry).__name__}")


def from_parts(
    parts: Sequence[Ring],
    holes: Sequence[Tuple[Ring, ...]] = (),
) -> Geometry:
    """Wrap rings as ``Single`` when there is exactly one, ``Multi`` otherwise.

    ``holes``, when given, holds one tuple of hole rings per part.
    """
    parts = tuple(parts)
    holes = tuple(tuple(part_holes) for part_holes in holes)
    if not any(holes):
        holes = ()
    if len(parts) == 1:
        return Single(parts[0], holes[0] if holes else ())
    return Multi(parts, holes)


__all__ = [
    'Point',
    'Ring',
    'SetOperation',
    'coerce_enum',
    'coerce_ring',
    'Region',
    'Single',
    'Multi',
    'Geometry',
    'flatten',
    'from_parts',
]
