"""Ring validation utilities.

Every ring entering the reduction pipeline must be closed, have at least four
points and stay within geographic coordinate bounds. The checks live here so
the normalizer and the GeoJSON helpers agree on what a valid ring is.
"""

from typing import Optional
import numpy as np

from .errors import InvalidGeometryError
from .types import Ring

MIN_RING_POINTS = 4
LONGITUDE_RANGE = (-180.0, 180.0)
LATITUDE_RANGE = (-90.0, 90.0)


def is_ring_closed(
    coords: np.ndarray,
    tolerance: float = 1e-10
) -> bool:
    """Check if coordinate ring is closed (first == last).

    Args:
        coords: Coordinate array (Nx2)
        tolerance: Absolute tolerance for coordinate comparison

    Returns:
        True if ring is closed (first point equals last point within tolerance)

    Examples:
        >>> coords = np.array([[0, 0], [1, 0], [1, 1], [0, 0]])
        >>> is_ring_closed(coords)
        True

        >>> coords = np.array([[0, 0], [1, 0], [1, 1]])
        >>> is_ring_closed(coords)
        False
    """
    if len(coords) < 2:
        return False

    return np.allclose(coords[0], coords[-1], rtol=0.0, atol=tolerance)


def has_minimum_points(
    coords: np.ndarray,
    min_points: int = MIN_RING_POINTS
) -> bool:
    """Check that a closed ring has at least ``min_points`` points (triangle + closure)."""
    return len(coords) >= min_points


def coordinates_in_range(coords: np.ndarray) -> bool:
    """Check that all coordinates are finite and inside lon/lat bounds.

    Examples:
        >>> coordinates_in_range(np.array([[-180, -90], [180, 90]]))
        True
        >>> coordinates_in_range(np.array([[181, 0]]))
        False
    """
    if coords.size == 0:
        return True
    if not np.all(np.isfinite(coords)):
        return False

    lon = coords[:, 0]
    lat = coords[:, 1]
    return bool(
        np.all((lon >= LONGITUDE_RANGE[0]) & (lon <= LONGITUDE_RANGE[1]))
        and np.all((lat >= LATITUDE_RANGE[0]) & (lat <= LATITUDE_RANGE[1]))
    )


def validate_ring(ring: Ring, ring_index: Optional[int] = None) -> None:
    """Raise :class:`InvalidGeometryError` if ``ring`` is not a valid closed ring."""
    coords = np.asarray(ring, dtype=float).reshape(-1, 2)

    if not has_minimum_points(coords):
        raise InvalidGeometryError(
            f"ring has {len(coords)} points, at least {MIN_RING_POINTS} are required",
            ring_index,
        )

    if not coordinates_in_range(coords):
        raise InvalidGeometryError(
            "ring has coordinates outside [-180, 180] x [-90, 90]",
            ring_index,
        )

    if not is_ring_closed(coords):
        raise InvalidGeometryError(
            f"ring is not closed (first point {tuple(coords[0])} != last point {tuple(coords[-1])})",
            ring_index,
        )


__all__ = [
    'MIN_RING_POINTS',
    'is_ring_closed',
    'has_minimum_points',
    'coordinates_in_range',
    'validate_ring',
]
