"""Core types and utilities for kartquiz.

This module provides the geometry value types, the set-operation enum,
exceptions, and the validation/conversion helpers used throughout the library.
"""

from .types import (
    Point,
    Ring,
    SetOperation,
    coerce_enum,
    Region,
    Single,
    Multi,
    Geometry,
    flatten,
    from_parts,
)

from .errors import (
    KartquizError,
    InvalidGeometryError,
    GeometryOperationError,
)

__all__ = [
    # Value types
    'Point',
    'Ring',
    'Region',
    'Single',
    'Multi',
    'Geometry',
    'flatten',
    'from_parts',

    # Enums
    'SetOperation',
    'coerce_enum',

    # Exceptions
    'KartquizError',
    'InvalidGeometryError',
    'GeometryOperationError',
]
