"""Exception hierarchy for kartquiz.

All errors raised by the library derive from :class:`KartquizError` so callers
can catch everything the reduction pipeline produces with a single clause.
"""

from typing import Optional


class KartquizError(Exception):
    """Base exception for all kartquiz errors."""
    pass


class InvalidGeometryError(KartquizError, ValueError):
    """Raised when an input ring or region is malformed.

    Attributes:
        ring_index: Index of the offending ring within its region, if known
        reason: Short description of what was wrong

    Examples:
        >>> try:
        ...     normalize(Region.from_coordinates([[[0, 0], [1, 0], [0, 0]]]))
        ... except InvalidGeometryError as e:
        ...     print(e.ring_index, e.reason)
        0 ring has 3 points, at least 4 are required
    """

    def __init__(self, reason: str, ring_index: Optional[int] = None):
        self.reason = reason
        self.ring_index = ring_index
        if ring_index is None:
            message = reason
        else:
            message = f"Ring {ring_index}: {reason}"
        super().__init__(message)


class GeometryOperationError(KartquizError):
    """Raised when a planar union or intersection step cannot be computed.

    Attributes:
        operation: The :class:`~kartquiz.core.types.SetOperation` that failed
        step: Index of the geometry being folded in when the failure happened
    """

    def __init__(self, message: str, operation=None, step: Optional[int] = None):
        self.operation = operation
        self.step = step
        super().__init__(message)


__all__ = [
    'KartquizError',
    'InvalidGeometryError',
    'GeometryOperationError',
]
