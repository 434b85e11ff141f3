"""Planar set operations used by the normalizer and the combiner."""

from .set_operations import (
    PlanarSetOperation,
    ShapelySetOperation,
    apply_operation,
)

__all__ = [
    'PlanarSetOperation',
    'ShapelySetOperation',
    'apply_operation',
]
