"""Settings shared by the combiner and the reduction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class ReductionConfig:
    """Knobs for the union/intersection reduction.

    Attributes:
        grid_size: Precision grid passed to the set operations (None = full
            floating point precision)
        min_part_area: Planar area in square degrees that a result part must
            exceed to be kept. The default keeps every part with strictly
            positive area, so regions touching only along a boundary have an
            empty intersection.
        raise_on_operation_error: Re-raise :class:`GeometryOperationError`
            instead of returning an empty result

    Examples:
        >>> config = ReductionConfig(grid_size=1e-9)
        >>> config.with_overrides(raise_on_operation_error=True).grid_size
        1e-09
    """

    grid_size: Optional[float] = None
    min_part_area: float = 0.0
    raise_on_operation_error: bool = False

    def __post_init__(self):
        if self.grid_size is not None and self.grid_size < 0:
            raise ValueError(f"grid_size must be non-negative, got {self.grid_size}")
        if self.min_part_area < 0:
            raise ValueError(f"min_part_area must be non-negative, got {self.min_part_area}")

    def with_overrides(self, **changes) -> "ReductionConfig":
        return replace(self, **changes)


DEFAULT_CONFIG = ReductionConfig()


__all__ = [
    "ReductionConfig",
    "DEFAULT_CONFIG",
]
