"""Incremental union and intersection of answer geometries.

Both reductions fold the geometries left to right with a binary set
operation. The intersection fold stops as soon as an intermediate result is
empty: no later geometry can bring area back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from shapely.geometry import MultiPolygon
from shapely.geometry.base import BaseGeometry

from .config import DEFAULT_CONFIG, ReductionConfig
from .core.errors import GeometryOperationError
from .core.geometry_utils import extract_polygons, to_geometry, to_shapely
from .core.types import Geometry, SetOperation, Single, coerce_enum, flatten
from .metrics import measure_parts
from .ops.set_operations import PlanarSetOperation, ShapelySetOperation, apply_operation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepResult:
    """Outcome of folding one more geometry into an accumulator."""

    operation: SetOperation
    step: int
    part_count: int
    empty: bool


@dataclass(frozen=True)
class CombinationResult:
    """Union and intersection parts for one answer selection.

    ``intersection`` is empty when the selected regions have no common area.
    """

    union: Tuple[Single, ...] = ()
    intersection: Tuple[Single, ...] = ()
    steps: Tuple[StepResult, ...] = ()

    @property
    def has_overlap(self) -> bool:
        return bool(self.intersection)


def _polygonal(shape: BaseGeometry, min_part_area: float) -> BaseGeometry:
    """Keep only polygon parts whose area exceeds ``min_part_area``."""
    polygons = [p for p in extract_polygons(shape) if p.area > min_part_area]
    if len(polygons) == 1:
        return polygons[0]
    return MultiPolygon(polygons)


def _fold(
    geometries: Sequence[Geometry],
    operation: SetOperation,
    set_operation: PlanarSetOperation,
    min_part_area: float = 0.0,
    short_circuit: bool = False,
) -> Tuple[BaseGeometry, List[StepResult]]:
    accumulator = _polygonal(to_shapely(geometries[0]), min_part_area)
    steps: List[StepResult] = []

    for index in range(1, len(geometries)):
        if short_circuit and accumulator.is_empty:
            logger.debug(
                "%s is empty before step %d, skipping %d remaining geometries",
                operation.value,
                index,
                len(geometries) - index,
                extra={"operation": operation.value, "step": index},
            )
            break

        try:
            result = apply_operation(
                set_operation, operation, accumulator, to_shapely(geometries[index])
            )
        except GeometryOperationError as e:
            e.operation = operation
            e.step = index
            raise

        accumulator = _polygonal(result, min_part_area)
        part_count = len(extract_polygons(accumulator))
        steps.append(StepResult(operation, index, part_count, accumulator.is_empty))
        logger.debug(
            "%s step %d produced %d part(s)",
            operation.value,
            index,
            part_count,
            extra={"operation": operation.value, "step": index, "part_count": part_count},
        )

    return accumulator, steps


def reduce_geometries(
    geometries: Iterable[Geometry],
    operation: Union[SetOperation, str],
    config: Optional[ReductionConfig] = None,
    set_operation: Optional[PlanarSetOperation] = None,
) -> Tuple[Single, ...]:
    """Fold ``geometries`` with a single operation and flatten the result.

    Unlike :func:`combine`, a failing step is not swallowed here.

    Args:
        geometries: Canonical geometries in answer order
        operation: ``SetOperation.UNION`` or ``SetOperation.INTERSECTION``
            (or their string values)
        config: Reduction settings
        set_operation: Clipping backend; defaults to :class:`ShapelySetOperation`

    Returns:
        Tuple of ``Single`` parts (empty when there is nothing left)

    Raises:
        GeometryOperationError: If a step cannot be computed
    """
    operation = coerce_enum(operation, SetOperation)
    config = config or DEFAULT_CONFIG
    geometries = list(geometries)

    if not geometries:
        return ()
    if len(geometries) == 1:
        return flatten(geometries[0])

    set_operation = set_operation or ShapelySetOperation(grid_size=config.grid_size)
    shape, _ = _fold(
        geometries,
        operation,
        set_operation,
        min_part_area=config.min_part_area,
        short_circuit=operation is SetOperation.INTERSECTION,
    )
    return flatten(to_geometry(shape, min_area=config.min_part_area))


def combine(
    geometries: Iterable[Geometry],
    config: Optional[ReductionConfig] = None,
    set_operation: Optional[PlanarSetOperation] = None,
) -> CombinationResult:
    """Compute the cumulative union and intersection of ``geometries``.

    A single geometry is returned as both union and intersection without any
    set operation being run, so its reported area is exactly its own.

    If any step fails, the whole combination is abandoned and an empty
    result is returned, unless ``config.raise_on_operation_error`` is set.

    Args:
        geometries: Canonical geometries in answer order
        config: Reduction settings
        set_operation: Clipping backend; defaults to :class:`ShapelySetOperation`

    Returns:
        :class:`CombinationResult` with flattened union and intersection parts

    Examples:
        >>> a = Single(((0, 0), (10, 0), (10, 10), (0, 10), (0, 0)))
        >>> b = Single(((5, 5), (15, 5), (15, 15), (5, 15), (5, 5)))
        >>> result = combine([a, b])
        >>> len(result.union), len(result.intersection)
        (1, 1)
    """
    config = config or DEFAULT_CONFIG
    geometries = list(geometries)

    if not geometries:
        logger.info("No geometries to combine", extra={"input_count": 0})
        return CombinationResult()

    if len(geometries) == 1:
        parts = flatten(geometries[0])
        result = CombinationResult(union=parts, intersection=parts)
        _log_combination(result, input_count=1, short_circuited=False)
        return result

    set_operation = set_operation or ShapelySetOperation(grid_size=config.grid_size)

    try:
        union_shape, union_steps = _fold(
            geometries,
            SetOperation.UNION,
            set_operation,
            min_part_area=config.min_part_area,
        )
        intersection_shape, intersection_steps = _fold(
            geometries,
            SetOperation.INTERSECTION,
            set_operation,
            min_part_area=config.min_part_area,
            short_circuit=True,
        )
    except GeometryOperationError as e:
        logger.error(
            "Combining %d geometries failed at %s step %s: %s",
            len(geometries),
            getattr(e.operation, "value", e.operation),
            e.step,
            e,
            extra={
                "input_count": len(geometries),
                "operation": getattr(e.operation, "value", e.operation),
                "step": e.step,
            },
        )
        if config.raise_on_operation_error:
            raise
        return CombinationResult()

    result = CombinationResult(
        union=flatten(to_geometry(union_shape, min_area=config.min_part_area)),
        intersection=flatten(to_geometry(intersection_shape, min_area=config.min_part_area)),
        steps=tuple(union_steps + intersection_steps),
    )
    _log_combination(
        result,
        input_count=len(geometries),
        short_circuited=len(intersection_steps) < len(geometries) - 1,
    )
    return result


def _log_combination(result: CombinationResult, input_count: int, short_circuited: bool) -> None:
    if not logger.isEnabledFor(logging.INFO):
        return

    union_metrics = measure_parts(result.union)
    intersection_metrics = measure_parts(result.intersection)
    logger.info(
        "Combined %d geometries: union %d part(s) %.2f km², intersection %d part(s) %.2f km²",
        input_count,
        union_metrics["part_count"],
        union_metrics["area_km2"],
        intersection_metrics["part_count"],
        intersection_metrics["area_km2"],
        extra={
            "input_count": input_count,
            "union_part_count": union_metrics["part_count"],
            "union_area_km2": union_metrics["area_km2"],
            "intersection_part_count": intersection_metrics["part_count"],
            "intersection_area_km2": intersection_metrics["area_km2"],
            "short_circuited": short_circuited,
        },
    )


__all__ = [
    "StepResult",
    "CombinationResult",
    "reduce_geometries",
    "combine",
]
