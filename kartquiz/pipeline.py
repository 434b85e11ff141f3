"""Reduction pipeline run by the quiz flow on every selection change.

The quiz controller owns an :class:`AnswerSelection`, appends one answer per
question and drops the last one when the player goes back. After each change
it calls :func:`reduce_selection`, which normalizes every answer region,
combines them and measures the outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Tuple

from .combine import CombinationResult, combine
from .config import DEFAULT_CONFIG, ReductionConfig
from .core.errors import GeometryOperationError
from .core.types import Region
from .geojson import region_from_geojson
from .metrics import area, reduction_percent, total_area
from .normalize import normalize
from .ops.set_operations import PlanarSetOperation, ShapelySetOperation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Answer:
    """A chosen quiz answer and the region it points at."""

    text: str
    region: Region

    @classmethod
    def from_geojson(cls, text: str, polygon: Mapping) -> "Answer":
        return cls(text, region_from_geojson(polygon))


@dataclass(frozen=True)
class AnswerSelection:
    """Answers chosen so far, in the order the questions were answered.

    Selections are immutable; every change returns a new selection.

    Examples:
        >>> square = Region.from_coordinates([[[0, 0], [1, 0], [1, 1], [0, 0]]])
        >>> selection = AnswerSelection().append(Answer("A", square)).append(Answer("B", square))
        >>> len(selection.remove_last())
        1
    """

    answers: Tuple[Answer, ...] = ()

    def append(self, answer: Answer) -> "AnswerSelection":
        return AnswerSelection(self.answers + (answer,))

    def remove_last(self) -> "AnswerSelection":
        """Drop the most recent answer ("go back"). No-op when empty."""
        return AnswerSelection(self.answers[:-1])

    def clear(self) -> "AnswerSelection":
        return AnswerSelection()

    @property
    def regions(self) -> Tuple[Region, ...]:
        return tuple(answer.region for answer in self.answers)

    def __len__(self) -> int:
        return len(self.answers)

    def __iter__(self) -> Iterator[Answer]:
        return iter(self.answers)


@dataclass(frozen=True)
class ReductionReport:
    """Combination result plus the areas the quiz screens display."""

    result: CombinationResult
    answer_areas: Tuple[float, ...] = ()
    union_area: float = 0.0
    intersection_area: float = 0.0

    @property
    def reduction_percent(self) -> Optional[float]:
        return reduction_percent(self.union_area, self.intersection_area)

    @property
    def has_valid_region(self) -> bool:
        """False for both an empty and a zero-area intersection."""
        return self.intersection_area > 0


def reduce_selection(
    selection: AnswerSelection,
    config: Optional[ReductionConfig] = None,
    set_operation: Optional[PlanarSetOperation] = None,
) -> ReductionReport:
    """Normalize, combine and measure every region in ``selection``.

    Args:
        selection: Current answer selection snapshot
        config: Reduction settings
        set_operation: Clipping backend shared by normalization and combination

    Returns:
        Fresh :class:`ReductionReport`; an empty one for an empty selection

    Raises:
        InvalidGeometryError: If an answer region is malformed
        GeometryOperationError: Only when ``config.raise_on_operation_error`` is set
    """
    config = config or DEFAULT_CONFIG
    set_operation = set_operation or ShapelySetOperation(grid_size=config.grid_size)

    if not selection:
        return ReductionReport(result=CombinationResult())

    try:
        geometries = [
            normalize(region, set_operation, min_part_area=config.min_part_area)
            for region in selection.regions
        ]
    except GeometryOperationError as e:
        logger.error(
            "Normalizing %d answer region(s) failed: %s",
            len(selection),
            e,
            extra={"answer_count": len(selection), "step": e.step},
        )
        if config.raise_on_operation_error:
            raise
        return ReductionReport(result=CombinationResult())

    answer_areas = tuple(area(geometry) for geometry in geometries)
    for index, (answer, answer_area) in enumerate(zip(selection, answer_areas), start=1):
        logger.debug(
            "Answer %d (%s): %.2f km²",
            index,
            answer.text,
            answer_area,
            extra={"answer_index": index, "answer_text": answer.text, "area_km2": answer_area},
        )

    result = combine(geometries, config=config, set_operation=set_operation)
    report = ReductionReport(
        result=result,
        answer_areas=answer_areas,
        union_area=total_area(result.union),
        intersection_area=total_area(result.intersection),
    )

    logger.info(
        "Reduced %d answer(s): union %.2f km², intersection %.2f km²",
        len(selection),
        report.union_area,
        report.intersection_area,
        extra={
            "answer_count": len(selection),
            "union_area_km2": report.union_area,
            "intersection_area_km2": report.intersection_area,
            "reduction_percent": report.reduction_percent,
            "has_valid_region": report.has_valid_region,
        },
    )
    return report


__all__ = [
    "Answer",
    "AnswerSelection",
    "ReductionReport",
    "reduce_selection",
]
