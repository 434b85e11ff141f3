"""Tests for region normalization."""

import logging

import pytest
from shapely.geometry import GeometryCollection, Polygon, box

from kartquiz import area, normalize
from kartquiz.core import (
    GeometryOperationError,
    InvalidGeometryError,
    Multi,
    Region,
    SetOperation,
    Single,
    flatten,
)


def _square(x0, y0, x1, y1):
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1], [x0, y0]]


NORTHERN_SCANDINAVIA = [[10, 71], [31, 71], [31, 65], [10, 65], [10, 71]]
BARCELONA = [[1.5, 42], [3, 42], [3, 40.5], [1.5, 40.5], [1.5, 42]]

# Four strips enclosing the uncovered square (2, 2)-(8, 8)
FRAME = [
    _square(0, 0, 10, 2),
    _square(0, 8, 10, 10),
    _square(0, 0, 2, 10),
    _square(8, 0, 10, 10),
]


class FailingUnion:
    """Set operation whose union always fails."""

    def union(self, a, b):
        raise GeometryOperationError("union exploded")

    def intersect(self, a, b):
        raise GeometryOperationError("intersect exploded")


class EmptyUnion:
    """Set operation whose results never contain any area."""

    def union(self, a, b):
        return GeometryCollection()

    def intersect(self, a, b):
        return GeometryCollection()


class TestRegionFromCoordinates:
    """Tests for Region.from_coordinates()."""

    def test_coordinates_become_float_tuples(self):
        """Test nested lists are canonicalized into float tuples."""
        region = Region.from_coordinates([_square(0, 0, 1, 1)])
        assert region.rings[0][1] == (1.0, 0.0)
        assert isinstance(region.rings[0][1][0], float)

    def test_altitude_dropped(self):
        """Test a third coordinate value is discarded."""
        region = Region.from_coordinates([[[0, 0, 5], [1, 0, 5], [1, 1, 5], [0, 0, 5]]])
        assert region.rings[0][0] == (0.0, 0.0)

    def test_no_rings(self):
        """Test empty coordinates are rejected."""
        with pytest.raises(InvalidGeometryError, match="no rings"):
            Region.from_coordinates([])

    def test_non_numeric_coordinate(self):
        """Test string coordinates are rejected."""
        with pytest.raises(InvalidGeometryError, match="not a number"):
            Region.from_coordinates([[["a", 0], [1, 0], [1, 1], ["a", 0]]])

    def test_point_with_one_value(self):
        """Test points must carry two or three values."""
        with pytest.raises(InvalidGeometryError, match="2 or 3 values"):
            Region.from_coordinates([[[0], [1, 0], [1, 1], [0]]])

    def test_string_is_not_a_ring(self):
        """Test a string is not accepted as a ring."""
        with pytest.raises(InvalidGeometryError):
            Region.from_coordinates(["not a ring"])


class TestNormalizeSingleRing:
    """Single-ring regions map straight onto Single."""

    def test_single_ring_becomes_single(self):
        """Test one ring yields a Single."""
        region = Region.from_coordinates([_square(0, 0, 10, 10)])
        geometry = normalize(region)
        assert isinstance(geometry, Single)

    def test_round_trip_preserves_point_sequence(self):
        """Test flattening a normalized ring gives back the same points."""
        region = Region.from_coordinates([_square(3, 4, 7, 9)])
        parts = flatten(normalize(region))
        assert len(parts) == 1
        assert parts[0].ring == region.rings[0]

    def test_region_not_mutated(self):
        """Test normalizing leaves the input region untouched."""
        region = Region.from_coordinates([_square(0, 0, 10, 10), _square(20, 20, 30, 30)])
        before = region.rings
        normalize(region)
        assert region.rings == before


class TestNormalizeMultiRing:
    """Multi-ring regions are unioned."""

    def test_disjoint_rings_become_multi(self):
        """Test disjoint rings stay separate parts."""
        region = Region.from_coordinates([NORTHERN_SCANDINAVIA, BARCELONA])
        geometry = normalize(region)
        assert isinstance(geometry, Multi)
        assert len(geometry.parts) == 2

    def test_overlapping_rings_collapse_to_single(self):
        """Test overlapping rings merge into one polygon."""
        region = Region.from_coordinates([_square(0, 0, 10, 10), _square(5, 5, 15, 15)])
        geometry = normalize(region)
        assert isinstance(geometry, Single)
        expected = box(0, 0, 10, 10).union(box(5, 5, 15, 15))
        assert Polygon(geometry.ring).equals(expected)

    def test_mixed_rings(self):
        """Test overlapping rings merge while a distant ring stays apart."""
        region = Region.from_coordinates([
            _square(0, 0, 10, 10),
            _square(40, 40, 50, 50),
            _square(5, 5, 15, 15),
        ])
        geometry = normalize(region)
        assert isinstance(geometry, Multi)
        assert len(geometry.parts) == 2

    def test_frame_keeps_enclosed_hole(self):
        """Test rings arranged as a frame keep the uncovered interior as a hole."""
        geometry = normalize(Region.from_coordinates(FRAME))

        assert isinstance(geometry, Single)
        assert len(geometry.holes) == 1
        assert Polygon(geometry.ring, geometry.holes).equals(
            box(0, 0, 10, 10).difference(box(2, 2, 8, 8))
        )
        assert area(geometry) < area(Single(geometry.ring))

    def test_frame_parts_drop_hole(self):
        """Test flattening a framed geometry yields its outer ring only."""
        parts = flatten(normalize(Region.from_coordinates(FRAME)))
        assert len(parts) == 1
        assert parts[0].holes == ()
        assert Polygon(parts[0].ring).equals(box(0, 0, 10, 10))

    def test_degenerate_rings_give_empty_multi(self):
        """Test zero-area rings union into the empty geometry."""
        sliver = [[0, 0], [1, 1], [2, 2], [0, 0]]
        geometry = normalize(Region.from_coordinates([sliver, sliver]))

        assert geometry == Multi(())
        assert geometry.is_empty
        assert area(geometry) == 0.0

    def test_empty_union_result_gives_empty_multi(self):
        """Test a backend returning nothing polygonal yields the empty geometry."""
        region = Region.from_coordinates([_square(0, 0, 1, 1), _square(2, 2, 3, 3)])
        geometry = normalize(region, set_operation=EmptyUnion())
        assert geometry == Multi(())
        assert flatten(geometry) == ()

    def test_min_part_area_drops_small_parts(self):
        """Test union parts at or below min_part_area are discarded."""
        region = Region.from_coordinates([_square(0, 0, 10, 10), _square(20, 20, 20.01, 20.01)])

        assert len(flatten(normalize(region))) == 2

        geometry = normalize(region, min_part_area=0.01)
        assert isinstance(geometry, Single)
        assert Polygon(geometry.ring).equals(box(0, 0, 10, 10))

    def test_union_failure_raises(self):
        """Test a failing union is tagged with its operation and step."""
        region = Region.from_coordinates([_square(0, 0, 1, 1), _square(2, 2, 3, 3)])
        with pytest.raises(GeometryOperationError) as exc_info:
            normalize(region, set_operation=FailingUnion())
        assert exc_info.value.operation is SetOperation.UNION
        assert exc_info.value.step == 1


class TestNormalizeValidation:
    """Malformed rings are rejected."""

    def test_too_few_points(self):
        """Test rings need at least four points."""
        region = Region.from_coordinates([[[0, 0], [1, 0], [0, 0]]])
        with pytest.raises(InvalidGeometryError, match="at least 4"):
            normalize(region)

    def test_unclosed_ring(self):
        """Test rings must be closed."""
        region = Region.from_coordinates([[[0, 0], [1, 0], [1, 1], [0, 1]]])
        with pytest.raises(InvalidGeometryError, match="not closed"):
            normalize(region)

    def test_out_of_range(self):
        """Test longitudes beyond 180 are rejected."""
        region = Region.from_coordinates([_square(170, 0, 190, 10)])
        with pytest.raises(InvalidGeometryError, match="outside"):
            normalize(region)

    def test_second_ring_reported(self):
        """Test the error names the offending ring index."""
        region = Region.from_coordinates([_square(0, 0, 1, 1), [[0, 0], [1, 0], [0, 0]]])
        with pytest.raises(InvalidGeometryError) as exc_info:
            normalize(region)
        assert exc_info.value.ring_index == 1

    def test_empty_region(self):
        """Test a region without rings is rejected."""
        with pytest.raises(InvalidGeometryError):
            normalize(Region(()))


class TestNormalizeLogging:
    """One log record per normalize call."""

    def test_debug_record(self, caplog):
        """Test the DEBUG record carries ring and part counts."""
        region = Region.from_coordinates([NORTHERN_SCANDINAVIA, BARCELONA])
        with caplog.at_level(logging.DEBUG, logger="kartquiz.normalize"):
            normalize(region)

        records = [r for r in caplog.records if r.name == "kartquiz.normalize"]
        assert len(records) == 1
        assert records[0].ring_count == 2
        assert records[0].part_count == 2
        assert records[0].geometry_kind == "Multi"

    def test_kept_hole_logs_no_warning(self, caplog):
        """Test holes carried through normalization are not reported as discarded."""
        with caplog.at_level(logging.WARNING):
            normalize(Region.from_coordinates(FRAME))
        assert not [r for r in caplog.records if r.levelno == logging.WARNING]


class TestGeometryVariant:
    """Tests for the Single/Multi variant helpers."""

    def test_multi_holes_align_with_parts(self):
        """Test hole tuples must match the number of parts."""
        ring = tuple(map(tuple, _square(0, 0, 1, 1)))
        with pytest.raises(ValueError, match="hole tuple"):
            Multi((ring, ring), holes=((),))

    def test_flatten_drops_multi_holes(self):
        """Test flattening a Multi yields outer rings only."""
        outer = tuple(map(tuple, _square(0, 0, 10, 10)))
        hole = tuple(map(tuple, _square(2, 2, 8, 8)))
        island = tuple(map(tuple, _square(20, 20, 21, 21)))
        parts = flatten(Multi((outer, island), holes=((hole,), ())))
        assert parts == (Single(outer), Single(island))
