"""Unit tests for FoldSpec."""

import warnings
from pathlib import Path

import pytest

from tetrafold import fold_spec, grid
from tetrafold.errors import InvalidInput, InvalidLatticeState
from tetrafold.fold_spec import (
    FOLD_TEMPLATES,
    FoldAction,
    FoldSpec,
    ShapeChange,
    rotation_matrix,
    translation_matrix,
)
from tetrafold.geometry import signed_area
from tetrafold.grid import FoldCover, is_vertex_coordinate, square_diagonal_rays
from shapely.geometry import Polygon as ShapelyPolygon


class TestFromEndPoints:
    """Tests for FoldSpec.from_end_points."""

    def test_full_cover_axis(self):
        """Test a unit axis fold puts the hinge across the segment."""
        spec = FoldSpec.from_end_points((0, 0), (1, 0))
        assert spec.start == (0, 0)
        assert spec.end == (1, 0)
        assert spec.hinges == ((0.5, -0.5), (0.5, 0.5))

    def test_full_cover_diagonal(self):
        """Test a diagonal fold hinges on the other diagonal."""
        spec = FoldSpec.from_end_points((2, 2), (4, 4), FoldCover.FULL)
        assert spec.hinges == ((4, 2), (2, 4))

    def test_left_cover(self):
        """Test a left cover uses the midpoint and the left corner."""
        spec = FoldSpec.from_end_points((0, 0), (2, 0), "Left")
        assert spec.hinges == ((1, 0), (1, 1))

    def test_right_cover(self):
        """Test a right cover uses the right corner and the midpoint."""
        spec = FoldSpec.from_end_points((0, 0), (2, 0), FoldCover.RIGHT)
        assert spec.hinges == ((1, -1), (1, 0))

    def test_snaps_noise(self):
        """Test floating noise within tolerance is absorbed."""
        spec = FoldSpec.from_end_points((0.004, -0.003), (1.0, 0.999))
        assert spec == FoldSpec.from_end_points((0, 0), (1, 1))

    def test_equal_points(self):
        """Test start == end is rejected."""
        with pytest.raises(InvalidInput):
            FoldSpec.from_end_points((1, 1), (1, 1))

    def test_off_lattice_point(self):
        """Test an edge midpoint is rejected."""
        with pytest.raises(InvalidInput):
            FoldSpec.from_end_points((0.5, 0), (1, 1))

    def test_unknown_cover(self):
        """Test unknown covers are rejected."""
        with pytest.raises(InvalidInput):
            FoldSpec.from_end_points((0, 0), (1, 0), "Half")

    def test_partial_cover_off_lattice_hinge(self):
        """Test a unit axis step cannot carry a partial cover."""
        with pytest.raises(InvalidInput):
            FoldSpec.from_end_points((0, 0), (1, 0), FoldCover.LEFT)

    @pytest.mark.parametrize("cover", list(FoldCover))
    @pytest.mark.parametrize("start", [(0, 0), (0.5, 0.5)])
    def test_rays_give_simple_quads(self, cover, start):
        """Test every ray yields lattice hinges and a simple quad."""
        for ray in square_diagonal_rays(start, cover):
            end = (start[0] + ray[0], start[1] + ray[1])
            spec = FoldSpec.from_end_points(start, end, cover)
            assert all(is_vertex_coordinate(p) for p in spec.points)
            quad = ShapelyPolygon(spec.to_quad().vertices)
            assert quad.is_valid
            assert quad.exterior.is_simple


class TestTriangles:
    """Tests for triangle and quad compilation."""

    def test_unit_triangles_area(self):
        """Test both triangles of a unit-leg fold have area 0.5."""
        spec = FoldSpec.from_end_points((0, 0), (1, 1))
        triangles = spec.to_triangles()
        assert triangles.near.area == pytest.approx(0.5)
        assert triangles.far.area == pytest.approx(0.5)

    def test_triangles_ccw_apex_first(self):
        """Test triangles are CCW and start with their apex."""
        spec = FoldSpec.from_end_points((2, 2), (4, 4))
        triangles = spec.to_triangles()
        assert triangles.near[0] == spec.start
        assert triangles.far[0] == spec.end
        assert signed_area(triangles.near.vertices) > 0
        assert signed_area(triangles.far.vertices) > 0

    def test_quad(self):
        """Test the quad covers both triangles."""
        spec = FoldSpec.from_end_points((2, 2), (4, 4))
        quad = spec.to_quad()
        assert len(quad) == 4
        assert quad.is_ccw
        assert quad.area == pytest.approx(4.0)


class TestReverse:
    """Tests for FoldSpec.reverse."""

    def test_reverse_swaps(self):
        """Test reverse swaps apexes and hinges."""
        spec = FoldSpec.from_end_points((0, 0), (1, 0))
        rev = spec.reverse()
        assert rev.start == spec.end
        assert rev.end == spec.start
        assert rev.hinges == (spec.hinges[1], spec.hinges[0])

    def test_reverse_is_involution(self):
        """Test reversing twice gives the original fold."""
        spec = FoldSpec.from_end_points((3, 1), (5, 1), FoldCover.LEFT)
        assert spec.reverse().reverse() == spec

    def test_reverse_matches_from_end_points(self):
        """Test reverse equals building the fold the other way."""
        spec = FoldSpec.from_end_points((0, 0), (1, 1))
        assert spec.reverse() == FoldSpec.from_end_points((1, 1), (0, 0))


class TestEquality:
    """Tests for equality and hashing."""

    def test_hinge_order_insensitive(self):
        """Test equality ignores hinge order."""
        a = FoldSpec((0, 0), ((1, 0), (0, 1)), (1, 1))
        b = FoldSpec((0, 0), ((0, 1), (1, 0)), (1, 1))
        assert a == b
        assert hash(a) == hash(b)

    def test_equal_within_tolerance_hash_alike(self):
        """Test specs equal up to float noise share a hash and dedupe in sets."""
        a = FoldSpec((3, 3), ((2, 2), (4, 2)), (3, 1))
        b = FoldSpec((3 + 1e-12, 3), ((4, 2 - 1e-12), (2, 2)), (3, 1 + 1e-12))
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_different_apex(self):
        """Test different apexes are not equal."""
        a = FoldSpec((0, 0), ((1, 0), (0, 1)), (1, 1))
        assert a != a.reverse()

    def test_validate_coincident(self):
        """Test validate rejects repeated points."""
        with pytest.raises(InvalidInput):
            FoldSpec((0, 0), ((0, 0), (0, 1)), (1, 1)).validate()


class TestTransform:
    """Tests for FoldSpec.transform."""

    def test_translate(self):
        """Test moving a fold by whole cells."""
        spec = FoldSpec.from_end_points((0, 0), (1, 1))
        moved = spec.transform(translation_matrix(3, 2))
        assert moved == FoldSpec.from_end_points((3, 2), (4, 3))

    def test_rotate(self):
        """Test rotating a fold a quarter turn about a corner."""
        spec = FoldSpec.from_end_points((0, 0), (1, 0))
        rotated = spec.transform(rotation_matrix(90))
        assert rotated == FoldSpec.from_end_points((0, 0), (0, 1))

    def test_affine_2x3(self):
        """Test the top 2x3 block is accepted."""
        spec = FoldSpec.from_end_points((0, 0), (1, 0))
        moved = spec.transform(translation_matrix(1, 1)[:2])
        assert moved.start == (1, 1)

    def test_off_lattice_result(self):
        """Test transforms leaving the lattice are rejected."""
        spec = FoldSpec.from_end_points((0, 0), (1, 0))
        with pytest.raises(InvalidInput):
            spec.transform(translation_matrix(0.5, 0))

    def test_bad_matrix(self):
        """Test malformed matrices are rejected."""
        spec = FoldSpec.from_end_points((0, 0), (1, 0))
        with pytest.raises(InvalidInput):
            spec.transform([[1, 0], [0, 1]])


class TestActions:
    """Tests for fold action templates."""

    def test_templates(self):
        """Test each action's near/far changes."""
        assert FOLD_TEMPLATES[FoldAction.EXPAND].near == ShapeChange.KEEP
        assert FOLD_TEMPLATES[FoldAction.EXPAND].far == ShapeChange.ADD
        assert FOLD_TEMPLATES[FoldAction.CONTRACT].near == ShapeChange.REMOVE
        assert FOLD_TEMPLATES[FoldAction.CONTRACT].far == ShapeChange.KEEP

    def test_parse(self):
        """Test parsing action names."""
        assert FoldAction.parse("Create") == FoldAction.CREATE
        with pytest.raises(InvalidLatticeState):
            FoldAction.parse("Explode")


class TestModuleSource:
    """Tests for the module sources themselves."""

    @pytest.mark.parametrize("module", [fold_spec, grid])
    def test_compiles_without_warnings(self, module):
        """Test the ASCII diagrams in module docstrings are not read as escapes."""
        source = Path(module.__file__).read_text()
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compile(source, module.__file__, "exec")
