"""Unit tests for the single-attempt move proposers."""

import pytest
import random

from tetrafold.board import Board
from tetrafold.config import BoardConfig
from tetrafold.errors import InvalidLatticeState
from tetrafold.fold_spec import FoldAction
from tetrafold.grid import FoldCover
from tetrafold.proposals import next_shape_id, propose_contraction, propose_creation, propose_expansion
from tetrafold.verification import verify_fold


ATTEMPTS = 50


@pytest.fixture
def full_board() -> Board:
    """Return a 4x4 board completely covered by shape 1."""
    board = Board(BoardConfig(bounds=(0, 0, 4, 4)))
    board.add_shape(1, [(0, 0), (4, 0), (4, 4), (0, 4)])
    return board


class TestNextShapeId:
    """Tests for next_shape_id."""

    def test_empty(self, empty_board):
        """Test ids start at 1."""
        assert next_shape_id(empty_board) == 1

    def test_after_existing(self, square_board):
        """Test ids continue past the largest one."""
        square_board.add_shape(5, [(6, 6), (7, 6), (7, 7)])
        assert next_shape_id(square_board) == 6


class TestProposeCreation:
    """Tests for propose_creation."""

    @pytest.mark.parametrize("cover", list(FoldCover))
    def test_proposals_are_legal(self, empty_board, cover):
        """Test every returned fold passes verification."""
        rng = random.Random(1)
        found = 0
        for _ in range(ATTEMPTS):
            spec = propose_creation(empty_board, rng, cover=cover, max_ray_multiplier=2)
            if spec is None:
                continue
            found += 1
            assert verify_fold(empty_board, spec, FoldAction.CREATE).ok
        assert found > 0

    def test_board_not_modified(self, empty_board):
        """Test proposing does not create shapes."""
        rng = random.Random(2)
        for _ in range(ATTEMPTS):
            propose_creation(empty_board, rng)
        assert len(empty_board) == 0

    def test_full_board(self, full_board):
        """Test nothing can be created on a covered board."""
        rng = random.Random(3)
        assert all(propose_creation(full_board, rng) is None for _ in range(ATTEMPTS))


class TestProposeExpansion:
    """Tests for propose_expansion."""

    @pytest.mark.parametrize("clockwise", [False, True])
    @pytest.mark.parametrize("full_cover", [False, True])
    def test_proposals_are_legal(self, square_board, clockwise, full_cover):
        """Test returned expansions verify and grow the shape."""
        rng = random.Random(4)
        found = 0
        for _ in range(ATTEMPTS):
            spec = propose_expansion(square_board, 1, rng, clockwise=clockwise, full_cover=full_cover)
            if spec is None:
                continue
            found += 1
            assert verify_fold(square_board, spec, FoldAction.EXPAND, 1).ok
        assert found > 0

    def test_apply_grows_shape(self, square_board):
        """Test applying an accepted expansion grows the shape."""
        rng = random.Random(5)
        spec = None
        for _ in range(ATTEMPTS):
            spec = propose_expansion(square_board, 1, rng, multiplier_limit=1)
            if spec is not None:
                break
        assert spec is not None
        square_board.apply_fold(1, spec, FoldAction.EXPAND)
        assert square_board.shape_area(1) > 4.0

    def test_no_room(self, full_board):
        """Test a shape filling the board cannot grow."""
        rng = random.Random(6)
        assert all(propose_expansion(full_board, 1, rng) is None for _ in range(ATTEMPTS))

    def test_missing_shape(self, empty_board):
        """Test proposing for an absent shape."""
        with pytest.raises(InvalidLatticeState):
            propose_expansion(empty_board, 1, random.Random(0))


class TestProposeContraction:
    """Tests for propose_contraction."""

    def test_square_corners(self, square_board):
        """Test every corner cut of a lone square is legal."""
        rng = random.Random(7)
        for _ in range(10):
            spec = propose_contraction(square_board, 1, rng)
            assert spec is not None
            assert verify_fold(square_board, spec, FoldAction.CONTRACT, 1).ok

    def test_apply_shrinks_shape(self, square_board):
        """Test applying a contraction shrinks the shape."""
        spec = propose_contraction(square_board, 1, random.Random(8), multiplier_limit=1)
        square_board.apply_fold(1, spec, FoldAction.CONTRACT)
        assert square_board.shape_area(1) == pytest.approx(3.5)

    def test_no_convex_corner(self, empty_board):
        """Test a diamond has no right-angle axis corners to cut."""
        empty_board.add_shape(1, [(2, 1), (3, 2), (2, 3), (1, 2)])
        assert propose_contraction(empty_board, 1, random.Random(9)) is None
