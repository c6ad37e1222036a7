"""Pytest fixtures for tetrafold tests."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
PROJECT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_DIR))

from tetrafold.board import Board
from tetrafold.config import BoardConfig


@pytest.fixture
def board_config() -> BoardConfig:
    """Return an 8x8 board configuration."""
    return BoardConfig(bounds=(0, 0, 8, 8))


@pytest.fixture
def empty_board(board_config) -> Board:
    """Return an empty 8x8 board."""
    return Board(board_config)


@pytest.fixture
def square_points() -> list:
    """Return the 2x2 square with lower-left corner at (2, 2), CCW."""
    return [(2, 2), (4, 2), (4, 4), (2, 4)]


@pytest.fixture
def square_board(empty_board, square_points) -> Board:
    """Return an 8x8 board holding shape 1, a 2x2 square at (2, 2)."""
    empty_board.add_shape(1, square_points)
    return empty_board
