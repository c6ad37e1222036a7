"""
tetrafold - Fold moves on a Tetrakis lattice board

Shapes grow and shrink by folding pairs of right-isosceles triangles across
a shared hinge:
1. FoldSpec: one concrete fold move
2. FoldSpecBasis: families of folds along a boundary edge
3. Board: owns shape and lock polygons, applies folds
4. verify_fold: read-only legality checks
"""

__version__ = "1.0.0"
__author__ = "Aightech"

from .board import Board, BoardSnapshot, LockRegion, ShapeContacts
from .config import BOARD_SIZE_PRESETS, BoardConfig
from .errors import InvalidInput, InvalidLatticeState, TetrafoldError
from .fold_spec import FOLD_TEMPLATES, FoldAction, FoldSpec, FoldTriangles, ShapeChange
from .fold_spec_basis import (
    BasisType,
    FoldSpecBasis,
    detect_along_segment,
    get_all_bases,
    get_all_full_cover_contractions,
)
from .geometry import BoundingBox, Polygon
from .grid import FoldCover, LinearEquation
from .polygon_algebra import PolygonAlgebra, ShapelyAlgebra
from .proposals import next_shape_id, propose_contraction, propose_creation, propose_expansion
from .tetrakis import Background, Cardinal, CellState, Locked, Owned, TriangleIndex
from .verification import FoldVerification, verification_all_ok, verify_fold
