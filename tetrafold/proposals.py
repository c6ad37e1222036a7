"""
Single-attempt move proposers.

Each function samples one candidate fold, verifies it against the board and
returns it if it is legal, or None otherwise. The board is never modified.
Retry counts, weights and seeding belong to the caller, e.g.::

    rng = random.Random(7)
    for _ in range(20):
        spec = propose_expansion(board, shape_id, rng)
        if spec is not None:
            board.apply_fold(shape_id, spec, FoldAction.EXPAND)
            break
"""

from __future__ import annotations
import logging
import random
from typing import Optional

from .board import Board
from .errors import InvalidInput
from .fold_spec import FoldAction, FoldSpec
from .fold_spec_basis import FoldSpecBasis, get_all_bases, get_all_full_cover_contractions
from .geometry import vec_add, vec_scale
from .grid import FoldCover, all_vertices, square_diagonal_rays
from .verification import verify_fold

logger = logging.getLogger(__name__)


def next_shape_id(board: Board) -> int:
    """Smallest id above every shape on the board (1 for an empty board)."""
    return max(board.shape_ids(), default=0) + 1


def propose_creation(
    board: Board,
    rng: random.Random,
    cover: FoldCover | str = FoldCover.FULL,
    max_ray_multiplier: int = 1
) -> Optional[FoldSpec]:
    """
    Sample a fold that creates a new shape from nothing.

    Args:
        board: Board to check against
        rng: Random source
        cover: Cover of the sampled fold
        max_ray_multiplier: Largest number of ray steps between the apexes
    """
    cover = FoldCover.parse(cover)
    start = rng.choice(all_vertices(board.bounds))
    ray = rng.choice(square_diagonal_rays(start, cover))
    k = rng.randint(1, max(1, max_ray_multiplier))
    end = vec_add(start, vec_scale(ray, k))

    try:
        spec = FoldSpec.from_end_points(start, end, cover)
    except InvalidInput as e:
        logger.debug("Discarding creation candidate %s -> %s: %s", start, end, e)
        return None

    if not verify_fold(board, spec, FoldAction.CREATE).ok:
        return None
    return spec


def _sample_from_bases(
    board: Board,
    shape_id: int,
    bases: list[FoldSpecBasis],
    action: FoldAction,
    rng: random.Random,
    multiplier_limit: Optional[int] = None
) -> Optional[FoldSpec]:
    if not bases:
        logger.debug("No %s bases for shape %s", action.value, shape_id)
        return None

    basis = rng.choice(bases)
    k = rng.randint(1, basis.max_multiplier(multiplier_limit))
    try:
        spec = basis.at_multiplier(k)
    except InvalidInput as e:
        logger.debug("Discarding %s candidate at k=%d: %s", action.value, k, e)
        return None

    if not verify_fold(board, spec, action, shape_id).ok:
        return None
    return spec


def propose_expansion(
    board: Board,
    shape_id: int,
    rng: random.Random,
    multiplier_limit: Optional[int] = None,
    clockwise: Optional[bool] = None,
    full_cover: Optional[bool] = None
) -> Optional[FoldSpec]:
    """
    Sample a fold that grows a shape across one of its boundary edges.

    Winding and cover are sampled when not given.

    Raises:
        InvalidLatticeState: If the shape does not exist.
    """
    if clockwise is None:
        clockwise = rng.random() < 0.5
    if full_cover is None:
        full_cover = rng.random() < 0.5

    outline = board.shape_outline(shape_id)
    bases = get_all_bases(outline, clockwise=clockwise, full_cover=full_cover)
    return _sample_from_bases(board, shape_id, bases, FoldAction.EXPAND, rng, multiplier_limit)


def propose_contraction(
    board: Board,
    shape_id: int,
    rng: random.Random,
    multiplier_limit: Optional[int] = None
) -> Optional[FoldSpec]:
    """
    Sample a fold that cuts one convex corner off a shape.

    Raises:
        InvalidLatticeState: If the shape does not exist.
    """
    outline = board.shape_outline(shape_id)
    bases = get_all_full_cover_contractions(outline)
    return _sample_from_bases(board, shape_id, bases, FoldAction.CONTRACT, rng, multiplier_limit)
