"""
Families of same-direction folds along a polygon boundary.

A basis is picked once per boundary edge; any integer magnitude k then gives
a concrete FoldSpec whose hinge runs along that edge:

    start ----------> start + direction * length(k)
             hinge

The near apex sits on the left of the hinge direction (inside a CCW ring),
the far apex on the right. Right-to-left bases swap both.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
import math
from typing import Iterable, Optional

from .errors import InvalidInput
from .fold_spec import FoldSpec
from .geometry import (
    Point,
    Polygon,
    Vector,
    ensure_ccw,
    ensure_cw,
    points_equal,
    rotate_vector,
    vec_add,
    vec_cross,
    vec_dot,
    vec_length,
    vec_normalize,
    vec_scale,
    vec_sub,
)
from .grid import SNAP_TOLERANCE, FoldCover, LinearEquation, is_on_grid, is_axis_aligned, snap_vertex, valid_hinge_lengths

logger = logging.getLogger(__name__)


class BasisType(str, Enum):
    HINGE_LEFT_TO_RIGHT = "HingeLeftToRight"
    HINGE_RIGHT_TO_LEFT = "HingeRightToLeft"
    DIAGONAL_START_TO_END = "DiagonalStartToEnd"


@dataclass(frozen=True)
class FoldSpecBasis:
    """
    A parameterized family of folds.

    Attributes:
        start: Lattice vertex where every fold of the family is anchored
        direction: Unit vector of the hinge (or of the start->end diagonal)
        rule: Valid lengths along direction, indexed by k >= 1
        max_length: Length available along direction (the source edge)
        full_cover: True for full-cover flaps, False for half covers
        basis_type: How the fold is laid out relative to direction
    """
    start: Point
    direction: Vector
    rule: LinearEquation
    max_length: float
    full_cover: bool = True
    basis_type: BasisType = BasisType.HINGE_LEFT_TO_RIGHT

    @property
    def right_to_left(self) -> bool:
        return self.basis_type == BasisType.HINGE_RIGHT_TO_LEFT

    def max_multiplier(self, limit: Optional[int] = None) -> int:
        """
        Largest magnitude fitting inside the source edge.

        Args:
            limit: Optional cap chosen by the caller (never lowers the
                result below 1)
        """
        k = self.rule.max_k(self.max_length)
        if limit is not None:
            k = max(1, min(k, limit))
        return k

    def at_multiplier(self, k: int, tolerance: float = SNAP_TOLERANCE) -> FoldSpec:
        """
        The concrete fold of magnitude k.

        Raises:
            InvalidInput: If k is out of range or a point lands off-lattice.
        """
        if k < 1 or k > self.max_multiplier():
            raise InvalidInput(f"Multiplier {k} out of range 1..{self.max_multiplier()} for {self!r}")

        length = self.rule.length(k)
        vector = vec_scale(self.direction, length)

        if self.basis_type == BasisType.DIAGONAL_START_TO_END:
            end = snap_vertex(vec_add(self.start, vector), tolerance)
            return FoldSpec.from_end_points(self.start, end, FoldCover.FULL, tolerance)

        hinge_end = snap_vertex(vec_add(self.start, vector), tolerance)
        if self.full_cover:
            # Apex of a right-isosceles triangle over the hinge
            offset = vec_scale(rotate_vector(vector, 45), math.sqrt(2) / 2)
            right_offset = vec_scale(rotate_vector(vector, -45), math.sqrt(2) / 2)
        else:
            offset = rotate_vector(vector, 90)
            right_offset = rotate_vector(vector, -90)
        left_apex = snap_vertex(vec_add(self.start, offset), tolerance)
        right_apex = snap_vertex(vec_add(self.start, right_offset), tolerance)

        if self.right_to_left:
            spec = FoldSpec(right_apex, (hinge_end, self.start), left_apex)
        else:
            spec = FoldSpec(left_apex, (self.start, hinge_end), right_apex)
        spec.validate()
        return spec

    def all_fold_specs(self, limit: Optional[int] = None) -> list[FoldSpec]:
        return [self.at_multiplier(k) for k in range(1, self.max_multiplier(limit) + 1)]


def detect_along_segment(
    from_vertex: Point,
    to_vertex: Point,
    right_to_left: bool = False,
    full_cover: bool = True
) -> Optional[FoldSpecBasis]:
    """
    Find the fold family whose hinge runs along a segment.

    Args:
        from_vertex: Segment start, where the hinges are anchored
        to_vertex: Segment end
        right_to_left: Put the near apex on the right of the segment
        full_cover: Full-cover flaps if True, half covers otherwise

    Returns:
        The basis, or None when no fold of magnitude >= 1 fits.

    Raises:
        InvalidInput: If from_vertex is off-lattice or the segment is
            neither axis-aligned nor diagonal.
    """
    segment = vec_sub(to_vertex, from_vertex)
    rule = valid_hinge_lengths(from_vertex, segment, full_cover)
    if rule is None:
        return None

    length = vec_length(segment)
    if rule.max_k(length) < 1:
        return None

    basis_type = BasisType.HINGE_RIGHT_TO_LEFT if right_to_left else BasisType.HINGE_LEFT_TO_RIGHT
    return FoldSpecBasis(
        start=(float(from_vertex[0]), float(from_vertex[1])),
        direction=vec_normalize(segment),
        rule=rule,
        max_length=length,
        full_cover=full_cover,
        basis_type=basis_type,
    )


def _ring(polygon: Polygon | Iterable[Point]) -> list[Point]:
    return [(float(x), float(y)) for x, y in polygon]


def get_all_bases(
    polygon: Polygon | Iterable[Point],
    clockwise: bool = False,
    full_cover: bool = True
) -> list[FoldSpecBasis]:
    """
    Every fold family along the boundary of a polygon.

    The ring is walked in the requested winding. Walking CCW keeps the near
    apex on the left (inside); walking CW flips every basis right-to-left so
    the near apex again lands inside.
    """
    ring = _ring(polygon)
    ring = ensure_cw(ring) if clockwise else ensure_ccw(ring)

    bases = []
    for i, from_vertex in enumerate(ring):
        to_vertex = ring[(i + 1) % len(ring)]
        if points_equal(from_vertex, to_vertex):
            continue
        try:
            basis = detect_along_segment(from_vertex, to_vertex, right_to_left=clockwise, full_cover=full_cover)
        except InvalidInput as e:
            logger.debug("Skipping edge %s -> %s: %s", from_vertex, to_vertex, e)
            continue
        if basis is not None:
            bases.append(basis)
    return bases


def get_all_full_cover_contractions(polygon: Polygon | Iterable[Point]) -> list[FoldSpecBasis]:
    """
    Diagonal fold families that cut a convex right-angle corner.

    The fold starts at the corner and points into the polygon along the
    corner bisector; its near triangle is the corner being removed.
    """
    ring = ensure_ccw(_ring(polygon))
    n = len(ring)
    bases = []

    for i, corner in enumerate(ring):
        prev_vertex = ring[i - 1]
        next_vertex = ring[(i + 1) % n]
        incoming = vec_sub(corner, prev_vertex)
        outgoing = vec_sub(next_vertex, corner)

        if not is_on_grid(corner) or not is_axis_aligned(incoming) or not is_axis_aligned(outgoing):
            continue
        # Convex right angle: perpendicular edges turning left
        if abs(vec_dot(incoming, outgoing)) > 1e-9 or vec_cross(incoming, outgoing) <= 0:
            continue

        max_length = min(vec_length(incoming), vec_length(outgoing)) * math.sqrt(2)
        rule = LinearEquation(constant=0.0, coefficient=math.sqrt(2))
        if rule.max_k(max_length) < 1:
            continue

        bases.append(FoldSpecBasis(
            start=corner,
            direction=vec_normalize(rotate_vector(outgoing, 45)),
            rule=rule,
            max_length=max_length,
            full_cover=True,
            basis_type=BasisType.DIAGONAL_START_TO_END,
        ))
    return bases
