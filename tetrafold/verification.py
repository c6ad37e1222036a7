"""
Legality checks for candidate folds.

``verify_fold`` inspects the board without changing it and reports every
condition separately for the near and the far triangle, so callers can tell
why a candidate was rejected. A failing report is a normal result, not an
error.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Optional

from .board import Board, ShapeContacts
from .errors import InvalidLatticeState
from .fold_spec import FoldAction, FoldSpec
from .geometry import BoundingBox
from .polygon_algebra import Geometry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FoldVerification:
    """
    Per-condition outcome of a fold check.

    Attributes:
        action: The action that was checked
        near: Condition name -> passed, for the triangle at the start apex
        far: Condition name -> passed, for the triangle at the end apex
    """
    action: FoldAction
    near: dict[str, bool] = field(default_factory=dict)
    far: dict[str, bool] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return verification_all_ok(self)

    def failures(self) -> list[str]:
        """Names of the failed conditions, prefixed with their side."""
        failed = [f"near.{name}" for name, passed in self.near.items() if not passed]
        failed += [f"far.{name}" for name, passed in self.far.items() if not passed]
        return failed

    def as_dict(self) -> dict:
        return {"near": dict(self.near), "far": dict(self.far)}


def verification_all_ok(verification: FoldVerification) -> bool:
    """Collapse a report to a single verdict: True if every condition passed."""
    return all(verification.near.values()) and all(verification.far.values())


class _Checks:
    """Read-only geometric predicates over one board."""

    def __init__(self, board: Board, bounds: BoundingBox):
        self.board = board
        self.algebra = board.algebra
        self.tolerance = board.area_tolerance
        self.bounds_geometry = self.algebra.rectangle(bounds)

    def overlap_area(self, a: Geometry, b: Geometry) -> float:
        return self.algebra.area(self.algebra.intersect(a, b))

    def in_bounds(self, triangle: Geometry) -> bool:
        return self.algebra.covers(self.bounds_geometry, triangle)

    def clear_of_shapes(self, contacts: ShapeContacts, exclude: Optional[int] = None) -> bool:
        """No contact (touching included) with any shape except exclude."""
        return all(shape_id == exclude for shape_id in contacts.shape_ids)

    def clear_of_lock_contact(self, contacts: ShapeContacts) -> bool:
        """No contact (touching included) with any lock region."""
        return not contacts.lock_owner_ids

    def clear_of_lock_overlap(self, triangle: Geometry, owner_id: Optional[int] = None) -> bool:
        """No area overlap with lock regions (only those of owner_id if given)."""
        for lock in self.board.locks:
            if owner_id is not None and lock.owner_id != owner_id:
                continue
            if self.overlap_area(lock.geometry, triangle) > self.tolerance:
                return False
        return True

    def fully_contained(self, shape: Geometry, triangle: Geometry) -> bool:
        inside = self.overlap_area(shape, triangle)
        return abs(inside - self.algebra.area(triangle)) <= self.tolerance

    def is_single_piece(self, geometry: Geometry) -> bool:
        """True if nothing is left, or what is left is one polygon without holes."""
        geometry = self.algebra.canonicalize(geometry)
        if self.algebra.is_empty(geometry, self.tolerance):
            return True
        return not self.algebra.has_self_contact(geometry)


def verify_fold(
    board: Board,
    fold_spec: FoldSpec,
    action: FoldAction | str,
    shape_id: Optional[int] = None,
    bounds: Optional[BoundingBox] = None
) -> FoldVerification:
    """
    Check whether a fold may be applied to the board.

    Args:
        board: Board to check against (not modified)
        fold_spec: Candidate fold
        action: Create, Remove, Expand or Contract
        shape_id: Acting shape; required for every action but Create
        bounds: Playable area, defaults to the board bounds

    Returns:
        FoldVerification with one entry per condition and side.

    Raises:
        InvalidLatticeState: On an unknown action, or a non-Create action
            without an existing acting shape.
    """
    action = FoldAction.parse(action)
    checks = _Checks(board, bounds if bounds is not None else board.bounds)
    algebra = board.algebra

    triangles = fold_spec.to_triangles()
    near = algebra.from_points(triangles.near.vertices)
    far = algebra.from_points(triangles.far.vertices)

    if action == FoldAction.CREATE:
        near_report = _creation_conditions(checks, near, board.find_polygon_contacts(triangles.near))
        far_report = _creation_conditions(checks, far, board.find_polygon_contacts(triangles.far))
    else:
        if shape_id is None or not board.has_shape(shape_id):
            raise InvalidLatticeState(
                f"Shape with id {shape_id} does not exist, cannot verify {action.value}"
            )
        shape = board.get_shape(shape_id)

        if action == FoldAction.EXPAND:
            far_contacts = board.find_polygon_contacts(triangles.far)
            near_report = {
                "fully_contained": checks.fully_contained(shape, near),
                "clear_of_locks": checks.clear_of_lock_overlap(near, owner_id=shape_id),
            }
            far_report = {
                "no_perimeter_contact": not algebra.has_self_contact(
                    algebra.canonicalize(algebra.union(shape, far))
                ),
                "no_area_overlap": checks.overlap_area(shape, far) <= checks.tolerance,
                "clear_of_shapes": checks.clear_of_shapes(far_contacts, exclude=shape_id),
                "clear_of_locks": checks.clear_of_lock_contact(far_contacts),
                "in_bounds": checks.in_bounds(far),
            }
        elif action == FoldAction.REMOVE:
            near_report = {
                "fully_contained": checks.fully_contained(shape, near),
                "clear_of_locks": checks.clear_of_lock_overlap(near),
            }
            remainder = algebra.subtract(algebra.subtract(shape, near), far)
            far_report = {
                "fully_contained": checks.fully_contained(shape, far),
                "clear_of_locks": checks.clear_of_lock_overlap(far),
                "keeps_connected": checks.is_single_piece(remainder),
            }
        else:
            near_report = {
                "fully_contained": checks.fully_contained(shape, near),
                "clear_of_locks": checks.clear_of_lock_overlap(near),
                "keeps_connected": checks.is_single_piece(algebra.subtract(shape, near)),
            }
            far_report = {
                "fully_contained": checks.fully_contained(shape, far),
                "clear_of_locks": checks.clear_of_lock_overlap(far, owner_id=shape_id),
            }

    result = FoldVerification(action, near_report, far_report)
    if not result.ok:
        logger.debug("%s rejected for %r: %s", action.value, fold_spec, ", ".join(result.failures()))
    return result


def _creation_conditions(checks: _Checks, triangle: Geometry, contacts: ShapeContacts) -> dict[str, bool]:
    return {
        "clear_of_locks": checks.clear_of_lock_contact(contacts),
        "clear_of_shapes": checks.clear_of_shapes(contacts),
        "in_bounds": checks.in_bounds(triangle),
    }
