"""
The board: sole owner of every shape polygon and lock region.

Shapes change only through ``Board.apply_fold``. Callers are expected to run
``verify_fold`` first; applying a fold the verifier rejects leaves the shape
invariants undefined.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from .config import BoardConfig
from .errors import InvalidInput, InvalidLatticeState
from .fold_spec import FOLD_TEMPLATES, FoldAction, FoldSpec, ShapeChange
from .geometry import BoundingBox, Point, Polygon
from .polygon_algebra import Geometry, PolygonAlgebra, ShapelyAlgebra
from .tetrakis import Background, CellState, Locked, Owned, TriangleIndex, all_triangle_indices, triangle_centroid

logger = logging.getLogger(__name__)


ShapeUpdateListener = Callable[["Board", int], None]


@dataclass(frozen=True)
class LockRegion:
    """A permanently forbidden area tagged with the shape id that owns it."""
    owner_id: int
    geometry: Geometry = field(compare=False)


@dataclass(frozen=True)
class ShapeContacts:
    """Ids of the shapes and lock owners touching some query geometry."""
    shape_ids: tuple[int, ...] = ()
    lock_owner_ids: tuple[int, ...] = ()

    @property
    def is_clear(self) -> bool:
        return not self.shape_ids and not self.lock_owner_ids


@dataclass(frozen=True)
class BoardSnapshot:
    """
    Plain-data copy of the board for renderers and debugging.

    Attributes:
        bounds: Board bounds
        shapes: Shape id -> outer ring of every piece
        locks: (owner id, outer ring) per lock piece
        holes: Shape id -> hole rings, only for shapes that have holes
    """
    bounds: BoundingBox
    shapes: dict[int, list[Polygon]]
    locks: list[tuple[int, Polygon]]
    holes: dict[int, list[Polygon]] = field(default_factory=dict)

    @property
    def shape_count(self) -> int:
        return len(self.shapes)


class Board:
    """
    In-memory store of shapes and lock regions on a Tetrakis lattice.

    A board is owned by a single thread of control for its whole lifetime.
    """

    def __init__(self, config: Optional[BoardConfig] = None, algebra: Optional[PolygonAlgebra] = None):
        self.config = config if config is not None else BoardConfig()
        errors = self.config.validate()
        if errors:
            raise InvalidInput("Invalid board configuration: " + "; ".join(errors))
        self.algebra = algebra if algebra is not None else ShapelyAlgebra(self.config.snap_tolerance)
        self._shapes: dict[int, Geometry] = {}
        self._locks: list[LockRegion] = []
        self._listeners: list[ShapeUpdateListener] = []

    def __len__(self):
        return len(self._shapes)

    def __contains__(self, shape_id):
        return shape_id in self._shapes

    def __repr__(self):
        return f"Board(shapes={sorted(self._shapes)}, locks={len(self._locks)}, bounds={self.bounds})"

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def bounds(self) -> BoundingBox:
        return self.config.bounding_box

    @property
    def area_tolerance(self) -> float:
        return self.config.area_tolerance

    @property
    def shapes(self) -> Mapping[int, Geometry]:
        """Read-only view of the shape geometries keyed by id."""
        return MappingProxyType(self._shapes)

    @property
    def locks(self) -> tuple[LockRegion, ...]:
        return tuple(self._locks)

    def shape_ids(self) -> list[int]:
        return sorted(self._shapes)

    def has_shape(self, shape_id: int) -> bool:
        return shape_id in self._shapes

    def get_shape(self, shape_id: int) -> Geometry:
        """
        Geometry of a shape.

        Raises:
            InvalidLatticeState: If the shape does not exist.
        """
        try:
            return self._shapes[shape_id]
        except KeyError:
            raise InvalidLatticeState(f"Shape with id {shape_id} does not exist") from None

    def shape_outline(self, shape_id: int) -> Polygon:
        """Outer boundary of a shape as a CCW polygon (largest piece if it is split)."""
        rings = self.algebra.exterior_rings(self.get_shape(shape_id))
        return max(rings, key=lambda ring: ring.area)

    def shape_area(self, shape_id: int) -> float:
        return self.algebra.area(self.get_shape(shape_id))

    def locks_owned_by(self, owner_id: int) -> list[LockRegion]:
        return [lock for lock in self._locks if lock.owner_id == owner_id]

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def to_geometry(self, polygon: Polygon | Iterable[Point]) -> Geometry:
        """Convert a plain polygon (or vertex list) into backend geometry."""
        return self.algebra.from_points(list(polygon))

    def add_shape(self, shape_id: int, polygon: Polygon | Iterable[Point]) -> None:
        """
        Register a new shape.

        Raises:
            InvalidLatticeState: If the id is already in use.
            InvalidInput: If the polygon has no area.
        """
        if shape_id in self._shapes:
            raise InvalidLatticeState(f"Shape with id {shape_id} already exists")
        geometry = self.algebra.canonicalize(self.to_geometry(polygon))
        if self.algebra.is_empty(geometry, self.area_tolerance):
            raise InvalidInput(f"Shape {shape_id} has no area")
        self._shapes[shape_id] = geometry
        logger.info("Added shape %s (area %.2f)", shape_id, self.algebra.area(geometry))

    def add_lock(self, owner_id: int, polygon: Polygon | Iterable[Point]) -> LockRegion:
        """Register an immutable lock region owned by a shape id."""
        geometry = self.algebra.canonicalize(self.to_geometry(polygon))
        if self.algebra.is_empty(geometry, self.area_tolerance):
            raise InvalidInput(f"Lock region for owner {owner_id} has no area")
        lock = LockRegion(owner_id, geometry)
        self._locks.append(lock)
        logger.debug("Added lock region for owner %s", owner_id)
        return lock

    def add_shape_update_listener(self, listener: ShapeUpdateListener) -> None:
        self._listeners.append(listener)

    def remove_shape_update_listener(self, listener: ShapeUpdateListener) -> None:
        self._listeners = [l for l in self._listeners if l is not listener]

    def _notify_shape_update(self, shape_id: int) -> None:
        for listener in list(self._listeners):
            listener(self, shape_id)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def apply_fold(self, shape_id: int, fold_spec: FoldSpec, action: FoldAction | str) -> None:
        """
        Apply a fold to a shape.

        The action template decides, for the near and far triangle, whether
        the triangle is added to the shape, removed from it or left alone.

        Raises:
            InvalidLatticeState: On an unknown action, or a non-Create action
                on a shape that does not exist.
        """
        action = FoldAction.parse(action)
        template = FOLD_TEMPLATES[action]
        if action != FoldAction.CREATE and shape_id not in self._shapes:
            raise InvalidLatticeState(
                f"Shape with id {shape_id} does not exist, cannot apply {action.value}"
            )

        triangles = fold_spec.to_triangles()
        logger.debug("Applying %s to shape %s with %r", action.value, shape_id, fold_spec)
        self._apply_triangle_update(shape_id, triangles.near, template.near)
        self._apply_triangle_update(shape_id, triangles.far, template.far)
        self._notify_shape_update(shape_id)

    def _apply_triangle_update(self, shape_id: int, triangle: Polygon, change: ShapeChange) -> None:
        if change == ShapeChange.KEEP:
            return

        algebra = self.algebra
        triangle_geometry = algebra.from_points(triangle.vertices)
        shape = self._shapes.get(shape_id)

        if change == ShapeChange.REMOVE:
            if shape is None:
                # The other triangle of this fold already emptied the shape
                logger.debug("Shape %s already gone, nothing to remove", shape_id)
                return
            result = algebra.subtract(shape, triangle_geometry)
            if algebra.is_empty(result, self.area_tolerance):
                del self._shapes[shape_id]
                logger.info("Shape %s shrunk to nothing, removed it", shape_id)
            else:
                self._shapes[shape_id] = algebra.canonicalize(result)
                logger.debug(
                    "Shape %s shrunk: area %.2f -> %.2f",
                    shape_id, algebra.area(shape), algebra.area(result)
                )
        elif change == ShapeChange.ADD:
            if shape is None:
                self._shapes[shape_id] = algebra.canonicalize(triangle_geometry)
                logger.info("Created shape %s", shape_id)
            else:
                result = algebra.union(shape, triangle_geometry)
                self._shapes[shape_id] = algebra.canonicalize(result)
                logger.debug(
                    "Shape %s grew: area %.2f -> %.2f",
                    shape_id, algebra.area(shape), algebra.area(result)
                )
        else:
            raise InvalidLatticeState(f"Unrecognized shape change: {change!r}")

    # -------------------------------------------------------------------------
    # Contact queries
    # -------------------------------------------------------------------------

    def find_polygon_contacts(self, polygon: Polygon | Iterable[Point]) -> ShapeContacts:
        """Ids of shapes and lock owners that overlap or touch the polygon."""
        query = self.to_geometry(polygon)
        shape_ids = [
            shape_id for shape_id, shape in self._shapes.items()
            if self.algebra.has_contact(shape, query)
        ]
        lock_ids = [
            lock.owner_id for lock in self._locks
            if self.algebra.has_contact(lock.geometry, query)
        ]
        return ShapeContacts(tuple(shape_ids), tuple(lock_ids))

    def find_point_contacts(self, point: Point) -> ShapeContacts:
        """Ids of shapes and lock owners containing the point (boundary included)."""
        shape_ids = [
            shape_id for shape_id, shape in self._shapes.items()
            if self.algebra.contains_point(shape, point)
        ]
        lock_ids = [
            lock.owner_id for lock in self._locks
            if self.algebra.contains_point(lock.geometry, point)
        ]
        return ShapeContacts(tuple(shape_ids), tuple(lock_ids))

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def cell_state(self, index: TriangleIndex) -> CellState:
        """
        State of one lattice triangle, sampled at its centroid.

        Locks take precedence over shapes.
        """
        contacts = self.find_point_contacts(triangle_centroid(index))
        if contacts.lock_owner_ids:
            return Locked(contacts.lock_owner_ids[0])
        if contacts.shape_ids:
            return Owned(contacts.shape_ids[0])
        return Background()

    def rasterize(self, rect: Optional[BoundingBox] = None) -> dict[TriangleIndex, CellState]:
        """Cell state of every triangle in rect (the board bounds by default)."""
        rect = rect if rect is not None else self.bounds
        return {index: self.cell_state(index) for index in all_triangle_indices(rect)}

    def snapshot(self) -> BoardSnapshot:
        """Copy the board into plain point data."""
        shapes = {
            shape_id: self.algebra.exterior_rings(shape)
            for shape_id, shape in sorted(self._shapes.items())
        }
        locks = [
            (lock.owner_id, ring)
            for lock in self._locks
            for ring in self.algebra.exterior_rings(lock.geometry)
        ]
        holes = {}
        for shape_id, shape in sorted(self._shapes.items()):
            interiors = self.algebra.interior_rings(shape)
            if interiors:
                holes[shape_id] = interiors
        return BoardSnapshot(bounds=self.bounds, shapes=shapes, locks=locks, holes=holes)
