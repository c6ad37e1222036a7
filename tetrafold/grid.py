r"""
Lattice coordinate utilities for the Tetrakis square tiling.

The tiling has two vertex families:

- corners: both coordinates are integers, e.g. (3, 4)
- centers: both coordinates are integers plus one half, e.g. (3.5, 4.5)

A point with exactly one half-integer coordinate sits in the middle of a
square edge and is not a vertex of the tiling.

       (0,1)+-------+(1,1)
            |\     /|
            | \ N / |
            |W  x  E|      x = center (0.5, 0.5)
            | / S \ |
            |/     \|
       (0,0)+-------+(1,0)
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import math
from typing import Iterable, Optional

from .errors import InvalidInput
from .geometry import (
    BoundingBox,
    Point,
    Vector,
    rotate_vector,
    vec_dot,
    vec_length,
    vec_normalize,
    vec_scale,
    vec_sub,
)


# Absolute tolerance used when snapping floating point noise onto the lattice
SNAP_TOLERANCE = 0.01

# Tolerance for deciding a vector is axis-aligned or diagonal
DIRECTION_EPS = 1e-9


class FoldCover(str, Enum):
    """How much of the 90 degree wedge at the start vertex a fold covers."""
    FULL = "Full"
    LEFT = "Left"
    RIGHT = "Right"

    @classmethod
    def parse(cls, value) -> FoldCover:
        """Accept an enum member or its string value."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidInput(f"Invalid fold cover: {value!r}") from None


FOLD_COVERS = list(FoldCover)


@dataclass(frozen=True)
class LinearEquation:
    """Hinge length rule: length(k) = constant + coefficient * k."""
    constant: float
    coefficient: float

    def length(self, k: int) -> float:
        return self.constant + self.coefficient * k

    def max_k(self, max_length: float) -> int:
        """Largest k whose length fits within max_length (0 if none does)."""
        return max(0, math.floor((max_length - self.constant) / self.coefficient + 0.001))


# =============================================================================
# Predicates
# =============================================================================

def _is_integral(value: float) -> bool:
    return float(value).is_integer()


def is_on_grid(point: Point) -> bool:
    """
    Check if both coordinates are integers.

    True for the corner family of the tiling (and for cell indices).
    Does not check bounds.
    """
    return _is_integral(point[0]) and _is_integral(point[1])


def is_half_integer_coordinate(point: Point) -> bool:
    """
    Check if both coordinates are multiples of one half.

    Note: this includes edge midpoints, which are not lattice vertices.
    """
    return _is_integral(point[0] * 2) and _is_integral(point[1] * 2)


def is_vertex_coordinate(point: Point) -> bool:
    """Check if the point is a corner or a center of the tiling."""
    if not is_half_integer_coordinate(point):
        return False
    if is_on_grid(point):
        return True
    # Rule out square edge midpoints (one integer, one half-integer coordinate)
    return not _is_integral(point[0]) and not _is_integral(point[1])


def is_close_to(x: float, target: float, abs_tol: float = 0.1) -> bool:
    """
    Floating point equality with absolute tolerance.

    The default of 0.1 is enough to tell lattice vertices apart.
    """
    return abs(x - target) < abs_tol


# =============================================================================
# Snapping
# =============================================================================

def _round_half_up(value: float) -> float:
    # Normalizes -0.0 to 0.0
    return math.floor(value + 0.5) + 0.0


def round_to_grid(point: Point) -> Point:
    """Round to the nearest integer point."""
    return (_round_half_up(point[0]), _round_half_up(point[1]))


def round_to_half_integers(point: Point) -> Point:
    """Round to the nearest point whose coordinates are multiples of one half."""
    return (_round_half_up(point[0] * 2) / 2, _round_half_up(point[1] * 2) / 2)


def snap_vertex(point: Point, tolerance: float = SNAP_TOLERANCE) -> Point:
    """
    Snap floating point noise onto the half-integer lattice.

    The point is only moved if both coordinates are within tolerance of the
    rounded values; otherwise it is returned unchanged so validation can
    reject it.
    """
    snapped = round_to_half_integers(point)
    if abs(snapped[0] - point[0]) <= tolerance and abs(snapped[1] - point[1]) <= tolerance:
        return snapped
    return (float(point[0]), float(point[1]))


def snap_to_trit(value: float) -> int:
    """Sign of value, or 0 when it is within 0.1 of zero."""
    if value > 0.1:
        return 1
    elif value < -0.1:
        return -1
    return 0


# =============================================================================
# Enumeration
# =============================================================================

def square_diagonal_rays(vertex: Point, cover: FoldCover | str = FoldCover.FULL) -> list[Vector]:
    """
    Return the direction vectors that start a valid fold from a vertex.

    The ray length is the smallest valid step in that direction: end points
    ``vertex + k * ray`` produce lattice-aligned folds for every k >= 1.
    Partial covers need an axis step of 2 so the segment midpoint is a vertex.

    Raises:
        InvalidInput: If the vertex is not on the lattice.
    """
    cover = FoldCover.parse(cover)
    if not is_vertex_coordinate(vertex):
        raise InvalidInput(f"Invalid vertex provided ({vertex[0]}, {vertex[1]})")

    axis_length = 1 if cover == FoldCover.FULL else 2
    template_rays = [(axis_length, 0), (1, 1)]

    # The problem is symmetric under quarter turns
    rays = []
    for angle in (0, 90, 180, 270):
        for ray in template_rays:
            rays.append(round_to_half_integers(rotate_vector(ray, angle)))
    return rays


def integral_bounds(rect: BoundingBox) -> tuple[int, int, int, int]:
    values = (rect.min_x, rect.min_y, rect.max_x, rect.max_y)
    if not all(_is_integral(v) for v in values):
        raise InvalidInput(f"Rectangle must have integer coordinates: {rect}")
    return tuple(int(v) for v in values)


def all_vertices(rect: BoundingBox, include_centers: bool = False) -> list[Point]:
    """
    Enumerate the lattice vertices of an integer rectangle, each exactly once.

    Args:
        rect: Rectangle with integer coordinates
        include_centers: Also emit the center vertex of every cell

    Returns:
        Corner vertices on or inside the rectangle (plus cell centers if
        requested), in row-major cell order.
    """
    min_x, min_y, max_x, max_y = integral_bounds(rect)
    vertices: list[Point] = []

    for y in range(min_y, max_y):
        for x in range(min_x, max_x):
            # Shared corners are emitted by exactly one cell: the first cell
            # owns its lower-left corner, the first row owns lower-right
            # corners, the first column owns upper-left corners and every
            # cell owns its upper-right corner.
            if x == min_x and y == min_y:
                vertices.append((float(x), float(y)))
            if y == min_y:
                vertices.append((float(x + 1), float(y)))
            if x == min_x:
                vertices.append((float(x), float(y + 1)))
            vertices.append((float(x + 1), float(y + 1)))
            if include_centers:
                vertices.append((x + 0.5, y + 0.5))

    return vertices


# =============================================================================
# Hinge lengths
# =============================================================================

def is_axis_aligned(vector: Vector) -> bool:
    return abs(vector[0]) < DIRECTION_EPS or abs(vector[1]) < DIRECTION_EPS


def is_diagonal(vector: Vector) -> bool:
    return abs(abs(vector[0]) - abs(vector[1])) < DIRECTION_EPS and not is_axis_aligned(vector)


def valid_hinge_lengths(origin: Point, vector: Vector, full_cover: bool) -> Optional[LinearEquation]:
    """
    Describe the hinge lengths that keep a fold on the lattice.

    Args:
        origin: Vertex where the hinge starts
        vector: Direction of the hinge (any length)
        full_cover: True for full-cover flaps (apex angle 90 degrees)

    Returns:
        The length rule, or None if no fold of this kind can start here.

    Raises:
        InvalidInput: If the origin is off-lattice or the vector is neither
            axis-aligned nor diagonal.
    """
    if not is_vertex_coordinate(origin):
        raise InvalidInput(f"Invalid origin coordinates: ({origin[0]}, {origin[1]})")
    if vec_length(vector) < DIRECTION_EPS:
        raise InvalidInput("Hinge vector cannot be zero")

    axis_aligned = is_axis_aligned(vector)
    if not axis_aligned and not is_diagonal(vector):
        raise InvalidInput(f"Vector not perfectly diagonal: ({vector[0]}, {vector[1]})")

    if not is_on_grid(origin):
        # Cell centers only have diagonal lattice lines through them
        if axis_aligned:
            raise InvalidInput(
                f"Only diagonal vectors are allowed at cell centers: "
                f"({origin[0]}, {origin[1]}) with vector ({vector[0]}, {vector[1]})"
            )
        if full_cover:
            # A full-cover apex sits at 45 degrees from the hinge, which
            # would need axis-aligned lines through the center
            return None
        # Half a diagonal reaches the next corner, then whole diagonals
        return LinearEquation(constant=-math.sqrt(2) / 2, coefficient=math.sqrt(2))

    if axis_aligned:
        return LinearEquation(constant=0.0, coefficient=1.0)
    return LinearEquation(constant=0.0, coefficient=math.sqrt(2))


# =============================================================================
# Ray picking
# =============================================================================

def distance_to_ray_squared(ray: Vector, point: Point) -> float:
    """
    Squared distance from a point to a ray starting at the origin.

    Points behind the origin measure their distance to the origin itself.
    """
    direction = vec_normalize(ray)
    projection = vec_dot(point, direction)
    if projection <= 0:
        return vec_dot(point, point)
    offset = vec_sub(point, vec_scale(direction, projection))
    return vec_dot(offset, offset)


def select_nearest_ray(rays: Iterable[Vector], point: Point) -> int:
    """
    Index of the ray closest to a point (relative to the ray origin).

    Returns -1 for an empty ray list.
    """
    nearest_index = -1
    min_distance = math.inf
    for index, ray in enumerate(rays):
        distance = distance_to_ray_squared(ray, point)
        if distance < min_distance:
            min_distance = distance
            nearest_index = index
    return nearest_index
