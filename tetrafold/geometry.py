"""
Plain-data 2D geometry shared by the lattice, fold and board modules.

Everything here works on ``(x, y)`` tuples so it can be handed to renderers
and tests without pulling in the polygon algebra backend.

Coordinates are mathematical (y axis up); positive angles rotate
counter-clockwise.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Iterable


# Type aliases
Point = tuple[float, float]
Vector = tuple[float, float]


# =============================================================================
# Vector helpers
# =============================================================================

def vec_add(a: Vector, b: Vector) -> Vector:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Vector, b: Vector) -> Vector:
    return (a[0] - b[0], a[1] - b[1])


def vec_scale(v: Vector, factor: float) -> Vector:
    return (v[0] * factor, v[1] * factor)


def vec_dot(a: Vector, b: Vector) -> float:
    return a[0] * b[0] + a[1] * b[1]


def vec_cross(a: Vector, b: Vector) -> float:
    """Z component of the 3D cross product of two planar vectors."""
    return a[0] * b[1] - a[1] * b[0]


def vec_length(v: Vector) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1])


def vec_normalize(v: Vector) -> Vector:
    """Return the unit vector along v."""
    length = vec_length(v)
    if length < 1e-12:
        raise ValueError("Cannot normalize a zero vector")
    return (v[0] / length, v[1] / length)


def rotate_vector(v: Vector, degrees: float) -> Vector:
    """
    Rotate a vector about the origin.

    Quarter turns are computed exactly; other angles go through cos/sin and
    carry the usual floating point noise.
    """
    quarter = degrees / 90.0
    if quarter == int(quarter):
        turns = int(quarter) % 4
        x, y = v
        if turns == 0:
            return (x, y)
        if turns == 1:
            return (-y, x)
        if turns == 2:
            return (-x, -y)
        return (y, -x)

    angle = math.radians(degrees)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return (
        v[0] * cos_a - v[1] * sin_a,
        v[0] * sin_a + v[1] * cos_a
    )


# =============================================================================
# Polygon functions
# =============================================================================

def signed_area(polygon: Iterable[Point]) -> float:
    """
    Calculate signed area of polygon using shoelace formula.

    Returns:
        Positive for CCW winding, negative for CW winding.
    """
    points = list(polygon)
    n = len(points)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i][0] * points[j][1]
        area -= points[j][0] * points[i][1]
    return area / 2.0


def ensure_ccw(polygon: Iterable[Point]) -> list[Point]:
    """Ensure polygon has counter-clockwise winding order."""
    points = list(polygon)
    if signed_area(points) < 0:
        return list(reversed(points))
    return points


def ensure_cw(polygon: Iterable[Point]) -> list[Point]:
    """Ensure polygon has clockwise winding order."""
    points = list(polygon)
    if signed_area(points) > 0:
        return list(reversed(points))
    return points


def points_equal(p1: Point, p2: Point, eps: float = 1e-9) -> bool:
    """Check if two points are equal within epsilon tolerance."""
    return abs(p1[0] - p2[0]) < eps and abs(p1[1] - p2[1]) < eps


def polygon_centroid(polygon: Iterable[Point]) -> Point:
    """Vertex average of a polygon (exact centroid for triangles)."""
    points = list(polygon)
    if len(points) == 0:
        return (0.0, 0.0)
    cx = sum(v[0] for v in points) / len(points)
    cy = sum(v[1] for v in points) / len(points)
    return (cx, cy)


# =============================================================================
# Data classes
# =============================================================================

@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True)
class Polygon:
    """A simple 2D polygon; the closing edge back to the first vertex is implicit."""
    vertices: tuple[Point, ...]

    def __post_init__(self):
        vertices = tuple((float(x), float(y)) for x, y in self.vertices)
        if len(vertices) > 1 and points_equal(vertices[0], vertices[-1]):
            vertices = vertices[:-1]
        object.__setattr__(self, "vertices", vertices)

    def __len__(self):
        return len(self.vertices)

    def __getitem__(self, index):
        return self.vertices[index]

    def __iter__(self):
        return iter(self.vertices)

    @property
    def centroid(self) -> Point:
        return polygon_centroid(self.vertices)

    @property
    def signed_area(self) -> float:
        return signed_area(self.vertices)

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    @property
    def is_ccw(self) -> bool:
        return self.signed_area > 0

    def oriented(self, ccw: bool = True) -> Polygon:
        """Return a copy with the requested winding."""
        if ccw:
            return Polygon(tuple(ensure_ccw(self.vertices)))
        return Polygon(tuple(ensure_cw(self.vertices)))
