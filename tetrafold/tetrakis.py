"""
Discrete per-cell view of the Tetrakis tiling.

Each unit cell (x, y) spans [x, x+1] x [y, y+1] and holds four triangles
named after the cell side they rest on. The board itself stores continuous
polygons; this module is the bridge used to rasterize them into per-triangle
states.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .errors import InvalidInput
from .geometry import BoundingBox, Point, Polygon, polygon_centroid, rotate_vector
from .grid import integral_bounds, is_on_grid


class Cardinal(str, Enum):
    """Triangle side tags, in clockwise order starting at the top side."""
    N = "N"
    E = "E"
    S = "S"
    W = "W"

    @property
    def rotation(self) -> int:
        """Clockwise rotation (degrees) that maps the N triangle onto this one."""
        return -90 * CARDINALS.index(self)


CARDINALS = [Cardinal.N, Cardinal.E, Cardinal.S, Cardinal.W]

# N triangle of the cell at the origin, CCW
_N_TEMPLATE: tuple[Point, ...] = ((1.0, 1.0), (0.0, 1.0), (0.5, 0.5))
_CELL_CENTER: Point = (0.5, 0.5)


@dataclass(frozen=True)
class TriangleIndex:
    """Address of one triangle: the cell's lower-left corner plus a side tag."""
    cell: tuple[int, int]
    side: Cardinal

    def key(self) -> str:
        return f"{self.cell[0]},{self.cell[1]},{self.side.value}"

    @classmethod
    def from_key(cls, key: str) -> TriangleIndex:
        parts = key.split(",")
        if len(parts) != 3:
            raise InvalidInput(f"Invalid triangle index key: {key}")
        try:
            cell = (int(parts[0]), int(parts[1]))
            side = Cardinal(parts[2])
        except ValueError:
            raise InvalidInput(f"Invalid triangle index key: {key}") from None
        return cls(cell, side)


def make_triangle_polygon(index: TriangleIndex) -> Polygon:
    """Build the (CCW) polygon of a triangle."""
    cx, cy = index.cell
    vertices = []
    for x, y in _N_TEMPLATE:
        rx, ry = rotate_vector((x - _CELL_CENTER[0], y - _CELL_CENTER[1]), index.side.rotation)
        vertices.append((rx + _CELL_CENTER[0] + cx, ry + _CELL_CENTER[1] + cy))
    return Polygon(tuple(vertices))


def triangle_centroid(index: TriangleIndex) -> Point:
    return polygon_centroid(make_triangle_polygon(index).vertices)


def cell_vertices(cell: tuple[int, int]) -> list[Point]:
    """The five vertices of a single cell: four corners and the center."""
    if not is_on_grid(cell):
        raise InvalidInput(f"Cell coordinates must be integers, given ({cell[0]}, {cell[1]})")
    x, y = float(cell[0]), float(cell[1])
    return [
        (x, y),
        (x + 1, y),
        (x + 1, y + 1),
        (x, y + 1),
        (x + 0.5, y + 0.5),
    ]


def all_triangle_indices(rect: BoundingBox) -> list[TriangleIndex]:
    """Every triangle of every cell inside an integer rectangle."""
    min_x, min_y, max_x, max_y = integral_bounds(rect)
    return [
        TriangleIndex((x, y), side)
        for x in range(min_x, max_x)
        for y in range(min_y, max_y)
        for side in CARDINALS
    ]


# =============================================================================
# Cell states
# =============================================================================

@dataclass(frozen=True)
class Background:
    """Triangle not covered by any shape or lock."""


@dataclass(frozen=True)
class Locked:
    """Triangle inside a lock region."""
    owner_id: int


@dataclass(frozen=True)
class Owned:
    """Triangle covered by a shape."""
    shape_id: int


CellState = Union[Background, Locked, Owned]
