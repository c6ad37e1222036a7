"""
Polygon boolean algebra used by the board and the verification engine.

The core only talks to the abstract ``PolygonAlgebra`` interface so the
backend can be swapped. ``ShapelyAlgebra`` is the default implementation.

All operations return new geometry and never modify their inputs.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Iterable

import numpy as np
import shapely
from shapely.geometry import MultiPolygon, Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry import box
from shapely.geometry.polygon import orient

from .geometry import BoundingBox, Point, Polygon
from .grid import SNAP_TOLERANCE


# Backend-specific geometry handle
Geometry = Any


class PolygonAlgebra(ABC):
    """Abstract 2D polygon algebra."""

    @abstractmethod
    def from_points(self, points: Iterable[Point]) -> Geometry:
        """Build a polygon from a vertex ring."""

    @abstractmethod
    def rectangle(self, bounds: BoundingBox) -> Geometry:
        """Build an axis-aligned rectangle."""

    @abstractmethod
    def empty(self) -> Geometry:
        """The empty polygon."""

    @abstractmethod
    def union(self, a: Geometry, b: Geometry) -> Geometry:
        ...

    @abstractmethod
    def subtract(self, a: Geometry, b: Geometry) -> Geometry:
        ...

    @abstractmethod
    def intersect(self, a: Geometry, b: Geometry) -> Geometry:
        ...

    @abstractmethod
    def area(self, geometry: Geometry) -> float:
        ...

    @abstractmethod
    def bounds(self, geometry: Geometry) -> BoundingBox:
        ...

    @abstractmethod
    def contains_point(self, geometry: Geometry, point: Point) -> bool:
        """True if the point lies inside or on the boundary."""

    @abstractmethod
    def has_contact(self, a: Geometry, b: Geometry) -> bool:
        """True if the two geometries overlap or touch (even at a single point)."""

    @abstractmethod
    def covers(self, a: Geometry, b: Geometry) -> bool:
        """True if no point of b lies outside a."""

    @abstractmethod
    def has_self_contact(self, geometry: Geometry) -> bool:
        """
        True if the region's perimeter touches itself.

        That is: the region falls apart into several pieces, encloses a hole,
        or has a boundary ring that is not simple.
        """

    @abstractmethod
    def canonicalize(self, geometry: Geometry) -> Geometry:
        """Snap to the lattice, drop redundant vertices and orient rings CCW."""

    @abstractmethod
    def exterior_rings(self, geometry: Geometry) -> list[Polygon]:
        """Outer boundary of every piece as plain polygons (CCW)."""

    @abstractmethod
    def interior_rings(self, geometry: Geometry) -> list[Polygon]:
        """Hole boundaries of every piece as plain polygons (CCW)."""

    def is_empty(self, geometry: Geometry, tolerance: float = 0.0) -> bool:
        return self.area(geometry) <= tolerance


class ShapelyAlgebra(PolygonAlgebra):
    """PolygonAlgebra backed by shapely (GEOS)."""

    def __init__(self, snap_tolerance: float = SNAP_TOLERANCE):
        self.snap_tolerance = snap_tolerance

    def from_points(self, points: Iterable[Point]) -> Geometry:
        return ShapelyPolygon([(float(x), float(y)) for x, y in points])

    def rectangle(self, bounds: BoundingBox) -> Geometry:
        return box(bounds.min_x, bounds.min_y, bounds.max_x, bounds.max_y)

    def empty(self) -> Geometry:
        return ShapelyPolygon()

    def union(self, a: Geometry, b: Geometry) -> Geometry:
        return a.union(b)

    def subtract(self, a: Geometry, b: Geometry) -> Geometry:
        return a.difference(b)

    def intersect(self, a: Geometry, b: Geometry) -> Geometry:
        return a.intersection(b)

    def area(self, geometry: Geometry) -> float:
        return float(geometry.area)

    def bounds(self, geometry: Geometry) -> BoundingBox:
        if geometry.is_empty:
            return BoundingBox(0, 0, 0, 0)
        min_x, min_y, max_x, max_y = geometry.bounds
        return BoundingBox(min_x, min_y, max_x, max_y)

    def contains_point(self, geometry: Geometry, point: Point) -> bool:
        return geometry.covers(ShapelyPoint(point))

    def has_contact(self, a: Geometry, b: Geometry) -> bool:
        return a.intersects(b)

    def covers(self, a: Geometry, b: Geometry) -> bool:
        return a.covers(b)

    def has_self_contact(self, geometry: Geometry) -> bool:
        polygons = _polygonal_parts(geometry)
        if len(polygons) != 1:
            return True
        polygon = polygons[0]
        if len(polygon.interiors) > 0:
            return True
        return not (polygon.exterior.is_simple and polygon.is_valid)

    def canonicalize(self, geometry: Geometry) -> Geometry:
        tolerance = self.snap_tolerance

        def snap(coords: np.ndarray) -> np.ndarray:
            snapped = np.floor(coords * 2 + 0.5) / 2
            return np.where(np.abs(snapped - coords) <= tolerance, snapped, coords) + 0.0

        parts = []
        for polygon in _polygonal_parts(shapely.transform(geometry, snap)):
            # Zero tolerance only drops collinear vertices
            polygon = polygon.simplify(0)
            if polygon.is_empty or polygon.area <= 0:
                continue
            parts.append(orient(polygon, sign=1.0))

        if not parts:
            return self.empty()
        if len(parts) == 1:
            return parts[0]
        return MultiPolygon(parts)

    def exterior_rings(self, geometry: Geometry) -> list[Polygon]:
        rings = []
        for polygon in _polygonal_parts(geometry):
            rings.append(Polygon(tuple(polygon.exterior.coords)).oriented(ccw=True))
        return rings

    def interior_rings(self, geometry: Geometry) -> list[Polygon]:
        return [
            Polygon(tuple(interior.coords)).oriented(ccw=True)
            for polygon in _polygonal_parts(geometry)
            for interior in polygon.interiors
        ]


def _polygonal_parts(geometry: Geometry) -> list[ShapelyPolygon]:
    """Non-empty polygons contained in any shapely geometry."""
    if geometry.is_empty:
        return []
    if isinstance(geometry, ShapelyPolygon):
        return [geometry]
    if isinstance(geometry, MultiPolygon):
        return [p for p in geometry.geoms if not p.is_empty]
    if hasattr(geometry, "geoms"):
        # Collections from intersections can mix in points and lines
        parts = []
        for part in geometry.geoms:
            parts.extend(_polygonal_parts(part))
        return parts
    return []
