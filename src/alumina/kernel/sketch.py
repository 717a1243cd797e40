"""
Planar shape values for the alumina kernel.

A :class:`Sketch` is a region of the XY plane backed by shapely polygons
(possibly with holes), plus a winding sense: ``+1`` for the usual
counter-clockwise outlines, ``-1`` once the sketch has been inverted.
Lifting an inverted sketch into 3-D produces an inside-out solid.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple
import math

import shapely
from shapely import affinity
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.ops import unary_union

Point2D = Tuple[float, float]


def _polygons_of(geometry: BaseGeometry) -> List[Polygon]:
    """Extract the non-empty polygons of an arbitrary shapely geometry."""
    if geometry is None or geometry.is_empty:
        return []
    if isinstance(geometry, Polygon):
        return [geometry]
    if hasattr(geometry, "geoms"):
        polys: List[Polygon] = []
        for part in geometry.geoms:
            polys.extend(_polygons_of(part))
        return polys
    return []


class Sketch:
    """A planar region made of polygons with holes."""

    __slots__ = ("_polygons", "_winding")

    def __init__(self, geometry: BaseGeometry = None, winding: int = 1):
        self._winding = -1 if winding < 0 else 1
        sign = float(self._winding)
        self._polygons: Tuple[Polygon, ...] = tuple(
            orient(p, sign=sign) for p in _polygons_of(geometry) if p.area > 0.0
        )

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]],
                    holes: Iterable[Sequence[Sequence[float]]] = ()) -> "Sketch":
        """Build a sketch from one outline (and optional hole outlines)."""
        outline = [(float(p[0]), float(p[1])) for p in points]
        inner = [[(float(p[0]), float(p[1])) for p in hole] for hole in holes]
        poly = Polygon(outline, inner)
        if not poly.is_valid:
            poly = shapely.make_valid(poly)
        return cls(poly)

    # --- queries ---

    @property
    def polygons(self) -> Tuple[Polygon, ...]:
        return self._polygons

    @property
    def geometry(self) -> BaseGeometry:
        return MultiPolygon(list(self._polygons))

    @property
    def winding(self) -> int:
        return self._winding

    @property
    def is_empty(self) -> bool:
        return not self._polygons

    @property
    def area(self) -> float:
        return float(sum(p.area for p in self._polygons))

    def bounds(self) -> Tuple[float, float, float, float]:
        """``(minx, miny, maxx, maxy)``; an empty sketch has zero extent."""
        if not self._polygons:
            return (0.0, 0.0, 0.0, 0.0)
        return self.geometry.bounds

    def rings(self) -> List[Tuple[List[Point2D], List[List[Point2D]]]]:
        """Open outlines per polygon: ``[(exterior, [holes...]), ...]``."""
        result = []
        for p in self._polygons:
            exterior = list(p.exterior.coords)[:-1]
            holes = [list(r.coords)[:-1] for r in p.interiors]
            result.append((exterior, holes))
        return result

    def __len__(self) -> int:
        return len(self._polygons)

    def __repr__(self) -> str:
        return f"Sketch({len(self._polygons)} polygons, area={self.area:g})"

    def _with(self, geometry: BaseGeometry) -> "Sketch":
        return Sketch(geometry, self._winding)

    # --- booleans ---

    def union(self, other: "Sketch") -> "Sketch":
        return self._with(unary_union([self.geometry, other.geometry]))

    def difference(self, other: "Sketch") -> "Sketch":
        return self._with(self.geometry.difference(other.geometry))

    def intersection(self, other: "Sketch") -> "Sketch":
        return self._with(self.geometry.intersection(other.geometry))

    # --- transforms ---

    def translate(self, x: float, y: float, z: float = 0.0) -> "Sketch":
        """Move the sketch in its plane; ``z`` is ignored."""
        return self._with(affinity.translate(self.geometry, xoff=x, yoff=y))

    def rotate(self, degrees: float) -> "Sketch":
        """Rotate counter-clockwise about the sketch origin."""
        return self._with(affinity.rotate(self.geometry, degrees, origin=(0.0, 0.0)))

    def scale(self, x: float, y: float, z: float = 1.0) -> "Sketch":
        """Scale about the sketch origin; ``z`` is ignored."""
        return self._with(affinity.scale(self.geometry, xfact=x, yfact=y, origin=(0.0, 0.0)))

    def mirror(self, normal: Sequence[float], offset: float = 0.0) -> "Sketch":
        """
        Reflect across the line ``normal . p == offset``; only the x and y
        components of ``normal`` are used and they must not both be zero.
        """
        nx, ny = float(normal[0]), float(normal[1])
        length = math.hypot(nx, ny)
        nx, ny = nx / length, ny / length
        matrix = [1.0 - 2.0 * nx * nx, -2.0 * nx * ny,
                  -2.0 * nx * ny, 1.0 - 2.0 * ny * ny,
                  2.0 * offset * nx, 2.0 * offset * ny]
        return self._with(affinity.affine_transform(self.geometry, matrix))

    def center(self) -> "Sketch":
        """Move the bounding box center to the origin."""
        minx, miny, maxx, maxy = self.bounds()
        return self.translate(-(minx + maxx) / 2.0, -(miny + maxy) / 2.0)

    def float_to_floor(self) -> "Sketch":
        """Move the sketch along y so its lowest point rests on y = 0."""
        _, miny, _, _ = self.bounds()
        return self.translate(0.0, -miny)

    def inverse(self) -> "Sketch":
        """Reverse the winding of every outline."""
        return Sketch(self.geometry, -self._winding)
