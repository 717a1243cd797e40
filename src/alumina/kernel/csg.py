"""
Constructive solid geometry on polygon soups using BSP trees.

Solids are lists of planar convex polygons with outward winding. A
boolean operation builds a BSP tree for each operand, clips each tree's
polygons against the other, and collects what survives. The approach is
the classic one (Naylor/Thibault, popularized by csg.js): simple, exact up
to the plane tolerance, and robust for closed inputs.

All tree walks are iterative so deep trees (which convex inputs such as
spheres produce, one level per face) never exhaust the Python stack.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple
import math

Point = Tuple[float, float, float]

DEFAULT_EPSILON = 1e-5

COPLANAR = 0
FRONT = 1
BACK = 2
SPANNING = 3


def _sub(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _dot(a: Point, b: Point) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _lerp(a: Point, b: Point, t: float) -> Point:
    return (a[0] + (b[0] - a[0]) * t,
            a[1] + (b[1] - a[1]) * t,
            a[2] + (b[2] - a[2]) * t)


class Plane:
    """Oriented plane ``normal . p == w``."""

    __slots__ = ("normal", "w")

    def __init__(self, normal: Point, w: float):
        self.normal = normal
        self.w = w

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> Optional["Plane"]:
        """
        Fit a plane to a polygon loop with Newell's method.

        Returns None when the loop has no area.
        """
        nx = ny = nz = 0.0
        cx = cy = cz = 0.0
        count = len(points)
        for i in range(count):
            x0, y0, z0 = points[i]
            x1, y1, z1 = points[(i + 1) % count]
            nx += (y0 - y1) * (z0 + z1)
            ny += (z0 - z1) * (x0 + x1)
            nz += (x0 - x1) * (y0 + y1)
            cx += x0
            cy += y0
            cz += z0
        length = math.sqrt(nx * nx + ny * ny + nz * nz)
        if length <= 1e-12:
            return None
        normal = (nx / length, ny / length, nz / length)
        centroid = (cx / count, cy / count, cz / count)
        return cls(normal, _dot(normal, centroid))

    def flipped(self) -> "Plane":
        n = self.normal
        return Plane((-n[0], -n[1], -n[2]), -self.w)

    def distance(self, p: Point) -> float:
        return _dot(self.normal, p) - self.w

    def __repr__(self) -> str:
        return f"Plane({self.normal}, {self.w})"


class Polygon:
    """A planar convex polygon; vertices are ``(x, y, z)`` tuples."""

    __slots__ = ("vertices", "plane")

    def __init__(self, vertices: Sequence[Point], plane: Optional[Plane] = None):
        self.vertices = tuple(vertices)
        self.plane = plane if plane is not None else Plane.from_points(self.vertices)

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]], tol: float = 1e-12) -> Optional["Polygon"]:
        """
        Build a polygon, dropping repeated consecutive vertices.

        Returns None for loops that collapse to fewer than three distinct
        vertices or enclose no area.
        """
        loop: List[Point] = []
        for p in points:
            pt = (float(p[0]), float(p[1]), float(p[2]))
            if loop and _close(loop[-1], pt, tol):
                continue
            loop.append(pt)
        while len(loop) > 1 and _close(loop[0], loop[-1], tol):
            loop.pop()
        if len(loop) < 3:
            return None
        plane = Plane.from_points(loop)
        if plane is None:
            return None
        return cls(loop, plane)

    def flipped(self) -> "Polygon":
        return Polygon(self.vertices[::-1], self.plane.flipped())

    def __len__(self) -> int:
        return len(self.vertices)

    def __repr__(self) -> str:
        return f"Polygon({list(self.vertices)})"


def _close(a: Point, b: Point, tol: float) -> bool:
    return abs(a[0] - b[0]) <= tol and abs(a[1] - b[1]) <= tol and abs(a[2] - b[2]) <= tol


def split_polygon(plane: Plane, polygon: Polygon,
                  coplanar_front: list, coplanar_back: list,
                  front: list, back: list, epsilon: float) -> None:
    """
    Classify ``polygon`` against ``plane`` and append it (or its pieces)
    to the matching output lists.

    Spanning polygons are cut in two; both halves keep the parent's plane.
    """
    normal = plane.normal
    w = plane.w
    polygon_type = 0
    types = []
    for v in polygon.vertices:
        t = normal[0] * v[0] + normal[1] * v[1] + normal[2] * v[2] - w
        if t < -epsilon:
            kind = BACK
        elif t > epsilon:
            kind = FRONT
        else:
            kind = COPLANAR
        polygon_type |= kind
        types.append(kind)

    if polygon_type == COPLANAR:
        if _dot(normal, polygon.plane.normal) > 0:
            coplanar_front.append(polygon)
        else:
            coplanar_back.append(polygon)
    elif polygon_type == FRONT:
        front.append(polygon)
    elif polygon_type == BACK:
        back.append(polygon)
    else:
        f: List[Point] = []
        b: List[Point] = []
        verts = polygon.vertices
        count = len(verts)
        for i in range(count):
            j = (i + 1) % count
            ti = types[i]
            tj = types[j]
            vi = verts[i]
            vj = verts[j]
            if ti != BACK:
                f.append(vi)
            if ti != FRONT:
                b.append(vi)
            if (ti | tj) == SPANNING:
                t = (w - _dot(normal, vi)) / _dot(normal, _sub(vj, vi))
                v = _lerp(vi, vj, t)
                f.append(v)
                b.append(v)
        if len(f) >= 3:
            front.append(Polygon(f, polygon.plane))
        if len(b) >= 3:
            back.append(Polygon(b, polygon.plane))


class BSPNode:
    """
    A node in a BSP tree.

    Each node stores the polygons lying in its splitting plane; everything
    in front of the plane lives in ``front`` and everything behind it in
    ``back``.
    """

    __slots__ = ("plane", "front", "back", "polygons", "epsilon")

    def __init__(self, polygons: Optional[Sequence[Polygon]] = None,
                 epsilon: float = DEFAULT_EPSILON):
        self.plane: Optional[Plane] = None
        self.front: Optional[BSPNode] = None
        self.back: Optional[BSPNode] = None
        self.polygons: List[Polygon] = []
        self.epsilon = epsilon
        if polygons:
            self.build(polygons)

    def _walk(self):
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.front is not None:
                stack.append(node.front)
            if node.back is not None:
                stack.append(node.back)

    def invert(self) -> None:
        """Swap solid space and empty space."""
        for node in list(self._walk()):
            node.polygons = [p.flipped() for p in node.polygons]
            if node.plane is not None:
                node.plane = node.plane.flipped()
            node.front, node.back = node.back, node.front

    def clip_polygons(self, polygons: Sequence[Polygon]) -> List[Polygon]:
        """Remove the parts of ``polygons`` that are inside this tree's solid."""
        result: List[Polygon] = []
        stack = [(self, list(polygons))]
        while stack:
            node, polys = stack.pop()
            if node.plane is None:
                result.extend(polys)
                continue
            front: List[Polygon] = []
            back: List[Polygon] = []
            for p in polys:
                split_polygon(node.plane, p, front, back, front, back, self.epsilon)
            if node.front is not None:
                if front:
                    stack.append((node.front, front))
            else:
                result.extend(front)
            if node.back is not None and back:
                stack.append((node.back, back))
        return result

    def clip_to(self, other: "BSPNode") -> None:
        """Remove every polygon in this tree that is inside ``other``."""
        for node in self._walk():
            node.polygons = other.clip_polygons(node.polygons)

    def all_polygons(self) -> List[Polygon]:
        polygons: List[Polygon] = []
        for node in self._walk():
            polygons.extend(node.polygons)
        return polygons

    def build(self, polygons: Sequence[Polygon]) -> None:
        """Insert ``polygons`` into the tree, splitting them as needed."""
        stack = [(self, list(polygons))]
        while stack:
            node, polys = stack.pop()
            if not polys:
                continue
            if node.plane is None:
                node.plane = polys[0].plane
            front: List[Polygon] = []
            back: List[Polygon] = []
            for p in polys:
                split_polygon(node.plane, p, node.polygons, node.polygons,
                              front, back, self.epsilon)
            if front:
                if node.front is None:
                    node.front = BSPNode(epsilon=self.epsilon)
                stack.append((node.front, front))
            if back:
                if node.back is None:
                    node.back = BSPNode(epsilon=self.epsilon)
                stack.append((node.back, back))


def union(a: Sequence[Polygon], b: Sequence[Polygon],
          epsilon: float = DEFAULT_EPSILON) -> List[Polygon]:
    """Polygons of the region inside ``a`` or ``b``."""
    na = BSPNode(a, epsilon)
    nb = BSPNode(b, epsilon)
    na.clip_to(nb)
    nb.clip_to(na)
    nb.invert()
    nb.clip_to(na)
    nb.invert()
    na.build(nb.all_polygons())
    return na.all_polygons()


def difference(a: Sequence[Polygon], b: Sequence[Polygon],
               epsilon: float = DEFAULT_EPSILON) -> List[Polygon]:
    """Polygons of the region inside ``a`` but not inside ``b``."""
    na = BSPNode(a, epsilon)
    nb = BSPNode(b, epsilon)
    na.invert()
    na.clip_to(nb)
    nb.clip_to(na)
    nb.invert()
    nb.clip_to(na)
    nb.invert()
    na.build(nb.all_polygons())
    na.invert()
    return na.all_polygons()


def intersection(a: Sequence[Polygon], b: Sequence[Polygon],
                 epsilon: float = DEFAULT_EPSILON) -> List[Polygon]:
    """Polygons of the region inside both ``a`` and ``b``."""
    na = BSPNode(a, epsilon)
    nb = BSPNode(b, epsilon)
    na.invert()
    nb.clip_to(na)
    nb.invert()
    na.clip_to(nb)
    nb.clip_to(na)
    na.build(nb.all_polygons())
    na.invert()
    return na.all_polygons()
