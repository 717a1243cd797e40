"""
Lifting operations: turn sketches into solids.

Caps are triangulated with shapely's constrained Delaunay triangulation,
which keeps the outline (and hole) vertices as the only triangle
vertices, so caps and side walls share their vertices exactly.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple
import math

import shapely
from shapely.geometry import Polygon as ShapelyPolygon

from .csg import Polygon
from .mesh import Mesh, outward
from .sketch import Sketch

Point2D = Tuple[float, float]


class LiftError(ValueError):
    """A sketch cannot be lifted with the requested parameters."""


def _signed_area(loop: Sequence[Point2D]) -> float:
    total = 0.0
    for i, (x0, y0) in enumerate(loop):
        x1, y1 = loop[(i + 1) % len(loop)]
        total += x0 * y1 - x1 * y0
    return total / 2.0


def triangulate(polygon: ShapelyPolygon) -> List[List[Point2D]]:
    """Counter-clockwise triangles covering ``polygon`` (holes respected)."""
    triangles = []
    result = shapely.constrained_delaunay_triangles(polygon)
    for tri in getattr(result, "geoms", []):
        loop = [(float(x), float(y)) for x, y in list(tri.exterior.coords)[:-1]]
        if len(loop) != 3:
            continue
        area = _signed_area(loop)
        if abs(area) <= 1e-15:
            continue
        if area < 0:
            loop.reverse()
        triangles.append(loop)
    return triangles


def _ccw_rings(polygon: ShapelyPolygon) -> List[List[Point2D]]:
    """Exterior counter-clockwise, holes clockwise, open loops."""
    rings = []
    exterior = [(float(x), float(y)) for x, y in list(polygon.exterior.coords)[:-1]]
    if _signed_area(exterior) < 0:
        exterior.reverse()
    rings.append(exterior)
    for interior in polygon.interiors:
        hole = [(float(x), float(y)) for x, y in list(interior.coords)[:-1]]
        if _signed_area(hole) > 0:
            hole.reverse()
        rings.append(hole)
    return rings


def _mesh(loops) -> List[Polygon]:
    polygons = []
    for loop in loops:
        poly = Polygon.from_points(loop)
        if poly is not None:
            polygons.append(poly)
    return polygons


def _finish(polygons: List[Polygon], sketch: Sketch) -> Mesh:
    mesh = Mesh(polygons)
    return mesh.inverse() if sketch.winding < 0 else mesh


def extrude_vector(sketch: Sketch, dx: float, dy: float, dz: float) -> Mesh:
    """
    Sweep ``sketch`` along the vector ``(dx, dy, dz)``; the top cap is the
    bottom cap translated by the vector.
    """
    if abs(dz) <= 1e-12:
        raise LiftError("extrusion direction must leave the sketch plane")
    loops = []
    for polygon in sketch.polygons:
        for tri in triangulate(polygon):
            loops.append([(x, y, 0.0) for x, y in reversed(tri)])
            loops.append([(x + dx, y + dy, dz) for x, y in tri])
        for ring in _ccw_rings(polygon):
            count = len(ring)
            for i in range(count):
                x0, y0 = ring[i]
                x1, y1 = ring[(i + 1) % count]
                loops.append([(x0, y0, 0.0), (x1, y1, 0.0),
                              (x1 + dx, y1 + dy, dz), (x0 + dx, y0 + dy, dz)])
    polygons = _mesh(loops)
    if dz < 0:
        polygons = [p.flipped() for p in polygons]
    return _finish(polygons, sketch)


def extrude(sketch: Sketch, height: float) -> Mesh:
    """Extrude along +z by ``height`` (a negative height extrudes down)."""
    return extrude_vector(sketch, 0.0, 0.0, height)


def revolve(sketch: Sketch, angle_deg: float, segments: int) -> Mesh:
    """
    Revolve ``sketch`` about its y axis. Sketch point ``(x, y)`` sweeps
    the circle of radius ``x`` at height ``z = y`` around the world z axis.
    Revolutions short of a full turn are closed with caps.
    """
    if segments < 1:
        raise LiftError("revolve needs at least one segment")
    if angle_deg == 0.0:
        raise LiftError("revolve angle must not be zero")
    minx, _, _, _ = sketch.bounds()
    if minx < -1e-9:
        raise LiftError("revolve profile must not cross the axis of revolution")
    angle = math.radians(max(-360.0, min(360.0, angle_deg)))
    closed = abs(abs(angle_deg) - 360.0) <= 1e-9

    def place(p: Point2D, k: int):
        theta = angle * k / segments
        r = max(p[0], 0.0)
        return (r * math.cos(theta), r * math.sin(theta), p[1])

    loops = []
    for polygon in sketch.polygons:
        for ring in _ccw_rings(polygon):
            count = len(ring)
            for i in range(count):
                p0 = ring[i]
                p1 = ring[(i + 1) % count]
                for k in range(segments):
                    loops.append([place(p0, k), place(p0, k + 1),
                                  place(p1, k + 1), place(p1, k)])
        if not closed:
            for tri in triangulate(polygon):
                loops.append([place(p, 0) for p in tri])
                loops.append([place(p, segments) for p in reversed(tri)])
    mesh = outward(_mesh(loops))
    return mesh.inverse() if sketch.winding < 0 else mesh


def _single_ring(sketch: Sketch, which: str) -> List[Point2D]:
    rings = sketch.rings()
    if len(rings) != 1 or rings[0][1]:
        raise LiftError(f"loft {which} profile must be a single outline without holes")
    ring = [(float(x), float(y)) for x, y in rings[0][0]]
    if _signed_area(ring) < 0:
        ring.reverse()
    return ring


def loft(bottom: Sketch, top: Sketch, height: float, caps: bool = True) -> Mesh:
    """
    Connect the outline of ``bottom`` at z = 0 to the outline of ``top``
    at z = ``height``. Both outlines must have the same vertex count;
    vertex ``i`` of one is joined to vertex ``i`` of the other.
    """
    lower = _single_ring(bottom, "bottom")
    upper = _single_ring(top, "top")
    if len(lower) != len(upper):
        raise LiftError(
            f"loft profiles have different vertex counts ({len(lower)} and {len(upper)})"
        )
    if abs(height) <= 1e-12:
        raise LiftError("loft height must not be zero")
    h = float(height)
    count = len(lower)
    loops = []
    for i in range(count):
        j = (i + 1) % count
        loops.append([(lower[i][0], lower[i][1], 0.0), (lower[j][0], lower[j][1], 0.0),
                      (upper[j][0], upper[j][1], h), (upper[i][0], upper[i][1], h)])
    if caps:
        for tri in triangulate(ShapelyPolygon(lower)):
            loops.append([(x, y, 0.0) for x, y in reversed(tri)])
        for tri in triangulate(ShapelyPolygon(upper)):
            loops.append([(x, y, h) for x, y in tri])
    polygons = _mesh(loops)
    if h < 0:
        polygons = [p.flipped() for p in polygons]
    return Mesh(polygons)


def sweep(profile: Sketch, path: Sketch) -> Mesh:
    """
    Sweep ``profile`` around the closed outline of ``path``.

    The path is the exterior of the first polygon of ``path`` in the XY
    plane. At every path vertex the profile's x axis points away from the
    path's interior and its y axis points along world +z.
    """
    path_rings = path.rings()
    if not path_rings:
        raise LiftError("sweep path is empty")
    route = [(float(x), float(y)) for x, y in path_rings[0][0]]
    if _signed_area(route) < 0:
        route.reverse()
    if len(route) < 3:
        raise LiftError("sweep path needs at least three vertices")

    frames = []
    n = len(route)
    for i in range(n):
        px, py = route[i - 1]
        nx_, ny_ = route[(i + 1) % n]
        tx, ty = nx_ - px, ny_ - py
        length = math.hypot(tx, ty)
        if length <= 1e-12:
            raise LiftError("sweep path has a degenerate vertex")
        tx, ty = tx / length, ty / length
        frames.append((route[i], (ty, -tx)))

    def place(p: Point2D, k: int):
        (ox, oy), (ux, uy) = frames[k % n]
        return (ox + p[0] * ux, oy + p[0] * uy, p[1])

    loops = []
    for polygon in profile.polygons:
        for ring in _ccw_rings(polygon):
            count = len(ring)
            for i in range(count):
                p0 = ring[i]
                p1 = ring[(i + 1) % count]
                for k in range(n):
                    loops.append([place(p0, k), place(p0, k + 1),
                                  place(p1, k + 1), place(p1, k)])
    mesh = outward(_mesh(loops))
    return mesh.inverse() if profile.winding < 0 else mesh
