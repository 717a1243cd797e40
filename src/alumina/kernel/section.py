"""
Planar sections of solids: projection onto the XY plane and plane cuts.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np
from shapely.geometry import MultiLineString, Polygon as ShapelyPolygon
from shapely.ops import polygonize, unary_union

from .mesh import Mesh
from .sketch import Sketch

Segment = Tuple[Tuple[float, float], Tuple[float, float]]


def flatten(mesh: Mesh) -> Sketch:
    """Shadow of ``mesh`` on the XY plane (union of projected faces)."""
    shadows = []
    for polygon in mesh.polygons:
        outline = [(v[0], v[1]) for v in polygon.vertices]
        face = ShapelyPolygon(outline)
        if face.is_valid and face.area > 0.0:
            shadows.append(face)
    if not shadows:
        return Sketch()
    return Sketch(unary_union(shadows))


def plane_basis(normal: Sequence[float]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Orthonormal frame ``(n, u, v)`` for the plane with normal ``normal``.

    For normals along the z axis ``u`` is world x, so a cut with normal +z
    yields world x, y coordinates.
    """
    n = np.asarray(normal, dtype=float)
    length = float(np.linalg.norm(n))
    if length <= 1e-12:
        raise ValueError("section plane normal must not be zero")
    n = n / length
    z = np.array([0.0, 0.0, 1.0])
    if abs(float(n @ z)) > 1.0 - 1e-9:
        u = np.array([1.0, 0.0, 0.0])
    else:
        u = np.cross(z, n)
        u = u / np.linalg.norm(u)
    v = np.cross(n, u)
    return n, u, v


def section_segments(mesh: Mesh, normal: Sequence[float], offset: float,
                     digits: int = 9) -> List[Segment]:
    """
    Segments where the plane ``normal . p == offset`` crosses the faces of
    ``mesh``, in plane coordinates rounded to ``digits`` decimals.

    A vertex exactly on the plane counts as above it, so every crossing
    edge is cut exactly once.
    """
    n, u, v = plane_basis(normal)
    segments: List[Segment] = []
    for polygon in mesh.polygons:
        verts = np.asarray(polygon.vertices, dtype=float)
        dist = verts @ n - offset
        above = dist >= 0.0
        if above.all() or not above.any():
            continue
        hits = []
        count = len(verts)
        for i in range(count):
            j = (i + 1) % count
            if above[i] != above[j]:
                t = dist[i] / (dist[i] - dist[j])
                p = verts[i] + (verts[j] - verts[i]) * t
                hits.append((round(float(p @ u), digits), round(float(p @ v), digits)))
        for k in range(0, len(hits) - 1, 2):
            if hits[k] != hits[k + 1]:
                segments.append((hits[k], hits[k + 1]))
    return segments


def _crossings(segments: Sequence[Segment], x: float, y: float) -> int:
    count = 0
    for (x0, y0), (x1, y1) in segments:
        if (y0 > y) != (y1 > y):
            xi = x0 + (y - y0) * (x1 - x0) / (y1 - y0)
            if xi > x:
                count += 1
    return count


def slice_mesh(mesh: Mesh, normal: Sequence[float], offset: float,
               digits: int = 9) -> Sketch:
    """
    Cross-section of ``mesh`` with the plane ``normal . p == offset``.

    The cut segments are noded and polygonized; a face of the resulting
    arrangement belongs to the section when a ray from its interior
    crosses the cut an odd number of times.
    """
    segments = section_segments(mesh, normal, offset, digits)
    if not segments:
        return Sketch()
    noded = unary_union(MultiLineString([list(s) for s in segments]))
    faces = []
    for face in polygonize(noded):
        probe = face.representative_point()
        if _crossings(segments, probe.x, probe.y) % 2 == 1:
            faces.append(face)
    if not faces:
        return Sketch()
    return Sketch(unary_union(faces))
