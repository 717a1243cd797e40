"""
Solid values for the alumina kernel.

A :class:`Mesh` is an immutable collection of planar convex polygons
whose vertices wind counter-clockwise when seen from outside the solid.
Every operation returns a new Mesh.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple
import math

import numpy as np

from . import csg
from .csg import Polygon, DEFAULT_EPSILON


def rotation_matrix(x_deg: float, y_deg: float, z_deg: float) -> np.ndarray:
    """
    4x4 rotation from Euler angles in degrees, applied as ``Rz . Ry . Rx``
    (roll about x first, then pitch about y, then yaw about z).
    """
    rx, ry, rz = math.radians(x_deg), math.radians(y_deg), math.radians(z_deg)
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)
    mx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]], dtype=float)
    my = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]], dtype=float)
    mz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]], dtype=float)
    m = np.eye(4)
    m[:3, :3] = mz @ my @ mx
    return m


def translation_matrix(x: float, y: float, z: float) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = (x, y, z)
    return m


def scale_matrix(x: float, y: float, z: float) -> np.ndarray:
    return np.diag([x, y, z, 1.0])


def reflection_matrix(normal: Sequence[float], offset: float) -> np.ndarray:
    """
    Reflection across the plane ``normal . p == offset``; ``normal`` must
    be unit length.
    """
    n = np.asarray(normal, dtype=float)
    m = np.eye(4)
    m[:3, :3] -= 2.0 * np.outer(n, n)
    m[:3, 3] = 2.0 * offset * n
    return m


class Mesh:
    """A closed polygonal solid."""

    __slots__ = ("_polygons",)

    def __init__(self, polygons: Iterable[Polygon] = ()):
        self._polygons: Tuple[Polygon, ...] = tuple(polygons)

    @classmethod
    def from_loops(cls, loops: Iterable[Sequence[Sequence[float]]]) -> "Mesh":
        """Build a mesh from vertex loops, skipping degenerate ones."""
        polygons = []
        for loop in loops:
            poly = Polygon.from_points(loop)
            if poly is not None:
                polygons.append(poly)
        return cls(polygons)

    @classmethod
    def from_faces(cls, vertices, faces) -> "Mesh":
        """Build a mesh from an indexed face list."""
        verts = np.asarray(vertices, dtype=float)
        return cls.from_loops([verts[list(face)] for face in faces])

    # --- queries ---

    @property
    def polygons(self) -> Tuple[Polygon, ...]:
        return self._polygons

    @property
    def polygon_count(self) -> int:
        return len(self._polygons)

    @property
    def is_empty(self) -> bool:
        return not self._polygons

    def __len__(self) -> int:
        return len(self._polygons)

    def __repr__(self) -> str:
        return f"Mesh({len(self._polygons)} polygons)"

    def vertices(self) -> np.ndarray:
        """All polygon vertices, polygon by polygon, as an ``(n, 3)`` array."""
        if not self._polygons:
            return np.zeros((0, 3))
        return np.array([v for p in self._polygons for v in p.vertices], dtype=float)

    def triangles(self) -> np.ndarray:
        """Fan triangulation of every polygon as an ``(n, 3, 3)`` array."""
        tris = []
        for p in self._polygons:
            verts = p.vertices
            for i in range(1, len(verts) - 1):
                tris.append((verts[0], verts[i], verts[i + 1]))
        if not tris:
            return np.zeros((0, 3, 3))
        return np.array(tris, dtype=float)

    def bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return ``(min_corner, max_corner)``; an empty mesh has zero extent."""
        verts = self.vertices()
        if len(verts) == 0:
            return np.zeros(3), np.zeros(3)
        return verts.min(axis=0), verts.max(axis=0)

    def volume(self) -> float:
        """
        Signed volume via the divergence theorem.

        Each fan triangle (p0, p1, p2) contributes ``p0 . (p1 x p2) / 6``.
        Outward-wound solids have positive volume; inverted ones negative.
        """
        tris = self.triangles()
        if len(tris) == 0:
            return 0.0
        return float(np.einsum("ij,ij->i", tris[:, 0], np.cross(tris[:, 1], tris[:, 2])).sum() / 6.0)

    def area(self) -> float:
        """Total surface area."""
        tris = self.triangles()
        if len(tris) == 0:
            return 0.0
        cross = np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])
        return float(np.linalg.norm(cross, axis=1).sum() / 2.0)

    # --- booleans ---

    def union(self, other: "Mesh", epsilon: float = DEFAULT_EPSILON) -> "Mesh":
        if self.is_empty:
            return other
        if other.is_empty:
            return self
        return Mesh(csg.union(self._polygons, other._polygons, epsilon))

    def difference(self, other: "Mesh", epsilon: float = DEFAULT_EPSILON) -> "Mesh":
        if self.is_empty or other.is_empty:
            return self
        return Mesh(csg.difference(self._polygons, other._polygons, epsilon))

    def intersection(self, other: "Mesh", epsilon: float = DEFAULT_EPSILON) -> "Mesh":
        if self.is_empty or other.is_empty:
            return Mesh()
        return Mesh(csg.intersection(self._polygons, other._polygons, epsilon))

    # --- transforms ---

    def transform(self, matrix: np.ndarray) -> "Mesh":
        """
        Apply a 4x4 homogeneous matrix to every vertex.

        Mirroring matrices (negative determinant) reverse polygon winding
        so the result stays outward facing.
        """
        if not self._polygons:
            return Mesh()
        m = np.asarray(matrix, dtype=float)
        verts = self.vertices()
        homo = np.hstack([verts, np.ones((len(verts), 1))]) @ m.T
        moved = homo[:, :3] / homo[:, 3:4]
        flip = np.linalg.det(m[:3, :3]) < 0
        polygons: List[Polygon] = []
        start = 0
        for p in self._polygons:
            end = start + len(p.vertices)
            loop = [tuple(row) for row in moved[start:end].tolist()]
            start = end
            if flip:
                loop.reverse()
            poly = Polygon.from_points(loop)
            if poly is not None:
                polygons.append(poly)
        return Mesh(polygons)

    def translate(self, x: float, y: float, z: float) -> "Mesh":
        return self.transform(translation_matrix(x, y, z))

    def rotate(self, x_deg: float, y_deg: float, z_deg: float) -> "Mesh":
        return self.transform(rotation_matrix(x_deg, y_deg, z_deg))

    def scale(self, x: float, y: float, z: float) -> "Mesh":
        return self.transform(scale_matrix(x, y, z))

    def mirror(self, normal: Sequence[float], offset: float = 0.0) -> "Mesh":
        """Reflect across the plane ``normal . p == offset`` (unit normal)."""
        return self.transform(reflection_matrix(normal, offset))

    def center(self) -> "Mesh":
        """Move the bounding box center to the origin."""
        lo, hi = self.bounding_box()
        c = (lo + hi) / 2.0
        return self.translate(-c[0], -c[1], -c[2])

    def float_to_floor(self) -> "Mesh":
        """Move the mesh along z so its lowest point rests on z = 0."""
        lo, _ = self.bounding_box()
        return self.translate(0.0, 0.0, -lo[2])

    def inverse(self) -> "Mesh":
        """Swap inside and outside by reversing every polygon."""
        return Mesh(p.flipped() for p in self._polygons)

    def concatenate(self, other: "Mesh") -> "Mesh":
        """Combine polygons without a boolean; only valid for disjoint solids."""
        return Mesh(self._polygons + other._polygons)


def outward(polygons: Sequence[Polygon]) -> Mesh:
    """
    Wrap ``polygons`` in a Mesh, reversing them all if they enclose
    negative volume. Constructors that generate a closed surface with a
    uniform but unknown winding rely on this.
    """
    mesh = Mesh(polygons)
    if mesh.volume() < 0:
        return mesh.inverse()
    return mesh


def bounding_boxes_overlap(a: Mesh, b: Mesh, tol: float = 0.0) -> bool:
    if a.is_empty or b.is_empty:
        return False
    alo, ahi = a.bounding_box()
    blo, bhi = b.bounding_box()
    return bool(np.all(alo <= bhi + tol) and np.all(blo <= ahi + tol))


def combine(meshes: Sequence[Mesh], epsilon: float = DEFAULT_EPSILON) -> Mesh:
    """
    Union a list of meshes. Copies whose bounding boxes do not touch the
    accumulated result are appended directly instead of going through a
    boolean.
    """
    result: Optional[Mesh] = None
    for mesh in meshes:
        if result is None:
            result = mesh
        elif bounding_boxes_overlap(result, mesh, epsilon):
            result = result.union(mesh, epsilon)
        else:
            result = result.concatenate(mesh)
    return result if result is not None else Mesh()
