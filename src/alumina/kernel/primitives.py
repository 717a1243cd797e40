"""
Primitive solids and sketches.

Placement conventions:

* ``cube`` and ``cuboid`` start at the origin and extend along +x, +y, +z.
* ``sphere`` and ``torus`` are centered on the origin.
* ``cylinder`` and ``frustum`` stand on the XY plane around the z axis.
* ``square`` and ``rectangle`` start at the origin and extend along +x, +y.
* ``circle``, ``ellipse`` and ``regular_polygon`` are centered on the origin.
"""

from __future__ import annotations

from typing import List
import math

from shapely.geometry import Polygon as ShapelyPolygon

from .csg import Polygon
from .mesh import Mesh, outward
from .sketch import Sketch


def cuboid(width: float, length: float, height: float) -> Mesh:
    """Box spanning ``[0, width] x [0, length] x [0, height]``."""
    w, l, h = float(width), float(length), float(height)
    corners = [
        (0.0, 0.0, 0.0), (w, 0.0, 0.0), (w, l, 0.0), (0.0, l, 0.0),
        (0.0, 0.0, h), (w, 0.0, h), (w, l, h), (0.0, l, h),
    ]
    faces = [
        (0, 3, 2, 1),  # bottom
        (4, 5, 6, 7),  # top
        (0, 1, 5, 4),  # front
        (2, 3, 7, 6),  # back
        (1, 2, 6, 5),  # right
        (3, 0, 4, 7),  # left
    ]
    polygons = []
    for face in faces:
        poly = Polygon.from_points([corners[i] for i in face])
        if poly is not None:
            polygons.append(poly)
    return outward(polygons)


def cube(size: float) -> Mesh:
    """Cube spanning ``[0, size]`` on every axis."""
    return cuboid(size, size, size)


def sphere(radius: float, segments: int, stacks: int) -> Mesh:
    """
    UV sphere: ``segments`` slices around the z axis and ``stacks`` bands
    from pole to pole. The bands touching the poles are triangles.
    """
    if segments < 3 or stacks < 2:
        raise ValueError("sphere needs at least 3 segments and 2 stacks")
    r = float(radius)

    def vertex(i: int, j: int):
        theta = 2.0 * math.pi * i / segments
        phi = math.pi * j / stacks
        return (r * math.cos(theta) * math.sin(phi),
                r * math.sin(theta) * math.sin(phi),
                r * math.cos(phi))

    polygons = []
    for i in range(segments):
        for j in range(stacks):
            loop = [vertex(i, j)]
            if j > 0:
                loop.append(vertex(i + 1, j))
            if j < stacks - 1:
                loop.append(vertex(i + 1, j + 1))
            loop.append(vertex(i, j + 1))
            poly = Polygon.from_points(loop)
            if poly is not None:
                polygons.append(poly)
    return outward(polygons)


def frustum(bottom_radius: float, top_radius: float, height: float, segments: int) -> Mesh:
    """Truncated cone from z = 0 (``bottom_radius``) to z = ``height``."""
    if segments < 3:
        raise ValueError("frustum needs at least 3 segments")
    r0, r1, h = float(bottom_radius), float(top_radius), float(height)

    def ring(r: float, z: float):
        return [(r * math.cos(2.0 * math.pi * i / segments),
                 r * math.sin(2.0 * math.pi * i / segments), z)
                for i in range(segments)]

    bottom = ring(r0, 0.0)
    top = ring(r1, h)
    loops = [list(reversed(bottom)), top]
    for i in range(segments):
        j = (i + 1) % segments
        loops.append([bottom[i], bottom[j], top[j], top[i]])
    polygons = []
    for loop in loops:
        poly = Polygon.from_points(loop)
        if poly is not None:
            polygons.append(poly)
    return outward(polygons)


def cylinder(radius: float, height: float, segments: int) -> Mesh:
    """Cylinder from z = 0 to z = ``height`` around the z axis."""
    return frustum(radius, radius, height, segments)


def torus(major_radius: float, minor_radius: float, segments: int, sides: int) -> Mesh:
    """
    Torus around the z axis: ``segments`` steps around the ring and
    ``sides`` steps around the tube.
    """
    if segments < 3 or sides < 3:
        raise ValueError("torus needs at least 3 segments and 3 sides")
    big, small = float(major_radius), float(minor_radius)

    def vertex(i: int, j: int):
        u = 2.0 * math.pi * i / segments
        v = 2.0 * math.pi * j / sides
        r = big + small * math.cos(v)
        return (r * math.cos(u), r * math.sin(u), small * math.sin(v))

    polygons = []
    for i in range(segments):
        for j in range(sides):
            poly = Polygon.from_points([vertex(i, j), vertex(i + 1, j),
                                        vertex(i + 1, j + 1), vertex(i, j + 1)])
            if poly is not None:
                polygons.append(poly)
    return outward(polygons)


# --- sketches ---

def rectangle(width: float, height: float) -> Sketch:
    """Rectangle spanning ``[0, width] x [0, height]``."""
    w, h = float(width), float(height)
    return Sketch(ShapelyPolygon([(0.0, 0.0), (w, 0.0), (w, h), (0.0, h)]))


def square(size: float) -> Sketch:
    return rectangle(size, size)


def ellipse(width: float, height: float, segments: int) -> Sketch:
    """Ellipse with full extents ``width`` x ``height`` centered on the origin."""
    if segments < 3:
        raise ValueError("ellipse needs at least 3 segments")
    a, b = float(width) / 2.0, float(height) / 2.0
    points = [(a * math.cos(2.0 * math.pi * i / segments),
               b * math.sin(2.0 * math.pi * i / segments))
              for i in range(segments)]
    return Sketch(ShapelyPolygon(points))


def circle(radius: float, segments: int) -> Sketch:
    return ellipse(2.0 * radius, 2.0 * radius, segments)


def regular_polygon(radius: float, sides: int) -> Sketch:
    """Regular polygon with circumradius ``radius``, first vertex on +x."""
    if sides < 3:
        raise ValueError("regular polygon needs at least 3 sides")
    points: List = [(radius * math.cos(2.0 * math.pi * i / sides),
                     radius * math.sin(2.0 * math.pi * i / sides))
                    for i in range(sides)]
    return Sketch(ShapelyPolygon(points))
