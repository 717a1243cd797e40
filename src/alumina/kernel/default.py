"""
Reference geometry kernel: BSP-tree CSG meshes and shapely sketches.
"""

from __future__ import annotations

from functools import wraps
from typing import Sequence
import math

from shapely.errors import ShapelyError
from shapely.ops import unary_union

from . import lattice, lift, primitives, section
from .base import GeometryKernel, KernelError
from .csg import DEFAULT_EPSILON
from .mesh import Mesh, combine
from .sketch import Sketch


def _guarded(method):
    """Re-raise numeric and shapely failures of ``method`` as KernelError."""

    @wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except KernelError:
            raise
        except (ValueError, ArithmeticError, ShapelyError) as exc:
            raise KernelError(f"{method.__name__}: {exc}") from exc

    return wrapper


def arc_angles(count: int, start_deg: float, end_deg: float) -> list:
    """
    Angles of ``count`` copies spread from ``start_deg`` to ``end_deg``.

    When the span is a full turn the last copy stops one step short of
    the end so it does not land on the first.
    """
    if count <= 0:
        return []
    if count == 1:
        return [start_deg]
    span = end_deg - start_deg
    full_turn = abs(abs(span) - 360.0) <= 1e-9
    step = span / count if full_turn else span / (count - 1)
    return [start_deg + step * i for i in range(count)]


class MeshKernel(GeometryKernel):
    """
    Default kernel.

    Args:
        settings: optional :class:`alumina.config.Settings`; supplies the
            CSG plane tolerance, the slice rounding and the lattice fill.
    """

    def __init__(self, settings=None):
        self.epsilon = getattr(settings, "epsilon", DEFAULT_EPSILON)
        self.section_digits = getattr(settings, "section_digits", 9)
        self.lattice_fill = getattr(settings, "lattice_fill", 1.0)

    def __repr__(self) -> str:
        return f"MeshKernel(epsilon={self.epsilon:g})"

    # --- booleans ---

    @_guarded
    def union(self, a, b):
        if isinstance(a, Mesh):
            return a.union(b, self.epsilon)
        return a.union(b)

    @_guarded
    def difference(self, a, b):
        if isinstance(a, Mesh):
            return a.difference(b, self.epsilon)
        return a.difference(b)

    @_guarded
    def intersection(self, a, b):
        if isinstance(a, Mesh):
            return a.intersection(b, self.epsilon)
        return a.intersection(b)

    # --- transforms ---

    translate = _guarded(GeometryKernel.translate)
    scale = _guarded(GeometryKernel.scale)
    center = _guarded(GeometryKernel.center)
    float_to_floor = _guarded(GeometryKernel.float_to_floor)

    @_guarded
    def rotate(self, mesh: Mesh, x_deg: float, y_deg: float, z_deg: float) -> Mesh:
        return mesh.rotate(x_deg, y_deg, z_deg)

    @_guarded
    def rotate_sketch(self, sketch: Sketch, degrees: float) -> Sketch:
        return sketch.rotate(degrees)

    @_guarded
    def mirror(self, mesh: Mesh, normal: Sequence[float], offset: float) -> Mesh:
        length = math.sqrt(sum(c * c for c in normal))
        if length <= 1e-12:
            raise KernelError("mirror plane normal must not be zero")
        return mesh.mirror([c / length for c in normal], offset)

    @_guarded
    def mirror_sketch(self, sketch: Sketch, normal: Sequence[float], offset: float) -> Sketch:
        if math.hypot(normal[0], normal[1]) <= 1e-12:
            raise KernelError("mirror line normal must have an x or y component")
        return sketch.mirror(normal, offset)

    # --- primitives ---

    @_guarded
    def cube(self, size):
        return primitives.cube(size)

    @_guarded
    def cuboid(self, width, length, height):
        return primitives.cuboid(width, length, height)

    @_guarded
    def sphere(self, radius, segments, stacks):
        return primitives.sphere(radius, segments, stacks)

    @_guarded
    def cylinder(self, radius, height, segments):
        return primitives.cylinder(radius, height, segments)

    @_guarded
    def frustum(self, bottom_radius, top_radius, height, segments):
        return primitives.frustum(bottom_radius, top_radius, height, segments)

    @_guarded
    def torus(self, major_radius, minor_radius, segments, sides):
        return primitives.torus(major_radius, minor_radius, segments, sides)

    @_guarded
    def square(self, size):
        return primitives.square(size)

    @_guarded
    def rectangle(self, width, height):
        return primitives.rectangle(width, height)

    @_guarded
    def circle(self, radius, segments):
        return primitives.circle(radius, segments)

    @_guarded
    def ellipse(self, width, height, segments):
        return primitives.ellipse(width, height, segments)

    @_guarded
    def regular_polygon(self, radius, sides):
        return primitives.regular_polygon(radius, sides)

    # --- arrays ---

    def _gather(self, shape, copies):
        if isinstance(shape, Mesh):
            return combine(copies, self.epsilon)
        if not copies:
            return Sketch(winding=shape.winding)
        return Sketch(unary_union([c.geometry for c in copies]), shape.winding)

    @_guarded
    def linear_array(self, shape, count, offset):
        dx, dy, dz = offset
        copies = [shape.translate(dx * i, dy * i, dz * i) for i in range(count)]
        return self._gather(shape, copies)

    @_guarded
    def grid_array(self, shape, rows, columns, spacing):
        dx, dy, _ = spacing
        copies = [shape.translate(dx * c, dy * r, 0.0)
                  for r in range(rows) for c in range(columns)]
        return self._gather(shape, copies)

    @_guarded
    def arc_array(self, shape, count, radius, start_deg, end_deg):
        moved = shape.translate(radius, 0.0, 0.0)
        copies = []
        for angle in arc_angles(count, start_deg, end_deg):
            if isinstance(shape, Mesh):
                copies.append(moved.rotate(0.0, 0.0, angle))
            else:
                copies.append(moved.rotate(angle))
        return self._gather(shape, copies)

    # --- lifting and sections ---

    @_guarded
    def extrude(self, sketch, height):
        return lift.extrude(sketch, height)

    @_guarded
    def extrude_vector(self, sketch, direction):
        return lift.extrude_vector(sketch, *direction)

    @_guarded
    def revolve(self, sketch, angle_deg, segments):
        return lift.revolve(sketch, angle_deg, segments)

    @_guarded
    def loft(self, bottom, top, height, caps):
        return lift.loft(bottom, top, height, caps)

    @_guarded
    def sweep(self, profile, path):
        return lift.sweep(profile, path)

    @_guarded
    def flatten(self, mesh):
        return section.flatten(mesh)

    @_guarded
    def slice(self, mesh, normal, offset):
        return section.slice_mesh(mesh, normal, offset, self.section_digits)

    # --- lattices ---

    def _lattice(self, mesh, field, resolution, period, iso):
        if mesh.is_empty:
            raise KernelError("lattice input is empty")
        return lattice.lattice(mesh, field, resolution, period, iso, self.lattice_fill)

    @_guarded
    def gyroid(self, mesh, resolution, period, iso):
        return self._lattice(mesh, lattice.gyroid, resolution, period, iso)

    @_guarded
    def schwarz_p(self, mesh, resolution, period, iso):
        return self._lattice(mesh, lattice.schwarz_p, resolution, period, iso)

    @_guarded
    def schwarz_d(self, mesh, resolution, period, iso):
        return self._lattice(mesh, lattice.schwarz_d, resolution, period, iso)
