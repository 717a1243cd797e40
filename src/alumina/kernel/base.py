"""Abstract geometry kernel used by the evaluator."""

from __future__ import annotations

import abc
from typing import Sequence

from .mesh import Mesh
from .sketch import Sketch


class KernelError(Exception):
    """A geometry operation could not produce a result."""


class GeometryKernel(abc.ABC):
    """
    Every geometry entry point the evaluator calls.

    Operations take and return immutable shape values; failures raise
    :class:`KernelError`. Booleans and the simple transforms work on
    either flavor of shape and dispatch to the value's own methods.
    Angles arrive in degrees and counts as non-negative ints.
    """

    # --- booleans ---

    def union(self, a, b):
        return a.union(b)

    def difference(self, a, b):
        return a.difference(b)

    def intersection(self, a, b):
        return a.intersection(b)

    # --- transforms shared by meshes and sketches ---

    def translate(self, shape, x: float, y: float, z: float):
        return shape.translate(x, y, z)

    def scale(self, shape, x: float, y: float, z: float):
        return shape.scale(x, y, z)

    def center(self, shape):
        return shape.center()

    def float_to_floor(self, shape):
        return shape.float_to_floor()

    def inverse(self, shape):
        return shape.inverse()

    # --- flavor-specific transforms ---

    @abc.abstractmethod
    def rotate(self, mesh: Mesh, x_deg: float, y_deg: float, z_deg: float) -> Mesh:
        """Euler rotation applied as ``Rz . Ry . Rx``."""

    @abc.abstractmethod
    def rotate_sketch(self, sketch: Sketch, degrees: float) -> Sketch:
        """Rotate about the sketch origin."""

    @abc.abstractmethod
    def mirror(self, mesh: Mesh, normal: Sequence[float], offset: float) -> Mesh:
        """Reflect across the plane ``normal . p == offset``."""

    @abc.abstractmethod
    def mirror_sketch(self, sketch: Sketch, normal: Sequence[float], offset: float) -> Sketch:
        """Reflect across the line ``normal . p == offset``."""

    # --- primitives ---

    @abc.abstractmethod
    def cube(self, size: float) -> Mesh: ...

    @abc.abstractmethod
    def cuboid(self, width: float, length: float, height: float) -> Mesh: ...

    @abc.abstractmethod
    def sphere(self, radius: float, segments: int, stacks: int) -> Mesh: ...

    @abc.abstractmethod
    def cylinder(self, radius: float, height: float, segments: int) -> Mesh: ...

    @abc.abstractmethod
    def frustum(self, bottom_radius: float, top_radius: float, height: float,
                segments: int) -> Mesh: ...

    @abc.abstractmethod
    def torus(self, major_radius: float, minor_radius: float, segments: int,
              sides: int) -> Mesh: ...

    @abc.abstractmethod
    def square(self, size: float) -> Sketch: ...

    @abc.abstractmethod
    def rectangle(self, width: float, height: float) -> Sketch: ...

    @abc.abstractmethod
    def circle(self, radius: float, segments: int) -> Sketch: ...

    @abc.abstractmethod
    def ellipse(self, width: float, height: float, segments: int) -> Sketch: ...

    @abc.abstractmethod
    def regular_polygon(self, radius: float, sides: int) -> Sketch: ...

    # --- arrays ---

    @abc.abstractmethod
    def linear_array(self, shape, count: int, offset: Sequence[float]):
        """``count`` copies, copy ``i`` moved by ``i * offset``."""

    @abc.abstractmethod
    def grid_array(self, shape, rows: int, columns: int, spacing: Sequence[float]):
        """``rows x columns`` copies spaced by ``spacing`` x and y."""

    @abc.abstractmethod
    def arc_array(self, shape, count: int, radius: float, start_deg: float,
                  end_deg: float):
        """``count`` copies placed on a circular arc about the z axis."""

    # --- lifting and sections ---

    @abc.abstractmethod
    def extrude(self, sketch: Sketch, height: float) -> Mesh: ...

    @abc.abstractmethod
    def extrude_vector(self, sketch: Sketch, direction: Sequence[float]) -> Mesh: ...

    @abc.abstractmethod
    def revolve(self, sketch: Sketch, angle_deg: float, segments: int) -> Mesh: ...

    @abc.abstractmethod
    def loft(self, bottom: Sketch, top: Sketch, height: float, caps: bool) -> Mesh: ...

    @abc.abstractmethod
    def sweep(self, profile: Sketch, path: Sketch) -> Mesh: ...

    @abc.abstractmethod
    def flatten(self, mesh: Mesh) -> Sketch: ...

    @abc.abstractmethod
    def slice(self, mesh: Mesh, normal: Sequence[float], offset: float) -> Sketch: ...

    # --- lattices ---

    @abc.abstractmethod
    def gyroid(self, mesh: Mesh, resolution: int, period: float, iso: float) -> Mesh: ...

    @abc.abstractmethod
    def schwarz_p(self, mesh: Mesh, resolution: int, period: float, iso: float) -> Mesh: ...

    @abc.abstractmethod
    def schwarz_d(self, mesh: Mesh, resolution: int, period: float, iso: float) -> Mesh: ...
