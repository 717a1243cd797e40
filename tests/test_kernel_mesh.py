"""
Tests for solid primitives, CSG booleans and mesh transforms.
"""

import math

import numpy as np
import pytest

from alumina.kernel import KernelError, Mesh, MeshKernel
from alumina.kernel import csg, primitives
from alumina.kernel.default import arc_angles
from alumina.kernel.mesh import bounding_boxes_overlap, combine, rotation_matrix


@pytest.fixture
def kernel():
    return MeshKernel()


def _box(lo, hi):
    lo = np.asarray(lo, dtype=float)
    hi = np.asarray(hi, dtype=float)
    size = hi - lo
    return primitives.cuboid(*size).translate(*lo)


class TestPrimitives:
    """Primitive placement and size."""

    def test_cube(self):
        mesh = primitives.cube(2.0)
        lo, hi = mesh.bounding_box()
        assert lo == pytest.approx([0, 0, 0])
        assert hi == pytest.approx([2, 2, 2])
        assert mesh.volume() == pytest.approx(8.0)
        assert mesh.area() == pytest.approx(24.0)
        assert mesh.polygon_count == 6

    def test_cuboid(self):
        mesh = primitives.cuboid(1.0, 2.0, 3.0)
        _, hi = mesh.bounding_box()
        assert hi == pytest.approx([1, 2, 3])
        assert mesh.volume() == pytest.approx(6.0)

    def test_sphere_centered(self):
        mesh = primitives.sphere(1.0, 24, 12)
        lo, hi = mesh.bounding_box()
        assert lo == pytest.approx([-1, -1, -1], abs=1e-9)
        assert hi == pytest.approx([1, 1, 1], abs=1e-9)
        assert mesh.volume() == pytest.approx(4.0 / 3.0 * math.pi, rel=0.06)

    def test_sphere_too_coarse(self):
        with pytest.raises(ValueError):
            primitives.sphere(1.0, 2, 12)

    def test_cylinder(self):
        mesh = primitives.cylinder(1.0, 2.0, 24)
        lo, hi = mesh.bounding_box()
        assert lo[2] == pytest.approx(0.0)
        assert hi[2] == pytest.approx(2.0)
        assert mesh.volume() == pytest.approx(2.0 * math.pi, rel=0.02)

    def test_cone(self):
        mesh = primitives.frustum(1.0, 0.0, 1.0, 32)
        assert mesh.volume() == pytest.approx(math.pi / 3.0, rel=0.02)

    def test_torus(self):
        mesh = primitives.torus(2.0, 0.5, 24, 12)
        expected = 2.0 * math.pi ** 2 * 2.0 * 0.25
        assert mesh.volume() == pytest.approx(expected, rel=0.06)
        lo, hi = mesh.bounding_box()
        assert hi[2] == pytest.approx(0.5, abs=1e-9)

    def test_outward_winding(self):
        for mesh in (primitives.cube(1.0), primitives.sphere(1.0, 8, 4),
                     primitives.cylinder(1.0, 1.0, 8), primitives.torus(2.0, 0.5, 8, 6)):
            assert mesh.volume() > 0


class TestBooleans:
    """CSG on overlapping boxes."""

    def test_union(self):
        a = _box((0, 0, 0), (2, 2, 2))
        b = _box((1, 1, 1), (3, 3, 3))
        assert a.union(b).volume() == pytest.approx(15.0)

    def test_difference(self):
        a = _box((0, 0, 0), (2, 2, 2))
        b = _box((1, 1, 1), (3, 3, 3))
        assert a.difference(b).volume() == pytest.approx(7.0)

    def test_intersection(self):
        a = _box((0, 0, 0), (2, 2, 2))
        b = _box((1, 1, 1), (3, 3, 3))
        result = a.intersection(b)
        assert result.volume() == pytest.approx(1.0)
        lo, hi = result.bounding_box()
        assert lo == pytest.approx([1, 1, 1])
        assert hi == pytest.approx([2, 2, 2])

    def test_drill_hole(self):
        block = _box((-1, -1, 0), (1, 1, 1))
        rod = primitives.cylinder(0.5, 3.0, 16).translate(0, 0, -1)
        result = block.difference(rod)
        hole = 16 * 0.5 * 0.25 * math.sin(2 * math.pi / 16)
        assert result.volume() == pytest.approx(4.0 - hole)

    def test_disjoint_intersection_is_empty(self):
        a = _box((0, 0, 0), (1, 1, 1))
        b = _box((5, 5, 5), (6, 6, 6))
        assert a.intersection(b).volume() == pytest.approx(0.0)

    def test_empty_operands(self):
        a = primitives.cube(1.0)
        empty = Mesh()
        assert a.union(empty) is a
        assert empty.union(a) is a
        assert a.difference(empty) is a
        assert a.intersection(empty).is_empty

    def test_csg_module_functions(self):
        a = primitives.cube(1.0).polygons
        b = primitives.cube(1.0).translate(0.5, 0, 0).polygons
        assert Mesh(csg.union(a, b)).volume() == pytest.approx(1.5)

    def test_kernel_passes_epsilon(self, kernel):
        a = _box((0, 0, 0), (2, 2, 2))
        b = _box((1, 1, 1), (3, 3, 3))
        assert kernel.union(a, b).volume() == pytest.approx(15.0)


class TestTransforms:
    """Affine transforms keep solids outward."""

    def test_translate(self):
        mesh = primitives.cube(1.0).translate(1, 2, 3)
        lo, _ = mesh.bounding_box()
        assert lo == pytest.approx([1, 2, 3])

    def test_rotation_order(self):
        # Rz . Ry . Rx applied to the x axis: Rx leaves it, Ry(90) sends it to -z
        m = rotation_matrix(0.0, 90.0, 0.0)
        assert m[:3, :3] @ np.array([1.0, 0.0, 0.0]) == pytest.approx([0, 0, -1], abs=1e-12)
        m = rotation_matrix(90.0, 0.0, 90.0)
        assert m[:3, :3] @ np.array([0.0, 1.0, 0.0]) == pytest.approx([0, 0, 1], abs=1e-12)

    def test_scale(self):
        mesh = primitives.cube(1.0).scale(2, 3, 4)
        assert mesh.volume() == pytest.approx(24.0)

    def test_mirror_keeps_volume_positive(self):
        mesh = primitives.cube(2.0).mirror((1.0, 0.0, 0.0), 0.0)
        lo, hi = mesh.bounding_box()
        assert lo[0] == pytest.approx(-2.0)
        assert hi[0] == pytest.approx(0.0)
        assert mesh.volume() == pytest.approx(8.0)

    def test_mirror_offset_plane(self, kernel):
        mesh = kernel.mirror(primitives.cube(1.0), (0.0, 0.0, 2.0), 3.0)
        lo, hi = mesh.bounding_box()
        assert lo[2] == pytest.approx(5.0)
        assert hi[2] == pytest.approx(6.0)

    def test_mirror_zero_normal(self, kernel):
        with pytest.raises(KernelError):
            kernel.mirror(primitives.cube(1.0), (0.0, 0.0, 0.0), 0.0)

    def test_negative_scale_stays_outward(self):
        mesh = primitives.cube(1.0).scale(-1, 1, 1)
        assert mesh.volume() == pytest.approx(1.0)

    def test_center(self):
        lo, hi = primitives.cuboid(2, 4, 6).center().bounding_box()
        assert lo == pytest.approx([-1, -2, -3])
        assert hi == pytest.approx([1, 2, 3])

    def test_float_to_floor(self):
        lo, _ = primitives.sphere(1.0, 8, 4).float_to_floor().bounding_box()
        assert lo[2] == pytest.approx(0.0)

    def test_inverse(self):
        mesh = primitives.cube(1.0).inverse()
        assert mesh.volume() == pytest.approx(-1.0)
        assert mesh.inverse().volume() == pytest.approx(1.0)

    def test_transforms_return_new_meshes(self):
        mesh = primitives.cube(1.0)
        moved = mesh.translate(1, 0, 0)
        assert moved is not mesh
        lo, _ = mesh.bounding_box()
        assert lo == pytest.approx([0, 0, 0])


class TestArrays:
    """Copies along lines, grids and arcs."""

    def test_linear_disjoint(self, kernel):
        mesh = kernel.linear_array(primitives.cube(1.0), 3, (2.0, 0.0, 0.0))
        assert mesh.volume() == pytest.approx(3.0)
        _, hi = mesh.bounding_box()
        assert hi[0] == pytest.approx(5.0)

    def test_linear_overlapping(self, kernel):
        mesh = kernel.linear_array(primitives.cube(1.0), 2, (0.5, 0.0, 0.0))
        assert mesh.volume() == pytest.approx(1.5)

    def test_zero_count_is_empty(self, kernel):
        assert kernel.linear_array(primitives.cube(1.0), 0, (1, 0, 0)).is_empty

    def test_grid(self, kernel):
        mesh = kernel.grid_array(primitives.cube(1.0), 2, 3, (2.0, 2.0, 0.0))
        assert mesh.volume() == pytest.approx(6.0)
        _, hi = mesh.bounding_box()
        assert hi[:2] == pytest.approx([5.0, 3.0])

    def test_arc(self, kernel):
        small = primitives.cube(0.2).center()
        mesh = kernel.arc_array(small, 4, 2.0, 0.0, 360.0)
        assert mesh.volume() == pytest.approx(4 * 0.008)
        lo, hi = mesh.bounding_box()
        assert lo[:2] == pytest.approx([-2.1, -2.1])
        assert hi[:2] == pytest.approx([2.1, 2.1])

    def test_arc_angles(self):
        assert arc_angles(4, 0.0, 360.0) == pytest.approx([0, 90, 180, 270])
        assert arc_angles(3, 0.0, 90.0) == pytest.approx([0, 45, 90])
        assert arc_angles(1, 30.0, 90.0) == [30.0]
        assert arc_angles(0, 0.0, 90.0) == []

    def test_combine_helpers(self):
        a = primitives.cube(1.0)
        b = primitives.cube(1.0).translate(3, 0, 0)
        assert not bounding_boxes_overlap(a, b)
        assert combine([a, b]).polygon_count == 12
        assert combine([]).is_empty
