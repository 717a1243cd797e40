"""
Tests for extrude, revolve, loft and sweep.
"""

import math

import pytest
from shapely.geometry import Polygon

from alumina.kernel import KernelError, MeshKernel, Sketch
from alumina.kernel import lift, primitives


@pytest.fixture
def kernel():
    return MeshKernel()


def _ring_sketch(outer, inner):
    return Sketch.from_points([(0, 0), (outer, 0), (outer, outer), (0, outer)],
                              holes=[[(1, 1), (1 + inner, 1), (1 + inner, 1 + inner), (1, 1 + inner)]])


class TestTriangulate:
    """Cap triangulation."""

    def test_covers_polygon(self):
        poly = Polygon([(0, 0), (4, 0), (4, 4), (0, 4)], [[(1, 1), (3, 1), (3, 3), (1, 3)]])
        tris = lift.triangulate(poly)
        total = sum(Polygon(t).area for t in tris)
        assert total == pytest.approx(12.0)

    def test_counter_clockwise(self):
        for tri in lift.triangulate(primitives.circle(1.0, 12).polygons[0]):
            (x0, y0), (x1, y1), (x2, y2) = tri
            assert (x1 - x0) * (y2 - y0) - (x2 - x0) * (y1 - y0) > 0


class TestExtrude:
    """Straight and slanted extrusion."""

    def test_box(self):
        mesh = lift.extrude(primitives.rectangle(2.0, 3.0), 1.0)
        assert mesh.volume() == pytest.approx(6.0)
        lo, hi = mesh.bounding_box()
        assert lo == pytest.approx([0, 0, 0])
        assert hi == pytest.approx([2, 3, 1])

    def test_with_hole(self):
        mesh = lift.extrude(_ring_sketch(4.0, 2.0), 2.0)
        assert mesh.volume() == pytest.approx(24.0)

    def test_negative_height(self):
        mesh = lift.extrude(primitives.square(1.0), -2.0)
        assert mesh.volume() == pytest.approx(2.0)
        lo, hi = mesh.bounding_box()
        assert lo[2] == pytest.approx(-2.0)
        assert hi[2] == pytest.approx(0.0)

    def test_inverted_sketch_gives_inverted_mesh(self):
        mesh = lift.extrude(primitives.square(1.0).inverse(), 1.0)
        assert mesh.volume() == pytest.approx(-1.0)

    def test_extruded_solid_is_closed_for_csg(self):
        a = lift.extrude(primitives.square(2.0), 2.0)
        b = primitives.cube(2.0).translate(1.0, 1.0, 1.0)
        assert a.intersection(b).volume() == pytest.approx(1.0)

    def test_vector(self, kernel):
        mesh = kernel.extrude_vector(primitives.square(1.0), (1.0, 0.0, 2.0))
        assert mesh.volume() == pytest.approx(2.0)
        _, hi = mesh.bounding_box()
        assert hi == pytest.approx([2, 1, 2])

    def test_vector_in_plane_fails(self, kernel):
        with pytest.raises(KernelError):
            kernel.extrude_vector(primitives.square(1.0), (1.0, 0.0, 0.0))


class TestRevolve:
    """Revolving profiles about the sketch y axis."""

    def _profile(self):
        return primitives.rectangle(1.0, 1.0).translate(1.0, 0.0)

    def test_full_turn(self, kernel):
        mesh = kernel.revolve(self._profile(), 360.0, 48)
        assert mesh.volume() == pytest.approx(3.0 * math.pi, rel=0.01)
        lo, hi = mesh.bounding_box()
        assert lo[2] == pytest.approx(0.0)
        assert hi[2] == pytest.approx(1.0)

    def test_half_turn_is_capped(self, kernel):
        mesh = kernel.revolve(self._profile(), 180.0, 24)
        assert mesh.volume() == pytest.approx(1.5 * math.pi, rel=0.01)

    def test_negative_angle(self, kernel):
        mesh = kernel.revolve(self._profile(), -90.0, 12)
        assert mesh.volume() > 0
        lo, hi = mesh.bounding_box()
        assert hi[1] == pytest.approx(0.0, abs=1e-9)

    def test_profile_touching_axis(self, kernel):
        mesh = kernel.revolve(primitives.rectangle(1.0, 2.0), 360.0, 32)
        assert mesh.volume() == pytest.approx(2.0 * math.pi, rel=0.02)

    def test_profile_crossing_axis_fails(self, kernel):
        with pytest.raises(KernelError):
            kernel.revolve(primitives.circle(1.0, 16), 360.0, 16)


class TestLoft:
    """Lofting between two outlines."""

    def test_prism(self, kernel):
        mesh = kernel.loft(primitives.square(2.0), primitives.square(2.0), 3.0, True)
        assert mesh.volume() == pytest.approx(12.0)

    def test_pyramid_frustum(self, kernel):
        mesh = kernel.loft(primitives.square(2.0), primitives.square(1.0), 1.0, True)
        assert mesh.volume() == pytest.approx(7.0 / 3.0)

    def test_negative_height(self, kernel):
        mesh = kernel.loft(primitives.square(1.0), primitives.square(1.0), -1.0, True)
        assert mesh.volume() == pytest.approx(1.0)

    def test_without_caps(self, kernel):
        mesh = kernel.loft(primitives.square(1.0), primitives.square(1.0), 1.0, False)
        assert mesh.polygon_count == 4

    def test_vertex_count_mismatch(self, kernel):
        with pytest.raises(KernelError):
            kernel.loft(primitives.square(1.0), primitives.circle(1.0, 8), 1.0, True)

    def test_profile_with_hole(self, kernel):
        with pytest.raises(KernelError):
            kernel.loft(_ring_sketch(4.0, 2.0), _ring_sketch(4.0, 2.0), 1.0, True)


class TestSweep:
    """Sweeping a profile around a closed path."""

    def test_ring(self, kernel):
        path = primitives.circle(2.0, 64)
        profile = primitives.rectangle(0.5, 1.0)
        mesh = kernel.sweep(profile, path)
        assert mesh.volume() == pytest.approx(math.pi * (2.5 ** 2 - 2.0 ** 2), rel=0.01)
        lo, hi = mesh.bounding_box()
        assert lo[2] == pytest.approx(0.0)
        assert hi[2] == pytest.approx(1.0)

    def test_empty_path(self, kernel):
        with pytest.raises(KernelError):
            kernel.sweep(primitives.square(1.0), Sketch())
