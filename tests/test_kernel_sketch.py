"""
Tests for sketch primitives, booleans and transforms.
"""

import math

import pytest
from shapely.geometry import Polygon

from alumina.kernel import KernelError, MeshKernel, Sketch
from alumina.kernel import primitives


@pytest.fixture
def kernel():
    return MeshKernel()


def _signed_area(ring):
    total = 0.0
    for i, (x0, y0) in enumerate(ring):
        x1, y1 = ring[(i + 1) % len(ring)]
        total += x0 * y1 - x1 * y0
    return total / 2.0


class TestSketchPrimitives:
    """Placement conventions."""

    def test_square_at_origin(self):
        sketch = primitives.square(2.0)
        assert sketch.bounds() == pytest.approx((0, 0, 2, 2))
        assert sketch.area == pytest.approx(4.0)

    def test_rectangle(self):
        assert primitives.rectangle(3.0, 1.0).bounds() == pytest.approx((0, 0, 3, 1))

    def test_circle_centered(self):
        sketch = primitives.circle(1.0, 64)
        minx, miny, maxx, maxy = sketch.bounds()
        assert minx == pytest.approx(-1.0)
        assert maxx == pytest.approx(1.0)
        assert sketch.area == pytest.approx(math.pi, rel=0.01)

    def test_ellipse_extents(self):
        minx, miny, maxx, maxy = primitives.ellipse(4.0, 2.0, 32).bounds()
        assert (minx, maxx) == pytest.approx((-2.0, 2.0))
        assert (miny, maxy) == pytest.approx((-1.0, 1.0))

    def test_regular_polygon(self):
        hexagon = primitives.regular_polygon(1.0, 6)
        assert hexagon.area == pytest.approx(3 * math.sqrt(3) / 2)
        exterior, holes = hexagon.rings()[0]
        assert len(exterior) == 6
        assert holes == []

    def test_too_few_sides(self):
        with pytest.raises(ValueError):
            primitives.regular_polygon(1.0, 2)

    def test_kernel_wraps_errors(self, kernel):
        with pytest.raises(KernelError):
            kernel.circle(1.0, 0)


class TestSketchValue:
    """Construction, winding and rings."""

    def test_from_points_with_hole(self):
        sketch = Sketch.from_points([(0, 0), (4, 0), (4, 4), (0, 4)],
                                    holes=[[(1, 1), (3, 1), (3, 3), (1, 3)]])
        assert sketch.area == pytest.approx(12.0)
        exterior, holes = sketch.rings()[0]
        assert _signed_area(exterior) > 0
        assert _signed_area(holes[0]) < 0

    def test_from_points_repairs_bowtie(self):
        sketch = Sketch.from_points([(0, 0), (2, 2), (2, 0), (0, 2)])
        assert sketch.area == pytest.approx(2.0)

    def test_empty(self):
        sketch = Sketch()
        assert sketch.is_empty
        assert sketch.bounds() == (0.0, 0.0, 0.0, 0.0)
        assert sketch.area == 0.0

    def test_inverse_flips_winding(self):
        sketch = primitives.square(1.0).inverse()
        assert sketch.winding == -1
        assert sketch.area == pytest.approx(1.0)
        exterior, _ = sketch.rings()[0]
        assert _signed_area(exterior) < 0
        assert sketch.inverse().winding == 1

    def test_operations_keep_winding(self):
        sketch = primitives.square(1.0).inverse().translate(1.0, 0.0)
        assert sketch.winding == -1


class TestSketchBooleans:
    """Region booleans."""

    def test_union(self, kernel):
        a = primitives.square(2.0)
        b = primitives.square(2.0).translate(1.0, 1.0)
        assert kernel.union(a, b).area == pytest.approx(7.0)

    def test_difference(self, kernel):
        a = primitives.square(2.0)
        b = primitives.square(2.0).translate(1.0, 1.0)
        assert kernel.difference(a, b).area == pytest.approx(3.0)

    def test_intersection(self, kernel):
        a = primitives.square(2.0)
        b = primitives.square(2.0).translate(1.0, 1.0)
        result = kernel.intersection(a, b)
        assert result.area == pytest.approx(1.0)
        assert result.bounds() == pytest.approx((1, 1, 2, 2))

    def test_difference_makes_hole(self):
        plate = primitives.square(4.0)
        hole = primitives.circle(1.0, 32).translate(2.0, 2.0)
        result = plate.difference(hole)
        assert len(result) == 1
        _, holes = result.rings()[0]
        assert len(holes) == 1

    def test_disjoint_union_keeps_both(self):
        a = primitives.square(1.0)
        b = primitives.square(1.0).translate(3.0, 0.0)
        assert len(a.union(b)) == 2


class TestSketchTransforms:
    """In-plane transforms."""

    def test_translate_ignores_z(self, kernel):
        moved = kernel.translate(primitives.square(1.0), 1.0, 2.0, 9.0)
        assert moved.bounds() == pytest.approx((1, 2, 2, 3))

    def test_rotate_about_origin(self, kernel):
        turned = kernel.rotate_sketch(primitives.square(1.0), 90.0)
        assert turned.bounds() == pytest.approx((-1, 0, 0, 1))

    def test_scale(self, kernel):
        scaled = kernel.scale(primitives.square(1.0), 2.0, 3.0, 1.0)
        assert scaled.area == pytest.approx(6.0)

    def test_mirror_across_line(self, kernel):
        mirrored = kernel.mirror_sketch(primitives.square(1.0), (1.0, 0.0, 0.0), 1.0)
        assert mirrored.bounds() == pytest.approx((1, 0, 2, 1))
        assert mirrored.area == pytest.approx(1.0)

    def test_mirror_diagonal(self):
        sketch = primitives.rectangle(2.0, 1.0)
        mirrored = sketch.mirror((1.0, -1.0), 0.0)
        assert mirrored.bounds() == pytest.approx((0, 0, 1, 2))

    def test_mirror_keeps_counter_clockwise(self):
        mirrored = primitives.square(1.0).mirror((1.0, 0.0), 0.0)
        exterior, _ = mirrored.rings()[0]
        assert _signed_area(exterior) > 0

    def test_mirror_needs_planar_normal(self, kernel):
        with pytest.raises(KernelError):
            kernel.mirror_sketch(primitives.square(1.0), (0.0, 0.0, 1.0), 0.0)

    def test_center(self, kernel):
        centered = kernel.center(primitives.rectangle(4.0, 2.0))
        assert centered.bounds() == pytest.approx((-2, -1, 2, 1))

    def test_float_to_floor(self, kernel):
        floated = kernel.float_to_floor(primitives.circle(1.0, 16))
        assert floated.bounds()[1] == pytest.approx(0.0)

    def test_arrays(self, kernel):
        row = kernel.linear_array(primitives.square(1.0), 3, (2.0, 0.0, 0.0))
        assert row.area == pytest.approx(3.0)
        grid = kernel.grid_array(primitives.square(1.0), 2, 2, (1.0, 1.0, 0.0))
        assert grid.area == pytest.approx(4.0)
        assert len(grid) == 1
        ring = kernel.arc_array(primitives.square(0.2).center(), 6, 1.0, 0.0, 360.0)
        assert ring.area == pytest.approx(6 * 0.04)
        assert kernel.linear_array(primitives.square(1.0), 0, (1, 0, 0)).is_empty

    def test_shapely_geometry_round_trip(self):
        sketch = Sketch(Polygon([(0, 0), (1, 0), (0, 1)]))
        assert sketch.geometry.area == pytest.approx(0.5)
