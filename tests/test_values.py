"""
Tests for port types and runtime values.
"""

import math

import pytest

from alumina.errors import TypeMismatch
from alumina.kernel import Mesh, Sketch
from alumina.types import PortType, SCALAR, VECTOR3, SKETCH, MESH, resolve_type_name
from alumina.values import (
    Value, unwrap, scalar_val, vector_val, sketch_val, mesh_val, default_value,
    to_degrees, normalized, to_count,
)


class TestPortType:
    """Test port type metadata."""

    def test_display_names(self):
        assert SCALAR.display_name == "scalar"
        assert VECTOR3.display_name == "vec3"
        assert SKETCH.display_name == "sketch"
        assert MESH.display_name == "solid"

    def test_colors(self):
        assert SCALAR.color == (38, 109, 211)
        assert VECTOR3.color == (238, 207, 109)
        assert MESH.color == (110, 200, 255)
        assert SKETCH.color == (140, 220, 140)

    def test_no_promotion(self):
        """A port type only accepts its own type."""
        for a in PortType:
            for b in PortType:
                assert a.is_assignable_from(b) == (a is b)

    def test_resolve_type_name(self):
        assert resolve_type_name("solid") is MESH
        assert resolve_type_name("MESH") is MESH
        assert resolve_type_name("vec3") is VECTOR3
        with pytest.raises(ValueError):
            resolve_type_name("matrix")


class TestValues:
    """Test value construction and unwrapping."""

    def test_scalar(self):
        v = scalar_val(2)
        assert v.is_scalar()
        assert v.as_scalar() == 2.0
        assert isinstance(v.data, float)

    def test_vector_from_components_and_sequence(self):
        assert vector_val(1, 2, 3) == vector_val([1.0, 2.0, 3.0])
        assert vector_val(1, 2, 3).as_vector() == (1.0, 2.0, 3.0)

    def test_vector_wrong_length(self):
        with pytest.raises(ValueError):
            vector_val([1.0, 2.0])

    def test_shape_values(self):
        assert sketch_val(Sketch()).is_sketch()
        assert mesh_val(Mesh()).is_mesh()

    def test_default_value_is_scalar_zero(self):
        assert default_value() == Value(SCALAR, 0.0)

    def test_wrong_variant_raises(self):
        with pytest.raises(TypeMismatch) as info:
            scalar_val(1.0).as_mesh("in-1")
        err = info.value
        assert err.port == "in-1"
        assert err.expected is MESH
        assert err.actual is SCALAR
        assert err.code == "E401"

    def test_no_scalar_vector_coercion(self):
        with pytest.raises(TypeMismatch):
            unwrap(scalar_val(1.0), VECTOR3)
        with pytest.raises(TypeMismatch):
            unwrap(vector_val(1, 1, 1), SCALAR)

    def test_no_sketch_mesh_coercion(self):
        with pytest.raises(TypeMismatch):
            unwrap(sketch_val(Sketch()), MESH)
        with pytest.raises(TypeMismatch):
            unwrap(mesh_val(Mesh()), SKETCH)

    def test_error_to_dict(self):
        with pytest.raises(TypeMismatch) as info:
            unwrap(scalar_val(1.0), MESH, "p")
        data = info.value.to_dict()
        assert data["code"] == "E401"
        assert data["expected"] == "solid"
        assert data["actual"] == "scalar"
        assert data["root"] is None


class TestConversions:
    """Test numeric conversions applied before kernel calls."""

    def test_to_degrees(self):
        assert to_degrees(math.pi) == pytest.approx(180.0)

    def test_normalized(self):
        assert normalized((3.0, 0.0, 4.0)) == pytest.approx((0.6, 0.0, 0.8))

    def test_normalized_zero_vector(self):
        with pytest.raises(ZeroDivisionError):
            normalized((0.0, 0.0, 0.0))

    @pytest.mark.parametrize("x,expected", [
        (3.9, 3),
        (0.0, 0),
        (-2.5, 0),
        (float("nan"), 0),
        (float("inf"), 0),
        (float("-inf"), 0),
    ])
    def test_to_count(self, x, expected):
        assert to_count(x) == expected
