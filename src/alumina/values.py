"""
Runtime values carried by ports during graph evaluation.

A Value is a small tagged union: the ``type`` field names the variant
(scalar, vec3, sketch, solid) and ``data`` holds the payload. Values are
immutable; operations that transform geometry return new values.

Unwrapping a value to the wrong variant raises ``TypeMismatch``. There is
no implicit coercion, so a scalar never turns into a vector and a sketch
never turns into a solid.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union
import math

from .types import PortType, SCALAR, VECTOR3, SKETCH, MESH
from .errors import TypeMismatch

Vector = Tuple[float, float, float]


@dataclass(frozen=True)
class Value:
    """
    A runtime value with its port type.

    The `data` field holds the actual Python/kernel object.
    The `type` field holds the port type used for runtime checks.
    """
    type: PortType
    data: Any

    def __repr__(self) -> str:
        if self.type.is_shape:
            return f"Value({self.type}, {type(self.data).__name__})"
        return f"Value({self.type}, {self.data!r})"

    def is_scalar(self) -> bool:
        return self.type is SCALAR

    def is_vector(self) -> bool:
        return self.type is VECTOR3

    def is_sketch(self) -> bool:
        return self.type is SKETCH

    def is_mesh(self) -> bool:
        return self.type is MESH

    def as_scalar(self, port: Optional[str] = None) -> float:
        return unwrap(self, SCALAR, port)

    def as_vector(self, port: Optional[str] = None) -> Vector:
        return unwrap(self, VECTOR3, port)

    def as_sketch(self, port: Optional[str] = None):
        return unwrap(self, SKETCH, port)

    def as_mesh(self, port: Optional[str] = None):
        return unwrap(self, MESH, port)


def unwrap(value: Value, expected: PortType, port: Optional[str] = None) -> Any:
    """
    Extract the payload of ``value`` if it is the ``expected`` variant.

    Raises:
        TypeMismatch: if the value holds a different variant
    """
    if not expected.is_assignable_from(value.type):
        raise TypeMismatch(port, expected, value.type)
    return value.data


# Convenience constructors

def scalar_val(x: float) -> Value:
    """Create a scalar value."""
    return Value(SCALAR, float(x))


def vector_val(x: Union[float, Sequence[float]], y: float = None, z: float = None) -> Value:
    """Create a vec3 value from three floats or a 3-sequence."""
    if y is None and z is None:
        coords = tuple(float(c) for c in x)
        if len(coords) != 3:
            raise ValueError(f"vec3 value needs three components, got {len(coords)}")
        return Value(VECTOR3, coords)
    return Value(VECTOR3, (float(x), float(y), float(z)))


def sketch_val(sketch: Any) -> Value:
    """Create a sketch value."""
    return Value(SKETCH, sketch)


def mesh_val(mesh: Any) -> Value:
    """Create a solid value."""
    return Value(MESH, mesh)


def default_value() -> Value:
    """The value an input holds when nothing else is specified."""
    return scalar_val(0.0)


# Numeric conversions applied before arguments reach the kernel

def to_degrees(radians: float) -> float:
    """Angles are edited in radians; kernel rotation primitives take degrees."""
    return math.degrees(radians)


def normalized(v: Vector) -> Vector:
    """
    Return ``v`` scaled to unit length.

    A zero-length vector raises ``ZeroDivisionError``; the evaluator
    reports it as a kernel failure for the node being computed.
    """
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    return (v[0] / length, v[1] / length, v[2] / length)


def to_count(x: float) -> int:
    """
    Convert a scalar used as a count (segments, repetitions) to an int.

    Truncates toward zero and clamps at zero; negative, NaN and infinite
    values collapse to 0.
    """
    if not math.isfinite(x) or x <= 0.0:
        return 0
    return int(x)
