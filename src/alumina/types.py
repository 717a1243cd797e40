"""
Port type definitions for the alumina node graph.

Every port on a node declares exactly one of four types, fixed for the
lifetime of the graph:

    SCALAR  - a single float (sizes, radii, angles, counts)
    VECTOR3 - three floats (offsets, axes, scale factors)
    SKETCH  - a planar (2-D) shape
    MESH    - a volumetric (3-D) solid

There is no subtyping and no implicit promotion between types: a port
accepts a value of its own type and nothing else.
"""

from enum import Enum
from typing import Tuple


class PortType(Enum):
    """The type of data that can flow through a port."""
    SCALAR = "scalar"
    VECTOR3 = "vec3"
    SKETCH = "sketch"
    MESH = "solid"

    @property
    def display_name(self) -> str:
        """The name the editor prints next to a socket."""
        return self.value

    @property
    def color(self) -> Tuple[int, int, int]:
        """RGB color the editor uses to draw sockets of this type."""
        return _TYPE_COLORS[self]

    @property
    def is_shape(self) -> bool:
        """True for the geometric types (sketch and mesh)."""
        return self in (PortType.SKETCH, PortType.MESH)

    def is_assignable_from(self, other: "PortType") -> bool:
        """Check if a port of this type can accept a value of the other type."""
        return self is other

    def __str__(self) -> str:
        return self.value


_TYPE_COLORS = {
    PortType.SCALAR: (38, 109, 211),
    PortType.VECTOR3: (238, 207, 109),
    PortType.SKETCH: (140, 220, 140),
    PortType.MESH: (110, 200, 255),
}


SCALAR = PortType.SCALAR
VECTOR3 = PortType.VECTOR3
SKETCH = PortType.SKETCH
MESH = PortType.MESH

ALL_TYPES = (SCALAR, VECTOR3, SKETCH, MESH)


def resolve_type_name(name: str) -> PortType:
    """
    Resolve a display name (``scalar``, ``vec3``, ``sketch``, ``solid``)
    or enum member name (``MESH``) to a PortType.

    Raises:
        ValueError: if the name is not a known port type
    """
    for port_type in ALL_TYPES:
        if name == port_type.value or name.upper() == port_type.name:
            return port_type
    raise ValueError(f"unknown port type '{name}'")
