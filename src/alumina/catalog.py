"""
Node catalog: the closed set of node kinds and their port signatures.

Every kind is a pure function from named, typed inputs to named, typed
outputs. The catalog describes those ports (with their default constants)
and the display metadata the editor shows in its "add node" menu; it
holds no graph state.

Signatures are built with :class:`PortSignatureBuilder`::

    signature = (PortSignatureBuilder()
                 .mesh_in("in")
                 .vector("offset", (0.0, 0.0, 0.0))
                 .mesh_out("out")
                 .build())
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
import math

from .types import PortType, SCALAR, VECTOR3, SKETCH, MESH
from .values import Value, scalar_val, vector_val, default_value


class InputParamKind(Enum):
    """How an input port may be fed."""
    CONNECTION_ONLY = "connection_only"
    CONSTANT_ONLY = "constant_only"
    CONNECTION_OR_CONSTANT = "connection_or_constant"

    @property
    def accepts_connection(self) -> bool:
        return self is not InputParamKind.CONSTANT_ONLY


class NodeKind(Enum):
    """Every node kind the engine can evaluate."""
    # Solid primitives
    CUBE = "cube"
    CUBOID = "cuboid"
    SPHERE = "sphere"
    CYLINDER = "cylinder"
    FRUSTUM = "frustum"
    TORUS = "torus"
    # Sketch primitives
    SQUARE = "square"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    REGULAR_POLYGON = "regular_polygon"
    # Booleans
    UNION = "union"
    SUBTRACT = "subtract"
    INTERSECT = "intersect"
    SKETCH_UNION = "sketch_union"
    SKETCH_SUBTRACT = "sketch_subtract"
    SKETCH_INTERSECT = "sketch_intersect"
    # Transforms
    TRANSLATE = "translate"
    ROTATE = "rotate"
    SCALE = "scale"
    MIRROR = "mirror"
    CENTER = "center"
    FLOAT = "float"
    INVERSE = "inverse"
    SKETCH_TRANSLATE = "sketch_translate"
    SKETCH_ROTATE = "sketch_rotate"
    SKETCH_SCALE = "sketch_scale"
    SKETCH_MIRROR = "sketch_mirror"
    SKETCH_CENTER = "sketch_center"
    SKETCH_FLOAT = "sketch_float"
    SKETCH_INVERSE = "sketch_inverse"
    # Arrays
    LINEAR_ARRAY = "linear_array"
    GRID_ARRAY = "grid_array"
    ARC_ARRAY = "arc_array"
    SKETCH_LINEAR_ARRAY = "sketch_linear_array"
    SKETCH_GRID_ARRAY = "sketch_grid_array"
    SKETCH_ARC_ARRAY = "sketch_arc_array"
    # Lifting
    EXTRUDE = "extrude"
    EXTRUDE_VECTOR = "extrude_vector"
    REVOLVE = "revolve"
    LOFT = "loft"
    SWEEP = "sweep"
    # Solid -> sketch
    FLATTEN = "flatten"
    SLICE = "slice"
    # Lattices
    GYROID = "gyroid"
    SCHWARZ_P = "schwarz_p"
    SCHWARZ_D = "schwarz_d"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class InputSpec:
    """Declared input port: name, type, default constant and feed kind."""
    name: str
    type: PortType
    default: Value
    kind: InputParamKind = InputParamKind.CONNECTION_OR_CONSTANT


@dataclass(frozen=True)
class OutputSpec:
    """Declared output port."""
    name: str
    type: PortType


@dataclass(frozen=True)
class PortSignature:
    """Ordered inputs and outputs of a node kind."""
    inputs: Tuple[InputSpec, ...] = ()
    outputs: Tuple[OutputSpec, ...] = ()

    def input(self, name: str) -> Optional[InputSpec]:
        for spec in self.inputs:
            if spec.name == name:
                return spec
        return None

    def output(self, name: str) -> Optional[OutputSpec]:
        for spec in self.outputs:
            if spec.name == name:
                return spec
        return None

    @property
    def input_names(self) -> List[str]:
        return [spec.name for spec in self.inputs]

    @property
    def output_names(self) -> List[str]:
        return [spec.name for spec in self.outputs]


@dataclass
class PortSignatureBuilder:
    """Fluent construction of a :class:`PortSignature`."""
    _inputs: List[InputSpec] = field(default_factory=list)
    _outputs: List[OutputSpec] = field(default_factory=list)

    def scalar(self, name: str, default: float = 1.0) -> "PortSignatureBuilder":
        self._inputs.append(InputSpec(name, SCALAR, scalar_val(default)))
        return self

    def vector(self, name: str,
               default: Sequence[float] = (0.0, 0.0, 0.0)) -> "PortSignatureBuilder":
        self._inputs.append(InputSpec(name, VECTOR3, vector_val(default)))
        return self

    def mesh_in(self, name: str) -> "PortSignatureBuilder":
        self._inputs.append(InputSpec(name, MESH, default_value(),
                                      InputParamKind.CONNECTION_ONLY))
        return self

    def sketch_in(self, name: str) -> "PortSignatureBuilder":
        self._inputs.append(InputSpec(name, SKETCH, default_value(),
                                      InputParamKind.CONNECTION_ONLY))
        return self

    def mesh_out(self, name: str = "out") -> "PortSignatureBuilder":
        self._outputs.append(OutputSpec(name, MESH))
        return self

    def sketch_out(self, name: str = "out") -> "PortSignatureBuilder":
        self._outputs.append(OutputSpec(name, SKETCH))
        return self

    def build(self) -> PortSignature:
        return PortSignature(tuple(self._inputs), tuple(self._outputs))


def _b() -> PortSignatureBuilder:
    return PortSignatureBuilder()


TAU = 2.0 * math.pi

_SIGNATURES: Dict[NodeKind, PortSignature] = {}
_LABELS: Dict[NodeKind, str] = {}
_CATEGORIES: Dict[NodeKind, Tuple[str, ...]] = {}
_MENU: List[NodeKind] = []


def _register(kind: NodeKind, label: str, category: str, signature: PortSignature) -> None:
    _SIGNATURES[kind] = signature
    _LABELS[kind] = label
    _CATEGORIES[kind] = (category,)
    _MENU.append(kind)


def _boolean(flavor: str) -> PortSignature:
    b = _b()
    if flavor == "mesh":
        return b.mesh_in("A").mesh_in("B").mesh_out().build()
    return b.sketch_in("A").sketch_in("B").sketch_out().build()


def _populate() -> None:
    K = NodeKind

    # Primitives
    _register(K.CUBE, "Cube", "Primitives",
              _b().scalar("size", 1.0).mesh_out().build())
    _register(K.CUBOID, "Cuboid", "Primitives",
              _b().scalar("width", 1.0).scalar("length", 1.0)
              .scalar("height", 1.0).mesh_out().build())
    _register(K.SPHERE, "Sphere", "Primitives",
              _b().scalar("radius", 1.0).scalar("segments", 24)
              .scalar("stacks", 12).mesh_out().build())
    _register(K.CYLINDER, "Cylinder", "Primitives",
              _b().scalar("radius", 1.0).scalar("height", 1.0)
              .scalar("segments", 24).mesh_out().build())
    _register(K.FRUSTUM, "Frustum", "Primitives",
              _b().scalar("bottom radius", 1.0).scalar("top radius", 0.5)
              .scalar("height", 1.0).scalar("segments", 24).mesh_out().build())
    _register(K.TORUS, "Torus", "Primitives",
              _b().scalar("major radius", 2.0).scalar("minor radius", 0.5)
              .scalar("segments", 24).scalar("sides", 12).mesh_out().build())

    _register(K.SQUARE, "Square", "Sketch Primitives",
              _b().scalar("size", 1.0).sketch_out().build())
    _register(K.RECTANGLE, "Rectangle", "Sketch Primitives",
              _b().scalar("width", 1.0).scalar("height", 1.0).sketch_out().build())
    _register(K.CIRCLE, "Circle", "Sketch Primitives",
              _b().scalar("radius", 1.0).scalar("segments", 32).sketch_out().build())
    _register(K.ELLIPSE, "Ellipse", "Sketch Primitives",
              _b().scalar("width", 2.0).scalar("height", 1.0)
              .scalar("segments", 32).sketch_out().build())
    _register(K.REGULAR_POLYGON, "Regular Polygon", "Sketch Primitives",
              _b().scalar("radius", 1.0).scalar("sides", 6).sketch_out().build())

    # Booleans
    _register(K.UNION, "Union", "Boolean", _boolean("mesh"))
    _register(K.SUBTRACT, "Subtract", "Boolean", _boolean("mesh"))
    _register(K.INTERSECT, "Intersect", "Boolean", _boolean("mesh"))
    _register(K.SKETCH_UNION, "Sketch Union", "Sketch Boolean", _boolean("sketch"))
    _register(K.SKETCH_SUBTRACT, "Sketch Subtract", "Sketch Boolean", _boolean("sketch"))
    _register(K.SKETCH_INTERSECT, "Sketch Intersect", "Sketch Boolean", _boolean("sketch"))

    # Transforms
    _register(K.TRANSLATE, "Translate", "Transform",
              _b().mesh_in("in").vector("offset").mesh_out().build())
    _register(K.ROTATE, "Rotate", "Transform",
              _b().mesh_in("in").vector("axis", (0.0, 0.0, 1.0))
              .scalar("angle (rad)", 0.0).mesh_out().build())
    _register(K.SCALE, "Scale", "Transform",
              _b().mesh_in("in").vector("factors", (1.0, 1.0, 1.0)).mesh_out().build())
    _register(K.MIRROR, "Mirror", "Transform",
              _b().mesh_in("in").vector("normal", (1.0, 0.0, 0.0))
              .scalar("offset", 0.0).mesh_out().build())
    _register(K.CENTER, "Center", "Transform", _b().mesh_in("in").mesh_out().build())
    _register(K.FLOAT, "Float", "Transform", _b().mesh_in("in").mesh_out().build())
    _register(K.INVERSE, "Inverse", "Transform", _b().mesh_in("in").mesh_out().build())

    _register(K.SKETCH_TRANSLATE, "Sketch Translate", "Sketch Transform",
              _b().sketch_in("in").vector("offset").sketch_out().build())
    _register(K.SKETCH_ROTATE, "Sketch Rotate", "Sketch Transform",
              _b().sketch_in("in").scalar("angle (rad)", 0.0).sketch_out().build())
    _register(K.SKETCH_SCALE, "Sketch Scale", "Sketch Transform",
              _b().sketch_in("in").vector("factors", (1.0, 1.0, 1.0)).sketch_out().build())
    _register(K.SKETCH_MIRROR, "Sketch Mirror", "Sketch Transform",
              _b().sketch_in("in").vector("normal", (1.0, 0.0, 0.0))
              .scalar("offset", 0.0).sketch_out().build())
    _register(K.SKETCH_CENTER, "Sketch Center", "Sketch Transform",
              _b().sketch_in("in").sketch_out().build())
    _register(K.SKETCH_FLOAT, "Sketch Float", "Sketch Transform",
              _b().sketch_in("in").sketch_out().build())
    _register(K.SKETCH_INVERSE, "Sketch Inverse", "Sketch Transform",
              _b().sketch_in("in").sketch_out().build())

    # Arrays
    _register(K.LINEAR_ARRAY, "Linear Array", "Array",
              _b().mesh_in("in").scalar("count", 2).vector("offset", (1.0, 0.0, 0.0))
              .mesh_out().build())
    _register(K.GRID_ARRAY, "Grid Array", "Array",
              _b().mesh_in("in").scalar("rows", 2).scalar("columns", 2)
              .vector("spacing", (1.0, 1.0, 0.0)).mesh_out().build())
    _register(K.ARC_ARRAY, "Arc Array", "Array",
              _b().mesh_in("in").scalar("count", 4).scalar("radius", 1.0)
              .scalar("start angle (rad)", 0.0).scalar("end angle (rad)", TAU)
              .mesh_out().build())
    _register(K.SKETCH_LINEAR_ARRAY, "Sketch Linear Array", "Sketch Array",
              _b().sketch_in("in").scalar("count", 2).vector("offset", (1.0, 0.0, 0.0))
              .sketch_out().build())
    _register(K.SKETCH_GRID_ARRAY, "Sketch Grid Array", "Sketch Array",
              _b().sketch_in("in").scalar("rows", 2).scalar("columns", 2)
              .vector("spacing", (1.0, 1.0, 0.0)).sketch_out().build())
    _register(K.SKETCH_ARC_ARRAY, "Sketch Arc Array", "Sketch Array",
              _b().sketch_in("in").scalar("count", 4).scalar("radius", 1.0)
              .scalar("start angle (rad)", 0.0).scalar("end angle (rad)", TAU)
              .sketch_out().build())

    # Lifting
    _register(K.EXTRUDE, "Extrude", "Extrude",
              _b().sketch_in("profile").scalar("height", 1.0).mesh_out().build())
    _register(K.EXTRUDE_VECTOR, "Extrude Along Vector", "Extrude",
              _b().sketch_in("profile").vector("direction", (0.0, 0.0, 1.0))
              .mesh_out().build())
    _register(K.REVOLVE, "Revolve", "Extrude",
              _b().sketch_in("profile").scalar("angle (rad)", TAU)
              .scalar("segments", 24).mesh_out().build())
    _register(K.LOFT, "Loft", "Extrude",
              _b().sketch_in("bottom").sketch_in("top").scalar("height", 1.0)
              .scalar("caps", 1.0).mesh_out().build())
    _register(K.SWEEP, "Sweep", "Extrude",
              _b().sketch_in("profile").sketch_in("path").mesh_out().build())

    # Solid -> sketch
    _register(K.FLATTEN, "Flatten", "Slice",
              _b().mesh_in("in").sketch_out().build())
    _register(K.SLICE, "Slice", "Slice",
              _b().mesh_in("in").vector("normal", (0.0, 0.0, 1.0))
              .scalar("offset", 0.0).sketch_out().build())

    # Lattices
    for kind, label in ((K.GYROID, "Gyroid"), (K.SCHWARZ_P, "Schwarz P"),
                        (K.SCHWARZ_D, "Schwarz D")):
        _register(kind, label, "Lattice",
                  _b().mesh_in("in").scalar("resolution", 32).scalar("period", 1.0)
                  .scalar("iso value", 0.0).mesh_out().build())


_populate()


# Introspection

def all_kinds() -> List[NodeKind]:
    """Every node kind, in menu order."""
    return list(_MENU)


def signature(kind: NodeKind) -> PortSignature:
    """The port signature of ``kind``."""
    return _SIGNATURES[kind]


def node_label(kind: NodeKind) -> str:
    """Human-readable label shown in the editor."""
    return _LABELS[kind]


def node_categories(kind: NodeKind) -> List[str]:
    """Menu categories ``kind`` is listed under."""
    return list(_CATEGORIES[kind])


def categories() -> List[str]:
    """All menu categories, in menu order."""
    seen: List[str] = []
    for kind in _MENU:
        for category in _CATEGORIES[kind]:
            if category not in seen:
                seen.append(category)
    return seen


def resolve_kind(name: str) -> NodeKind:
    """
    Look up a kind by value (``"sketch_union"``) or member name (``"SKETCH_UNION"``).

    Raises:
        ValueError: if no kind has that name
    """
    for kind in NodeKind:
        if name == kind.value or name.upper() == kind.name:
            return kind
    raise ValueError(f"unknown node kind '{name}'")


def instantiate(graph, kind: NodeKind, node_id) -> None:
    """
    Create the ports of node ``node_id`` from the signature of ``kind``,
    seeding every input with its default value.
    """
    sig = signature(kind)
    for spec in sig.inputs:
        graph.add_input_param(node_id, spec.name, spec.type, spec.default, spec.kind)
    for spec in sig.outputs:
        graph.add_output_param(node_id, spec.name, spec.type)
