"""
Operation table for the evaluator.

Maps every node kind to the function that computes it. Handlers share
one signature, ``handler(kernel, args) -> Value``, where ``args`` maps
each declared input name to its unwrapped payload (float, 3-tuple,
Sketch or Mesh). Handlers convert editor units to kernel units (radians
to degrees, scalars to counts, axes to unit vectors) before calling the
kernel.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .catalog import NodeKind
from .values import (
    Value, mesh_val, sketch_val,
    normalized, to_count, to_degrees,
)

Args = Dict[str, Any]
Handler = Callable[[Any, Args], Value]


@dataclass
class Operation:
    """The implementation of one node kind."""
    kind: NodeKind
    implementation: Handler
    doc: str = ""

    def __call__(self, kernel, args: Args) -> Value:
        return self.implementation(kernel, args)


class OperationTable:
    """
    Registry of node kind implementations.

    The table is total over :class:`NodeKind`; a kind without an entry is
    a programming error caught by the test suite.
    """

    def __init__(self):
        self._operations: Dict[NodeKind, Operation] = {}
        self._register_all()

    def get(self, kind: NodeKind) -> Optional[Operation]:
        """Look up the operation for a kind."""
        return self._operations.get(kind)

    def register(self, kind: NodeKind, implementation: Handler, doc: str = "") -> None:
        """Register (or replace) the operation for a kind."""
        self._operations[kind] = Operation(kind, implementation, doc)

    def __contains__(self, kind: NodeKind) -> bool:
        return kind in self._operations

    def __len__(self) -> int:
        return len(self._operations)

    def _register_all(self) -> None:
        self._register_primitives()
        self._register_sketch_primitives()
        self._register_booleans()
        self._register_transforms()
        self._register_sketch_transforms()
        self._register_arrays()
        self._register_lifting()
        self._register_sections()
        self._register_lattices()

    # --- Primitives ---

    def _register_primitives(self) -> None:
        K = NodeKind

        def _cube(k, a):
            return mesh_val(k.cube(a["size"]))

        def _cuboid(k, a):
            return mesh_val(k.cuboid(a["width"], a["length"], a["height"]))

        def _sphere(k, a):
            return mesh_val(k.sphere(a["radius"], to_count(a["segments"]), to_count(a["stacks"])))

        def _cylinder(k, a):
            return mesh_val(k.cylinder(a["radius"], a["height"], to_count(a["segments"])))

        def _frustum(k, a):
            return mesh_val(k.frustum(a["bottom radius"], a["top radius"], a["height"],
                                      to_count(a["segments"])))

        def _torus(k, a):
            return mesh_val(k.torus(a["major radius"], a["minor radius"],
                                    to_count(a["segments"]), to_count(a["sides"])))

        self.register(K.CUBE, _cube, "Cube spanning [0, size] on each axis")
        self.register(K.CUBOID, _cuboid, "Box spanning [0, w] x [0, l] x [0, h]")
        self.register(K.SPHERE, _sphere, "UV sphere centered on the origin")
        self.register(K.CYLINDER, _cylinder, "Cylinder standing on the XY plane")
        self.register(K.FRUSTUM, _frustum, "Truncated cone standing on the XY plane")
        self.register(K.TORUS, _torus, "Torus around the z axis")

    def _register_sketch_primitives(self) -> None:
        K = NodeKind

        def _square(k, a):
            return sketch_val(k.square(a["size"]))

        def _rectangle(k, a):
            return sketch_val(k.rectangle(a["width"], a["height"]))

        def _circle(k, a):
            return sketch_val(k.circle(a["radius"], to_count(a["segments"])))

        def _ellipse(k, a):
            return sketch_val(k.ellipse(a["width"], a["height"], to_count(a["segments"])))

        def _polygon(k, a):
            return sketch_val(k.regular_polygon(a["radius"], to_count(a["sides"])))

        self.register(K.SQUARE, _square)
        self.register(K.RECTANGLE, _rectangle)
        self.register(K.CIRCLE, _circle)
        self.register(K.ELLIPSE, _ellipse)
        self.register(K.REGULAR_POLYGON, _polygon)

    # --- Booleans ---

    def _register_booleans(self) -> None:
        K = NodeKind

        def _combine(method: str, wrap):
            def _apply(k, a):
                return wrap(getattr(k, method)(a["A"], a["B"]))
            return _apply

        for kind, method in ((K.UNION, "union"), (K.SUBTRACT, "difference"),
                             (K.INTERSECT, "intersection")):
            self.register(kind, _combine(method, mesh_val), f"Solid {method}")
        for kind, method in ((K.SKETCH_UNION, "union"), (K.SKETCH_SUBTRACT, "difference"),
                             (K.SKETCH_INTERSECT, "intersection")):
            self.register(kind, _combine(method, sketch_val), f"Sketch {method}")

    # --- Transforms ---

    def _register_transforms(self) -> None:
        K = NodeKind

        def _translate(k, a):
            return mesh_val(k.translate(a["in"], *a["offset"]))

        def _rotate(k, a):
            axis = normalized(a["axis"])
            deg = to_degrees(a["angle (rad)"])
            return mesh_val(k.rotate(a["in"], axis[0] * deg, axis[1] * deg, axis[2] * deg))

        def _scale(k, a):
            return mesh_val(k.scale(a["in"], *a["factors"]))

        def _mirror(k, a):
            return mesh_val(k.mirror(a["in"], a["normal"], a["offset"]))

        self.register(K.TRANSLATE, _translate)
        self.register(K.ROTATE, _rotate, "Euler rotation by axis * angle")
        self.register(K.SCALE, _scale)
        self.register(K.MIRROR, _mirror, "Reflect across the plane normal . p == offset")
        self.register(K.CENTER, lambda k, a: mesh_val(k.center(a["in"])))
        self.register(K.FLOAT, lambda k, a: mesh_val(k.float_to_floor(a["in"])))
        self.register(K.INVERSE, lambda k, a: mesh_val(k.inverse(a["in"])))

    def _register_sketch_transforms(self) -> None:
        K = NodeKind

        def _translate(k, a):
            x, y, _ = a["offset"]
            return sketch_val(k.translate(a["in"], x, y, 0.0))

        def _rotate(k, a):
            return sketch_val(k.rotate_sketch(a["in"], to_degrees(a["angle (rad)"])))

        def _scale(k, a):
            x, y, _ = a["factors"]
            return sketch_val(k.scale(a["in"], x, y, 1.0))

        def _mirror(k, a):
            return sketch_val(k.mirror_sketch(a["in"], a["normal"], a["offset"]))

        self.register(K.SKETCH_TRANSLATE, _translate)
        self.register(K.SKETCH_ROTATE, _rotate)
        self.register(K.SKETCH_SCALE, _scale)
        self.register(K.SKETCH_MIRROR, _mirror, "Reflect across the line normal . p == offset")
        self.register(K.SKETCH_CENTER, lambda k, a: sketch_val(k.center(a["in"])))
        self.register(K.SKETCH_FLOAT, lambda k, a: sketch_val(k.float_to_floor(a["in"])))
        self.register(K.SKETCH_INVERSE, lambda k, a: sketch_val(k.inverse(a["in"])))

    # --- Arrays ---

    def _register_arrays(self) -> None:
        K = NodeKind

        def _arrays(wrap):
            def _linear(k, a):
                return wrap(k.linear_array(a["in"], to_count(a["count"]), a["offset"]))

            def _grid(k, a):
                return wrap(k.grid_array(a["in"], to_count(a["rows"]),
                                         to_count(a["columns"]), a["spacing"]))

            def _arc(k, a):
                return wrap(k.arc_array(a["in"], to_count(a["count"]), a["radius"],
                                        to_degrees(a["start angle (rad)"]),
                                        to_degrees(a["end angle (rad)"])))

            return _linear, _grid, _arc

        linear, grid, arc = _arrays(mesh_val)
        self.register(K.LINEAR_ARRAY, linear)
        self.register(K.GRID_ARRAY, grid)
        self.register(K.ARC_ARRAY, arc)
        linear, grid, arc = _arrays(sketch_val)
        self.register(K.SKETCH_LINEAR_ARRAY, linear)
        self.register(K.SKETCH_GRID_ARRAY, grid)
        self.register(K.SKETCH_ARC_ARRAY, arc)

    # --- Lifting ---

    def _register_lifting(self) -> None:
        K = NodeKind

        def _extrude(k, a):
            return mesh_val(k.extrude(a["profile"], a["height"]))

        def _extrude_vector(k, a):
            return mesh_val(k.extrude_vector(a["profile"], a["direction"]))

        def _revolve(k, a):
            return mesh_val(k.revolve(a["profile"], to_degrees(a["angle (rad)"]),
                                      to_count(a["segments"])))

        def _loft(k, a):
            return mesh_val(k.loft(a["bottom"], a["top"], a["height"], a["caps"] != 0.0))

        def _sweep(k, a):
            return mesh_val(k.sweep(a["profile"], a["path"]))

        self.register(K.EXTRUDE, _extrude)
        self.register(K.EXTRUDE_VECTOR, _extrude_vector)
        self.register(K.REVOLVE, _revolve, "Revolve about the sketch y axis")
        self.register(K.LOFT, _loft)
        self.register(K.SWEEP, _sweep)

    # --- Sections ---

    def _register_sections(self) -> None:
        K = NodeKind
        self.register(K.FLATTEN, lambda k, a: sketch_val(k.flatten(a["in"])),
                      "Projection onto the XY plane")
        self.register(K.SLICE, lambda k, a: sketch_val(k.slice(a["in"], a["normal"], a["offset"])),
                      "Cross-section with the plane normal . p == offset")

    # --- Lattices ---

    def _register_lattices(self) -> None:
        K = NodeKind

        def _lattice(method: str):
            def _apply(k, a):
                return mesh_val(getattr(k, method)(a["in"], to_count(a["resolution"]),
                                                   a["period"], a["iso value"]))
            return _apply

        self.register(K.GYROID, _lattice("gyroid"))
        self.register(K.SCHWARZ_P, _lattice("schwarz_p"))
        self.register(K.SCHWARZ_D, _lattice("schwarz_d"))


# Global singleton table
_table: Optional[OperationTable] = None


def get_operation_table() -> OperationTable:
    """Get the global operation table."""
    global _table
    if _table is None:
        _table = OperationTable()
    return _table
