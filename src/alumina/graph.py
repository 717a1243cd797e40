"""
Graph container: nodes, their ports, and the edges between ports.

The editor owns the graph and mutates it; the evaluator only reads it.
Edges always run from an output port to an input port of the same type.
An input may collect more than one edge; the first one recorded is the
live one (see :meth:`Graph.connection`).
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
import uuid

from .catalog import InputParamKind, NodeKind, instantiate, node_label
from .errors import (
    ConnectionKindError,
    ConnectionTypeError,
    MissingInput,
    UnknownIdError,
)
from .types import PortType
from .values import Value

NodeId = str
InputId = str
OutputId = str


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass
class InputParam:
    """An input port: holds its type and the constant used when unconnected."""
    id: InputId
    node: NodeId
    name: str
    type: PortType
    value: Value
    kind: InputParamKind = InputParamKind.CONNECTION_OR_CONSTANT


@dataclass
class OutputParam:
    """An output port: only a type; its value is computed on demand."""
    id: OutputId
    node: NodeId
    name: str
    type: PortType


@dataclass
class Node:
    """A node instance: a kind plus its ports, by name, in declared order."""
    id: NodeId
    kind: NodeKind
    label: str
    inputs: Dict[str, InputId] = field(default_factory=dict)
    outputs: Dict[str, OutputId] = field(default_factory=dict)

    def get_input(self, name: str) -> InputId:
        """
        Raises:
            MissingInput: if the node has no input called ``name``
        """
        try:
            return self.inputs[name]
        except KeyError:
            raise MissingInput(self.id, name) from None

    def get_output(self, name: str) -> OutputId:
        try:
            return self.outputs[name]
        except KeyError:
            raise UnknownIdError(f"node {self.id} has no output named '{name}'") from None

    @property
    def output_ids(self) -> List[OutputId]:
        return list(self.outputs.values())


class Graph:
    """
    Nodes, ports and edges.

    Example::

        graph = Graph()
        cube = graph.add_node(NodeKind.CUBE)
        move = graph.add_node(NodeKind.TRANSLATE)
        graph.connect(graph.node(cube).get_output("out"),
                      graph.node(move).get_input("in"))
    """

    def __init__(self):
        self.nodes: Dict[NodeId, Node] = {}
        self.inputs: Dict[InputId, InputParam] = {}
        self.outputs: Dict[OutputId, OutputParam] = {}
        # input id -> source output ids, in the order the edges were made
        self._edges: Dict[InputId, List[OutputId]] = {}

    def __repr__(self) -> str:
        edges = sum(len(v) for v in self._edges.values())
        return f"Graph({len(self.nodes)} nodes, {edges} edges)"

    # --- nodes ---

    def add_node(self, kind: NodeKind, label: Optional[str] = None) -> NodeId:
        """Create a node of ``kind`` with the ports its signature declares."""
        node_id = _new_id("node")
        self.nodes[node_id] = Node(node_id, kind, label or node_label(kind))
        instantiate(self, kind, node_id)
        return node_id

    def remove_node(self, node_id: NodeId) -> None:
        """Delete a node, its ports and every edge touching them."""
        node = self.node(node_id)
        for input_id in node.inputs.values():
            self._edges.pop(input_id, None)
            del self.inputs[input_id]
        dropped = set(node.outputs.values())
        for input_id in list(self._edges):
            remaining = [o for o in self._edges[input_id] if o not in dropped]
            if remaining:
                self._edges[input_id] = remaining
            else:
                del self._edges[input_id]
        for output_id in dropped:
            del self.outputs[output_id]
        del self.nodes[node_id]

    def add_input_param(self, node_id: NodeId, name: str, type: PortType, value: Value,
                        kind: InputParamKind = InputParamKind.CONNECTION_OR_CONSTANT) -> InputId:
        node = self.node(node_id)
        input_id = _new_id("in")
        self.inputs[input_id] = InputParam(input_id, node_id, name, type, value, kind)
        node.inputs[name] = input_id
        return input_id

    def add_output_param(self, node_id: NodeId, name: str, type: PortType) -> OutputId:
        node = self.node(node_id)
        output_id = _new_id("out")
        self.outputs[output_id] = OutputParam(output_id, node_id, name, type)
        node.outputs[name] = output_id
        return output_id

    # --- lookups ---

    def node(self, node_id: NodeId) -> Node:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise UnknownIdError(f"unknown node {node_id}") from None

    def input(self, input_id: InputId) -> InputParam:
        try:
            return self.inputs[input_id]
        except KeyError:
            raise UnknownIdError(f"unknown input {input_id}") from None

    def output(self, output_id: OutputId) -> OutputParam:
        try:
            return self.outputs[output_id]
        except KeyError:
            raise UnknownIdError(f"unknown output {output_id}") from None

    def iter_nodes(self) -> Iterator[Node]:
        return iter(list(self.nodes.values()))

    def output_ids(self) -> List[OutputId]:
        """Every output port, in creation order."""
        return list(self.outputs)

    def input_ids(self) -> List[InputId]:
        return list(self.inputs)

    # --- edges ---

    def connect(self, output_id: OutputId, input_id: InputId) -> None:
        """
        Add an edge from ``output_id`` to ``input_id``.

        Raises:
            UnknownIdError: if either port does not exist
            ConnectionTypeError: if the ports declare different types
            ConnectionKindError: if the input only takes a constant
        """
        source = self.output(output_id)
        target = self.input(input_id)
        if source.type is not target.type:
            raise ConnectionTypeError(output_id, input_id, source.type, target.type)
        if not target.kind.accepts_connection:
            raise ConnectionKindError(f"input {input_id} ('{target.name}') only accepts a constant")
        sources = self._edges.setdefault(input_id, [])
        if output_id not in sources:
            sources.append(output_id)

    def disconnect(self, output_id: OutputId, input_id: InputId) -> None:
        sources = self._edges.get(input_id)
        if not sources or output_id not in sources:
            raise UnknownIdError(f"no edge from {output_id} to {input_id}")
        sources.remove(output_id)
        if not sources:
            del self._edges[input_id]

    def remove_connections(self, input_id: InputId) -> List[OutputId]:
        """Drop every edge into ``input_id`` and return their sources."""
        return self._edges.pop(input_id, [])

    def connection(self, input_id: InputId) -> Optional[OutputId]:
        """The live source of ``input_id``: the first edge recorded, or None."""
        sources = self._edges.get(input_id)
        return sources[0] if sources else None

    def connections(self, input_id: InputId) -> List[OutputId]:
        return list(self._edges.get(input_id, ()))

    def iter_connections(self) -> Iterator[Tuple[InputId, OutputId]]:
        """Every edge as ``(input_id, output_id)``."""
        for input_id, sources in list(self._edges.items()):
            for output_id in sources:
                yield input_id, output_id

    # --- constants ---

    def set_value(self, input_id: InputId, value: Value) -> None:
        """Store a new constant on an input; its variant is checked at evaluation."""
        self.input(input_id).value = value

    def set_input(self, node_id: NodeId, name: str, value: Value) -> None:
        self.set_value(self.node(node_id).get_input(name), value)

    def out(self, node_id: NodeId, name: str = "out") -> OutputId:
        """Shorthand for ``graph.node(node_id).get_output(name)``."""
        return self.node(node_id).get_output(name)

    def inp(self, node_id: NodeId, name: str) -> InputId:
        """Shorthand for ``graph.node(node_id).get_input(name)``."""
        return self.node(node_id).get_input(name)
