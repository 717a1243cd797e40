"""
Graph evaluator.

Evaluates one output port (a *root*) of a node graph to a concrete
value. Each top-level call owns a cache keyed by output port, so a
sub-graph feeding several inputs is computed once per call. The walk is
post-order over an explicit stack:

1. a cached output is returned as is;
2. otherwise the owning node's declared inputs are resolved in order,
   each from the first edge into it or else from its stored constant,
   and unwrapped to the variant the signature declares;
3. the node's operation runs on the unwrapped arguments;
4. the result is cached under the output being resolved.

Any error aborts the root. The error is re-raised with ``error.root``
set to the root's output id; nothing is retried and no partial geometry
is returned.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .catalog import InputSpec, signature
from .errors import (
    CyclicDependency,
    EvalError,
    GraphError,
    KernelFailure,
    RootTypeMismatch,
)
from .graph import Graph, Node, OutputId
from .kernel import KernelError, MeshKernel
from .operations import OperationTable, get_operation_table
from .trace import (
    CACHE_HIT, ENTER, ERROR, EVALUATE, EXIT,
    LoggingTrace, NullTrace, TraceEvent,
)
from .types import MESH, SKETCH, PortType
from .values import Value, unwrap


@dataclass
class RootResult:
    """
    Outcome of evaluating one root: a mesh or the error that aborted it.

    ``error`` is an :class:`EvalError`, or a :class:`GraphError` when the
    root id itself is not part of the graph.
    """
    root: OutputId
    mesh: Any = None
    error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class _Frame:
    """A node waiting for its inputs."""
    output: OutputId
    node: Node
    specs: tuple
    position: int = 0
    args: Dict[str, Any] = field(default_factory=dict)
    waiting: Optional[OutputId] = None


def roots(graph: Graph) -> List[OutputId]:
    """
    Output ports that feed no input, in graph order.

    Only the live (first) edge into each input counts. The list is derived
    from the current edges on every call.
    """
    seen = set()
    for input_id in graph.input_ids():
        source = graph.connection(input_id)
        if source is not None:
            seen.add(source)
    return [output_id for output_id in graph.output_ids() if output_id not in seen]


class Evaluator:
    """
    Evaluates graph roots against a geometry kernel.

    Args:
        kernel: the :class:`~alumina.kernel.GeometryKernel` to call;
            defaults to a :class:`~alumina.kernel.MeshKernel`
        trace: event sink; defaults to :class:`~alumina.trace.NullTrace`
        operations: operation table; defaults to the global table
    """

    def __init__(self, kernel=None, trace=None, operations: Optional[OperationTable] = None):
        self.kernel = kernel if kernel is not None else MeshKernel()
        self.trace = trace if trace is not None else NullTrace()
        self.operations = operations if operations is not None else get_operation_table()

    @classmethod
    def from_settings(cls, settings) -> "Evaluator":
        trace = LoggingTrace(level=settings.level) if settings.trace else NullTrace()
        return cls(kernel=MeshKernel(settings), trace=trace)

    # --- public entry points ---

    def evaluate(self, graph: Graph, root: OutputId):
        """Evaluate ``root`` and return its Mesh."""
        return self._evaluate_as(graph, root, MESH)

    def evaluate_sketch(self, graph: Graph, root: OutputId):
        """Evaluate ``root`` and return its Sketch."""
        return self._evaluate_as(graph, root, SKETCH)

    def evaluate_value(self, graph: Graph, root: OutputId) -> Value:
        """Evaluate ``root`` to whatever variant it produces."""
        self._emit(EVALUATE, root)
        cache: Dict[OutputId, Value] = {}
        try:
            return self._resolve(graph, root, cache)
        except EvalError as exc:
            if exc.root is None:
                exc.root = root
            self._emit(ERROR, root, detail=f"{exc.code} {exc.message}")
            raise

    def evaluate_roots(self, graph: Graph,
                       root_ids: Optional[List[OutputId]] = None) -> List[RootResult]:
        """
        Evaluate several roots (all of them by default), each with a fresh
        cache. A failing root, including one whose id is not in the graph,
        is reported in its result and does not stop the others.
        """
        results = []
        for root in (roots(graph) if root_ids is None else root_ids):
            try:
                results.append(RootResult(root, mesh=self.evaluate(graph, root)))
            except (EvalError, GraphError) as exc:
                results.append(RootResult(root, error=exc))
        return results

    # --- internals ---

    def _evaluate_as(self, graph: Graph, root: OutputId, expected: PortType):
        value = self.evaluate_value(graph, root)
        if value.type is not expected:
            exc = RootTypeMismatch(root, expected, value.type)
            self._emit(ERROR, root, detail=f"{exc.code} {exc.message}")
            raise exc
        return value.data

    def _emit(self, kind: str, output: OutputId, node: Optional[Node] = None,
              detail: Optional[str] = None) -> None:
        self.trace.emit(TraceEvent(
            kind,
            output,
            node=node.id if node is not None else None,
            node_kind=node.kind if node is not None else None,
            detail=detail,
        ))

    def _frame(self, graph: Graph, output_id: OutputId) -> _Frame:
        node = graph.node(graph.output(output_id).node)
        self._emit(ENTER, output_id, node)
        return _Frame(output_id, node, signature(node.kind).inputs)

    def _resolve(self, graph: Graph, root: OutputId, cache: Dict[OutputId, Value]) -> Value:
        if root in cache:
            self._emit(CACHE_HIT, root)
            return cache[root]
        stack = [self._frame(graph, root)]
        active = {root}
        while stack:
            frame = stack[-1]
            pending = self._advance(graph, frame, cache, active)
            if pending is not None:
                active.add(pending)
                stack.append(self._frame(graph, pending))
                continue
            cache[frame.output] = self._compute(frame)
            self._emit(EXIT, frame.output, frame.node)
            active.discard(frame.output)
            stack.pop()
        return cache[root]

    def _advance(self, graph: Graph, frame: _Frame, cache: Dict[OutputId, Value],
                 active: set) -> Optional[OutputId]:
        """
        Resolve the frame's remaining inputs in order. Returns the first
        source output that still has to be computed, or None once every
        input is resolved.
        """
        while frame.position < len(frame.specs):
            spec: InputSpec = frame.specs[frame.position]
            input_id = frame.node.get_input(spec.name)
            source = graph.connection(input_id)
            if source is None:
                value = graph.input(input_id).value
            elif source in cache:
                if source != frame.waiting:
                    self._emit(CACHE_HIT, source)
                frame.waiting = None
                value = cache[source]
            elif source in active:
                raise CyclicDependency(source)
            else:
                frame.waiting = source
                return source
            frame.args[spec.name] = unwrap(value, spec.type, input_id)
            frame.position += 1
        return None

    def _compute(self, frame: _Frame) -> Value:
        node = frame.node
        operation = self.operations.get(node.kind)
        if operation is None:
            raise KernelFailure(node.id, NotImplementedError(f"no operation for {node.kind}"))
        try:
            return operation(self.kernel, frame.args)
        except (KernelError, ValueError, ArithmeticError) as exc:
            raise KernelFailure(node.id, exc) from exc


# Module-level convenience functions using a default evaluator

def evaluate(graph: Graph, root: OutputId):
    """Evaluate ``root`` with the default kernel and return its Mesh."""
    return Evaluator().evaluate(graph, root)


def evaluate_sketch(graph: Graph, root: OutputId):
    """Evaluate ``root`` with the default kernel and return its Sketch."""
    return Evaluator().evaluate_sketch(graph, root)
