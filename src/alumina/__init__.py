"""
alumina: a typed node-graph evaluation engine for procedural solid modeling.

Example::

    from alumina import Graph, NodeKind, evaluate

    graph = Graph()
    cube = graph.add_node(NodeKind.CUBE)
    mesh = evaluate(graph, graph.out(cube))
"""

from .types import PortType, SCALAR, VECTOR3, SKETCH, MESH
from .values import (
    Value, unwrap,
    scalar_val, vector_val, sketch_val, mesh_val, default_value,
)
from .errors import (
    EvalError, TypeMismatch, MissingInput, KernelFailure, RootTypeMismatch,
    CyclicDependency, GraphError, UnknownIdError, ConnectionTypeError,
    ConnectionKindError,
)
from .catalog import (
    NodeKind, InputParamKind, InputSpec, OutputSpec, PortSignature,
    PortSignatureBuilder, all_kinds, signature, node_label, node_categories,
    categories, instantiate,
)
from .graph import Graph, Node, InputParam, OutputParam
from .evaluator import Evaluator, RootResult, evaluate, evaluate_sketch, roots
from .trace import TraceEvent, NullTrace, RecordingTrace, LoggingTrace
from .config import Settings, load_settings, save_settings
from .kernel import GeometryKernel, KernelError, Mesh, MeshKernel, Sketch

__version__ = "0.1.0"

__all__ = [
    # Types and values
    "PortType", "SCALAR", "VECTOR3", "SKETCH", "MESH",
    "Value", "unwrap", "scalar_val", "vector_val", "sketch_val", "mesh_val",
    "default_value",
    # Errors
    "EvalError", "TypeMismatch", "MissingInput", "KernelFailure",
    "RootTypeMismatch", "CyclicDependency", "GraphError", "UnknownIdError",
    "ConnectionTypeError", "ConnectionKindError",
    # Catalog
    "NodeKind", "InputParamKind", "InputSpec", "OutputSpec", "PortSignature",
    "PortSignatureBuilder", "all_kinds", "signature", "node_label",
    "node_categories", "categories", "instantiate",
    # Graph and evaluation
    "Graph", "Node", "InputParam", "OutputParam",
    "Evaluator", "RootResult", "evaluate", "evaluate_sketch", "roots",
    # Tracing and settings
    "TraceEvent", "NullTrace", "RecordingTrace", "LoggingTrace",
    "Settings", "load_settings", "save_settings",
    # Kernel
    "GeometryKernel", "KernelError", "Mesh", "MeshKernel", "Sketch",
]
