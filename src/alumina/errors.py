"""
Exceptions raised while building and evaluating node graphs.

Error code ranges:
- E3xx: Graph construction errors (raised by the graph container)
- E4xx: Evaluation errors (raised by the evaluator, one root at a time)

Evaluation errors are never swallowed by the engine. When an error aborts
the evaluation of a root, the evaluator records the root's output id on
the error (``error.root``) before re-raising it, so a host evaluating
several roots can report which one failed and carry on with the rest.
"""

from typing import Any, Dict, Optional


class EvalError(Exception):
    """Base exception for node graph evaluation errors."""

    code = "E400"

    def __init__(self, message: str, root: Optional[str] = None):
        self.message = message
        self.root = root
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        """Error-specific fields for :meth:`to_dict`."""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict for tooling integration."""
        data = {
            "code": self.code,
            "message": self.message,
            "root": self.root,
        }
        data.update(self.details())
        return data

    def __str__(self) -> str:
        if self.root is not None:
            return f"{self.message} (root {self.root})"
        return self.message


class TypeMismatch(EvalError):
    """E401: a port resolved to a different value variant than it requires."""

    code = "E401"

    def __init__(self, port: Optional[str], expected, actual):
        self.port = port
        self.expected = expected
        self.actual = actual
        where = f" at port {port}" if port is not None else ""
        super().__init__(f"type mismatch{where}: expected '{expected}', found '{actual}'")

    def details(self) -> Dict[str, Any]:
        return {
            "port": self.port,
            "expected": str(self.expected),
            "actual": str(self.actual),
        }


class MissingInput(EvalError):
    """E402: a node kind requested a named input the node does not have."""

    code = "E402"

    def __init__(self, node: str, port_name: str):
        self.node = node
        self.port_name = port_name
        super().__init__(f"node {node} has no input named '{port_name}'")

    def details(self) -> Dict[str, Any]:
        return {"node": self.node, "port_name": self.port_name}


class KernelFailure(EvalError):
    """E403: the geometry kernel rejected an operation."""

    code = "E403"

    def __init__(self, node: str, cause: BaseException):
        self.node = node
        self.cause = cause
        super().__init__(f"geometry kernel failed at node {node}: {cause}")

    def details(self) -> Dict[str, Any]:
        return {"node": self.node, "cause": str(self.cause)}


class RootTypeMismatch(EvalError):
    """E404: the evaluated root did not produce the requested value variant."""

    code = "E404"

    def __init__(self, root: str, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"root output evaluates to '{actual}', expected '{expected}'",
            root=root,
        )

    def details(self) -> Dict[str, Any]:
        return {"expected": str(self.expected), "actual": str(self.actual)}


class CyclicDependency(EvalError):
    """E405: an output depends on itself through a chain of edges."""

    code = "E405"

    def __init__(self, output: str):
        self.output = output
        super().__init__(f"output {output} depends on itself")

    def details(self) -> Dict[str, Any]:
        return {"output": self.output}


class GraphError(Exception):
    """E300: invalid graph construction request."""

    code = "E300"


class UnknownIdError(GraphError, KeyError):
    """E301: a node, input or output id is not part of the graph."""

    code = "E301"

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown id"


class ConnectionTypeError(GraphError):
    """E302: an edge would connect ports of different types."""

    code = "E302"

    def __init__(self, output: str, input: str, output_type, input_type):
        self.output = output
        self.input = input
        self.output_type = output_type
        self.input_type = input_type
        super().__init__(
            f"cannot connect {output_type} output {output} "
            f"to {input_type} input {input}"
        )


class ConnectionKindError(GraphError):
    """E303: an edge would target an input that only accepts a constant."""

    code = "E303"
