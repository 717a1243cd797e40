"""
Geometry kernel for alumina.

The evaluator talks to a :class:`GeometryKernel`; :class:`MeshKernel` is
the reference implementation built on BSP-tree CSG (solids) and shapely
(sketches).
"""

from .base import GeometryKernel, KernelError
from .default import MeshKernel
from .mesh import Mesh
from .sketch import Sketch

__all__ = [
    "GeometryKernel",
    "KernelError",
    "Mesh",
    "MeshKernel",
    "Sketch",
]
