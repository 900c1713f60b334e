"""Core data model: meshes, references, color tables and render buffers."""

from .mesh import ColorScheme, ColorTable, Mesh, MeshCollection, Reference
from .buffer import RenderBuffer
from . import errors

__all__ = [
    "ColorScheme",
    "ColorTable",
    "Mesh",
    "MeshCollection",
    "Reference",
    "RenderBuffer",
    "errors",
]
