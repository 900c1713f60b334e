"""Decode reference-compressed line mesh descriptions into render buffers."""

from .core import Mesh, MeshCollection, Reference, ColorScheme, ColorTable, RenderBuffer
from .decode import prepare, convert, convert_each, convert_mesh

__all__ = [
    "Mesh",
    "MeshCollection",
    "Reference",
    "ColorScheme",
    "ColorTable",
    "RenderBuffer",
    "prepare",
    "convert",
    "convert_each",
    "convert_mesh",
]
