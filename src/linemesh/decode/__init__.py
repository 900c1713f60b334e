"""Decoding stages: reference resolution, color decompression, validation, assembly."""

from .references import resolve_mesh, resolve_references
from .colors import decompress_colors, decompress_scheme, unpack_color, unpack_colors
from .validate import validate_mesh
from .assemble import assemble_mesh
from .pipeline import convert, convert_each, convert_mesh, prepare

__all__ = [
    "resolve_mesh",
    "resolve_references",
    "decompress_colors",
    "decompress_scheme",
    "unpack_color",
    "unpack_colors",
    "validate_mesh",
    "assemble_mesh",
    "convert",
    "convert_each",
    "convert_mesh",
    "prepare",
]
