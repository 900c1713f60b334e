"""Turn plain nested data into a typed MeshCollection.

Accepted shape (lists may be any sequence, including numpy arrays):

    [
        {
            "vertexes": [[x, y], [x, y, z], ...],    # or a mesh index
            "segments": [[i, j, k], ...],            # or a mesh index
            "colors": {0xRRGGBBAA: [i, [start, end], ...]},
        },
        ...
    ]

A bare number in place of a field is a reference to the same field of
the mesh at that index. `colors` may also be a dense list with one packed
color (or None) per vertex.
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np

from ..config import REFERENCE_FIELDS
from ..core.errors import DescriptionError
from ..core.mesh import ColorScheme, ColorTable, Mesh, MeshCollection, Reference

logger = logging.getLogger(__name__)


def _is_sequence(value: Any) -> bool:
    if isinstance(value, (str, bytes)):
        return False
    return isinstance(value, (Sequence, np.ndarray))


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _as_int(value: Any, mesh_index: int, field: str, what: str) -> int:
    """Integer value of an index-like number, accepting integral floats."""
    if not _is_number(value):
        raise DescriptionError(f"{what} must be a number, got {value!r}", mesh_index, field)
    if isinstance(value, numbers.Integral):
        return int(value)
    if not float(value).is_integer():
        raise DescriptionError(f"{what} must be a whole number, got {value!r}", mesh_index, field)
    return int(value)


def _as_color(value: Any, mesh_index: int) -> int:
    """Packed color from a number or a numeric string such as '0xFF0000FF'."""
    if isinstance(value, str):
        try:
            return int(value, 0) & 0xFFFFFFFF
        except ValueError:
            raise DescriptionError(f"invalid color {value!r}", mesh_index, "colors") from None
    if not _is_number(value):
        raise DescriptionError(f"color must be a number, got {value!r}", mesh_index, "colors")
    return int(value) & 0xFFFFFFFF


def _reference(value: Any, mesh_index: int, field: str, reference_base: int) -> Reference:
    return Reference(_as_int(value, mesh_index, field, "reference") - reference_base)


def parse_vertexes(value: Any, mesh_index: int = 0, reference_base: int = 0):
    """Parse a vertex list or a reference to one."""
    if _is_number(value):
        return _reference(value, mesh_index, "vertexes", reference_base)
    if not _is_sequence(value):
        raise DescriptionError(f"expected a list of vertexes, got {value!r}", mesh_index, "vertexes")

    vertexes = []
    for vertex in value:
        if not _is_sequence(vertex) or not all(_is_number(c) for c in vertex):
            raise DescriptionError(f"vertex must be a list of numbers, got {vertex!r}", mesh_index, "vertexes")
        vertexes.append(tuple(float(c) for c in vertex))
    return tuple(vertexes)


def parse_segments(value: Any, mesh_index: int = 0, reference_base: int = 0):
    """Parse a segment list or a reference to one."""
    if _is_number(value):
        return _reference(value, mesh_index, "segments", reference_base)
    if not _is_sequence(value):
        raise DescriptionError(f"expected a list of segments, got {value!r}", mesh_index, "segments")

    segments = []
    for segment in value:
        if not _is_sequence(segment):
            raise DescriptionError(f"segment must be a list of indices, got {segment!r}", mesh_index, "segments")
        segments.append(tuple(_as_int(i, mesh_index, "segments", "vertex index") for i in segment))
    return tuple(segments)


def parse_selector(value: Any, mesh_index: int = 0):
    """Parse one color selector: an index or an inclusive [start, end] pair."""
    if _is_sequence(value):
        if len(value) != 2:
            raise DescriptionError(f"color range must be [start, end], got {value!r}", mesh_index, "colors")
        start, end = value
        return (
            _as_int(start, mesh_index, "colors", "range start"),
            _as_int(end, mesh_index, "colors", "range end"),
        )
    return _as_int(value, mesh_index, "colors", "color selector")


def parse_colors(value: Any, mesh_index: int = 0, reference_base: int = 0):
    """Parse the colors field.

    Returns:
        None, a Reference, a ColorScheme (mapping input) or a ColorTable
        (dense list input)
    """
    if value is None:
        return None
    if _is_number(value):
        return _reference(value, mesh_index, "colors", reference_base)
    if isinstance(value, Mapping):
        groups = []
        for color, selectors in value.items():
            if not _is_sequence(selectors):
                raise DescriptionError(
                    f"selectors for color {color!r} must be a list, got {selectors!r}", mesh_index, "colors"
                )
            groups.append((_as_color(color, mesh_index), tuple(parse_selector(s, mesh_index) for s in selectors)))
        return ColorScheme(tuple(groups))
    if _is_sequence(value):
        return ColorTable(tuple(None if c is None else _as_color(c, mesh_index) for c in value))
    raise DescriptionError(f"unsupported colors value {value!r}", mesh_index, "colors")


def parse_mesh(data: Any, mesh_index: int = 0, reference_base: int = 0) -> Mesh:
    """Parse one mesh record.

    Args:
        data: Mapping with vertexes, segments and optional colors
        mesh_index: Position of the record, used in error messages
        reference_base: Index the description uses for its first mesh

    Raises:
        DescriptionError: If the record does not have the expected shape
    """
    if not isinstance(data, Mapping):
        raise DescriptionError(f"mesh must be a mapping, got {type(data).__name__}", mesh_index)
    for name in ("vertexes", "segments"):
        if data.get(name) is None:
            raise DescriptionError("missing required field", mesh_index, name)

    unknown = [key for key in data if key not in REFERENCE_FIELDS]
    if unknown:
        logger.debug(f"Mesh {mesh_index}: ignoring fields {unknown}")

    return Mesh(
        vertexes=parse_vertexes(data["vertexes"], mesh_index, reference_base),
        segments=parse_segments(data["segments"], mesh_index, reference_base),
        colors=parse_colors(data.get("colors"), mesh_index, reference_base),
    )


def parse_collection(data: Any, reference_base: int = 0) -> MeshCollection:
    """Parse a whole description.

    Args:
        data: List of mesh records, or a mapping holding one under "meshes"
        reference_base: Index the description uses for its first mesh
            (0 for plain data and YAML, 1 for Lua)

    Returns:
        MeshCollection with references kept as Reference values
    """
    if isinstance(data, Mapping):
        if "meshes" not in data:
            raise DescriptionError("expected a 'meshes' entry")
        data = data["meshes"]
    if not _is_sequence(data):
        raise DescriptionError(f"expected a list of meshes, got {type(data).__name__}")
    return MeshCollection(
        tuple(parse_mesh(mesh, index, reference_base) for index, mesh in enumerate(data))
    )
