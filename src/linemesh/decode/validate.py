"""Structural checks run on a resolved, decoded mesh before assembly."""

from __future__ import annotations

from ..core.errors import (
    ColorLengthMismatch,
    DegenerateSegment,
    InvalidVertexDimension,
    SegmentIndexOutOfRange,
)
from ..core.mesh import ColorTable, Mesh

VALID_VERTEX_DIMENSIONS = (2, 3)


def validate_mesh(mesh: Mesh, mesh_index: int | None = None) -> None:
    """Check a mesh and raise on the first violation found.

    Checks run in order: color table length, segment length, vertex
    dimension, then segment indices against the vertex list.

    Args:
        mesh: Mesh with references resolved and colors decoded
        mesh_index: Position in the collection, attached to errors

    Raises:
        ColorLengthMismatch: Color table and vertex list differ in length
        DegenerateSegment: A segment has fewer than two indices
        InvalidVertexDimension: A vertex is not 2D or 3D
        SegmentIndexOutOfRange: A segment names a missing vertex
        ValueError: If the mesh has not been resolved and decoded
    """
    if not mesh.is_decoded:
        raise ValueError("mesh must have references resolved and colors decoded before validation")

    vertex_count = len(mesh.vertexes)

    if isinstance(mesh.colors, ColorTable) and len(mesh.colors) != vertex_count:
        raise ColorLengthMismatch(vertex_count, len(mesh.colors), mesh_index)

    for segment_index, segment in enumerate(mesh.segments):
        if len(segment) < 2:
            raise DegenerateSegment(segment_index, segment, mesh_index)

    for vertex_index, vertex in enumerate(mesh.vertexes):
        if len(vertex) not in VALID_VERTEX_DIMENSIONS:
            raise InvalidVertexDimension(vertex_index, vertex, mesh_index)

    for segment_index, segment in enumerate(mesh.segments):
        for index in segment:
            if not 0 <= index < vertex_count:
                raise SegmentIndexOutOfRange(segment_index, index, vertex_count, mesh_index)
