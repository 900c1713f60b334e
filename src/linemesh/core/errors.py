"""Exception hierarchy for description, reference and validation faults."""

from __future__ import annotations

from enum import Enum
from typing import Any


class LineMeshError(Exception):
    """Base class for all errors raised by linemesh."""


class DescriptionError(LineMeshError):
    """Raw description data does not have the shape of a mesh collection."""

    def __init__(self, message: str, mesh_index: int | None = None, field: str | None = None) -> None:
        self.mesh_index = mesh_index
        self.field = field
        location = []
        if mesh_index is not None:
            location.append(f"mesh {mesh_index}")
        if field is not None:
            location.append(f"field '{field}'")
        prefix = f"{', '.join(location)}: " if location else ""
        super().__init__(prefix + message)


class ScriptError(LineMeshError):
    """A Lua description failed to run or did not produce a mesh list."""


class ReferenceKind(Enum):
    """Why a reference could not be resolved."""

    OUT_OF_RANGE = "out_of_range"
    UNRESOLVED_TARGET = "unresolved_target"
    CYCLE = "cycle"


class MeshReferenceError(LineMeshError):
    """A field reference points outside the collection or at no concrete data.

    Attributes:
        kind: Category of the failure
        mesh_index: Mesh holding the reference
        field: Name of the referencing field
        target_index: Mesh index the reference named
    """

    def __init__(self, kind: ReferenceKind, mesh_index: int, field: str, target_index: int) -> None:
        self.kind = kind
        self.mesh_index = mesh_index
        self.field = field
        self.target_index = target_index
        if kind is ReferenceKind.OUT_OF_RANGE:
            detail = "points outside the collection"
        elif kind is ReferenceKind.CYCLE:
            detail = "is part of a reference cycle"
        else:
            detail = f"points at mesh {target_index} which has no concrete '{field}'"
        super().__init__(
            f"mesh {mesh_index}: reference to mesh {target_index} for '{field}' {detail}"
        )


class MeshValidationError(LineMeshError):
    """Base class for structural faults found in a single mesh.

    Attributes:
        mesh_index: Index of the failing mesh, or None if validated standalone
    """

    def __init__(self, message: str, mesh_index: int | None = None) -> None:
        self.mesh_index = mesh_index
        self.detail = message
        super().__init__(self._format())

    def _format(self) -> str:
        if self.mesh_index is None:
            return self.detail
        return f"mesh {self.mesh_index}: {self.detail}"


class ColorLengthMismatch(MeshValidationError):
    """The decoded color table does not have one entry per vertex."""

    def __init__(self, vertex_count: int, color_count: int, mesh_index: int | None = None) -> None:
        self.vertex_count = vertex_count
        self.color_count = color_count
        super().__init__(
            f"invalid color table length: {color_count} colors for {vertex_count} vertexes",
            mesh_index,
        )


class DegenerateSegment(MeshValidationError):
    """A segment has fewer than two vertex indices."""

    def __init__(self, segment_index: int, segment: Any, mesh_index: int | None = None) -> None:
        self.segment_index = segment_index
        self.segment = segment
        super().__init__(f"invalid segment {segment_index}: {list(segment)}", mesh_index)


class InvalidVertexDimension(MeshValidationError):
    """A vertex does not have exactly 2 or 3 coordinates."""

    def __init__(self, vertex_index: int, vertex: Any, mesh_index: int | None = None) -> None:
        self.vertex_index = vertex_index
        self.vertex = vertex
        super().__init__(f"invalid vertex {vertex_index}: {list(vertex)}", mesh_index)


class SegmentIndexOutOfRange(MeshValidationError):
    """A segment refers to a vertex index the mesh does not have."""

    def __init__(
        self, segment_index: int, vertex_index: int, vertex_count: int, mesh_index: int | None = None
    ) -> None:
        self.segment_index = segment_index
        self.vertex_index = vertex_index
        self.vertex_count = vertex_count
        super().__init__(
            f"segment {segment_index} uses vertex {vertex_index} "
            f"but the mesh has {vertex_count} vertexes",
            mesh_index,
        )
