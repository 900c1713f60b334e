"""Mesh records and the collection they live in."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Iterator, Sequence, Union

from ..config import REFERENCE_FIELDS

Vertex = tuple[float, ...]
Segment = tuple[int, ...]
Selector = Union[int, tuple[int, int]]


@dataclass(frozen=True)
class Reference:
    """Stand-in for a whole field that lives on another mesh.

    Attributes:
        mesh_index: 0-based position of the mesh holding the field
    """

    mesh_index: int


@dataclass(frozen=True)
class ColorScheme:
    """Compressed colors: each packed RGBA value with the vertexes it covers.

    Selectors are single vertex indices or inclusive (start, end) ranges.
    Groups keep the order they were written in.
    """

    groups: tuple[tuple[int, tuple[Selector, ...]], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: dict[int, Sequence[Selector]]) -> ColorScheme:
        """Build a scheme from a color -> selectors mapping."""
        return cls(tuple((color, tuple(selectors)) for color, selectors in mapping.items()))

    def __len__(self) -> int:
        return len(self.groups)


@dataclass(frozen=True)
class ColorTable:
    """Decoded colors, one packed RGBA value per vertex.

    A None entry means the vertex has no color of its own and renders
    with the fallback color.

    Attributes:
        values: Packed color or None per stored entry
        length: Length the table claims when a selector reached past the
            stored entries, or None when it is just len(values)
    """

    values: tuple[int | None, ...] = ()
    length: int | None = None

    def __len__(self) -> int:
        if self.length is not None:
            return self.length
        return len(self.values)

    def __getitem__(self, index: int) -> int | None:
        return self.values[index]

    @property
    def missing_count(self) -> int:
        """Number of vertexes without an explicit color."""
        return sum(1 for value in self.values if value is None)


VertexField = Union[tuple[Vertex, ...], Reference]
SegmentField = Union[tuple[Segment, ...], Reference]
ColorField = Union[ColorScheme, ColorTable, Reference, None]


@dataclass(frozen=True)
class Mesh:
    """One line mesh of a description.

    Fields holding a Reference are resolved against the owning collection
    before anything reads them.

    Attributes:
        vertexes: 2D or 3D points, or a reference
        segments: Polylines as vertex index sequences, or a reference
        colors: Compressed scheme, decoded table, reference, or None
    """

    vertexes: VertexField = ()
    segments: SegmentField = ()
    colors: ColorField = None

    def references(self) -> dict[str, Reference]:
        """Fields that still point at another mesh."""
        found = {}
        for name in REFERENCE_FIELDS:
            value = getattr(self, name)
            if isinstance(value, Reference):
                found[name] = value
        return found

    @property
    def is_resolved(self) -> bool:
        """True when no field holds a reference."""
        return not self.references()

    @property
    def is_decoded(self) -> bool:
        """True when resolved and colors are absent or already a dense table."""
        return self.is_resolved and not isinstance(self.colors, ColorScheme)

    @property
    def vertex_count(self) -> int:
        """Number of vertexes (the field must be resolved)."""
        if isinstance(self.vertexes, Reference):
            raise ValueError("vertexes is still a reference")
        return len(self.vertexes)

    def replace(self, **changes) -> Mesh:
        """Return a copy with the given fields swapped out."""
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class MeshCollection:
    """Ordered meshes of one description; position is mesh identity."""

    meshes: tuple[Mesh, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "meshes", tuple(self.meshes))

    def __len__(self) -> int:
        return len(self.meshes)

    def __iter__(self) -> Iterator[Mesh]:
        return iter(self.meshes)

    def __getitem__(self, index: int) -> Mesh:
        return self.meshes[index]

    @property
    def is_resolved(self) -> bool:
        """True when no mesh holds a reference."""
        return all(mesh.is_resolved for mesh in self.meshes)
