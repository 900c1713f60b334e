"""Flat line-list buffers handed to a renderer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np
from numpy.typing import NDArray

from ..config import BUFFER_DTYPE, COLOR_SIZE, POSITION_SIZE

if TYPE_CHECKING:
    import pyrender
    import trimesh


class RenderBuffer:
    """Position and color arrays laid out for line-list rendering.

    Every consecutive pair of rows forms one edge. Arrays are stored
    read-only so a buffer cannot change after it has been produced.
    """

    def __init__(self, positions: NDArray[np.float32], colors: NDArray[np.float32]) -> None:
        """Create a buffer from aligned arrays.

        Args:
            positions: Nx3 endpoint positions, N even
            colors: Nx4 RGBA colors in the 0-1 range, one per position
        """
        positions = np.array(positions, dtype=BUFFER_DTYPE).reshape(-1, POSITION_SIZE)
        colors = np.array(colors, dtype=BUFFER_DTYPE).reshape(-1, COLOR_SIZE)
        if len(positions) != len(colors):
            raise ValueError(
                f"positions and colors are not aligned: {len(positions)} != {len(colors)}"
            )
        if len(positions) % 2:
            raise ValueError(f"line list needs an even number of endpoints, got {len(positions)}")

        positions.setflags(write=False)
        colors.setflags(write=False)
        self.positions = positions
        self.colors = colors

    def __repr__(self) -> str:
        return f"RenderBuffer(edges={self.edge_count})"

    def __len__(self) -> int:
        return len(self.positions)

    @property
    def vertex_count(self) -> int:
        """Number of emitted endpoints (twice the edge count)."""
        return len(self.positions)

    @property
    def edge_count(self) -> int:
        """Number of line edges."""
        return len(self.positions) // 2

    @property
    def is_empty(self) -> bool:
        return len(self.positions) == 0

    @property
    def bounds(self) -> NDArray[np.float64] | None:
        """Axis-aligned bounds as [[min x, y, z], [max x, y, z]], None when empty."""
        if self.is_empty:
            return None
        return np.array([self.positions.min(axis=0), self.positions.max(axis=0)], dtype=np.float64)

    def segments(self) -> NDArray[np.float32]:
        """Edges as an (edges, 2, 3) view of the positions."""
        return self.positions.reshape(-1, 2, POSITION_SIZE)

    @classmethod
    def empty(cls) -> RenderBuffer:
        return cls(
            np.empty((0, POSITION_SIZE), dtype=BUFFER_DTYPE),
            np.empty((0, COLOR_SIZE), dtype=BUFFER_DTYPE),
        )

    @staticmethod
    def concatenate(buffers: Sequence[RenderBuffer]) -> RenderBuffer:
        """Join buffers end to end, keeping their order.

        Args:
            buffers: Buffers to join

        Returns:
            New RenderBuffer containing all edges
        """
        if not buffers:
            return RenderBuffer.empty()
        return RenderBuffer(
            np.concatenate([b.positions for b in buffers]),
            np.concatenate([b.colors for b in buffers]),
        )

    def to_trimesh(self) -> trimesh.path.Path3D:
        """Convert to a trimesh Path3D for previewing.

        trimesh colors whole entities, so each edge takes the mean color
        of its two endpoints.
        """
        import trimesh as tm

        path = tm.load_path(np.asarray(self.segments(), dtype=np.float64))
        if len(path.entities) == self.edge_count:
            edge_colors = self.colors.reshape(-1, 2, COLOR_SIZE).mean(axis=1)
            path.colors = np.round(edge_colors * 255).astype(np.uint8)
        return path

    def to_pyrender(self) -> pyrender.Mesh:
        """Convert to a pyrender Mesh with one LINES primitive and vertex colors."""
        import pyrender as pr

        primitive = pr.Primitive(
            positions=np.array(self.positions),
            color_0=np.array(self.colors),
            mode=pr.GLTF.LINES,
        )
        return pr.Mesh(primitives=[primitive])
