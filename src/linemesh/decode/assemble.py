"""Turn a validated mesh into line-list position and color arrays."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from ..config import BUFFER_DTYPE, COLOR_SIZE, POSITION_SIZE
from ..core.buffer import RenderBuffer
from ..core.mesh import ColorTable, Mesh, Segment, Vertex
from .colors import table_to_packed, unpack_colors

logger = logging.getLogger(__name__)


def pad_vertices(vertexes: tuple[Vertex, ...]) -> NDArray[np.float32]:
    """Stack vertexes into an Nx3 array, giving 2D points z = 0."""
    if not vertexes:
        return np.empty((0, POSITION_SIZE), dtype=BUFFER_DTYPE)
    return np.array(
        [tuple(v) + (0.0,) * (POSITION_SIZE - len(v)) for v in vertexes],
        dtype=BUFFER_DTYPE,
    )


def edge_indices(segments: tuple[Segment, ...]) -> NDArray[np.int64]:
    """Endpoint vertex indices for every edge, two per edge.

    A segment [a, b, c] contributes the edges (a, b) and (b, c), so the
    result for it is [a, b, b, c].
    """
    indices = [
        index
        for segment in segments
        for start, end in zip(segment[:-1], segment[1:])
        for index in (start, end)
    ]
    return np.array(indices, dtype=np.int64)


def assemble_mesh(mesh: Mesh) -> RenderBuffer:
    """Emit the line-list buffer for one validated mesh.

    Each edge contributes both endpoint positions and both endpoint
    colors. Without a color table every endpoint is opaque white; with
    one, vertexes missing an entry fall back to white individually.

    Args:
        mesh: Mesh that passed validate_mesh

    Returns:
        RenderBuffer for this mesh
    """
    indices = edge_indices(mesh.segments)
    positions = pad_vertices(mesh.vertexes)[indices]

    if isinstance(mesh.colors, ColorTable):
        missing = mesh.colors.missing_count
        if missing:
            logger.debug(f"{missing} vertexes have no color, using white for them")
        colors = unpack_colors(table_to_packed(mesh.colors))[indices]
    else:
        logger.warning("No colors detected in the mesh. Falling back to white...")
        colors = np.ones((len(indices), COLOR_SIZE), dtype=BUFFER_DTYPE)

    return RenderBuffer(positions, colors)
