"""Color scheme decompression and packed RGBA unpacking.

Packed colors are 32-bit values with red in the most significant byte:

    0xRRGGBBAA

Decompression turns a scheme (color -> selectors) into a dense table with
one entry per vertex. Groups are applied in scheme order, so when
selectors overlap the last group written wins.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from ..config import BUFFER_DTYPE, FALLBACK_COLOR
from ..core.mesh import ColorScheme, ColorTable, MeshCollection

logger = logging.getLogger(__name__)

_CHANNEL_SHIFTS = np.array([24, 16, 8, 0], dtype=np.uint32)


def normalize_color(value: int | float) -> int:
    """Truncate a numeric color to its unsigned 32-bit packed form."""
    return int(value) & 0xFFFFFFFF


def unpack_color(value: int | float) -> tuple[float, float, float, float]:
    """Split a packed color into (r, g, b, a) floats in the 0-1 range.

    Args:
        value: Packed 0xRRGGBBAA color

    Returns:
        Four channel values, each byte divided by 255
    """
    packed = normalize_color(value)
    return (
        ((packed >> 24) & 255) / 255,
        ((packed >> 16) & 255) / 255,
        ((packed >> 8) & 255) / 255,
        (packed & 255) / 255,
    )


def unpack_colors(values: NDArray[np.uint32]) -> NDArray[np.float32]:
    """Vectorised unpack_color for an array of packed colors.

    Returns:
        Nx4 array of RGBA floats
    """
    packed = np.asarray(values, dtype=np.uint32).reshape(-1, 1)
    channels = (packed >> _CHANNEL_SHIFTS) & np.uint32(0xFF)
    return (channels / 255.0).astype(BUFFER_DTYPE)


def table_to_packed(table: ColorTable, fallback: int = FALLBACK_COLOR) -> NDArray[np.uint32]:
    """Packed color per vertex, with missing entries set to the fallback."""
    return np.array(
        [fallback if value is None else normalize_color(value) for value in table.values],
        dtype=np.uint32,
    )


def decompress_scheme(scheme: ColorScheme, vertex_count: int) -> ColorTable:
    """Expand a color scheme into a per-vertex table.

    The table has one entry per vertex; vertexes no selector touches stay
    None. A range selector (start, end) is inclusive and empty when start
    is past end. Selectors beyond the last vertex are not stored, but the
    table reports a length reaching the highest one, which validation
    later flags as a length mismatch.

    Args:
        scheme: Compressed colors
        vertex_count: Number of vertexes in the owning mesh

    Returns:
        ColorTable for the mesh
    """
    table: list[int | None] = [None] * vertex_count
    highest = vertex_count - 1

    for color, selectors in scheme.groups:
        color = normalize_color(color)
        for selector in selectors:
            if isinstance(selector, (tuple, list)):
                start, end = selector
                if start < 0:
                    logger.warning(f"Clamping color range ({start}, {end}) to start at 0")
                    start = 0
                if start > end:
                    continue
                highest = max(highest, end)
                stop = min(end + 1, vertex_count)
                if start < stop:
                    table[start:stop] = [color] * (stop - start)
            elif selector < 0:
                logger.warning(f"Ignoring negative color selector index {selector}")
            else:
                highest = max(highest, selector)
                if selector < vertex_count:
                    table[selector] = color

    if highest >= vertex_count:
        return ColorTable(tuple(table), length=highest + 1)
    return ColorTable(tuple(table))


def decompress_colors(collection: MeshCollection) -> MeshCollection:
    """Decode the color scheme of every mesh that has one.

    Meshes without colors, or with an already dense table, pass through
    unchanged. References must be resolved first.

    Raises:
        ValueError: If a mesh still holds a reference
    """
    decoded = []
    for mesh_index, mesh in enumerate(collection):
        if not mesh.is_resolved:
            raise ValueError(f"mesh {mesh_index} has unresolved references; resolve them first")
        if isinstance(mesh.colors, ColorScheme):
            table = decompress_scheme(mesh.colors, mesh.vertex_count)
            logger.debug(
                f"Mesh {mesh_index}: decoded {len(mesh.colors)} colors "
                f"over {len(table)} vertexes ({table.missing_count} uncolored)"
            )
            mesh = mesh.replace(colors=table)
        decoded.append(mesh)
    return MeshCollection(tuple(decoded))

