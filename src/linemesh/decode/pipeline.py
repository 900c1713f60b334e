"""End-to-end conversion of a mesh collection into render buffers."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence, Union

from ..core.buffer import RenderBuffer
from ..core.errors import MeshValidationError
from ..core.mesh import Mesh, MeshCollection
from .assemble import assemble_mesh
from .colors import decompress_colors
from .references import resolve_references
from .validate import validate_mesh

logger = logging.getLogger(__name__)

MeshResult = Union[RenderBuffer, MeshValidationError]


def prepare(collection: MeshCollection, transitive: bool = False) -> MeshCollection:
    """Resolve references, then decode color schemes.

    Args:
        collection: Collection as produced by a description source
        transitive: Follow chains of references instead of a single hop

    Returns:
        Collection ready for validation and assembly

    Raises:
        MeshReferenceError: If any reference cannot be resolved
    """
    return decompress_colors(resolve_references(collection, transitive=transitive))


def convert_mesh(mesh: Mesh, mesh_index: int | None = None) -> RenderBuffer:
    """Validate and assemble one prepared mesh.

    Raises:
        MeshValidationError: On the first structural fault in the mesh
    """
    validate_mesh(mesh, mesh_index)
    return assemble_mesh(mesh)


def _convert_indexed(item: tuple[int, Mesh]) -> MeshResult:
    mesh_index, mesh = item
    try:
        return convert_mesh(mesh, mesh_index)
    except MeshValidationError as e:
        logger.debug(f"Mesh {mesh_index} failed validation: {e}")
        return e


def convert_each(
    collection: MeshCollection,
    transitive: bool = False,
    indices: Sequence[int] | None = None,
    max_workers: int | None = None,
) -> list[MeshResult]:
    """Convert meshes independently, reporting failures per mesh.

    Reference errors still abort the whole collection; validation errors
    are returned in place of the failing mesh's buffer so the caller can
    decide whether to skip it.

    Args:
        collection: Raw or prepared collection
        transitive: Follow chains of references instead of a single hop
        indices: Meshes to convert, in output order (default: all)
        max_workers: Convert on a thread pool of this size when set

    Returns:
        One RenderBuffer or MeshValidationError per requested mesh
    """
    prepared = prepare(collection, transitive=transitive)
    if indices is None:
        indices = range(len(prepared))
    items = []
    for mesh_index in indices:
        if not 0 <= mesh_index < len(prepared):
            raise IndexError(f"mesh index {mesh_index} out of range for {len(prepared)} meshes")
        items.append((mesh_index, prepared[mesh_index]))

    if max_workers is not None and max_workers > 1 and len(items) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(_convert_indexed, items))
    return [_convert_indexed(item) for item in items]


def convert(
    collection: MeshCollection,
    transitive: bool = False,
    indices: Sequence[int] | None = None,
    max_workers: int | None = None,
) -> RenderBuffer:
    """Convert a collection into a single buffer, meshes in order.

    Either every requested mesh converts or nothing is returned.

    Raises:
        MeshReferenceError: If any reference cannot be resolved
        MeshValidationError: The first mesh (in order) that fails validation
    """
    results = convert_each(
        collection, transitive=transitive, indices=indices, max_workers=max_workers
    )
    for result in results:
        if isinstance(result, MeshValidationError):
            raise result
    buffer = RenderBuffer.concatenate(results)
    logger.debug(f"Converted {len(results)} meshes into {buffer.edge_count} edges")
    return buffer
