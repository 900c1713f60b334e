"""Resolve field references between meshes of a collection."""

from __future__ import annotations

import logging

from ..core.errors import MeshReferenceError, ReferenceKind
from ..core.mesh import Mesh, MeshCollection, Reference

logger = logging.getLogger(__name__)


def resolve_references(collection: MeshCollection, transitive: bool = False) -> MeshCollection:
    """Replace every referencing field with the target mesh's same-named field.

    Every target is read from the collection as given, so by default a
    reference resolves in exactly one hop: if the target's field is itself
    a reference, resolution fails instead of guessing.

    Args:
        collection: Meshes whose fields may hold references
        transitive: Follow chains of references, rejecting cycles

    Returns:
        New collection in which no field holds a reference

    Raises:
        MeshReferenceError: On the first reference that cannot be resolved
    """
    resolved = tuple(resolve_mesh(collection, i, transitive) for i in range(len(collection)))
    logger.debug(f"Resolved references of {len(resolved)} meshes")
    return MeshCollection(resolved)


def _dereference(
    collection: MeshCollection,
    mesh_index: int,
    name: str,
    reference: Reference,
    transitive: bool,
):
    """Follow one reference to a concrete field value."""
    visited = [mesh_index]
    while True:
        target_index = reference.mesh_index
        if not 0 <= target_index < len(collection):
            raise MeshReferenceError(ReferenceKind.OUT_OF_RANGE, mesh_index, name, target_index)

        value = getattr(collection[target_index], name)
        if value is None:
            raise MeshReferenceError(ReferenceKind.UNRESOLVED_TARGET, mesh_index, name, target_index)
        if not isinstance(value, Reference):
            return value

        if not transitive:
            raise MeshReferenceError(ReferenceKind.UNRESOLVED_TARGET, mesh_index, name, target_index)
        if target_index in visited:
            raise MeshReferenceError(ReferenceKind.CYCLE, mesh_index, name, target_index)
        visited.append(target_index)
        reference = value


def resolve_mesh(collection: MeshCollection, mesh_index: int, transitive: bool = False) -> Mesh:
    """Resolve the references of a single mesh against its collection."""
    if not 0 <= mesh_index < len(collection):
        raise IndexError(f"mesh index {mesh_index} out of range for {len(collection)} meshes")
    mesh = collection[mesh_index]
    changes = {
        name: _dereference(collection, mesh_index, name, reference, transitive)
        for name, reference in mesh.references().items()
    }
    return mesh.replace(**changes) if changes else mesh
