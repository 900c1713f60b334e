"""Tests for reference resolution between meshes."""

import pytest

from linemesh.core import ColorScheme, Mesh, MeshCollection, Reference
from linemesh.core.errors import MeshReferenceError, ReferenceKind
from linemesh.decode import resolve_mesh, resolve_references

SQUARE = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))


def test_reference_copies_target_field(shared_collection):
    resolved = resolve_references(shared_collection)

    assert resolved.is_resolved
    assert resolved[1].vertexes == shared_collection[0].vertexes
    assert resolved[1].segments == ((0, 2), (1, 3))
    assert isinstance(resolved[1].colors, ColorScheme)
    assert resolved[1].colors == shared_collection[0].colors


def test_input_collection_is_not_modified(shared_collection):
    resolve_references(shared_collection)

    assert shared_collection[1].vertexes == Reference(0)
    assert shared_collection[1].colors == Reference(0)


def test_collection_without_references_is_unchanged():
    collection = MeshCollection((Mesh(vertexes=SQUARE, segments=((0, 1),)),))

    assert resolve_references(collection) == collection


def test_reference_to_later_mesh():
    collection = MeshCollection((
        Mesh(vertexes=Reference(1), segments=((0, 1),)),
        Mesh(vertexes=SQUARE, segments=((2, 3),)),
    ))

    resolved = resolve_references(collection)

    assert resolved[0].vertexes == SQUARE


@pytest.mark.parametrize("target", [2, 5, -1])
def test_out_of_range_reference_is_rejected(target):
    collection = MeshCollection((
        Mesh(vertexes=SQUARE, segments=((0, 1),)),
        Mesh(vertexes=Reference(target), segments=((0, 1),)),
    ))

    with pytest.raises(MeshReferenceError) as info:
        resolve_references(collection)

    assert info.value.kind is ReferenceKind.OUT_OF_RANGE
    assert info.value.mesh_index == 1
    assert info.value.field == "vertexes"
    assert info.value.target_index == target


def test_reference_to_missing_field_is_rejected():
    collection = MeshCollection((
        Mesh(vertexes=SQUARE, segments=((0, 1),)),
        Mesh(vertexes=SQUARE, segments=((0, 1),), colors=Reference(0)),
    ))

    with pytest.raises(MeshReferenceError) as info:
        resolve_references(collection)

    assert info.value.kind is ReferenceKind.UNRESOLVED_TARGET
    assert info.value.field == "colors"


def test_chained_reference_fails_in_single_hop_mode():
    collection = MeshCollection((
        Mesh(vertexes=SQUARE, segments=((0, 1),)),
        Mesh(vertexes=Reference(0), segments=((0, 1),)),
        Mesh(vertexes=Reference(1), segments=((0, 1),)),
    ))

    with pytest.raises(MeshReferenceError) as info:
        resolve_references(collection)

    assert info.value.kind is ReferenceKind.UNRESOLVED_TARGET
    assert info.value.mesh_index == 2
    assert info.value.target_index == 1


def test_chained_reference_resolves_transitively():
    collection = MeshCollection((
        Mesh(vertexes=SQUARE, segments=((0, 1),)),
        Mesh(vertexes=Reference(0), segments=((0, 1),)),
        Mesh(vertexes=Reference(1), segments=((0, 1),)),
    ))

    resolved = resolve_references(collection, transitive=True)

    assert resolved[2].vertexes == SQUARE


@pytest.mark.parametrize("transitive,kind", [
    (False, ReferenceKind.UNRESOLVED_TARGET),
    (True, ReferenceKind.CYCLE),
])
def test_reference_cycle_is_rejected(transitive, kind):
    collection = MeshCollection((
        Mesh(vertexes=Reference(1), segments=((0, 1),)),
        Mesh(vertexes=Reference(0), segments=((0, 1),)),
    ))

    with pytest.raises(MeshReferenceError) as info:
        resolve_references(collection, transitive=transitive)

    assert info.value.kind is kind


def test_self_reference_is_a_cycle():
    collection = MeshCollection((Mesh(vertexes=Reference(0), segments=((0, 1),)),))

    with pytest.raises(MeshReferenceError) as info:
        resolve_references(collection, transitive=True)

    assert info.value.kind is ReferenceKind.CYCLE


def test_resolve_single_mesh(shared_collection):
    mesh = resolve_mesh(shared_collection, 1)

    assert mesh.is_resolved
    assert mesh.vertex_count == 4
