"""Shared fixtures: small mesh collections and the assets directory."""

from __future__ import annotations

from pathlib import Path

import pytest

from linemesh.core import ColorScheme, ColorTable, Mesh, MeshCollection, Reference


@pytest.fixture(scope="session")
def assets_dir() -> Path:
    return Path(__file__).parent.parent / "assets"


@pytest.fixture()
def triangle() -> Mesh:
    """Closed 2D triangle without colors."""
    return Mesh(
        vertexes=((0.0, 0.0), (1.0, 0.0), (0.0, 1.0)),
        segments=((0, 1, 2, 0),),
    )


@pytest.fixture()
def colored_line() -> Mesh:
    """3D polyline of three vertexes with a decoded color table."""
    return Mesh(
        vertexes=((0.0, 0.0, 0.0), (1.0, 2.0, 3.0), (4.0, 5.0, 6.0)),
        segments=((0, 1, 2),),
        colors=ColorTable((0xFF0000FF, 0x00FF00FF, 0x0000FFFF)),
    )


@pytest.fixture()
def shared_collection() -> MeshCollection:
    """Mesh 1 borrows vertexes and colors from mesh 0."""
    base = Mesh(
        vertexes=((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)),
        segments=((0, 1, 2, 3, 0),),
        colors=ColorScheme.from_mapping({0xFF0000FF: [(0, 1)], 0x0000FFFF: [2, 3]}),
    )
    borrower = Mesh(
        vertexes=Reference(0),
        segments=((0, 2), (1, 3)),
        colors=Reference(0),
    )
    return MeshCollection((base, borrower))
