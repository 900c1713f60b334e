"""Tests for line-list buffer assembly."""

import logging

import numpy as np

from linemesh.core import ColorTable, Mesh
from linemesh.decode import assemble_mesh
from linemesh.decode.assemble import edge_indices, pad_vertices


def test_three_index_segment_yields_two_edges():
    mesh = Mesh(
        vertexes=((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0)),
        segments=((0, 1, 2),),
    )

    buffer = assemble_mesh(mesh)

    assert buffer.edge_count == 2
    np.testing.assert_array_equal(
        buffer.positions,
        [[0, 0, 0], [1, 0, 0], [1, 0, 0], [1, 1, 0]],
    )


def test_2d_vertexes_get_zero_z(triangle):
    buffer = assemble_mesh(triangle)

    assert buffer.positions.shape == (6, 3)
    assert np.all(buffer.positions[:, 2] == 0.0)
    np.testing.assert_array_equal(buffer.positions[:, :2], [[0, 0], [1, 0], [1, 0], [0, 1], [0, 1], [0, 0]])


def test_mixed_2d_and_3d_vertexes():
    mesh = Mesh(vertexes=((1.0, 2.0), (3.0, 4.0, 5.0)), segments=((0, 1),))

    buffer = assemble_mesh(mesh)

    np.testing.assert_array_equal(buffer.positions, [[1, 2, 0], [3, 4, 5]])


def test_mesh_without_colors_is_white(triangle, caplog):
    with caplog.at_level(logging.WARNING, logger="linemesh"):
        buffer = assemble_mesh(triangle)

    assert buffer.colors.shape == (6, 4)
    assert np.all(buffer.colors == 1.0)
    assert "Falling back to white" in caplog.text


def test_colors_follow_endpoints(colored_line):
    buffer = assemble_mesh(colored_line)

    red, green, blue = [1, 0, 0, 1], [0, 1, 0, 1], [0, 0, 1, 1]
    np.testing.assert_allclose(buffer.colors, [red, green, green, blue])


def test_missing_table_entry_falls_back_per_vertex(colored_line):
    mesh = colored_line.replace(colors=ColorTable((0x112233FF, None, 0x000000FF)))

    buffer = assemble_mesh(mesh)

    np.testing.assert_allclose(buffer.colors[0], [17 / 255, 34 / 255, 51 / 255, 1.0], rtol=1e-6)
    np.testing.assert_array_equal(buffer.colors[1], [1, 1, 1, 1])
    np.testing.assert_array_equal(buffer.colors[2], [1, 1, 1, 1])
    np.testing.assert_array_equal(buffer.colors[3], [0, 0, 0, 1])


def test_each_vertex_is_duplicated_per_edge():
    mesh = Mesh(
        vertexes=((0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)),
        segments=((0, 1, 2, 3), (3, 0)),
    )

    buffer = assemble_mesh(mesh)

    assert buffer.edge_count == 4
    np.testing.assert_array_equal(buffer.positions[:, 0], [0, 1, 1, 2, 2, 3, 3, 0])


def test_empty_mesh_gives_empty_buffer():
    buffer = assemble_mesh(Mesh(vertexes=(), segments=(), colors=ColorTable(())))

    assert buffer.is_empty
    assert buffer.positions.shape == (0, 3)
    assert buffer.colors.shape == (0, 4)


def test_edge_indices():
    np.testing.assert_array_equal(edge_indices(((0, 1, 2), (5, 4))), [0, 1, 1, 2, 5, 4])
    assert edge_indices(()).shape == (0,)


def test_pad_vertices():
    padded = pad_vertices(((1.0, 2.0), (3.0, 4.0, 5.0)))

    assert padded.dtype == np.float32
    np.testing.assert_array_equal(padded, [[1, 2, 0], [3, 4, 5]])
