"""Tests for color scheme decompression and packed color unpacking."""

import logging

import numpy as np
import pytest

from linemesh.core import ColorScheme, ColorTable, Mesh, MeshCollection, Reference
from linemesh.decode import decompress_colors, decompress_scheme, unpack_color, unpack_colors

C = 0x11223344
D = 0xAABBCCDD


def test_ranges_and_singles_on_ten_vertexes():
    scheme = ColorScheme.from_mapping({C: [(2, 5), 7, 9]})

    table = decompress_scheme(scheme, 10)

    assert len(table) == 10
    for i in range(10):
        if i in (2, 3, 4, 5, 7, 9):
            assert table[i] == C
        else:
            assert table[i] is None


def test_ranges_and_singles_can_mix_across_colors():
    scheme = ColorScheme.from_mapping({C: [0, (1, 2)], D: [(3, 3), 4]})

    table = decompress_scheme(scheme, 5)

    assert table.values == (C, C, C, D, D)
    assert table.missing_count == 0


def test_later_group_wins_on_overlap():
    scheme = ColorScheme.from_mapping({C: [(0, 3)], D: [1, 2]})

    table = decompress_scheme(scheme, 4)

    assert table.values == (C, D, D, C)


def test_reversed_range_is_empty():
    scheme = ColorScheme.from_mapping({C: [(5, 2)]})

    table = decompress_scheme(scheme, 6)

    assert table.values == (None,) * 6


def test_selector_past_last_vertex_lengthens_table():
    scheme = ColorScheme.from_mapping({C: [4]})

    table = decompress_scheme(scheme, 2)

    assert table.values == (None, None)
    assert len(table) == 5


def test_huge_selector_is_not_materialised():
    scheme = ColorScheme.from_mapping({C: [1, 2_000_000_000]})

    table = decompress_scheme(scheme, 3)

    assert table.values == (None, C, None)
    assert len(table) == 2_000_000_001


def test_huge_range_end_is_clipped_to_vertexes():
    scheme = ColorScheme.from_mapping({C: [(1, 10**10)]})

    table = decompress_scheme(scheme, 3)

    assert table.values == (None, C, C)
    assert len(table) == 10**10 + 1


def test_range_starting_past_last_vertex():
    scheme = ColorScheme.from_mapping({C: [(5, 7)]})

    table = decompress_scheme(scheme, 2)

    assert table.values == (None, None)
    assert len(table) == 8


def test_selectors_within_range_keep_plain_length():
    table = decompress_scheme(ColorScheme.from_mapping({C: [(0, 2)]}), 3)

    assert table == ColorTable((C, C, C))


def test_negative_selector_is_skipped(caplog):
    scheme = ColorScheme.from_mapping({C: [-1, 0]})

    with caplog.at_level(logging.WARNING, logger="linemesh"):
        table = decompress_scheme(scheme, 2)

    assert table.values == (C, None)
    assert "negative" in caplog.text


def test_negative_range_start_is_clamped():
    scheme = ColorScheme.from_mapping({C: [(-3, 1)]})

    table = decompress_scheme(scheme, 3)

    assert table.values == (C, C, None)


def test_float_color_is_truncated_to_32_bits():
    scheme = ColorScheme.from_mapping({float(0xFF00FF00) + 0.75: [0]})

    table = decompress_scheme(scheme, 1)

    assert table.values == (0xFF00FF00,)


def test_decompress_colors_replaces_schemes_only():
    square = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0))
    dense = ColorTable((C, C, C))
    collection = MeshCollection((
        Mesh(vertexes=square, segments=((0, 1),), colors=ColorScheme.from_mapping({C: [0]})),
        Mesh(vertexes=square, segments=((0, 1),)),
        Mesh(vertexes=square, segments=((0, 1),), colors=dense),
    ))

    decoded = decompress_colors(collection)

    assert decoded[0].colors == ColorTable((C, None, None))
    assert decoded[1].colors is None
    assert decoded[2].colors is dense
    assert isinstance(collection[0].colors, ColorScheme)


def test_decompress_colors_requires_resolved_meshes():
    collection = MeshCollection((Mesh(vertexes=Reference(0), segments=((0, 1),)),))

    with pytest.raises(ValueError):
        decompress_colors(collection)


def test_unpack_reference_value():
    assert unpack_color(0x112233FF) == pytest.approx((17 / 255, 34 / 255, 51 / 255, 1.0))


def test_unpack_white_and_transparent_black():
    assert unpack_color(0xFFFFFFFF) == (1.0, 1.0, 1.0, 1.0)
    assert unpack_color(0x00000000) == (0.0, 0.0, 0.0, 0.0)


def test_unpack_colors_matches_unpack_color():
    values = np.array([0x112233FF, 0xFF000080, 0x00FF00FF], dtype=np.uint32)

    unpacked = unpack_colors(values)

    assert unpacked.shape == (3, 4)
    assert unpacked.dtype == np.float32
    for row, value in zip(unpacked, values):
        np.testing.assert_allclose(row, unpack_color(int(value)), rtol=1e-6)
