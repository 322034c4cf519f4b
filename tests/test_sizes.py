"""Tests for the size formatter."""
import pytest

from cartui.sizes import format_size, vertex_label, UNKNOWN_SIZE


@pytest.mark.parametrize("size", [0, -5, -1, None])
def test_non_positive_or_missing_is_unknown(size):
    assert format_size(size) == UNKNOWN_SIZE == "(unknown size)"


def test_below_one_megabyte_floors_to_one():
    assert format_size(500000) == "1mb"
    assert format_size(1) == "1mb"


def test_rounds_down_to_whole_megabytes():
    assert format_size(2500000) == "2mb"
    assert format_size(1000000) == "1mb"
    assert format_size(1999999) == "1mb"
    assert format_size(7000000) == "7mb"


def test_vertex_label_is_id_then_size():
    assert vertex_label("A", 500000) == "A\n1mb"
    assert vertex_label("golang.org/x/net@v0.1.0", None) == "golang.org/x/net@v0.1.0\n(unknown size)"
