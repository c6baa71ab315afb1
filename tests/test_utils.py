import pytest

from pdfbuilder.utils import (
    Matrix,
    Point,
    apply_matrix_pt,
    choplist,
    decode_text,
    format_float,
    format_floats,
    format_int,
    isnumber,
    mult_matrix,
    shorten_str,
)


class TestFunctions:
    def test_shorten_str(self):
        s = shorten_str("Hello there World", 15)
        assert s == "Hello ... World"

    def test_shorten_short_str_is_same(self):
        s = "Hello World"
        assert shorten_str(s, 50) == s

    def test_shorten_to_really_short(self):
        assert shorten_str("Hello World", 5) == "Hello"

    def test_choplist(self):
        assert list(choplist(2, [1, 2, 3, 4])) == [(1, 2), (3, 4)]

    def test_choplist_drops_incomplete_group(self):
        assert list(choplist(3, [1, 2, 3, 4, 5])) == [(1, 2, 3)]

    def test_isnumber(self):
        assert isnumber(1)
        assert isnumber(1.5)
        assert not isnumber("1")
        assert not isnumber(True)

    def test_decode_text(self):
        assert decode_text("abc") == "abc"
        assert decode_text(b"Hello World") == "Hello World"
        assert decode_text("caf\u00e9 au lait".encode()) == "caf\u00e9 au lait"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, "0"),
        (1, "1"),
        (-2.0, "-2"),
        (1e-17, "0"),
        (0.5, "0.5"),
        (-0.5, "-0.5"),
        (1 / 3, "0.33333"),
        (123.456, "123.46"),
        (12345.6, "12345.6"),
        (2.00001, "2"),
        (1.99999, "2"),
        (0.99999, "0.99999"),
        (6.123233995736766e-17, "0"),
    ],
)
def test_format_float(value: float, expected: str) -> None:
    assert format_float(value) == expected


def test_format_float_precision() -> None:
    assert format_float(1 / 3, 6) == "0.3333333"
    assert format_float(2.5, 6) == "2.5"


def test_format_float_near_integer() -> None:
    assert format_float(3e-05) == "0"
    assert format_float(-3e-05) == "0"
    assert format_float(3e-05, 6) == "0.00003"
    assert format_float(700.00002) == "700"


def test_format_floats() -> None:
    assert format_floats(1, 0.5, 2.25) == ["1", "0.5", "2.25"]


def test_format_int() -> None:
    assert format_int(2.7) == "2"
    assert format_int(-1) == "-1"


@pytest.mark.parametrize(
    ("m0", "m1", "expected"),
    [
        ((1, 0, 0, 1, 0, 0), (1, 0, 0, 1, 0, 0), (1, 0, 0, 1, 0, 0)),
        ((1, 2, 3, 2, -4, 1), (1, 0, 0, 1, 0, 0), (1, 2, 3, 2, -4, 1)),
        ((1, 2, 3, 2, -4, 1), (3, 4, 1, 2, -2, 1), (5, 8, 11, 16, -13, -13)),
        ((1, -1, 1, -1, 1, -1), (1, 1, 1, 1, 1, 1), (0, 0, 0, 0, 1, 1)),
    ],
)
def test_mult_matrix(m0: Matrix, m1: Matrix, expected: Matrix) -> None:
    assert mult_matrix(m0, m1) == expected


def test_mult_matrix_is_not_commutative() -> None:
    translate: Matrix = (1, 0, 0, 1, 10, 0)
    scale: Matrix = (2, 0, 0, 2, 0, 0)
    assert mult_matrix(translate, scale) == (2, 0, 0, 2, 20, 0)
    assert mult_matrix(scale, translate) == (2, 0, 0, 2, 10, 0)


@pytest.mark.parametrize(
    ("m0", "p0", "expected"),
    [
        ((1, 0, 0, 1, 0, 0), (0, 0), (0, 0)),
        ((1, 0, 0, 1, 0, 0), (33, 21), (33, 21)),
        ((1, 2, 3, 2, -4, 1), (0, 0), (-4, 1)),
        ((1, 2, 3, 2, -4, 1), (1, 1), (0, 5)),
    ],
)
def test_apply_matrix_pt(m0: Matrix, p0: Point, expected: Point) -> None:
    assert apply_matrix_pt(m0, p0) == expected
