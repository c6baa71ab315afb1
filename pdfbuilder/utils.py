"""Matrices, operand formatting and small helpers shared by the builder."""

import math
from collections.abc import Iterable, Iterator
from typing import TypeVar

import charset_normalizer

Point = tuple[float, float]
Matrix = tuple[float, float, float, float, float, float]

# (a, b, c, d, e, f) of the matrix [a b 0; c d 0; e f 1]
MATRIX_IDENTITY: Matrix = (1, 0, 0, 1, 0, 0)


def mult_matrix(m1: Matrix, m0: Matrix) -> Matrix:
    """Concatenates two matrices, m1 x m0.

    Points are row vectors [x y 1], so the result maps a point through m1
    first and m0 second. This is how `cm` combines with the current
    transformation matrix.
    """
    (a1, b1, c1, d1, e1, f1) = m1
    (a0, b0, c0, d0, e0, f0) = m0
    return (
        a0 * a1 + c0 * b1,
        b0 * a1 + d0 * b1,
        a0 * c1 + c0 * d1,
        b0 * c1 + d0 * d1,
        a0 * e1 + c0 * f1 + e0,
        b0 * e1 + d0 * f1 + f0,
    )


def apply_matrix_pt(m: Matrix, v: Point) -> Point:
    """Maps a point through `m`."""
    (a, b, c, d, e, f) = m
    (x, y) = v
    return a * x + c * y + e, b * x + d * y + f


#  Operand formatting


def format_float(value: float, precision: int = 4) -> str:
    """Formats a number as a content stream operand.

    Values within 10**-precision of an integer are written as that integer,
    so 3e-05 becomes "0" at the default precision. Other values keep
    `precision` digits after the most significant one, and trailing zeros
    are dropped.
    """
    if abs(value) < 1e-16:
        value = 0
    if abs(value - int(value)) < 10 ** (-precision):
        return "%d" % int(value)
    ndigits = precision - math.floor(math.log10(abs(value)))
    if ndigits <= 0:
        s = "%f" % value
    else:
        s = "%.*f" % (ndigits, value)
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    if s in ("-0", ""):
        s = "0"
    return s


def format_floats(*values: float, precision: int = 4) -> list[str]:
    return [format_float(v, precision) for v in values]


def format_int(value: float) -> str:
    return "%d" % int(value)


#  Utility functions


def isnumber(x: object) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


_T = TypeVar("_T")


def choplist(n: int, seq: Iterable[_T]) -> Iterator[tuple[_T, ...]]:
    """Yields the items of `seq` in tuples of `n`, dropping a short tail."""
    r = []
    for x in seq:
        r.append(x)
        if len(r) == n:
            yield tuple(r)
            r = []


def decode_text(data: str | bytes) -> str:
    """Returns `data` as text, guessing the encoding of bytes.

    Bytes that cannot be decoded with the guessed encoding are read as
    latin-1, which is how the content stream is encoded.
    """
    if isinstance(data, str):
        return data
    best = charset_normalizer.from_bytes(data).best()
    if best is None:
        return data.decode("latin-1")
    try:
        return data.decode(best.encoding)
    except (LookupError, UnicodeDecodeError):
        return data.decode("latin-1")


def shorten_str(s: str, size: int) -> str:
    """Cuts the middle out of `s` for log messages."""
    if size < 7:
        return s[:size]
    if len(s) <= size:
        return s
    keep = (size - 5) // 2
    return f"{s[:keep]} ... {s[-keep:]}"
