import zlib

import pytest

from pdfbuilder.pdfexceptions import PDFTypeError
from pdfbuilder.pdfresource import PDFPatternResource
from pdfbuilder.pdftypes import (
    LIT,
    LITERAL_FLATE_DECODE,
    PDFStream,
    PSLiteral,
    serialize,
)


class TestLiterals:
    def test_interned(self):
        assert LIT("F1") is LIT("F1")
        assert isinstance(LIT("F1"), PSLiteral)

    def test_str(self):
        assert str(LIT("F1")) == "/F1"

    def test_delimiters_are_escaped(self):
        assert str(LIT("A B")) == "/A#20B"
        assert str(LIT("a/b#c")) == "/a#2Fb#23c"
        assert str(LIT("caf\u00e9")) == "/caf#C3#A9"


@pytest.mark.parametrize(
    ("obj", "expected"),
    [
        (True, "true"),
        (False, "false"),
        (None, "null"),
        (3, "3"),
        (0.25, "0.25"),
        ("re", "re"),
        (b"(abc)", "(abc)"),
        (LIT("Pattern"), "/Pattern"),
        ([1, 2.5, LIT("X")], "[1 2.5 /X]"),
        ([], "[]"),
        ({"Type": LIT("XObject")}, "<< /Type /XObject >>"),
        (PDFPatternResource("P0"), "/P0"),
    ],
)
def test_serialize(obj, expected) -> None:
    assert serialize(obj) == expected


def test_serialize_unknown_object() -> None:
    with pytest.raises(PDFTypeError):
        serialize(object())


class TestPDFStream:
    def test_length(self):
        stream = PDFStream({}, b"0 0 m\n")
        assert stream.attrs["Length"] == 6
        assert stream.get_data() == b"0 0 m\n"
        assert not stream.is_compressed()
        assert stream.get_filters() == []

    def test_compress(self):
        data = b"0 0 10 10 re\nf\n" * 20
        stream = PDFStream({}, data)
        stream.compress()
        assert stream.is_compressed()
        assert stream.get_filters() == [LITERAL_FLATE_DECODE]
        assert stream.get_rawdata() == zlib.compress(data)
        assert stream.attrs["Length"] == len(stream.get_rawdata())
        assert stream.get_data() == data

    def test_compress_twice(self):
        stream = PDFStream({}, b"q\nQ\n")
        stream.compress()
        raw = stream.get_rawdata()
        stream.compress()
        assert stream.get_rawdata() == raw
        assert stream.get_filters() == [LITERAL_FLATE_DECODE]
