import pytest

from pdfbuilder.pdfexceptions import PDFValueError
from pdfbuilder.pdfresource import (
    PDFColorSpaceResource,
    PDFExtGState,
    PDFIndexedColorSpace,
    PDFPatternResource,
    PDFResource,
    PDFResourceTable,
    PDFXObject,
)


class TestPDFResourceTable:
    def test_register_and_get(self):
        table = PDFResourceTable()
        font = PDFResource("F1", "Font")
        entries = table.register_resource("Font", "F1", font)
        assert entries == {"F1": font}
        assert table.get_resource("Font", "F1") is font

    def test_missing(self):
        table = PDFResourceTable()
        assert table.get_resource("Font", "F1") is None
        table.register_resource("Font", "F1", object())
        assert table.get_resource("Font", "F2") is None
        assert table.get_resource("XObject", "F1") is None

    def test_first_registration_wins(self):
        table = PDFResourceTable()
        first = PDFPatternResource("P1")
        table.register_resource("Pattern", "P1", first)
        table.register_resource("Pattern", "P1", PDFPatternResource("P1"))
        assert table.get_resource("Pattern", "P1") is first

    def test_force(self):
        table = PDFResourceTable()
        second = PDFPatternResource("P1")
        table.register_resource("Pattern", "P1", PDFPatternResource("P1"))
        table.register_resource("Pattern", "P1", second, force=True)
        assert table.get_resource("Pattern", "P1") is second

    def test_as_dict_is_a_copy(self):
        table = PDFResourceTable()
        gs = PDFExtGState("GS1", CA=0.5)
        table.register_resource("ExtGState", "GS1", gs)
        resources = table.as_dict()
        assert resources == {"ExtGState": {"GS1": gs}}
        resources["ExtGState"].clear()
        assert table.get_resource("ExtGState", "GS1") is gs

    def test_unknown_category(self):
        table = PDFResourceTable()
        with pytest.raises(PDFValueError):
            table.register_resource("Fonts", "F1", PDFResource("F1", "Font"))
        assert table.as_dict() == {}
        assert table.get_resource("Fonts", "F1") is None


class TestResources:
    def test_categories(self):
        assert PDFColorSpaceResource("CS0").category == "ColorSpace"
        assert PDFPatternResource("P0").category == "Pattern"
        assert PDFXObject("Im0").category == "XObject"
        assert PDFResource("F0", "Font").category == "Font"

    def test_xobject_size(self):
        img = PDFXObject("Im1", 100, 50)
        assert (img.width, img.height) == (100, 50)
        assert img.metadata is None

    def test_colorspace_param(self):
        assert PDFColorSpaceResource("CS0").param(0.1, 0.2) == [0.1, 0.2]

    @pytest.mark.parametrize(
        ("index", "expected"),
        [(0, 0), (1, 1), (5, 2), (-1, 0), (1.7, 1)],
    )
    def test_indexed_param_is_clamped(self, index, expected):
        cs = PDFIndexedColorSpace("CS1", "DeviceRGB", [b"\0\0\0"] * 3)
        assert cs.definition[2] == 2
        assert cs.param(index) == [expected]
