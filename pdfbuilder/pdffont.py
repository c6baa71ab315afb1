from abc import ABC, abstractmethod

from pdfbuilder.pdfresource import PDFResource


class PDFFontResource(PDFResource, ABC):
    """Base class of the fonts a content stream can write text with.

    Metrics and glyph encoding belong to the concrete font; the content
    stream only asks for widths and for the encoded show-text operation.
    Widths and underline metrics follow the usual font units: `width()`
    is in ems, the underline values are in thousandths of an em.
    """

    category = "Font"

    @abstractmethod
    def width(self, text: str) -> float:
        """Returns the width of `text` at a size of one point."""

    @abstractmethod
    def text(self, text: str, size: float, adjust: float | None = None) -> str:
        """Returns the operands and operator that show `text`.

        If `adjust` is given, it is a kerning adjustment in thousandths of
        an em placed before the text, as in a `TJ` array.
        """

    def underline_position(self) -> float:
        return -100

    def underline_thickness(self) -> float:
        return 50

    def is_virtual(self) -> bool:
        return False

    def font_list(self) -> list["PDFFontResource"]:
        return [self]
