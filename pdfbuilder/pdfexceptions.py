class PDFException(Exception):
    """Base class for all content-builder exceptions."""


class PDFTypeError(PDFException, TypeError):
    pass


class PDFValueError(PDFException, ValueError):
    pass


class DegenerateGeometryError(PDFValueError):
    """Raised for arcs with no sweep, a non-positive radius or coincident
    end points."""


class InvalidColorSpecError(PDFValueError):
    """Raised when a color specification has an unrecognized shape."""


class MissingFontSizeError(PDFValueError):
    pass


class FontNotSetError(PDFException):
    """Raised when text is shown before a font and size were chosen."""


class PDFContentFinalizedError(PDFException):
    pass


class PDFContentModeError(PDFException):
    """Raised in strict mode for text operations outside a text object."""
