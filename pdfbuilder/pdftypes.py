import logging
import zlib
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pdfbuilder.pdfexceptions import PDFTypeError
from pdfbuilder.utils import format_float, isnumber

log = logging.getLogger(__name__)

# Characters that must be escaped inside a name token.
NOTLITERAL = "#/%[]()<>{} \t\n\r\f\v"


class PSObject:
    """Base class of the PDF objects the builder writes."""


class PSLiteral(PSObject):
    """A PDF name, e.g. a resource name or an operand like `/Pattern`.

    Names are interned with `LIT()`, so the same name is always the same
    object and can be compared with `is`. `str()` gives the name as it is
    written to a content stream, with unsafe characters in `#XX` form.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return "/%r" % self.name

    def __str__(self) -> str:
        out = []
        for b in self.name.encode("utf-8"):
            if chr(b) in NOTLITERAL or not (33 <= b <= 126):
                out.append("#%02X" % b)
            else:
                out.append(chr(b))
        return "/" + "".join(out)


_SymbolT = TypeVar("_SymbolT", bound=PSLiteral)


class PSSymbolTable(Generic[_SymbolT]):
    """Interns names so that each one exists once."""

    def __init__(self, klass: type[_SymbolT]) -> None:
        self.dict: dict[str, _SymbolT] = {}
        self.klass: type[_SymbolT] = klass

    def intern(self, name: str) -> _SymbolT:
        if name in self.dict:
            lit = self.dict[name]
        else:
            lit = self.klass(name)
            self.dict[name] = lit
        return lit


PSLiteralTable = PSSymbolTable(PSLiteral)
LIT = PSLiteralTable.intern

LITERAL_FLATE_DECODE = LIT("FlateDecode")


def serialize(obj: Any) -> str:
    """Writes an operand the way it appears in a content stream.

    Strings are taken as already formatted tokens; literals become names;
    objects carrying a resource name are written as that name.
    """
    if isinstance(obj, bool):
        return "true" if obj else "false"
    elif isnumber(obj):
        return format_float(obj)
    elif isinstance(obj, str):
        return obj
    elif isinstance(obj, bytes):
        return obj.decode("latin-1")
    elif isinstance(obj, PSLiteral):
        return str(obj)
    elif isinstance(obj, (list, tuple)):
        return "[" + " ".join(serialize(v) for v in obj) + "]"
    elif isinstance(obj, Mapping):
        items = " ".join(f"{LIT(str(k))} {serialize(v)}" for (k, v) in obj.items())
        return f"<< {items} >>"
    elif obj is None:
        return "null"
    name = getattr(obj, "name", None)
    if isinstance(name, str):
        return str(LIT(name))
    raise PDFTypeError(f"Cannot write {obj!r} as a content stream operand")


class PDFStream(PSObject):
    """A finished content stream.

    `attrs` is the stream dictionary; `rawdata` holds the bytes as they
    would be written to the file, i.e. after any filter was applied.
    """

    def __init__(self, attrs: dict[str, Any], rawdata: bytes) -> None:
        assert isinstance(attrs, dict), str(type(attrs))
        self.attrs = attrs
        self.rawdata = rawdata
        self.attrs["Length"] = len(rawdata)

    def __repr__(self) -> str:
        return "<PDFStream: raw=%d, %r>" % (len(self.rawdata), self.attrs)

    def get_filters(self) -> list[object]:
        filters = self.attrs.get("Filter")
        if not filters:
            return []
        if not isinstance(filters, list):
            filters = [filters]
        return filters

    def is_compressed(self) -> bool:
        return LITERAL_FLATE_DECODE in self.get_filters()

    def compress(self) -> None:
        """Deflates the stream data and records the FlateDecode filter."""
        if self.is_compressed():
            return
        self.rawdata = zlib.compress(self.rawdata)
        self.attrs["Filter"] = [LITERAL_FLATE_DECODE, *self.get_filters()]
        self.attrs["Length"] = len(self.rawdata)
        log.debug("compress: %d bytes", len(self.rawdata))

    def get_data(self) -> bytes:
        """Returns the content bytes with the Flate filter undone."""
        if self.is_compressed():
            return zlib.decompress(self.rawdata)
        return self.rawdata

    def get_rawdata(self) -> bytes:
        return self.rawdata
