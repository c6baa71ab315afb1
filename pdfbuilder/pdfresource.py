"""Named resources and the table that a content stream refers to them by.

A content stream never embeds fonts, images or colorspaces; it writes
`/Name op` and records the object under (category, name) so that whoever
assembles the page can emit the matching resource dictionary.
"""

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from pdfbuilder.pdfexceptions import PDFValueError

log = logging.getLogger(__name__)

RESOURCE_CATEGORIES = (
    "Font",
    "XObject",
    "ColorSpace",
    "Pattern",
    "Shading",
    "ExtGState",
    "Properties",
)


class PDFResource:
    category = ""

    def __init__(self, name: str, category: str | None = None) -> None:
        self.name = name
        if category is not None:
            self.category = category

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.name!r}>"


class PDFColorSpaceResource(PDFResource):
    """A colorspace other than the device ones, e.g. Lab or Indexed.

    `definition` is the colorspace array as it will be written to the
    resource dictionary.
    """

    category = "ColorSpace"

    def __init__(self, name: str, definition: Sequence[Any] = ()) -> None:
        super().__init__(name)
        self.definition = list(definition)

    def param(self, *values: Any) -> list[Any]:
        """Returns the operands of `sc` for the given color values."""
        return list(values)


class PDFIndexedColorSpace(PDFColorSpaceResource):
    def __init__(self, name: str, base: str, palette: Sequence[Any]) -> None:
        super().__init__(name, ["Indexed", base, len(palette) - 1])
        self.palette = list(palette)

    def param(self, *values: Any) -> list[Any]:
        hival = len(self.palette) - 1
        return [max(0, min(hival, int(v))) for v in values]


class PDFPatternResource(PDFResource):
    category = "Pattern"


class PDFShadingResource(PDFResource):
    category = "Shading"


class PDFExtGState(PDFResource):
    category = "ExtGState"

    def __init__(self, name: str, **params: Any) -> None:
        super().__init__(name)
        self.params = params


class PDFMetadata(PDFResource):
    category = "Properties"


class PDFXObject(PDFResource):
    """An image or form XObject with its natural size in points."""

    category = "XObject"

    def __init__(
        self,
        name: str,
        width: float = 1,
        height: float = 1,
        metadata: PDFMetadata | None = None,
    ) -> None:
        super().__init__(name)
        self.width = width
        self.height = height
        self.metadata = metadata


class ResourceRegistry(Protocol):
    """Anything a content stream can hand its resources to, e.g. a page."""

    def register_resource(
        self,
        category: str,
        name: str,
        obj: object,
        force: bool = False,
    ) -> dict[str, object]: ...

    def get_resource(self, category: str, name: str) -> object | None: ...


class PDFResourceTable:
    """Maps category -> name -> resource object.

    The first registration of a name wins, unless it is forced. Only the
    categories of a page resource dictionary are accepted.
    """

    def __init__(self) -> None:
        self.resources: dict[str, dict[str, object]] = {}

    def __repr__(self) -> str:
        return "<PDFResourceTable: %r>" % {
            k: sorted(v) for (k, v) in self.resources.items()
        }

    def register_resource(
        self,
        category: str,
        name: str,
        obj: object,
        force: bool = False,
    ) -> dict[str, object]:
        if category not in RESOURCE_CATEGORIES:
            raise PDFValueError(f"Unknown resource category: {category!r}")
        entries = self.resources.setdefault(category, {})
        if force or name not in entries:
            log.debug("register_resource: %s/%s -> %r", category, name, obj)
            entries[name] = obj
        return entries

    def get_resource(self, category: str, name: str) -> object | None:
        return self.resources.get(category, {}).get(name)

    def as_dict(self) -> dict[str, dict[str, object]]:
        return {k: dict(v) for (k, v) in self.resources.items()}
