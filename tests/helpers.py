from pdfbuilder.pdffont import PDFFontResource
from pdfbuilder.pdfresource import PDFResourceTable
from pdfbuilder.utils import format_float


class FakeFont(PDFFontResource):
    """Every glyph but the space is half an em wide."""

    def width(self, text):
        return 0.5 * len(text.replace(" ", ""))

    def text(self, text, size, adjust=None):
        if adjust is not None:
            return f"[{format_float(adjust)} ({text})] TJ"
        return f"({text}) Tj"


class FakeVirtualFont(FakeFont):
    def __init__(self, name, members):
        super().__init__(name)
        self.members = members

    def is_virtual(self):
        return True

    def font_list(self):
        return list(self.members)


class FakePage(PDFResourceTable):
    """Stands in for the page a content stream belongs to."""

    def __init__(self):
        super().__init__()
        self.registered = []

    def register_resource(self, category, name, obj, force=False):
        self.registered.append((category, name))
        return super().register_resource(category, name, obj, force)
