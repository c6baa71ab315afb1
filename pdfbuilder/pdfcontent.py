"""Content stream builder.

`PDFContent` accumulates the operators of a page (or form) content
stream. It keeps track of the graphics and text state that has been
written so far, so that callers can query it, and it knows whether it is
inside a text object (between `BT` and `ET`).

Path operators issued inside a text object are not allowed there; they
are queued on a second buffer and written right after the text object is
closed. Underlines are drawn this way.
"""

import logging
from collections.abc import Sequence
from typing import Any, NamedTuple

from pdfbuilder import settings
from pdfbuilder.casting import clamp
from pdfbuilder.geometry import arc_curves, bogen_curves, compose_transform
from pdfbuilder.pdfcolor import (
    LAB_COLORSPACE_NAME,
    ColorModel,
    ColorSpec,
    color_operators,
    lab_colorspace,
    make_color_spec,
)
from pdfbuilder.pdfexceptions import (
    FontNotSetError,
    MissingFontSizeError,
    PDFContentFinalizedError,
    PDFContentModeError,
    PDFValueError,
)
from pdfbuilder.pdffont import PDFFontResource
from pdfbuilder.pdfresource import (
    PDFExtGState,
    PDFMetadata,
    PDFResourceTable,
    PDFShadingResource,
    PDFXObject,
    ResourceRegistry,
)
from pdfbuilder.pdftypes import LIT, PDFStream, serialize
from pdfbuilder.utils import (
    MATRIX_IDENTITY,
    Matrix,
    Point,
    choplist,
    decode_text,
    format_float,
    format_int,
    mult_matrix,
    shorten_str,
)

log = logging.getLogger(__name__)

LITERAL_PLACED_IMAGE = LIT("PPAM:PlacedImage")


class PDFTextState:
    matrix: Matrix
    linematrix: Point

    def __init__(self) -> None:
        self.font: PDFFontResource | None = None
        self.fontsize: float = 0
        # False while the font was chosen but Tf is not written yet.
        self.fontset: bool = False
        self.charspace: float = 0
        self.wordspace: float = 0
        self.scaling: float = 100
        self.leading: float = 0
        self.render: int = 0
        self.rise: float = 0
        self.reset()
        # self.matrix is set
        # self.linematrix is set

    def __repr__(self) -> str:
        return (
            f"<PDFTextState: font={self.font!r}, "
            f"fontsize={self.fontsize!r}, "
            f"charspace={self.charspace!r}, "
            f"wordspace={self.wordspace!r}, "
            f"scaling={self.scaling!r}, "
            f"leading={self.leading!r}, "
            f"render={self.render!r}, "
            f"rise={self.rise!r}, "
            f"matrix={self.matrix!r}, "
            f"linematrix={self.linematrix!r}>"
        )

    def copy(self) -> "PDFTextState":
        obj = PDFTextState()
        obj.font = self.font
        obj.fontsize = self.fontsize
        obj.fontset = self.fontset
        obj.charspace = self.charspace
        obj.wordspace = self.wordspace
        obj.scaling = self.scaling
        obj.leading = self.leading
        obj.render = self.render
        obj.rise = self.rise
        obj.matrix = self.matrix
        obj.linematrix = self.linematrix
        return obj

    def reset(self) -> None:
        self.matrix = MATRIX_IDENTITY
        self.linematrix = (0, 0)


class PDFGraphicState:
    def __init__(self) -> None:
        self.ctm: Matrix = MATRIX_IDENTITY
        self.linewidth: float = 1
        self.linecap: int = 0
        self.linejoin: int = 0
        self.miterlimit: float = 10
        self.dash: tuple[list[float], float] = ([], 0)
        self.flatness: float = 1

        # the color arguments as they were given
        self.scolor: list[Any] = [0]
        self.ncolor: list[Any] = [0]

    def copy(self) -> "PDFGraphicState":
        obj = PDFGraphicState()
        obj.ctm = self.ctm
        obj.linewidth = self.linewidth
        obj.linecap = self.linecap
        obj.linejoin = self.linejoin
        obj.miterlimit = self.miterlimit
        obj.dash = (list(self.dash[0]), self.dash[1])
        obj.flatness = self.flatness
        obj.scolor = list(self.scolor)
        obj.ncolor = list(self.ncolor)
        return obj

    def __repr__(self) -> str:
        return (
            f"<PDFGraphicState: "
            f"ctm={self.ctm!r}, "
            f"linewidth={self.linewidth!r}, "
            f"linecap={self.linecap!r}, "
            f"linejoin={self.linejoin!r}, "
            f"miterlimit={self.miterlimit!r}, "
            f"dash={self.dash!r}, "
            f"flatness={self.flatness!r}, "
            f"stroking color={self.scolor!r}, "
            f"non stroking color={self.ncolor!r}>"
        )


class TransformComponents(NamedTuple):
    """The arguments of the last absolute transform.

    Relative transforms add to these rather than to the matrix.
    """

    translate: tuple[float, float] = (0, 0)
    rotate: float = 0
    scale: tuple[float, float] = (1, 1)
    skew: tuple[float, float] = (0, 0)


class PDFContent:
    """Builds one content stream.

    If `page` is given, resources are registered with it instead of with
    a table of this content's own, so that all the contents of a page
    share their resources.

    Methods that set something return the content itself, so calls can be
    chained. Called without arguments, most of them return the current
    value instead and write nothing.
    """

    def __init__(self, page: ResourceRegistry | None = None) -> None:
        self.page = page
        self.resources = PDFResourceTable()
        self.stream: list[str] = []
        self.poststream: list[str] = []
        self.text_state = PDFTextState()
        self.graphic_state = PDFGraphicState()
        self.components = TransformComponents()
        # current point and start of the current subpath
        self.x: float = 0
        self.y: float = 0
        self.mx: float = 0
        self.my: float = 0
        self.in_text = False
        self.compress = False
        self.finalized = False

    def __repr__(self) -> str:
        return "<%s: instructions=%d, deferred=%d, text=%r>" % (
            self.__class__.__name__,
            len(self.stream),
            len(self.poststream),
            self.in_text,
        )

    #  Buffers

    def _check_finalized(self) -> None:
        if self.finalized:
            raise PDFContentFinalizedError("Content stream is already finalized")

    def add(self, *tokens: Any) -> "PDFContent":
        """Appends one instruction made of `tokens` to the stream."""
        self._check_finalized()
        if tokens:
            self.stream.append(" ".join(serialize(t) for t in tokens))
        return self

    def add_post(self, *tokens: Any) -> "PDFContent":
        """Queues one instruction until the current text object ends."""
        self._check_finalized()
        if tokens:
            self.poststream.append(" ".join(serialize(t) for t in tokens))
        return self

    def _add_path(self, *tokens: Any) -> None:
        if self.in_text:
            self.add_post(*tokens)
        else:
            self.add(*tokens)

    def flush_deferred(self) -> None:
        self._check_finalized()
        if self.poststream:
            log.debug("flush_deferred: %d instructions", len(self.poststream))
        self.stream.extend(self.poststream)
        self.poststream = []

    def in_text_object(self) -> bool:
        return self.in_text

    def _check_text_mode(self, opname: str) -> None:
        if self.in_text:
            return
        if settings.STRICT:
            raise PDFContentModeError(f"{opname}() outside of a text object")
        log.warning("%s() called outside of a text object", opname)

    #  Resources

    def resource(
        self,
        category: str,
        name: str,
        obj: object = None,
        force: bool = False,
    ) -> Any:
        """Looks up a resource, or registers one if `obj` is given.

        Registering returns the resources of `category`.
        """
        registry: ResourceRegistry = (
            self.page if self.page is not None else self.resources
        )
        if obj is None:
            return registry.get_resource(category, name)
        return registry.register_resource(category, name, obj, force)

    #  Coordinate transformations

    def translate(self, dx: float, dy: float) -> "PDFContent":
        return self.transform(translate=(dx, dy))

    def rotate(self, deg: float) -> "PDFContent":
        return self.transform(rotate=deg)

    def scale(self, sx: float, sy: float) -> "PDFContent":
        return self.transform(scale=(sx, sy))

    def skew(self, skx: float, sky: float) -> "PDFContent":
        return self.transform(skew=(skx, sky))

    def transform(
        self,
        translate: Sequence[float] | None = None,
        rotate: float | None = None,
        scale: Sequence[float] | None = None,
        skew: Sequence[float] | None = None,
        matrix: Sequence[float] | None = None,
    ) -> "PDFContent":
        """Writes the matrix composed of the given operations.

        The operations are applied in the order translate, rotate, scale,
        skew. Omitted ones are recorded as identity, so the result does
        not depend on any earlier transform.
        """
        mtx = compose_transform(
            matrix=matrix,
            skew=skew,
            scale=scale,
            rotate=rotate,
            translate=translate,
        )
        self.matrix(*mtx)
        self.components = TransformComponents(
            (translate[0], translate[1]) if translate is not None else (0, 0),
            rotate if rotate is not None else 0,
            (scale[0], scale[1]) if scale is not None else (1, 1),
            (skew[0], skew[1]) if skew is not None else (0, 0),
        )
        return self

    def transform_rel(
        self,
        translate: Sequence[float] | None = None,
        rotate: float | None = None,
        scale: Sequence[float] | None = None,
        skew: Sequence[float] | None = None,
    ) -> "PDFContent":
        """Like transform(), relative to the last transform.

        Translations, rotations and skews are added, scales multiplied.
        """
        (tx1, ty1) = translate if translate is not None else (0, 0)
        (sx1, sy1) = scale if scale is not None else (1, 1)
        (ka1, kb1) = skew if skew is not None else (0, 0)
        cur = self.components
        return self.transform(
            translate=(cur.translate[0] + tx1, cur.translate[1] + ty1),
            rotate=cur.rotate + (rotate or 0),
            scale=(cur.scale[0] * sx1, cur.scale[1] * sy1),
            skew=(cur.skew[0] + ka1, cur.skew[1] + kb1),
        )

    def transform_components(self) -> TransformComponents:
        return self.components

    def matrix(self, *m: float) -> Any:
        """Sets or returns the current matrix.

        Inside a text object this is the text matrix (`Tm`), which replaces
        the previous one and starts a new line. Outside, the matrix is
        concatenated to the current transformation matrix (`cm`).
        """
        if not m:
            if self.in_text:
                return self.text_state.matrix
            return self.graphic_state.ctm
        if len(m) != 6:
            raise PDFValueError(f"A matrix needs 6 values: {m!r}")
        (a, b, c, d, e, f) = m
        if self.in_text:
            self.add(a, b, c, d, e, f, "Tm")
            self.text_state.matrix = (a, b, c, d, e, f)
            self.text_state.linematrix = (0, 0)
        else:
            self.add(a, b, c, d, e, f, "cm")
            self.graphic_state.ctm = mult_matrix(
                (a, b, c, d, e, f), self.graphic_state.ctm
            )
        return self

    def matrix_update(self, tx: float, ty: float) -> "PDFContent":
        (x, y) = self.text_state.linematrix
        self.text_state.linematrix = (x + tx, y + ty)
        return self

    #  Graphics state

    def linewidth(self, width: float | None = None) -> Any:
        if width is None:
            return self.graphic_state.linewidth
        self.add(width, "w")
        self.graphic_state.linewidth = width
        return self

    def linecap(self, style: int | None = None) -> Any:
        if style is None:
            return self.graphic_state.linecap
        self.add(style, "J")
        self.graphic_state.linecap = style
        return self

    def linejoin(self, style: int | None = None) -> Any:
        if style is None:
            return self.graphic_state.linejoin
        self.add(style, "j")
        self.graphic_state.linejoin = style
        return self

    def miterlimit(self, ratio: float | None = None) -> Any:
        if ratio is None:
            return self.graphic_state.miterlimit
        self.add(ratio, "M")
        self.graphic_state.miterlimit = ratio
        return self

    def flatness(self, tolerance: float | None = None) -> Any:
        if tolerance is None:
            return self.graphic_state.flatness
        self.add(tolerance, "i")
        self.graphic_state.flatness = tolerance
        return self

    def linedash(
        self,
        *dashes: float,
        pattern: Sequence[float] | None = None,
        shift: float | None = None,
    ) -> Any:
        """Sets the dash pattern.

        No arguments select a solid line. Positional arguments are the
        dash and gap lengths; the keyword form also takes a phase `shift`.
        `linedash(-1)` returns the current (pattern, phase).
        """
        if pattern is None and shift is None:
            if len(dashes) == 1 and dashes[0] == -1:
                return self.graphic_state.dash
            dash = (list(dashes), 0.0)
        else:
            dash = (list(pattern or ()), shift or 0)
        self.add(dash[0], dash[1], "d")
        self.graphic_state.dash = dash
        return self

    def egstate(self, gs: PDFExtGState) -> "PDFContent":
        self.add(gs, "gs")
        self.resource("ExtGState", gs.name, gs)
        return self

    #  Path construction

    def move(self, *xy: float) -> "PDFContent":
        for x, y in choplist(2, xy):
            self._add_path(x, y, "m")
            self.x = self.mx = x
            self.y = self.my = y
        return self

    def line(self, *xy: float) -> "PDFContent":
        for x, y in choplist(2, xy):
            self._add_path(x, y, "l")
            self.x = x
            self.y = y
        return self

    def hline(self, x: float) -> "PDFContent":
        self._add_path(x, self.y, "l")
        self.x = x
        return self

    def vline(self, y: float) -> "PDFContent":
        self._add_path(self.x, y, "l")
        self.y = y
        return self

    def poly(self, x: float, y: float, *xy: float) -> "PDFContent":
        self.move(x, y)
        return self.line(*xy)

    def close(self) -> "PDFContent":
        self._add_path("h")
        self.x = self.mx
        self.y = self.my
        return self

    def endpath(self) -> "PDFContent":
        self._add_path("n")
        return self

    def rect(self, *xywh: float) -> "PDFContent":
        for x, y, w, h in choplist(4, xywh):
            self._add_path(x, y, w, h, "re")
            self.x = self.mx = x
            self.y = self.my = y
        return self

    def rectxy(self, x1: float, y1: float, x2: float, y2: float) -> "PDFContent":
        return self.rect(x1, y1, x2 - x1, y2 - y1)

    def circle(self, xc: float, yc: float, r: float) -> "PDFContent":
        self.arc(xc, yc, r, r, 0, 360, move=True)
        return self.close()

    def ellipse(self, xc: float, yc: float, rx: float, ry: float) -> "PDFContent":
        self.arc(xc, yc, rx, ry, 0, 360, move=True)
        return self.close()

    def arc(
        self,
        xc: float,
        yc: float,
        rx: float,
        ry: float,
        alpha: float,
        beta: float,
        move: bool = False,
        clockwise: bool = False,
    ) -> "PDFContent":
        """Draws an elliptic arc from `alpha` to `beta` degrees.

        If `move` is set, a new subpath is started at the start of the arc;
        otherwise the arc continues from the current point.
        """
        (start, curves) = arc_curves(xc, yc, rx, ry, alpha, beta, clockwise)
        if move:
            self.move(*start)
        for c1, c2, end in curves:
            self.curve(*c1, *c2, *end)
        return self

    def pie(
        self,
        xc: float,
        yc: float,
        rx: float,
        ry: float,
        alpha: float,
        beta: float,
        clockwise: bool = False,
    ) -> "PDFContent":
        (start, _) = arc_curves(xc, yc, rx, ry, alpha, beta, clockwise)
        self.move(xc, yc)
        self.line(*start)
        self.arc(xc, yc, rx, ry, alpha, beta, move=False, clockwise=clockwise)
        return self.close()

    def curve(self, *coords: float) -> "PDFContent":
        for x1, y1, x2, y2, x3, y3 in choplist(6, coords):
            self._add_path(x1, y1, x2, y2, x3, y3, "c")
            self.x = x3
            self.y = y3
        return self

    def spline(self, *coords: float) -> "PDFContent":
        """Draws quadratic curves given as (control, end) point pairs."""
        for cx, cy, x, y in choplist(4, coords):
            self.curve(
                (2 * cx + self.x) / 3,
                (2 * cy + self.y) / 3,
                (2 * cx + x) / 3,
                (2 * cy + y) / 3,
                x,
                y,
            )
        return self

    def bogen(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        r: float,
        move: bool = False,
        larger: bool = False,
        reverse: bool = False,
    ) -> "PDFContent":
        """Draws a circular arc of radius `r` from (x1, y1) to (x2, y2)."""
        curves = bogen_curves(x1, y1, x2, y2, r, larger, reverse)
        if move:
            self.move(x1, y1)
        for c1, c2, end in curves:
            self.curve(*c1, *c2, *end)
        return self

    #  Path painting

    def stroke(self) -> "PDFContent":
        self._add_path("S")
        return self

    def fill(self, even_odd: bool = False) -> "PDFContent":
        self._add_path("f*" if even_odd else "f")
        return self

    def fillstroke(self, even_odd: bool = False) -> "PDFContent":
        self._add_path("B*" if even_odd else "B")
        return self

    def clip(self, even_odd: bool = False) -> "PDFContent":
        self._add_path("W*" if even_odd else "W")
        return self

    #  Colors

    def _register_color(self, spec: ColorSpec) -> None:
        if spec.model is ColorModel.LAB:
            if self.resource("ColorSpace", LAB_COLORSPACE_NAME) is None:
                self.resource("ColorSpace", LAB_COLORSPACE_NAME, lab_colorspace())
        elif spec.resource is not None and spec.resource.category in (
            "ColorSpace",
            "Pattern",
        ):
            self.resource(spec.resource.category, spec.resource.name, spec.resource)

    def _color_tokens(self, values: Sequence[Any], fill: bool) -> list[str]:
        spec = make_color_spec(*values)
        self._register_color(spec)
        return color_operators(spec, fill)

    def fillcolor(self, *values: Any) -> Any:
        if not values:
            return list(self.graphic_state.ncolor)
        self.add(*self._color_tokens(values, True))
        self.graphic_state.ncolor = list(values)
        return self

    def strokecolor(self, *values: Any) -> Any:
        if not values:
            return list(self.graphic_state.scolor)
        self.add(*self._color_tokens(values, False))
        self.graphic_state.scolor = list(values)
        return self

    #  External objects

    def shade(
        self,
        shading: PDFShadingResource,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
    ) -> "PDFContent":
        """Paints a shading stretched over the rectangle (x0, y0, x1, y1)."""
        self.save()
        self.add(x1 - x0, 0, 0, y1 - y0, x0, y0, "cm")
        self.add(shading, "sh")
        self.resource("Shading", shading.name, shading)
        return self.restore()

    def image(
        self,
        xobject: PDFXObject,
        x: float,
        y: float,
        w: float | None = None,
        h: float | None = None,
    ) -> "PDFContent":
        """Places an image with its lower left corner at (x, y).

        Without a size the image keeps its natural size; a width alone
        is taken as a scale factor for both dimensions.
        """
        if xobject.metadata is not None:
            self.marked_content(LITERAL_PLACED_IMAGE.name, xobject.metadata)
        if w is None:
            (w, h) = (xobject.width, xobject.height)
        elif h is None:
            (w, h) = (xobject.width * w, xobject.height * w)
        self.save()
        self.add(w, 0, 0, h, x, y, "cm")
        self.add(xobject, "Do")
        self.restore()
        self.x = x
        self.y = y
        self.resource("XObject", xobject.name, xobject)
        if xobject.metadata is not None:
            self.end_marked_content()
        return self

    def formimage(
        self,
        xobject: PDFXObject,
        x: float,
        y: float,
        sx: float | None = None,
        sy: float | None = None,
    ) -> "PDFContent":
        if sx is None:
            sx = 1
        if sy is None:
            sy = sx
        self.save()
        self.add(sx, 0, 0, sy, x, y, "cm")
        self.add(xobject, "Do")
        self.restore()
        self.resource("XObject", xobject.name, xobject)
        return self

    def marked_content(
        self,
        tag: str,
        properties: PDFMetadata | None = None,
    ) -> "PDFContent":
        if properties is None:
            return self.add(LIT(tag), "BMC")
        self.add(LIT(tag), properties, "BDC")
        self.resource("Properties", properties.name, {"Metadata": properties})
        return self

    def end_marked_content(self) -> "PDFContent":
        return self.add("EMC")

    #  Text state

    def charspace(self, space: float | None = None) -> Any:
        if space is None:
            return self.text_state.charspace
        self.add(format_float(space, 6), "Tc")
        self.text_state.charspace = space
        return self

    def wordspace(self, space: float | None = None) -> Any:
        if space is None:
            return self.text_state.wordspace
        self.add(format_float(space, 6), "Tw")
        self.text_state.wordspace = space
        return self

    def hscale(self, scale: float | None = None) -> Any:
        """Horizontal scaling, in percent of the normal width."""
        if scale is None:
            return self.text_state.scaling
        self.add(format_float(scale, 6), "Tz")
        self.text_state.scaling = scale
        return self

    def lead(self, leading: float | None = None) -> Any:
        if leading is None:
            return self.text_state.leading
        self.add(leading, "TL")
        self.text_state.leading = leading
        return self

    def rise(self, dist: float | None = None) -> Any:
        if dist is None:
            return self.text_state.rise
        self.add(dist, "Ts")
        self.text_state.rise = dist
        return self

    def render(self, mode: int | None = None) -> Any:
        if mode is None:
            return self.text_state.render
        mode = int(clamp(mode, 0, 0, 7))
        self.add(format_int(mode), "Tr")
        self.text_state.render = mode
        return self

    def textstate_snapshot(self) -> dict[str, Any]:
        ts = self.text_state
        cur = self.components
        return {
            "font": ts.font,
            "fontsize": ts.fontsize,
            "charspace": ts.charspace,
            "hscale": ts.scaling,
            "wordspace": ts.wordspace,
            "lead": ts.leading,
            "rise": ts.rise,
            "render": ts.render,
            "matrix": self.graphic_state.ctm,
            "textmatrix": ts.matrix,
            "textlinematrix": ts.linematrix,
            "rotate": cur.rotate,
            "scale": list(cur.scale),
            "skew": list(cur.skew),
            "translate": list(cur.translate),
            "fillcolor": list(self.graphic_state.ncolor),
            "strokecolor": list(self.graphic_state.scolor),
        }

    def textstate(self, **state: Any) -> Any:
        """Sets several text state values at once, or returns all of them.

        The keys are those of the returned snapshot. Keys that are missing,
        None or unknown are left alone. A font given here is written
        lazily by the next text().
        """
        if not state:
            return self.textstate_snapshot()
        for key in ("charspace", "hscale", "wordspace", "lead", "rise", "render"):
            value = state.get(key)
            if value is not None:
                getattr(self, key)(value)
        if state.get("font") is not None and state.get("fontsize"):
            self._fontset(state["font"], state["fontsize"])
        if state.get("textmatrix") is not None:
            self.matrix(*state["textmatrix"])
            cur = self.components
            (tx, ty) = state.get("translate") or cur.translate
            (sx, sy) = state.get("scale") or cur.scale
            (kx, ky) = state.get("skew") or cur.skew
            rotate = state.get("rotate")
            self.components = TransformComponents(
                (tx, ty),
                rotate if rotate is not None else cur.rotate,
                (sx, sy),
                (kx, ky),
            )
        if state.get("fillcolor") is not None:
            self.fillcolor(*state["fillcolor"])
        if state.get("strokecolor") is not None:
            self.strokecolor(*state["strokecolor"])
        return self

    #  Fonts

    def _fontset(self, font: PDFFontResource, size: float) -> None:
        self.text_state.font = font
        self.text_state.fontsize = size
        self.text_state.fontset = False
        fonts = font.font_list() if font.is_virtual() else [font]
        for f in fonts:
            self.resource("Font", f.name, f)

    def font(self, font: PDFFontResource, size: float) -> "PDFContent":
        if not size:
            raise MissingFontSizeError(f"A font size is required: {font!r}")
        # a virtual font is selected through its first member
        name = font.font_list()[0].name if font.is_virtual() else font.name
        log.debug("font: %s size=%r", name, size)
        self._fontset(font, size)
        self.add(LIT(name), size, "Tf")
        self.text_state.fontset = True
        return self

    #  Text positioning

    def distance(self, dx: float, dy: float) -> "PDFContent":
        """Moves to the start of the next line, offset by (dx, dy)."""
        self._check_text_mode("distance")
        self.add(dx, dy, "Td")
        self.matrix_update(dx, dy)
        self.text_state.linematrix = (dx, self.text_state.linematrix[1])
        return self

    def cr(self, offset: float | None = None) -> "PDFContent":
        """Starts a new line, `offset` below (or above) the current one.

        Without an offset the current leading is used.
        """
        self._check_text_mode("cr")
        if offset is not None:
            self.add(0, offset, "Td")
            self.matrix_update(0, offset)
        else:
            self.add("T*")
            self.matrix_update(0, -self.text_state.leading)
        self.text_state.linematrix = (0, self.text_state.linematrix[1])
        return self

    def nl(self, indent: float | None = None) -> "PDFContent":
        self._check_text_mode("nl")
        self.add("T*")
        self.matrix_update(0, -self.text_state.leading)
        self.text_state.linematrix = (0, self.text_state.linematrix[1])
        if indent:
            self.add("[%s]" % format_float(-10 * indent), "TJ")
        return self

    def _textpos(self, *xy: float) -> Point:
        x = sum(xy[0::2])
        y = sum(xy[1::2])
        (px, py) = compose_transform(matrix=self.text_state.matrix, point=(x, y))
        return (px, py)

    def textpos(self) -> Point:
        """Returns the current text position in user space."""
        return self._textpos(*self.text_state.linematrix)

    #  Text showing

    def advancewidth(
        self,
        text: str | bytes,
        font: PDFFontResource | None = None,
        fontsize: float | None = None,
        wordspace: float | None = None,
        charspace: float | None = None,
        hscale: float | None = None,
    ) -> float:
        """Returns how far `text` moves the text position, in text space.

        Values not given are taken from the current text state.
        """
        if not text:
            return 0
        if isinstance(text, bytes):
            text = decode_text(text)
        ts = self.text_state
        font = font if font is not None else ts.font
        fontsize = fontsize if fontsize is not None else ts.fontsize
        wordspace = wordspace if wordspace is not None else ts.wordspace
        charspace = charspace if charspace is not None else ts.charspace
        hscale = hscale if hscale is not None else ts.scaling
        if font is None:
            raise FontNotSetError("Cannot measure text without a font")
        glyph_width = font.width(text) * fontsize
        word_spaces = wordspace * text.count(" ")
        char_spaces = charspace * (len(text) - 1)
        return (glyph_width + word_spaces + char_spaces) * hscale / 100

    def _underline_instructions(
        self,
        start: Point,
        end: Point,
        underline: Any,
        color: Any,
    ) -> list[list[Any]]:
        ts = self.text_state
        assert ts.font is not None
        if color is None:
            color = "black"
        if isinstance(underline, (list, tuple)):
            items = list(underline)
        else:
            items = [underline, 1]
        if len(items) % 2:
            items.append(1)
        position = -ts.font.underline_position() * ts.fontsize / 1000 or 1
        thickness_auto = ts.font.underline_thickness() * ts.fontsize / 1000 or 1

        instructions: list[list[Any]] = []
        for pos, (distance, thickness) in enumerate(choplist(2, items), start=1):
            scolor = color
            if isinstance(thickness, (list, tuple)):
                (thickness, scolor) = thickness
            if distance == "auto":
                distance = pos * position
            if thickness == "auto":
                thickness = thickness_auto
            dy = -(distance + thickness / 2)
            (x1, y1) = self._textpos(*start, 0, dy)
            (x2, y2) = self._textpos(*end, 0, dy)
            if isinstance(scolor, (list, tuple)):
                tokens = self._color_tokens(scolor, False)
            else:
                tokens = self._color_tokens([scolor], False)
            instructions.extend(
                [
                    ["q"],
                    tokens,
                    [thickness, "w"],
                    [x1, y1, "m"],
                    [x2, y2, "l"],
                    ["S"],
                    ["Q"],
                ]
            )
        return instructions

    def text(
        self,
        text: str | bytes,
        indent: float | None = None,
        underline: Any = None,
        strokecolor: Any = None,
    ) -> float:
        """Shows `text` at the current position and returns its width.

        `indent` shifts the text to the right, in text space units.
        `underline` is "auto", a distance below the baseline, or a list of
        distance, thickness pairs; a thickness can be a (thickness, color)
        pair, and both values can be "auto" to use the font's metrics.
        Underlines are stroked after the text object ends.
        """
        self._check_text_mode("text")
        ts = self.text_state
        if ts.font is None or not ts.fontsize:
            raise FontNotSetError(
                "Cannot add text without first setting a font and font size"
            )
        if isinstance(text, bytes):
            text = decode_text(text)

        # everything that can fail happens before the first token is added
        (x0, y0) = ts.linematrix
        if indent is not None:
            x0 += indent
        width = self.advancewidth(text)
        instructions: list[list[Any]] = []
        if underline is not None:
            instructions = self._underline_instructions(
                (x0, y0), (x0 + width, y0), underline, strokecolor
            )

        if not ts.fontset:
            self.font(ts.font, ts.fontsize)
        if indent is not None:
            self.matrix_update(indent, 0)
            adjust = -indent * (1000 / ts.fontsize) * (100 / ts.scaling)
            self.add(ts.font.text(text, ts.fontsize, adjust))
        else:
            self.add(ts.font.text(text, ts.fontsize))
        self.matrix_update(width, 0)
        for tokens in instructions:
            self.add_post(*tokens)
        log.debug("text: %r width=%r", shorten_str(text, 40), width)
        return width

    #  Graphics state stack

    def save(self) -> "PDFContent":
        return self.add("q")

    def restore(self) -> "PDFContent":
        return self.add("Q")

    #  Text objects

    def textstart(self) -> "PDFContent":
        """Opens a text object and resets the text state."""
        if not self.in_text:
            self.add("BT")
            self.in_text = True
            self.text_state = PDFTextState()
            self.graphic_state.ctm = MATRIX_IDENTITY
            self.graphic_state.ncolor = [0]
            self.graphic_state.scolor = [0]
            self.components = TransformComponents()
            log.debug("textstart")
        return self

    def textend(self) -> "PDFContent":
        """Closes the text object and writes out the queued instructions."""
        if self.in_text:
            self.add("ET")
            self.in_text = False
            self.flush_deferred()
            log.debug("textend")
        return self

    #  Output

    def compress_flate(self) -> "PDFContent":
        self.compress = True
        return self

    def get_data(self) -> bytes:
        return "".join(f"{i}\n" for i in self.stream).encode("latin-1", "replace")

    def finalize(self) -> PDFStream:
        """Ends the content and returns it as a stream.

        Any open text object is closed first. The content cannot be added
        to afterwards.
        """
        self._check_finalized()
        self.textend()
        stream = PDFStream({}, self.get_data())
        if self.compress:
            stream.compress()
        self.finalized = True
        self.text_state = PDFTextState()
        self.graphic_state = PDFGraphicState()
        self.components = TransformComponents()
        log.debug("finalize: %r", stream)
        return stream


class PDFTextContent(PDFContent):
    """A content stream that starts inside a text object."""

    def __init__(self, page: ResourceRegistry | None = None) -> None:
        super().__init__(page)
        self.textstart()