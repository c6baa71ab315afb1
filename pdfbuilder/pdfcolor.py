"""Color specifications and the operators that select them.

A color can be given in several shapes: a gray level, three or four
channel values, a color name or a prefixed hex string, a pattern, or a
colorspace followed by its parameters. `make_color_spec()` turns any of
these into a `ColorSpec` whose channels are already clamped, and
`color_operators()` turns a `ColorSpec` into content stream tokens.

Hex strings:

    #RGB    red, green, blue
    !HSV    hue, saturation, value, converted to RGB
    %CMYK   cyan, magenta, yellow, black
    &HSL    hue, saturation, lightness, converted to L*a*b
    $LAB    L*a*b

Each channel uses 1 to 4 hex digits. Missing digits are padded with
zeros; surplus digits that do not fill a whole channel are ignored.
"""

import colorsys
import enum
import logging
import string
from typing import Any, NamedTuple

from pdfbuilder import settings
from pdfbuilder.casting import clamp
from pdfbuilder.pdfexceptions import InvalidColorSpecError
from pdfbuilder.pdfresource import PDFColorSpaceResource, PDFResource
from pdfbuilder.pdftypes import LIT, serialize
from pdfbuilder.utils import format_floats

log = logging.getLogger(__name__)

LITERAL_LAB = LIT("Lab")
LITERAL_PATTERN = LIT("Pattern")

LAB_COLORSPACE_NAME = "LabS"

# Color returned for a name that is not in the table.
UNKNOWN_COLOR = (0.5, 0.5, 0.5)


class ColorModel(enum.Enum):
    GRAY = "DeviceGray"
    RGB = "DeviceRGB"
    CMYK = "DeviceCMYK"
    LAB = "Lab"
    PATTERN = "Pattern"
    COLORSPACE = "ColorSpace"


class ColorSpec(NamedTuple):
    model: ColorModel
    values: tuple[Any, ...] = ()
    resource: PDFResource | None = None


# fmt: off
CSS_COLORS = {
"aliceblue": "#f0f8ff", "antiquewhite": "#faebd7", "aqua": "#00ffff",
"aquamarine": "#7fffd4", "azure": "#f0ffff", "beige": "#f5f5dc",
"bisque": "#ffe4c4", "black": "#000000", "blanchedalmond": "#ffebcd",
"blue": "#0000ff", "blueviolet": "#8a2be2", "brown": "#a52a2a",
"burlywood": "#deb887", "cadetblue": "#5f9ea0", "chartreuse": "#7fff00",
"chocolate": "#d2691e", "coral": "#ff7f50", "cornflowerblue": "#6495ed",
"cornsilk": "#fff8dc", "crimson": "#dc143c", "cyan": "#00ffff",
"darkblue": "#00008b", "darkcyan": "#008b8b", "darkgoldenrod": "#b8860b",
"darkgray": "#a9a9a9", "darkgrey": "#a9a9a9", "darkgreen": "#006400",
"darkkhaki": "#bdb76b", "darkmagenta": "#8b008b", "darkolivegreen": "#556b2f",
"darkorange": "#ff8c00", "darkorchid": "#9932cc", "darkred": "#8b0000",
"darksalmon": "#e9967a", "darkseagreen": "#8fbc8f", "darkslateblue": "#483d8b",
"darkslategray": "#2f4f4f", "darkslategrey": "#2f4f4f",
"darkturquoise": "#00ced1", "darkviolet": "#9400d3", "deeppink": "#ff1493",
"deepskyblue": "#00bfff", "dimgray": "#696969", "dimgrey": "#696969",
"dodgerblue": "#1e90ff", "firebrick": "#b22222", "floralwhite": "#fffaf0",
"forestgreen": "#228b22", "fuchsia": "#ff00ff", "gainsboro": "#dcdcdc",
"ghostwhite": "#f8f8ff", "gold": "#ffd700", "goldenrod": "#daa520",
"gray": "#808080", "grey": "#808080", "green": "#008000",
"greenyellow": "#adff2f", "honeydew": "#f0fff0", "hotpink": "#ff69b4",
"indianred": "#cd5c5c", "indigo": "#4b0082", "ivory": "#fffff0",
"khaki": "#f0e68c", "lavender": "#e6e6fa", "lavenderblush": "#fff0f5",
"lawngreen": "#7cfc00", "lemonchiffon": "#fffacd", "lightblue": "#add8e6",
"lightcoral": "#f08080", "lightcyan": "#e0ffff",
"lightgoldenrodyellow": "#fafad2", "lightgray": "#d3d3d3",
"lightgrey": "#d3d3d3", "lightgreen": "#90ee90", "lightpink": "#ffb6c1",
"lightsalmon": "#ffa07a", "lightseagreen": "#20b2aa", "lightskyblue": "#87cefa",
"lightslategray": "#778899", "lightslategrey": "#778899",
"lightsteelblue": "#b0c4de", "lightyellow": "#ffffe0", "lime": "#00ff00",
"limegreen": "#32cd32", "linen": "#faf0e6", "magenta": "#ff00ff",
"maroon": "#800000", "mediumaquamarine": "#66cdaa", "mediumblue": "#0000cd",
"mediumorchid": "#ba55d3", "mediumpurple": "#9370db",
"mediumseagreen": "#3cb371", "mediumslateblue": "#7b68ee",
"mediumspringgreen": "#00fa9a", "mediumturquoise": "#48d1cc",
"mediumvioletred": "#c71585", "midnightblue": "#191970", "mintcream": "#f5fffa",
"mistyrose": "#ffe4e1", "moccasin": "#ffe4b5", "navajowhite": "#ffdead",
"navy": "#000080", "oldlace": "#fdf5e6", "olive": "#808000",
"olivedrab": "#6b8e23", "orange": "#ffa500", "orangered": "#ff4500",
"orchid": "#da70d6", "palegoldenrod": "#eee8aa", "palegreen": "#98fb98",
"paleturquoise": "#afeeee", "palevioletred": "#db7093", "papayawhip": "#ffefd5",
"peachpuff": "#ffdab9", "peru": "#cd853f", "pink": "#ffc0cb", "plum": "#dda0dd",
"powderblue": "#b0e0e6", "purple": "#800080", "rebeccapurple": "#663399",
"red": "#ff0000", "rosybrown": "#bc8f8f", "royalblue": "#4169e1",
"saddlebrown": "#8b4513", "salmon": "#fa8072", "sandybrown": "#f4a460",
"seagreen": "#2e8b57", "seashell": "#fff5ee", "sienna": "#a0522d",
"silver": "#c0c0c0", "skyblue": "#87ceeb", "slateblue": "#6a5acd",
"slategray": "#708090", "slategrey": "#708090", "snow": "#fffafa",
"springgreen": "#00ff7f", "steelblue": "#4682b4", "tan": "#d2b48c",
"teal": "#008080", "thistle": "#d8bfd8", "tomato": "#ff6347",
"turquoise": "#40e0d0", "violet": "#ee82ee", "wheat": "#f5deb3",
"white": "#ffffff", "whitesmoke": "#f5f5f5", "yellow": "#ffff00",
"yellowgreen": "#9acd32",
}
# fmt: on

NAME_CHARS = frozenset(string.ascii_lowercase + string.digits + "#!%&$")


#  Conversions
#
#  Hues are in degrees, every other channel in 0..1 except L*a*b, where L
#  is in 0..100 and a, b in -100..100.


def hsv_to_rgb(h: float, s: float, v: float) -> tuple[float, float, float]:
    return colorsys.hsv_to_rgb((h % 360) / 360, s, v)


def hsl_to_rgb(h: float, s: float, lightness: float) -> tuple[float, float, float]:
    return colorsys.hls_to_rgb((h % 360) / 360, lightness, s)


def rgb_to_cmyk(r: float, g: float, b: float) -> tuple[float, float, float, float]:
    k = 1 - max(r, g, b)
    if k >= 1:
        return (0, 0, 0, 1)
    return ((1 - r - k) / (1 - k), (1 - g - k) / (1 - k), (1 - b - k) / (1 - k), k)


def cmyk_to_rgb(c: float, m: float, y: float, k: float) -> tuple[float, float, float]:
    return ((1 - c) * (1 - k), (1 - m) * (1 - k), (1 - y) * (1 - k))


# sRGB primaries and the D65 white point
_RGB_TO_XYZ = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)
_XYZ_TO_RGB = (
    (3.2404542, -1.5371385, -0.4985314),
    (-0.9692660, 1.8760108, 0.0415560),
    (0.0556434, -0.2040259, 1.0572252),
)
_WHITE_D65 = (0.95047, 1.0, 1.08883)
_LAB_EPSILON = 6.0 / 29


def _lab_f(t: float) -> float:
    if t > _LAB_EPSILON**3:
        return t ** (1.0 / 3)
    return t / (3 * _LAB_EPSILON**2) + 4.0 / 29


def _lab_finv(t: float) -> float:
    if t > _LAB_EPSILON:
        return t**3
    return 3 * _LAB_EPSILON**2 * (t - 4.0 / 29)


def rgb_to_lab(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Converts sRGB to L*a*b relative to the D65 white point."""
    linear = [
        c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4 for c in (r, g, b)
    ]
    (fx, fy, fz) = (
        _lab_f(sum(k * c for (k, c) in zip(row, linear)) / white)
        for (row, white) in zip(_RGB_TO_XYZ, _WHITE_D65)
    )
    return (
        clamp(116 * fy - 16, 0, 0, 100),
        clamp(500 * (fx - fy), 0, -100, 100),
        clamp(200 * (fy - fz), 0, -100, 100),
    )


def lab_to_rgb(lum: float, a: float, b: float) -> tuple[float, float, float]:
    fy = (lum + 16) / 116
    xyz = (
        _WHITE_D65[0] * _lab_finv(fy + a / 500),
        _WHITE_D65[1] * _lab_finv(fy),
        _WHITE_D65[2] * _lab_finv(fy - b / 200),
    )
    rgb = []
    for row in _XYZ_TO_RGB:
        c = sum(k * v for (k, v) in zip(row, xyz))
        c = 12.92 * c if c <= 0.0031308 else 1.055 * c ** (1 / 2.4) - 0.055
        rgb.append(clamp(c, 0, 0, 1))
    return (rgb[0], rgb[1], rgb[2])


#  Named and hex colors


def normalize_color_name(name: str) -> str:
    return "".join(c for c in name.lower() if c in NAME_CHARS)


def hex_channels(digits: str, nchannels: int) -> list[float]:
    """Splits hex digits into `nchannels` values in 0..1."""
    digits = "".join(c for c in digits if c in string.hexdigits)
    if len(digits) < nchannels:
        digits = digits.ljust(nchannels, "0")
    width = min(len(digits) // nchannels, 4)
    top = 16**width - 1
    return [
        int(digits[i * width : (i + 1) * width], 16) / top for i in range(nchannels)
    ]


def _unknown_color(name: str) -> tuple[float, float, float]:
    if settings.STRICT:
        raise InvalidColorSpecError(f"Unknown color name: {name!r}")
    log.warning("Unknown color name %r, using gray", name)
    return UNKNOWN_COLOR


def name_color(name: str) -> tuple[float, float, float]:
    """Returns the RGB values of a color name or hex string."""
    key = normalize_color_name(name)
    if key.startswith("#"):
        (r, g, b) = hex_channels(key[1:], 3)
        return (r, g, b)
    elif key.startswith("!"):
        (h, s, v) = hex_channels(key[1:], 3)
        return hsv_to_rgb(h * 360, s, v)
    elif key.startswith("&"):
        (h, s, lightness) = hex_channels(key[1:], 3)
        return hsl_to_rgb(h * 360, s, lightness)
    elif key.startswith("%"):
        (c, m, y, k) = hex_channels(key[1:], 4)
        return cmyk_to_rgb(c, m, y, k)
    elif key.startswith("$"):
        return lab_to_rgb(*name_color_lab(key))
    elif key in CSS_COLORS:
        return name_color(CSS_COLORS[key])
    return _unknown_color(name)


def name_color_cmyk(name: str) -> tuple[float, float, float, float]:
    key = normalize_color_name(name)
    if key.startswith("%"):
        (c, m, y, k) = hex_channels(key[1:], 4)
        return (c, m, y, k)
    return rgb_to_cmyk(*name_color(name))


def name_color_lab(name: str) -> tuple[float, float, float]:
    key = normalize_color_name(name)
    if key.startswith("$"):
        (lum, a, b) = hex_channels(key[1:], 3)
        return (lum * 100, a * 200 - 100, b * 200 - 100)
    return rgb_to_lab(*name_color(name))


#  Color specifications


def _clamp_channels(values: tuple[Any, ...]) -> tuple[float, ...]:
    return tuple(clamp(v, 0, 0, 1) for v in values)


def make_color_spec(*values: Any) -> ColorSpec:
    """Classifies the arguments of a color setting call.

    Raises InvalidColorSpecError for an empty or unrecognized shape. Numeric
    channels are clamped into range and never raise.
    """
    if not values:
        raise InvalidColorSpecError("Empty color specification")
    first = values[0]
    if len(values) == 1:
        if isinstance(first, PDFResource):
            return ColorSpec(ColorModel.PATTERN, (), first)
        if isinstance(first, str) and first:
            c = first[0]
            if c in string.ascii_letters or c in "#!":
                return ColorSpec(ColorModel.RGB, name_color(first))
            elif c == "%":
                return ColorSpec(ColorModel.CMYK, name_color_cmyk(first))
            elif c in "&$":
                return ColorSpec(ColorModel.LAB, name_color_lab(first))
        return ColorSpec(ColorModel.GRAY, (clamp(first, 0, 0, 1),))
    if isinstance(first, PDFResource):
        return ColorSpec(ColorModel.COLORSPACE, values[1:], first)
    elif len(values) == 3:
        return ColorSpec(ColorModel.RGB, _clamp_channels(values))
    elif len(values) == 4:
        return ColorSpec(ColorModel.CMYK, _clamp_channels(values))
    raise InvalidColorSpecError(f"Invalid color specification: {values!r}")


def lab_colorspace() -> PDFColorSpaceResource:
    """Returns the L*a*b colorspace that L*a*b colors are selected in."""
    return PDFColorSpaceResource(
        LAB_COLORSPACE_NAME,
        [
            LITERAL_LAB,
            {
                "WhitePoint": [1, 1, 1],
                "Range": [-128, 127, -128, 127],
                "Gamma": [2.2, 2.2, 2.2],
            },
        ],
    )


def color_operators(spec: ColorSpec, fill: bool) -> list[str]:
    """Returns the tokens that make `spec` the fill or stroke color."""
    model = spec.model
    if model is ColorModel.PATTERN:
        assert spec.resource is not None
        return [
            str(LITERAL_PATTERN),
            "cs" if fill else "CS",
            serialize(spec.resource),
            "scn" if fill else "SCN",
        ]
    elif model is ColorModel.COLORSPACE:
        assert spec.resource is not None
        if isinstance(spec.resource, PDFColorSpaceResource):
            params = spec.resource.param(*spec.values)
        else:
            params = list(spec.values)
        return [
            serialize(spec.resource),
            "cs" if fill else "CS",
            *(serialize(p) for p in params),
            "sc" if fill else "SC",
        ]
    elif model is ColorModel.LAB:
        return [
            str(LIT(LAB_COLORSPACE_NAME)),
            "cs" if fill else "CS",
            *format_floats(*spec.values),
            "sc" if fill else "SC",
        ]
    elif model is ColorModel.RGB:
        return [*format_floats(*spec.values), "rg" if fill else "RG"]
    elif model is ColorModel.CMYK:
        return [*format_floats(*spec.values), "k" if fill else "K"]
    return [*format_floats(*spec.values), "g" if fill else "G"]
