"""Coordinate transforms and arc approximation.

Everything here is a pure function of its arguments. Angles are in
degrees; arcs are approximated with cubic Bezier segments of at most 30
degrees of sweep each.
"""

import logging
import math
from collections.abc import Sequence

from pdfbuilder.pdfexceptions import DegenerateGeometryError
from pdfbuilder.utils import (
    MATRIX_IDENTITY,
    Matrix,
    Point,
    apply_matrix_pt,
    mult_matrix,
)

log = logging.getLogger(__name__)

BezierSegment = tuple[Point, Point, Point, Point]
CurveTo = tuple[Point, Point, Point]

MAX_SEGMENT_SWEEP = 30.0


def translate_coeffs(dx: float, dy: float) -> Matrix:
    return (1, 0, 0, 1, dx, dy)


def rotate_coeffs(deg: float) -> Matrix:
    rad = math.radians(deg % 360)
    cos = math.cos(rad)
    sin = math.sin(rad)
    return (cos, sin, -sin, cos, 0, 0)


def scale_coeffs(sx: float, sy: float) -> Matrix:
    return (sx, 0, 0, sy, 0, 0)


def skew_coeffs(skx: float, sky: float) -> Matrix:
    return (
        1,
        math.tan(math.radians(skx % 360)),
        math.tan(math.radians(sky % 360)),
        1,
        0,
        0,
    )


def compose_transform(
    matrix: Sequence[float] | None = None,
    skew: Sequence[float] | None = None,
    scale: Sequence[float] | None = None,
    rotate: float | None = None,
    translate: Sequence[float] | None = None,
    point: Sequence[float] | None = None,
) -> tuple[float, ...]:
    """Builds a transformation matrix out of its components.

    The components are multiplied in the order matrix, skew, scale,
    rotate, translate, so that a point is translated last. This gives the
    same result as emitting translate, rotate, scale and skew one after
    another, which is the order recommended for content streams.

    If `point` is given, the point transformed by the resulting matrix is
    returned instead of the matrix.
    """
    mtx: Matrix = MATRIX_IDENTITY
    if matrix is not None:
        (a, b, c, d, e, f) = matrix
        mtx = mult_matrix(mtx, (a, b, c, d, e, f))
    if skew is not None:
        mtx = mult_matrix(mtx, skew_coeffs(*skew))
    if scale is not None:
        mtx = mult_matrix(mtx, scale_coeffs(*scale))
    if rotate is not None:
        mtx = mult_matrix(mtx, rotate_coeffs(rotate))
    if translate is not None:
        mtx = mult_matrix(mtx, translate_coeffs(*translate))
    if point is not None:
        (x, y) = point
        return apply_matrix_pt(mtx, (x, y))
    return mtx


def _normalize_angle(deg: float) -> float:
    # 360 is kept as is, so that full 0..360 sweeps survive.
    while deg < 0.0:
        deg += 360.0
    while deg > 360.0:
        deg -= 360.0
    return deg


def arc_to_bezier(
    rx: float,
    ry: float,
    alpha: float,
    beta: float,
    clockwise: bool = False,
) -> list[BezierSegment]:
    """Approximates an elliptical arc by cubic Bezier segments.

    The arc belongs to the ellipse with semi-axes rx and ry centered on the
    origin and sweeps from `alpha` to `beta` degrees, counter-clockwise
    unless `clockwise` is set. Each segment is (p0, p1, p2, p3): start
    point, two control points and end point.
    """
    if rx <= 0 or ry <= 0:
        raise DegenerateGeometryError(
            f"Cannot draw an arc with a radius not above 0: ({rx}, {ry})"
        )
    if alpha == beta:
        raise DegenerateGeometryError(
            f"Cannot draw an arc with zero degrees of sweep: {alpha} to {beta}"
        )

    alpha = _normalize_angle(alpha)
    beta = _normalize_angle(beta)

    # The control point formula misbehaves across the 0 degree angle, so a
    # sweep passing over it is split there.
    if not clockwise and alpha > beta:
        if alpha == 360.0 and beta == 0.0:
            return arc_to_bezier(rx, ry, 0.0, 360.0, False)
        elif alpha == 360.0:
            return arc_to_bezier(rx, ry, 0.0, beta, False)
        elif beta == 0.0:
            return arc_to_bezier(rx, ry, alpha, 360.0, False)
        return arc_to_bezier(rx, ry, alpha, 360.0, False) + arc_to_bezier(
            rx, ry, 0.0, beta, False
        )
    if clockwise and alpha < beta:
        if alpha == 0.0 and beta == 360.0:
            return arc_to_bezier(rx, ry, 360.0, 0.0, True)
        elif alpha == 0.0:
            return arc_to_bezier(rx, ry, 360.0, beta, True)
        elif beta == 360.0:
            return arc_to_bezier(rx, ry, alpha, 0.0, True)
        return arc_to_bezier(rx, ry, alpha, 0.0, True) + arc_to_bezier(
            rx, ry, 360.0, beta, True
        )

    if abs(beta - alpha) > MAX_SEGMENT_SWEEP:
        middle = (alpha + beta) / 2
        return arc_to_bezier(rx, ry, alpha, middle, clockwise) + arc_to_bezier(
            rx, ry, middle, beta, clockwise
        )

    # math.radians() is used rather than a wrapping conversion: 360 must
    # stay 2*pi here.
    a = math.radians(alpha)
    b = math.radians(beta)
    half = (b - a) / 2
    k = 4.0 / 3 * (1 - math.cos(half)) / math.sin(half)
    sin_a = math.sin(a)
    cos_a = math.cos(a)
    sin_b = math.sin(b)
    cos_b = math.cos(b)
    return [
        (
            (rx * cos_a, ry * sin_a),
            (rx * (cos_a - k * sin_a), ry * (sin_a + k * cos_a)),
            (rx * (cos_b + k * sin_b), ry * (sin_b - k * cos_b)),
            (rx * cos_b, ry * sin_b),
        )
    ]


def arc_curves(
    xc: float,
    yc: float,
    rx: float,
    ry: float,
    alpha: float,
    beta: float,
    clockwise: bool = False,
) -> tuple[Point, list[CurveTo]]:
    """Returns the start point and the curve-to operands of an arc
    centered on (xc, yc)."""
    segments = arc_to_bezier(rx, ry, alpha, beta, clockwise)
    (x0, y0) = segments[0][0]
    start = (xc + x0, yc + y0)
    curves = []
    for _, p1, p2, p3 in segments:
        curves.append(
            (
                (xc + p1[0], yc + p1[1]),
                (xc + p2[0], yc + p2[1]),
                (xc + p3[0], yc + p3[1]),
            )
        )
    return start, curves


def bogen_curves(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    r: float,
    larger: bool = False,
    reverse: bool = False,
) -> list[CurveTo]:
    """Returns the curve-to operands of a circular arc of radius r from
    (x1, y1) to (x2, y2).

    Two circles of radius r pass through both points, which gives four
    candidate arcs. `larger` selects the longer arc of a circle, `reverse`
    selects the circle whose center lies on the other side of the chord.
    A radius below half the chord length is silently grown to it, which
    yields a semicircle.
    """
    if x1 == x2 and y1 == y2:
        raise DegenerateGeometryError(
            "An arc between two points needs distinct points"
        )
    if r <= 0.0:
        raise DegenerateGeometryError(
            f"An arc between two points needs a positive radius: {r}"
        )

    dx = x2 - x1
    dy = y2 - y1
    z = math.hypot(dx, dy)
    alpha_rad = math.asin(max(-1.0, min(1.0, dy / z)))
    if dx < 0:
        alpha_rad = math.pi - alpha_rad

    # direction of the vector P1 to P2
    alpha = math.degrees(alpha_rad)
    # the mirrored arc is drawn clockwise from P2 to P1, then reversed
    if reverse:
        alpha -= 180

    d = 2 * r
    if z > d:
        log.debug("Radius %r too small for chord %r, using %r", r, z, z / 2)
        d = z
        r = d / 2

    beta = math.degrees(2 * math.asin(min(1.0, z / d)))
    if larger:
        beta = 360 - beta

    segments = arc_to_bezier(r, r, 90 + alpha + beta / 2, 90 + alpha - beta / 2, True)
    points = [p for segment in segments for p in segment]
    if reverse:
        points.reverse()

    (p0x, p0y) = points[0]
    ox = x1 - p0x
    oy = y1 - p0y
    curves = []
    for i in range(1, len(points), 4):
        (c1x, c1y) = points[i]
        (c2x, c2y) = points[i + 1]
        (ex, ey) = points[i + 2]
        curves.append(((ox + c1x, oy + c1y), (ox + c2x, oy + c2y), (ox + ex, oy + ey)))
    # pin the end point on P2 exactly
    (c1, c2, _) = curves[-1]
    curves[-1] = (c1, c2, (x2, y2))
    return curves
