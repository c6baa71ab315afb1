import math

import pytest

from pdfbuilder.geometry import (
    arc_curves,
    arc_to_bezier,
    bogen_curves,
    compose_transform,
    rotate_coeffs,
    scale_coeffs,
    skew_coeffs,
    translate_coeffs,
)
from pdfbuilder.pdfexceptions import DegenerateGeometryError


def approx_pt(p, abs=1e-9):
    return pytest.approx(p, abs=abs)


class TestCoefficients:
    def test_translate(self):
        assert translate_coeffs(3, -4) == (1, 0, 0, 1, 3, -4)

    def test_scale(self):
        assert scale_coeffs(2, 0.5) == (2, 0, 0, 0.5, 0, 0)

    def test_rotate(self):
        assert rotate_coeffs(90) == approx_pt((0, 1, -1, 0, 0, 0))

    def test_rotate_full_turn_is_identity(self):
        assert rotate_coeffs(360) == approx_pt((1, 0, 0, 1, 0, 0))

    def test_skew(self):
        assert skew_coeffs(45, 0) == approx_pt((1, 1, 0, 1, 0, 0))


class TestComposeTransform:
    def test_no_operation_is_identity(self):
        assert compose_transform() == (1, 0, 0, 1, 0, 0)

    def test_translate_point(self):
        assert compose_transform(translate=(10, 20), point=(1, 1)) == (11, 21)

    def test_rotate_point(self):
        assert compose_transform(rotate=90, point=(1, 0)) == approx_pt((0, 1))

    def test_scale_applies_before_translate(self):
        p = compose_transform(translate=(10, 0), scale=(2, 2), point=(1, 1))
        assert p == (12, 2)

    def test_rotate_applies_before_translate(self):
        p = compose_transform(translate=(10, 0), rotate=90, point=(1, 0))
        assert p == approx_pt((10, 1))

    def test_matrix_applies_first(self):
        m = compose_transform(matrix=(2, 0, 0, 2, 0, 0), translate=(5, 5))
        assert m == (2, 0, 0, 2, 5, 5)


class TestArcToBezier:
    def test_small_sweep_is_one_segment(self):
        segments = arc_to_bezier(1, 1, 0, 30)
        assert len(segments) == 1
        (p0, p1, p2, p3) = segments[0]
        k = 4.0 / 3 * (1 - math.cos(math.radians(15))) / math.sin(math.radians(15))
        assert p0 == approx_pt((1, 0))
        assert p1 == approx_pt((1, k))
        assert p3 == approx_pt(
            (math.cos(math.radians(30)), math.sin(math.radians(30)))
        )

    @pytest.mark.parametrize(
        ("alpha", "beta", "count"),
        [
            (0, 30, 1),
            (0, 45, 2),
            (0, 90, 4),
            (0, 360, 16),
            (10, 20, 1),
        ],
    )
    def test_segment_count(self, alpha, beta, count):
        assert len(arc_to_bezier(1, 1, alpha, beta)) == count

    def test_no_segment_exceeds_thirty_degrees(self):
        for p0, _, _, p3 in arc_to_bezier(1, 1, 0, 350):
            a = math.atan2(p0[1], p0[0])
            b = math.atan2(p3[1], p3[0])
            sweep = math.degrees((b - a) % (2 * math.pi))
            assert sweep <= 30 + 1e-9

    def test_segments_are_contiguous(self):
        segments = arc_to_bezier(2, 1, 15, 200)
        for s0, s1 in zip(segments, segments[1:]):
            assert s0[3] == approx_pt(s1[0])

    def test_end_points_lie_on_the_ellipse(self):
        for p0, _, _, p3 in arc_to_bezier(2, 1, 0, 360):
            for x, y in (p0, p3):
                assert (x / 2) ** 2 + y**2 == pytest.approx(1)

    def test_counter_clockwise_wrap_is_split_at_zero(self):
        assert arc_to_bezier(1, 1, 300, 60) == arc_to_bezier(
            1, 1, 300, 360
        ) + arc_to_bezier(1, 1, 0, 60)

    def test_clockwise_wrap_is_split_at_zero(self):
        assert arc_to_bezier(1, 1, 60, 300, True) == arc_to_bezier(
            1, 1, 60, 0, True
        ) + arc_to_bezier(1, 1, 360, 300, True)

    def test_negative_angles_are_normalized(self):
        assert arc_to_bezier(1, 1, -90, 0) == arc_to_bezier(1, 1, 270, 360)

    def test_clockwise_full_circle(self):
        segments = arc_to_bezier(1, 1, 0, 360, True)
        assert len(segments) == 16
        assert segments[0][0] == approx_pt((1, 0))
        # the first segment goes down from (1, 0)
        assert segments[0][3][1] < 0

    @pytest.mark.parametrize(
        ("rx", "ry", "alpha", "beta"),
        [
            (0, 1, 0, 90),
            (1, -1, 0, 90),
            (1, 1, 45, 45),
        ],
    )
    def test_degenerate_arcs(self, rx, ry, alpha, beta):
        with pytest.raises(DegenerateGeometryError):
            arc_to_bezier(rx, ry, alpha, beta)

    def test_degenerate_arc_is_a_value_error(self):
        with pytest.raises(ValueError):
            arc_to_bezier(1, 1, 0, 0)


def test_arc_curves_are_moved_to_the_center():
    (start, curves) = arc_curves(10, 20, 5, 5, 0, 90)
    assert start == approx_pt((15, 20))
    assert len(curves) == 4
    assert curves[-1][2] == approx_pt((10, 25))


class TestBogen:
    def test_semicircle_when_radius_too_small(self):
        curves = bogen_curves(0, 0, 10, 0, 3)
        assert len(curves) == 8
        assert curves[-1][2] == (10, 0)
        # drawn over the top of the circle centered on (5, 0)
        assert curves[3][2] == approx_pt((5, 5))

    def test_reverse_uses_the_other_circle(self):
        curves = bogen_curves(0, 0, 10, 0, 3, reverse=True)
        assert len(curves) == 8
        assert curves[-1][2] == (10, 0)
        assert curves[3][2] == approx_pt((5, -5))

    def test_smaller_arc(self):
        curves = bogen_curves(0, 0, 10, 0, 10)
        ends = [end for _, _, end in curves]
        top = 10 - 10 * math.cos(math.radians(30))
        assert max(y for _, y in ends) == pytest.approx(top)
        assert all(y >= -1e-9 for _, y in ends)
        assert ends[-1] == (10, 0)

    def test_larger_arc(self):
        curves = bogen_curves(0, 0, 10, 0, 10, larger=True)
        ends = [end for _, _, end in curves]
        # the other circle, centered above the chord
        assert max(y for _, y in ends) == pytest.approx(18.660254)
        assert ends[-1] == (10, 0)

    def test_end_point_is_exact(self):
        curves = bogen_curves(1.3, 2.7, 8.1, -3.3, 7)
        assert curves[-1][2] == (8.1, -3.3)

    def test_same_points(self):
        with pytest.raises(DegenerateGeometryError):
            bogen_curves(1, 1, 1, 1, 5)

    @pytest.mark.parametrize("r", [0, -1])
    def test_non_positive_radius(self, r):
        with pytest.raises(DegenerateGeometryError):
            bogen_curves(0, 0, 10, 0, r)
