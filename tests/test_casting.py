from typing import Any, Optional

import pytest

from pdfbuilder.casting import clamp, safe_float


@pytest.mark.parametrize(
    ("arg", "expected"),
    [
        (0, 0.0),
        (1, 1.0),
        ("0", 0.0),
        ("1.5", 1.5),
        (None, None),
        (object(), None),
        (2**1024, None),  # Integer too large to convert to float
    ],
)
def test_safe_float(arg: Any, expected: Optional[float]) -> None:
    assert safe_float(arg) == expected


@pytest.mark.parametrize(
    ("value", "default", "minimum", "maximum", "expected"),
    [
        (0.5, 0, 0, 1, 0.5),
        (1.5, 0, 0, 1, 1),
        (-0.2, 0, 0, 1, 0),
        ("0.25", 0, 0, 1, 0.25),
        ("abc", 0, 0, 1, 0),
        ("abc", 0.5, 0, 1, 0.5),
        (None, 0.5, 0, 1, 0.5),
        (float("nan"), 0.3, 0, 1, 0.3),
        (150, 0, -100, 100, 100),
        # a default outside the range is clamped as well
        ("x", 5, 0, 1, 1),
    ],
)
def test_clamp(value, default, minimum, maximum, expected) -> None:
    assert clamp(value, default, minimum, maximum) == expected
