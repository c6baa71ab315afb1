import math
from typing import Any


def safe_float(o: Any) -> float | None:
    try:
        return float(o)
    except (TypeError, ValueError, OverflowError):
        return None


def clamp(value: Any, default: float, minimum: float, maximum: float) -> float:
    """Coerces a value into [minimum, maximum].

    Values that cannot be read as a number are replaced by `default`. This
    never raises.
    """
    f = safe_float(value)
    if f is None or math.isnan(f):
        f = default
    if f < minimum:
        return minimum
    elif f > maximum:
        return maximum
    return f
