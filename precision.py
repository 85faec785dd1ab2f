from __future__ import annotations

import math
from decimal import Decimal
from typing import Optional, Union

Number = Union[int, float]

# Significant digits used when emitting generated values.
ARITHMETIC_DIGITS = 15  # powers of ten, FDP decimals/percentages
MEASUREMENT_DIGITS = 10  # unit conversions

# Absolute tolerance for scalar fields of multi-field answers.
ANSWER_TOLERANCE = 1e-9


def round_sig(x: Number, digits: int = ARITHMETIC_DIGITS) -> Number:
    """
    Round to `digits` significant digits and re-parse, so the result is the
    float closest to the shortest decimal with that many digits.
    Integers pass through untouched.
    """
    if isinstance(x, int):
        return x
    if not math.isfinite(x) or x == 0:
        return x
    return float(f"{x:.{digits}g}")


def is_close(a: Optional[Number], b: Optional[Number], tol: float = ANSWER_TOLERANCE) -> bool:
    if a is None or b is None:
        return False
    try:
        fa, fb = float(a), float(b)
    except (TypeError, ValueError):
        return False
    if math.isnan(fa) or math.isnan(fb):
        return False
    return abs(fa - fb) <= tol


def clean_number_str(x: Number) -> str:
    """
    Positional text for display: no exponent, no trailing ".0".
    Built from repr() so parsing the text back gives the identical float.
    """
    if isinstance(x, float) and not math.isfinite(x):
        return str(x)
    text = format(Decimal(repr(x)).normalize(), "f")
    if text == "-0":
        return "0"
    return text
