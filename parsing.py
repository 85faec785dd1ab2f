"""
Turn raw answers posted by a client into the structures the checker expects.

Anything unreadable becomes None (or NaN for a scalar), which the checker
marks as incorrect; a bad answer is ordinary traffic, not an error.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Optional, Union

from sympy import Pow, nan, oo, preorder_traversal, zoo
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

from generator import FDP_FAMILIES, Family

# --- Validation ----------------------------------------------------------------
LEN_LIMIT = 100
_ALLOWED_RE = re.compile(r"^[0-9+\-*/^().\s]{1,100}$")
_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")

TRANSFORMS = standard_transformations + (
    convert_xor,
    implicit_multiplication_application,
)

# Hard stops applied to the unevaluated tree, before any arithmetic runs
_MAX_OPS = 20
_MAX_INT_DIGITS = 30
_MAX_EXPONENT_ABS = 12

_NON_FINITE_MSG = "Expression is not finite."
_TOO_COMPLEX_MSG = "Expression is too complex."


def validate_answer_text(s: Any) -> Optional[str]:
    """Error message for unusable text, else None."""
    if s is None or not isinstance(s, str) or not s.strip():
        return "Answer required."
    if len(s) > LEN_LIMIT:
        return "Answer too long (> 100)."
    if _ALLOWED_RE.fullmatch(s) is None:
        return "Only digits, spaces, + - * / ^ . and parentheses are allowed."
    return None


def _assert_expr_complexity(sym: Any) -> None:
    """
    Exponents must be small literals and powers may not be stacked, so
    "9^9^9" or "((9^12)^12)^12" is rejected without being computed.
    """
    if sym.count_ops() > _MAX_OPS:
        raise ValueError(_TOO_COMPLEX_MSG)
    for node in preorder_traversal(sym):
        if node.is_Integer and len(str(abs(int(node)))) > _MAX_INT_DIGITS:
            raise ValueError(_TOO_COMPLEX_MSG)
        if isinstance(node, Pow):
            exp = node.exp
            if not exp.is_Number or abs(exp) > _MAX_EXPONENT_ABS:
                raise ValueError(_TOO_COMPLEX_MSG)
            # x^-1 is how division parses; only real powers may not nest
            if exp != -1 and node.base.has(Pow):
                raise ValueError(_TOO_COMPLEX_MSG)


def _eval_numeric(expr: str) -> float:
    sym = parse_expr(expr, transformations=TRANSFORMS, evaluate=False)
    _assert_expr_complexity(sym)
    sym = sym.doit()
    if sym in (oo, -oo, zoo, nan) or getattr(sym, "is_finite", None) is False:
        raise ValueError(_NON_FINITE_MSG)
    val = float(sym.evalf())
    if not math.isfinite(val):
        raise ValueError(_NON_FINITE_MSG)
    return val


# --- Field parsers -------------------------------------------------------------


def parse_scalar(raw: Any) -> float:
    """
    Numbers pass through; text may be a plain number or a short expression
    like "3/4". A trailing "%" is ignored. Unreadable input gives NaN.
    """
    if isinstance(raw, bool):
        return math.nan
    if isinstance(raw, (int, float)):
        return raw
    if not isinstance(raw, str):
        return math.nan
    text = raw.strip()
    if text.endswith("%"):
        text = text[:-1]
    if validate_answer_text(text):
        return math.nan
    # fast path: plain number without going through sympy
    try:
        val = float(text)
    except ValueError:
        try:
            val = _eval_numeric(text)
        except Exception:
            return math.nan
    if math.isfinite(val) and val.is_integer() and _INT_RE.match(text):
        return int(text)
    return val


def parse_integer(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str) and _INT_RE.match(raw):
        return int(raw)
    return None


def parse_fraction(raw: Any) -> Optional[Dict[str, Optional[int]]]:
    if not isinstance(raw, dict):
        return None
    return {"num": parse_integer(raw.get("num")), "den": parse_integer(raw.get("den"))}


def parse_fdp(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None
    out: Dict[str, Any] = {}
    if "fraction" in raw:
        out["fraction"] = parse_fraction(raw.get("fraction"))
    for key in ("decimal", "percentage"):
        if key in raw:
            out[key] = parse_scalar(raw.get(key))
    return out


def parse_answer(raw: Any, family: Union[Family, str], fraction_answer: bool = False) -> Any:
    """Shape the raw payload by family: FDP record, fraction pair or scalar."""
    try:
        fam = Family(family)
    except ValueError:
        fam = None
    if fam in FDP_FAMILIES:
        return parse_fdp(raw)
    if fraction_answer:
        return parse_fraction(raw)
    return parse_scalar(raw)
