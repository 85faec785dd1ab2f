from __future__ import annotations

import math
from typing import Any, Optional, Union

from generator import FDP_FAMILIES, Answer, Family, FDPAnswer, FractionAnswer, Question
from precision import clean_number_str, is_close


def _get(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _fraction_matches(user: Any, expected: FractionAnswer) -> bool:
    num, den = _get(user, "num"), _get(user, "den")
    if not (_is_int(num) and _is_int(den)):
        return False
    return num == expected.num and den == expected.den


def _scalar_present(v: Any) -> bool:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    return not math.isnan(v)


def _to_family(family: Union[Family, str]) -> Optional[Family]:
    try:
        return Family(family)
    except ValueError:
        return None


def check_answer(user_answer: Any, question: Union[Question, Answer], family: Union[Family, str]) -> bool:
    """
    True only when every expected field matches; there is no partial credit.

    FDP families: fraction fields need exact num/den, decimal and percentage
    fields must be present, not NaN and within ANSWER_TOLERANCE.
    Fraction answers: exact num/den. Scalars: exact equality, since
    generators emit values already rounded to their display precision.
    Missing or malformed user input is simply incorrect.
    """
    expected = question.answer if isinstance(question, Question) else question

    if _to_family(family) in FDP_FAMILIES and isinstance(expected, FDPAnswer):
        if user_answer is None:
            return False
        if expected.fraction is not None and not _fraction_matches(
            _get(user_answer, "fraction"), expected.fraction
        ):
            return False
        for key in ("decimal", "percentage"):
            want = getattr(expected, key)
            if want is None:
                continue
            got = _get(user_answer, key)
            if not _scalar_present(got) or not is_close(got, want):
                return False
        return True

    if isinstance(expected, FractionAnswer):
        return _fraction_matches(user_answer, expected)

    if not _scalar_present(user_answer):
        return False
    return user_answer == expected


def _frac_tex(f: FractionAnswer) -> str:
    return f"\\frac{{{f.num}}}{{{f.den}}}"


def format_answer(answer: Answer) -> str:
    """LaTeX text of the canonical answer, shown after a wrong attempt."""
    if isinstance(answer, FDPAnswer):
        parts = []
        if answer.fraction is not None:
            parts.append(_frac_tex(answer.fraction))
        if answer.decimal is not None:
            parts.append(clean_number_str(answer.decimal))
        if answer.percentage is not None:
            parts.append(f"{clean_number_str(answer.percentage)}\\%")
        return ", ".join(parts)
    if isinstance(answer, FractionAnswer):
        return _frac_tex(answer)
    return clean_number_str(answer)
