import math

import pytest

from catalog import build_config
from checker import check_answer, format_answer
from generator import Family, FDPAnswer, FractionAnswer, Question, generate
from parsing import parse_answer
from precision import clean_number_str

CONFIG = build_config()


@pytest.mark.parametrize("level", CONFIG.levels, ids=lambda lvl: lvl.key)
def test_canonical_answer_always_checks(level, rng):
    for _ in range(150):
        q = level.generate(rng=rng)
        assert check_answer(q.answer, q, level.family)


@pytest.mark.parametrize(
    "family", [f for f in Family if f not in (Family.BONDS, Family.SINGLE_TABLE, Family.GROUP_TABLES, Family.NEGATIVE_TABLES)]
)
def test_displayed_scalar_text_checks(family, rng):
    # what a learner would type: the formatted canonical value
    for _ in range(150):
        q = generate(family, rng=rng)
        if isinstance(q.answer, (int, float)):
            typed = parse_answer(clean_number_str(q.answer), family)
            assert check_answer(typed, q, family)


def test_scalar_exact():
    q = Question(template="{{INPUT}} = 5", answer=5)
    assert check_answer(5, q, Family.DOUBLING)
    assert check_answer(5.0, q, Family.DOUBLING)
    assert not check_answer(6, q, Family.DOUBLING)
    assert not check_answer(None, q, Family.DOUBLING)
    assert not check_answer(math.nan, q, Family.DOUBLING)
    assert not check_answer("5", q, Family.DOUBLING)


def test_fraction_pair_exact():
    q = Question(template="{{SIMPLIFY_FRACTION_CHALLENGE}}", answer=FractionAnswer(num=3, den=4))
    assert check_answer({"num": 3, "den": 4}, q, Family.SIMPLIFY_FRACTIONS)
    assert check_answer(FractionAnswer(num=3, den=4), q, Family.SIMPLIFY_FRACTIONS)
    # equivalent but not reduced
    assert not check_answer({"num": 6, "den": 8}, q, Family.SIMPLIFY_FRACTIONS)
    assert not check_answer({"num": 3}, q, Family.SIMPLIFY_FRACTIONS)
    assert not check_answer(0.75, q, Family.SIMPLIFY_FRACTIONS)


def test_fdp_all_present_fields_must_pass():
    q = Question(
        template="{{FDP_CONVERSION_CHALLENGE}}",
        answer=FDPAnswer(fraction=FractionAnswer(num=1, den=4), percentage=25),
    )
    fam = Family.FDP_CONVERSIONS
    assert check_answer({"fraction": {"num": 1, "den": 4}, "percentage": 25.0}, q, fam)
    assert check_answer({"fraction": {"num": 1, "den": 4}, "percentage": 25 + 1e-12}, q, fam)
    assert not check_answer({"fraction": {"num": 2, "den": 8}, "percentage": 25}, q, fam)
    assert not check_answer({"fraction": {"num": 1, "den": 4}, "percentage": 25.1}, q, fam)
    assert not check_answer({"fraction": {"num": 1, "den": 4}}, q, fam)
    assert not check_answer({"fraction": {"num": 1, "den": 4}, "percentage": math.nan}, q, fam)
    assert not check_answer(None, q, fam)


def test_fdp_extra_user_fields_ignored():
    q = Question(template="{{FDP_CONVERSION_CHALLENGE}}", answer=FDPAnswer(decimal=0.5, percentage=50))
    assert check_answer({"decimal": 0.5, "percentage": 50, "fraction": {"num": 9, "den": 9}}, q, "fdpConversions")


def test_format_answer():
    assert format_answer(12) == "12"
    assert format_answer(0.05) == "0.05"
    assert format_answer(FractionAnswer(num=3, den=4)) == "\\frac{3}{4}"
    assert (
        format_answer(FDPAnswer(fraction=FractionAnswer(num=1, den=5), decimal=0.2))
        == "\\frac{1}{5}, 0.2"
    )
    assert format_answer(FDPAnswer(decimal=0.25, percentage=25.0)) == "0.25, 25\\%"
