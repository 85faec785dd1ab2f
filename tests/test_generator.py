import re

import pytest
from sympy import simplify
from sympy.parsing.sympy_parser import parse_expr, rationalize, standard_transformations

from generator import (
    BANNED_TIME_PAIRS,
    COMMON_CONVERSIONS,
    EQUIV_FRACTION_LAYOUT,
    FDP_LAYOUT,
    INPUT_PLACEHOLDER,
    LCM_CEILING,
    PERCENTAGE_QUANTITIES,
    SIMPLIFY_FRACTION_LAYOUT,
    UNITS,
    EquivFractionParts,
    Family,
    FDPAnswer,
    FDPParts,
    FractionAnswer,
    UnitConversionParts,
    UnknownFamily,
    generate,
    generate_bonds,
    generate_doubling,
    generate_equivalent_fractions,
    generate_fdp_conversions,
    generate_fdp_conversions_multiples,
    generate_fraction_of_quantity,
    generate_group_facts,
    generate_hcf,
    generate_lcm,
    generate_negative_table_facts,
    generate_percentage_of_quantity,
    generate_perfect_squares,
    generate_powers_of_10,
    generate_simplify_fractions,
    generate_unit_conversions,
    thirds_conversion,
)
from numtheory import gcd
from precision import clean_number_str

N = 400
EXACT = standard_transformations + (rationalize,)


def _substitute(q):
    return q.template.replace(INPUT_PLACEHOLDER, f"({clean_number_str(q.answer)})")


def _equation_holds(q) -> bool:
    """Fill the blank with the answer and compare both sides exactly."""
    text = _substitute(q)
    text = (
        text.replace("\\times", "*")
        .replace("\\div", "/")
        .replace("^", "**")
        .replace("\\sqrt{", "sqrt(")
        .replace("}", ")")
    )
    lhs, rhs = text.split("=")
    return simplify(parse_expr(lhs, transformations=EXACT) - parse_expr(rhs, transformations=EXACT)) == 0


def _ints(q):
    return [int(x) for x in re.findall(r"-?\d+", _substitute(q))]


# ---------- Number bonds ----------


def test_bonds_to_10(rng):
    for _ in range(1000):
        q = generate_bonds(10, rng=rng)
        assert q.template.count(INPUT_PLACEHOLDER) == 1
        assert _equation_holds(q)
        assert all(0 <= n <= 10 for n in _ints(q))


def test_bonds_negative_total(rng):
    for _ in range(N):
        q = generate_bonds(-20, rng=rng)
        assert _equation_holds(q)
        assert "-20" in q.template


def test_bonds_mixed_range(rng):
    totals = set()
    for _ in range(N):
        q = generate_bonds(custom_range=[10, 20], rng=rng)
        assert _equation_holds(q)
        nums = _ints(q)
        totals.add(max(nums))
        assert all(0 <= n <= 20 for n in nums)
    assert totals <= set(range(10, 21))
    assert len(totals) > 5


def test_bonds_uses_all_layouts(rng):
    shapes = set()
    for _ in range(N):
        q = generate_bonds(10, rng=rng)
        shapes.add(re.sub(r"-?\d+", "n", q.template))
    assert len(shapes) == 6


# ---------- Tables ----------


def test_group_facts(rng):
    for _ in range(N):
        q = generate_group_facts([3, 6, 9], rng=rng)
        assert _equation_holds(q)
        assert isinstance(q.answer, int)


def test_negative_facts_sign_consistent(rng):
    for _ in range(N):
        q = generate_negative_table_facts([2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12], rng=rng)
        assert _equation_holds(q)
        # one operand and the product are negative
        assert sum(1 for n in _ints(q) if n < 0) == 2


def test_doubling_and_squares(rng):
    for _ in range(N):
        q = generate_doubling(100, rng=rng)
        assert _equation_holds(q)
        assert 2 <= q.answer <= 200 and q.answer % 2 == 0

        s = generate_perfect_squares(rng=rng)
        assert _equation_holds(s)


def test_powers_of_10_exact(rng):
    for _ in range(N):
        q = generate_powers_of_10(rng=rng)
        assert _equation_holds(q)
        # displayed answer text reads back as the identical value
        assert float(clean_number_str(q.answer)) == q.answer


# ---------- Unit conversions ----------


def test_unit_conversions(rng):
    seen = set()
    for _ in range(N):
        q = generate_unit_conversions(rng=rng)
        p = q.parts
        assert isinstance(p, UnitConversionParts)
        seen.add(p.category)
        units = dict(UNITS[p.category])
        names = [u for u, _ in UNITS[p.category]]
        assert 1 <= abs(names.index(p.given_unit) - names.index(p.answer_unit)) <= 2
        if p.category == "time":
            assert frozenset({p.given_unit, p.answer_unit}) not in BANNED_TIME_PAIRS
        for v in (p.given_value, q.answer):
            assert 0.0001 <= v <= 100000
        expected = p.given_value * units[p.given_unit] / units[p.answer_unit]
        assert q.answer == pytest.approx(expected, rel=1e-9)
        assert float(clean_number_str(q.answer)) == q.answer
        assert q.template.startswith(clean_number_str(p.given_value) + " ")
    assert seen == set(UNITS)


def test_unit_conversions_time_values_are_clean(rng):
    for _ in range(N):
        q = generate_unit_conversions(rng=rng)
        if q.parts.category != "time":
            continue
        # no repeating decimals: at most two decimal places
        for v in (q.parts.given_value, q.answer):
            text = clean_number_str(v)
            assert len(text.partition(".")[2]) <= 3


# ---------- HCF / LCM ----------


def test_hcf(rng):
    for _ in range(N):
        q = generate_hcf(rng=rng)
        a, b = [int(x) for x in re.findall(r"\((\d+), (\d+)\)", q.template)[0]]
        assert gcd(a, b) == q.answer
        assert a != b


def test_lcm(rng):
    for _ in range(N):
        q = generate_lcm(rng=rng)
        a, b = [int(x) for x in re.findall(r"\((\d+), (\d+)\)", q.template)[0]]
        assert a != b
        assert q.answer == a * b // gcd(a, b)
        assert q.answer <= LCM_CEILING


# ---------- Fractions ----------


def test_equivalent_fractions(rng):
    for _ in range(N):
        q = generate_equivalent_fractions(rng=rng)
        p = q.parts
        assert q.template == EQUIV_FRACTION_LAYOUT
        assert isinstance(p, EquivFractionParts)
        assert (p.equiv_num is None) != (p.equiv_den is None)
        num = p.equiv_num if p.equiv_num is not None else q.answer
        den = p.equiv_den if p.equiv_den is not None else q.answer
        assert num * p.base_den == den * p.base_num
        assert p.base_num < p.base_den and gcd(p.base_num, p.base_den) == 1
        assert 2 <= den // p.base_den <= 9


def test_simplify_fractions(rng):
    angle = 0
    for _ in range(N):
        q = generate_simplify_fractions(rng=rng)
        p = q.parts
        assert q.template == SIMPLIFY_FRACTION_LAYOUT
        assert isinstance(q.answer, FractionAnswer)
        assert gcd(q.answer.num, q.answer.den) == 1
        assert p.complex_num * q.answer.den == p.complex_den * q.answer.num
        if p.complex_den == 360:
            angle += 1
            assert p.complex_num % 30 == 0 or p.complex_num % 45 == 0
    assert 0 < angle < N


def test_fraction_of_quantity(rng):
    for _ in range(N):
        q = generate_fraction_of_quantity(rng=rng)
        n, d, quantity = [int(x) for x in re.findall(r"\d+", q.template)]
        assert gcd(n, d) == 1 and d > 1 and n <= 11
        assert quantity % d == 0
        assert q.answer == quantity // d * n


def test_percentage_of_quantity(rng):
    for _ in range(N):
        q = generate_percentage_of_quantity(rng=rng)
        pct, quantity = [int(x) for x in re.findall(r"\d+", q.template)]
        assert quantity in PERCENTAGE_QUANTITIES[pct]
        assert pct * quantity % 100 == 0
        assert q.answer == pct * quantity // 100


# ---------- FDP ----------


def test_fdp_conversions_answer_has_the_other_fields(rng):
    for _ in range(N):
        q = generate_fdp_conversions(rng=rng)
        p, a = q.parts, q.answer
        assert q.template == FDP_LAYOUT
        assert isinstance(p, FDPParts) and isinstance(a, FDPAnswer)
        if p.given_type == "recurring":
            continue
        given = {k for k in ("fraction", "decimal", "percentage") if getattr(p, k) is not None}
        blanks = {k for k in ("fraction", "decimal", "percentage") if getattr(a, k) is not None}
        assert given == {p.given_type}
        assert blanks == {"fraction", "decimal", "percentage"} - given


def test_fdp_recurring_third(rng):
    seen = set()
    for _ in range(N):
        q = generate_fdp_conversions(rng=rng)
        if q.parts.given_type != "recurring":
            continue
        seen.add(q.parts.given_value_type)
        assert q.answer.fraction == FractionAnswer(num=1, den=3)
        assert q.answer.decimal is None and q.answer.percentage is None
    assert seen == {"decimal", "percentage"}


def test_fdp_multiples_values_agree(rng):
    for _ in range(N):
        q = generate_fdp_conversions_multiples(rng=rng)
        p, a = q.parts, q.answer
        if p.given_type == "recurring":
            assert a.fraction.den == 3 and a.fraction.num % 3 != 0
            continue
        frac = a.fraction or p.fraction
        dec = a.decimal if a.decimal is not None else p.decimal
        pct = a.percentage if a.percentage is not None else p.percentage
        assert frac.den in (4, 5, 8, 10, 20)
        assert gcd(frac.num, frac.den) == 1
        assert dec == pytest.approx(frac.num / frac.den, abs=1e-12)
        assert pct == pytest.approx(dec * 100, abs=1e-9)


def test_thirds_notation():
    c = thirds_conversion(1)
    assert c.decimal_str == "0.\\overline{3}"
    assert c.percentage_str == "33 \\frac{1}{3}\\%"
    c = thirds_conversion(5)
    assert c.decimal_str == "1.\\overline{6}"
    assert c.percentage_str == "166 \\frac{2}{3}\\%"


# ---------- Dispatch ----------


def test_generate_dispatches_by_string_and_enum(rng):
    q = generate("bonds", {"value": 20}, rng=rng)
    assert _equation_holds(q)
    q = generate(Family.HCF, rng=rng)
    assert "HCF" in q.template


def test_generate_unknown_family():
    with pytest.raises(UnknownFamily):
        generate("longDivision")


def test_questions_are_immutable(rng):
    q = generate_doubling(10, rng=rng)
    with pytest.raises(Exception):
        q.answer = 3


def test_common_third_matches_thirds_notation():
    (third,) = [c for c in COMMON_CONVERSIONS if c.recurring]
    derived = thirds_conversion(1)
    assert (third.num, third.den) == (derived.num, derived.den)
    assert third.decimal_str == derived.decimal_str == "0.\\overline{3}"
    assert third.percentage_str == derived.percentage_str
