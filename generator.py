# services/drills/generator.py
"""
Procedural question generation.

One function per question family. Every generator draws candidates from
`rng` (anything exposing the `random` module API), re-draws while a
disallowed condition holds, and returns a frozen `Question` whose `answer`
is the exact machine-checkable value.

Each rejection loop samples from a small finite space in which accepted
candidates make up a fixed, non-trivial share, so the expected number of
retries is a small constant.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict

from numtheory import gcd, lcm, reduce_fraction
from precision import ARITHMETIC_DIGITS, MEASUREMENT_DIGITS, clean_number_str, round_sig

INPUT_PLACEHOLDER = "{{INPUT}}"
EQUIV_FRACTION_LAYOUT = "{{EQUIV_FRACTION_CHALLENGE}}"
SIMPLIFY_FRACTION_LAYOUT = "{{SIMPLIFY_FRACTION_CHALLENGE}}"
FDP_LAYOUT = "{{FDP_CONVERSION_CHALLENGE}}"

STRUCTURED_LAYOUTS = (EQUIV_FRACTION_LAYOUT, SIMPLIFY_FRACTION_LAYOUT, FDP_LAYOUT)


class Family(str, Enum):
    BONDS = "bonds"
    SINGLE_TABLE = "singleTable"
    GROUP_TABLES = "groupTables"
    NEGATIVE_TABLES = "negativeTables"
    DOUBLING = "doubling"
    SQUARES = "squares"
    POWERS_OF_10 = "powersOf10"
    UNIT_CONVERSIONS = "unitConversions"
    HCF = "hcf"
    LCM = "lcm"
    EQUIV_FRACTIONS = "equivFractions"
    SIMPLIFY_FRACTIONS = "simplifyFractions"
    FRACTION_OF_QUANTITY = "fractionOfQuantity"
    PERCENTAGE_OF_QUANTITY = "percentageOfQuantity"
    FDP_CONVERSIONS = "fdpConversions"
    FDP_CONVERSIONS_MULTIPLES = "fdpConversionsMultiples"


FDP_FAMILIES = frozenset({Family.FDP_CONVERSIONS, Family.FDP_CONVERSIONS_MULTIPLES})


class UnknownFamily(LookupError):
    def __init__(self, family: Any):
        super().__init__(f"unknown question family: {family!r}")
        self.family = family


# ---------- Answer and question models ----------


class FractionAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)
    num: int
    den: int


class FDPAnswer(BaseModel):
    """Only the fields that were NOT shown in the question are set."""

    model_config = ConfigDict(frozen=True)
    fraction: Optional[FractionAnswer] = None
    decimal: Optional[float] = None
    percentage: Optional[float] = None


class EquivFractionParts(BaseModel):
    model_config = ConfigDict(frozen=True)
    base_num: int
    base_den: int
    # exactly one of these is None (the blank)
    equiv_num: Optional[int] = None
    equiv_den: Optional[int] = None


class SimplifyFractionParts(BaseModel):
    model_config = ConfigDict(frozen=True)
    complex_num: int
    complex_den: int


class FDPParts(BaseModel):
    model_config = ConfigDict(frozen=True)
    given_type: Literal["fraction", "decimal", "percentage", "recurring"]
    fraction: Optional[FractionAnswer] = None
    decimal: Optional[float] = None
    percentage: Optional[float] = None
    # recurring entries only: LaTeX text of the shown value
    given_value: Optional[str] = None
    given_value_type: Optional[Literal["decimal", "percentage"]] = None
    values: Optional[Dict[str, str]] = None


class UnitConversionParts(BaseModel):
    model_config = ConfigDict(frozen=True)
    category: str
    given_value: float
    given_unit: str
    answer_unit: str


Answer = Union[int, float, FractionAnswer, FDPAnswer]
Parts = Union[EquivFractionParts, SimplifyFractionParts, FDPParts, UnitConversionParts]


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)
    template: str
    answer: Answer
    parts: Optional[Parts] = None

    @property
    def is_structured(self) -> bool:
        return self.template in STRUCTURED_LAYOUTS


def _fill(template: str) -> str:
    return template.replace("{}", INPUT_PLACEHOLDER)


def _n(x: Any) -> str:
    return clean_number_str(x)


# ---------- Number bonds ----------


def generate_bonds(
    value: Optional[int] = None,
    custom_range: Optional[Sequence[int]] = None,
    rng: Any = random,
) -> Question:
    if custom_range:
        lo, hi = custom_range
        total = rng.randint(lo, hi)
    else:
        total = value
    num1 = rng.randint(0, abs(total))
    num2 = total - num1

    layout = rng.randrange(6)
    match layout:
        case 0:
            return Question(template=_fill(f"{num1} + {{}} = {total}"), answer=num2)
        case 1:
            return Question(template=_fill(f"{{}} + {num2} = {total}"), answer=num1)
        case 2:
            return Question(template=_fill(f"{total} = {num1} + {{}}"), answer=num2)
        case 3:
            return Question(template=_fill(f"{total} - {{}} = {num2}"), answer=num1)
        case 4:
            return Question(template=_fill(f"{total} - {num1} = {{}}"), answer=num2)
        case _:
            return Question(template=_fill(f"{{}} = {total} - {num1}"), answer=num2)


# ---------- Times tables ----------


def _table_fact(table: int, factor: int, rng: Any) -> Question:
    product = table * factor
    layout = rng.randrange(4)
    if layout == 0:
        return Question(template=_fill(f"{table} \\times {{}} = {product}"), answer=factor)
    if layout == 1:
        return Question(template=_fill(f"{{}} \\times {factor} = {product}"), answer=table)
    if layout == 2:
        return Question(template=_fill(f"{product} \\div {table} = {{}}"), answer=factor)
    return Question(template=_fill(f"{product} \\div {{}} = {factor}"), answer=table)


def generate_single_table_facts(table: int, rng: Any = random) -> Question:
    factor = rng.randint(1, 12)
    return _table_fact(table, factor, rng)


def generate_group_facts(tables: Sequence[int], rng: Any = random) -> Question:
    return generate_single_table_facts(rng.choice(list(tables)), rng=rng)


def generate_negative_table_facts(tables: Sequence[int], rng: Any = random) -> Question:
    table = rng.choice(list(tables))
    factor = rng.randint(1, 12)
    # exactly one operand negative, so the product is negative too
    if rng.random() < 0.5:
        table = -table
    else:
        factor = -factor
    return _table_fact(table, factor, rng)


# ---------- Doubling, squares, powers of ten ----------


def generate_doubling(max_number: int = 100, rng: Any = random) -> Question:
    number = rng.randint(1, max_number)
    return Question(template=_fill(f"{number} \\times 2 = {{}}"), answer=number * 2)


def generate_perfect_squares(rng: Any = random) -> Question:
    base = rng.randint(1, 20)
    square = base * base
    if rng.random() < 0.5:
        return Question(template=_fill(f"{base}^2 = {{}}"), answer=square)
    return Question(template=_fill(f"\\sqrt{{{square}}} = {{}}"), answer=base)


def generate_powers_of_10(rng: Any = random) -> Question:
    power = rng.choice([10, 100, 1000])
    scale = rng.choice([1, 10, 100, 1000, 10000])
    num = round_sig(rng.randint(1, 999) / scale, ARITHMETIC_DIGITS)
    if rng.random() < 0.5:
        answer = round_sig(num * power, ARITHMETIC_DIGITS)
        op = "\\times"
    else:
        answer = round_sig(num / power, ARITHMETIC_DIGITS)
        op = "\\div"
    if float(answer).is_integer():
        answer = int(answer)
    return Question(template=_fill(f"{_n(num)} {op} {power} = {{}}"), answer=answer)


# ---------- Unit conversions ----------

UNITS: Dict[str, List[Tuple[str, float]]] = {
    "length": [("mm", 0.001), ("cm", 0.01), ("m", 1), ("km", 1000)],
    "mass": [("mg", 0.001), ("g", 1), ("kg", 1000), ("t", 1000000)],
    "capacity": [("mL", 0.001), ("L", 1), ("kL", 1000), ("ML", 1000000)],
    "area": [
        ("mm²", 0.000001),
        ("cm²", 0.0001),
        ("m²", 1),
        ("ha", 10000),
        ("km²", 1000000),
    ],
    "time": [("ms", 0.001), ("s", 1), ("min", 60), ("hr", 3600)],
}

# Ratios that only produce repeating decimals.
BANNED_TIME_PAIRS = frozenset(
    {
        frozenset({"s", "hr"}),
        frozenset({"ms", "hr"}),
        frozenset({"ms", "min"}),
    }
)

_EASY_TIME_MULTIPLES = [1, 2, 3, 4, 5, 10, 12, 15, 30, 45]
_EASY_TIME_INPUTS = [0.25, 0.5, 0.75, 1, 1.25, 1.5, 1.75, 2, 2.5, 3, 4, 5, 10]

MIN_MAGNITUDE = 0.0001
MAX_MAGNITUDE = 100000


def _in_window(x: float) -> bool:
    return MIN_MAGNITUDE <= x <= MAX_MAGNITUDE


def _pick_unit_pair(units: Sequence[Tuple[str, float]], rng: Any) -> Tuple[int, int]:
    index1 = rng.randrange(len(units))
    while True:
        # at least one of the four offsets is always in range
        offset = rng.randint(1, 2) * (-1 if rng.random() < 0.5 else 1)
        index2 = index1 + offset
        if 0 <= index2 < len(units):
            return index1, index2


def generate_unit_conversions(rng: Any = random) -> Question:
    categories = list(UNITS)
    while True:
        category = rng.choice(categories)
        units = UNITS[category]
        i1, i2 = _pick_unit_pair(units, rng)
        (name1, mult1), (name2, mult2) = units[i1], units[i2]

        if category == "time" and frozenset({name1, name2}) in BANNED_TIME_PAIRS:
            continue

        factor = mult1 / mult2
        if category == "time":
            if factor < 1:
                # converting to a larger unit: start from a clean multiple of it
                num1 = round(1 / factor) * rng.choice(_EASY_TIME_MULTIPLES)
            else:
                num1 = rng.choice(_EASY_TIME_INPUTS)
        else:
            sig_figs = rng.randint(1, 4)
            raw = (1 + rng.random() * 9) * 10 ** rng.randint(-3, 3)
            num1 = round_sig(float(raw), sig_figs)

        num1 = round_sig(float(num1), MEASUREMENT_DIGITS)
        num2 = round_sig(num1 * factor, MEASUREMENT_DIGITS)
        if _in_window(num1) and _in_window(num2):
            break

    if rng.random() < 0.5:
        given, given_unit, answer, answer_unit = num1, name1, num2, name2
    else:
        given, given_unit, answer, answer_unit = num2, name2, num1, name1

    return Question(
        template=_fill(f"{_n(given)} \\text{{ {given_unit}}} = {{}} \\text{{ {answer_unit}}}"),
        answer=answer,
        parts=UnitConversionParts(
            category=category,
            given_value=given,
            given_unit=given_unit,
            answer_unit=answer_unit,
        ),
    )


# ---------- HCF / LCM ----------

_HCF_VALUES = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 20, 25, 30]
_LCM_VALUES = [2, 3, 4, 5, 6, 7, 8, 9, 10, 12, 15, 16, 20]
LCM_CEILING = 120


def generate_hcf(rng: Any = random) -> Question:
    hcf = rng.choice(_HCF_VALUES)
    while True:
        m1 = rng.randint(2, 11)
        m2 = rng.randint(2, 11)
        if m1 != m2 and gcd(m1, m2) == 1:
            break
    num1, num2 = hcf * m1, hcf * m2
    if rng.random() < 0.5:
        num1, num2 = num2, num1
    return Question(template=_fill(f"\\text{{HCF}}({num1}, {num2}) = {{}}"), answer=hcf)


def generate_lcm(rng: Any = random) -> Question:
    while True:
        num1, num2 = rng.sample(_LCM_VALUES, 2)
        result = lcm(num1, num2)
        if result <= LCM_CEILING:
            break
    return Question(template=_fill(f"\\text{{LCM}}({num1}, {num2}) = {{}}"), answer=result)


# ---------- Fractions ----------


def generate_equivalent_fractions(rng: Any = random) -> Question:
    while True:
        base_num = rng.randint(1, 11)
        base_den = rng.randint(2, 12)
        if base_num < base_den and gcd(base_num, base_den) == 1:
            break
    multiplier = rng.randint(2, 9)
    equiv_num, equiv_den = base_num * multiplier, base_den * multiplier

    if rng.random() < 0.5:
        parts = EquivFractionParts(base_num=base_num, base_den=base_den, equiv_den=equiv_den)
        answer = equiv_num
    else:
        parts = EquivFractionParts(base_num=base_num, base_den=base_den, equiv_num=equiv_num)
        answer = equiv_den
    return Question(template=EQUIV_FRACTION_LAYOUT, answer=answer, parts=parts)


_ANGLE_NUMERATORS = sorted(set(range(30, 361, 30)) | set(range(45, 361, 45)))
ANGLE_MODE_SHARE = 0.25


def generate_simplify_fractions(rng: Any = random) -> Question:
    if rng.random() < ANGLE_MODE_SHARE:
        complex_num, complex_den = rng.choice(_ANGLE_NUMERATORS), 360
        num, den = reduce_fraction(complex_num, complex_den)
    else:
        while True:
            num = rng.randint(2, 11)
            den = rng.randint(2, 11)
            if num != den and gcd(num, den) == 1:
                break
        multiplier = rng.randint(2, 6)
        complex_num, complex_den = num * multiplier, den * multiplier

    return Question(
        template=SIMPLIFY_FRACTION_LAYOUT,
        answer=FractionAnswer(num=num, den=den),
        parts=SimplifyFractionParts(complex_num=complex_num, complex_den=complex_den),
    )


_EASY_DENOMINATORS = [2, 3, 4, 5, 6, 8, 10, 12, 20, 25]
FRACTION_NUMERATOR_CAP = 11


def generate_fraction_of_quantity(rng: Any = random) -> Question:
    while True:
        d0 = rng.choice(_EASY_DENOMINATORS)
        n0 = rng.randint(1, d0 + d0 // 2 + 3)
        if n0 == d0:
            # avoid 5/5 style wholes
            n0 += 1
        n, d = reduce_fraction(n0, d0)
        if d != 1 and n <= FRACTION_NUMERATOR_CAP:
            break

    multiplier = rng.randint(2, 10)
    quantity = d * multiplier
    return Question(
        template=_fill(f"\\frac{{{n}}}{{{d}}} \\text{{ of }} {quantity} = {{}}"),
        answer=multiplier * n,
    )


# Each quantity gives a whole-number result for its percentage.
PERCENTAGE_QUANTITIES: Dict[int, List[int]] = {
    1: [100, 200, 300, 400, 500, 1000, 2500],
    5: [20, 40, 60, 80, 100, 200, 400, 600, 1000],
    10: [10, 20, 30, 50, 80, 100, 150, 200, 500, 1000],
    20: [5, 10, 15, 20, 25, 50, 100, 150, 200, 300],
    25: [4, 8, 12, 16, 20, 40, 60, 80, 100, 200, 400],
    50: [2, 4, 10, 12, 20, 30, 50, 80, 100, 150, 200],
    15: [20, 40, 60, 80, 100, 120, 200, 400],
    30: [10, 20, 30, 40, 50, 100, 120, 200, 300, 500],
    40: [5, 10, 15, 20, 25, 50, 100, 150, 200, 500],
    60: [5, 10, 15, 20, 25, 50, 100, 150, 200, 300],
    75: [4, 8, 12, 16, 20, 40, 60, 80, 100, 200, 400],
    90: [10, 20, 30, 50, 90, 100, 110, 200, 500, 1000],
    110: [10, 20, 50, 80, 100, 120, 200, 300, 500],
    125: [4, 8, 16, 20, 40, 80, 100, 200, 400],
    150: [2, 4, 6, 8, 10, 20, 50, 100, 120, 200],
    200: [1, 2, 5, 10, 15, 25, 50, 100, 120, 200],
    250: [2, 4, 10, 20, 40, 50, 100, 200, 400],
    300: [1, 2, 3, 5, 10, 25, 50, 100, 150, 200],
}


def generate_percentage_of_quantity(rng: Any = random) -> Question:
    percentage = rng.choice(list(PERCENTAGE_QUANTITIES))
    quantity = rng.choice(PERCENTAGE_QUANTITIES[percentage])
    # exact in integers for every table entry
    answer = (percentage * quantity + 50) // 100
    return Question(
        template=_fill(f"{percentage}\\% \\text{{ of }} {quantity} = {{}}"),
        answer=answer,
    )


# ---------- Fraction / decimal / percentage ----------


class Conversion(BaseModel):
    model_config = ConfigDict(frozen=True)
    num: int
    den: int
    decimal: Optional[float] = None
    percentage: Optional[float] = None
    recurring: bool = False
    decimal_str: Optional[str] = None
    percentage_str: Optional[str] = None


COMMON_CONVERSIONS: List[Conversion] = [
    Conversion(num=1, den=100, decimal=0.01, percentage=1),
    Conversion(num=1, den=50, decimal=0.02, percentage=2),
    Conversion(num=1, den=20, decimal=0.05, percentage=5),
    Conversion(num=1, den=10, decimal=0.1, percentage=10),
    Conversion(num=1, den=5, decimal=0.2, percentage=20),
    Conversion(num=1, den=4, decimal=0.25, percentage=25),
    Conversion(num=1, den=2, decimal=0.5, percentage=50),
    Conversion(
        num=1,
        den=3,
        recurring=True,
        decimal_str="0.\\overline{3}",
        percentage_str="33 \\frac{1}{3}\\%",
    ),
]


def _generate_fdp(conversions: Sequence[Conversion], rng: Any) -> Question:
    chosen = rng.choice(list(conversions))
    fraction = FractionAnswer(num=chosen.num, den=chosen.den)

    if chosen.recurring:
        given = "decimal" if rng.random() < 0.5 else "percentage"
        return Question(
            template=FDP_LAYOUT,
            answer=FDPAnswer(fraction=fraction),
            parts=FDPParts(
                given_type="recurring",
                given_value=chosen.decimal_str if given == "decimal" else chosen.percentage_str,
                given_value_type=given,
                values={"decimal": chosen.decimal_str, "percentage": chosen.percentage_str},
            ),
        )

    given = rng.choice(["fraction", "decimal", "percentage"])
    if given == "fraction":
        parts = FDPParts(given_type=given, fraction=fraction)
        answer = FDPAnswer(decimal=chosen.decimal, percentage=chosen.percentage)
    elif given == "decimal":
        parts = FDPParts(given_type=given, decimal=chosen.decimal)
        answer = FDPAnswer(fraction=fraction, percentage=chosen.percentage)
    else:
        parts = FDPParts(given_type=given, percentage=chosen.percentage)
        answer = FDPAnswer(fraction=fraction, decimal=chosen.decimal)
    return Question(template=FDP_LAYOUT, answer=answer, parts=parts)


def generate_fdp_conversions(rng: Any = random) -> Question:
    return _generate_fdp(COMMON_CONVERSIONS, rng)


_FDP_DENOMINATORS = [3, 4, 5, 8, 10, 20]
IMPROPER_SHARE = 0.25


def thirds_conversion(num: int) -> Conversion:
    """Recurring notation for num/3 (num not a multiple of 3)."""
    whole, remainder = divmod(num, 3)
    digit = "3" if remainder == 1 else "6"
    percentage_whole = whole * 100 + (33 if remainder == 1 else 66)
    return Conversion(
        num=num,
        den=3,
        recurring=True,
        decimal_str=f"{whole}.\\overline{{{digit}}}",
        percentage_str=f"{percentage_whole} \\frac{{{remainder}}}{{3}}\\%",
    )


def generate_fdp_conversions_multiples(rng: Any = random) -> Question:
    while True:
        d = rng.choice(_FDP_DENOMINATORS)
        n = rng.randint(1, d - 1)
        if gcd(n, d) == 1:
            break
    if rng.random() < IMPROPER_SHARE:
        n += d

    if d == 3:
        conversion = thirds_conversion(n)
    else:
        conversion = Conversion(
            num=n,
            den=d,
            decimal=round_sig(n / d, ARITHMETIC_DIGITS),
            percentage=round_sig(n * 100 / d, ARITHMETIC_DIGITS),
        )
    return _generate_fdp([conversion], rng)


# ---------- Dispatch ----------


def _family(value: Union[Family, str]) -> Family:
    if isinstance(value, Family):
        return value
    try:
        return Family(value)
    except ValueError:
        raise UnknownFamily(value) from None


def generate(
    family: Union[Family, str],
    params: Optional[Mapping[str, Any]] = None,
    rng: Any = None,
) -> Question:
    params = params or {}
    rng = rng or random
    fam = _family(family)

    match fam:
        case Family.BONDS:
            return generate_bonds(params.get("value"), params.get("custom_range"), rng=rng)
        case Family.SINGLE_TABLE:
            return generate_single_table_facts(params["table"], rng=rng)
        case Family.GROUP_TABLES:
            return generate_group_facts(params["tables"], rng=rng)
        case Family.NEGATIVE_TABLES:
            return generate_negative_table_facts(params["tables"], rng=rng)
        case Family.DOUBLING:
            return generate_doubling(params.get("max_number", 100), rng=rng)
        case Family.SQUARES:
            return generate_perfect_squares(rng=rng)
        case Family.POWERS_OF_10:
            return generate_powers_of_10(rng=rng)
        case Family.UNIT_CONVERSIONS:
            return generate_unit_conversions(rng=rng)
        case Family.HCF:
            return generate_hcf(rng=rng)
        case Family.LCM:
            return generate_lcm(rng=rng)
        case Family.EQUIV_FRACTIONS:
            return generate_equivalent_fractions(rng=rng)
        case Family.SIMPLIFY_FRACTIONS:
            return generate_simplify_fractions(rng=rng)
        case Family.FRACTION_OF_QUANTITY:
            return generate_fraction_of_quantity(rng=rng)
        case Family.PERCENTAGE_OF_QUANTITY:
            return generate_percentage_of_quantity(rng=rng)
        case Family.FDP_CONVERSIONS:
            return generate_fdp_conversions(rng=rng)
        case Family.FDP_CONVERSIONS_MULTIPLES:
            return generate_fdp_conversions_multiples(rng=rng)
        case _:
            raise UnknownFamily(family)
