from __future__ import annotations

from typing import Tuple


def gcd(a: int, b: int) -> int:
    """
    Euclid's algorithm for non-negative integers.
    gcd(a, 0) == a; no ordering precondition (a < b just costs one extra step).
    """
    while b:
        a, b = b, a % b
    return a


def lcm(a: int, b: int) -> int:
    return a * b // gcd(a, b)


def reduce_fraction(n: int, d: int) -> Tuple[int, int]:
    # caller guarantees d != 0
    g = gcd(abs(n), abs(d))
    n, d = n // g, d // g
    if d < 0:
        n, d = -n, -d
    return n, d
