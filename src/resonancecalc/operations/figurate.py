# -----------------------------------------------------------------------------
#  figurate.py
#  Polygonal and figurate numbers (forward, checked) and membership tests
# -----------------------------------------------------------------------------

from __future__ import annotations

from resonancecalc.errors import MagnitudeBoundExceeded
from resonancecalc.operations.checked import require_u256, safe_add, safe_mul, safe_sub
from resonancecalc.operations.number_theory import _newton_isqrt
from resonancecalc.registry import operation

CATEGORY = "Polygonal and figurate"

# Forward formulas go through safe_mul/safe_add, so an intermediate product
# past 2**256 fails even when the divided result would fit.


def _require_sides(s: int) -> None:
    require_u256(s)
    if s < 3:
        raise MagnitudeBoundExceeded()


def _polygonal_index(x: int, s: int) -> int | None:
    """
    Return k ≥ 1 with P_s(k) = x, else None.
    From (s−2)k² − (s−4)k − 2x = 0: k = ((s−4) + √D) / (2(s−2)).
    """
    if x < 1:
        return None
    a = s - 2
    b = s - 4
    disc = b * b + 8 * a * x
    root = _newton_isqrt(disc)
    if root * root != disc:
        return None
    num = b + root
    den = 2 * a
    if num <= 0 or num % den:
        return None
    return num // den


@operation(label="Triangular number", category=CATEGORY, description="T(n) = n(n+1)/2.", oeis="A000217")
def triangular(n: int) -> int:
    return safe_mul(n, safe_add(n, 1)) // 2


@operation(label="Polygonal number", category=CATEGORY,
           description="P_s(n) = ((s−2)n² − (s−4)n)/2 for s ≥ 3.")
def polygonal(s: int, n: int) -> int:
    _require_sides(s)
    quad = safe_mul(safe_mul(s - 2, n), n)
    if s == 3:
        return safe_add(quad, n) // 2
    return safe_sub(quad, safe_mul(s - 4, n)) // 2


@operation(label="Centered polygonal", category=CATEGORY, description="1 + s·n(n−1)/2 for s ≥ 3.")
def centered_polygonal(s: int, n: int) -> int:
    _require_sides(s)
    require_u256(n)
    if n == 0:
        return 0
    return safe_add(1, safe_mul(s, safe_mul(n, n - 1)) // 2)


@operation(label="Square number", category=CATEGORY, oeis="A000290")
def square_number(n: int) -> int:
    return safe_mul(n, n)


@operation(label="Cube number", category=CATEGORY, oeis="A000578")
def cube_number(n: int) -> int:
    return safe_mul(safe_mul(n, n), n)


@operation(label="Pentagonal number", category=CATEGORY, description="n(3n−1)/2.", oeis="A000326")
def pentagonal(n: int) -> int:
    return polygonal(5, n)


@operation(label="Hexagonal number", category=CATEGORY, description="n(2n−1).", oeis="A000384")
def hexagonal(n: int) -> int:
    return polygonal(6, n)


@operation(label="Pronic number", category=CATEGORY, description="n(n+1).", oeis="A002378")
def pronic(n: int) -> int:
    return safe_mul(n, safe_add(n, 1))


@operation(label="Star number", category=CATEGORY, description="6n(n−1) + 1 for n ≥ 1.", oeis="A003154")
def star_number(n: int) -> int:
    require_u256(n)
    if n == 0:
        return 0
    return safe_add(safe_mul(6, safe_mul(n, n - 1)), 1)


@operation(label="Tetrahedral number", category=CATEGORY, description="n(n+1)(n+2)/6.", oeis="A000292")
def tetrahedral(n: int) -> int:
    return safe_mul(safe_mul(n, safe_add(n, 1)), safe_add(n, 2)) // 6


@operation(label="Square pyramidal number", category=CATEGORY, description="n(n+1)(2n+1)/6.", oeis="A000330")
def square_pyramidal(n: int) -> int:
    return safe_mul(safe_mul(n, safe_add(n, 1)), safe_add(safe_mul(2, n), 1)) // 6


@operation(label="Octahedral number", category=CATEGORY, description="n(2n²+1)/3.", oeis="A005900")
def octahedral(n: int) -> int:
    return safe_mul(n, safe_add(safe_mul(2, safe_mul(n, n)), 1)) // 3


@operation(label="Sum of cubes", category=CATEGORY, description="1³ + … + n³ = T(n)².", oeis="A000537")
def sum_of_cubes_upto(n: int) -> int:
    t = triangular(n)
    return safe_mul(t, t)


@operation(label="Triangular root", category=CATEGORY, description="Largest k with T(k) ≤ x.", oeis="A003056")
def triangular_root(x: int) -> int:
    require_u256(x)
    return (_newton_isqrt(8 * x + 1) - 1) // 2


@operation(label="Is triangular", category=CATEGORY, oeis="A000217")
def is_triangular(x: int) -> bool:
    require_u256(x)
    if x == 0:
        return True
    return _polygonal_index(x, 3) is not None


@operation(label="Is pentagonal", category=CATEGORY, oeis="A000326")
def is_pentagonal(x: int) -> bool:
    require_u256(x)
    return _polygonal_index(x, 5) is not None


@operation(label="Is hexagonal", category=CATEGORY, oeis="A000384")
def is_hexagonal(x: int) -> bool:
    require_u256(x)
    return _polygonal_index(x, 6) is not None


@operation(label="Is polygonal", category=CATEGORY, description="x = P_s(k) for some k ≥ 1.")
def is_polygonal(s: int, x: int) -> bool:
    _require_sides(s)
    require_u256(x)
    return _polygonal_index(x, s) is not None


@operation(label="Is pronic", category=CATEGORY, oeis="A002378")
def is_pronic(x: int) -> bool:
    require_u256(x)
    k = _newton_isqrt(x)
    return k * (k + 1) == x
