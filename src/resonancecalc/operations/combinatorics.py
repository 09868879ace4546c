# -----------------------------------------------------------------------------
#  combinatorics.py
#  Factorials, binomials, Catalan/Stirling/Bell numbers and partitions
# -----------------------------------------------------------------------------

from __future__ import annotations

from resonancecalc.errors import EmptyOperands, MagnitudeBoundExceeded
from resonancecalc.operations.checked import require_u256, safe_add, safe_mul, safe_pow
from resonancecalc.registry import operation

CATEGORY = "Combinatorics"

FACTORIAL_MAX_N = 20
CATALAN_MAX_N = 10
STIRLING_MAX_N = 128
PARTITION_MAX_N = 25

# p(n) for n = 0..25
_PARTITIONS = (
    1, 1, 2, 3, 5, 7, 11, 15, 22, 30, 42, 56, 77, 101, 135, 176, 231, 297,
    385, 490, 627, 792, 1002, 1255, 1575, 1958,
)


def _cap(n: int, limit: int) -> None:
    require_u256(n)
    if n > limit:
        raise MagnitudeBoundExceeded()


@operation(label="Factorial", category=CATEGORY, description="n! for n ≤ 20.", oeis="A000142")
def factorial(n: int) -> int:
    _cap(n, FACTORIAL_MAX_N)
    result = 1
    for i in range(2, n + 1):
        result *= i
    return result


@operation(label="Double factorial", category=CATEGORY, description="n·(n−2)·(n−4)…, checked.", oeis="A006882")
def double_factorial(n: int) -> int:
    require_u256(n)
    result = 1
    while n > 1:
        result = safe_mul(result, n)
        n -= 2
    return result


@operation(label="Derangements", category=CATEGORY, description="!n for n ≤ 20.", oeis="A000166")
def derangements(n: int) -> int:
    _cap(n, FACTORIAL_MAX_N)
    a, b = 1, 0  # D(0), D(1)
    if n == 0:
        return a
    for i in range(2, n + 1):
        a, b = b, (i - 1) * (a + b)
    return b


@operation(label="Binomial coefficient", category=CATEGORY,
           description="C(n, k) by the multiplicative formula with k = min(k, n−k); 0 when k > n.",
           oeis="A007318")
def binomial_coeff(n: int, k: int) -> int:
    require_u256(n, k)
    if k > n:
        return 0
    k = min(k, n - k)
    result = 1
    for i in range(1, k + 1):
        result = safe_mul(result, n - k + i) // i
    return result


@operation(label="Central binomial", category=CATEGORY, description="C(2n, n).", oeis="A000984")
def central_binomial(n: int) -> int:
    return binomial_coeff(safe_mul(n, 2), n)


@operation(label="Multisets", category=CATEGORY, description="C(n+k−1, k), k-multisets from n kinds.")
def combinations_with_repetition(n: int, k: int) -> int:
    require_u256(n, k)
    if n == 0:
        return 1 if k == 0 else 0
    return binomial_coeff(safe_add(n, k) - 1, k)


@operation(label="Permutations", category=CATEGORY, description="n!/(n−k)!, 0 when k > n.")
def permutations(n: int, k: int) -> int:
    require_u256(n, k)
    if k > n:
        return 0
    result = 1
    for i in range(k):
        result = safe_mul(result, n - i)
    return result


@operation(label="Multinomial", category=CATEGORY, description="(Σ parts)! / Π parts!, checked.")
def multinomial(parts: list[int]) -> int:
    if not parts:
        raise EmptyOperands()
    require_u256(*parts)
    total = 0
    result = 1
    for p in parts:
        total = safe_add(total, p)
        result = safe_mul(result, binomial_coeff(total, p))
    return result


@operation(label="Catalan number", category=CATEGORY, description="C(2n, n)/(n+1) for n ≤ 10.", oeis="A000108")
def catalan_number(n: int) -> int:
    _cap(n, CATALAN_MAX_N)
    return binomial_coeff(2 * n, n) // (n + 1)


@operation(label="Motzkin number", category=CATEGORY, oeis="A001006")
def motzkin_number(n: int) -> int:
    require_u256(n)
    a, b = 1, 1  # M(0), M(1)
    if n == 0:
        return a
    for i in range(2, n + 1):
        a, b = b, safe_add(safe_mul(2 * i + 1, b), safe_mul(3 * i - 3, a)) // (i + 2)
    return b


def _stirling2_row(n: int, k: int) -> list[int]:
    """Row S(n, 0..k) built with two rolling buffers."""
    prev = [1] + [0] * k
    for i in range(1, n + 1):
        cur = [0] * (k + 1)
        for j in range(1, min(i, k) + 1):
            cur[j] = safe_add(prev[j - 1], safe_mul(j, prev[j]))
        prev = cur
    return prev


@operation(label="Stirling (2nd kind)", category=CATEGORY,
           description="S(n, k) = S(n−1, k−1) + k·S(n−1, k), n ≤ 128.", oeis="A008277")
def stirling_second(n: int, k: int) -> int:
    _cap(n, STIRLING_MAX_N)
    require_u256(k)
    if k > n:
        return 0
    return _stirling2_row(n, k)[k]


@operation(label="Stirling (1st kind)", category=CATEGORY,
           description="Unsigned c(n, k) = c(n−1, k−1) + (n−1)·c(n−1, k), n ≤ 128.", oeis="A132393")
def stirling_first(n: int, k: int) -> int:
    _cap(n, STIRLING_MAX_N)
    require_u256(k)
    if k > n:
        return 0
    prev = [1] + [0] * k
    for i in range(1, n + 1):
        cur = [0] * (k + 1)
        for j in range(1, min(i, k) + 1):
            cur[j] = safe_add(prev[j - 1], safe_mul(i - 1, prev[j]))
        prev = cur
    return prev[k]


@operation(label="Bell number", category=CATEGORY, description="Σₖ S(n, k), n ≤ 128.", oeis="A000110")
def bell_number(n: int) -> int:
    _cap(n, STIRLING_MAX_N)
    total = 0
    for v in _stirling2_row(n, n):
        total = safe_add(total, v)
    return total


@operation(label="Partition number", category=CATEGORY, description="p(n) from a fixed table, n ≤ 25.",
           oeis="A000041")
def euler_partition(n: int) -> int:
    _cap(n, PARTITION_MAX_N)
    return _PARTITIONS[n]


@operation(label="Pascal row sum", category=CATEGORY, description="2^n.", oeis="A000079")
def pascal_row_sum(n: int) -> int:
    return safe_pow(2, n)
