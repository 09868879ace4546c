# -----------------------------------------------------------------------------
#  arrays.py
#  Batch reductions, elementwise operations and integer statistics
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Sequence

from sympy import integer_nthroot

from resonancecalc.constants import MAX_OPERANDS
from resonancecalc.errors import ArrayLengthMismatch, DivisionByZero, EmptyOperands, MagnitudeBoundExceeded
from resonancecalc.operations.checked import require_u256, safe_add, safe_mul, safe_sub
from resonancecalc.operations.digits import digit_sum, is_triad_resonant
from resonancecalc.operations.number_theory import _newton_isqrt, gcd, lcm
from resonancecalc.registry import operation

CATEGORY = "Array reductions"
STATISTICS = "Statistics"
ELEMENTWISE = "Elementwise"


# --- Validation (always before any arithmetic) ---


def _require_values(values: Sequence[int], *, capped: bool = False) -> None:
    if not values:
        raise EmptyOperands()
    if capped and len(values) > MAX_OPERANDS:
        raise ArrayLengthMismatch()
    require_u256(*values)


def _require_pair(a: Sequence[int], b: Sequence[int], *, capped: bool = False) -> None:
    if not a or not b:
        raise EmptyOperands()
    if len(a) != len(b):
        raise ArrayLengthMismatch()
    _require_values(a, capped=capped)
    _require_values(b, capped=capped)


# --- Reductions ---


@operation(label="Sum", category=CATEGORY, description="Σ values, checked at every step.")
def sum_array(values: list[int]) -> int:
    _require_values(values)
    total = 0
    for v in values:
        total = safe_add(total, v)
    return total


@operation(label="Product", category=CATEGORY, description="Π values, at most 32 operands.")
def product_array(values: list[int]) -> int:
    _require_values(values, capped=True)
    result = 1
    for v in values:
        result = safe_mul(result, v)
    return result


@operation(label="Minimum", category=CATEGORY)
def min_array(values: list[int]) -> int:
    _require_values(values)
    return min(values)


@operation(label="Maximum", category=CATEGORY)
def max_array(values: list[int]) -> int:
    _require_values(values)
    return max(values)


@operation(label="Range", category=CATEGORY, description="max − min.")
def range_span(values: list[int]) -> int:
    _require_values(values)
    return max(values) - min(values)


@operation(label="GCD (batch)", category=CATEGORY)
def gcd_batch(values: list[int]) -> int:
    _require_values(values)
    g = 0
    for v in values:
        g = gcd(g, v)
    return g


@operation(label="LCM (batch)", category=CATEGORY, description="At most 32 operands; 0 if any is 0.")
def lcm_batch(values: list[int]) -> int:
    _require_values(values, capped=True)
    result = 1
    for v in values:
        result = lcm(result, v)
    return result


@operation(label="XOR (all)", category=CATEGORY)
def xor_all(values: list[int]) -> int:
    _require_values(values)
    acc = 0
    for v in values:
        acc ^= v
    return acc


@operation(label="AND (all)", category=CATEGORY)
def and_all(values: list[int]) -> int:
    _require_values(values)
    acc = values[0]
    for v in values[1:]:
        acc &= v
    return acc


@operation(label="OR (all)", category=CATEGORY)
def or_all(values: list[int]) -> int:
    _require_values(values)
    acc = 0
    for v in values:
        acc |= v
    return acc


@operation(label="Sum of squares", category=CATEGORY)
def sum_of_squares_array(values: list[int]) -> int:
    _require_values(values)
    total = 0
    for v in values:
        total = safe_add(total, safe_mul(v, v))
    return total


@operation(label="Digit sums", category=CATEGORY, description="digit_sum of every element.")
def digit_sum_batch(values: list[int]) -> list[int]:
    _require_values(values)
    return [digit_sum(v) for v in values]


@operation(label="Resonant count", category=CATEGORY, description="Elements whose digit collapse lies in {3, 6, 9}.")
def count_resonant(values: list[int]) -> int:
    _require_values(values)
    return sum(1 for v in values if is_triad_resonant(v))


@operation(label="Count above", category=CATEGORY, description="Elements strictly greater than the threshold.")
def count_above(values: list[int], threshold: int) -> int:
    _require_values(values)
    require_u256(threshold)
    return sum(1 for v in values if v > threshold)


@operation(label="Cumulative sum", category=CATEGORY, description="Running totals, checked.")
def cumulative_sum(values: list[int]) -> list[int]:
    _require_values(values)
    out = []
    total = 0
    for v in values:
        total = safe_add(total, v)
        out.append(total)
    return out


@operation(label="Sorted copy", category=CATEGORY, description="Ascending copy; the input is untouched.")
def sort_ascending(values: list[int]) -> list[int]:
    _require_values(values)
    return sorted(values)


# --- Elementwise ---


@operation(label="Dot product", category=ELEMENTWISE, description="Σ aᵢ·bᵢ, equal lengths.")
def dot_product(a: list[int], b: list[int]) -> int:
    _require_pair(a, b)
    total = 0
    for x, y in zip(a, b):
        total = safe_add(total, safe_mul(x, y))
    return total


@operation(label="Add arrays", category=ELEMENTWISE)
def add_arrays(a: list[int], b: list[int]) -> list[int]:
    _require_pair(a, b)
    return [safe_add(x, y) for x, y in zip(a, b)]


@operation(label="Subtract arrays", category=ELEMENTWISE, description="aᵢ − bᵢ, fails on underflow.")
def sub_arrays(a: list[int], b: list[int]) -> list[int]:
    _require_pair(a, b)
    return [safe_sub(x, y) for x, y in zip(a, b)]


@operation(label="Multiply arrays", category=ELEMENTWISE, description="aᵢ·bᵢ, at most 32 pairs.")
def mul_arrays(a: list[int], b: list[int]) -> list[int]:
    _require_pair(a, b, capped=True)
    return [safe_mul(x, y) for x, y in zip(a, b)]


@operation(label="Scale array", category=ELEMENTWISE, description="Every element × factor.")
def scale_array(values: list[int], factor: int) -> list[int]:
    _require_values(values)
    require_u256(factor)
    return [safe_mul(v, factor) for v in values]


# --- Statistics (truncating integer division) ---


@operation(label="Mean", category=STATISTICS, description="⌊Σ / n⌋.")
def mean(values: list[int]) -> int:
    return sum_array(values) // len(values)


@operation(label="Weighted mean", category=STATISTICS, description="⌊Σ vᵢwᵢ / Σ wᵢ⌋.")
def weighted_mean(values: list[int], weights: list[int]) -> int:
    num = dot_product(values, weights)
    den = sum_array(weights)
    if den == 0:
        raise DivisionByZero()
    return num // den


@operation(label="Median", category=STATISTICS,
           description="Middle of a sorted copy; even length averages the two middles (floor).")
def median(values: list[int]) -> int:
    _require_values(values)
    s = sorted(values)
    mid = len(s) // 2
    if len(s) % 2:
        return s[mid]
    return (s[mid - 1] + s[mid]) // 2


@operation(label="Percentile", category=STATISTICS,
           description="Sorted copy at index min(⌊n·pct/100⌋, n−1), pct in [0, 100].")
def percentile_approx(values: list[int], pct: int) -> int:
    _require_values(values)
    require_u256(pct)
    if pct > 100:
        raise MagnitudeBoundExceeded()
    s = sorted(values)
    idx = min(len(s) * pct // 100, len(s) - 1)
    return s[idx]


@operation(label="Variance", category=STATISTICS, description="Population variance ⌊Σ(v − mean)² / n⌋.")
def variance(values: list[int]) -> int:
    mu = mean(values)
    total = 0
    for v in values:
        d = v - mu if v >= mu else mu - v
        total = safe_add(total, safe_mul(d, d))
    return total // len(values)


@operation(label="Standard deviation", category=STATISTICS, description="⌊√variance⌋.")
def std_dev_approx(values: list[int]) -> int:
    return _newton_isqrt(variance(values))


@operation(label="Geometric mean (batch)", category=STATISTICS,
           description="⌊(Π values)^(1/n)⌋, at most 32 operands.")
def geometric_mean_batch(values: list[int]) -> int:
    prod = product_array(values)
    return int(integer_nthroot(prod, len(values))[0])
