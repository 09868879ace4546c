# tests/test_number_theory.py
"""
Number theory, integer roots, primes and divisors, checked against sympy.

Run: pytest -v tests/test_number_theory.py
"""

from __future__ import annotations

import math

import pytest
import sympy

from resonancecalc.constants import U256_MAX
from resonancecalc.errors import ArithmeticOverflow, DivisionByZero, MagnitudeBoundExceeded, ZeroMagnitude
from resonancecalc.operations import number_theory as NT

PAIRS = [(0, 0), (0, 7), (12, 18), (17, 5), (2**128, 2**64), (U256_MAX, 3), (10**30, 10**20 + 4)]
ROOT_SAMPLES = [0, 1, 2, 3, 4, 15, 16, 17, 99, 10**18, (2**128 - 1) ** 2, 2**255, U256_MAX]

TEST_CASES = [
    (NT.gcd, (0, 0), 0),
    (NT.lcm, (4, 6), 12),
    (NT.lcm, (5, 0), 0),
    (NT.is_coprime, (8, 9), True),
    (NT.is_coprime, (8, 10), False),
    (NT.pow_mod, (5, 0, 1), 0),
    (NT.pow_mod, (2, 10, 1000), 24),
    (NT.pow_mod, (U256_MAX - 1, U256_MAX, U256_MAX), pow(U256_MAX - 1, U256_MAX, U256_MAX)),
    (NT.mod_inverse, (3, 11), 4),
    (NT.mod_inverse, (5, 1), 0),
    (NT.totient_approx, (36,), 12),
    (NT.totient_approx, (97,), 96),
    (NT.totient_approx, (210,), 48),
    (NT.totient_approx, (0,), 0),
    (NT.totient_approx, (1,), 1),
    (NT.harmonic_mean_approx, (3, 6), 4),
    (NT.geometric_mean_approx, (4, 9), 6),
    (NT.is_perfect_square, (0,), True),
    (NT.is_perfect_square, (2**254,), True),
    (NT.is_perfect_square, (2**255,), False),
    (NT.cbrt_floor, (27,), 3),
    (NT.cbrt_floor, (26,), 2),
    (NT.is_perfect_cube, (10**27,), True),
    (NT.is_perfect_cube, (10**27 + 1,), False),
    (NT.nth_root_floor, (2**255, 255), 2),
    (NT.nth_root_floor, (10**20, 4), 10**5),
    (NT.ilog2, (1,), 0),
    (NT.ilog2, (U256_MAX,), 255),
    (NT.ilog10, (999,), 2),
    (NT.ilog10, (1000,), 3),
    (NT.pow10, (77,), 10**77),
    (NT.is_fibonacci, (0,), True),
    (NT.is_fibonacci, (1,), True),
    (NT.is_fibonacci, (144,), True),
    (NT.is_fibonacci, (145,), False),
    (NT.collatz_steps, (1,), 0),
    (NT.collatz_steps, (27,), 111),
    (NT.prime_count_upto, (100,), 25),
    (NT.prime_count_upto, (0,), 0),
    (NT.smallest_prime_factor, (91,), 7),
    (NT.largest_prime_factor, (91,), 13),
    (NT.smallest_prime_factor, (1,), 1),
    (NT.count_divisors, (360,), 24),
    (NT.sum_of_divisors, (28,), 56),
    (NT.is_perfect_number, (28,), True),
    (NT.is_perfect_number, (27,), False),
    (NT.is_square_free, (30,), True),
    (NT.is_square_free, (12,), False),
    (NT.radical, (360,), 30),
]
TEST_IDS = [f"{fn.__name__}{args}"[:60] for fn, args, _ in TEST_CASES]


@pytest.mark.parametrize("fn,args,expected", TEST_CASES, ids=TEST_IDS)
def test_number_theory_values(fn, args, expected):
    assert fn(*args) == expected


FAILURE_CASES = [
    (NT.pow_mod, (2, 3, 0), DivisionByZero),
    (NT.mod_inverse, (2, 4), DivisionByZero),
    (NT.mod_inverse, (3, 0), DivisionByZero),
    (NT.lcm, (2**200, 2**200 + 1), ArithmeticOverflow),
    (NT.nth_root_floor, (10, 0), DivisionByZero),
    (NT.ilog2, (0,), ZeroMagnitude),
    (NT.ilog10, (0,), ZeroMagnitude),
    (NT.pow10, (78,), ArithmeticOverflow),
    (NT.fibonacci, (400,), ArithmeticOverflow),
    (NT.collatz_steps, (0,), ZeroMagnitude),
    (NT.prime_count_upto, (10**7 + 1,), MagnitudeBoundExceeded),
    (NT.next_prime, (U256_MAX,), ArithmeticOverflow),
    (NT.radical, (0,), ZeroMagnitude),
    (NT.count_divisors, (0,), ZeroMagnitude),
]


@pytest.mark.parametrize("fn,args,err", FAILURE_CASES,
                         ids=[f"{fn.__name__}->{err.__name__}" for fn, _, err in FAILURE_CASES])
def test_number_theory_failures(fn, args, err):
    with pytest.raises(err):
        fn(*args)


@pytest.mark.parametrize("a,b", PAIRS)
def test_gcd_matches_math(a, b):
    assert NT.gcd(a, b) == math.gcd(a, b)


@pytest.mark.parametrize("a,b", [(12, 18), (17, 5), (2**64, 2**32 + 1), (10**20, 10**15 + 3)])
def test_gcd_times_lcm_is_product(a, b):
    assert NT.gcd(a, b) * NT.lcm(a, b) == a * b


@pytest.mark.parametrize("n", ROOT_SAMPLES)
def test_sqrt_floor_matches_isqrt(n):
    assert NT.sqrt_floor(n) == math.isqrt(n)


@pytest.mark.parametrize("a,m", [(3, 11), (10, 17), (7, 2**61 - 1), (U256_MAX - 2, 2**127 - 1)])
def test_mod_inverse_matches_sympy(a, m):
    inv = NT.mod_inverse(a, m)
    assert inv == int(sympy.mod_inverse(a, m))
    assert (a * inv) % m == 1


@pytest.mark.parametrize("n", [36, 97, 210, 2 * 3 * 5 * 7 * 11 * 13, 2**10 * 3**5])
def test_totient_matches_sympy_for_small_factors(n):
    assert NT.totient_approx(n) == int(sympy.totient(n))


def test_totient_ignores_factors_above_trial_limit():
    # 101 is prime and above the trial bound, so it is left in place
    assert NT.totient_approx(101) == 101
    assert NT.totient_approx(202) == 101
    assert int(sympy.totient(202)) == 100


@pytest.mark.parametrize("n", [0, 1, 2, 10, 100, 360])
def test_fibonacci_matches_sympy(n):
    assert NT.fibonacci(n) == int(sympy.fibonacci(n))


@pytest.mark.parametrize("n", [0, 1, 5, 50, 200])
def test_lucas_matches_sympy(n):
    assert NT.lucas(n) == int(sympy.lucas(n))


@pytest.mark.parametrize("n", [0, 1, 2, 97, 561, 7919, 2**61 - 1, 2**89 - 1, 2**127 + 1])
def test_is_prime_matches_sympy(n):
    assert NT.is_prime(n) == bool(sympy.isprime(n))


@pytest.mark.parametrize("n", [0, 2, 100, 2**200])
def test_next_prime_is_prime_and_greater(n):
    p = NT.next_prime(n)
    assert p > n
    assert sympy.isprime(p)
