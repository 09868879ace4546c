# tests/test_checked.py
"""
Checked 256-bit arithmetic and fixed-point helpers.

Run: pytest -v tests/test_checked.py
"""

from __future__ import annotations

import pytest

from resonancecalc.constants import MAX_MAGNITUDE, SCALE, U256_MAX
from resonancecalc.errors import ArithmeticOverflow, DivisionByZero
from resonancecalc.operations import checked as C

# (function, args, expected)
TEST_CASES = [
    (C.safe_add, (1, 2), 3),
    (C.safe_add, (U256_MAX - 1, 1), U256_MAX),
    (C.safe_sub, (10, 10), 0),
    (C.safe_mul, (2**128, 2**127), 2**255),
    (C.safe_div, (7, 2), 3),
    (C.safe_mod, (7, 3), 1),
    (C.safe_pow, (2, 255), 2**255),
    (C.safe_pow, (10, 77), 10**77),
    (C.safe_pow, (0, 0), 1),
    (C.safe_pow, (0, 5), 0),
    (C.safe_pow, (1, U256_MAX), 1),
    (C.mul_div, (U256_MAX, U256_MAX, U256_MAX), U256_MAX),
    (C.mul_div, (2**200, 2**200, 2**150), 2**250),
    (C.mul_div_up, (7, 3, 2), 11),
    (C.mul_div_up, (6, 3, 2), 9),
    (C.ceil_div, (7, 2), 4),
    (C.ceil_div, (0, 5), 0),
    (C.add_mod, (U256_MAX, U256_MAX, 7), (2 * U256_MAX) % 7),
    (C.mul_mod, (U256_MAX, U256_MAX, 1000), (U256_MAX * U256_MAX) % 1000),
    (C.abs_diff, (3, 10), 7),
    (C.average, (U256_MAX, U256_MAX), U256_MAX),
    (C.average, (3, 4), 3),
    (C.min_of, (3, 4), 3),
    (C.max_of, (3, 4), 4),
    (C.clamp_to_bound, (5, 3), 3),
    (C.clamp_to_bound, (2, 3), 2),
    (C.is_within_magnitude, (MAX_MAGNITUDE,), True),
    (C.is_within_magnitude, (MAX_MAGNITUDE + 1,), False),
    (C.full_add, (U256_MAX, 1), (0, True)),
    (C.full_add, (1, 2), (3, False)),
    (C.full_sub, (0, 1), (U256_MAX, True)),
    (C.full_sub, (5, 3), (2, False)),
    (C.full_mul, (2**255, 2), (0, True)),
    (C.full_mul, (3, 4), (12, False)),
    (C.full_mul_wide, (U256_MAX, U256_MAX), ((U256_MAX * U256_MAX) >> 256, (U256_MAX * U256_MAX) & U256_MAX)),
    (C.saturating_add, (U256_MAX, 5), U256_MAX),
    (C.saturating_sub, (3, 5), 0),
    (C.saturating_mul, (2**200, 2**200), U256_MAX),
    (C.to_scaled, (3,), 3 * SCALE),
    (C.from_scaled, (3 * SCALE + 7,), 3),
    (C.scaled_mul, (2 * SCALE, 3 * SCALE), 6 * SCALE),
    (C.scaled_div, (SCALE, 4 * SCALE), SCALE // 4),
    (C.scaled_pow, (2 * SCALE, 10), 1024 * SCALE),
    (C.scaled_pow, (7 * SCALE, 0), SCALE),
    (C.scaled_fraction, (1, 3), SCALE // 3),
    (C.percent_of, (200, 15), 30),
    (C.basis_points_of, (10_000, 25), 25),
    (C.scale_by_base, (2,), 738),
    (C.round_to_multiple, (1000, 369), 738),
    (C.round_up_to_multiple, (1000, 369), 1107),
    (C.round_up_to_multiple, (738, 369), 738),
    (C.is_multiple_of, (738, 369), True),
    (C.is_multiple_of, (739, 369), False),
]
TEST_IDS = [f"{fn.__name__}{args}"[:60] for fn, args, _ in TEST_CASES]


@pytest.mark.parametrize("fn,args,expected", TEST_CASES, ids=TEST_IDS)
def test_checked_values(fn, args, expected):
    assert fn(*args) == expected


# (function, args, error)
FAILURE_CASES = [
    (C.safe_add, (U256_MAX, 1), ArithmeticOverflow),
    (C.safe_sub, (1, 2), ArithmeticOverflow),
    (C.safe_mul, (2**128, 2**128), ArithmeticOverflow),
    (C.safe_pow, (2, 256), ArithmeticOverflow),
    (C.safe_pow, (10, 78), ArithmeticOverflow),
    (C.safe_div, (1, 0), DivisionByZero),
    (C.safe_mod, (7, 0), DivisionByZero),
    (C.mul_div, (0, 0, 0), DivisionByZero),
    (C.mul_div, (U256_MAX, U256_MAX, 0), DivisionByZero),
    (C.mul_div, (U256_MAX, 2, 1), ArithmeticOverflow),
    (C.ceil_div, (1, 0), DivisionByZero),
    (C.add_mod, (1, 1, 0), DivisionByZero),
    (C.to_scaled, (U256_MAX,), ArithmeticOverflow),
    (C.scaled_div, (1, 0), DivisionByZero),
    (C.round_up_to_multiple, (U256_MAX, 2), ArithmeticOverflow),
    (C.is_multiple_of, (1, 0), DivisionByZero),
    (C.safe_add, (-1, 1), ArithmeticOverflow),
    (C.safe_add, (U256_MAX + 1, 0), ArithmeticOverflow),
]
FAILURE_IDS = [f"{fn.__name__}->{err.__name__}" for fn, _, err in FAILURE_CASES]


@pytest.mark.parametrize("fn,args,err", FAILURE_CASES, ids=FAILURE_IDS)
def test_checked_failures(fn, args, err):
    with pytest.raises(err):
        fn(*args)


@pytest.mark.parametrize("a,b", [(0, 0), (1, U256_MAX), (2**255, 2**255 - 1), (12345, 678)])
def test_average_never_overflows(a, b):
    assert C.average(a, b) == (a + b) // 2


@pytest.mark.parametrize("a,b", [(U256_MAX, U256_MAX), (2**255, 3), (5, 7)])
def test_full_mul_wide_recombines(a, b):
    hi, lo = C.full_mul_wide(a, b)
    assert (hi << 256) | lo == a * b


def test_word_guard():
    assert C.word(U256_MAX) == U256_MAX
    with pytest.raises(ArithmeticOverflow):
        C.word(U256_MAX + 1)
    with pytest.raises(ArithmeticOverflow):
        C.require_u256(1, 2, -3)
