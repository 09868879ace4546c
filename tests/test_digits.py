# tests/test_digits.py
"""
Base-10 digit functions.

Run: pytest -v tests/test_digits.py
"""

from __future__ import annotations

import pytest

from resonancecalc.constants import TRIAD, U256_MAX
from resonancecalc.errors import ArithmeticOverflow, MagnitudeBoundExceeded, ZeroMagnitude
from resonancecalc.operations import digits as D

SAMPLES = [0, 1, 9, 10, 11, 18, 99, 121, 369, 1001, 12321, 98765, 10**20, 2**200, U256_MAX]

TEST_CASES = [
    (D.digit_sum, (0,), 0),
    (D.digit_sum, (369,), 18),
    (D.digit_sum, (U256_MAX,), sum(map(int, str(U256_MAX)))),
    (D.digital_root, (0,), 0),
    (D.digital_root, (18,), 9),
    (D.digital_root, (10,), 1),
    (D.collapse_digits, (99999,), 9),
    (D.additive_persistence, (199,), 3),
    (D.additive_persistence, (7,), 0),
    (D.multiplicative_persistence, (39,), 3),
    (D.digit_product, (123,), 6),
    (D.digit_product, (0,), 0),
    (D.sum_of_digit_squares, (12,), 5),
    (D.digit_sum_base, (255, 2), 8),
    (D.digit_sum_base, (255, 16), 30),
    (D.digit_count, (0,), 1),
    (D.digit_count, (U256_MAX,), 78),
    (D.leading_digit, (9876,), 9),
    (D.nth_digit, (12345, 0), 5),
    (D.nth_digit, (12345, 4), 1),
    (D.nth_digit, (12345, 5), 0),
    (D.nth_digit, (1, 100), 0),
    (D.count_digit, (1333, 3), 3),
    (D.count_digit, (0, 0), 1),
    (D.reverse_digits, (120,), 21),
    (D.reverse_digits, (0,), 0),
    (D.is_palindrome, (12321,), True),
    (D.is_palindrome, (120,), False),
    (D.is_repdigit, (777,), True),
    (D.is_repdigit, (0,), True),
    (D.is_repdigit, (778,), False),
    (D.is_digit_increasing, (1123,), True),
    (D.is_digit_increasing, (1321,), False),
    (D.rotate_digits_left, (123,), 231),
    (D.rotate_digits_left, (100,), 1),
    (D.rotate_digits_left, (7,), 7),
    (D.concat_numbers, (12, 34), 1234),
    (D.concat_numbers, (12, 0), 120),
    (D.is_harshad, (18,), True),
    (D.is_harshad, (19,), False),
    (D.is_harshad, (0,), False),
    (D.is_armstrong, (153,), True),
    (D.is_armstrong, (154,), False),
    (D.is_automorphic, (76,), True),
    (D.is_automorphic, (25,), True),
    (D.is_automorphic, (7,), False),
    (D.is_happy, (7,), True),
    (D.is_happy, (4,), False),
    (D.contains_triad_digit, (124,), False),
    (D.contains_triad_digit, (1249,), True),
    (D.count_triad_digits, (3690,), 3),
    (D.triad_digit_sum, (3691,), 18),
]
TEST_IDS = [f"{fn.__name__}{args}"[:60] for fn, args, _ in TEST_CASES]


@pytest.mark.parametrize("fn,args,expected", TEST_CASES, ids=TEST_IDS)
def test_digit_values(fn, args, expected):
    assert fn(*args) == expected


FAILURE_CASES = [
    (D.reverse_digits, (U256_MAX,), ArithmeticOverflow),
    (D.concat_numbers, (U256_MAX, 1), ArithmeticOverflow),
    (D.count_digit, (1, 10), MagnitudeBoundExceeded),
    (D.digit_sum_base, (5, 1), MagnitudeBoundExceeded),
    (D.is_happy, (0,), ZeroMagnitude),
    (D.digit_sum, (-1,), ArithmeticOverflow),
    (D.digital_root, (U256_MAX + 1,), ArithmeticOverflow),
]


@pytest.mark.parametrize("fn,args,err", FAILURE_CASES,
                         ids=[f"{fn.__name__}->{err.__name__}" for fn, _, err in FAILURE_CASES])
def test_digit_failures(fn, args, err):
    with pytest.raises(err):
        fn(*args)


@pytest.mark.parametrize("v", SAMPLES)
def test_digital_root_properties(v):
    r = D.digital_root(v)
    if v == 0:
        assert r == 0
    else:
        assert 1 <= r <= 9
        assert r % 9 == v % 9
    assert D.collapse_digits(v) == r


def test_triad_resonance_matches_digital_root():
    for v in range(0, 5000):
        assert D.is_triad_resonant(v) == (D.digital_root(v) in TRIAD), v
    assert not D.is_triad_resonant(0)
    assert D.is_triad_resonant(U256_MAX) == (D.digital_root(U256_MAX) in TRIAD)


@pytest.mark.parametrize("v", SAMPLES[:-1])
def test_palindrome_iff_equal_to_reversal(v):
    assert D.is_palindrome(v) == (D.reverse_digits(v) == v)


@pytest.mark.parametrize("v", [1, 12, 369, 98765, 10**20 + 7])
def test_reverse_twice_without_trailing_zero(v):
    assert D.reverse_digits(D.reverse_digits(v)) == v
