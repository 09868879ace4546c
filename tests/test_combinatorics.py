# tests/test_combinatorics.py
"""
Combinatorial functions, checked against sympy where sympy has them.

Run: pytest -v tests/test_combinatorics.py
"""

from __future__ import annotations

import pytest
import sympy
from sympy.functions.combinatorial.numbers import stirling
from sympy.utilities.iterables import partitions

from resonancecalc.errors import ArithmeticOverflow, EmptyOperands, MagnitudeBoundExceeded
from resonancecalc.operations import combinatorics as CB

MOTZKIN = [1, 1, 2, 4, 9, 21, 51, 127, 323, 835, 2188]
DERANGEMENTS = [1, 0, 1, 2, 9, 44, 265, 1854]

TEST_CASES = [
    (CB.factorial, (0,), 1),
    (CB.factorial, (5,), 120),
    (CB.binomial_coeff, (5, 7), 0),
    (CB.binomial_coeff, (5, 0), 1),
    (CB.central_binomial, (10,), 184756),
    (CB.permutations, (5, 2), 20),
    (CB.permutations, (3, 5), 0),
    (CB.combinations_with_repetition, (3, 2), 6),
    (CB.combinations_with_repetition, (0, 0), 1),
    (CB.combinations_with_repetition, (0, 3), 0),
    (CB.multinomial, ([2, 3],), 10),
    (CB.multinomial, ([1, 1, 1],), 6),
    (CB.catalan_number, (10,), 16796),
    (CB.stirling_second, (0, 0), 1),
    (CB.stirling_second, (3, 5), 0),
    (CB.stirling_first, (3, 5), 0),
    (CB.pascal_row_sum, (255,), 2**255),
    (CB.pascal_row_sum, (0,), 1),
]
TEST_IDS = [f"{fn.__name__}{args}"[:60] for fn, args, _ in TEST_CASES]


@pytest.mark.parametrize("fn,args,expected", TEST_CASES, ids=TEST_IDS)
def test_combinatorics_values(fn, args, expected):
    assert fn(*args) == expected


FAILURE_CASES = [
    (CB.factorial, (21,), MagnitudeBoundExceeded),
    (CB.factorial, (2**255,), MagnitudeBoundExceeded),
    (CB.derangements, (21,), MagnitudeBoundExceeded),
    (CB.catalan_number, (11,), MagnitudeBoundExceeded),
    (CB.stirling_second, (129, 1), MagnitudeBoundExceeded),
    (CB.bell_number, (129,), MagnitudeBoundExceeded),
    (CB.bell_number, (128,), ArithmeticOverflow),
    (CB.euler_partition, (26,), MagnitudeBoundExceeded),
    (CB.multinomial, ([],), EmptyOperands),
    (CB.pascal_row_sum, (256,), ArithmeticOverflow),
    (CB.double_factorial, (200,), ArithmeticOverflow),
]


@pytest.mark.parametrize("fn,args,err", FAILURE_CASES,
                         ids=[f"{fn.__name__}{args}->{err.__name__}"[:60] for fn, args, err in FAILURE_CASES])
def test_combinatorics_failures(fn, args, err):
    with pytest.raises(err):
        fn(*args)


@pytest.mark.parametrize("n", range(0, 21))
def test_factorial_matches_sympy(n):
    assert CB.factorial(n) == int(sympy.factorial(n))


@pytest.mark.parametrize("n", [0, 1, 2, 9, 30, 60])
def test_double_factorial_matches_sympy(n):
    assert CB.double_factorial(n) == int(sympy.factorial2(n))


@pytest.mark.parametrize("n,k", [(0, 0), (6, 3), (20, 7), (52, 5), (100, 50), (200, 100)])
def test_binomial_matches_sympy(n, k):
    assert CB.binomial_coeff(n, k) == int(sympy.binomial(n, k))


@pytest.mark.parametrize("n", range(0, 11))
def test_catalan_matches_sympy(n):
    assert CB.catalan_number(n) == int(sympy.catalan(n))


@pytest.mark.parametrize("n,k", [(1, 1), (5, 2), (10, 3), (20, 10), (30, 4)])
def test_stirling_second_matches_sympy(n, k):
    assert CB.stirling_second(n, k) == int(stirling(n, k))


@pytest.mark.parametrize("n,k", [(1, 1), (5, 2), (10, 3), (20, 10)])
def test_stirling_first_matches_sympy(n, k):
    assert CB.stirling_first(n, k) == int(stirling(n, k, kind=1))


@pytest.mark.parametrize("n", [0, 1, 2, 5, 10, 30, 50])
def test_bell_matches_sympy(n):
    assert CB.bell_number(n) == int(sympy.bell(n))


@pytest.mark.parametrize("n", range(0, 26))
def test_partitions_match_enumeration(n):
    assert CB.euler_partition(n) == sum(1 for _ in partitions(n))


@pytest.mark.parametrize("n,expected", list(enumerate(MOTZKIN)))
def test_motzkin(n, expected):
    assert CB.motzkin_number(n) == expected


@pytest.mark.parametrize("n,expected", list(enumerate(DERANGEMENTS)))
def test_derangements(n, expected):
    assert CB.derangements(n) == expected
