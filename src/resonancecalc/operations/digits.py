# -----------------------------------------------------------------------------
#  digits.py
#  Base-10 digit functions: sums, roots, reversal, resonance
# -----------------------------------------------------------------------------

from __future__ import annotations

from resonancecalc.constants import TRIAD
from resonancecalc.errors import MagnitudeBoundExceeded, ZeroMagnitude
from resonancecalc.operations.checked import require_u256, safe_mul, word
from resonancecalc.registry import operation

CATEGORY = "Digit-based"

_ONE_DIGIT = 9


# --- Helpers ---


def _digits_lsd_first(value: int) -> list[int]:
    if value == 0:
        return [0]
    out = []
    while value:
        out.append(value % 10)
        value //= 10
    return out


def _require_base(base: int) -> None:
    if base < 2:
        raise MagnitudeBoundExceeded()


# --- Sums and roots ---


@operation(label="Digit sum", category=CATEGORY, description="Sum of decimal digits.", oeis="A007953")
def digit_sum(value: int) -> int:
    require_u256(value)
    total = 0
    while value:
        total += value % 10
        value //= 10
    return total


@operation(label="Digital root", category=CATEGORY,
           description="Closed form: 0 for 0, else 9 when v ≡ 0 (mod 9), else v mod 9.", oeis="A010888")
def digital_root(value: int) -> int:
    require_u256(value)
    if value == 0:
        return 0
    r = value % 9
    return 9 if r == 0 else r


@operation(label="Digit collapse", category=CATEGORY,
           description="Repeated digit sum until the value is a single digit.")
def collapse_digits(value: int) -> int:
    v = digit_sum(value)
    while v > _ONE_DIGIT:
        v = digit_sum(v)
    return v


@operation(label="Triad resonant", category=CATEGORY,
           description="Collapsed digit sum lies in {3, 6, 9}.")
def is_triad_resonant(value: int) -> bool:
    # deliberately the iterative collapse, not digital_root()
    return collapse_digits(value) in TRIAD


@operation(label="Additive persistence", category=CATEGORY,
           description="Number of digit-sum steps to reach one digit.", oeis="A031286")
def additive_persistence(value: int) -> int:
    require_u256(value)
    steps = 0
    while value > _ONE_DIGIT:
        value = digit_sum(value)
        steps += 1
    return steps


@operation(label="Multiplicative persistence", category=CATEGORY,
           description="Number of digit-product steps to reach one digit.", oeis="A031346")
def multiplicative_persistence(value: int) -> int:
    require_u256(value)
    steps = 0
    while value > _ONE_DIGIT:
        value = digit_product(value)
        steps += 1
    return steps


@operation(label="Digit product", category=CATEGORY, description="Product of decimal digits.", oeis="A007954")
def digit_product(value: int) -> int:
    require_u256(value)
    prod = 1
    for d in _digits_lsd_first(value):
        prod *= d
    return prod


@operation(label="Sum of digit squares", category=CATEGORY, oeis="A003132")
def sum_of_digit_squares(value: int) -> int:
    require_u256(value)
    return sum(d * d for d in _digits_lsd_first(value))


@operation(label="Digit sum in base", category=CATEGORY, description="Sum of digits of value written in base b.")
def digit_sum_base(value: int, base: int) -> int:
    require_u256(value, base)
    _require_base(base)
    total = 0
    while value:
        total += value % base
        value //= base
    return total


# --- Shape ---


@operation(label="Digit count", category=CATEGORY, description="Number of decimal digits (1 for 0).", oeis="A055642")
def digit_count(value: int) -> int:
    require_u256(value)
    count = 1
    while value >= 10:
        value //= 10
        count += 1
    return count


@operation(label="Leading digit", category=CATEGORY, oeis="A000030")
def leading_digit(value: int) -> int:
    require_u256(value)
    while value >= 10:
        value //= 10
    return value


@operation(label="Nth digit", category=CATEGORY,
           description="Digit at position i counted from the right (0-based); 0 past the end.")
def nth_digit(value: int, i: int) -> int:
    require_u256(value, i)
    if i >= 78:
        return 0
    return (value // 10**i) % 10


@operation(label="Count digit", category=CATEGORY, description="Occurrences of digit d in value.")
def count_digit(value: int, d: int) -> int:
    require_u256(value, d)
    if d > _ONE_DIGIT:
        raise MagnitudeBoundExceeded()
    return sum(1 for x in _digits_lsd_first(value) if x == d)


@operation(label="Reverse digits", category=CATEGORY,
           description="Decimal reversal; trailing zeros are dropped (120 → 21).", oeis="A004086")
def reverse_digits(value: int) -> int:
    require_u256(value)
    out = 0
    while value:
        out = out * 10 + value % 10
        value //= 10
    # reversal of a 78-digit word can leave the 256-bit range
    return word(out)


@operation(label="Palindrome", category=CATEGORY, description="Reads the same reversed.", oeis="A002113")
def is_palindrome(value: int) -> bool:
    require_u256(value)
    digits = _digits_lsd_first(value)
    return digits == digits[::-1]


@operation(label="Repdigit", category=CATEGORY, description="All digits equal.", oeis="A010785")
def is_repdigit(value: int) -> bool:
    require_u256(value)
    return len(set(_digits_lsd_first(value))) == 1


@operation(label="Non-decreasing digits", category=CATEGORY, oeis="A009994")
def is_digit_increasing(value: int) -> bool:
    require_u256(value)
    msd_first = _digits_lsd_first(value)[::-1]
    return all(a <= b for a, b in zip(msd_first, msd_first[1:]))


@operation(label="Rotate digits left", category=CATEGORY, description="Move the leading digit to the end (123 → 231).")
def rotate_digits_left(value: int) -> int:
    require_u256(value)
    n = digit_count(value)
    if n == 1:
        return value
    p = 10 ** (n - 1)
    lead, rest = divmod(value, p)
    return word(rest * 10 + lead)


@operation(label="Concatenate", category=CATEGORY, description="Decimal concatenation a‖b, fails on overflow.")
def concat_numbers(a: int, b: int) -> int:
    require_u256(a, b)
    return word(safe_mul(a, 10 ** digit_count(b)) + b)


# --- Classifications ---


@operation(label="Harshad", category=CATEGORY, description="Divisible by its digit sum.", oeis="A005349")
def is_harshad(value: int) -> bool:
    if value == 0:
        return False
    return value % digit_sum(value) == 0


@operation(label="Armstrong", category=CATEGORY,
           description="Equal to the sum of its digits each raised to the digit count.", oeis="A005188")
def is_armstrong(value: int) -> bool:
    require_u256(value)
    digits = _digits_lsd_first(value)
    k = len(digits)
    return sum(d ** k for d in digits) == value


@operation(label="Automorphic", category=CATEGORY, description="value² ends in value.", oeis="A003226")
def is_automorphic(value: int) -> bool:
    require_u256(value)
    return (value * value) % 10 ** digit_count(value) == value


@operation(label="Happy", category=CATEGORY,
           description="Iterating the sum of squared digits reaches 1.", oeis="A007770")
def is_happy(value: int) -> bool:
    require_u256(value)
    if value == 0:
        raise ZeroMagnitude()
    seen: set[int] = set()
    while value != 1 and value not in seen:
        seen.add(value)
        value = sum_of_digit_squares(value)
    return value == 1


# --- Triad digits ---


@operation(label="Contains triad digit", category=CATEGORY, description="Any digit in {3, 6, 9}.")
def contains_triad_digit(value: int) -> bool:
    require_u256(value)
    return any(d in TRIAD for d in _digits_lsd_first(value))


@operation(label="Count triad digits", category=CATEGORY, description="Number of digits in {3, 6, 9}.")
def count_triad_digits(value: int) -> int:
    require_u256(value)
    return sum(1 for d in _digits_lsd_first(value) if d in TRIAD)


@operation(label="Triad digit sum", category=CATEGORY, description="Sum of the digits that are 3, 6 or 9.")
def triad_digit_sum(value: int) -> int:
    require_u256(value)
    return sum(d for d in _digits_lsd_first(value) if d in TRIAD)
