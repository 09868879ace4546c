# -----------------------------------------------------------------------------
#  checked.py
#  Checked 256-bit arithmetic, full-width flag variants and fixed-point scaling
# -----------------------------------------------------------------------------

from __future__ import annotations

from resonancecalc.constants import BASE, MAX_MAGNITUDE, SCALE, U256_MAX, WORD_BITS
from resonancecalc.errors import ArithmeticOverflow, DivisionByZero
from resonancecalc.registry import operation

CATEGORY = "Checked arithmetic"
FIXED_POINT = "Fixed-point scaling"

_MODULUS = 1 << WORD_BITS


# --- Guards ---


def require_u256(*xs: int) -> None:
    """Reject any operand outside [0, 2**256)."""
    for x in xs:
        if x < 0 or x > U256_MAX:
            raise ArithmeticOverflow()


def word(x: int) -> int:
    """Return x if it fits a 256-bit word, else fail with ArithmeticOverflow."""
    if x < 0 or x > U256_MAX:
        raise ArithmeticOverflow()
    return x


def require_divisor(d: int) -> None:
    if d == 0:
        raise DivisionByZero()


# --- Checked primitives ---


@operation(label="Safe add", category=CATEGORY, description="a + b, fails on overflow.")
def safe_add(a: int, b: int) -> int:
    require_u256(a, b)
    return word(a + b)


@operation(label="Safe sub", category=CATEGORY, description="a − b, fails when b > a.")
def safe_sub(a: int, b: int) -> int:
    require_u256(a, b)
    return word(a - b)


@operation(label="Safe mul", category=CATEGORY, description="a × b, fails on overflow.")
def safe_mul(a: int, b: int) -> int:
    require_u256(a, b)
    return word(a * b)


@operation(label="Safe div", category=CATEGORY, description="⌊a / b⌋, fails on b = 0.")
def safe_div(a: int, b: int) -> int:
    require_u256(a, b)
    require_divisor(b)
    return a // b


@operation(label="Safe mod", category=CATEGORY, description="a mod b, fails on b = 0.")
def safe_mod(a: int, b: int) -> int:
    require_u256(a, b)
    require_divisor(b)
    return a % b


@operation(label="Safe pow", category=CATEGORY, description="base^exp, fails on overflow.")
def safe_pow(base: int, exp: int) -> int:
    require_u256(base, exp)
    if base in (0, 1):
        return 1 if exp == 0 else base
    # any exponent ≥ 256 overflows for base ≥ 2
    if exp >= WORD_BITS:
        raise ArithmeticOverflow()
    result = 1
    for _ in range(exp):
        result = word(result * base)
    return result


@operation(label="Mul-div", category=CATEGORY,
           description="⌊a×b / d⌋ with a full 512-bit intermediate; fails on d = 0 or overflowing quotient.")
def mul_div(a: int, b: int, d: int) -> int:
    require_u256(a, b, d)
    require_divisor(d)
    return word((a * b) // d)


@operation(label="Mul-div (round up)", category=CATEGORY, description="⌈a×b / d⌉.")
def mul_div_up(a: int, b: int, d: int) -> int:
    require_u256(a, b, d)
    require_divisor(d)
    q, r = divmod(a * b, d)
    return word(q + (1 if r else 0))


@operation(label="Ceiling division", category=CATEGORY, description="⌈a / b⌉.")
def ceil_div(a: int, b: int) -> int:
    require_u256(a, b)
    require_divisor(b)
    return -(-a // b)


@operation(label="Add mod", category=CATEGORY, description="(a + b) mod m without intermediate overflow.")
def add_mod(a: int, b: int, m: int) -> int:
    require_u256(a, b, m)
    require_divisor(m)
    return (a + b) % m


@operation(label="Mul mod", category=CATEGORY, description="(a × b) mod m on a 512-bit intermediate.")
def mul_mod(a: int, b: int, m: int) -> int:
    require_u256(a, b, m)
    require_divisor(m)
    return (a * b) % m


@operation(label="Absolute difference", category=CATEGORY, description="|a − b|.")
def abs_diff(a: int, b: int) -> int:
    require_u256(a, b)
    return a - b if a >= b else b - a


@operation(label="Average", category=CATEGORY, description="⌊(a + b) / 2⌋ without overflow.")
def average(a: int, b: int) -> int:
    require_u256(a, b)
    return (a & b) + ((a ^ b) >> 1)


@operation(label="Minimum of two", category=CATEGORY)
def min_of(a: int, b: int) -> int:
    require_u256(a, b)
    return a if a <= b else b


@operation(label="Maximum of two", category=CATEGORY)
def max_of(a: int, b: int) -> int:
    require_u256(a, b)
    return a if a >= b else b


@operation(label="Clamp to bound", category=CATEGORY, description="min(x, bound).")
def clamp_to_bound(x: int, bound: int) -> int:
    require_u256(x, bound)
    return x if x <= bound else bound


@operation(label="Within magnitude", category=CATEGORY, description="x ≤ MAX_MAGNITUDE (10^36).")
def is_within_magnitude(x: int) -> bool:
    require_u256(x)
    return x <= MAX_MAGNITUDE


# --- Full-width variants: report instead of reject ---


@operation(label="Full add", category=CATEGORY,
           description="(a + b) mod 2^256 and a carry flag.")
def full_add(a: int, b: int) -> tuple[int, bool]:
    require_u256(a, b)
    s = a + b
    return s % _MODULUS, s > U256_MAX


@operation(label="Full sub", category=CATEGORY,
           description="(a − b) mod 2^256 and a borrow flag.")
def full_sub(a: int, b: int) -> tuple[int, bool]:
    require_u256(a, b)
    return (a - b) % _MODULUS, b > a


@operation(label="Full mul", category=CATEGORY,
           description="(a × b) mod 2^256 and an overflow flag.")
def full_mul(a: int, b: int) -> tuple[int, bool]:
    require_u256(a, b)
    p = a * b
    return p % _MODULUS, p > U256_MAX


@operation(label="Full mul (wide)", category=CATEGORY,
           description="a × b as a (high, low) pair of 256-bit words.")
def full_mul_wide(a: int, b: int) -> tuple[int, int]:
    require_u256(a, b)
    p = a * b
    return p >> WORD_BITS, p & U256_MAX


@operation(label="Saturating add", category=CATEGORY, description="a + b capped at 2^256 − 1.")
def saturating_add(a: int, b: int) -> int:
    require_u256(a, b)
    return min(a + b, U256_MAX)


@operation(label="Saturating sub", category=CATEGORY, description="a − b floored at 0.")
def saturating_sub(a: int, b: int) -> int:
    require_u256(a, b)
    return a - b if a >= b else 0


@operation(label="Saturating mul", category=CATEGORY, description="a × b capped at 2^256 − 1.")
def saturating_mul(a: int, b: int) -> int:
    require_u256(a, b)
    return min(a * b, U256_MAX)


# --- Fixed point (SCALE = 1e18) ---


@operation(label="To scaled", category=FIXED_POINT, description="x × 10^18.")
def to_scaled(x: int) -> int:
    return safe_mul(x, SCALE)


@operation(label="From scaled", category=FIXED_POINT, description="⌊x / 10^18⌋.")
def from_scaled(x: int) -> int:
    require_u256(x)
    return x // SCALE


@operation(label="Scaled mul", category=FIXED_POINT, description="⌊a×b / 10^18⌋.")
def scaled_mul(a: int, b: int) -> int:
    return mul_div(a, b, SCALE)


@operation(label="Scaled div", category=FIXED_POINT, description="⌊a×10^18 / b⌋.")
def scaled_div(a: int, b: int) -> int:
    return mul_div(a, SCALE, b)


@operation(label="Scaled pow", category=FIXED_POINT,
           description="x^n for an 18-decimal fixed-point x, by squaring.")
def scaled_pow(x: int, n: int) -> int:
    require_u256(x, n)
    result = SCALE
    base = x
    while n:
        if n & 1:
            result = scaled_mul(result, base)
        n >>= 1
        if n:
            base = scaled_mul(base, base)
    return result


@operation(label="Scaled fraction", category=FIXED_POINT, description="num / den as an 18-decimal fixed-point value.")
def scaled_fraction(num: int, den: int) -> int:
    return mul_div(num, SCALE, den)


@operation(label="Percent of", category=FIXED_POINT, description="⌊value × pct / 100⌋.")
def percent_of(value: int, pct: int) -> int:
    return mul_div(value, pct, 100)


@operation(label="Basis points of", category=FIXED_POINT, description="⌊value × bps / 10000⌋.")
def basis_points_of(value: int, bps: int) -> int:
    return mul_div(value, bps, 10_000)


@operation(label="Scale by base", category=FIXED_POINT, description="x × 369.")
def scale_by_base(x: int) -> int:
    return safe_mul(x, BASE)


@operation(label="Round down to multiple", category=FIXED_POINT, description="Largest multiple of m ≤ x.")
def round_to_multiple(x: int, m: int) -> int:
    require_u256(x, m)
    require_divisor(m)
    return x - x % m


@operation(label="Round up to multiple", category=FIXED_POINT, description="Smallest multiple of m ≥ x.")
def round_up_to_multiple(x: int, m: int) -> int:
    require_u256(x, m)
    require_divisor(m)
    r = x % m
    return x if r == 0 else word(x + (m - r))


@operation(label="Is multiple of", category=FIXED_POINT, description="m divides x.")
def is_multiple_of(x: int, m: int) -> bool:
    require_u256(x, m)
    require_divisor(m)
    return x % m == 0
