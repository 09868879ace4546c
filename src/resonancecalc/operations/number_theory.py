# -----------------------------------------------------------------------------
#  number_theory.py
#  GCD/LCM, modular arithmetic, integer roots, primes and divisors
# -----------------------------------------------------------------------------

from __future__ import annotations

from sympy import divisor_count, divisor_sigma, factorint, integer_nthroot, isprime, nextprime, primefactors, primepi

from resonancecalc.errors import DivisionByZero, MagnitudeBoundExceeded, ZeroMagnitude
from resonancecalc.operations.checked import mul_div, require_divisor, require_u256, safe_add, safe_mul, safe_pow, word
from resonancecalc.operations.digits import digit_count
from resonancecalc.registry import operation

CATEGORY = "Number theory"
ROOTS = "Integer roots"
PRIMES = "Primes and divisors"

TOTIENT_TRIAL_LIMIT = 100
PRIME_COUNT_LIMIT = 10**7
FACTOR_LIMIT = 10**30


# --- Helpers ---


def _newton_isqrt(n: int) -> int:
    """
    Newton iteration from (n + 1) // 2; stops as soon as the next iterate is
    not strictly smaller and returns the last strictly decreasing value.
    """
    if n == 0:
        return 0
    x = (n + 1) // 2
    y = (x + n // x) // 2
    while y < x:
        x = y
        y = (x + n // x) // 2
    return x


# --- GCD family ---


@operation(label="GCD", category=CATEGORY, description="Greatest common divisor (Euclid).", oeis="A003989")
def gcd(a: int, b: int) -> int:
    require_u256(a, b)
    while b:
        a, b = b, a % b
    return a


@operation(label="LCM", category=CATEGORY,
           description="a×b / gcd(a, b); 0 if either is 0; a×b must not overflow.", oeis="A003990")
def lcm(a: int, b: int) -> int:
    require_u256(a, b)
    if a == 0 or b == 0:
        return 0
    return safe_mul(a, b) // gcd(a, b)


@operation(label="Coprime", category=CATEGORY, description="gcd(a, b) = 1.")
def is_coprime(a: int, b: int) -> bool:
    return gcd(a, b) == 1


@operation(label="Modular exponentiation", category=CATEGORY,
           description="base^exp mod m by square-and-multiply on double-width intermediates.")
def pow_mod(base: int, exp: int, mod: int) -> int:
    require_u256(base, exp, mod)
    require_divisor(mod)
    result = 1 % mod
    base %= mod
    while exp:
        if exp & 1:
            result = (result * base) % mod
        base = (base * base) % mod
        exp >>= 1
    return result


@operation(label="Modular inverse", category=CATEGORY,
           description="x with a×x ≡ 1 (mod m); fails when m = 0 or gcd(a, m) ≠ 1.")
def mod_inverse(a: int, m: int) -> int:
    require_u256(a, m)
    require_divisor(m)
    if m == 1:
        return 0
    old_r, r = a % m, m
    old_s, s = 1, 0
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
    if old_r != 1:
        raise DivisionByZero()
    return old_s % m


@operation(label="Totient (approx.)", category=CATEGORY,
           description="Euler φ over prime factors ≤ 100 only; larger prime factors are ignored.")
def totient_approx(n: int) -> int:
    require_u256(n)
    result = n
    rest = n
    for p in range(2, TOTIENT_TRIAL_LIMIT + 1):
        if rest == 0 or p > rest:
            break
        if rest % p == 0:
            result -= result // p
            while rest % p == 0:
                rest //= p
    return result


@operation(label="Harmonic mean", category=CATEGORY, description="⌊2ab / (a + b)⌋.")
def harmonic_mean_approx(a: int, b: int) -> int:
    return mul_div(safe_mul(a, 2), b, safe_add(a, b))


# --- Integer roots ---


@operation(label="Square root (floor)", category=ROOTS, description="⌊√n⌋ by Newton's method.", oeis="A000196")
def sqrt_floor(n: int) -> int:
    require_u256(n)
    return _newton_isqrt(n)


@operation(label="Geometric mean", category=ROOTS, description="⌊√(a×b)⌋; a×b must not overflow.")
def geometric_mean_approx(a: int, b: int) -> int:
    return _newton_isqrt(safe_mul(a, b))


@operation(label="Perfect square", category=ROOTS,
           description="The Newton fixed point squared equals n; 0 counts.", oeis="A000290")
def is_perfect_square(n: int) -> bool:
    require_u256(n)
    r = _newton_isqrt(n)
    return r * r == n


@operation(label="Cube root (floor)", category=ROOTS, oeis="A048766")
def cbrt_floor(n: int) -> int:
    require_u256(n)
    return int(integer_nthroot(n, 3)[0])


@operation(label="Perfect cube", category=ROOTS, oeis="A000578")
def is_perfect_cube(n: int) -> bool:
    require_u256(n)
    return bool(integer_nthroot(n, 3)[1])


@operation(label="Nth root (floor)", category=ROOTS, description="⌊n^(1/k)⌋; k = 0 is a division by zero.")
def nth_root_floor(n: int, k: int) -> int:
    require_u256(n, k)
    require_divisor(k)
    return int(integer_nthroot(n, k)[0])


@operation(label="Integer log2", category=ROOTS, description="⌊log2 v⌋ for v > 0.")
def ilog2(value: int) -> int:
    require_u256(value)
    if value == 0:
        raise ZeroMagnitude()
    return value.bit_length() - 1


@operation(label="Integer log10", category=ROOTS, description="⌊log10 v⌋ for v > 0.")
def ilog10(value: int) -> int:
    require_u256(value)
    if value == 0:
        raise ZeroMagnitude()
    return digit_count(value) - 1


@operation(label="Power of ten", category=ROOTS, description="10^k, fails above 10^77.")
def pow10(k: int) -> int:
    return safe_pow(10, k)


# --- Sequences ---


@operation(label="Fibonacci", category=CATEGORY, description="F(n) with F(0) = 0, checked.", oeis="A000045")
def fibonacci(n: int) -> int:
    require_u256(n)
    a, b = 0, 1
    for _ in range(n):
        a, b = b, safe_add(a, b)
    return a


@operation(label="Lucas", category=CATEGORY, description="L(n) with L(0) = 2, L(1) = 1, checked.", oeis="A000032")
def lucas(n: int) -> int:
    require_u256(n)
    a, b = 2, 1
    for _ in range(n):
        a, b = b, safe_add(a, b)
    return a


@operation(label="Fibonacci member", category=CATEGORY, description="5v² ± 4 is a perfect square.")
def is_fibonacci(value: int) -> bool:
    require_u256(value)
    t = 5 * value * value
    for c in (t + 4, t - 4):
        if c >= 0:
            r = _newton_isqrt(c)
            if r * r == c:
                return True
    return False


@operation(label="Collatz steps", category=CATEGORY,
           description="Steps of n → n/2 | 3n+1 to reach 1; fails if a term overflows.", oeis="A006577",
           limit=10**30)
def collatz_steps(n: int) -> int:
    require_u256(n)
    if n == 0:
        raise ZeroMagnitude()
    steps = 0
    while n != 1:
        n = n // 2 if n % 2 == 0 else word(3 * n + 1)
        steps += 1
    return steps


# --- Primes & divisors (sympy) ---


@operation(label="Prime", category=PRIMES, description="Deterministic primality test.", oeis="A000040")
def is_prime(n: int) -> bool:
    require_u256(n)
    return bool(isprime(n))


@operation(label="Next prime", category=PRIMES, description="Smallest prime > n, fails past 2^256.")
def next_prime(n: int) -> int:
    require_u256(n)
    return word(int(nextprime(n)))


@operation(label="Prime count", category=PRIMES, description="π(n), number of primes ≤ n (n ≤ 10^7).",
           oeis="A000720")
def prime_count_upto(n: int) -> int:
    require_u256(n)
    if n > PRIME_COUNT_LIMIT:
        raise MagnitudeBoundExceeded()
    return int(primepi(n))


def _require_positive(n: int) -> None:
    require_u256(n)
    if n == 0:
        raise ZeroMagnitude()


@operation(label="Smallest prime factor", category=PRIMES, description="1 for n = 1.", oeis="A020639",
           limit=FACTOR_LIMIT)
def smallest_prime_factor(n: int) -> int:
    _require_positive(n)
    return min(primefactors(n), default=1)


@operation(label="Largest prime factor", category=PRIMES, description="1 for n = 1.", oeis="A006530",
           limit=FACTOR_LIMIT)
def largest_prime_factor(n: int) -> int:
    _require_positive(n)
    return max(primefactors(n), default=1)


@operation(label="Divisor count", category=PRIMES, description="τ(n).", oeis="A000005", limit=FACTOR_LIMIT)
def count_divisors(n: int) -> int:
    _require_positive(n)
    return int(divisor_count(n))


@operation(label="Divisor sum", category=PRIMES, description="σ(n), checked.", oeis="A000203", limit=FACTOR_LIMIT)
def sum_of_divisors(n: int) -> int:
    _require_positive(n)
    return word(int(divisor_sigma(n)))


@operation(label="Perfect number", category=PRIMES, description="σ(n) = 2n.", oeis="A000396", limit=FACTOR_LIMIT)
def is_perfect_number(n: int) -> bool:
    _require_positive(n)
    return int(divisor_sigma(n)) == 2 * n


@operation(label="Squarefree", category=PRIMES, description="No prime factor appears twice.", oeis="A005117",
           limit=FACTOR_LIMIT)
def is_square_free(n: int) -> bool:
    _require_positive(n)
    return all(e == 1 for e in factorint(n).values())


@operation(label="Radical", category=PRIMES, description="Product of the distinct prime factors.", oeis="A007947",
           limit=FACTOR_LIMIT)
def radical(n: int) -> int:
    _require_positive(n)
    out = 1
    for p in primefactors(n):
        out *= int(p)
    return out
