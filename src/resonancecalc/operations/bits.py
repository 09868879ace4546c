# -----------------------------------------------------------------------------
#  bits.py
#  256-bit word bit manipulation
# -----------------------------------------------------------------------------

from __future__ import annotations

import gmpy2

from resonancecalc.constants import U256_MAX, WORD_BITS
from resonancecalc.errors import MagnitudeBoundExceeded, ZeroMagnitude
from resonancecalc.operations.checked import require_u256, word
from resonancecalc.registry import operation

CATEGORY = "Bit manipulation"

WORD_BYTES = WORD_BITS // 8


def _require_bit_index(i: int) -> None:
    require_u256(i)
    if i >= WORD_BITS:
        raise MagnitudeBoundExceeded()


@operation(label="Population count", category=CATEGORY, description="Number of set bits.", oeis="A000120")
def popcount(value: int) -> int:
    require_u256(value)
    return int(gmpy2.popcount(value))


@operation(label="Parity", category=CATEGORY, description="popcount mod 2 (1 = odd number of set bits).",
           oeis="A010060")
def parity(value: int) -> int:
    return popcount(value) & 1


@operation(label="Power of two", category=CATEGORY, description="Exactly one bit set.")
def is_power_of_two(value: int) -> bool:
    require_u256(value)
    return value != 0 and value & (value - 1) == 0


@operation(label="Next power of two", category=CATEGORY,
           description="Smallest 2^k ≥ value (1 for 0); fails above 2^255.")
def next_power_of_two(value: int) -> int:
    require_u256(value)
    if value <= 1:
        return 1
    return word(1 << (value - 1).bit_length())


@operation(label="Previous power of two", category=CATEGORY, description="Largest 2^k ≤ value, value > 0.")
def prev_power_of_two(value: int) -> int:
    require_u256(value)
    if value == 0:
        raise ZeroMagnitude()
    return 1 << (value.bit_length() - 1)


@operation(label="Rotate left", category=CATEGORY, description="Circular 256-bit rotation by k mod 256.")
def rotate_left(value: int, k: int) -> int:
    require_u256(value, k)
    k %= WORD_BITS
    return ((value << k) | (value >> (WORD_BITS - k))) & U256_MAX


@operation(label="Rotate right", category=CATEGORY, description="Circular 256-bit rotation by k mod 256.")
def rotate_right(value: int, k: int) -> int:
    require_u256(value, k)
    return rotate_left(value, (WORD_BITS - k % WORD_BITS) % WORD_BITS)


@operation(label="Bit length", category=CATEGORY)
def bit_length(value: int) -> int:
    require_u256(value)
    return value.bit_length()


@operation(label="Leading zeros", category=CATEGORY, description="Zero bits above the highest set bit (256 for 0).")
def leading_zeros(value: int) -> int:
    return WORD_BITS - bit_length(value)


@operation(label="Trailing zeros", category=CATEGORY, description="Zero bits below the lowest set bit (256 for 0).",
           oeis="A007814")
def trailing_zeros(value: int) -> int:
    require_u256(value)
    if value == 0:
        return WORD_BITS
    return int(gmpy2.bit_scan1(value))


@operation(label="Lowest set bit", category=CATEGORY, description="value & −value.", oeis="A006519")
def lowest_set_bit(value: int) -> int:
    require_u256(value)
    return value & -value


@operation(label="Test bit", category=CATEGORY)
def test_bit(value: int, i: int) -> bool:
    require_u256(value)
    _require_bit_index(i)
    return bool(gmpy2.bit_test(value, i))


@operation(label="Set bit", category=CATEGORY)
def set_bit(value: int, i: int) -> int:
    require_u256(value)
    _require_bit_index(i)
    return value | (1 << i)


@operation(label="Clear bit", category=CATEGORY)
def clear_bit(value: int, i: int) -> int:
    require_u256(value)
    _require_bit_index(i)
    return value & ~(1 << i) & U256_MAX


@operation(label="Toggle bit", category=CATEGORY)
def toggle_bit(value: int, i: int) -> int:
    require_u256(value)
    _require_bit_index(i)
    return value ^ (1 << i)


@operation(label="Bitwise NOT", category=CATEGORY, description="256-bit complement.")
def bitwise_not(value: int) -> int:
    require_u256(value)
    return U256_MAX ^ value


@operation(label="Reverse bits", category=CATEGORY, description="Mirror all 256 bit positions.")
def reverse_bits(value: int) -> int:
    require_u256(value)
    return int(f"{value:0{WORD_BITS}b}"[::-1], 2)


@operation(label="Shift left (checked)", category=CATEGORY, description="value << k, fails if bits fall off.")
def shift_left_checked(value: int, k: int) -> int:
    require_u256(value, k)
    if value == 0:
        return 0
    if k >= WORD_BITS:
        return word(U256_MAX + 1)
    return word(value << k)


@operation(label="Shift right", category=CATEGORY, description="value >> k (0 for k ≥ 256).")
def shift_right(value: int, k: int) -> int:
    require_u256(value, k)
    return value >> k if k < WORD_BITS else 0


@operation(label="Byte at", category=CATEGORY, description="Byte i of the big-endian 32-byte word (0 = most significant).")
def byte_at(value: int, i: int) -> int:
    require_u256(value, i)
    if i >= WORD_BYTES:
        raise MagnitudeBoundExceeded()
    return (value >> (8 * (WORD_BYTES - 1 - i))) & 0xFF


@operation(label="Gray code", category=CATEGORY, description="value ^ (value >> 1).", oeis="A003188")
def gray_code(value: int) -> int:
    require_u256(value)
    return value ^ (value >> 1)


@operation(label="Gray decode", category=CATEGORY, description="Inverse of the Gray code.", oeis="A006068")
def gray_decode(value: int) -> int:
    require_u256(value)
    out = value
    shift = 1
    while shift < WORD_BITS:
        out ^= out >> shift
        shift <<= 1
    return out
