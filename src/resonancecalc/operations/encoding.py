# -----------------------------------------------------------------------------
#  encoding.py
#  32-byte word packing, hex conversion and SHA3-256 hashing
# -----------------------------------------------------------------------------

from __future__ import annotations

import hashlib
import re

from resonancecalc.constants import DOMAIN_ID, U128_MAX, VERSION_ID, WORD_BITS
from resonancecalc.errors import ArithmeticOverflow, ArrayLengthMismatch, EmptyOperands
from resonancecalc.operations.checked import require_u256
from resonancecalc.registry import operation

CATEGORY = "Encoding and hashing"

WORD_BYTES = WORD_BITS // 8
_HEX_WORD = re.compile(rf"[0-9a-f]{{0,{WORD_BYTES * 2}}}")


def _digest(data: bytes) -> int:
    return int.from_bytes(hashlib.sha3_256(data).digest(), "big")


@operation(label="Encode packed", category=CATEGORY, description="Concatenate values as big-endian 32-byte words.")
def encode_packed(values: list[int]) -> bytes:
    if not values:
        raise EmptyOperands()
    require_u256(*values)
    return b"".join(v.to_bytes(WORD_BYTES, "big") for v in values)


@operation(label="Decode packed", category=CATEGORY, description="Split a byte string into 32-byte words.")
def decode_packed(data: bytes) -> list[int]:
    if not data:
        raise EmptyOperands()
    if len(data) % WORD_BYTES:
        raise ArrayLengthMismatch()
    return [int.from_bytes(data[i:i + WORD_BYTES], "big") for i in range(0, len(data), WORD_BYTES)]


@operation(label="Hash values", category=CATEGORY, description="SHA3-256 of the packed words, as a uint256.")
def hash_values(values: list[int]) -> int:
    return _digest(encode_packed(values))


@operation(label="Hash string", category=CATEGORY, description="SHA3-256 of the UTF-8 text, as a uint256.")
def hash_string(text: str) -> int:
    return _digest(text.encode("utf-8"))


@operation(label="Domain hash", category=CATEGORY, description="hash_values([DOMAIN_ID, VERSION_ID, value]).")
def domain_hash(value: int) -> int:
    return hash_values([DOMAIN_ID, VERSION_ID, value])


@operation(label="To hex", category=CATEGORY, description="0x-prefixed, zero-padded to 64 hex digits.")
def to_hex(value: int) -> str:
    require_u256(value)
    return f"0x{value:064x}"


@operation(label="From hex", category=CATEGORY, description="Parse up to 64 hex digits (0x prefix optional).")
def from_hex(text: str) -> int:
    s = text.strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    # no sign, no underscores, at most one word
    if not _HEX_WORD.fullmatch(s):
        raise ArithmeticOverflow()
    return int(s or "0", 16)


@operation(label="Pack pair", category=CATEGORY, description="hi << 128 | lo for two uint128 halves.")
def pack_pair(hi: int, lo: int) -> int:
    require_u256(hi, lo)
    if hi > U128_MAX or lo > U128_MAX:
        raise ArithmeticOverflow()
    return (hi << 128) | lo


@operation(label="Unpack pair", category=CATEGORY, description="(hi, lo) uint128 halves of a word.")
def unpack_pair(value: int) -> tuple[int, int]:
    require_u256(value)
    return value >> 128, value & U128_MAX
