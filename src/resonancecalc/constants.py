# src/resonancecalc/constants.py
from __future__ import annotations

import hashlib
from typing import Final

# --- Word envelope ----------------------------------------------------------

WORD_BITS: Final[int] = 256
U256_MAX: Final[int] = (1 << WORD_BITS) - 1
U128_MAX: Final[int] = (1 << 128) - 1

# --- Engine constants -------------------------------------------------------

BASE: Final[int] = 369
TRIAD_A: Final[int] = 3
TRIAD_B: Final[int] = 6
TRIAD_C: Final[int] = 9
TRIAD: Final[frozenset[int]] = frozenset({TRIAD_A, TRIAD_B, TRIAD_C})
TRIAD_SUM: Final[int] = TRIAD_A + TRIAD_B + TRIAD_C   # 18, phase seed modulus

SCALE: Final[int] = 10**18
MAX_MAGNITUDE: Final[int] = 10**36
MAX_PHASE: Final[int] = 365 * 24 * 60 * 60
MAX_SLOTS: Final[int] = 999
MAX_OPERANDS: Final[int] = 32

ZERO_ADDRESS: Final[str] = "0x" + "0" * 40

DOMAIN_TAG: Final[str] = "ResonanceCalculatorEngine"
VERSION_TAG: Final[str] = "1"


def _digest_word(text: str) -> int:
    return int.from_bytes(hashlib.sha3_256(text.encode("utf-8")).digest(), "big")


DOMAIN_ID: Final[int] = _digest_word(DOMAIN_TAG)
VERSION_ID: Final[int] = _digest_word(VERSION_TAG)
