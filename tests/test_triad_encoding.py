# tests/test_triad_encoding.py
"""
Triad kernels, phase arithmetic, word packing and hashing.

Run: pytest -v tests/test_triad_encoding.py
"""

from __future__ import annotations

import hashlib

import pytest

from resonancecalc.constants import (
    BASE,
    DOMAIN_ID,
    DOMAIN_TAG,
    MAX_MAGNITUDE,
    MAX_PHASE,
    U128_MAX,
    U256_MAX,
    VERSION_ID,
    VERSION_TAG,
)
from resonancecalc.errors import ArithmeticOverflow, ArrayLengthMismatch, EmptyOperands, PhaseOutOfRange
from resonancecalc.operations import encoding as E
from resonancecalc.operations import triad as T

TRIAD_GRID = [(a, b, c) for a in (1, 2, 3, 10, 2**200) for b in (0, 1, 5) for c in (1, 4, 9)]

TEST_CASES = [
    (T.verify_triad, (1, 1, 1), True),
    (T.verify_triad, (1, 1, 2), False),
    (T.triad_sum, (3, 6, 9), 18),
    (T.triad_product, (3, 6, 9), 162),
    (T.harmonic_flux, (1, 0), BASE),
    (T.harmonic_flux, (MAX_MAGNITUDE, 0), 0),
    (T.harmonic_flux, (2, MAX_PHASE), (2 * BASE * (MAX_PHASE + 1)) % MAX_MAGNITUDE),
    (T.super_calc, ([3, 6, 9], 0), 119556),
    (T.super_calc, ([3, 6, 9], 7), 119563),
    (T.resonance_score, (12,), 1),
    (T.resonance_score, (15,), 2),
    (T.resonance_score, (18,), 3),
    (T.resonance_score, (10,), 0),
    (T.resonance_score, (0,), 0),
    (T.next_resonant, (10,), 12),
    (T.next_resonant, (0,), 3),
    (T.next_resonant, (3,), 3),
    (T.align_to_base, (1,), BASE),
    (T.align_to_base, (BASE,), BASE),
    (T.align_to_base, (0,), 0),
    (T.is_base_aligned, (738,), True),
    (T.is_base_aligned, (739,), False),
    (T.phase_of, (1_700_000_000,), 8),
    (T.phase_distance, (0, MAX_PHASE), 1),
    (T.phase_distance, (10, 3), 7),
]
TEST_IDS = [f"{fn.__name__}{args}"[:60] for fn, args, _ in TEST_CASES]


@pytest.mark.parametrize("fn,args,expected", TEST_CASES, ids=TEST_IDS)
def test_triad_values(fn, args, expected):
    assert fn(*args) == expected


@pytest.mark.parametrize("a,b,c", TRIAD_GRID)
def test_verify_triad_is_sum_divisibility(a, b, c):
    assert T.verify_triad(a, b, c) == ((a + b + c) % 3 == 0)


def test_vortex_cycle():
    assert [T.vortex_digit(n) for n in range(7)] == [1, 2, 4, 8, 7, 5, 1]


@pytest.mark.parametrize("fn,args,err", [
    (T.verify_triad, (U256_MAX, 1, 0), ArithmeticOverflow),
    (T.super_calc, ([], 0), EmptyOperands),
    (T.harmonic_flux, (U256_MAX, 0), ArithmeticOverflow),
    (T.phase_distance, (MAX_PHASE + 1, 0), PhaseOutOfRange),
], ids=["triad-overflow", "super-calc-empty", "flux-overflow", "phase-range"])
def test_triad_failures(fn, args, err):
    with pytest.raises(err):
        fn(*args)


# ---------------------------- encoding ---------------------------------------


def test_domain_identifiers():
    assert E.hash_string(DOMAIN_TAG) == DOMAIN_ID
    assert E.hash_string(VERSION_TAG) == VERSION_ID
    assert E.domain_hash(5) == E.hash_values([DOMAIN_ID, VERSION_ID, 5])


def test_hash_values_is_sha3_of_packed_words():
    expected = int.from_bytes(hashlib.sha3_256((1).to_bytes(32, "big")).digest(), "big")
    assert E.hash_values([1]) == expected
    assert E.hash_values([1, 2]) != E.hash_values([2, 1])


def test_packed_words():
    data = E.encode_packed([1, U256_MAX])
    assert len(data) == 64
    assert data[:32] == b"\x00" * 31 + b"\x01"
    assert E.decode_packed(data) == [1, U256_MAX]


@pytest.mark.parametrize("fn,args,err", [
    (E.encode_packed, ([],), EmptyOperands),
    (E.encode_packed, ([U256_MAX + 1],), ArithmeticOverflow),
    (E.decode_packed, (b"",), EmptyOperands),
    (E.decode_packed, (b"\x00" * 31,), ArrayLengthMismatch),
    (E.from_hex, ("1" * 65,), ArithmeticOverflow),
    (E.from_hex, ("-0x1",), ArithmeticOverflow),
    (E.from_hex, ("0x_f",), ArithmeticOverflow),
    (E.from_hex, ("0xzz",), ArithmeticOverflow),
    (E.from_hex, ("0x 1",), ArithmeticOverflow),
    (E.pack_pair, (U128_MAX + 1, 0), ArithmeticOverflow),
    (E.pack_pair, (0, U128_MAX + 1), ArithmeticOverflow),
], ids=["encode-empty", "encode-range", "decode-empty", "decode-ragged", "hex-long", "hex-negative",
      "hex-underscore", "hex-non-digit", "hex-inner-space", "pack-hi", "pack-lo"])
def test_encoding_failures(fn, args, err):
    with pytest.raises(err):
        fn(*args)


def test_hex_and_pairs():
    assert E.to_hex(255) == "0x" + "0" * 62 + "ff"
    assert E.from_hex("0xFF") == 255
    assert E.from_hex("0x") == 0
    assert E.from_hex(E.to_hex(U256_MAX)) == U256_MAX
    assert E.pack_pair(1, 2) == (1 << 128) | 2
    assert E.unpack_pair(E.pack_pair(U128_MAX, 7)) == (U128_MAX, 7)
