# -----------------------------------------------------------------------------
#  triad.py
#  Triad checks, flux / super-calc kernels and phase arithmetic
# -----------------------------------------------------------------------------

from __future__ import annotations

from resonancecalc.constants import BASE, MAX_MAGNITUDE, MAX_PHASE, TRIAD, TRIAD_SUM
from resonancecalc.errors import EmptyOperands, PhaseOutOfRange
from resonancecalc.operations.checked import require_u256, round_up_to_multiple, safe_add, safe_mul, word
from resonancecalc.operations.digits import digital_root
from resonancecalc.registry import operation

CATEGORY = "Triad resonance"

_SCORES = {3: 1, 6: 2, 9: 3}


@operation(label="Verify triad", category=CATEGORY, description="(a + b + c) mod 3 = 0.")
def verify_triad(a: int, b: int, c: int) -> bool:
    return triad_sum(a, b, c) % 3 == 0


@operation(label="Triad sum", category=CATEGORY, description="a + b + c, checked.")
def triad_sum(a: int, b: int, c: int) -> int:
    return safe_add(safe_add(a, b), c)


@operation(label="Triad product", category=CATEGORY, description="a × b × c, checked.")
def triad_product(a: int, b: int, c: int) -> int:
    return safe_mul(safe_mul(a, b), c)


@operation(label="Base aligned", category=CATEGORY, description="Multiple of 369.")
def is_base_aligned(value: int) -> bool:
    require_u256(value)
    return value % BASE == 0


@operation(label="Align to base", category=CATEGORY, description="Smallest multiple of 369 ≥ value.")
def align_to_base(value: int) -> int:
    return round_up_to_multiple(value, BASE)


@operation(label="Resonance score", category=CATEGORY,
           description="1, 2 or 3 for a digital root of 3, 6 or 9; otherwise 0.")
def resonance_score(value: int) -> int:
    return _SCORES.get(digital_root(value), 0)


@operation(label="Next resonant", category=CATEGORY, description="Smallest w ≥ value whose digital root is 3, 6 or 9.")
def next_resonant(value: int) -> int:
    require_u256(value)
    w = value
    while digital_root(w) not in TRIAD:
        w = word(w + 1)
    return w


@operation(label="Vortex digit", category=CATEGORY,
           description="Digital root of 2^n: the doubling cycle 1, 2, 4, 8, 7, 5.")
def vortex_digit(n: int) -> int:
    require_u256(n)
    return pow(2, n, 9)


@operation(label="Harmonic flux", category=CATEGORY,
           description="magnitude × 369 × (phase + 1), wrapped into [0, 10^36).")
def harmonic_flux(magnitude: int, phase: int) -> int:
    require_u256(magnitude, phase)
    raw = safe_mul(safe_mul(magnitude, BASE), safe_add(phase, 1))
    return raw % MAX_MAGNITUDE


@operation(label="Super calc", category=CATEGORY,
           description="(Σ 369·xᵢ) × (Σ digital roots) + phase, wrapped into [0, 10^36).")
def super_calc(operands: list[int], phase: int) -> int:
    if not operands:
        raise EmptyOperands()
    require_u256(*operands)
    require_u256(phase)
    weighted = 0
    roots = 0
    for x in operands:
        weighted = safe_add(weighted, safe_mul(x, BASE))
        roots += digital_root(x)
    return safe_add(safe_mul(weighted, roots), phase) % MAX_MAGNITUDE


@operation(label="Phase seed", category=CATEGORY, description="timestamp mod 18 (the triad sum).")
def phase_of(timestamp: int) -> int:
    require_u256(timestamp)
    return timestamp % TRIAD_SUM


@operation(label="Phase distance", category=CATEGORY,
           description="Circular distance between two phases on the [0, MAX_PHASE] cycle.")
def phase_distance(a: int, b: int) -> int:
    require_u256(a, b)
    if a > MAX_PHASE or b > MAX_PHASE:
        raise PhaseOutOfRange()
    d = a - b if a >= b else b - a
    return min(d, MAX_PHASE + 1 - d)
