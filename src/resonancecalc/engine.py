# -----------------------------------------------------------------------------
#  engine.py
#  Stateful resonance engine: roles, guarded entry points, events
# -----------------------------------------------------------------------------

"""
The engine owns one EngineState and an append-only event log.

Every entry point runs inside a transaction: the scalar counters and the log
length are saved on entry, and every map write is journalled with the value it
replaced. If anything raises, the journal is unwound and the counters put
back, so a failed call leaves no trace. Calls on one instance are serialised by a re-entrant mutex; guarded
entry points additionally hold a reentrancy flag that rejects nested entry
through the value-transfer hook.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any

from colorama import Fore

from resonancecalc.constants import MAX_MAGNITUDE, MAX_OPERANDS, MAX_PHASE, MAX_SLOTS, ZERO_ADDRESS
from resonancecalc.errors import (
    ArrayLengthMismatch,
    EmptyOperands,
    InvalidSlot,
    InvalidTriad,
    MagnitudeBoundExceeded,
    NotCurator,
    NotKeeper,
    NotOracle,
    PhaseOutOfRange,
    ReentrantCall,
    ZeroAddress,
    ZeroMagnitude,
)
from resonancecalc.operations.checked import require_u256
from resonancecalc.operations.digits import digital_root, is_triad_resonant
from resonancecalc.operations.triad import harmonic_flux, phase_of, super_calc, triad_sum, verify_triad
from resonancecalc.runtime import current as _rt_current
from resonancecalc.runtime import trace
from resonancecalc.utility import normalize_address

TransferHook = Callable[[str, int], None]

_MISSING = object()

ENTRY_POINTS = (
    "resolve_triad",
    "compute_flux",
    "store_harmonic",
    "set_magnitude_bound",
    "invoke_oracle",
    "update_phase_lock",
    "record_resonant_point",
    "execute_super_calc",
    "verify_and_emit_triad",
    "receive",
)


# --------------------------- Records ----------------------------------------


@dataclass(frozen=True)
class Roles:
    curator: str
    oracle: str
    keeper: str


@dataclass(frozen=True)
class CallContext:
    """What the host supplies with every call."""
    sender: str
    block_number: int = 0
    timestamp: int = 0
    value: int = 0


@dataclass(frozen=True)
class Event:
    name: str
    args: Mapping[str, Any]  # read-only view
    block_number: int
    sequence: int


@dataclass
class EngineState:
    magnitude_bound: int = MAX_MAGNITUDE
    current_phase: int = 0
    harmonic_slots: dict[int, int] = field(default_factory=dict)
    harmonic_slot_count: int = 0
    oracle_results: dict[int, int] = field(default_factory=dict)
    triad_resolution_count: int = 0
    flux_computation_count: int = 0
    oracle_call_count: int = 0
    resonant_point_count: int = 0
    super_calc_count: int = 0
    credited: dict[str, int] = field(default_factory=dict)  # default transfer ledger

    def copy(self) -> EngineState:
        out = EngineState(**{f.name: getattr(self, f.name) for f in fields(self)})
        out.harmonic_slots = dict(self.harmonic_slots)
        out.oracle_results = dict(self.oracle_results)
        out.credited = dict(self.credited)
        return out

    def scalars(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)
                if not isinstance(getattr(self, f.name), dict)}

    def restore_scalars(self, saved: dict[str, int]) -> None:
        # in place, so references held during a call stay valid
        for name, value in saved.items():
            setattr(self, name, value)


# --------------------------- Engine -----------------------------------------


class ResonanceEngine:
    def __init__(self, curator: str, oracle: str, keeper: str, deploy_timestamp: int = 0,
                 *, transfer: TransferHook | None = None) -> None:
        roles = Roles(
            curator=normalize_address(curator),
            oracle=normalize_address(oracle),
            keeper=normalize_address(keeper),
        )
        if ZERO_ADDRESS in (roles.curator, roles.oracle, roles.keeper):
            raise ZeroAddress()
        self._roles = roles
        self._state = EngineState(current_phase=phase_of(deploy_timestamp))
        self._events: list[Event] = []
        self._mutex = threading.RLock()
        self._locked = False
        self._transfer = transfer or self._credit
        # (map, key, replaced value) for every write inside the open transactions
        self._journal: list[tuple[dict, Any, Any]] = []
        self._depth = 0

    @classmethod
    def from_config(cls, *, transfer: TransferHook | None = None) -> ResonanceEngine:
        """Build an engine from the active profile's [ENGINE] section."""
        section = _rt_current().engine_section
        ts = section.get("DEPLOY_TIMESTAMP")
        if not isinstance(ts, int) or ts < 0:
            ts = int(time.time())
        return cls(
            section.get("CURATOR"),
            section.get("ORACLE"),
            section.get("KEEPER"),
            ts,
            transfer=transfer,
        )

    # ---- read side ----

    @property
    def roles(self) -> Roles:
        return self._roles

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def events(self) -> tuple[Event, ...]:
        with self._mutex:
            return tuple(self._events)

    def snapshot(self) -> EngineState:
        with self._mutex:
            return self._state.copy()

    @property
    def magnitude_bound(self) -> int:
        return self._state.magnitude_bound

    @property
    def current_phase(self) -> int:
        return self._state.current_phase

    @property
    def harmonic_slot_count(self) -> int:
        return self._state.harmonic_slot_count

    def get_harmonic(self, slot: int) -> int:
        require_u256(slot)
        if slot >= MAX_SLOTS:
            raise InvalidSlot()
        with self._mutex:
            return self._state.harmonic_slots.get(slot, 0)

    def get_last_oracle_result(self, query_id: int) -> int:
        require_u256(query_id)
        with self._mutex:
            return self._state.oracle_results.get(query_id, 0)

    # ---- call machinery ----

    @contextmanager
    def _transaction(self, entry: str) -> Iterator[EngineState]:
        with self._mutex:
            saved = self._state.scalars()
            mark = len(self._events)
            journal_mark = len(self._journal)
            self._depth += 1
            try:
                yield self._state
            except BaseException as exc:
                self._unwind(journal_mark)
                self._state.restore_scalars(saved)
                del self._events[mark:]
                trace(f"{entry} aborted: {type(exc).__name__}", color=Fore.RED)
                raise
            finally:
                self._depth -= 1
                if self._depth == 0:
                    self._journal.clear()

    def _unwind(self, mark: int) -> None:
        while len(self._journal) > mark:
            mapping, key, old = self._journal.pop()
            if old is _MISSING:
                del mapping[key]
            else:
                mapping[key] = old

    def _put(self, mapping: dict, key: Any, value: Any) -> None:
        if self._depth:
            self._journal.append((mapping, key, mapping.get(key, _MISSING)))
        mapping[key] = value

    @contextmanager
    def _nonreentrant(self) -> Iterator[None]:
        if self._locked:
            raise ReentrantCall()
        self._locked = True
        try:
            yield
        finally:
            self._locked = False

    def _emit(self, ctx: CallContext, name: str, **args: Any) -> Event:
        ev = Event(name=name, args=MappingProxyType(args), block_number=ctx.block_number,
                   sequence=len(self._events))
        self._events.append(ev)
        trace(f"event #{ev.sequence} {name} @ block {ev.block_number} {args}", color=Fore.CYAN)
        return ev

    def _credit(self, recipient: str, amount: int) -> None:
        ledger = self._state.credited
        self._put(ledger, recipient, ledger.get(recipient, 0) + amount)

    def _forward(self, amount: int) -> None:
        require_u256(amount)
        if amount == 0:
            return
        trace(f"forwarding {amount} to keeper {self._roles.keeper}")
        self._transfer(self._roles.keeper, amount)

    # ---- validation ----

    @staticmethod
    def _caller(ctx: CallContext) -> str:
        return normalize_address(ctx.sender)

    def _only(self, ctx: CallContext, role: str, denied: type[Exception]) -> str:
        caller = self._caller(ctx)
        if caller != role:
            raise denied()
        return caller

    def _within_bound(self, value: int) -> None:
        require_u256(value)
        if value > self._state.magnitude_bound:
            raise MagnitudeBoundExceeded()

    def _magnitude(self, value: int) -> None:
        require_u256(value)
        if value == 0:
            raise ZeroMagnitude()
        self._within_bound(value)

    @staticmethod
    def _phase(value: int) -> None:
        require_u256(value)
        if value > MAX_PHASE:
            raise PhaseOutOfRange()

    # ---- entry points ----

    def resolve_triad(self, ctx: CallContext, a: int, b: int, c: int) -> int:
        with self._transaction("resolve_triad") as st:
            caller = self._caller(ctx)
            for v in (a, b, c):
                self._magnitude(v)
            if not verify_triad(a, b, c):
                raise InvalidTriad()
            root = digital_root(triad_sum(a, b, c))
            st.triad_resolution_count += 1
            self._emit(ctx, "TriadResolved", caller=caller, a=a, b=b, c=c, root=root)
            return root

    def compute_flux(self, ctx: CallContext, magnitude: int, phase: int) -> int:
        with self._transaction("compute_flux") as st, self._nonreentrant():
            caller = self._caller(ctx)
            self._magnitude(magnitude)
            self._phase(phase)
            flux = harmonic_flux(magnitude, phase)
            st.flux_computation_count += 1
            self._emit(ctx, "FluxComputed", caller=caller, magnitude=magnitude, phase=phase, flux=flux)
            # value leaves while still locked
            self._forward(ctx.value)
            return flux

    def store_harmonic(self, ctx: CallContext, slot: int, value: int) -> None:
        with self._transaction("store_harmonic") as st, self._nonreentrant():
            self._only(ctx, self._roles.keeper, NotKeeper)
            require_u256(slot)
            if slot >= MAX_SLOTS:
                raise InvalidSlot()
            self._within_bound(value)
            old = st.harmonic_slots.get(slot, 0)
            self._put(st.harmonic_slots, slot, value)
            st.harmonic_slot_count = max(st.harmonic_slot_count, slot + 1)
            self._emit(ctx, "HarmonicStored", slot=slot, old=old, new=value)

    def set_magnitude_bound(self, ctx: CallContext, bound: int) -> None:
        with self._transaction("set_magnitude_bound") as st:
            curator = self._only(ctx, self._roles.curator, NotCurator)
            require_u256(bound)
            if bound > MAX_MAGNITUDE:
                raise MagnitudeBoundExceeded()
            old = st.magnitude_bound
            st.magnitude_bound = bound
            self._emit(ctx, "MagnitudeBoundUpdated", curator=curator, old=old, new=bound)

    def invoke_oracle(self, ctx: CallContext, query_id: int, result: int) -> None:
        with self._transaction("invoke_oracle") as st, self._nonreentrant():
            oracle = self._only(ctx, self._roles.oracle, NotOracle)
            require_u256(query_id)
            self._within_bound(result)
            self._put(st.oracle_results, query_id, result)
            st.oracle_call_count += 1
            self._emit(ctx, "OracleInvoked", oracle=oracle, query_id=query_id, result=result)

    def update_phase_lock(self, ctx: CallContext, phase: int) -> None:
        with self._transaction("update_phase_lock") as st:
            self._only(ctx, self._roles.keeper, NotKeeper)
            self._phase(phase)
            old = st.current_phase
            st.current_phase = phase
            self._emit(ctx, "PhaseLockUpdated", old=old, new=phase)

    def record_resonant_point(self, ctx: CallContext, value: int) -> int:
        """Append a resonant value at the next free slot; returns the slot."""
        with self._transaction("record_resonant_point") as st, self._nonreentrant():
            caller = self._caller(ctx)
            self._magnitude(value)
            if not is_triad_resonant(value):
                raise InvalidTriad()
            slot = st.harmonic_slot_count
            if slot >= MAX_SLOTS:
                raise InvalidSlot()
            self._put(st.harmonic_slots, slot, value)
            st.harmonic_slot_count = slot + 1
            st.resonant_point_count += 1
            self._emit(ctx, "ResonantPointRecorded", caller=caller, value=value, slot=slot,
                       root=digital_root(value))
            return slot

    def execute_super_calc(self, ctx: CallContext, operands: Sequence[int]) -> int:
        with self._transaction("execute_super_calc") as st:
            with self._nonreentrant():
                caller = self._caller(ctx)
                ops = list(operands)
                if not ops:
                    raise EmptyOperands()
                if len(ops) > MAX_OPERANDS:
                    raise ArrayLengthMismatch()
                for v in ops:
                    self._magnitude(v)
                result = super_calc(ops, st.current_phase)
                st.super_calc_count += 1
                self._emit(ctx, "SuperCalcExecuted", caller=caller, count=len(ops), result=result)
            # value leaves after the lock is released
            self._forward(ctx.value)
            return result

    def verify_and_emit_triad(self, ctx: CallContext, a: int, b: int, c: int) -> bool:
        with self._transaction("verify_and_emit_triad"):
            caller = self._caller(ctx)
            valid = verify_triad(a, b, c)
            self._emit(ctx, "TriadVerified", caller=caller, a=a, b=b, c=c, valid=valid)
            return valid

    def receive(self, ctx: CallContext) -> None:
        """Plain value transfer with no call attached: everything goes to the Keeper."""
        with self._transaction("receive"):
            sender = self._caller(ctx)
            require_u256(ctx.value)
            self._emit(ctx, "ValueForwarded", sender=sender, keeper=self._roles.keeper, amount=ctx.value)
            self._forward(ctx.value)
