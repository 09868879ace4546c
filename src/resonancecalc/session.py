# src/resonancecalc/session.py
"""
Interactive engine session: one ResonanceEngine plus the host-side call
context (current caller, block number and attached value) that the REPL
mutates with 'as', 'block' and 'value'.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from resonancecalc.engine import ENTRY_POINTS, CallContext, ResonanceEngine
from resonancecalc.expreval import parse_int
from resonancecalc.invoke import coerce_args
from resonancecalc.runtime import trace
from resonancecalc.utility import UserInputError, normalize_address

READ_ACCESSORS = ("get_harmonic", "get_last_oracle_result")
ROLE_NAMES = ("curator", "oracle", "keeper")


@dataclass
class Session:
    engine: ResonanceEngine
    caller: str = ""
    block_number: int = 1
    value: int = 0
    history: list[tuple[str, str]] = field(default_factory=list)   # (entry, outcome)

    def __post_init__(self) -> None:
        if not self.caller:
            self.caller = self.engine.roles.keeper

    @classmethod
    def from_config(cls) -> Session:
        return cls(ResonanceEngine.from_config())

    def context(self) -> CallContext:
        return CallContext(
            sender=self.caller,
            block_number=self.block_number,
            timestamp=int(time.time()),
            value=self.value,
        )

    def switch_caller(self, who: str) -> str:
        """'curator' / 'oracle' / 'keeper' or any hex address."""
        key = who.strip().lower()
        if key in ROLE_NAMES:
            self.caller = getattr(self.engine.roles, key)
        else:
            self.caller = normalize_address(key)
        return self.caller

    def role_of(self, address: str) -> str | None:
        for name in ROLE_NAMES:
            if getattr(self.engine.roles, name) == address:
                return name
        return None

    def set_block(self, text: str) -> int:
        n = parse_int(text)
        if n < 0:
            raise UserInputError("block number must be non-negative")
        self.block_number = n
        return n

    def set_value(self, text: str) -> int:
        n = parse_int(text)
        if n < 0:
            raise UserInputError("value must be non-negative")
        self.value = n
        return n

    def call(self, entry: str, raw_args: list[str]) -> Any:
        """Run one entry point (or read accessor) with the session context."""
        name = entry.strip().lower()
        if name not in ENTRY_POINTS and name not in READ_ACCESSORS:
            raise UserInputError(f"unknown entry point: {entry!r}")
        method = getattr(self.engine, name)
        if name in READ_ACCESSORS:
            return method(*coerce_args(method, raw_args))

        args = coerce_args(method, raw_args, skip=("ctx",))
        ctx = self.context()
        trace(f"call {name}{tuple(args)} as {ctx.sender} @ block {ctx.block_number} value={ctx.value}")
        try:
            result = method(ctx, *args)
        except Exception as e:
            self.history.append((name, type(e).__name__))
            raise
        self.history.append((name, "ok"))
        # blocks advance per successful mutating call
        self.block_number += 1
        return result
