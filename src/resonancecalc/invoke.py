# src/resonancecalc/invoke.py
from __future__ import annotations

import inspect
import sys
import time
import typing
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from colorama import Fore, Style

from resonancecalc.errors import EngineError
from resonancecalc.expreval import parse_bytes, parse_int, parse_int_list
from resonancecalc.fmt import abbr_int_fast, get_terminal_width, visible_len
from resonancecalc.registry import Index
from resonancecalc.runtime import current as _rt_current
from resonancecalc.utility import UserInputError, _token

# ---------- Data model --------------------------------------------------------


@dataclass
class Invocation:
    name: str
    label: str
    category: str
    args: list[Any]
    value: Any = None
    skipped: str | None = None       # reason, when the call was not made
    elapsed_ms: float = 0.0


# ---------- Helpers -----------------------------------------------------------


def _fmt_ms(ms: float) -> str:
    return f"{ms:6.2f} ms"


def _print_debug_result(label: str, status: str, dt_ms: float, detail: str | None = None) -> None:
    """Emit a single debug line with timing and colored status (to STDERR)."""
    if status == "OK":
        stat = f"{Fore.GREEN}{Style.BRIGHT}OK  {Style.RESET_ALL}"
    elif status == "SKIP":
        stat = f"{Fore.YELLOW}{Style.BRIGHT}SKIP{Style.RESET_ALL}"
    else:
        stat = f"{Fore.RED}{Style.BRIGHT}ERR {Style.RESET_ALL}"

    tm = f"{Style.DIM}[{_fmt_ms(dt_ms)}]{Style.RESET_ALL}"
    line = f"{tm} {stat}  {label}"

    if detail:
        width = max(60, get_terminal_width())
        max_tail = max(10, width - visible_len(line) - 5)
        d = str(detail)
        if len(d) > max_tail:
            d = d[: max_tail - 1] + "…"
        line += f" : {Style.DIM}{d}{Style.RESET_ALL}"

    sys.stderr.write(line + "\n")
    sys.stderr.flush()


def _converter(annotation: Any) -> Callable[[str], Any]:
    if annotation in (int, inspect.Parameter.empty):
        return parse_int
    if annotation is str:
        return str
    if annotation is bytes:
        return parse_bytes
    origin = typing.get_origin(annotation)
    if origin in (list, tuple, Sequence) or annotation in (list, tuple):
        return parse_int_list
    return parse_int


def coerce_args(fn: Callable, raw: list[str], *, skip: tuple[str, ...] = ()) -> list[Any]:
    """Convert command-line strings into the types the function's signature asks for."""
    try:
        hints = typing.get_type_hints(fn)
    except (NameError, TypeError):
        hints = {}
    params = [p for p in inspect.signature(fn).parameters.values()
              if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.name not in skip]
    if len(raw) != len(params):
        names = " ".join(f"<{p.name}>" for p in params)
        raise UserInputError(f"{fn.__name__} takes {len(params)} argument(s): {names}")
    return [_converter(hints.get(p.name, p.annotation))(text) for p, text in zip(params, raw)]


def enabled_operations(index: Index) -> list[str]:
    """Operation names whose category is not switched off in [CATEGORIES]."""
    cats = _rt_current().enabled_categories
    off = {_token(str(k)) for k, v in cats.items() if v is False}
    return [name for name in index.funcs if _token(index.categories.get(name, "")) not in off]


def _largest_int(args: list[Any]) -> int | None:
    ints: list[int] = []
    for a in args:
        if isinstance(a, bool):
            continue
        if isinstance(a, int):
            ints.append(a)
        elif isinstance(a, (list, tuple)):
            ints.extend(x for x in a if isinstance(x, int))
    return max(ints) if ints else None


# ---------- Main API ----------------------------------------------------------


def invoke(index: Index, name: str, raw_args: list[str]) -> Invocation:
    """
    Resolve, coerce and run one catalogue operation.
      * per-operation limit honoured unless fast_mode=False (→ skipped)
      * KeyboardInterrupt skips the call
      * EngineError propagates after the debug ERR line
    """
    op_name = index.resolve(name)
    if op_name is None:
        raise UserInputError(f"unknown operation: {name!r} (try 'list')")
    if op_name not in enabled_operations(index):
        raise UserInputError(f"'{index.labels[op_name]}' is disabled in the current profile")

    fn = index.funcs[op_name]
    label = index.labels.get(op_name, op_name)
    inv = Invocation(op_name, label, index.categories.get(op_name, "General"), coerce_args(fn, raw_args))

    rt = _rt_current()
    lim = index.limits.get(op_name)
    big = _largest_int(inv.args)
    if rt.fast_mode and lim is not None and big is not None and big > lim:
        inv.skipped = f"input > {abbr_int_fast(lim, 10, 10, 30)} (disable BEHAVIOUR.FAST_MODE to force)"
        if rt.debug:
            _print_debug_result(label, "SKIP", 0.0, inv.skipped)
        return inv

    t0 = time.perf_counter()
    try:
        inv.value = fn(*inv.args)
    except KeyboardInterrupt:
        inv.skipped = "aborted by user (Ctrl-C)"
        if rt.debug:
            _print_debug_result(label, "SKIP", 0.0, inv.skipped)
        return inv
    except EngineError as e:
        if rt.debug:
            _print_debug_result(label, "ERR", (time.perf_counter() - t0) * 1000.0, type(e).__name__)
        raise
    inv.elapsed_ms = (time.perf_counter() - t0) * 1000.0
    if rt.debug:
        _print_debug_result(label, "OK", inv.elapsed_ms)
    return inv
