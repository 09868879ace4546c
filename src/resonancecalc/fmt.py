# src/resonancecalc/fmt.py
from __future__ import annotations

import re
import textwrap
from collections.abc import Mapping
from typing import Any

from colorama import Fore, Style

from resonancecalc.runtime import CFG
from resonancecalc.utility import dec_digits, get_terminal_width

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def abbr_int_fast(n: int, head: int = 10, tail: int = 10, threshold: int = 35, ellipsis: str = "…") -> str:
    """Abbreviate very large ints as first<head>…last<tail> without str(n)."""
    if not isinstance(n, int) or isinstance(n, bool):
        return str(n)
    if n == 0:
        return "0"

    sign = "-" if n < 0 else ""
    a = -n if n < 0 else n

    d = dec_digits(a)
    if d <= threshold or head + tail >= d:
        return sign + str(a)

    first = a // 10 ** (d - head)
    last = a % 10 ** tail
    return f"{sign}{first}{ellipsis}{last:0{tail}d}"


def strip_ansi(s: str | None) -> str:
    """Return s with ANSI escape sequences removed."""
    return "" if s is None else ANSI_RE.sub("", s)


def visible_len(s: str | None) -> int:
    """Printable length (without ANSI)."""
    return len(strip_ansi(s))


def format_int(n: int) -> str:
    """Integer rendering honouring [FORMATTING] (abbreviation and hex companion)."""
    if CFG("FORMATTING.ABBREVIATE", True):
        head = CFG("FORMATTING.HEAD_DIGITS", 12)
        tail = CFG("FORMATTING.TAIL_DIGITS", 12)
        threshold = CFG("FORMATTING.THRESHOLD_DIGITS", 40)
        text = abbr_int_fast(n, head, tail, threshold)
    else:
        text = str(n)
    if CFG("FORMATTING.SHOW_HEX", False) and n >= 0:
        text += f" {Style.DIM}(0x{n:x}){Style.RESET_ALL}"
    return text


def format_value(value: Any) -> str:
    """One-line, coloured rendering of an operation result."""
    if isinstance(value, bool):
        color = Fore.GREEN if value else Fore.RED
        return f"{color}{Style.BRIGHT}{'true' if value else 'false'}{Style.RESET_ALL}"
    if isinstance(value, int):
        return f"{Fore.WHITE}{Style.BRIGHT}{format_int(value)}{Style.RESET_ALL}"
    if isinstance(value, (bytes, bytearray)):
        return f"0x{bytes(value).hex()}" if value else "0x"
    if isinstance(value, tuple):
        return "(" + ", ".join(format_value(v) for v in value) + ")"
    if isinstance(value, list):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    if value is None:
        return f"{Style.DIM}—{Style.RESET_ALL}"
    return str(value)


def format_args(args: Mapping[str, Any]) -> str:
    return ", ".join(f"{k}={strip_ansi(format_value(v))}" for k, v in args.items())


def wrap_description(prefix: str, desc: str, *, width: int | None = None, indent_cols: int = 4) -> str:
    """Wrap 'prefix — desc' to the terminal width, hanging continuation lines."""
    width = width or max(60, get_terminal_width())
    head = f"{prefix} — " if desc else prefix
    if not desc:
        return head
    avail = max(20, width - visible_len(head))
    chunks = textwrap.wrap(desc, avail) or [""]
    pad = " " * indent_cols
    return head + chunks[0] + "".join(f"\n{pad}{c}" for c in chunks[1:])
