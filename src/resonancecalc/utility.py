# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
import re
import shutil
import sys


class UserInputError(Exception):
    pass


def dec_digits(n: int) -> int:
    """Exact decimal digit count without str(); handles n >= 0."""
    n = abs(n)
    if n == 0:
        return 1
    # floor(log10(n)) ~= floor(bitlen*log10(2)), 0.30103 ~ log10(2)
    est = (n.bit_length() * 30103) // 100000
    p10 = 10 ** est
    if n < p10:
        while n < p10:
            est -= 1
            p10 //= 10
    else:
        p10 *= 10
        while n >= p10:
            est += 1
            p10 *= 10
    return est + 1


def _token(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", name).upper().strip("_")


def clear_screen(keep_scrollback: bool = False) -> None:
    """
    Clear the terminal screen.
    - On Windows: uses 'cls'
    - On POSIX: ANSI sequences; optionally clear scrollback
    """
    try:
        if os.name == "nt":
            os.system("cls")
        else:
            seq = "\033[H\033[2J" if keep_scrollback else "\033[3J\033[H\033[2J"
            sys.stdout.write(seq)
            sys.stdout.flush()
    except Exception:
        pass


def get_terminal_width(default=80):
    """
    Return the terminal's character width if detected, else the default
    value (80 by default).
    """
    try:
        return shutil.get_terminal_size().columns
    except Exception:
        return default


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out


def normalize_address(addr: object) -> str:
    """
    Canonical lowercase '0x' + 40 hex digits form of an address.
    None, '' and '0' collapse to the zero address; anything that is not
    hex raises UserInputError.
    """
    if addr is None:
        return "0x" + "0" * 40
    if isinstance(addr, int):
        if addr < 0 or addr >= 1 << 160:
            raise UserInputError(f"address out of range: {addr}")
        return f"0x{addr:040x}"
    s = str(addr).strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    if not s:
        s = "0"
    if not re.fullmatch(r"[0-9a-f]{1,40}", s):
        raise UserInputError(f"not a hex address: {addr!r}")
    return "0x" + s.zfill(40)
