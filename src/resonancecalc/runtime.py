# runtime.py
from __future__ import annotations

import sys
from contextvars import ContextVar
from dataclasses import dataclass, field
from importlib.util import find_spec
from typing import TYPE_CHECKING, Any

from colorama import Fore, Style

if TYPE_CHECKING:
    from resonancecalc.config import Settings

DEFAULT_MAX_DIGITS = 200


@dataclass
class Runtime:
    """Settings of the active profile plus the switches the REPL can flip."""
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    debug: bool = False  # '[debug]' trace lines on STDERR
    fast_mode: bool = True  # honour per-operation input limits
    max_digits: int = DEFAULT_MAX_DIGITS  # largest decimal literal parse_int accepts

    def apply(self, settings: Settings | dict[str, Any]) -> None:
        """Load a profile (or a bare settings dict) and refresh the switches."""
        if isinstance(settings, dict):
            self.profile_name = "default"
            self.settings = dict(settings)
        else:
            self.profile_name = settings.name
            self.settings = dict(settings.as_dict())

        behaviour = self.settings.get("BEHAVIOUR") or {}
        if isinstance(behaviour.get("FAST_MODE"), bool):
            self.fast_mode = behaviour["FAST_MODE"]
        if isinstance(behaviour.get("DEBUG"), bool):
            self.debug = behaviour["DEBUG"]
        lim = behaviour.get("MAX_DIGITS")
        if isinstance(lim, int) and not isinstance(lim, bool) and lim > 0:
            self.max_digits = lim

    @property
    def engine_section(self) -> dict[str, Any]:
        """The [ENGINE] table: role addresses and the deploy timestamp."""
        return self.settings.get("ENGINE") or {}

    @property
    def enabled_categories(self) -> dict[str, bool]:
        return self.settings.get("CATEGORIES") or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Support dotted lookups, e.g., 'ENGINE.KEEPER'."""
        if not key:
            return default
        cur = self.settings
        if isinstance(key, str) and "." in key:
            for part in key.split("."):
                if isinstance(cur, dict) and part in cur:
                    cur = cur[part]
                else:
                    return default
            return cur
        return cur.get(key, default)


# --- Context management ---

_current_runtime: ContextVar[Runtime | None] = ContextVar("resonancecalc_runtime", default=None)


def current() -> Runtime:
    rt = _current_runtime.get()
    if rt is None:
        rt = Runtime()
        _current_runtime.set(rt)
    return rt


def APPLY(settings: Settings | dict[str, Any]) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)


def trace(msg: str, *, color: str = "") -> None:
    """Write a '[debug]' line to STDERR when the active runtime is in debug mode."""
    if not current().debug:
        return
    tag = f"{Style.DIM}[debug]{Style.RESET_ALL}"
    body = f"{color}{msg}{Style.RESET_ALL}" if color else msg
    sys.stderr.write(f"{tag} {body}\n")
    sys.stderr.flush()


# ---- Dependency check --------------------------------------------------------

def ensure_runtime_deps(strict: bool = True) -> bool:
    """
    Verify core runtime deps are available. Uses find_spec() so nothing is
    imported here.
    If strict=True, prints a friendly error and returns False when missing.
    """
    required = ("sympy", "gmpy2")
    missing = [name for name in required if find_spec(name) is None]

    if not missing:
        return True

    msg = (
        f"{Fore.RED}{Style.BRIGHT}\nMissing dependencies:{Style.RESET_ALL} "
        + ", ".join(missing)
        + "\nInstall with: "
        + f"{Fore.YELLOW}pip install " + " ".join(missing) + f"{Style.RESET_ALL}"
    )
    print(msg)
    return not strict
