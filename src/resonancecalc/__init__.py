from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("resonancecalc")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .config import has_profile, load_settings, read_current_profile
from .engine import CallContext, EngineState, Event, ResonanceEngine, Roles
from .errors import EngineError
from .invoke import invoke
from .registry import discover
from .runtime import APPLY, CFG
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "CFG",
    "CallContext",
    "EngineError",
    "EngineState",
    "Event",
    "ResonanceEngine",
    "Roles",
    "__version__",
    "discover",
    "has_profile",
    "invoke",
    "load_settings",
    "read_current_profile",
    "workspace_dir",
]
