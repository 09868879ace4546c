# src/resonancecalc/registry.py
from __future__ import annotations

import inspect
import sys
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from importlib import import_module
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path

from resonancecalc.utility import _token

# --------------------- Discovery → Index (immutable) ----------------------


@dataclass
class Index:
    funcs: dict[str, Callable]                 # operation name -> func
    labels: dict[str, str]                     # operation name -> display label
    categories: dict[str, str]                 # operation name -> category
    descriptions: dict[str, str]               # operation name -> short description
    oeis: dict[str, str | None]                # operation name -> A-code or None
    limits: dict[str, int] = field(default_factory=dict)

    def resolve(self, name: str) -> str | None:
        """Map a typed name (function name or label, any case/spacing) to an operation name."""
        if name in self.funcs:
            return name
        tok = _token(name)
        for op_name, label in self.labels.items():
            if _token(op_name) == tok or _token(label) == tok:
                return op_name
        return None


@dataclass
class DiscoveryReport:
    ws_loaded: list[tuple[str, int]] = field(default_factory=list)         # (filename.py, count)
    ws_failed: list[tuple[str, str]] = field(default_factory=list)         # (filename.py, error)
    pkg_loaded: list[tuple[str, int]] = field(default_factory=list)        # (module.name, count)
    pkg_failed: list[tuple[str, str]] = field(default_factory=list)        # (module.name, error)
    skipped_duplicates: list[tuple[str, str, str]] = field(default_factory=list)  # (name, skipped_source, kept_source)


def _is_operation(obj) -> bool:
    return callable(obj) and getattr(obj, "__is_operation__", False)


def _import_module_from_file(path: Path, name_hint: str):
    spec = spec_from_file_location(name_hint, path)
    if not spec or not spec.loader:
        raise ImportError(f"Cannot import {path}")
    mod = module_from_spec(spec)
    sys.modules[name_hint] = mod
    spec.loader.exec_module(mod)  # type: ignore[attr-defined]
    return mod


def _collect_from_module(mod) -> list[Callable]:
    # only functions defined in (or re-tagged by) this module, in source order
    out = []
    for _, o in inspect.getmembers(mod):
        if _is_operation(o) and getattr(o, "__module__", None) == mod.__name__:
            out.append(o)
    out.sort(key=lambda f: getattr(getattr(f, "__code__", None), "co_firstlineno", 0))
    return out


# ---------- Decorator (only tags the function; no side effects) ----------


def operation(*, label: str, category: str, description: str = "",
              oeis: str | None = None, limit: int | None = None):
    def deco(fn: Callable):
        fn.__is_operation__ = True
        fn.label = label
        fn.category = category
        fn.description = description
        if oeis is not None:
            fn.oeis = oeis
        if limit is not None:
            fn.limit = int(limit)
        return fn
    return deco


def _package_modules() -> list[str]:
    pkg_dir = pkg_files("resonancecalc") / "operations"
    with as_file(pkg_dir) as real:
        return [
            f"resonancecalc.operations.{file.stem}"
            for file in sorted(Path(real).glob("*.py"))
            if file.name != "__init__.py"
        ]


def discover_with_report(workspace: Path | None = None) -> tuple[Index, DiscoveryReport]:
    """
    Discover operations from the workspace plug-in folder and the package.
    Workspace modules are read first; a name they define shadows the packaged one.
    """
    report = DiscoveryReport()

    funcs: OrderedDict[str, Callable] = OrderedDict()
    labels: dict[str, str] = {}
    cats: dict[str, str] = {}
    desc: dict[str, str] = {}
    refs: dict[str, str | None] = {}
    limits: dict[str, int] = {}
    source_of: dict[str, str] = {}

    def _add_from_module(mod, source_name: str) -> int:
        found = 0
        for fn in _collect_from_module(mod):
            name = fn.__name__
            if name in funcs:
                report.skipped_duplicates.append((name, source_name, source_of[name]))
                continue
            funcs[name] = fn
            labels[name] = getattr(fn, "label", name)
            cats[name] = getattr(fn, "category", "General")
            desc[name] = getattr(fn, "description", "")
            refs[name] = getattr(fn, "oeis", None)
            lim = getattr(fn, "limit", None)
            if isinstance(lim, int):
                limits[name] = lim
            source_of[name] = source_name
            found += 1
        return found

    # 1) Workspace (*.py)
    if workspace:
        ws_dir = workspace / "operations"
        if ws_dir.is_dir():
            for file in sorted(ws_dir.glob("*.py")):
                if file.name == "__init__.py":
                    continue
                modname = f"_rc_user_ops_{file.stem}"
                try:
                    mod = _import_module_from_file(file, modname)
                    report.ws_loaded.append((file.name, _add_from_module(mod, f"ws:{file.name}")))
                except Exception as e:
                    # a broken plug-in must not take the catalogue down
                    report.ws_failed.append((file.name, f"{type(e).__name__}: {e}"))

    # 2) Packaged (resonancecalc.operations.*)
    for modname in _package_modules():
        mod = import_module(modname)
        report.pkg_loaded.append((modname, _add_from_module(mod, f"pkg:{modname}")))

    idx = Index(
        funcs=funcs,
        labels=labels,
        categories=cats,
        descriptions=desc,
        oeis=refs,
        limits=limits,
    )
    return idx, report


def discover(workspace: Path | None = None) -> Index:
    """Discover operations; workspace overrides package by name."""
    idx, _ = discover_with_report(workspace)
    return idx
