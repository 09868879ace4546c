from __future__ import annotations

import os
import shutil
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path

SUBDIRS = ("profiles", "operations")


def workspace_dir() -> Path:
    env = os.environ.get("RESONANCE_HOME")
    if env:
        return Path(env).expanduser().resolve()
    return (Path.home() / "Documents" / "ResonanceCalc").resolve()


def _should_copy_file(p: Path, sub: str) -> bool:
    # Skip caches/compiled/temporary/hidden files
    if any(part == "__pycache__" for part in p.parts):
        return False
    if p.suffix.lower() in {".pyc", ".pyo"}:
        return False
    if p.name.endswith("~") or p.name.startswith("."):
        return False
    if sub == "profiles":
        return p.suffix.lower() == ".toml"
    return p.suffix.lower() == ".py" and p.name != "__init__.py"


def _copy_tree(src: Path, dst: Path, *, overwrite: bool, sub: str) -> int:
    count = 0
    if not src.exists():
        return 0
    for p in src.rglob("*"):
        if not p.is_file():
            continue
        if not _should_copy_file(p, sub):
            continue
        target = dst / p.relative_to(src)
        target.parent.mkdir(parents=True, exist_ok=True)
        if overwrite or not target.exists():
            shutil.copy2(p, target)
            count += 1
    return count


def seed_workspace(*, overwrite: bool = False) -> tuple[Path, dict[str, int]]:
    """
    Create the workspace folders and copy the packaged profiles into it.

    overwrite=False → copy-if-missing (normal users)
    overwrite=True  → force replace (dev use, guarded in CLI)

    The operations/ folder is created empty; it holds user plug-in modules.

    Returns: (workspace_path, {section: files_copied})
    """
    root = workspace_dir()
    for sub in SUBDIRS:
        (root / sub).mkdir(parents=True, exist_ok=True)

    copied = {k: 0 for k in SUBDIRS}
    ref = pkg_files("resonancecalc") / "profiles"
    with as_file(ref) as real:
        copied["profiles"] = _copy_tree(Path(real), root / "profiles", overwrite=overwrite, sub="profiles")
    return root, copied


def ensure_workspace_seeded() -> tuple[Path, bool, dict[str, int]]:
    root, copied = seed_workspace(overwrite=False)
    return root, any(copied.values()), copied
