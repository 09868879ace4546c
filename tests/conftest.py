# tests/conftest.py
from __future__ import annotations

import pytest

from resonancecalc.registry import discover
from resonancecalc.runtime import Runtime, _current_runtime
from resonancecalc.workspace import ensure_workspace_seeded, workspace_dir


@pytest.fixture(scope="session", autouse=True)
def resonance_home(tmp_path_factory):
    """Point the workspace at a throw-away directory for the whole run."""
    root = tmp_path_factory.mktemp("resonance_home")
    mp = pytest.MonkeyPatch()
    mp.setenv("RESONANCE_HOME", str(root))
    yield root
    mp.undo()


@pytest.fixture(autouse=True)
def fresh_runtime():
    """Every test starts from an empty runtime (no profile, debug off, fast mode on)."""
    token = _current_runtime.set(Runtime())
    yield
    _current_runtime.reset(token)


@pytest.fixture(scope="session")
def index(resonance_home):
    """Seed workspace (if needed) and discover operations once."""
    ensure_workspace_seeded()
    return discover(workspace_dir())
