"""
Shared fixtures.

- Put the project root on ``sys.path`` so ``import mdprompt`` resolves
- Set test environment variables for every test (autouse)
- Reset process-wide state: settings cache, default passes, import hook
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate each test from the developer's environment."""
    from mdprompt.compiler.importer import uninstall_import_hook
    from mdprompt.compiler.passes import reset_default_passes
    from mdprompt.config import clear_settings_cache

    for name in [
        "MDPROMPT_TARGET",
        "MDPROMPT_COLLAPSE_WHITESPACE",
        "MDPROMPT_DEFAULT_PASSES",
        "MDPROMPT_LOG_FILE",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MDPROMPT_ENVIRONMENT", "testing")

    clear_settings_cache()
    reset_default_passes()
    try:
        yield
    finally:
        uninstall_import_hook()
        reset_default_passes()
        clear_settings_cache()


@pytest.fixture
def engine():
    """CompilerEngine with the TypeScript target."""
    from mdprompt.compiler import CompilerEngine

    return CompilerEngine("typescript")


@pytest.fixture
def python_engine():
    """CompilerEngine with the Python target."""
    from mdprompt.compiler import CompilerEngine

    return CompilerEngine("python")


@pytest.fixture
def load_module():
    """Execute generated Python source and return its namespace."""

    def _load(code: str) -> dict:
        namespace: dict = {}
        exec(compile(code, "<generated>", "exec"), namespace)
        return namespace

    return _load
