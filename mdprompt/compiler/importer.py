"""Import hook compiling ``.md`` files into Python modules on import.

After ``install_import_hook()``, ``import prompts.greeting`` loads
``prompts/greeting.md`` when no regular module of that name exists. The
resulting module exposes ``render(values)`` or, for documents without
placeholders, ``TEMPLATE``.
"""

from __future__ import annotations

import asyncio
import importlib.abc
import importlib.util
import sys
from collections.abc import Callable, Coroutine, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import ModuleType
from typing import Any, TypeVar

from mdprompt.utils.mixins import LoggerMixin

from .engine import CompilerEngine
from .loader import MARKDOWN_SUFFIX
from .targets import PythonTarget

T = TypeVar("T")


def run_sync(factory: Callable[[], Coroutine[Any, Any, T]]) -> T:
    """Run a coroutine to completion from synchronous code.

    Uses a worker thread when the calling thread already runs an event loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(factory())

    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(lambda: asyncio.run(factory())).result()


class MarkdownModuleLoader(importlib.abc.Loader, LoggerMixin):
    """Compile one Markdown file and execute it as a module"""

    def __init__(self, path: Path, engine: CompilerEngine):
        self.path = path
        self.engine = engine

    def create_module(self, spec) -> ModuleType | None:
        return None

    def exec_module(self, module: ModuleType) -> None:
        artifact = run_sync(
            lambda: self.engine.compile_file(self.path, target=PythonTarget.name)
        )
        code = compile(artifact.code, str(self.path), "exec")
        module.__dict__["__markdown_source__"] = str(self.path)
        exec(code, module.__dict__)
        self.logger.debug("Imported markdown module", module=module.__name__)


class MarkdownFinder(importlib.abc.MetaPathFinder):
    """Locate ``<name>.md`` files on the package or system path"""

    def __init__(self, engine: CompilerEngine | None = None):
        self.engine = engine or CompilerEngine(PythonTarget())

    def find_spec(
        self,
        fullname: str,
        path: Sequence[str] | None,
        target: ModuleType | None = None,
    ):
        name = fullname.rpartition(".")[2]
        search_path = sys.path if path is None else path

        for entry in search_path:
            candidate = Path(entry or ".") / f"{name}{MARKDOWN_SUFFIX}"
            if candidate.is_file():
                return importlib.util.spec_from_file_location(
                    fullname,
                    candidate,
                    loader=MarkdownModuleLoader(candidate, self.engine),
                )
        return None


def install_import_hook(engine: CompilerEngine | None = None) -> MarkdownFinder:
    """Register the Markdown finder after the standard finders (idempotent)"""
    for finder in sys.meta_path:
        if isinstance(finder, MarkdownFinder):
            return finder
    finder = MarkdownFinder(engine)
    sys.meta_path.append(finder)
    return finder


def uninstall_import_hook() -> bool:
    """Remove every registered Markdown finder; return True if one was found"""
    finders = [finder for finder in sys.meta_path if isinstance(finder, MarkdownFinder)]
    for finder in finders:
        sys.meta_path.remove(finder)
    return bool(finders)
