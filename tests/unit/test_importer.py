"""Test importing Markdown files as Python modules"""

import asyncio
import importlib
import sys

import pytest

from mdprompt.compiler.importer import (
    MarkdownFinder,
    install_import_hook,
    run_sync,
    uninstall_import_hook,
)


@pytest.fixture
def prompt_dir(tmp_path, monkeypatch):
    """Directory on sys.path with Markdown prompts; imported modules are dropped afterwards"""
    monkeypatch.syspath_prepend(str(tmp_path))
    before = set(sys.modules)
    yield tmp_path
    for name in set(sys.modules) - before:
        sys.modules.pop(name, None)
    importlib.invalidate_caches()


class TestImportHook:
    """Finder registration and module execution"""

    def test_import_template(self, prompt_dir):
        (prompt_dir / "mdprompt_greeting_prompt.md").write_text(
            "# Hi\n\nHello **{name}**, you are {age#}.", encoding="utf-8"
        )
        install_import_hook()
        importlib.invalidate_caches()

        module = importlib.import_module("mdprompt_greeting_prompt")

        assert module.render({"name": "Bob", "age": 3}) == "Hi Hello Bob, you are 3."
        assert module.__markdown_source__.endswith("mdprompt_greeting_prompt.md")

    def test_import_static(self, prompt_dir):
        (prompt_dir / "mdprompt_static_prompt.md").write_text(
            "Plain *text*", encoding="utf-8"
        )
        install_import_hook()
        importlib.invalidate_caches()

        module = importlib.import_module("mdprompt_static_prompt")
        assert module.TEMPLATE == "Plain text"

    def test_import_from_package(self, prompt_dir):
        package = prompt_dir / "mdprompt_prompt_pkg"
        package.mkdir()
        (package / "__init__.py").write_text("", encoding="utf-8")
        (package / "welcome.md").write_text("Welcome {user?}", encoding="utf-8")
        install_import_hook()
        importlib.invalidate_caches()

        module = importlib.import_module("mdprompt_prompt_pkg.welcome")
        assert module.render({}) == "Welcome "

    def test_not_found_without_hook(self, prompt_dir):
        (prompt_dir / "mdprompt_unhooked_prompt.md").write_text("x", encoding="utf-8")
        with pytest.raises(ModuleNotFoundError):
            importlib.import_module("mdprompt_unhooked_prompt")

    def test_install_is_idempotent(self):
        first = install_import_hook()
        second = install_import_hook()
        assert first is second
        assert sum(isinstance(f, MarkdownFinder) for f in sys.meta_path) == 1

    def test_uninstall(self):
        install_import_hook()
        assert uninstall_import_hook() is True
        assert uninstall_import_hook() is False


class TestRunSync:
    """Running the async pipeline from synchronous code"""

    def test_without_running_loop(self):
        async def answer():
            return 42

        assert run_sync(answer) == 42

    @pytest.mark.asyncio
    async def test_inside_running_loop(self):
        async def answer():
            await asyncio.sleep(0)
            return "ok"

        assert run_sync(answer) == "ok"
