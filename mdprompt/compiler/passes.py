"""Text passes run by the stringifier ahead of formatting removal.

A pass is any callable taking the current text and returning the new text,
either directly or as an awaitable. ``PassPipeline`` runs passes strictly in
order, awaiting each one before starting the next.

The process-wide default passes are used when a stringify call does not name
its own. They are configured once at start-up (from ``set_default_passes`` or
the ``MDPROMPT_DEFAULT_PASSES`` setting) and become read-only after
``freeze_default_passes``.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Iterable, Sequence
from threading import RLock

from mdprompt.config import get_settings
from mdprompt.errors import PassConfigurationError, PassExecutionError
from mdprompt.utils.mixins import LoggerMixin

from .base import ITextPass

FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\n.*?\n---[ \t]*(?:\n|\Z)", re.DOTALL)
HTML_COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.DOTALL)


def strip_frontmatter(text: str) -> str:
    """Drop a leading ``---`` delimited YAML frontmatter block."""
    return FRONTMATTER_PATTERN.sub("", text, count=1)


def strip_html_comments(text: str) -> str:
    """Drop ``<!-- ... -->`` comments."""
    return HTML_COMMENT_PATTERN.sub("", text)


BUILTIN_PASSES: dict[str, ITextPass] = {
    "strip_frontmatter": strip_frontmatter,
    "strip_html_comments": strip_html_comments,
}


def pass_name(text_pass: object) -> str:
    """Name used for a pass in logs and errors."""
    return getattr(text_pass, "__name__", None) or type(text_pass).__name__


def resolve_passes(names: Iterable[str]) -> tuple[ITextPass, ...]:
    """Look up built-in passes by name."""
    passes = []
    for name in names:
        if name not in BUILTIN_PASSES:
            available = ", ".join(sorted(BUILTIN_PASSES))
            raise PassConfigurationError(
                f"Unknown pass '{name}'. Available passes: {available}"
            )
        passes.append(BUILTIN_PASSES[name])
    return tuple(passes)


class PassPipeline(LoggerMixin):
    """Ordered, sequential composition of text passes"""

    def __init__(self, passes: Sequence[ITextPass | None] = ()):
        kept = []
        for position, text_pass in enumerate(passes):
            if text_pass is None:
                self.logger.debug("Skipping empty pass entry", position=position)
                continue
            kept.append(text_pass)
        self.passes: tuple[ITextPass, ...] = tuple(kept)

    def __len__(self) -> int:
        return len(self.passes)

    async def run(self, text: str, *, source_name: str | None = None) -> str:
        """Run every pass over ``text`` in order and return the result.

        Raises
        ------
        PassExecutionError
            When a pass raises or returns something other than ``str``.
            The original exception is chained as ``__cause__``.
        """
        for index, text_pass in enumerate(self.passes):
            name = pass_name(text_pass)
            try:
                result = text_pass(text)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as exc:
                self.logger.error(
                    "Stringifier pass failed",
                    pass_name=name,
                    index=index,
                    error=str(exc),
                )
                raise PassExecutionError(
                    f"Pass '{name}' failed: {exc}",
                    pass_name=name,
                    index=index,
                    source_name=source_name,
                ) from exc

            if not isinstance(result, str):
                raise PassExecutionError(
                    f"Pass '{name}' returned {type(result).__name__}, expected str",
                    pass_name=name,
                    index=index,
                    source_name=source_name,
                )
            text = result

        return text


_DEFAULT_PASSES_LOCK = RLock()
_DEFAULT_PASSES: tuple[ITextPass, ...] | None = None
_DEFAULT_PASSES_FROZEN = False


def set_default_passes(passes: Sequence[ITextPass]) -> tuple[ITextPass, ...]:
    """Replace the process-wide default passes.

    Raises
    ------
    PassConfigurationError
        If the defaults were already frozen.
    """

    global _DEFAULT_PASSES

    with _DEFAULT_PASSES_LOCK:
        if _DEFAULT_PASSES_FROZEN:
            raise PassConfigurationError(
                "Default passes are frozen and can no longer be changed"
            )
        _DEFAULT_PASSES = tuple(passes)
        return _DEFAULT_PASSES


def get_default_passes() -> tuple[ITextPass, ...]:
    """Return the default passes, loading them from settings on first use."""

    global _DEFAULT_PASSES

    with _DEFAULT_PASSES_LOCK:
        if _DEFAULT_PASSES is None:
            _DEFAULT_PASSES = resolve_passes(get_settings().default_passes)
        return _DEFAULT_PASSES


def freeze_default_passes() -> tuple[ITextPass, ...]:
    """Make the default passes read-only for the rest of the process."""

    global _DEFAULT_PASSES_FROZEN

    with _DEFAULT_PASSES_LOCK:
        passes = get_default_passes()
        _DEFAULT_PASSES_FROZEN = True
        return passes


def reset_default_passes() -> None:
    """Forget the configured defaults and unfreeze them (for testing)."""

    global _DEFAULT_PASSES, _DEFAULT_PASSES_FROZEN

    with _DEFAULT_PASSES_LOCK:
        _DEFAULT_PASSES = None
        _DEFAULT_PASSES_FROZEN = False
