"""Markdown to plain text conversion.

The stringifier runs the configured text passes, then a final
strip-formatting step:

1. Placeholder tokens are swapped for opaque alphanumeric sentinels so that
   Markdown syntax (intraword underscores, escapes) cannot alter them.
2. The source is rendered to HTML with ``markdown2``.
3. The HTML tree is flattened with BeautifulSoup into one text segment per
   block. Code blocks are dropped, inline code keeps its text, images keep
   their alt text and line breaks inside a block are kept.
4. Segments are joined with a blank line and sentinels are restored.

Finally whitespace is collapsed (or only trimmed).
"""

from __future__ import annotations

import re
import secrets
from collections.abc import Sequence

import markdown2
from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from mdprompt.config import get_settings
from mdprompt.utils.logger import preview_text
from mdprompt.utils.mixins import LoggerMixin

from .base import StringifyOptions
from .lexer import iter_placeholder_tokens
from .passes import PassPipeline, get_default_passes

BLOCK_SEPARATOR = "\n\n"
WHITESPACE_PATTERN = re.compile(r"\s+")

BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "dd",
        "details",
        "div",
        "dl",
        "dt",
        "figcaption",
        "figure",
        "footer",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "section",
        "summary",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)
# Rendered without any text
DISCARDED_TAGS = frozenset({"hr", "pre", "script", "style", "template"})


def _is_escaped(text: str, pos: int, floor: int = 0) -> bool:
    """True when an odd run of backslashes ends right before ``pos``."""
    count = 0
    while pos - count - 1 >= floor and text[pos - count - 1] == "\\":
        count += 1
    return count % 2 == 1


def markdown_extras_options(extras: Sequence[str]) -> dict[str, object]:
    """markdown2 extras with intraword ``_``/``*`` emphasis switched off.

    ``get_weather_data`` must stay as written rather than pair its
    underscores into ``<em>``.
    """
    options: dict[str, object] = {name: None for name in extras}
    options.setdefault("middle-word-em", False)
    return options


class _TokenShield:
    """Swap placeholder tokens for sentinels and back."""

    def __init__(self, text: str):
        nonce = secrets.token_hex(6)
        self._prefix = f"MDPH{nonce}X"
        self._pattern = re.compile(rf"{self._prefix}(\d+)X")
        self._raws: list[str] = []
        self.text = self._protect(text)

    def _protect(self, text: str) -> str:
        parts: list[str] = []
        last = 0
        for token in iter_placeholder_tokens(text):
            start = token.start
            if _is_escaped(text, start, last):
                # \{name} is an escaped brace: the backslash goes with the sentinel
                start -= 1
            parts.append(text[last:start])
            parts.append(f"{self._prefix}{len(self._raws)}X")
            self._raws.append(token.raw)
            last = token.end
        parts.append(text[last:])
        return "".join(parts)

    def restore(self, text: str) -> str:
        if not self._raws:
            return text
        return self._pattern.sub(lambda match: self._raws[int(match.group(1))], text)


class _BlockFlattener:
    """Collect the text of an HTML tree as one segment per block element."""

    def __init__(self) -> None:
        self.segments: list[str] = []
        self._buffer: list[str] = []

    def flatten(self, root: Tag) -> list[str]:
        self._walk(root)
        self._flush()
        return self.segments

    def _walk(self, node: Tag) -> None:
        for child in node.children:
            if isinstance(child, PreformattedString):
                # comments, doctypes, CDATA
                continue
            if isinstance(child, NavigableString):
                self._buffer.append(str(child))
                continue
            if not isinstance(child, Tag):
                continue

            name = child.name
            if name in DISCARDED_TAGS:
                self._flush()
            elif name == "br":
                self._buffer.append("\n")
            elif name == "img":
                alt = child.get("alt")
                if alt:
                    self._buffer.append(str(alt))
            elif name in BLOCK_TAGS:
                self._flush()
                self._walk(child)
                self._flush()
            else:
                self._walk(child)

    def _flush(self) -> None:
        # markdown2 indents nested block content; keep line breaks only
        lines = "".join(self._buffer).splitlines()
        text = "\n".join(line.strip() for line in lines).strip()
        self._buffer.clear()
        if text:
            self.segments.append(text)


class MarkdownStringifier(LoggerMixin):
    """Reduce Markdown source to plain text"""

    def __init__(self, markdown_extras: Sequence[str] | None = None):
        if markdown_extras is None:
            markdown_extras = get_settings().markdown_extras
        self.markdown_extras: tuple[str, ...] = tuple(markdown_extras)

    async def stringify(
        self,
        source: str,
        options: StringifyOptions | None = None,
        *,
        source_name: str | None = None,
    ) -> str:
        """Run the passes and strip formatting from ``source``.

        Raises
        ------
        TypeError
            If ``source`` is not a string.
        PassExecutionError
            If one of the extra passes fails.
        """
        if not isinstance(source, str):
            raise TypeError("Markdown source must be a string.")

        if options is None:
            options = StringifyOptions(
                collapse_whitespace=get_settings().collapse_whitespace
            )

        passes = options.extra_passes
        if passes is None:
            passes = get_default_passes()
        pipeline = PassPipeline(passes)

        text = await pipeline.run(source, source_name=source_name)
        text = self.strip_formatting(text, options.markdown_extras)

        if options.collapse_whitespace:
            text = WHITESPACE_PATTERN.sub(" ", text).strip()
        else:
            text = text.strip()

        self.logger.debug(
            "Stringified markdown",
            source_name=source_name,
            passes=len(pipeline),
            collapsed=options.collapse_whitespace,
            preview=preview_text(text),
        )
        return text

    def strip_formatting(
        self, text: str, markdown_extras: Sequence[str] | None = None
    ) -> str:
        """Remove Markdown syntax, keeping the text it wraps."""
        extras = markdown_extras_options(
            self.markdown_extras if markdown_extras is None else markdown_extras
        )
        shield = _TokenShield(text)

        try:
            html = markdown2.markdown(shield.text, extras=extras)
        except Exception as exc:
            # Unrenderable input is kept as literal text
            self.logger.warning(
                "Markdown rendering failed, keeping source text",
                error=str(exc),
                preview=preview_text(text),
            )
            return text

        soup = BeautifulSoup(html, "html.parser")
        segments = _BlockFlattener().flatten(soup)
        return shield.restore(BLOCK_SEPARATOR.join(segments))


async def stringify(source: str, options: StringifyOptions | None = None) -> str:
    """Convert Markdown ``source`` to plain text.

    >>> import asyncio
    >>> asyncio.run(stringify("# Hello\\n\\nWorld"))
    'Hello World'
    """
    return await MarkdownStringifier().stringify(source, options)
