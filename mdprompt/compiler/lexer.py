"""Placeholder tokenizer.

Grammar::

    token    := "{" ident [modifier] [":" typename] "}"
    ident    := [A-Za-z0-9_]+
    modifier := "?" | "#" | "!" | "@"
    typename := [a-z]+

A modifier and an explicit ``:typename`` cannot appear in the same token.
Anything that does not match is plain text; the tokenizer never raises.
"""

from __future__ import annotations

import string
from collections.abc import Iterator
from dataclasses import dataclass

from .base import MODIFIER_TYPES, OPTIONAL_MODIFIER, Placeholder

OPEN = "{"
CLOSE = "}"
TYPE_SEPARATOR = ":"
IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")
TYPE_CHARS = frozenset(string.ascii_lowercase)
MODIFIERS = frozenset(MODIFIER_TYPES) | {OPTIONAL_MODIFIER}


@dataclass(frozen=True, slots=True)
class TextToken:
    """A run of literal text."""

    text: str
    start: int


@dataclass(frozen=True, slots=True)
class PlaceholderToken:
    """A well-formed placeholder occurrence, with its source span."""

    raw: str
    name: str
    modifier: str | None
    explicit_type: str | None
    start: int
    end: int

    def to_placeholder(self) -> Placeholder:
        optional = self.modifier == OPTIONAL_MODIFIER
        type_name = self.explicit_type
        if self.modifier in MODIFIER_TYPES:
            type_name = MODIFIER_TYPES[self.modifier]
        return Placeholder(
            name=self.name, optional=optional, raw=self.raw, type_name=type_name
        )


Token = TextToken | PlaceholderToken


def _scan(text: str, pos: int, allowed: frozenset[str]) -> int:
    end = len(text)
    while pos < end and text[pos] in allowed:
        pos += 1
    return pos


def match_placeholder(text: str, pos: int) -> PlaceholderToken | None:
    """Try to read one placeholder token starting exactly at ``pos``."""
    if not text.startswith(OPEN, pos):
        return None

    name_start = pos + 1
    cursor = _scan(text, name_start, IDENT_CHARS)
    if cursor == name_start:
        return None
    name = text[name_start:cursor]

    modifier = None
    if cursor < len(text) and text[cursor] in MODIFIERS:
        modifier = text[cursor]
        cursor += 1

    explicit_type = None
    if text.startswith(TYPE_SEPARATOR, cursor):
        if modifier is not None:
            return None
        type_start = cursor + 1
        cursor = _scan(text, type_start, TYPE_CHARS)
        if cursor == type_start:
            return None
        explicit_type = text[type_start:cursor]

    if not text.startswith(CLOSE, cursor):
        return None

    end = cursor + 1
    return PlaceholderToken(
        raw=text[pos:end],
        name=name,
        modifier=modifier,
        explicit_type=explicit_type,
        start=pos,
        end=end,
    )


def iter_placeholder_tokens(text: str) -> Iterator[PlaceholderToken]:
    """Yield non-overlapping placeholder tokens from left to right.

    When a ``{`` does not begin a valid token, scanning resumes at the next
    character, so ``{{name}}`` still yields ``{name}``.
    """
    pos = text.find(OPEN)
    while pos != -1:
        token = match_placeholder(text, pos)
        if token is None:
            pos = text.find(OPEN, pos + 1)
            continue
        yield token
        pos = text.find(OPEN, token.end)


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into alternating literal and placeholder tokens."""
    tokens: list[Token] = []
    last = 0
    for token in iter_placeholder_tokens(text):
        if token.start > last:
            tokens.append(TextToken(text=text[last : token.start], start=last))
        tokens.append(token)
        last = token.end
    if last < len(text):
        tokens.append(TextToken(text=text[last:], start=last))
    return tokens
