"""Template module generation"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from mdprompt.utils.mixins import LoggerMixin

from .base import GeneratedArtifact, Placeholder
from .lexer import TextToken, tokenize
from .signature import generate_type_signature
from .targets import Target, get_target


@dataclass(frozen=True, slots=True)
class LiteralSegment:
    text: str


@dataclass(frozen=True, slots=True)
class InterpolationSegment:
    placeholder: Placeholder


Segment = LiteralSegment | InterpolationSegment


def split_segments(text: str, placeholders: Iterable[Placeholder]) -> list[Segment]:
    """Split ``text`` into literal runs and placeholder interpolations.

    A token is interpolated only when its ``raw`` text exactly matches a
    listed placeholder, so ``{x}`` and ``{x?}`` never replace each other and
    unlisted tokens stay literal. When two placeholders share a ``raw`` the
    first one wins.
    """
    by_raw: dict[str, Placeholder] = {}
    for placeholder in placeholders:
        if placeholder.raw:
            by_raw.setdefault(placeholder.raw, placeholder)

    segments: list[Segment] = []
    literal: list[str] = []
    for token in tokenize(text):
        if isinstance(token, TextToken):
            literal.append(token.text)
            continue
        placeholder = by_raw.get(token.raw)
        if placeholder is None:
            literal.append(token.raw)
            continue
        if literal:
            segments.append(LiteralSegment("".join(literal)))
            literal.clear()
        segments.append(InterpolationSegment(placeholder))

    if literal:
        segments.append(LiteralSegment("".join(literal)))
    return segments


def generate_template(
    text: str,
    placeholders: Iterable[Placeholder],
    target: str | Target | None = None,
) -> GeneratedArtifact:
    """Build the template module for ``text``.

    Without placeholders the module exports ``text`` verbatim as a string
    constant. Otherwise it exports a function taking one parameter object and
    returning ``text`` with every placeholder occurrence interpolated. Only
    literal text is escaped; the interpolations inserted here are not.
    """
    target = get_target(target)
    placeholders = tuple(placeholders)
    signature = generate_type_signature(placeholders, target)

    if not placeholders:
        code = target.static_module(text)
    else:
        parts = []
        for segment in split_segments(text, placeholders):
            if isinstance(segment, LiteralSegment):
                parts.append(target.escape_literal(segment.text))
            else:
                parts.append(target.interpolation(segment.placeholder))
        code = target.template_module("".join(parts), signature)

    return GeneratedArtifact(
        code=code,
        type_signature=signature,
        placeholders=placeholders,
        target=target.name,
    )


class TemplateGenerator(LoggerMixin):
    """Code generation step of the compiler pipeline"""

    def __init__(self, target: str | Target | None = None):
        self.target = get_target(target)

    def generate(self, text: str, placeholders: Iterable[Placeholder]) -> GeneratedArtifact:
        artifact = generate_template(text, placeholders, self.target)
        self.logger.debug(
            "Generated template module",
            target=artifact.target,
            static=artifact.is_static,
            signature=artifact.type_signature,
        )
        return artifact
