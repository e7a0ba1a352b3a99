"""Placeholder extraction from plain text"""

from mdprompt.utils.mixins import LoggerMixin

from .base import Placeholder
from .lexer import iter_placeholder_tokens


def extract_placeholders(text: str) -> list[Placeholder]:
    """Return the placeholders in ``text`` in first-occurrence order.

    Entries are deduplicated on ``Placeholder.key`` (name, optional marker and
    declared type), so ``{x}`` twice yields one entry while ``{x}`` and
    ``{x?}`` yield two. Malformed tokens are skipped as literal text.
    """
    placeholders: list[Placeholder] = []
    seen: set[str] = set()

    for token in iter_placeholder_tokens(text):
        placeholder = token.to_placeholder()
        if placeholder.key in seen:
            continue
        seen.add(placeholder.key)
        placeholders.append(placeholder)

    return placeholders


class PlaceholderExtractor(LoggerMixin):
    """Extraction step of the compiler pipeline"""

    def extract(self, text: str) -> list[Placeholder]:
        placeholders = extract_placeholders(text)
        self.logger.debug(
            "Extracted placeholders",
            count=len(placeholders),
            keys=[placeholder.key for placeholder in placeholders],
        )
        return placeholders
