"""Compiler data model and protocols"""

from __future__ import annotations

from collections.abc import Awaitable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol


class PlaceholderType(Enum):
    """Built-in placeholder value types."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class UnknownType:
    """A declared type name that is not one of the built-in types."""

    name: str


TypeTag = PlaceholderType | UnknownType

# Types implied by the shorthand modifiers
MODIFIER_TYPES: dict[str, str] = {
    "#": PlaceholderType.NUMBER.value,
    "!": PlaceholderType.BOOLEAN.value,
    "@": PlaceholderType.JSON.value,
}
OPTIONAL_MODIFIER = "?"


def resolve_type(type_name: str | None) -> TypeTag:
    """Map a declared type name onto the closed type variant."""
    if type_name is None:
        return PlaceholderType.STRING
    try:
        return PlaceholderType(type_name)
    except ValueError:
        return UnknownType(type_name)


@dataclass(frozen=True, slots=True)
class Placeholder:
    """A typed substitution slot found in plain text.

    ``type_name`` keeps the declared type verbatim (including names the
    compiler does not know); ``None`` means the token declared no type.
    """

    name: str
    optional: bool = False
    raw: str = ""
    type_name: str | None = None

    @property
    def type(self) -> TypeTag:
        return resolve_type(self.type_name)

    @property
    def key(self) -> str:
        """Deduplication key: name, optional marker and declared type."""
        marker = OPTIONAL_MODIFIER if self.optional else ""
        suffix = f":{self.type_name}" if self.type_name else ""
        return f"{self.name}{marker}{suffix}"

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "type": self.type_name,
            "optional": self.optional,
            "raw": self.raw,
        }


@dataclass(frozen=True, slots=True)
class GeneratedArtifact:
    """Generated module source paired with its parameter type signature."""

    code: str
    type_signature: str
    placeholders: tuple[Placeholder, ...] = ()
    target: str = "typescript"

    @property
    def is_static(self) -> bool:
        return not self.placeholders


class ITextPass(Protocol):
    """A text transform run by the stringifier before formatting is stripped.

    Implementations may return the new text directly or an awaitable of it.
    """

    def __call__(self, text: str) -> str | Awaitable[str]: ...


@dataclass(frozen=True)
class StringifyOptions:
    """Options for a single stringify call.

    ``extra_passes=None`` selects the process-wide default passes; an empty
    sequence runs none.
    """

    collapse_whitespace: bool = True
    extra_passes: Sequence[ITextPass | None] | None = None
    markdown_extras: tuple[str, ...] | None = field(default=None)
