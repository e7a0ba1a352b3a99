"""Code generation targets.

A target knows how to spell types, string literals and interpolations in
one output language. ``TypeScriptTarget`` produces the ES module consumed by
bundlers; ``PythonTarget`` produces an importable Python module.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, ClassVar

from mdprompt.config import get_settings
from mdprompt.errors import UnknownTargetError

from .base import Placeholder, PlaceholderType, TypeTag, UnknownType

if TYPE_CHECKING:
    from .base import GeneratedArtifact

GENERATED_HEADER = "Generated by mdprompt from Markdown. Do not edit."


def escape_chars(text: str, table: Mapping[str, str]) -> str:
    """Escape ``text`` in one left-to-right scan using ``table``."""
    return "".join(table.get(char, char) for char in text)


class Target(ABC):
    """Output language for generated template modules"""

    name: ClassVar[str]
    module_suffix: ClassVar[str]
    declaration_suffix: ClassVar[str]
    empty_signature: ClassVar[str] = "{}"
    type_names: ClassVar[dict[PlaceholderType, str]]

    def map_type(self, tag: TypeTag) -> str:
        """Spell a placeholder type; unknown types are strings."""
        if isinstance(tag, UnknownType):
            return self.type_names[PlaceholderType.STRING]
        return self.type_names[tag]

    def format_signature(self, ordered: list[Placeholder]) -> str:
        if not ordered:
            return self.empty_signature
        return self.join_fields([self.format_field(item) for item in ordered])

    @abstractmethod
    def format_field(self, placeholder: Placeholder) -> str: ...

    @abstractmethod
    def join_fields(self, fields: list[str]) -> str: ...

    @abstractmethod
    def escape_literal(self, text: str) -> str:
        """Escape literal text for the body of the interpolating string."""

    @abstractmethod
    def interpolation(self, placeholder: Placeholder) -> str: ...

    @abstractmethod
    def static_module(self, text: str) -> str: ...

    @abstractmethod
    def template_module(self, body: str, signature: str) -> str: ...

    @abstractmethod
    def render_declaration(self, artifact: GeneratedArtifact) -> str: ...


class TypeScriptTarget(Target):
    """ES module exporting a string or a template function"""

    name = "typescript"
    module_suffix = ".ts"
    declaration_suffix = ".d.ts"
    type_names = {
        PlaceholderType.STRING: "string",
        PlaceholderType.NUMBER: "number",
        PlaceholderType.BOOLEAN: "boolean",
        PlaceholderType.JSON: "Record<string, unknown>",
    }
    literal_escapes = {"\\": "\\\\", "`": "\\`", "$": "\\$"}

    @staticmethod
    def _is_identifier(name: str) -> bool:
        return bool(name) and not name[0].isdigit()

    def _property_name(self, name: str) -> str:
        return name if self._is_identifier(name) else json.dumps(name)

    def format_field(self, placeholder: Placeholder) -> str:
        marker = "?" if placeholder.optional else ""
        key = self._property_name(placeholder.name)
        return f"{key}{marker}: {self.map_type(placeholder.type)}"

    def join_fields(self, fields: list[str]) -> str:
        return "{ " + "; ".join(fields) + " }"

    def escape_literal(self, text: str) -> str:
        return escape_chars(text, self.literal_escapes)

    def interpolation(self, placeholder: Placeholder) -> str:
        if self._is_identifier(placeholder.name):
            return f"${{vars.{placeholder.name}}}"
        return f"${{vars[{json.dumps(placeholder.name)}]}}"

    def static_module(self, text: str) -> str:
        return f"export default {json.dumps(text, ensure_ascii=False)};"

    def template_module(self, body: str, signature: str) -> str:
        return (
            f"export default function(vars: {signature}): string {{\n"
            f"  return `{body}`;\n"
            "}"
        )

    def render_declaration(self, artifact: GeneratedArtifact) -> str:
        if artifact.is_static:
            kind = "string"
        else:
            kind = f"(vars: {artifact.type_signature}) => string"
        return f"declare const _default: {kind};\nexport default _default;\n"


def _python_escapes(*, braces: bool) -> dict[str, str]:
    table = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
    for code in [*range(0x20), 0x7F]:
        table.setdefault(chr(code), f"\\x{code:02x}")
    if braces:
        table.update({"{": "{{", "}": "}}"})
    return table


class PythonTarget(Target):
    """Python module exporting ``TEMPLATE`` or a ``render`` function"""

    name = "python"
    module_suffix = ".py"
    declaration_suffix = ".pyi"
    type_names = {
        PlaceholderType.STRING: "str",
        PlaceholderType.NUMBER: "float",
        PlaceholderType.BOOLEAN: "bool",
        PlaceholderType.JSON: "dict[str, Any]",
    }
    typing_import = "from typing import Any, NotRequired, TypedDict"
    vars_type = "TemplateVars"
    literal_escapes = _python_escapes(braces=False)
    fstring_escapes = _python_escapes(braces=True)

    def format_field(self, placeholder: Placeholder) -> str:
        value_type = self.map_type(placeholder.type)
        if placeholder.optional:
            value_type = f"NotRequired[{value_type}]"
        return f"{json.dumps(placeholder.name)}: {value_type}"

    def join_fields(self, fields: list[str]) -> str:
        return "{" + ", ".join(fields) + "}"

    def string_literal(self, text: str) -> str:
        return '"' + escape_chars(text, self.literal_escapes) + '"'

    def escape_literal(self, text: str) -> str:
        return escape_chars(text, self.fstring_escapes)

    def interpolation(self, placeholder: Placeholder) -> str:
        if placeholder.optional:
            return f"{{values.get('{placeholder.name}', '')}}"
        return f"{{values['{placeholder.name}']}}"

    def _vars_definition(self, signature: str) -> str:
        return f'{self.vars_type} = TypedDict("{self.vars_type}", {signature})'

    def static_module(self, text: str) -> str:
        return (
            f'"""{GENERATED_HEADER}"""\n'
            "\n"
            f"TEMPLATE: str = {self.string_literal(text)}\n"
        )

    def template_module(self, body: str, signature: str) -> str:
        return (
            f'"""{GENERATED_HEADER}"""\n'
            "\n"
            f"{self.typing_import}\n"
            "\n"
            f"{self._vars_definition(signature)}\n"
            "\n"
            "\n"
            f"def render(values: {self.vars_type}) -> str:\n"
            f'    return f"{body}"\n'
        )

    def render_declaration(self, artifact: GeneratedArtifact) -> str:
        if artifact.is_static:
            return "TEMPLATE: str\n"
        return (
            f"{self.typing_import}\n"
            "\n"
            f"{self._vars_definition(artifact.type_signature)}\n"
            "\n"
            f"def render(values: {self.vars_type}) -> str: ...\n"
        )


TARGETS: dict[str, Target] = {
    target.name: target for target in (TypeScriptTarget(), PythonTarget())
}


def available_targets() -> list[str]:
    return sorted(TARGETS)


def get_target(target: str | Target | None = None) -> Target:
    """Resolve a target instance, name, or ``None`` for the configured default.

    Raises
    ------
    UnknownTargetError
        If no target has the given name.
    """
    if isinstance(target, Target):
        return target
    name = get_settings().target if target is None else target
    try:
        return TARGETS[name.lower()]
    except KeyError:
        raise UnknownTargetError(
            f"Unknown target '{name}'. Available targets: {', '.join(available_targets())}"
        ) from None
