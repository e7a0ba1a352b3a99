"""Exception hierarchy for mdprompt.

Malformed placeholder syntax and unknown type names are not errors: the
extractor leaves such text literal and the signature generator maps unknown
types to strings. Exceptions are raised only when a compilation cannot
produce an artifact at all (a failing stringifier pass, an unreadable source
file) or when the compiler itself is misconfigured.
"""

from __future__ import annotations

from typing import Any

PLACEHOLDER_SYNTAX_HINT = (
    "Supported formats:\n"
    "  {name} - required string\n"
    "  {name?} - optional string\n"
    "  {age#} or {age:number} - number type\n"
    "  {active!} or {active:boolean} - boolean type\n"
    "  {data@} or {data:json} - JSON object"
)


class MdPromptError(Exception):
    """Base exception for all mdprompt errors."""

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {"error_type": type(self).__name__, "message": str(self)}


class CompilationError(MdPromptError):
    """A single compilation request failed.

    Parameters
    ----------
    message:
        Description of the failure.
    source_name:
        File name (or other label) of the Markdown source, when known.
    hint:
        Extra guidance appended to the rendered message.
    """

    def __init__(
        self,
        message: str,
        *,
        source_name: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source_name = source_name
        self.hint = hint

    def __str__(self) -> str:
        text = self.message
        if self.source_name:
            text = f"Failed to process {self.source_name}: {text}"
        if self.hint:
            text = f"{text}\n{self.hint}"
        return text

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["source_name"] = self.source_name
        return payload


class PassExecutionError(CompilationError):
    """A stringifier pass raised while transforming the source."""

    def __init__(
        self,
        message: str,
        *,
        pass_name: str,
        index: int,
        source_name: str | None = None,
    ) -> None:
        super().__init__(message, source_name=source_name)
        self.pass_name = pass_name
        self.index = index

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update(pass_name=self.pass_name, index=self.index)
        return payload


class SourceLoadError(CompilationError):
    """A Markdown source file could not be read."""


class PassConfigurationError(MdPromptError):
    """The default pass configuration is invalid or already frozen."""


class UnknownTargetError(MdPromptError, ValueError):
    """No code generation target is registered under the requested name."""


__all__ = [
    "PLACEHOLDER_SYNTAX_HINT",
    "CompilationError",
    "MdPromptError",
    "PassConfigurationError",
    "PassExecutionError",
    "SourceLoadError",
    "UnknownTargetError",
]
