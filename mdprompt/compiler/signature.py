"""Type signature generation for template parameters"""

from collections.abc import Iterable

from .base import Placeholder
from .targets import Target, get_target


def order_placeholders(placeholders: Iterable[Placeholder]) -> list[Placeholder]:
    """Required placeholders first, then optional ones, each in original order."""
    placeholders = list(placeholders)
    required = [item for item in placeholders if not item.optional]
    optional = [item for item in placeholders if item.optional]
    return required + optional


def generate_type_signature(
    placeholders: Iterable[Placeholder], target: str | Target | None = None
) -> str:
    """Describe the parameter object accepted by a generated template.

    >>> from mdprompt.compiler.base import Placeholder
    >>> generate_type_signature(
    ...     [
    ...         Placeholder("city", optional=True, raw="{city?}"),
    ...         Placeholder("age", raw="{age#}", type_name="number"),
    ...     ],
    ...     "typescript",
    ... )
    '{ age: number; city?: string }'
    """
    return get_target(target).format_signature(order_placeholders(placeholders))
