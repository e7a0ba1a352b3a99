"""Placeholder list diagnostics"""

from mdprompt.utils.mixins import LoggerMixin

from .base import Placeholder, UnknownType


class PlaceholderValidator(LoggerMixin):
    """Report typing problems in an extracted placeholder list.

    Nothing here rejects input: unknown types still compile (as strings) and
    differing declarations of one name stay distinct entries. The warnings
    are surfaced at the code generation boundary so authors can fix them.
    """

    def inspect(self, placeholders: list[Placeholder]) -> list[str]:
        """Return human readable warnings for ``placeholders``"""
        warnings: list[str] = []
        warnings.extend(self._check_unknown_types(placeholders))
        warnings.extend(self._check_conflicting_declarations(placeholders))

        if warnings:
            self.logger.warning("Placeholder diagnostics", warnings=warnings)

        return warnings

    def _check_unknown_types(self, placeholders: list[Placeholder]) -> list[str]:
        warnings = []
        for placeholder in placeholders:
            if isinstance(placeholder.type, UnknownType):
                warnings.append(
                    f"Unknown type '{placeholder.type_name}' in {placeholder.raw}; "
                    "treated as string"
                )
        return warnings

    def _check_conflicting_declarations(
        self, placeholders: list[Placeholder]
    ) -> list[str]:
        """Flag names declared with more than one key"""
        raws_by_name: dict[str, list[str]] = {}
        for placeholder in placeholders:
            raws_by_name.setdefault(placeholder.name, []).append(placeholder.raw)

        return [
            f"Placeholder '{name}' is declared in several forms: {', '.join(raws)}"
            for name, raws in raws_by_name.items()
            if len(raws) > 1
        ]
