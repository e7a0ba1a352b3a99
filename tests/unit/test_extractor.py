"""Test placeholder tokenizing and extraction"""

import pytest

from mdprompt.compiler.base import Placeholder, PlaceholderType, UnknownType
from mdprompt.compiler.extractor import PlaceholderExtractor, extract_placeholders
from mdprompt.compiler.lexer import (
    PlaceholderToken,
    TextToken,
    match_placeholder,
    tokenize,
)
from mdprompt.compiler.validator import PlaceholderValidator


class TestExtractPlaceholders:
    """Extraction of well-formed tokens"""

    def test_simple_placeholder(self):
        assert extract_placeholders("Hello {name}!") == [
            Placeholder(name="name", optional=False, raw="{name}", type_name=None)
        ]

    def test_optional_placeholder(self):
        assert extract_placeholders("Hello {name?}!") == [
            Placeholder(name="name", optional=True, raw="{name?}", type_name=None)
        ]

    def test_explicit_types(self):
        result = extract_placeholders("Age: {age:number}, Active: {active:boolean}")
        assert result == [
            Placeholder(name="age", raw="{age:number}", type_name="number"),
            Placeholder(name="active", raw="{active:boolean}", type_name="boolean"),
        ]

    def test_shorthand_modifiers(self):
        result = extract_placeholders("{count#} {enabled!} {payload@}")
        assert [(p.name, p.type_name, p.raw) for p in result] == [
            ("count", "number", "{count#}"),
            ("enabled", "boolean", "{enabled!}"),
            ("payload", "json", "{payload@}"),
        ]
        assert [p.type for p in result] == [
            PlaceholderType.NUMBER,
            PlaceholderType.BOOLEAN,
            PlaceholderType.JSON,
        ]

    def test_untyped_is_string(self):
        (placeholder,) = extract_placeholders("{name}")
        assert placeholder.type_name is None
        assert placeholder.type is PlaceholderType.STRING

    def test_unknown_type_is_kept_verbatim(self):
        (placeholder,) = extract_placeholders("{when:date}")
        assert placeholder.type_name == "date"
        assert placeholder.type == UnknownType("date")

    def test_multiple_in_order(self):
        result = extract_placeholders("Hello {name}, you are {age:number} years old")
        assert [p.name for p in result] == ["name", "age"]

    def test_digits_and_underscores_in_names(self):
        result = extract_placeholders("{user_id} {1st} {_x}")
        assert [p.name for p in result] == ["user_id", "1st", "_x"]

    def test_text_without_placeholders(self):
        assert extract_placeholders("Hello world!") == []
        assert extract_placeholders("") == []

    def test_double_braces_yield_inner_token(self):
        assert extract_placeholders("{{name}}") == [Placeholder("name", raw="{name}")]

    @pytest.mark.parametrize(
        "text",
        [
            "{}",
            "{ name }",
            "{name",
            "name}",
            "{na-me}",
            "{name:Number}",
            "{name:}",
            "{name?:number}",
            "{age#:number}",
            "{name??}",
            "{name:number?}",
        ],
    )
    def test_malformed_tokens_stay_literal(self, text):
        assert extract_placeholders(text) == []

    def test_malformed_prefix_does_not_hide_later_token(self):
        result = extract_placeholders("{bad {good}")
        assert [p.raw for p in result] == ["{good}"]


class TestDeduplication:
    """First occurrence wins per key"""

    def test_repeated_placeholder(self):
        result = extract_placeholders("{name} and {name}")
        assert result == [Placeholder("name", raw="{name}")]

    def test_required_and_optional_are_distinct(self):
        result = extract_placeholders("{x} {x?}")
        assert [p.raw for p in result] == ["{x}", "{x?}"]

    def test_typed_and_untyped_are_distinct(self):
        result = extract_placeholders("{x} {x:string}")
        assert [p.key for p in result] == ["x", "x:string"]

    def test_shorthand_matches_explicit_type(self):
        result = extract_placeholders("{age#} then {age:number}")
        assert result == [Placeholder("age", raw="{age#}", type_name="number")]

    def test_extraction_is_idempotent(self):
        text = "{a} {b?} {a} {c#} {b?} {d:json}"
        assert extract_placeholders(text) == extract_placeholders(text)

    def test_extractor_component(self):
        result = PlaceholderExtractor().extract("{a} {a}")
        assert len(result) == 1


class TestLexer:
    """Token spans and literal runs"""

    def test_match_at_position(self):
        token = match_placeholder("Hi {name?}!", 3)
        assert token == PlaceholderToken(
            raw="{name?}", name="name", modifier="?", explicit_type=None, start=3, end=10
        )
        assert match_placeholder("Hi {name?}!", 0) is None

    def test_tokenize_covers_whole_text(self):
        text = "A {x} b {{y}} c {bad"
        tokens = tokenize(text)
        rebuilt = "".join(
            token.text if isinstance(token, TextToken) else token.raw for token in tokens
        )
        assert rebuilt == text
        assert [t.raw for t in tokens if isinstance(t, PlaceholderToken)] == [
            "{x}",
            "{y}",
        ]

    def test_tokenize_empty(self):
        assert tokenize("") == []


class TestPlaceholderValidator:
    """Diagnostics never reject placeholders"""

    def test_clean_list(self):
        assert PlaceholderValidator().inspect(extract_placeholders("{a} {b#}")) == []

    def test_unknown_type_warning(self):
        warnings = PlaceholderValidator().inspect(extract_placeholders("{when:date}"))
        assert len(warnings) == 1
        assert "treated as string" in warnings[0]

    def test_conflicting_forms_warning(self):
        warnings = PlaceholderValidator().inspect(extract_placeholders("{x} {x?}"))
        assert warnings == ["Placeholder 'x' is declared in several forms: {x}, {x?}"]
