"""Test configuration module"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from mdprompt.config import (
    Settings,
    clear_settings_cache,
    get_settings,
    override_settings,
)


def test_defaults() -> None:
    settings = get_settings()

    assert settings.collapse_whitespace is True
    assert settings.default_passes == []
    assert settings.markdown_extras == ["fenced-code-blocks", "tables", "strike"]
    assert settings.target == "typescript"
    assert settings.cache_size == 256
    assert settings.log_file is None
    assert settings.is_testing
    assert not settings.is_development


def test_config_from_environment(monkeypatch) -> None:
    """Settings are built from MDPROMPT_* variables."""
    monkeypatch.setenv("MDPROMPT_TARGET", "python")
    monkeypatch.setenv("MDPROMPT_COLLAPSE_WHITESPACE", "false")
    monkeypatch.setenv("MDPROMPT_CACHE_SIZE", "8")
    monkeypatch.setenv("MDPROMPT_LOG_FILE", "/tmp/mdprompt/test.log")

    settings = get_settings(refresh=True)

    assert settings.target == "python"
    assert settings.collapse_whitespace is False
    assert settings.cache_size == 8
    assert settings.log_file == Path("/tmp/mdprompt/test.log")


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()
    first = get_settings()
    clear_settings_cache()
    assert get_settings() is not first


def test_override_settings_restores_previous() -> None:
    original = get_settings()
    with override_settings(target="python") as patched:
        assert get_settings() is patched
        assert patched.target == "python"
    assert get_settings() is original


@pytest.mark.parametrize(
    ("field", "value"),
    [("cache_size", "0"), ("target", "rust"), ("log_format", "xml")],
)
def test_invalid_values_rejected(monkeypatch, field, value) -> None:
    monkeypatch.setenv(f"MDPROMPT_{field.upper()}", value)
    with pytest.raises(ValidationError):
        Settings()
