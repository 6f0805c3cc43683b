"""Tests for shell configuration."""

import pytest
from pydantic import ValidationError

from osh.config import DEFAULT_PROMPT, ShellConfig, describe_errors


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("OSH_PROMPT", raising=False)
    monkeypatch.delenv("OSH_MAX_LINE", raising=False)


class TestShellConfig:
    def test_defaults(self):
        config = ShellConfig()
        assert config.prompt == DEFAULT_PROMPT == "osh> "
        assert config.max_line is None

    def test_prompt_from_env(self, monkeypatch):
        monkeypatch.setenv("OSH_PROMPT", "$ ")
        assert ShellConfig().prompt == "$ "

    def test_max_line_from_env(self, monkeypatch):
        monkeypatch.setenv("OSH_MAX_LINE", "80")
        assert ShellConfig().max_line == 80

    def test_env_names_are_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("osh_max_line", "12")
        assert ShellConfig().max_line == 12

    def test_empty_max_line_is_unlimited(self, monkeypatch):
        monkeypatch.setenv("OSH_MAX_LINE", "")
        assert ShellConfig().max_line is None

    def test_keyword_overrides_env(self, monkeypatch):
        monkeypatch.setenv("OSH_PROMPT", "% ")
        assert ShellConfig(prompt="> ").prompt == "> "

    def test_string_max_line_is_converted(self):
        assert ShellConfig(max_line="120").max_line == 120

    def test_invalid_max_line(self, monkeypatch):
        monkeypatch.setenv("OSH_MAX_LINE", "eighty")
        with pytest.raises(ValidationError):
            ShellConfig()

    @pytest.mark.parametrize("value", [0, -5])
    def test_max_line_must_be_positive(self, value):
        with pytest.raises(ValidationError):
            ShellConfig(max_line=value)

    def test_frozen(self):
        config = ShellConfig()
        with pytest.raises(ValidationError):
            config.prompt = "x"

    def test_equality(self):
        assert ShellConfig(max_line=80) == ShellConfig(max_line=80)
        assert ShellConfig(max_line=80) != ShellConfig()


class TestDescribeErrors:
    def test_names_the_field(self):
        with pytest.raises(ValidationError) as exc:
            ShellConfig(max_line="zero")
        message = describe_errors(exc.value)
        assert message.startswith("max_line: ")
        assert "\n" not in message
