"""Configuration management for osh."""

from pydantic import Field, PositiveInt, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROMPT = "osh> "


class ShellConfig(BaseSettings):
    """Shell settings, read from OSH_* environment variables.

    Keyword arguments take precedence over the environment.
    """

    prompt: str = Field(default=DEFAULT_PROMPT, description="Prompt shown before each line")
    max_line: PositiveInt | None = Field(
        default=None, description="Longest accepted input line; None means unlimited"
    )

    model_config = SettingsConfigDict(
        env_prefix="OSH_",
        case_sensitive=False,
        env_ignore_empty=True,
        frozen=True,
    )


def describe_errors(error: ValidationError) -> str:
    """Flatten a ValidationError into one line per field."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()
    )
