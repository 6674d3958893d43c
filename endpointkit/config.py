"""
endpointkit — Configuration
===========================

What:  Process settings (pydantic-settings) plus raw environment key lookups.
How:   `Settings` reads ENDPOINTKIT_* variables (or a .env file), validates
       types/ranges, and is exposed as the `settings` singleton.
       `config_value` / `require_config` look up arbitrary keys that services
       built on endpointkit need (API tokens, DSNs, ...).
When:  Settings load at import time. Required keys are validated once at
       startup by `main.serve`, so a missing key fails before the first
       request instead of deep inside a handler.
"""

import os
from typing import Dict, Iterable, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from endpointkit.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Server settings loaded from environment variables.

    All settings have defaults suitable for local development.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Required environment ──────────────────────────────────────────────
    # Comma-separated names of plain environment variables the service
    # cannot run without. Checked by `require_config` at startup.
    required_env: str = Field(default="")

    @property
    def required_env_list(self) -> List[str]:
        """Splits `required_env` into a list, dropping blanks."""
        return [key.strip() for key in self.required_env.split(",") if key.strip()]

    model_config = {
        "env_prefix": "ENDPOINTKIT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def config_value(key: str) -> str:
    """
    Return the value of environment variable `key`.

    Raises:
        ConfigurationError: the key is not set
    """
    try:
        return os.environ[key]
    except KeyError:
        raise ConfigurationError([key]) from None


def require_config(keys: Iterable[str]) -> Dict[str, str]:
    """
    Look up every key in `keys` and return them as a dict.

    Unlike `config_value`, all keys are checked before failing, so the
    resulting `ConfigurationError.missing` lists every absent key at once.
    """
    values: Dict[str, str] = {}
    missing: List[str] = []
    for key in keys:
        value = os.environ.get(key)
        if value is None:
            missing.append(key)
        else:
            values[key] = value
    if missing:
        raise ConfigurationError(missing)
    return values


settings = Settings()
