"""
Configuration for brewform.

Settings are read from BREWFORM_* environment variables, optionally from a
.env file named by LOAD_ENV_FILE.
"""

from __future__ import annotations

import os
import pathlib
import re
from typing import TypeVar

import lazy_object_proxy
import pydantic
import pydantic_settings

T = TypeVar('T', bound='BrewformSettings')

_HTTP_TOKEN = re.compile(r'^[A-Z]+$')


class BrewformSettings(pydantic_settings.BaseSettings):
    """Defaults used when assembling and negotiating form descriptors."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix='BREWFORM_',
        env_file_encoding='utf-8',
        case_sensitive=True,  # Fail fast on misconfiguration
        extra='forbid',
    )

    # Vendor segment of application/vnd.<product>.form
    PRODUCT: str = 'brewnet'

    DEFAULT_METHOD: str = 'POST'
    DEFAULT_SUBFORMAT: str = 'json'
    JSON_INDENT: int | None = None

    # Deepest record nesting the flattener will follow
    MAX_DEPTH: int = 32

    @pydantic.field_validator('DEFAULT_METHOD')
    @classmethod
    def validate_default_method(cls, v: str) -> str:
        """Validate the method is an upper case HTTP token."""
        if not _HTTP_TOKEN.match(v):
            raise ValueError('DEFAULT_METHOD must be an upper case HTTP method, e.g. POST')
        return v

    @pydantic.field_validator('MAX_DEPTH')
    @classmethod
    def validate_max_depth(cls, v: int) -> int:
        if not 1 <= v <= 1000:
            raise ValueError('MAX_DEPTH must be between 1-1000')
        return v

    @property
    def base_mime_type(self) -> str:
        return f'application/vnd.{self.PRODUCT}.form'


def get_settings(settings_class: type[T] = BrewformSettings, env_file: str | None = None) -> T:
    """
    Factory for creating settings with dynamic .env file loading.

    Args:
        settings_class: Settings class to instantiate
        env_file: Optional path to .env file (overrides LOAD_ENV_FILE)

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If specified .env file doesn't exist
    """
    env_file_path = env_file or os.getenv('LOAD_ENV_FILE')

    if not env_file_path:
        return settings_class()

    resolved_path = pathlib.Path(env_file_path).resolve()
    if not resolved_path.exists():
        raise FileNotFoundError(f'Environment file not found: {resolved_path}')

    return settings_class(_env_file=resolved_path)


def lazy_settings(settings_class: type[T]) -> T:
    """Proxy that instantiates settings on first access."""
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))


# Module-level singleton (lazy-loaded)
settings = lazy_settings(BrewformSettings)
