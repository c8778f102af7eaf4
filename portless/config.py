"""
Portless configuration settings.

Loads configuration from PORTLESS_* environment variables (and an optional
.env file in the working directory) via pydantic-settings.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

DEFAULT_PROXY_PORT = 1355


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PORTLESS_",
        env_file=".env",
        extra="ignore",  # Allow unrelated vars in a shared .env
    )

    state_dir: Optional[Path] = None  # Overrides system/user state dir resolution
    port: int = Field(default=DEFAULT_PROXY_PORT, ge=1, le=65535)  # Proxy listen port
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        # getLevelName returns an int only for registered level names
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @field_validator("state_dir")
    @classmethod
    def _expand_state_dir(cls, value: Optional[Path]) -> Optional[Path]:
        if value is None:
            return None
        value = value.expanduser()
        if not value.is_absolute():
            raise ValueError(f"state_dir must be an absolute path, got {value}")
        return value


def load_settings(**overrides) -> Settings:
    """Build a fresh Settings, re-reading the environment."""
    return Settings(**overrides)


settings = Settings()


def configure_logging(level: Union[str, int, None] = None) -> None:
    """Configure root logging with the standard portless format.

    For entry points only. Library modules just call logging.getLogger().
    """
    if level is None:
        level = settings.log_level
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    logging.getLogger().setLevel(level)
