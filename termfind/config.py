from __future__ import annotations

import logging
from typing import Optional, Tuple

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from termfind.exceptions import ConfigError


DEFAULT_HIGHLIGHT_RGBA = (0.0, 0.5, 1.0, 0.35)


class FindSettings(BaseSettings):
    """Find feature settings, loaded from TERMFIND_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TERMFIND_",
        env_file=".env",
        extra="ignore",
    )

    # The find panel searches case-insensitively unless told otherwise
    case_sensitive: bool = False
    # 0 = unlimited
    max_matches: int = Field(default=5000, ge=0)
    # None disables the engine timeout
    engine_timeout_ms: Optional[int] = Field(default=None, gt=0)
    highlight_rgba: Tuple[float, float, float, float] = DEFAULT_HIGHLIGHT_RGBA
    log_level: str = "WARNING"


def load_settings(**overrides) -> FindSettings:
    """Load settings from the environment and .env, applying keyword overrides."""
    try:
        return FindSettings(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid find settings: {e}") from e


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a stderr handler to the package logger at the given level."""
    logger = logging.getLogger("termfind")
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"Unknown log level: {level}")
    logger.setLevel(numeric)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s: %(message)s"))
        logger.addHandler(handler)
    return logger
