"""
Environment configuration.

Only ambient concerns live here. Protocol addresses and discriminators are
data, kept in `solswaps.constants` and `solswaps.registry`.
"""

import logging
import os
from dataclasses import dataclass

ENV_PREFIX = "SOLSWAPS_"


@dataclass(frozen=True, slots=True)
class Settings:
    log_level: int = logging.WARNING


def _parse_level(value: str) -> int:
    value = value.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value!r}")
    return level


def get_settings() -> Settings:
    """
    Return the current settings, read from the environment.

    Returns:
        Settings with `log_level` taken from SOLSWAPS_LOG_LEVEL (default WARNING).
    """
    raw_level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL")
    if raw_level is None:
        return Settings()
    return Settings(log_level=_parse_level(raw_level))
