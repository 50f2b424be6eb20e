"""Runtime configuration.

This module owns all environment variable parsing. Other modules receive
a CandyConfig instead of reading the environment themselves.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from candy_values.errors import CandyConfigError

# Roughly the payload limit of a single transport message
DEFAULT_MAX_PAGE_SIZE = 2_000_000
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class CandyConfig:
    """Validated configuration.

    Attributes:
        max_page_size: Page budget, in estimated bytes, for workspace paging.
        log_level: Name of the logging level used by the command-line tool.
    """

    max_page_size: int = DEFAULT_MAX_PAGE_SIZE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CandyConfig:
        """Build config from environment variables.

        Raises:
            CandyConfigError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        max_page_size = _parse_page_size(env.get("CANDY_MAX_PAGE_SIZE", str(DEFAULT_MAX_PAGE_SIZE)))
        log_level = _parse_log_level(env.get("CANDY_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        return cls(max_page_size=max_page_size, log_level=log_level)


def _parse_page_size(raw_value: str) -> int:
    try:
        value = int(raw_value)
    except ValueError as error:
        raise CandyConfigError(
            f"Invalid CANDY_MAX_PAGE_SIZE value: expected integer, got '{raw_value}'"
        ) from error
    if value < 0:
        raise CandyConfigError(f"Invalid CANDY_MAX_PAGE_SIZE value: must be non-negative, got {value}")
    return value


def _parse_log_level(raw_value: str) -> str:
    level = raw_value.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise CandyConfigError(f"Invalid CANDY_LOG_LEVEL value: '{raw_value}'")
    return level
