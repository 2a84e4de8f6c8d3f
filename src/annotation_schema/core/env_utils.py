#!/usr/bin/env python3
"""
Environment variable readers that tolerate sloppy .env files.

Values edited on Windows frequently arrive with CRLF endings or stray
whitespace; these helpers clean them before conversion.
"""

import os
import logging
from typing import Optional

logger = logging.getLogger(__name__)


def getenv_clean(key: str, default: str = None) -> Optional[str]:
    """Get environment variable stripped of whitespace and line endings.

    Args:
        key: Environment variable name
        default: Value to use if the variable is not set

    Returns:
        Cleaned value, or default if not set
    """
    raw_value = os.getenv(key, default)

    if raw_value is None:
        return None

    cleaned = raw_value.strip()

    if raw_value != cleaned:
        logger.warning(
            f"Environment variable {key} had trailing whitespace/line endings: "
            f"raw={repr(raw_value)}, cleaned={repr(cleaned)}"
        )

    return cleaned


def getenv_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean.

    Accepts true/1/yes/on and false/0/no/off in any case; anything else
    falls back to the default with a warning.
    """
    raw_value = getenv_clean(key, None)

    if raw_value is None:
        return default

    lowered = raw_value.lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    elif lowered in ("false", "0", "no", "off", ""):
        return False

    logger.warning(
        f"Environment variable {key} has unexpected boolean value: {repr(raw_value)}. "
        f"Using default: {default}"
    )
    return default


def getenv_int(key: str, default: int) -> int:
    """Get environment variable as integer, falling back to default if invalid."""
    raw_value = getenv_clean(key, None)

    if raw_value is None:
        return default

    try:
        return int(raw_value)
    except ValueError:
        logger.warning(
            f"Environment variable {key} is not a valid integer: {repr(raw_value)}. "
            f"Using default: {default}"
        )
        return default
