"""Utility functions for the Web Speech transcriber."""

import os
from typing import Optional


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable.

    Args:
        name: Variable name
        default: Value used when the variable is unset or empty

    Returns:
        True for "true", "1" or "yes" (case-insensitive)
    """
    value = os.getenv(name, "")
    if not value:
        return default
    return value.lower() in ("true", "1", "yes")


def env_seconds(name: str) -> Optional[float]:
    """Read an optional duration in seconds from the environment.

    Args:
        name: Variable name

    Returns:
        Positive float, or None when unset

    Raises:
        ValueError: If the value is not a positive number
    """
    value = os.getenv(name, "").strip()
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {value!r}") from None
    if seconds <= 0:
        raise ValueError(f"{name} must be positive, got {seconds}")
    return seconds


def describe_source(src: str, limit: int = 80) -> str:
    """Shorten an audio source for log messages.

    data: URLs can be megabytes long, so only their prefix is kept.
    """
    if len(src) <= limit:
        return src
    return f"{src[:limit]}... ({len(src)} chars)"
