"""Utility helpers for the go-e Charger integration."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Any

_LOGGER = logging.getLogger(__name__)

# Maximum length for error messages shown to users
MAX_ERROR_LENGTH = 200


def describe_error(err: BaseException) -> str:
    """Return a short, user-facing description of an error."""
    message = str(err) or type(err).__name__
    if len(message) > MAX_ERROR_LENGTH:
        message = message[:MAX_ERROR_LENGTH] + "..."
    return message


def validate_and_clamp_option(
    value: Any,
    min_val: int,
    max_val: int,
    default: int,
    option_name: str,
) -> int:
    """Validate and clamp a numeric option value to a range.

    Args:
        value: The raw option value to validate
        min_val: Minimum allowed value
        max_val: Maximum allowed value
        default: Default value if invalid
        option_name: Name for logging

    Returns:
        Clamped integer value within range, or default if invalid
    """
    try:
        clamped = max(min_val, min(int(value), max_val))
        if clamped != value:
            _LOGGER.warning(
                "%s value %s out of range, clamped to %d",
                option_name,
                value,
                clamped,
            )
        return clamped
    except (TypeError, ValueError):
        _LOGGER.warning(
            "Invalid %s value %s, using default %d",
            option_name,
            value,
            default,
        )
        return default


async def async_cancel_task(task: asyncio.Task | None) -> None:
    """Cancel an asyncio task and wait for it to finish.

    Does nothing if task is None.
    """
    if task is None:
        return
    task.cancel()
    with suppress(asyncio.CancelledError):
        await task
