"""HTTP request retry helper with exponential backoff for the charger's local API."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import aiohttp

from .const import HTTP_TIMEOUT

_LOGGER = logging.getLogger(__name__)


def _jittered_backoff(backoff: float) -> float:
    """Apply equal jitter: half the backoff is guaranteed, plus up to the other half."""
    half = backoff / 2
    return half + random.uniform(0, half)


# HTTP status codes that should trigger a retry
RETRYABLE_STATUS_CODES = {
    408,  # Request Timeout
    500,  # Internal Server Error
    502,  # Bad Gateway
    503,  # Service Unavailable
    504,  # Gateway Timeout
}


@dataclass
class HttpResponse:
    """Wrapper for HTTP response data."""

    status: int
    text: str
    headers: Dict[str, str]

    @property
    def is_success(self) -> bool:
        """Check if response was successful."""
        return 200 <= self.status < 300

    @property
    def is_client_error(self) -> bool:
        """Check if the charger refused the request itself."""
        return 400 <= self.status < 500

    @property
    def is_server_error(self) -> bool:
        """Check if response indicates server error."""
        return 500 <= self.status < 600


async def async_request_with_retry(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
    max_retries: int = 1,
    initial_backoff: float = 0.5,
    max_backoff: float = 2.0,
    backoff_multiplier: float = 2.0,
    context: str = "HTTP request",
) -> Tuple[Optional[HttpResponse], Optional[Exception]]:
    """Make an HTTP request with retry logic for transient failures.

    Args:
        session: aiohttp client session
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        params: Optional query parameters
        timeout: Request timeout in seconds (default: HTTP_TIMEOUT)
        max_retries: Maximum number of retry attempts (default: 1)
        initial_backoff: Initial backoff delay in seconds (default: 0.5)
        max_backoff: Maximum backoff delay in seconds (default: 2.0)
        backoff_multiplier: Backoff multiplier for exponential backoff (default: 2.0)
        context: Description for logging (default: "HTTP request")

    Returns:
        Tuple of (HttpResponse, None) when the charger answered,
        or (None, Exception) on complete failure after all retries.

    Note:
        - Client errors (4xx) are returned immediately without retry
        - Server errors in RETRYABLE_STATUS_CODES and network errors trigger retries
    """
    request_timeout = aiohttp.ClientTimeout(total=timeout or HTTP_TIMEOUT)
    backoff = initial_backoff
    last_error: Optional[Exception] = None
    last_response: Optional[HttpResponse] = None

    for attempt in range(max_retries + 1):
        try:
            request_kwargs: Dict[str, Any] = {"timeout": request_timeout}
            if params:
                request_kwargs["params"] = params

            async with session.request(method, url, **request_kwargs) as response:
                text = await response.text()
                http_response = HttpResponse(
                    status=response.status,
                    text=text,
                    headers=dict(response.headers),
                )

                if http_response.is_success:
                    if attempt > 0:
                        _LOGGER.debug(
                            "%s succeeded after %d retries",
                            context,
                            attempt,
                        )
                    return http_response, None

                if http_response.is_client_error:
                    _LOGGER.debug(
                        "%s failed with status %d: %s",
                        context,
                        response.status,
                        text[:200] if text else text,
                    )
                    return http_response, None

                if response.status in RETRYABLE_STATUS_CODES:
                    last_response = http_response
                    if attempt < max_retries:
                        jittered = _jittered_backoff(backoff)
                        _LOGGER.debug(
                            "%s failed with status %d, retrying in %.1fs (attempt %d/%d)",
                            context,
                            response.status,
                            jittered,
                            attempt + 1,
                            max_retries + 1,
                        )
                        await asyncio.sleep(jittered)
                        backoff = min(backoff * backoff_multiplier, max_backoff)
                        continue

                # Unknown status - return as-is
                return http_response, None

        except asyncio.TimeoutError as err:
            last_error = err
            if attempt < max_retries:
                jittered = _jittered_backoff(backoff)
                _LOGGER.debug(
                    "%s timed out, retrying in %.1fs (attempt %d/%d)",
                    context,
                    jittered,
                    attempt + 1,
                    max_retries + 1,
                )
                await asyncio.sleep(jittered)
                backoff = min(backoff * backoff_multiplier, max_backoff)
                continue

        except aiohttp.ClientError as err:
            last_error = err
            if attempt < max_retries:
                jittered = _jittered_backoff(backoff)
                _LOGGER.debug(
                    "%s failed with %s: %s, retrying in %.1fs (attempt %d/%d)",
                    context,
                    type(err).__name__,
                    err,
                    jittered,
                    attempt + 1,
                    max_retries + 1,
                )
                await asyncio.sleep(jittered)
                backoff = min(backoff * backoff_multiplier, max_backoff)
                continue

    # All retries exhausted
    if last_error:
        _LOGGER.debug(
            "%s failed after %d attempts: %s",
            context,
            max_retries + 1,
            last_error,
        )
        return None, last_error

    if last_response:
        _LOGGER.debug(
            "%s failed after %d attempts with status %d",
            context,
            max_retries + 1,
            last_response.status,
        )
        return last_response, None

    return None, Exception(f"{context} failed with unknown error")
