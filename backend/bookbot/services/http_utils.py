"""
Outbound HTTP helpers with timeout and retry logic.
"""
import asyncio
from typing import Awaitable, Callable

import httpx

from bookbot.core.config import settings
from bookbot.core.logging import logger


class ExternalServiceError(Exception):
    """Exception raised when an external call fails after all retries."""

    def __init__(self, message: str, original_error: Exception = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)


def _is_retryable(error: Exception) -> bool:
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return False


def build_client(transport: httpx.AsyncBaseTransport = None) -> httpx.AsyncClient:
    """Create an AsyncClient with the configured timeout."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS),
        transport=transport,
    )


async def request_with_retry(
    send: Callable[[], Awaitable[httpx.Response]],
    operation: str,
    max_retries: int = None,
    retry_delay: float = None,
    exponential_backoff: bool = True,
) -> httpx.Response:
    """
    Run an HTTP request with automatic retry logic.

    Transport errors (including timeouts) and 5xx responses are retried;
    any other HTTP error is raised on the first attempt.

    Args:
        send: Coroutine factory that performs the request
        operation: Name used in log lines
        max_retries: Maximum number of retry attempts
        retry_delay: Initial delay between retries in seconds
        exponential_backoff: Whether to use exponential backoff

    Returns:
        The successful response

    Raises:
        ExternalServiceError: When the call still fails after every attempt
            or fails with a non-retryable HTTP status
    """
    if max_retries is None:
        max_retries = settings.HTTP_MAX_RETRIES
    if retry_delay is None:
        retry_delay = settings.HTTP_RETRY_DELAY_SECONDS

    delay = retry_delay
    last_error = None

    for attempt in range(max_retries + 1):
        try:
            response = await send()
            response.raise_for_status()
            return response
        except httpx.HTTPError as e:
            last_error = e
            if not _is_retryable(e):
                logger.error(f"{operation} failed with non-retryable error: {e}")
                raise ExternalServiceError(f"{operation} failed", original_error=e)

            if attempt < max_retries:
                logger.warning(
                    f"{operation} failed (attempt {attempt + 1}/{max_retries + 1}): {e}. "
                    f"Retrying in {delay:.1f}s..."
                )
                await asyncio.sleep(delay)
                if exponential_backoff:
                    delay *= 2
            else:
                logger.error(f"{operation} failed after {max_retries + 1} attempts: {e}")

    raise ExternalServiceError(
        f"{operation} failed after {max_retries + 1} attempts",
        original_error=last_error,
    )
