"""
Error taxonomy and API error translation for treefetch.
"""

import functools
import inspect
from typing import Any, Callable, Optional

import httpx

from .logger import logger


class FetchError(Exception):
    """Base exception for every fatal treefetch failure."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message} (Original: {self.original_error})"
        return self.message


class InvalidURLError(FetchError):
    """The URL is not a GitHub repository URL."""


class BadCredentialsError(FetchError):
    """GitHub rejected the supplied credential (HTTP 401)."""


class RateLimitExceededError(FetchError):
    """HTTP 403 without a usable credential."""


class AuthEscalationRetry(FetchError):
    """Internal signal: retry the current request with credentials attached."""


class NotFoundError(FetchError):
    """HTTP 404 for a listing or a file."""


class ConnectivityLostError(FetchError):
    """The network stayed unreachable for longer than the grace period."""


class GenericTransferError(FetchError):
    """Any other non-2xx response or network failure."""


class ConfigError(FetchError):
    """The JSON config file could not be used."""


NOT_FOUND_HINT = "Please check that the repository URL is correct and the path exists on that branch."


def error_for_status(response: httpx.Response) -> FetchError:
    """Map a failed response onto the taxonomy."""

    status = response.status_code
    try:
        url = str(response.request.url)
    except RuntimeError:
        url = "<unknown>"

    if status == 401:
        return BadCredentialsError("Bad credentials, please check your username or token.")
    if status == 403:
        return RateLimitExceededError(
            "API rate limit exceeded. Supply credentials with --auth to raise the limit."
        )
    if status == 404:
        return NotFoundError(f"Not found: {url}. {NOT_FOUND_HINT}")
    return GenericTransferError(f"Request to {url} failed with HTTP {status}")


def _translate(error: Exception) -> FetchError:
    if isinstance(error, FetchError):
        return error
    if isinstance(error, httpx.HTTPStatusError):
        return error_for_status(error.response)
    if isinstance(error, httpx.RequestError):
        return GenericTransferError(f"Network error: {error}", error)
    if isinstance(error, OSError):
        return GenericTransferError(f"Filesystem error: {error}", error)
    return GenericTransferError(f"Unexpected error: {error}", error)


def handle_api_error(func: Callable) -> Callable:
    """
    Decorator translating httpx and filesystem errors into FetchError.

    Works on both plain and coroutine functions.
    """

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                translated = _translate(e)
                if translated is not e:
                    logger.debug(f"{func.__name__} failed: {e!r}")
                    raise translated from e
                raise

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            translated = _translate(e)
            if translated is not e:
                logger.debug(f"{func.__name__} failed: {e!r}")
                raise translated from e
            raise

    return wrapper


__all__ = [
    "FetchError",
    "InvalidURLError",
    "BadCredentialsError",
    "RateLimitExceededError",
    "AuthEscalationRetry",
    "NotFoundError",
    "ConnectivityLostError",
    "GenericTransferError",
    "ConfigError",
    "error_for_status",
    "handle_api_error",
]
