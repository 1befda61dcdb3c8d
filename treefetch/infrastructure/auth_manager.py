"""
Credential handling and the 403 escalation policy.

Requests start unauthenticated unless ``always_use_auth`` was requested.
The first 403 seen while a credential is available switches the run to
authenticated requests for good and retries that one request once.
"""

from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple

import httpx

from .error_handler import (
    AuthEscalationRetry, RateLimitExceededError, error_for_status
)
from .rate_limiter import RateLimitTracker
from .logger import logger


RequestFactory = Callable[[Optional[httpx.Auth]], Awaitable[httpx.Response]]


class AuthState(Enum):
    NO_AUTH = "no_auth"
    CONFIGURED_UNUSED = "configured_unused"
    ACTIVE = "active"


class AuthManager:
    """Owns the credential and decides per request whether to attach it."""

    def __init__(
        self,
        credential: Optional[Tuple[str, str]] = None,
        force_always: bool = False,
        rate_limits: Optional[RateLimitTracker] = None
    ):
        self.credential = credential
        self.force_always = force_always
        self.rate_limits = rate_limits or RateLimitTracker()

        if credential and force_always:
            self._state = AuthState.ACTIVE
        elif credential:
            self._state = AuthState.CONFIGURED_UNUSED
        else:
            self._state = AuthState.NO_AUTH

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is AuthState.ACTIVE

    def current_auth(self) -> Optional[httpx.Auth]:
        """Credentials to attach to the next request, if any."""

        if self.is_active:
            username, secret = self.credential
            return httpx.BasicAuth(username, secret)
        return None

    def escalate(self) -> None:
        if self.credential is None:
            raise RateLimitExceededError("Cannot escalate without a credential")
        if not self.is_active:
            logger.info("Switching to authenticated requests for the rest of the run")
        self._state = AuthState.ACTIVE

    def check_response(self, response: httpx.Response, retried: bool = False) -> None:
        """
        Raise for a failed response.

        A 403 that can still be escalated raises AuthEscalationRetry, which
        only ``send`` is expected to catch.
        """

        self.rate_limits.update(response.headers)

        if response.is_success:
            return

        if response.status_code == 403:
            if self.credential is not None and not self.is_active and not retried:
                raise AuthEscalationRetry("Forbidden, retrying with credentials")

            reset = self.rate_limits.rate_limit_info.describe_reset()
            if self.is_active:
                message = "API rate limit exceeded for the supplied credentials."
            else:
                message = (
                    "API rate limit exceeded. "
                    "Supply credentials with --auth to raise the limit."
                )
            raise RateLimitExceededError(f"{message} {reset}".strip())

        raise error_for_status(response)

    async def send(self, request_factory: RequestFactory) -> httpx.Response:
        """
        Run one request through the escalation policy.

        ``request_factory`` receives the auth to use and returns the response.
        At most one retry happens per call.
        """

        response = await request_factory(self.current_auth())
        try:
            self.check_response(response)
            return response
        except AuthEscalationRetry:
            await response.aclose()
            self.escalate()
        except Exception:
            await response.aclose()
            raise

        logger.debug(f"Retrying {response.request.url} with credentials")
        response = await request_factory(self.current_auth())
        try:
            self.check_response(response, retried=True)
        except Exception:
            await response.aclose()
            raise
        return response


__all__ = [
    "AuthState",
    "AuthManager",
]
