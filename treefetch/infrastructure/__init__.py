"""
Infrastructure layer: logging, errors, credentials and connectivity.
"""

from .logger import logger
from .error_handler import (
    FetchError,
    InvalidURLError,
    BadCredentialsError,
    RateLimitExceededError,
    AuthEscalationRetry,
    NotFoundError,
    ConnectivityLostError,
    GenericTransferError,
    ConfigError,
)
from .auth_manager import AuthManager, AuthState
from .connectivity import ConnectivityMonitor

__all__ = [
    "logger",
    "FetchError",
    "InvalidURLError",
    "BadCredentialsError",
    "RateLimitExceededError",
    "AuthEscalationRetry",
    "NotFoundError",
    "ConnectivityLostError",
    "GenericTransferError",
    "ConfigError",
    "AuthManager",
    "AuthState",
    "ConnectivityMonitor",
]
