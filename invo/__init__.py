"""INVO Python SDK - Authentication and invoice management for the INVO API."""

from importlib.metadata import PackageNotFoundError, version

from .async_client import AsyncInvoClient
from .auth.token import decode_token, is_token_expired, seconds_until_expiry
from .auth.types import LoginResponse, User
from .client import InvoClient
from .exceptions import (
    AuthError,
    ConfigurationError,
    InvalidCredentialsError,
    InvalidTokenError,
    MalformedTokenError,
    NetworkError,
    OAuthError,
    TokenExpiredError,
    UnexpectedResponseError,
)
from .types import CreateInvoiceResult

__all__ = [
    "InvoClient",
    "AsyncInvoClient",
    "LoginResponse",
    "User",
    "CreateInvoiceResult",
    "AuthError",
    "ConfigurationError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MalformedTokenError",
    "NetworkError",
    "OAuthError",
    "TokenExpiredError",
    "UnexpectedResponseError",
    "decode_token",
    "is_token_expired",
    "seconds_until_expiry",
]

try:
    __version__ = version("invo-sdk")
except PackageNotFoundError:
    __version__ = "0.1.0"
