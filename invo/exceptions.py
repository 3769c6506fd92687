"""Custom exceptions raised by the INVO SDK."""

from __future__ import annotations

from typing import Any, Optional


class ConfigurationError(ValueError):
    """Raised synchronously when the SDK is constructed or used with invalid settings."""


class AuthError(Exception):
    """Base exception for every request and authentication failure.

    ``kind`` names the failure category so callers can branch on it without
    isinstance checks; ``status_code`` is the HTTP status when one exists.
    """

    kind = "auth"
    default_message = "Request failed"
    default_status_code: Optional[int] = None
    # Set once the error has been handed to an on_error observer
    _reported = False

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        response: Optional[Any] = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.status_code = status_code if status_code is not None else self.default_status_code
        self.response = response

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


class InvalidCredentialsError(AuthError):
    """Raised when the server rejects the credentials or token (HTTP 401)."""

    kind = "invalid_credentials"
    default_message = "Invalid credentials"
    default_status_code = 401


class TokenExpiredError(AuthError):
    """Raised when no usable access or refresh token is available locally."""

    kind = "token_expired"
    default_message = "Token has expired"
    default_status_code = 401


class MalformedTokenError(AuthError):
    """Raised when a token cannot be decoded."""

    kind = "malformed_token"
    default_message = "Invalid or malformed token"
    default_status_code = 401


InvalidTokenError = MalformedTokenError


class NetworkError(AuthError):
    """Raised for transport-level failures; carries no HTTP status."""

    kind = "network"
    default_message = "Network request failed"


class OAuthError(AuthError):
    """Reserved for OAuth-based sign in."""

    kind = "oauth"
    default_message = "OAuth authentication failed"
    default_status_code = 401


class UnexpectedResponseError(AuthError):
    """Raised when a successful response does not have the expected shape."""

    kind = "unexpected_response"
    default_message = "Unexpected response from the INVO API"
