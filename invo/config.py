"""Configuration helpers for the INVO SDK."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .auth.types import LoginResponse
    from .exceptions import AuthError

PRODUCTION = "production"
SANDBOX = "sandbox"
ENVIRONMENTS = (PRODUCTION, SANDBOX)

BASE_URLS = {
    PRODUCTION: "https://api.invo.rest",
    SANDBOX: "https://sandbox.invo.rest",
}

DEFAULT_ENVIRONMENT = PRODUCTION
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_REFRESH_SKEW_SECONDS = 300

# API keys carry their environment in a fixed prefix
API_KEY_PREFIXES = {
    "invo_tok_prod_": PRODUCTION,
    "invo_tok_sand_": SANDBOX,
}

LOGIN_PATH = "/auth/login"
REFRESH_PATH = "/auth/refresh"
TOKEN_PATH = "/auth/token"
INVOICE_STORE_PATH = "/invoice/store"
READER_PATH = "/reader"
MAKEUP_PATH = "/makeup"

PASSWORD_FLOW = "password"
KEY_FLOW = "api_key"

_PLACEHOLDER_VALUES = frozenset({"YOUR_API_TOKEN", "YOUR_EMAIL", "YOUR_PASSWORD"})


def sanitize_base_url(url: str) -> str:
    """Ensure the base URL never ends with a trailing slash."""

    return url.rstrip("/")


def detect_environment(api_key: str) -> str | None:
    """Return the environment encoded in an API key prefix, or None if unknown."""
    for prefix, environment in API_KEY_PREFIXES.items():
        if api_key.startswith(prefix):
            return environment
    return None


def _is_real_value(value: str | None) -> bool:
    return bool(value and value.strip() and value.strip() not in _PLACEHOLDER_VALUES)


def _from_env(explicit: str | None, env_var: str) -> str | None:
    """Explicit parameter > environment variable; placeholders count as missing."""
    if _is_real_value(explicit):
        return explicit
    env_value = os.environ.get(env_var)
    if _is_real_value(env_value):
        return env_value
    return None


def _noop(*args: object) -> None:
    return None


@dataclass(frozen=True)
class SessionConfig:
    """Immutable settings for one SDK session."""

    flow: str
    environment: str
    api_url: str
    email: Optional[str] = None
    password: Optional[str] = None
    api_key: Optional[str] = None
    workspace_id: Optional[str] = None
    auto_refresh: bool = True
    refresh_skew_seconds: int = DEFAULT_REFRESH_SKEW_SECONDS
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    on_token_refreshed: Callable[["LoginResponse"], None] = _noop
    on_logout: Callable[[], None] = _noop
    on_error: Callable[["AuthError"], None] = _noop

    @classmethod
    def build(
        cls,
        *,
        email: str | None = None,
        password: str | None = None,
        api_key: str | None = None,
        workspace_id: str | None = None,
        environment: str | None = None,
        base_url: str | None = None,
        auto_refresh: bool = True,
        refresh_skew_seconds: int = DEFAULT_REFRESH_SKEW_SECONDS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        on_token_refreshed: Callable[["LoginResponse"], None] | None = None,
        on_logout: Callable[[], None] | None = None,
        on_error: Callable[["AuthError"], None] | None = None,
    ) -> SessionConfig:
        """Validate constructor arguments and resolve missing values from the environment.

        Order: explicit parameter > INVO_* environment variable.

        Raises:
            ConfigurationError: On an unknown environment, a negative skew, or
                when the credential sources are missing or ambiguous.
        """
        environment = environment or os.environ.get("INVO_ENV") or None
        if environment is not None and environment not in ENVIRONMENTS:
            raise ConfigurationError(
                f"Invalid environment {environment!r}. Allowed values are {', '.join(ENVIRONMENTS)}."
            )
        if refresh_skew_seconds < 0:
            raise ConfigurationError("refresh_skew_seconds must be >= 0")

        explicit_key = _is_real_value(api_key)
        explicit_password = _is_real_value(email) or _is_real_value(password)
        if explicit_key and explicit_password:
            raise ConfigurationError("Pass either api_key or email/password, not both.")

        if not explicit_password:
            api_key = _from_env(api_key, "INVO_API_TOKEN")
        if api_key and not explicit_password:
            flow = KEY_FLOW
            email = password = None
            workspace_id = _from_env(workspace_id, "INVO_WORKSPACE")
            environment = environment or detect_environment(api_key) or DEFAULT_ENVIRONMENT
        else:
            email = _from_env(email, "INVO_EMAIL")
            password = _from_env(password, "INVO_PASSWORD")
            if not email or not password:
                raise ConfigurationError(
                    "No credentials provided. Pass api_key, or email and password, "
                    "or set INVO_API_TOKEN / INVO_EMAIL and INVO_PASSWORD."
                )
            if workspace_id:
                raise ConfigurationError("workspace_id is only supported with api_key authentication.")
            flow = PASSWORD_FLOW
            environment = environment or DEFAULT_ENVIRONMENT

        return cls(
            flow=flow,
            environment=environment,
            api_url=sanitize_base_url(base_url or BASE_URLS[environment]),
            email=email,
            password=password,
            api_key=api_key,
            workspace_id=workspace_id,
            auto_refresh=auto_refresh,
            refresh_skew_seconds=refresh_skew_seconds,
            timeout=timeout,
            on_token_refreshed=on_token_refreshed or _noop,
            on_logout=on_logout or _noop,
            on_error=on_error or _noop,
        )

    @property
    def is_password_flow(self) -> bool:
        return self.flow == PASSWORD_FLOW

    def __repr__(self) -> str:
        return (
            f"SessionConfig(flow={self.flow!r}, environment={self.environment!r}, "
            f"api_url={self.api_url!r}, workspace_id={self.workspace_id!r})"
        )
