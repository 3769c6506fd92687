"""Synchronous HTTP client for the INVO SDK."""

from __future__ import annotations

from typing import Any, Callable

import httpx

from ._sync import InvoicesNamespace, Session
from .auth.types import LoginResponse, User
from .config import DEFAULT_REFRESH_SKEW_SECONDS, DEFAULT_TIMEOUT_SECONDS, SessionConfig
from .exceptions import AuthError


class InvoClient:
    """Synchronous client for the INVO API.

    Example:
        >>> from invo import InvoClient
        >>> client = InvoClient(api_key="invo_tok_prod_...")
        >>> result = client.invoices.create({...})
        >>> print(result.invoice_id)

    With email and password, call ``login()`` first; the access token is then
    refreshed in the background before it expires:

        >>> with InvoClient(email="me@example.com", password="...") as client:
        ...     client.login()
        ...     pdf = client.invoices.pdf({...})

    The client provides namespaced access to different API areas:
        - client.invoices: Invoice creation, file reading and PDF rendering
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        email: str | None = None,
        password: str | None = None,
        workspace_id: str | None = None,
        environment: str | None = None,
        base_url: str | None = None,
        auto_refresh: bool = True,
        refresh_skew_seconds: int = DEFAULT_REFRESH_SKEW_SECONDS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        on_token_refreshed: Callable[[LoginResponse], None] | None = None,
        on_logout: Callable[[], None] | None = None,
        on_error: Callable[[AuthError], None] | None = None,
    ) -> None:
        """Initialize the INVO client.

        Args:
            api_key: INVO API token ("invo_tok_prod_..." or "invo_tok_sand_...").
                If neither this nor email/password is given, reads
                INVO_API_TOKEN, then INVO_EMAIL and INVO_PASSWORD.
            email: Account email for password authentication.
            password: Account password for password authentication.
            workspace_id: Workspace to act on (API-key authentication only).
            environment: "production" or "sandbox". Detected from the API
                token prefix when omitted, otherwise "production".
            base_url: Override the environment's API URL.
            auto_refresh: Refresh password-session tokens before they expire.
            refresh_skew_seconds: How long before expiry to refresh (default: 300).
            timeout: Request timeout in seconds (default: 30).
            on_token_refreshed: Called with the LoginResponse after each refresh.
            on_logout: Called after logout().
            on_error: Called once with every AuthError before it is raised.

        Raises:
            ConfigurationError: On an invalid environment or missing credentials.
        """
        self._config = SessionConfig.build(
            email=email,
            password=password,
            api_key=api_key,
            workspace_id=workspace_id,
            environment=environment,
            base_url=base_url,
            auto_refresh=auto_refresh,
            refresh_skew_seconds=refresh_skew_seconds,
            timeout=timeout,
            on_token_refreshed=on_token_refreshed,
            on_logout=on_logout,
            on_error=on_error,
        )
        self._client = httpx.Client(timeout=timeout)
        self._session = Session(self._config, self._client)

        # Initialize namespaces
        self.invoices = InvoicesNamespace(self._session.executor)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def environment(self) -> str:
        return self._session.environment

    @property
    def api_url(self) -> str:
        return self._session.api_url

    @property
    def user(self) -> User | None:
        return self._session.user

    def login(self) -> LoginResponse:
        """Log in with email and password. See :meth:`Session.login`."""
        return self._session.login()

    def refresh(self) -> LoginResponse:
        """Refresh the access token. See :meth:`Session.refresh`."""
        return self._session.refresh()

    def logout(self) -> None:
        """Clear tokens held in memory."""
        self._session.logout()

    def is_authenticated(self) -> bool:
        return self._session.is_authenticated()

    def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        *,
        requires_auth: bool = True,
    ) -> Any:
        """Make a request to any API endpoint.

        Args:
            path: The API endpoint (e.g., "/users/me").
            method: HTTP method.
            body: JSON body (optional).
            requires_auth: Attach the bearer token (default: True).

        Returns:
            Decoded JSON response.
        """
        return self._session.executor.send(path, method.upper(), body=body, requires_auth=requires_auth)

    def close(self) -> None:
        """Stop auto-refresh and release the underlying HTTP client resources."""
        self._session.close()
        self._client.close()

    def __enter__(self) -> InvoClient:
        return self

    def __exit__(self, exc_type: type | None, exc: BaseException | None, traceback: Any) -> None:
        self.close()
