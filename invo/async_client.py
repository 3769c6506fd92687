"""Asynchronous HTTP client for the INVO SDK."""

from __future__ import annotations

from typing import Any, Callable

import httpx

from ._async import AsyncInvoicesNamespace, AsyncSession
from .auth.types import LoginResponse, User
from .config import DEFAULT_REFRESH_SKEW_SECONDS, DEFAULT_TIMEOUT_SECONDS, SessionConfig
from .exceptions import AuthError


class AsyncInvoClient:
    """Asynchronous client for the INVO API.

    Example:
        >>> import asyncio
        >>> from invo import AsyncInvoClient
        >>>
        >>> async def main():
        ...     async with AsyncInvoClient(api_key="invo_tok_prod_...") as client:
        ...         result = await client.invoices.create({...})
        ...         print(result.invoice_id)
        >>>
        >>> asyncio.run(main())

    API-key clients log in on the first authenticated call; concurrent first
    calls share a single login request.

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
        """Initialize the async INVO client.

        Takes the same arguments as :class:`invo.InvoClient`.

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
        self._client = httpx.AsyncClient(timeout=timeout)
        self._session = AsyncSession(self._config, self._client)

        # Initialize async namespaces
        self.invoices = AsyncInvoicesNamespace(self._session.executor)

    @property
    def session(self) -> AsyncSession:
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

    async def login(self) -> LoginResponse:
        """Log in with email and password. See :meth:`AsyncSession.login`."""
        return await self._session.login()

    async def refresh(self) -> LoginResponse:
        """Refresh the access token. See :meth:`AsyncSession.refresh`."""
        return await self._session.refresh()

    def logout(self) -> None:
        """Clear tokens held in memory."""
        self._session.logout()

    def is_authenticated(self) -> bool:
        return self._session.is_authenticated()

    async def request(
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
        return await self._session.executor.send(path, method.upper(), body=body, requires_auth=requires_auth)

    async def close(self) -> None:
        """Stop auto-refresh and release the underlying HTTP client resources."""
        self._session.close()
        await self._client.aclose()

    async def __aenter__(self) -> AsyncInvoClient:
        return self

    async def __aexit__(self, exc_type: type | None, exc: BaseException | None, traceback: Any) -> None:
        await self.close()
