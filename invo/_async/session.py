"""Credential lifecycle for the INVO SDK (async).

One ``AsyncSession`` owns the tokens of one client. Every authenticated call
goes through :meth:`AsyncSession.ensure_authenticated`; logins and refreshes
run as a single shared task so concurrent callers never trigger duplicate
authentication requests.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from .._http import report
from ..auth.credentials import Credentials, CredentialStore
from ..auth.token import decode_token, is_token_expired
from ..auth.types import LoginResponse, User
from ..config import LOGIN_PATH, REFRESH_PATH, TOKEN_PATH
from ..exceptions import AuthError, ConfigurationError, MalformedTokenError, TokenExpiredError
from .executor import AsyncRequestExecutor

if TYPE_CHECKING:
    import httpx

    from ..config import SessionConfig

logger = logging.getLogger(__name__)


class AsyncSession:
    """Session manager: login, refresh, API-key exchange and request gating."""

    def __init__(self, config: SessionConfig, client: httpx.AsyncClient) -> None:
        self._config = config
        self._store = CredentialStore()
        self._executor = AsyncRequestExecutor(client, config, self._authorize)
        self._inflight: asyncio.Task[LoginResponse] | None = None
        self._refresh_handle: asyncio.TimerHandle | None = None
        self._background: set[asyncio.Task[None]] = set()
        # Bumped by logout so a flight started before it cannot resurrect tokens
        self._generation = 0

    @property
    def executor(self) -> AsyncRequestExecutor:
        return self._executor

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def environment(self) -> str:
        return self._config.environment

    @property
    def api_url(self) -> str:
        return self._config.api_url

    @property
    def access_token(self) -> str | None:
        return self._store.access_token

    @property
    def refresh_token(self) -> str | None:
        return self._store.refresh_token

    @property
    def user(self) -> User | None:
        return self._store.user

    def is_authenticated(self) -> bool:
        """True if an access token is held and has not expired."""
        token = self._store.access_token
        return token is not None and not is_token_expired(token)

    async def login(self) -> LoginResponse:
        """Log in with the configured email and password.

        Raises:
            ConfigurationError: If this session was configured with an API key.
            InvalidCredentialsError: If the server rejects the credentials.
            NetworkError: On transport failures.
        """
        if not self._config.is_password_flow:
            raise ConfigurationError("login() requires email and password; API-key sessions authenticate automatically.")
        return await self._single_flight(self._login)

    async def login_with_key(self) -> LoginResponse:
        """Exchange the configured API key for an access token."""
        if self._config.is_password_flow:
            raise ConfigurationError("login_with_key() requires an api_key.")
        return await self._single_flight(self._login_with_key)

    async def refresh(self) -> LoginResponse:
        """Trade the refresh token for new credentials.

        Existing credentials are kept if the refresh fails.

        Raises:
            TokenExpiredError: If no refresh token is held.
        """
        if not self._store.refresh_token:
            raise self._fail(TokenExpiredError("No refresh token available"))
        return await self._single_flight(self._refresh)

    async def ensure_authenticated(self) -> None:
        """Make sure a valid access token is held before an authenticated call.

        API-key sessions log in on demand; password sessions refresh an expired
        token. Callers arriving while a login or refresh is running wait for it
        instead of starting another one.
        """
        if self.is_authenticated():
            return

        if self._inflight is not None:
            await asyncio.shield(self._inflight)
            return

        if self._config.is_password_flow:
            if self._store.access_token is None:
                raise self._fail(TokenExpiredError("No access token available. Please login first."))
            await self.refresh()
            return

        await self._single_flight(self._login_with_key)

    def logout(self) -> None:
        """Forget all tokens and stop auto-refresh. Safe to call repeatedly."""
        self._cancel_refresh_timer()
        self._generation += 1
        self._inflight = None
        self._store.clear()
        logger.debug("Session logged out")
        self._config.on_logout()

    def close(self) -> None:
        """Stop background refresh work without touching credentials."""
        self._cancel_refresh_timer()
        for task in list(self._background):
            task.cancel()

    async def _authorize(self) -> str | None:
        await self.ensure_authenticated()
        return self._store.access_token

    async def _single_flight(self, operation: Callable[[], Awaitable[LoginResponse]]) -> LoginResponse:
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._run_flight(operation))
        return await asyncio.shield(self._inflight)

    async def _run_flight(self, operation: Callable[[], Awaitable[LoginResponse]]) -> LoginResponse:
        try:
            return await operation()
        finally:
            # A logout may have already replaced this flight with a newer one
            if self._inflight is asyncio.current_task():
                self._inflight = None

    async def _login(self) -> LoginResponse:
        generation = self._generation
        data = await self._executor.send(
            LOGIN_PATH,
            "POST",
            body={"email": self._config.email, "password": self._config.password},
            requires_auth=False,
        )
        response = self._save(data, generation)
        logger.debug("Logged in as user %s", response.user.id)
        return response

    async def _login_with_key(self) -> LoginResponse:
        generation = self._generation
        data = await self._executor.send(
            TOKEN_PATH,
            "POST",
            body={"api_token": self._config.api_key},
            requires_auth=False,
        )
        response = self._save(data, generation, keep_refresh_token=False)
        logger.debug("Exchanged API key for access token (user %s)", response.user.id)
        return response

    async def _refresh(self) -> LoginResponse:
        generation = self._generation
        refresh_token = self._store.refresh_token
        if not refresh_token:
            raise self._fail(TokenExpiredError("No refresh token available"))
        data = await self._executor.send(
            REFRESH_PATH,
            "POST",
            body={"refresh_token": refresh_token},
            requires_auth=False,
        )
        response = self._save(data, generation)
        logger.debug("Access token refreshed")
        self._config.on_token_refreshed(response)
        return response

    def _save(self, data: Any, generation: int, keep_refresh_token: bool = True) -> LoginResponse:
        if generation != self._generation:
            raise self._fail(TokenExpiredError("Session was logged out during authentication"))
        try:
            response = LoginResponse.from_dict(data)
        except AuthError as e:
            raise self._fail(e)

        credentials = Credentials.from_login(response)
        if not keep_refresh_token:
            credentials = Credentials(access_token=credentials.access_token, user=credentials.user)
        self._store.replace(credentials)

        if self._config.is_password_flow and self._config.auto_refresh:
            self._schedule_refresh(response)
        return response

    def _fail(self, error: AuthError) -> AuthError:
        return report(error, self._config.on_error)

    def _refresh_delay(self, response: LoginResponse) -> float | None:
        try:
            lifetime = decode_token(response.access_token).expires_at - time.time()
        except MalformedTokenError:
            if response.expires_in is None:
                return None
            lifetime = response.expires_in
        return max(0.0, lifetime - self._config.refresh_skew_seconds)

    def _schedule_refresh(self, response: LoginResponse) -> None:
        self._cancel_refresh_timer()
        delay = self._refresh_delay(response)
        if delay is None:
            logger.warning("Could not determine token expiry; auto-refresh disabled for this token")
            return
        loop = asyncio.get_running_loop()
        self._refresh_handle = loop.call_later(delay, self._on_refresh_timer)
        logger.debug("Auto-refresh scheduled in %.0f seconds", delay)

    def _cancel_refresh_timer(self) -> None:
        if self._refresh_handle is not None:
            self._refresh_handle.cancel()
            self._refresh_handle = None

    def _on_refresh_timer(self) -> None:
        self._refresh_handle = None
        task = asyncio.ensure_future(self._auto_refresh())
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _auto_refresh(self) -> None:
        try:
            await self.refresh()
        except AuthError as e:
            logger.warning("Auto-refresh failed: %s", e)
            self._fail(e)
        except Exception:
            logger.exception("Auto-refresh failed")
