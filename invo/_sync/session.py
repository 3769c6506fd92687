"""Credential lifecycle for the INVO SDK (sync).

Thread-based twin of :mod:`invo._async.session`. A lock serialises logins
and refreshes; a thread that waited on it takes the outcome of the flight it
waited for, success or failure, instead of authenticating again.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Any, Callable

from .._http import report
from ..auth.credentials import Credentials, CredentialStore
from ..auth.token import decode_token, is_token_expired
from ..auth.types import LoginResponse, User
from ..config import LOGIN_PATH, REFRESH_PATH, TOKEN_PATH
from ..exceptions import AuthError, ConfigurationError, MalformedTokenError, TokenExpiredError
from .executor import RequestExecutor

if TYPE_CHECKING:
    import httpx

    from ..config import SessionConfig

logger = logging.getLogger(__name__)


class Session:
    """Session manager: login, refresh, API-key exchange and request gating."""

    def __init__(self, config: SessionConfig, client: httpx.Client) -> None:
        self._config = config
        self._store = CredentialStore()
        self._executor = RequestExecutor(client, config, self._authorize)
        self._flight_lock = threading.Lock()
        self._flights = 0
        self._last_outcome: LoginResponse | AuthError | None = None
        self._outcome_generation = 0
        self._timer: threading.Timer | None = None
        self._timer_lock = threading.Lock()
        self._generation = 0

    @property
    def executor(self) -> RequestExecutor:
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

    def login(self) -> LoginResponse:
        """Log in with the configured email and password.

        Raises:
            ConfigurationError: If this session was configured with an API key.
            InvalidCredentialsError: If the server rejects the credentials.
            NetworkError: On transport failures.
        """
        if not self._config.is_password_flow:
            raise ConfigurationError("login() requires email and password; API-key sessions authenticate automatically.")
        return self._single_flight(self._login)

    def login_with_key(self) -> LoginResponse:
        """Exchange the configured API key for an access token."""
        if self._config.is_password_flow:
            raise ConfigurationError("login_with_key() requires an api_key.")
        return self._single_flight(self._login_with_key)

    def refresh(self) -> LoginResponse:
        """Trade the refresh token for new credentials.

        Existing credentials are kept if the refresh fails.

        Raises:
            TokenExpiredError: If no refresh token is held.
        """
        if not self._store.refresh_token:
            raise self._fail(TokenExpiredError("No refresh token available"))
        return self._single_flight(self._refresh)

    def ensure_authenticated(self) -> None:
        """Make sure a valid access token is held before an authenticated call."""
        if self.is_authenticated():
            return

        if self._config.is_password_flow:
            if self._store.access_token is None:
                raise self._fail(TokenExpiredError("No access token available. Please login first."))
            self.refresh()
            return

        self._single_flight(self._login_with_key, unless=self.is_authenticated)

    def logout(self) -> None:
        """Forget all tokens and stop auto-refresh. Safe to call repeatedly."""
        self._cancel_refresh_timer()
        self._generation += 1
        self._store.clear()
        logger.debug("Session logged out")
        self._config.on_logout()

    def close(self) -> None:
        """Stop background refresh work without touching credentials."""
        self._cancel_refresh_timer()

    def _authorize(self) -> str | None:
        self.ensure_authenticated()
        return self._store.access_token

    def _single_flight(
        self,
        operation: Callable[[], LoginResponse],
        unless: Callable[[], bool] | None = None,
    ) -> LoginResponse:
        flight = self._flights
        generation = self._generation
        with self._flight_lock:
            outcome = self._last_outcome
            # Another thread ran a login or refresh while we waited, started after
            # the same logout as this call
            fresh = self._outcome_generation == generation == self._generation
            if self._flights != flight and fresh and outcome is not None:
                if isinstance(outcome, AuthError):
                    raise outcome
                return outcome
            if unless is not None and unless() and fresh and isinstance(outcome, LoginResponse):
                return outcome

            started = self._generation
            try:
                response = operation()
            except AuthError as e:
                self._last_outcome = e
                raise
            else:
                self._last_outcome = response
                return response
            finally:
                self._outcome_generation = started
                self._flights += 1

    def _login(self) -> LoginResponse:
        generation = self._generation
        data = self._executor.send(
            LOGIN_PATH,
            "POST",
            body={"email": self._config.email, "password": self._config.password},
            requires_auth=False,
        )
        response = self._save(data, generation)
        logger.debug("Logged in as user %s", response.user.id)
        return response

    def _login_with_key(self) -> LoginResponse:
        generation = self._generation
        data = self._executor.send(
            TOKEN_PATH,
            "POST",
            body={"api_token": self._config.api_key},
            requires_auth=False,
        )
        response = self._save(data, generation, keep_refresh_token=False)
        logger.debug("Exchanged API key for access token (user %s)", response.user.id)
        return response

    def _refresh(self) -> LoginResponse:
        generation = self._generation
        refresh_token = self._store.refresh_token
        if not refresh_token:
            raise self._fail(TokenExpiredError("No refresh token available"))
        data = self._executor.send(
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
        delay = self._refresh_delay(response)
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if delay is None:
                logger.warning("Could not determine token expiry; auto-refresh disabled for this token")
                return
            timer = threading.Timer(delay, self._auto_refresh)
            timer.daemon = True
            timer.start()
            self._timer = timer
        logger.debug("Auto-refresh scheduled in %.0f seconds", delay)

    def _cancel_refresh_timer(self) -> None:
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _auto_refresh(self) -> None:
        with self._timer_lock:
            if self._timer is threading.current_thread():
                self._timer = None
        try:
            self.refresh()
        except AuthError as e:
            logger.warning("Auto-refresh failed: %s", e)
            self._fail(e)
        except Exception:
            logger.exception("Auto-refresh failed")
