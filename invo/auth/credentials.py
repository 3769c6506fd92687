"""In-memory credential storage for one SDK session.

Tokens are never written to disk; a process restart means a fresh login.
"""

from __future__ import annotations

from dataclasses import dataclass

from .types import LoginResponse, User


@dataclass(frozen=True)
class Credentials:
    """Tokens and identity from the last successful authentication."""

    access_token: str | None = None
    refresh_token: str | None = None
    user: User | None = None

    def __post_init__(self) -> None:
        if (self.access_token is None) != (self.user is None):
            raise ValueError("access_token and user must be set together")

    @classmethod
    def from_login(cls, response: LoginResponse) -> Credentials:
        return cls(
            access_token=response.access_token,
            refresh_token=response.refresh_token,
            user=response.user,
        )

    def __repr__(self) -> str:
        return f"Credentials(user={self.user!r}, has_refresh_token={self.refresh_token is not None})"


EMPTY_CREDENTIALS = Credentials()


class CredentialStore:
    """Holds the current Credentials value.

    Every update swaps a single immutable object, so readers never observe a
    half-written state.
    """

    def __init__(self) -> None:
        self._credentials = EMPTY_CREDENTIALS

    def get(self) -> Credentials:
        return self._credentials

    def replace(self, credentials: Credentials) -> None:
        self._credentials = credentials

    def clear(self) -> None:
        self.replace(EMPTY_CREDENTIALS)

    @property
    def access_token(self) -> str | None:
        return self._credentials.access_token

    @property
    def refresh_token(self) -> str | None:
        return self._credentials.refresh_token

    @property
    def user(self) -> User | None:
        return self._credentials.user
