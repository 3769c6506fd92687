"""Typed return values for authentication operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..exceptions import UnexpectedResponseError


@dataclass(frozen=True)
class User:
    """Authenticated user identity."""

    id: str
    email: str
    role: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> User:
        return cls(id=str(data.get("id", "")), email=str(data.get("email", "")), role=data.get("role"))


@dataclass(frozen=True)
class LoginResponse:
    """Body returned by the login, refresh and token-exchange endpoints."""

    access_token: str
    user: User
    expires_in: int | None = None
    refresh_token: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Any) -> LoginResponse:
        """Build from a decoded JSON body.

        Raises:
            UnexpectedResponseError: If the body lacks an access token or user.
        """
        if not isinstance(data, dict) or not data.get("access_token"):
            raise UnexpectedResponseError("Authentication response has no access_token")
        user = data.get("user")
        if not isinstance(user, dict):
            raise UnexpectedResponseError("Authentication response has no user")

        expires_in = data.get("expires_in")
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token") or None,
            expires_in=int(expires_in) if isinstance(expires_in, (int, float)) else None,
            user=User.from_dict(user),
            raw=data,
        )
