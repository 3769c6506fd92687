"""Test configuration for INVO SDK tests."""

from __future__ import annotations

import asyncio
import base64
import json
import time
from typing import Any, Callable

import httpx
import pytest

from invo import InvoClient

API_URL = "https://api.invo.rest"
SANDBOX_URL = "https://sandbox.invo.rest"


def _segment(data: dict[str, Any]) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()


def build_token(expires_in: int = 3600, **claims: Any) -> str:
    now = int(time.time())
    payload = {"sub": "user-123", "email": "user@example.com", "iat": now, "exp": now + expires_in}
    payload.update(claims)
    return f"{_segment({'alg': 'HS256', 'typ': 'JWT'})}.{_segment(payload)}.signature"


def auth_body(access_token: str | None = None, refresh_token: str | None = "refresh-1") -> dict[str, Any]:
    body: dict[str, Any] = {
        "access_token": access_token or build_token(),
        "expires_in": 3600,
        "user": {"id": "user-123", "email": "user@example.com", "role": "client"},
    }
    if refresh_token is not None:
        body["refresh_token"] = refresh_token
    return body


class FakeAPI:
    """Routes mocked httpx ``request`` calls by path and records them.

    A route value may be an httpx.Response, an exception instance, a list of
    either (consumed in order), or a callable taking the call kwargs.
    """

    def __init__(self, base_url: str = API_URL, **routes: Any) -> None:
        self.base_url = base_url
        self.routes: dict[str, Any] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        for path, route in routes.items():
            self.routes[path] = route

    def route(self, path: str, value: Any) -> FakeAPI:
        self.routes[path] = value
        return self

    def paths(self) -> list[str]:
        return [url[len(self.base_url):] for _, url, _ in self.calls]

    def count(self, path: str) -> int:
        return self.paths().count(path)

    def last(self, path: str) -> dict[str, Any]:
        for _, url, kwargs in reversed(self.calls):
            if url == f"{self.base_url}{path}":
                return kwargs
        raise AssertionError(f"{path} was never requested")

    def __call__(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        self.calls.append((method, url, kwargs))
        path = url[len(self.base_url):]
        if path not in self.routes:
            return httpx.Response(404, json={"message": f"No route for {path}"})
        route = self.routes[path]
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if callable(route) and not isinstance(route, httpx.Response):
            route = route(**kwargs)
        if isinstance(route, BaseException):
            raise route
        return route


class AsyncFakeAPI(FakeAPI):
    """FakeAPI whose calls yield to the event loop before answering."""

    async def handle(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        await asyncio.sleep(0)
        return self(method, url, **kwargs)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep INVO_* variables from the developer's shell out of the tests."""
    for name in ("INVO_API_TOKEN", "INVO_EMAIL", "INVO_PASSWORD", "INVO_ENV", "INVO_WORKSPACE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_token() -> Callable[..., str]:
    return build_token


@pytest.fixture
def client():
    """Shared API-key InvoClient fixture for sync tests."""
    client = InvoClient(api_key="invo_tok_prod_test")
    yield client
    client.close()


@pytest.fixture
def password_client():
    """Password-flow InvoClient with auto-refresh disabled."""
    client = InvoClient(email="user@example.com", password="secret", auto_refresh=False)
    yield client
    client.close()
