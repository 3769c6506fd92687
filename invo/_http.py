"""Shared HTTP request utilities for sync and async clients."""

from __future__ import annotations

from typing import Any, Callable

import httpx

from .exceptions import (
    AuthError,
    InvalidCredentialsError,
    NetworkError,
    UnexpectedResponseError,
)

JSON_CONTENT_TYPE = "application/json"
RESPONSE_JSON = "json"
RESPONSE_BYTES = "bytes"

# Field the /makeup endpoint uses when it wraps the PDF in JSON
BUFFER_FIELD = "invoice"


def build_headers(
    *,
    environment: str,
    access_token: str | None = None,
    workspace_id: str | None = None,
    content_type: str | None = JSON_CONTENT_TYPE,
) -> dict[str, str]:
    """Build request headers.

    ``content_type=None`` omits the header so httpx can set a multipart boundary.
    """
    headers = {"X-Environment": environment}
    if content_type is not None:
        headers["Content-Type"] = content_type
    if access_token is not None:
        headers["Authorization"] = f"Bearer {access_token}"
    if workspace_id:
        headers["X-Workspace-Id"] = workspace_id
    return headers


def build_request_kwargs(
    headers: dict[str, str],
    body: Any = None,
    files: Any = None,
) -> dict[str, Any]:
    """Encode the request body: multipart files untouched, anything else as JSON."""
    kwargs: dict[str, Any] = {"headers": headers}
    if files is not None:
        headers.pop("Content-Type", None)
        kwargs["files"] = files
        if body is not None:
            kwargs["data"] = body
    elif body is not None:
        kwargs["json"] = body
    return kwargs


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return "Request failed"
    if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"]:
        return data["message"]
    if isinstance(data, dict) and isinstance(data.get("message"), list) and data["message"]:
        return "; ".join(str(item) for item in data["message"])
    return "Request failed"


def unwrap_buffer(data: Any) -> bytes:
    """Rebuild bytes from a JSON-serialized Node.js Buffer.

    The /makeup endpoint sometimes answers ``{"invoice": {"type": "Buffer",
    "data": [...]}}`` instead of a PDF body.

    Raises:
        UnexpectedResponseError: If no Buffer-shaped field is present.
    """
    if isinstance(data, dict):
        candidates = [data.get(BUFFER_FIELD)] + [v for k, v in data.items() if k != BUFFER_FIELD]
        for candidate in candidates:
            if (
                isinstance(candidate, dict)
                and candidate.get("type") == "Buffer"
                and isinstance(candidate.get("data"), list)
            ):
                try:
                    return bytes(candidate["data"])
                except (TypeError, ValueError) as e:
                    raise UnexpectedResponseError("Buffer object contains invalid byte values") from e
    raise UnexpectedResponseError("Expected binary PDF or Buffer object in JSON response")


def handle_response(response: httpx.Response, response_type: str = RESPONSE_JSON) -> Any:
    """Process HTTP response, raising appropriate errors for failures."""
    if response.status_code == 401:
        raise InvalidCredentialsError(_error_message(response), response=response)

    if not 200 <= response.status_code < 300:
        raise AuthError(_error_message(response), status_code=response.status_code, response=response)

    if response_type == RESPONSE_BYTES:
        content_type = response.headers.get("content-type", "")
        if JSON_CONTENT_TYPE in content_type:
            return unwrap_buffer(response.json())
        return response.content

    if response.content:
        return response.json()
    return {}


def to_auth_error(error: BaseException) -> AuthError:
    """Wrap anything that is not already an AuthError into a NetworkError."""
    if isinstance(error, AuthError):
        return error
    if isinstance(error, httpx.TimeoutException):
        return NetworkError(f"Request timed out: {error}" if str(error) else "Request timed out")
    return NetworkError(str(error) or NetworkError.default_message)


def report(error: AuthError, on_error: Callable[[AuthError], None]) -> AuthError:
    """Hand ``error`` to the on_error observer unless an inner call already did."""
    if not error._reported:
        error._reported = True
        on_error(error)
    return error
