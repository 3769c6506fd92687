"""Request executor for the INVO SDK (sync)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from .._http import (
    JSON_CONTENT_TYPE,
    RESPONSE_JSON,
    build_headers,
    build_request_kwargs,
    handle_response,
    report,
    to_auth_error,
)
from ..exceptions import TokenExpiredError

if TYPE_CHECKING:
    import httpx

    from ..config import SessionConfig


class RequestExecutor:
    """Performs exactly one HTTP call and classifies its outcome."""

    def __init__(
        self,
        client: httpx.Client,
        config: SessionConfig,
        authorize: Callable[[], str | None],
    ) -> None:
        self._client = client
        self._config = config
        self._authorize = authorize

    def send(
        self,
        path: str,
        method: str = "GET",
        *,
        body: Any = None,
        files: Any = None,
        requires_auth: bool = True,
        response_type: str = RESPONSE_JSON,
        content_type: str | None = JSON_CONTENT_TYPE,
        parse: Callable[[Any], Any] | None = None,
    ) -> Any:
        """Send a request to ``path`` under the session's base URL.

        See :meth:`invo._async.executor.AsyncRequestExecutor.send` for the
        arguments and raised errors.
        """
        try:
            access_token = None
            if requires_auth:
                access_token = self._authorize()
                if not access_token:
                    raise TokenExpiredError("No access token available after authentication.")

            headers = build_headers(
                environment=self._config.environment,
                access_token=access_token,
                workspace_id=self._config.workspace_id,
                content_type=content_type,
            )
            response = self._client.request(
                method,
                f"{self._config.api_url}{path}",
                **build_request_kwargs(headers, body, files),
            )
            result = handle_response(response, response_type)
            return parse(result) if parse is not None else result
        except Exception as e:
            error = report(to_auth_error(e), self._config.on_error)
            if error is e:
                raise
            raise error from e
