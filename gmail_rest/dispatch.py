"""Request dispatcher: bearer auth and uniform error mapping for every API call."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

import httpx

from gmail_rest.auth import TokenManager
from gmail_rest.config import DEFAULT_API_BASE_URL
from gmail_rest.errors import ApiError

logger = logging.getLogger(__name__)


class Method(str, Enum):
    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    POST_JSON = "post_json"
    PUT_JSON = "put_json"


def clean_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """Remove any params whose value is None."""
    return {k: v for k, v in (params or {}).items() if v is not None}


def prepend_url(path: str, base_url: str = DEFAULT_API_BASE_URL) -> str:
    """Resolve a relative API path against the base URL; absolute URLs pass through."""
    if path.startswith("http"):
        return path
    return base_url + path


# Each Gmail verb flavor maps to the final URL and the keyword arguments handed to httpx.
Wire = Callable[[httpx.URL, dict[str, Any]], tuple[httpx.URL, dict[str, Any]]]


def _query(url: httpx.URL, params: dict[str, Any]) -> tuple[httpx.URL, dict[str, Any]]:
    # Merge into any query already in the path (thread_list puts labelIds there);
    # httpx's params= replaces the existing query instead.
    return url.copy_merge_params(params), {}


def _form(url: httpx.URL, params: dict[str, Any]) -> tuple[httpx.URL, dict[str, Any]]:
    return url, {"data": params}


def _json(url: httpx.URL, params: dict[str, Any]) -> tuple[httpx.URL, dict[str, Any]]:
    return url, {"json": params}


_WIRE: dict[Method, tuple[str, Wire]] = {
    Method.GET: ("GET", _query),
    Method.POST: ("POST", _form),
    Method.PUT: ("PUT", _form),
    Method.DELETE: ("DELETE", _form),
    Method.POST_JSON: ("POST", _json),
    Method.PUT_JSON: ("PUT", _json),
}


class RequestDispatcher:
    """Single entry point for every Gmail API call."""

    def __init__(
        self,
        tokens: TokenManager,
        http_client: httpx.Client,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 2.0,
    ):
        self.tokens = tokens
        self.http = http_client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def dispatch(
        self,
        method: Method,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        timeout: float | None = None,
        as_json: bool = True,
    ) -> Any:
        """Perform a request and return only the decoded response body.

        Raises:
            ConfigurationError: credentials are incomplete (no request is made).
            ApiError: non-2xx status, undecodable body, or transport failure.
        """
        verb, wire = _WIRE[Method(method)]
        url, body = wire(httpx.URL(prepend_url(path, self.base_url)), clean_params(params))
        headers = {"Authorization": f"Bearer {self.tokens.get_valid_token()}"}

        logger.debug("%s %s", verb, url)
        try:
            response = self.http.request(
                verb,
                url,
                headers=headers,
                timeout=self.timeout if timeout is None else timeout,
                **body,
            )
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", verb, url, e)
            raise ApiError.from_transport(e) from e

        if not response.is_success:
            logger.warning("%s %s returned %d", verb, url, response.status_code)
            raise ApiError.from_response(response)

        return self._decode(response, as_json)

    @staticmethod
    def _decode(response: httpx.Response, as_json: bool) -> Any:
        if not as_json:
            return response.text
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                response.status_code,
                {"error": "invalid_json", "message": response.text},
            ) from e
