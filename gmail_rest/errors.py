"""Error types raised by the Gmail REST client."""

from __future__ import annotations

import json
from typing import Any

import httpx


class GmailRestError(Exception):
    """Base class for all errors raised by this library."""


class ConfigurationError(GmailRestError):
    """Client id, client secret or refresh token is not set."""


class ApiError(GmailRestError):
    """A request failed with a non-2xx status, a malformed body or a transport error.

    ``status`` is the HTTP status code, or ``None`` when no response was
    received at all. ``body`` is the decoded error payload.
    """

    def __init__(self, status: int | None, body: Any = None):
        super().__init__(f"status: {status}")
        self.status = status
        self.body = body

    @classmethod
    def from_response(cls, response: httpx.Response) -> ApiError:
        return cls(response.status_code, decode_error_body(response))

    @classmethod
    def from_transport(cls, exc: Exception) -> ApiError:
        return cls(None, {"error": type(exc).__name__, "message": str(exc)})


def decode_error_body(response: httpx.Response) -> Any:
    """Decode an error response body as JSON, falling back to raw text."""
    text = response.text
    if not text:
        return {}
    try:
        return json.loads(text)
    except ValueError:
        return {"message": text}
