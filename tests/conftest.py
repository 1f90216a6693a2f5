"""Shared fixtures: a fake Gmail/OAuth backend served through httpx.MockTransport."""

from __future__ import annotations

import json
import threading
import time
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest

from gmail_rest.client import GmailClient
from gmail_rest.config import GmailSettings

TOKEN_HOST = "accounts.google.com"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeApi:
    """Records requests and answers with canned (status, body) replies."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.token_requests: list[httpx.Request] = []
        self.token_reply: tuple[int, Any] = (200, {"access_token": "tok-1", "expires_in": 3600})
        self.token_delay = 0.0
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.default_reply: tuple[int, Any] = (200, {})
        self.transport_error: Exception | None = None
        self._lock = threading.Lock()

    def reply(self, method: str, path: str, status: int, body: Any = None) -> None:
        self.routes[(method, path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        if request.url.host == TOKEN_HOST:
            with self._lock:
                self.token_requests.append(request)
            if self.token_delay:
                time.sleep(self.token_delay)
            return _response(*self.token_reply)

        if self.transport_error is not None:
            raise self.transport_error
        with self._lock:
            self.requests.append(request)
        status, body = self.routes.get((request.method, request.url.path), self.default_reply)
        return _response(status, body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _response(status: int, body: Any) -> httpx.Response:
    if body is None:
        return httpx.Response(status)
    if isinstance(body, (str, bytes)):
        return httpx.Response(status, content=body)
    return httpx.Response(status, json=body)


def form_of(request: httpx.Request) -> dict[str, list[str]]:
    return parse_qs(request.content.decode())


def json_of(request: httpx.Request) -> Any:
    return json.loads(request.content)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def http_client(fake_api: FakeApi):
    with httpx.Client(transport=httpx.MockTransport(fake_api.handler)) as c:
        yield c


@pytest.fixture
def settings() -> GmailSettings:
    return GmailSettings(client_id="cid", client_secret="csecret", refresh_token="rtoken")


@pytest.fixture
def client(settings: GmailSettings, http_client: httpx.Client, clock: FakeClock) -> GmailClient:
    return GmailClient(settings, http_client=http_client, clock=clock)
