"""Gmail REST client — one method per drafts/messages/threads/labels/history endpoint."""

from __future__ import annotations

import binascii
import logging
import time
from typing import Any, Callable
from urllib.parse import quote

import httpx

from gmail_rest.auth import TokenManager
from gmail_rest.config import GmailSettings
from gmail_rest.credentials import CredentialStore
from gmail_rest.dispatch import Method, RequestDispatcher
from gmail_rest.mime import MessageInput, b64_to_str, encode_raw
from gmail_rest.options import (
    DraftGetOptions,
    DraftListOptions,
    HistoryListOptions,
    LabelOptions,
    MessageGetOptions,
    MessageListOptions,
    ThreadListOptions,
    ThreadModifyOptions,
)

logger = logging.getLogger(__name__)


def decode_body(message: dict[str, Any], format: str) -> dict[str, Any]:
    """Replace ``payload.body.data`` with its decoded text for full-format messages."""
    if format != "full":
        return message
    body = message.get("payload", {}).get("body", {})
    data = body.get("data")
    if data:
        try:
            body["data"] = b64_to_str(data)
        except (binascii.Error, ValueError) as e:
            logger.warning("Message %s body is not valid base64: %s", message.get("id"), e)
    return message


def flatten_headers(message: dict[str, Any]) -> dict[str, Any]:
    """Turn ``payload.headers`` [{name, value}, ...] into {name: value}."""
    payload = message.get("payload", {})
    headers = payload.get("headers")
    if headers:
        payload["headers"] = {h["name"]: h["value"] for h in headers}
    return message


def label_ids_query(label_ids: list[str] | None) -> str:
    """Repeated-key query fragment: labelIds=x&labelIds=y."""
    return "&".join(f"labelIds={quote(label_id, safe='')}" for label_id in label_ids or [])


class GmailClient:
    """Gmail operations for the account behind one refresh token.

    Every method returns the decoded JSON payload of the API response and
    raises ``ApiError`` on failure.
    """

    def __init__(
        self,
        settings: GmailSettings | None = None,
        *,
        http_client: httpx.Client | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings or GmailSettings()
        self._owns_http = http_client is None
        self.http = http_client or httpx.Client()
        self.credentials = CredentialStore.from_settings(self.settings, clock=clock)
        self.tokens = TokenManager(
            self.credentials,
            self.http,
            token_url=self.settings.token_url,
            timeout=self.settings.request_timeout,
        )
        self.dispatcher = RequestDispatcher(
            self.tokens,
            self.http,
            base_url=self.settings.api_base_url,
            timeout=self.settings.request_timeout,
        )

    def __enter__(self) -> GmailClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def request(
        self, method: Method, path: str, params: dict[str, Any] | None = None, **kwargs: Any
    ) -> Any:
        return self.dispatcher.dispatch(method, path, params, **kwargs)

    # ── drafts ───────────────────────────────────────────────────────────────
    # https://developers.google.com/gmail/api/v1/reference/users/drafts

    def draft_create(self, message: MessageInput) -> Any:
        """Create a draft with the DRAFT label."""
        raw = encode_raw(message, urlsafe=True)
        return self.request(Method.POST_JSON, "/users/me/drafts", {"message": {"raw": raw}})

    def draft_delete(self, draft_id: str) -> Any:
        return self.request(Method.DELETE, f"/users/me/drafts/{draft_id}", {})

    def draft_get(self, draft_id: str, options: DraftGetOptions | None = None, **kwargs: Any) -> Any:
        options = options or DraftGetOptions(**kwargs)
        return self.request(Method.GET, f"/users/me/drafts/{draft_id}", options.to_params())

    def draft_list(self, options: DraftListOptions | None = None, **kwargs: Any) -> Any:
        options = options or DraftListOptions(**kwargs)
        return self.request(Method.GET, "/users/me/drafts/", options.to_params())

    def draft_update(self, draft_id: str, message: MessageInput | None = None) -> Any:
        """Replace a draft's content. Without a message only the id is sent."""
        params: dict[str, Any] = {"id": draft_id, "message": None}
        if message is not None:
            params["message"] = {"raw": encode_raw(message, urlsafe=True)}
        return self.request(Method.PUT_JSON, f"/users/me/drafts/{draft_id}", params)

    def draft_send(self, draft_id: str) -> Any:
        return self.request(Method.POST_JSON, "/users/me/drafts/send", {"id": draft_id})

    # ── history ──────────────────────────────────────────────────────────────

    def history_list(
        self, start_history_id: str, options: HistoryListOptions | None = None, **kwargs: Any
    ) -> Any:
        """Pull a list of changes to the mailbox since ``start_history_id``."""
        options = options or HistoryListOptions(**kwargs)
        params = {"startHistoryId": start_history_id, **options.to_params()}
        return self.request(Method.GET, "/users/me/history", params)

    # ── labels ───────────────────────────────────────────────────────────────

    def label_create(self, name: str, options: LabelOptions | None = None, **kwargs: Any) -> Any:
        options = options or LabelOptions(**kwargs)
        params = {**options.to_params(), "name": name}
        return self.request(Method.POST_JSON, "/users/me/labels", params)

    def label_delete(self, label_id: str) -> Any:
        """Delete a label and remove it from every message and thread."""
        return self.request(Method.DELETE, f"/users/me/labels/{label_id}", {})

    def label_list(self) -> Any:
        return self.request(Method.GET, "/users/me/labels/", {})

    def label_get(self, label_id: str) -> Any:
        return self.request(Method.GET, f"/users/me/labels/{label_id}", {})

    def label_update(self, label_id: str, options: LabelOptions | None = None, **kwargs: Any) -> Any:
        options = options or LabelOptions(**kwargs)
        params = {"id": label_id, **options.to_params()}
        return self.request(Method.PUT_JSON, f"/users/me/labels/{label_id}", params)

    def label_patch(self, *args: Any, **kwargs: Any) -> Any:
        raise NotImplementedError("label_patch is not implemented")

    # ── messages ─────────────────────────────────────────────────────────────

    def message_list(self, options: MessageListOptions | None = None, **kwargs: Any) -> Any:
        """List message ids matching the label/query filters."""
        options = options or MessageListOptions(**kwargs)
        return self.request(Method.GET, "/users/me/messages/", options.to_params())

    def message_get(
        self, message_id: str, options: MessageGetOptions | None = None, **kwargs: Any
    ) -> Any:
        """Get a message; full-format bodies are decoded and headers flattened."""
        options = options or MessageGetOptions(**kwargs)
        message = self.request(Method.GET, f"/users/me/messages/{message_id}", options.to_params())
        if not isinstance(message, dict):
            return message
        message = decode_body(message, options.format)
        return flatten_headers(message)

    def message_send(self, message: MessageInput, thread_id: str | None = None) -> Any:
        """Send a MIME message, or a dict with to/cc/bcc/from/subject/body."""
        raw = encode_raw(message)
        return self.request(
            Method.POST_JSON, "/users/me/messages/send", {"raw": raw, "threadId": thread_id}
        )

    def message_trash(self, message_id: str) -> Any:
        return self.request(Method.POST, f"/users/me/messages/{message_id}/trash", {})

    # ── threads ──────────────────────────────────────────────────────────────

    def thread_get(self, thread_id: str) -> Any:
        return self.request(Method.GET, f"/users/me/threads/{thread_id}", {})

    def thread_list(self, options: ThreadListOptions | None = None, **kwargs: Any) -> Any:
        """List threads. Label filters go in the path as repeated ``labelIds`` keys."""
        options = options or ThreadListOptions(**kwargs)
        path = "/users/me/threads/"
        fragment = label_ids_query(options.label_ids)
        if fragment:
            path = f"{path}?{fragment}"
        return self.request(Method.GET, path, options.to_params())

    def thread_modify(
        self, thread_id: str, options: ThreadModifyOptions | None = None, **kwargs: Any
    ) -> Any:
        """Modify the labels on every message in a thread."""
        options = options or ThreadModifyOptions(**kwargs)
        return self.request(
            Method.POST_JSON, f"/users/me/threads/{thread_id}/modify", options.to_params()
        )

    def thread_delete(self, thread_id: str) -> Any:
        """Immediately and permanently delete a thread."""
        return self.request(Method.DELETE, f"/users/me/threads/{thread_id}", {})

    def thread_trash(self, thread_id: str) -> Any:
        return self.request(Method.POST, f"/users/me/threads/{thread_id}/trash", {})

    def thread_untrash(self, thread_id: str) -> Any:
        return self.request(Method.POST, f"/users/me/threads/{thread_id}/untrash", {})
