"""MIME message construction and base64 helpers for the ``raw`` field."""

from __future__ import annotations

import base64
from email.message import EmailMessage, Message
from email.policy import SMTP
from typing import Any, Iterable, Union

MessageInput = Union[Message, dict]

_ADDRESS_HEADERS = (("from", "From"), ("to", "To"), ("cc", "Cc"), ("bcc", "Bcc"))


def _to_bytes(value: str | bytes) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def str_to_b64(value: str | bytes) -> str:
    """Standard base64 of a string or bytes, returned as text."""
    return base64.b64encode(_to_bytes(value)).decode("ascii")


def b64_to_str(value: str | bytes) -> str:
    """Decode base64 (standard or URL-safe, padding optional) to text."""
    data = _to_bytes(value).strip().replace(b"-", b"+").replace(b"_", b"/")
    data += b"=" * (-len(data) % 4)
    return base64.b64decode(data, validate=True).decode("utf-8", errors="replace")


def addresses(value: str | Iterable[Any] | None) -> list[str]:
    """Flatten a single address or a (nested) list of addresses."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    flat: list[str] = []
    for item in value:
        flat.extend(addresses(item))
    return flat


def map_to_mime(fields: dict[str, Any]) -> EmailMessage:
    """Build a text/plain MIME message from {to, cc, bcc, from, subject, body}."""
    message = EmailMessage()
    for key, header in _ADDRESS_HEADERS:
        addrs = addresses(fields.get(key))
        if addrs:
            message[header] = ", ".join(addrs)
    if fields.get("subject"):
        message["Subject"] = fields["subject"]
    if fields.get("body") is not None:
        message.set_content(fields["body"])
    return message


def mime_to_bytes(message: Message) -> bytes:
    return message.as_bytes(policy=SMTP)


def encode_raw(message: MessageInput, urlsafe: bool = False) -> str:
    """Render a message (or field dict) and base64-encode it for the ``raw`` field."""
    if isinstance(message, dict):
        message = map_to_mime(message)
    data = mime_to_bytes(message)
    if urlsafe:
        return base64.urlsafe_b64encode(data).decode("ascii")
    return base64.b64encode(data).decode("ascii")
