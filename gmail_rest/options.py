"""Recognized options (and defaults) for Gmail operations with optional arguments.

Field names are Pythonic; ``to_params()`` renders them with the API's names.
Unset (None) values are dropped later by the dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class DraftGetOptions:
    format: str = "full"

    def to_params(self) -> dict[str, Any]:
        return {"format": self.format}


@dataclass
class DraftListOptions:
    max_results: int = 10
    page_token: str | None = None

    def to_params(self) -> dict[str, Any]:
        return {"maxResults": self.max_results, "pageToken": self.page_token}


@dataclass
class HistoryListOptions:
    max_results: int = 10
    page_token: str | None = None
    label_id: str | None = None

    def to_params(self) -> dict[str, Any]:
        return {
            "maxResults": self.max_results,
            "pageToken": self.page_token,
            "labelId": self.label_id,
        }


@dataclass
class LabelOptions:
    name: str | None = None
    label_list_visibility: str = "labelShowIfUnread"
    message_list_visibility: str = "show"

    def to_params(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "labelListVisibility": self.label_list_visibility,
            "messageListVisibility": self.message_list_visibility,
        }


@dataclass
class MessageGetOptions:
    format: str = "full"

    def to_params(self) -> dict[str, Any]:
        return {"format": self.format}


@dataclass
class MessageListOptions:
    labels: list[str] | None = None
    max_results: int = 10
    page_token: str | None = None
    query: str | None = None
    include_spam_trash: bool = False

    def to_params(self) -> dict[str, Any]:
        return {
            "includeSpamTrash": self.include_spam_trash,
            "labelIds": self.labels,
            "maxResults": self.max_results,
            "pageToken": self.page_token,
            "q": self.query,
        }


@dataclass
class ThreadListOptions:
    include_spam_trash: bool = False
    label_ids: list[str] | None = None
    max_results: int = 25
    page_token: str | None = None
    q: str | None = None

    def to_params(self) -> dict[str, Any]:
        # labelIds travel in the path, see GmailClient.thread_list
        return {
            "includeSpamTrash": self.include_spam_trash,
            "maxResults": self.max_results,
            "pageToken": self.page_token,
            "q": self.q,
        }


@dataclass
class ThreadModifyOptions:
    add_label_ids: list[str] | None = None
    remove_label_ids: list[str] | None = None

    def to_params(self) -> dict[str, Any]:
        return {
            "addLabelIds": self.add_label_ids,
            "removeLabelIds": self.remove_label_ids,
        }
