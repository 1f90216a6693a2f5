"""Credential store — OAuth client credentials plus the cached access token."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from gmail_rest.config import GmailSettings


@dataclass(frozen=True)
class AccessToken:
    token: str
    expires_at: float  # epoch seconds


class CredentialStore:
    """Credentials for one client. Setters take effect on the next token check."""

    def __init__(
        self,
        client_id: str = "",
        client_secret: str = "",
        refresh_token: str = "",
        clock: Callable[[], float] = time.time,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.clock = clock
        self._access_token: AccessToken | None = None

    @classmethod
    def from_settings(
        cls, settings: GmailSettings, clock: Callable[[], float] = time.time
    ) -> CredentialStore:
        return cls(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            refresh_token=settings.refresh_token,
            clock=clock,
        )

    def set_client_id(self, client_id: str) -> None:
        self.client_id = client_id

    def set_client_secret(self, client_secret: str) -> None:
        self.client_secret = client_secret

    def set_refresh_token(self, refresh_token: str) -> None:
        self.refresh_token = refresh_token

    def set_access_token(self, token: str, ttl: float) -> AccessToken:
        """Cache an access token that expires ``ttl`` seconds from now."""
        self._access_token = AccessToken(token=token, expires_at=self.clock() + ttl)
        return self._access_token

    def clear_access_token(self) -> None:
        self._access_token = None

    @property
    def access_token(self) -> AccessToken | None:
        return self._access_token

    def missing(self) -> list[str]:
        """Names of the credential fields that are still unset."""
        fields = [
            ("client id", self.client_id),
            ("client secret", self.client_secret),
            ("refresh token", self.refresh_token),
        ]
        return [name for name, value in fields if not value]
