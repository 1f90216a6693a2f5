"""OAuth2 token manager — refresh-token exchange with a single-flight cache."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future

import httpx

from gmail_rest.config import DEFAULT_TOKEN_URL
from gmail_rest.credentials import AccessToken, CredentialStore
from gmail_rest.errors import ApiError, ConfigurationError

logger = logging.getLogger(__name__)


class TokenManager:
    """Hands out a valid bearer token, refreshing it when the cache is stale.

    At most one refresh is in flight. Callers that find the cache stale while
    a refresh is running wait on its Future and share its outcome, the new
    token or the refresh error.
    """

    def __init__(
        self,
        store: CredentialStore,
        http_client: httpx.Client,
        token_url: str = DEFAULT_TOKEN_URL,
        timeout: float = 2.0,
    ):
        self.store = store
        self.http = http_client
        self.token_url = token_url
        self.timeout = timeout
        self._lock = threading.Lock()
        self._inflight: Future[AccessToken] | None = None

    def get_valid_token(self) -> str:
        """Return a non-expired access token, refreshing it if needed."""
        self._check_configured()

        cached = self.store.access_token
        if self._is_valid(cached):
            return cached.token

        with self._lock:
            cached = self.store.access_token
            if self._is_valid(cached):
                return cached.token
            leader = self._inflight is None
            if leader:
                self._inflight = Future()
            inflight = self._inflight

        if not leader:
            # Raises the leader's ApiError if its refresh failed.
            return inflight.result().token

        try:
            cached = self._refresh()
        except BaseException as e:
            inflight.set_exception(e)
            raise
        else:
            inflight.set_result(cached)
        finally:
            with self._lock:
                self._inflight = None
        return cached.token

    def invalidate(self) -> None:
        """Drop the cached token so the next call refreshes."""
        with self._lock:
            self.store.clear_access_token()

    def _check_configured(self) -> None:
        missing = self.store.missing()
        if missing:
            raise ConfigurationError(f"Missing {missing[0]}!")

    def _is_valid(self, token: AccessToken | None) -> bool:
        # A token expiring exactly now counts as expired.
        return token is not None and token.expires_at > self.store.clock()

    def _refresh(self) -> AccessToken:
        logger.info("Refreshing OAuth access token")
        form = {
            "client_id": self.store.client_id,
            "client_secret": self.store.client_secret,
            "refresh_token": self.store.refresh_token,
            "grant_type": "refresh_token",
        }
        try:
            response = self.http.post(self.token_url, data=form, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.warning("Token refresh failed: %s", e)
            raise ApiError.from_transport(e) from e

        if not response.is_success:
            logger.warning("Token refresh rejected with status %d", response.status_code)
            raise ApiError.from_response(response)

        try:
            body = response.json()
            token = body["access_token"]
            expires_in = float(body["expires_in"])
        except (ValueError, KeyError, TypeError) as e:
            raise ApiError(
                response.status_code,
                {"error": "invalid_token_response", "message": response.text},
            ) from e

        access_token = self.store.set_access_token(token, expires_in)
        logger.info("OAuth access token refreshed, valid for %ds", int(expires_in))
        return access_token
