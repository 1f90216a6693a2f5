"""Gmail REST API client — refresh-token OAuth with a single request pipeline."""

from gmail_rest.auth import TokenManager
from gmail_rest.client import GmailClient
from gmail_rest.config import GmailSettings
from gmail_rest.credentials import AccessToken, CredentialStore
from gmail_rest.dispatch import Method, RequestDispatcher
from gmail_rest.errors import ApiError, ConfigurationError, GmailRestError

__all__ = [
    "GmailClient",
    "GmailSettings",
    "CredentialStore",
    "AccessToken",
    "TokenManager",
    "RequestDispatcher",
    "Method",
    "ApiError",
    "ConfigurationError",
    "GmailRestError",
]
