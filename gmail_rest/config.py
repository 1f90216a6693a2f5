"""Client configuration — env vars, YAML file, defaults."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings


def _repo_root() -> Path:
    """Find the repository root (directory containing pyproject.toml)."""
    current = Path(__file__).resolve().parent.parent
    if (current / "pyproject.toml").exists():
        return current
    return Path.cwd()


REPO_ROOT = _repo_root()

DEFAULT_API_BASE_URL = "https://www.googleapis.com/gmail/v1"
DEFAULT_TOKEN_URL = "https://accounts.google.com/o/oauth2/token"


class GmailSettings(BaseSettings):
    """OAuth credentials and transport defaults for a GmailClient."""

    client_id: str = ""
    client_secret: str = ""
    refresh_token: str = ""

    api_base_url: str = DEFAULT_API_BASE_URL
    token_url: str = DEFAULT_TOKEN_URL
    request_timeout: float = 2.0  # seconds

    log_level: str = "info"

    model_config = {"env_prefix": "GMR_"}

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> GmailSettings:
        """Load settings from a YAML file.

        Keys that are absent, empty or null fall back to ``GMR_*`` env vars
        and then to the defaults; non-empty YAML values win over env vars.
        """
        if path is None:
            path = REPO_ROOT / "config" / "gmail.yml"

        values: dict[str, Any] = {}
        if path.exists():
            with open(path) as f:
                values = yaml.safe_load(f) or {}

        return cls(**{k: v for k, v in values.items() if v not in (None, "")})
