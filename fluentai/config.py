"""Configuration utility for FluentAI API access."""

import os
from typing import Optional, Tuple

DEFAULT_API_URL = "http://localhost:3000/api"
DEFAULT_SESSION_PATH = "data/session.json"
DEFAULT_TIMEOUT = 30.0


class ConfigError(ValueError):
    """Raised when an environment setting cannot be parsed."""
    pass


def get_base_url() -> str:
    """Get the API base URL from environment, without a trailing slash."""
    return os.environ.get("FLUENTAI_API_URL", DEFAULT_API_URL).rstrip("/")


def get_session_path() -> str:
    """Get the path of the stored login session."""
    return os.environ.get("FLUENTAI_SESSION_PATH", DEFAULT_SESSION_PATH)


def get_timeout() -> float:
    """Get the per-request timeout in seconds.

    Raises:
        ConfigError: If FLUENTAI_TIMEOUT is not a positive number
    """
    raw = os.environ.get("FLUENTAI_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(f"FLUENTAI_TIMEOUT must be a number, got {raw!r}")
    if timeout <= 0:
        raise ConfigError("FLUENTAI_TIMEOUT must be positive")
    return timeout


def get_api_config() -> Tuple[str, Optional[str]]:
    """Get FluentAI API base URL and bearer token.

    FLUENTAI_TOKEN overrides the token stored by `fluentai login`.

    Returns:
        Tuple of (base_url, token); token is None when not logged in
    """
    from .session import get_token

    token = os.environ.get("FLUENTAI_TOKEN") or get_token()
    return get_base_url(), token
