"""FluentAI REST API transport.

Every call takes an explicit AuthContext. The only side effect besides the
request itself is clearing the stored session when the server answers 401.
"""
import time
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode, urlparse

import requests
from rich.markup import escape

from common.display import console
from .config import get_api_config, get_timeout
from .session import clear_session

GENERIC_ERROR = "Request failed"

_verbose = False


class ApiError(Exception):
    """A failed API call, carrying the message to show the user."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class AuthRequiredError(ApiError):
    """Raised before any request when an authenticated call has no token."""

    def __init__(self, message: str = "Not logged in. Run `fluentai login` first."):
        super().__init__(message, status=401)


@dataclass(frozen=True)
class AuthContext:
    """Immutable credentials threaded into every service call."""

    base_url: str
    token: Optional[str] = None

    def headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


def current_auth() -> AuthContext:
    """Build an AuthContext from environment and the stored session."""
    base_url, token = get_api_config()
    return AuthContext(base_url=base_url, token=token)


def set_verbose(enabled: int | bool) -> None:
    """Enable or disable verbose API logging."""
    global _verbose
    _verbose = bool(enabled)


def is_verbose() -> bool:
    return _verbose


def log_event(scope: str, message: str) -> None:
    """Print an orchestration trace line if verbose mode is enabled."""
    if _verbose:
        console.print(f"  [dim]\\[{scope}] {escape(message)}[/dim]")


def _log_request(method: str, url: str) -> None:
    """Log an API request if verbose mode is enabled."""
    if _verbose:
        # Show path only (strip base URL)
        parsed = urlparse(url)
        path = parsed.path + (f"?{parsed.query}" if parsed.query else "")
        console.print(f"  [dim]\\[API] {method} {path}[/dim]")


def _log_response(response: requests.Response, elapsed: float, item_count: int | None = None) -> None:
    """Log an API response if verbose mode is enabled."""
    if _verbose:
        msg = f"  [dim]\\[API] {response.status_code} ({elapsed:.1f}s)"
        if item_count is not None:
            msg += f" — {item_count} items"
        console.print(msg + "[/dim]")


def _error_message(response: requests.Response, fallback: str) -> str:
    """Extract the server's `{message}` from an error response."""
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"].strip():
        return data["message"]
    return fallback


def request(
    auth: AuthContext,
    method: str,
    path: str,
    params: dict | None = None,
    payload: dict | None = None,
    fallback_message: str = GENERIC_ERROR,
    require_token: bool = True,
) -> Any:
    """Issue exactly one request and return the decoded JSON body.

    Args:
        auth: Credentials to attach
        method: HTTP verb
        path: Path below the base URL, e.g. "/articles/42"
        params: Query parameters
        payload: JSON body
        fallback_message: Message used when the server gives none
        require_token: Refuse to send the request when auth has no token

    Returns:
        Decoded JSON, or None for an empty body

    Raises:
        AuthRequiredError: If a token is required but missing
        ApiError: On transport failure or non-2xx status
    """
    if require_token and not auth.token:
        raise AuthRequiredError()

    url = f"{auth.base_url}{path}"
    _log_request(method, f"{url}?{urlencode(params)}" if params else url)
    t0 = time.monotonic()
    try:
        response = requests.request(
            method,
            url,
            headers=auth.headers(),
            params=params,
            json=payload,
            timeout=get_timeout(),
        )
    except requests.RequestException as e:
        if _verbose:
            console.print(f"  [dim]\\[API] transport error: {escape(str(e))}[/dim]")
        raise ApiError(fallback_message) from e

    if response.status_code == 401:
        clear_session()

    if not response.ok:
        _log_response(response, time.monotonic() - t0)
        raise ApiError(_error_message(response, fallback_message), response.status_code)

    if not response.content:
        _log_response(response, time.monotonic() - t0)
        return None

    try:
        data = response.json()
    except ValueError as e:
        raise ApiError(fallback_message, response.status_code) from e

    item_count = len(data) if isinstance(data, list) else None
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        item_count = len(data["items"])
    _log_response(response, time.monotonic() - t0, item_count)
    return data
