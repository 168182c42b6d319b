"""Login, signup and logout against /auth."""

from . import api
from .api import ApiError, AuthContext
from .session import clear_session, save_session


def _store(data, fallback_message: str) -> dict:
    """Persist {token, user} from an auth response and return the user."""
    if not isinstance(data, dict) or not data.get("token"):
        raise ApiError(fallback_message)
    user = data.get("user") or {}
    save_session(data["token"], user)
    return user


def login(auth: AuthContext, email: str, password: str) -> dict:
    """POST /auth/login and store the session.

    Returns:
        The user record from the server
    """
    data = api.request(
        auth,
        "POST",
        "/auth/login",
        payload={"email": email, "password": password},
        fallback_message="Failed to login",
        require_token=False,
    )
    return _store(data, "Failed to login")


def signup(auth: AuthContext, name: str, email: str, password: str) -> dict:
    """POST /auth/register and store the session."""
    data = api.request(
        auth,
        "POST",
        "/auth/register",
        payload={"name": name, "email": email, "password": password},
        fallback_message="Failed to sign up",
        require_token=False,
    )
    return _store(data, "Failed to sign up")


def logout() -> None:
    clear_session()
