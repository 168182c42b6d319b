"""Process-wide store for the login session (token + user).

The session file is the only mutable credential state. Everything else
receives an immutable AuthContext built from it.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .config import get_session_path


def load_session(session_path: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Load the stored session.

    Returns:
        Dict with 'token', 'user' and 'timestamp' keys, or None if missing/invalid
    """
    path = Path(session_path or get_session_path())
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict) or not data.get("token"):
            return None
        return data
    except (json.JSONDecodeError, OSError):
        return None


def save_session(token: str, user: Optional[Dict[str, Any]], session_path: Optional[str] = None) -> None:
    """Store token and user with the current timestamp."""
    path = Path(session_path or get_session_path())
    path.parent.mkdir(parents=True, exist_ok=True)

    session_data = {
        "timestamp": datetime.now().isoformat(),
        "token": token,
        "user": user or {},
    }

    path.write_text(json.dumps(session_data, ensure_ascii=False, indent=2), encoding="utf-8")


def get_token(session_path: Optional[str] = None) -> Optional[str]:
    """Get the stored bearer token, if any."""
    session = load_session(session_path)
    if session:
        return session.get("token")
    return None


def get_user(session_path: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Get the stored user record, if any."""
    session = load_session(session_path)
    if session:
        return session.get("user") or None
    return None


def clear_session(session_path: Optional[str] = None) -> None:
    """Remove the session file."""
    path = Path(session_path or get_session_path())
    if path.exists():
        path.unlink()
