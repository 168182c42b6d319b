"""Login, signup, logout and whoami commands."""

from rich.markup import escape
from rich.prompt import Prompt

from common.display import console
from .. import auth
from ..api import ApiError, AuthContext
from ..config import get_base_url
from ..session import get_user


def _ask(value: str | None, label: str, password: bool = False) -> str:
    if value:
        return value
    return Prompt.ask(label, password=password)


def _display_name(user: dict) -> str:
    return user.get("name") or user.get("email") or str(user.get("id") or user.get("_id") or "?")


def login_command(email: str | None = None, password: str | None = None) -> int:
    """Log in and store the session.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    email = _ask(email, "Email Address")
    password = _ask(password, "Password", password=True)
    try:
        with console.status("Signing in...", spinner="dots"):
            user = auth.login(AuthContext(base_url=get_base_url()), email, password)
    except ApiError as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        return 1
    console.print(f"[green]Signed in as {escape(_display_name(user))}[/green]")
    return 0


def signup_command(name: str | None = None, email: str | None = None, password: str | None = None) -> int:
    """Register a new account and store the session."""
    name = _ask(name, "Name")
    email = _ask(email, "Email Address")
    password = _ask(password, "Password", password=True)
    try:
        with console.status("Creating account...", spinner="dots"):
            user = auth.signup(AuthContext(base_url=get_base_url()), name, email, password)
    except ApiError as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        return 1
    console.print(f"[green]Welcome, {escape(_display_name(user))}![/green]")
    return 0


def logout_command() -> int:
    auth.logout()
    console.print("Signed out.")
    return 0


def whoami_command() -> int:
    user = get_user()
    if not user:
        console.print("[dim]Not logged in.[/dim]")
        return 1
    console.print(f"{escape(_display_name(user))} [dim]{escape(user.get('email', ''))}[/dim]")
    return 0
