"""Command implementations for the fluentai CLI."""

from .ai import run_ai
from .auth import login_command, logout_command, signup_command, whoami_command
from .delete import delete_article
from .list_articles import list_articles
from .save import save_article
from .show import show_article
from .tui import launch_tui

__all__ = [
    "delete_article",
    "launch_tui",
    "list_articles",
    "login_command",
    "logout_command",
    "run_ai",
    "save_article",
    "show_article",
    "signup_command",
    "whoami_command",
]
