"""CLI argument parsing and dispatch for the fluentai client."""

import argparse
import sys

from rich.markup import escape

from common.display import console
from .api import ApiError, set_verbose
from .commands import (
    delete_article,
    launch_tui,
    list_articles,
    login_command,
    logout_command,
    run_ai,
    save_article,
    show_article,
    signup_command,
    whoami_command,
)
from .config import ConfigError, get_timeout
from .models import CATEGORIES


def _add_auth_parsers(subparsers):
    """Add the 'login', 'signup', 'logout' and 'whoami' subcommand parsers."""
    p = subparsers.add_parser("login", help="Sign in and store the session token")
    p.add_argument("--email", type=str, default=None, help="Email address (prompted if omitted)")
    p.add_argument("--password", type=str, default=None, help="Password (prompted if omitted)")

    p = subparsers.add_parser("signup", help="Create an account and store the session token")
    p.add_argument("--name", type=str, default=None, help="Display name (prompted if omitted)")
    p.add_argument("--email", type=str, default=None, help="Email address (prompted if omitted)")
    p.add_argument("--password", type=str, default=None, help="Password (prompted if omitted)")

    subparsers.add_parser("logout", help="Forget the stored session token")
    subparsers.add_parser("whoami", help="Show the signed-in user")


def _add_list_parser(subparsers):
    """Add the 'list' subcommand parser."""
    p = subparsers.add_parser("list", help="List articles grouped by category")
    p.add_argument("--search", "-s", type=str, default="", help="Free-text search")
    p.add_argument("--category", choices=CATEGORIES, default=None, help="Filter by category")
    p.add_argument("--author", type=str, default=None, help="Filter by author id")
    p.add_argument("--mine", action="store_true", help="Only my articles (dashboard view)")
    p.add_argument("--limit", type=int, default=None, help="Page size")
    p.add_argument("--page", type=int, default=None, help="Page number")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for summaries and API calls, -vv for dates")


def _add_show_parser(subparsers):
    """Add the 'show' subcommand parser."""
    p = subparsers.add_parser("show", help="Show one article")
    p.add_argument("id", type=str, help="Article id")
    p.add_argument("--similar", action="store_true", help="Also list similar articles")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for API calls")


def _add_editor_arguments(p, required: bool):
    p.add_argument("--title", type=str, default=None, required=required, help="Article title")
    p.add_argument("--category", choices=CATEGORIES, default=None, required=required, help="Article category")
    content = p.add_mutually_exclusive_group(required=required)
    content.add_argument("--content", type=str, default=None, help="Content (HTML or plain text)")
    content.add_argument("--content-file", type=str, default=None, help="Read content from file (- for stdin)")
    p.add_argument("--summary", type=str, default=None, help="Summary (generated by AI when empty)")
    p.add_argument("--tags", type=str, default=None, help="Comma-separated tags")
    p.add_argument("--improve", action="store_true", help="Let AI improve the content before saving")
    p.add_argument("--prompt", type=str, default=None, help="Rewrite the content with a custom AI instruction")
    p.add_argument("--dry-run", action="store_true", help="Preview without saving")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for API calls and editor steps")


def _add_new_parser(subparsers):
    """Add the 'new' subcommand parser."""
    p = subparsers.add_parser("new", help="Create an article (auto-summarized when no summary is given)")
    _add_editor_arguments(p, required=True)


def _add_edit_parser(subparsers):
    """Add the 'edit' subcommand parser."""
    p = subparsers.add_parser("edit", help="Edit an article; omitted fields keep their current value")
    p.add_argument("id", type=str, help="Article id")
    _add_editor_arguments(p, required=False)


def _add_delete_parser(subparsers):
    """Add the 'delete' subcommand parser."""
    p = subparsers.add_parser("delete", help="Delete an article")
    p.add_argument("id", type=str, help="Article id")
    p.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for API calls")


def _add_ai_parser(subparsers):
    """Add the 'ai' subcommand parser."""
    p = subparsers.add_parser("ai", help="Run an AI operation on text from a file or stdin")
    p.add_argument("action", choices=("summary", "improve", "prompt"), help="Operation to run")
    source = p.add_mutually_exclusive_group()
    source.add_argument("--content", type=str, default=None, help="Input text")
    source.add_argument("--content-file", type=str, default=None, help="Read input from file (default: stdin)")
    p.add_argument("--prompt", type=str, default=None, help="Instruction for `ai prompt`")
    p.add_argument("--raw", action="store_true", help="Print the result only")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for API calls")


def _add_browse_parser(subparsers):
    """Add the 'browse' subcommand parser."""
    p = subparsers.add_parser("browse", help="Interactive article browser with live search")
    p.add_argument("--search", "-s", type=str, default="", help="Initial search text")
    p.add_argument("--category", choices=CATEGORIES, default=None, help="Initial category filter")


def build_parser() -> argparse.ArgumentParser:
    """Build and return the main argument parser."""
    parser = argparse.ArgumentParser(
        description="FluentAI client: write, enrich and manage articles"
    )
    subparsers = parser.add_subparsers(dest="command")

    _add_auth_parsers(subparsers)
    _add_list_parser(subparsers)
    _add_show_parser(subparsers)
    _add_new_parser(subparsers)
    _add_edit_parser(subparsers)
    _add_delete_parser(subparsers)
    _add_ai_parser(subparsers)
    _add_browse_parser(subparsers)

    return parser


def _editor_kwargs(args) -> dict:
    return dict(
        title=args.title,
        content=args.content,
        content_file=args.content_file,
        summary=args.summary,
        category=args.category,
        tags=args.tags,
        improve=args.improve,
        prompt=args.prompt,
        dry_run=args.dry_run,
    )


def dispatch(args) -> int:
    """Route parsed args to the appropriate command function.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    if getattr(args, "verbose", 0):
        set_verbose(True)

    if args.command == "login":
        return login_command(email=args.email, password=args.password)
    elif args.command == "signup":
        return signup_command(name=args.name, email=args.email, password=args.password)
    elif args.command == "logout":
        return logout_command()
    elif args.command == "whoami":
        return whoami_command()
    elif args.command == "list":
        return list_articles(
            search=args.search,
            category=args.category,
            author=args.author,
            mine=args.mine,
            limit=args.limit,
            page=args.page,
            verbose=args.verbose,
        )
    elif args.command == "show":
        return show_article(args.id, similar=args.similar)
    elif args.command == "new":
        return save_article(**_editor_kwargs(args))
    elif args.command == "edit":
        return save_article(article_id=args.id, **_editor_kwargs(args))
    elif args.command == "delete":
        return delete_article(args.id, yes=args.yes)
    elif args.command == "ai":
        return run_ai(
            args.action,
            content=args.content,
            content_file=args.content_file,
            prompt=args.prompt,
            raw=args.raw,
        )
    elif args.command == "browse":
        return launch_tui(search=args.search, category=args.category)
    return 1


def main():
    """Entry point for the fluentai CLI."""
    from dotenv import load_dotenv
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        get_timeout()
        exit_code = dispatch(args)
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        exit_code = 1
    except ApiError as e:
        # Auth missing before a request could be sent
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        exit_code = 1
    except KeyboardInterrupt:
        exit_code = 130
    sys.exit(exit_code)
