"""Command-line utilities for checking an OpenAM integration.

Reads the OPENAM__* settings and talks to the configured provider (or the
mock client when DEV__AUTH_MOCK=true):

    openam-auth login-url [--callback-url URL]
    openam-auth check-token TOKEN
    openam-auth profile TOKEN
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from openam_auth.auth.errors import ConfigurationError, OpenAmAuthError

if TYPE_CHECKING:
    from openam_auth.auth.config import StrategyConfig
    from openam_auth.auth.protocol import OpenAmClientProtocol

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    """Build argparse parser for openam-auth subcommands."""
    parser = argparse.ArgumentParser(
        prog="openam-auth",
        description="Inspect OpenAM login URLs, session tokens and profiles.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login-url", help="Print the login redirect URL")
    login.add_argument(
        "--callback-url",
        default=None,
        help="Callback to embed in goto (default: OPENAM__CALLBACK_URL)",
    )

    check = sub.add_parser("check-token", help="Check whether a token is valid")
    check.add_argument("token", help="Value of the session cookie")

    profile = sub.add_parser("profile", help="Fetch and print a user's profile")
    profile.add_argument("token", help="Value of the session cookie")

    return parser


def _load() -> tuple[StrategyConfig, OpenAmClientProtocol]:
    from openam_auth.auth.config import StrategyConfig
    from openam_auth.auth.factory import get_openam_client
    from openam_auth.config import get_settings

    settings = get_settings()
    config = StrategyConfig.from_settings(settings)
    return config, get_openam_client(config, settings)


def _cmd_login_url(args: argparse.Namespace) -> int:
    config, client = _load()
    callback_url = args.callback_url or config.callback_url
    console.print(client.get_login_ui_url({"goto": f"{callback_url}?code=true"}))
    return 0


async def _cmd_check_token(args: argparse.Namespace) -> int:
    _, client = _load()
    result = await client.validate_session(args.token)
    if result.valid:
        console.print("[green]valid[/]")
        return 0
    console.print(f"[red]invalid[/] ({result.error or 'rejected'})")
    return 1


async def _cmd_profile(args: argparse.Namespace) -> int:
    from openam_auth.auth.profile import normalize_profile

    _, client = _load()
    if not await client.is_token_valid(args.token):
        console.print("[red]Token is not valid[/]")
        return 1

    profile = normalize_profile(await client.get_attributes(args.token))

    table = Table(title=f"Profile: {profile.username or '?'}")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("id", profile.id or "")
    table.add_row("username", profile.username or "")
    table.add_row("display name", profile.display_name or "")
    table.add_row("family name", profile.name.family_name or "")
    table.add_row("given name", profile.name.given_name or "")
    table.add_row("email", profile.email or "")
    console.print(table)

    raw = Table(title="Raw attributes", show_header=False)
    for key, value in sorted(profile.raw_attributes.items()):
        raw.add_row(key, value)
    console.print(raw)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the openam-auth command."""
    from openam_auth import setup_logging
    from openam_auth.config import get_settings

    args = _build_parser().parse_args(sys.argv[1:] if argv is None else argv)

    app = get_settings().app
    setup_logging(app.log_dir, app.log_level)

    try:
        if args.command == "login-url":
            return _cmd_login_url(args)
        if args.command == "check-token":
            return asyncio.run(_cmd_check_token(args))
        return asyncio.run(_cmd_profile(args))
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/] {e}")
        return 2
    except OpenAmAuthError as e:
        console.print(f"[red]Error:[/] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
