"""Command line client for GophKeeper.

Usage:
    gophkeeper-client --user alice register
    gophkeeper-client --user alice notes add --title todo --text "buy milk"
    gophkeeper-client --user alice notes list
    gophkeeper-client --user alice medias add --title scan --file scan.pdf
    gophkeeper-client --user alice cards delete 3

Every command logs in first; the password is read from
GOPHKEEPER_CLIENT_PASSWORD or prompted for.
"""

import argparse
import asyncio
import getpass
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gophkeeper.client.api import ClientError, ConflictError, GophKeeperClient
from gophkeeper.client.config import ClientSettings
from gophkeeper.core.errors import InvalidPasswordError, NotFoundError
from gophkeeper.core.logging import setup_logging
from gophkeeper.schemas.secrets import CardIn, MediaIn, NoteIn, PasswordIn

logger = logging.getLogger(__name__)

KINDS = ("cards", "notes", "passwords", "medias")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gophkeeper-client", description="GophKeeper client")
    parser.add_argument("--user", required=True, help="Account login")
    parser.add_argument("--server", help="Server address host:port (default: from settings)")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("register", help="Create an account")
    commands.add_parser("login", help="Check credentials and print the session")

    for kind in KINDS:
        kind_parser = commands.add_parser(kind, help=f"Manage {kind}")
        actions = kind_parser.add_subparsers(dest="action", required=True)
        actions.add_parser("list", help=f"List {kind}")
        delete = actions.add_parser("delete", help=f"Delete one of the {kind}")
        delete.add_argument("id", type=int)
        add = actions.add_parser("add", help=f"Add to {kind}")
        update = actions.add_parser("update", help=f"Replace one of the {kind}")
        update.add_argument("id", type=int)
        for sub in (add, update):
            _add_fields(kind, sub)

    return parser


def _add_fields(kind: str, parser: argparse.ArgumentParser) -> None:
    if kind == "cards":
        parser.add_argument("--name", default="")
        parser.add_argument("--number", required=True)
        parser.add_argument("--cvc", required=True)
        parser.add_argument("--exp-month", type=int, default=0)
        parser.add_argument("--exp-year", type=int, default=0)
    elif kind == "notes":
        parser.add_argument("--title", default="")
        parser.add_argument("--text", required=True)
        parser.add_argument("--expired-at", default="")
    elif kind == "passwords":
        parser.add_argument("--title", default="")
        parser.add_argument("--login", default="")
        parser.add_argument("--secret", required=True, help="The stored password")
        parser.add_argument("--url", default="")
        parser.add_argument("--note", default="")
        parser.add_argument("--expired-at", default="")
    else:
        parser.add_argument("--title", default="")
        parser.add_argument("--file", type=Path, required=True)
        parser.add_argument("--media-type", default="application/octet-stream")
        parser.add_argument("--note", default="")
        parser.add_argument("--expired-at", default="")


def build_item(kind: str, args: argparse.Namespace) -> Any:
    """Build the request schema for an add/update command."""
    item_id = getattr(args, "id", 0)
    if kind == "cards":
        return CardIn(
            id=item_id,
            name=args.name,
            number=args.number,
            cvc=args.cvc,
            exp_month=args.exp_month,
            exp_year=args.exp_year,
        )
    if kind == "notes":
        return NoteIn(id=item_id, title=args.title, note=args.text, expired_at=args.expired_at)
    if kind == "passwords":
        return PasswordIn(
            id=item_id,
            title=args.title,
            login=args.login,
            password=args.secret,
            url=args.url,
            note=args.note,
            expired_at=args.expired_at,
        )
    return MediaIn(
        id=item_id,
        title=args.title,
        media=args.file.read_bytes(),
        media_type=args.media_type,
        note=args.note,
        expired_at=args.expired_at,
    )


async def run_command(client: GophKeeperClient, args: argparse.Namespace, password: str) -> Any:
    """Execute one parsed command and return something printable."""
    if args.command == "register":
        return (await client.register(args.user, password)).model_dump(mode="json")

    session = await client.login(args.user, password)
    if args.command == "login":
        return session.model_dump(mode="json")

    api = getattr(client, args.command)
    if args.action == "list":
        return [item.model_dump(mode="json") for item in await api.list()]
    if args.action == "delete":
        await api.delete(args.id)
        return {"deleted": args.id}

    item = build_item(args.command, args)
    if args.action == "add":
        await api.create(item)
        return {"created": args.command}
    await api.update(item)
    return {"updated": args.id}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = ClientSettings()
    except ValidationError as e:
        print(f"ERROR: invalid client settings: {e}", file=sys.stderr)
        return 2
    if args.server:
        settings = settings.model_copy(update={"server_address": args.server})
    setup_logging(level=settings.log_level)

    password = os.environ.get("GOPHKEEPER_CLIENT_PASSWORD") or getpass.getpass("Password: ")

    async def _run() -> Any:
        async with GophKeeperClient(settings) as client:
            return await run_command(client, args, password)

    try:
        result = asyncio.run(_run())
    except NotFoundError:
        print("Not found", file=sys.stderr)
        return 1
    except InvalidPasswordError:
        print("Invalid password", file=sys.stderr)
        return 1
    except ConflictError:
        print(f"Login {args.user!r} is already registered", file=sys.stderr)
        return 1
    except (ClientError, OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
