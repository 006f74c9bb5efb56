"""
Entry point for the SmugMug client: fetch one resource and summarise it.
"""

import argparse
import logging
import sys

from .application.exceptions import SmugMugError
from .infrastructure.api_client import SmugMugService
from .infrastructure.containers import Container

logger = logging.getLogger(__name__)


def setup_logging(level: str):
    """Applies basic logging configuration."""
    logging.basicConfig(level=level)


def _build_call(service: SmugMugService, args: argparse.Namespace):
    """Maps the parsed command onto a configured API call."""
    if args.command == "album":
        call = service.albums.get(args.key)
    elif args.command == "user-albums":
        call = service.albums.get_n(args.key)
        if args.start is not None or args.count is not None:
            call.paginate(args.start or 0, args.count or 50)
    elif args.command == "image":
        call = service.images.get(args.key)
    elif args.command == "node":
        call = service.nodes.get(args.key)
    elif args.command == "user":
        call = service.users.get(args.key)
    else:
        call = service.users.get_auth_user()

    if args.expand:
        call.expand(args.expand)
    return call


def _describe(result) -> str:
    """Renders a one-screen summary of an endpoint result."""
    lines = [f"HTTP {result.server_response.http_status_code}"]
    for field, value in vars(result).items():
        if field == "server_response" or value is None or value == []:
            continue
        if isinstance(value, list):
            lines.append(f"{field}: {len(value)} item(s)")
        elif hasattr(value, "pages"):
            pages = value.pages
            lines.append(
                f"{field}: {len(value.albums)} album(s), "
                f"{pages.start}..{pages.next()} of {pages.total}"
            )
        else:
            lines.append(f"{field}: {getattr(value, 'uri', value)}")
    return "\n".join(lines)


def run_application(args: argparse.Namespace):
    """Wires and runs the client using the DI container."""

    container = Container()
    setup_logging(level=container.config().logging.level)
    service = container.smugmug_service()

    try:
        result = _build_call(service, args).do()
    except SmugMugError as e:
        logger.error(f"An application error occurred: {e}")
        sys.exit(1)

    print(_describe(result))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="SmugMug API client")

    parser.add_argument(
        "command",
        choices=["album", "user-albums", "image", "node", "user", "authuser"],
        help="The kind of resource to fetch.",
    )

    parser.add_argument(
        "key",
        nargs="?",
        help="Album key, image key, node id or user nickname.",
    )

    parser.add_argument(
        "--expand",
        nargs="+",
        help="Relations to expand, e.g. Node User AlbumImages",
    )

    parser.add_argument("--start", type=int, help="Pagination offset.")
    parser.add_argument("--count", type=int, help="Pagination window size.")

    cli_args = parser.parse_args()
    if cli_args.command != "authuser" and not cli_args.key:
        parser.error(f"'{cli_args.command}' requires a key")

    run_application(cli_args)
