from __future__ import annotations

import argparse
import logging
from typing import Sequence

from rich.markup import escape

from sitedog_parser.cli.inventory import handle_inventory_command, register_inventory_parsers
from sitedog_parser.cli.ux import error
from sitedog_parser.config.settings import get_settings
from sitedog_parser.core.errors import SitedogError, format_error_message, main_with_error_handling
from sitedog_parser.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitedog",
        description="Resolve infrastructure inventories into provider services",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command")
    register_inventory_parsers(subparsers)
    return parser


@main_with_error_handling()
def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else get_settings().log_level)

    if args.command is None:
        parser.print_help()
        return 2

    try:
        return handle_inventory_command(args)
    except SitedogError as e:
        error(escape(format_error_message(e)))
        raise


if __name__ == "__main__":
    raise SystemExit(main())
