"""
CLI commands for sitedog-parser.
"""

from sitedog_parser.cli.inventory import lookup_command, match_command, parse_command

__all__ = [
    "parse_command",
    "lookup_command",
    "match_command",
]
