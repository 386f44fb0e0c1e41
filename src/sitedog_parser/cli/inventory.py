"""
CLI commands for inventory parsing and dictionary lookups.

Commands:
    sitedog parse <file>     - Resolve every domain in an inventory file
    sitedog lookup <slug>    - Show the dictionary entry for a slug or alias
    sitedog match <url>      - Show which provider a URL resolves to
"""

from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path
from typing import Any, Optional

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from sitedog_parser.cli.ux import add_service_node, console, error, header, warning
from sitedog_parser.core.errors import ConfigurationError
from sitedog_parser.parser import parse_file, to_json
from sitedog_parser.services.dictionary import (
    Dictionary,
    DictionaryEntry,
    get_default_dictionary,
    load_dictionary,
)
from sitedog_parser.services.models import Service
from sitedog_parser.services.resolver import resolve
from sitedog_parser.services.urls import normalize_url


def _get_dictionary(dictionary_path: Optional[str]) -> Dictionary:
    if dictionary_path:
        # An explicit path must exist; only the default degrades to empty
        if not Path(dictionary_path).exists():
            raise ConfigurationError("Dictionary file not found", {"path": dictionary_path})
        return load_dictionary(dictionary_path)
    return get_default_dictionary()


def _entry_to_dict(entry: DictionaryEntry) -> dict[str, Any]:
    return {
        "key": entry.key,
        "name": entry.name,
        "aliases": sorted(entry.aliases),
        "url": entry.url,
        "url_pattern": entry.url_pattern,
        "image_url": entry.image_url,
        "properties": entry.properties,
    }


# --- Parse subcommand ---


def parse_command(
    file_path: str,
    root_key: Optional[str] = None,
    dictionary_path: Optional[str] = None,
    simple_fields: Optional[list[str]] = None,
    output_format: str = "table",
) -> int:
    """
    Parse an inventory file and print the resolved services.

    Exit codes:
        0 - Success
        10 - Dictionary file given but missing (raised as ConfigurationError)
        12 - Inventory file missing or malformed (raised as InventoryError)

    Args:
        file_path: Inventory YAML file
        root_key: Optional top-level key holding the domains
        dictionary_path: Optional provider dictionary file
        simple_fields: Fields kept as plain values (defaults to settings)
        output_format: Output format ("table" or "json")

    Returns:
        Exit code
    """
    result = parse_file(
        file_path,
        root_key=root_key,
        simple_fields=simple_fields,
        dictionary=_get_dictionary(dictionary_path),
    )

    if output_format == "json":
        console.print_json(to_json(result))
    else:
        _print_parse_output(file_path, result)

    return 0


def _print_parse_output(file_path: str, result: dict[str, dict[str, Any]]) -> None:
    """Print one tree per domain."""
    header(f"Inventory: {escape(file_path)}")
    console.print()

    if not result:
        console.print("[muted]No domains found[/muted]")
        console.print()
        return

    service_count = 0
    for domain, fields in result.items():
        tree = Tree(f"[bold]{escape(domain)}[/bold]")
        for field, value in fields.items():
            if isinstance(value, list) and all(isinstance(item, Service) for item in value):
                field_node = tree.add(f"[highlight]{escape(field)}[/highlight]")
                for service in value:
                    add_service_node(field_node, service)
                    service_count += sum(1 for _ in service.walk())
            else:
                shown = value.isoformat() if isinstance(value, date) else value
                tree.add(f"[highlight]{escape(field)}[/highlight]: {escape(str(shown))}")
        console.print(tree)
        console.print()

    console.print(f"[muted]{len(result)} domains, {service_count} services[/muted]")
    console.print()


# --- Lookup subcommand ---


def lookup_command(
    slug: str,
    dictionary_path: Optional[str] = None,
    output_format: str = "table",
) -> int:
    """
    Look up a provider by slug or alias.

    Exit codes:
        0 - Provider found
        1 - No match found

    Returns:
        Exit code
    """
    entry = _get_dictionary(dictionary_path).lookup(slug)

    if output_format == "json":
        console.print_json(
            data={
                "query": slug,
                "found": entry is not None,
                "entry": _entry_to_dict(entry) if entry else None,
            }
        )
    else:
        _print_entry(f"Lookup: {escape(slug)}", entry)

    return 0 if entry else 1


# --- Match subcommand ---


def match_command(
    url: str,
    dictionary_path: Optional[str] = None,
    output_format: str = "table",
) -> int:
    """
    Show which provider a URL matches and how it resolves.

    Exit codes:
        0 - Provider pattern matched
        1 - No pattern matched (a name is still derived from the host)

    Returns:
        Exit code
    """
    dictionary = _get_dictionary(dictionary_path)
    entry = dictionary.match(url)
    service = resolve(url, dictionary=dictionary)

    if output_format == "json":
        console.print_json(
            data={
                "query": url,
                "normalized": normalize_url(url),
                "found": entry is not None,
                "entry": _entry_to_dict(entry) if entry else None,
                "service": service.to_dict() if service else None,
            }
        )
    else:
        _print_entry(f"Match: {escape(url)}", entry)
        if service is not None:
            console.print(
                f"[bold]Resolves to:[/bold] [cyan]{escape(service.name)}[/cyan]"
                f" ({escape(str(service.url))})"
            )
            console.print()

    return 0 if entry else 1


def _print_entry(title: str, entry: DictionaryEntry | None) -> None:
    """Print a dictionary entry."""
    console.print()
    header(title)
    console.print()

    if entry is None:
        warning("No provider found")
        console.print()
        return

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Key", f"[cyan]{escape(entry.key)}[/cyan]")
    table.add_row("Name", escape(entry.name))
    if entry.aliases:
        table.add_row("Aliases", escape(", ".join(sorted(entry.aliases))))
    if entry.url:
        table.add_row("URL", escape(str(entry.url)))
    if entry.url_pattern:
        table.add_row("Pattern", escape(entry.url_pattern))
    if entry.image_url:
        table.add_row("Image", escape(str(entry.image_url)))

    console.print(table)
    console.print()


# --- Parser registration ---


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dictionary",
        dest="dictionary_path",
        help="Provider dictionary YAML (default: bundled dictionary)",
    )
    parser.add_argument(
        "--format",
        "-f",
        dest="output_format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )


def register_inventory_parsers(subparsers: argparse._SubParsersAction) -> None:
    """Register parse, lookup and match subcommands."""
    parse_parser = subparsers.add_parser(
        "parse",
        help="Resolve services for every domain in an inventory file",
    )
    parse_parser.add_argument("file", help="Path to inventory YAML file")
    parse_parser.add_argument(
        "--root-key",
        help="Top-level key holding the domains (e.g. 'sites')",
    )
    parse_parser.add_argument(
        "--simple-field",
        dest="simple_fields",
        action="append",
        help="Field kept as a plain value (repeatable, replaces the defaults)",
    )
    _add_common_arguments(parse_parser)

    lookup_parser = subparsers.add_parser(
        "lookup",
        help="Look up a provider by slug or alias",
    )
    lookup_parser.add_argument("slug", help="Provider slug or alias")
    _add_common_arguments(lookup_parser)

    match_parser = subparsers.add_parser(
        "match",
        help="Show which provider a URL resolves to",
    )
    match_parser.add_argument("url", help="URL or bare hostname")
    _add_common_arguments(match_parser)


def handle_inventory_command(args: argparse.Namespace) -> int:
    """Handle inventory commands from CLI args."""
    if args.command == "parse":
        return parse_command(
            file_path=args.file,
            root_key=getattr(args, "root_key", None),
            dictionary_path=getattr(args, "dictionary_path", None),
            simple_fields=getattr(args, "simple_fields", None),
            output_format=getattr(args, "output_format", "table"),
        )
    elif args.command == "lookup":
        return lookup_command(
            slug=args.slug,
            dictionary_path=getattr(args, "dictionary_path", None),
            output_format=getattr(args, "output_format", "table"),
        )
    elif args.command == "match":
        return match_command(
            url=args.url,
            dictionary_path=getattr(args, "dictionary_path", None),
            output_format=getattr(args, "output_format", "table"),
        )
    else:
        error("No command specified. Use --help for usage.")
        return 2
