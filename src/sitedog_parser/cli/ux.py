"""
CLI output helpers built on rich.

Environment handling:
- Respects NO_COLOR and FORCE_COLOR environment variables
- Falls back to plain text in non-interactive environments
"""

from __future__ import annotations

import os

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.theme import Theme
from rich.tree import Tree

from sitedog_parser.services.models import Service

# Nord color palette (https://www.nordtheme.com/)
SITEDOG_THEME = Theme(
    {
        "info": "#88C0D0",
        "warning": "#EBCB8B",
        "error": "#BF616A bold",
        "highlight": "#B48EAD",
        "muted": "#D8DEE9",
        "frost": "#81A1C1",
    }
)

console = Console(
    theme=SITEDOG_THEME,
    force_terminal=os.environ.get("FORCE_COLOR") is not None,
    no_color=os.environ.get("NO_COLOR") is not None,
)


def error(message: str) -> None:
    """Print an error message."""
    console.print(f"[error]✗ {message}[/error]")


def warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[warning]⚠ {message}[/warning]")


def header(title: str) -> None:
    """Print a section header."""
    console.print()
    console.print(Panel(f"[bold]{title}[/bold]", border_style="cyan"))


def _service_label(service: Service) -> str:
    label = f"[cyan]{escape(service.name)}[/cyan]"
    if service.url:
        label += f" [muted]{escape(service.url)}[/muted]"
    if service.properties:
        props = ", ".join(f"{key}={value}" for key, value in service.properties.items())
        label += f" [frost]({escape(props)})[/frost]"
    return label


def add_service_node(tree: Tree, service: Service) -> None:
    """Add a service and its children to a rich tree."""
    node = tree.add(_service_label(service))
    for child in service.children:
        add_service_node(node, child)
