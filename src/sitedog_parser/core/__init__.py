"""Core modules for sitedog-parser - centralized definitions and utilities."""

from sitedog_parser.core.errors import (
    ConfigurationError,
    ExitCode,
    InventoryError,
    ServiceConstructionError,
    SitedogError,
    ValidationError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "SitedogError",
    "ConfigurationError",
    "ValidationError",
    "ServiceConstructionError",
    "InventoryError",
    "main_with_error_handling",
    "format_error_message",
]
