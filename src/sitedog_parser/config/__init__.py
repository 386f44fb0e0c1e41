"""
Configuration for sitedog-parser.

Settings are read from SITEDOG_* environment variables (or a .env file).
"""

from sitedog_parser.config.settings import DEFAULT_SIMPLE_FIELDS, Settings, get_settings

__all__ = [
    "DEFAULT_SIMPLE_FIELDS",
    "Settings",
    "get_settings",
]
