"""
URL classification helpers.

Decides whether an inventory string names a URL (with or without scheme),
normalizes it, and derives a fallback display name from the host when no
provider in the dictionary matches.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlsplit, urlunsplit

URL_PATTERN = re.compile(
    r"""
    ^
    (?:[a-z][a-z0-9+.-]*://)?                           # optional scheme
    (?:
        (?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z]{2,}  # hostname with TLD
        |
        (?:\d{1,3}\.){3}\d{1,3}                         # IPv4
    )
    (?::\d{1,5})?                                       # optional port
    (?:[/?\#][^\s]*)?                                   # path, query, fragment
    $
    """,
    re.IGNORECASE | re.VERBOSE,
)

SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)

DEFAULT_SCHEME = "https"

# Second-level labels that belong to the public suffix (bbc.co.uk -> bbc)
SECOND_LEVEL_SUFFIXES = {"co", "com", "net", "org", "gov", "ac", "edu"}


def is_url_like(value: Any) -> bool:
    """
    Check whether a value looks like a URL or a bare hostname.

    Examples:
        https://example.com/path → True
        example.com → True
        inem.at/jobs → True
        aws → False
    """
    if not isinstance(value, str):
        return False
    return bool(URL_PATTERN.match(value.strip()))


def normalize_url(value: Any) -> str | None:
    """
    Canonicalize a URL-like string.

    Adds an https scheme when missing, lowercases scheme and host, and drops
    a trailing slash. The path keeps its case.

    Returns:
        Normalized URL or None if the value is not URL-like
    """
    if not is_url_like(value):
        return None

    raw = value.strip()
    if not SCHEME_PATTERN.match(raw):
        raw = f"{DEFAULT_SCHEME}://{raw}"

    parts = urlsplit(raw)
    if not parts.hostname:
        return None

    path = parts.path.rstrip("/")
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, parts.fragment))


def extract_name(url: str) -> str:
    """
    Derive a display name from the host of a normalized URL.

    Examples:
        https://github.com/acme/app → Github
        https://www.notion.so → Notion
        https://s3.amazonaws.com/bucket → Amazonaws
        https://bbc.co.uk → Bbc
    """
    host = urlsplit(url if SCHEME_PATTERN.match(url) else f"{DEFAULT_SCHEME}://{url}").hostname
    if not host:
        return url

    if host.startswith("www."):
        host = host[4:]

    labels = [label for label in host.split(".") if label]
    if all(label.isdigit() for label in labels):
        return host

    if len(labels) > 1:
        labels = labels[:-1]
        if len(labels) > 1 and labels[-1] in SECOND_LEVEL_SUFFIXES:
            labels = labels[:-1]

    name = labels[-1] if labels else host
    return name.capitalize()
