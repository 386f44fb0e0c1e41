"""
Provider dictionary.

A static table of known providers keyed by canonical slug. Each entry may
carry aliases, a canonical URL, a URL pattern and an image reference. The
table is loaded once and never mutated, so a single instance can be shared
by any number of parses.

Pattern matching is first-match-wins in load order: overlapping patterns
are resolved by ordering the dictionary file, not by specificity.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator, Mapping

import structlog
import yaml

from sitedog_parser.config.settings import get_settings
from sitedog_parser.services.urls import normalize_url

logger = structlog.get_logger()

DEFAULT_DICTIONARY_PATH = Path(__file__).resolve().parent.parent / "data" / "dictionary.yml"

# Entry fields with a dedicated attribute; everything else lands in properties
RESERVED_FIELDS = {"name", "aliases", "url", "url_pattern", "image_url", "image"}


@dataclass(frozen=True)
class DictionaryEntry:
    """One provider record."""

    key: str
    name: str
    aliases: frozenset[str] = frozenset()
    url: str | None = None
    url_pattern: str | None = None
    image_url: str | None = None
    properties: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    # Compiled form of url_pattern (None when absent or invalid)
    regex: re.Pattern[str] | None = field(default=None, compare=False, hash=False, repr=False)

    @classmethod
    def from_dict(cls, key: str, data: Mapping[str, Any] | None) -> DictionaryEntry:
        """Build an entry from its raw dictionary-file record."""
        data = data or {}

        pattern = data.get("url_pattern")
        regex = None
        if pattern:
            try:
                regex = re.compile(str(pattern), re.IGNORECASE)
            except re.error as e:
                logger.warning("invalid_url_pattern", key=key, pattern=pattern, error=str(e))
                pattern = None

        return cls(
            key=key,
            name=str(data.get("name") or key),
            aliases=_parse_aliases(data.get("aliases")),
            url=data.get("url"),
            url_pattern=str(pattern) if pattern else None,
            image_url=data.get("image_url") or data.get("image"),
            properties={k: v for k, v in data.items() if k not in RESERVED_FIELDS},
            regex=regex,
        )

    def matches_url(self, normalized_url: str) -> bool:
        """Check the URL pattern against an already-normalized URL."""
        return self.regex is not None and self.regex.search(normalized_url) is not None


def _parse_aliases(raw: Any) -> frozenset[str]:
    """Aliases may be a comma-separated string or a list."""
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, (list, tuple, set)):
        items = [str(item) for item in raw]
    else:
        items = [str(raw)]
    return frozenset(item.strip().lower() for item in items if item.strip())


class Dictionary:
    """Read-only provider table with alias and URL lookups."""

    def __init__(self, entries: list[DictionaryEntry] | None = None):
        self._entries: dict[str, DictionaryEntry] = {}
        for entry in entries or []:
            self._entries.setdefault(entry.key.strip().lower(), entry)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Dictionary:
        """Build a dictionary from decoded `slug -> record` data."""
        if not data:
            return cls()
        return cls([DictionaryEntry.from_dict(str(key), record) for key, record in data.items()])

    def lookup(self, slug: Any) -> DictionaryEntry | None:
        """
        Find a provider by slug or alias.

        Keys are checked first, then aliases in load order.
        """
        if not isinstance(slug, str):
            return None

        query = slug.strip().lower()
        if not query:
            return None

        entry = self._entries.get(query)
        if entry is not None:
            return entry

        for entry in self._entries.values():
            if query in entry.aliases:
                return entry

        return None

    def match(self, url: Any) -> DictionaryEntry | None:
        """Find the first provider whose URL pattern matches the URL."""
        normalized = normalize_url(url)
        if normalized is None:
            return None

        for entry in self._entries.values():
            if entry.matches_url(normalized):
                return entry

        return None

    def all_providers(self) -> list[DictionaryEntry]:
        """All entries in load order."""
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DictionaryEntry]:
        return iter(self._entries.values())

    def __contains__(self, slug: object) -> bool:
        return self.lookup(slug) is not None


def load_dictionary(path: str | Path | None = None) -> Dictionary:
    """
    Load the provider dictionary from a YAML file.

    Missing or unreadable files produce an empty dictionary so that
    resolution can still fall back to URL-derived names.

    Args:
        path: Dictionary file path (defaults to the bundled dictionary)

    Returns:
        Dictionary instance, possibly empty
    """
    dictionary_path = Path(path) if path else DEFAULT_DICTIONARY_PATH

    if not dictionary_path.exists():
        logger.warning("dictionary_not_found", path=str(dictionary_path))
        return Dictionary()

    try:
        with open(dictionary_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("dictionary_load_failed", path=str(dictionary_path), error=str(e))
        return Dictionary()

    if not isinstance(data, dict):
        logger.warning(
            "dictionary_load_failed",
            path=str(dictionary_path),
            error=f"expected a mapping, got {type(data).__name__}",
        )
        return Dictionary()

    dictionary = Dictionary.from_mapping(
        {key: record if isinstance(record, dict) else {} for key, record in data.items()}
    )
    logger.debug("dictionary_loaded", path=str(dictionary_path), providers=len(dictionary))
    return dictionary


@lru_cache(maxsize=8)
def _load_cached(path: str) -> Dictionary:
    return load_dictionary(path)


def get_default_dictionary() -> Dictionary:
    """Get the memoized dictionary for the configured path."""
    configured = get_settings().dictionary_path
    return _load_cached(str(configured or DEFAULT_DICTIONARY_PATH))
