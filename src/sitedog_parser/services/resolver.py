"""
Service resolution engine.

Turns one loosely-shaped inventory fragment into a Service tree. A fragment
can be a URL string, a provider slug, a `{service, url}` record, a map of
named URLs, a list, or any nesting of those. Shapes are checked in a fixed
order because later rules assume earlier ones already excluded the simpler
shapes:

1. None                           → None
2. URL string                     → leaf named from dictionary, hint or host
3. slug string                    → leaf, URL from dictionary if known
4. map with service + url         → leaf, remaining keys as properties
5. map of URL strings only        → group of leaves (or the single leaf)
6. any other map                  → nested maps and URL values, grouped
7. list                           → per-item recursion, grouped
8. anything else                  → None

Resolution is best-effort: an exception while classifying a fragment makes
that fragment resolve to None and never escapes resolve().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import structlog

from sitedog_parser.config.settings import get_settings
from sitedog_parser.core.errors import ServiceConstructionError
from sitedog_parser.services.dictionary import Dictionary, get_default_dictionary
from sitedog_parser.services.models import Service
from sitedog_parser.services.urls import extract_name, is_url_like, normalize_url

logger = structlog.get_logger()

UNKNOWN_GROUP_NAME = "Unknown"

SERVICE_KEY = "service"
URL_KEY = "url"
IMAGE_URL_KEY = "image_url"
PROPERTIES_KEY = "properties"


def _title(value: Any) -> str:
    """First letter upper, rest lower (idempotent)."""
    return str(value).capitalize()


def _all_urls(data: Mapping[Any, Any]) -> bool:
    return bool(data) and all(is_url_like(value) for value in data.values())


def _is_service_record(data: Mapping[Any, Any]) -> bool:
    return SERVICE_KEY in data and URL_KEY in data


def _service_record(data: Mapping[Any, Any]) -> Service:
    """Build a leaf from a `{service, url, ...}` record."""
    name = data.get(SERVICE_KEY)
    if not isinstance(name, str) or not name.strip():
        raise ServiceConstructionError("Service record without a service name", {"service": name})

    # A nested properties map (the to_dict form) is flattened into the rest
    properties: dict[str, Any] = {}
    for key, value in data.items():
        if key in (SERVICE_KEY, URL_KEY, IMAGE_URL_KEY):
            continue
        if key == PROPERTIES_KEY and isinstance(value, Mapping):
            properties.update((str(k), v) for k, v in value.items())
        else:
            properties[str(key)] = value

    return Service(
        name=_title(name.strip()),
        url=data.get(URL_KEY),
        properties=properties,
        image_url=data.get(IMAGE_URL_KEY),
    )


def _url_leaves(data: Mapping[Any, Any]) -> list[Service]:
    """Leaves for the URL-valued entries of a map, in source order."""
    return [
        Service(name=_title(key), url=value.strip())
        for key, value in data.items()
        if is_url_like(value)
    ]


@dataclass
class ServiceResolver:
    """
    Resolves inventory fragments to Service trees.

    The dictionary is treated as read-only, so one resolver can be reused
    across fields, domains and documents.
    """

    dictionary: Dictionary
    max_depth: int = 32

    def resolve(
        self,
        fragment: Any,
        type_hint: Any = None,
    ) -> Service | None:
        """
        Resolve a fragment to a Service.

        Args:
            fragment: Decoded inventory value (str, mapping, list, ...)
            type_hint: Field name the fragment appeared under; used as the
                group name and as the fallback name for unknown URLs

        Returns:
            Service (leaf or group) or None
        """
        return self._resolve(fragment, type_hint, 0)

    def _resolve(self, fragment: Any, type_hint: Any, depth: int) -> Service | None:
        if fragment is None:
            return None

        hint = str(type_hint) if type_hint not in (None, "") else None

        if depth > self.max_depth:
            logger.warning("max_depth_exceeded", type_hint=hint, max_depth=self.max_depth)
            return None

        try:
            if isinstance(fragment, str):
                if is_url_like(fragment):
                    return self._from_url(fragment, hint)
                return self._from_slug(fragment)
            if isinstance(fragment, Mapping):
                return self._from_mapping(fragment, hint, depth)
            if isinstance(fragment, (list, tuple)):
                return self._from_sequence(fragment, hint, depth)
        except Exception as e:
            logger.debug(
                "service_resolution_failed",
                type_hint=hint,
                error_type=type(e).__name__,
                error=str(e),
                fragment=repr(fragment),
            )
            return None

        return None

    def _from_url(self, value: str, hint: str | None) -> Service | None:
        url = normalize_url(value)
        if url is None:
            return None

        entry = self.dictionary.match(url)
        if entry is not None:
            name = entry.name
        elif hint:
            name = hint
        else:
            name = extract_name(url)

        logger.debug("resolved_url", name=name, url=url, matched=entry is not None)
        return Service(name=name, url=url, image_url=entry.image_url if entry else None)

    def _from_slug(self, slug: str) -> Service:
        # Unknown slugs still produce a leaf; the dictionary only enriches
        entry = self.dictionary.lookup(slug)
        logger.debug("resolved_slug", slug=slug, matched=entry is not None)
        return Service(
            name=slug.strip(),
            url=entry.url if entry else None,
            image_url=entry.image_url if entry else None,
        )

    def _from_mapping(
        self,
        data: Mapping[Any, Any],
        hint: str | None,
        depth: int,
    ) -> Service | None:
        if SERVICE_KEY in data:
            if _is_service_record(data):
                return _service_record(data)
            # A record naming a service without a URL is not a service map
            return None

        if _all_urls(data):
            children = _url_leaves(data)
            if hint:
                return Service(name=hint, children=children)
            if len(children) == 1:
                return children[0]

        children = []
        for key, value in data.items():
            child = self._child_from_entry(str(key), value, depth)
            if child is not None:
                children.append(child)

        return self._group(children, hint, fallback=UNKNOWN_GROUP_NAME)

    def _child_from_entry(self, key: str, value: Any, depth: int) -> Service | None:
        if isinstance(value, Mapping):
            if _is_service_record(value):
                return _service_record(value)

            if _all_urls(value):
                return Service(name=key, children=_url_leaves(value))

            child = self._resolve(value, key, depth + 1)
            if child is None:
                salvaged = _url_leaves(value)
                if salvaged:
                    logger.debug("salvaged_url_entries", key=key, count=len(salvaged))
                    child = Service(name=key, children=salvaged)
            return child

        # Lists, slugs and scalars under a generic map are skipped
        if is_url_like(value):
            return Service(name=_title(key), url=value.strip())

        return None

    def _from_sequence(self, items: Any, hint: str | None, depth: int) -> Service | None:
        children = []
        for item in items:
            child = self._resolve(item, hint, depth + 1)
            if child is not None:
                children.append(child)

        return self._group(children, hint, fallback=None)

    @staticmethod
    def _group(
        children: list[Service],
        hint: str | None,
        fallback: str | None,
    ) -> Service | None:
        if not children:
            return None
        if hint:
            return Service(name=hint, children=children)
        if len(children) == 1:
            return children[0]
        if fallback:
            return Service(name=fallback, children=children)
        return None


def resolve(
    fragment: Any,
    type_hint: Any = None,
    dictionary: Dictionary | None = None,
    max_depth: int | None = None,
) -> Service | None:
    """
    Resolve a single inventory fragment to a Service.

    Args:
        fragment: Decoded inventory value
        type_hint: Field name the fragment appeared under
        dictionary: Provider dictionary (defaults to the bundled one)
        max_depth: Nesting limit (defaults to settings)

    Returns:
        Service or None
    """
    resolver = ServiceResolver(
        dictionary=dictionary if dictionary is not None else get_default_dictionary(),
        max_depth=max_depth if max_depth is not None else get_settings().max_depth,
    )
    return resolver.resolve(fragment, type_hint)
