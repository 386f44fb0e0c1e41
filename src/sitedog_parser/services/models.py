"""
Service models for the inventory tree.

A Service is either a leaf (a provider with a URL) or a group (a named
bundle of child services, e.g. a "hosting" field listing three providers).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from sitedog_parser.core.errors import ServiceConstructionError


@dataclass
class Service:
    """A provider or a group of providers resolved from inventory data."""

    name: str
    url: str | None = None
    children: list[Service] = field(default_factory=list)

    # Source fields not consumed as name/url/children
    properties: dict[str, Any] = field(default_factory=dict)

    # Logo reference from the matching dictionary entry
    image_url: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ServiceConstructionError("Service name must not be empty", {"name": self.name})
        if self.url is not None and not isinstance(self.url, str):
            raise ServiceConstructionError(
                "Service url must be a string", {"name": self.name, "url": repr(self.url)}
            )

    @property
    def is_group(self) -> bool:
        """Whether this service bundles child services."""
        return bool(self.children)

    def walk(self) -> Iterator[Service]:
        """Yield this service and all descendants, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = {"service": self.name, "url": self.url}
        if self.image_url:
            data["image_url"] = self.image_url
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        if self.properties:
            data["properties"] = self.properties
        return data
