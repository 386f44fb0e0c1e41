"""
Inventory parsing.

Walks an inventory document (domain -> field -> value), keeps simple fields
such as project notes and timestamps as plain values, and resolves every
other field to Service trees.

Example inventory:

    rbbr.io:
      registrar: aws
      hosting: https://s3.amazonaws.com/rbbr.io
      mail: gsuite
      bought_at: 2021-03-04
"""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

import structlog
import yaml

from sitedog_parser.config.settings import get_settings
from sitedog_parser.core.errors import InventoryError
from sitedog_parser.logging import bind_context
from sitedog_parser.services.dictionary import Dictionary, get_default_dictionary
from sitedog_parser.services.models import Service
from sitedog_parser.services.resolver import ServiceResolver

logger = structlog.get_logger()

TIMESTAMP_SUFFIX = "_at"

# Tried in order after ISO-8601
TIMESTAMP_FORMATS = [
    "%b %d, %Y %I:%M:%S %p",
    "%b %d, %Y %H:%M:%S",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y",
    "%Y/%m/%d",
    "%m/%d/%Y",
]


def parse_timestamp(value: str) -> datetime | None:
    """
    Parse a timestamp string.

    Examples:
        2025-04-01T01:27:35Z → datetime(2025, 4, 1, 1, 27, 35, tzinfo=UTC)
        Apr 1, 2025 01:27:35 AM → datetime(2025, 4, 1, 1, 27, 35)

    Returns:
        Parsed datetime or None if no known format matches
    """
    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    return None


def _is_simple_field(field: str, value: Any, simple_fields: Iterable[str]) -> bool:
    return field in simple_fields or field.endswith(TIMESTAMP_SUFFIX) or isinstance(value, date)


def _simple_value(field: str, value: Any) -> Any:
    if field.endswith(TIMESTAMP_SUFFIX) and isinstance(value, str):
        parsed = parse_timestamp(value)
        if parsed is None:
            logger.debug("timestamp_unparsed", field=field, value=value)
            return value
        return parsed
    return value


def parse(
    data: Mapping[Any, Any],
    simple_fields: Iterable[str] | None = None,
    dictionary: Dictionary | None = None,
    max_depth: int | None = None,
) -> dict[str, dict[str, Any]]:
    """
    Parse inventory data into services by domain and field.

    Args:
        data: Decoded inventory (domain -> field -> value)
        simple_fields: Fields kept as plain values (defaults to settings)
        dictionary: Provider dictionary (defaults to the bundled one)
        max_depth: Nesting limit for resolution (defaults to settings)

    Returns:
        domain -> field -> list of Service, or the plain value for simple fields
    """
    settings = get_settings()
    simple = set(simple_fields if simple_fields is not None else settings.simple_fields)
    resolver = ServiceResolver(
        dictionary=dictionary if dictionary is not None else get_default_dictionary(),
        max_depth=max_depth if max_depth is not None else settings.max_depth,
    )

    result: dict[str, dict[str, Any]] = {}

    for domain, items in data.items():
        domain_name = str(domain)
        log = bind_context(domain=domain_name)
        fields: dict[str, Any] = {}

        if not isinstance(items, Mapping):
            if items is not None:
                log.warning("domain_not_a_mapping", value_type=type(items).__name__)
            result[domain_name] = fields
            continue

        for field, value in items.items():
            field_name = str(field)

            if _is_simple_field(field_name, value, simple):
                fields[field_name] = _simple_value(field_name, value)
                continue

            service = resolver.resolve(value, field_name)
            if service is None:
                log.debug("field_skipped", field=field_name)
                continue

            fields.setdefault(field_name, []).append(service)

        result[domain_name] = fields

    return result


def load_inventory(path: str | Path, root_key: str | None = None) -> dict[Any, Any]:
    """
    Load an inventory YAML file.

    Args:
        path: Inventory file path
        root_key: Optional top-level key holding the domains (e.g. "sites")

    Raises:
        InventoryError: File missing, unreadable, or not a mapping
    """
    inventory_path = Path(path)
    if not inventory_path.exists():
        raise InventoryError("Inventory file not found", {"path": str(inventory_path)})

    try:
        with open(inventory_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise InventoryError(
            "Failed to read inventory", {"path": str(inventory_path), "error": str(e)}
        ) from e

    if root_key is not None:
        if not isinstance(data, dict) or root_key not in data:
            raise InventoryError(
                "Root key not found in inventory", {"path": str(inventory_path), "root_key": root_key}
            )
        data = data[root_key] or {}

    if not isinstance(data, dict):
        raise InventoryError(
            "Inventory must be a mapping of domains",
            {"path": str(inventory_path), "type": type(data).__name__},
        )

    logger.debug("loaded_inventory", path=str(inventory_path), domains=len(data))
    return data


def parse_file(
    path: str | Path,
    root_key: str | None = None,
    simple_fields: Iterable[str] | None = None,
    dictionary: Dictionary | None = None,
) -> dict[str, dict[str, Any]]:
    """Load an inventory YAML file and parse it."""
    data = load_inventory(path, root_key=root_key)
    return parse(data, simple_fields=simple_fields, dictionary=dictionary)


def get_services_by_type(result: Mapping[str, Mapping[str, Any]], field: str) -> list[Service]:
    """All services for one field across domains, in domain order."""
    services: list[Service] = []
    for fields in result.values():
        value = fields.get(field)
        if isinstance(value, list):
            services.extend(item for item in value if isinstance(item, Service))
    return services


def _plain(value: Any) -> Any:
    if isinstance(value, Service):
        return value.to_dict()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _plain(item) for key, item in value.items()}
    return value


def to_dict(result: Mapping[str, Mapping[str, Any]]) -> dict[str, dict[str, Any]]:
    """Convert a parse result to plain data (services as dicts, dates as ISO strings)."""
    return {
        domain: {field: _plain(value) for field, value in fields.items()}
        for domain, fields in result.items()
    }


def to_json(result: Mapping[str, Mapping[str, Any]]) -> str:
    """Serialize a parse result as pretty-printed JSON."""
    return json.dumps(to_dict(result), indent=2, ensure_ascii=False, default=str)
