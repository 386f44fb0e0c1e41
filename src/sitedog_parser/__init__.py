"""
sitedog-parser: normalize infrastructure inventories into provider services.

Typical use:

    from sitedog_parser import parse_file, get_services_by_type

    result = parse_file("sitedog.yml")
    hosting = get_services_by_type(result, "hosting")
"""

from sitedog_parser.parser import (
    get_services_by_type,
    load_inventory,
    parse,
    parse_file,
    parse_timestamp,
    to_dict,
    to_json,
)
from sitedog_parser.services import (
    Dictionary,
    DictionaryEntry,
    Service,
    ServiceResolver,
    load_dictionary,
    resolve,
)

__version__ = "0.4.0"

__all__ = [
    "Dictionary",
    "DictionaryEntry",
    "Service",
    "ServiceResolver",
    "get_services_by_type",
    "load_dictionary",
    "load_inventory",
    "parse",
    "parse_file",
    "parse_timestamp",
    "resolve",
    "to_dict",
    "to_json",
]
