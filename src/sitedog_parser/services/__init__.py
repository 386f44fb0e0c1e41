"""
Service resolution for inventory data.

Classifies loosely-shaped inventory fragments into Service trees, using a
provider dictionary to turn bare URLs and slugs into canonical names.
"""

from sitedog_parser.services.dictionary import (
    DEFAULT_DICTIONARY_PATH,
    Dictionary,
    DictionaryEntry,
    get_default_dictionary,
    load_dictionary,
)
from sitedog_parser.services.models import Service
from sitedog_parser.services.resolver import UNKNOWN_GROUP_NAME, ServiceResolver, resolve
from sitedog_parser.services.urls import extract_name, is_url_like, normalize_url

__all__ = [
    # Models
    "Service",
    # URLs
    "is_url_like",
    "normalize_url",
    "extract_name",
    # Dictionary
    "Dictionary",
    "DictionaryEntry",
    "DEFAULT_DICTIONARY_PATH",
    "load_dictionary",
    "get_default_dictionary",
    # Resolver
    "ServiceResolver",
    "UNKNOWN_GROUP_NAME",
    "resolve",
]
