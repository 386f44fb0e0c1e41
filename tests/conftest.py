"""Root test configuration."""

import logging
from pathlib import Path

import pytest
import structlog
from sitedog_parser.config.settings import get_settings
from sitedog_parser.services.dictionary import Dictionary, _load_cached

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def clear_caches():
    """Settings and the default dictionary are memoized per process."""
    get_settings.cache_clear()
    _load_cached.cache_clear()
    yield
    get_settings.cache_clear()
    _load_cached.cache_clear()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def dictionary() -> Dictionary:
    """Small provider dictionary with overlapping AWS patterns."""
    return Dictionary.from_mapping(
        {
            "s3": {
                "name": "s3",
                "aliases": "aws s3, amazon s3",
                "url": "https://aws.amazon.com/s3",
                "url_pattern": r"s3[.-]([a-z0-9-]+\.)?amazonaws\.com",
                "image_url": "icons/s3.svg",
            },
            "aws": {
                "name": "aws",
                "aliases": "amazon, amazon web services",
                "url": "https://aws.amazon.com",
                "url_pattern": r"(amazonaws|amazon)\.com",
                "image_url": "icons/aws.svg",
            },
            "github": {
                "aliases": ["gh", "GitHub Pages"],
                "url": "https://github.com",
                "url_pattern": r"^https?://([a-z0-9-]+\.)*github\.(com|io)",
            },
            "ansible": {
                "url": "https://www.ansible.com",
            },
        }
    )
