"""Pytest configuration and fixtures."""

import pytest
import httpx
from typing import AsyncGenerator

from config import Config
from shortener.database.memory import MemoryURLStore
from shortener.service import URLShortenerService
from shortener.settings import ShortenerSettings
from shortener.shortcode import ShortCodeGenerator
from shortener.common.logging_config import setup_logging
from web_app import create_app


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def settings():
    """Default shortener settings."""
    return ShortenerSettings()


@pytest.fixture
def store(logger) -> MemoryURLStore:
    """Create an empty in-memory store."""
    return MemoryURLStore(logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def service(store, settings, short_code_generator, logger) -> URLShortenerService:
    """Create service instance over the memory store."""
    return URLShortenerService(
        store=store,
        settings=settings,
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def config():
    """Configuration for the web app under test."""
    return Config(
        store_backend="memory",
        base_url="http://short.test",
        path_prefix="",
    )


@pytest.fixture
def app(service, config):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config)


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create test client."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
