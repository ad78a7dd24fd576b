"""Store layer for URL shortener."""

from .base import URLStoreBase
from .models import ShortURL
from .memory import MemoryURLStore
from .pocketbase import PocketBaseURLStore
from .postgres import PostgresURLStore
from .redis_store import RedisURLStore
from .factory import create_store

__all__ = [
    "URLStoreBase",
    "ShortURL",
    "MemoryURLStore",
    "PocketBaseURLStore",
    "PostgresURLStore",
    "RedisURLStore",
    "create_store",
]
