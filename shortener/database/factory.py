"""Build the configured store backend."""

import logging
from typing import Optional

from .base import URLStoreBase
from .memory import MemoryURLStore
from .pocketbase import PocketBaseURLStore
from .postgres import PostgresURLStore
from .redis_store import RedisURLStore


STORE_BACKENDS = ("memory", "pocketbase", "postgres", "redis")


def create_store(config, logger: Optional[logging.Logger] = None) -> URLStoreBase:
    """Create a store instance from application configuration.

    Args:
        config: Configuration instance (see config.Config)
        logger: Optional logger passed to the store

    Returns:
        Store for config.store_backend

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = config.store_backend.lower()

    if backend == "memory":
        return MemoryURLStore(logger=logger)
    if backend == "pocketbase":
        return PocketBaseURLStore(
            base_url=config.pocketbase_url,
            collection=config.pocketbase_collection,
            timeout_seconds=config.request_timeout_seconds,
            logger=logger,
        )
    if backend == "postgres":
        return PostgresURLStore(
            db_config=config.database_url,
            pool_max_size=config.database_pool_max_size,
            connection_timeout_seconds=config.request_timeout_seconds,
            create_tables=config.database_create_tables,
            logger=logger,
        )
    if backend == "redis":
        return RedisURLStore(
            redis_url=config.redis_url,
            prefix=config.redis_key_prefix,
            timeout_seconds=config.request_timeout_seconds,
            logger=logger,
        )

    raise ValueError(f"Unknown store backend '{config.store_backend}' (expected one of {', '.join(STORE_BACKENDS)})")
