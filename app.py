#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: The server handles multiple connections simultaneously via async I/O.
Set WORKERS > 1 for multi-process scaling across CPU cores (each worker opens
its own store connections).

Usage:
    python app.py

Environment variables:
    STORE_BACKEND - memory, pocketbase, postgres or redis
    POCKETBASE_URL - PocketBase server URL
    DATABASE_URL - PostgreSQL connection URL
    DATABASE_CREATE_TABLES - Set to 'true' to create the table on startup
    REDIS_URL - Redis connection URL
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from shortener.database import create_store
from shortener.service import URLShortenerService
from shortener.common.logging_config import setup_logging
from web_app import create_app


# Global instance for graceful shutdown
service_instance = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    global service_instance

    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL shortener service...")

    logger.info(f"Using '{config.store_backend}' store backend")
    store = create_store(config, logger=logger)

    service_instance = URLShortenerService(
        store=store,
        settings=config.shortener_settings(),
        logger=logger,
    )

    if not await store.health_check():
        logger.warning("Store is not reachable yet; requests will fail until it is")

    app.state.service = service_instance

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")

    if service_instance:
        await service_instance.close()

    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")

    # Service is created in lifespan
    app = create_app(service_instance=None, config=config)

    app.state.config = config
    app.state.logger = logger

    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
