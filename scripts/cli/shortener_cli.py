#!/usr/bin/env python3
"""
Command-line interface for URL shortener service.

Talks to the configured store directly (no HTTP server needed).

Usage:
    python shortener_cli.py shorten <url> [--custom-code CODE]
    python shortener_cli.py get <short_code>
    python shortener_cli.py update <short_code> <url>
    python shortener_cli.py delete <short_code>
    python shortener_cli.py stats <short_code>
    python shortener_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
from typing import Optional

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from config import load_config
from shortener.errors import ServiceError
from shortener.database import create_store
from shortener.service import URLShortenerService
from shortener.common.logging_config import setup_logging


class URLShortenerCLI:
    """Command-line interface for URL shortener."""

    def __init__(self, backend: Optional[str] = None, verbose: bool = False):
        """Initialize CLI.

        Args:
            backend: Store backend overriding STORE_BACKEND
            verbose: Enable debug logging
        """
        self.config = load_config()
        if backend:
            self.config.store_backend = backend
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service = None

    async def initialize(self):
        """Initialize store and service."""
        store = create_store(self.config, logger=self.logger)
        self.service = URLShortenerService(
            store=store,
            settings=self.config.shortener_settings(),
            logger=self.logger,
        )

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    def _fail(self, error: ServiceError) -> int:
        print(json.dumps({
            "success": False,
            "kind": error.kind.value,
            "error": error.public_message,
        }, indent=2), file=sys.stderr)
        return 1

    def _ok(self, payload: dict) -> int:
        print(json.dumps({"success": True, **payload}, indent=2, default=str))
        return 0

    async def shorten(self, url: str, custom_code: Optional[str] = None) -> int:
        """Shorten a URL."""
        try:
            record = await self.service.create_short_url(url, custom_code)
        except ServiceError as e:
            return self._fail(e)

        return self._ok({
            **record.to_dict(),
            "message": f"Successfully shortened URL to: {record.short_code}",
        })

    async def get(self, short_code: str) -> int:
        """Get original URL for a short code (counts as an access)."""
        try:
            record = await self.service.get_original_url(short_code)
        except ServiceError as e:
            return self._fail(e)
        return self._ok({"short_code": record.short_code, "url": record.url})

    async def update(self, short_code: str, url: str) -> int:
        """Point a short code at a new URL."""
        try:
            record = await self.service.update_short_url(short_code, url)
        except ServiceError as e:
            return self._fail(e)
        return self._ok(record.to_dict())

    async def delete(self, short_code: str) -> int:
        """Delete a short code."""
        try:
            await self.service.delete_short_url(short_code)
        except ServiceError as e:
            return self._fail(e)
        return self._ok({"message": f"Deleted short code: {short_code}"})

    async def stats(self, short_code: str) -> int:
        """Get statistics for a short code."""
        try:
            record = await self.service.get_statistics(short_code)
        except ServiceError as e:
            return self._fail(e)
        return self._ok(record.to_dict())

    async def health(self) -> int:
        """Check store health."""
        health_status = await self.service.health_check()
        print(json.dumps({
            "success": health_status["overall"],
            "backend": self.config.store_backend,
            "health": health_status,
        }, indent=2))
        return 0 if health_status["overall"] else 1


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Shorten with custom code
  %(prog)s shorten https://example.com/long/url --custom-code mylink

  # Get original URL
  %(prog)s get mylink

  # Point a code at a new URL
  %(prog)s update mylink https://example.com/other

  # Get statistics
  %(prog)s stats mylink

  # Check health of the PostgreSQL store
  %(prog)s --backend postgres health
        """
    )

    parser.add_argument(
        "--backend",
        choices=["memory", "pocketbase", "postgres", "redis"],
        help="Store backend (default: from STORE_BACKEND env or memory)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--custom-code", help="Custom short code")

    get_parser = subparsers.add_parser("get", help="Get original URL")
    get_parser.add_argument("short_code", help="Short code to lookup")

    update_parser = subparsers.add_parser("update", help="Point a short code at a new URL")
    update_parser.add_argument("short_code", help="Short code to update")
    update_parser.add_argument("url", help="Replacement URL")

    delete_parser = subparsers.add_parser("delete", help="Delete a short code")
    delete_parser.add_argument("short_code", help="Short code to delete")

    stats_parser = subparsers.add_parser("stats", help="Get URL statistics")
    stats_parser.add_argument("short_code", help="Short code to get stats for")

    subparsers.add_parser("health", help="Check store health")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    cli = URLShortenerCLI(backend=args.backend, verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.custom_code)
        elif args.command == "get":
            return await cli.get(args.short_code)
        elif args.command == "update":
            return await cli.update(args.short_code, args.url)
        elif args.command == "delete":
            return await cli.delete(args.short_code)
        elif args.command == "stats":
            return await cli.stats(args.short_code)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
