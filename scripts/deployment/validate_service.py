#!/usr/bin/env python3
"""
Validation script for URL Shortener service.
Exercises a live running service end to end: create, read, update, stats,
redirect, delete and the error responses.
"""

import sys
import time
import argparse
import requests
from typing import Callable, Optional
from datetime import datetime


class ServiceValidator:
    """Validates URL shortener service functionality."""

    def __init__(self, base_url: str = "http://localhost:8080", timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/api/v1/shorten"
        self.timeout = timeout
        self.session = requests.Session()
        self.test_results = []

    def print_header(self, text: str):
        """Print a formatted header."""
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    def print_test(self, name: str, passed: bool, details: str = ""):
        """Print test result."""
        status = "✅ PASS" if passed else "❌ FAIL"
        self.test_results.append((name, passed))
        print(f"{status} - {name}")
        if details:
            print(f"       {details}")

    def _check(self, name: str, fn: Callable[[], bool]) -> bool:
        try:
            return fn()
        except requests.RequestException as e:
            self.print_test(name, False, f"Error: {e}")
            return False

    def _expect_status(self, name: str, response: requests.Response, expected: int) -> bool:
        passed = response.status_code == expected
        self.print_test(name, passed, f"Status: {response.status_code} (expected {expected})")
        return passed

    def test_health_check(self) -> bool:
        """Test health check endpoint."""
        def run():
            response = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
            data = response.json()
            is_healthy = response.status_code == 200 and data.get("status") == "healthy"
            self.print_test("Health Check", is_healthy, f"Status: {data.get('status')}")
            return is_healthy
        return self._check("Health Check", run)

    def test_create_short_url(self) -> Optional[str]:
        """Test creating a short URL."""
        created = {}

        def run():
            test_url = f"https://example.com/test/{int(time.time())}"
            response = self.session.post(self.api_url, json={"url": test_url}, timeout=self.timeout)
            if response.status_code != 201:
                self.print_test("Create Short URL", False, f"Status: {response.status_code}")
                return False
            data = response.json()
            created["code"] = data.get("shortCode")
            passed = bool(created["code"]) and data.get("url") == test_url
            self.print_test("Create Short URL", passed, f"Code: {created['code']}, URL: {data.get('shortUrl')}")
            return passed

        return created.get("code") if self._check("Create Short URL", run) else None

    def test_get_url(self, short_code: str) -> bool:
        """Test resolving a short code (counts one access)."""
        def run():
            response = self.session.get(f"{self.api_url}/{short_code}", timeout=self.timeout)
            if response.status_code != 200:
                self.print_test("Get URL", False, f"Status: {response.status_code}")
                return False
            data = response.json()
            passed = data.get("accessCount") == 1
            self.print_test("Get URL", passed, f"Access count: {data.get('accessCount')} (expected 1)")
            return passed
        return self._check("Get URL", run)

    def test_stats(self, short_code: str, expected_count: int) -> bool:
        """Test stats endpoint does not count an access."""
        def run():
            response = self.session.get(f"{self.api_url}/{short_code}/stats", timeout=self.timeout)
            if response.status_code != 200:
                self.print_test("Stats", False, f"Status: {response.status_code}")
                return False
            count = response.json().get("accessCount")
            passed = count == expected_count
            self.print_test("Stats", passed, f"Access count: {count} (expected {expected_count})")
            return passed
        return self._check("Stats", run)

    def test_update(self, short_code: str) -> bool:
        """Test pointing a code at a new URL."""
        def run():
            new_url = "https://example.com/updated"
            response = self.session.put(f"{self.api_url}/{short_code}", json={"url": new_url}, timeout=self.timeout)
            passed = response.status_code == 200 and response.json().get("url") == new_url
            self.print_test("Update URL", passed, f"Status: {response.status_code}")
            return passed
        return self._check("Update URL", run)

    def test_redirect(self, short_code: str) -> bool:
        """Test URL redirect functionality."""
        def run():
            response = self.session.get(f"{self.base_url}/{short_code}", allow_redirects=False, timeout=self.timeout)
            location = response.headers.get("Location", "")
            self.print_test(
                "URL Redirect",
                response.status_code == 302,
                f"Redirects to: {location[:50]}" if location else "No Location header",
            )
            return response.status_code == 302
        return self._check("URL Redirect", run)

    def test_custom_code(self) -> Optional[str]:
        """Test custom short code, then its duplicate rejection."""
        custom_code = f"test{int(time.time())}"

        def run():
            response = self.session.post(
                self.api_url,
                json={"url": "https://github.com/example/repo", "customCode": custom_code},
                timeout=self.timeout,
            )
            passed = response.status_code == 201 and response.json().get("shortCode") == custom_code
            self.print_test("Custom Short Code", passed, f"Code: {custom_code}")
            return passed

        if not self._check("Custom Short Code", run):
            return None

        def duplicate():
            response = self.session.post(
                self.api_url,
                json={"url": "https://different-url.com", "customCode": custom_code},
                timeout=self.timeout,
            )
            return self._expect_status("Duplicate Code Rejection", response, 409)

        self._check("Duplicate Code Rejection", duplicate)
        return custom_code

    def test_invalid_url(self) -> bool:
        """Test invalid URL rejection."""
        def run():
            response = self.session.post(self.api_url, json={"url": "not-a-valid-url"}, timeout=self.timeout)
            return self._expect_status("Invalid URL Rejection", response, 400)
        return self._check("Invalid URL Rejection", run)

    def test_nonexistent_code(self) -> bool:
        """Test accessing non-existent short code."""
        def run():
            response = self.session.get(f"{self.api_url}/nonexistent999", timeout=self.timeout)
            return self._expect_status("Non-existent Code", response, 404)
        return self._check("Non-existent Code", run)

    def test_delete(self, short_code: str) -> bool:
        """Test deleting a code, after which it is gone."""
        def run():
            response = self.session.delete(f"{self.api_url}/{short_code}", timeout=self.timeout)
            if not self._expect_status("Delete URL", response, 200):
                return False
            response = self.session.get(f"{self.api_url}/{short_code}/stats", timeout=self.timeout)
            return self._expect_status("Deleted Code Gone", response, 404)
        return self._check("Delete URL", run)

    def run_all_tests(self) -> bool:
        """Run all validation tests."""
        self.print_header("URL Shortener Service Validation")
        print(f"Testing service at: {self.base_url}")
        print(f"Timestamp: {datetime.now().isoformat()}\n")

        if not self.test_health_check():
            print("\n❌ Health check failed. Service may not be running.")
            print(f"   Make sure the service is accessible at {self.base_url}")
            return False

        print()

        short_code = self.test_create_short_url()
        if short_code:
            self.test_get_url(short_code)
            self.test_stats(short_code, expected_count=1)
            self.test_redirect(short_code)
            self.test_stats(short_code, expected_count=2)
            self.test_update(short_code)

        print()

        custom_code = self.test_custom_code()
        self.test_invalid_url()
        self.test_nonexistent_code()

        print()

        for code in (short_code, custom_code):
            if code:
                self.test_delete(code)

        self.print_summary()

        return all(passed for _, passed in self.test_results)

    def print_summary(self):
        """Print test summary."""
        total = len(self.test_results)
        passed = sum(1 for _, p in self.test_results if p)
        failed = total - passed

        self.print_header("Test Summary")
        print(f"Total Tests:  {total}")
        print(f"✅ Passed:     {passed}")
        print(f"❌ Failed:     {failed}")
        if total:
            print(f"Success Rate: {(passed/total*100):.1f}%")

        if failed > 0:
            print("\n⚠️  Failed tests:")
            for name, ok in self.test_results:
                if not ok:
                    print(f"   - {name}")

        print()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Validate URL Shortener service functionality"
    )
    parser.add_argument(
        "--url",
        default="http://localhost:8080",
        help="Base URL of the service (default: http://localhost:8080)"
    )
    parser.add_argument("--timeout", type=float, default=5.0, help="Per-request timeout in seconds")

    args = parser.parse_args()

    validator = ServiceValidator(args.url, timeout=args.timeout)

    try:
        success = validator.run_all_tests()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\n⚠️  Validation interrupted by user")
        sys.exit(2)


if __name__ == "__main__":
    main()
