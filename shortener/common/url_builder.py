"""Short URL building utilities."""

from typing import Mapping, Optional

from .headers import build_base_url, get_forwarded_path_prefix


def build_short_url(
    short_code: str,
    base_url: str,
    path_prefix: str = "",
) -> str:
    """Build complete short URL.
    
    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Optional path prefix (e.g., /s)
        
    Returns:
        Complete short URL
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")
    
    if prefix:
        return f"{base}/{prefix}/{short_code}"
    return f"{base}/{short_code}"


def build_public_short_url(
    short_code: str,
    headers: Mapping[str, str],
    fallback_base_url: str,
    configured_prefix: str = "",
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Build the short URL as clients reach it, honoring proxy headers.
    
    X-Forwarded-Prefix wins over the configured prefix.
    """
    base_url = build_base_url(
        headers=headers,
        fallback_base_url=fallback_base_url,
        request_scheme=request_scheme,
        request_host=request_host,
    )
    path_prefix = get_forwarded_path_prefix(headers) or configured_prefix
    return build_short_url(short_code=short_code, base_url=base_url, path_prefix=path_prefix)
