from __future__ import annotations

import json
from typing import Any, Optional, Union

import aiohttp

from domain.errors import ConfigurationError

USER_AGENT = "SS14 Admin Relay Discord Bot"
MAX_CONNECT_TIMEOUT = 5.0


def create_http_session(
    connect_timeout: float = MAX_CONNECT_TIMEOUT,
    total_timeout: float = 15.0,
    user_agent: str = USER_AGENT,
) -> aiohttp.ClientSession:
    """
    Build the process-wide HTTP session shared by every remote client.

    Must be called from a running event loop. The owner is responsible for
    closing it, normally with `async with`.
    """

    if connect_timeout <= 0 or total_timeout <= 0:
        raise ConfigurationError("HTTP timeouts must be positive.")

    timeout = aiohttp.ClientTimeout(
        total=total_timeout,
        connect=min(connect_timeout, MAX_CONNECT_TIMEOUT),
    )
    return aiohttp.ClientSession(timeout=timeout, headers={"User-Agent": user_agent})


def validate_base_url(url: str, name: str) -> str:
    """Return `url` without a trailing slash, or raise `ConfigurationError`."""

    url = (url or "").strip()
    if not url.startswith(("http://", "https://")):
        raise ConfigurationError(f"{name} must be an absolute http(s) URL, got {url!r}.")
    return url.rstrip("/")


def validate_token(token: str, name: str) -> str:
    """Credentials end up in headers; reject values that cannot be sent."""

    token = (token or "").strip()
    if not token:
        raise ConfigurationError(f"{name} must not be empty.")
    if any(ch in token for ch in "\r\n"):
        raise ConfigurationError(f"{name} must be a single line.")
    return token


def decode_json(body: Union[bytes, str]) -> Optional[Any]:
    """
    Decode a response body, or return None when it is not usable JSON.

    Deeply nested input exhausts the decoder's recursion limit; that counts
    as undecodable too.
    """

    try:
        return json.loads(body)
    except (ValueError, RecursionError):
        return None
