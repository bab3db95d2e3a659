"""HTTP fetcher: one buffered GET per page."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlsplit

import httpx

from pagemeta.config import settings
from pagemeta.scraper.models import RawPage

logger = logging.getLogger(__name__)


def is_valid_url(value: object) -> bool:
    """Return ``True`` if *value* is a non-empty URL string with scheme and host."""
    if not value or not isinstance(value, str):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        # e.g. an unterminated IPv6 literal: "http://[::1"
        return False
    return bool(parts.scheme and parts.netloc)


def fetch_url(url: str, *, timeout: Optional[float] = None) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    The whole body is buffered.  No retries are attempted.

    Raises:
        httpx.HTTPStatusError: If the server returns a 4xx/5xx status code.
        httpx.HTTPError: On any other transport failure, including timeouts.
    """
    headers = {"User-Agent": settings.user_agent}
    effective_timeout = settings.request_timeout if timeout is None else timeout

    logger.debug("HTTP GET %s (timeout=%ss)", url, effective_timeout)
    with httpx.Client(
        headers=headers,
        timeout=effective_timeout,
        follow_redirects=settings.follow_redirects,
    ) as client:
        response = client.get(url)
        response.raise_for_status()
        html = response.text
        status_code = response.status_code

    logger.debug("HTTP %d for %s (%d chars)", status_code, url, len(html))
    return RawPage(url=url, html=html, status_code=status_code)
