# render_scout/renderer/restriction.py
"""
Request restriction rules applied to every request a page session issues.
"""
from __future__ import annotations

import re
from typing import Optional, Pattern, Union
from urllib.parse import urlparse

from playwright.async_api import Route

from render_scout.logger import logger

INTERNAL_HOST_SUFFIX = ".internal"


class RestrictionPolicy:
    """Blocks internal hostnames and, optionally, URLs matching a pattern."""

    def __init__(self, pattern: Union[str, Pattern[str], None] = None) -> None:
        if isinstance(pattern, str):
            pattern = re.compile(pattern) if pattern else None
        self._pattern: Optional[Pattern[str]] = pattern

    def is_restricted(self, request_url: str) -> bool:
        """Return True if *request_url* must not be fetched."""
        try:
            hostname = urlparse(request_url).hostname
        except ValueError:
            hostname = None
        if hostname and hostname.endswith(INTERNAL_HOST_SUFFIX):
            return True
        if self._pattern is not None and self._pattern.search(request_url):
            return True
        return False

    async def handle_route(self, route: Route) -> None:
        """Route handler: abort restricted requests, pass the rest through untouched."""
        url = route.request.url
        if self.is_restricted(url):
            logger.debug("Request blocked: %s", url)
            await route.abort()
        else:
            await route.continue_()


def is_restricted(request_url: str, pattern: Union[str, Pattern[str], None] = None) -> bool:
    return RestrictionPolicy(pattern).is_restricted(request_url)


__all__ = ["INTERNAL_HOST_SUFFIX", "RestrictionPolicy", "is_restricted"]
