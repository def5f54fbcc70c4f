# File: render_scout/utils.py
"""render_scout.utils: URL helpers shared by the renderer and the availability scraper."""

from __future__ import annotations

import posixpath
from typing import Sequence, Tuple
from urllib.parse import parse_qsl, urlencode, urljoin, urlparse, urlunparse

from render_scout.logger import logger

__all__: Sequence[str] = (
    "origin_and_directory",
    "hostname_endswith",
    "absolutize",
    "with_query_params",
)


def origin_and_directory(url: str) -> Tuple[str, str]:
    """Returns ``("scheme://host[:port]", dirname(path))`` for a base href.

    Userinfo is dropped from the origin. Trailing slashes are ignored when
    taking the directory, so ``/blog/`` gives ``/``.
    """
    parsed = urlparse(url)
    host = parsed.netloc.rpartition("@")[2]
    origin = f"{parsed.scheme}://{host}"
    directory = posixpath.dirname(parsed.path.rstrip("/") or "/")
    return origin, directory


def hostname_endswith(url: str, domain: str) -> bool:
    """Checks that the hostname of *url* ends with *domain*."""
    hostname = urlparse(url).hostname or ""
    matches = hostname.endswith(domain)
    logger.debug("Hostname %r ends with %r: %s", hostname, domain, matches)
    return matches


def absolutize(href: str, base: str) -> str:
    """Resolves a possibly root-relative *href* against *base*."""
    return urljoin(base, href)


def with_query_params(url: str, **params: str) -> str:
    """Sets (or overwrites) query parameters, keeping the rest of the query."""
    parsed = urlparse(url)
    query = dict(parse_qsl(parsed.query, keep_blank_values=True))
    query.update(params)
    return urlunparse(parsed._replace(query=urlencode(query)))
