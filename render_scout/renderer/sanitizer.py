# render_scout/renderer/sanitizer.py
"""
Post-processing of rendered markup: status and header overrides from meta
tags, script stripping and ``<base>`` injection.

The helpers operate on a :class:`bs4.BeautifulSoup` tree built from the
serialized page so they can be exercised without a browser.
"""
from __future__ import annotations

import re
from typing import Dict, Optional

from bs4 import BeautifulSoup, Tag

STATUS_META = "render:status_code"
HEADER_META = "render:header"

# Scripts that would execute in a browser and HTML imports.
_STRIP_SELECTOR = (
    'script:not([type]), script[type*="javascript"], script[type="module"], link[rel="import"]'
)
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_html(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


def meta_content(soup: BeautifulSoup, name: str) -> Optional[str]:
    """Content of the first ``<meta name=...>`` tag, or None if absent."""
    tag = soup.find("meta", attrs={"name": name})
    if tag is None:
        return None
    content = tag.get("content")
    return content if isinstance(content, str) else None


def parse_status_override(content: Optional[str]) -> Optional[int]:
    """Leading integer of a status meta tag; zero or garbage means no override."""
    if not content:
        return None
    match = _LEADING_INT_RE.match(content)
    if not match:
        return None
    value = int(match.group(1))
    return value if value > 0 else None


def resolve_status(raw_status: int, meta_override: Optional[int] = None) -> int:
    """
    Final status code of a render.

    304 reads as 200. A meta override only applies to a 200; any other
    upstream status wins.
    """
    status = 200 if raw_status == 304 else raw_status
    if status == 200 and meta_override:
        status = meta_override
    return status


def parse_custom_header(content: Optional[str]) -> Dict[str, str]:
    """``"Key: value"`` -> ``{"Key": "value"}``, split on the first colon."""
    if not content:
        return {}
    key, sep, value = content.partition(":")
    if not sep:
        return {}
    return {key.strip(): value.strip()}


def strip_scripts(soup: BeautifulSoup) -> int:
    """Remove executable scripts and HTML imports; return how many were removed."""
    elements = soup.select(_STRIP_SELECTOR)
    for element in elements:
        element.decompose()
    return len(elements)


def _ensure_head(soup: BeautifulSoup) -> Tag:
    if soup.head is not None:
        return soup.head
    head = soup.new_tag("head")
    if soup.html is not None:
        soup.html.insert(0, head)
    else:
        soup.insert(0, head)
    return head


def inject_base_href(soup: BeautifulSoup, origin: str, directory: str) -> None:
    """
    Point relative resources at the original site.

    A root-relative ``<base>`` is made absolute against *origin*; other
    existing bases are kept. Without one, ``origin + directory`` is inserted
    as the first child of ``<head>``.
    """
    head = _ensure_head(soup)
    base = head.find("base")
    if base is not None:
        existing = base.get("href") or ""
        if existing.startswith("/"):
            base["href"] = origin if existing == "/" else origin + existing
        return
    base = soup.new_tag("base", href=origin + directory)
    head.insert(0, base)


__all__ = [
    "STATUS_META",
    "HEADER_META",
    "parse_html",
    "meta_content",
    "parse_status_override",
    "resolve_status",
    "parse_custom_header",
    "strip_scripts",
    "inject_base_href",
]
