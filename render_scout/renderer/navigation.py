# render_scout/renderer/navigation.py
"""
Bounded-retry navigation used by the availability scraper.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Response

from render_scout.config import RetryPolicy
from render_scout.logger import logger
from render_scout.renderer.models import NavigationError

NETWORK_IDLE = "networkidle"


async def navigate_with_retry(
    page: Page, url: str, policy: Optional[RetryPolicy] = None
) -> Response:
    """
    Navigate *page* to *url*, retrying with a fixed delay.

    Every attempt waits for network idle under ``policy.timeout``. The error
    of the last attempt propagates to the caller.
    """
    policy = policy or RetryPolicy()
    for attempt in range(1, policy.max_attempts + 1):
        try:
            logger.info("Navigating to %s", url)
            response = await page.goto(
                url, timeout=policy.timeout * 1000, wait_until=NETWORK_IDLE
            )
            if response is None:
                raise NavigationError(f"No response for {url}")
            return response
        except (PlaywrightError, NavigationError) as exc:
            if attempt == policy.max_attempts:
                logger.error("Navigation to %s failed: %s", url, exc)
                raise
            logger.warning(
                "Navigation failed: %s. Retrying in %.1f s (attempt %d/%d)",
                exc,
                policy.delay,
                attempt,
                policy.max_attempts,
            )
            await asyncio.sleep(policy.delay)

    # unreachable: max_attempts >= 1
    raise NavigationError(f"Failed to navigate to {url}")


__all__ = ["NETWORK_IDLE", "navigate_with_retry"]
