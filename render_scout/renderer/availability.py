# render_scout/renderer/availability.py
"""
Availability scraper for Calendly booking pages.

The booking widget exposes no data API, so free slots are read by driving
the UI: month page -> enabled day buttons -> rendered time buttons. A
missing calendar or a month without enabled days is skipped; any other
failure after the domain check turns the whole result into ``{}``.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Union

from playwright.async_api import Browser, BrowserContext, ElementHandle, Page
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from render_scout.config import RendererConfig
from render_scout.logger import logger
from render_scout.renderer.models import AvailabilityMap, NavigationError
from render_scout.renderer.navigation import navigate_with_retry
from render_scout.utils import absolutize, hostname_endswith, with_query_params

EVENT_TYPE_LINK = 'a[data-id="event-type"]'
CALENDAR_TABLE = '[data-testid="calendar-table"]'
ENABLED_DAY_BUTTON = "button:not(:disabled)"
TIME_BUTTON = '[data-container="time-button"]'
START_TIME_ATTR = "data-start-time"

NOT_SCHEDULING_PAGE = "Not a Calendly URL. Aborting scraping."


def choose_event_link(links: Sequence[str], slot_duration: str, fallback: str) -> str:
    """Link mentioning the slot duration, else the first link, else *fallback*."""
    for link in links:
        if slot_duration in link:
            return link
    return links[0] if links else fallback


def collect_slots(start_times: Iterable[Optional[str]]) -> List[str]:
    """Deduplicate start times and drop missing ones."""
    return sorted({t for t in start_times if t is not None})


class AvailabilityScraper:
    """Walks month -> day -> time slot on a Calendly page."""

    def __init__(self, browser: Browser, config: Optional[RendererConfig] = None) -> None:
        self.browser = browser
        self.config = config or RendererConfig()

    @property
    def _site_root(self) -> str:
        return f"https://{self.config.scheduling_domain}"

    async def _reset_sessions(self) -> None:
        """Close every context left open on the shared browser."""
        contexts = list(self.browser.contexts)
        if contexts:
            logger.info("Closing %d open browser context(s) before scraping", len(contexts))
            for context in contexts:
                await context.close()

    async def scrape(
        self, url: str, months: Sequence[str], slot_duration: Union[int, str]
    ) -> Union[AvailabilityMap, str]:
        """
        Return ``{month: {day: [start_time, ...]}}`` for the requested months.

        A page that ends up outside the scheduling domain yields the
        :data:`NOT_SCHEDULING_PAGE` message instead of a map.
        """
        slot_duration = str(slot_duration)
        context: Optional[BrowserContext] = None
        try:
            await self._reset_sessions()
            logger.info(
                "Scraping %s for %s with slot duration %s", url, ", ".join(months), slot_duration
            )
            context = await self.browser.new_context()
            page = await context.new_page()

            try:
                await navigate_with_retry(page, url, self.config.retry)
            except (PlaywrightError, NavigationError):
                logger.error("Failed to fetch response from %s", url)
                return {}

            logger.info("Final url %s", page.url)
            if not hostname_endswith(page.url, self.config.scheduling_domain):
                logger.warning(NOT_SCHEDULING_PAGE)
                return NOT_SCHEDULING_PAGE

            link = await self._find_event_link(page, url, slot_duration)
            return await self._scrape_months(page, link, months)
        except Exception as exc:
            logger.error("Scraping %s failed: %s", url, exc)
            return {}
        finally:
            if context is not None:
                try:
                    await context.close()
                except PlaywrightError as exc:
                    logger.warning("Closing scraping context failed: %s", exc)

    async def _find_event_link(self, page: Page, url: str, slot_duration: str) -> str:
        hrefs = await page.eval_on_selector_all(
            EVENT_TYPE_LINK, "els => els.map(e => e.getAttribute('href') || '')"
        )
        links = [absolutize(href, self._site_root) for href in hrefs if href]
        link = choose_event_link(links, slot_duration, url)
        if not links:
            logger.info("No child link found. Using %s as is", url)
        else:
            logger.info("Found matching link %s", link)
        return link

    async def _scrape_months(
        self, page: Page, link: str, months: Sequence[str]
    ) -> AvailabilityMap:
        availabilities: AvailabilityMap = {}
        for month in months:
            month_url = with_query_params(link, month=month, timezone="UTC")
            logger.info("Scraping %s", month_url)
            availabilities[month] = {}

            await navigate_with_retry(page, month_url, self.config.retry)

            table = await self._wait_for_calendar(page)
            if table is None:
                logger.info("No calendar table found for %s", month)
                continue
            availabilities[month] = await self._scrape_days(page, table, month)
        return availabilities

    async def _wait_for_calendar(self, page: Page) -> Optional[ElementHandle]:
        try:
            await page.wait_for_selector(CALENDAR_TABLE, timeout=self.config.retry.timeout * 1000)
        except PlaywrightTimeoutError:
            return None
        # availability is filled in after the table shell renders
        await page.wait_for_timeout(self.config.settle_delay * 1000)
        return await page.query_selector(CALENDAR_TABLE)

    async def _scrape_days(
        self, page: Page, table: ElementHandle, month: str
    ) -> Dict[str, List[str]]:
        days: Dict[str, List[str]] = {}
        buttons = await table.query_selector_all(ENABLED_DAY_BUTTON)
        if not buttons:
            logger.info("No enabled buttons found for %s", month)
            return days

        for button in buttons:
            span = await button.query_selector("span")
            day = (await span.text_content() or "") if span is not None else ""
            logger.info("Find availability for %s-%s", month, day)

            await button.click()
            time_buttons = await page.query_selector_all(TIME_BUTTON)
            start_times = [await tb.get_attribute(START_TIME_ATTR) for tb in time_buttons]
            days[day] = collect_slots(start_times)
            logger.info("Found %d times for %s-%s", len(days[day]), month, day)
        return days


__all__ = [
    "NOT_SCHEDULING_PAGE",
    "AvailabilityScraper",
    "choose_event_link",
    "collect_slots",
]
