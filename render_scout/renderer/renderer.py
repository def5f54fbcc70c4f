# render_scout/renderer/renderer.py
"""
Renderer: high level render, screenshot and availability APIs on top of a
shared Playwright browser.

Every operation opens its own browser context (one page session) and closes
it on every exit path. With ``close_browser`` set, the shared browser is
closed after each render or screenshot as well.
"""
from __future__ import annotations

import base64
from typing import Iterable, Optional, Sequence, Tuple, Union

from playwright.async_api import Browser, BrowserContext, Page, Response
from playwright.async_api import Error as PlaywrightError

from render_scout.config import RendererConfig
from render_scout.logger import logger
from render_scout.renderer.availability import AvailabilityScraper
from render_scout.renderer.models import (
    AvailabilityMap,
    ScreenshotError,
    ScreenshotErrorType,
    ScreenshotOptions,
    SerializedResponse,
    ViewportDimensions,
)
from render_scout.renderer.navigation import NETWORK_IDLE
from render_scout.renderer.restriction import RestrictionPolicy
from render_scout.renderer.sanitizer import (
    HEADER_META,
    STATUS_META,
    inject_base_href,
    meta_content,
    parse_custom_header,
    parse_html,
    parse_status_override,
    resolve_status,
    strip_scripts,
)
from render_scout.utils import origin_and_directory

MOBILE_USERAGENT = (
    "Mozilla/5.0 (Linux; Android 8.0.0; Pixel 2 XL Build/OPD1.170816.004) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/68.0.3440.75 Mobile Safari/537.36"
)

# Force the web component polyfills so pages render without native support.
POLYFILL_SCRIPTS: Tuple[str, ...] = (
    "customElements.forcePolyfill = true",
    "ShadyDOM = {force: true}",
    "ShadyCSS = {shimcssproperties: true}",
)

INVALID_TIMEZONE_MARKER = "invalid timezone"


class FirstResponse:
    """Single-assignment cell for the first response a page observes."""

    def __init__(self) -> None:
        self.value: Optional[Response] = None

    def __call__(self, response: Response) -> None:
        if self.value is None:
            self.value = response


def is_metadata_response(response: Response) -> bool:
    """True for responses from the compute metadata server."""
    return response.headers.get("metadata-flavor") == "Google"


class Renderer:
    """Wraps a Playwright browser to render pages, take screenshots and scrape availability."""

    def __init__(self, browser: Browser, config: Optional[RendererConfig] = None) -> None:
        self.browser = browser
        self.config = config or RendererConfig()
        self.policy = RestrictionPolicy(self.config.restricted_url_pattern)

    # ------------------------------------------------------------------ #
    # Session helpers                                                    #
    # ------------------------------------------------------------------ #

    async def _open_session(
        self,
        dimensions: ViewportDimensions,
        is_mobile: bool,
        timezone_id: Optional[str] = None,
        extra_headers: Optional[dict] = None,
        init_scripts: Iterable[str] = (),
    ) -> Tuple[BrowserContext, Page]:
        # Changing is_mobile may reload the page; a fresh context avoids that.
        context = await self.browser.new_context(
            viewport={"width": dimensions.width, "height": dimensions.height},
            is_mobile=is_mobile,
            user_agent=MOBILE_USERAGENT if is_mobile else None,
            timezone_id=timezone_id,
            extra_http_headers=extra_headers or None,
        )
        try:
            for script in init_scripts:
                await context.add_init_script(script)
            await context.route("**/*", self.policy.handle_route)
            page = await context.new_page()
        except BaseException:
            await context.close()
            raise
        return context, page

    async def _close_browser_if_configured(self) -> None:
        if self.config.close_browser:
            await self.browser.close()

    async def _release(self, context: BrowserContext) -> None:
        await context.close()
        await self._close_browser_if_configured()

    async def _navigate(self, page: Page, url: str) -> Optional[Response]:
        """Single best-effort navigation; falls back to the first observed response."""
        first = FirstResponse()
        page.on("response", first)
        response: Optional[Response] = None
        try:
            response = await page.goto(
                url, timeout=self.config.timeout_ms, wait_until=NETWORK_IDLE
            )
        except PlaywrightError as exc:
            logger.error("Navigation to %s failed: %s", url, exc)
        return response or first.value

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #

    async def serialize(
        self, request_url: str, is_mobile: bool, timezone_id: Optional[str] = None
    ) -> SerializedResponse:
        """
        Render *request_url* and return its script-free markup.

        Navigation failures degrade to a 400 response instead of raising.
        """
        dimensions = ViewportDimensions(self.config.width, self.config.height)
        try:
            context, page = await self._open_session(
                dimensions,
                is_mobile,
                timezone_id=timezone_id,
                extra_headers=self.config.req_headers,
                init_scripts=POLYFILL_SCRIPTS,
            )
        except PlaywrightError as exc:
            await self._close_browser_if_configured()
            if timezone_id and INVALID_TIMEZONE_MARKER in str(exc).lower():
                logger.warning("Invalid timezone id %r for %s", timezone_id, request_url)
                return SerializedResponse(400, {}, "Invalid timezone id")
            raise
        except BaseException:
            await self._close_browser_if_configured()
            raise

        try:
            response = await self._navigate(page, request_url)
            if response is None:
                # only happens when the page stays on about:blank
                logger.error("response does not exist for %s", request_url)
                return SerializedResponse(400, {}, "")

            if is_metadata_response(response):
                logger.warning("Metadata server response blocked: %s", request_url)
                return SerializedResponse(403, {}, "")

            soup = parse_html(await page.content())
            status = resolve_status(
                response.status, parse_status_override(meta_content(soup, STATUS_META))
            )
            custom_headers = parse_custom_header(meta_content(soup, HEADER_META))

            removed = strip_scripts(soup)
            inject_base_href(soup, *origin_and_directory(request_url))
            logger.info(
                "Rendered %s -> %d (%d scripts stripped)", request_url, status, removed
            )
            return SerializedResponse(status, custom_headers, str(soup))
        finally:
            await self._release(context)

    async def screenshot(
        self,
        url: str,
        is_mobile: bool,
        dimensions: ViewportDimensions,
        options: Optional[ScreenshotOptions] = None,
        timezone_id: Optional[str] = None,
    ) -> bytes:
        """Capture *url* as an image; raises :class:`ScreenshotError` when that is impossible."""
        options = options or ScreenshotOptions()
        try:
            context, page = await self._open_session(
                dimensions, is_mobile, timezone_id=timezone_id
            )
        except BaseException:
            await self._close_browser_if_configured()
            raise
        try:
            response = await self._navigate(page, url)
            if response is None:
                raise ScreenshotError(ScreenshotErrorType.NO_RESPONSE)
            if is_metadata_response(response):
                raise ScreenshotError(ScreenshotErrorType.FORBIDDEN)

            kwargs = {"type": options.type, "full_page": options.full_page}
            if options.quality is not None:
                kwargs["quality"] = options.quality
            image = await page.screenshot(**kwargs)
        finally:
            await self._release(context)

        if options.encoding == "base64":
            return base64.b64encode(image)
        return image

    async def scrape_availability(
        self, url: str, months: Sequence[str], slot_duration: Union[int, str]
    ) -> Union[AvailabilityMap, str]:
        """See :meth:`AvailabilityScraper.scrape`."""
        scraper = AvailabilityScraper(self.browser, self.config)
        return await scraper.scrape(url, months, slot_duration)

    def is_restricted(self, request_url: str) -> bool:
        return self.policy.is_restricted(request_url)


__all__ = ["MOBILE_USERAGENT", "POLYFILL_SCRIPTS", "FirstResponse", "Renderer"]
