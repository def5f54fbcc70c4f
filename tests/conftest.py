# File: tests/conftest.py
"""Fixtures and in-memory stand-ins for the Playwright objects the renderer drives."""
from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import parse_qs, urlparse

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from render_scout.config import RendererConfig, RetryPolicy


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "browser: needs a real Chromium (skipped when it cannot be launched)",
    )


# --------------------------------------------------------------------------- #
#                         Fake Playwright primitives                          #
# --------------------------------------------------------------------------- #


class FakeResponse:
    def __init__(self, status: int = 200, headers: Optional[Dict[str, str]] = None) -> None:
        self.status = status
        self.headers = headers or {}


class FakeElement:
    def __init__(
        self,
        text: Optional[str] = None,
        attrs: Optional[Dict[str, Optional[str]]] = None,
        children: Optional[Dict[str, List["FakeElement"]]] = None,
        on_click: Optional[Callable[[], None]] = None,
    ) -> None:
        self.text = text
        self.attrs = attrs or {}
        self.children = children or {}
        self.on_click = on_click
        self.clicks = 0

    async def query_selector(self, selector: str) -> Optional["FakeElement"]:
        found = self.children.get(selector, [])
        return found[0] if found else None

    async def query_selector_all(self, selector: str) -> List["FakeElement"]:
        return list(self.children.get(selector, []))

    async def text_content(self) -> Optional[str]:
        return self.text

    async def get_attribute(self, name: str) -> Optional[str]:
        return self.attrs.get(name)

    async def click(self) -> None:
        self.clicks += 1
        if self.on_click is not None:
            self.on_click()


class FakePage:
    """Page whose navigation outcomes are scripted.

    ``outcomes`` is consumed one item per ``goto``: an exception is raised,
    anything else is returned. ``events`` are emitted as response events
    before the outcome is applied.
    """

    def __init__(
        self,
        outcomes: Optional[List[Any]] = None,
        events: Optional[List[FakeResponse]] = None,
        content: str = "<html><head></head><body></body></html>",
    ) -> None:
        self.outcomes = list(outcomes) if outcomes is not None else [FakeResponse()]
        self.events = events or []
        self.html = content
        self.listeners: Dict[str, List[Callable]] = {}
        self.goto_calls: List[Dict[str, Any]] = []
        self.screenshot_calls: List[Dict[str, Any]] = []
        self.screenshot_bytes = b"\xff\xd8\xff\xe0fake-jpeg"
        self.url = "about:blank"

    def on(self, event: str, callback: Callable) -> None:
        self.listeners.setdefault(event, []).append(callback)

    async def goto(self, url: str, **kwargs: Any):
        self.goto_calls.append({"url": url, **kwargs})
        for response in self.events:
            for callback in self.listeners.get("response", []):
                callback(response)
        outcome = self.outcomes.pop(0) if self.outcomes else FakeResponse()
        if isinstance(outcome, BaseException):
            raise outcome
        self.url = url
        return outcome

    async def content(self) -> str:
        return self.html

    async def screenshot(self, **kwargs: Any) -> bytes:
        self.screenshot_calls.append(kwargs)
        return self.screenshot_bytes


class FakeContext:
    def __init__(self, browser: "FakeBrowser", page: Any, options: Dict[str, Any]) -> None:
        self.browser = browser
        self.page = page
        self.options = options
        self.init_scripts: List[str] = []
        self.routes: List[Any] = []
        self.close_count = 0
        self.new_page_error: Optional[BaseException] = None

    async def add_init_script(self, script: str) -> None:
        self.init_scripts.append(script)

    async def route(self, pattern: str, handler: Callable) -> None:
        self.routes.append((pattern, handler))

    async def new_page(self) -> Any:
        if self.new_page_error is not None:
            raise self.new_page_error
        return self.page

    async def close(self) -> None:
        self.close_count += 1
        if self in self.browser.contexts:
            self.browser.contexts.remove(self)


class FakeBrowser:
    """Hands out one scripted page per new context."""

    def __init__(self, page_factory: Callable[[], Any] = FakePage) -> None:
        self.page_factory = page_factory
        self.contexts: List[FakeContext] = []
        self.created: List[FakeContext] = []
        self.new_page_error: Optional[BaseException] = None
        self.close_count = 0

    async def new_context(self, **options: Any) -> FakeContext:
        context = FakeContext(self, self.page_factory(), options)
        context.new_page_error = self.new_page_error
        self.contexts.append(context)
        self.created.append(context)
        return context

    async def close(self) -> None:
        self.close_count += 1


# --------------------------------------------------------------------------- #
#                             Calendly stand-in                               #
# --------------------------------------------------------------------------- #

CALENDAR_TABLE = '[data-testid="calendar-table"]'
TIME_BUTTON = '[data-container="time-button"]'


class FakeCalendlyPage(FakePage):
    """
    Booking page driven by ``calendar``: month -> {day: [start times]} or
    None when the calendar table never renders for that month. Only
    days with an enabled button are listed.
    """

    def __init__(
        self,
        calendar: Dict[str, Optional[Dict[str, List[Optional[str]]]]],
        event_hrefs: Optional[List[str]] = None,
        redirects: Optional[Dict[str, str]] = None,
        outcomes: Optional[List[Any]] = None,
    ) -> None:
        super().__init__(outcomes=outcomes if outcomes is not None else [])
        self.calendar = calendar
        self.event_hrefs = event_hrefs or []
        self.redirects = redirects or {}
        self.time_buttons: List[FakeElement] = []
        self.waits: List[float] = []
        self.selector_waits: List[str] = []

    async def goto(self, url: str, **kwargs: Any):
        self.goto_calls.append({"url": url, **kwargs})
        if self.outcomes:
            outcome = self.outcomes.pop(0)
            if isinstance(outcome, BaseException):
                raise outcome
        self.url = self.redirects.get(url, url)
        self.time_buttons = []
        return FakeResponse()

    def _month(self) -> Optional[str]:
        values = parse_qs(urlparse(self.url).query).get("month")
        return values[0] if values else None

    async def eval_on_selector_all(self, selector: str, script: str) -> List[str]:
        return list(self.event_hrefs)

    async def wait_for_selector(self, selector: str, **kwargs: Any) -> None:
        self.selector_waits.append(selector)
        if self.calendar.get(self._month()) is None:
            raise PlaywrightTimeoutError(f"Timeout waiting for {selector}")

    async def wait_for_timeout(self, timeout: float) -> None:
        self.waits.append(timeout)

    def _day_button(self, day: str, times: List[Optional[str]]) -> FakeElement:
        def show_times() -> None:
            self.time_buttons = [FakeElement(attrs={"data-start-time": t}) for t in times]

        return FakeElement(children={"span": [FakeElement(text=day)]}, on_click=show_times)

    async def query_selector(self, selector: str) -> Optional[FakeElement]:
        days = self.calendar.get(self._month())
        if selector != CALENDAR_TABLE or days is None:
            return None
        buttons = [self._day_button(day, times) for day, times in days.items()]
        return FakeElement(children={"button:not(:disabled)": buttons})

    async def query_selector_all(self, selector: str) -> List[FakeElement]:
        if selector == TIME_BUTTON:
            return list(self.time_buttons)
        return []


# --------------------------------------------------------------------------- #
#                                  Fixtures                                   #
# --------------------------------------------------------------------------- #


@pytest.fixture()
def fakes():
    """Access to the fake classes from test modules."""

    class _Fakes:
        Response = FakeResponse
        Element = FakeElement
        Page = FakePage
        CalendlyPage = FakeCalendlyPage
        Browser = FakeBrowser
        Error = PlaywrightError
        Timeout = PlaywrightTimeoutError

    return _Fakes


@pytest.fixture()
def fast_config() -> RendererConfig:
    """Config without delays for scraper tests."""
    return RendererConfig(
        timeout=2.0,
        retry=RetryPolicy(max_attempts=2, delay=0, timeout=1.0),
        settle_delay=0,
    )


@pytest.fixture()
def sleeps(monkeypatch) -> List[float]:
    """Record asyncio.sleep calls made by the retry primitive instead of sleeping."""
    import render_scout.renderer.navigation as navigation

    calls: List[float] = []

    async def fake_sleep(delay: float) -> None:
        calls.append(delay)

    monkeypatch.setattr(navigation, "asyncio", SimpleNamespace(sleep=fake_sleep))
    return calls
