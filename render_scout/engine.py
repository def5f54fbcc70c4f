# File: render_scout/engine.py
"""render_scout.engine: запуск Playwright/Chromium и выдача Renderer поверх общего браузера."""

from __future__ import annotations

from typing import Optional

from playwright.async_api import Browser, Playwright, async_playwright

from render_scout.config import RendererConfig, load_config
from render_scout.logger import logger
from render_scout.renderer.renderer import Renderer

__all__ = ["Engine"]


class Engine:
    """Фасад для CLI и тестов: владеет браузером, отдаёт Renderer.

    Пример::

        async with Engine(config) as engine:
            result = await engine.renderer.serialize(url, is_mobile=False)
    """

    @staticmethod
    def load_config(path: Optional[str]) -> RendererConfig:
        """Загружает конфиг из YAML/JSON или использует значения по умолчанию."""
        return load_config(path)

    def __init__(self, config: Optional[RendererConfig] = None) -> None:
        self.config = config or RendererConfig()
        self._playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self._renderer: Optional[Renderer] = None

    async def __aenter__(self) -> Engine:
        self._playwright = await async_playwright().start()
        try:
            self.browser = await self._playwright.chromium.launch(headless=self.config.headless)
        except BaseException:
            await self._playwright.stop()
            self._playwright = None
            raise
        self._renderer = Renderer(self.browser, self.config)
        logger.info("Chromium started (headless=%s)", self.config.headless)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.browser is not None and self.browser.is_connected():
            await self.browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self.browser = None
        self._playwright = None
        self._renderer = None

    @property
    def renderer(self) -> Renderer:
        if self._renderer is None:
            raise RuntimeError("Engine not started")
        return self._renderer
