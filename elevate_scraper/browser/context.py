"""Browser session management with Playwright.

This module provides BrowserManager, which owns one Playwright Chromium browser
and one browser context for the lifetime of a scraping run. Every page the run
uses is created here, and shutdown() releases all of them.
"""

import asyncio

import structlog
from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

from elevate_scraper.config import Settings, settings as default_settings

logger = structlog.get_logger(__name__)


class BrowserManager:
    """Manager for a single authenticated browser session.

    Usage:
        manager = BrowserManager()
        await manager.initialize()
        page = await manager.new_page()
        # ... use page ...
        # On every exit path:
        await manager.shutdown()
    """

    _playwright: Playwright | None
    _browser: Browser | None
    _context: BrowserContext | None
    _lock: asyncio.Lock

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings
        self._playwright = None
        self._browser = None
        self._context = None
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Start Playwright, launch Chromium and open a browser context.

        Raises:
            RuntimeError: If browser fails to launch.
        """
        async with self._lock:
            if self._context is not None:
                logger.info("browser_already_initialized")
                return

            try:
                logger.info("initializing_playwright")
                self._playwright = await async_playwright().start()

                logger.info(
                    "launching_browser",
                    headless=self.settings.browser_headless,
                )
                self._browser = await self._playwright.chromium.launch(
                    headless=self.settings.browser_headless,
                )
                self._context = await self._browser.new_context(
                    viewport={
                        "width": self.settings.viewport_width,
                        "height": self.settings.viewport_height,
                    },
                )
                self._context.set_default_timeout(self.settings.navigation_timeout_ms)

                logger.info("browser_initialized_successfully")

            except Exception as e:
                logger.error(
                    "browser_initialization_failed",
                    error=str(e),
                    exc_info=True,
                )
                raise RuntimeError(f"Failed to initialize browser: {e}") from e

    async def get_context(self) -> BrowserContext:
        """Get the current browser context, initializing it on first use."""
        if self._context is None:
            await self.initialize()

        if self._context is None:
            raise RuntimeError("Browser context is not available")

        return self._context

    async def new_page(self) -> Page:
        """Open a new page (tab) in the session's browser context."""
        context = await self.get_context()
        page = await context.new_page()

        logger.debug(
            "new_page_created",
            total_pages=len(context.pages),
        )

        return page

    async def shutdown(self) -> None:
        """Close the browser and stop Playwright.

        Safe to call more than once and after a partial initialize().
        """
        async with self._lock:
            if self._context is not None:
                logger.info("closing_browser_context")
                try:
                    await self._context.close()
                except Exception as e:
                    logger.warning(
                        "error_closing_context",
                        error=str(e),
                    )
                finally:
                    self._context = None

            if self._browser is not None:
                logger.info("closing_browser")
                try:
                    await self._browser.close()
                except Exception as e:
                    logger.warning(
                        "error_closing_browser",
                        error=str(e),
                    )
                finally:
                    self._browser = None

            if self._playwright is not None:
                logger.info("stopping_playwright")
                try:
                    await self._playwright.stop()
                except Exception as e:
                    logger.warning(
                        "error_stopping_playwright",
                        error=str(e),
                    )
                finally:
                    self._playwright = None

            logger.info("browser_shutdown_complete")
