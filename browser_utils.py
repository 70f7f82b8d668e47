"""
Browser utilities for the Site Auditor
"""
import socket
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import async_playwright

from config import config

logger = logging.getLogger(__name__)

def find_free_port() -> int:
    """Ask the OS for an unused local TCP port"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('127.0.0.1', 0))
        return sock.getsockname()[1]

class BrowserManager:
    """Launches isolated headless Chromium sessions for external audit tools"""

    def __init__(self, scraper_config=None):
        self.config = scraper_config or config

    @asynccontextmanager
    async def debuggable_browser(self) -> AsyncIterator[int]:
        """Launch Chromium with a remote-debugging port and yield that port.

        The browser and the Playwright driver are shut down on every exit
        path, including errors raised by the caller and task cancellation.
        """
        port = find_free_port()
        playwright = await async_playwright().start()
        try:
            browser = await playwright.chromium.launch(
                headless=self.config.headless,
                args=[f'--remote-debugging-port={port}'] + list(self.config.chrome_args)
            )
            logger.info(f"Browser launched with remote debugging on port {port}")
            try:
                yield port
            finally:
                await self._close_browser(browser)
        finally:
            await playwright.stop()
            logger.debug("Playwright stopped")

    async def _close_browser(self, browser):
        """Close the browser, logging rather than masking the original error"""
        try:
            await browser.close()
            logger.info("Browser closed successfully")
        except Exception as e:
            logger.error(f"Error closing browser: {e}")
