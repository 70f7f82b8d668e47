"""
Async HTTP client used to fetch the audited page and probe secondary URLs
"""
import asyncio
import random
import logging
from typing import Optional

import aiohttp

from config import config

logger = logging.getLogger(__name__)

class FetchError(Exception):
    """Raised when the audited page cannot be fetched"""

class AsyncHTTPClient:
    """Per-audit aiohttp session with separate fetch and probe timeouts"""

    def __init__(self, scraper_config=None):
        self.config = scraper_config or config
        self.session = None

    async def __aenter__(self):
        timeout = aiohttp.ClientTimeout(total=self.config.fetch_timeout)

        self.session = aiohttp.ClientSession(
            timeout=timeout,
            headers={
                'User-Agent': random.choice(self.config.user_agents),
                'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
                'Accept-Language': 'en-US,en;q=0.5'
            }
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()
            self.session = None

    async def fetch_html(self, url: str) -> str:
        """GET the page body, raising FetchError on any failure"""
        try:
            async with self.session.get(url) as response:
                if not 200 <= response.status < 300:
                    raise FetchError(f"HTTP {response.status} for {url}")
                html = await response.text(errors='replace')
        except asyncio.TimeoutError as e:
            logger.error(f"Timeout fetching {url}")
            raise FetchError(f"Timed out after {self.config.fetch_timeout}s fetching {url}") from e
        except aiohttp.ClientError as e:
            logger.error(f"Request error for {url}: {e}")
            raise FetchError(f"Request error for {url}: {e}") from e
        except FetchError as e:
            logger.error(f"Error fetching HTML for {url}: {e}")
            raise

        if not html:
            logger.error(f"Empty response body for {url}")
            raise FetchError(f"Empty response body for {url}")

        logger.debug(f"Fetched {len(html)} characters from {url}")
        return html

    async def probe(self, url: str) -> Optional[int]:
        """GET a URL and return its status code, or None if the request failed"""
        timeout = aiohttp.ClientTimeout(total=self.config.probe_timeout)
        try:
            async with self.session.get(url, timeout=timeout) as response:
                return response.status
        except asyncio.TimeoutError:
            logger.debug(f"Timeout probing {url}")
            return None
        except (aiohttp.ClientError, ValueError) as e:
            logger.debug(f"Probe failed for {url}: {e}")
            return None
