"""
Lighthouse Audit Runner

Runs Google Lighthouse via its CLI against an isolated headless browser and
returns the category scores of the report.
"""
import json
import asyncio
import logging
from typing import Optional, Dict, Any, List

from browser_utils import BrowserManager
from models import CATEGORIES, CategoryScores
from config import config

logger = logging.getLogger(__name__)

class BrowserAuditError(Exception):
    """Raised when the browser could not be launched or Lighthouse failed"""

class LighthouseRunner:
    """Runs one Lighthouse audit per call inside its own browser session."""

    def __init__(self, scraper_config=None, browser_manager: Optional[BrowserManager] = None):
        """
        Args:
            scraper_config: Audit configuration (defaults to the module config)
            browser_manager: Session factory, replaceable in tests
        """
        self.config = scraper_config or config
        self.browser_manager = browser_manager or BrowserManager(self.config)
        self.only_categories = list(CATEGORIES)

    async def run(self, url: str) -> CategoryScores:
        """
        Audit a URL and return its category scores.

        Args:
            url: The URL to audit

        Returns:
            Mapping of every requested category to a 0-1 score, or None when
            the report has no score for it

        Raises:
            BrowserAuditError: If the browser or Lighthouse failed
        """
        logger.info(f"Running Lighthouse on {url}")
        try:
            async with self.browser_manager.debuggable_browser() as port:
                report = await self._run_lighthouse(url, port)
        except BrowserAuditError:
            raise
        except Exception as e:
            logger.error(f"Error running Lighthouse audit for {url}: {e}")
            raise BrowserAuditError(str(e) or e.__class__.__name__) from e

        scores = self._parse_categories(report)
        logger.info(f"Lighthouse completed successfully for {url}: {scores}")
        return scores

    def build_command(self, url: str, port: int) -> List[str]:
        """Lighthouse CLI arguments for auditing ``url`` through an open browser"""
        return [
            self.config.lighthouse_path,
            url,
            f"--port={port}",
            "--output=json",
            "--output-path=stdout",
            "--quiet",
            "--only-categories=" + ",".join(self.only_categories),
        ]

    async def _run_lighthouse(self, url: str, port: int) -> Dict[str, Any]:
        """Run the CLI as a subprocess and return the parsed JSON report"""
        process = await asyncio.create_subprocess_exec(
            *self.build_command(url, port),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.config.lighthouse_timeout
            )
        except asyncio.TimeoutError:
            logger.error(f"Lighthouse timeout for {url} after {self.config.lighthouse_timeout}s")
            raise BrowserAuditError(
                f"Lighthouse timed out after {self.config.lighthouse_timeout}s"
            ) from None
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()

        if process.returncode != 0:
            message = stderr.decode(errors='replace').strip()
            logger.error(f"Lighthouse failed for {url}: {message}")
            raise BrowserAuditError(
                f"Lighthouse exited with code {process.returncode}: {message}"
            )

        try:
            return json.loads(stdout)
        except ValueError as e:
            raise BrowserAuditError(f"Invalid Lighthouse report: {e}") from e

    def _parse_categories(self, lhr: Dict[str, Any]) -> CategoryScores:
        """Extract the requested category scores from a Lighthouse report"""
        categories = lhr.get("categories") or {}
        return {
            name: self._get_score(categories.get(name))
            for name in self.only_categories
        }

    def _get_score(self, category: Optional[Dict]) -> Optional[float]:
        """Extract the 0-1 score from a category, None if missing"""
        if not category:
            return None
        score = category.get("score")
        return float(score) if score is not None else None
