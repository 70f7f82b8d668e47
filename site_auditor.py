"""
Site Auditor - Orchestrates fetching, Lighthouse, on-page analysis and scoring
"""
import asyncio
import logging
from typing import Optional

from config import config
from models import AuditEvent, AuditResult
from progress import ProgressChannel
from http_client import AsyncHTTPClient, FetchError
from lighthouse_runner import LighthouseRunner, BrowserAuditError
from content_analyzer import OnPageAnalyzer
from seo_score import generate_seo_score
from utils import PerformanceMonitor, validate_url

logger = logging.getLogger(__name__)

FETCHING = "Fetching HTML..."
BROWSER_AUDITING = "Running Lighthouse audit..."
ANALYZING = "Analyzing on-page SEO..."
SCORING = "Calculating SEO score..."
DONE = "Audit complete."

class SiteAuditor:
    """Runs one audit at a time; build a new instance for every request"""

    def __init__(self, scraper_config=None, lighthouse_runner: Optional[LighthouseRunner] = None,
                 client_factory=AsyncHTTPClient):
        self.config = scraper_config or config
        self.lighthouse_runner = lighthouse_runner or LighthouseRunner(self.config)
        self.client_factory = client_factory
        self.performance_monitor = PerformanceMonitor()

    async def run(self, url: str, channel: ProgressChannel) -> Optional[AuditResult]:
        """Audit ``url``, publishing progress and exactly one terminal event.

        The channel is closed when this returns, raises or is cancelled.
        """
        logger.info(f"Starting audit for {url}")
        if not validate_url(url):
            logger.warning(f"'{url}' does not look like an absolute http(s) URL")

        try:
            result = await asyncio.wait_for(
                self._run_stages(url, channel), timeout=self.config.audit_timeout
            )
        except FetchError as e:
            await channel.publish(AuditEvent.error(f"Failed to fetch HTML: {e}"))
        except BrowserAuditError as e:
            await channel.publish(AuditEvent.error(f"Failed to run Lighthouse audit: {e}"))
        except asyncio.TimeoutError:
            logger.error(f"Audit for {url} timed out after {self.config.audit_timeout}s")
            await channel.publish(
                AuditEvent.error(f"Audit timed out after {self.config.audit_timeout}s.")
            )
        except Exception as e:
            logger.exception(f"Unexpected error auditing {url}")
            await channel.publish(AuditEvent.error(str(e) or "Audit failed."))
        else:
            await channel.publish(AuditEvent.results(result))
            logger.info(f"Audit for {url} finished with score {result.seo_score}")
            return result
        finally:
            channel.close()

        logger.error(f"Audit failed for {url}")
        return None

    async def audit(self, url: str) -> Optional[AuditResult]:
        """Run an audit without a listener and return its result, if any"""
        channel = ProgressChannel()
        return await self.run(url, channel)

    async def _run_stages(self, url: str, channel: ProgressChannel) -> AuditResult:
        async with self.client_factory(self.config) as client:
            await channel.publish(AuditEvent.progress(FETCHING))
            self.performance_monitor.start_timer("fetch")
            html = await client.fetch_html(url)
            self.performance_monitor.end_timer("fetch")

            await channel.publish(AuditEvent.progress(BROWSER_AUDITING))
            self.performance_monitor.start_timer("lighthouse")
            categories = await self.lighthouse_runner.run(url)
            self.performance_monitor.end_timer("lighthouse")

            await channel.publish(AuditEvent.progress(ANALYZING))
            self.performance_monitor.start_timer("on_page")
            seo_data = await OnPageAnalyzer(client, self.config).analyze(html, url)
            self.performance_monitor.end_timer("on_page")

        await channel.publish(AuditEvent.progress(SCORING))
        seo_score = generate_seo_score(categories.get("seo"), seo_data)

        await channel.publish(AuditEvent.progress(DONE))
        return AuditResult(
            url=url,
            categories=categories,
            seo_data=seo_data,
            seo_score=seo_score
        )
