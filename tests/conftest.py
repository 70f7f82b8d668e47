"""
Pytest configuration and shared fixtures
"""
import pytest
import os
from unittest.mock import Mock, AsyncMock

# Add project root to path
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config import AuditConfig
from models import SEOSignals


GOOD_PAGE = """
<html>
    <head>
        <title>  Example Widgets  </title>
        <meta name="description" content="Hand made example widgets">
        <link rel="canonical" href="https://example.com/">
        <script type="application/ld+json">{"@type": "Organization"}</script>
    </head>
    <body>
        <h1>Example widgets</h1>
        <h2>Why widgets</h2>
        <h2>Pricing</h2>
        <p>An example of a widget page.</p>
        <a href="/about">About</a>
        <a href="#top">Top</a>
        <a href="https://external.com/page">External</a>
        <img src="a.jpg" alt="A widget">
        <img src="b.jpg" alt="Another widget">
    </body>
</html>
"""


@pytest.fixture
def test_config(tmp_path):
    """Test configuration with short timeouts"""
    return AuditConfig(
        fetch_timeout=5,
        probe_timeout=5,
        lighthouse_timeout=5,
        log_dir=str(tmp_path / "logs")
    )


@pytest.fixture
def good_page():
    """A page that passes every on-page checklist item"""
    return GOOD_PAGE


@pytest.fixture
def sample_seo_signals():
    """Signals that pass every on-page checklist item"""
    return SEOSignals(
        title="Example Widgets",
        meta_description="Hand made example widgets",
        h1_count=1,
        h2_count=2,
        image_alt_tags=("A widget", "Another widget"),
        canonical_link="https://example.com/",
        robots_txt=True,
        sitemap=False,
        structured_data=True,
        broken_links=0,
        keyword_density="10.00",
        readability=""
    )


class FakeHTTPClient:
    """Stands in for AsyncHTTPClient; also usable as its factory"""

    def __init__(self, html="", statuses=None, default_status=200, fetch_error=None):
        self.statuses = statuses or {}
        self.default_status = default_status
        self.fetch_html = AsyncMock(return_value=html, side_effect=fetch_error)
        self.probe = AsyncMock(side_effect=self._probe)
        self.entered = False
        self.closed = False

    def __call__(self, scraper_config=None):
        return self

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.closed = True

    async def _probe(self, url):
        return self.statuses.get(url, self.default_status)


@pytest.fixture
def fake_client_class():
    """The FakeHTTPClient class, for tests that need custom instances"""
    return FakeHTTPClient


@pytest.fixture
def mock_lighthouse_runner():
    """Lighthouse runner returning perfect category scores"""
    runner = Mock()
    runner.run = AsyncMock(return_value={
        "performance": 0.99,
        "seo": 1.0,
        "accessibility": 0.95,
        "best-practices": 0.92
    })
    return runner
