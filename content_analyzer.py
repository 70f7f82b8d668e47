"""
On-page SEO analysis for the Site Auditor
"""
import re
import math
import asyncio
import logging
from typing import Optional

from bs4 import BeautifulSoup
from readability import Document

from models import SEOSignals
from link_checker import LinkChecker, extract_links
from utils import safe_extract_text, safe_extract_attribute, format_decimal
from config import config

logger = logging.getLogger(__name__)

# Class/id fragments that mark boilerplate rather than article content
UNLIKELY_CANDIDATES = re.compile(
    r"-ad-|ai2html|banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|extra|"
    r"footer|gdpr|header|legends|menu|related|remark|replies|rss|shoutbox|sidebar|"
    r"skyscraper|social|sponsor|supplemental|ad-break|agegate|pagination|pager|popup|"
    r"yom-remote",
    re.IGNORECASE
)
MAYBE_CANDIDATE = re.compile(r"and|article|body|column|content|main|shadow", re.IGNORECASE)

SENTENCE_DELIMITERS = re.compile(r"[.!?]+")
VOWELS = set("aeiouy")

def check_structured_data(soup) -> bool:
    """True if the page has a non-empty JSON-LD block or any microdata item"""
    for script in soup.find_all('script', attrs={'type': 'application/ld+json'}):
        if script.get_text().strip():
            return True
    return soup.find(attrs={'itemscope': True}) is not None

def extract_title(soup) -> str:
    """Document title, ignoring <title> elements that label inline SVG"""
    for title in soup.find_all('title'):
        if title.find_parent('svg') is None:
            return safe_extract_text(title)
    return ""

def extract_visible_text(html: str) -> str:
    """Body text with script, style and noscript content removed.

    lxml always builds a <body>, so pages that omit the tag do not leak
    <head> text. Text nodes are joined as-is, so inline markup inside a
    word does not split it.
    """
    soup = BeautifulSoup(html, 'lxml')
    for element in soup(["head", "script", "style", "noscript", "template"]):
        element.decompose()
    root = soup.body or soup
    return root.get_text()

def calculate_keyword_density(html: str, keyword: str) -> str:
    """Percentage of body tokens equal to ``keyword`` (case-insensitive).

    A page without any tokens has a density of "0.00".
    """
    words = extract_visible_text(html).split()
    if not words:
        return "0.00"

    target = keyword.lower()
    keyword_count = sum(1 for word in words if word.lower() == target)
    return format_decimal(keyword_count / len(words) * 100)

def _is_node_visible(node) -> bool:
    style = (node.get('style') or '').replace(' ', '').lower()
    if 'display:none' in style:
        return False
    if node.has_attr('hidden'):
        return False
    if node.get('aria-hidden') == 'true':
        classes = node.get('class') or []
        return 'fallback-image' in classes
    return True

def is_probably_readable(soup, min_content_length: int = 140, min_score: float = 20.0) -> bool:
    """Cheap check for whether a page has enough article-like text to extract"""
    nodes = soup.find_all(['p', 'pre', 'article'])

    # Divs that hold text directly through <br> line breaks also count
    seen = set(id(node) for node in nodes)
    for br in soup.select('div > br'):
        parent = br.parent
        if id(parent) not in seen:
            seen.add(id(parent))
            nodes.append(parent)

    score = 0.0
    for node in nodes:
        if not _is_node_visible(node):
            continue

        match_string = " ".join(node.get('class') or []) + " " + (node.get('id') or '')
        if UNLIKELY_CANDIDATES.search(match_string) and not MAYBE_CANDIDATE.search(match_string):
            continue

        if node.name == 'p' and node.find_parent('li') is not None:
            continue

        text_length = len(node.get_text().strip())
        if text_length < min_content_length:
            continue

        score += math.sqrt(text_length - min_content_length)
        if score > min_score:
            return True

    return False

def flesch_reading_ease(text: str) -> Optional[float]:
    """Flesch reading ease with vowel-count syllables; None if there are no words"""
    words = len(text.split())
    if words == 0:
        return None

    sentences = len(SENTENCE_DELIMITERS.split(text))
    syllables = sum(1 for char in text if char.lower() in VOWELS)

    return 206.835 - 1.015 * (words / sentences) - 84.6 * (syllables / words)

def calculate_readability(html: str, min_content_length: int = 140, min_score: float = 20.0) -> str:
    """Readability score of the main content, or "" when the page is not readable"""
    soup = BeautifulSoup(html, 'html.parser')
    if not is_probably_readable(soup, min_content_length, min_score):
        logger.info("Page is not readable, skipping readability score")
        return ""

    try:
        summary_html = Document(html).summary()
    except Exception as e:
        logger.warning(f"Readability extraction failed: {e}")
        return ""

    text = BeautifulSoup(summary_html, 'html.parser').get_text()
    return format_decimal(flesch_reading_ease(text))

class OnPageAnalyzer:
    """Derives structural SEO signals from fetched HTML"""

    def __init__(self, client, scraper_config=None):
        self.client = client
        self.config = scraper_config or config
        self.link_checker = LinkChecker(client)

    async def analyze(self, html: str, base_url: str) -> SEOSignals:
        """Analyze a page; failing sub-checks fall back to their defaults"""
        logger.info(f"Analyzing on-page SEO for {base_url}")
        soup = BeautifulSoup(html, 'html.parser')

        robots_txt, sitemap = await asyncio.gather(
            self.check_robots_txt(base_url),
            self.check_sitemap(base_url)
        )
        broken_links = await self.link_checker.count_broken(extract_links(soup), base_url)

        signals = SEOSignals(
            title=extract_title(soup),
            meta_description=safe_extract_attribute(
                soup.find('meta', attrs={'name': 'description'}), 'content'
            ),
            h1_count=len(soup.find_all('h1')),
            h2_count=len(soup.find_all('h2')),
            image_alt_tags=tuple(img.get('alt') for img in soup.find_all('img')),
            canonical_link=safe_extract_attribute(soup.find('link', rel='canonical'), 'href'),
            robots_txt=robots_txt,
            sitemap=sitemap,
            structured_data=check_structured_data(soup),
            broken_links=broken_links,
            keyword_density=calculate_keyword_density(html, self.config.target_keyword),
            readability=calculate_readability(
                html,
                self.config.readable_min_content_length,
                self.config.readable_min_score
            )
        )

        logger.info(
            f"On-page analysis done: {signals.h1_count} H1 tags, "
            f"{signals.broken_links} broken links, readability '{signals.readability}'"
        )
        return signals

    async def check_robots_txt(self, base_url: str) -> bool:
        """True if {base_url}/robots.txt answers HTTP 200"""
        return await self._is_present(f"{base_url.rstrip('/')}/robots.txt")

    async def check_sitemap(self, base_url: str) -> bool:
        """True if {base_url}/sitemap.xml answers HTTP 200"""
        return await self._is_present(f"{base_url.rstrip('/')}/sitemap.xml")

    async def _is_present(self, url: str) -> bool:
        status = await self.client.probe(url)
        return status == 200
