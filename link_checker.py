"""
Broken link detection for a single page
"""
import logging
from typing import Iterable, List
from urllib.parse import urljoin

logger = logging.getLogger(__name__)

def extract_links(soup) -> List[str]:
    """Anchor hrefs in document order, skipping empty and in-page fragment links"""
    links = []
    for anchor in soup.find_all('a', href=True):
        href = anchor['href']
        if href and not href.startswith('#'):
            links.append(href)
    return links

class LinkChecker:
    """Probes links one at a time and counts the ones that are not reachable"""

    def __init__(self, client):
        self.client = client

    async def count_broken(self, links: Iterable[str], base_url: str) -> int:
        """Count links that fail or answer with anything other than HTTP 200.

        Links are resolved against ``base_url`` and checked sequentially. A link
        that appears several times is probed and counted once per occurrence.
        """
        broken = 0
        checked = 0
        for link in links:
            absolute_url = urljoin(base_url, link)
            status = await self.client.probe(absolute_url)
            checked += 1
            if status != 200:
                logger.debug(f"Broken link {absolute_url} (status {status})")
                broken += 1

        logger.info(f"Checked {checked} links, {broken} broken")
        return broken
