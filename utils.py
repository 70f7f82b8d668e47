"""
Utility functions shared across the audit pipeline
"""
import math
import time
import logging
from typing import Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

def validate_url(url: str) -> bool:
    """Validate if a URL is an absolute http(s) URL"""
    try:
        result = urlparse(url)
        return result.scheme in ('http', 'https') and bool(result.netloc)
    except Exception:
        return False

def safe_extract_text(element, default: str = "") -> str:
    """Safely extract stripped text from BeautifulSoup element"""
    if element is None:
        return default
    return element.get_text().strip()

def safe_extract_attribute(element, attribute: str, default: str = "") -> str:
    """Safely extract attribute from BeautifulSoup element"""
    if element is None:
        return default
    value = element.get(attribute)
    if isinstance(value, list):
        value = " ".join(value)
    return value if value else default

def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values"""
    return int(math.floor(value + 0.5))

def format_decimal(value: Optional[float]) -> str:
    """Format a number with two fractional digits, empty string for None"""
    if value is None:
        return ""
    return f"{value:.2f}"

# Performance monitoring utilities
class PerformanceMonitor:
    """Monitor and log stage durations"""

    def __init__(self):
        self.metrics = {}

    def start_timer(self, operation: str):
        """Start timing an operation"""
        self.metrics[operation] = {'start': time.monotonic()}

    def end_timer(self, operation: str) -> float:
        """End timing and log results"""
        entry = self.metrics.get(operation)
        if not entry or 'start' not in entry:
            return 0
        duration = time.monotonic() - entry['start']
        entry['duration'] = duration
        logger.info(f"Operation '{operation}' completed in {duration:.2f} seconds")
        return duration

    def get_metrics(self) -> dict:
        """Get all recorded metrics"""
        return {name: dict(values) for name, values in self.metrics.items()}
