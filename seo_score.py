"""
Overall SEO score calculation
"""
from typing import Optional

from models import SEOSignals
from utils import round_half_up

CHECK_POINTS = 20

def calculate_on_page_score(seo_data: SEOSignals) -> int:
    """Score the on-page checklist, 20 points per satisfied item (0-100)"""
    checks = [
        bool(seo_data.title),
        bool(seo_data.meta_description),
        seo_data.h1_count == 1,
        bool(seo_data.canonical_link),
        all(alt for alt in seo_data.image_alt_tags),
    ]
    return CHECK_POINTS * sum(checks)

def generate_seo_score(seo_category_score: Optional[float], seo_data: SEOSignals) -> int:
    """Average the Lighthouse SEO category with the on-page checklist.

    A missing Lighthouse SEO score counts as 0 rather than being left out of
    the average.
    """
    lighthouse_score = (seo_category_score or 0.0) * 100
    on_page_score = calculate_on_page_score(seo_data)
    return round_half_up((lighthouse_score + on_page_score) / 2)
