"""
Data models for the Site Auditor
"""
import json
from dataclasses import dataclass, asdict
from types import MappingProxyType
from typing import Dict, Any, Mapping, Optional, Tuple

# Lighthouse categories requested for every audit
CATEGORIES = ("performance", "seo", "accessibility", "best-practices")

# Category name -> score in [0, 1], or None when Lighthouse returned no data
CategoryScores = Dict[str, Optional[float]]

@dataclass(frozen=True)
class SEOSignals:
    """Structural on-page SEO signals for one page"""
    title: str
    meta_description: str
    h1_count: int
    h2_count: int
    image_alt_tags: Tuple[Optional[str], ...]
    canonical_link: str
    robots_txt: bool
    sitemap: bool
    structured_data: bool
    broken_links: int
    keyword_density: str
    readability: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['image_alt_tags'] = list(self.image_alt_tags)
        return data

@dataclass(frozen=True)
class AuditResult:
    """Final outcome of a successful audit"""
    url: str
    categories: Mapping[str, Optional[float]]
    seo_data: SEOSignals
    seo_score: int

    def __post_init__(self):
        # Read-only view over a private copy of the scores
        object.__setattr__(self, 'categories', MappingProxyType(dict(self.categories)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'categories': dict(self.categories),
            'seo_data': self.seo_data.to_dict(),
            'seo_score': self.seo_score
        }

@dataclass(frozen=True)
class AuditEvent:
    """A single message on the progress channel"""
    kind: str
    message: str = ""
    result: Optional[AuditResult] = None

    PROGRESS = "progress"
    RESULTS = "results"
    ERROR = "error"

    @classmethod
    def progress(cls, message: str) -> "AuditEvent":
        return cls(kind=cls.PROGRESS, message=message)

    @classmethod
    def results(cls, result: AuditResult) -> "AuditEvent":
        return cls(kind=cls.RESULTS, result=result)

    @classmethod
    def error(cls, message: str) -> "AuditEvent":
        return cls(kind=cls.ERROR, message=message)

    @property
    def is_terminal(self) -> bool:
        return self.kind in (self.RESULTS, self.ERROR)

    def to_dict(self) -> Dict[str, Any]:
        if self.kind == self.RESULTS:
            return {'results': self.result.to_dict()}
        return {self.kind: self.message}

    def to_sse(self) -> str:
        """Encode as one Server-Sent Events message"""
        return f"data: {json.dumps(self.to_dict())}\n\n"
