"""
Configuration file for the Site Auditor
"""
import os
from dataclasses import dataclass, fields
from typing import List, Optional

@dataclass
class AuditConfig:
    """Configuration settings for a single-page audit"""

    # Browser settings
    headless: bool = True
    chrome_args: List[str] = None
    lighthouse_path: str = "lighthouse"

    # Timeouts (seconds)
    fetch_timeout: int = 15
    probe_timeout: int = 10
    lighthouse_timeout: int = 120
    audit_timeout: Optional[int] = None

    # On-page analysis
    target_keyword: str = "example"
    readable_min_content_length: int = 140
    readable_min_score: float = 20.0

    # User agents for outgoing requests
    user_agents: List[str] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(levelname)s - %(message)s"
    log_dir: str = "logs"

    def __post_init__(self):
        if self.chrome_args is None:
            self.chrome_args = [
                '--no-sandbox',
                '--disable-extensions',
                '--disable-dev-shm-usage',
                '--disable-background-networking',
                '--disable-default-apps',
                '--disable-sync',
                '--mute-audio',
                '--no-first-run'
            ]

        if self.user_agents is None:
            self.user_agents = [
                "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
                "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
                "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
            ]

    @classmethod
    def from_env(cls, prefix: str = "SITE_AUDIT_") -> "AuditConfig":
        """Build a config, overriding scalar fields from environment variables.

        ``SITE_AUDIT_FETCH_TIMEOUT=30`` sets ``fetch_timeout`` and so on. List
        fields are not read from the environment.
        """
        overrides = {}
        for field in fields(cls):
            raw = os.getenv(prefix + field.name.upper())
            if raw is None or field.name in ("chrome_args", "user_agents"):
                continue

            if field.name == "audit_timeout":
                overrides[field.name] = int(raw) if raw else None
            elif field.type is bool:
                overrides[field.name] = raw.lower() in ("1", "true", "yes", "on")
            elif field.type is int:
                overrides[field.name] = int(raw)
            elif field.type is float:
                overrides[field.name] = float(raw)
            else:
                overrides[field.name] = raw

        return cls(**overrides)

# Default configuration instance
config = AuditConfig.from_env()
