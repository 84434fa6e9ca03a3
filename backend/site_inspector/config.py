"""
Application configuration using environment variables.
"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Probe timeouts are bounded to this window (seconds)
MIN_PROBE_TIMEOUT = 5
MAX_PROBE_TIMEOUT = 10


def _clamp_timeout(value: str) -> int:
    return max(MIN_PROBE_TIMEOUT, min(MAX_PROBE_TIMEOUT, int(value)))


@dataclass
class Settings:
    """Application settings."""
    APP_NAME: str = os.getenv("APP_NAME", "Site Inspector")

    # Host environment snapshot exported by the audited site
    SITE_SNAPSHOT_PATH: str = os.getenv("SITE_SNAPSHOT_PATH", "site_snapshot.json")

    # Probe settings
    PROBE_TIMEOUT: int = _clamp_timeout(os.getenv("PROBE_TIMEOUT", "10"))
    PROBE_USER_AGENT: str = os.getenv(
        "PROBE_USER_AGENT", "Mozilla/5.0 (compatible; SiteInspector/1.0)"
    )
    PROBE_CONCURRENCY: bool = os.getenv("PROBE_CONCURRENCY", "false").lower() == "true"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
