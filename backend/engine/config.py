"""Service configuration: provider endpoints, timeouts, cache locations."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

REPO_ROOT = Path(__file__).resolve().parents[2]

API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"
DEFAULT_BASE_URL = "https://zenquotes.io"
DEFAULT_CACHE_PATH = REPO_ROOT / "backend" / "data" / "keyword_cache.json"

DAY_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class ServiceConfig:
    """Immutable settings handed to the provider client and quote source."""

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    keywords_timeout: float = 10.0
    keyword_page_timeout: float = 15.0
    quotes_timeout: float = 10.0
    qod_timeout: float = 10.0
    user_agent: str = "Inspirational-Quotes/1.0"
    cache_path: Path = field(default=DEFAULT_CACHE_PATH)
    keyword_cache_ttl: int = DAY_SECONDS
    selection_ttl: int = 30 * DAY_SECONDS
    qod_ttl: int = DAY_SECONDS
    quote_limit: int = 50
    display_limit: int = 10
    random_keyword_count: int = 3

    @property
    def has_api_key(self) -> bool:
        """True when a real credential is configured (not blank, not the placeholder)."""
        key = (self.api_key or "").strip()
        return bool(key) and key != API_KEY_PLACEHOLDER


def load_config(environ: Optional[Mapping[str, str]] = None) -> ServiceConfig:
    """Build a ServiceConfig from environment variables."""
    env = os.environ if environ is None else environ
    cache_path = env.get("QUOTES_CACHE_PATH")
    return ServiceConfig(
        api_key=env.get("ZENQUOTES_API_KEY") or None,
        base_url=(env.get("ZENQUOTES_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        cache_path=Path(cache_path) if cache_path else DEFAULT_CACHE_PATH,
    )
