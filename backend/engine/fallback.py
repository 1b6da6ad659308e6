"""Fallback chain: ordered upstream strategies ending in a static, never-empty tier.

Per request the chain moves PENDING -> SUCCESS | SOURCE_ERROR; every
SOURCE_ERROR advances to the next strategy, and when none is left the
static tier answers (FALLBACK_APPLIED). RESOLVED is the only state callers
see. Errors are logged, never raised.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from backend.engine.html_extractor import keyword_url
from backend.engine.records import Keyword, Quote, renumber

logger = logging.getLogger(__name__)

_CATALOG_PATH = os.path.join(
    os.path.dirname(__file__), "..", "catalog", "quotes", "v1", "fallback_catalog_v1.json"
)

_cached_catalog: Optional[Dict[str, Any]] = None

FALLBACK_SOURCE = "fallback"
DEFAULT_FALLBACK_LIMIT = 10


class RequestState(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    SOURCE_ERROR = "SOURCE_ERROR"
    FALLBACK_APPLIED = "FALLBACK_APPLIED"
    RESOLVED = "RESOLVED"


@dataclass(frozen=True)
class Strategy:
    """One upstream tier. ``fetch`` returns a list, or None / [] for "nothing usable"."""

    name: str
    fetch: Callable[[], Awaitable[Optional[List[Any]]]]


@dataclass
class Resolution:
    data: List[Any]
    source: str
    errors: List[str] = field(default_factory=list)
    states: List[RequestState] = field(default_factory=list)

    @property
    def fallback_used(self) -> bool:
        return RequestState.FALLBACK_APPLIED in self.states

    @property
    def last_error(self) -> Optional[str]:
        return self.errors[-1] if self.errors else None


async def resolve(
    strategies: Sequence[Strategy],
    fallback: Callable[[], List[Any]],
    label: str = "request",
) -> Resolution:
    """Try each strategy once, in order; the first non-empty result wins."""
    states = [RequestState.PENDING]
    errors: List[str] = []

    for strategy in strategies:
        try:
            result = await strategy.fetch()
        except Exception as e:
            states.append(RequestState.SOURCE_ERROR)
            errors.append(f"{strategy.name}: {e}")
            logger.warning("%s: source %r failed: %s", label, strategy.name, e)
            continue

        if not result:
            states.append(RequestState.SOURCE_ERROR)
            errors.append(f"{strategy.name}: empty result")
            logger.warning("%s: source %r returned no records", label, strategy.name)
            continue

        states.extend([RequestState.SUCCESS, RequestState.RESOLVED])
        return Resolution(data=list(result), source=strategy.name, errors=errors, states=states)

    data = fallback()
    states.extend([RequestState.FALLBACK_APPLIED, RequestState.RESOLVED])
    logger.info("%s: serving %d static fallback records", label, len(data))
    return Resolution(data=data, source=FALLBACK_SOURCE, errors=errors, states=states)


# --------------------------------------------------------------------------- #
# Static dataset
# --------------------------------------------------------------------------- #

def _load_catalog() -> Dict[str, Any]:
    """Load and cache the static fallback catalog."""
    global _cached_catalog
    if _cached_catalog is not None:
        return _cached_catalog

    path = os.path.normpath(_CATALOG_PATH)
    with open(path, "r", encoding="utf-8") as f:
        _cached_catalog = json.load(f)
    return _cached_catalog


def static_quotes() -> List[Quote]:
    return [Quote.from_dict(q) for q in _load_catalog().get("quotes", [])]


def fallback_keywords(base_url: str = "https://zenquotes.io") -> List[Keyword]:
    return [
        Keyword(name=name, source_url=keyword_url(base_url, name))
        for name in _load_catalog().get("keywords", [])
    ]


def default_qod() -> str:
    """Quote of the day served when no credential is configured."""
    return _load_catalog()["default_qod"]


def fallback_qod() -> str:
    """Quote of the day served when the upstream call failed."""
    return _load_catalog()["fallback_qod"]


def fallback_quotes(keyword: Optional[str], limit: int = DEFAULT_FALLBACK_LIMIT) -> List[Quote]:
    """Static quotes for ``keyword``.

    Entries whose category, text or author mention the keyword come first;
    with no match the first ``limit`` entries are relabelled with the keyword.
    """
    quotes = static_quotes()
    limit = max(1, limit)
    if not keyword:
        return quotes[:limit]

    needle = keyword.lower()
    matches = [
        q for q in quotes
        if needle in q.category.lower()
        or needle in q.text.lower()
        or needle in q.author.lower()
    ]
    if matches:
        return matches[:limit]
    return [q.with_category(keyword) for q in quotes[:limit]]


def pad_with_static(quotes: List[Quote], count: int) -> List[Quote]:
    """Top ``quotes`` up to ``count`` with static entries whose text is not already present."""
    result = list(quotes[:count])
    seen = {q.text for q in result}
    for q in static_quotes():
        if len(result) >= count:
            break
        if q.text not in seen:
            result.append(q)
            seen.add(q.text)
    return renumber(result)
