"""Time-boxed cache of the keyword list."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from backend.engine.config import DAY_SECONDS
from backend.engine.records import Keyword
from backend.engine.ttl_store import TTLStore

logger = logging.getLogger(__name__)

CACHE_KEY = "zenquotes_keywords"

# Loader returns the keyword list, the name of the source that produced it,
# and whether that result may be stored.
KeywordLoader = Callable[[], Awaitable[Tuple[List[Keyword], str, bool]]]


class KeywordCache:
    """Serve the keyword list from a TTL store, reloading once it is 24h old.

    No locking: two concurrent misses both reload and the last write wins.
    """

    def __init__(
        self,
        store: TTLStore,
        loader: KeywordLoader,
        ttl_seconds: int = DAY_SECONDS,
        key: str = CACHE_KEY,
    ) -> None:
        self._store = store
        self._loader = loader
        self._ttl = ttl_seconds
        self._key = key

    def peek(self) -> Optional[Tuple[List[Keyword], str]]:
        """Cached (keywords, source), or None when absent, expired or unreadable."""
        try:
            entry = self._store.get(self._key)
        except Exception as e:
            logger.warning("Failed to read keyword cache: %s", e)
            return None
        if not isinstance(entry, dict):
            return None
        raw: Any = entry.get("data")
        if not isinstance(raw, list) or not raw:
            return None
        try:
            keywords = [Keyword.from_dict(item) for item in raw]
        except (KeyError, TypeError, AttributeError):
            logger.warning("Discarding malformed keyword cache entry")
            return None
        return keywords, str(entry.get("source") or "cache")

    async def get(self) -> Tuple[List[Keyword], str]:
        # Store access may hit the filesystem; keep it off the event loop.
        cached = await asyncio.to_thread(self.peek)
        if cached is not None:
            logger.debug("Serving %d keywords from cache", len(cached[0]))
            return cached

        keywords, source, cacheable = await self._loader()
        if cacheable and keywords:
            await asyncio.to_thread(self.put, keywords, source)
        return keywords, source

    def put(self, keywords: List[Keyword], source: str) -> None:
        """Best-effort write; a failing store never loses the caller's data."""
        try:
            self._store.set(
                self._key,
                {"data": [k.to_dict() for k in keywords], "source": source},
                self._ttl,
            )
        except Exception as e:
            logger.warning("Failed to write keyword cache: %s", e)

    def clear(self) -> None:
        self._store.delete(self._key)
