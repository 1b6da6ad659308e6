"""Quote source adapter: picks the official API or the scraper and wraps both in the fallback chain."""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Tuple

from backend.engine.config import ServiceConfig
from backend.engine.fallback import (
    Resolution,
    Strategy,
    default_qod,
    fallback_keywords,
    fallback_qod,
    fallback_quotes,
    pad_with_static,
    resolve,
)
from backend.engine.keyword_cache import KeywordCache
from backend.engine.provider import ZenQuotesClient
from backend.engine.records import Keyword, Quote, renumber
from backend.engine.ttl_store import TTLStore

logger = logging.getLogger(__name__)

API_SOURCE = "api"
SCRAPE_SOURCE = "scrape"
DEFAULT_SOURCE = "default"


def format_qod(quote: Quote) -> str:
    return f'"{quote.text}" - {quote.author}'


def select_keywords(
    names: Sequence[str],
    count: int,
    preferred: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Pick ``count`` keywords: ``preferred`` first when it is still known, the rest shuffled."""
    rng = rng or random.Random()
    unique: List[str] = []
    for name in names:
        if name not in unique:
            unique.append(name)

    selected: List[str] = []
    if preferred and preferred in unique:
        selected.append(preferred)

    rest = [n for n in unique if n not in selected]
    rng.shuffle(rest)
    selected.extend(rest)
    return selected[: max(0, count)]


class QuoteSource:
    """Every public coroutine returns well-shaped, non-empty data; upstream errors never escape."""

    def __init__(
        self,
        config: ServiceConfig,
        client: ZenQuotesClient,
        cache_store: TTLStore,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.client = client
        self.rng = rng or random.Random()
        self.keyword_cache = KeywordCache(
            cache_store, self._load_keywords, ttl_seconds=config.keyword_cache_ttl
        )

    # -- keywords --------------------------------------------------------- #

    def _keyword_strategies(self) -> List[Strategy]:
        if self.config.has_api_key:
            return [Strategy(API_SOURCE, self.client.api_keywords)]
        return [Strategy(SCRAPE_SOURCE, self.client.fetch_keywords_page)]

    async def _load_keywords(self) -> Tuple[List[Keyword], str, bool]:
        resolution = await resolve(
            self._keyword_strategies(),
            lambda: fallback_keywords(self.config.base_url),
            label="keywords",
        )
        return resolution.data, resolution.source, not resolution.fallback_used

    async def get_keywords(self) -> Tuple[List[Keyword], str]:
        """(keywords, source). Live results are cached for 24h; fallback lists are not."""
        return await self.keyword_cache.get()

    # -- quotes per keyword ----------------------------------------------- #

    def _quote_strategies(self, keyword: str, limit: int) -> List[Strategy]:
        if self.config.has_api_key:
            async def fetch_api() -> List[Quote]:
                return (await self.client.api_quotes(keyword))[:limit]
            return [Strategy(API_SOURCE, fetch_api)]

        async def fetch_page() -> List[Quote]:
            return await self.client.fetch_keyword_page(keyword, limit=limit)
        return [Strategy(SCRAPE_SOURCE, fetch_page)]

    async def get_quotes_for_keyword(self, keyword: str, limit: Optional[int] = None) -> Resolution:
        """Up to ``limit`` quotes for ``keyword``, first-N, ids 1..n."""
        limit = max(1, min(limit or self.config.quote_limit, self.config.quote_limit))
        fallback_limit = min(limit, self.config.display_limit)
        resolution = await resolve(
            self._quote_strategies(keyword, limit),
            lambda: fallback_quotes(keyword, fallback_limit),
            label=f"quotes[{keyword}]",
        )
        resolution.data = renumber(resolution.data[:limit])
        return resolution

    # -- across keywords -------------------------------------------------- #

    async def _pick_keywords(self, count: int, preferred: Optional[str]) -> List[str]:
        keywords, _ = await self.get_keywords()
        return select_keywords([k.name for k in keywords], count, preferred, self.rng)

    async def get_random_quotes(
        self,
        count: Optional[int] = None,
        preferred: Optional[str] = None,
    ) -> List[Quote]:
        """One quote from each of ``count`` selected keywords, padded with static quotes."""
        count = count or self.config.random_keyword_count
        try:
            names = await self._pick_keywords(count, preferred)
        except Exception as e:
            logger.warning("random quotes: keyword selection failed: %s", e)
            names = []

        picked: List[Quote] = []
        for name in names:
            resolution = await self.get_quotes_for_keyword(name, limit=1)
            if resolution.fallback_used:
                continue
            picked.extend(resolution.data[:1])

        if len(picked) < count:
            logger.info("random quotes: padding %d live quotes with static ones", len(picked))
        return pad_with_static(picked, count)

    async def get_initial_groups(
        self,
        count: Optional[int] = None,
        preferred: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Landing page payload: ``count`` keywords, each with its quotes and source."""
        count = count or self.config.random_keyword_count
        try:
            names = await self._pick_keywords(count, preferred)
        except Exception as e:
            logger.warning("initial groups: keyword selection failed: %s", e)
            names = []

        if not names:
            names = [k.name for k in fallback_keywords(self.config.base_url)][:count]

        groups = []
        for name in names:
            resolution = await self.get_quotes_for_keyword(name)
            groups.append({
                "keyword": name,
                "quotes": resolution.data,
                "source": resolution.source,
            })
        return groups

    async def search_quotes(self, keyword: Optional[str] = None) -> List[Quote]:
        """Backs ``GET /api/quotes``: first ``display_limit`` for a keyword, else random picks."""
        if keyword:
            resolution = await self.get_quotes_for_keyword(keyword, limit=self.config.display_limit)
            return resolution.data
        return await self.get_random_quotes()

    # -- quote of the day ------------------------------------------------- #

    async def get_quote_of_the_day(self) -> Tuple[str, str]:
        """(plain-text line, source)."""
        if not self.config.has_api_key:
            logger.info("No API key configured, serving default quote of the day")
            return default_qod(), DEFAULT_SOURCE

        async def fetch_today() -> List[str]:
            return [format_qod(await self.client.api_today())]

        resolution = await resolve(
            [Strategy(API_SOURCE, fetch_today)],
            lambda: [fallback_qod()],
            label="qod",
        )
        return resolution.data[0], resolution.source

