"""HTTP client for the quotes provider: official JSON API and public HTML pages."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional
from urllib.parse import quote as url_quote

import httpx

from backend.engine.config import ServiceConfig
from backend.engine.errors import EmptyResultError, ShapeError, TransportError
from backend.engine.html_extractor import decode_entities, extract_keywords, extract_quotes, keyword_url
from backend.engine.records import UNKNOWN_AUTHOR, Keyword, Quote

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "inspirational"
BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


def normalize_api_quotes(payload: Any, category: str) -> List[Quote]:
    """Map the official ``[{q, a, ...}]`` payload to Quote records numbered 1..n."""
    if not isinstance(payload, list):
        raise ShapeError(f"expected a JSON array, got {type(payload).__name__}")
    quotes: List[Quote] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        text = decode_entities(str(item.get("q") or item.get("text") or "")).strip()
        if not text:
            continue
        author = str(item.get("a") or item.get("author") or "").strip() or UNKNOWN_AUTHOR
        quotes.append(Quote(id=len(quotes) + 1, text=text, author=author, category=category))
    return quotes


def normalize_api_keywords(payload: Any, base_url: str) -> List[Keyword]:
    """Accept either plain strings or objects with a ``name``/``keyword`` field."""
    if not isinstance(payload, list):
        raise ShapeError(f"expected a JSON array, got {type(payload).__name__}")
    keywords: List[Keyword] = []
    seen = set()
    for item in payload:
        if isinstance(item, dict):
            name = item.get("name") or item.get("keyword")
        else:
            name = item
        if not isinstance(name, str) or not name.strip():
            continue
        name = name.strip()
        if name in seen:
            continue
        seen.add(name)
        keywords.append(Keyword(name=name, source_url=keyword_url(base_url, name)))
    return keywords


class ZenQuotesClient:
    """One attempt per call, bounded by the endpoint's timeout.

    Raises only ProviderError subclasses. ``transport`` lets tests substitute
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: ServiceConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self._transport = transport

    # -- low level -------------------------------------------------------- #

    async def _request(self, url: str, timeout: float, accept: str, user_agent: str) -> httpx.Response:
        headers = {"Accept": accept, "User-Agent": user_agent}
        async with httpx.AsyncClient(
            timeout=timeout,
            headers=headers,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            return await client.get(url)

    async def _get(self, url: str, timeout: float, accept: str, user_agent: str) -> httpx.Response:
        try:
            response = await asyncio.wait_for(
                self._request(url, timeout, accept, user_agent), timeout=timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise TransportError(f"timed out after {timeout}s: {self._redact(url)}")
        except httpx.HTTPError as e:
            raise TransportError(f"request failed: {self._redact(url)}: {e}")

        if not response.is_success:
            raise TransportError(
                f"HTTP {response.status_code} from {self._redact(url)}",
                status_code=response.status_code,
            )
        return response

    async def _get_json(self, url: str, timeout: float) -> Any:
        response = await self._get(url, timeout, "application/json", self.config.user_agent)
        try:
            return response.json()
        except ValueError as e:
            raise ShapeError(f"invalid JSON from {self._redact(url)}: {e}")

    async def _get_html(self, url: str, timeout: float) -> str:
        response = await self._get(url, timeout, "text/html", BROWSER_UA)
        return response.text

    def _redact(self, url: str) -> str:
        key = self.config.api_key
        return url.replace(key, "***") if key else url

    def _api_url(self, endpoint: str) -> str:
        return f"{self.config.base_url}/api/{endpoint}/{self.config.api_key}"

    # -- HTML pages ------------------------------------------------------- #

    async def fetch_keywords_page(self) -> List[Keyword]:
        html = await self._get_html(f"{self.config.base_url}/keywords", self.config.keywords_timeout)
        keywords = extract_keywords(html, self.config.base_url)
        if not keywords:
            raise EmptyResultError("keyword index contained no keyword links")
        logger.info("Scraped %d keywords", len(keywords))
        return keywords

    async def fetch_keyword_page(self, keyword: str, limit: Optional[int] = None) -> List[Quote]:
        url = keyword_url(self.config.base_url, url_quote(keyword, safe=""))
        html = await self._get_html(url, self.config.keyword_page_timeout)
        quotes = extract_quotes(html, keyword, limit=limit)
        if not quotes:
            raise EmptyResultError(f"keyword page for {keyword!r} contained no quotes")
        logger.info("Scraped %d quotes for %r", len(quotes), keyword)
        return quotes

    # -- official API ----------------------------------------------------- #

    async def api_keywords(self) -> List[Keyword]:
        payload = await self._get_json(self._api_url("keywords"), self.config.keywords_timeout)
        keywords = normalize_api_keywords(payload, self.config.base_url)
        if not keywords:
            raise EmptyResultError("official API returned no keywords")
        return keywords

    async def api_quotes(self, keyword: Optional[str] = None) -> List[Quote]:
        url = self._api_url("quotes")
        if keyword:
            url = f"{url}?keyword={url_quote(keyword, safe='')}"
        timeout = self.config.keyword_page_timeout if keyword else self.config.quotes_timeout
        payload = await self._get_json(url, timeout)
        quotes = normalize_api_quotes(payload, keyword or DEFAULT_CATEGORY)
        if not quotes:
            raise EmptyResultError("official API returned no quotes")
        return quotes

    async def api_today(self) -> Quote:
        payload = await self._get_json(self._api_url("today"), self.config.qod_timeout)
        quotes = normalize_api_quotes(payload, "daily")
        if not quotes:
            raise EmptyResultError("official API returned no quote of the day")
        return quotes[0]
