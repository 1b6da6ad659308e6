"""HTML extraction for the provider's keyword index and keyword pages.

Both extractors are pure functions over raw markup, queried as a parsed
tree. They are deliberately narrow: anything that does not match the
expected selectors is skipped, and a page with no matches yields an empty
list rather than an error. Callers treat an empty list exactly like a
failed fetch.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote, unquote

from bs4 import BeautifulSoup

from backend.engine.records import UNKNOWN_AUTHOR, Keyword, Quote

MAX_QUOTES_PER_PAGE = 50

KEYWORD_HREF_PREFIX = "../keywords/"
KEYWORD_LINK_SELECTOR = f'a.stretched-link[href^="{KEYWORD_HREF_PREFIX}"]'
QUOTE_BLOCK_SELECTOR = "blockquote.blockquote"

# "text" — author
_ATTRIBUTION_RE = re.compile(r'^"(.+)"\s*—\s*(.+)$', re.DOTALL)

HTML_ENTITIES: Dict[str, str] = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&ldquo;": '"',
    "&rdquo;": '"',
    "&lsquo;": "'",
    "&rsquo;": "'",
    "&mdash;": "—",
    "&ndash;": "–",
}

# The parser already resolves entities; curly quotes are folded to straight ones.
_TYPOGRAPHIC_QUOTES = str.maketrans({"“": '"', "”": '"', "‘": "'", "’": "'"})

_ENTITY_RE = re.compile(r"&[a-zA-Z0-9#]+;")


def decode_entities(text: str) -> str:
    """Decode the fixed set of named entities in a single pass; others are left as-is."""
    return _ENTITY_RE.sub(lambda m: HTML_ENTITIES.get(m.group(0), m.group(0)), text)


def keyword_url(base_url: str, name: str) -> str:
    return f"{base_url.rstrip('/')}/keywords/{name}"


def _soup(html: Optional[str]) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _keyword_name(href: str) -> str:
    name = href[len(KEYWORD_HREF_PREFIX):]
    name = name.split("?", 1)[0].split("#", 1)[0].split("/", 1)[0]
    return unquote(name).strip()


def extract_keywords(html: Optional[str], base_url: str = "https://zenquotes.io") -> List[Keyword]:
    """Keyword records from the keyword index page, de-duplicated, first-seen order."""
    keywords: List[Keyword] = []
    seen = set()
    for link in _soup(html).select(KEYWORD_LINK_SELECTOR):
        name = _keyword_name(link.get("href", ""))
        if not name or name in seen:
            continue
        seen.add(name)
        keywords.append(Keyword(name=name, source_url=keyword_url(base_url, quote(name, safe=""))))
    return keywords


def block_text(raw: str) -> str:
    """Normalise a block's decoded text: straight quotes, single spaces."""
    return " ".join(raw.translate(_TYPOGRAPHIC_QUOTES).split())


def split_attribution(block: str) -> Tuple[str, str]:
    """Split a decoded block into (text, author).

    Blocks shaped like ``"text" — author`` lose the surrounding quotation
    marks; anything else becomes the text verbatim with an unknown author.
    """
    match = _ATTRIBUTION_RE.match(block)
    if match:
        return match.group(1).strip(), match.group(2).strip()
    return block, UNKNOWN_AUTHOR


def extract_quotes(
    html: Optional[str],
    keyword: str,
    limit: Optional[int] = None,
) -> List[Quote]:
    """Up to ``limit`` (never more than 50) quotes from a keyword page."""
    cap = MAX_QUOTES_PER_PAGE if limit is None else max(0, min(limit, MAX_QUOTES_PER_PAGE))
    quotes: List[Quote] = []
    if cap == 0:
        return quotes

    for node in _soup(html).select(QUOTE_BLOCK_SELECTOR):
        block = block_text(node.get_text())
        if not block:
            continue
        text, author = split_attribution(block)
        quotes.append(Quote(id=len(quotes) + 1, text=text, author=author, category=keyword))
        if len(quotes) >= cap:
            break
    return quotes
