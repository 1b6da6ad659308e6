"""Keywords router: keyword index and per-keyword quote lists."""

from __future__ import annotations


from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from backend.api.deps import get_quote_source, now_ms
from backend.api.models import (
    ErrorResponse,
    KeywordOut,
    KeywordQuotesResponse,
    KeywordsResponse,
    QuoteOut,
)
from backend.engine.fallback import FALLBACK_SOURCE
from backend.engine.quote_source import QuoteSource

router = APIRouter(prefix="/api", tags=["keywords"])


def _missing_keyword() -> JSONResponse:
    body = ErrorResponse(error="keyword is required", timestamp=now_ms())
    return JSONResponse(status_code=400, content=body.model_dump())


@router.get("/keywords", response_model=KeywordsResponse, response_model_exclude_none=True)
async def list_keywords(source: QuoteSource = Depends(get_quote_source)):
    """All known keywords; cached for 24h, fixed list when upstream fails."""
    keywords, origin = await source.get_keywords()
    return KeywordsResponse(
        success=origin != FALLBACK_SOURCE,
        data=[KeywordOut.from_record(k) for k in keywords],
        source=origin,
        timestamp=now_ms(),
    )


@router.get("/keyword", responses={400: {"model": ErrorResponse}})
async def keyword_required():
    return _missing_keyword()


@router.get(
    "/keyword/{keyword}",
    response_model=KeywordQuotesResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
async def quotes_for_keyword(
    keyword: str,
    limit: int = Query(50, ge=1, le=50, description="Maximum number of quotes"),
    source: QuoteSource = Depends(get_quote_source),
):
    """Up to 50 quotes for one keyword, static quotes on any upstream failure."""
    keyword = keyword.strip()
    if not keyword:
        return _missing_keyword()

    resolution = await source.get_quotes_for_keyword(keyword, limit=limit)
    return KeywordQuotesResponse(
        success=not resolution.fallback_used,
        data=[QuoteOut.from_record(q) for q in resolution.data],
        keyword=keyword,
        source=resolution.source,
        count=len(resolution.data),
        timestamp=now_ms(),
        error=resolution.last_error if resolution.fallback_used else None,
    )
