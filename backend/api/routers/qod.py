"""Quote-of-the-day router: plain text, cached in cookies for the rest of the day."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from backend.api.deps import get_config, get_quote_source, get_today
from backend.engine.config import ServiceConfig
from backend.engine.fallback import FALLBACK_SOURCE
from backend.engine.quote_source import QuoteSource
from backend.engine.ttl_store import CookieStore

router = APIRouter(tags=["qod"])

QOD_CACHE_COOKIE = "qod_cache"
QOD_DATE_COOKIE = "qod_date"


def _plain(text: str, max_age: int) -> PlainTextResponse:
    return PlainTextResponse(
        text,
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": f"public, max-age={max_age}"},
    )


async def _quote_of_the_day(
    request: Request,
    source: QuoteSource,
    config: ServiceConfig,
    today: date,
) -> PlainTextResponse:
    reader = CookieStore(request.cookies)
    cached = reader.get(QOD_CACHE_COOKIE)
    if cached and reader.get(QOD_DATE_COOKIE) == today.isoformat():
        return _plain(cached, 3600)

    line, origin = await source.get_quote_of_the_day()
    if origin == FALLBACK_SOURCE:
        return _plain(line, 300)

    response = _plain(line, 3600)
    writer = CookieStore(request.cookies, response)
    writer.set(QOD_CACHE_COOKIE, line, config.qod_ttl)
    writer.set(QOD_DATE_COOKIE, today.isoformat(), config.qod_ttl)
    return response


@router.get("/api/qod", response_class=PlainTextResponse)
async def get_qod(
    request: Request,
    source: QuoteSource = Depends(get_quote_source),
    config: ServiceConfig = Depends(get_config),
    today: date = Depends(get_today),
):
    """``"<text>" - <author>``, identical for every call on the same calendar day."""
    return await _quote_of_the_day(request, source, config, today)


@router.get("/qod", response_class=PlainTextResponse, include_in_schema=False)
async def get_qod_alias(
    request: Request,
    source: QuoteSource = Depends(get_quote_source),
    config: ServiceConfig = Depends(get_config),
    today: date = Depends(get_today),
):
    return await _quote_of_the_day(request, source, config, today)
