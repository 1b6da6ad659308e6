"""Shared dependencies for the quotes API."""

from __future__ import annotations

import time
from datetime import date
from typing import Optional

import httpx
from fastapi import Depends, Request, Response

from backend.engine.config import ServiceConfig, load_config
from backend.engine.provider import ZenQuotesClient
from backend.engine.quote_source import QuoteSource
from backend.engine.selection_memory import LastSelectionMemory
from backend.engine.ttl_store import CookieStore, JsonFileStore


def get_config() -> ServiceConfig:
    """Read configuration from the environment on every request."""
    return load_config()


def get_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Upstream transport; None means real network. Tests override this."""
    return None


def get_quote_source(
    config: ServiceConfig = Depends(get_config),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_transport),
) -> QuoteSource:
    return QuoteSource(
        config,
        ZenQuotesClient(config, transport=transport),
        JsonFileStore(config.cache_path),
    )


def get_selection_memory(
    request: Request,
    response: Response,
    config: ServiceConfig = Depends(get_config),
) -> LastSelectionMemory:
    """Cookie-backed memory; writes land on the route's response."""
    return LastSelectionMemory(
        CookieStore(request.cookies, response), ttl_seconds=config.selection_ttl
    )


def get_today() -> date:
    return date.today()


def now_ms() -> int:
    return int(time.time() * 1000)
